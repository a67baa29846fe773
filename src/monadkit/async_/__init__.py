"""Async-aware Result: AsyncResult."""

from monadkit.async_.result import AsyncResult

__all__ = ['AsyncResult']
