"""monadkit: Result and AsyncResult for explicit, non-throwing error handling.

Result is a two-variant value (Ok | Fail) with a closed set of combinators.
AsyncResult carries the same algebra across awaits and push streams while
guaranteeing it never raises: every exception crossing a boundary becomes a
Fail.

Flat imports (preferred):
    from monadkit import Result, Ok, Fail, ok, fail, AsyncResult
    from monadkit import Maybe, Some, Nothing, maybe
    from monadkit import safe, safe_async

Submodule imports (for organization):
    from monadkit.result import Ok, Fail, Result
    from monadkit.async_ import AsyncResult
    from monadkit.transformers import awaitable_to_result, result_to_awaitable
    from monadkit.observable import Stream, Subject
    from monadkit.config import init, get_config
"""

# Configuration
from monadkit._config import Config, get_config, init

# Async
from monadkit.async_ import AsyncResult

# Decorators
from monadkit.decorators import safe, safe_async

# Errors
from monadkit.errors import InvalidState, InvalidStateError, Rejected, RejectedError

# Maybe
from monadkit.maybe import Maybe, Nothing, NothingType, Some, maybe, none, some

# Streams
from monadkit.observable import Observable, Stream, Subject

# Result
from monadkit.result import Fail, Ok, Result, fail, ok, result

# Bridges
from monadkit.transformers import (
    awaitable_to_result,
    catch_result,
    observable_to_result,
    result_to_awaitable,
    result_to_observable,
    try_awaitable_to_result,
    unwrap_result_as_observable,
)

__all__ = [
    # Async
    'AsyncResult',
    # Configuration
    'Config',
    # Result types
    'Fail',
    # Errors
    'InvalidState',
    'InvalidStateError',
    # Maybe types
    'Maybe',
    'Nothing',
    'NothingType',
    # Streams
    'Observable',
    'Ok',
    'Rejected',
    'RejectedError',
    'Result',
    'Some',
    'Stream',
    'Subject',
    # Bridges
    'awaitable_to_result',
    'catch_result',
    'fail',
    'get_config',
    'init',
    'maybe',
    'none',
    'observable_to_result',
    'ok',
    'result',
    'result_to_awaitable',
    'result_to_observable',
    # Decorators
    'safe',
    'safe_async',
    'some',
    'try_awaitable_to_result',
    'unwrap_result_as_observable',
]
