"""Hypothesis strategies for property-based testing of monadkit types."""

from hypothesis import strategies as st

from monadkit import Fail, Ok

# -----------------------------------------------------------------------------
# Basic value strategies
# -----------------------------------------------------------------------------

integers = st.integers()
texts = st.text(min_size=0, max_size=50)
values = st.one_of(integers, texts, st.none(), st.booleans())

exceptions = st.sampled_from([
    ValueError('test'),
    TypeError('test'),
    RuntimeError('test'),
])

# -----------------------------------------------------------------------------
# Result strategies
# -----------------------------------------------------------------------------

oks = integers.map(Ok)
fails = texts.map(Fail)
results = st.one_of(oks, fails)

# Pure functions used to check the functor and monad laws
int_functions = st.sampled_from([
    lambda x: x + 1,
    lambda x: x * 2,
    lambda x: -x,
    lambda x: x // 3,
])

binders = st.sampled_from([
    lambda x: Ok(x + 1),
    lambda x: Fail(f'rejected {x}'),
    lambda x: Ok(x * 2) if x % 2 == 0 else Fail('odd'),
])
