"""Explicit floating-point environment: a rounding mode and sticky exception flags.

Code that depends on the environment reads current(). Tests and harnesses
that need a particular mode or fresh flags enter scoped_env(), which always
puts the previous environment back, even when the body raises.
"""


from contextlib import contextmanager

import numpy as np

from .ops import RM, FLAG, ALL_FLAGS, NO_FLAGS, rm_names


_numpy_errors = {
    'divide': FLAG.DIVBYZERO,
    'overflow': FLAG.OVERFLOW,
    'underflow': FLAG.UNDERFLOW,
    'invalid': FLAG.INVALID,
}


class FloatEnv(object):
    """A rounding mode and the set of raised exception flags."""

    def __init__(self, rm=RM.RNE, flags=NO_FLAGS):
        self.rm = RM(rm)
        self.flags = FLAG(flags)

    def __repr__(self):
        return '{}(rm={}, flags={})'.format(type(self).__name__, rm_names[self.rm], repr(self.flags))

    def raise_flags(self, flags):
        self.flags |= flags

    def test(self, flags=ALL_FLAGS):
        """The subset of flags that are raised, as fetestexcept."""
        return self.flags & flags

    def clear(self, flags=ALL_FLAGS):
        self.flags &= ~flags & ALL_FLAGS

    def _numpy_error(self, errtype, errflag):
        for key, flag in _numpy_errors.items():
            if key in errtype:
                self.raise_flags(flag)


_stack = [FloatEnv()]


def current():
    """The innermost floating-point environment."""
    return _stack[-1]


@contextmanager
def scoped_env(rm=RM.RNE):
    """Enter a fresh environment with rounding mode rm and no flags raised.
    Floating-point errors reported by numpy inside the scope raise the
    corresponding flags.
    """
    depth = len(_stack)
    env = FloatEnv(rm=rm)
    _stack.append(env)
    try:
        with np.errstate(all='call', call=env._numpy_error):
            yield env
    finally:
        del _stack[depth:]
