"""General utilities, such as exception classes."""

# fpcheck-specific exceptions

class FPCheckError(Exception):
    """Base fpcheck error."""

class MalformedTableEntry(FPCheckError):
    """A table row does not fit the shape of the function it is paired with."""

class LiteralError(MalformedTableEntry):
    """A literal in a table row cannot be decoded in the table's format."""

class ShapeError(FPCheckError):
    """A function under test returned the wrong number of outputs."""

class UnsupportedFormat(FPCheckError):
    """No binary layout is known for the requested floating-point format."""

class UnsupportedFunction(FPCheckError):
    """A backend cannot provide a function in the requested format."""


# some common data structures

class ImmutableDict(dict):
    def __delitem__(self, key):
        raise ValueError('ImmutableDict cannot be modified: attempt to delete {}'
                         .format(repr(key)))

    def __setitem__(self, key, value):
        raise ValueError('ImmutableDict cannot be modified: attempt to assign [{}] = {}'
                         .format(repr(key), repr(value)))

    def clear(self):
        raise ValueError('ImmutableDict cannot be modified: attempt to clear')

    def pop(self, key, *args):
        raise ValueError('ImmutableDict cannot be modified: attempt to pop {}'
                         .format(repr(key)))

    def popitem(self):
        raise ValueError('ImmutableDict cannot be modified: attempt to popitem')

    def setdefault(self, key, default=None):
        raise ValueError('ImmutableDict cannot be modified: attempt to setdefault {}, default={}'
                         .format(repr(key), repr(default)))

    def update(self, *args, **kwargs):
        raise ValueError('ImmutableDict cannot be modified: attempt to update')


# Useful things

def bitmask(n: int) -> int:
    """Produces a bitmask of n 1s if n is positive, or n 0s if n is negative."""
    if n >= 0:
        return (1 << n) - 1
    else:
        return -1 << -n

def sign_of(negative: bool) -> int:
    """1 for a negative sign, 0 otherwise; the value of an IEEE 754 sign bit."""
    if negative:
        return 1
    else:
        return 0
