"""How close is close enough: accepted error per function."""

from ..numeric.ops import (FN, RM, K, Category, shapes, categories, sign_preserving, mode_sensitive,
                           lookup_fn, rm_names)


category_max_ulps = {
    Category.EXACT: 0,
    Category.TRANSCENDENTAL: 1,
    Category.HYPERBOLIC: 2,
    Category.GAMMA: 2,
}

# the quotient from remquo is only specified in its sign and low bits
quotient_bits = 3


class Policy(object):
    """Acceptance rules for the outputs of one function.

    max_ulps: largest accepted distance for float outputs.
    checked: one bool per output; unchecked outputs are never compared.
    signed_zero: zero results must have the expected sign.
    rounding: the rounding mode expected values were computed in, or None
        if they do not depend on it.
    flush_subnormals: an expected subnormal also accepts a zero of the same sign.
    """

    def __init__(self, max_ulps, checked, signed_zero=False, rounding=RM.RNE, flush_subnormals=False):
        if max_ulps < 0:
            raise ValueError('max_ulps must be nonnegative, got {}'.format(max_ulps))
        self.max_ulps = max_ulps
        self.checked = tuple(bool(c) for c in checked)
        self.signed_zero = bool(signed_zero)
        self.rounding = rounding
        self.flush_subnormals = bool(flush_subnormals)

    def __repr__(self):
        return '{}(max_ulps={}, checked={}, signed_zero={}, rounding={}, flush_subnormals={})'.format(
            type(self).__name__, repr(self.max_ulps), repr(self.checked), repr(self.signed_zero),
            rm_names[self.rounding] if self.rounding is not None else 'None', repr(self.flush_subnormals),
        )

    def _key(self):
        return (self.max_ulps, self.checked, self.signed_zero, self.rounding, self.flush_subnormals)

    def __eq__(self, other):
        if isinstance(other, Policy):
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self):
        return hash(self._key())

    def let(self, **changes):
        """Create a new policy, with some fields changed."""
        fields = {
            'max_ulps': self.max_ulps,
            'checked': self.checked,
            'signed_zero': self.signed_zero,
            'rounding': self.rounding,
            'flush_subnormals': self.flush_subnormals,
        }
        for k in changes:
            if k not in fields:
                raise TypeError('unknown policy field {}'.format(repr(k)))
        fields.update(changes)
        return Policy(**fields)


def _fn(fn):
    if isinstance(fn, FN):
        return fn
    else:
        return lookup_fn(fn)


def accepted_max_ulp(fn):
    return category_max_ulps[categories[_fn(fn)]]

def is_output_checked(fn, index):
    """Every output of every catalog function is checked by default.
    Single values are skipped with None in a table row, and whole outputs
    with Policy.let(checked=...). Raises IndexError for an output fn does not have.
    """
    fn = _fn(fn)
    nout = len(shapes[fn].outputs)
    if index < 0 or index >= nout:
        raise IndexError('{} has {} outputs, no output {}'.format(fn.name, nout, index))
    return True

def policy(fn):
    """The default policy for a catalog function."""
    fn = _fn(fn)
    nout = len(shapes[fn].outputs)
    return Policy(
        max_ulps=accepted_max_ulp(fn),
        checked=[is_output_checked(fn, i) for i in range(nout)],
        signed_zero=fn in sign_preserving,
        rounding=RM.RNE if fn in mode_sensitive else None,
    )


def int_outputs_match(fn, index, expected, actual):
    """Compare an integer output. Exact, except for the quotient of remquo."""
    fn = _fn(fn)
    if shapes[fn].outputs[index] != K.INT:
        raise ValueError('output {} of {} is not an integer'.format(index, fn.name))

    if fn == FN.remquo:
        mask = (1 << quotient_bits) - 1
        if (abs(expected) & mask) != (abs(actual) & mask):
            return False
        # a quotient of zero carries no sign
        return expected == 0 or actual == 0 or (expected < 0) == (actual < 0)
    else:
        return expected == actual
