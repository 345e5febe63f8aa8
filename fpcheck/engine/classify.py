"""Categorical comparison of special values: NaN, infinities, and zeros."""

from enum import Enum

from ..arithmetic import ieee754


class Cmp(Enum):
    DEFER = 0
    MATCH = 1
    MISMATCH = 2


def classify(e, a, ctx, signed_zero=False, flush_subnormals=False):
    """Compare expected bit pattern e with actual bit pattern a.

    Returns (Cmp, reason). DEFER means both are finite and the comparison
    should be made by distance; reason is None unless the result is MISMATCH.
    """
    e_nan = ieee754.is_nan(e, ctx)
    a_nan = ieee754.is_nan(a, ctx)
    if e_nan and a_nan:
        return Cmp.MATCH, None
    elif e_nan:
        return Cmp.MISMATCH, 'expected NaN'
    elif a_nan:
        return Cmp.MISMATCH, 'unexpected NaN'

    e_neg = ieee754.is_negative(e, ctx)
    a_neg = ieee754.is_negative(a, ctx)

    e_inf = ieee754.is_inf(e, ctx)
    a_inf = ieee754.is_inf(a, ctx)
    if e_inf and a_inf:
        if e_neg == a_neg:
            return Cmp.MATCH, None
        else:
            return Cmp.MISMATCH, 'infinity of the wrong sign'
    elif e_inf:
        return Cmp.MISMATCH, 'expected infinity'
    elif a_inf:
        return Cmp.MISMATCH, 'unexpected infinity'

    e_zero = ieee754.is_zero(e, ctx)
    a_zero = ieee754.is_zero(a, ctx)
    if e_zero and a_zero:
        if signed_zero and e_neg != a_neg:
            return Cmp.MISMATCH, 'zero of the wrong sign'
        else:
            return Cmp.MATCH, None
    elif signed_zero and e_neg != a_neg:
        # measuring through zero would bridge the sign error
        if a_zero:
            return Cmp.MISMATCH, 'zero of the wrong sign'
        elif e_zero:
            return Cmp.MISMATCH, 'nonzero of the wrong sign, expected a zero'

    if flush_subnormals and a_zero and ieee754.is_subnormal(e, ctx) and e_neg == a_neg:
        return Cmp.MATCH, None

    return Cmp.DEFER, None
