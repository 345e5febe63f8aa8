"""Distances between floating-point values, in units in the last place."""

import math

from ..arithmetic import ieee754


# no tolerance accepts this distance
UNBOUNDED = math.inf


def ulp_distance(e, a, ctx):
    """Number of steps between bit patterns e and a in the ordering of the format.
    Both must be finite. Values of opposite sign are UNBOUNDED apart unless one
    of them is a zero, in which case the distance is measured through zero.
    """
    if not (ieee754.is_finite(e, ctx) and ieee754.is_finite(a, ctx)):
        raise ValueError('ulp distance between nonfinite values {} and {}'
                         .format(ieee754.hexstr(e, ctx), ieee754.hexstr(a, ctx)))

    oe = ieee754.to_ordinal(e, ctx)
    oa = ieee754.to_ordinal(a, ctx)

    if oe != 0 and oa != 0 and (oe < 0) != (oa < 0):
        return UNBOUNDED
    else:
        return abs(oe - oa)


def within(distance, max_ulps):
    return distance <= max_ulps
