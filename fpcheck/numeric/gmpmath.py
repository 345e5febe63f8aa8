"""Bridge between IEEE 754 bit patterns and gmpy2 mpfr values, for computing
correctly rounded results with MPFR.
"""


import gmpy2 as gmp

from .utils import bitmask
from . import conversion
from .ops import RM, FLAG, NO_FLAGS


def exact_context(prec):
    """A context that can hold any value with prec bits exactly."""
    return gmp.context(
        precision=max(2, prec),
        emin=gmp.get_emin_min(),
        emax=gmp.get_emax_max(),
        subnormalize=False,
        trap_underflow=True,
        trap_overflow=True,
        trap_inexact=True,
        trap_invalid=True,
        trap_erange=True,
        trap_divzero=True,
    )


def working_context(prec, round=gmp.RoundToZero):
    """Context for evaluating a function before the final rounding.
    Two extra bits and round toward zero: the ternary value then acts as a
    sticky bit, and the result can be rounded again in any mode.
    """
    return gmp.context(
        precision=prec + 2,
        emin=gmp.get_emin_min(),
        emax=gmp.get_emax_max(),
        subnormalize=False,
        # special cases produce nan and inf silently, compute() reads the flags
        trap_underflow=False,
        trap_overflow=False,
        trap_inexact=False,
        trap_invalid=False,
        trap_erange=False,
        trap_divzero=False,
        round=round,
    )


# only the sign of exact zeros depends on these, ties never matter
gmp_rounding = {
    RM.RNE: gmp.RoundToNearest,
    RM.RNA: gmp.RoundToNearest,
    RM.RTP: gmp.RoundUp,
    RM.RTN: gmp.RoundDown,
    RM.RTZ: gmp.RoundToZero,
    RM.RAZ: gmp.RoundAwayZero,
}


def signed_zero(negative):
    with exact_context(2):
        if negative:
            return -gmp.zero()
        else:
            return gmp.zero()


def bits_to_mpfr(i, ctx):
    """Convert a bit pattern of ctx's format to an mpfr, exactly."""
    S = i >> (ctx.nbits - 1) & 1
    E = i >> ctx.pbits & bitmask(ctx.es)
    C = i & bitmask(ctx.pbits)

    if E == bitmask(ctx.es):
        if C != 0:
            return gmp.nan()
        elif S:
            return -gmp.inf()
        else:
            return gmp.inf()

    m, exp = conversion.bits_to_mantissa_exp(i, ctx)
    if m == 0:
        return signed_zero(S == 1)

    c = abs(m)
    with exact_context(c.bit_length()):
        scale = gmp.exp2(exp)
        significand = gmp.mpfr(c)
        if m < 0:
            return -gmp.mul(significand, scale)
        else:
            return gmp.mul(significand, scale)


def quiet_nan_bits(ctx, negative=False):
    return ((1 if negative else 0) << (ctx.nbits - 1)) | (bitmask(ctx.es) << ctx.pbits) | (1 << (ctx.pbits - 1))


def mpfr_to_bits(x, ctx, rm=RM.RNE, sticky=None):
    """Round an mpfr into ctx's format, returning (bits, flags).
    If sticky is None, it is taken from the mpfr's ternary value, which is only
    meaningful when x was produced under working_context.
    """
    if gmp.is_nan(x):
        return quiet_nan_bits(ctx), NO_FLAGS

    negative = gmp.is_signed(x)
    S = 1 if negative else 0

    if gmp.is_infinite(x):
        return (S << (ctx.nbits - 1)) | (bitmask(ctx.es) << ctx.pbits), NO_FLAGS

    if sticky is None:
        sticky = x.rc != 0

    if gmp.is_zero(x):
        if sticky:
            # a nonzero result below the unbounded exponent range cannot happen
            raise ValueError('inexact zero from mpfr: {}'.format(repr(x)))
        return S << (ctx.nbits - 1), NO_FLAGS

    m, exp = x.as_mantissa_exp()
    c = abs(int(m))
    exp = int(exp)

    # give round_to_bits its guard bits below the last place
    q = ctx.p + 2
    cbits = c.bit_length()
    if cbits < q:
        c <<= q - cbits
        exp -= q - cbits

    return conversion.round_to_bits(negative, c, exp, ctx, rm=rm, sticky=sticky)


def compute(op, *args, prec=53, rm=RM.RTZ):
    """Compute op(*args) on mpfr arguments with prec + 2 bits, rounded with rm,
    which is toward zero unless only the sign of an exact zero is wanted.
    Arguments are treated as exact, and the ternary value of the result
    only reflects the rounding of this single operation.
    NaN arguments are the caller's problem: gmpy2 does not like them.

    Returns the result and the INVALID, DIVBYZERO and OVERFLOW flags MPFR raised.
    Overflow can only happen past MPFR's own exponent range.
    """
    with working_context(prec, round=gmp_rounding[rm]):
        result = op(*args)
        gmpctx = gmp.get_context()
        flags = NO_FLAGS
        if gmpctx.invalid:
            flags |= FLAG.INVALID
        if gmpctx.divzero:
            flags |= FLAG.DIVBYZERO
        if gmpctx.overflow:
            flags |= FLAG.OVERFLOW | FLAG.INEXACT

    return result, flags
