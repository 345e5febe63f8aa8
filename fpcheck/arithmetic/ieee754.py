"""IEEE 754 bit patterns: field extraction, special value predicates,
and the monotonic integer ordering used to measure distances in ULPs.

All functions take an unsigned integer bit pattern in the packed interchange
encoding of the format described by ctx.
"""

from ..numeric.utils import bitmask, sign_of, UnsupportedFormat
from ..numeric.ops import RM
from .evalctx import IEEECtx, native_dtype


used_ctxs = {}
def ieee_ctx(es, nbits, rm=RM.RNE, dtype=None):
    if dtype is None:
        dtype = native_dtype(es, nbits)
    try:
        return used_ctxs[(es, nbits, rm, dtype)]
    except KeyError:
        ctx = IEEECtx(es=es, nbits=nbits, rm=rm, dtype=dtype)
        used_ctxs[(es, nbits, rm, dtype)] = ctx
        return ctx


def named_ctx(precision, rm=RM.RNE):
    """Look up the context for a named format, such as 'binary32' or 'extended'."""
    ctx = IEEECtx(props={'precision': precision})
    return ieee_ctx(ctx.es, ctx.nbits, rm=rm, dtype=ctx.dtype)


binary16 = ieee_ctx(5, 16)
binary32 = ieee_ctx(8, 32)
binary64 = ieee_ctx(11, 64)
binary128 = ieee_ctx(15, 128)

try:
    extended = named_ctx('extended')
except UnsupportedFormat:
    extended = None

narrow = binary32
standard = binary64


# fields

def fields(i, ctx):
    """Split a bit pattern into sign, biased exponent, and trailing significand."""
    S = (i >> (ctx.nbits - 1)) & 1
    E = (i >> ctx.pbits) & bitmask(ctx.es)
    C = i & bitmask(ctx.pbits)
    return S, E, C

def is_nan(i, ctx):
    S, E, C = fields(i, ctx)
    return E == bitmask(ctx.es) and C != 0

def is_inf(i, ctx):
    S, E, C = fields(i, ctx)
    return E == bitmask(ctx.es) and C == 0

def is_zero(i, ctx):
    return i & bitmask(ctx.nbits - 1) == 0

def is_subnormal(i, ctx):
    S, E, C = fields(i, ctx)
    return E == 0 and C != 0

def is_finite(i, ctx):
    S, E, C = fields(i, ctx)
    return E != bitmask(ctx.es)

def is_negative(i, ctx):
    """The sign bit. True for -0 and -inf, and for NaNs with the sign bit set."""
    return (i >> (ctx.nbits - 1)) & 1 == 1


def exponent(i, ctx):
    """The unbiased exponent of a finite value. Subnormals and zeros report emin."""
    S, E, C = fields(i, ctx)
    if E == bitmask(ctx.es):
        raise ValueError('nonfinite bit pattern {} has no exponent'.format(hex(i)))
    elif E == 0:
        return ctx.emin
    else:
        return E - ctx.bias

def significand(i, ctx):
    """The integer significand of a finite value, including the hidden bit."""
    S, E, C = fields(i, ctx)
    if E == bitmask(ctx.es):
        raise ValueError('nonfinite bit pattern {} has no significand'.format(hex(i)))
    elif E == 0:
        return C
    else:
        return C | (1 << ctx.pbits)

def ulp_exponent(i, ctx):
    """log2 of the spacing between i and the next value away from zero."""
    return exponent(i, ctx) - ctx.pbits


# ordering

def to_ordinal(i, ctx):
    """Map a bit pattern to a signed integer so that adjacent finite values
    differ by exactly 1. Both zeros map to 0.
    """
    if is_negative(i, ctx):
        return -(i & bitmask(ctx.nbits - 1))
    else:
        return i

def from_ordinal(o, ctx):
    if o < 0:
        return (1 << (ctx.nbits - 1)) | -o
    else:
        return o


# constructors

def quiet_nan(ctx, negative=False):
    return (sign_of(negative) << (ctx.nbits - 1)) | (bitmask(ctx.es) << ctx.pbits) | (1 << (ctx.pbits - 1))

def infinity(ctx, negative=False):
    return (sign_of(negative) << (ctx.nbits - 1)) | (bitmask(ctx.es) << ctx.pbits)

def zero(ctx, negative=False):
    return sign_of(negative) << (ctx.nbits - 1)

def max_finite(ctx, negative=False):
    return (sign_of(negative) << (ctx.nbits - 1)) | ((2 * ctx.emax) << ctx.pbits) | bitmask(ctx.pbits)

def min_normal(ctx, negative=False):
    return (sign_of(negative) << (ctx.nbits - 1)) | (1 << ctx.pbits)

def min_subnormal(ctx, negative=False):
    return (sign_of(negative) << (ctx.nbits - 1)) | 1


# rendering

def hexstr(i, ctx):
    """Render a bit pattern like C's %a, with the hidden bit as the leading digit."""
    S, E, C = fields(i, ctx)
    sign = '-' if S else ''

    if E == bitmask(ctx.es):
        if C == 0:
            return sign + 'inf'
        else:
            return sign + 'nan'
    elif E == 0 and C == 0:
        return sign + '0x0p+0'

    if E == 0:
        lead = 0
        e = ctx.emin
    else:
        lead = 1
        e = E - ctx.bias

    ndigits = (ctx.pbits + 3) // 4
    frac = C << (4 * ndigits - ctx.pbits)
    digits = '{:0{}x}'.format(frac, ndigits).rstrip('0')

    if digits:
        return '{}0x{:d}.{}p{:+d}'.format(sign, lead, digits, e)
    else:
        return '{}0x{:d}p{:+d}'.format(sign, lead, e)


def show_bitpattern(i, ctx):
    S, E, C = fields(i, ctx)
    if E == 0 or E == bitmask(ctx.es):
        hidden = 0
    else:
        hidden = 1

    return ('float{:d}({:d},{:d}): {:01b} {:0'+str(ctx.es)+'b} ({:01b}) {:0'+str(ctx.pbits)+'b}').format(
        ctx.nbits, ctx.es, ctx.p, S, E, hidden, C,
    )
