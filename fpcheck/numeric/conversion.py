"""Conversions between numpy floating point scalars, raw IEEE 754 bit patterns,
and universal m/exp notation, and decoding of the literals used in test
vector tables.

Bit patterns are always the packed interchange encoding of a format:
sign, then es exponent bits, then p - 1 fraction bits. For the x87 80-bit
format the explicit integer bit that is present in memory is not part of the
pattern; it is removed on the way in and restored on the way out.
"""


import re
import sys
from fractions import Fraction

import numpy as np

from .utils import bitmask, sign_of, LiteralError, UnsupportedFormat
from .ops import RM, FLAG, NO_FLAGS


def np_byteorder(ftype):
    """Converts from numpy byteorder conventions for a floating point datatype
    to sys.byteorder 'big' or 'little'.
    """
    bo = np.dtype(ftype).byteorder
    if bo == '=':
        return sys.byteorder
    elif bo == '<':
        return 'little'
    elif bo == '>':
        return 'big'
    else:
        raise ValueError('unknown numpy byteorder {} for dtype {}'.format(repr(bo), repr(ftype)))


def _require_dtype(ctx):
    if ctx.dtype is None:
        raise UnsupportedFormat('no numpy type holds values of format es={}, nbits={}'
                                .format(ctx.es, ctx.nbits))
    return ctx.dtype


def float_to_bits(x, ctx):
    """Reinterpret a numpy scalar of ctx's dtype as an unsigned integer bit pattern.
    Anything else is first converted to the dtype, which may round.
    """
    ftype = _require_dtype(ctx)
    if type(x) is not ftype:
        x = ftype(x)

    raw = int.from_bytes(x.tobytes(), np_byteorder(ftype))

    if ctx.explicit_bit:
        # 80 value bits, the rest of the storage is padding
        raw &= bitmask(ctx.nbits + 1)
        S = raw >> (ctx.nbits) & 1
        E = raw >> (ctx.pbits + 1) & bitmask(ctx.es)
        C = raw & bitmask(ctx.pbits)
        return (S << (ctx.nbits - 1)) | (E << ctx.pbits) | C
    else:
        return raw & bitmask(ctx.nbits)


def float_from_bits(i, ctx):
    """Materialize a bit pattern as a numpy scalar of ctx's dtype. Exact."""
    ftype = _require_dtype(ctx)
    i = int(i)
    if i < 0 or i > bitmask(ctx.nbits):
        raise ValueError('bit pattern {} does not fit in {} bits'.format(hex(i), ctx.nbits))

    if ctx.explicit_bit:
        S = i >> (ctx.nbits - 1) & 1
        E = i >> ctx.pbits & bitmask(ctx.es)
        C = i & bitmask(ctx.pbits)
        # zeros and subnormals are the only encodings without the integer bit
        J = 0 if E == 0 else 1
        raw = (S << ctx.nbits) | (E << (ctx.pbits + 1)) | (J << ctx.pbits) | C
    else:
        raw = i

    nbytes = ctx.storage_bits // 8
    return np.frombuffer(raw.to_bytes(nbytes, np_byteorder(ftype)),
                         dtype=ftype, count=1, offset=0)[0]


def bits_to_mantissa_exp(i, ctx):
    """Converts a bit pattern into universal m, exp representation:
    f = m * 2**exp. Raises ValueError for inf and NaN.
    The sign of zero is lost; check the sign bit separately.
    """
    S = i >> (ctx.nbits - 1) & 1
    E = i >> ctx.pbits & bitmask(ctx.es)
    C = i & bitmask(ctx.pbits)

    if E == 0:
        # subnormal
        c = C
        exp = ctx.emin - ctx.pbits
    elif E <= 2 * ctx.emax:
        # normal
        c = C | (1 << ctx.pbits)
        exp = E - ctx.bias - ctx.pbits
    else:
        # nonreal
        raise ValueError('nonfinite bit pattern {}'.format(hex(i)))

    if S == 0:
        return c, exp
    else:
        return -c, exp


def rounds_away(rm, negative, kept, rem, half, sticky):
    if rm == RM.RNE:
        return rem > half or (rem == half and (sticky or (kept & 1) == 1))
    elif rm == RM.RNA:
        return rem >= half
    elif rm == RM.RTP:
        return not negative
    elif rm == RM.RTN:
        return negative
    elif rm == RM.RTZ:
        return False
    elif rm == RM.RAZ:
        return True
    else:
        raise ValueError('unknown rounding mode {}'.format(repr(rm)))


def _overflows_to_inf(rm, negative):
    if rm == RM.RNE or rm == RM.RNA or rm == RM.RAZ:
        return True
    elif rm == RM.RTP:
        return not negative
    elif rm == RM.RTN:
        return negative
    else:
        return False


def round_to_bits(negative, c, exp, ctx, rm=RM.RNE, sticky=False):
    """Round the real number (-1)**negative * c * 2**exp into the format of ctx,
    returning the bit pattern and the IEEE 754 flags the rounding raises.

    c is a nonnegative integer. If sticky is set, the true magnitude lies
    strictly between c * 2**exp and (c + 1) * 2**exp, and c must carry at least
    one bit below the last place of the result.

    Tininess is detected before rounding.
    """
    S = sign_of(negative)
    sign_bit = S << (ctx.nbits - 1)

    if c < 0:
        raise ValueError('significand must be nonnegative, got {}'.format(c))
    elif c == 0:
        if sticky:
            raise ValueError('zero significand with sticky bit set')
        return sign_bit, NO_FLAGS

    e = exp + c.bit_length() - 1
    lsb = max(e, ctx.emin) - ctx.pbits
    shift = lsb - exp

    if shift > 0:
        kept = c >> shift
        rem = c & bitmask(shift)
        half = 1 << (shift - 1)
        inexact = rem != 0 or sticky
        if inexact and rounds_away(rm, negative, kept, rem, half, sticky):
            kept += 1
    elif sticky:
        raise ValueError('sticky bit given without extra precision: {} bits at 2**{}'
                         .format(c.bit_length(), exp))
    else:
        kept = c << -shift
        inexact = False

    flags = NO_FLAGS
    if inexact:
        flags |= FLAG.INEXACT
        if e < ctx.emin:
            flags |= FLAG.UNDERFLOW

    if kept.bit_length() > ctx.p:
        # carried into a new binade
        kept >>= 1
        lsb += 1

    if kept == 0:
        return sign_bit, flags

    e_rounded = lsb + kept.bit_length() - 1
    if e_rounded > ctx.emax:
        flags |= FLAG.OVERFLOW | FLAG.INEXACT
        if _overflows_to_inf(rm, negative):
            return sign_bit | (bitmask(ctx.es) << ctx.pbits), flags
        else:
            return sign_bit | (((2 * ctx.emax) << ctx.pbits) | bitmask(ctx.pbits)), flags

    if kept.bit_length() < ctx.p:
        # subnormal, only possible with lsb at the bottom of the range
        return sign_bit | kept, flags
    else:
        E = e_rounded + ctx.bias
        C = kept & bitmask(ctx.pbits)
        return sign_bit | (E << ctx.pbits) | C, flags


# literals in test vector tables

class Bits(object):
    """An exact bit pattern in a table row, for values that have no
    convenient literal form, such as NaNs with particular payloads.
    """

    def __init__(self, pattern):
        if isinstance(pattern, bool) or not isinstance(pattern, int):
            raise TypeError('expected int bit pattern, got {}'.format(repr(pattern)))
        if pattern < 0:
            raise ValueError('bit pattern must be nonnegative, got {}'.format(pattern))
        self.pattern = pattern

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, hex(self.pattern))

    def __eq__(self, other):
        return isinstance(other, Bits) and self.pattern == other.pattern

    def __hash__(self):
        return hash((Bits, self.pattern))


hex_re = re.compile(r'([+-])?0x([0-9a-f]*)(?:\.([0-9a-f]*))?p([+-]?[0-9]+)')
nan_re = re.compile(r'([+-])?nan')
inf_re = re.compile(r'([+-])?inf(?:inity)?')


def _decode_hex(m, ctx, s):
    sign, ipart, fpart, pexp = m.groups()
    if fpart is None:
        fpart = ''
    if not ipart and not fpart:
        raise LiteralError('no digits in hex literal {}'.format(repr(s)))

    negative = sign == '-'
    c = int(ipart + fpart, 16)
    exp = int(pexp) - 4 * len(fpart)

    bits, flags = round_to_bits(negative, c, exp, ctx, rm=RM.RNE)
    if flags & (FLAG.INEXACT | FLAG.OVERFLOW):
        raise LiteralError('hex literal {} is not exact in format es={}, nbits={}'
                           .format(repr(s), ctx.es, ctx.nbits))
    return bits


def _decode_decimal(s, ctx):
    try:
        f = Fraction(s)
    except (ValueError, ZeroDivisionError):
        raise LiteralError('cannot decode literal {}'.format(repr(s)))

    negative = s.startswith('-')
    num = abs(f.numerator)
    den = f.denominator

    if num == 0:
        return sign_of(negative) << (ctx.nbits - 1)

    # scale so the quotient has p + 3 bits or more, leaving guard bits below the last place
    exp = num.bit_length() - den.bit_length() - (ctx.p + 3)
    if exp >= 0:
        c, r = divmod(num, den << exp)
    else:
        c, r = divmod(num << -exp, den)

    bits, flags = round_to_bits(negative, c, exp, ctx, rm=RM.RNE, sticky=(r != 0))
    return bits


def decode_float(lit, ctx):
    """Decode one table literal into a bit pattern of ctx's format.

    Accepts Bits(pattern), ints (which must be exact), Python floats (by their
    shortest repr), numpy scalars of ctx's own dtype, hex strings like
    '-0x1.8p+1' (which must be exact), decimal strings (rounded to nearest even),
    and nan / inf with an optional sign.
    """
    if isinstance(lit, Bits):
        if lit.pattern > bitmask(ctx.nbits):
            raise LiteralError('{} does not fit in {} bits'.format(repr(lit), ctx.nbits))
        return lit.pattern

    elif isinstance(lit, bool):
        raise LiteralError('bool is not a floating point literal: {}'.format(repr(lit)))

    elif isinstance(lit, int):
        bits, flags = round_to_bits(lit < 0, abs(lit), 0, ctx, rm=RM.RNE)
        if flags & (FLAG.INEXACT | FLAG.OVERFLOW):
            raise LiteralError('integer {} is not exact in format es={}, nbits={}'
                               .format(lit, ctx.es, ctx.nbits))
        return bits

    elif isinstance(lit, np.floating):
        if ctx.dtype is None or type(lit) is not ctx.dtype:
            raise LiteralError('numpy scalar {} does not have the table type'.format(repr(lit)))
        return float_to_bits(lit, ctx)

    elif isinstance(lit, float):
        return decode_float(repr(lit), ctx)

    elif isinstance(lit, str):
        s = lit.strip().lower()

        m = nan_re.fullmatch(s)
        if m:
            S = sign_of(m.group(1) == '-')
            # quiet NaN: top fraction bit set
            return (S << (ctx.nbits - 1)) | (bitmask(ctx.es) << ctx.pbits) | (1 << (ctx.pbits - 1))

        m = inf_re.fullmatch(s)
        if m:
            S = sign_of(m.group(1) == '-')
            return (S << (ctx.nbits - 1)) | (bitmask(ctx.es) << ctx.pbits)

        m = hex_re.fullmatch(s)
        if m:
            return _decode_hex(m, ctx, lit)

        return _decode_decimal(s, ctx)

    else:
        raise LiteralError('cannot decode {} as a floating point literal'.format(repr(lit)))


def decode_int(lit):
    """Decode a literal for an integer slot: ints only."""
    if isinstance(lit, bool):
        raise LiteralError('bool is not an integer literal: {}'.format(repr(lit)))
    elif isinstance(lit, (int, np.integer)):
        return int(lit)
    else:
        raise LiteralError('expected an integer literal, got {}'.format(repr(lit)))
