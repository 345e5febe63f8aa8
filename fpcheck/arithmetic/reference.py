"""A correctly rounded libm, computed with MPFR through gmpy2.

Every function takes and returns numpy scalars of one format. Results are
rounded in the rounding mode of the ambient floating-point environment, and
the IEEE 754 exception flags an ideal implementation would raise are raised
in that environment.

Functions that only rearrange bits or round to integers are computed exactly
on the bit patterns; everything else goes through MPFR with two extra bits
and a final rounding done in integer arithmetic, so that subnormal results
are rounded only once.
"""

import gmpy2 as gmp

from ..numeric import utils
from ..numeric import gmpmath
from ..numeric import fenv
from ..numeric.utils import bitmask
from ..numeric.ops import FN, RM, FLAG, NO_FLAGS, INT_MAX, FP_ILOGB0, FP_ILOGBNAN, lookup_fn
from ..numeric.conversion import (float_to_bits, float_from_bits, bits_to_mantissa_exp,
                                  round_to_bits, rounds_away)
from . import ieee754


def _lgamma(x):
    return gmp.lgamma(x)[0]

def _pow(x, y):
    return x ** y

gmp_ops = {
    FN.acos: gmp.acos,
    FN.acosh: gmp.acosh,
    FN.asin: gmp.asin,
    FN.asinh: gmp.asinh,
    FN.atan: gmp.atan,
    FN.atan2: gmp.atan2,
    FN.atanh: gmp.atanh,
    FN.cbrt: gmp.cbrt,
    FN.cos: gmp.cos,
    FN.cosh: gmp.cosh,
    FN.erf: gmp.erf,
    FN.erfc: gmp.erfc,
    FN.exp: gmp.exp,
    FN.exp2: gmp.exp2,
    FN.expm1: gmp.expm1,
    FN.fmod: gmp.fmod,
    FN.lgamma: _lgamma,
    FN.log: gmp.log,
    FN.log10: gmp.log10,
    FN.log1p: gmp.log1p,
    FN.log2: gmp.log2,
    FN.remainder: gmp.remainder,
    FN.sin: gmp.sin,
    FN.sinh: gmp.sinh,
    FN.sqrt: gmp.sqrt,
    FN.tan: gmp.tan,
    FN.tanh: gmp.tanh,
    FN.tgamma: gmp.gamma,
}


class Libm(object):
    """Reference implementations of the catalog functions.
    Same interface as the numpy Libm: lookup() gives a callable for one
    function in one format.
    """

    name = 'mpfr'

    @classmethod
    def lookup(cls, fn, ctx):
        if not isinstance(fn, FN):
            fn = lookup_fn(fn)
        if ctx.dtype is None:
            raise utils.UnsupportedFormat('no numpy type holds {} values'.format(ctx.name))

        impl = getattr(cls, '_eval_' + fn.name, None)
        if impl is not None:
            def f(*args):
                return impl(ctx, *args)
        elif fn in gmp_ops:
            op = gmp_ops[fn]
            def f(*args):
                return cls._mpfr(ctx, op, *args)
        else:
            raise utils.UnsupportedFunction('no reference implementation of {}'.format(fn.name))

        f.__name__ = fn.name
        f.__qualname__ = '{}.{}'.format(cls.name, fn.name)
        return f

    # plumbing

    @staticmethod
    def _finish(ctx, bits, flags=NO_FLAGS):
        if flags:
            fenv.current().raise_flags(flags)
        return float_from_bits(bits, ctx)

    @classmethod
    def _nan(cls, ctx, flags=NO_FLAGS):
        return cls._finish(ctx, ieee754.quiet_nan(ctx), flags)

    @classmethod
    def _mpfr(cls, ctx, op, *args, exact_zero_sign=False):
        """Evaluate op with MPFR and round into ctx in the ambient rounding mode.
        NaN in, NaN out. With exact_zero_sign, an exact zero result is
        recomputed in the ambient mode, which decides its sign.
        """
        ibits = [float_to_bits(x, ctx) for x in args]
        if any(ieee754.is_nan(i, ctx) for i in ibits):
            return cls._nan(ctx)

        rm = fenv.current().rm
        inputs = [gmpmath.bits_to_mpfr(i, ctx) for i in ibits]
        result, flags = gmpmath.compute(op, *inputs, prec=ctx.p)

        if exact_zero_sign and gmp.is_zero(result):
            result, _ = gmpmath.compute(op, *inputs, prec=ctx.p, rm=rm)

        if gmp.is_nan(result):
            flags |= FLAG.INVALID

        bits, rflags = gmpmath.mpfr_to_bits(result, ctx, rm=rm)
        return cls._finish(ctx, bits, flags | rflags)

    @staticmethod
    def _integral(ctx, i, rm):
        """Round bit pattern i to an integer in mode rm, exactly.
        Returns the new bit pattern and whether it differs from i.
        """
        if not ieee754.is_finite(i, ctx) or ieee754.is_zero(i, ctx):
            return i, False

        m, exp = bits_to_mantissa_exp(i, ctx)
        if exp >= 0:
            return i, False

        negative = m < 0
        c = abs(m)
        shift = -exp
        kept = c >> shift
        rem = c & bitmask(shift)
        half = 1 << (shift - 1)
        if rem != 0 and rounds_away(rm, negative, kept, rem, half, False):
            kept += 1

        bits, flags = round_to_bits(negative, kept, 0, ctx)
        return bits, rem != 0

    # sign and magnitude

    @classmethod
    def _eval_fabs(cls, ctx, x):
        return cls._finish(ctx, float_to_bits(x, ctx) & bitmask(ctx.nbits - 1))

    @classmethod
    def _eval_copysign(cls, ctx, x, y):
        sign = 1 << (ctx.nbits - 1)
        return cls._finish(ctx, (float_to_bits(x, ctx) & ~sign) | (float_to_bits(y, ctx) & sign))

    @classmethod
    def _max_min(cls, ctx, x, y, larger):
        i = float_to_bits(x, ctx)
        j = float_to_bits(y, ctx)
        if ieee754.is_nan(i, ctx) and ieee754.is_nan(j, ctx):
            return cls._nan(ctx)
        elif ieee754.is_nan(i, ctx):
            return cls._finish(ctx, j)
        elif ieee754.is_nan(j, ctx):
            return cls._finish(ctx, i)

        oi = ieee754.to_ordinal(i, ctx)
        oj = ieee754.to_ordinal(j, ctx)
        if oi == oj:
            # only zeros of different signs compare equal here: +0 is the larger
            i_wins = ieee754.is_negative(i, ctx) != larger
        else:
            i_wins = (oi > oj) == larger

        if i_wins:
            return cls._finish(ctx, i)
        else:
            return cls._finish(ctx, j)

    @classmethod
    def _eval_fmax(cls, ctx, x, y):
        return cls._max_min(ctx, x, y, True)

    @classmethod
    def _eval_fmin(cls, ctx, x, y):
        return cls._max_min(ctx, x, y, False)

    @classmethod
    def _eval_fdim(cls, ctx, x, y):
        i = float_to_bits(x, ctx)
        j = float_to_bits(y, ctx)
        if ieee754.is_nan(i, ctx) or ieee754.is_nan(j, ctx):
            return cls._nan(ctx)
        elif ieee754.to_ordinal(i, ctx) > ieee754.to_ordinal(j, ctx):
            return cls._mpfr(ctx, gmp.sub, x, y)
        else:
            return cls._finish(ctx, ieee754.zero(ctx))

    @classmethod
    def _eval_nextafter(cls, ctx, x, y):
        i = float_to_bits(x, ctx)
        j = float_to_bits(y, ctx)
        if ieee754.is_nan(i, ctx) or ieee754.is_nan(j, ctx):
            return cls._nan(ctx)

        oi = ieee754.to_ordinal(i, ctx)
        oj = ieee754.to_ordinal(j, ctx)
        if oi == oj:
            return cls._finish(ctx, j)

        if oj > oi:
            r = ieee754.from_ordinal(oi + 1, ctx)
        else:
            r = ieee754.from_ordinal(oi - 1, ctx)

        flags = NO_FLAGS
        if ieee754.is_inf(r, ctx):
            flags = FLAG.OVERFLOW | FLAG.INEXACT
        elif ieee754.is_subnormal(r, ctx) or ieee754.is_zero(r, ctx):
            flags = FLAG.UNDERFLOW | FLAG.INEXACT
        return cls._finish(ctx, r, flags)

    # rounding to integers

    @classmethod
    def _eval_ceil(cls, ctx, x):
        bits, inexact = cls._integral(ctx, float_to_bits(x, ctx), RM.RTP)
        return cls._finish(ctx, bits)

    @classmethod
    def _eval_floor(cls, ctx, x):
        bits, inexact = cls._integral(ctx, float_to_bits(x, ctx), RM.RTN)
        return cls._finish(ctx, bits)

    @classmethod
    def _eval_trunc(cls, ctx, x):
        bits, inexact = cls._integral(ctx, float_to_bits(x, ctx), RM.RTZ)
        return cls._finish(ctx, bits)

    @classmethod
    def _eval_round(cls, ctx, x):
        bits, inexact = cls._integral(ctx, float_to_bits(x, ctx), RM.RNA)
        return cls._finish(ctx, bits)

    @classmethod
    def _eval_rint(cls, ctx, x):
        bits, inexact = cls._integral(ctx, float_to_bits(x, ctx), fenv.current().rm)
        if inexact:
            return cls._finish(ctx, bits, FLAG.INEXACT)
        else:
            return cls._finish(ctx, bits)

    @classmethod
    def _eval_nearbyint(cls, ctx, x):
        bits, inexact = cls._integral(ctx, float_to_bits(x, ctx), fenv.current().rm)
        return cls._finish(ctx, bits)

    # decomposition

    @classmethod
    def _eval_modf(cls, ctx, x):
        i = float_to_bits(x, ctx)
        negative = ieee754.is_negative(i, ctx)
        if ieee754.is_nan(i, ctx):
            return cls._nan(ctx), cls._nan(ctx)
        elif ieee754.is_inf(i, ctx):
            return cls._finish(ctx, ieee754.zero(ctx, negative)), cls._finish(ctx, i)

        integral, inexact = cls._integral(ctx, i, RM.RTZ)
        m, exp = bits_to_mantissa_exp(i, ctx)
        if exp >= 0:
            frac = ieee754.zero(ctx, negative)
        else:
            frac, flags = round_to_bits(negative, abs(m) & bitmask(-exp), exp, ctx)
        return cls._finish(ctx, frac), cls._finish(ctx, integral)

    @classmethod
    def _eval_frexp(cls, ctx, x):
        i = float_to_bits(x, ctx)
        if not ieee754.is_finite(i, ctx) or ieee754.is_zero(i, ctx):
            # the exponent is unspecified for inf and NaN
            return cls._finish(ctx, i), 0

        m, exp = bits_to_mantissa_exp(i, ctx)
        c = abs(m)
        e = exp + c.bit_length()
        bits, flags = round_to_bits(m < 0, c, exp - e, ctx)
        return cls._finish(ctx, bits), e

    @classmethod
    def _eval_ilogb(cls, ctx, x):
        i = float_to_bits(x, ctx)
        env = fenv.current()
        if ieee754.is_nan(i, ctx):
            env.raise_flags(FLAG.INVALID)
            return FP_ILOGBNAN
        elif ieee754.is_inf(i, ctx):
            env.raise_flags(FLAG.INVALID)
            return INT_MAX
        elif ieee754.is_zero(i, ctx):
            env.raise_flags(FLAG.INVALID)
            return FP_ILOGB0

        m, exp = bits_to_mantissa_exp(i, ctx)
        return exp + abs(m).bit_length() - 1

    @classmethod
    def _eval_logb(cls, ctx, x):
        i = float_to_bits(x, ctx)
        if ieee754.is_nan(i, ctx):
            return cls._nan(ctx)
        elif ieee754.is_inf(i, ctx):
            return cls._finish(ctx, ieee754.infinity(ctx))
        elif ieee754.is_zero(i, ctx):
            return cls._finish(ctx, ieee754.infinity(ctx, negative=True), FLAG.DIVBYZERO)

        m, exp = bits_to_mantissa_exp(i, ctx)
        e = exp + abs(m).bit_length() - 1
        bits, flags = round_to_bits(e < 0, abs(e), 0, ctx)
        return cls._finish(ctx, bits)

    @classmethod
    def _eval_significand(cls, ctx, x):
        i = float_to_bits(x, ctx)
        if not ieee754.is_finite(i, ctx) or ieee754.is_zero(i, ctx):
            return cls._finish(ctx, i)

        m, exp = bits_to_mantissa_exp(i, ctx)
        c = abs(m)
        bits, flags = round_to_bits(m < 0, c, 1 - c.bit_length(), ctx)
        return cls._finish(ctx, bits)

    @classmethod
    def _eval_ldexp(cls, ctx, x, n):
        i = float_to_bits(x, ctx)
        if not ieee754.is_finite(i, ctx) or ieee754.is_zero(i, ctx):
            return cls._finish(ctx, i)

        m, exp = bits_to_mantissa_exp(i, ctx)
        bits, flags = round_to_bits(m < 0, abs(m), exp + int(n), ctx, rm=fenv.current().rm)
        return cls._finish(ctx, bits, flags)

    @classmethod
    def _eval_scalbn(cls, ctx, x, n):
        return cls._eval_ldexp(ctx, x, n)

    @classmethod
    def _eval_scalb(cls, ctx, x, y):
        """x * 2**y, where y is a float that must be an integer or infinite."""
        i = float_to_bits(x, ctx)
        j = float_to_bits(y, ctx)
        if ieee754.is_nan(i, ctx) or ieee754.is_nan(j, ctx):
            return cls._nan(ctx)

        negative = ieee754.is_negative(i, ctx)
        if ieee754.is_inf(j, ctx):
            if ieee754.is_negative(j, ctx):
                if ieee754.is_inf(i, ctx):
                    return cls._nan(ctx, FLAG.INVALID)
                return cls._finish(ctx, ieee754.zero(ctx, negative=negative))
            else:
                if ieee754.is_zero(i, ctx):
                    return cls._nan(ctx, FLAG.INVALID)
                return cls._finish(ctx, ieee754.infinity(ctx, negative=negative))

        m, exp = bits_to_mantissa_exp(j, ctx)
        if exp < 0 and m & bitmask(-exp):
            return cls._nan(ctx, FLAG.INVALID)
        elif exp < 0:
            n = m >> -exp
        else:
            n = m << exp
        # past this every result has overflowed or underflowed
        limit = 2 * (ctx.emax - ctx.n)
        return cls._eval_ldexp(ctx, x, max(-limit, min(limit, n)))

    # remainders

    @classmethod
    def _eval_remquo(cls, ctx, x, y):
        ibits = [float_to_bits(x, ctx), float_to_bits(y, ctx)]
        if any(ieee754.is_nan(i, ctx) for i in ibits):
            return cls._nan(ctx), 0

        inputs = [gmpmath.bits_to_mpfr(i, ctx) for i in ibits]
        (r, q), flags = gmpmath.compute(gmp.remquo, *inputs, prec=ctx.p)
        if gmp.is_nan(r):
            return cls._nan(ctx, flags | FLAG.INVALID), 0

        # the remainder is always exact
        bits, rflags = gmpmath.mpfr_to_bits(r, ctx, sticky=False)
        return cls._finish(ctx, bits, flags | rflags), int(q)

    # powers and roots

    @classmethod
    def _eval_hypot(cls, ctx, x, y):
        if ieee754.is_inf(float_to_bits(x, ctx), ctx) or ieee754.is_inf(float_to_bits(y, ctx), ctx):
            # even if the other operand is NaN
            return cls._finish(ctx, ieee754.infinity(ctx))
        return cls._mpfr(ctx, gmp.hypot, x, y)

    @classmethod
    def _eval_pow(cls, ctx, x, y):
        i = float_to_bits(x, ctx)
        j = float_to_bits(y, ctx)
        one, flags = round_to_bits(False, 1, 0, ctx)
        # 1 even for NaN operands
        if ieee754.is_zero(j, ctx) or i == one:
            return cls._finish(ctx, one)
        return cls._mpfr(ctx, _pow, x, y)

    @classmethod
    def _eval_fma(cls, ctx, x, y, z):
        return cls._mpfr(ctx, gmp.fma, x, y, z, exact_zero_sign=True)

    # functions with two results

    @classmethod
    def _eval_sincos(cls, ctx, x):
        return cls._mpfr(ctx, gmp.sin, x), cls._mpfr(ctx, gmp.cos, x)

    @classmethod
    def _eval_lgamma_r(cls, ctx, x):
        i = float_to_bits(x, ctx)
        if ieee754.is_nan(i, ctx):
            return cls._nan(ctx), 1

        negative = ieee754.is_negative(i, ctx)
        value = cls._mpfr(ctx, _lgamma, x)

        if ieee754.is_zero(i, ctx):
            sign = -1 if negative else 1
        elif not ieee754.is_finite(i, ctx) or not negative:
            sign = 1
        else:
            m, exp = bits_to_mantissa_exp(i, ctx)
            c = abs(m)
            if exp >= 0 or c & bitmask(-exp) == 0:
                # pole at a negative integer
                sign = 1
            else:
                # gamma is negative between -2k - 1 and -2k
                k = c >> -exp
                sign = -1 if k % 2 == 0 else 1

        return value, sign
