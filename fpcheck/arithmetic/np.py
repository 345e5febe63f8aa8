"""libm functions on numpy scalars.

Most functions are numpy ufuncs. C functions that numpy lacks are emulated
with exact operations, and the double-only functions of Python's math
module are used where numpy has nothing, as long as the format is no wider
than binary64. numpy always computes in round-to-nearest, whatever the
ambient environment says.
"""

import math

import numpy as np

from ..numeric import utils
from ..numeric.ops import FN, INT_MAX, FP_ILOGB0, FP_ILOGBNAN, lookup_fn


np.seterr(all='ignore')

# scale factors past this saturate every supported format
_LDEXP_LIMIT = 100000

# functions that go through double precision Python floats
_double_only = {FN.erf, FN.erfc, FN.fma, FN.lgamma, FN.lgamma_r, FN.tgamma}


class Libm(object):
    """Implementations of catalog functions on numpy scalars of one format.
    lookup() returns a callable for a function and format; the _eval_
    methods take the format's context first, then the operands.
    """

    name = 'numpy'

    @classmethod
    def lookup(cls, fn, ctx):
        if not isinstance(fn, FN):
            fn = lookup_fn(fn)
        if ctx.dtype is None:
            raise utils.UnsupportedFormat('numpy has no type for {}'.format(ctx.name))
        if fn in _double_only and ctx.p > 53:
            raise utils.UnsupportedFunction('{}: only available in double precision, not {}'
                                            .format(fn.name, ctx.name))
        if fn == FN.fma and (ctx.p != 53 or not hasattr(math, 'fma')):
            raise utils.UnsupportedFunction('fma: needs math.fma and a double precision format, not {}'
                                            .format(ctx.name))

        impl = getattr(cls, '_eval_' + fn.name)

        def f(*args):
            return impl(ctx, *args)
        f.__name__ = fn.name
        f.__qualname__ = '{}.{}'.format(cls.name, fn.name)
        return f

    @staticmethod
    def round_to_context(x, ctx):
        if type(x) is ctx.dtype:
            return x
        else:
            return ctx.dtype(x)

    @staticmethod
    def _small(ctx):
        """Values below this can't be halved exactly."""
        return ctx.dtype(2) * np.finfo(ctx.dtype).tiny

    # sign and magnitude

    @classmethod
    def _eval_fabs(cls, ctx, x):
        return np.fabs(x)

    @classmethod
    def _eval_copysign(cls, ctx, x, y):
        return np.copysign(x, y)

    @classmethod
    def _eval_fmax(cls, ctx, x, y):
        return np.fmax(x, y)

    @classmethod
    def _eval_fmin(cls, ctx, x, y):
        return np.fmin(x, y)

    @classmethod
    def _eval_fdim(cls, ctx, x, y):
        if np.isnan(x) or np.isnan(y):
            return cls.round_to_context(np.nan, ctx)
        elif x > y:
            return cls.round_to_context(x - y, ctx)
        else:
            return ctx.dtype(0)

    @classmethod
    def _eval_nextafter(cls, ctx, x, y):
        return np.nextafter(x, y)

    # rounding to integers

    @classmethod
    def _eval_ceil(cls, ctx, x):
        return np.ceil(x)

    @classmethod
    def _eval_floor(cls, ctx, x):
        return np.floor(x)

    @classmethod
    def _eval_trunc(cls, ctx, x):
        return np.trunc(x)

    @classmethod
    def _eval_rint(cls, ctx, x):
        return np.rint(x)

    @classmethod
    def _eval_nearbyint(cls, ctx, x):
        return np.rint(x)

    @classmethod
    def _eval_round(cls, ctx, x):
        t = np.trunc(x)
        # exact: the fractional part of a float is representable
        if np.fabs(x - t) >= ctx.dtype(0.5):
            t = t + np.copysign(ctx.dtype(1), x)
        return cls.round_to_context(t, ctx)

    # decomposition

    @classmethod
    def _eval_frexp(cls, ctx, x):
        m, e = np.frexp(x)
        return cls.round_to_context(m, ctx), int(e)

    @classmethod
    def _eval_modf(cls, ctx, x):
        frac, integral = np.modf(x)
        return cls.round_to_context(frac, ctx), cls.round_to_context(integral, ctx)

    @classmethod
    def _eval_ilogb(cls, ctx, x):
        if np.isnan(x):
            return FP_ILOGBNAN
        elif np.isinf(x):
            return INT_MAX
        elif x == 0:
            return FP_ILOGB0
        else:
            m, e = np.frexp(x)
            return int(e) - 1

    @classmethod
    def _eval_logb(cls, ctx, x):
        if np.isnan(x):
            return x
        elif np.isinf(x):
            return np.fabs(x)
        elif x == 0:
            return cls.round_to_context(-np.inf, ctx)
        else:
            m, e = np.frexp(x)
            return ctx.dtype(int(e) - 1)

    @classmethod
    def _eval_significand(cls, ctx, x):
        if np.isnan(x) or np.isinf(x) or x == 0:
            return x
        else:
            return np.ldexp(x, np.int32(-cls._eval_ilogb(ctx, x)))

    @classmethod
    def _eval_ldexp(cls, ctx, x, n):
        n = max(-_LDEXP_LIMIT, min(_LDEXP_LIMIT, int(n)))
        return cls.round_to_context(np.ldexp(x, np.int32(n)), ctx)

    @classmethod
    def _eval_scalbn(cls, ctx, x, n):
        return cls._eval_ldexp(ctx, x, n)

    @classmethod
    def _eval_scalb(cls, ctx, x, y):
        if np.isnan(x) or np.isnan(y):
            return cls.round_to_context(np.nan, ctx)
        elif np.isinf(y):
            if (y < 0 and np.isinf(x)) or (y > 0 and x == 0):
                return cls.round_to_context(np.nan, ctx)
            elif y < 0:
                return np.copysign(ctx.dtype(0), x)
            else:
                return np.copysign(ctx.dtype(np.inf), x)
        elif np.trunc(y) != y:
            return cls.round_to_context(np.nan, ctx)
        else:
            return cls._eval_ldexp(ctx, x, max(-_LDEXP_LIMIT, min(_LDEXP_LIMIT, int(y))))

    # remainders

    @classmethod
    def _eval_fmod(cls, ctx, x, y):
        return np.fmod(x, y)

    @classmethod
    def _eval_remainder(cls, ctx, x, y):
        r, q = cls._eval_remquo(ctx, x, y)
        return r

    @classmethod
    def _eval_remquo(cls, ctx, x, y):
        """IEEE 754 remainder and the low bits of the quotient, reducing
        with fmod first so that every subtraction below is exact.
        """
        if np.isnan(x) or np.isnan(y) or np.isinf(x) or y == 0:
            return cls.round_to_context(np.nan, ctx), 0
        elif np.isinf(y):
            return x, 0

        negative = bool(np.signbit(x))
        q_negative = negative != bool(np.signbit(y))
        dtype = ctx.dtype
        p = np.fabs(y)

        if p <= np.finfo(dtype).max / dtype(8):
            x = np.fmod(x, p * dtype(8))
        r = np.fabs(x)
        quo = 0

        if r >= p * dtype(4):
            r = r - p * dtype(4)
            quo += 4
        if r >= p * dtype(2):
            r = r - p * dtype(2)
            quo += 2

        if p < cls._small(ctx):
            if r + r > p:
                r = r - p
                quo += 1
                if r + r >= p:
                    r = r - p
                    quo += 1
        else:
            p_half = p * dtype(0.5)
            if r > p_half:
                r = r - p
                quo += 1
                if r >= p_half:
                    r = r - p
                    quo += 1

        if negative:
            r = -r
        if q_negative:
            quo = -quo
        return cls.round_to_context(r, ctx), quo

    # powers and roots

    @classmethod
    def _eval_sqrt(cls, ctx, x):
        return np.sqrt(x)

    @classmethod
    def _eval_cbrt(cls, ctx, x):
        return np.cbrt(x)

    @classmethod
    def _eval_hypot(cls, ctx, x, y):
        return np.hypot(x, y)

    @classmethod
    def _eval_pow(cls, ctx, x, y):
        return np.power(x, y)

    @classmethod
    def _eval_fma(cls, ctx, x, y, z):
        return cls.round_to_context(math.fma(float(x), float(y), float(z)), ctx)

    # exponentials and logarithms

    @classmethod
    def _eval_exp(cls, ctx, x):
        return np.exp(x)

    @classmethod
    def _eval_exp2(cls, ctx, x):
        return np.exp2(x)

    @classmethod
    def _eval_expm1(cls, ctx, x):
        return np.expm1(x)

    @classmethod
    def _eval_log(cls, ctx, x):
        return np.log(x)

    @classmethod
    def _eval_log2(cls, ctx, x):
        return np.log2(x)

    @classmethod
    def _eval_log10(cls, ctx, x):
        return np.log10(x)

    @classmethod
    def _eval_log1p(cls, ctx, x):
        return np.log1p(x)

    # trigonometry

    @classmethod
    def _eval_sin(cls, ctx, x):
        return np.sin(x)

    @classmethod
    def _eval_cos(cls, ctx, x):
        return np.cos(x)

    @classmethod
    def _eval_tan(cls, ctx, x):
        return np.tan(x)

    @classmethod
    def _eval_sincos(cls, ctx, x):
        return np.sin(x), np.cos(x)

    @classmethod
    def _eval_asin(cls, ctx, x):
        return np.arcsin(x)

    @classmethod
    def _eval_acos(cls, ctx, x):
        return np.arccos(x)

    @classmethod
    def _eval_atan(cls, ctx, x):
        return np.arctan(x)

    @classmethod
    def _eval_atan2(cls, ctx, y, x):
        return np.arctan2(y, x)

    @classmethod
    def _eval_sinh(cls, ctx, x):
        return np.sinh(x)

    @classmethod
    def _eval_cosh(cls, ctx, x):
        return np.cosh(x)

    @classmethod
    def _eval_tanh(cls, ctx, x):
        return np.tanh(x)

    @classmethod
    def _eval_asinh(cls, ctx, x):
        return np.arcsinh(x)

    @classmethod
    def _eval_acosh(cls, ctx, x):
        return np.arccosh(x)

    @classmethod
    def _eval_atanh(cls, ctx, x):
        return np.arctanh(x)

    # special functions, in double precision

    @classmethod
    def _eval_erf(cls, ctx, x):
        return cls.round_to_context(math.erf(float(x)), ctx)

    @classmethod
    def _eval_erfc(cls, ctx, x):
        return cls.round_to_context(math.erfc(float(x)), ctx)

    @classmethod
    def _eval_tgamma(cls, ctx, x):
        f = float(x)
        try:
            result = math.gamma(f)
        except ValueError:
            # poles, negative integers, and -inf
            if f == 0:
                result = math.copysign(math.inf, f)
            else:
                result = math.nan
        except OverflowError:
            result = math.copysign(math.inf, f)
        return cls.round_to_context(result, ctx)

    @classmethod
    def _eval_lgamma_r(cls, ctx, x):
        f = float(x)
        try:
            value = math.lgamma(f)
        except (ValueError, OverflowError):
            value = math.inf

        if f == 0:
            sign = -1 if math.copysign(1.0, f) < 0 else 1
        elif f < 0 and not math.isinf(f) and not f.is_integer():
            # gamma is negative between -2k - 1 and -2k
            sign = -1 if math.floor(f) % 2 == 1 else 1
        else:
            sign = 1
        return cls.round_to_context(value, ctx), sign

    @classmethod
    def _eval_lgamma(cls, ctx, x):
        value, sign = cls._eval_lgamma_r(ctx, x)
        return value
