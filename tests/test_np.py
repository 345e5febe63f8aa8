import math

import numpy as np
import pytest

from fpcheck.numeric import utils
from fpcheck.numeric.ops import FN, INT_MAX, FP_ILOGB0
from fpcheck.arithmetic import ieee754
from fpcheck.arithmetic.ieee754 import binary32, binary64
from fpcheck.arithmetic.np import Libm


def f64(fn):
    return Libm.lookup(fn, binary64)


class TestLookup(object):

    def test_every_function(self):
        for fn in FN:
            if fn == FN.fma and not hasattr(math, 'fma'):
                continue
            assert Libm.lookup(fn, binary64).__name__ == fn.name

    def test_double_only(self):
        with pytest.raises(utils.UnsupportedFunction):
            Libm.lookup(FN.fma, binary32)
        assert Libm.lookup(FN.erf, binary32)(np.float32(0.0)) == 0.0

    def test_wide_extended(self):
        ctx = ieee754.extended
        if ctx is None or ctx.p <= 53:
            pytest.skip('long double is not wider than double')
        with pytest.raises(utils.UnsupportedFunction):
            Libm.lookup(FN.tgamma, ctx)
        assert Libm.lookup(FN.sqrt, ctx)(ctx.dtype(4)) == 2

    def test_no_dtype(self):
        with pytest.raises(utils.UnsupportedFormat):
            Libm.lookup(FN.sin, ieee754.ieee_ctx(6, 20))


class TestEmulated(object):

    @pytest.mark.parametrize('x, expected', [
        (2.5, 3.0),
        (-2.5, -3.0),
        (1.5, 2.0),
        (0.5, 1.0),
        (-0.4, -0.0),
        (0.49999999999999994, 0.0),
        (4503599627370497.0, 4503599627370497.0),
    ])
    def test_round(self, x, expected):
        result = f64(FN.round)(np.float64(x))
        assert result == expected
        assert np.signbit(result) == np.signbit(expected)

    @pytest.mark.parametrize('x, y, r, q', [
        (13.0, 4.0, 1.0, 3),
        (14.0, 4.0, -2.0, 4),
        (10.0, 4.0, 2.0, 2),
        (-13.0, 4.0, -1.0, -3),
        (13.0, -4.0, 1.0, -3),
        (397.0, 4.0, 1.0, 3),
        (-8.0, 4.0, -0.0, -2),
    ])
    def test_remquo(self, x, y, r, q):
        result, quo = f64(FN.remquo)(np.float64(x), np.float64(y))
        assert result == r
        assert np.signbit(result) == np.signbit(r)
        assert quo == q

    def test_remainder(self):
        assert f64(FN.remainder)(np.float64(14.0), np.float64(4.0)) == -2.0
        assert np.isnan(f64(FN.remainder)(np.float64(1.0), np.float64(0.0)))
        assert np.isnan(f64(FN.remainder)(np.float64(np.inf), np.float64(1.0)))
        assert f64(FN.remainder)(np.float64(1.0), np.float64(np.inf)) == 1.0

    def test_fdim(self):
        assert f64(FN.fdim)(np.float64(3.0), np.float64(2.0)) == 1.0
        assert f64(FN.fdim)(np.float64(2.0), np.float64(3.0)) == 0.0
        assert np.isnan(f64(FN.fdim)(np.float64(np.nan), np.float64(3.0)))

    def test_ilogb_logb_significand(self):
        assert f64(FN.ilogb)(np.float64(1024.0)) == 10
        assert f64(FN.ilogb)(np.float64(-3.0)) == 1
        assert f64(FN.ilogb)(np.float64(np.inf)) == INT_MAX
        assert f64(FN.ilogb)(np.float64(0.0)) == FP_ILOGB0
        assert f64(FN.logb)(np.float64(1024.0)) == 10.0
        assert f64(FN.logb)(np.float64(0.0)) == -np.inf
        assert f64(FN.significand)(np.float64(6.0)) == 1.5
        assert f64(FN.significand)(np.float64(-0.75)) == -1.5

    def test_ldexp_saturates(self):
        assert f64(FN.ldexp)(np.float64(1.0), 10 ** 9) == np.inf
        assert f64(FN.ldexp)(np.float64(1.0), -10 ** 9) == 0.0
        assert f64(FN.scalbn)(np.float64(1.0), 10) == 1024.0

    def test_tgamma(self):
        assert f64(FN.tgamma)(np.float64(5.0)) == 24.0
        assert f64(FN.tgamma)(np.float64(-0.0)) == -np.inf
        assert np.isnan(f64(FN.tgamma)(np.float64(-1.0)))
        assert f64(FN.tgamma)(np.float64(1000.0)) == np.inf

    def test_lgamma_r(self):
        value, sign = f64(FN.lgamma_r)(np.float64(-0.0))
        assert value == np.inf
        assert sign == -1
        assert f64(FN.lgamma_r)(np.float64(-0.5))[1] == -1
        assert f64(FN.lgamma_r)(np.float64(-1.5))[1] == 1
        assert f64(FN.lgamma)(np.float64(1.0)) == 0.0

    def test_sincos(self):
        s, c = f64(FN.sincos)(np.float64(0.0))
        assert (s, c) == (0.0, 1.0)

    def test_results_keep_the_dtype(self):
        for fn in (FN.round, FN.logb, FN.significand, FN.erf, FN.tgamma):
            assert type(Libm.lookup(fn, binary32)(np.float32(2.5))) is np.float32

    @pytest.mark.parametrize('x, y, expected', [
        (1.0, 10.0, 1024.0),
        (-3.0, -2.0, -0.75),
        (1.0, 1e6, np.inf),
        (-1.0, -1e6, -0.0),
        (-3.0, np.inf, -np.inf),
        (3.0, -np.inf, 0.0),
    ])
    def test_scalb(self, x, y, expected):
        result = f64(FN.scalb)(np.float64(x), np.float64(y))
        assert result == expected
        assert np.signbit(result) == np.signbit(expected)

    @pytest.mark.parametrize('x, y', [(0.0, np.inf), (np.inf, -np.inf), (1.0, 0.5), (np.nan, 1.0)])
    def test_scalb_nan(self, x, y):
        assert np.isnan(f64(FN.scalb)(np.float64(x), np.float64(y)))
