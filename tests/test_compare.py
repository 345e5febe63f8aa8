import random

import pytest

from fpcheck.numeric.conversion import decode_float
from fpcheck.arithmetic import ieee754
from fpcheck.arithmetic.ieee754 import binary16, binary32, binary64
from fpcheck.engine.compare import ulp_distance, within, UNBOUNDED


formats = [binary16, binary32, binary64]
if ieee754.extended is not None:
    formats.append(ieee754.extended)


def d(e, a, ctx=binary64):
    return ulp_distance(decode_float(e, ctx), decode_float(a, ctx), ctx)


def random_finite(ctx, rng):
    while True:
        i = rng.getrandbits(ctx.nbits)
        if ieee754.is_finite(i, ctx) and not ieee754.is_zero(i, ctx):
            return i


class TestDistance(object):

    @pytest.mark.parametrize('e, a, distance', [
        ('2', '2', 0),
        ('2', '0x1.0000000000001p+1', 1),
        ('0x1.0000000000001p+1', '2', 1),
        # across a binade boundary
        ('2', '0x1.fffffffffffffp+0', 1),
        ('0x1.fffffffffffffp+0', '0x1.0000000000001p+1', 2),
        # across the normal/subnormal boundary
        ('0x1p-1022', '0x0.fffffffffffffp-1022', 1),
        # through zero
        ('0', '0x1p-1074', 1),
        ('-0', '0x1p-1074', 1),
        ('0x1p-1074', '-0x1p-1074', UNBOUNDED),
        ('0', '-0', 0),
        ('0', '-0x1p-1074', 1),
        ('2', '-2', UNBOUNDED),
    ])
    def test_binary64(self, e, a, distance):
        assert d(e, a) == distance

    @pytest.mark.parametrize('ctx', formats, ids=lambda ctx: ctx.name)
    def test_successor(self, ctx):
        rng = random.Random(ctx.nbits)
        for _ in range(200):
            i = random_finite(ctx, rng)
            j = i + 1
            if ieee754.is_finite(j, ctx) and ieee754.is_negative(j, ctx) == ieee754.is_negative(i, ctx):
                assert ulp_distance(i, j, ctx) == 1

    @pytest.mark.parametrize('ctx', formats, ids=lambda ctx: ctx.name)
    def test_identity_and_symmetry(self, ctx):
        rng = random.Random(ctx.nbits + 1)
        for _ in range(200):
            i = random_finite(ctx, rng)
            j = random_finite(ctx, rng)
            assert ulp_distance(i, i, ctx) == 0
            assert ulp_distance(i, j, ctx) == ulp_distance(j, i, ctx)

    @pytest.mark.parametrize('lit', ['nan', 'inf', '-inf'])
    def test_nonfinite(self, lit):
        with pytest.raises(ValueError):
            d(lit, '1')
        with pytest.raises(ValueError):
            d('1', lit)

    def test_binary32(self):
        assert d('1', '0x1.000002p+0', binary32) == 1
        assert d('0x1p-149', '0x1p-126', binary32) == (1 << 23) - 1


class TestWithin(object):

    @pytest.mark.parametrize('distance, max_ulps, ok', [
        (0, 0, True),
        (1, 0, False),
        (1, 1, True),
        (2, 1, False),
        (UNBOUNDED, 10 ** 9, False),
    ])
    def test_within(self, distance, max_ulps, ok):
        assert within(distance, max_ulps) == ok

    @pytest.mark.parametrize('distance', [0, 1, 2, 5])
    def test_monotonic(self, distance):
        passing = [within(distance, n) for n in range(10)]
        assert passing == sorted(passing)
        assert passing[distance]
