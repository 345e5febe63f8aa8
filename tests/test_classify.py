import pytest

from fpcheck.numeric.conversion import decode_float, Bits
from fpcheck.arithmetic.ieee754 import binary32, binary64
from fpcheck.engine.classify import Cmp, classify


def c(e, a, ctx=binary64, **kwargs):
    return classify(decode_float(e, ctx), decode_float(a, ctx), ctx, **kwargs)


class TestClassify(object):

    @pytest.mark.parametrize('e, a', [
        ('nan', 'nan'),
        ('nan', '-nan'),
        ('nan', Bits(0x7ff0000000000001)),
        (Bits(0xfff8000000000123), 'nan'),
        ('inf', 'inf'),
        ('-inf', '-inf'),
        ('0', '0'),
        ('0', '-0'),
        ('-0', '0'),
    ])
    def test_match(self, e, a):
        assert c(e, a) == (Cmp.MATCH, None)

    @pytest.mark.parametrize('e, a, reason', [
        ('nan', '1', 'expected NaN'),
        ('nan', 'inf', 'expected NaN'),
        ('1', 'nan', 'unexpected NaN'),
        ('inf', '-inf', 'infinity of the wrong sign'),
        ('inf', '0x1.fffffffffffffp+1023', 'expected infinity'),
        ('0x1.fffffffffffffp+1023', 'inf', 'unexpected infinity'),
        ('-0', 'inf', 'unexpected infinity'),
    ])
    def test_mismatch(self, e, a, reason):
        assert c(e, a) == (Cmp.MISMATCH, reason)

    @pytest.mark.parametrize('e, a', [
        ('1', '1'),
        ('1', '2'),
        ('0', '0x1p-1074'),
        ('2', '-2'),
        ('0x1p-1074', '0'),
    ])
    def test_defer(self, e, a):
        assert c(e, a) == (Cmp.DEFER, None)

    def test_signed_zero(self):
        assert c('0', '-0', signed_zero=True) == (Cmp.MISMATCH, 'zero of the wrong sign')
        assert c('-0', '0', signed_zero=True) == (Cmp.MISMATCH, 'zero of the wrong sign')
        assert c('-0', '-0', signed_zero=True) == (Cmp.MATCH, None)
        assert c('0', '-0', signed_zero=False) == (Cmp.MATCH, None)

    def test_signed_zero_does_not_affect_nonzero(self):
        assert c('0', '0x1p-1074', signed_zero=True) == (Cmp.DEFER, None)
        assert c('-0x1p-1074', '-0', signed_zero=True) == (Cmp.DEFER, None)
        assert c('2', '-2', signed_zero=True) == (Cmp.DEFER, None)

    @pytest.mark.parametrize('e, a, reason', [
        ('-0', '0x1p-1074', 'nonzero of the wrong sign, expected a zero'),
        ('0', '-0x1p-1074', 'nonzero of the wrong sign, expected a zero'),
        ('-0x1p-1074', '0', 'zero of the wrong sign'),
        ('0x1p-1022', '-0', 'zero of the wrong sign'),
    ])
    def test_signed_zero_next_to_nonzero(self, e, a, reason):
        assert c(e, a, signed_zero=True) == (Cmp.MISMATCH, reason)
        assert c(e, a, signed_zero=False) == (Cmp.DEFER, None)

    def test_flush_subnormals(self):
        assert c('0x1p-1074', '0', flush_subnormals=True) == (Cmp.MATCH, None)
        assert c('-0x1p-1040', '-0', flush_subnormals=True) == (Cmp.MATCH, None)
        # sign must agree
        assert c('0x1p-1074', '-0', flush_subnormals=True) == (Cmp.DEFER, None)
        # normals are never flushed
        assert c('0x1p-1022', '0', flush_subnormals=True) == (Cmp.DEFER, None)

    def test_binary32(self):
        assert c('nan', Bits(0x7f800001), ctx=binary32) == (Cmp.MATCH, None)
        assert c('-inf', 'inf', ctx=binary32) == (Cmp.MISMATCH, 'infinity of the wrong sign')
