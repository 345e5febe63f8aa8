import pytest

from fpcheck.numeric import utils
from fpcheck.numeric import fenv
from fpcheck.numeric.ops import FN
from fpcheck.arithmetic import ieee754
from fpcheck.arithmetic.ieee754 import binary16, binary32, binary64
from fpcheck.arithmetic import np as np_libm
from fpcheck.arithmetic import reference
from fpcheck.engine import driver, report
from fpcheck.data import vectors


def check_tables(ctx, libm):
    checked = 0
    with fenv.scoped_env():
        for table in vectors.tables(ctx):
            try:
                fut = libm.lookup(table.fn, ctx)
            except utils.UnsupportedFunction:
                continue
            verdict = driver.run(table, fut)
            assert verdict.ran == len(table)
            assert verdict.passed, '\n'.join(
                [report.summary(verdict)] + [report.describe(f, table.fn, ctx) for f in verdict.failures])
            checked += 1
    return checked


class TestBuiltinTables(object):

    def test_every_function_has_vectors(self):
        assert set(vectors.generic) == set(FN)
        for fn in FN:
            assert len(vectors.generic[fn]) > 0

    @pytest.mark.parametrize('ctx', [binary32, binary64], ids=lambda ctx: ctx.name)
    def test_tables_decode(self, ctx):
        tables = list(vectors.tables(ctx))
        assert [t.fn for t in tables] == list(FN)
        assert all(t.ctx is ctx for t in tables)

    def test_format_specific_rows(self):
        assert len(vectors.rows(FN.exp, binary64)) == len(vectors.generic[FN.exp]) + 1
        assert len(vectors.rows('exp', binary32)) == len(vectors.generic[FN.exp]) + 1

    def test_select(self):
        tables = list(vectors.tables(binary64, ['sin', FN.cos, 'acos']))
        assert [t.fn for t in tables] == [FN.acos, FN.cos, FN.sin]

    def test_too_narrow(self):
        with pytest.raises(utils.UnsupportedFormat):
            list(vectors.tables(binary16))

    def test_binary64_reference(self):
        assert check_tables(binary64, reference.Libm) == len(FN)

    def test_binary64_numpy(self):
        assert check_tables(binary64, np_libm.Libm) > 0

    def test_binary32_reference(self):
        assert check_tables(binary32, reference.Libm) == len(FN)

    def test_extended_reference(self):
        if ieee754.extended is None:
            pytest.skip('long double layout not supported')
        assert check_tables(ieee754.extended, reference.Libm) == len(FN)
