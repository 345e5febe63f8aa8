import io

import numpy as np
import pytest

from fpcheck.numeric import utils
from fpcheck.numeric import fenv
from fpcheck.numeric.ops import FN, RM
from fpcheck.numeric.conversion import float_from_bits
from fpcheck.arithmetic.ieee754 import binary32, binary64
from fpcheck.engine import tolerance, report
from fpcheck.engine.compare import UNBOUNDED
from fpcheck.engine.driver import run, Mismatch, Verdict
from fpcheck.engine.table import Table


def const(*values):
    """A function under test that ignores its operands."""
    def f(*args):
        if len(values) == 1:
            return values[0]
        return values
    return f


sqrt_table = Table(FN.sqrt, binary64, [('2', '4')])
exact = tolerance.policy(FN.sqrt).let(max_ulps=0)


class TestScenarios(object):

    def test_exact_result(self):
        verdict = run(sqrt_table, const(np.float64(2.0)), exact)
        assert verdict.ran == 1
        assert verdict.failed == 0
        assert verdict.passed
        assert verdict.max_ulps == 0

    def test_one_ulp_off(self):
        fut = const(np.float64(2.0000000000000004))
        verdict = run(sqrt_table, fut, exact.let(max_ulps=1))
        assert verdict.failed == 0
        assert verdict.max_ulps == 1

        verdict = run(sqrt_table, fut, exact)
        assert verdict.failed == 1
        failure, = verdict.failures
        assert failure.kind == Mismatch.TOLERANCE
        assert failure.distance == 1
        assert failure.expected == 0x4000000000000000
        assert failure.actual == 0x4000000000000001

    def test_nan_payloads_match(self):
        table = Table(FN.sqrt, binary64, [('nan', '-1')])
        other_nan = float_from_bits(0xfff8000000000123, binary64)
        verdict = run(table, const(other_nan), exact)
        assert verdict.failed == 0

    def test_wrong_zero_sign(self):
        table = Table(FN.sin, binary64, [('0', '0')])
        policy = tolerance.policy(FN.sin)
        assert policy.signed_zero
        verdict = run(table, const(np.float64(-0.0)), policy)
        assert verdict.failed == 1
        assert verdict.failures[0].kind == Mismatch.SPECIAL
        assert verdict.failures[0].reason == 'zero of the wrong sign'

        verdict = run(table, const(np.float64(-0.0)), policy.let(signed_zero=False))
        assert verdict.failed == 0

    def test_sign_error_next_to_zero(self):
        table = Table(FN.sin, binary64, [('-0', '-0')])
        tiny = float_from_bits(1, binary64)
        verdict = run(table, const(tiny))
        assert verdict.failed == 1
        assert verdict.failures[0].kind == Mismatch.SPECIAL
        assert verdict.failures[0].reason == 'nonzero of the wrong sign, expected a zero'

        # without signed zeros the distance is measured through zero
        verdict = run(table, const(tiny), tolerance.policy(FN.sin).let(signed_zero=False))
        assert verdict.passed
        assert verdict.max_ulps == 1

    def test_pow_keeps_the_sign_of_zero(self):
        table = Table(FN.pow, binary64, [('-0', '-0', '3')])
        assert run(table, np.power).passed
        verdict = run(table, const(np.float64(0.0)))
        assert verdict.failed == 1
        assert verdict.failures[0].reason == 'zero of the wrong sign'

    @pytest.mark.parametrize('max_ulps', [0, 1, 2, 10 ** 6, 2 ** 64])
    def test_opposite_sign_always_fails(self, max_ulps):
        table = Table(FN.cbrt, binary64, [('2', '8')])
        verdict = run(table, const(np.float64(-2.0)), tolerance.policy(FN.cbrt).let(max_ulps=max_ulps))
        assert verdict.failed == 1
        assert verdict.failures[0].kind == Mismatch.SIGN
        assert verdict.failures[0].distance == UNBOUNDED


class TestProperties(object):

    def test_idempotent(self):
        table = Table(FN.log, binary64, [('0', '1'), ('nan', '-1'), ('1', '2'), ('-inf', '0')])

        def fut(x):
            with np.errstate(all='ignore'):
                return np.log(x)

        assert run(table, fut) == run(table, fut)

    def test_idempotent_with_failures(self):
        table = Table(FN.sqrt, binary64, [('1', '4'), ('2', 'nan')])
        fut = const(np.float64(np.nan))
        first = run(table, fut)
        second = run(table, fut)
        assert first.failed == 2
        assert first == second
        assert hash(first) == hash(second)

    @pytest.mark.parametrize('distance', [0, 1, 3, 17])
    def test_tolerance_monotonic(self, distance):
        table = Table(FN.exp, binary64, [('1', '0')])
        actual = float_from_bits(0x3ff0000000000000 + distance, binary64)
        results = [run(table, const(actual), tolerance.policy(FN.exp).let(max_ulps=n)).passed
                   for n in range(20)]
        assert results == sorted(results)
        assert results[distance]
        if distance > 0:
            assert not results[distance - 1]

    def test_failures_do_not_stop_the_run(self):
        table = Table(FN.exp, binary64, [('1', '0'), ('2', '0'), ('1', '0')])
        verdict = run(table, const(np.float64(1.0)))
        assert verdict.ran == 3
        assert verdict.failed == 1
        assert verdict.failures[0].index == 1


class TestOutputs(object):

    def test_python_floats_are_accepted(self):
        verdict = run(sqrt_table, const(2.0), exact)
        assert verdict.passed

    def test_narrow_table(self):
        table = Table(FN.sqrt, binary32, [('2', '4'), ('0x1.6a09e6p+0', '2')])
        verdict = run(table, np.sqrt)
        assert verdict.passed

    def test_multi_output(self):
        table = Table(FN.frexp, binary64, [('0.5', 11, '1024'), ('-0.75', 2, '-3')])
        verdict = run(table, np.frexp)
        assert verdict.passed

        verdict = run(table, const(np.float64(0.5), 3))
        assert verdict.failed == 2
        kinds = [(f.index, f.output, f.kind) for f in verdict.failures]
        assert kinds == [(0, 1, Mismatch.INTEGER), (1, 0, Mismatch.SIGN), (1, 1, Mismatch.INTEGER)]

    def test_dont_care(self):
        table = Table(FN.lgamma_r, binary64, [(None, -1, '-0.5')])
        verdict = run(table, const(np.float64(123.0), -1))
        assert verdict.passed
        verdict = run(table, const(np.float64(123.0), 1))
        assert verdict.failed == 1

    def test_unchecked_output(self):
        table = Table(FN.frexp, binary64, [('0.5', 11, '1024')])
        policy = tolerance.policy(FN.frexp).let(checked=(True, False))
        verdict = run(table, const(np.float64(0.5), 99), policy)
        assert verdict.passed

    def test_remquo_low_bits(self):
        table = Table(FN.remquo, binary64, [('1', 99, '397', '4')])
        assert run(table, const(np.float64(1.0), 3)).passed
        assert run(table, const(np.float64(1.0), 99)).passed
        assert not run(table, const(np.float64(1.0), -3)).passed
        assert not run(table, const(np.float64(1.0), 2)).passed

    def test_integer_output_not_an_integer(self):
        table = Table(FN.ilogb, binary64, [(10, '1024')])
        verdict = run(table, const(1.5))
        assert verdict.failed == 1
        failure, = verdict.failures
        assert failure.kind == Mismatch.INTEGER
        assert failure.actual is None

        assert run(table, const(np.int32(10))).passed
        assert run(table, const(10.0)).passed

    def test_special_mismatch(self):
        table = Table(FN.exp, binary64, [('inf', '1e6')])
        verdict = run(table, const(np.float64(1e300)))
        assert verdict.failures[0].kind == Mismatch.SPECIAL
        assert verdict.failures[0].reason == 'expected infinity'


class TestStructuralErrors(object):

    def test_too_few_outputs(self):
        table = Table(FN.frexp, binary64, [('0.5', 11, '1024')])
        with pytest.raises(utils.ShapeError):
            run(table, const(np.float64(0.5)))

    def test_too_many_outputs(self):
        table = Table(FN.sincos, binary64, [('0', '1', '0')])
        with pytest.raises(utils.ShapeError):
            run(table, const(np.float64(0.0), np.float64(1.0), np.float64(1.0)))

    def test_policy_shape(self):
        with pytest.raises(utils.ShapeError):
            run(sqrt_table, const(np.float64(2.0)), tolerance.policy(FN.frexp))

    def test_exceptions_propagate(self):
        def fut(x):
            raise ZeroDivisionError('broken')
        with pytest.raises(ZeroDivisionError):
            run(sqrt_table, fut)


class TestEnvironment(object):

    def test_ambient_rounding_is_recorded(self):
        with fenv.scoped_env(rm=RM.RTZ):
            verdict = run(sqrt_table, const(np.float64(2.0)))
        assert verdict.ambient_rm == RM.RTZ
        assert run(sqrt_table, const(np.float64(2.0))).ambient_rm == RM.RNE

    def test_warning_on_rounding_mismatch(self, capsys):
        with fenv.scoped_env(rm=RM.RTP):
            run(sqrt_table, const(np.float64(2.0)))
        captured = capsys.readouterr()
        assert captured.err == ('Warning: sqrt/float(11,64)/float64 expects rounding mode RNE, '
                                'running under RTP\n')
        assert captured.out == ''

    def test_no_warning_for_mode_independent_functions(self, capsys):
        table = Table(FN.fabs, binary64, [('1', '-1')])
        with fenv.scoped_env(rm=RM.RTP):
            run(table, np.fabs)
        assert capsys.readouterr().err == ''


class TestReport(object):

    def test_summary(self):
        verdict = run(sqrt_table, const(np.float64(2.0)), exact)
        assert report.summary(verdict) == 'sqrt float(11,64)/float64: 1 run, 0 failed, max 0 ulps [ok]'

    def test_failures(self):
        table = Table(FN.sqrt, binary64, [('2', '4'), ('3', '9')])
        verdict = run(table, const(np.float64(2.0000000000000004)), exact)
        assert report.summary(verdict) == 'sqrt float(11,64)/float64: 2 run, 2 failed, max 2251799813685247 ulps [FAILED]'

        out = io.StringIO()
        report.print_verdict(verdict, every=False, file=out)
        lines = out.getvalue().splitlines()
        assert len(lines) == 2
        assert lines[1] == '  #0 sqrt(0x1p+2): expected 0x1p+1, got 0x1.0000000000001p+1: tolerance, 1 ulps, accepted 0'

        out = io.StringIO()
        report.print_verdict(verdict, file=out)
        assert len(out.getvalue().splitlines()) == 3

    def test_describe_multi_output(self):
        table = Table(FN.frexp, binary64, [('0.5', 11, '1024')])
        verdict = run(table, const(np.float64(0.5), 3))
        line = report.describe(verdict.failures[0], FN.frexp, binary64)
        assert line == '  #0 frexp(0x1p+10)[1]: expected 11, got 3: integer, expected 11, got 3'

    def test_print_to_stdout(self, capsys):
        report.print_verdict(run(sqrt_table, const(np.float64(2.0))))
        assert capsys.readouterr().out.startswith('sqrt float(11,64)/float64: 1 run')

    def test_verdict_repr(self):
        verdict = run(sqrt_table, const(np.float64(2.0)))
        assert isinstance(verdict, Verdict)
        assert repr(verdict).startswith('Verdict(fn=sqrt, ')

    def test_verdict_repr_short_rounding_name(self):
        with fenv.scoped_env(rm=RM.RTZ):
            verdict = run(sqrt_table, const(np.float64(2.0)))
        assert repr(verdict).endswith(', ambient_rm=RTZ)')
