"""Run a table of vectors against a function under test and collect a Verdict.

The driver never changes the floating-point environment. It reads the
ambient rounding mode so that results computed under the wrong mode can be
recognized when reading the verdict.
"""

import sys
from enum import Enum
from typing import NamedTuple, Any

import numpy as np

from ..numeric import utils
from ..numeric import fenv
from ..numeric.ops import K, rm_names
from ..numeric.conversion import float_to_bits
from . import compare
from . import tolerance
from .classify import Cmp, classify


class Mismatch(Enum):
    TOLERANCE = 0
    SPECIAL = 1
    SIGN = 2
    INTEGER = 3


class Failure(NamedTuple):
    index: int
    output: int
    inputs: tuple
    expected: Any
    actual: Any
    kind: Mismatch
    distance: Any
    reason: str


class Verdict(object):
    """The outcome of running one table against one function."""

    def __init__(self, fn, ctx, ran, failures, max_ulps, ambient_rm, policy):
        self.fn = fn
        self.ctx = ctx
        self.ran = ran
        self.failures = tuple(failures)
        self.max_ulps = max_ulps
        self.ambient_rm = ambient_rm
        self.policy = policy

    @property
    def failed(self):
        """Number of vectors with at least one failing output."""
        return len({f.index for f in self.failures})

    @property
    def passed(self):
        return self.failed == 0

    def __repr__(self):
        return '{}(fn={}, ctx={}, ran={}, failed={}, max_ulps={}, ambient_rm={})'.format(
            type(self).__name__, self.fn.name, repr(self.ctx), self.ran, self.failed,
            repr(self.max_ulps), rm_names[self.ambient_rm],
        )

    def _key(self):
        return (self.fn, self.ctx, self.ran, self.failures, self.max_ulps, self.ambient_rm, self.policy)

    def __eq__(self, other):
        if isinstance(other, Verdict):
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self):
        return hash(self._key())


def _unpack(result, shape, fn):
    nout = len(shape.outputs)
    if nout == 1:
        return (result,)
    try:
        outputs = tuple(result)
    except TypeError:
        raise utils.ShapeError('{} should return {} outputs, got {}'.format(fn.name, nout, repr(result)))
    if len(outputs) != nout:
        raise utils.ShapeError('{} should return {} outputs, got {}'.format(fn.name, nout, len(outputs)))
    return outputs


def _to_int(x):
    if isinstance(x, (int, np.integer)) and not isinstance(x, bool):
        return int(x)
    try:
        f = float(x)
    except (TypeError, ValueError):
        return None
    if f.is_integer():
        return int(f)
    else:
        return None


class _Run(object):
    """Accumulates the failures of one run."""

    def __init__(self, table, policy):
        self.table = table
        self.policy = policy
        self.ctx = table.ctx
        self.failures = []
        self.max_ulps = 0

    def fail(self, v, output, actual, kind, distance, reason):
        self.failures.append(Failure(v.index, output, v.inputs, v.expected[output], actual, kind, distance, reason))

    def check_float(self, v, output, x):
        ctx = self.ctx
        expected = v.expected[output]
        actual = float_to_bits(ctx.coerce(x), ctx)

        cmp, reason = classify(expected, actual, ctx,
                               signed_zero=self.policy.signed_zero,
                               flush_subnormals=self.policy.flush_subnormals)
        if cmp == Cmp.MATCH:
            return
        elif cmp == Cmp.MISMATCH:
            self.fail(v, output, actual, Mismatch.SPECIAL, None, reason)
            return

        distance = compare.ulp_distance(expected, actual, ctx)
        if distance == compare.UNBOUNDED:
            self.fail(v, output, actual, Mismatch.SIGN, distance, 'result has the wrong sign')
            return

        self.max_ulps = max(self.max_ulps, distance)
        if not compare.within(distance, self.policy.max_ulps):
            self.fail(v, output, actual, Mismatch.TOLERANCE, distance,
                      '{} ulps, accepted {}'.format(distance, self.policy.max_ulps))

    def check_int(self, v, output, x):
        expected = v.expected[output]
        actual = _to_int(x)
        if actual is None:
            self.fail(v, output, None, Mismatch.INTEGER, None, 'not an integer: {}'.format(repr(x)))
        elif not tolerance.int_outputs_match(self.table.fn, output, expected, actual):
            self.fail(v, output, actual, Mismatch.INTEGER, None, 'expected {}, got {}'.format(expected, actual))


def run(table, fut, policy=None):
    """Call fut on every vector in table and check each output against policy.
    The default policy is tolerance.policy(table.fn).

    Numeric failures are recorded and the run continues. A function returning
    the wrong number of outputs raises ShapeError; exceptions from fut propagate.
    """
    if policy is None:
        policy = tolerance.policy(table.fn)

    shape = table.shape
    if len(policy.checked) != len(shape.outputs):
        raise utils.ShapeError('policy checks {} outputs, but {} returns {}'
                               .format(len(policy.checked), table.fn.name, len(shape.outputs)))

    ambient_rm = fenv.current().rm
    if policy.rounding is not None and policy.rounding != ambient_rm:
        print('Warning: {} expects rounding mode {}, running under {}'
              .format(table.name, rm_names[policy.rounding], rm_names[ambient_rm]),
              file=sys.stderr, flush=True)

    state = _Run(table, policy)
    ran = 0
    for v in table:
        outputs = _unpack(fut(*v.args), shape, table.fn)
        ran += 1
        for i, (kind, x) in enumerate(zip(shape.outputs, outputs)):
            if not policy.checked[i] or v.expected[i] is None:
                continue
            if kind == K.FLOAT:
                state.check_float(v, i, x)
            else:
                state.check_int(v, i, x)

    return Verdict(table.fn, table.ctx, ran, state.failures, state.max_ulps, ambient_rm, policy)
