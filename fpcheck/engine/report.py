"""Text rendering of verdicts."""

import sys

from ..numeric.ops import K, shapes
from ..arithmetic import ieee754


def _show(x, kind, ctx):
    if x is None:
        return '--'
    elif kind == K.FLOAT:
        return ieee754.hexstr(x, ctx)
    else:
        return str(x)


def summary(verdict):
    if verdict.passed:
        status = 'ok'
    else:
        status = 'FAILED'
    return '{} {}: {:d} run, {:d} failed, max {} ulps [{}]'.format(
        verdict.fn.name, verdict.ctx.name, verdict.ran, verdict.failed, verdict.max_ulps, status,
    )


def describe(failure, fn, ctx):
    """One line per failing output, with enough detail to reproduce it."""
    shape = shapes[fn]
    args = ', '.join(_show(x, kind, ctx) for x, kind in zip(failure.inputs, shape.inputs))
    kind = shape.outputs[failure.output]
    if len(shape.outputs) > 1:
        which = '[{}]'.format(failure.output)
    else:
        which = ''

    s = '  #{:d} {}({}){}: expected {}, got {}: {}'.format(
        failure.index, fn.name, args, which,
        _show(failure.expected, kind, ctx), _show(failure.actual, kind, ctx),
        failure.kind.name.lower(),
    )
    if failure.reason:
        s += ', ' + failure.reason
    return s


def print_verdict(verdict, every=True, file=None):
    """Print a summary line and the failures: all of them, or only the first."""
    if file is None:
        file = sys.stdout
    print(summary(verdict), file=file, flush=True)
    failures = verdict.failures if every else verdict.failures[:1]
    for failure in failures:
        print(describe(failure, verdict.fn, verdict.ctx), file=file)
    if failures:
        file.flush()
