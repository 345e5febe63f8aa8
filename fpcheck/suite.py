"""Run the built-in vectors against one of the libm backends.

    python -m fpcheck.suite --precision binary64 --backend mpfr
    python -m fpcheck.suite --precision binary32 --backend numpy sin cos tan
"""

import sys
import argparse

from .numeric import utils
from .numeric import fenv
from .arithmetic import evalctx
from .arithmetic import ieee754
from .arithmetic import np as np_libm
from .arithmetic import reference
from .engine import driver
from .engine import report
from .engine import tolerance
from .data import vectors


backends = {
    np_libm.Libm.name: np_libm.Libm,
    reference.Libm.name: reference.Libm,
}


def run_suite(ctx, libm, fns=None, max_ulps=None, flush_subnormals=False, progress=None):
    """Run every built-in table for ctx against libm, in the current environment.
    Returns the verdicts, and the names and reasons of functions libm does not provide.
    """
    verdicts = []
    skipped = []
    for table in vectors.tables(ctx, fns):
        try:
            fut = libm.lookup(table.fn, ctx)
        except utils.UnsupportedFunction as e:
            skipped.append((table.fn.name, str(e)))
            if progress is not None:
                print('-', end='', file=progress, flush=True)
            continue

        policy = tolerance.policy(table.fn)
        if max_ulps is not None and policy.max_ulps > 0:
            policy = policy.let(max_ulps=max_ulps)
        if flush_subnormals:
            policy = policy.let(flush_subnormals=True)

        verdict = driver.run(table, fut, policy)
        verdicts.append(verdict)
        if progress is not None:
            print('.' if verdict.passed else '!', end='', file=progress, flush=True)

    if progress is not None:
        print(file=progress, flush=True)
    return verdicts, skipped


def main(argv=None):
    parser = argparse.ArgumentParser(description='check libm functions against built-in test vectors')
    parser.add_argument('--precision', type=str, default='binary64',
                        help='floating-point format, such as binary32, binary64 or extended')
    parser.add_argument('--backend', type=str, default=reference.Libm.name, choices=sorted(backends),
                        help='implementation to check')
    parser.add_argument('--round', type=str, default='RNE',
                        help='rounding mode of the environment the functions run in')
    parser.add_argument('--max-ulps', type=int, default=None,
                        help='override the accepted error of inexact functions')
    parser.add_argument('--flush-subnormals', action='store_true',
                        help='accept zero where a subnormal is expected')
    parser.add_argument('--every', action='store_true',
                        help='show every failure, not just the first for each function')
    parser.add_argument('--quiet', action='store_true',
                        help='only show functions that fail')
    parser.add_argument('fns', nargs='*',
                        help='functions to check, by C name (default: all)')
    args = parser.parse_args(argv)

    try:
        ctx = ieee754.named_ctx(args.precision)
        rm = evalctx.parse_rm(args.round)
        libm = backends[args.backend]
        with fenv.scoped_env(rm=rm):
            verdicts, skipped = run_suite(ctx, libm, fns=args.fns or None, max_ulps=args.max_ulps,
                                          flush_subnormals=args.flush_subnormals, progress=sys.stderr)
    except (utils.UnsupportedFormat, ValueError) as e:
        print('fpcheck: {}'.format(e), file=sys.stderr)
        return 2

    for verdict in verdicts:
        if not (args.quiet and verdict.passed):
            report.print_verdict(verdict, every=args.every)
    for name, reason in skipped:
        if not args.quiet:
            print('{} {}: skipped, {}'.format(name, ctx.name, reason))

    failed = [v for v in verdicts if not v.passed]
    print('{:d} functions checked with {}, {:d} failed, {:d} skipped'
          .format(len(verdicts), libm.name, len(failed), len(skipped)))

    if failed:
        return 1
    else:
        return 0


if __name__ == '__main__':
    sys.exit(main())
