"""Built-in test vectors.

Rows are (expected..., inputs...), the same layout Table expects. The rows in
generic hold in every format from binary32 up: their results are exact, or
special values. Rows for particular formats hold correctly rounded results
such as pi, e, ln 2 and sqrt 2 in that format.
"""

from ..numeric import utils
from ..numeric.ops import FN, lookup_fn
from ..engine.table import Table


# binary64
PI_64 = '0x1.921fb54442d18p+1'
PI_2_64 = '0x1.921fb54442d18p+0'
PI_4_64 = '0x1.921fb54442d18p-1'
E_64 = '0x1.5bf0a8b145769p+1'
LN2_64 = '0x1.62e42fefa39efp-1'
SQRT2_64 = '0x1.6a09e667f3bcdp+0'

# binary32
PI_32 = '0x1.921fb6p+1'
PI_2_32 = '0x1.921fb6p+0'
PI_4_32 = '0x1.921fb6p-1'
E_32 = '0x1.5bf0a8p+1'
LN2_32 = '0x1.62e430p-1'
SQRT2_32 = '0x1.6a09e6p+0'


generic = {
    # trigonometry
    FN.acos: [
        ('0', '1'),
        ('nan', '2'),
        ('nan', '-1.5'),
        ('nan', 'nan'),
    ],
    FN.asin: [
        ('0', '0'),
        ('-0', '-0'),
        ('nan', '2'),
        ('nan', 'nan'),
    ],
    FN.atan: [
        ('0', '0'),
        ('-0', '-0'),
        ('0x1p-100', '0x1p-100'),
        ('nan', 'nan'),
    ],
    FN.atan2: [
        ('0', '0', '1'),
        ('-0', '-0', '1'),
        ('nan', 'nan', '1'),
        ('nan', '1', 'nan'),
    ],
    FN.sin: [
        ('0', '0'),
        ('-0', '-0'),
        ('0x1p-100', '0x1p-100'),
        ('-0x1p-100', '-0x1p-100'),
        ('nan', 'inf'),
        ('nan', '-inf'),
        ('nan', 'nan'),
    ],
    FN.cos: [
        ('1', '0'),
        ('1', '-0'),
        ('1', '0x1p-100'),
        ('nan', 'inf'),
        ('nan', 'nan'),
    ],
    FN.tan: [
        ('0', '0'),
        ('-0', '-0'),
        ('0x1p-100', '0x1p-100'),
        ('nan', 'inf'),
        ('nan', 'nan'),
    ],
    FN.sincos: [
        ('0', '1', '0'),
        ('-0', '1', '-0'),
        ('0x1p-100', '1', '0x1p-100'),
        ('nan', 'nan', 'inf'),
        ('nan', 'nan', 'nan'),
    ],

    # hyperbolic
    FN.sinh: [
        ('0', '0'),
        ('-0', '-0'),
        ('0x1p-100', '0x1p-100'),
        ('inf', 'inf'),
        ('-inf', '-inf'),
        ('nan', 'nan'),
    ],
    FN.cosh: [
        ('1', '0'),
        ('1', '-0'),
        ('inf', 'inf'),
        ('inf', '-inf'),
        ('nan', 'nan'),
    ],
    FN.tanh: [
        ('0', '0'),
        ('-0', '-0'),
        ('1', '100'),
        ('-1', '-100'),
        ('1', 'inf'),
        ('-1', '-inf'),
        ('nan', 'nan'),
    ],
    FN.asinh: [
        ('0', '0'),
        ('-0', '-0'),
        ('inf', 'inf'),
        ('-inf', '-inf'),
        ('nan', 'nan'),
    ],
    FN.acosh: [
        ('0', '1'),
        ('nan', '0.5'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],
    FN.atanh: [
        ('0', '0'),
        ('-0', '-0'),
        ('inf', '1'),
        ('-inf', '-1'),
        ('nan', '2'),
        ('nan', 'nan'),
    ],

    # exponentials and logarithms
    FN.exp: [
        ('1', '0'),
        ('1', '-0'),
        ('inf', '1e6'),
        ('0', '-1e6'),
        ('inf', 'inf'),
        ('0', '-inf'),
        ('nan', 'nan'),
    ],
    FN.exp2: [
        ('1', '0'),
        ('0x1p+10', '10'),
        ('0x1p-10', '-10'),
        ('inf', 'inf'),
        ('0', '-inf'),
        ('nan', 'nan'),
    ],
    FN.expm1: [
        ('0', '0'),
        ('-0', '-0'),
        ('-1', '-1e4'),
        ('inf', 'inf'),
        ('-1', '-inf'),
        ('nan', 'nan'),
    ],
    FN.log: [
        ('0', '1'),
        ('-inf', '0'),
        ('-inf', '-0'),
        ('nan', '-1'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],
    FN.log2: [
        ('0', '1'),
        ('3', '8'),
        ('-3', '0.125'),
        ('-140', '0x1p-140'),
        ('-inf', '0'),
        ('nan', '-1'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],
    FN.log10: [
        ('0', '1'),
        ('3', '1000'),
        ('-inf', '0'),
        ('nan', '-1'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],
    FN.log1p: [
        ('0', '0'),
        ('-0', '-0'),
        ('-inf', '-1'),
        ('nan', '-2'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],

    # powers and roots
    FN.pow: [
        ('8', '2', '3'),
        ('0.125', '2', '-3'),
        ('1', 'nan', '0'),
        ('1', 'nan', '-0'),
        ('1', '1', 'nan'),
        ('inf', '0', '-1'),
        ('-inf', '-0', '-1'),
        ('-0', '-0', '3'),
        ('0', '-0', '2'),
        ('nan', '-1', '0.5'),
        ('1', '-1', 'inf'),
        ('0', '0.5', 'inf'),
        ('nan', 'nan', '1'),
    ],
    FN.sqrt: [
        ('2', '4'),
        ('0x1p-70', '0x1p-140'),
        ('0', '0'),
        ('-0', '-0'),
        ('nan', '-1'),
        ('inf', 'inf'),
        ('nan', '-inf'),
        ('nan', 'nan'),
    ],
    FN.cbrt: [
        ('3', '27'),
        ('-3', '-27'),
        ('0x1p-40', '0x1p-120'),
        ('0', '0'),
        ('-0', '-0'),
        ('inf', 'inf'),
        ('-inf', '-inf'),
        ('nan', 'nan'),
    ],
    FN.hypot: [
        ('5', '3', '4'),
        ('3', '-3', '0'),
        ('inf', 'inf', 'nan'),
        ('inf', 'nan', '-inf'),
        ('nan', 'nan', '1'),
    ],
    FN.fma: [
        ('7', '2', '3', '1'),
        ('0', '1', '1', '-1'),
        ('-0', '-0', '1', '-0'),
        ('inf', 'inf', '1', '1'),
        ('nan', 'inf', '0', '1'),
        ('nan', 'nan', '1', '1'),
    ],

    # special functions
    FN.erf: [
        ('0', '0'),
        ('-0', '-0'),
        ('1', '10'),
        ('-1', '-10'),
        ('1', 'inf'),
        ('-1', '-inf'),
        ('nan', 'nan'),
    ],
    FN.erfc: [
        ('1', '0'),
        ('2', '-10'),
        ('2', '-inf'),
        ('0', 'inf'),
        ('nan', 'nan'),
    ],
    FN.lgamma: [
        ('0', '1'),
        ('0', '2'),
        ('inf', '0'),
        ('inf', '-1'),
        ('inf', 'inf'),
        ('inf', '-inf'),
        ('nan', 'nan'),
    ],
    FN.lgamma_r: [
        ('0', 1, '1'),
        ('0', 1, '2'),
        ('inf', 1, '0'),
        ('inf', -1, '-0'),
        (None, -1, '-0.5'),
        (None, 1, '-1.5'),
        (None, -1, '-2.5'),
        ('inf', None, '-1'),
        ('inf', 1, 'inf'),
        ('nan', None, 'nan'),
    ],
    FN.tgamma: [
        ('1', '1'),
        ('1', '2'),
        ('24', '5'),
        ('inf', '0'),
        ('-inf', '-0'),
        ('nan', '-1'),
        ('nan', '-inf'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],

    # sign and magnitude
    FN.fabs: [
        ('1', '-1'),
        ('0', '-0'),
        ('inf', '-inf'),
        ('nan', 'nan'),
    ],
    FN.copysign: [
        ('-1', '1', '-0'),
        ('1', '-1', '0'),
        ('-inf', 'inf', '-1'),
        ('0', '-0', '1'),
        ('-0', '0', '-1'),
        ('nan', 'nan', '-1'),
    ],
    FN.fdim: [
        ('1', '3', '2'),
        ('0', '2', '3'),
        ('0', '-inf', '-inf'),
        ('inf', 'inf', '1'),
        ('nan', 'nan', '1'),
    ],
    FN.fmax: [
        ('2', '1', '2'),
        ('1', '1', 'nan'),
        ('1', 'nan', '1'),
        ('inf', '-inf', 'inf'),
        ('nan', 'nan', 'nan'),
    ],
    FN.fmin: [
        ('1', '1', '2'),
        ('1', 'nan', '1'),
        ('-inf', '-inf', 'inf'),
        ('nan', 'nan', 'nan'),
    ],
    FN.nextafter: [
        ('1', '1', '1'),
        ('-0', '0', '-0'),
        ('nan', 'nan', '1'),
        ('nan', '1', 'nan'),
    ],

    # rounding to integers
    FN.ceil: [
        ('2', '1.5'),
        ('-1', '-1.5'),
        ('-0', '-0.5'),
        ('1', '0x1p-140'),
        ('-0', '-0'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],
    FN.floor: [
        ('1', '1.5'),
        ('-2', '-1.5'),
        ('-1', '-0.5'),
        ('0', '0.5'),
        ('-0', '-0'),
        ('-inf', '-inf'),
        ('nan', 'nan'),
    ],
    FN.trunc: [
        ('1', '1.5'),
        ('-1', '-1.5'),
        ('-0', '-0.5'),
        ('0', '0.5'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],
    FN.round: [
        ('3', '2.5'),
        ('-3', '-2.5'),
        ('2', '1.5'),
        ('1', '0.5'),
        ('-0', '-0.4'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],
    FN.rint: [
        ('2', '2.5'),
        ('4', '3.5'),
        ('2', '1.5'),
        ('-2', '-2.5'),
        ('0', '0.5'),
        ('-0', '-0.5'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],
    FN.nearbyint: [
        ('2', '2.5'),
        ('4', '3.5'),
        ('2', '1.5'),
        ('-2', '-2.5'),
        ('0', '0.5'),
        ('-0', '-0.5'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],

    # decomposition
    FN.frexp: [
        ('0.5', 11, '1024'),
        ('0.5', -139, '0x1p-140'),
        ('-0.75', 2, '-3'),
        ('0', 0, '0'),
        ('-0', 0, '-0'),
        ('inf', None, 'inf'),
        ('nan', None, 'nan'),
    ],
    FN.modf: [
        ('0.75', '123', '123.75'),
        ('-0.5', '-1', '-1.5'),
        ('-0', '-2', '-2'),
        ('0', 'inf', 'inf'),
        ('-0', '-inf', '-inf'),
        ('nan', 'nan', 'nan'),
    ],
    FN.ilogb: [
        (10, '1024'),
        (-140, '0x1p-140'),
        (0, '1'),
        (1, '-3'),
        (2147483647, 'inf'),
        (2147483647, '-inf'),
        # implementation defined
        (None, '0'),
        (None, 'nan'),
    ],
    FN.logb: [
        ('10', '1024'),
        ('-140', '0x1p-140'),
        ('1', '-3'),
        ('-inf', '0'),
        ('inf', '-inf'),
        ('nan', 'nan'),
    ],
    FN.significand: [
        ('1.5', '6'),
        ('-1.5', '-0.75'),
        ('1', '0x1p-140'),
        ('0', '0'),
        ('inf', 'inf'),
        ('nan', 'nan'),
    ],
    FN.ldexp: [
        ('0x1p+10', '1', 10),
        ('-0x1p-140', '-1', -140),
        ('inf', '1', 100000),
        ('0', '1', -100000),
        ('-0', '-0', 5),
        ('inf', 'inf', -5),
        ('nan', 'nan', 1),
    ],
    FN.scalbn: [
        ('0x1p+10', '1', 10),
        ('-0x1p-140', '-1', -140),
        ('inf', '1', 100000),
        ('0', '1', -100000),
        ('-0', '-0', 5),
        ('nan', 'nan', 1),
    ],
    FN.scalb: [
        ('0x1p+10', '1', '10'),
        ('-0x1p-140', '-1', '-140'),
        ('inf', '1', '1e6'),
        ('-0', '-1', '-1e6'),
        ('-0', '-0', '5'),
        ('-inf', '-3', 'inf'),
        ('0', '3', '-inf'),
        ('nan', '0', 'inf'),
        ('nan', 'inf', '-inf'),
        ('nan', '1', '0.5'),
        ('nan', 'nan', '1'),
        ('nan', '1', 'nan'),
    ],

    # remainders
    FN.fmod: [
        ('1', '7', '3'),
        ('-1', '-7', '3'),
        ('1', '7', '-3'),
        ('0', '6', '3'),
        ('-0', '-6', '3'),
        ('1.5', '1.5', 'inf'),
        ('nan', '1', '0'),
        ('nan', 'inf', '1'),
        ('nan', 'nan', '1'),
    ],
    FN.remainder: [
        ('1', '13', '4'),
        ('-2', '14', '4'),
        ('2', '10', '4'),
        ('-1', '-13', '4'),
        ('-0', '-8', '4'),
        ('1', '1', 'inf'),
        ('nan', '1', '0'),
        ('nan', 'inf', '1'),
        ('nan', 'nan', '1'),
    ],
    FN.remquo: [
        ('1', 3, '13', '4'),
        ('-2', 4, '14', '4'),
        ('2', 2, '10', '4'),
        ('-1', -3, '-13', '4'),
        ('1', -3, '13', '-4'),
        ('1', 99, '397', '4'),
        ('nan', None, '1', '0'),
        ('nan', None, 'inf', '1'),
    ],
}


specific = {
    # binary64
    (11, 64): {
        FN.acos: [(PI_2_64, '0'), (PI_64, '-1')],
        FN.asin: [(PI_2_64, '1')],
        FN.atan: [(PI_2_64, 'inf'), ('-' + PI_2_64, '-inf'), (PI_4_64, '1')],
        FN.atan2: [(PI_64, '0', '-1'), ('-' + PI_64, '-0', '-1'), (PI_2_64, '1', '0'), (PI_4_64, '1', '1')],
        FN.sin: [('1', PI_2_64)],
        FN.cos: [('-1', PI_64)],
        FN.tan: [('0x1.fffffffffffffp-1', PI_4_64)],
        FN.exp: [(E_64, '1')],
        FN.exp2: [(SQRT2_64, '0.5')],
        FN.log: [(LN2_64, '2')],
        FN.log1p: [(LN2_64, '1')],
        FN.pow: [(SQRT2_64, '2', '0.5')],
        FN.sqrt: [(SQRT2_64, '2')],
        FN.hypot: [(SQRT2_64, '1', '1')],
        FN.round: [('0', '0x1.fffffffffffffp-2')],
        FN.nextafter: [
            ('0x1.0000000000001p+0', '1', '2'),
            ('0x1.fffffffffffffp-1', '1', '0'),
            ('0x0.0000000000001p-1022', '0', '1'),
            ('-0x0.0000000000001p-1022', '-0', '-1'),
        ],
        FN.fma: [('-0x1p-104', '0x1.0000000000001p+0', '0x1.ffffffffffffep-1', '-0x1p+0')],
    },
    # binary32
    (8, 32): {
        FN.acos: [(PI_2_32, '0'), (PI_32, '-1')],
        FN.asin: [(PI_2_32, '1')],
        FN.atan: [(PI_2_32, 'inf'), ('-' + PI_2_32, '-inf'), (PI_4_32, '1')],
        FN.atan2: [(PI_32, '0', '-1'), ('-' + PI_32, '-0', '-1'), (PI_2_32, '1', '0'), (PI_4_32, '1', '1')],
        FN.exp: [(E_32, '1')],
        FN.exp2: [(SQRT2_32, '0.5')],
        FN.log: [(LN2_32, '2')],
        FN.log1p: [(LN2_32, '1')],
        FN.pow: [(SQRT2_32, '2', '0.5')],
        FN.sqrt: [(SQRT2_32, '2')],
        FN.hypot: [(SQRT2_32, '1', '1')],
        FN.round: [('0', '0x1.fffffep-2')],
        FN.nextafter: [
            ('0x1.000002p+0', '1', '2'),
            ('0x1.fffffep-1', '1', '0'),
            ('0x1p-149', '0', '1'),
            ('-0x1p-149', '-0', '-1'),
        ],
        FN.fma: [('-0x1p-46', '0x1.000002p+0', '0x1.fffffcp-1', '-0x1p+0')],
    },
}


def rows(fn, ctx):
    """All built-in rows for fn in ctx's format."""
    if not isinstance(fn, FN):
        fn = lookup_fn(fn)
    if ctx.p < 24 or ctx.emax < 127:
        raise utils.UnsupportedFormat('built-in vectors need binary32 or wider, not {}'.format(ctx.name))
    return list(generic.get(fn, [])) + list(specific.get((ctx.es, ctx.nbits), {}).get(fn, []))


def tables(ctx, fns=None):
    """Yield a Table for every catalog function with built-in rows, in catalog order,
    or only for the functions named in fns.
    """
    if fns is None:
        fns = list(FN)
    else:
        fns = sorted(fn if isinstance(fn, FN) else lookup_fn(fn) for fn in fns)

    for fn in fns:
        fn_rows = rows(fn, ctx)
        if fn_rows:
            yield Table(fn, ctx, fn_rows)
