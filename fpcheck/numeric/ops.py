"""Standard codes shared by the formats, backends and the checking engine:
rounding modes, exception flags, and the catalog of libm functions with
their calling shapes.
"""

from enum import Enum, IntEnum, IntFlag, unique

class RM(IntEnum):
    ROUND_NEAREST_EVEN = 0
    RNE = 0
    ROUND_NEAREST_AWAY = 1
    RNA = 1
    ROUND_UP = 2
    RTP = 2
    ROUND_DOWN = 3
    RTN = 3
    ROUND_TO_ZERO = 4
    RTZ = 4
    ROUND_AWAY_ZERO = 5
    RAZ = 5

# RM.RNE.name is 'ROUND_NEAREST_EVEN'; diagnostics use these instead
rm_names = {
    RM.RNE: 'RNE',
    RM.RNA: 'RNA',
    RM.RTP: 'RTP',
    RM.RTN: 'RTN',
    RM.RTZ: 'RTZ',
    RM.RAZ: 'RAZ',
}

class FLAG(IntFlag):
    """IEEE 754 exception flags, as in <fenv.h>."""
    INVALID = 1
    DIVBYZERO = 2
    OVERFLOW = 4
    UNDERFLOW = 8
    INEXACT = 16

ALL_FLAGS = FLAG.INVALID | FLAG.DIVBYZERO | FLAG.OVERFLOW | FLAG.UNDERFLOW | FLAG.INEXACT
NO_FLAGS = FLAG(0)

class K(IntEnum):
    """Kinds of operands and outputs."""
    FLOAT = 0
    INT = 1

@unique
class Shape(Enum):
    """Calling conventions, as (operand kinds, output kinds).
    Out-parameters of the C functions are returned as extra outputs.
    """
    UNARY = ((K.FLOAT,), (K.FLOAT,))
    BINARY = ((K.FLOAT, K.FLOAT), (K.FLOAT,))
    TERNARY = ((K.FLOAT, K.FLOAT, K.FLOAT), (K.FLOAT,))
    SCALE = ((K.FLOAT, K.INT), (K.FLOAT,))
    UNARY_PAIR = ((K.FLOAT,), (K.FLOAT, K.FLOAT))
    UNARY_WITH_INT = ((K.FLOAT,), (K.FLOAT, K.INT))
    BINARY_WITH_INT = ((K.FLOAT, K.FLOAT), (K.FLOAT, K.INT))
    TO_INT = ((K.FLOAT,), (K.INT,))

    @property
    def inputs(self):
        return self.value[0]

    @property
    def outputs(self):
        return self.value[1]

    @property
    def arity(self):
        return len(self.value[0])

    @property
    def width(self):
        """Number of entries in a table row: outputs first, then inputs."""
        return len(self.value[0]) + len(self.value[1])

class Category(IntEnum):
    EXACT = 0
    TRANSCENDENTAL = 1
    HYPERBOLIC = 2
    GAMMA = 3

@unique
class FN(IntEnum):
    acos = 0
    acosh = 1
    asin = 2
    asinh = 3
    atan = 4
    atan2 = 5
    atanh = 6
    cbrt = 7
    ceil = 8
    copysign = 9
    cos = 10
    cosh = 11
    erf = 12
    erfc = 13
    exp = 14
    exp2 = 15
    expm1 = 16
    fabs = 17
    fdim = 18
    floor = 19
    fma = 20
    fmax = 21
    fmin = 22
    fmod = 23
    frexp = 24
    hypot = 25
    ilogb = 26
    ldexp = 27
    lgamma = 28
    lgamma_r = 29
    log = 30
    log10 = 31
    log1p = 32
    log2 = 33
    logb = 34
    modf = 35
    nearbyint = 36
    nextafter = 37
    pow = 38
    remainder = 39
    remquo = 40
    rint = 41
    round = 42
    scalb = 43
    scalbn = 44
    significand = 45
    sin = 46
    sincos = 47
    sinh = 48
    sqrt = 49
    tan = 50
    tanh = 51
    tgamma = 52
    trunc = 53


_binary = {FN.atan2, FN.copysign, FN.fdim, FN.fmax, FN.fmin, FN.fmod,
           FN.hypot, FN.nextafter, FN.pow, FN.remainder, FN.scalb}

shapes = {fn: Shape.UNARY for fn in FN}
shapes.update((fn, Shape.BINARY) for fn in _binary)
shapes.update({
    FN.fma: Shape.TERNARY,
    FN.ldexp: Shape.SCALE,
    FN.scalbn: Shape.SCALE,
    FN.modf: Shape.UNARY_PAIR,
    FN.sincos: Shape.UNARY_PAIR,
    FN.frexp: Shape.UNARY_WITH_INT,
    FN.lgamma_r: Shape.UNARY_WITH_INT,
    FN.remquo: Shape.BINARY_WITH_INT,
    FN.ilogb: Shape.TO_INT,
})

_exact = {FN.ceil, FN.copysign, FN.fabs, FN.fdim, FN.floor, FN.fma, FN.fmax,
          FN.fmin, FN.fmod, FN.frexp, FN.ilogb, FN.ldexp, FN.logb, FN.modf,
          FN.nearbyint, FN.nextafter, FN.remainder, FN.remquo, FN.rint,
          FN.round, FN.scalb, FN.scalbn, FN.significand, FN.sqrt, FN.trunc}
_hyperbolic = {FN.acosh, FN.asinh, FN.atan2, FN.atanh, FN.cosh, FN.sinh, FN.tanh}
_gamma = {FN.lgamma, FN.lgamma_r, FN.tgamma}

categories = {fn: Category.TRANSCENDENTAL for fn in FN}
categories.update((fn, Category.EXACT) for fn in _exact)
categories.update((fn, Category.HYPERBOLIC) for fn in _hyperbolic)
categories.update((fn, Category.GAMMA) for fn in _gamma)

# C Annex F specifies the sign of a zero result for these
sign_preserving = {
    FN.asin, FN.asinh, FN.atan, FN.atan2, FN.atanh, FN.cbrt, FN.ceil,
    FN.copysign, FN.erf, FN.expm1, FN.fabs, FN.floor, FN.fma, FN.fmod,
    FN.frexp, FN.ldexp, FN.log1p, FN.modf, FN.nearbyint, FN.nextafter,
    FN.pow, FN.remainder, FN.remquo, FN.rint, FN.round, FN.scalb, FN.scalbn,
    FN.significand, FN.sin, FN.sincos, FN.sinh, FN.sqrt, FN.tan, FN.tanh,
    FN.trunc,
}

# results depend on the ambient rounding mode
mode_sensitive = {fn for fn in FN if categories[fn] != Category.EXACT}
mode_sensitive.update({FN.fdim, FN.fma, FN.ldexp, FN.nearbyint, FN.rint,
                       FN.scalb, FN.scalbn, FN.sqrt})


def lookup_fn(name):
    """Find a catalog function by its C name."""
    try:
        return FN[str(name).strip().lower()]
    except KeyError:
        raise ValueError('unknown libm function {}'.format(repr(name)))


# <limits.h> and <math.h> values on glibc/x86
INT_MAX = 2147483647
FP_ILOGB0 = -2147483648
FP_ILOGBNAN = -2147483648
