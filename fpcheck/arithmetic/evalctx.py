"""Evaluation context information: the floating-point formats values live in."""

import numpy as np

from ..numeric import utils
from ..numeric.ops import RM, rm_names


binary16_synonyms = {'binary16', 'float16', 'float16_t', 'half'}
binary32_synonyms = {'binary32', 'float32', 'float32_t', 'single', 'float', 'narrow'}
binary64_synonyms = {'binary64', 'float64', 'float64_t', 'double', 'standard'}
binary80_synonyms = {'binary80', 'float80'}
binary128_synonyms = {'binary128', 'float128', 'float128_t', 'quadruple'}
extended_synonyms = {'extended', 'longdouble', 'long double', 'long_double'}

RNE_synonyms = {'rne', 'nearesteven', 'roundnearesteven', 'nearesttiestoeven', 'roundnearesttiestoeven', 'tonearest'}
RNA_synonyms = {'rna', 'nearestaway', 'roundnearestaway', 'nearesttiestoaway', 'roundnearesttiestoaway'}
RTP_synonyms = {'rtp', 'topositive', 'roundtopositive', 'towardpositive', 'roundtowardpositive', 'upward'}
RTN_synonyms = {'rtn', 'tonegative', 'roundtonegative', 'towardnegative', 'roundtowardnegative', 'downward'}
RTZ_synonyms = {'rtz', 'tozero', 'roundtozero', 'towardzero', 'roundtowardzero'}
RAZ_synonyms = {'raz', 'awayzero', 'roundawayzero'}


def longdouble_layout():
    """Describe numpy's long double as (es, nbits).
    x87 extended has a 64 bit significand with an explicit integer bit,
    so numpy reports 63 mantissa bits for it, the same as the stored fraction.
    """
    info = np.finfo(np.longdouble)
    if info.nmant in (52, 63, 112):
        es = int(info.nexp)
        p = int(info.nmant) + 1
        return es, es + p
    else:
        raise utils.UnsupportedFormat('unsupported long double layout: nexp={}, nmant={}'
                                      .format(info.nexp, info.nmant))


_native_dtypes = {
    (5, 16): np.float16,
    (8, 32): np.float32,
    (11, 64): np.float64,
}

def native_dtype(es, nbits):
    """The numpy scalar type that stores (es, nbits) values, or None."""
    if (es, nbits) in _native_dtypes:
        return _native_dtypes[(es, nbits)]
    try:
        if longdouble_layout() == (es, nbits):
            return np.longdouble
    except utils.UnsupportedFormat:
        pass
    return None


class EvalCtx(object):
    """Generic context for holding properties."""

    # this placeholder should never have anything put in it
    props = utils.ImmutableDict()

    def __init__(self, props=None):
        self.props = {}
        if props:
            self._update_props(props)

    def _update_props(self, props):
        self.props.update(props)

    def _import_fields(self, ctx):
        pass

    def __repr__(self):
        args = []
        if len(self.props) > 0:
            args.append('props=' + repr(self.props))
        return '{}({})'.format(type(self).__name__, ', '.join(args))

    def let(self, props=None):
        """Create a new context, updated with any provided properties."""
        cls = type(self)
        newctx = cls.__new__(cls)
        newctx._import_fields(self)

        if props:
            newctx.props = self.props.copy()
            newctx._update_props(props)
        else:
            # share the dictionary
            newctx.props = self.props

        return newctx


IEEE_esnbits = {}
IEEE_esnbits.update((k, (5, 16)) for k in binary16_synonyms)
IEEE_esnbits.update((k, (8, 32)) for k in binary32_synonyms)
IEEE_esnbits.update((k, (11, 64)) for k in binary64_synonyms)
IEEE_esnbits.update((k, (15, 79)) for k in binary80_synonyms)
IEEE_esnbits.update((k, (15, 128)) for k in binary128_synonyms)

IEEE_rm = {}
IEEE_rm.update((k, RM.RNE) for k in RNE_synonyms)
IEEE_rm.update((k, RM.RNA) for k in RNA_synonyms)
IEEE_rm.update((k, RM.RTP) for k in RTP_synonyms)
IEEE_rm.update((k, RM.RTN) for k in RTN_synonyms)
IEEE_rm.update((k, RM.RTZ) for k in RTZ_synonyms)
IEEE_rm.update((k, RM.RAZ) for k in RAZ_synonyms)


def parse_rm(rounding):
    if isinstance(rounding, RM):
        return rounding
    try:
        return IEEE_rm[str(rounding).strip().lower()]
    except KeyError:
        raise ValueError('unsupported IEEE 754 rounding mode {}'.format(repr(rounding)))


class IEEECtx(EvalCtx):
    """Context for an IEEE 754-like binary format.
    Also serves as the precision descriptor of the values in a table:
    es exponent bits, p significand bits including the hidden bit,
    and a numpy dtype that carries the values in memory.
    """

    es = 11
    nbits = 64
    rm = RM.RNE
    dtype = np.float64

    p = nbits - es
    pbits = p - 1
    emax = (1 << (es - 1)) - 1
    emin = 1 - emax
    bias = emax
    n = emin - p
    explicit_bit = False
    storage_bits = 64

    def __init__(self, props=None, es=None, nbits=None, rm=None, dtype=None):
        init_es = self.es
        init_nbits = self.nbits
        init_rm = self.rm
        init_dtype = None

        self.props = {}
        if props:
            if 'round' in props:
                init_rm = parse_rm(props['round'])

            if 'precision' in props:
                prec = props['precision']
                precstr = str(prec).strip().lower()
                if precstr in extended_synonyms:
                    init_es, init_nbits = longdouble_layout()
                    init_dtype = np.longdouble
                elif precstr in IEEE_esnbits:
                    init_es, init_nbits = IEEE_esnbits[precstr]
                else:
                    raise utils.UnsupportedFormat('unsupported IEEE 754 precision {}'.format(repr(prec)))

            self.props.update(props)

        # arguments are allowed to override properties
        if es is not None:
            init_es = es
        if nbits is not None:
            init_nbits = nbits
        if rm is not None:
            init_rm = rm
        if dtype is not None:
            init_dtype = dtype
        elif init_dtype is None:
            init_dtype = native_dtype(init_es, init_nbits)

        if init_es < 2 or init_nbits - init_es < 2:
            raise utils.UnsupportedFormat('format with es={}, nbits={} cannot be represented with an IEEE 754 bit pattern'
                                          .format(init_es, init_nbits))

        self.rm = init_rm
        self.es = init_es
        self.nbits = init_nbits
        self.p = self.nbits - self.es
        self.pbits = self.p - 1
        self.emax = (1 << (self.es - 1)) - 1
        self.emin = 1 - self.emax
        self.bias = self.emax
        self.n = self.emin - self.p
        # x87 extended is the only format in use that stores its integer bit
        self.explicit_bit = (self.es, self.p) == (15, 64)
        self.dtype = init_dtype

        value_bits = self.nbits + (1 if self.explicit_bit else 0)
        if self.dtype is None:
            self.storage_bits = value_bits
        else:
            info = np.finfo(self.dtype)
            if info.nexp != self.es or info.nmant + 1 != self.p:
                raise utils.UnsupportedFormat('dtype {} does not hold es={}, nbits={} values'
                                              .format(np.dtype(self.dtype).name, self.es, self.nbits))
            self.storage_bits = np.dtype(self.dtype).itemsize * 8

    def _import_fields(self, ctx):
        self.es = ctx.es
        self.nbits = ctx.nbits
        self.rm = ctx.rm
        self.dtype = ctx.dtype
        self.p = ctx.p
        self.pbits = ctx.pbits
        self.emax = ctx.emax
        self.emin = ctx.emin
        self.bias = ctx.bias
        self.n = ctx.n
        self.explicit_bit = ctx.explicit_bit
        self.storage_bits = ctx.storage_bits

    def _update_props(self, props):
        if 'round' in props:
            self.rm = parse_rm(props['round'])
        if 'precision' in props:
            raise ValueError('cannot change the precision of an existing context, make a new one')
        self.props.update(props)

    @property
    def name(self):
        if self.dtype is None:
            dtype = 'none'
        else:
            dtype = np.dtype(self.dtype).name
        return 'float({:d},{:d})/{}'.format(self.es, self.nbits, dtype)

    def __repr__(self):
        return '{}(es={}, nbits={}, rm={}, dtype={})'.format(
            type(self).__name__, repr(self.es), repr(self.nbits), rm_names[self.rm],
            'None' if self.dtype is None else np.dtype(self.dtype).name,
        )

    def __str__(self):
        return self.name

    def coerce(self, x):
        """Convert a value returned by a function under test to this format."""
        if self.dtype is None:
            raise utils.UnsupportedFormat('no numpy type holds {} values'.format(self.name))
        if type(x) is self.dtype:
            return x
        return self.dtype(x)
