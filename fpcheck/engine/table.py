"""Tables of test vectors: inputs and expected outputs for one function
in one floating-point format.

Rows are flat sequences with the expected outputs first and the inputs after
them, the same order as generated libm test data:

    Table('sqrt', binary64, [
        ('0x1p+1', '0x1p+2'),
        ('nan', '-0x1p+0'),
    ])
"""

from typing import NamedTuple, Tuple, Any

from ..numeric import utils
from ..numeric.ops import FN, K, shapes, lookup_fn
from ..numeric.conversion import decode_float, decode_int, float_from_bits


class Vector(NamedTuple):
    index: int
    inputs: Tuple[int, ...]
    expected: Tuple[Any, ...]
    args: Tuple[Any, ...]


class Table(object):
    """An immutable sequence of vectors, decoded once on construction."""

    def __init__(self, fn, ctx, rows, name=None):
        if isinstance(fn, FN):
            self._fn = fn
        else:
            self._fn = lookup_fn(fn)
        self._ctx = ctx
        self._shape = shapes[self._fn]
        if name is None:
            self.name = '{}/{}'.format(self._fn.name, ctx.name)
        else:
            self.name = name

        if ctx.dtype is None:
            raise utils.UnsupportedFormat('no numpy type holds {} values, cannot build a table'
                                          .format(ctx.name))

        self._vectors = tuple(self._decode(i, row) for i, row in enumerate(rows))

    @property
    def fn(self):
        return self._fn

    @property
    def ctx(self):
        return self._ctx

    @property
    def shape(self):
        return self._shape

    def __repr__(self):
        return '{}({}, {}, <{} rows>)'.format(type(self).__name__, self._fn.name, repr(self._ctx), len(self._vectors))

    def __len__(self):
        return len(self._vectors)

    def __iter__(self):
        return iter(self._vectors)

    def _decode(self, index, row):
        if isinstance(row, (str, bytes)) or not hasattr(row, '__len__'):
            raise utils.MalformedTableEntry('{} row {}: expected a sequence, got {}'
                                            .format(self.name, index, repr(row)))
        if len(row) != self._shape.width:
            raise utils.MalformedTableEntry('{} row {}: {} takes {} inputs and returns {} outputs, but the row has {} entries'
                                            .format(self.name, index, self._fn.name, self._shape.arity,
                                                    len(self._shape.outputs), len(row)))

        nout = len(self._shape.outputs)
        try:
            expected = tuple(self._decode_literal(lit, kind, allow_none=True)
                             for lit, kind in zip(row[:nout], self._shape.outputs))
            inputs = tuple(self._decode_literal(lit, kind, allow_none=False)
                           for lit, kind in zip(row[nout:], self._shape.inputs))
        except utils.MalformedTableEntry as e:
            raise type(e)('{} row {}: {}'.format(self.name, index, str(e))) from e

        args = tuple(float_from_bits(x, self._ctx) if kind == K.FLOAT else x
                     for x, kind in zip(inputs, self._shape.inputs))

        return Vector(index, inputs, expected, args)

    def _decode_literal(self, lit, kind, allow_none):
        if lit is None:
            if allow_none:
                return None
            else:
                raise utils.MalformedTableEntry('inputs cannot be None')
        elif kind == K.FLOAT:
            return decode_float(lit, self._ctx)
        else:
            return decode_int(lit)
