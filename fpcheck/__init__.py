from .numeric import utils, ops, conversion, gmpmath, fenv
from .arithmetic import evalctx, ieee754, np, reference
from .engine import classify, compare, tolerance, table, driver, report
from .data import vectors

RM = ops.RM
FLAG = ops.FLAG
FN = ops.FN
IEEECtx = evalctx.IEEECtx
Bits = conversion.Bits

Table = table.Table
Policy = tolerance.Policy
Verdict = driver.Verdict
run = driver.run
scoped_env = fenv.scoped_env

NumpyLibm = np.Libm
ReferenceLibm = reference.Libm
