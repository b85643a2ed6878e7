"""Module-level formula factories.

Each factory takes its operands positionally, the first of which may be a
plain value rather than a formula::

    from formula_pkg import factories as F

    cost = F.pow(F.add(F.variable(level), 1), 2)

``abs``, ``round``, ``min``, ``max`` and ``pow`` shadow builtins, so they are
left out of ``__all__`` and only reachable through the module.
"""

from .formula import Formula

__all__ = [
    "variable", "constant", "step", "conditional", "if_",
    "neg", "negate", "negated", "sign", "sgn", "floor", "ceil", "trunc",
    "add", "plus", "sub", "subtract", "minus", "mul", "multiply", "times",
    "div", "divide", "recip", "reciprocal", "reciprocate",
    "maxabs", "minabs", "clamp", "clamp_min", "clamp_max",
    "pow10", "pow_base", "root", "exp", "sqr", "sqrt", "cube", "cbrt",
    "log", "logarithm", "log2", "log10", "ln", "plog10", "abslog10",
    "tetrate", "iteratedexp", "iteratedlog", "slog", "layeradd", "layeradd10", "pentate",
    "factorial", "gamma", "lngamma", "lambertw", "ssqrt",
    "sin", "cos", "tan", "asin", "acos", "atan",
    "sinh", "cosh", "tanh", "asinh", "acosh", "atanh",
]  # fmt: skip

variable = Formula.variable
constant = Formula.constant
step = Formula.step
conditional = Formula.conditional
if_ = Formula.conditional

abs = Formula.abs
neg = negate = negated = Formula.neg
sign = sgn = Formula.sign
round = Formula.round
floor = Formula.floor
ceil = Formula.ceil
trunc = Formula.trunc

add = plus = Formula.add
sub = subtract = minus = Formula.sub
mul = multiply = times = Formula.mul
div = divide = Formula.div
recip = reciprocal = reciprocate = Formula.recip

max = Formula.max
min = Formula.min
maxabs = Formula.maxabs
minabs = Formula.minabs
clamp = Formula.clamp
clamp_min = Formula.clamp_min
clamp_max = Formula.clamp_max

pow = Formula.pow
pow10 = Formula.pow10
pow_base = Formula.pow_base
root = Formula.root
exp = Formula.exp
sqr = Formula.sqr
sqrt = Formula.sqrt
cube = Formula.cube
cbrt = Formula.cbrt

log = logarithm = Formula.log
log2 = Formula.log2
log10 = Formula.log10
ln = Formula.ln
plog10 = Formula.plog10
abslog10 = Formula.abslog10

tetrate = Formula.tetrate
iteratedexp = Formula.iteratedexp
iteratedlog = Formula.iteratedlog
slog = Formula.slog
layeradd = Formula.layeradd
layeradd10 = Formula.layeradd10
pentate = Formula.pentate

factorial = Formula.factorial
gamma = Formula.gamma
lngamma = Formula.lngamma
lambertw = Formula.lambertw
ssqrt = Formula.ssqrt

sin = Formula.sin
cos = Formula.cos
tan = Formula.tan
asin = Formula.asin
acos = Formula.acos
atan = Formula.atan
sinh = Formula.sinh
cosh = Formula.cosh
tanh = Formula.tanh
asinh = Formula.asinh
acosh = Formula.acosh
atanh = Formula.atanh
