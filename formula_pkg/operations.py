"""Operation registry: the fixed catalogue of formula operations.

Each operation is an :class:`Operation` variant. A variant knows how to
evaluate itself and, per input position that may hold the variable, how to
invert, integrate and invert its integral (a :class:`Rule`). The linear
family (add, sub, mul, div, neg) additionally implements the substitution
protocol used by :meth:`Formula.evaluate_integral`: when a linear node sits
between the complex node and the variable it pushes an adjustment onto the
substitution stack instead of integrating itself.

Operations are looked up by canonical name through :func:`get_operation`,
which also resolves the aliases in :data:`ALIASES`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

import mpmath

from . import numeric as N
from .computable import unref
from .types import FormulaError

if TYPE_CHECKING:
    from .formula import Formula

Args = list  # evaluated inputs, with None in the variable's slot


@dataclass(frozen=True)
class Rule:
    """Behavior of an operation when the variable is in one particular input.

    invert: (value, args) -> value the variable-bearing input must take.
    integrate: (u, args) -> antiderivative at inner value u.
    invert_integral: (value, args) -> u whose antiderivative is value.
    """

    invert: Callable[[Any, Args], Any] | None = None
    integrate: Callable[[Any, Args], Any] | None = None
    invert_integral: Callable[[Any, Args], Any] | None = None


class Operation:
    """A named operation with per-input inversion and integration rules."""

    def __init__(
        self,
        name: str,
        evaluate: Callable[..., Any],
        rules: dict[int, Rule] | None = None,
        arity: int = 1,
    ):
        self.name = name
        self._evaluate = evaluate
        self.rules = rules or {}
        self.arity = arity

    def __repr__(self) -> str:
        return f"Operation({self.name!r})"

    def equals(self, other: Operation) -> bool:
        return self is other or (type(self) is type(other) and self.name == other.name)

    def evaluate(self, *values: Any) -> mpmath.mpf:
        return self._evaluate(*values)

    def rule(self, node: Formula) -> Rule | None:
        return self.rules.get(node.variable_index)

    # Capabilities, decided once per node at construction

    def substitutes(self, node: Formula) -> bool:
        """Whether this node is linear in its variable input."""
        return False

    def supports_invert(self, node: Formula) -> bool:
        rule = self.rule(node)
        return (
            rule is not None
            and rule.invert is not None
            and node.variable_input is not None
            and node.variable_input.is_invertible()
        )

    def supports_integrate(self, node: Formula) -> bool:
        rule = self.rule(node)
        return rule is not None and rule.integrate is not None

    def supports_invert_integral(self, node: Formula) -> bool:
        rule = self.rule(node)
        return (
            rule is not None
            and rule.invert_integral is not None
            and node.variable_input is not None
            and node.variable_input.is_linear_chain()
        )

    # Behavior

    def invert(self, node: Formula, value: Any) -> mpmath.mpf:
        rule = self.rule(node)
        return node.variable_input.invert(rule.invert(value, node.argument_values()))

    def integrate(self, node: Formula, variable: Any, stack: list | None) -> mpmath.mpf:
        # The complex node: integrate with respect to the inner value and let
        # the substitution stack account for the linear chain below it.
        rule = self.rule(node)
        inner = node.variable_input.evaluate_integral(variable, stack)
        return rule.integrate(inner, node.argument_values())

    def integrate_inner(
        self, node: Formula, variable: Any, stack: list
    ) -> mpmath.mpf | None:
        return None

    def apply_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        raise FormulaError(
            f"Operation '{self.name}' is not linear in its variable", "NESTED_COMPLEX"
        )

    def undo_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        raise FormulaError(
            f"Operation '{self.name}' is not linear in its variable", "NESTED_COMPLEX"
        )

    def linear_coefficients(self, node: Formula, inner: tuple) -> tuple | None:
        return None

    def invert_integral(self, node: Formula, value: Any) -> mpmath.mpf:
        rule = self.rule(node)
        value = node.unwind_substitutions(value)
        return node.variable_input.invert(rule.invert_integral(value, node.argument_values()))


class PassthroughOperation(Operation):
    """Comparison-style operations (min, max, clamp, ...).

    Their inverse and integral inverse are the identity on the incoming value:
    the engine does not try to invert a comparison.
    """

    def __init__(self, name: str, evaluate: Callable[..., Any], arity: int = 2):
        super().__init__(name, evaluate, arity=arity)

    def supports_invert(self, node: Formula) -> bool:
        return node.variable_input is not None and node.variable_input.is_invertible()

    def supports_invert_integral(self, node: Formula) -> bool:
        return (
            node.variable_input is not None
            and node.variable_input.is_integral_invertible()
        )

    def invert(self, node: Formula, value: Any) -> mpmath.mpf:
        return N.D(value)

    def invert_integral(self, node: Formula, value: Any) -> mpmath.mpf:
        return N.D(value)


class LinearOperation(Operation):
    """Base for the linear family; ``linear_inputs`` lists where it is linear."""

    linear_inputs: tuple = ()

    def other_value(self, node: Formula) -> mpmath.mpf:
        args = node.argument_values()
        return next(value for value in args if value is not None)

    def substitutes(self, node: Formula) -> bool:
        return node.variable_index in self.linear_inputs

    def supports_invert(self, node: Formula) -> bool:
        if self.substitutes(node):
            return node.variable_input.is_invertible()
        return super().supports_invert(node)

    def supports_integrate(self, node: Formula) -> bool:
        return self.substitutes(node) or super().supports_integrate(node)

    def supports_invert_integral(self, node: Formula) -> bool:
        if self.substitutes(node):
            return node.variable_input.is_integral_invertible()
        return super().supports_invert_integral(node)


def _solve_linear_integral(node: Formula, value: Any) -> mpmath.mpf:
    """Solve ``A*x^2/2 + C*x = value`` for a linear chain ``A*x + C``.

    Of the two roots this returns the one where ``A*x + C >= 0``, i.e. where
    the formula itself is non-negative. For a negative slope that is the
    smaller root, so ``sub(0, x)`` with integral value -4.5 gives -3, not 3.
    """
    a, c = node.linear_coefficients()
    v = N.D(value)
    if a == 0:
        return N.div(v, c)
    return N.div(N.sqrt(c * c + 2 * a * v) - c, a)


class AddOperation(LinearOperation):
    linear_inputs = (0, 1)

    def __init__(self):
        super().__init__("add", N.add, arity=2)

    def supports_invert_integral(self, node: Formula) -> bool:
        return node.is_linear_chain()

    def invert(self, node: Formula, value: Any) -> mpmath.mpf:
        return node.variable_input.invert(N.sub(value, self.other_value(node)))

    def integrate(self, node: Formula, variable: Any, stack: list | None) -> mpmath.mpf:
        x = node.variable_value(variable)
        inner = node.variable_input.evaluate_integral(variable, stack)
        return N.add(N.mul(self.other_value(node), x), inner)

    def integrate_inner(self, node: Formula, variable: Any, stack: list) -> mpmath.mpf:
        inner = node.variable_input.evaluate_integral(variable, stack)
        return N.add(inner, self.other_value(node))

    def apply_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        return N.D(value)

    def undo_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        return N.D(value)

    def linear_coefficients(self, node: Formula, inner: tuple) -> tuple:
        a, c = inner
        return a, c + self.other_value(node)

    def invert_integral(self, node: Formula, value: Any) -> mpmath.mpf:
        return _solve_linear_integral(node, value)


class SubOperation(LinearOperation):
    """``lhs - rhs``; with the variable on the right the substitution negates."""

    linear_inputs = (0, 1)

    def __init__(self):
        super().__init__("sub", N.sub, arity=2)

    def supports_invert_integral(self, node: Formula) -> bool:
        return node.is_linear_chain()

    def invert(self, node: Formula, value: Any) -> mpmath.mpf:
        other = self.other_value(node)
        if node.variable_index == 0:
            return node.variable_input.invert(N.add(value, other))
        return node.variable_input.invert(N.sub(other, value))

    def integrate(self, node: Formula, variable: Any, stack: list | None) -> mpmath.mpf:
        x = node.variable_value(variable)
        inner = node.variable_input.evaluate_integral(variable, stack)
        if node.variable_index == 0:
            return N.sub(inner, N.mul(self.other_value(node), x))
        return N.sub(N.mul(self.other_value(node), x), inner)

    def integrate_inner(self, node: Formula, variable: Any, stack: list) -> mpmath.mpf:
        inner = node.variable_input.evaluate_integral(variable, stack)
        if node.variable_index == 0:
            return N.sub(inner, self.other_value(node))
        return N.sub(self.other_value(node), inner)

    def apply_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        return N.D(value) if node.variable_index == 0 else N.neg(value)

    def undo_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        return self.apply_substitution(node, value)

    def linear_coefficients(self, node: Formula, inner: tuple) -> tuple:
        a, c = inner
        other = self.other_value(node)
        if node.variable_index == 0:
            return a, c - other
        return -a, other - c

    def invert_integral(self, node: Formula, value: Any) -> mpmath.mpf:
        return _solve_linear_integral(node, value)


class MulOperation(LinearOperation):
    linear_inputs = (0, 1)

    def __init__(self):
        super().__init__("mul", N.mul, arity=2)

    def invert(self, node: Formula, value: Any) -> mpmath.mpf:
        return node.variable_input.invert(N.div(value, self.other_value(node)))

    def integrate(self, node: Formula, variable: Any, stack: list | None) -> mpmath.mpf:
        inner = node.variable_input.evaluate_integral(variable, stack)
        return N.mul(inner, self.other_value(node))

    def apply_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        return N.div(value, self.other_value(node))

    def undo_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        return N.mul(value, self.other_value(node))

    def linear_coefficients(self, node: Formula, inner: tuple) -> tuple:
        a, c = inner
        other = self.other_value(node)
        return a * other, c * other

    def invert_integral(self, node: Formula, value: Any) -> mpmath.mpf:
        return node.variable_input.invert_integral(N.div(value, self.other_value(node)))


class DivOperation(LinearOperation):
    """``lhs / rhs``: linear in the numerator, a reciprocal in the denominator."""

    linear_inputs = (0,)

    def __init__(self):
        super().__init__(
            "div",
            N.div,
            rules={
                1: Rule(
                    invert=lambda v, a: N.div(a[0], v),
                    integrate=lambda u, a: N.mul(a[0], N.ln(N.absolute(u))),
                    invert_integral=lambda v, a: N.exp(N.div(v, a[0])),
                )
            },
            arity=2,
        )

    def invert(self, node: Formula, value: Any) -> mpmath.mpf:
        if not self.substitutes(node):
            return super().invert(node, value)
        return node.variable_input.invert(N.mul(value, self.other_value(node)))

    def integrate(self, node: Formula, variable: Any, stack: list | None) -> mpmath.mpf:
        if not self.substitutes(node):
            return super().integrate(node, variable, stack)
        inner = node.variable_input.evaluate_integral(variable, stack)
        return N.div(inner, self.other_value(node))

    def apply_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        return N.mul(value, self.other_value(node))

    def undo_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        return N.div(value, self.other_value(node))

    def linear_coefficients(self, node: Formula, inner: tuple) -> tuple | None:
        if not self.substitutes(node):
            return None
        a, c = inner
        other = self.other_value(node)
        return N.div(a, other), N.div(c, other)

    def invert_integral(self, node: Formula, value: Any) -> mpmath.mpf:
        if not self.substitutes(node):
            return super().invert_integral(node, value)
        return node.variable_input.invert_integral(N.mul(value, self.other_value(node)))


class NegOperation(LinearOperation):
    linear_inputs = (0,)

    def __init__(self):
        super().__init__("neg", N.neg)

    def invert(self, node: Formula, value: Any) -> mpmath.mpf:
        return node.variable_input.invert(N.neg(value))

    def integrate(self, node: Formula, variable: Any, stack: list | None) -> mpmath.mpf:
        return N.neg(node.variable_input.evaluate_integral(variable, stack))

    def apply_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        return N.neg(value)

    def undo_substitution(self, node: Formula, value: Any) -> mpmath.mpf:
        return N.neg(value)

    def linear_coefficients(self, node: Formula, inner: tuple) -> tuple:
        a, c = inner
        return -a, -c

    def invert_integral(self, node: Formula, value: Any) -> mpmath.mpf:
        return node.variable_input.invert_integral(N.neg(value))


class StepOperation(Operation):
    """Applies ``modifier`` to ``input - start`` once the input reaches ``start``.

    The inner formula receives its input as an explicit override, so a step
    formula holds no mutable state of its own.
    """

    def __init__(self, inner: Formula, start: Any):
        super().__init__("step", self._step)
        self.inner = inner
        self.start = start

    def equals(self, other: Operation) -> bool:
        return (
            isinstance(other, StepOperation)
            and N.eq(unref(self.start), unref(other.start))
            and self.inner.equals(other.inner)
        )

    def _step(self, lhs: Any) -> mpmath.mpf:
        start = N.D(unref(self.start))
        lhs = N.D(lhs)
        if lhs < start:
            return lhs
        return N.add(self.inner.evaluate(N.sub(lhs, start)), start)

    def supports_invert(self, node: Formula) -> bool:
        return (
            self.inner.has_variable()
            and self.inner.is_invertible()
            and node.variable_input is not None
            and node.variable_input.is_invertible()
        )

    def supports_integrate(self, node: Formula) -> bool:
        return False

    def supports_invert_integral(self, node: Formula) -> bool:
        return False

    def invert(self, node: Formula, value: Any) -> mpmath.mpf:
        start = N.D(unref(self.start))
        value = N.D(value)
        if value > start:
            value = N.add(self.inner.invert(N.sub(value, start)), start)
        return node.variable_input.invert(value)


class ConditionalOperation(Operation):
    """Applies ``modifier`` to the input only while ``condition`` holds."""

    def __init__(self, inner: Formula, condition: Any):
        super().__init__("conditional", self._conditional)
        self.inner = inner
        self.condition = condition

    def equals(self, other: Operation) -> bool:
        return (
            isinstance(other, ConditionalOperation)
            and bool(unref(self.condition)) == bool(unref(other.condition))
            and self.inner.equals(other.inner)
        )

    def _conditional(self, lhs: Any) -> mpmath.mpf:
        if unref(self.condition):
            return self.inner.evaluate(lhs)
        return N.D(lhs)

    def supports_invert(self, node: Formula) -> bool:
        return (
            self.inner.has_variable()
            and self.inner.is_invertible()
            and node.variable_input is not None
            and node.variable_input.is_invertible()
        )

    def supports_integrate(self, node: Formula) -> bool:
        return False

    def supports_invert_integral(self, node: Formula) -> bool:
        return False

    def invert(self, node: Formula, value: Any) -> mpmath.mpf:
        if unref(self.condition):
            value = self.inner.invert(value)
        return node.variable_input.invert(value)


# Antiderivatives and their inverses


def _integrate_power(u: Any, n: Any) -> mpmath.mpf:
    n = N.D(n)
    if n == -1:
        return N.ln(N.absolute(u))
    return N.div(N.power(u, n + 1), n + 1)


def _invert_integral_power(v: Any, n: Any) -> mpmath.mpf:
    n = N.D(n)
    if n == -1:
        return N.exp(v)
    return N.root(N.mul(v, n + 1), n + 1)


def _integrate_exponential(u: Any, base: Any) -> mpmath.mpf:
    return N.div(N.power(base, u), N.ln(base))


def _invert_integral_exponential(v: Any, base: Any) -> mpmath.mpf:
    return N.log(N.mul(v, N.ln(base)), base)


def _integrate_log(u: Any, base: Any = None) -> mpmath.mpf:
    u = N.D(u)
    value = N.sub(N.mul(u, N.ln(u)), u)
    if base is None:
        return value
    return N.div(value, N.ln(base))


def _invert_integral_log(v: Any, base: Any = None) -> mpmath.mpf:
    # u*ln(u) - u = v  =>  u = exp(1 + W(v / e))
    v = N.D(v)
    if base is not None:
        v = N.mul(v, N.ln(base))
    return N.exp(1 + N.lambertw(N.div(v, mpmath.e)))


def _invert_tetrate_base(v: Any, a: Args) -> mpmath.mpf:
    if not (N.eq(a[1], 2) and N.eq(a[2], 1)):
        raise FormulaError(
            "Tetration can only be inverted for its base at height 2 with payload 1",
            "NOT_INVERTIBLE",
        )
    return N.ssqrt(v)


_TOWER_RULES = {
    0: Rule(invert=_invert_tetrate_base),
    1: Rule(invert=lambda v, a: N.slog(v, a[0]) - N.slog(a[2], a[0])),
    2: Rule(invert=lambda v, a: N.iteratedlog(v, a[0], a[1])),
}


def _unary(name: str, evaluate: Callable, invert=None, integrate=None, invert_integral=None):
    rule = Rule(
        invert=(lambda v, a: invert(v)) if invert else None,
        integrate=(lambda u, a: integrate(u)) if integrate else None,
        invert_integral=(lambda v, a: invert_integral(v)) if invert_integral else None,
    )
    return Operation(name, evaluate, {0: rule})


OPERATIONS: dict[str, Operation] = {}


def register(operation: Operation) -> Operation:
    OPERATIONS[operation.name] = operation
    return operation


# Linear family
register(AddOperation())
register(SubOperation())
register(MulOperation())
register(DivOperation())
register(NegOperation())

register(
    _unary(
        "recip",
        N.recip,
        invert=N.recip,
        integrate=lambda u: N.ln(N.absolute(u)),
        invert_integral=N.exp,
    )
)

# Rounding: evaluation only
register(Operation("abs", N.absolute))
register(Operation("sign", N.sign))
register(Operation("round", N.rounded))
register(Operation("floor", N.floor))
register(Operation("ceil", N.ceil))
register(Operation("trunc", N.trunc))

# Comparisons: identity inverse
register(PassthroughOperation("min", N.minimum))
register(PassthroughOperation("max", N.maximum))
register(PassthroughOperation("minabs", N.minabs))
register(PassthroughOperation("maxabs", N.maxabs))
register(PassthroughOperation("clamp_min", N.clamp_min))
register(PassthroughOperation("clamp_max", N.clamp_max))
register(PassthroughOperation("clamp", N.clamp, arity=3))

# Exponential family
register(
    Operation(
        "pow",
        N.power,
        {
            0: Rule(
                invert=lambda v, a: N.root(v, a[1]),
                integrate=lambda u, a: _integrate_power(u, a[1]),
                invert_integral=lambda v, a: _invert_integral_power(v, a[1]),
            ),
            1: Rule(
                invert=lambda v, a: N.log(v, a[0]),
                integrate=lambda u, a: _integrate_exponential(u, a[0]),
                invert_integral=lambda v, a: _invert_integral_exponential(v, a[0]),
            ),
        },
        arity=2,
    )
)
register(
    _unary(
        "pow10",
        N.pow10,
        invert=N.log10,
        integrate=lambda u: _integrate_exponential(u, 10),
        invert_integral=lambda v: _invert_integral_exponential(v, 10),
    )
)
register(
    Operation(
        "pow_base",
        N.pow_base,
        {
            0: Rule(
                invert=lambda v, a: N.log(v, a[1]),
                integrate=lambda u, a: _integrate_exponential(u, a[1]),
                invert_integral=lambda v, a: _invert_integral_exponential(v, a[1]),
            ),
            1: Rule(
                invert=lambda v, a: N.root(v, a[0]),
                integrate=lambda u, a: _integrate_power(u, a[0]),
                invert_integral=lambda v, a: _invert_integral_power(v, a[0]),
            ),
        },
        arity=2,
    )
)
register(
    Operation(
        "root",
        N.root,
        {
            0: Rule(
                invert=lambda v, a: N.power(v, a[1]),
                integrate=lambda u, a: _integrate_power(u, N.recip(a[1])),
                invert_integral=lambda v, a: _invert_integral_power(v, N.recip(a[1])),
            ),
            1: Rule(invert=lambda v, a: N.div(N.ln(a[0]), N.ln(v))),
        },
        arity=2,
    )
)
register(_unary("exp", N.exp, invert=N.ln, integrate=N.exp, invert_integral=N.ln))

# Logarithmic family
register(
    _unary(
        "ln",
        N.ln,
        invert=N.exp,
        integrate=_integrate_log,
        invert_integral=_invert_integral_log,
    )
)
register(
    _unary(
        "log2",
        N.log2,
        invert=lambda v: N.power(2, v),
        integrate=lambda u: _integrate_log(u, 2),
        invert_integral=lambda v: _invert_integral_log(v, 2),
    )
)
register(
    _unary(
        "log10",
        N.log10,
        invert=N.pow10,
        integrate=lambda u: _integrate_log(u, 10),
        invert_integral=lambda v: _invert_integral_log(v, 10),
    )
)
register(
    Operation(
        "log",
        N.log,
        {
            0: Rule(
                invert=lambda v, a: N.power(a[1], v),
                integrate=lambda u, a: _integrate_log(u, a[1]),
                invert_integral=lambda v, a: _invert_integral_log(v, a[1]),
            ),
            1: Rule(invert=lambda v, a: N.power(a[0], N.recip(v))),
        },
        arity=2,
    )
)
register(Operation("plog10", N.plog10))
register(Operation("abslog10", N.abslog10))

# Hyper-operations
register(Operation("tetrate", N.tetrate, dict(_TOWER_RULES), arity=3))
register(Operation("iteratedexp", N.iteratedexp, dict(_TOWER_RULES), arity=3))
register(
    Operation(
        "iteratedlog",
        N.iteratedlog,
        {
            0: Rule(invert=lambda v, a: N.iteratedexp(a[1], a[2], v)),
            2: Rule(invert=lambda v, a: N.slog(a[0], a[1]) - N.slog(v, a[1])),
        },
        arity=3,
    )
)
register(
    Operation(
        "slog",
        N.slog,
        {0: Rule(invert=lambda v, a: N.tetrate(a[1], v, 1))},
        arity=2,
    )
)
register(
    Operation(
        "layeradd",
        N.layeradd,
        {
            0: Rule(invert=lambda v, a: N.layeradd(v, N.neg(a[1]), a[2])),
            1: Rule(invert=lambda v, a: N.slog(v, a[2]) - N.slog(a[0], a[2])),
        },
        arity=3,
    )
)
register(
    Operation(
        "layeradd10",
        N.layeradd10,
        {
            0: Rule(invert=lambda v, a: N.layeradd10(v, N.neg(a[1]))),
            1: Rule(invert=lambda v, a: N.slog(v, 10) - N.slog(a[0], 10)),
        },
        arity=2,
    )
)
register(Operation("pentate", N.pentate, arity=3))

# Special functions
register(Operation("factorial", N.factorial))
register(Operation("gamma", N.gamma))
register(Operation("lngamma", N.lngamma))
register(_unary("lambertw", N.lambertw, invert=lambda v: N.mul(v, N.exp(v))))
register(_unary("ssqrt", N.ssqrt, invert=lambda v: N.power(v, v)))

# Trigonometric
register(_unary("sin", N.sin, invert=N.asin, integrate=lambda u: N.neg(N.cos(u))))
register(_unary("cos", N.cos, invert=N.acos, integrate=N.sin))
register(
    _unary(
        "tan",
        N.tan,
        invert=N.atan,
        integrate=lambda u: N.neg(N.ln(N.absolute(N.cos(u)))),
    )
)
register(
    _unary(
        "asin",
        N.asin,
        invert=N.sin,
        integrate=lambda u: N.add(N.mul(u, N.asin(u)), N.sqrt(N.sub(1, N.mul(u, u)))),
    )
)
register(
    _unary(
        "acos",
        N.acos,
        invert=N.cos,
        integrate=lambda u: N.sub(N.mul(u, N.acos(u)), N.sqrt(N.sub(1, N.mul(u, u)))),
    )
)
register(
    _unary(
        "atan",
        N.atan,
        invert=N.tan,
        integrate=lambda u: N.sub(
            N.mul(u, N.atan(u)), N.div(N.ln(N.add(1, N.mul(u, u))), 2)
        ),
    )
)

# Hyperbolic
register(_unary("sinh", N.sinh, invert=N.asinh, integrate=N.cosh))
register(_unary("cosh", N.cosh, invert=N.acosh, integrate=N.sinh))
register(_unary("tanh", N.tanh, invert=N.atanh, integrate=lambda u: N.ln(N.cosh(u))))
register(
    _unary(
        "asinh",
        N.asinh,
        invert=N.sinh,
        integrate=lambda u: N.sub(N.mul(u, N.asinh(u)), N.sqrt(N.add(N.mul(u, u), 1))),
    )
)
register(
    _unary(
        "acosh",
        N.acosh,
        invert=N.cosh,
        integrate=lambda u: N.sub(
            N.mul(u, N.acosh(u)), N.mul(N.sqrt(N.add(u, 1)), N.sqrt(N.sub(u, 1)))
        ),
    )
)
register(
    _unary(
        "atanh",
        N.atanh,
        invert=N.tanh,
        integrate=lambda u: N.add(
            N.mul(u, N.atanh(u)), N.div(N.ln(N.sub(1, N.mul(u, u))), 2)
        ),
    )
)

ALIASES = {
    "plus": "add",
    "subtract": "sub",
    "minus": "sub",
    "multiply": "mul",
    "times": "mul",
    "divide": "div",
    "divide_by": "div",
    "divided_by": "div",
    "negate": "neg",
    "negated": "neg",
    "reciprocal": "recip",
    "reciprocate": "recip",
    "sgn": "sign",
    "logarithm": "log",
    "pow_10": "pow10",
    "p_log10": "plog10",
    "abs_log10": "abslog10",
    "ln_gamma": "lngamma",
    "super_log": "slog",
    "clampmin": "clamp_min",
    "clampmax": "clamp_max",
}


def get_operation(name: str) -> Operation:
    """Look up an operation by canonical name or alias."""
    key = ALIASES.get(name, name)
    try:
        return OPERATIONS[key]
    except KeyError:
        raise FormulaError(f"Unknown operation '{name}'", "UNKNOWN_OPERATION") from None
