"""Formula trees for cost and goal functions.

A :class:`Formula` can be evaluated like any cost function, and supported
formulas can also be inverted, integrated and have their integral inverted.
Those extra operations are what let a game buy many levels of something at
once efficiently (see :mod:`formula_pkg.purchase`).

Integration is closed-form only: a formula may contain a single "complex"
(non-linear) operation on the path to its variable, surrounded by any number
of linear ones (add, sub, mul, div, neg). The linear nodes below the complex
node are handled by substitution, the ones above it by linearity.

Example:
    >>> from formula_pkg import Formula, Ref
    >>> level = Ref(0)
    >>> cost = Formula.variable(level).add(1).pow(2)
    >>> cost.evaluate(3)
    mpf('16.0')
    >>> cost.invert(16)
    mpf('3.0')
"""

from __future__ import annotations

from typing import Any, Callable

import mpmath

from . import numeric as N
from .computable import Ref, unref
from .logging_config import get_logger
from .operations import ConditionalOperation, Operation, StepOperation, get_operation
from .types import Capability, FormulaError

logger = get_logger("formula")

Modifier = Callable[["Formula"], "Formula"]


class Formula:
    """One node of a formula tree.

    A node is a variable leaf, a constant leaf, or an operation applied to
    inputs. Inputs are other formulas or plain/computable values.

    Args:
        inputs: Children of the node
        operation: Operation (or its name) applied to the inputs; omitted for a constant
        variable: Cell backing a variable leaf; mutually exclusive with the other modes
        has_variable: Declare an operation node variable-bearing when none of its inputs is
    """

    def __init__(
        self,
        inputs: tuple | list = (),
        operation: Operation | str | None = None,
        *,
        variable: Any = None,
        has_variable: bool = False,
    ):
        if isinstance(operation, str):
            operation = get_operation(operation)
        self.inputs: tuple = tuple(inputs)
        self.operation: Operation | None = None
        self.variable_index: int | None = None
        self.innermost_variable: Any = None
        self._is_variable = False
        self._has_variable = False

        if variable is not None:
            self._setup_variable(variable)
        elif operation is None:
            self._setup_constant()
        else:
            self._setup_operation(operation, has_variable)

        self.capabilities = self._compute_capabilities()

    def _setup_variable(self, variable: Any) -> None:
        self.inputs = (variable,)
        self._is_variable = True
        self._has_variable = True
        self.innermost_variable = variable

    def _setup_constant(self) -> None:
        if len(self.inputs) != 1:
            raise FormulaError(
                "An operation is required if inputs is not length 1", "INVALID_CONSTANT"
            )

    def _setup_operation(self, operation: Operation, has_variable: bool) -> None:
        has_inverse = bool(operation.rules) or type(operation).invert is not Operation.invert
        if has_variable and not has_inverse:
            raise FormulaError(
                "A formula cannot be marked as having a variable if it is not invertible",
                "NOT_SOLVABLE",
            )
        self.operation = operation
        variable_inputs = [
            i
            for i, source in enumerate(self.inputs)
            if isinstance(source, Formula) and source.has_variable()
        ]
        if len(variable_inputs) == 1:
            self._has_variable = True
            self.variable_index = variable_inputs[0]
            self.innermost_variable = self.inputs[self.variable_index].innermost_variable
        elif not variable_inputs and has_variable:
            self._has_variable = True
        elif len(variable_inputs) > 1:
            logger.debug(
                "Formula %s has %d variable inputs; treating it as constant-only",
                operation.name,
                len(variable_inputs),
            )

    def _compute_capabilities(self) -> Capability:
        capabilities = Capability.EVALUABLE
        if not self._has_variable:
            return capabilities
        if self._is_variable:
            return (
                capabilities
                | Capability.INVERTIBLE
                | Capability.INTEGRABLE
                | Capability.INTEGRAL_INVERTIBLE
            )
        operation = self.operation
        if operation.supports_invert(self):
            capabilities |= Capability.INVERTIBLE
        elif operation.rule(self) is not None and operation.rule(self).invert is not None:
            logger.debug("Dropping invert of %s: variable input is not invertible", operation.name)
        if operation.supports_integrate(self):
            capabilities |= Capability.INTEGRABLE
        if operation.supports_invert_integral(self):
            capabilities |= Capability.INTEGRAL_INVERTIBLE
        return capabilities

    # Structure

    @property
    def variable_input(self) -> Formula | None:
        """The single input carrying the variable, if any."""
        if self.variable_index is None:
            return None
        return self.inputs[self.variable_index]

    @property
    def _substitutes(self) -> bool:
        """Whether this node is the variable or linear in its variable input."""
        if self._is_variable:
            return True
        return (
            self.operation is not None
            and self.variable_index is not None
            and self.operation.substitutes(self)
        )

    def is_linear_chain(self) -> bool:
        """Whether only linear operations lie between this node and the variable."""
        node = self
        while not node._is_variable:
            if not node._substitutes:
                return False
            node = node.variable_input
        return True

    def linear_coefficients(self) -> tuple | None:
        """``(a, c)`` such that this formula equals ``a*x + c``, or None if it is not linear."""
        if self._is_variable:
            return N.ONE, N.ZERO
        if not self._substitutes:
            return None
        inner = self.variable_input.linear_coefficients()
        if inner is None:
            return None
        return self.operation.linear_coefficients(self, inner)

    def input_value(self, index: int, variable: Any = None) -> mpmath.mpf:
        return unref_formula_source(self.inputs[index], variable)

    def argument_values(self) -> list:
        """Current values of the inputs, with None in the variable's slot."""
        return [
            None if i == self.variable_index else self.input_value(i)
            for i in range(len(self.inputs))
        ]

    def variable_value(self, variable: Any = None) -> mpmath.mpf:
        if variable is not None:
            return N.D(variable)
        if self.innermost_variable is None:
            raise FormulaError("Cannot integrate non-existent variable", "NO_VARIABLE")
        return N.D(unref(self.innermost_variable))

    def unwind_substitutions(self, value: Any) -> mpmath.mpf:
        """Undo the substitution adjustments of the linear chain below this node."""
        value = N.D(value)
        node = self.variable_input
        while node is not None and not node._is_variable:
            if not node._substitutes:
                raise FormulaError(
                    "Cannot have two complex operations in an integrable formula",
                    "NESTED_COMPLEX",
                )
            value = node.operation.undo_substitution(node, value)
            node = node.variable_input
        return value

    # Capabilities

    def has_variable(self) -> bool:
        """Whether this formula has a single variable, reachable via :attr:`innermost_variable`."""
        return self._has_variable

    def is_invertible(self) -> bool:
        return Capability.INVERTIBLE in self.capabilities

    def is_integrable(self) -> bool:
        return Capability.INTEGRABLE in self.capabilities

    def is_integral_invertible(self) -> bool:
        return Capability.INTEGRAL_INVERTIBLE in self.capabilities

    # Queries

    def evaluate(self, variable: Any = None) -> mpmath.mpf:
        """Evaluate the current result of the formula.

        Args:
            variable: Optional override for the variable's value. Ignored if there is no variable

        Returns:
            The value of the formula
        """
        if self.operation is None:
            if self._is_variable:
                return N.D(variable if variable is not None else unref(self.inputs[0]))
            return unref_formula_source(self.inputs[0])
        override = variable if self._has_variable else None
        values = [self.input_value(i, override) for i in range(len(self.inputs))]
        return N.D(self.operation.evaluate(*values))

    def invert(self, value: Any) -> mpmath.mpf:
        """Find the variable value for which the formula would evaluate to ``value``.

        Raises:
            FormulaError: If the formula is not invertible
        """
        if not self.is_invertible():
            raise FormulaError("Cannot invert non-invertible formula", "NOT_INVERTIBLE")
        if self._is_variable:
            return N.D(value)
        return self.operation.invert(self, N.D(value))

    def evaluate_integral(self, variable: Any = None, stack: list | None = None) -> mpmath.mpf:
        """Evaluate the indefinite integral (without the constant of integration).

        Only one complex operation (anything besides +, -, *, /, negation) may
        appear between the root and the variable.

        Args:
            variable: Optional override for the variable's value
            stack: Substitution adjustments collected while inside the complex operation

        Returns:
            The value of the antiderivative

        Raises:
            FormulaError: If the formula is not integrable in closed form
        """
        if stack is None:
            # Outer part of the formula
            if not self._substitutes:
                # This node is the complex operation
                if not self.is_integrable():
                    raise FormulaError(
                        "Cannot integrate formula with non-existent operation",
                        "NOT_INTEGRABLE",
                    )
                stack = []
                value = self.operation.integrate(self, variable, stack)
                for substitution in stack:
                    value = substitution(value)
                return value
            if self._is_variable:
                x = self.variable_value(variable)
                return N.div(N.mul(x, x), 2)
            if self.is_integrable():
                return self.operation.integrate(self, variable, None)
            raise FormulaError("Cannot integrate formula without variable", "NOT_INTEGRABLE")

        # Inner part of the formula
        if not self._substitutes:
            raise FormulaError(
                "Cannot have two complex operations in an integrable formula",
                "NESTED_COMPLEX",
            )
        if self._is_variable:
            return self.variable_value(variable)
        operation = self.operation
        stack.append(lambda value: operation.apply_substitution(self, value))
        inner = operation.integrate_inner(self, variable, stack)
        if inner is not None:
            return inner
        return operation.integrate(self, variable, stack)

    def calculate_constant_of_integration(self) -> mpmath.mpf:
        """Constant that makes the integral at 1 equal the cost of the first purchase."""
        integral = self.evaluate_integral(1)
        actual_cost = self.evaluate(0)
        return N.sub(actual_cost, integral)

    def invert_integral(self, value: Any) -> mpmath.mpf:
        """Find the variable value for which the integral would equal ``value``.

        Raises:
            FormulaError: If the formula's integral is not invertible
        """
        if not self.is_integral_invertible():
            raise FormulaError(
                "Cannot invert integral of formula without invertible integral",
                "INTEGRAL_NOT_INVERTIBLE",
            )
        if self._is_variable:
            # Inverse of x^2/2 rather than identity, so it round-trips with evaluate_integral
            return N.sqrt(N.mul(value, 2))
        return self.operation.invert_integral(self, N.D(value))

    def equals(self, other: Formula) -> bool:
        """Structural comparison of two formula trees."""
        if not isinstance(other, Formula) or len(self.inputs) != len(other.inputs):
            return False
        for mine, theirs in zip(self.inputs, other.inputs):
            if isinstance(mine, Formula) and isinstance(theirs, Formula):
                if not mine.equals(theirs):
                    return False
            elif isinstance(mine, Formula) or isinstance(theirs, Formula):
                return False
            elif not N.eq(unref(mine), unref(theirs)):
                return False
        if (self.operation is None) != (other.operation is None):
            return False
        if self.operation is not None and not self.operation.equals(other.operation):
            return False
        return (
            self._is_variable == other._is_variable
            and self._has_variable == other._has_variable
            and self.capabilities == other.capabilities
        )

    def __repr__(self) -> str:
        if self._is_variable:
            return "x"
        if self.operation is None:
            return repr(self.inputs[0]) if isinstance(self.inputs[0], Formula) else str(unref(self.inputs[0]))
        args = ", ".join(
            repr(source) if isinstance(source, Formula) else str(unref(source))
            for source in self.inputs
        )
        return f"{self.operation.name}({args})"

    # Leaves and combinators

    @staticmethod
    def constant(value: Any) -> Formula:
        """Create a formula that evaluates to a constant value."""
        return Formula([value])

    @staticmethod
    def variable(value: Any) -> Formula:
        """Create a formula that is the variable for an outer formula.

        Args:
            value: A :class:`Ref` or other computable holding the variable's current value
        """
        return Formula(variable=value)

    def step(self, start: Any, modifier: Modifier) -> Formula:
        """Create a step-wise formula: after ``start`` the modifier also applies.

        The incoming value is assumed continuous and monotonically increasing.
        The modifier receives the incoming value minus ``start``; so if the
        incoming formula evaluates to 200 with a step at 150, it is given 50.

        Args:
            start: The incoming value at which the step begins
            modifier: Builds the step from a variable formula
        """
        inner = modifier(Formula.variable(Ref(0)))
        return Formula([self], StepOperation(inner, start))

    def conditional(self, condition: Any, modifier: Modifier) -> Formula:
        """Apply ``modifier`` to the incoming value while ``condition`` holds.

        Args:
            condition: A bool, :class:`Ref` or callable read on every evaluation
            modifier: Builds the modified formula from a variable formula
        """
        inner = modifier(Formula.variable(Ref(0)))
        return Formula([self], ConditionalOperation(inner, condition))

    if_ = conditional

    # Operations. Each works as a method (f.add(2)) and as a factory
    # called on the class (Formula.add(2, f)).

    def abs(self) -> Formula:
        return Formula([self], "abs")

    def neg(self) -> Formula:
        return Formula([self], "neg")

    negate = neg
    negated = neg

    def sign(self) -> Formula:
        return Formula([self], "sign")

    sgn = sign

    def round(self) -> Formula:
        return Formula([self], "round")

    def floor(self) -> Formula:
        return Formula([self], "floor")

    def ceil(self) -> Formula:
        return Formula([self], "ceil")

    def trunc(self) -> Formula:
        return Formula([self], "trunc")

    def add(self, value: Any) -> Formula:
        return Formula([self, value], "add")

    plus = add

    def sub(self, value: Any) -> Formula:
        return Formula([self, value], "sub")

    subtract = sub
    minus = sub

    def mul(self, value: Any) -> Formula:
        return Formula([self, value], "mul")

    multiply = mul
    times = mul

    def div(self, value: Any) -> Formula:
        return Formula([self, value], "div")

    divide = div
    divide_by = div
    divided_by = div

    def recip(self) -> Formula:
        return Formula([self], "recip")

    reciprocal = recip
    reciprocate = recip

    def max(self, value: Any) -> Formula:
        return Formula([self, value], "max")

    def min(self, value: Any) -> Formula:
        return Formula([self, value], "min")

    def maxabs(self, value: Any) -> Formula:
        return Formula([self, value], "maxabs")

    def minabs(self, value: Any) -> Formula:
        return Formula([self, value], "minabs")

    def clamp(self, lower: Any, upper: Any) -> Formula:
        return Formula([self, lower, upper], "clamp")

    def clamp_min(self, value: Any) -> Formula:
        return Formula([self, value], "clamp_min")

    def clamp_max(self, value: Any) -> Formula:
        return Formula([self, value], "clamp_max")

    def plog10(self) -> Formula:
        return Formula([self], "plog10")

    def abslog10(self) -> Formula:
        return Formula([self], "abslog10")

    def log10(self) -> Formula:
        return Formula([self], "log10")

    def log(self, base: Any) -> Formula:
        return Formula([self, base], "log")

    logarithm = log

    def log2(self) -> Formula:
        return Formula([self], "log2")

    def ln(self) -> Formula:
        return Formula([self], "ln")

    def pow(self, value: Any) -> Formula:
        return Formula([self, value], "pow")

    def pow10(self) -> Formula:
        return Formula([self], "pow10")

    def pow_base(self, value: Any) -> Formula:
        """``value ** self``."""
        return Formula([self, value], "pow_base")

    def root(self, value: Any) -> Formula:
        return Formula([self, value], "root")

    def factorial(self) -> Formula:
        return Formula([self], "factorial")

    def gamma(self) -> Formula:
        return Formula([self], "gamma")

    def lngamma(self) -> Formula:
        return Formula([self], "lngamma")

    def exp(self) -> Formula:
        return Formula([self], "exp")

    def sqr(self) -> Formula:
        return Formula.pow(self, 2)

    def sqrt(self) -> Formula:
        return Formula.root(self, 2)

    def cube(self) -> Formula:
        return Formula.pow(self, 3)

    def cbrt(self) -> Formula:
        return Formula.root(self, 3)

    def tetrate(self, height: Any = 2, payload: Any = 1) -> Formula:
        return Formula([self, height, payload], "tetrate")

    def iteratedexp(self, height: Any = 2, payload: Any = 1) -> Formula:
        return Formula([self, height, payload], "iteratedexp")

    def iteratedlog(self, base: Any = 10, times: Any = 1) -> Formula:
        return Formula([self, base, times], "iteratedlog")

    def slog(self, base: Any = 10) -> Formula:
        return Formula([self, base], "slog")

    def layeradd10(self, diff: Any) -> Formula:
        return Formula([self, diff], "layeradd10")

    def layeradd(self, diff: Any, base: Any = 10) -> Formula:
        return Formula([self, diff, base], "layeradd")

    def lambertw(self) -> Formula:
        return Formula([self], "lambertw")

    def ssqrt(self) -> Formula:
        return Formula([self], "ssqrt")

    def pentate(self, height: Any = 2, payload: Any = 1) -> Formula:
        return Formula([self, height, payload], "pentate")

    def sin(self) -> Formula:
        return Formula([self], "sin")

    def cos(self) -> Formula:
        return Formula([self], "cos")

    def tan(self) -> Formula:
        return Formula([self], "tan")

    def asin(self) -> Formula:
        return Formula([self], "asin")

    def acos(self) -> Formula:
        return Formula([self], "acos")

    def atan(self) -> Formula:
        return Formula([self], "atan")

    def sinh(self) -> Formula:
        return Formula([self], "sinh")

    def cosh(self) -> Formula:
        return Formula([self], "cosh")

    def tanh(self) -> Formula:
        return Formula([self], "tanh")

    def asinh(self) -> Formula:
        return Formula([self], "asinh")

    def acosh(self) -> Formula:
        return Formula([self], "acosh")

    def atanh(self) -> Formula:
        return Formula([self], "atanh")

    # Python operators

    def __add__(self, other: Any) -> Formula:
        return Formula.add(self, other)

    def __radd__(self, other: Any) -> Formula:
        return Formula.add(other, self)

    def __sub__(self, other: Any) -> Formula:
        return Formula.sub(self, other)

    def __rsub__(self, other: Any) -> Formula:
        return Formula.sub(other, self)

    def __mul__(self, other: Any) -> Formula:
        return Formula.mul(self, other)

    def __rmul__(self, other: Any) -> Formula:
        return Formula.mul(other, self)

    def __truediv__(self, other: Any) -> Formula:
        return Formula.div(self, other)

    def __rtruediv__(self, other: Any) -> Formula:
        return Formula.div(other, self)

    def __pow__(self, other: Any) -> Formula:
        return Formula.pow(self, other)

    def __rpow__(self, other: Any) -> Formula:
        return Formula.pow(other, self)

    def __neg__(self) -> Formula:
        return Formula.neg(self)

    def __abs__(self) -> Formula:
        return Formula.abs(self)


def unref_formula_source(value: Any, variable: Any = None) -> mpmath.mpf:
    """Current value of a formula input: evaluate formulas, read computables."""
    if isinstance(value, Formula):
        return value.evaluate(variable)
    return N.D(unref(value))
