"""
Shunting-yard evaluator for arithmetic expressions

Consumes a token list once, left to right, with two stacks: pending operators
and pending values. Operators are applied as soon as precedence allows, so the
expression is evaluated while it is converted to postfix.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from errors import MalformedExpressionError, UnbalancedParenthesesError
from precedence import LEFT_PAREN_PRECEDENCE, resolve_precedence
from tokenizer import Number, OpKind, Operator, Token, tokenize

logger = logging.getLogger(__name__)

PrecedenceArg = Union[str, Dict[OpKind, int], None]


def _divide(left: float, right: float) -> float:
    """IEEE-754 division: a zero divisor gives inf, -inf or nan instead of raising."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


ARITHMETIC = {
    OpKind.ADD: lambda left, right: left + right,
    OpKind.SUB: lambda left, right: left - right,
    OpKind.MUL: lambda left, right: left * right,
    OpKind.DIV: _divide,
}


@dataclass(frozen=True)
class EvaluationResult:
    """
    Outcome of a successful evaluation.

    Attributes:
        value: The computed number (may be inf or nan after division by zero)
        postfix: Tokens in the order the evaluator committed them, i.e. the
            reverse Polish form of the input
    """
    value: float
    postfix: Tuple[Token, ...] = ()


@dataclass
class StackEntry:
    """An operator waiting on the operator stack, with its rank"""
    kind: OpKind
    precedence: int


class ExpressionEvaluator:
    """Runs the shunting-yard automaton over one token list"""

    def __init__(self, tokens: List[Token], precedence_map: PrecedenceArg = None):
        self.tokens = tokens
        self.precedence_map = resolve_precedence(precedence_map)
        self.operators: List[StackEntry] = []
        self.values: List[float] = []
        self.postfix: List[Token] = []

    def run(self) -> EvaluationResult:
        for token in self.tokens:
            if isinstance(token, Number):
                self.values.append(token.value)
                self.postfix.append(token)
            elif token.kind == OpKind.LEFT_PAREN:
                self.operators.append(StackEntry(token.kind, LEFT_PAREN_PRECEDENCE))
            elif token.kind == OpKind.RIGHT_PAREN:
                self._close_group()
            else:
                self._push_operator(token.kind)

        self._finish()

        if len(self.values) != 1:
            raise MalformedExpressionError(
                f"Expression left {len(self.values)} values instead of 1")
        return EvaluationResult(self.values[0], tuple(self.postfix))

    def _push_operator(self, kind: OpKind):
        """Reduce everything that binds at least as tightly, then wait on the stack."""
        precedence = self.precedence_map[kind]
        while (self.operators
               and self.operators[-1].kind != OpKind.LEFT_PAREN
               and self.operators[-1].precedence >= precedence):
            self._apply(self.operators.pop().kind)
        self.operators.append(StackEntry(kind, precedence))

    def _close_group(self):
        while self.operators:
            entry = self.operators.pop()
            if entry.kind == OpKind.LEFT_PAREN:
                return
            self._apply(entry.kind)
        raise UnbalancedParenthesesError("Unmatched closing parenthesis")

    def _finish(self):
        while self.operators:
            entry = self.operators.pop()
            if entry.kind == OpKind.LEFT_PAREN:
                raise UnbalancedParenthesesError("Unmatched opening parenthesis")
            self._apply(entry.kind)

    def _apply(self, kind: OpKind):
        """Pop right then left, push left OP right."""
        if len(self.values) < 2:
            raise MalformedExpressionError(f"Operator '{kind.symbol}' is missing an operand")
        right = self.values.pop()
        left = self.values.pop()
        self.values.append(ARITHMETIC[kind](left, right))
        self.postfix.append(Operator(kind))


def evaluate_tokens(tokens: List[Token],
                    precedence_map: PrecedenceArg = None) -> EvaluationResult:
    """
    Evaluate a token list produced by tokenize().

    Args:
        tokens: Number and Operator tokens in infix order
        precedence_map: Registered map name, custom map, or None for BODMAS

    Returns:
        EvaluationResult with the value and the postfix trace

    Raises:
        UnbalancedParenthesesError: unmatched '(' or ')'
        MalformedExpressionError: operands and operators don't combine into one value
    """
    evaluator = ExpressionEvaluator(tokens, precedence_map)
    try:
        result = evaluator.run()
    except (MalformedExpressionError, UnbalancedParenthesesError) as e:
        logger.debug("Evaluation failed after postfix [%s]: %s",
                     format_tokens(evaluator.postfix), e)
        raise
    logger.debug("Postfix: %s", format_tokens(result.postfix))
    logger.debug("Result: %s", result.value)
    return result


def evaluate(expression: str, precedence_map: PrecedenceArg = None) -> EvaluationResult:
    """Tokenize and evaluate an expression string."""
    return evaluate_tokens(tokenize(expression), precedence_map)


def calculate(expression: str, precedence_map: PrecedenceArg = None) -> float:
    return evaluate(expression, precedence_map).value


def to_postfix(expression: str) -> List[Token]:
    return list(evaluate(expression).postfix)


def format_tokens(tokens) -> str:
    """Render tokens space separated, e.g. '2 3 4 * +'."""
    return ' '.join(str(t) for t in tokens)


def try_calculate(expression: str) -> Optional[float]:
    """Like calculate(), but returns None on any expression error."""
    try:
        return calculate(expression)
    except ValueError as e:
        logger.debug("Could not evaluate %r: %s", expression, e)
        return None


if __name__ == "__main__":
    for expr in ["2+3*4", "(2+3)*4", "10-3-2", "2/0", "8/(3-3)*0"]:
        result = evaluate(expr)
        print(f"{expr:15} = {result.value:<8} postfix: {format_tokens(result.postfix)}")
