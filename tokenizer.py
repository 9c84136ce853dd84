"""
Tokenizer for arithmetic expressions
Supports: +, -, *, / operators, decimal numbers, and parentheses
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from errors import NumberParseError


class OpKind(Enum):
    """Operator and parenthesis kinds, valued by their source symbol"""
    LEFT_PAREN = '('
    RIGHT_PAREN = ')'
    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'

    @property
    def symbol(self) -> str:
        return self.value


BINARY_OPERATORS = [OpKind.ADD, OpKind.SUB, OpKind.MUL, OpKind.DIV]

# Every character that ends a literal and becomes an Operator token
OPERATOR_SYMBOLS = {kind.symbol: kind for kind in OpKind}

# Digits with an optional fraction, or a bare fraction, with an optional exponent.
# Signs are operators, so an exponent can never carry one. ASCII digits only.
NUMBER_PATTERN = re.compile(r'(?:\d+\.?\d*|\.\d+)(?:[eE]\d+)?', re.ASCII)


@dataclass(frozen=True)
class Number:
    value: float

    def __str__(self):
        return f"{self.value:g}"


@dataclass(frozen=True)
class Operator:
    kind: OpKind

    def __str__(self):
        return self.kind.symbol


Token = Union[Number, Operator]


def parse_number(text: str, position: int) -> Number:
    """
    Parse one literal run into a Number token.

    Args:
        text: The accumulated literal characters
        position: Index of the first character of the run in the input

    Returns:
        Number token

    Raises:
        NumberParseError: if the run is empty, not a decimal literal,
            or overflows to a non-finite value
    """
    if not NUMBER_PATTERN.fullmatch(text):
        raise NumberParseError(text, position)
    value = float(text)
    if not math.isfinite(value):
        raise NumberParseError(text, position)
    return Number(value)


def tokenize(expression: str) -> List[Token]:
    """
    Tokenize an arithmetic expression into a list of tokens.

    Whitespace (any character at or below the space code point) separates
    literals and is otherwise dropped. No check is made that the token
    sequence is a legal expression, except that a binary operator must
    have a literal or a ')' on its left.

    Args:
        expression: String like "2+3*5" or "(1 + 2) / 4"

    Returns:
        List of Number and Operator tokens

    Examples:
        >>> [str(t) for t in tokenize("2+3*5")]
        ['2', '+', '3', '*', '5']
        >>> [str(t) for t in tokenize("(1.5 + 2) / 4")]
        ['(', '1.5', '+', '2', ')', '/', '4']
    """
    tokens: List[Token] = []
    pending = []
    start = 0

    def flush():
        if pending:
            tokens.append(parse_number(''.join(pending), start))
            pending.clear()

    for i, char in enumerate(expression):
        if char <= ' ':
            flush()
            continue

        kind = OPERATOR_SYMBOLS.get(char)
        if kind is None:
            if not pending:
                start = i
            pending.append(char)
            continue

        flush()
        if kind in BINARY_OPERATORS:
            # An operator needs something on its left to act on
            prev = tokens[-1] if tokens else None
            if not (isinstance(prev, Number) or prev == Operator(OpKind.RIGHT_PAREN)):
                raise NumberParseError('', i)
        tokens.append(Operator(kind))

    flush()
    return tokens


if __name__ == "__main__":
    test_expressions = [
        "2+3*5",
        "10-3-2",
        "(2+3)*5",
        "2*(3+4)",
        "((2+3))",
        "(2+3)*(4+5)",
        " 1.5 / .5 ",
    ]

    print("Testing tokenizer:")
    print("-" * 50)
    for expr in test_expressions:
        tokens = tokenize(expr)
        print(f"{expr:20} -> {[str(t) for t in tokens]}")
