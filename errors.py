"""
Error types for expression evaluation

Every failure raised by the tokenizer or the evaluator is an ExpressionError,
which is also a ValueError so callers that only catch ValueError still work.
"""


class ExpressionError(ValueError):
    """Base class for all expression failures"""


class NumberParseError(ExpressionError):
    """A run of literal characters is not a valid finite decimal number"""

    def __init__(self, text: str, position: int):
        self.text = text
        self.position = position
        if text:
            message = f"Invalid number '{text}' at position {position}"
        else:
            message = f"Missing number before operator at position {position}"
        super().__init__(message)


class UnbalancedParenthesesError(ExpressionError):
    """A ')' without a matching '(' or a '(' left open at the end"""


class MalformedExpressionError(ExpressionError):
    """Operands and operators do not combine into exactly one value"""
