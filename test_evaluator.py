"""
Tests for the shunting-yard evaluator

Covers precedence, associativity, grouping, operand order,
IEEE division, the error taxonomy and precedence maps.
"""

import math
import random
import struct

import pytest

from errors import (
    ExpressionError, MalformedExpressionError, NumberParseError,
    UnbalancedParenthesesError,
)
from evaluator import (
    calculate, evaluate, evaluate_tokens, format_tokens, to_postfix, try_calculate,
)
from precedence import PRECEDENCE_BODMAS, get_precedence_map, list_precedence_maps
from tokenizer import Number, Operator, OpKind


@pytest.mark.parametrize("expression,expected", [
    ("2+3*4", 14.0),         # multiplication binds tighter
    ("(2+3)*4", 20.0),       # brackets override precedence
    ("10-3-2", 5.0),         # left associative
    ("100/10/5", 2.0),
    ("8-4+2", 6.0),
    ("2*3+4*5", 26.0),
    ("4-5*2+3", -3.0),
    ("2*(3+4)*5", 70.0),
    ("((2))", 2.0),
    ("(((1+2)))*(3)", 9.0),
    ("1.5*4", 6.0),
    ("7", 7.0),
    (" 6 / ( 1 + 2 ) ", 2.0),
])
def test_evaluate_valid(expression, expected):
    assert evaluate(expression).value == expected


def test_operand_order_for_subtraction_and_division():
    assert calculate("1-2") == -1.0
    assert calculate("1/4") == 0.25
    assert calculate("2*3-10") == -4.0
    assert calculate("12/(1+2)") == 4.0


@pytest.mark.parametrize("expression,postfix", [
    ("2+3*4", "2 3 4 * +"),
    ("(2+3)*4", "2 3 + 4 *"),
    ("10-3-2", "10 3 - 2 -"),
    ("1*2+3*4", "1 2 * 3 4 * +"),
    ("1-(2-3)", "1 2 3 - -"),
])
def test_postfix_trace(expression, postfix):
    assert format_tokens(evaluate(expression).postfix) == postfix


def test_to_postfix_returns_tokens():
    assert to_postfix("1+2") == [Number(1), Number(2), Operator(OpKind.ADD)]


def test_evaluate_tokens_directly():
    tokens = [Number(6), Operator(OpKind.DIV), Number(4)]
    assert evaluate_tokens(tokens).value == 1.5


@pytest.mark.parametrize("expression", ["(1+2", "((1)", "1+2)", ")(", ")", "(1+2))*3"])
def test_unbalanced_parentheses(expression):
    with pytest.raises(UnbalancedParenthesesError):
        evaluate(expression)


@pytest.mark.parametrize("expression", [
    "1 2",        # two operands, no operator
    "",           # no tokens at all
    "1+",         # trailing operator
    "3 *",
    "()",
    "2(3)",
    "(1+2)(3)",
    "(1+)",
])
def test_malformed_expression(expression):
    with pytest.raises(MalformedExpressionError):
        evaluate(expression)


@pytest.mark.parametrize("expression", ["-1", "1+-2", "*3", "(-2)"])
def test_missing_number_is_parse_error(expression):
    with pytest.raises(NumberParseError):
        evaluate(expression)


def test_errors_share_a_base_class():
    for expression in ["(1", "1 2", "1+x"]:
        with pytest.raises(ExpressionError):
            evaluate(expression)
        with pytest.raises(ValueError):
            evaluate(expression)


def test_division_by_zero_is_not_an_error():
    assert calculate("2/0") == math.inf
    assert calculate("1-2/0") == -math.inf
    assert calculate("2/(1-1)") == math.inf
    assert math.isnan(calculate("0/0"))
    assert math.isnan(calculate("2/0*0"))


def test_division_by_negative_zero():
    # 0*(0-1) is -0.0
    assert calculate("1/(0*(0-1))") == -math.inf


def test_evaluation_is_repeatable():
    expression = "(1.1+2.2)*3.3/7-0.1"
    first = evaluate(expression)
    second = evaluate(expression)
    assert struct.pack('<d', first.value) == struct.pack('<d', second.value)
    assert first.postfix == second.postfix


def test_try_calculate():
    assert try_calculate("1+1") == 2.0
    assert try_calculate("(1") is None
    assert try_calculate("1 2") is None
    assert try_calculate("1+y") is None


def _random_expression(rng, depth):
    if depth == 0 or rng.random() < 0.3:
        return str(rng.randint(1, 9))
    left = _random_expression(rng, depth - 1)
    right = _random_expression(rng, depth - 1)
    expression = f"{left}{rng.choice('+-*/')}{right}"
    if rng.random() < 0.4:
        expression = f"({expression})"
    return expression


def test_well_formed_expressions_reduce_to_one_value():
    rng = random.Random(1234)
    for _ in range(300):
        expression = _random_expression(rng, 4)
        result = evaluate(expression)

        numbers = [t for t in result.postfix if isinstance(t, Number)]
        operators = [t for t in result.postfix if isinstance(t, Operator)]
        assert len(numbers) == len(operators) + 1
        assert all(t.kind not in (OpKind.LEFT_PAREN, OpKind.RIGHT_PAREN) for t in operators)

        try:
            expected = eval(expression)
        except ZeroDivisionError:
            # Python raises where the evaluator carries inf/nan onward
            continue
        assert result.value == pytest.approx(expected, rel=1e-12)


# =============================================================================
# PRECEDENCE MAPS
# =============================================================================

def test_flat_precedence_is_left_to_right():
    assert calculate("2+3*4", "flat") == 20.0
    assert format_tokens(evaluate("2+3*4", "flat").postfix) == "2 3 + 4 *"


def test_addition_first_precedence():
    assert calculate("2*3+4", "addition_first") == 14.0
    assert calculate("(2*3)+4", "addition_first") == 10.0


def test_custom_precedence_map():
    custom = dict(PRECEDENCE_BODMAS)
    custom[OpKind.SUB] = 3
    assert calculate("2*5-3", custom) == 4.0


def test_unknown_precedence_name():
    with pytest.raises(ValueError, match="Unknown precedence"):
        evaluate("1+1", "pemdas")
    with pytest.raises(ValueError):
        get_precedence_map("pemdas")


def test_incomplete_precedence_map():
    with pytest.raises(ValueError, match="no rank for"):
        evaluate("1+1", {OpKind.ADD: 1})


def test_list_precedence_maps():
    maps = list_precedence_maps()
    assert maps['bodmas'] == {'+': 1, '-': 1, '*': 2, '/': 2}
    assert set(maps) == {'bodmas', 'addition_first', 'flat'}


@pytest.mark.parametrize("expression", ["١+٢", "１２+1"])
def test_non_ascii_digits_are_rejected(expression):
    with pytest.raises(NumberParseError):
        calculate(expression)
