"""
Arithmetic Expression Evaluator
Main entry point: evaluates one expression and reports tokens, postfix and result

Usage:
    python main.py '2+3*4'                 evaluate the argument
    python main.py '(2+3)*4' tree.html     also write an expression tree
    echo '10-3-2' | python main.py         read the expression from stdin

Environment:
    EXPR_DEBUG        enable DEBUG logging
    EXPR_PRECEDENCE   precedence map name (default: bodmas)
"""

import logging
import os
import sys

from errors import ExpressionError
from evaluator import evaluate_tokens, format_tokens
from precedence import DEFAULT_PRECEDENCE, get_precedence_map, list_precedence_maps
from tokenizer import tokenize


def configure_logging():
    """DEBUG logging when EXPR_DEBUG is set, warnings only otherwise."""
    level = logging.DEBUG if os.environ.get('EXPR_DEBUG') else logging.WARNING
    logging.basicConfig(level=level, format='%(name)s %(levelname)s: %(message)s')


def print_precedence_maps():
    print("Precedence maps:")
    for name, pmap in list_precedence_maps().items():
        print(f"  {name:20}: {pmap}")


def main(argv=None, stdin=None) -> int:
    """
    Run the evaluator from the command line.

    Args:
        argv: Arguments after the program name (defaults to sys.argv[1:])
        stdin: Stream read when no expression argument is given

    Returns:
        Process exit status: 0 on success, 1 on any expression error
            or unknown precedence map
    """
    argv = sys.argv[1:] if argv is None else argv
    stdin = sys.stdin if stdin is None else stdin

    precedence_name = os.environ.get('EXPR_PRECEDENCE') or DEFAULT_PRECEDENCE
    try:
        precedence_map = get_precedence_map(precedence_name)
    except ValueError as e:
        print(f"Error: {e}")
        print_precedence_maps()
        return 1

    expression = argv[0] if argv else stdin.read()
    output_file = argv[1] if len(argv) > 1 else None

    print(f"Input string: {expression.strip()}")
    if precedence_name != DEFAULT_PRECEDENCE:
        print(f"Precedence: {precedence_name}")

    try:
        tokens = tokenize(expression)
        print(f"Tokens: {format_tokens(tokens)}")

        result = evaluate_tokens(tokens, precedence_map)
        print(f"Postfix: {format_tokens(result.postfix)}")
        print(f"Result: {result.value}")
    except ExpressionError as e:
        print(f"Error: {e}")
        return 1

    if output_file:
        # Plotly is only loaded when a tree is requested
        from visualizer import TreeVisualizer

        visualizer = TreeVisualizer(result, expression.strip())
        visualizer.generate_html(output_file)
        print(f"[OK] Visualization saved to: {output_file}")

    return 0


def run():
    configure_logging()
    sys.exit(main())


if __name__ == "__main__":
    run()
