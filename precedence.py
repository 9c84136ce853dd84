"""
Precedence maps for the binary operators

A precedence map assigns each binary operator an integer rank. Higher ranks
bind tighter; equal ranks are evaluated left to right.
"""

from typing import Dict, Union

from tokenizer import OpKind, BINARY_OPERATORS


# =============================================================================
# PRECEDENCE MAPS
# =============================================================================

PRECEDENCE_BODMAS = {
    OpKind.ADD: 1,
    OpKind.SUB: 1,
    OpKind.MUL: 2,
    OpKind.DIV: 2,
}

PRECEDENCE_ADDITION_FIRST = {
    # Addition/subtraction bind tighter than multiplication/division
    OpKind.ADD: 2,
    OpKind.SUB: 2,
    OpKind.MUL: 1,
    OpKind.DIV: 1,
}

PRECEDENCE_FLAT = {
    # All operators have same precedence, so evaluation is strictly left to right
    OpKind.ADD: 1,
    OpKind.SUB: 1,
    OpKind.MUL: 1,
    OpKind.DIV: 1,
}

PRECEDENCE_MAPS = {
    'bodmas': PRECEDENCE_BODMAS,
    'addition_first': PRECEDENCE_ADDITION_FIRST,
    'flat': PRECEDENCE_FLAT,
}

DEFAULT_PRECEDENCE = 'bodmas'

# Rank given to '(' on the operator stack. It is never compared: a '(' stops
# every reduction loop before its rank would matter.
LEFT_PAREN_PRECEDENCE = max(max(m.values()) for m in PRECEDENCE_MAPS.values()) + 1


def get_precedence_map(name: str) -> Dict[OpKind, int]:
    """Look up a registered precedence map by name."""
    if name not in PRECEDENCE_MAPS:
        raise ValueError(f"Unknown precedence: {name}. "
                         f"Available: {list(PRECEDENCE_MAPS.keys())}")
    return PRECEDENCE_MAPS[name]


def resolve_precedence(precedence: Union[str, Dict[OpKind, int], None]) -> Dict[OpKind, int]:
    """
    Turn a precedence argument into a complete map.

    Args:
        precedence: A registered map name, a custom map, or None for the default

    Returns:
        Map with a rank for every binary operator

    Raises:
        ValueError: unknown name, or a custom map missing an operator
    """
    if precedence is None:
        return get_precedence_map(DEFAULT_PRECEDENCE)
    if isinstance(precedence, str):
        return get_precedence_map(precedence)

    missing = [op.symbol for op in BINARY_OPERATORS if op not in precedence]
    if missing:
        raise ValueError(f"Precedence map has no rank for: {', '.join(missing)}")
    return precedence


def list_precedence_maps() -> Dict[str, Dict[str, int]]:
    """Registered maps keyed by name, with operator symbols as keys (for display)."""
    return {
        name: {op.symbol: rank for op, rank in pmap.items()}
        for name, pmap in PRECEDENCE_MAPS.items()
    }
