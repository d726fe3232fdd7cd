from typing import Any, Union

CardValue = Union[int, str]

UNKNOWN_CARD = '?'
BREAK_CARD = '☕'

# Ordered as shown to players
CARD_VALUES = (0, 1, 2, 3, 5, 8, 13, 21, 34, 55, 89, UNKNOWN_CARD, BREAK_CARD)

_NUMERIC_CARDS = frozenset(v for v in CARD_VALUES if isinstance(v, int))
_SENTINEL_CARDS = frozenset((UNKNOWN_CARD, BREAK_CARD))


def is_numeric_card(value: Any) -> bool:
    # bool is an int subclass; True must not pass for 1
    return isinstance(value, int) and not isinstance(value, bool) and value in _NUMERIC_CARDS


def normalize_card(value: Any) -> Any:
    """Map integral floats from JSON (``5.0``) onto the integer card."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def is_valid_card(value: Any) -> bool:
    if isinstance(value, str):
        return value in _SENTINEL_CARDS
    return is_numeric_card(value)
