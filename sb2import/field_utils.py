"""Shadow field resolution and legacy value conversion."""

from typing import Any, Tuple

from .constants import (
    BROADCAST_FIELD,
    BROADCAST_MENU_OPCODE,
    COLOUR_SHADOW_OPCODE,
    NUMBER_SHADOW_OPCODES,
    OBSCURED_COLOUR_DEFAULT,
    OBSCURED_NUMBER_DEFAULT,
    TEXT_SHADOW_OPCODE,
)


def decimal_to_hex(decimal: Any) -> str:
    """Convert a Scratch 2.0 decimal colour (possibly negative) to ``#rrggbb``.

    Fractional colours are truncated toward zero before conversion.
    """
    value = int(float(decimal))
    if value < 0:
        value += 0xFFFFFF + 1
    return f"#{value:06x}"


def shadow_field(
    shadow_opcode: str, input_name: str, raw_value: Any, obscured: bool
) -> Tuple[str, Any]:
    """Field name and value for the shadow block filling an input.

    When a reporter covers the input, the shadow gets the Scratch 2.0 default
    for its kind instead of the record's value.
    """
    if shadow_opcode in NUMBER_SHADOW_OPCODES:
        return "NUM", OBSCURED_NUMBER_DEFAULT if obscured else raw_value
    if shadow_opcode == TEXT_SHADOW_OPCODE:
        return "TEXT", "" if obscured else raw_value
    if shadow_opcode == COLOUR_SHADOW_OPCODE:
        if obscured:
            return "COLOUR", OBSCURED_COLOUR_DEFAULT
        return "COLOUR", decimal_to_hex(raw_value)
    if shadow_opcode == BROADCAST_MENU_OPCODE:
        return BROADCAST_FIELD, "" if obscured else raw_value
    # Drop-down menus name their field after the input
    return input_name, "" if obscured else raw_value
