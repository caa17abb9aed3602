"""Constants used throughout the sb2 import."""

from typing import Dict, FrozenSet

# Shadow opcodes that hold a single NUM field
NUMBER_SHADOW_OPCODES: FrozenSet[str] = frozenset({
    "math_number",
    "math_whole_number",
    "math_positive_number",
    "math_integer",
    "math_angle",
})

TEXT_SHADOW_OPCODE = "text"
COLOUR_SHADOW_OPCODE = "colour_picker"
BROADCAST_MENU_OPCODE = "event_broadcast_menu"

# Scratch 2.0 defaults written into shadows that a reporter is covering
OBSCURED_NUMBER_DEFAULT = 10
OBSCURED_COLOUR_DEFAULT = "#990000"

# Fields whose value names a variable or list and needs an id
VARIABLE_REFERENCE_FIELDS: FrozenSet[str] = frozenset({"VARIABLE", "LIST"})
BROADCAST_FIELD = "BROADCAST_OPTION"

# scratch-blocks renders blocks larger than the 2.0 editor did
SCRIPT_X_SCALE = 1.5
SCRIPT_Y_SCALE = 2.2

# Separates an extension id from the block name in a canonical opcode
EXTENSION_SEPARATOR = "."

STOP_OPTIONS_WITH_NEXT: FrozenSet[str] = frozenset({
    "other scripts in sprite",
    "other scripts in stage",
})

ROTATION_STYLES: Dict[str, str] = {
    "none": "don't rotate",
    "leftRight": "left-right",
    "normal": "all around",
}

PROCEDURE_ARG_PREFIX = "input"
BROADCAST_ID_PREFIX = "broadcastMsgId-"
FRESH_MESSAGE_PREFIX = "message"
