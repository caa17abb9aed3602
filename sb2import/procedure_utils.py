"""Procedure (custom block) related utilities."""

import re
from typing import List, Optional

from .constants import PROCEDURE_ARG_PREFIX
from .specmap import InputArg

# %n, %b and %s are argument slots unless escaped with a backslash
_ARG_MARKER = re.compile(r"(?<!\\)%([nbs])")

_SHADOW_FOR_MARKER = {
    "n": "math_number",
    "s": "text",
    "b": None,
}


def parse_procedure_arg_map(proccode: str) -> List[Optional[InputArg]]:
    """Build the argument list for a procedure call from its signature.

    The leading ``None`` lines up with the record position that carries the
    signature itself, so the list can be walked in step with the record.
    """
    arg_map: List[Optional[InputArg]] = [None]
    if not isinstance(proccode, str):
        return arg_map
    for index, match in enumerate(_ARG_MARKER.finditer(proccode)):
        arg_map.append(
            InputArg(f"{PROCEDURE_ARG_PREFIX}{index}", _SHADOW_FOR_MARKER[match.group(1)])
        )
    return arg_map


def parse_procedure_arg_ids(proccode: str) -> List[str]:
    """Generated argument ids (``input0``, ``input1``, ...) for a signature."""
    return [arg.name for arg in parse_procedure_arg_map(proccode) if arg is not None]
