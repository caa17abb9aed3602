"""Decoding of single Scratch 2.0 block records.

A record is a list whose first element is the legacy opcode and whose
remaining elements are the block's arguments in order. The opcode table
says what each position holds; this module turns the positions into named
inputs and fields, synthesizes the shadow blocks Scratch 3.0 expects in
every editable input, and applies the handful of opcode-specific rewrites
that the table alone cannot express.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .constants import (
    BROADCAST_FIELD,
    BROADCAST_MENU_OPCODE,
    EXTENSION_SEPARATOR,
    STOP_OPTIONS_WITH_NEXT,
    VARIABLE_REFERENCE_FIELDS,
)
from .diagnostics import DiagnosticContext
from .field_utils import shadow_field
from .parsed_node import BlockField, BlockInput, CanonicalBlock, DecodedBlock
from .procedure_utils import parse_procedure_arg_ids, parse_procedure_arg_map
from .registries import BroadcastMessageRegistry, VariableResolver
from .specmap import SPEC_MAP, FieldArg, InputArg, OpcodeSpec
from .targets import ImportedExtensions, VariableType
from .utils import gen_id


# Marks a position the record is too short to provide
MISSING = object()


@dataclass
class BlockParseContext:
    """Everything a record needs to be decoded, shared across one target's scripts."""
    get_variable_id: VariableResolver
    broadcasts: BroadcastMessageRegistry
    extensions: ImportedExtensions = field(default_factory=ImportedExtensions)
    diagnostics: DiagnosticContext = field(default_factory=DiagnosticContext)
    spec_map: Mapping[str, OpcodeSpec] = field(default_factory=lambda: SPEC_MAP)


def _is_record(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def _positional(record: Sequence[Any], index: int) -> Any:
    return record[index] if index < len(record) else MISSING


def _decode_nested(provided: List[Any], ctx: BlockParseContext) -> List[DecodedBlock]:
    # Import here to avoid circular dependency
    from .block_emitter import parse_block_list

    if _is_record(provided[0]):
        return parse_block_list(provided, ctx)
    single = parse_block(provided, ctx)
    return [single] if single is not None else []


def _apply_field(
    decoded: DecodedBlock, arg: FieldArg, provided: Any, ctx: BlockParseContext
) -> None:
    block = decoded.block
    if provided is MISSING:
        block.fields[arg.name] = BlockField(arg.name, None, variable_type=arg.variable_type)
        return

    block_field = BlockField(arg.name, provided)
    block.fields[arg.name] = block_field
    if arg.name in VARIABLE_REFERENCE_FIELDS:
        block_field.id = ctx.get_variable_id(provided)
    elif arg.name == BROADCAST_FIELD:
        block_field.id = ctx.broadcasts.register(provided, block_field)
    if isinstance(arg.variable_type, str):
        block_field.variable_type = arg.variable_type


def _apply_input(
    decoded: DecodedBlock, arg: InputArg, provided: Any, ctx: BlockParseContext
) -> None:
    block = decoded.block
    slot = BlockInput(arg.name)
    block.inputs[arg.name] = slot

    # A nested record covers the shadow even when nothing in it decodes
    obscured = isinstance(provided, list)
    if _is_record(provided):
        inner = _decode_nested(provided, ctx)
        if inner:
            inner[0].block.parent = block.id
            slot.block = inner[0].block.id
            decoded.children.extend(inner)

    if not arg.shadow_opcode:
        # No editable shadow, e.g. a boolean or a substack
        return

    # A missing value falls back to the kind's default, as if covered
    use_default = obscured or provided is MISSING
    field_name, field_value = shadow_field(arg.shadow_opcode, arg.name, provided, use_default)
    shadow_value_field = BlockField(field_name, field_value)
    if arg.shadow_opcode == BROADCAST_MENU_OPCODE:
        if not use_default:
            shadow_value_field.id = ctx.broadcasts.register(field_value, shadow_value_field)
        shadow_value_field.variable_type = VariableType.BROADCAST_MESSAGE.value

    shadow = CanonicalBlock(gen_id("shadow"), arg.shadow_opcode, shadow=True, parent=block.id)
    shadow.fields[field_name] = shadow_value_field
    decoded.children.append(DecodedBlock(shadow))

    slot.shadow = shadow.id
    if slot.block is None:
        slot.block = shadow.id


# Opcode-specific rewrites, applied after the generic argument pass

def _come_to_front(decoded: DecodedBlock, record: List[Any]) -> None:
    decoded.block.fields["FRONT_BACK"] = BlockField("FRONT_BACK", "front")


def _go_back_by_layers(decoded: DecodedBlock, record: List[Any]) -> None:
    decoded.block.fields["FORWARD_BACKWARD"] = BlockField("FORWARD_BACKWARD", "backward")


def _stop_scripts(decoded: DecodedBlock, record: List[Any]) -> None:
    # Stopping other scripts lets the block continue, so it needs a next connection
    option = _positional(record, 1)
    if isinstance(option, str) and option in STOP_OPTIONS_WITH_NEXT:
        decoded.block.mutation = {
            "tagName": "mutation",
            "hasnext": "true",
            "children": [],
        }


def _procedure_definition(decoded: DecodedBlock, record: List[Any]) -> None:
    proccode = _positional(record, 1)
    arg_names = _positional(record, 2)
    arg_defaults = _positional(record, 3)
    warp = _positional(record, 4)
    if proccode is MISSING:
        proccode = ""

    block = decoded.block
    prototype = CanonicalBlock(gen_id("proto"), "procedures_prototype", shadow=True, parent=block.id)
    prototype.mutation = {
        "tagName": "mutation",
        "proccode": proccode,
        "argumentnames": json.dumps([] if arg_names is MISSING else arg_names),
        "argumentids": json.dumps(parse_procedure_arg_ids(proccode)),
        "argumentdefaults": json.dumps([] if arg_defaults is MISSING else arg_defaults),
        "warp": False if warp is MISSING else warp,
        "children": [],
    }
    block.inputs["custom_block"] = BlockInput("custom_block", prototype.id, prototype.id)
    decoded.children.append(DecodedBlock(prototype))


def _procedure_call(decoded: DecodedBlock, record: List[Any]) -> None:
    proccode = _positional(record, 1)
    if proccode is MISSING:
        proccode = ""
    decoded.block.mutation = {
        "tagName": "mutation",
        "children": [],
        "proccode": proccode,
        "argumentids": json.dumps(parse_procedure_arg_ids(proccode)),
    }


_PARAMETER_REPORTERS = {
    "r": "argument_reporter_string_number",
    "b": "argument_reporter_boolean",
}


def _get_param(decoded: DecodedBlock, record: List[Any]) -> None:
    shape = _positional(record, 2)
    if isinstance(shape, str) and shape in _PARAMETER_REPORTERS:
        decoded.block.opcode = _PARAMETER_REPORTERS[shape]


POST_PROCESSORS: Dict[str, Callable[[DecodedBlock, List[Any]], None]] = {
    "comeToFront": _come_to_front,
    "goBackByLayers:": _go_back_by_layers,
    "stopScripts": _stop_scripts,
    "procDef": _procedure_definition,
    "call": _procedure_call,
    "getParam": _get_param,
}


def parse_block(record: List[Any], ctx: BlockParseContext) -> Optional[DecodedBlock]:
    """Decode one Scratch 2.0 record into a block and its generated children.

    Returns ``None`` (after recording a warning) when the opcode is unknown;
    callers must leave the record out of their sequence.
    """
    old_opcode = record[0] if record else None
    spec = ctx.spec_map.get(old_opcode) if isinstance(old_opcode, str) else None
    if spec is None:
        ctx.diagnostics.warning("Couldn't find SB2 block", str(old_opcode))
        return None

    if EXTENSION_SEPARATOR in spec.opcode:
        ctx.extensions.extension_ids.add(spec.opcode.split(EXTENSION_SEPARATOR, 1)[0])

    decoded = DecodedBlock(CanonicalBlock(gen_id("block"), spec.opcode))

    # Each call site carries the signature of the procedure it calls
    if old_opcode == "call":
        arg_map = parse_procedure_arg_map(_positional(record, 1))
    else:
        arg_map = list(spec.args)

    for index, arg in enumerate(arg_map, start=1):
        if arg is None:
            continue
        provided = _positional(record, index)
        if provided is MISSING:
            ctx.diagnostics.warning(f"Missing value for '{arg.name}'", old_opcode)
        if isinstance(arg, InputArg):
            _apply_input(decoded, arg, provided, ctx)
        else:
            _apply_field(decoded, arg, provided, ctx)

    post_processor = POST_PROCESSORS.get(old_opcode)
    if post_processor is not None:
        post_processor(decoded, record)
    return decoded
