"""Import of a whole Scratch 2.0 project document.

The document is a tree of objects: the stage at the root with its sprites
as children. Each object is decoded synchronously, in document order, into
a target; only costume and sound loading is asynchronous. Broadcast
messages are collected across the whole tree and can only be turned into
stage variables once every object, with all its assets, is done.
"""

import asyncio
import math
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from .block_emitter import flatten, parse_block_list
from .block_parser import BlockParseContext
from .constants import ROTATION_STYLES, SCRIPT_X_SCALE, SCRIPT_Y_SCALE
from .diagnostics import DiagnosticContext
from .registries import BroadcastMessageRegistry, VariableIdRegistry, VariableResolver
from .specmap import SPEC_MAP, OpcodeSpec
from .targets import BlockContainer, ImportedExtensions, Target, Variable, VariableType


AssetRecord = Dict[str, Any]
AssetLoaderFn = Callable[[str, AssetRecord], Awaitable[AssetRecord]]


@dataclass
class ImportResult:
    targets: List[Target]
    extensions: ImportedExtensions


@dataclass
class ImportSession:
    """State shared by every object of one import run."""
    load_costume: AssetLoaderFn
    load_sound: AssetLoaderFn
    spec_map: Mapping[str, OpcodeSpec] = field(default_factory=lambda: SPEC_MAP)
    variables: VariableIdRegistry = field(default_factory=VariableIdRegistry)
    broadcasts: BroadcastMessageRegistry = field(default_factory=BroadcastMessageRegistry)
    extensions: ImportedExtensions = field(default_factory=ImportedExtensions)
    diagnostics: DiagnosticContext = field(default_factory=DiagnosticContext)


def parse_scripts(scripts: List[Any], blocks: BlockContainer, ctx: BlockParseContext) -> None:
    """Decode an object's top-level scripts into its block container.

    Each script is ``[x, y, [record, ...]]``; any other shape is skipped
    and reported as an error.
    """
    for script in scripts:
        if not (isinstance(script, list) and len(script) >= 3 and isinstance(script[2], list)):
            ctx.diagnostics.error("Malformed script entry")
            continue
        script_x, script_y, records = script[0], script[1], script[2]
        decoded = parse_block_list(records, ctx)
        if decoded:
            first = decoded[0].block
            first.x = script_x * SCRIPT_X_SCALE
            first.y = script_y * SCRIPT_Y_SCALE
            first.top_level = True
            first.parent = None
        for block in flatten(decoded):
            blocks.create_block(block)


def _declare_variables(obj: Dict[str, Any], target: Target, get_variable_id: VariableResolver) -> None:
    for variable in obj.get("variables", []):
        target.add_variable(Variable(
            get_variable_id(variable["name"]),
            variable["name"],
            VariableType.SCALAR,
            variable.get("value", 0),
            bool(variable.get("isPersistent", False)),
        ))


def _declare_lists(obj: Dict[str, Any], target: Target, get_variable_id: VariableResolver) -> None:
    for list_entry in obj.get("lists", []):
        target.add_variable(Variable(
            get_variable_id(list_entry["listName"]),
            list_entry["listName"],
            VariableType.LIST,
            list(list_entry.get("contents", [])),
        ))


def _apply_properties(obj: Dict[str, Any], target: Target) -> None:
    if "scratchX" in obj:
        target.x = obj["scratchX"]
    if "scratchY" in obj:
        target.y = obj["scratchY"]
    if "direction" in obj:
        target.direction = obj["direction"]
    if "isDraggable" in obj:
        target.draggable = obj["isDraggable"]
    if "scale" in obj:
        # Stored as a ratio, 1.0 meaning 100%
        target.size = obj["scale"] * 100
    if "visible" in obj:
        target.visible = obj["visible"]
    if "currentCostumeIndex" in obj:
        target.current_costume = int(math.floor(obj["currentCostumeIndex"] + 0.5))
    if obj.get("rotationStyle") in ROTATION_STYLES:
        target.rotation_style = ROTATION_STYLES[obj["rotationStyle"]]
    if "tempoBPM" in obj:
        target.tempo = obj["tempoBPM"]
    if "videoAlpha" in obj:
        target.video_transparency = 100 - 100 * obj["videoAlpha"]


def _costume_loads(obj: Dict[str, Any], session: ImportSession) -> List[Awaitable[AssetRecord]]:
    loads = []
    for source in obj.get("costumes", []):
        costume = {
            "name": source.get("costumeName"),
            "bitmapResolution": source.get("bitmapResolution") or 1,
            "rotationCenterX": source.get("rotationCenterX"),
            "rotationCenterY": source.get("rotationCenterY"),
            "baseLayerID": source.get("baseLayerID"),
        }
        loads.append(session.load_costume(source.get("baseLayerMD5"), costume))
    return loads


def _sound_loads(obj: Dict[str, Any], session: ImportSession) -> List[Awaitable[AssetRecord]]:
    loads = []
    for source in obj.get("sounds", []):
        sound = {
            "name": source.get("soundName"),
            "format": source.get("format"),
            "rate": source.get("rate"),
            "sampleCount": source.get("sampleCount"),
            "soundID": source.get("soundID"),
            "md5": source.get("md5"),
        }
        loads.append(session.load_sound(source.get("md5"), sound))
    return loads


@dataclass
class PendingObject:
    """A decoded target whose assets, and whose children's assets, are not loaded yet."""
    target: Target
    source: Dict[str, Any]
    children: List["PendingObject"] = field(default_factory=list)


async def _complete_object(pending: PendingObject, session: ImportSession) -> List[Target]:
    target = pending.target
    costumes, sounds, child_results = await asyncio.gather(
        asyncio.gather(*_costume_loads(pending.source, session)),
        asyncio.gather(*_sound_loads(pending.source, session)),
        asyncio.gather(*(_complete_object(child, session) for child in pending.children)),
    )
    target.costumes = list(costumes)
    target.sounds = list(sounds)

    targets = [target]
    for child_targets in child_results:
        targets.extend(child_targets)
    return targets


def _start_object(
    obj: Dict[str, Any], session: ImportSession, top_level: bool
) -> Optional[PendingObject]:
    """Decode an object and its children, leaving only their assets to load.

    Everything synchronous (scripts, variables, properties) is finished for
    the whole subtree before any loader is called, so nothing asynchronous
    can observe a half-built target.
    """
    if "objName" not in obj:
        # Watchers have no name and are not imported
        return None

    target = Target(name=obj["objName"], is_stage=top_level)
    session.diagnostics.set_target(target.name)

    if top_level:
        session.variables.reset()
    get_variable_id = session.variables.resolver(target.id, top_level)
    ctx = BlockParseContext(
        get_variable_id=get_variable_id,
        broadcasts=session.broadcasts,
        extensions=session.extensions,
        diagnostics=session.diagnostics,
        spec_map=session.spec_map,
    )

    _declare_variables(obj, target, get_variable_id)
    parse_scripts(obj.get("scripts", []), target.blocks, ctx)
    _declare_lists(obj, target, get_variable_id)
    _apply_properties(obj, target)

    pending = PendingObject(target, obj)
    for child in obj.get("children", []):
        pending_child = _start_object(child, session, False)
        if pending_child is not None:
            pending.children.append(pending_child)
    return pending


async def parse_scratch_object(
    obj: Dict[str, Any], session: ImportSession, top_level: bool
) -> List[Target]:
    """Targets for an object and its descendants, self first, in document order."""
    pending = _start_object(obj, session, top_level)
    if pending is None:
        return []
    return await _complete_object(pending, session)


def _materialize_broadcasts(root: Target, broadcasts: BroadcastMessageRegistry) -> None:
    for name, message_id in broadcasts.finalize().items():
        root.add_variable(Variable(message_id, name, VariableType.BROADCAST_MESSAGE, name))


async def deserialize(
    project: Dict[str, Any],
    load_costume: AssetLoaderFn,
    load_sound: AssetLoaderFn,
    force_sprite: bool = False,
    spec_map: Optional[Mapping[str, OpcodeSpec]] = None,
    diagnostics: Optional[DiagnosticContext] = None,
) -> ImportResult:
    """Import a parsed Scratch 2.0 project (or, with ``force_sprite``, a lone sprite).

    Asset loader failures propagate and fail the import.
    """
    session = ImportSession(
        load_costume=load_costume,
        load_sound=load_sound,
        spec_map=spec_map if spec_map is not None else SPEC_MAP,
        diagnostics=diagnostics if diagnostics is not None else DiagnosticContext(),
    )
    targets = await parse_scratch_object(project, session, not force_sprite)
    for layer, target in enumerate(targets):
        target.layer_order = layer

    # Only now is every broadcast name in the project known
    if targets:
        _materialize_broadcasts(targets[0], session.broadcasts)
    return ImportResult(targets, session.extensions)
