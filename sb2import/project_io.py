import asyncio
import json
import os
import zipfile
from typing import Any, Dict, List, Optional

from .assets import ArchiveAssetStore, AssetLoader
from .constants import EXTENSION_SEPARATOR
from .diagnostics import DiagnosticContext
from .errors import ProjectImportError
from .importer import ImportResult, deserialize
from .parsed_node import BlockInput, CanonicalBlock
from .targets import Target, VariableType
from .utils import ensure_dir, load_json_file, write_json_file


PROJECT_JSON = "project.json"

COSTUME_KEYS = (
    "name",
    "bitmapResolution",
    "dataFormat",
    "assetId",
    "md5ext",
    "rotationCenterX",
    "rotationCenterY",
)
SOUND_KEYS = ("name", "assetId", "dataFormat", "format", "rate", "sampleCount", "md5ext")


def read_sb2_project(path: str) -> Dict[str, Any]:
    """Load the project document from an .sb2 archive or a bare project JSON file."""
    if not os.path.exists(path):
        raise ProjectImportError("Project not found", path)

    if zipfile.is_zipfile(path):
        with zipfile.ZipFile(path, "r") as archive:
            if PROJECT_JSON not in archive.namelist():
                raise ProjectImportError("project.json not found in the archive", path)
            with archive.open(PROJECT_JSON) as handle:
                try:
                    return json.load(handle)
                except ValueError as exc:
                    raise ProjectImportError("project.json is not valid JSON", str(exc)) from exc

    try:
        return load_json_file(path, {})
    except ValueError as exc:
        raise ProjectImportError("Project file is not valid JSON", str(exc)) from exc


def _serialize_opcode(opcode: str) -> str:
    # Scratch 3.0 files spell extension opcodes "pen_clear", not "pen.clear"
    return opcode.replace(EXTENSION_SEPARATOR, "_", 1)


def _serialize_input(block_input: BlockInput) -> Optional[List[Any]]:
    if block_input.block is None and block_input.shadow is None:
        return None
    if block_input.shadow is None:
        return [2, block_input.block]
    if block_input.block == block_input.shadow:
        return [1, block_input.shadow]
    return [3, block_input.block, block_input.shadow]


def _serialize_mutation(mutation: Dict[str, Any]) -> Dict[str, Any]:
    serialized: Dict[str, Any] = {}
    for key, value in mutation.items():
        if isinstance(value, bool):
            serialized[key] = "true" if value else "false"
        else:
            serialized[key] = value
    return serialized


def serialize_block(block: CanonicalBlock) -> Dict[str, Any]:
    inputs: Dict[str, Any] = {}
    for name, block_input in block.inputs.items():
        serialized_input = _serialize_input(block_input)
        if serialized_input is not None:
            inputs[name] = serialized_input

    entry: Dict[str, Any] = {
        "opcode": _serialize_opcode(block.opcode),
        "next": block.next,
        "parent": block.parent,
        "inputs": inputs,
        "fields": {name: [f.value, f.id] for name, f in block.fields.items()},
        "shadow": block.shadow,
        "topLevel": block.top_level,
    }
    if block.top_level:
        entry["x"] = block.x or 0
        entry["y"] = block.y or 0
    if block.mutation is not None:
        entry["mutation"] = _serialize_mutation(block.mutation)
    return entry


def serialize_target(target: Target) -> Dict[str, Any]:
    variables: Dict[str, List[Any]] = {}
    lists: Dict[str, List[Any]] = {}
    broadcasts: Dict[str, str] = {}
    for variable in target.variables.values():
        if variable.type == VariableType.LIST:
            lists[variable.id] = [variable.name, variable.value]
        elif variable.type == VariableType.BROADCAST_MESSAGE:
            broadcasts[variable.id] = variable.name
        else:
            payload: List[Any] = [variable.name, variable.value]
            if variable.is_cloud:
                payload.append(True)
            variables[variable.id] = payload

    entry: Dict[str, Any] = {
        "isStage": target.is_stage,
        "name": target.name,
        "variables": variables,
        "lists": lists,
        "broadcasts": broadcasts,
        "blocks": {block.id: serialize_block(block) for block in target.blocks},
        "comments": {},
        "currentCostume": target.current_costume,
        "costumes": [{k: c.get(k) for k in COSTUME_KEYS if k in c} for c in target.costumes],
        "sounds": [{k: s.get(k) for k in SOUND_KEYS if k in s} for s in target.sounds],
        "volume": target.volume,
        "layerOrder": target.layer_order,
    }
    if target.is_stage:
        entry.update({
            "tempo": target.tempo,
            "videoTransparency": target.video_transparency,
            "videoState": "on",
            "textToSpeechLanguage": None,
        })
    else:
        entry.update({
            "visible": target.visible,
            "x": target.x,
            "y": target.y,
            "size": target.size,
            "direction": target.direction,
            "draggable": target.draggable,
            "rotationStyle": target.rotation_style,
        })
    return entry


def _empty_stage() -> Dict[str, Any]:
    return serialize_target(Target(name="Stage", is_stage=True))


def serialize_project(result: ImportResult) -> Dict[str, Any]:
    """Build a Scratch 3.0 project.json payload from an import result."""
    targets = [serialize_target(t) for t in result.targets]
    if not any(t["isStage"] for t in targets):
        for layer, entry in enumerate(targets, start=1):
            entry["layerOrder"] = layer
        targets.insert(0, _empty_stage())

    return {
        "targets": targets,
        "monitors": [],
        "extensions": sorted(result.extensions.extension_ids),
        "meta": {
            "semver": "3.0.0",
            "vm": "0.2.0",
            "agent": "sb2import",
        },
    }


def write_sb3(result: ImportResult, output_path: str) -> None:
    project = serialize_project(result)
    ensure_dir(os.path.dirname(output_path) or ".")
    with zipfile.ZipFile(output_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(PROJECT_JSON, json.dumps(project, indent=4))
        seen_assets = set()
        for target in result.targets:
            for asset in list(target.costumes) + list(target.sounds):
                md5ext = asset.get("md5ext")
                data = asset.get("data")
                if not md5ext or data is None or md5ext in seen_assets:
                    continue
                seen_assets.add(md5ext)
                archive.writestr(md5ext, data)


def convert_sb2_to_sb3(
    input_path: str,
    output_path: str,
    force_sprite: bool = False,
    diagnostics: Optional[DiagnosticContext] = None,
) -> ImportResult:
    """Import an .sb2 file and write it out as .sb3, or as project.json if the output ends in .json."""
    project = read_sb2_project(input_path)

    asset_source = input_path if zipfile.is_zipfile(input_path) else os.path.dirname(input_path) or "."
    with ArchiveAssetStore(asset_source) as store:
        loader = AssetLoader(store)
        result = asyncio.run(deserialize(
            project,
            loader.load_costume,
            loader.load_sound,
            force_sprite=force_sprite,
            diagnostics=diagnostics,
        ))

    if output_path.lower().endswith(".json"):
        write_json_file(output_path, serialize_project(result))
    else:
        write_sb3(result, output_path)
    return result
