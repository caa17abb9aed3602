"""Targets, variables and the block container they own."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Set

from .parsed_node import CanonicalBlock
from .utils import uid


class VariableType(str, Enum):
    """Variable kinds, valued as the Scratch 3.0 runtime spells them."""
    SCALAR = ""
    LIST = "list"
    BROADCAST_MESSAGE = "broadcast_msg"


@dataclass
class Variable:
    id: str
    name: str
    type: VariableType = VariableType.SCALAR
    value: Any = 0
    is_cloud: bool = False


class BlockContainer:
    """Ordered block store for one target.

    Inserting a block whose id is already present is a no-op, so the first
    insertion wins and insertion order is preserved.
    """

    def __init__(self) -> None:
        self._blocks: Dict[str, CanonicalBlock] = {}

    def create_block(self, block: CanonicalBlock) -> None:
        if block.id in self._blocks:
            return
        self._blocks[block.id] = block

    def get(self, block_id: Optional[str]) -> Optional[CanonicalBlock]:
        if block_id is None:
            return None
        return self._blocks.get(block_id)

    def top_level_blocks(self) -> List[CanonicalBlock]:
        return [block for block in self._blocks.values() if block.top_level]

    def __iter__(self) -> Iterator[CanonicalBlock]:
        return iter(self._blocks.values())

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks


@dataclass
class Target:
    name: str
    is_stage: bool = False
    id: str = field(default_factory=uid)
    blocks: BlockContainer = field(default_factory=BlockContainer)
    variables: Dict[str, Variable] = field(default_factory=dict)
    costumes: List[Dict[str, Any]] = field(default_factory=list)
    sounds: List[Dict[str, Any]] = field(default_factory=list)
    x: float = 0
    y: float = 0
    direction: float = 90
    size: float = 100
    visible: bool = True
    draggable: bool = False
    rotation_style: str = "all around"
    current_costume: int = 0
    volume: float = 100
    layer_order: int = 0
    tempo: float = 60
    video_transparency: float = 50

    def add_variable(self, variable: Variable) -> None:
        self.variables[variable.id] = variable

    def lookup_variable_by_name(
        self, name: str, variable_type: VariableType = VariableType.SCALAR
    ) -> Optional[Variable]:
        for variable in self.variables.values():
            if variable.name == name and variable.type == variable_type:
                return variable
        return None


@dataclass
class ImportedExtensions:
    """Extensions discovered from namespaced opcodes while decoding."""
    extension_ids: Set[str] = field(default_factory=set)
    extension_urls: Dict[str, str] = field(default_factory=dict)
