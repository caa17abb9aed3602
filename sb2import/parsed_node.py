"""Scratch 3.0 block nodes produced from Scratch 2.0 records."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class BlockInput:
    name: str
    block: Optional[str] = None
    shadow: Optional[str] = None


@dataclass
class BlockField:
    name: str
    value: Any
    id: Optional[str] = None
    variable_type: Optional[str] = None


class CanonicalBlock:
    """A Scratch 3.0 block before it is inserted into a block container."""

    def __init__(
        self,
        block_id: str,
        opcode: str,
        shadow: bool = False,
        parent: Optional[str] = None,
    ) -> None:
        self.id = block_id
        self.opcode = opcode
        self.inputs: Dict[str, BlockInput] = {}
        self.fields: Dict[str, BlockField] = {}
        self.parent = parent
        self.next: Optional[str] = None
        self.top_level = False
        self.shadow = shadow
        self.mutation: Optional[Dict[str, Any]] = None
        self.x: Optional[float] = None
        self.y: Optional[float] = None

    def __repr__(self) -> str:
        return f"CanonicalBlock({self.id!r}, {self.opcode!r})"


@dataclass
class DecodedBlock:
    """A decoded block and the subtrees generated beneath it, in attachment order."""
    block: CanonicalBlock
    children: List["DecodedBlock"] = field(default_factory=list)
