"""Linking decoded blocks into stacks and flattening them for insertion."""

from typing import Any, List, Optional

from .block_parser import BlockParseContext, parse_block
from .parsed_node import CanonicalBlock, DecodedBlock


def parse_block_list(records: List[Any], ctx: BlockParseContext) -> List[DecodedBlock]:
    """Decode a stack of records, chaining each kept block to the one before it.

    Records that fail to decode are skipped without breaking the chain. The
    first block's parent is left for the caller to set.
    """
    result: List[DecodedBlock] = []
    previous: Optional[CanonicalBlock] = None
    for record in records:
        decoded = parse_block(record, ctx)
        if decoded is None:
            continue
        if previous is not None:
            decoded.block.parent = previous.id
            previous.next = decoded.block.id
        previous = decoded.block
        result.append(decoded)
    return result


def flatten(decoded_blocks: List[DecodedBlock]) -> List[CanonicalBlock]:
    """Pre-order, depth-first list of blocks; every parent precedes its children."""
    final_blocks: List[CanonicalBlock] = []
    for decoded in decoded_blocks:
        final_blocks.append(decoded.block)
        final_blocks.extend(flatten(decoded.children))
    return final_blocks
