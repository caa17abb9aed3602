import asyncio
from typing import Any, Dict, List

import pytest

from sb2import.block_parser import BlockParseContext
from sb2import.errors import AssetLoadError
from sb2import.registries import BroadcastMessageRegistry, VariableIdRegistry


class FakeLoaders:
    """Asset loaders that record every request and echo the record back."""

    def __init__(self) -> None:
        self.costume_calls: List[str] = []
        self.sound_calls: List[str] = []
        self.fail_on: set = set()

    async def load_costume(self, md5ext: str, costume: Dict[str, Any]) -> Dict[str, Any]:
        await asyncio.sleep(0)
        if md5ext in self.fail_on:
            raise AssetLoadError("Asset not found", md5ext)
        self.costume_calls.append(md5ext)
        return dict(costume, md5ext=md5ext)

    async def load_sound(self, md5ext: str, sound: Dict[str, Any]) -> Dict[str, Any]:
        await asyncio.sleep(0)
        self.sound_calls.append(md5ext)
        return dict(sound, md5ext=md5ext)


@pytest.fixture
def loaders() -> FakeLoaders:
    return FakeLoaders()


@pytest.fixture
def parse_ctx() -> BlockParseContext:
    variables = VariableIdRegistry()
    return BlockParseContext(
        get_variable_id=variables.resolver("stage", True),
        broadcasts=BroadcastMessageRegistry(),
    )
