"""Name to id registries shared by every target of one import.

Variables are scoped: names seen on the stage are global and keep the
stage's id everywhere, anything else is local to the target that uses it.
Broadcast messages are global and case-insensitive. A broadcast with an
empty name can only be given its final ``messageN`` name once the whole
project has been read, so the fields that used it are kept for a rewrite
in :meth:`BroadcastMessageRegistry.finalize`.
"""

from typing import Callable, Dict, List, Optional

from .constants import BROADCAST_ID_PREFIX, FRESH_MESSAGE_PREFIX
from .parsed_node import BlockField
from .utils import uid


VariableResolver = Callable[[str], str]


def _scoped_id(target_id: str, name: str) -> str:
    return f"{target_id}-{name}"


class VariableIdRegistry:
    def __init__(self) -> None:
        self._global_ids: Dict[str, str] = {}

    def reset(self) -> None:
        self._global_ids = {}

    def resolver(self, target_id: str, root: bool) -> VariableResolver:
        """Return the name to id lookup used while decoding one target."""
        if root:
            def resolve_global(name: str) -> str:
                self._global_ids[name] = _scoped_id(target_id, name)
                return self._global_ids[name]
            return resolve_global

        def resolve_local(name: str) -> str:
            if name in self._global_ids:
                return self._global_ids[name]
            return _scoped_id(target_id, name)
        return resolve_local


class BroadcastMessageRegistry:
    def __init__(self) -> None:
        self._messages: Dict[str, str] = {}
        self._empty_name_fields: List[BlockField] = []
        self.empty_name_key = uid()

    @property
    def messages(self) -> Dict[str, str]:
        """Broadcast name to id, in first-seen order."""
        return self._messages

    def register(self, name: str, field: Optional[BlockField] = None) -> str:
        """Intern a broadcast name and return its id."""
        key = str(name).lower()
        if key == "":
            key = self.empty_name_key
            if field is not None:
                self._empty_name_fields.append(field)
        if key not in self._messages:
            self._messages[key] = f"{BROADCAST_ID_PREFIX}{key}"
        return self._messages[key]

    def finalize(self) -> Dict[str, str]:
        """Give the empty-named message a fresh ``messageN`` name.

        Must only run after every target has been decoded, since the fresh
        name has to avoid every message name used anywhere in the project.
        """
        if self.empty_name_key in self._messages:
            index = 1
            while f"{FRESH_MESSAGE_PREFIX}{index}" in self._messages:
                index += 1
            fresh_name = f"{FRESH_MESSAGE_PREFIX}{index}"
            self._messages[fresh_name] = self._messages.pop(self.empty_name_key)
            for field in self._empty_name_fields:
                if field.value == "":
                    field.value = fresh_name
        return self._messages
