import json
import os
import random
from itertools import count
from typing import Any


# Characters scratch-blocks uses for generated ids; excludes quotes and backslash.
ID_SOUP = (
    "!#$%()*+,-./:;=?@[]^_`{|}~"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz0123456789"
)


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def write_json_file(path: str, data: Any) -> None:
    ensure_dir(os.path.dirname(path) or ".")
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(data, handle, indent=4)


def load_json_file(path: str, default: Any) -> Any:
    if not os.path.exists(path):
        return default
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


_id_counter = count(1)


def gen_id(prefix: str = "id") -> str:
    return f"{prefix}_{next(_id_counter)}"


def uid(length: int = 20) -> str:
    """Random id in the style of scratch-blocks, for keys that must never match user text."""
    return "".join(random.choice(ID_SOUP) for _ in range(length))
