"""Costume and sound loading for imported targets.

Scratch 2.0 archives store each payload under the numeric id the project
gives it (``0.svg``, ``1.wav``); loose asset folders store them under their
md5 name. :class:`ArchiveAssetStore` reads either layout, and
:class:`AssetLoader` turns the project's costume and sound entries into
populated Scratch 3.0 asset records.
"""

import io
import os
import re
import zipfile
from typing import Any, Dict, List, Optional, Tuple

from PIL import Image

from .errors import AssetLoadError


BITMAP_FORMATS = {"png", "jpg", "jpeg", "gif", "bmp", "webp"}


def probe_image_size(data: bytes, ext: str) -> Optional[Tuple[float, float]]:
    ext = ext.lower()

    if ext in BITMAP_FORMATS:
        try:
            with Image.open(io.BytesIO(data)) as img:
                w, h = img.size
                return float(w), float(h)
        except (OSError, ValueError):
            return None

    if ext == "svg":
        content = data[:2000].decode("utf-8", errors="ignore")
        width_match = re.search(r"width=\"([0-9.]+)", content)
        height_match = re.search(r"height=\"([0-9.]+)", content)
        if width_match and height_match:
            return float(width_match.group(1)), float(height_match.group(1))
        viewbox_match = re.search(r"viewBox=\"[0-9.]+ [0-9.]+ ([0-9.]+) ([0-9.]+)\"", content)
        if viewbox_match:
            return float(viewbox_match.group(1)), float(viewbox_match.group(2))

    return None


def split_md5ext(md5ext: str) -> Tuple[str, str]:
    """Split ``"<md5>.<ext>"`` into the asset id and the lower-cased format."""
    asset_id, ext = os.path.splitext(md5ext or "")
    return asset_id, ext.lower().lstrip(".")


class ArchiveAssetStore:
    """Read-only access to asset payloads in an sb2 archive or a directory."""

    def __init__(self, source: str) -> None:
        self.source = source
        self._archive: Optional[zipfile.ZipFile] = None
        if not os.path.isdir(source):
            self._archive = zipfile.ZipFile(source, "r")

    def close(self) -> None:
        if self._archive is not None:
            self._archive.close()
            self._archive = None

    def __enter__(self) -> "ArchiveAssetStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def names(self) -> List[str]:
        if self._archive is not None:
            return self._archive.namelist()
        return sorted(os.listdir(self.source))

    def read(self, *candidates: str) -> bytes:
        """Return the payload stored under the first candidate name that exists."""
        available = set(self.names())
        for name in candidates:
            if not name or name not in available:
                continue
            if self._archive is not None:
                return self._archive.read(name)
            with open(os.path.join(self.source, name), "rb") as handle:
                return handle.read()
        raise AssetLoadError("Asset not found", ", ".join(c for c in candidates if c))


class AssetLoader:
    """Default costume and sound loaders backed by an :class:`ArchiveAssetStore`."""

    def __init__(self, store: ArchiveAssetStore) -> None:
        self.store = store

    def _read(self, md5ext: str, legacy_id: Any) -> bytes:
        _, ext = split_md5ext(md5ext)
        by_id = f"{legacy_id}.{ext}" if legacy_id is not None and ext else ""
        return self.store.read(by_id, md5ext)

    async def load_costume(self, md5ext: str, costume: Dict[str, Any]) -> Dict[str, Any]:
        asset_id, ext = split_md5ext(md5ext)
        data = self._read(md5ext, costume.get("baseLayerID"))

        loaded = {key: value for key, value in costume.items() if key != "baseLayerID"}
        loaded.update({
            "assetId": asset_id,
            "md5ext": md5ext,
            "dataFormat": ext,
            "data": data,
        })
        if loaded.get("rotationCenterX") is None or loaded.get("rotationCenterY") is None:
            size = probe_image_size(data, ext)
            resolution = loaded.get("bitmapResolution") or 1
            loaded["rotationCenterX"] = size[0] / 2 / resolution if size else 0
            loaded["rotationCenterY"] = size[1] / 2 / resolution if size else 0
        return loaded

    async def load_sound(self, md5ext: str, sound: Dict[str, Any]) -> Dict[str, Any]:
        asset_id, ext = split_md5ext(md5ext)
        data = self._read(md5ext, sound.get("soundID"))

        loaded = {key: value for key, value in sound.items() if key != "soundID"}
        loaded.update({
            "assetId": asset_id,
            "md5ext": md5ext,
            "dataFormat": ext,
            "data": data,
        })
        return loaded
