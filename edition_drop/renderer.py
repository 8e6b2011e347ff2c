from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from .errors import NotInitializedError


class MetadataRenderer(Protocol):
    def initialize(self, data: bytes) -> None:
        ...

    def contract_uri(self) -> str:
        ...

    def token_uri(self, token_id: int) -> str:
        ...


@dataclass
class TokenMetadata:
    token_id: int
    name: str
    description: str
    image_uri: str
    animation_uri: str

    def to_json(self) -> str:
        data: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "properties": {"number": self.token_id},
        }
        if self.image_uri:
            data["image"] = self.image_uri
        if self.animation_uri:
            data["animation_url"] = self.animation_uri
        return json.dumps(data)


def encode_json_uri(payload: str) -> str:
    return "data:application/json;base64," + base64.b64encode(payload.encode()).decode()


class EditionMetadataRenderer:
    """Renders one shared description and media set for every edition.

    ``initialize`` takes UTF-8 JSON with optional ``description``,
    ``image_uri`` and ``animation_uri`` keys. ``info`` returns the drop's
    ``(name, edition_size)`` at render time so finalising an open edition is
    reflected in token names.
    """

    def __init__(self, info: Callable[[], Tuple[str, int]]) -> None:
        self._info = info
        self._settings: Optional[Dict[str, str]] = None

    def initialize(self, data: bytes) -> None:
        settings = json.loads(data.decode("utf-8")) if data else {}
        self._settings = {
            "description": str(settings.get("description", "")),
            "image_uri": str(settings.get("image_uri", "")),
            "animation_uri": str(settings.get("animation_uri", "")),
        }

    def _require_settings(self) -> Dict[str, str]:
        if self._settings is None:
            raise NotInitializedError()
        return self._settings

    def contract_uri(self) -> str:
        settings = self._require_settings()
        name, _ = self._info()
        data = {"name": name, "description": settings["description"]}
        if settings["image_uri"]:
            data["image"] = settings["image_uri"]
        return encode_json_uri(json.dumps(data))

    def build_token_metadata(self, token_id: int) -> TokenMetadata:
        settings = self._require_settings()
        name, edition_size = self._info()
        if edition_size:
            title = f"{name} {token_id}/{edition_size}"
        else:
            title = f"{name} {token_id}"
        return TokenMetadata(
            token_id=token_id,
            name=title,
            description=settings["description"],
            image_uri=settings["image_uri"],
            animation_uri=settings["animation_uri"],
        )

    def token_uri(self, token_id: int) -> str:
        return encode_json_uri(self.build_token_metadata(token_id).to_json())
