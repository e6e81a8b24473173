"""Sauce result record and JSON serialization."""

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

# Indices without a title field keep it under one of these
FALLBACK_TITLE_KEYS = ("source", "material", "eng_name", "jp_name")


@dataclass
class Sauce:
    """A single potential source for the searched image"""
    ext_urls: list[str] = field(default_factory=list)
    title: str = ""
    site: str = ""
    index: int = 0
    index_id: int = 0
    similarity: float = 0.0
    thumbnail: str = ""
    additional_fields: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict:
        return asdict(self)


def pick_title(title: Optional[str], fields: dict[str, Any]) -> str:
    if title:
        return title
    for key in FALLBACK_TITLE_KEYS:
        value = fields.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def to_json(results: list[Sauce], pretty: bool = False) -> str:
    """
    Serialize a list of Sauce objects to a JSON string.

    Args:
        results: Sauce objects, typically from Handler.get_sauce
        pretty: Indent with two spaces when True

    Returns:
        JSON array string
    """
    payload = [sauce.to_dict() for sauce in results]
    if pretty:
        return json.dumps(payload, indent=2, ensure_ascii=False)
    return json.dumps(payload, ensure_ascii=False)
