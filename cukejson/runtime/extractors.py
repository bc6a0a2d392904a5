"""Flatten gherkin tags and comments into the legacy report representation.

Both extractors distinguish "absent" from "empty": a missing list yields None
(the key is then left out of the report), an empty list yields [].
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def extract_tags(tags: Optional[Sequence[Any]]) -> Optional[List[str]]:
    """Return tag names in source order, or None if there is no tag list."""
    if tags is None:
        return None
    return [_field(tag, "name") for tag in tags]


def extract_comments(comments: Optional[Sequence[Any]]) -> Optional[List[Dict[str, Any]]]:
    """Return {"line", "value"} pairs in source order, or None if there is no comment list."""
    if comments is None:
        return None
    flattened: List[Dict[str, Any]] = []
    for comment in comments:
        location = _field(comment, "location")
        flattened.append(
            {
                "line": _field(location, "line") if location is not None else 0,
                "value": _field(comment, "text"),
            }
        )
    return flattened
