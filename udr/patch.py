"""JSON Patch (RFC 6902) items and their application to documents."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

OPERATIONS = {"add", "remove", "replace", "move", "copy", "test"}


class PatchError(Exception):
    """Raised when a patch is malformed or cannot be applied."""


@dataclass
class PatchItem:
    op: str
    path: str
    from_: str = ""
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"op": self.op, "path": self.path}
        if self.from_:
            result["from"] = self.from_
        if self.op in ("add", "replace", "test"):
            result["value"] = self.value
        return result


def _to_item(raw: Any) -> PatchItem:
    if isinstance(raw, PatchItem):
        item = raw
    elif isinstance(raw, Mapping):
        if "op" not in raw or "path" not in raw:
            raise PatchError("patch item needs 'op' and 'path'")
        item = PatchItem(
            op=raw["op"], path=raw["path"], from_=raw.get("from", ""), value=raw.get("value")
        )
    else:
        raise PatchError(f"invalid patch item: {raw!r}")
    if item.op not in OPERATIONS:
        raise PatchError(f"unknown patch operation: {item.op!r}")
    if item.op in ("move", "copy") and not item.from_:
        raise PatchError(f"operation {item.op!r} needs 'from'")
    return item


def parse_patch_items(items: Iterable[Any]) -> list[PatchItem]:
    return [_to_item(raw) for raw in items]


def _tokens(path: str) -> list[str]:
    if path == "":
        return []
    if not path.startswith("/"):
        raise PatchError(f"invalid JSON pointer: {path!r}")
    return [t.replace("~1", "/").replace("~0", "~") for t in path[1:].split("/")]


def _index(container: list, token: str, allow_end: bool) -> int:
    if token == "-" and allow_end:
        return len(container)
    if not token.isdigit():
        raise PatchError(f"invalid array index: {token!r}")
    idx = int(token)
    limit = len(container) if allow_end else len(container) - 1
    if idx > limit:
        raise PatchError(f"array index out of range: {idx}")
    return idx


def _resolve(doc: Any, tokens: list[str]) -> Any:
    for token in tokens:
        if isinstance(doc, dict):
            if token not in doc:
                raise PatchError(f"path member missing: {token!r}")
            doc = doc[token]
        elif isinstance(doc, list):
            doc = doc[_index(doc, token, False)]
        else:
            raise PatchError("path goes through a scalar")
    return doc


def _get(doc: Any, path: str) -> Any:
    return _resolve(doc, _tokens(path))


def _add(doc: Any, path: str, value: Any) -> Any:
    tokens = _tokens(path)
    if not tokens:
        return value
    parent = _resolve(doc, tokens[:-1])
    last = tokens[-1]
    if isinstance(parent, dict):
        parent[last] = value
    elif isinstance(parent, list):
        parent.insert(_index(parent, last, True), value)
    else:
        raise PatchError("cannot add to a scalar")
    return doc


def _remove(doc: Any, path: str) -> Any:
    tokens = _tokens(path)
    if not tokens:
        raise PatchError("cannot remove the document root")
    parent = _resolve(doc, tokens[:-1])
    last = tokens[-1]
    if isinstance(parent, dict):
        if last not in parent:
            raise PatchError(f"path member missing: {last!r}")
        return parent.pop(last)
    if isinstance(parent, list):
        return parent.pop(_index(parent, last, False))
    raise PatchError("cannot remove from a scalar")


def apply_patch(document: Any, operations: Iterable[Any]) -> Any:
    """Apply patch operations to a copy of the document and return it."""
    doc = copy.deepcopy(document)
    for item in parse_patch_items(operations):
        if item.op == "add":
            doc = _add(doc, item.path, copy.deepcopy(item.value))
        elif item.op == "remove":
            _remove(doc, item.path)
        elif item.op == "replace":
            if _tokens(item.path):
                _remove(doc, item.path)
            doc = _add(doc, item.path, copy.deepcopy(item.value))
        elif item.op == "move":
            value = _remove(doc, item.from_)
            doc = _add(doc, item.path, value)
        elif item.op == "copy":
            doc = _add(doc, item.path, copy.deepcopy(_get(doc, item.from_)))
        else:
            if _get(doc, item.path) != item.value:
                raise PatchError(f"test failed at {item.path!r}")
    return doc