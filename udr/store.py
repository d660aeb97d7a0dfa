"""In-memory document store with Mongo-style filters."""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from udr.patch import PatchError, apply_patch

_MISSING = object()


class StoreError(Exception):
    """Raised when a store operation cannot be carried out."""


def _lookup(document: Mapping[str, Any], dotted: str) -> Any:
    value: Any = document
    for part in dotted.split("."):
        if isinstance(value, Mapping) and part in value:
            value = value[part]
        else:
            return _MISSING
    return value


def _equal(a: Any, b: Any, ignore_case: bool) -> bool:
    if ignore_case and isinstance(a, str) and isinstance(b, str):
        return a.casefold() == b.casefold()
    return a == b


def matches(document: Mapping[str, Any], filter: Mapping[str, Any], ignore_case: bool = False) -> bool:
    """True if the document satisfies the filter."""
    for key, cond in filter.items():
        if key == "$or":
            if not any(matches(document, sub, ignore_case) for sub in cond):
                return False
        elif key == "$and":
            if not all(matches(document, sub, ignore_case) for sub in cond):
                return False
        else:
            value = _lookup(document, key)
            if isinstance(cond, Mapping) and "$exists" in cond:
                if (value is not _MISSING) != bool(cond["$exists"]):
                    return False
            elif value is _MISSING or not _equal(value, cond, ignore_case):
                return False
    return True


def _merge(target: Any, patch: Any) -> Any:
    if not isinstance(patch, Mapping):
        return copy.deepcopy(patch)
    result = dict(target) if isinstance(target, Mapping) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = _merge(result.get(key), value)
    return result


class DocumentStore:
    """Named collections of JSON documents."""

    def __init__(self) -> None:
        self._collections: dict[str, list[dict[str, Any]]] = {}
        self._lock = threading.RLock()

    def _find(self, collection: str, filter: Mapping[str, Any], ignore_case: bool = False) -> Optional[dict]:
        for doc in self._collections.get(collection, []):
            if matches(doc, filter, ignore_case):
                return doc
        return None

    def get_one(self, collection: str, filter: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        with self._lock:
            doc = self._find(collection, filter)
            return copy.deepcopy(doc) if doc is not None else None

    def get_many(self, collection: str, filter: Mapping[str, Any], ignore_case: bool = False) -> list[dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(doc)
                for doc in self._collections.get(collection, [])
                if matches(doc, filter, ignore_case)
            ]

    def put_one(self, collection: str, filter: Mapping[str, Any], data: Mapping[str, Any]) -> bool:
        """Update the matching document or insert one; return whether it existed."""
        with self._lock:
            doc = self._find(collection, filter)
            if doc is not None:
                doc.update(copy.deepcopy(dict(data)))
                return True
            new = {k: v for k, v in filter.items() if not k.startswith("$") and "." not in k}
            new.update(copy.deepcopy(dict(data)))
            self._collections.setdefault(collection, []).append(new)
            return False

    def delete_one(self, collection: str, filter: Mapping[str, Any]) -> None:
        with self._lock:
            doc = self._find(collection, filter)
            if doc is not None:
                self._collections[collection].remove(doc)

    def delete_many(self, collection: str, filter: Mapping[str, Any]) -> None:
        with self._lock:
            docs = self._collections.get(collection, [])
            self._collections[collection] = [d for d in docs if not matches(d, filter)]

    def _replace(self, collection: str, old: dict, new: dict) -> None:
        docs = self._collections[collection]
        docs[next(i for i, d in enumerate(docs) if d is old)] = new

    def merge_patch(self, collection: str, filter: Mapping[str, Any], patch: Mapping[str, Any]) -> None:
        """Apply a JSON merge patch to the matching document."""
        with self._lock:
            doc = self._find(collection, filter)
            if doc is None:
                raise StoreError(f"no document in {collection!r} matches the filter")
            self._replace(collection, doc, _merge(doc, patch))

    def json_patch(self, collection: str, filter: Mapping[str, Any], operations: Iterable[Any]) -> dict[str, Any]:
        """Apply JSON patch operations to the matching document and return the result."""
        with self._lock:
            doc = self._find(collection, filter)
            if doc is None:
                raise StoreError(f"no document in {collection!r} matches the filter")
            try:
                new = apply_patch(doc, operations)
            except PatchError as err:
                raise StoreError(str(err)) from err
            if not isinstance(new, dict):
                raise StoreError("patch result is not an object")
            self._replace(collection, doc, new)
            return copy.deepcopy(new)

    def json_patch_field(
        self, collection: str, filter: Mapping[str, Any], operations: Iterable[Any], field: str
    ) -> dict[str, Any]:
        """Apply JSON patch operations to one field of the matching document."""
        with self._lock:
            doc = self._find(collection, filter)
            if doc is None:
                raise StoreError(f"no document in {collection!r} matches the filter")
            try:
                doc[field] = apply_patch(doc.get(field, {}), operations)
            except PatchError as err:
                raise StoreError(str(err)) from err
            return copy.deepcopy(doc)