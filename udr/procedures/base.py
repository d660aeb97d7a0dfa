"""Shared machinery for the data repository procedures."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Optional

from udr.notify import Notifier, data_change_notify_items
from udr.problem import Response, not_found, problem_response, system_failure
from udr.state import RepositoryState
from udr.store import DocumentStore, StoreError

log = logging.getLogger(__name__)


class ProcessorBase:
    """Holds the document store, subscription state and notifier."""

    def __init__(
        self,
        store: Optional[DocumentStore] = None,
        state: Optional[RepositoryState] = None,
        notifier: Optional[Notifier] = None,
        *,
        run_async: bool = True,
    ) -> None:
        self.store = store if store is not None else DocumentStore()
        self.state = state if state is not None else RepositoryState()
        self.notifier = notifier if notifier is not None else Notifier(self.state)
        self.run_async = run_async
        self.current_resource_uri = ""

    def _dispatch(self, func: Callable[..., Any], *args: Any) -> None:
        if self.run_async:
            threading.Thread(target=func, args=args, daemon=True).start()
        else:
            func(*args)

    def get_data(
        self, collection: str, filter: Mapping[str, Any], ignore_case: bool = False
    ) -> Optional[dict[str, Any]]:
        """Return the first matching document, or None if there is none.

        Store failures propagate as StoreError.
        """
        if ignore_case:
            docs = self.store.get_many(collection, filter, ignore_case=True)
            return docs[0] if docs else None
        return self.store.get_one(collection, filter)

    def _query(
        self, collection: str, filter: Mapping[str, Any], ignore_case: bool = False
    ) -> Response:
        try:
            data = self.get_data(collection, filter, ignore_case)
        except StoreError as err:
            log.error("query on %s failed: %s", collection, err)
            return problem_response(system_failure(str(err)))
        if data is None:
            return problem_response(not_found("DATA_NOT_FOUND"))
        return Response(status=200, body=data)

    def delete_data(self, collection: str, filter: Mapping[str, Any]) -> None:
        self.store.delete_one(collection, filter)

    def patch_and_notify(
        self,
        collection: str,
        ue_id: str,
        patch_items: Iterable[Any],
        filter: Mapping[str, Any],
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Apply JSON patch items to the matching document.

        Returns the document before and after the patch; raises StoreError
        when there is no such document or the patch cannot be applied.
        """
        log.debug("patching %s for %s", collection, ue_id)
        original = self.store.get_one(collection, filter)
        if original is None:
            raise StoreError(f"no document in {collection!r} matches the filter")
        modified = self.store.json_patch(collection, filter, list(patch_items))
        return original, modified

    def notify_data_change(
        self,
        ue_id: str,
        patch_items: Iterable[Any],
        orig_value: Optional[Mapping[str, Any]],
        new_value: Optional[Mapping[str, Any]],
    ) -> list[dict[str, Any]]:
        """Send a data change notification to the UE's subscribers."""
        items = data_change_notify_items(
            self.current_resource_uri, patch_items, orig_value, new_value
        )
        self._dispatch(self.notifier.on_data_change, ue_id, items)
        return items