"""Authentication subscription, SoR and status procedures."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from udr.problem import PROBLEM_CONTENT_TYPE, Response, modify_not_allowed
from udr.procedures.base import ProcessorBase
from udr.store import StoreError

log = logging.getLogger(__name__)


class AuthenticationProcedures(ProcessorBase):
    def modify_authentication(
        self, collection: str, ue_id: str, patch_items: Iterable[Any]
    ) -> Response:
        items = list(patch_items)
        log.debug("ModifyAuthenticationProcedure: %s %s", ue_id, items)
        try:
            orig, new = self.patch_and_notify(collection, ue_id, items, {"ueId": ue_id})
        except StoreError as err:
            log.error("ModifyAuthenticationProcedure err: %s", err)
            pd = modify_not_allowed("")
            return Response(
                status=500,
                body=pd.to_dict(),
                headers={"Content-Type": PROBLEM_CONTENT_TYPE},
                cause=pd.cause,
            )
        self.notify_data_change(ue_id, items, orig, new)
        return Response(status=204)

    def query_auth_subs_data(self, collection: str, ue_id: str) -> Response:
        response = self._query(collection, {"ueId": ue_id})
        if response.status == 404:
            log.warning("QueryAuthSubsDataProcedure err: data not found for %s", ue_id)
        return response

    def _put(self, collection: str, ue_id: str, data: Mapping[str, Any], name: str) -> Response:
        put_data = dict(data)
        put_data["ueId"] = ue_id
        try:
            self.store.put_one(collection, {"ueId": ue_id}, put_data)
        except StoreError as err:
            log.error("%s err: %s", name, err)
        return Response(status=204)

    def create_authentication_sor(
        self, collection: str, ue_id: str, data: Mapping[str, Any]
    ) -> Response:
        return self._put(collection, ue_id, data, "CreateAuthenticationSoRProcedure")

    def query_authentication_sor(self, collection: str, ue_id: str) -> Response:
        return self._query(collection, {"ueId": ue_id})

    def create_authentication_status(
        self, collection: str, ue_id: str, data: Mapping[str, Any]
    ) -> Response:
        return self._put(collection, ue_id, data, "CreateAuthenticationStatusProcedure")

    def query_authentication_status(self, collection: str, ue_id: str) -> Response:
        return self._query(collection, {"ueId": ue_id})