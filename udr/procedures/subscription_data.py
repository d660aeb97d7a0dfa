"""Subscription data queries and modifications keyed by UE identity."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from udr.problem import (
    Response,
    modify_not_allowed,
    not_found,
    problem_response,
    system_failure,
)
from udr.procedures.base import ProcessorBase
from udr.store import StoreError

log = logging.getLogger(__name__)


class SubscriptionDataProcedures(ProcessorBase):
    def _query_serving(self, collection: str, ue_id: str, serving_plmn_id: str) -> Response:
        return self._query(collection, {"ueId": ue_id, "servingPlmnId": serving_plmn_id})

    def _patch(
        self, collection: str, ue_id: str, patch_items: Iterable[Any], name: str
    ) -> Response:
        items = list(patch_items)
        try:
            orig, new = self.patch_and_notify(collection, ue_id, items, {"ueId": ue_id})
        except StoreError as err:
            log.error("%s err: %s", name, err)
            return problem_response(modify_not_allowed(""))
        self.notify_data_change(ue_id, items, orig, new)
        return Response(status=204)

    def query_am_data(self, collection: str, ue_id: str, serving_plmn_id: str) -> Response:
        log.info("QueryAmDataProcedure: ueId: %s, servingPlmnId: %s", ue_id, serving_plmn_id)
        return self._query_serving(collection, ue_id, serving_plmn_id)

    def query_ee_data(self, collection: str, ue_id: str) -> Response:
        return self._query(collection, {"ueId": ue_id})

    def patch_operator_specific_data(
        self, collection: str, ue_id: str, patch_items: Iterable[Any]
    ) -> Response:
        return self._patch(collection, ue_id, patch_items, "PatchOperSpecDataProcedure")

    def query_operator_specific_data(self, collection: str, ue_id: str) -> Response:
        return self._query(collection, {"ueId": ue_id})

    def get_pp_data(self, collection: str, ue_id: str) -> Response:
        return self._query(collection, {"ueId": ue_id})

    def modify_pp_data(
        self, collection: str, ue_id: str, patch_items: Iterable[Any]
    ) -> Response:
        return self._patch(collection, ue_id, patch_items, "ModifyPpDataProcedure")

    def get_identity_data(self, collection: str, ue_id: str) -> Response:
        """Return the GPSI and SUPI lists of the UE known by either identity."""
        log.debug("Handle GetIdentityDataProcedure: %s", ue_id)
        filter = {"$or": [{"gpsi": ue_id}, {"ueId": ue_id}]}
        response = self._query(collection, filter)
        if response.status != 200:
            return response
        data = response.body
        identity: dict[str, list[str]] = {}
        if isinstance(data.get("gpsi"), str):
            identity["gpsiList"] = [data["gpsi"]]
        if isinstance(data.get("ueId"), str):
            identity["supiList"] = [data["ueId"]]
        return Response(status=200, body=identity)

    def get_odb_data(self, collection: str, ue_id: str) -> Response:
        return self._query(collection, {"ueId": ue_id})

    def get_shared_data(self, collection: str, shared_data_ids: Iterable[str]) -> Response:
        """Return every shared data document found among the given identifiers."""
        found = []
        for shared_data_id in shared_data_ids:
            try:
                data = self.get_data(collection, {"sharedDataId": shared_data_id})
            except StoreError as err:
                log.error("GetSharedDataProcedure err: %s", err)
                return problem_response(system_failure(str(err)))
            if data is not None:
                found.append(data)
        if not found:
            log.error("GetSharedDataProcedure err: no shared data found")
            return problem_response(not_found("DATA_NOT_FOUND"))
        return Response(status=200, body=found)

    def query_smf_select_data(
        self, collection: str, ue_id: str, serving_plmn_id: str
    ) -> Response:
        return self._query_serving(collection, ue_id, serving_plmn_id)

    def query_sms_mng_data(self, collection: str, ue_id: str, serving_plmn_id: str) -> Response:
        return self._query_serving(collection, ue_id, serving_plmn_id)

    def query_sms_data(self, collection: str, ue_id: str, serving_plmn_id: str) -> Response:
        return self._query_serving(collection, ue_id, serving_plmn_id)

    def query_trace_data(self, collection: str, ue_id: str, serving_plmn_id: str) -> Response:
        return self._query_serving(collection, ue_id, serving_plmn_id)