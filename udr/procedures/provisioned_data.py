"""Retrieval of all provisioned data sets of a UE at once."""

from __future__ import annotations

import logging
from typing import Any, Optional

from udr.convert import unescape_dnn
from udr.problem import Response, not_found, problem_response, system_failure
from udr.procedures.base import ProcessorBase
from udr.store import StoreError

log = logging.getLogger(__name__)

AM_DATA = "subscriptionData.provisionedData.amData"
SMF_SELECTION_DATA = "subscriptionData.provisionedData.smfSelectionSubscriptionData"
SMS_DATA = "subscriptionData.provisionedData.smsData"
SM_DATA = "subscriptionData.provisionedData.smData"
TRACE_DATA = "subscriptionData.provisionedData.traceData"
SMS_MNG_DATA = "subscriptionData.provisionedData.smsMngData"

_SINGLE_SETS = (
    ("amData", AM_DATA),
    ("smfSelData", SMF_SELECTION_DATA),
    ("smsSubsData", SMS_DATA),
)
_TRAILING_SETS = (
    ("traceData", TRACE_DATA),
    ("smsMngData", SMS_MNG_DATA),
)
_STORAGE_KEYS = ("_id", "ueId", "servingPlmnId")


def _strip(doc: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in doc.items() if k not in _STORAGE_KEYS}


def _unescape_sm_data(doc: dict[str, Any]) -> dict[str, Any]:
    entry = _strip(doc)
    configs = entry.get("dnnConfigurations")
    if isinstance(configs, dict):
        entry["dnnConfigurations"] = {unescape_dnn(k): v for k, v in configs.items()}
    return entry


class ProvisionedDataProcedures(ProcessorBase):
    def _get_set(self, collection: str, filter: dict[str, Any]) -> Optional[dict[str, Any]]:
        data = self.get_data(collection, filter)
        return _strip(data) if data is not None else None

    def query_provisioned_data(self, ue_id: str, serving_plmn_id: str) -> Response:
        """Collect every provisioned data set of the UE in the serving PLMN."""
        filter = {"ueId": ue_id, "servingPlmnId": serving_plmn_id}
        data_sets: dict[str, Any] = {}
        try:
            for key, collection in _SINGLE_SETS:
                data = self._get_set(collection, filter)
                if data is not None:
                    data_sets[key] = data

            sm_docs = self.store.get_many(SM_DATA, filter, ignore_case=True)
            if sm_docs:
                data_sets["smData"] = {
                    "individualSmSubsData": [_unescape_sm_data(d) for d in sm_docs]
                }

            for key, collection in _TRAILING_SETS:
                data = self._get_set(collection, filter)
                if data is not None:
                    data_sets[key] = data
        except StoreError as err:
            log.error("QueryProvisionedDataProcedure err: %s", err)
            return problem_response(system_failure(str(err)))

        if not data_sets:
            return problem_response(not_found("DATA_NOT_FOUND"))
        return Response(status=200, body=data_sets)