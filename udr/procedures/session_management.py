"""Session management subscription data queries."""

from __future__ import annotations

import logging
from typing import Any, Optional

from udr.convert import Snssai, escape_dnn
from udr.problem import Response, problem_response, unspecified
from udr.procedures.base import ProcessorBase
from udr.store import StoreError

log = logging.getLogger(__name__)

_STORAGE_KEYS = ("_id", "ueId", "servingPlmnId")


class SessionManagementProcedures(ProcessorBase):
    def query_sm_data(
        self,
        collection: str,
        ue_id: str,
        serving_plmn_id: str,
        single_nssai: Optional[Snssai],
        dnn: str,
    ) -> Response:
        filter: dict[str, Any] = {"ueId": ue_id, "servingPlmnId": serving_plmn_id}
        if single_nssai is not None and single_nssai != Snssai(sst=0):
            filter["singleNssai.sst"] = single_nssai.sst
            if single_nssai.sd:
                filter["singleNssai.sd"] = single_nssai.sd
        if dnn:
            filter["dnnConfigurations." + escape_dnn(dnn)] = {"$exists": True}

        try:
            docs = self.store.get_many(collection, filter, ignore_case=True)
        except StoreError as err:
            log.error("QuerySmDataProcedure err: %s", err)
            return problem_response(unspecified(""))

        entries = []
        for doc in docs:
            if not isinstance(doc, dict):
                log.debug("SmData Unmarshal error")
                continue
            entries.append({k: v for k, v in doc.items() if k not in _STORAGE_KEYS})

        body: dict[str, Any] = {}
        if entries:
            body["individualSmSubsData"] = entries
        return Response(status=200, body=body)