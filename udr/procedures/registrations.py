"""AMF, SMF and SMSF registration context procedures."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from udr.convert import to_document
from udr.problem import Response, modify_not_allowed, problem_response, system_failure
from udr.procedures.base import ProcessorBase
from udr.store import StoreError

log = logging.getLogger(__name__)


def _parse_pdu_session_id(pdu_session_id: str) -> int:
    try:
        return int(pdu_session_id, 10)
    except ValueError as err:
        log.error("invalid PDU session id %r: %s", pdu_session_id, err)
        return 0


class RegistrationProcedures(ProcessorBase):
    def _put_registration(
        self, collection: str, ue_id: str, registration: Any, name: str
    ) -> None:
        put_data = to_document(registration)
        put_data["ueId"] = ue_id
        try:
            self.store.put_one(collection, {"ueId": ue_id}, put_data)
        except StoreError as err:
            log.error("%s err: %s", name, err)

    def patch_amf_context_3gpp(
        self, collection: str, ue_id: str, patch_items: Iterable[Any]
    ) -> Response:
        items = list(patch_items)
        try:
            orig, new = self.patch_and_notify(collection, ue_id, items, {"ueId": ue_id})
        except StoreError as err:
            log.error("AmfContext3gppProcedure err: %s", err)
            return problem_response(modify_not_allowed(""))
        self.notify_data_change(ue_id, items, orig, new)
        return Response(status=204)

    def create_amf_context_3gpp(self, collection: str, ue_id: str, registration: Any) -> Response:
        self._put_registration(collection, ue_id, registration, "CreateAmfContext3gppProcedure")
        return Response(status=204)

    def query_amf_context_3gpp(self, collection: str, ue_id: str) -> Response:
        return self._query(collection, {"ueId": ue_id})

    def patch_amf_context_non_3gpp(
        self,
        collection: str,
        ue_id: str,
        patch_items: Iterable[Any],
        filter: Mapping[str, Any],
    ) -> Response:
        items = list(patch_items)
        try:
            orig, new = self.patch_and_notify(collection, ue_id, items, filter)
        except StoreError as err:
            log.error("AmfContextNon3gppProcedure err: %s", err)
            return problem_response(system_failure(str(err)))
        self.notify_data_change(ue_id, items, orig, new)
        return Response(status=204)

    def create_amf_context_non_3gpp(
        self, collection: str, ue_id: str, registration: Any
    ) -> Response:
        self._put_registration(collection, ue_id, registration, "CreateAmfContextNon3gppProcedure")
        return Response(status=204, headers={"Content-Type": "application/json"})

    def query_amf_context_non_3gpp(self, collection: str, ue_id: str) -> Response:
        return self._query(collection, {"ueId": ue_id})

    def create_smf_context(
        self, collection: str, ue_id: str, pdu_session_id: int, registration: Any
    ) -> Response:
        put_data = to_document(registration)
        put_data["ueId"] = ue_id
        put_data["pduSessionId"] = int(pdu_session_id)
        filter = {"ueId": ue_id, "pduSessionId": int(pdu_session_id)}
        try:
            existed = self.store.put_one(collection, filter, put_data)
        except StoreError as err:
            log.error("CreateSmfContextNon3gppProcedure err: %s", err)
            pd = system_failure(str(err))
            response = problem_response(pd)
            response.status = 500
            return response
        return Response(status=200 if existed else 201, body=put_data)

    def delete_smf_context(self, collection: str, ue_id: str, pdu_session_id: str) -> Response:
        filter = {"ueId": ue_id, "pduSessionId": _parse_pdu_session_id(pdu_session_id)}
        self.delete_data(collection, filter)
        return Response(status=204)

    def query_smf_registration(
        self, collection: str, ue_id: str, pdu_session_id: str
    ) -> Response:
        filter = {"ueId": ue_id, "pduSessionId": _parse_pdu_session_id(pdu_session_id)}
        return self._query(collection, filter)

    def query_smf_registration_list(self, collection: str, ue_id: str) -> Response:
        try:
            regs = self.store.get_many(collection, {"ueId": ue_id}, ignore_case=True)
        except StoreError as err:
            log.error("QuerySmfRegListProcedure err: %s", err)
            return Response(status=200, body=None)
        return Response(status=200, body=regs)

    def create_smsf_context_3gpp(self, collection: str, ue_id: str, registration: Any) -> Response:
        self._put_registration(collection, ue_id, registration, "CreateSmsfContext3gppProcedure")
        return Response(status=204)

    def delete_smsf_context_3gpp(self, collection: str, ue_id: str) -> Response:
        self.delete_data(collection, {"ueId": ue_id})
        return Response(status=204)

    def query_smsf_context_3gpp(self, collection: str, ue_id: str) -> Response:
        return self._query(collection, {"ueId": ue_id})

    def create_smsf_context_non_3gpp(
        self, collection: str, ue_id: str, registration: Any
    ) -> Response:
        self._put_registration(
            collection, ue_id, registration, "CreateSmsfContextNon3gppProcedure"
        )
        return Response(status=204)

    def delete_smsf_context_non_3gpp(self, collection: str, ue_id: str) -> Response:
        self.delete_data(collection, {"ueId": ue_id})
        return Response(status=204)

    def query_smsf_context_non_3gpp(self, collection: str, ue_id: str) -> Response:
        return self._query(collection, {"ueId": ue_id})