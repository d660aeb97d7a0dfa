"""Traffic influence data and subscriptions to its changes."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from udr.convert import Snssai, contains, to_document
from udr.problem import ProblemDetails, Response, not_found, problem_response, unspecified
from udr.procedures.base import ProcessorBase
from udr.store import StoreError

log = logging.getLogger(__name__)

_STORAGE_KEYS = ("_id", "influenceId")


def _strip(doc: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in doc.items() if k not in _STORAGE_KEYS}


def _server_error(detail: str) -> Response:
    response = problem_response(ProblemDetails(status=500, detail=detail))
    response.cause = "Internal Server Error"
    return response


def _bad_request(detail: str) -> Response:
    response = problem_response(ProblemDetails(status=400, detail=detail))
    response.cause = "Bad Request"
    return response


def _validate(subscription: Mapping[str, Any]) -> Optional[Response]:
    if not any(
        subscription.get(key) for key in ("dnns", "snssais", "internalGroupIds", "supis")
    ):
        return _bad_request(
            "At least one of DNNs, S-NSSAIs, Internal Group IDs or SUPIs shall be provided"
        )
    if not subscription.get("notificationUri"):
        return _bad_request("Notification URI shall be provided")
    return None


class InfluenceDataProcedures(ProcessorBase):
    def _resource_uri(self, influence_id: str) -> str:
        return f"{self.state.group_uri()}/application-data/influenceData/{influence_id}"

    def _notify_update(
        self,
        influence_id: str,
        original: Optional[dict[str, Any]],
        modified: Optional[dict[str, Any]],
    ) -> None:
        self._dispatch(
            self.notifier.influence_data_update,
            self._resource_uri(influence_id),
            original,
            modified,
        )

    # Influence data

    def get_influence_data(
        self, collection: str, filters: Iterable[Mapping[str, Any]]
    ) -> Optional[Response]:
        """Return the influence data matching all filters; None if the store fails."""
        conditions = [dict(f) for f in filters]
        documents: list[dict[str, Any]] = []
        if conditions:
            try:
                documents = self.store.get_many(collection, {"$and": conditions})
            except StoreError as err:
                log.error("ApplicationDataInfluenceDataGetProcedure err: %s", err)
                return None
        result = []
        for doc in documents:
            entry = _strip(doc)
            entry["resUri"] = self._resource_uri(str(doc.get("influenceId", "")))
            result.append(entry)
        return Response(status=200, body=result)

    def parse_snssais(self, snssai_str: str) -> list[Snssai]:
        """Parse a JSON array of S-NSSAIs; malformed input gives an empty list."""
        try:
            raw = json.loads(snssai_str)
            if not isinstance(raw, list):
                raise ValueError("S-NSSAI list is not an array")
            return [Snssai(sst=int(item["sst"]), sd=str(item.get("sd", ""))) for item in raw]
        except (ValueError, TypeError, KeyError) as err:
            log.warning("Unmarshal Error in snssaiStruct %s", err)
            return []

    def snssai_match_list(self, snssais: Iterable[Snssai]) -> list[dict[str, Any]]:
        return [{"snssai.sst": s.sst, "snssai.sd": s.sd} for s in snssais]

    def put_influence_data(self, collection: str, influence_id: str, data: Any) -> Response:
        request = to_document(data)
        put_data = dict(request, influenceId=influence_id)
        filter = {"influenceId": influence_id}

        try:
            existing = self.store.get_one(collection, filter)
        except StoreError as err:
            log.error("%s", err)
            return _server_error(str(err))
        original = _strip(existing) if existing else None

        try:
            existed = self.store.put_one(collection, filter, put_data)
        except StoreError as err:
            log.error("ApplicationDataInfluenceDataInfluenceIdPutProcedure err: %s", err)
            return _server_error(str(err))

        if original is None or original != request:
            self._notify_update(influence_id, original, copy.deepcopy(request))

        if existed:
            return Response(status=200, body=request)
        return Response(
            status=201, body=request, headers={"Location": self._resource_uri(influence_id)}
        )

    def post_influence_data(self) -> Response:
        return Response(status=405, cause="Method Not Allowed")

    def delete_influence_data(self, collection: str, influence_id: str) -> Response:
        filter = {"influenceId": influence_id}
        try:
            existing = self.store.get_one(collection, filter)
        except StoreError as err:
            log.error("ApplicationDataInfluenceDataInfluenceIdDeleteProcedure err: %s", err)
            return problem_response(unspecified(""))
        original = _strip(existing) if existing else None

        try:
            self.store.delete_one(collection, filter)
        except StoreError as err:
            log.error("InfluIdDelProcedure: %s", err)
            return problem_response(unspecified(str(err)))

        self._notify_update(influence_id, original, None)
        return Response(status=204)

    # Subscriptions to influence data changes

    def query_influence_data_subscriptions(
        self,
        dnn: str,
        snssai: Optional[Union[Snssai, Mapping[str, Any]]],
        internal_group_id: str,
        supi: str,
    ) -> Response:
        """Return subscriptions covering every given criterion; null body when none."""
        if isinstance(snssai, Snssai):
            snssai_target: Any = snssai.to_dict()
        elif snssai is not None:
            snssai_target = dict(snssai)
        else:
            snssai_target = None

        matched = []
        for sub in self.state.influence_data_subscriptions.values():
            if dnn and not contains(dnn, sub.get("dnns")):
                continue
            if snssai_target is not None and not contains(snssai_target, sub.get("snssais")):
                continue
            if internal_group_id and not contains(internal_group_id, sub.get("internalGroupIds")):
                continue
            if supi and not contains(supi, sub.get("supis")):
                continue
            matched.append(copy.deepcopy(sub))
        return Response(status=200, body=matched or None)

    def create_influence_data_subscription(
        self, subscription_id: str, subscription: Mapping[str, Any]
    ) -> Response:
        problem = _validate(subscription)
        if problem is not None:
            return problem
        data = copy.deepcopy(dict(subscription))
        if self.state.influence_data_subscriptions.get(subscription_id) == data:
            return problem_response(ProblemDetails(status=403, cause="UNSPECIFIED"))
        self.state.influence_data_subscriptions[subscription_id] = data
        location = (
            f"{self.state.group_uri()}/application-data/influenceData/subs-to-notify/"
            f"{subscription_id}"
        )
        return Response(status=201, body=copy.deepcopy(data), headers={"Location": location})

    def get_influence_data_subscription(self, subscription_id: str) -> Response:
        sub = self.state.influence_data_subscriptions.get(subscription_id)
        if sub is None:
            return problem_response(not_found("USER_NOT_FOUND"))
        return Response(status=200, body=copy.deepcopy(sub))

    def put_influence_data_subscription(
        self, subscription_id: str, subscription: Mapping[str, Any]
    ) -> Response:
        problem = _validate(subscription)
        if problem is not None:
            return problem
        data = copy.deepcopy(dict(subscription))
        if self.state.influence_data_subscriptions.get(subscription_id) == data:
            return Response(status=200)
        self.state.influence_data_subscriptions[subscription_id] = data
        return Response(status=200, body=copy.deepcopy(data))

    def delete_influence_data_subscription(self, subscription_id: str) -> Response:
        self.state.influence_data_subscriptions.pop(subscription_id, None)
        return Response(status=204)