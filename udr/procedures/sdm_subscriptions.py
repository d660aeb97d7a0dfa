"""Subscriptions of NF consumers to changes of a UE's subscriber data."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, Optional

from udr.problem import ProblemDetails, Response, not_found, problem_response
from udr.procedures.base import ProcessorBase
from udr.state import UeSubscriptions

log = logging.getLogger(__name__)


class SdmSubscriptionProcedures(ProcessorBase):
    def _problem(self, ue_id: str, subs_id: str) -> Optional[ProblemDetails]:
        ue_subs = self.state.ue_subscriptions.get(ue_id)
        if ue_subs is None:
            return not_found("USER_NOT_FOUND")
        if subs_id not in ue_subs.sdm_subscriptions:
            return not_found("SUBSCRIPTION_NOT_FOUND")
        return None

    def create_sdm_subscription(self, ue_id: str, subscription: Mapping[str, Any]) -> Response:
        """Store a new SDM subscription for the UE and return it with its location."""
        ue_subs = self.state.ue_subscriptions.setdefault(ue_id, UeSubscriptions())
        subs_id = self.state.next_sdm_subscription_id()
        data = copy.deepcopy(dict(subscription))
        data["subscriptionId"] = subs_id
        ue_subs.sdm_subscriptions[subs_id] = data
        location = (
            f"{self.state.group_uri()}/subscription-data/{ue_id}"
            f"/context-data/sdm-subscriptions/{subs_id}"
        )
        return Response(status=201, body=copy.deepcopy(data), headers={"Location": location})

    def query_sdm_subscriptions(self, ue_id: str) -> Response:
        ue_subs = self.state.ue_subscriptions.get(ue_id)
        if ue_subs is None:
            return problem_response(not_found("USER_NOT_FOUND"))
        subscriptions = [copy.deepcopy(s) for s in ue_subs.sdm_subscriptions.values()]
        if not subscriptions:
            return problem_response(not_found("SDMSUBSCRIPTION_NOT_FOUND"))
        return Response(status=200, body=subscriptions)

    def update_sdm_subscription(
        self, ue_id: str, subs_id: str, subscription: Mapping[str, Any]
    ) -> Response:
        problem = self._problem(ue_id, subs_id)
        if problem is not None:
            return problem_response(problem)
        data = copy.deepcopy(dict(subscription))
        data["subscriptionId"] = subs_id
        self.state.ue_subscriptions[ue_id].sdm_subscriptions[subs_id] = data
        return Response(status=204)

    def remove_sdm_subscription(self, ue_id: str, subs_id: str) -> Response:
        problem = self._problem(ue_id, subs_id)
        if problem is not None:
            return problem_response(problem)
        del self.state.ue_subscriptions[ue_id].sdm_subscriptions[subs_id]
        return Response(status=204)