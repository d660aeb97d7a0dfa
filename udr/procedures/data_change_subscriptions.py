"""Subscriptions to notifications about changes of subscription data."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from udr.problem import Response, not_found, problem_response
from udr.procedures.base import ProcessorBase

log = logging.getLogger(__name__)


class DataChangeSubscriptionProcedures(ProcessorBase):
    def create_data_change_subscription(self, subscription: Mapping[str, Any]) -> Response:
        subs_id = self.state.next_data_change_subscription_id()
        data = copy.deepcopy(dict(subscription))
        self.state.subscription_data_subscriptions[subs_id] = data
        location = f"{self.state.group_uri()}/subscription-data/subs-to-notify/{subs_id}"
        return Response(status=201, body=data, headers={"Location": location})

    def remove_data_change_subscription(self, subs_id: str) -> Response:
        if subs_id not in self.state.subscription_data_subscriptions:
            pd = not_found("SUBSCRIPTION_NOT_FOUND")
            log.error("RemovesubscriptionDataSubscriptionsProcedure err: %s", pd.title)
            return problem_response(pd)
        del self.state.subscription_data_subscriptions[subs_id]
        return Response(status=204)