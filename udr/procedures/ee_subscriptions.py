"""Event exposure subscriptions of UEs and UE groups, and their AMF subscription info."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from udr.patch import PatchError, apply_patch, parse_patch_items
from udr.problem import (
    ProblemDetails,
    Response,
    modify_not_allowed,
    not_found,
    problem_response,
    unspecified,
)
from udr.procedures.base import ProcessorBase
from udr.state import EeSubscriptionEntry, UeGroupSubscriptions, UeSubscriptions

log = logging.getLogger(__name__)

DR_RES_URI_PREFIX = "/nudr-dr/v1"


class EeSubscriptionProcedures(ProcessorBase):
    def _ue_entry(
        self, ue_id: str, subs_id: str
    ) -> Union[EeSubscriptionEntry, ProblemDetails]:
        ue_subs = self.state.ue_subscriptions.get(ue_id)
        if ue_subs is None:
            return not_found("USER_NOT_FOUND")
        entry = ue_subs.ee_subscriptions.get(subs_id)
        if entry is None:
            return not_found("SUBSCRIPTION_NOT_FOUND")
        return entry

    def _amf_entry(
        self, ue_id: str, subs_id: str, name: str
    ) -> Union[EeSubscriptionEntry, ProblemDetails]:
        found = self._ue_entry(ue_id, subs_id)
        if isinstance(found, EeSubscriptionEntry) and found.amf_subscription_infos is None:
            found = not_found("AMFSUBSCRIPTION_NOT_FOUND")
        if isinstance(found, ProblemDetails):
            log.error("%s err: %s", name, found.title)
        return found

    # UE event exposure subscriptions

    def create_ee_subscription(self, ue_id: str, subscription: Mapping[str, Any]) -> Response:
        ue_subs = self.state.ue_subscriptions.setdefault(ue_id, UeSubscriptions())
        subs_id = self.state.next_ee_subscription_id()
        data = copy.deepcopy(dict(subscription))
        ue_subs.ee_subscriptions[subs_id] = EeSubscriptionEntry(ee_subscription=data)
        location = (
            f"{self.state.group_uri()}/subscription-data/{ue_id}"
            f"/context-data/ee-subscriptions/{subs_id}"
        )
        return Response(status=201, body=data, headers={"Location": location})

    def query_ee_subscriptions(self, ue_id: str) -> Response:
        ue_subs = self.state.ue_subscriptions.get(ue_id)
        if ue_subs is None:
            return problem_response(not_found("USER_NOT_FOUND"))
        subscriptions = [
            entry.ee_subscription
            for entry in ue_subs.ee_subscriptions.values()
            if entry.ee_subscription is not None
        ]
        if not subscriptions:
            return problem_response(unspecified(""))
        return Response(status=200, body=subscriptions)

    def update_ee_subscription(
        self, ue_id: str, subs_id: str, subscription: Mapping[str, Any]
    ) -> Response:
        found = self._ue_entry(ue_id, subs_id)
        if isinstance(found, ProblemDetails):
            return problem_response(found)
        found.ee_subscription = copy.deepcopy(dict(subscription))
        return Response(status=204)

    def remove_ee_subscription(self, ue_id: str, subs_id: str) -> Response:
        found = self._ue_entry(ue_id, subs_id)
        if isinstance(found, ProblemDetails):
            return problem_response(found)
        del self.state.ue_subscriptions[ue_id].ee_subscriptions[subs_id]
        return Response(status=204)

    # UE group event exposure subscriptions

    def _group_problem(self, ue_group_id: str, subs_id: str) -> Optional[ProblemDetails]:
        group = self.state.ue_groups.get(ue_group_id)
        if group is None:
            return not_found("USER_NOT_FOUND")
        if subs_id not in group.ee_subscriptions:
            return not_found("SUBSCRIPTION_NOT_FOUND")
        return None

    def create_ee_group_subscription(
        self, ue_group_id: str, subscription: Mapping[str, Any]
    ) -> Response:
        group = self.state.ue_groups.setdefault(ue_group_id, UeGroupSubscriptions())
        subs_id = self.state.next_ee_subscription_id()
        data = copy.deepcopy(dict(subscription))
        group.ee_subscriptions[subs_id] = data
        location = (
            f"{self.state.group_uri()}{DR_RES_URI_PREFIX}/subscription-data/group-data/"
            f"{ue_group_id}/ee-subscriptions/{subs_id}"
        )
        return Response(status=201, body=data, headers={"Location": location})

    def query_ee_group_subscriptions(self, ue_group_id: str) -> Response:
        group = self.state.ue_groups.get(ue_group_id)
        if group is None:
            return problem_response(not_found("USER_NOT_FOUND"))
        subscriptions = list(group.ee_subscriptions.values())
        if not subscriptions:
            return problem_response(unspecified(""))
        return Response(status=200, body=subscriptions)

    def update_ee_group_subscription(
        self, ue_group_id: str, subs_id: str, subscription: Mapping[str, Any]
    ) -> Response:
        problem = self._group_problem(ue_group_id, subs_id)
        if problem is not None:
            return problem_response(problem)
        self.state.ue_groups[ue_group_id].ee_subscriptions[subs_id] = copy.deepcopy(
            dict(subscription)
        )
        return Response(status=204)

    def remove_ee_group_subscription(self, ue_group_id: str, subs_id: str) -> Response:
        problem = self._group_problem(ue_group_id, subs_id)
        if problem is not None:
            return problem_response(problem)
        del self.state.ue_groups[ue_group_id].ee_subscriptions[subs_id]
        return Response(status=204)

    # AMF subscription info attached to a UE subscription

    def create_amf_subscriptions(
        self, ue_id: str, subs_id: str, infos: Iterable[Mapping[str, Any]]
    ) -> Response:
        found = self._ue_entry(ue_id, subs_id)
        if isinstance(found, ProblemDetails):
            log.error("CreateAMFSubscriptionsProcedure err: %s", found.title)
            return problem_response(found)
        found.amf_subscription_infos = [copy.deepcopy(dict(info)) for info in infos]
        return Response(status=204)

    def get_amf_subscription_info(self, ue_id: str, subs_id: str) -> Response:
        found = self._amf_entry(ue_id, subs_id, "GetAmfSubscriptionInfoProcedure")
        if isinstance(found, ProblemDetails):
            return problem_response(found)
        return Response(status=200, body=copy.deepcopy(found.amf_subscription_infos))

    def modify_amf_subscription_info(
        self, ue_id: str, subs_id: str, patch_items: Iterable[Any]
    ) -> Response:
        found = self._amf_entry(ue_id, subs_id, "ModifyAmfSubscriptionInfoProcedure")
        if isinstance(found, ProblemDetails):
            return problem_response(found)
        try:
            operations = parse_patch_items(patch_items)
        except PatchError as err:
            log.error("invalid patch items: %s", err)
            return problem_response(modify_not_allowed("PatchItem attributes are invalid"))
        try:
            modified = apply_patch(found.amf_subscription_infos, operations)
        except PatchError as err:
            log.error("applying patch failed: %s", err)
            return problem_response(modify_not_allowed("Occur error when applying PatchItem"))
        if not isinstance(modified, list):
            log.error("patched AMF subscription info is not a list")
            modified = []
        found.amf_subscription_infos = modified
        return Response(status=204)

    def remove_amf_subscriptions_info(self, ue_id: str, subs_id: str) -> Response:
        found = self._amf_entry(ue_id, subs_id, "RemoveAmfSubscriptionsInfoProcedure")
        if isinstance(found, ProblemDetails):
            return problem_response(found)
        found.amf_subscription_infos = None
        return Response(status=204)