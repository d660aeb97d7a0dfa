"""Building and delivering change notifications to subscribers."""

from __future__ import annotations

import json
import logging
import urllib.request
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Optional

from udr.convert import contains
from udr.patch import parse_patch_items
from udr.state import RepositoryState

log = logging.getLogger(__name__)

Sender = Callable[[str, Any], int]

_POLICY_KINDS = {
    "amPolicyData": None,
    "uePolicySet": None,
    "smPolicyData": None,
    "usageMonData": "usageMonId",
    "sponsorConnectivityData": "sponsorId",
    "bdtData": "bdtRefId",
}


def data_change_notify_items(
    resource_id: str,
    patch_items: Iterable[Any],
    orig_value: Optional[Mapping[str, Any]],
    new_value: Optional[Mapping[str, Any]],
) -> list[dict[str, Any]]:
    changes = []
    for item in parse_patch_items(patch_items):
        change: dict[str, Any] = {"op": item.op, "path": item.path}
        if item.from_:
            change["from"] = item.from_
        change["origValue"] = orig_value
        change["newValue"] = new_value
        changes.append(change)
    return [{"resourceId": resource_id, "changes": changes}]


def policy_data_change_notification(
    ue_id: str, data_id: str, kind: str, value: Any
) -> Optional[dict[str, Any]]:
    """Build a policy data change notification, or None for an unknown kind."""
    if kind not in _POLICY_KINDS:
        return None
    notification: dict[str, Any] = {}
    if ue_id:
        notification["ueId"] = ue_id
    id_key = _POLICY_KINDS[kind]
    if id_key:
        notification[id_key] = data_id
    notification[kind] = value
    return notification


def influence_data_subscribed(
    data: Optional[Mapping[str, Any]], sub: Optional[Mapping[str, Any]]
) -> bool:
    """True if the traffic influence data falls within the subscription."""
    if data is None or sub is None:
        return False
    if data.get("dnn") and not contains(data["dnn"], sub.get("dnns")):
        return False
    if data.get("snssai") is not None and not contains(data["snssai"], sub.get("snssais")):
        return False
    if data.get("interGroupId", "") != "AnyUE":
        group = data.get("interGroupId", "")
        if group and not contains(group, sub.get("internalGroupIds")):
            return False
        if data.get("supi") and not contains(data["supi"], sub.get("supis")):
            return False
    return True


def post_json(url: str, payload: Any) -> int:
    """POST payload as JSON and return the response status."""
    request = urllib.request.Request(
        url,
        data=json.dumps(payload).encode(),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    with urllib.request.urlopen(request, timeout=10) as response:
        return response.status


class Notifier:
    """Sends notifications to the subscribers recorded in the state."""

    def __init__(self, state: RepositoryState, sender: Sender = post_json) -> None:
        self.state = state
        self.sender = sender

    def _send(self, url: str, payload: Any) -> bool:
        try:
            self.sender(url, payload)
        except Exception as err:
            log.error("notification to %s failed: %s", url, err)
            return False
        return True

    def on_data_change(self, ue_id: str, notify_items: list[dict[str, Any]]) -> int:
        sent = 0
        for sub in list(self.state.subscription_data_subscriptions.values()):
            if sub.get("ueId") != ue_id:
                continue
            payload = {
                "ueId": ue_id,
                "originalCallbackReference": [sub.get("originalCallbackReference", "")],
                "notifyItems": notify_items,
            }
            sent += self._send(sub.get("callbackReference", ""), payload)
        return sent

    def policy_data_change(self, notification: dict[str, Any]) -> int:
        sent = 0
        for sub in list(self.state.policy_data_subscriptions.values()):
            sent += self._send(sub.get("notificationUri", ""), [notification])
        return sent

    def influence_data_update(
        self,
        res_uri: str,
        original: Optional[Mapping[str, Any]],
        modified: Optional[Mapping[str, Any]],
    ) -> int:
        sent = 0
        for sub in list(self.state.influence_data_subscriptions.values()):
            url = sub.get("notificationUri", "")
            if influence_data_subscribed(modified, sub):
                notif = {"resUri": res_uri, "trafficInfluData": modified}
            elif influence_data_subscribed(original, sub):
                notif = {"resUri": res_uri, "trafficInfluData": None}
            else:
                continue
            sent += self._send(url, [notif])
        return sent