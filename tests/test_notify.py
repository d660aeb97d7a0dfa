from udr.notify import (
    Notifier,
    data_change_notify_items,
    influence_data_subscribed,
    policy_data_change_notification,
)
from udr.state import RepositoryState


class Recorder:
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def __call__(self, url, payload):
        if self.fail:
            raise OSError("down")
        self.calls.append((url, payload))
        return 204


def test_data_change_items():
    items = data_change_notify_items("res", [{"op": "replace", "path": "/a", "value": 1}], {"a": 0}, {"a": 1})
    assert items[0]["resourceId"] == "res"
    assert items[0]["changes"] == [{"op": "replace", "path": "/a", "origValue": {"a": 0}, "newValue": {"a": 1}}]


def test_policy_notification():
    n = policy_data_change_notification("u", "lim", "usageMonData", {"x": 1})
    assert n == {"ueId": "u", "usageMonId": "lim", "usageMonData": {"x": 1}}
    assert policy_data_change_notification("", "", "other", {}) is None
    assert "ueId" not in policy_data_change_notification("", "", "amPolicyData", {})


def test_influence_subscribed():
    sub = {"dnns": ["internet"], "supis": ["s1"]}
    assert influence_data_subscribed({"dnn": "internet", "supi": "s1"}, sub)
    assert not influence_data_subscribed({"dnn": "ims"}, sub)
    assert not influence_data_subscribed({"dnn": "internet", "supi": "s2"}, sub)
    assert influence_data_subscribed({"dnn": "internet", "supi": "s2", "interGroupId": "AnyUE"}, sub)
    assert not influence_data_subscribed(None, sub)


def test_on_data_change_targets_matching_ue():
    state = RepositoryState()
    state.subscription_data_subscriptions["1"] = {"ueId": "u", "callbackReference": "http://cb"}
    state.subscription_data_subscriptions["2"] = {"ueId": "v", "callbackReference": "http://other"}
    rec = Recorder()
    assert Notifier(state, rec).on_data_change("u", []) == 1
    assert rec.calls[0][0] == "http://cb"
    assert rec.calls[0][1]["ueId"] == "u"


def test_policy_change_and_failure():
    state = RepositoryState()
    state.policy_data_subscriptions["1"] = {"notificationUri": "http://p"}
    rec = Recorder()
    assert Notifier(state, rec).policy_data_change({"ueId": "u"}) == 1
    assert rec.calls == [("http://p", [{"ueId": "u"}])]
    assert Notifier(state, Recorder(fail=True)).policy_data_change({}) == 0


def test_influence_update_removal():
    state = RepositoryState()
    state.influence_data_subscriptions["s"] = {"notificationUri": "http://i", "dnns": ["internet"]}
    rec = Recorder()
    n = Notifier(state, rec).influence_data_update("r", {"dnn": "internet"}, None)
    assert n == 1
    assert rec.calls[0][1] == [{"resUri": "r", "trafficInfluData": None}]