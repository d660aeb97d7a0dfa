import pytest

from udr.convert import Snssai
from udr.notify import Notifier
from udr.procedures.influence_data import InfluenceDataProcedures
from udr.state import RepositoryState

COLL = "applicationData.influenceData"
NOTIFY_URI = "http://nef.example.com/notify"
DATA = {"dnn": "internet", "interGroupId": "AnyUE", "snssai": {"sst": 1, "sd": "010203"}}


@pytest.fixture
def sent():
    return []


@pytest.fixture
def proc(sent):
    state = RepositoryState()

    def sender(url, payload):
        sent.append((url, payload))
        return 204

    return InfluenceDataProcedures(
        state=state, notifier=Notifier(state, sender=sender), run_async=False
    )


@pytest.fixture
def subscribed(proc):
    proc.state.influence_data_subscriptions["s1"] = {
        "notificationUri": NOTIFY_URI,
        "dnns": ["internet"],
        "snssais": [{"sst": 1, "sd": "010203"}],
    }
    return proc


def test_put_new_creates_with_location(proc):
    response = proc.put_influence_data(COLL, "inf-1", DATA)
    assert response.status == 201
    assert response.body == DATA
    assert response.headers["Location"].endswith("/application-data/influenceData/inf-1")
    stored = proc.store.get_one(COLL, {"influenceId": "inf-1"})
    assert stored == dict(DATA, influenceId="inf-1")


def test_put_existing_returns_ok(proc):
    proc.put_influence_data(COLL, "inf-1", DATA)
    response = proc.put_influence_data(COLL, "inf-1", DATA)
    assert response.status == 200
    assert "Location" not in response.headers


def test_put_notifies_only_on_change(subscribed, sent):
    subscribed.put_influence_data(COLL, "inf-1", DATA)
    assert len(sent) == 1
    url, payload = sent[0]
    assert url == NOTIFY_URI
    assert payload[0]["trafficInfluData"] == DATA
    assert payload[0]["resUri"].endswith("/application-data/influenceData/inf-1")
    subscribed.put_influence_data(COLL, "inf-1", DATA)
    assert len(sent) == 1
    subscribed.put_influence_data(COLL, "inf-1", dict(DATA, supi="imsi-1"))
    assert len(sent) == 2


def test_delete_sends_removal(subscribed, sent):
    subscribed.put_influence_data(COLL, "inf-1", DATA)
    response = subscribed.delete_influence_data(COLL, "inf-1")
    assert response.status == 204
    assert subscribed.store.get_one(COLL, {"influenceId": "inf-1"}) is None
    assert sent[-1][1][0]["trafficInfluData"] is None


def test_get_influence_data(proc):
    proc.put_influence_data(COLL, "inf-1", DATA)
    proc.put_influence_data(COLL, "inf-2", dict(DATA, dnn="ims"))
    response = proc.get_influence_data(COLL, [{"dnn": "internet"}])
    assert response.status == 200
    assert len(response.body) == 1
    entry = response.body[0]
    assert "influenceId" not in entry
    assert entry["resUri"] == f"{proc.state.group_uri()}/application-data/influenceData/inf-1"


def test_get_influence_data_without_filters_is_empty(proc):
    proc.put_influence_data(COLL, "inf-1", DATA)
    assert proc.get_influence_data(COLL, []).body == []


def test_snssai_filter_round_trip(proc):
    proc.put_influence_data(COLL, "inf-1", DATA)
    snssais = proc.parse_snssais('[{"sst": 1, "sd": "010203"}]')
    assert snssais == [Snssai(sst=1, sd="010203")]
    match = proc.snssai_match_list(snssais)
    assert match == [{"snssai.sst": 1, "snssai.sd": "010203"}]
    response = proc.get_influence_data(COLL, [{"$or": match}])
    assert len(response.body) == 1


@pytest.mark.parametrize("text", ["not json", '{"sst": 1}', '[{"sd": "01"}]'])
def test_parse_snssais_invalid(proc, text):
    assert proc.parse_snssais(text) == []


def test_post_not_allowed(proc):
    response = proc.post_influence_data()
    assert response.status == 405
    assert response.cause == "Method Not Allowed"


SUB = {"notificationUri": NOTIFY_URI, "dnns": ["internet"], "supis": ["imsi-1"]}


def test_create_subscription(proc):
    response = proc.create_influence_data_subscription("sub-1", SUB)
    assert response.status == 201
    assert response.headers["Location"].endswith(
        "/application-data/influenceData/subs-to-notify/sub-1"
    )
    assert proc.get_influence_data_subscription("sub-1").body == SUB


def test_create_same_subscription_twice_forbidden(proc):
    proc.create_influence_data_subscription("sub-1", SUB)
    response = proc.create_influence_data_subscription("sub-1", SUB)
    assert response.status == 403
    assert response.cause == "UNSPECIFIED"


@pytest.mark.parametrize(
    "subscription, detail",
    [
        (
            {"notificationUri": NOTIFY_URI},
            "At least one of DNNs, S-NSSAIs, Internal Group IDs or SUPIs shall be provided",
        ),
        ({"dnns": ["internet"]}, "Notification URI shall be provided"),
    ],
)
def test_subscription_validation(proc, subscription, detail):
    for response in (
        proc.create_influence_data_subscription("sub-1", subscription),
        proc.put_influence_data_subscription("sub-1", subscription),
    ):
        assert response.status == 400
        assert response.body["detail"] == detail
    assert "sub-1" not in proc.state.influence_data_subscriptions


def test_get_missing_subscription(proc):
    response = proc.get_influence_data_subscription("nope")
    assert response.status == 404
    assert response.cause == "USER_NOT_FOUND"


def test_put_subscription(proc):
    first = proc.put_influence_data_subscription("sub-1", SUB)
    assert (first.status, first.body) == (200, SUB)
    same = proc.put_influence_data_subscription("sub-1", SUB)
    assert (same.status, same.body) == (200, None)


def test_delete_subscription(proc):
    proc.create_influence_data_subscription("sub-1", SUB)
    assert proc.delete_influence_data_subscription("sub-1").status == 204
    assert proc.get_influence_data_subscription("sub-1").status == 404


def test_query_subscriptions(proc):
    proc.create_influence_data_subscription("sub-1", SUB)
    other = {"notificationUri": NOTIFY_URI, "snssais": [{"sst": 2}]}
    proc.create_influence_data_subscription("sub-2", other)
    assert proc.query_influence_data_subscriptions("internet", None, "", "").body == [SUB]
    assert proc.query_influence_data_subscriptions("", Snssai(sst=2), "", "").body == [other]
    assert proc.query_influence_data_subscriptions("", None, "", "imsi-2").body is None
    assert len(proc.query_influence_data_subscriptions("", None, "", "").body) == 2