import pytest

from udr.notify import Notifier
from udr.procedures.subscription_data import SubscriptionDataProcedures
from udr.state import RepositoryState
from udr.store import DocumentStore

UE = "imsi-208930000000001"
PLMN = "20893"


@pytest.fixture
def sent():
    return []


@pytest.fixture
def proc(sent):
    state = RepositoryState()

    def sender(url, payload):
        sent.append((url, payload))
        return 204

    return SubscriptionDataProcedures(
        DocumentStore(), state, Notifier(state, sender), run_async=False
    )


@pytest.mark.parametrize(
    "method",
    ["query_am_data", "query_smf_select_data", "query_sms_mng_data", "query_sms_data", "query_trace_data"],
)
def test_serving_plmn_queries(proc, method):
    coll = "subscriptionData.provisionedData.x"
    doc = {"ueId": UE, "servingPlmnId": PLMN, "field": "v"}
    proc.store.put_one(coll, {"ueId": UE, "servingPlmnId": PLMN}, doc)
    response = getattr(proc, method)(coll, UE, PLMN)
    assert response.status == 200
    assert response.body == doc
    missing = getattr(proc, method)(coll, UE, "00101")
    assert missing.status == 404
    assert missing.cause == "DATA_NOT_FOUND"


@pytest.mark.parametrize(
    "method", ["query_ee_data", "get_pp_data", "get_odb_data", "query_operator_specific_data"]
)
def test_ue_queries(proc, method):
    coll = "subscriptionData.x"
    doc = {"ueId": UE, "data": [1, 2]}
    proc.store.put_one(coll, {"ueId": UE}, doc)
    assert getattr(proc, method)(coll, UE).body == doc
    assert getattr(proc, method)(coll, "imsi-other").status == 404


@pytest.mark.parametrize("method", ["patch_operator_specific_data", "modify_pp_data"])
def test_patch_applies_and_notifies(proc, sent, method):
    coll = "subscriptionData.ppData"
    proc.store.put_one(coll, {"ueId": UE}, {"ueId": UE, "value": "old"})
    proc.state.subscription_data_subscriptions["1"] = {
        "ueId": UE,
        "callbackReference": "http://nf.example.com/cb",
        "originalCallbackReference": "http://orig.example.com/cb",
    }
    items = [{"op": "replace", "path": "/value", "value": "new"}]
    response = getattr(proc, method)(coll, UE, items)
    assert response.status == 204
    assert proc.store.get_one(coll, {"ueId": UE})["value"] == "new"
    assert len(sent) == 1
    url, payload = sent[0]
    assert url == "http://nf.example.com/cb"
    assert payload["ueId"] == UE
    change = payload["notifyItems"][0]["changes"][0]
    assert change["origValue"]["value"] == "old"
    assert change["newValue"]["value"] == "new"


@pytest.mark.parametrize("method", ["patch_operator_specific_data", "modify_pp_data"])
def test_patch_missing_document(proc, sent, method):
    response = getattr(proc, method)("coll", UE, [{"op": "remove", "path": "/x"}])
    assert response.status == 403
    assert response.cause == "MODIFY_NOT_ALLOWED"
    assert sent == []


def test_identity_data_by_supi_and_gpsi(proc):
    coll = "subscriptionData.identityData"
    proc.store.put_one(coll, {"ueId": UE}, {"ueId": UE, "gpsi": "msisdn-0900000000"})
    by_supi = proc.get_identity_data(coll, UE)
    by_gpsi = proc.get_identity_data(coll, "msisdn-0900000000")
    assert by_supi.status == 200
    assert by_supi.body == {"gpsiList": ["msisdn-0900000000"], "supiList": [UE]}
    assert by_gpsi.body == by_supi.body


def test_identity_data_missing(proc):
    assert proc.get_identity_data("coll", UE).status == 404


def test_shared_data(proc):
    coll = "subscriptionData.sharedData"
    for sid in ("a", "b"):
        proc.store.put_one(coll, {"sharedDataId": sid}, {"sharedDataId": sid})
    response = proc.get_shared_data(coll, ["a", "missing", "b"])
    assert response.status == 200
    assert [d["sharedDataId"] for d in response.body] == ["a", "b"]


def test_shared_data_none_found(proc):
    response = proc.get_shared_data("coll", ["x", "y"])
    assert response.status == 404
    assert response.cause == "DATA_NOT_FOUND"
    assert proc.get_shared_data("coll", []).status == 404