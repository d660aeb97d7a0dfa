from udr.state import EeSubscriptionEntry, RepositoryState, UeSubscriptions


def test_ids_increase_and_start_at_one():
    state = RepositoryState()
    ids = [state.next_ee_subscription_id() for _ in range(3)]
    assert ids[0] == "1"
    assert [int(i) for i in ids] == sorted(int(i) for i in ids)
    assert len(set(ids)) == 3


def test_counters_are_independent():
    state = RepositoryState()
    state.next_ee_subscription_id()
    state.next_ee_subscription_id()
    assert state.next_sdm_subscription_id() == state.next_policy_subscription_id()
    assert state.next_data_change_subscription_id() == "1"


def test_group_uri():
    state = RepositoryState(uri_scheme="https", register_ipv4="10.0.0.1", sbi_port=8443)
    assert state.group_uri() == "https://10.0.0.1:8443"


def test_containers_are_separate():
    a, b = RepositoryState(), RepositoryState()
    a.ue_subscriptions["u"] = UeSubscriptions(ee_subscriptions={"1": EeSubscriptionEntry()})
    assert b.ue_subscriptions == {}