from udr.problem import (
    MALFORMED_REQUEST,
    PROBLEM_CONTENT_TYPE,
    ProblemDetails,
    empty_ue_id_problem,
    malformed_request_syntax,
    modify_not_allowed,
    not_found,
    problem_response,
    system_failure,
    unspecified,
)


def test_not_found_titles():
    assert not_found("USER_NOT_FOUND").title == "User not found"
    assert not_found("SUBSCRIPTION_NOT_FOUND").title == "Subscription not found"
    assert not_found("AMFSUBSCRIPTION_NOT_FOUND").title == "AMF Subscription not found"
    assert not_found("DATA_NOT_FOUND").title == "Data not found"
    assert not_found("DATA_NOT_FOUND").status == 404


def test_system_failure():
    pd = system_failure("boom")
    assert (pd.status, pd.cause, pd.detail) == (500, "SYSTEM_FAILURE", "boom")


def test_forbidden_kinds():
    assert modify_not_allowed("").cause == "MODIFY_NOT_ALLOWED"
    assert unspecified("x").cause == "UNSPECIFIED"
    assert modify_not_allowed("").status == unspecified("").status == 403


def test_malformed():
    pd = malformed_request_syntax("bad")
    assert pd.status == 400 and pd.title == MALFORMED_REQUEST


def test_to_dict_omits_empty():
    assert ProblemDetails(status=404, cause="X").to_dict() == {"status": 404, "cause": "X"}


def test_problem_response():
    resp = problem_response(not_found("USER_NOT_FOUND"))
    assert resp.status == 404
    assert resp.headers["Content-Type"] == PROBLEM_CONTENT_TYPE
    assert resp.body["cause"] == "USER_NOT_FOUND"
    assert resp.cause == "USER_NOT_FOUND"


def test_empty_ue_id():
    resp = empty_ue_id_problem()
    assert resp.status == 400
    assert resp.body["detail"] == "ueId is required"