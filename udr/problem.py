"""Problem details and response values used by the repository procedures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

INVALID_REQUEST = "Invalid request message framing"
MALFORMED_REQUEST = "Malformed request syntax"
UNAUTHORIZED_CONSUMER = "Unauthorized NF service consumer"
UNSUPPORTED_RESOURCE = "Unsupported request resources"

PROBLEM_CONTENT_TYPE = "application/problem+json"


@dataclass
class ProblemDetails:
    status: int
    title: str = ""
    detail: str = ""
    cause: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"status": self.status}
        for key in ("title", "detail", "cause"):
            value = getattr(self, key)
            if value:
                result[key] = value
        return result


@dataclass
class Response:
    """Outcome of a procedure: HTTP status, body and extra headers."""

    status: int
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    cause: str = ""


def problem_response(pd: ProblemDetails) -> Response:
    return Response(
        status=pd.status,
        body=pd.to_dict(),
        headers={"Content-Type": PROBLEM_CONTENT_TYPE},
        cause=pd.cause,
    )


def empty_ue_id_problem() -> Response:
    return problem_response(
        ProblemDetails(status=400, title=MALFORMED_REQUEST, detail="ueId is required")
    )


def system_failure(detail: str) -> ProblemDetails:
    return ProblemDetails(status=500, title="System failure", detail=detail, cause="SYSTEM_FAILURE")


def malformed_request_syntax(detail: str) -> ProblemDetails:
    return ProblemDetails(status=400, title=MALFORMED_REQUEST, detail=detail)


_NOT_FOUND_TITLES = {
    "USER_NOT_FOUND": "User not found",
    "SUBSCRIPTION_NOT_FOUND": "Subscription not found",
    "AMFSUBSCRIPTION_NOT_FOUND": "AMF Subscription not found",
}


def not_found(cause: str) -> ProblemDetails:
    return ProblemDetails(
        status=404, title=_NOT_FOUND_TITLES.get(cause, "Data not found"), cause=cause
    )


def modify_not_allowed(detail: str) -> ProblemDetails:
    return ProblemDetails(
        status=403, title="Modify not allowed", detail=detail, cause="MODIFY_NOT_ALLOWED"
    )


def unspecified(detail: str) -> ProblemDetails:
    return ProblemDetails(status=403, title="Unspecified", detail=detail, cause="UNSPECIFIED")