"""Authorisation check applied to every incoming request."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional, Protocol

from udr.problem import Response

log = logging.getLogger(__name__)


class NFContext(Protocol):
    def authorization_check(self, token: str, service_name: str) -> None:
        """Raise if the token does not grant access to the service."""


class RouterAuthorizationCheck:
    def __init__(self, service_name: str) -> None:
        self.service_name = service_name

    def check(self, headers: Mapping[str, Any], nf_context: NFContext) -> Optional[Response]:
        """Return None when authorised, or a 401 response to send instead."""
        token = ""
        for key, value in headers.items():
            if key.lower() == "authorization":
                token = value
                break
        try:
            nf_context.authorization_check(token, self.service_name)
        except Exception as err:  # any failure means unauthorised
            log.debug("RouterAuthorizationCheck: Check Unauthorized: %s", err)
            return Response(status=401, body={"error": str(err)})
        log.debug("RouterAuthorizationCheck: Check Authorized")
        return None