"""In-memory subscription state held by the repository."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class EeSubscriptionEntry:
    ee_subscription: Optional[dict[str, Any]] = None
    amf_subscription_infos: Optional[list[dict[str, Any]]] = None


@dataclass
class UeSubscriptions:
    ee_subscriptions: dict[str, EeSubscriptionEntry] = field(default_factory=dict)
    sdm_subscriptions: dict[str, dict[str, Any]] = field(default_factory=dict)


@dataclass
class UeGroupSubscriptions:
    ee_subscriptions: dict[str, dict[str, Any]] = field(default_factory=dict)


@dataclass
class RepositoryState:
    uri_scheme: str = "http"
    register_ipv4: str = "127.0.0.1"
    sbi_port: int = 8000
    ue_subscriptions: dict[str, UeSubscriptions] = field(default_factory=dict)
    ue_groups: dict[str, UeGroupSubscriptions] = field(default_factory=dict)
    subscription_data_subscriptions: dict[str, dict[str, Any]] = field(default_factory=dict)
    policy_data_subscriptions: dict[str, dict[str, Any]] = field(default_factory=dict)
    influence_data_subscriptions: dict[str, dict[str, Any]] = field(default_factory=dict)
    _counters: dict[str, int] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def _next(self, name: str) -> str:
        with self._lock:
            value = self._counters.get(name, 1)
            self._counters[name] = value + 1
            return str(value)

    def next_ee_subscription_id(self) -> str:
        return self._next("ee")

    def next_sdm_subscription_id(self) -> str:
        return self._next("sdm")

    def next_policy_subscription_id(self) -> str:
        return self._next("policy")

    def next_data_change_subscription_id(self) -> str:
        return self._next("data_change")

    def group_uri(self) -> str:
        return f"{self.uri_scheme}://{self.register_ipv4}:{self.sbi_port}"