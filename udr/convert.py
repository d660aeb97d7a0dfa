"""Conversions between repository documents, JSON and identifier strings."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import Any

DEFAULT_KEY_LOG_PATH = "./log/udrsslkey.log"
DEFAULT_PEM_PATH = "./config/TLS/udr.pem"
DEFAULT_KEY_PATH = "./config/TLS/udr.key"
DEFAULT_CONFIG_PATH = "./config/udrcfg.yaml"


@dataclass(frozen=True)
class Snssai:
    """Single network slice selection assistance information."""

    sst: int
    sd: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"sst": self.sst}
        if self.sd:
            result["sd"] = self.sd
        return result


def _default(obj: Any) -> Any:
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"cannot serialise {type(obj).__name__}")


def to_json_bytes(data: Any) -> bytes:
    """Serialise data to compact JSON with sorted keys."""
    return json.dumps(data, separators=(",", ":"), sort_keys=True, default=_default).encode()


def to_document(data: Any) -> dict[str, Any]:
    """Turn a model or mapping into a plain JSON-compatible dict."""
    result = json.loads(to_json_bytes(data))
    if not isinstance(result, dict):
        raise TypeError("data does not serialise to a JSON object")
    return result


def snssai_from_hex(hex_string: str) -> Snssai:
    """Parse an S-NSSAI written as two hex digits of SST followed by the SD."""
    if len(hex_string) < 2:
        raise ValueError(f"S-NSSAI string too short: {hex_string!r}")
    sst = int(hex_string[:2], 16)
    return Snssai(sst=sst, sd=hex_string[2:])


def snssai_to_hex(snssai: Snssai) -> str:
    return f"{snssai.sst:02x}{snssai.sd}"


def escape_dnn(dnn: str) -> str:
    """Make a DNN usable as a document key."""
    return dnn.replace(".", "_")


def unescape_dnn(dnn_key: str) -> str:
    return dnn_key.replace("_", ".")


def contains(target: Any, items: Any) -> bool:
    """True if items is a list or tuple holding an element equal to target."""
    if not isinstance(items, (list, tuple)):
        return False
    return any(item == target for item in items)