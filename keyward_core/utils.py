"""
keyward_core.utils
------------------
Lightweight helpers for key id allocation, base64 utilities, and canonical JSON serialization.
The built-in key managers use these to keep format parameters and key payloads deterministic.
"""

from __future__ import annotations
import base64, json, secrets
from typing import Any, Dict, Iterable

UINT32_MAX = 0xFFFFFFFF


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"), validate=True)

def new_key_id(exclude: Iterable[int] = ()) -> int:
    """Random non-zero uint32 that is not in ``exclude``."""
    taken = set(exclude)
    while True:
        key_id = secrets.randbits(32)
        if key_id != 0 and key_id not in taken:
            return key_id

def canonical_json(obj: Dict[str, Any]) -> bytes:
    # Deterministic, minimal JSON for params and payloads
    return json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode("utf-8")

def from_json(data: bytes) -> Dict[str, Any]:
    obj = json.loads(data.decode("utf-8"))
    if not isinstance(obj, dict):
        raise ValueError("expected a JSON object")
    return obj
