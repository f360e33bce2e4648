"""
keyward_core.prefix
-------------------
Output prefix framing shared by every primitive.

Layout for TINK / LEGACY / CRUNCHY keys:
  - 1 byte : format tag (0x01)
  - 4 bytes: key_id (u32 big-endian)
RAW keys get no framing at all.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, Tuple

from .utils import UINT32_MAX

FORMAT_TAG = 0x01
PREFIX_SIZE = 5
RAW_PREFIX = b""


class OutputPrefixKind(str, Enum):
    RAW = "RAW"
    TINK = "TINK"
    LEGACY = "LEGACY"
    CRUNCHY = "CRUNCHY"


def output_prefix(kind: OutputPrefixKind, key_id: int) -> bytes:
    kind = OutputPrefixKind(kind)
    if kind is OutputPrefixKind.RAW:
        return RAW_PREFIX
    if not isinstance(key_id, int) or not 0 <= key_id <= UINT32_MAX:
        raise ValueError(f"key_id must be an unsigned 32-bit integer, got {key_id!r}")
    # LEGACY and CRUNCHY share the TINK framing
    return bytes([FORMAT_TAG]) + key_id.to_bytes(4, "big", signed=False)


def parse_prefix(data: bytes) -> Optional[Tuple[int, int]]:
    """Return ``(tag, key_id)`` if ``data`` starts with a framing prefix."""
    if len(data) < PREFIX_SIZE or data[0] != FORMAT_TAG:
        return None
    return data[0], int.from_bytes(data[1:PREFIX_SIZE], "big", signed=False)
