from __future__ import annotations

from enum import Enum


class PresenceStatus(str, Enum):
    """Kind of presence event stored in the ledger."""

    IN = "IN"
    OUT = "OUT"


class CurrentStatus(str, Enum):
    """Answer to "where is this user now", NONE when nothing was recorded."""

    IN = "IN"
    OUT = "OUT"
    NONE = "NONE"
