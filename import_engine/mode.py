"""
import_engine.mode - Choose inline or queued execution from payload size.
"""

from __future__ import annotations

from enum import Enum

import config


class ImportMode(str, Enum):
    IMMEDIATE = "immediate"
    DEFERRED = "deferred"


def select_mode(payload_size_bytes: int, threshold: int | None = None) -> ImportMode:
    """At or below the threshold → IMMEDIATE, above → DEFERRED."""
    if threshold is None:
        threshold = config.IMPORT_SYNC_MAX_BYTES
    if payload_size_bytes < 0:
        raise ValueError("payload size must not be negative")
    if payload_size_bytes <= threshold:
        return ImportMode.IMMEDIATE
    return ImportMode.DEFERRED
