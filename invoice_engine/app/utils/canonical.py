"""
Canonical JSON serialization.

Canonical bytes are the input of ``compute_document_hash``: keys are
sorted, separators are compact, text is UTF-8 without escaping and
Decimals are written as strings, so equal payloads always produce equal
bytes.
"""

import json
from decimal import Decimal
from typing import Any

from pydantic import BaseModel


def _canonical_json_default(obj: Any) -> str:
    if isinstance(obj, Decimal):
        return str(obj)
    raise TypeError(
        f"Object of type {obj.__class__.__name__} is not JSON serializable"
    )


def canonical_json_bytes(payload: Any) -> bytes:
    """
    Serialize ``payload`` (a model or plain JSON-like data) canonically.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")

    return json.dumps(
        payload,
        sort_keys=True,
        ensure_ascii=False,
        allow_nan=False,
        separators=(",", ":"),
        default=_canonical_json_default,
    ).encode("utf-8")
