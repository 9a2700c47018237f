"""
Saved user templates.

A user template is a visual preset plus the user's configuration
overrides. Only the overrides are stored; they are merged onto the
preset at generation time, so preset improvements reach saved templates.

IMPORTANT:
- Writes are last-write-wins. There is no versioning and no conflict
  detection between concurrent editors of the same template.
- A user has at most one default template. Saving a record with
  ``is_default=True`` clears the flag on that user's other records.
- The API stores the legal mentions text in the overrides when the
  template is saved (``materialize_legal_mentions``). That text is
  authoritative: a later change of the issuer's legal form does not
  rewrite it.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from invoice_engine.app.normalization.normalize import canonicalize_configuration
from invoice_engine.app.registry.presets import DEFAULT_PRESET_SLUG, TEMPLATE_PRESETS

logger = logging.getLogger(__name__)


class TemplateRecord(BaseModel):
    user_id: str = Field(..., min_length=1)
    template_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=120)
    preset: str = DEFAULT_PRESET_SLUG
    configuration: Dict[str, Any] = Field(default_factory=dict)
    is_default: bool = False
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("preset")
    @classmethod
    def _registered_preset(cls, v: str) -> str:
        if v not in TEMPLATE_PRESETS:
            raise ValueError(
                f"Unknown template preset '{v}'. "
                f"Allowed values: {sorted(TEMPLATE_PRESETS)}"
            )
        return v

    @field_validator("configuration", mode="before")
    @classmethod
    def _canonical_keys(cls, v: Any) -> Dict[str, Any]:
        return canonicalize_configuration(v)


class InMemoryTemplateStore:
    """
    Process-local template store guarded by a single lock.
    """

    def __init__(self) -> None:
        self._records: Dict[Tuple[str, str], TemplateRecord] = {}
        self._lock = threading.Lock()

    def save(self, record: TemplateRecord) -> TemplateRecord:
        """Insert or replace ``record`` and return the stored version."""
        stored = record.model_copy(
            update={"updated_at": datetime.now(timezone.utc)}
        )

        with self._lock:
            if stored.is_default:
                for key, other in list(self._records.items()):
                    if (
                        other.user_id == stored.user_id
                        and other.template_id != stored.template_id
                        and other.is_default
                    ):
                        self._records[key] = other.model_copy(
                            update={"is_default": False}
                        )

            key = (stored.user_id, stored.template_id)
            if key in self._records:
                logger.debug(
                    "Overwriting template %s for user %s",
                    stored.template_id,
                    stored.user_id,
                )
            self._records[key] = stored

        return stored

    def get(self, user_id: str, template_id: str) -> Optional[TemplateRecord]:
        with self._lock:
            return self._records.get((user_id, template_id))

    def list_for_user(self, user_id: str) -> List[TemplateRecord]:
        with self._lock:
            records = [r for r in self._records.values() if r.user_id == user_id]
        return sorted(records, key=lambda r: r.template_id)

    def get_default(self, user_id: str) -> Optional[TemplateRecord]:
        with self._lock:
            for record in self._records.values():
                if record.user_id == user_id and record.is_default:
                    return record
        return None

    def delete(self, user_id: str, template_id: str) -> bool:
        with self._lock:
            return self._records.pop((user_id, template_id), None) is not None
