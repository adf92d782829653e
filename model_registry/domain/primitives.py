"""
Common primitives shared by the domain models.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict

U16_MAX = 2**16 - 1
U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class DomainModel(BaseModel):
    """Base for domain models.

    ``model_``-prefixed field names (``model_type``, ``model_id``) are part
    of the registry vocabulary, so pydantic's protected namespace is lifted.
    """

    model_config = ConfigDict(extra="forbid", protected_namespaces=())
