"""Input checks shared by the services. All failures are ValidationError."""
from __future__ import annotations

import uuid
from typing import Optional, Union

from vidhub.core.errors import ValidationError


def parse_id(raw: Union[str, uuid.UUID, None], label: str) -> uuid.UUID:
    """Parse an entity identifier, raising ``Invalid <label>`` when malformed."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw).strip())
    except (TypeError, ValueError, AttributeError):
        raise ValidationError(f"Invalid {label}")


def require_text(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(message)
    return value.strip()
