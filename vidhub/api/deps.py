"""
VidHub API — request-scoped dependencies.

The viewer id is issued and verified upstream (auth gateway) and forwarded
in ``settings.viewer_header``. This layer only reads and parses it.
"""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import Request

from vidhub.core.config import get_settings
from vidhub.core.errors import AuthenticationError
from vidhub.core.validation import parse_id

settings = get_settings()


def get_optional_viewer_id(request: Request) -> Optional[uuid.UUID]:
    raw = request.headers.get(settings.viewer_header)
    if not raw:
        return None
    return parse_id(raw, "viewer id")


def get_viewer_id(request: Request) -> uuid.UUID:
    viewer_id = get_optional_viewer_id(request)
    if viewer_id is None:
        raise AuthenticationError("Authentication required")
    return viewer_id
