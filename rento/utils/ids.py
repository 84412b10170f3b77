"""Record identifier generation."""

from __future__ import annotations

import uuid


def new_id() -> str:
    """Return a random UUID4 string, the id format used by the hosted store."""
    return str(uuid.uuid4())
