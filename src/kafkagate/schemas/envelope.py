from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class Envelope(BaseModel):
    """Request body accepted by the publish endpoint.

    ``type`` selects the registered message schema. ``content`` is kept opaque
    here; it is only checked once the type has been resolved.
    """

    model_config = ConfigDict(extra="ignore")

    type: StrictStr = Field(..., description="Registered message type id")
    content: Any = Field(None, description="Payload decoded against the type's schema")
