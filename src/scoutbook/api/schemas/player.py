from __future__ import annotations

from pydantic import BaseModel


class DescriptionResponse(BaseModel):
    description: str
    cached: bool
