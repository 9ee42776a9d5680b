"""
Shared schema types.
"""
from decimal import Decimal
from typing import Annotated
from pydantic import BaseModel, PlainSerializer

# Decimal internally, a plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class GroupRequest(BaseModel):
    """Body of the group-scoped settlement calls."""
    group_id: int
