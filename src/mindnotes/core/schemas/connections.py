"""
Connection schemas. The wire format uses ``from``/``to`` for the endpoints.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ConnectionCreate(BaseModel):
    """Connection creation request schema."""

    from_note_id: uuid.UUID = Field(alias="from", description="First endpoint note id")
    to_note_id: uuid.UUID = Field(alias="to", description="Second endpoint note id")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "from": "123e4567-e89b-12d3-a456-426614174000",
                "to": "223e4567-e89b-12d3-a456-426614174000",
            }
        },
    )


class ConnectionResponse(BaseModel):
    """Connection response schema."""

    id: uuid.UUID
    from_note_id: uuid.UUID = Field(alias="from")
    to_note_id: uuid.UUID = Field(alias="to")
    owner_id: uuid.UUID
    created_at: datetime

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_model(cls, connection) -> "ConnectionResponse":
        return cls(
            id=connection.id,
            from_note_id=connection.from_note_id,
            to_note_id=connection.to_note_id,
            owner_id=connection.owner_id,
            created_at=connection.created_at,
        )
