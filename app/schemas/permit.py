"""Pydantic schemas for permit records.

Attributes are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt
from pydantic.alias_generators import to_camel


class PermitStatus(str, Enum):
    """Lifecycle status of a permit."""

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETE = "Complete"
    REJECTED = "Rejected"
    ON_HOLD = "On Hold"


class CamelModel(BaseModel):
    """Frozen base model serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PropertyAddress(CamelModel):
    """Street address of the improved property."""

    street: str
    city: str
    state: str
    zip: str


class Document(CamelModel):
    """A file attached to a permit."""

    document_id: str = Field(..., description="Document identifier.")
    filename: str = Field(..., description="Original filename.")
    document_type: str = Field(..., description="Kind of document (e.g., 'Building Permit').")
    upload_date: date = Field(..., description="Upload date (YYYY-MM-DD).")
    file_url: str = Field(..., description="Download URL.")


class Permit(CamelModel):
    """Full permit record, returned verbatim by single-record lookup."""

    permit_id: str = Field(..., description="Unique permit identifier (UUID).")
    property_address: PropertyAddress
    status: PermitStatus
    date_submitted: date = Field(..., description="Submission date (YYYY-MM-DD).")
    # Union keeps whole-dollar amounts as integers on the wire.
    improvement_amount: NonNegativeInt | NonNegativeFloat = Field(
        ..., description="Declared improvement value."
    )
    documents: list[Document] = Field(..., description="Attached documents, possibly empty.")


class SimplifiedPermit(CamelModel):
    """List-view projection of a permit: identifier and status only."""

    permit_id: str
    status: PermitStatus

    @classmethod
    def from_permit(cls, permit: Permit) -> "SimplifiedPermit":
        return cls(permit_id=permit.permit_id, status=permit.status)
