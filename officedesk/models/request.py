# officedesk/models/request.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone, date
from typing import Optional, List
import uuid
from officedesk.models.common import ApprovalStatus, ApprovalDecision

class StateEvent(BaseModel):
    from_status: Optional[ApprovalStatus] = None
    to_status: ApprovalStatus
    at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    by_user_id: str
    track: Optional[str] = None

class RequestInDB(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    service_id: str
    office_id: str
    user_id: str
    current_address: str
    requested_date: Optional[date] = None
    status_by_staff: ApprovalStatus = ApprovalStatus.PENDING
    status_by_admin: ApprovalStatus = ApprovalStatus.PENDING
    approve_note: Optional[str] = None
    staff_decided_by: Optional[str] = None
    admin_decided_by: Optional[str] = None
    state_history: List[StateEvent] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class RequestCreate(BaseModel):
    service_id: str
    office_id: str
    current_address: str = Field(min_length=1)
    requested_date: Optional[date] = None

class RequestUpdate(BaseModel):
    current_address: Optional[str] = Field(default=None, min_length=1)
    requested_date: Optional[date] = None

    # se puede omitir, pero no vaciar
    @field_validator("current_address", mode="before")
    @classmethod
    def address_not_null(cls, v):
        if v is None:
            raise ValueError("current_address no puede ser null")
        return v

class TrackDecisionPayload(BaseModel):
    decision: ApprovalDecision
    note: Optional[str] = None
