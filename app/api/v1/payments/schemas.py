"""Payment schemas. paymentDate is server-assigned and absent from every request model."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.enums import PaymentStatus


class PaymentCreate(BaseModel):
    enrollment_id: UUID
    amount: int = Field(..., ge=0, description="Smallest currency unit")
    method: str = Field(..., min_length=1, max_length=50)
    status: PaymentStatus = PaymentStatus.pending
    transaction_id: Optional[str] = Field(None, max_length=255)

    class Config:
        use_enum_values = True


class PaymentUpdate(BaseModel):
    enrollment_id: Optional[UUID] = None
    amount: Optional[int] = Field(None, ge=0)
    method: Optional[str] = Field(None, min_length=1, max_length=50)
    status: Optional[PaymentStatus] = None
    transaction_id: Optional[str] = Field(None, max_length=255)

    class Config:
        use_enum_values = True


class PaymentResponse(BaseModel):
    id: UUID
    enrollment_id: UUID
    amount: int
    method: str
    status: str
    transaction_id: Optional[str] = None
    payment_date: datetime
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
