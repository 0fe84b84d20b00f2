"""Payment against an enrollment. Amounts are integers in the smallest currency unit."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.core.enums import PaymentStatus
from app.db.session import Base, utc_now


class Payment(Base):
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_payment_amount_non_negative"),
        CheckConstraint("status IN ('pending', 'completed', 'failed')", name="ck_payment_status"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    enrollment_id = Column(Uuid, ForeignKey("enrollments.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    method = Column(String(50), nullable=False)  # credit card, paypal, bank transfer
    status = Column(String(20), nullable=False, default=PaymentStatus.pending.value)
    transaction_id = Column(String(255), nullable=True)
    # Assigned at insert, never written afterwards
    payment_date = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    enrollment = relationship("Enrollment")
