"""Enrollment: links a student to a class. Owned elsewhere; read-only here."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.core.enums import EnrollmentStatus
from app.db.session import Base, utc_now


class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(Uuid, nullable=True, index=True)  # classes are managed by another module
    status = Column(String(20), nullable=False, default=EnrollmentStatus.active.value)
    enrollment_date = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    student = relationship("Student")
