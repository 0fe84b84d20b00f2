from enum import Enum


class AuthorRole(str, Enum):
    """The four disjoint person partitions that may author forum content."""

    admin = "admin"
    teacher = "teacher"
    parent = "parent"
    student = "student"


class PaymentStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"


class EnrollmentStatus(str, Enum):
    active = "active"
    completed = "completed"
    dropped = "dropped"


class NotificationType(str, Enum):
    info = "info"
    message = "message"
    assignment = "assignment"
    class_ = "class"
    alert = "alert"
