from app.core.models.person import Admin, Parent, Student, Teacher
from app.core.models.enrollment import Enrollment
from app.core.models.forum import Comment, Forum, Post, Topic
from app.core.models.payment import Payment

__all__ = [
    "Admin",
    "Teacher",
    "Parent",
    "Student",
    "Enrollment",
    "Forum",
    "Topic",
    "Post",
    "Comment",
    "Payment",
]
