from app.core.cache import CacheKeys
from app.core.entity_service import EntityService
from app.core.models import Comment, Post
from app.core.referential import Reference

from .schemas import CommentResponse


class CommentService(EntityService):
    model = Comment
    response_model = CommentResponse
    label = "Comment"
    namespace = CacheKeys.COMMENTS
    references = (Reference("post_id", Post, "Post"),)
    parent_field = "post_id"
    order_by = Comment.created_at.asc()
    authored = True
