from app.core.cache import CacheKeys
from app.core.entity_service import EntityService
from app.core.models import Post, Topic
from app.core.referential import Reference

from .schemas import PostResponse


class PostService(EntityService):
    """Replies to a topic, listed oldest first."""

    model = Post
    response_model = PostResponse
    label = "Post"
    namespace = CacheKeys.POSTS
    references = (Reference("topic_id", Topic, "Topic"),)
    parent_field = "topic_id"
    order_by = Post.created_at.asc()
    authored = True
    dependent_namespaces = (CacheKeys.COMMENTS,)
