from app.core.cache import CacheKeys
from app.core.entity_service import EntityService
from app.core.models import Forum, Topic
from app.core.referential import Reference

from .schemas import TopicResponse


class TopicService(EntityService):
    """Topics belong to one forum and one polymorphic author. Listing is unordered."""

    model = Topic
    response_model = TopicResponse
    label = "Topic"
    namespace = CacheKeys.TOPICS
    references = (Reference("forum_id", Forum, "Forum"),)
    parent_field = "forum_id"
    authored = True
    dependent_namespaces = (CacheKeys.POSTS, CacheKeys.COMMENTS)
