from moderation.core.workflow.records import ItemType
from moderation.db.models import Comment

from .base import BaseMutator


class CommentMutator(BaseMutator):
    """Comments are only published through the moderation queue, never edited."""

    item_type = ItemType.COMMENT
    model = Comment
    writable_fields = frozenset({"content", "rating"})
    creatable_fields = frozenset({"employee_id"})
    author_field = "user_id"
