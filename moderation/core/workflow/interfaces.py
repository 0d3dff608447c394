"""Collaborator contracts of the workflow engine."""

from typing import Any, Dict, List, Mapping, Optional, Protocol

from moderation.core.roles import Role

from .records import ItemType, ReviewRecord
from .states import ReviewStatus


class RoleResolver(Protocol):
    def get_role(self, user_id: str) -> Role: ...


class ReviewStore(Protocol):
    """Persistence of one kind of review record.

    ``update_status`` only succeeds while the stored status is still
    pending; a store that cannot guarantee this leaves a narrow window in
    which two concurrent reviews both pass the engine's status guard.
    """

    def create(self, record: ReviewRecord) -> ReviewRecord: ...

    def get_by_id(self, record_id: str) -> Optional[ReviewRecord]: ...

    def update_status(
        self,
        record_id: str,
        status: ReviewStatus,
        reviewer_id: str,
        notes: Optional[str],
    ) -> ReviewRecord: ...

    def list(
        self,
        *,
        status: Optional[ReviewStatus] = None,
        item_type: Optional[ItemType] = None,
    ) -> List[ReviewRecord]: ...

    def list_by_actor(self, actor_id: str) -> List[ReviewRecord]: ...

    def count_by_status(self) -> Dict[ReviewStatus, int]: ...

    def count_pending_by_type(self) -> Dict[ItemType, int]: ...


class EntityMutator(Protocol):
    def apply(self, item_type: ItemType, item_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]: ...

    def activate(
        self, item_type: ItemType, item_id: str, fields: Mapping[str, Any], submitted_by: str
    ) -> Dict[str, Any]: ...


class NotificationDispatcher(Protocol):
    def notify_new_submission(self, record: ReviewRecord) -> None: ...

    def notify_approved(self, record: ReviewRecord) -> None: ...

    def notify_rejected(self, record: ReviewRecord, notes: str) -> None: ...


class UnitOfWork(Protocol):
    def commit(self) -> None: ...

    def rollback(self) -> None: ...
