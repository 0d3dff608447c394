"""Base class for per-entity-type mutators.

A mutator performs the single field-level write of an approval: ``apply``
updates an existing entity with proposed changes, ``activate`` publishes a
submitted entity by flipping its status to approved.
"""

import logging
from abc import ABC
from typing import Any, Dict, FrozenSet, Mapping, Optional, Type

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from moderation.core.workflow.records import ItemType
from moderation.core.workflow.states import ReviewStatus
from moderation.db.base import Base

logger = logging.getLogger(__name__)


class EntityNotFoundError(Exception):
    """The target entity does not exist."""

    def __init__(self, item_type: ItemType, item_id: str):
        super().__init__(f"{item_type.value} {item_id} not found")
        self.item_type = item_type
        self.item_id = item_id


class NoWritableChangesError(ValueError):
    """A proposal names no field the mutator may write."""

    def __init__(self, item_type: ItemType, item_id: str, keys):
        super().__init__(f"No writable fields for {item_type.value} {item_id} in {sorted(keys)}")
        self.item_type = item_type
        self.item_id = item_id


class BaseMutator(ABC):
    """Writes approved changes to one entity table.

    Subclasses declare the model, the item type they serve and the columns
    a proposal may write. Changes are flushed on the shared session; the
    caller owns the commit.
    """

    item_type: ItemType
    model: Type[Base]
    writable_fields: FrozenSet[str] = frozenset()
    # Columns accepted when a submission creates the entity
    creatable_fields: FrozenSet[str] = frozenset()
    # Keys consumed by ``_apply_extra`` rather than written as columns
    extra_fields: FrozenSet[str] = frozenset()
    # Column stamped with the submitter of a created entity
    author_field: str = "created_by"

    def __init__(self, db: Session):
        self.db = db

    def get(self, item_id: str) -> Optional[Base]:
        return self.db.query(self.model).filter(self.model.id == item_id).first()

    def apply(self, item_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """Write the writable subset of ``changes`` to an existing entity.

        Raises:
            EntityNotFoundError: The entity does not exist
            NoWritableChangesError: None of the keys may be written
        """
        entity = self.get(item_id)
        if entity is None:
            raise EntityNotFoundError(self.item_type, item_id)

        values = self._filter(changes, self.writable_fields)
        if not values and not self.extra_fields.intersection(changes):
            raise NoWritableChangesError(self.item_type, item_id, changes)
        for key, value in values.items():
            setattr(entity, key, value)
        self._apply_extra(entity, changes)

        self.db.flush()
        logger.info(f"Applied {sorted(values)} to {self.item_type.value} {item_id}")
        return self.to_dict(entity)

    def activate(self, item_id: str, fields: Mapping[str, Any], submitted_by: str) -> Dict[str, Any]:
        """Mark a submitted entity approved, creating it if it does not exist yet.

        A created entity is authored by ``submitted_by``; an author named in
        ``fields`` is ignored.
        """
        entity = self.get(item_id)
        if entity is None:
            values = self._filter(fields, self.writable_fields | self.creatable_fields)
            values[self.author_field] = submitted_by
            entity = self.model(id=item_id, **values)
            self.db.add(entity)
            self.db.flush()
            self._apply_extra(entity, fields)
            logger.info(f"Created {self.item_type.value} {item_id} from submission")

        entity.status = ReviewStatus.APPROVED.value
        self.db.flush()
        logger.info(f"Activated {self.item_type.value} {item_id}")
        return self.to_dict(entity)

    def _apply_extra(self, entity: Base, changes: Mapping[str, Any]) -> None:
        """Hook for changes that are not plain column writes."""

    def _filter(self, changes: Mapping[str, Any], allowed: FrozenSet[str]) -> Dict[str, Any]:
        dropped = set(changes) - allowed - self.extra_fields
        if dropped:
            logger.warning(f"Ignoring non-writable {self.item_type.value} fields: {sorted(dropped)}")
        return {key: value for key, value in changes.items() if key in allowed}

    @staticmethod
    def to_dict(entity: Base) -> Dict[str, Any]:
        result = {}
        for attr in inspect(entity).mapper.column_attrs:
            value = getattr(entity, attr.key)
            if hasattr(value, "isoformat"):
                value = value.isoformat()
            result[attr.key] = value
        return result
