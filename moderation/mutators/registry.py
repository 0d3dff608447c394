"""Mutator registry.

Dispatches ``apply`` and ``activate`` to the mutator registered for the
record's item type. The registry is what the workflow engine sees as its
entity mutator.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy.orm import Session

from moderation.core.workflow.errors import UnsupportedEntityTypeError
from moderation.core.workflow.records import ItemType

from .base import BaseMutator
from .comment import CommentMutator
from .employee import EmployeeMutator
from .establishment import EstablishmentMutator

logger = logging.getLogger(__name__)


class MutatorRegistry:
    """Registry of per-entity-type mutators."""

    def __init__(self, mutators: Optional[List[BaseMutator]] = None):
        self._mutators: Dict[ItemType, BaseMutator] = {}
        for mutator in mutators or []:
            self.register(mutator)

    def register(self, mutator: BaseMutator) -> None:
        """Register a mutator for its item type."""
        if mutator.item_type in self._mutators:
            logger.warning(f"Overwriting existing mutator for item type: {mutator.item_type.value}")
        self._mutators[mutator.item_type] = mutator
        logger.debug(f"Registered mutator: {mutator.item_type.value}")

    def get_mutator(self, item_type: Union[ItemType, str]) -> BaseMutator:
        """Get the mutator for an item type.

        Raises:
            UnsupportedEntityTypeError: No mutator is registered for the type
        """
        try:
            return self._mutators[ItemType(item_type)]
        except (KeyError, ValueError):
            raise UnsupportedEntityTypeError(
                f"No mutator registered for item type {item_type!r}",
                item_type=str(item_type),
            ) from None

    def apply(self, item_type: Union[ItemType, str], item_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        return self.get_mutator(item_type).apply(item_id, changes)

    def activate(
        self,
        item_type: Union[ItemType, str],
        item_id: str,
        fields: Mapping[str, Any],
        submitted_by: str,
    ) -> Dict[str, Any]:
        return self.get_mutator(item_type).activate(item_id, fields, submitted_by)


def build_registry(db: Session) -> MutatorRegistry:
    """Registry with the employee, establishment and comment mutators on one session."""
    return MutatorRegistry([
        EmployeeMutator(db),
        EstablishmentMutator(db),
        CommentMutator(db),
    ])
