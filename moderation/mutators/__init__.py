"""Entity mutators: the field-level writes performed on approval."""

from .base import BaseMutator, EntityNotFoundError, NoWritableChangesError
from .comment import CommentMutator
from .employee import EmployeeMutator
from .establishment import EstablishmentMutator
from .registry import MutatorRegistry, build_registry

__all__ = [
    "BaseMutator",
    "EntityNotFoundError",
    "NoWritableChangesError",
    "EmployeeMutator",
    "EstablishmentMutator",
    "CommentMutator",
    "MutatorRegistry",
    "build_registry",
]
