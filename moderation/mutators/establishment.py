from moderation.core.workflow.records import ItemType
from moderation.db.models import Establishment

from .base import BaseMutator


class EstablishmentMutator(BaseMutator):
    item_type = ItemType.ESTABLISHMENT
    model = Establishment
    writable_fields = frozenset({
        "name",
        "address",
        "zone",
        "category",
        "description",
        "phone",
        "website",
        "opening_hours",
        "services",
        "logo_url",
    })
