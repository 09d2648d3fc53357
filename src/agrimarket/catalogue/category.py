"""Category aggregate root for grouping products."""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, String, Text

from agrimarket.catalogue.events import CategoryCreated, CategoryUpdated
from agrimarket.domain import agrimarket


class CategoryStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@agrimarket.aggregate
class Category:
    """A named grouping of products shown on the storefront.

    Inactive categories are kept with their products; the status only
    controls presentation.
    """

    name: String(required=True, max_length=100)
    description: Text(required=True)
    image: String(max_length=1000)
    status: String(choices=CategoryStatus, default=CategoryStatus.ACTIVE.value)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, description, image=None, status=None):
        if not name or not description:
            raise ValidationError({"category": ["Please provide category name and description"]})

        now = datetime.now(UTC)
        category = cls(
            name=name,
            description=description,
            image=image,
            status=status or CategoryStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=category.name,
                status=category.status,
                created_at=now,
            )
        )
        return category

    def update_details(self, name=None, description=None, image=None, status=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if image is not None:
            self.image = image
        if status is not None:
            self.status = status

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CategoryUpdated(
                category_id=self.id,
                name=self.name,
                status=self.status,
            )
        )
