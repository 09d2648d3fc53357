"""Product aggregate root with the per-customer Rating entity."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from agrimarket.catalogue.events import ProductAdded, ProductRated, ProductUpdated, StockChanged
from agrimarket.domain import agrimarket

MAX_RATING = 5


@agrimarket.entity(part_of="Product")
class Rating:
    """One customer's accumulated rating of a product."""

    user_id: Identifier(required=True)
    rating: Integer(required=True, min_value=1, max_value=MAX_RATING)
    rated_at: DateTime()


@agrimarket.aggregate
class Product:
    """A sellable item in the catalogue.

    ``offer_price`` is an optional discounted price. Carts charge the offer
    price when present, while order line items snapshot the list price.
    """

    name: String(required=True, max_length=255)
    description: Text()
    unit: String(required=True, max_length=50)
    price: Float(required=True, min_value=0.0)
    offer_price: Float(min_value=0.0)
    image: String(max_length=1000)
    category_id: Identifier(required=True)
    ratings: HasMany(Rating)
    in_stock: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def ratings_are_unique_per_user(self):
        users = [str(r.user_id) for r in self.ratings]
        if len(users) != len(set(users)):
            raise ValidationError({"ratings": ["A customer can only hold one rating per product"]})

    @classmethod
    def create(
        cls,
        name,
        unit,
        price,
        category_id,
        description=None,
        offer_price=None,
        image=None,
        in_stock=True,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            unit=unit,
            price=price,
            offer_price=offer_price,
            image=image,
            category_id=category_id,
            in_stock=True if in_stock is None else in_stock,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                name=product.name,
                category_id=product.category_id,
                price=product.price,
                offer_price=product.offer_price,
                in_stock=product.in_stock,
                created_at=now,
            )
        )
        return product

    @property
    def unit_price(self):
        """Price charged per unit in a cart."""
        return self.offer_price if self.offer_price is not None else self.price

    @property
    def average_rating(self):
        if not self.ratings:
            return 0
        return round(sum(r.rating for r in self.ratings) / len(self.ratings), 1)

    def update_details(self, **changes):
        for field_name in ("name", "description", "unit", "price", "offer_price", "image", "category_id", "in_stock"):
            value = changes.get(field_name)
            if value is not None:
                setattr(self, field_name, value)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductUpdated(
                product_id=self.id,
                price=self.price,
                offer_price=self.offer_price,
            )
        )

    def toggle_stock(self):
        self.in_stock = not self.in_stock
        self.updated_at = datetime.now(UTC)
        self.raise_(StockChanged(product_id=self.id, in_stock=self.in_stock))

    def rate(self, user_id):
        """Bump the customer's rating by one, starting at 1 and capped at 5.

        Returns True when an existing rating was incremented and False when
        a first rating was added.
        """
        now = datetime.now(UTC)
        existing = next((r for r in self.ratings if str(r.user_id) == str(user_id)), None)

        if existing:
            existing.rating = min(existing.rating + 1, MAX_RATING)
            existing.rated_at = now
            rating = existing.rating
        else:
            self.add_ratings(Rating(user_id=user_id, rating=1, rated_at=now))
            rating = 1

        self.updated_at = now
        self.raise_(ProductRated(product_id=self.id, user_id=str(user_id), rating=rating))
        return existing is not None
