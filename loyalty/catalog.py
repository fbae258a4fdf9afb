"""Category and product reference data.

The wizard consumes, but does not own, the venue's catalog. A ``Catalog``
is injected wherever ids need checking; ``DEFAULT_CATALOG`` is the fixed
stand-in used until a venue/product management system supplies the real one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class CategoryId(str, Enum):
    """The fixed set of product categories a program is tuned over."""

    SESSION = "session"
    STANDARD = "standard"
    STOCK = "stock"
    PARTY = "party"
    MEMBERSHIP = "membership"

    @classmethod
    def parse(cls, value: "str | CategoryId") -> Optional["CategoryId"]:
        """Return the matching id, or None for an unknown string."""
        try:
            return cls(value)
        except ValueError:
            return None


CATEGORY_IDS: tuple[CategoryId, ...] = tuple(CategoryId)


@dataclass(frozen=True)
class Category:
    id: CategoryId
    name: str


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    category: CategoryId


class Catalog:
    """Read-only category/product lookup.

    Usage::

        catalog = Catalog(categories=[...], products=[...])
        catalog.category_name(CategoryId.STOCK)   # "Stock (F&B & Merch)"
        catalog.is_product("burger")              # True
    """

    def __init__(self, categories: Iterable[Category], products: Iterable[Product] = ()):
        self.categories: tuple[Category, ...] = tuple(categories)
        self.products: tuple[Product, ...] = tuple(products)

        by_id: dict[CategoryId, Category] = {}
        for category in self.categories:
            if category.id in by_id:
                raise ValueError(f"Duplicate category id: {category.id.value}")
            by_id[category.id] = category
        missing = [c.value for c in CATEGORY_IDS if c not in by_id]
        if missing:
            raise ValueError(f"Catalog is missing categories: {missing}")

        products_by_id: dict[str, Product] = {}
        for product in self.products:
            if product.id in products_by_id:
                raise ValueError(f"Duplicate product id: {product.id}")
            if product.category not in by_id:
                raise ValueError(
                    f"Product {product.id} references unknown category {product.category}"
                )
            products_by_id[product.id] = product

        self._categories_by_id = by_id
        self._products_by_id = products_by_id

    # -- Lookups --

    def category(self, category_id: "CategoryId | str") -> Optional[Category]:
        parsed = CategoryId.parse(category_id)
        return self._categories_by_id.get(parsed) if parsed else None

    def category_name(self, category_id: "CategoryId | str") -> str:
        """Display name, falling back to the raw id."""
        category = self.category(category_id)
        if category:
            return category.name
        return getattr(category_id, "value", category_id)

    def product(self, product_id: str) -> Optional[Product]:
        return self._products_by_id.get(product_id)

    def is_product(self, product_id: str) -> bool:
        return product_id in self._products_by_id

    def products_in(self, category_id: "CategoryId | str") -> list[Product]:
        parsed = CategoryId.parse(category_id)
        return [p for p in self.products if p.category == parsed]


# ---------------------------------------------------------------------------
# Stand-in reference data
# ---------------------------------------------------------------------------

DEFAULT_CATALOG = Catalog(
    categories=[
        Category(CategoryId.SESSION, "Session passes"),
        Category(CategoryId.STANDARD, "Standard passes"),
        Category(CategoryId.STOCK, "Stock (F&B & Merch)"),
        Category(CategoryId.PARTY, "Party packages"),
        Category(CategoryId.MEMBERSHIP, "Memberships"),
    ],
    products=[
        Product("jump1h", "1-hour jump pass", CategoryId.SESSION),
        Product("jumpDay", "All day jump pass", CategoryId.STANDARD),
        Product("climb30", "30-min climb pass add-on", CategoryId.SESSION),
        Product("ltag1", "Laser Tag - 1 game", CategoryId.SESSION),
        Product("burger", "Burger", CategoryId.STOCK),
        Product("socks", "Jump socks", CategoryId.STOCK),
        Product("giftcard", "Gift Card", CategoryId.STANDARD),
    ],
)
