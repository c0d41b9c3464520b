"""Product catalog loaded from a JSON file."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from stellar_market.features.cart.service import CartItem
from stellar_market.shared.validation import AddressValidator, AmountValidator

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_FILE = Path(__file__).parent / "products.json"


class CatalogError(Exception):
    pass


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: str
    seller: str
    image: str = ""
    description: str = ""

    def to_cart_item(self, quantity: int = 1) -> CartItem:
        return CartItem(
            id=self.id,
            name=self.name,
            price=self.price,
            seller=self.seller,
            quantity=quantity,
            image=self.image,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        product_id = str(data.get("id", "")).strip()
        if not product_id:
            raise ValueError("Product id is required")

        price_result = AmountValidator.validate_price(str(data.get("price", "")))
        if not price_result.is_valid:
            raise ValueError(f"{product_id}: {price_result.error_message}")

        seller_result = AddressValidator.validate(str(data.get("seller", "")))
        if not seller_result.is_valid:
            raise ValueError(f"{product_id}: seller {seller_result.error_message}")

        return cls(
            id=product_id,
            name=str(data.get("name") or product_id),
            price=format(price_result.normalized_value, "f"),
            seller=seller_result.normalized_value,
            image=str(data.get("image", "")),
            description=str(data.get("description", "")),
        )


class ProductCatalog:
    def __init__(self, products: list[Product] | None = None):
        self._products: dict[str, Product] = {}
        for product in products or []:
            if product.id in self._products:
                logger.warning("Duplicate product id %s ignored", product.id)
                continue
            self._products[product.id] = product

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> "ProductCatalog":
        catalog_file = Path(path).expanduser() if path else DEFAULT_CATALOG_FILE
        try:
            with open(catalog_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Cannot read catalog {catalog_file}: {e}") from e

        entries = data.get("products", []) if isinstance(data, dict) else data
        if not isinstance(entries, list):
            raise CatalogError(f"Catalog {catalog_file} has no product list")

        products = []
        for entry in entries:
            try:
                products.append(Product.from_dict(entry))
            except (ValueError, AttributeError) as e:
                logger.warning("Skipping catalog entry: %s", e)

        logger.info("Loaded %d products from %s", len(products), catalog_file)
        return cls(products)

    @property
    def products(self) -> list[Product]:
        return list(self._products.values())

    def get(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def __len__(self) -> int:
        return len(self._products)
