"""Product catalog feature module for Stellar Market."""

from stellar_market.features.catalog.service import (
    CatalogError,
    Product,
    ProductCatalog,
)

__all__ = ["CatalogError", "Product", "ProductCatalog"]
