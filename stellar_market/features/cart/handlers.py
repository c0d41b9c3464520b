"""Product list and cart event handlers for the Stellar Market TUI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from textual.widgets import Button, DataTable, Static

from stellar_market.features.cart.service import Cart
from stellar_market.shared.formatting import format_price, short_address
from stellar_market.shared.task_state import TaskStatus

if TYPE_CHECKING:
    from stellar_market.__main__ import MarketApp
    from stellar_market.features.catalog.service import ProductCatalog

logger = logging.getLogger(__name__)


def _selected_row_key(table: DataTable) -> str | None:
    if table.row_count == 0:
        return None
    try:
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
    except Exception:
        return None
    return row_key.value


class CartHandlersMixin:
    """Mixin class providing catalog and cart handlers for MarketApp."""

    catalog: ProductCatalog
    cart: Cart
    checkout_task: TaskStatus

    def update_products_table(self: "MarketApp") -> None:
        table = cast(DataTable, self.query_one("#products-table"))
        table.clear(columns=True)
        table.add_column("Product", key="name")
        table.add_column("Price", key="price")
        table.add_column("Seller", key="seller")
        for product in self.catalog.products:
            table.add_row(
                product.name,
                f"{product.price} XLM",
                short_address(product.seller),
                key=product.id,
            )

    def add_selected_product(self: "MarketApp") -> None:
        if self.checkout_task.is_busy:
            self.notify("Checkout in progress", severity="warning")
            return
        table = cast(DataTable, self.query_one("#products-table"))
        product_id = _selected_row_key(table)
        product = self.catalog.get(product_id) if product_id else None
        if product is None:
            self.notify("Select a product first", severity="warning")
            return
        item = self.cart.add_item(product.to_cart_item())
        self.update_cart_view()
        self.notify(f"{product.name} added to cart (x{item.quantity})")

    def remove_selected_cart_item(self: "MarketApp") -> None:
        if self.checkout_task.is_busy:
            self.notify("Checkout in progress", severity="warning")
            return
        table = cast(DataTable, self.query_one("#cart-table"))
        item_id = _selected_row_key(table)
        if item_id and self.cart.remove_item(item_id):
            self.update_cart_view()

    def update_cart_view(self: "MarketApp") -> None:
        table = cast(DataTable, self.query_one("#cart-table"))
        table.clear(columns=True)
        table.add_column("Item", key="name")
        table.add_column("Quantity", key="quantity")
        table.add_column("Seller", key="seller")
        for item in self.cart.items:
            table.add_row(
                item.name,
                f"{item.quantity} × {item.price} XLM",
                short_address(item.seller),
                key=item.id,
            )

        total = cast(Static, self.query_one("#cart-total"))
        if self.cart.is_empty:
            total.update("Your cart is empty")
        else:
            total.update(f"Total: {format_price(self.cart.total_price)} XLM")

        checkout_button = cast(Button, self.query_one("#checkout-button"))
        checkout_button.label = "Processing..." if self.checkout_task.is_busy else "Checkout"
        checkout_button.disabled = (
            self.checkout_task.is_busy
            or not self.session.is_connected
            or self.cart.is_empty
        )
