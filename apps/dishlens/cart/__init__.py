"""Customer cart."""

from apps.dishlens.cart.cart import CART_VERSION, Cart, cart_key

__all__ = ["CART_VERSION", "Cart", "cart_key"]
