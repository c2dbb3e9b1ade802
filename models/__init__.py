from models.users import User
from models.refresh_tokens import RefreshToken
from models.categories import Category
from models.products import Product
from models.carts import Cart
from models.cart_items import CartItem
from models.orders import Order
from models.order_items import OrderItem

__all__ = ["User", "RefreshToken", "Category", "Product", "Cart", "CartItem", "Order", "OrderItem"]
