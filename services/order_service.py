from decimal import Decimal
from typing import Iterable
from sqlalchemy.orm import Session, selectinload
from core.exceptions import CartIsEmptyError, NoValidItemsSelectedError, OrderNotFoundError
from models.orders import Order
from models.order_items import OrderItem
from models.users import User
from schemas.order_schemas import OrderView, OrderHistory
from services.cart_service import CartService
from utils.logger import get_logger
from utils.pagination import clamp_page, total_pages, offset_for

logger = get_logger(__name__)

DEFAULT_HISTORY_PAGE_SIZE = 10
MAX_HISTORY_PAGE_SIZE = 50


def calculate_order_total(lines: Iterable[tuple[int, Decimal]]) -> Decimal:
    """
    Sum of quantity x price over (quantity, price) pairs, in Decimal.

    Returns Decimal("0") for no lines.
    """
    return sum((Decimal(quantity) * Decimal(price) for quantity, price in lines), Decimal("0"))


class OrderService:

    @staticmethod
    def create_order(user: User, db: Session, selected_item_ids: list[int] | None = None) -> OrderView:
        """
        Turns the user's cart (or the selected lines of it) into a pending order.

        Flow:
        1. Load every cart line; an empty cart fails regardless of selection
        2. Narrow to the selected lines, silently dropping unknown ids
        3. Snapshot each product price once and total it
        4. Persist the order and one order line per cart line
        5. Delete the consumed cart lines (the whole cart for a full checkout)
        6. Commit once: the order, its lines and the cart cleanup land together

        Raises:
            CartIsEmptyError: the user has no cart lines at all
            NoValidItemsSelectedError: the selection matched none of the user's lines
        """
        cart_items = CartService.get_cart_items(user, db, lock=True)
        if not cart_items:
            logger.warning("Checkout failed - cart is empty", extra={"user_id": user.id})
            raise CartIsEmptyError()

        cart = cart_items[0].cart

        working_set = cart_items
        if selected_item_ids is not None:
            selected = set(selected_item_ids)
            working_set = [item for item in cart_items if item.id in selected]

            if not working_set:
                logger.warning(
                    "Checkout failed - no valid items selected",
                    extra={"user_id": user.id, "selected_item_ids": list(selected_item_ids)}
                )
                raise NoValidItemsSelectedError()

        # Prices are read exactly once so the order total and line subtotals agree
        priced = [(item, item.product.price) for item in working_set]
        total = calculate_order_total((item.quantity, price) for item, price in priced)

        try:
            order = Order(user_id=user.id, total=total, status="pending")
            for item, price in priced:
                order.items.append(OrderItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=price,
                    product_name=item.product.name,
                    product_description=item.product.description,
                ))
            db.add(order)

            if selected_item_ids is None:
                CartService.delete_all_lines(cart, db)
            else:
                for item in working_set:
                    db.delete(item)

            db.commit()
        except Exception:
            db.rollback()
            logger.error(
                "Checkout failed - transaction rolled back",
                extra={"user_id": user.id},
                exc_info=True
            )
            raise

        db.refresh(order)

        logger.info(
            "Order created",
            extra={
                "user_id": user.id,
                "order_id": order.id,
                "total": str(total),
                "line_count": len(priced),
                "partial": selected_item_ids is not None
            }
        )

        return OrderView.from_model(order)

    @staticmethod
    def get_order_history(user: User, db: Session, page: int = 1, page_size: int = DEFAULT_HISTORY_PAGE_SIZE) -> OrderHistory:
        """Orders of the user, newest first, one page at a time."""
        page, page_size = clamp_page(page, page_size, DEFAULT_HISTORY_PAGE_SIZE, MAX_HISTORY_PAGE_SIZE)

        base = db.query(Order).filter(Order.user_id == user.id)
        total = base.count()

        orders = (
            base.options(selectinload(Order.items))
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset(offset_for(page, page_size))
            .limit(page_size)
            .all()
        )

        return OrderHistory(
            orders=[OrderView.from_model(order) for order in orders],
            total=total,
            page=page,
            total_pages=total_pages(total, page_size),
        )

    @staticmethod
    def get_order_by_id(order_id: int, user: User, db: Session) -> OrderView:
        order = (
            db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.id == order_id, Order.user_id == user.id)
            .first()
        )

        if not order:
            raise OrderNotFoundError()

        return OrderView.from_model(order)
