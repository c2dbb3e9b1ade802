from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload, joinedload
from sqlalchemy.sql import func
from core.exceptions import CartNotFoundError, ItemNotFoundInCartError, ProductNotFoundError
from models.carts import Cart
from models.cart_items import CartItem
from models.products import Product
from models.users import User
from schemas.cart_schemas import CartView
from utils.logger import get_logger

logger = get_logger(__name__)


class CartService:
    """
    One cart per user, holding at most one line per product.

    Every mutating method commits exactly once. Failures are raised before
    anything is written, so the request's session rolls back untouched.
    Mutations lock the user's cart row first, serializing concurrent
    requests for the same user on databases that support SELECT ... FOR UPDATE.
    Quantity increments are applied in SQL so concurrent adds never lose a
    write, including on SQLite where the row lock is a no-op.
    """

    @staticmethod
    def get_cart(user: User, db: Session, lock: bool = False) -> Cart | None:
        query = db.query(Cart).filter(Cart.user_id == user.id)
        if lock:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def get_or_create_cart(user: User, db: Session, lock: bool = False) -> Cart:
        cart = CartService.get_cart(user, db, lock=lock)
        if cart:
            return cart

        cart = Cart(user_id=user.id)
        try:
            # Savepoint: losing the race undoes only this insert
            with db.begin_nested():
                db.add(cart)
        except IntegrityError:
            # Lost the race against a concurrent request: carts.user_id is unique
            logger.info("Concurrent cart creation detected", extra={"user_id": user.id})
            return CartService.get_cart(user, db, lock=lock)

        logger.info("Cart created", extra={"user_id": user.id, "cart_id": cart.id})
        return cart

    @staticmethod
    def _get_line(cart: Cart, product_id: int, db: Session) -> CartItem | None:
        return db.query(CartItem).filter(
            CartItem.cart_id == cart.id,
            CartItem.product_id == product_id
        ).first()

    @staticmethod
    def _touch(model):
        model.updated_at = func.now()

    @staticmethod
    def _increment_line(line_id: int, quantity: int, db: Session) -> None:
        db.execute(
            update(CartItem)
            .where(CartItem.id == line_id)
            .values(quantity=CartItem.quantity + quantity, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    def _insert_line(cart: Cart, product_id: int, quantity: int, db: Session) -> bool:
        """Inserts a new line; False when a concurrent request created it first."""
        try:
            with db.begin_nested():
                db.add(CartItem(cart_id=cart.id, product_id=product_id, quantity=quantity))
        except IntegrityError:
            return False
        return True

    @staticmethod
    def add_to_cart(user: User, product_id: int, quantity: int, db: Session) -> None:
        """
        Adds ``quantity`` of a product to the user's cart, creating the cart
        and/or the line as needed. An existing line is incremented, never
        duplicated.
        """
        product = db.get(Product, product_id)
        if not product:
            logger.warning(
                "Add to cart failed - product not found",
                extra={"user_id": user.id, "product_id": product_id}
            )
            raise ProductNotFoundError()

        cart = CartService.get_or_create_cart(user, db, lock=True)
        line = CartService._get_line(cart, product_id, db)

        if line is None and not CartService._insert_line(cart, product.id, quantity, db):
            line = CartService._get_line(cart, product_id, db)

        if line is not None:
            CartService._increment_line(line.id, quantity, db)

        CartService._touch(cart)
        db.commit()

        logger.info(
            "Cart item added",
            extra={"user_id": user.id, "product_id": product_id, "quantity": quantity}
        )

    @staticmethod
    def _require_line(user: User, product_id: int, db: Session) -> tuple[Cart, CartItem]:
        cart = CartService.get_cart(user, db, lock=True)
        if not cart:
            raise CartNotFoundError()

        line = CartService._get_line(cart, product_id, db)
        if not line:
            raise ItemNotFoundInCartError()

        return cart, line

    @staticmethod
    def update_cart_item(user: User, product_id: int, quantity: int, db: Session) -> None:
        """Overwrites the quantity of an existing line."""
        cart, line = CartService._require_line(user, product_id, db)

        line.quantity = quantity
        CartService._touch(line)
        CartService._touch(cart)
        db.commit()

        logger.info(
            "Cart item updated",
            extra={"user_id": user.id, "product_id": product_id, "quantity": quantity}
        )

    @staticmethod
    def remove_from_cart(user: User, product_id: int, db: Session) -> None:
        cart, line = CartService._require_line(user, product_id, db)

        db.delete(line)
        CartService._touch(cart)
        db.commit()

        logger.info("Cart item removed", extra={"user_id": user.id, "product_id": product_id})

    @staticmethod
    def delete_all_lines(cart: Cart, db: Session) -> int:
        """Deletes every line of ``cart`` without committing."""
        deleted = db.query(CartItem).filter(CartItem.cart_id == cart.id).delete()
        CartService._touch(cart)
        return deleted

    @staticmethod
    def clear_cart(user: User, db: Session) -> None:
        """Empties the user's cart. A user without a cart is a no-op."""
        cart = CartService.get_cart(user, db, lock=True)
        if not cart:
            return

        deleted = CartService.delete_all_lines(cart, db)
        db.commit()

        logger.info("Cart cleared", extra={"user_id": user.id, "lines_removed": deleted})

    @staticmethod
    def get_cart_items(user: User, db: Session, lock: bool = False) -> list[CartItem]:
        """All lines of the user's cart with their products loaded; [] without a cart."""
        cart = CartService.get_cart(user, db, lock=lock)
        if not cart:
            return []

        return (
            db.query(CartItem)
            .options(joinedload(CartItem.product))
            .filter(CartItem.cart_id == cart.id)
            .order_by(CartItem.id)
            .all()
        )

    @staticmethod
    def get_cart_with_items(user: User, db: Session) -> CartView:
        """
        Cart read model priced at current product prices.

        Does not create a cart: a user who never had one gets an empty view.
        """
        cart = (
            db.query(Cart)
            .options(selectinload(Cart.items).joinedload(CartItem.product))
            .filter(Cart.user_id == user.id)
            .first()
        )

        if not cart:
            return CartView()

        return CartView.model_validate(cart)
