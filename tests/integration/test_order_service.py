from decimal import Decimal

import pytest

from core.exceptions import CartIsEmptyError, NoValidItemsSelectedError, OrderNotFoundError
from models.cart_items import CartItem
from models.orders import Order
from models.order_items import OrderItem
from services.cart_service import CartService
from services.order_service import OrderService


@pytest.fixture
def filled_cart(session, user, product_a, product_b):
    """A at 10.00 x2 and B at 5.00 x3; returns {product_id: cart_item_id}."""
    CartService.add_to_cart(user, product_a.id, 2, session)
    CartService.add_to_cart(user, product_b.id, 3, session)
    return {item.product_id: item.id for item in CartService.get_cart_items(user, session)}


def test_full_checkout(session, user, product_a, product_b, filled_cart):
    order = OrderService.create_order(user, session)

    assert order.total == Decimal("35.00")
    assert order.status == "pending"
    assert sorted(item.subtotal for item in order.items) == [Decimal("15.00"), Decimal("20.00")]
    by_product = {item.product.id: item for item in order.items}
    assert by_product[product_a.id].quantity == 2
    assert by_product[product_a.id].price == Decimal("10.00")
    assert by_product[product_b.id].product.name == "Product B"

    assert CartService.get_cart_items(user, session) == []
    # the cart itself survives checkout
    assert CartService.get_cart(user, session) is not None


def test_order_total_matches_line_subtotals(session, user, filled_cart):
    order = OrderService.create_order(user, session)

    assert order.total == sum(item.subtotal for item in order.items)


def test_selective_checkout(session, user, product_a, product_b, filled_cart):
    order = OrderService.create_order(user, session, selected_item_ids=[filled_cart[product_a.id]])

    assert order.total == Decimal("20.00")
    assert len(order.items) == 1
    assert order.items[0].product.id == product_a.id

    remaining = CartService.get_cart_items(user, session)
    assert [(item.product_id, item.quantity) for item in remaining] == [(product_b.id, 3)]


def test_selection_ignores_unknown_ids(session, user, product_a, product_b, filled_cart):
    order = OrderService.create_order(
        user, session, selected_item_ids=[filled_cart[product_b.id], 424242]
    )

    assert [item.product.id for item in order.items] == [product_b.id]
    assert order.total == Decimal("15.00")


def test_empty_cart_fails_without_creating_order(session, user):
    with pytest.raises(CartIsEmptyError) as exc_info:
        OrderService.create_order(user, session)

    assert exc_info.value.status_code == 400
    assert session.query(Order).count() == 0


def test_empty_cart_checked_before_selection(session, user):
    with pytest.raises(CartIsEmptyError):
        OrderService.create_order(user, session, selected_item_ids=[1, 2])


def test_selection_matching_nothing_fails(session, user, filled_cart):
    with pytest.raises(NoValidItemsSelectedError):
        OrderService.create_order(user, session, selected_item_ids=[999998, 999999])

    assert session.query(Order).count() == 0
    assert len(CartService.get_cart_items(user, session)) == 2


def test_cannot_check_out_another_users_lines(session, user, other_user, product_a, filled_cart):
    CartService.add_to_cart(other_user, product_a.id, 1, session)

    with pytest.raises(NoValidItemsSelectedError):
        OrderService.create_order(other_user, session, selected_item_ids=list(filled_cart.values()))

    assert len(CartService.get_cart_items(user, session)) == 2


def test_order_prices_are_frozen(session, user, product_a, filled_cart):
    order = OrderService.create_order(user, session)

    product_a.price = Decimal("99.00")
    session.commit()

    reloaded = OrderService.get_order_by_id(order.id, user, session)
    line_a = next(item for item in reloaded.items if item.product.id == product_a.id)
    assert line_a.price == Decimal("10.00")
    assert reloaded.total == Decimal("35.00")


def test_checkout_is_atomic(session, user, filled_cart, monkeypatch):
    """A failure while consuming the cart leaves no order and the cart intact."""
    def boom(cart, db):
        raise RuntimeError("storage failure")

    monkeypatch.setattr(CartService, "delete_all_lines", staticmethod(boom))

    with pytest.raises(RuntimeError):
        OrderService.create_order(user, session)

    assert session.query(Order).count() == 0
    assert session.query(OrderItem).count() == 0
    assert session.query(CartItem).count() == 2


def test_selective_checkout_is_atomic(session, user, filled_cart, monkeypatch):
    """A failure after part of the selection was written leaves no order and every line."""
    real_delete = session.delete
    deleted = []

    def fail_on_second_delete(instance):
        if deleted:
            session.flush()
            raise RuntimeError("storage failure")
        deleted.append(instance)
        real_delete(instance)

    monkeypatch.setattr(session, "delete", fail_on_second_delete)

    with pytest.raises(RuntimeError):
        OrderService.create_order(user, session, selected_item_ids=list(filled_cart.values()))

    monkeypatch.undo()

    assert len(deleted) == 1
    assert session.query(Order).count() == 0
    assert session.query(OrderItem).count() == 0
    assert session.query(CartItem).count() == 2

def test_get_order_by_id(session, user, filled_cart):
    created = OrderService.create_order(user, session)

    fetched = OrderService.get_order_by_id(created.id, user, session)

    assert fetched.id == created.id
    assert fetched.total == created.total
    assert len(fetched.items) == 2


def test_foreign_and_missing_orders_look_the_same(session, user, other_user, filled_cart):
    order = OrderService.create_order(user, session)

    with pytest.raises(OrderNotFoundError) as foreign:
        OrderService.get_order_by_id(order.id, other_user, session)
    with pytest.raises(OrderNotFoundError) as missing:
        OrderService.get_order_by_id(order.id + 1000, user, session)

    assert foreign.value.status_code == missing.value.status_code == 400
    assert foreign.value.detail == missing.value.detail


def _place_orders(session, user, product, count):
    ids = []
    for _ in range(count):
        CartService.add_to_cart(user, product.id, 1, session)
        ids.append(OrderService.create_order(user, session).id)
    return ids


def test_order_history_newest_first_with_pagination(session, user, product_a):
    placed = _place_orders(session, user, product_a, 3)

    first = OrderService.get_order_history(user, session, page=1, page_size=2)
    second = OrderService.get_order_history(user, session, page=2, page_size=2)

    assert [order.id for order in first.orders] == [placed[2], placed[1]]
    assert [order.id for order in second.orders] == [placed[0]]
    assert first.total == second.total == 3
    assert first.total_pages == 2
    assert first.orders[0].items[0].subtotal == Decimal("10.00")


def test_order_history_page_out_of_range(session, user, product_a):
    _place_orders(session, user, product_a, 3)

    history = OrderService.get_order_history(user, session, page=7, page_size=2)

    assert history.orders == []
    assert history.total == 3
    assert history.total_pages == 2
    assert history.page == 7


def test_order_history_only_own_orders(session, user, other_user, product_a):
    _place_orders(session, user, product_a, 2)

    history = OrderService.get_order_history(other_user, session)

    assert history.orders == []
    assert history.total == 0
    assert history.total_pages == 0
