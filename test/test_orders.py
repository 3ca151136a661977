import json
from decimal import Decimal

import pytest

from chalicelib import orders
from chalicelib.carts import Cart
from chalicelib.catalog import MenuItem, CloudKitchen
from chalicelib.constants.constants import ORDER_TRANSITIONS, NEXT_STATUS, ORDER_TYPE_WEEKLY
from chalicelib.constants.status_codes import http200, http201, http400, http403, http404, http409
from chalicelib.orders import Order
from chalicelib.subscriptions import SubscriptionDetails
from chalicelib.utils import exceptions
from test.utils.request_utils import make_request, register_user, body_of

from test.utils.fixtures import chalice_gateway

customer_id = 'customer_1'
address = {'street': '1 MG Road', 'area': 'Ashok Nagar', 'city': 'Bangalore', 'pincode': '560001'}


def fill_cart(user_id=customer_id, lines=(('item_1', 1),)):
    cart = Cart.init_by_user_id(user_id)
    for item_id, qty in lines:
        item = MenuItem.init_get_by_id(item_id)
        cart.add_item(item, qty, kitchen=CloudKitchen.init_get_by_id(item.restaurant_id))
    return cart


def place_order(user_id=customer_id, lines=(('item_1', 1),), **kwargs):
    return Order('order_' + user_id, customer_id=user_id).place(
        fill_cart(user_id, lines), delivery_address=address, **kwargs)


def test_checkout_copies_totals_and_clears_cart():
    cart = fill_cart(lines=(('item_1', 1), ('item_3', 2)))
    expected = cart.subtotal, cart.delivery_fee, cart.platform_fee, cart.total

    order = Order('order_1', customer_id=customer_id).place(cart, delivery_address=address)

    assert (order.subtotal, order.delivery_fee, order.platform_fee, order.total) == expected
    assert order.total == Decimal('512.50')
    assert order.status_ == 'pending'
    assert order.payment_method == 'card'
    assert [item['menu_item_id'] for item in order.items] == ['item_1', 'item_3']
    assert order.history[0]['status'] == 'pending'
    assert Cart.init_by_user_id(customer_id).items == []

    stored = Order.init_by_id('order_1')
    assert stored.total == Decimal('512.50')
    assert stored.delivery_address == address


def test_checkout_empty_cart():
    with pytest.raises(exceptions.EmptyCart):
        Order('order_1', customer_id=customer_id).place(Cart.init_by_user_id(customer_id), delivery_address=address)


def test_checkout_below_min_order_keeps_cart():
    cart = fill_cart(lines=(('item_3', 2),))

    with pytest.raises(exceptions.MinimumOrderNotReached):
        Order('order_1', customer_id=customer_id).place(cart, delivery_address=address)
    assert Cart.init_by_user_id(customer_id).item_count == 2
    assert orders.get_all_orders() == []


def test_checkout_requires_full_address():
    with pytest.raises(exceptions.MandatoryFieldsAreNotFilled):
        Order('order_1', customer_id=customer_id).place(fill_cart(), delivery_address={'street': '1 MG Road'})


def test_subscription_order():
    subscription = SubscriptionDetails(ORDER_TYPE_WEEKLY, ['Mon', 'Wed'], ['lunch'])
    order = place_order(order_type=ORDER_TYPE_WEEKLY, subscription=subscription)

    assert order.order_type == ORDER_TYPE_WEEKLY
    assert order.subscription_details['total_deliveries'] == 2


def test_subscription_needs_subscription_kitchen():
    subscription = SubscriptionDetails(ORDER_TYPE_WEEKLY, ['Mon'], ['dinner'])
    with pytest.raises(exceptions.ValidationException):
        place_order(lines=(('item_8', 2),), order_type=ORDER_TYPE_WEEKLY, subscription=subscription)


def test_advance_follows_the_chain_and_never_regresses():
    order = place_order()
    seen = [order.status_]
    while order.status_ in NEXT_STATUS:
        order.advance('admin_1')
        seen.append(order.status_)

    assert seen == ['pending', 'confirmed', 'preparing', 'ready', 'awaiting_delivery', 'assigned', 'in_transit',
                    'delivered']
    assert [entry['status'] for entry in Order.init_by_id(order.id_).history] == seen
    with pytest.raises(exceptions.InvalidStatusTransition):
        order.advance('admin_1')


@pytest.mark.parametrize('status, new_status', [
    ('pending', 'ready'),
    ('ready', 'pending'),
    ('preparing', 'cancelled'),
    ('delivered', 'in_transit'),
    ('cancelled', 'confirmed'),
])
def test_invalid_transitions_are_rejected(status, new_status):
    order = place_order()
    order.status_ = status
    order._update_db_record()

    with pytest.raises(exceptions.InvalidStatusTransition):
        order.set_status(new_status, 'admin_1')
    assert Order.init_by_id(order.id_).status_ == status


def test_transition_table_is_closed():
    for status, targets in ORDER_TRANSITIONS.items():
        assert all(target in ORDER_TRANSITIONS for target in targets)
        if status in NEXT_STATUS:
            assert NEXT_STATUS[status] in targets


def test_customer_orders_newest_first():
    first = Order('order_1', customer_id=customer_id, created_at='2024-01-01T10:00:00').place(
        fill_cart(), delivery_address=address)
    second = Order('order_2', customer_id=customer_id, created_at='2024-01-02T10:00:00').place(
        fill_cart(), delivery_address=address)
    place_order(user_id='customer_2')

    assert [order.id_ for order in orders.get_customer_orders(customer_id)] == [second.id_, first.id_]


def test_kitchen_board_and_delivery_queries():
    order = place_order()
    board = orders.get_kitchen_board('kitchen_1')
    assert [order.id_ for order in board['pending']] == [order.id_]
    assert board['ready'] == []

    for _ in range(3):
        order.advance('kitchen_user')
    assert [o.id_ for o in orders.get_open_delivery_orders()] == [order.id_]

    order.assign_delivery_partner('partner_1', 30, 'customer_1')
    assert orders.get_open_delivery_orders() == []
    assert [o.id_ for o in orders.get_partner_active_orders('partner_1')] == [order.id_]
    assert order.estimated_delivery_time is not None


def checkout_via_api(chalice_gateway, token, lines=(('item_1', 1),)):
    for item_id, qty in lines:
        make_request(chalice_gateway, endpoint='/carts', method='POST', token=token,
                     json_body={'menu_item_id': item_id, 'qty': qty})
    return make_request(chalice_gateway, endpoint='/orders', method='POST', token=token,
                        json_body={'delivery_address': address, 'priority_delivery': True})


def test_create_order(chalice_gateway):
    token = register_user(chalice_gateway)['token']
    response = checkout_via_api(chalice_gateway, token)

    assert response['statusCode'] == http201, f"status code not as expected"
    order = body_of(response)
    assert order['status'] == 'pending'
    assert order['total'] == 392.5
    assert order['priority_delivery'] is True

    cart = body_of(make_request(chalice_gateway, endpoint='/carts', method='GET', token=token))['cart']
    assert cart['items'] == []

    response = make_request(chalice_gateway, endpoint='/orders', method='GET', token=token)
    assert [o['id'] for o in body_of(response)['orders']] == [order['id']]


def test_create_order_below_min(chalice_gateway):
    token = register_user(chalice_gateway)['token']
    response = checkout_via_api(chalice_gateway, token, lines=(('item_3', 1),))

    assert response['statusCode'] == http400, f"status code not as expected"
    assert body_of(response)['exception'] == 'MinimumOrderNotReached'


def test_order_visibility(chalice_gateway):
    owner = register_user(chalice_gateway)['token']
    stranger = register_user(chalice_gateway, email='other@cloudbites.test')['token']
    order_id = body_of(checkout_via_api(chalice_gateway, owner))['id']

    response = make_request(chalice_gateway, endpoint=f'/orders/{order_id}', method='GET', token=owner)
    assert response['statusCode'] == http200, f"status code not as expected"

    response = make_request(chalice_gateway, endpoint=f'/orders/{order_id}', method='GET', token=stranger)
    assert response['statusCode'] == http404, f"status code not as expected"


def test_status_permissions(chalice_gateway):
    customer = register_user(chalice_gateway)['token']
    kitchen = register_user(chalice_gateway, role='kitchen', kitchen_id='kitchen_1')['token']
    other_kitchen = register_user(chalice_gateway, role='kitchen', email='k2@cloudbites.test',
                                  kitchen_id='kitchen_2')['token']
    order_id = body_of(checkout_via_api(chalice_gateway, customer))['id']

    response = make_request(chalice_gateway, endpoint=f'/orders/{order_id}/status', method='PUT', token=customer,
                            json_body={'status': 'confirmed'})
    assert response['statusCode'] == http403, f"status code not as expected"

    response = make_request(chalice_gateway, endpoint=f'/orders/{order_id}/status', method='PUT',
                            token=other_kitchen, json_body={'status': 'confirmed'})
    assert response['statusCode'] == http404, f"status code not as expected"

    response = make_request(chalice_gateway, endpoint=f'/orders/{order_id}/status', method='PUT', token=kitchen,
                            json_body={'status': 'ready'})
    assert response['statusCode'] == http409, f"status code not as expected"

    response = make_request(chalice_gateway, endpoint=f'/orders/{order_id}/advance', method='POST', token=kitchen)
    assert response['statusCode'] == http200, f"status code not as expected"
    assert body_of(response)['status'] == 'confirmed'

    response = make_request(chalice_gateway, endpoint=f'/orders/{order_id}/status', method='PUT', token=customer,
                            json_body={'status': 'cancelled'})
    assert response['statusCode'] == http200, f"status code not as expected"
    order = body_of(response)
    assert order['status'] == 'cancelled'
    assert [entry['status'] for entry in order['history']] == ['pending', 'confirmed', 'cancelled']


def test_kitchen_board(chalice_gateway):
    customer = register_user(chalice_gateway)['token']
    kitchen = register_user(chalice_gateway, role='kitchen', kitchen_id='kitchen_1')['token']
    order_id = body_of(checkout_via_api(chalice_gateway, customer))['id']

    response = make_request(chalice_gateway, endpoint='/orders/kitchen/kitchen_1', method='GET', token=kitchen)
    assert response['statusCode'] == http200, f"status code not as expected"
    columns = body_of(response)['columns']
    assert [o['id'] for o in columns['pending']] == [order_id]
    assert set(columns) == {'pending', 'confirmed', 'preparing', 'ready'}

    response = make_request(chalice_gateway, endpoint='/orders/kitchen/kitchen_2', method='GET', token=kitchen)
    assert response['statusCode'] == http403, f"status code not as expected"

    response = make_request(chalice_gateway, endpoint='/orders/kitchen/kitchen_1', method='GET', token=customer)
    assert response['statusCode'] == http403, f"status code not as expected"


def test_delivery_orders(chalice_gateway):
    customer = register_user(chalice_gateway)['token']
    admin = register_user(chalice_gateway, role='admin')['token']
    delivery = register_user(chalice_gateway, role='delivery')['token']
    order_id = body_of(checkout_via_api(chalice_gateway, customer))['id']

    response = make_request(chalice_gateway, endpoint='/delivery/orders', method='GET', token=delivery)
    assert body_of(response)['available'] == []

    for _ in range(3):
        make_request(chalice_gateway, endpoint=f'/orders/{order_id}/advance', method='POST', token=admin)

    response = make_request(chalice_gateway, endpoint='/delivery/orders', method='GET', token=delivery)
    assert response['statusCode'] == http200, f"status code not as expected"
    assert [o['id'] for o in body_of(response)['available']] == [order_id]
    assert body_of(response)['active'] == []

    response = make_request(chalice_gateway, endpoint='/delivery/orders', method='GET', token=customer)
    assert response['statusCode'] == http403, f"status code not as expected"
