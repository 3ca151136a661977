from decimal import Decimal

from chalicelib import stats
from chalicelib.carts import Cart
from chalicelib.catalog import MenuItem, CloudKitchen
from chalicelib.constants.status_codes import http200, http403, http404
from chalicelib.orders import Order
from chalicelib.users import register
from test.utils.request_utils import make_request, register_user, body_of

from test.utils.fixtures import chalice_gateway

address = {'street': '1 MG Road', 'area': 'Ashok Nagar', 'city': 'Bangalore', 'pincode': '560001'}


def place_order(order_id, item_id='item_1', qty=1, created_at=None):
    item = MenuItem.init_get_by_id(item_id)
    cart = Cart.init_by_user_id('customer_1')
    cart.add_item(item, qty, kitchen=CloudKitchen.init_get_by_id(item.restaurant_id))
    return Order(order_id, customer_id='customer_1', created_at=created_at).place(cart, delivery_address=address)


def test_kitchen_stats():
    place_order('order_1')
    ready = place_order('order_2', created_at='2024-01-01T12:00:00')
    for _ in range(3):
        ready.advance('kitchen_user')
    cancelled = place_order('order_3')
    cancelled.set_status('cancelled', 'customer_1')
    place_order('order_4', item_id='item_5')

    kitchen_1 = stats.kitchen_stats('kitchen_1')

    assert kitchen_1['active_orders'] == 1
    assert kitchen_1['ready_orders'] == 1
    assert kitchen_1['revenue'] == Decimal('392.50')
    assert kitchen_1['average_prep_time'] > 0


def test_kitchen_stats_without_orders():
    assert stats.kitchen_stats('kitchen_3') == {
        'kitchen_id': 'kitchen_3',
        'active_orders': 0,
        'ready_orders': 0,
        'revenue': Decimal('0.00'),
        'average_prep_time': 0
    }


def test_admin_stats():
    register({'email': 'a@cloudbites.test', 'name': 'A', 'password': 'x', 'role': 'customer'})
    delivered = place_order('order_1', item_id='item_10')
    while delivered.status_ != 'delivered':
        delivered.advance('admin_1')
    place_order('order_2', item_id='item_5')

    admin = stats.admin_stats()

    assert admin['total_orders'] == 2
    assert admin['total_revenue'] == Decimal('372.50')
    assert admin['total_users'] == 1
    assert admin['completed_deliveries'] == 1
    assert admin['status_distribution']['delivered'] == 1
    assert admin['status_distribution']['pending'] == 1
    assert admin['kitchens']['kitchen_4'] == {'name': 'Nonna Pasta Lab', 'orders': 1, 'revenue': Decimal('372.50')}
    assert admin['kitchens']['kitchen_2']['revenue'] == Decimal('0.00')


def test_stats_endpoints(chalice_gateway):
    admin = register_user(chalice_gateway, role='admin')['token']
    kitchen = register_user(chalice_gateway, role='kitchen', kitchen_id='kitchen_1')['token']
    customer = register_user(chalice_gateway)['token']

    response = make_request(chalice_gateway, endpoint='/stats/kitchen/kitchen_1', method='GET', token=kitchen)
    assert response['statusCode'] == http200, f"status code not as expected"
    assert body_of(response)['active_orders'] == 0

    response = make_request(chalice_gateway, endpoint='/stats/kitchen/kitchen_2', method='GET', token=kitchen)
    assert response['statusCode'] == http403, f"status code not as expected"

    response = make_request(chalice_gateway, endpoint='/stats/kitchen/kitchen_404', method='GET', token=admin)
    assert response['statusCode'] == http404, f"status code not as expected"

    response = make_request(chalice_gateway, endpoint='/stats/admin', method='GET', token=admin)
    assert response['statusCode'] == http200, f"status code not as expected"
    assert body_of(response)['total_users'] == 3

    response = make_request(chalice_gateway, endpoint='/stats/admin', method='GET', token=customer)
    assert response['statusCode'] == http403, f"status code not as expected"
