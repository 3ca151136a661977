from chalice import Chalice

from chalicelib import bids, carts, catalog, orders, stats, users
from chalicelib.utils import app as utils_app

app = Chalice(app_name='cloudbites')

app.debug = True


@app.route('/health-check', methods=['GET'], cors=True)
def health_check():
    return {'health': 'check'}


# AUTH
@app.route('/auth/register', methods=['POST'], cors=True)
def register():
    return users.endpoint_register(app.current_request)


@app.route('/auth/login', methods=['POST'], cors=True)
def login():
    return users.endpoint_login(app.current_request)


@app.route('/auth/logout', methods=['POST'], cors=True)
def logout():
    return users.endpoint_logout(app.current_request)


# USERS
@app.route('/users', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_user():
    return users.User.init_request_user(app.current_request).endpoint_get_user()


@app.route('/users', methods=['PUT'], cors=True)
@utils_app.request_exception_handler
def update_user():
    return users.User.init_request_update(app.current_request).endpoint_update_user()


# KITCHENS
@app.route('/kitchens', methods=['GET'], cors=True)
def get_kitchens():
    return catalog.CloudKitchen.endpoint_get_all(app.current_request)


@app.route('/kitchens/{kitchen_id}', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_kitchen_by_id(kitchen_id):
    return catalog.CloudKitchen.init_get_by_id(kitchen_id).endpoint_get_by_id()


@app.route('/kitchens/{kitchen_id}/menu-items', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_kitchen_menu(kitchen_id):
    return catalog.CloudKitchen.init_get_by_id(kitchen_id).endpoint_get_menu_items()


# CART
@app.route('/carts', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_cart():
    return carts.Cart.init_endpoint(app.current_request).endpoint_get_cart()


@app.route('/carts', methods=['POST'], cors=True)
@utils_app.request_exception_handler
def add_item_to_cart():
    """
    replace_cart flag confirms switching the cart to another kitchen
    """
    return carts.Cart.init_endpoint(app.current_request).endpoint_add_item_to_cart()


@app.route('/carts/{menu_item_id}', methods=['PUT'], cors=True)
@utils_app.request_exception_handler
def update_cart_item_quantity(menu_item_id):
    return carts.Cart.init_endpoint(app.current_request).endpoint_update_quantity(menu_item_id)


@app.route('/carts/{menu_item_id}', methods=['DELETE'], cors=True)
@utils_app.request_exception_handler
def remove_item_from_cart(menu_item_id):
    return carts.Cart.init_endpoint(app.current_request).endpoint_remove_item_from_cart(menu_item_id)


@app.route('/carts', methods=['DELETE'], cors=True)
@utils_app.request_exception_handler
def clear_cart():
    return carts.Cart.init_endpoint(app.current_request).endpoint_clear_cart()


# ORDERS
@app.route('/orders', methods=['POST'], cors=True)
@utils_app.request_exception_handler
def create_order():
    """
    The order details are taken from the user's cart, the cart is cleared afterwards
    """
    return orders.Order.init_request_checkout(app.current_request).endpoint_create_order()


@app.route('/orders', methods=['GET'], cors=True)
def get_orders():
    """
    customer gets their orders, newest first
    kitchen user gets orders of their kitchen
    delivery partner gets orders assigned to them
    admin gets all orders
    """
    return orders.endpoint_get_orders(app.current_request)


@app.route('/orders/{order_id}', methods=['GET'], cors=True)
@utils_app.request_exception_handler
def get_order_by_id(order_id):
    return orders.Order.init_request_get_order(app.current_request, order_id).endpoint_get_by_id()


@app.route('/orders/{order_id}/status', methods=['PUT'], cors=True)
@utils_app.request_exception_handler
def update_order_status(order_id):
    """
    customer can cancel their order
    kitchen user confirms, prepares and hands over orders of their kitchen
    delivery partner picks up and delivers orders assigned to them
    """
    return orders.Order.init_request_get_order(app.current_request, order_id).endpoint_update_status()


@app.route('/orders/{order_id}/advance', methods=['POST'], cors=True)
@utils_app.request_exception_handler
def advance_order(order_id):
    return orders.Order.init_request_get_order(app.current_request, order_id).endpoint_advance()


@app.route('/orders/kitchen/{kitchen_id}', methods=['GET'], cors=True)
def get_kitchen_board(kitchen_id):
    return orders.endpoint_get_kitchen_board(app.current_request, kitchen_id)


# DELIVERY
@app.route('/delivery/orders', methods=['GET'], cors=True)
def get_delivery_orders():
    return orders.endpoint_get_delivery_orders(app.current_request)


@app.route('/delivery/partners', methods=['GET'], cors=True)
def get_delivery_partners():
    return catalog.DeliveryPartner.endpoint_get_available(app.current_request)


# BIDS
@app.route('/orders/{order_id}/bids', methods=['GET'], cors=True)
def get_order_bids(order_id):
    """
    Simulated bids of available partners are generated on the first call
    """
    return bids.endpoint_get_bids(app.current_request, order_id)


@app.route('/orders/{order_id}/bids', methods=['POST'], cors=True)
def submit_order_bid(order_id):
    """
    delivery partner operation
    """
    return bids.endpoint_submit_bid(app.current_request, order_id)


@app.route('/orders/{order_id}/bids/{bid_id}/accept', methods=['POST'], cors=True)
def accept_order_bid(order_id, bid_id):
    return bids.endpoint_accept_bid(app.current_request, order_id, bid_id)


# STATS
@app.route('/stats/kitchen/{kitchen_id}', methods=['GET'], cors=True)
def get_kitchen_stats(kitchen_id):
    return stats.endpoint_get_kitchen_stats(app.current_request, kitchen_id)


@app.route('/stats/admin', methods=['GET'], cors=True)
def get_admin_stats():
    return stats.endpoint_get_admin_stats(app.current_request)
