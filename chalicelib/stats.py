from collections import Counter
from datetime import datetime
from decimal import Decimal
from typing import Dict, List

from chalice import Response

from chalicelib.catalog import CloudKitchen
from chalicelib.constants.constants import ACTIVE_KITCHEN_STATUSES, REVENUE_STATUSES, STATUS_READY, \
    STATUS_DELIVERED, ORDER_TRANSITIONS, ROLE_KITCHEN, ROLE_ADMIN
from chalicelib.constants.status_codes import http200
from chalicelib.orders import Order, get_all_orders, get_kitchen_orders
from chalicelib.users import get_users
from chalicelib.utils import auth as utils_auth, app as utils_app, exceptions
from chalicelib.utils.data import to_money


def revenue(orders: List[Order]) -> Decimal:
    return to_money(sum((order.total for order in orders if order.status_ in REVENUE_STATUSES), Decimal(0)))


def average_prep_minutes(orders: List[Order]) -> int:
    if not orders:
        return 0
    minutes = [(datetime.fromisoformat(order.updated_at) - datetime.fromisoformat(order.created_at)).total_seconds()
               / 60 for order in orders]
    return round(sum(minutes) / len(minutes))


def kitchen_stats(kitchen_id: str) -> Dict:
    orders = get_kitchen_orders(kitchen_id)
    return {
        'kitchen_id': kitchen_id,
        'active_orders': len([order for order in orders if order.status_ in ACTIVE_KITCHEN_STATUSES]),
        'ready_orders': len([order for order in orders if order.status_ == STATUS_READY]),
        'revenue': revenue(orders),
        'average_prep_time': average_prep_minutes(orders)
    }


def admin_stats() -> Dict:
    orders = get_all_orders()
    statuses = Counter(order.status_ for order in orders)
    kitchens = {}
    for kitchen in CloudKitchen.get_all():
        kitchen_orders = [order for order in orders if order.kitchen_id == kitchen.id_]
        kitchens[kitchen.id_] = {
            'name': kitchen.name_,
            'orders': len(kitchen_orders),
            'revenue': revenue(kitchen_orders)
        }
    return {
        'total_orders': len(orders),
        'total_revenue': revenue(orders),
        'total_users': len(get_users()),
        'completed_deliveries': statuses.get(STATUS_DELIVERED, 0),
        'status_distribution': {status: statuses.get(status, 0) for status in ORDER_TRANSITIONS},
        'kitchens': kitchens
    }


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_kitchen_stats(request, kitchen_id):
    auth_result = request.auth_result
    if auth_result['role'] not in (ROLE_KITCHEN, ROLE_ADMIN):
        raise exceptions.AccessDenied('Only kitchen users can see kitchen stats')
    if auth_result['role'] == ROLE_KITCHEN and auth_result.get('kitchen_id') not in (None, kitchen_id):
        raise exceptions.AccessDenied('The stats belong to another kitchen')
    kitchen = CloudKitchen.init_get_by_id(kitchen_id)
    return Response(status_code=http200, body=kitchen_stats(kitchen.id_))


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_admin_stats(request):
    if request.auth_result['role'] != ROLE_ADMIN:
        raise exceptions.AccessDenied('Only admins can see platform stats')
    return Response(status_code=http200, body=admin_stats())
