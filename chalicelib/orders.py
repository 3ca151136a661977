from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, List, Dict, Optional
from uuid import uuid4

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.carts import Cart
from chalicelib.catalog import CloudKitchen
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ORDER_TRANSITIONS, NEXT_STATUS, ROLE_STATUS_PERMISSIONS, ORDER_TYPES, \
    ORDER_TYPE_ONETIME, DEFAULT_PAYMENT_METHOD, KITCHEN_BOARD_COLUMNS, OPEN_FOR_DELIVERY_STATUSES, \
    ACTIVE_DELIVERY_STATUSES, STATUS_PENDING, STATUS_ASSIGNED, ROLE_CUSTOMER, ROLE_KITCHEN, ROLE_DELIVERY, ROLE_ADMIN
from chalicelib.constants.status_codes import http200, http201
from chalicelib.subscriptions import SubscriptionDetails
from chalicelib.utils import auth as utils_auth, data as utils_data, app as utils_app, exceptions
from chalicelib.utils.data import to_money, now_iso
from chalicelib.utils.logger import logger

ADDRESS_FIELDS = ('street', 'area', 'city', 'pincode')


def validate_delivery_address(address) -> Dict:
    if not isinstance(address, dict):
        raise exceptions.MandatoryFieldsAreNotFilled(f'delivery_address with fields {ADDRESS_FIELDS} is mandatory')
    missing = [field for field in ADDRESS_FIELDS if not isinstance(address.get(field), str) or not address[field]]
    if missing:
        raise exceptions.MandatoryFieldsAreNotFilled(f'delivery_address fields {missing} are not filled')
    return {field: address[field] for field in ADDRESS_FIELDS}


class Order(EntityBase):
    storage_key = keys_structure.orders_key

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'customer_id': lambda x: isinstance(x, str),
        'kitchen_id': lambda x: isinstance(x, str),
        'items': lambda x: isinstance(x, list) and len(x) > 0,
        'order_type': lambda x: x in ORDER_TYPES,
        'created_at': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'status_': lambda x: x in ORDER_TRANSITIONS,
        'subtotal': lambda x: isinstance(x, Decimal),
        'delivery_fee': lambda x: isinstance(x, Decimal),
        'platform_fee': lambda x: isinstance(x, Decimal),
        'total': lambda x: isinstance(x, Decimal),
        'delivery_address': lambda x: isinstance(x, dict),
        'priority_delivery': lambda x: isinstance(x, bool),
        'payment_method': lambda x: isinstance(x, str),
        'history': lambda x: isinstance(x, list),
        'updated_at': lambda x: isinstance(x, str),
        'updated_by': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'delivery_partner': lambda x: isinstance(x, str),
        'estimated_delivery_time': lambda x: isinstance(x, str),
        'subscription_details': lambda x: isinstance(x, dict)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)

        self.request_data: Dict = kwargs.get('request_data', {})

        self.customer_id: str = kwargs.get('customer_id')
        self.kitchen_id: str = kwargs.get('kitchen_id')
        self.items: List[Dict] = kwargs.get('items', [])
        self.order_type: str = kwargs.get('order_type', ORDER_TYPE_ONETIME)
        self.subscription_details: Any[Dict, None] = kwargs.get('subscription_details')
        self.status_: str = kwargs.get('status_', STATUS_PENDING)
        self.subtotal: Decimal = to_money(kwargs.get('subtotal') or 0)
        self.delivery_fee: Decimal = to_money(kwargs.get('delivery_fee') or 0)
        self.platform_fee: Decimal = to_money(kwargs.get('platform_fee') or 0)
        self.total: Decimal = to_money(kwargs.get('total') or 0)
        self.delivery_partner: Any[str, None] = kwargs.get('delivery_partner')
        self.estimated_delivery_time: Any[str, None] = kwargs.get('estimated_delivery_time')
        self.delivery_address: Dict = kwargs.get('delivery_address', {})
        self.priority_delivery: bool = kwargs.get('priority_delivery', False)
        self.payment_method: str = kwargs.get('payment_method', DEFAULT_PAYMENT_METHOD)
        self.history: List[Dict] = kwargs.get('history', [])
        self.created_at: str = kwargs.get('created_at') or now_iso()
        self.updated_at: str = kwargs.get('updated_at') or self.created_at
        self.updated_by: str = kwargs.get('updated_by') or self.customer_id
        self.record_type = 'order'

    @classmethod
    def init_by_id(cls, order_id):
        c = cls(order_id)
        try:
            c.__init__(**c._get_db_item())
        except exceptions.RecordNotFound:
            raise exceptions.OrderNotFound(f'Order {order_id} not found')
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_get_order(cls, request, order_id):
        logger.info("init_request_get_order ::: started")
        c = cls.init_by_id(order_id)
        c.request_data = {'auth_result': request.auth_result, 'body': utils_data.parse_raw_body(request)}
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_checkout(cls, request):
        logger.info("init_request_checkout ::: started")
        auth_result = request.auth_result
        return cls(str(uuid4()).split('-')[0], customer_id=auth_result['user_id'],
                   request_data={'auth_result': auth_result, 'body': utils_data.parse_raw_body(request)})

    # Checkout

    def fill_from_cart(self, cart: Cart, delivery_address: Dict, priority_delivery: bool = False,
                       payment_method: str = DEFAULT_PAYMENT_METHOD, order_type: str = ORDER_TYPE_ONETIME,
                       subscription: Optional[SubscriptionDetails] = None) -> 'Order':
        if not cart.items:
            raise exceptions.EmptyCart('Your cart is empty')
        if cart.kitchen is None:
            raise exceptions.ValidationException('Cart is not linked to a kitchen')
        if not cart.meets_min_order:
            raise exceptions.MinimumOrderNotReached(
                f'Minimum order amount for {cart.kitchen.name_} is {cart.kitchen.min_order_amount}, '
                f'cart subtotal is {cart.subtotal}')
        if order_type not in ORDER_TYPES:
            raise exceptions.ValidationException(f'Unknown order type {order_type}')
        if order_type != ORDER_TYPE_ONETIME:
            if not cart.kitchen.subscription_available:
                raise exceptions.ValidationException(f'{cart.kitchen.name_} does not offer subscriptions')
            if subscription is None:
                raise exceptions.MandatoryFieldsAreNotFilled('subscription details are mandatory')

        self.kitchen_id = cart.kitchen.id_
        self.items = [{
            'menu_item_id': line.item.id_,
            'name': line.item.name_,
            'quantity': line.quantity,
            'price': line.item.price,
            'special_instructions': line.special_instructions
        } for line in cart.items]
        self.subtotal = cart.subtotal
        self.delivery_fee = cart.delivery_fee
        self.platform_fee = cart.platform_fee
        self.total = cart.total
        self.delivery_address = validate_delivery_address(delivery_address)
        self.priority_delivery = priority_delivery
        self.payment_method = payment_method
        self.order_type = order_type
        self.subscription_details = subscription.to_dict() if subscription is not None else None
        self.status_ = STATUS_PENDING
        self.history = [{'status': STATUS_PENDING, 'date': self.created_at, 'updated_by': self.customer_id}]
        return self

    def place(self, cart: Cart, **kwargs) -> 'Order':
        self.fill_from_cart(cart, **kwargs)
        self._create_db_record()
        cart.clear()
        logger.info(f"place ::: order {self.id_} placed for kitchen {self.kitchen_id}, total={self.total}")
        return self

    # Lifecycle

    def can_transition(self, new_status: str) -> bool:
        return new_status in ORDER_TRANSITIONS.get(self.status_, ())

    def check_access(self, auth_result: Dict) -> None:
        """
        Raise OrderNotFound when the order is not visible for the requesting user
        """
        role, user_id = auth_result.get('role'), auth_result.get('user_id')
        if role == ROLE_ADMIN:
            return
        if role == ROLE_CUSTOMER and self.customer_id == user_id:
            return
        if role == ROLE_KITCHEN and auth_result.get('kitchen_id') in (None, self.kitchen_id):
            return
        if role == ROLE_DELIVERY and (self.delivery_partner == user_id or (
                self.delivery_partner is None and self.status_ in OPEN_FOR_DELIVERY_STATUSES)):
            return
        raise exceptions.OrderNotFound('Requested order not found')

    def check_status_permission(self, new_status: str, auth_result: Dict) -> None:
        role, user_id = auth_result.get('role'), auth_result.get('user_id')
        if new_status not in ROLE_STATUS_PERMISSIONS.get(role, ()):
            raise exceptions.AccessDenied(f'Role {role} can not move orders to {new_status}')
        if role == ROLE_CUSTOMER and self.customer_id != user_id:
            raise exceptions.AccessDenied('Customers can only cancel their own orders')
        if role == ROLE_KITCHEN and auth_result.get('kitchen_id') not in (None, self.kitchen_id):
            raise exceptions.AccessDenied('The order belongs to another kitchen')
        if role == ROLE_DELIVERY and self.delivery_partner != user_id:
            raise exceptions.AccessDenied('The order is assigned to another delivery partner')

    def set_status(self, new_status: str, updated_by: str) -> 'Order':
        if new_status not in ORDER_TRANSITIONS:
            raise exceptions.ValidationException(f'Unknown order status {new_status}')
        if not self.can_transition(new_status):
            raise exceptions.InvalidStatusTransition(
                f'Order {self.id_} can not move from {self.status_} to {new_status}')
        logger.info(f'set_status ::: order {self.id_} {self.status_} -> {new_status} by {updated_by}')
        self.status_ = new_status
        self.updated_by = updated_by
        self.updated_at = now_iso()
        self.history.append({'status': new_status, 'date': self.updated_at, 'updated_by': updated_by})
        self._update_db_record()
        return self

    def next_status(self) -> str:
        if self.status_ not in NEXT_STATUS:
            raise exceptions.InvalidStatusTransition(f'Order {self.id_} is {self.status_} and can not move further')
        return NEXT_STATUS[self.status_]

    def advance(self, updated_by: str) -> 'Order':
        return self.set_status(self.next_status(), updated_by)

    def assign_delivery_partner(self, partner_id: str, estimated_minutes: int, updated_by: str) -> 'Order':
        if not self.can_transition(STATUS_ASSIGNED):
            raise exceptions.InvalidStatusTransition(
                f'Order {self.id_} is {self.status_} and can not be assigned to a delivery partner')
        self.delivery_partner = partner_id
        self.estimated_delivery_time = (datetime.now() + timedelta(minutes=estimated_minutes)).isoformat(
            timespec='seconds')
        return self.set_status(STATUS_ASSIGNED, updated_by)

    # Endpoints

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_create_order(self):
        body = self.request_data['body']
        order_type = body.get('order_type', ORDER_TYPE_ONETIME)
        subscription = None
        if order_type != ORDER_TYPE_ONETIME and body.get('subscription'):
            subscription = SubscriptionDetails.from_request(order_type, body['subscription'])
        self.place(
            Cart.init_by_user_id(self.customer_id),
            delivery_address=body.get('delivery_address'),
            priority_delivery=body.get('priority_delivery') is True,
            payment_method=body.get('payment_method', DEFAULT_PAYMENT_METHOD),
            order_type=order_type,
            subscription=subscription
        )
        return Response(status_code=http201, body=self._to_ui())

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_by_id(self):
        self.check_access(self.request_data['auth_result'])
        return Response(status_code=http200, body=self._to_ui())

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_update_status(self):
        auth_result = self.request_data['auth_result']
        new_status = self.request_data['body'].get('status')
        if not new_status:
            raise exceptions.MandatoryFieldsAreNotFilled('status is mandatory')
        self.check_access(auth_result)
        self.check_status_permission(new_status, auth_result)
        self.set_status(new_status, auth_result['user_id'])
        return Response(status_code=http200, body=self._to_ui())

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_advance(self):
        auth_result = self.request_data['auth_result']
        self.check_access(auth_result)
        new_status = self.next_status()
        self.check_status_permission(new_status, auth_result)
        self.set_status(new_status, auth_result['user_id'])
        return Response(status_code=http200, body=self._to_ui())

    def _to_dict(self):
        return {
            'id_': self.id_,
            'customer_id': self.customer_id,
            'kitchen_id': self.kitchen_id,
            'items': self.items,
            'order_type': self.order_type,
            'subscription_details': self.subscription_details,
            'status_': self.status_,
            'subtotal': self.subtotal,
            'delivery_fee': self.delivery_fee,
            'platform_fee': self.platform_fee,
            'total': self.total,
            'delivery_partner': self.delivery_partner,
            'estimated_delivery_time': self.estimated_delivery_time,
            'delivery_address': self.delivery_address,
            'priority_delivery': self.priority_delivery,
            'payment_method': self.payment_method,
            'history': self.history,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            'updated_by': self.updated_by
        }

    def to_ui(self):
        return self._to_ui()


def get_all_orders() -> List[Order]:
    return [Order(**record) for record in Order(None)._get_records()]


def get_customer_orders(customer_id) -> List[Order]:
    orders = [order for order in get_all_orders() if order.customer_id == customer_id]
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


def get_kitchen_orders(kitchen_id) -> List[Order]:
    return [order for order in get_all_orders() if order.kitchen_id == kitchen_id]


def get_kitchen_board(kitchen_id) -> Dict[str, List[Order]]:
    orders = get_kitchen_orders(kitchen_id)
    return {status: [order for order in orders if order.status_ == status] for status in KITCHEN_BOARD_COLUMNS}


def get_open_delivery_orders() -> List[Order]:
    return [order for order in get_all_orders()
            if order.status_ in OPEN_FOR_DELIVERY_STATUSES and order.delivery_partner is None]


def get_partner_active_orders(partner_id) -> List[Order]:
    return [order for order in get_all_orders()
            if order.delivery_partner == partner_id and order.status_ in ACTIVE_DELIVERY_STATUSES]


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_orders(request):
    """
    customer gets their orders
    kitchen user gets orders of their kitchen (all kitchens when not linked to one)
    delivery partner gets orders assigned to them
    admin gets all orders, optionally filtered by customer_id / kitchen_id query params
    """
    auth_result = request.auth_result
    user_id, user_role = auth_result['user_id'], auth_result['role']
    qp = request.query_params or {}
    if user_role == ROLE_CUSTOMER:
        orders = get_customer_orders(user_id)
    elif user_role == ROLE_KITCHEN:
        kitchen_id = auth_result.get('kitchen_id')
        orders = get_kitchen_orders(kitchen_id) if kitchen_id else get_all_orders()
    elif user_role == ROLE_DELIVERY:
        orders = [order for order in get_all_orders() if order.delivery_partner == user_id]
    elif user_role == ROLE_ADMIN:
        orders = get_all_orders()
        if qp.get('customer_id'):
            orders = [order for order in orders if order.customer_id == qp['customer_id']]
        if qp.get('kitchen_id'):
            orders = [order for order in orders if order.kitchen_id == qp['kitchen_id']]
    else:
        raise exceptions.AccessDenied("You don't have permissions to access this resource")

    return Response(status_code=http200, body={'orders': [order.to_ui() for order in orders]})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_kitchen_board(request, kitchen_id):
    auth_result = request.auth_result
    if auth_result['role'] not in (ROLE_KITCHEN, ROLE_ADMIN):
        raise exceptions.AccessDenied('Only kitchen users can see the kitchen board')
    if auth_result['role'] == ROLE_KITCHEN and auth_result.get('kitchen_id') not in (None, kitchen_id):
        raise exceptions.AccessDenied('The board belongs to another kitchen')
    kitchen = CloudKitchen.init_get_by_id(kitchen_id)
    board = get_kitchen_board(kitchen.id_)
    return Response(status_code=http200, body={
        'kitchen': kitchen._to_ui(),
        'columns': {status: [order.to_ui() for order in orders] for status, orders in board.items()}
    })


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_delivery_orders(request):
    auth_result = request.auth_result
    if auth_result['role'] not in (ROLE_DELIVERY, ROLE_ADMIN):
        raise exceptions.AccessDenied('Only delivery partners can see delivery orders')
    return Response(status_code=http200, body={
        'available': [order.to_ui() for order in get_open_delivery_orders()],
        'active': [order.to_ui() for order in get_partner_active_orders(auth_result['user_id'])]
    })
