from decimal import Decimal
from typing import List, Dict, Any, Optional

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.catalog import MenuItem, CloudKitchen
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import PLATFORM_FEE, CART_SWITCH_KITCHEN_MESSAGE
from chalicelib.constants.status_codes import http200
from chalicelib.utils import auth as utils_auth, storage as utils_storage, app as utils_app, \
    data as utils_data, exceptions
from chalicelib.utils.data import to_money
from chalicelib.utils.logger import logger


def is_quantity(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class CartItem:
    def __init__(self, item: MenuItem, quantity: int, special_instructions: Optional[str] = None):
        self.item = item
        self.quantity = quantity
        self.special_instructions = special_instructions

    @property
    def line_total(self) -> Decimal:
        return self.item.price * self.quantity

    def to_dict(self) -> Dict:
        return {
            'item': self.item._to_dict(),
            'quantity': self.quantity,
            'special_instructions': self.special_instructions
        }

    def to_ui(self) -> Dict:
        return {
            'item': self.item.to_ui(),
            'quantity': self.quantity,
            'special_instructions': self.special_instructions,
            'line_total': to_money(self.line_total)
        }


class Cart(EntityBase):
    """
    Cart of one user, always holding items of a single kitchen.

    Cart lines and the kitchen are kept in two blobs, the cart blob is removed once
    the cart is empty and the kitchen blob is removed on clear().
    """

    def __init__(self, id_, request_body=None):
        EntityBase.__init__(self, id_)

        if request_body is None:
            request_body = {}

        self.request_body = request_body
        self.items: List[CartItem] = []
        self.kitchen: Any[CloudKitchen, None] = None
        self.record_type: str = 'cart'

    def _get_cart_key(self) -> str:
        return keys_structure.carts_key.format(user_id=self.id_)

    def _get_kitchen_key(self) -> str:
        return keys_structure.cart_kitchens_key.format(user_id=self.id_)

    def _fill_db_item(self):
        lines = utils_storage.get_blob(self._get_cart_key(), [])
        kitchen = utils_storage.get_blob(self._get_kitchen_key())
        try:
            self.items = [CartItem(MenuItem(**line['item']), line['quantity'], line.get('special_instructions'))
                          for line in lines]
            self.kitchen = CloudKitchen(**kitchen) if kitchen else None
        except (KeyError, TypeError, AttributeError) as error:
            logger.error(f'_fill_db_item ::: stored cart of user {self.id_} is malformed, clearing it, {error=}')
            self.clear()

    def _save(self):
        if self.items:
            utils_storage.put_blob(self._get_cart_key(), [line.to_dict() for line in self.items])
        else:
            utils_storage.delete_blob(self._get_cart_key())
        if self.kitchen is not None:
            utils_storage.put_blob(self._get_kitchen_key(), self.kitchen._to_dict())
        else:
            utils_storage.delete_blob(self._get_kitchen_key())

    @classmethod
    def init_by_user_id(cls, user_id):
        c = cls(id_=user_id)
        c._fill_db_item()
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_endpoint(cls, request):
        logger.info("init_endpoint ::: started")
        c = cls(id_=request.auth_result['user_id'], request_body=utils_data.parse_raw_body(request))
        c._fill_db_item()
        return c

    # Cart operations

    def _find(self, menu_item_id) -> Optional[CartItem]:
        for line in self.items:
            if line.item.id_ == menu_item_id:
                return line
        return None

    def add_item(self, menu_item: MenuItem, quantity: int = 1, instructions: Optional[str] = None,
                 kitchen: Optional[CloudKitchen] = None, replace_cart: bool = False) -> 'Cart':
        if not is_quantity(quantity) or quantity < 1:
            raise exceptions.ValidationException(f'Quantity must be a positive integer, got {quantity}')
        if not menu_item.is_available_right_now():
            raise exceptions.SomeItemsAreNotAvailable(f'{menu_item.name_} is currently unavailable')
        if kitchen is None:
            if self.kitchen is not None and self.kitchen.id_ == menu_item.restaurant_id:
                kitchen = self.kitchen
            else:
                kitchen = CloudKitchen.init_get_by_id(menu_item.restaurant_id)
        if menu_item.restaurant_id != kitchen.id_:
            raise exceptions.ValidationException(f'Menu item {menu_item.id_} does not belong to kitchen {kitchen.id_}')

        if self.kitchen is not None and self.kitchen.id_ != kitchen.id_:
            if not replace_cart:
                raise exceptions.KitchenSwitchNotConfirmed(CART_SWITCH_KITCHEN_MESSAGE)
            logger.info(f'add_item ::: switching cart of user {self.id_} from kitchen {self.kitchen.id_} '
                        f'to {kitchen.id_}')
            self.items = [CartItem(menu_item, quantity, instructions)]
            self.kitchen = kitchen
            self._save()
            return self

        if self.kitchen is None:
            self.kitchen = kitchen

        line = self._find(menu_item.id_)
        if line is not None:
            line.quantity += quantity
            line.special_instructions = instructions or line.special_instructions
        else:
            self.items.append(CartItem(menu_item, quantity, instructions))
        self._save()
        return self

    def remove_item(self, menu_item_id) -> 'Cart':
        if self._find(menu_item_id) is None:
            logger.warning(f'remove_item ::: {menu_item_id=} is not in the cart of user {self.id_}')
        self.items = [line for line in self.items if line.item.id_ != menu_item_id]
        self._save()
        return self

    def update_quantity(self, menu_item_id, quantity: int) -> 'Cart':
        if not is_quantity(quantity):
            raise exceptions.ValidationException(f'Quantity must be an integer, got {quantity}')
        if quantity <= 0:
            return self.remove_item(menu_item_id)
        line = self._find(menu_item_id)
        if line is None:
            raise exceptions.MenuItemNotFound(f'Menu item {menu_item_id} is not in the cart')
        line.quantity = quantity
        self._save()
        return self

    def clear(self) -> 'Cart':
        self.items = []
        self.kitchen = None
        utils_storage.delete_blob(self._get_cart_key())
        utils_storage.delete_blob(self._get_kitchen_key())
        return self

    # Derived values

    @property
    def subtotal(self) -> Decimal:
        return to_money(sum((line.line_total for line in self.items), Decimal(0)))

    @property
    def delivery_fee(self) -> Decimal:
        return self.kitchen.delivery_fee if self.kitchen is not None else to_money(0)

    @property
    def platform_fee(self) -> Decimal:
        return PLATFORM_FEE

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.delivery_fee + self.platform_fee

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def meets_min_order(self) -> bool:
        return self.kitchen is None or self.subtotal >= self.kitchen.min_order_amount

    # Endpoints

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_cart(self):
        return Response(status_code=http200, body={'cart': self._to_ui()})

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_add_item_to_cart(self):
        menu_item_id = self.request_body.get('menu_item_id')
        if not menu_item_id:
            raise exceptions.MandatoryFieldsAreNotFilled('menu_item_id is mandatory')
        menu_item = MenuItem.init_get_by_id(menu_item_id)
        kitchen = CloudKitchen.init_get_by_id(self.request_body.get('kitchen_id') or menu_item.restaurant_id)
        self.add_item(
            menu_item,
            quantity=self.request_body.get('qty', 1),
            instructions=self.request_body.get('special_instructions'),
            kitchen=kitchen,
            replace_cart=self.request_body.get('replace_cart') is True
        )
        return Response(status_code=http200, body={'cart': self._to_ui()})

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_update_quantity(self, menu_item_id):
        if 'qty' not in self.request_body:
            raise exceptions.MandatoryFieldsAreNotFilled('qty is mandatory')
        self.update_quantity(menu_item_id, self.request_body['qty'])
        return Response(status_code=http200, body={'cart': self._to_ui()})

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_remove_item_from_cart(self, menu_item_id):
        self.remove_item(menu_item_id)
        return Response(status_code=http200, body={'cart': self._to_ui()})

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_clear_cart(self):
        self.clear()
        return Response(status_code=http200, body={'message': 'Cart was successfully cleared'})

    def _to_dict(self):
        return {
            'id_': self.id_,
            'kitchen': self.kitchen._to_dict() if self.kitchen is not None else None,
            'items': [line.to_dict() for line in self.items]
        }

    def _to_ui(self):
        return {
            'id': self.id_,
            'kitchen': self.kitchen._to_ui() if self.kitchen is not None else None,
            'items': [line.to_ui() for line in self.items],
            'subtotal': self.subtotal,
            'delivery_fee': self.delivery_fee,
            'platform_fee': self.platform_fee,
            'total': self.total,
            'item_count': self.item_count,
            'total_items': self.total_items,
            'meets_min_order': self.meets_min_order
        }
