from copy import deepcopy
from decimal import Decimal
from typing import List, Dict, Optional

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import mock_data
from chalicelib.constants.status_codes import http200
from chalicelib.utils import app as utils_app, exceptions
from chalicelib.utils.data import to_money
from chalicelib.utils.logger import logger


class CatalogEntity(EntityBase):
    """
    Read-only entity backed by the static mock catalog
    """
    catalog: List[Dict] = []
    not_found_exception = exceptions.RecordNotFound

    def _get_records(self) -> List[Dict]:
        return deepcopy(self.catalog)

    def _save_records(self, records: List[Dict]) -> None:
        raise exceptions.AccessDenied(f'{self.record_type} catalog is read-only')

    def _get_db_item(self) -> Dict:
        try:
            return EntityBase._get_db_item(self)
        except exceptions.RecordNotFound:
            raise self.not_found_exception(f'{self.record_type} {self.id_} not found')

    @classmethod
    def init_get_by_id(cls, id_):
        logger.info(f"init_get_by_id ::: {cls.__name__} {id_=}")
        c = cls(id_)
        c.__init__(**c._get_db_item())
        return c

    @classmethod
    def get_all(cls) -> List:
        return [cls(**record) for record in deepcopy(cls.catalog)]


class CloudKitchen(CatalogEntity):
    catalog = mock_data.CLOUD_KITCHENS
    not_found_exception = exceptions.KitchenNotFound

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)

        self.name_: str = kwargs.get('name_')
        self.description: str = kwargs.get('description')
        self.rating: Decimal = kwargs.get('rating')
        self.delivery_time: int = kwargs.get('delivery_time')
        self.delivery_fee: Decimal = to_money(kwargs.get('delivery_fee') or 0)
        self.cuisine_type: list = kwargs.get('cuisine_type', [])
        self.address: str = kwargs.get('address')
        self.kitchen_type: str = kwargs.get('kitchen_type', 'cloud_kitchen')
        self.operating_hours: dict = kwargs.get('operating_hours', {})
        self.min_order_amount: Decimal = to_money(kwargs.get('min_order_amount') or 0)
        self.subscription_available: bool = kwargs.get('subscription_available', False)
        self.record_type = 'kitchen'

    @staticmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_all(request) -> Response:
        qp = request.query_params or {}
        kitchens = search_kitchens(
            query=qp.get('q'),
            cuisine=qp.get('cuisine'),
            vegetarian=qp.get('vegetarian', '').lower() == 'true'
        )
        logger.info(f"endpoint_get_all ::: returning kitchens={[kitchen.id_ for kitchen in kitchens]}")
        return Response(status_code=http200, body=[kitchen._to_ui() for kitchen in kitchens])

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_by_id(self) -> Response:
        return Response(status_code=http200, body=self._to_ui())

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_menu_items(self) -> Response:
        menu_items = [item._to_ui() for item in self.get_menu_items()]
        logger.info(f"endpoint_get_menu_items ::: returning menu items={[item['id'] for item in menu_items]}")
        return Response(status_code=http200, body=menu_items)

    def get_menu_items(self) -> List['MenuItem']:
        return [item for item in MenuItem.get_all() if item.restaurant_id == self.id_]

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name_': self.name_,
            'description': self.description,
            'rating': self.rating,
            'delivery_time': self.delivery_time,
            'delivery_fee': self.delivery_fee,
            'cuisine_type': self.cuisine_type,
            'address': self.address,
            'kitchen_type': self.kitchen_type,
            'operating_hours': self.operating_hours,
            'min_order_amount': self.min_order_amount,
            'subscription_available': self.subscription_available
        }


class MenuItem(CatalogEntity):
    catalog = mock_data.MENU_ITEMS
    not_found_exception = exceptions.MenuItemNotFound

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)

        self.restaurant_id: str = kwargs.get('restaurant_id')
        self.name_: str = kwargs.get('name_')
        self.description: str = kwargs.get('description')
        self.price: Decimal = to_money(kwargs.get('price') or 0)
        self.category: str = kwargs.get('category')
        self.available: bool = kwargs.get('available', True)
        self.vegetarian: bool = kwargs.get('vegetarian', False)
        self.record_type = 'menu_item'

    def is_available_right_now(self) -> bool:
        return self.available

    def _to_dict(self):
        return {
            'id_': self.id_,
            'restaurant_id': self.restaurant_id,
            'name_': self.name_,
            'description': self.description,
            'price': self.price,
            'category': self.category,
            'available': self.available,
            'vegetarian': self.vegetarian
        }

    def to_ui(self):
        return self._to_ui()


class DeliveryPartner(CatalogEntity):
    catalog = mock_data.DELIVERY_PARTNERS

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)

        self.name_: str = kwargs.get('name_')
        self.phone: str = kwargs.get('phone')
        self.rating: Decimal = kwargs.get('rating', Decimal('4.5'))
        self.completed_deliveries: int = kwargs.get('completed_deliveries', 0)
        self.is_available: bool = kwargs.get('is_available', False)
        self.available_vehicles: list = kwargs.get('available_vehicles', [])
        self.preferred_vehicle_type: str = kwargs.get('preferred_vehicle_type')
        self.average_delivery_time: int = kwargs.get('average_delivery_time')
        self.record_type = 'delivery_partner'

    @staticmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_available(request) -> Response:
        partners = [partner._to_ui() for partner in get_available_delivery_partners()]
        return Response(status_code=http200, body=partners)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name_': self.name_,
            'phone': self.phone,
            'rating': self.rating,
            'completed_deliveries': self.completed_deliveries,
            'is_available': self.is_available,
            'available_vehicles': self.available_vehicles,
            'preferred_vehicle_type': self.preferred_vehicle_type,
            'average_delivery_time': self.average_delivery_time
        }


def search_kitchens(query: Optional[str] = None, cuisine: Optional[str] = None,
                    vegetarian: bool = False) -> List[CloudKitchen]:
    kitchens = CloudKitchen.get_all()
    if query:
        query = query.lower()
        kitchens = [kitchen for kitchen in kitchens if query in kitchen.name_.lower()
                    or query in kitchen.description.lower()
                    or any(query in cuisine_type.lower() for cuisine_type in kitchen.cuisine_type)]
    if cuisine:
        kitchens = [kitchen for kitchen in kitchens
                    if cuisine.lower() in [cuisine_type.lower() for cuisine_type in kitchen.cuisine_type]]
    if vegetarian:
        kitchens = [kitchen for kitchen in kitchens
                    if any(item.vegetarian and item.available for item in kitchen.get_menu_items())]
    return kitchens


def get_available_delivery_partners() -> List[DeliveryPartner]:
    return [partner for partner in DeliveryPartner.get_all() if partner.is_available]
