"""
Delivery bids of an order.

Quotes are produced by a pricing policy, the default one simulates the market with random
route conditions. Bids of an order are kept in one list blob and expire BID_EXPIRY_MINUTES
after creation.
"""
import random
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR
from typing import Dict, List, Optional
from uuid import uuid4

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.catalog import get_available_delivery_partners
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import VEHICLE_OPTIONS, TRAFFIC_MULTIPLIERS, PRIORITY_PRICE_MULTIPLIER, \
    PEAK_HOUR_MULTIPLIER, WEATHER_PRICE_MULTIPLIER, WEATHER_TIME_MULTIPLIER, PEAK_HOURS, BASE_DELIVERY_MINUTES, \
    BID_BAND_FLOOR, BID_BAND_CEILING, AVERAGE_MARKET_BID, BID_EXPIRY_MINUTES, BIDDERS_PER_ORDER, BID_STATUS_OPEN, \
    BID_STATUS_ACCEPTED, BID_STATUS_REJECTED, BID_STATUS_EXPIRED, OPEN_FOR_DELIVERY_STATUSES, \
    DEFAULT_DELIVERY_VEHICLE, ROLE_DELIVERY
from chalicelib.constants.status_codes import http200, http201
from chalicelib.orders import Order
from chalicelib.users import User
from chalicelib.utils import auth as utils_auth, app as utils_app, data as utils_data, exceptions
from chalicelib.utils.data import to_money, CENTS
from chalicelib.utils.logger import logger

DEFAULT_PARTNER_RATING = Decimal('4.5')
BID_STATUSES = (BID_STATUS_OPEN, BID_STATUS_ACCEPTED, BID_STATUS_REJECTED, BID_STATUS_EXPIRED)


def is_peak_hour(hour: int) -> bool:
    return any(start <= hour <= end for start, end in PEAK_HOURS)


class RouteConditions:
    def __init__(self, distance_factor: float = 1.0, traffic_condition: str = 'moderate', peak_hour: bool = False,
                 bad_weather: bool = False, distance_km: float = 3.0):
        if not 1.0 <= distance_factor <= 1.5:
            raise exceptions.ValidationException(f'distance_factor must be within [1.0, 1.5], got {distance_factor}')
        if traffic_condition not in TRAFFIC_MULTIPLIERS:
            raise exceptions.ValidationException(f'Unknown traffic condition {traffic_condition}')
        self.distance_factor = distance_factor
        self.traffic_condition = traffic_condition
        self.peak_hour = peak_hour
        self.bad_weather = bad_weather
        self.distance_km = distance_km

    @classmethod
    def sample(cls, rng: random.Random, now: Optional[datetime] = None) -> 'RouteConditions':
        now = now or datetime.now()
        return cls(
            distance_factor=1.0 + rng.random() * 0.5,
            traffic_condition=rng.choice(list(TRAFFIC_MULTIPLIERS)),
            peak_hour=is_peak_hour(now.hour),
            bad_weather=rng.random() > 0.7,
            distance_km=round(3 + rng.random() * 7, 1)
        )

    @property
    def distance_share(self) -> float:
        """ Position of the distance factor inside its range, from 0 to 1 """
        return (self.distance_factor - 1.0) / 0.5


class PricingPolicy:
    """
    Produces a bid quote for carrying an order with a given vehicle
    """

    def quote(self, order: Order, vehicle_type: str, conditions: Optional[RouteConditions] = None,
              partner_rating=DEFAULT_PARTNER_RATING, partner_id: Optional[str] = None) -> 'DeliveryBid':
        raise NotImplementedError


class RandomizedPricingPolicy(PricingPolicy):

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @staticmethod
    def price_band(vehicle_type: str, priority_delivery: bool):
        base_price = VEHICLE_OPTIONS[vehicle_type]['base_price']
        priority = PRIORITY_PRICE_MULTIPLIER if priority_delivery else Decimal(1)
        # rounded inwards so the cent values stay inside the band
        return (
            (base_price * BID_BAND_FLOOR).quantize(CENTS, rounding=ROUND_CEILING),
            (base_price * BID_BAND_CEILING * priority).quantize(CENTS, rounding=ROUND_FLOOR)
        )

    @staticmethod
    def estimate_amount(vehicle_type: str, conditions: RouteConditions, priority_delivery: bool,
                        partner_rating) -> Decimal:
        amount = VEHICLE_OPTIONS[vehicle_type]['base_price'] * Decimal(str(conditions.distance_factor))
        if priority_delivery:
            amount *= PRIORITY_PRICE_MULTIPLIER
        amount *= 1 + (Decimal(str(partner_rating)) - Decimal('4.5')) * Decimal('0.1')
        if conditions.peak_hour:
            amount *= Decimal(str(PEAK_HOUR_MULTIPLIER))
        if conditions.bad_weather:
            amount *= Decimal(str(WEATHER_PRICE_MULTIPLIER))

        floor, ceiling = RandomizedPricingPolicy.price_band(vehicle_type, priority_delivery)
        return min(max(to_money(amount), floor), ceiling)

    @staticmethod
    def estimate_minutes(vehicle_type: str, conditions: RouteConditions) -> int:
        minutes = BASE_DELIVERY_MINUTES * VEHICLE_OPTIONS[vehicle_type]['time_multiplier']
        minutes *= 1 + conditions.distance_share * 0.3
        minutes *= TRAFFIC_MULTIPLIERS[conditions.traffic_condition]
        if conditions.bad_weather:
            minutes *= WEATHER_TIME_MULTIPLIER
        return round(minutes)

    def quote(self, order: Order, vehicle_type: str, conditions: Optional[RouteConditions] = None,
              partner_rating=DEFAULT_PARTNER_RATING, partner_id: Optional[str] = None) -> 'DeliveryBid':
        if vehicle_type not in VEHICLE_OPTIONS:
            raise exceptions.ValidationException(f'Unknown vehicle type {vehicle_type}')
        conditions = conditions or RouteConditions.sample(self.rng)
        amount = self.estimate_amount(vehicle_type, conditions, order.priority_delivery, partner_rating)
        minutes = self.estimate_minutes(vehicle_type, conditions)
        logger.debug(f'quote ::: order {order.id_} {vehicle_type=} {amount=} {minutes=}')
        created_at = datetime.now()
        return DeliveryBid(
            str(uuid4()).split('-')[0],
            order_id=order.id_,
            delivery_partner_id=partner_id,
            bid_amount=amount,
            estimated_time=minutes,
            vehicle_type=vehicle_type,
            delivery_route={
                'distance': conditions.distance_km,
                'estimated_duration': minutes,
                'traffic_condition': conditions.traffic_condition
            },
            win_probability=win_probability(amount, partner_rating),
            partner_rating=Decimal(str(partner_rating)),
            created_at=created_at.isoformat(timespec='seconds'),
            expires_at=(created_at + timedelta(minutes=BID_EXPIRY_MINUTES)).isoformat(timespec='seconds')
        )


def win_probability(amount, partner_rating) -> int:
    price_competitiveness = max(0.0, 100 - ((float(amount) - AVERAGE_MARKET_BID) / AVERAGE_MARKET_BID) * 50)
    rating_bonus = (float(partner_rating) - 4.0) * 20
    return round(min(95.0, max(5.0, price_competitiveness + rating_bonus)))


_POLICY: Optional[PricingPolicy] = None


def get_pricing_policy() -> PricingPolicy:
    global _POLICY
    if _POLICY is None:
        _POLICY = RandomizedPricingPolicy()
    return _POLICY


def set_pricing_policy(policy: Optional[PricingPolicy]) -> None:
    global _POLICY
    _POLICY = policy


class DeliveryBid(EntityBase):
    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'order_id': lambda x: isinstance(x, str),
        'delivery_partner_id': lambda x: isinstance(x, str),
        'bid_amount': lambda x: isinstance(x, Decimal),
        'estimated_time': lambda x: isinstance(x, int),
        'vehicle_type': lambda x: x in VEHICLE_OPTIONS,
        'delivery_route': lambda x: isinstance(x, dict),
        'created_at': lambda x: isinstance(x, str),
        'expires_at': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'status_': lambda x: x in BID_STATUSES
    }

    optional_fields_validation = {
        'win_probability': lambda x: isinstance(x, int),
        'partner_name': lambda x: isinstance(x, str),
        'partner_rating': lambda x: isinstance(x, Decimal)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)

        self.order_id: str = kwargs.get('order_id')
        self.delivery_partner_id: str = kwargs.get('delivery_partner_id')
        self.partner_name: Optional[str] = kwargs.get('partner_name')
        self.partner_rating: Optional[Decimal] = kwargs.get('partner_rating')
        self.bid_amount: Decimal = to_money(kwargs.get('bid_amount') or 0)
        self.estimated_time: int = kwargs.get('estimated_time')
        self.vehicle_type: str = kwargs.get('vehicle_type', DEFAULT_DELIVERY_VEHICLE)
        self.delivery_route: Dict = kwargs.get('delivery_route', {})
        self.status_: str = kwargs.get('status_', BID_STATUS_OPEN)
        self.win_probability: Optional[int] = kwargs.get('win_probability')
        self.created_at: str = kwargs.get('created_at')
        self.expires_at: str = kwargs.get('expires_at')
        self.record_type = 'bid'

    def _get_storage_key(self) -> str:
        return keys_structure.bids_key.format(order_id=self.order_id)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now()) > datetime.fromisoformat(self.expires_at)

    def current_status(self, now: Optional[datetime] = None) -> str:
        if self.status_ == BID_STATUS_OPEN and self.is_expired(now):
            return BID_STATUS_EXPIRED
        return self.status_

    def _to_dict(self):
        return {
            'id_': self.id_,
            'order_id': self.order_id,
            'delivery_partner_id': self.delivery_partner_id,
            'partner_name': self.partner_name,
            'partner_rating': self.partner_rating,
            'bid_amount': self.bid_amount,
            'estimated_time': self.estimated_time,
            'vehicle_type': self.vehicle_type,
            'delivery_route': self.delivery_route,
            'status_': self.status_,
            'win_probability': self.win_probability,
            'created_at': self.created_at,
            'expires_at': self.expires_at
        }

    def to_ui(self):
        item = self._to_ui()
        item['status'] = self.current_status()
        return item


def get_order_bids(order_id) -> List[DeliveryBid]:
    records = DeliveryBid(None, order_id=order_id)._get_records()
    return sorted([DeliveryBid(**record) for record in records], key=lambda bid: bid.bid_amount)


def save_order_bids(order_id, bids: List[DeliveryBid]) -> None:
    DeliveryBid(None, order_id=order_id)._save_records([bid._to_dict() for bid in bids])


def is_open_for_bids(order: Order) -> bool:
    return order.status_ in OPEN_FOR_DELIVERY_STATUSES and order.delivery_partner is None


def check_open_for_bids(order: Order) -> None:
    if not is_open_for_bids(order):
        raise exceptions.BidNotAvailable(
            f'Order {order.id_} is {order.status_}, bids are taken only for orders in {OPEN_FOR_DELIVERY_STATUSES}')


def collect_bids(order: Order, policy: Optional[PricingPolicy] = None) -> List[DeliveryBid]:
    """
    Returns the bids of the order.
    While the order waits for a partner and none of its bids is open, fresh quotes of available
    partners are simulated and stored next to the older bids.
    """
    bids = get_order_bids(order.id_)
    if any(bid.current_status() == BID_STATUS_OPEN for bid in bids):
        return bids
    if bids and not is_open_for_bids(order):
        return bids

    check_open_for_bids(order)
    policy = policy or get_pricing_policy()
    for partner in get_available_delivery_partners()[:BIDDERS_PER_ORDER]:
        vehicle_type = partner.preferred_vehicle_type or (partner.available_vehicles or [DEFAULT_DELIVERY_VEHICLE])[0]
        bid = policy.quote(order, vehicle_type, partner_rating=partner.rating, partner_id=partner.id_)
        bid.partner_name = partner.name_
        bids.append(bid)
    bids.sort(key=lambda bid: bid.bid_amount)
    save_order_bids(order.id_, bids)
    logger.info(f'collect_bids ::: order {order.id_} got simulated bids, {len(bids)} bids in total')
    return bids


def submit_bid(order: Order, partner_id: str, vehicle_type: str, partner_rating=DEFAULT_PARTNER_RATING,
               partner_name: Optional[str] = None, policy: Optional[PricingPolicy] = None) -> DeliveryBid:
    check_open_for_bids(order)
    bids = get_order_bids(order.id_)
    if any(bid.delivery_partner_id == partner_id and bid.current_status() == BID_STATUS_OPEN for bid in bids):
        raise exceptions.BidNotAvailable(f'Partner {partner_id} already has an open bid for order {order.id_}')

    bid = (policy or get_pricing_policy()).quote(order, vehicle_type, partner_rating=partner_rating,
                                                 partner_id=partner_id)
    bid.partner_name = partner_name
    bid._create_db_record()
    logger.info(f'submit_bid ::: partner {partner_id} bid {bid.bid_amount} for order {order.id_}')
    return bid


def accept_bid(order: Order, bid_id: str, accepted_by: str) -> DeliveryBid:
    bids = get_order_bids(order.id_)
    accepted = next((bid for bid in bids if bid.id_ == bid_id), None)
    if accepted is None:
        raise exceptions.BidNotFound(f'Bid {bid_id} not found for order {order.id_}')
    status = accepted.current_status()
    if status != BID_STATUS_OPEN:
        raise exceptions.BidNotAvailable(f'Bid {bid_id} is {status} and can not be accepted')

    order.assign_delivery_partner(accepted.delivery_partner_id, accepted.estimated_time, accepted_by)
    for bid in bids:
        if bid is accepted:
            bid.status_ = BID_STATUS_ACCEPTED
        elif bid.status_ == BID_STATUS_OPEN:
            bid.status_ = BID_STATUS_REJECTED
    save_order_bids(order.id_, bids)
    logger.info(f'accept_bid ::: order {order.id_} assigned to {accepted.delivery_partner_id} by {accepted_by}')
    return accepted


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_bids(request, order_id):
    order = Order.init_by_id(order_id)
    order.check_access(request.auth_result)
    bids = collect_bids(order)
    return Response(status_code=http200, body={'order_id': order.id_, 'bids': [bid.to_ui() for bid in bids]})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_submit_bid(request, order_id):
    auth_result = request.auth_result
    if auth_result['role'] != ROLE_DELIVERY:
        raise exceptions.AccessDenied('Only delivery partners can submit bids')
    order = Order.init_by_id(order_id)
    order.check_access(auth_result)
    partner = User.init_by_id(auth_result['user_id'])
    body = utils_data.parse_raw_body(request)
    bid = submit_bid(
        order,
        partner_id=partner.id_,
        vehicle_type=body.get('vehicle_type') or partner.vehicle_type or DEFAULT_DELIVERY_VEHICLE,
        partner_rating=DEFAULT_PARTNER_RATING,
        partner_name=partner.name_
    )
    return Response(status_code=http201, body=bid.to_ui())


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_accept_bid(request, order_id, bid_id):
    auth_result = request.auth_result
    if auth_result['role'] == ROLE_DELIVERY:
        raise exceptions.AccessDenied('Delivery partners can not accept bids')
    order = Order.init_by_id(order_id)
    order.check_access(auth_result)
    bid = accept_bid(order, bid_id, auth_result['user_id'])
    return Response(status_code=http200, body={'bid': bid.to_ui(), 'order': order.to_ui()})
