from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from chalicelib.constants.constants import WEEK_DAYS, MEAL_TIMES, SUBSCRIPTION_DAYS, ORDER_TYPE_MONTHLY, \
    SUBSCRIPTION_BASE_PRICE_PER_MEAL
from chalicelib.utils import exceptions


class SubscriptionDetails:
    """
    Recurring delivery schedule of a weekly or monthly order
    """

    def __init__(self, type_: str, delivery_days: List[str], meal_times: List[str], portions: int = 1,
                 start_date: Optional[date] = None):
        self.type_ = type_
        self.delivery_days = delivery_days
        self.meal_times = meal_times
        self.portions = portions
        self.start_date = start_date or date.today()
        self.validate()

    @classmethod
    def from_request(cls, order_type: str, body: Dict) -> 'SubscriptionDetails':
        start_date = body.get('start_date')
        return cls(
            type_=order_type,
            delivery_days=body.get('delivery_days', []),
            meal_times=body.get('meal_times', []),
            portions=body.get('portions', 1),
            start_date=date.fromisoformat(start_date) if start_date else None
        )

    def validate(self):
        if self.type_ not in SUBSCRIPTION_DAYS:
            raise exceptions.ValidationException(f'Unknown subscription type {self.type_}')
        if not self.delivery_days or any(day not in WEEK_DAYS for day in self.delivery_days):
            raise exceptions.ValidationException(f'delivery_days must be a non-empty subset of {WEEK_DAYS}')
        if not self.meal_times or any(meal_time not in MEAL_TIMES for meal_time in self.meal_times):
            raise exceptions.ValidationException(f'meal_times must be a non-empty subset of {MEAL_TIMES}')
        if not isinstance(self.portions, int) or isinstance(self.portions, bool) or self.portions < 1:
            raise exceptions.ValidationException('portions must be a positive integer')

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=SUBSCRIPTION_DAYS[self.type_])

    @property
    def total_deliveries(self) -> int:
        deliveries_per_week = len(self.delivery_days) * len(self.meal_times)
        return deliveries_per_week * 4 if self.type_ == ORDER_TYPE_MONTHLY else deliveries_per_week

    @property
    def estimated_price(self) -> Decimal:
        return SUBSCRIPTION_BASE_PRICE_PER_MEAL * self.total_deliveries * self.portions

    def to_dict(self) -> Dict:
        return {
            'type': self.type_,
            'delivery_days': self.delivery_days,
            'meal_times': self.meal_times,
            'portions': self.portions,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'total_deliveries': self.total_deliveries,
            'estimated_price': self.estimated_price
        }
