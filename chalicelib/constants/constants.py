from decimal import Decimal

PLATFORM_FEE = Decimal('2.50')
DEFAULT_PAYMENT_METHOD = 'card'

CART_SWITCH_KITCHEN_MESSAGE = 'Adding items from a different kitchen will clear your current cart. Continue?'

ROLE_CUSTOMER = 'customer'
ROLE_KITCHEN = 'kitchen'
ROLE_DELIVERY = 'delivery'
ROLE_ADMIN = 'admin'
ROLES = (ROLE_CUSTOMER, ROLE_KITCHEN, ROLE_DELIVERY, ROLE_ADMIN)

AVATAR_URL = 'https://ui-avatars.com/api/?name={name}&background=random'
DEFAULT_DELIVERY_VEHICLE = 'motorcycle'

# Order lifecycle
STATUS_PENDING = 'pending'
STATUS_CONFIRMED = 'confirmed'
STATUS_PREPARING = 'preparing'
STATUS_READY = 'ready'
STATUS_AWAITING_DELIVERY = 'awaiting_delivery'
STATUS_ASSIGNED = 'assigned'
STATUS_IN_TRANSIT = 'in_transit'
STATUS_DELIVERED = 'delivered'
STATUS_CANCELLED = 'cancelled'

ORDER_TRANSITIONS = {
    STATUS_PENDING: (STATUS_CONFIRMED, STATUS_CANCELLED),
    STATUS_CONFIRMED: (STATUS_PREPARING, STATUS_CANCELLED),
    STATUS_PREPARING: (STATUS_READY,),
    STATUS_READY: (STATUS_AWAITING_DELIVERY, STATUS_ASSIGNED),
    STATUS_AWAITING_DELIVERY: (STATUS_ASSIGNED,),
    STATUS_ASSIGNED: (STATUS_IN_TRANSIT,),
    STATUS_IN_TRANSIT: (STATUS_DELIVERED,),
    STATUS_DELIVERED: (),
    STATUS_CANCELLED: ()
}

NEXT_STATUS = {
    STATUS_PENDING: STATUS_CONFIRMED,
    STATUS_CONFIRMED: STATUS_PREPARING,
    STATUS_PREPARING: STATUS_READY,
    STATUS_READY: STATUS_AWAITING_DELIVERY,
    STATUS_AWAITING_DELIVERY: STATUS_ASSIGNED,
    STATUS_ASSIGNED: STATUS_IN_TRANSIT,
    STATUS_IN_TRANSIT: STATUS_DELIVERED
}

ROLE_STATUS_PERMISSIONS = {
    ROLE_CUSTOMER: (STATUS_CANCELLED,),
    ROLE_KITCHEN: (STATUS_CONFIRMED, STATUS_PREPARING, STATUS_READY, STATUS_AWAITING_DELIVERY, STATUS_CANCELLED),
    ROLE_DELIVERY: (STATUS_IN_TRANSIT, STATUS_DELIVERED),
    ROLE_ADMIN: tuple(ORDER_TRANSITIONS.keys())
}

KITCHEN_BOARD_COLUMNS = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_PREPARING, STATUS_READY)
OPEN_FOR_DELIVERY_STATUSES = (STATUS_READY, STATUS_AWAITING_DELIVERY)
ACTIVE_DELIVERY_STATUSES = (STATUS_ASSIGNED, STATUS_IN_TRANSIT)
ACTIVE_KITCHEN_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_PREPARING)
REVENUE_STATUSES = (STATUS_READY, STATUS_DELIVERED)

ORDER_TYPE_ONETIME = 'onetime'
ORDER_TYPE_WEEKLY = 'weekly'
ORDER_TYPE_MONTHLY = 'monthly'
ORDER_TYPES = (ORDER_TYPE_ONETIME, ORDER_TYPE_WEEKLY, ORDER_TYPE_MONTHLY)

# Subscriptions
WEEK_DAYS = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')
MEAL_TIMES = ('breakfast', 'lunch', 'dinner')
SUBSCRIPTION_DAYS = {ORDER_TYPE_WEEKLY: 7, ORDER_TYPE_MONTHLY: 30}
SUBSCRIPTION_BASE_PRICE_PER_MEAL = Decimal('120')

# Delivery bids
BID_EXPIRY_MINUTES = 5
BIDDERS_PER_ORDER = 3
BID_STATUS_OPEN = 'open'
BID_STATUS_ACCEPTED = 'accepted'
BID_STATUS_REJECTED = 'rejected'
BID_STATUS_EXPIRED = 'expired'

VEHICLE_OPTIONS = {
    'cycle': {'label': 'Bicycle', 'base_price': Decimal('15.00'), 'time_multiplier': 1.2},
    'e_vehicle': {'label': 'E-Scooter', 'base_price': Decimal('18.00'), 'time_multiplier': 1.0},
    'motorcycle': {'label': 'Motorcycle', 'base_price': Decimal('22.00'), 'time_multiplier': 0.9},
    'public_transport': {'label': 'Public Transport', 'base_price': Decimal('16.50'), 'time_multiplier': 1.3},
    'car': {'label': 'Car', 'base_price': Decimal('28.00'), 'time_multiplier': 1.1}
}

TRAFFIC_MULTIPLIERS = {'light': 0.9, 'moderate': 1.0, 'heavy': 1.3}
PRIORITY_PRICE_MULTIPLIER = Decimal('1.3')
PEAK_HOUR_MULTIPLIER = 1.2
WEATHER_PRICE_MULTIPLIER = 1.1
WEATHER_TIME_MULTIPLIER = 1.2
PEAK_HOURS = ((12, 14), (19, 21))
BASE_DELIVERY_MINUTES = 25
BID_BAND_FLOOR = Decimal('0.8')
BID_BAND_CEILING = Decimal('1.5')
AVERAGE_MARKET_BID = 25
