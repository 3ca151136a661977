from decimal import Decimal

CLOUD_KITCHENS = [
    {
        'id_': 'kitchen_1',
        'name_': 'Spice Route Cloud Kitchen',
        'description': 'North Indian curries and tandoor, cooked fresh for delivery only',
        'rating': Decimal('4.6'),
        'delivery_time': 30,
        'delivery_fee': Decimal('40.00'),
        'cuisine_type': ['North Indian', 'Mughlai'],
        'address': '12 Residency Road, Bangalore',
        'kitchen_type': 'cloud_kitchen',
        'operating_hours': {'open': '10:00', 'close': '23:00', 'days': ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']},
        'min_order_amount': Decimal('200.00'),
        'subscription_available': True
    },
    {
        'id_': 'kitchen_2',
        'name_': 'Green Bowl Home Office',
        'description': 'Vegetarian bowls and salads from a home office kitchen',
        'rating': Decimal('4.3'),
        'delivery_time': 25,
        'delivery_fee': Decimal('25.00'),
        'cuisine_type': ['Healthy', 'Salads'],
        'address': '45 Koramangala 5th Block, Bangalore',
        'kitchen_type': 'home_office',
        'operating_hours': {'open': '08:00', 'close': '21:00', 'days': ['Mon', 'Tue', 'Wed', 'Thu', 'Fri']},
        'min_order_amount': Decimal('150.00'),
        'subscription_available': True
    },
    {
        'id_': 'kitchen_3',
        'name_': 'Wok Express',
        'description': 'Indo-Chinese noodles, rice and starters',
        'rating': Decimal('4.1'),
        'delivery_time': 35,
        'delivery_fee': Decimal('30.00'),
        'cuisine_type': ['Chinese', 'Asian'],
        'address': '7 Indiranagar 100ft Road, Bangalore',
        'kitchen_type': 'both',
        'operating_hours': {'open': '12:00', 'close': '23:30', 'days': ['Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']},
        'min_order_amount': Decimal('250.00'),
        'subscription_available': False
    },
    {
        'id_': 'kitchen_4',
        'name_': 'Nonna Pasta Lab',
        'description': 'Fresh pasta and wood-fired style pizza',
        'rating': Decimal('4.8'),
        'delivery_time': 40,
        'delivery_fee': Decimal('50.00'),
        'cuisine_type': ['Italian'],
        'address': '3 Lavelle Road, Bangalore',
        'kitchen_type': 'cloud_kitchen',
        'operating_hours': {'open': '11:00', 'close': '23:00', 'days': ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']},
        'min_order_amount': Decimal('300.00'),
        'subscription_available': False
    }
]

MENU_ITEMS = [
    {'id_': 'item_1', 'restaurant_id': 'kitchen_1', 'name_': 'Butter Chicken', 'description': 'Creamy tomato gravy',
     'price': Decimal('350.00'), 'category': 'Main Course', 'available': True, 'vegetarian': False},
    {'id_': 'item_2', 'restaurant_id': 'kitchen_1', 'name_': 'Dal Makhani', 'description': 'Slow cooked black lentils',
     'price': Decimal('220.00'), 'category': 'Main Course', 'available': True, 'vegetarian': True},
    {'id_': 'item_3', 'restaurant_id': 'kitchen_1', 'name_': 'Garlic Naan', 'description': 'Tandoor baked bread',
     'price': Decimal('60.00'), 'category': 'Breads', 'available': True, 'vegetarian': True},
    {'id_': 'item_4', 'restaurant_id': 'kitchen_1', 'name_': 'Mutton Rogan Josh', 'description': 'Kashmiri style',
     'price': Decimal('420.00'), 'category': 'Main Course', 'available': False, 'vegetarian': False},
    {'id_': 'item_5', 'restaurant_id': 'kitchen_2', 'name_': 'Quinoa Power Bowl', 'description': 'Quinoa, chickpeas, greens',
     'price': Decimal('280.00'), 'category': 'Bowls', 'available': True, 'vegetarian': True},
    {'id_': 'item_6', 'restaurant_id': 'kitchen_2', 'name_': 'Greek Salad', 'description': 'Feta, olives, cucumber',
     'price': Decimal('240.00'), 'category': 'Salads', 'available': True, 'vegetarian': True},
    {'id_': 'item_7', 'restaurant_id': 'kitchen_2', 'name_': 'Cold Pressed Juice', 'description': 'Seasonal fruit',
     'price': Decimal('120.00'), 'category': 'Beverages', 'available': True, 'vegetarian': True},
    {'id_': 'item_8', 'restaurant_id': 'kitchen_3', 'name_': 'Hakka Noodles', 'description': 'Wok tossed noodles',
     'price': Decimal('190.00'), 'category': 'Noodles', 'available': True, 'vegetarian': True},
    {'id_': 'item_9', 'restaurant_id': 'kitchen_3', 'name_': 'Chilli Chicken', 'description': 'Dry, with peppers',
     'price': Decimal('260.00'), 'category': 'Starters', 'available': True, 'vegetarian': False},
    {'id_': 'item_10', 'restaurant_id': 'kitchen_4', 'name_': 'Pasta Carbonara', 'description': 'Guanciale, pecorino',
     'price': Decimal('320.00'), 'category': 'Pasta', 'available': True, 'vegetarian': False},
    {'id_': 'item_11', 'restaurant_id': 'kitchen_4', 'name_': 'Margherita Pizza', 'description': 'San Marzano, basil',
     'price': Decimal('380.00'), 'category': 'Pizza', 'available': True, 'vegetarian': True},
    {'id_': 'item_12', 'restaurant_id': 'kitchen_4', 'name_': 'Tiramisu', 'description': 'Mascarpone, espresso',
     'price': Decimal('210.00'), 'category': 'Desserts', 'available': True, 'vegetarian': True}
]

DELIVERY_PARTNERS = [
    {'id_': 'partner_1', 'name_': 'Ravi Kumar', 'phone': '+919800000001', 'rating': Decimal('4.8'),
     'completed_deliveries': 1240, 'is_available': True, 'available_vehicles': ['motorcycle', 'cycle'],
     'preferred_vehicle_type': 'motorcycle', 'average_delivery_time': 24},
    {'id_': 'partner_2', 'name_': 'Anita Rao', 'phone': '+919800000002', 'rating': Decimal('4.6'),
     'completed_deliveries': 860, 'is_available': True, 'available_vehicles': ['e_vehicle'],
     'preferred_vehicle_type': 'e_vehicle', 'average_delivery_time': 27},
    {'id_': 'partner_3', 'name_': 'Mohammed Irfan', 'phone': '+919800000003', 'rating': Decimal('4.4'),
     'completed_deliveries': 530, 'is_available': True, 'available_vehicles': ['car', 'motorcycle'],
     'preferred_vehicle_type': 'car', 'average_delivery_time': 31},
    {'id_': 'partner_4', 'name_': 'Sneha Pillai', 'phone': '+919800000004', 'rating': Decimal('4.9'),
     'completed_deliveries': 2015, 'is_available': False, 'available_vehicles': ['cycle'],
     'preferred_vehicle_type': 'cycle', 'average_delivery_time': 22},
    {'id_': 'partner_5', 'name_': 'Arjun Mehta', 'phone': '+919800000005', 'rating': Decimal('4.2'),
     'completed_deliveries': 310, 'is_available': True, 'available_vehicles': ['public_transport'],
     'preferred_vehicle_type': 'public_transport', 'average_delivery_time': 38}
]
