users_key = 'cloudbites_users'
sessions_key = 'cloudbites_sessions'

carts_key = 'cloudbites_cart_{user_id}'
cart_kitchens_key = 'cloudbites_kitchen_{user_id}'

orders_key = 'cloudbites_orders'

bids_key = 'cloudbites_bids_{order_id}'

# DynamoDB layout of the blob store
storage_pk = 'cloudbites_storage'
storage_sk = '{key}'
