# Internal attribute names -> names exposed to the UI.
# A None value means the key is dropped.
from_db = {
    'id_': 'id',
    'name_': 'name',
    'status_': 'status',
    'password': None,
    'record_type': None,
    'partkey': None,
    'sortkey': None
}

to_db = {
    'id': 'id_',
    'name': 'name_',
    'status': 'status_'
}
