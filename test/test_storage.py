from decimal import Decimal

import pytest

from chalicelib.constants import keys_structure
from chalicelib.utils import storage as utils_storage


class FakeTable:
    """ Minimal stand-in for a boto3 DynamoDB Table resource """

    def __init__(self):
        self.items = {}

    def put_item(self, Item, **kwargs):
        self.items[(Item['partkey'], Item['sortkey'])] = Item
        return {}

    def get_item(self, Key, **kwargs):
        item = self.items.get((Key['partkey'], Key['sortkey']))
        return {'Item': item} if item is not None else {}

    def delete_item(self, Key, **kwargs):
        self.items.pop((Key['partkey'], Key['sortkey']), None)
        return {}


def test_get_blob_returns_default_for_missing_key():
    assert utils_storage.get_blob('missing') is None
    assert utils_storage.get_blob('missing', []) == []


def test_put_and_get_blob_keeps_money_as_decimal():
    utils_storage.put_blob('blob', {'price': Decimal('350.50'), 'items': ['a', 'b'], 'qty': 2})

    blob = utils_storage.get_blob('blob')
    assert blob == {'price': Decimal('350.5'), 'items': ['a', 'b'], 'qty': 2}
    assert isinstance(blob['price'], Decimal)
    assert isinstance(blob['qty'], int)


def test_delete_blob():
    utils_storage.put_blob('blob', [1, 2, 3])
    utils_storage.delete_blob('blob')
    assert utils_storage.get_blob('blob', 'gone') == 'gone'


def test_corrupted_blob_is_cleared():
    storage = utils_storage.get_storage()
    storage.put_raw(keys_structure.orders_key, '{"not json')

    assert utils_storage.get_blob(keys_structure.orders_key, []) == []
    assert storage.get_raw(keys_structure.orders_key) is None


def test_create_storage_backends(monkeypatch):
    monkeypatch.delenv('STORAGE_BACKEND', raising=False)
    assert isinstance(utils_storage.create_storage(), utils_storage.MemoryStorage)

    monkeypatch.setenv('GEN_TABLE_NAME', 'test-table')
    storage = utils_storage.create_storage('dynamodb')
    assert isinstance(storage, utils_storage.DynamoDBStorage)
    assert storage.table_name == 'test-table'

    with pytest.raises(ValueError):
        utils_storage.create_storage('redis')


def test_dynamodb_storage_item_layout():
    table = FakeTable()
    utils_storage.set_storage(utils_storage.DynamoDBStorage('test-table', table=table))

    utils_storage.put_blob(keys_structure.users_key, [{'id_': 'u1', 'email': 'a@b.c'}])

    stored = table.items[(keys_structure.storage_pk, keys_structure.users_key)]
    assert stored['value_'] == '[{"id_": "u1", "email": "a@b.c"}]'
    assert utils_storage.get_blob(keys_structure.users_key) == [{'id_': 'u1', 'email': 'a@b.c'}]

    utils_storage.delete_blob(keys_structure.users_key)
    assert table.items == {}


def test_dynamodb_storage_clears_corrupted_item():
    table = FakeTable()
    utils_storage.set_storage(utils_storage.DynamoDBStorage('test-table', table=table))
    table.put_item(Item={'partkey': keys_structure.storage_pk, 'sortkey': 'broken', 'value_': 'nope{'})

    assert utils_storage.get_blob('broken', {}) == {}
    assert table.items == {}
