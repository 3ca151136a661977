"""
Key/value store for JSON blobs kept under fixed keys (users, sessions, carts, orders, bids).

Two backends are available, selected with the STORAGE_BACKEND environment variable:
 - memory: process local dict, the default for local runs and tests
 - dynamodb: one item per blob in GEN_TABLE_NAME table
Values cross the backend boundary as JSON strings only.
"""
import functools
import os
from typing import Any, Dict, Optional

import boto3

from chalicelib.constants import keys_structure
from chalicelib.utils import data as utils_data
from chalicelib.utils.boto_clients import aws_config_ddb
from chalicelib.utils.logger import logger, log_exception

need_return_capacity = ('put_item', 'get_item', 'delete_item')

_STORAGE = None


def exp_db_backoff(func):
    """
        should be used for any atomic
        get/put/delete item in the code
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f'{func.__name__}:: args={args}, kwargs={kwargs}')
        if func.__name__ not in need_return_capacity:
            raise RuntimeError("This decorator only for DynamoDB methods")
        kwargs.update({'ReturnConsumedCapacity': 'TOTAL'})
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            log_exception(e, msg=f'Got exception while trying to {func.__name__}: ')
            raise
        logger.info(f'{func.__name__}:: SUCCESS')
        return result

    return wrapper


class MemoryStorage:
    def __init__(self):
        self._blobs: Dict[str, str] = {}

    def get_raw(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def put_raw(self, key: str, raw: str) -> None:
        self._blobs[key] = raw

    def delete_raw(self, key: str) -> None:
        self._blobs.pop(key, None)


class DynamoDBStorage:
    value_attr = 'value_'

    def __init__(self, table_name: str, endpoint_url: Optional[str] = None, table=None):
        self.table_name = table_name
        self.endpoint_url = endpoint_url
        self._table = table

    def get_table(self):
        if self._table is None:
            if self.endpoint_url:
                table = boto3.resource('dynamodb', endpoint_url=self.endpoint_url).Table(self.table_name)
            else:
                table = boto3.resource('dynamodb', config=aws_config_ddb).Table(self.table_name)

            table.put_item = exp_db_backoff(table.put_item)
            table.get_item = exp_db_backoff(table.get_item)
            table.delete_item = exp_db_backoff(table.delete_item)
            self._table = table
        return self._table

    @staticmethod
    def _db_key(key: str) -> Dict:
        return {'partkey': keys_structure.storage_pk, 'sortkey': keys_structure.storage_sk.format(key=key)}

    def get_raw(self, key: str) -> Optional[str]:
        result = self.get_table().get_item(Key=self._db_key(key))
        if 'Item' not in result:
            return None
        return result['Item'].get(self.value_attr)

    def put_raw(self, key: str, raw: str) -> None:
        self.get_table().put_item(Item={**self._db_key(key), self.value_attr: raw})

    def delete_raw(self, key: str) -> None:
        self.get_table().delete_item(Key=self._db_key(key))


def create_storage(backend: Optional[str] = None):
    backend = (backend or os.environ.get('STORAGE_BACKEND', 'memory')).lower()
    if backend == 'memory':
        return MemoryStorage()
    if backend == 'dynamodb':
        return DynamoDBStorage(
            table_name=os.environ.get('GEN_TABLE_NAME', 'cloudbites-storage'),
            endpoint_url=os.environ.get('ENDPOINT_URL')
        )
    raise ValueError(f'Unknown storage backend {backend}')


def get_storage():
    global _STORAGE
    if _STORAGE is None:
        _STORAGE = create_storage()
        logger.info(f'get_storage ::: using {_STORAGE.__class__.__name__}')
    return _STORAGE


def set_storage(storage) -> None:
    global _STORAGE
    _STORAGE = storage


def reset_storage() -> None:
    set_storage(None)


def get_blob(key: str, default: Any = None) -> Any:
    """
    Returns the parsed blob stored under key, default if there is no blob
    A blob that is not valid JSON is removed and default is returned
    """
    raw = get_storage().get_raw(key)
    if raw is None:
        return default
    try:
        return utils_data.from_json(raw)
    except ValueError as error:
        logger.error(f'get_blob ::: corrupted blob {key=}, clearing it, {error=}')
        delete_blob(key)
        return default


def put_blob(key: str, value: Any) -> None:
    get_storage().put_raw(key, utils_data.to_json(value))
    logger.debug(f'put_blob ::: {key=} saved')


def delete_blob(key: str) -> None:
    get_storage().delete_raw(key)
    logger.debug(f'delete_blob ::: {key=} removed')
