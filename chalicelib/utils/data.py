import json
from datetime import datetime, date
from decimal import Decimal, ROUND_HALF_UP
from time import struct_time, mktime

CENTS = Decimal('1.00')


class CustomJSONEncoder(json.JSONEncoder):
    def default(self, value):
        if isinstance(value, datetime):
            return value.isoformat(timespec='seconds')
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, Decimal):
            return float(value)
        if isinstance(value, struct_time):
            return datetime.fromtimestamp(mktime(value)).isoformat(timespec='seconds')
        # Any other serializer if needed
        return super(CustomJSONEncoder, self).default(value)


def to_json(value) -> str:
    return json.dumps(value, cls=CustomJSONEncoder)


def from_json(raw: str):
    """ Floats are parsed as Decimal so money values keep their precision """
    return json.loads(raw, parse_float=Decimal)


def to_money(value) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def now_iso() -> str:
    return datetime.now().isoformat(timespec='seconds')


def replace_dict_key(item, orig_key, new_key):
    if orig_key in item:
        if new_key not in item:
            item[new_key] = item[orig_key]
        del item[orig_key]


def substitute_keys(dict_to_process: dict, base_keys: dict, opt_dict=None):
    if opt_dict is None:
        opt_dict = {}
    all_keys = {**base_keys, **opt_dict}
    for key, val in all_keys.items():
        if val:
            replace_dict_key(dict_to_process, key, val)
        elif key in dict_to_process.keys():
            dict_to_process.pop(key, None)


def parse_raw_body(chalice_request):
    request_raw_body = chalice_request.raw_body
    if request_raw_body:
        return fix_values_from_ui(item=json.loads(request_raw_body))
    else:
        return {}


def fix_values_from_ui(item):
    """
    Remove keys with empty or None values and transform float to Decimal
    """
    if item.get('_values_from_ui_strategy') == 'delete_empty':
        list_to_cleanup = ['', None]
    else:
        list_to_cleanup = [None]
    item = cleanup_dict(item, list_to_cleanup)
    item.pop('_values_from_ui_strategy', None)
    return from_json(json.dumps(item))


def cleanup_dict(item: dict, list_of_values: list):
    """ Remove None fields in dict with. Supports one nesting.  """

    def sub_clean(sub_item):
        return {
            key: value
            for key, value in sub_item.items()
            if value not in list_of_values
        }

    clean = {}
    for k, v in item.items():
        if isinstance(v, dict):
            nested = sub_clean(v)
            if len(nested.keys()) > 0:
                clean[k] = nested
        elif v not in list_of_values:
            clean[k] = v
    return clean
