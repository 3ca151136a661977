from typing import Dict, List, Optional
from urllib.parse import quote
from uuid import uuid4

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ROLES, ROLE_KITCHEN, ROLE_DELIVERY, AVATAR_URL, DEFAULT_DELIVERY_VEHICLE, \
    VEHICLE_OPTIONS
from chalicelib.constants.status_codes import http200, http201
from chalicelib.utils import auth as utils_auth, app as utils_app, data as utils_data, storage as utils_storage, \
    exceptions
from chalicelib.utils.data import now_iso
from chalicelib.utils.logger import logger

KITCHEN_FIELDS = ('kitchen_id', 'kitchen_name', 'kitchen_address', 'fssai_license', 'gst_number', 'cuisine')
DELIVERY_FIELDS = ('vehicle_type', 'license_number', 'aadhar_number')


def default_avatar(name: str) -> str:
    return AVATAR_URL.format(name=quote(name or ''))


class User(EntityBase):
    storage_key = keys_structure.users_key

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'email': lambda x: isinstance(x, str) and '@' in x,
        'role': lambda x: x in ROLES,
        'created_at': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name_': lambda x: isinstance(x, str) and len(x) > 0,
        'avatar': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'password': lambda x: isinstance(x, str),
        'phone': lambda x: isinstance(x, str),
        'date_updated': lambda x: isinstance(x, str),
        # kitchen role
        'kitchen_id': lambda x: isinstance(x, str),
        'kitchen_name': lambda x: isinstance(x, str),
        'kitchen_address': lambda x: isinstance(x, str),
        'fssai_license': lambda x: isinstance(x, str),
        'gst_number': lambda x: isinstance(x, str),
        'cuisine': lambda x: isinstance(x, list),
        # delivery role
        'vehicle_type': lambda x: x in VEHICLE_OPTIONS,
        'license_number': lambda x: isinstance(x, str),
        'aadhar_number': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)

        self.email: str = kwargs.get('email')
        self.name_: str = kwargs.get('name_')
        self.password: Optional[str] = kwargs.get('password')
        self.phone: Optional[str] = kwargs.get('phone')
        self.role: str = kwargs.get('role')
        self.avatar: str = kwargs.get('avatar') or default_avatar(self.name_)
        self.created_at: str = kwargs.get('created_at') or now_iso()
        self.date_updated: Optional[str] = kwargs.get('date_updated')

        self.kitchen_id: Optional[str] = kwargs.get('kitchen_id')
        self.kitchen_name: Optional[str] = kwargs.get('kitchen_name')
        self.kitchen_address: Optional[str] = kwargs.get('kitchen_address')
        self.fssai_license: Optional[str] = kwargs.get('fssai_license')
        self.gst_number: Optional[str] = kwargs.get('gst_number')
        self.cuisine: Optional[List[str]] = kwargs.get('cuisine')

        self.vehicle_type: Optional[str] = kwargs.get('vehicle_type')
        if self.role == ROLE_DELIVERY and self.vehicle_type is None:
            self.vehicle_type = DEFAULT_DELIVERY_VEHICLE
        self.license_number: Optional[str] = kwargs.get('license_number')
        self.aadhar_number: Optional[str] = kwargs.get('aadhar_number')
        self.record_type = 'user'

    @classmethod
    def init_by_id(cls, id_):
        logger.info("init_by_id ::: started")
        c = cls(id_)
        c.__init__(**c._get_db_item())
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_user(cls, request):
        logger.info("init_request_user ::: started")
        return cls.init_by_id(request.auth_result['user_id'])

    @classmethod
    @utils_auth.authenticate_class
    def init_request_update(cls, request):
        logger.info("init_request_update ::: started")
        c = cls.init_by_id(request.auth_result['user_id'])
        request_body = utils_data.parse_raw_body(request)
        utils_data.substitute_keys(dict_to_process=request_body, base_keys={'name': 'name_'})
        for key in ('name_', 'phone', 'avatar', *c.role_fields()):
            if key in request_body:
                setattr(c, key, request_body[key])
        return c

    def role_fields(self) -> tuple:
        if self.role == ROLE_KITCHEN:
            return KITCHEN_FIELDS
        if self.role == ROLE_DELIVERY:
            return DELIVERY_FIELDS
        return ()

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_user(self) -> Response:
        return Response(status_code=http200, body=self._to_ui())

    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_update_user(self) -> Response:
        self._update_db_record()
        return Response(status_code=http200, body={'message': 'User was successfully updated', 'id': self.id_})

    def _to_dict(self):
        item = {
            'id_': self.id_,
            'email': self.email,
            'name_': self.name_,
            'password': self.password,
            'phone': self.phone,
            'role': self.role,
            'avatar': self.avatar,
            'created_at': self.created_at,
            'date_updated': self.date_updated
        }
        for key in self.role_fields():
            item[key] = getattr(self, key)
        return item


def get_users() -> List[User]:
    return [User(**record) for record in User(None)._get_records()]


def find_user_by_email(email: str, role: Optional[str] = None) -> Optional[User]:
    for user in get_users():
        if user.email.lower() == (email or '').lower() and (role is None or user.role == role):
            return user
    return None


def create_session(user_id: str) -> str:
    token = str(uuid4())
    sessions = utils_storage.get_blob(keys_structure.sessions_key, {})
    sessions[token] = user_id
    utils_storage.put_blob(keys_structure.sessions_key, sessions)
    return token


def delete_session(token: str) -> None:
    sessions = utils_storage.get_blob(keys_structure.sessions_key, {})
    if sessions.pop(token, None) is None:
        logger.warning('delete_session ::: session was not found')
    utils_storage.put_blob(keys_structure.sessions_key, sessions)


def login(email: str, password: str, role: str) -> Optional[str]:
    """
    Demo login: any password is accepted for an existing email + role pair
    :return:
    session token, None when there is no such user
    """
    user = find_user_by_email(email, role)
    if user is None:
        logger.info(f'login ::: no user with {role=}')
        return None
    logger.info(f'login ::: user {user.id_} logged in')
    return create_session(user.id_)


def register(user_data: Dict) -> str:
    """
    Stores a new user and opens a session for it
    Raise DuplicateEmail when the email is already taken
    :return:
    session token
    """
    user_data = dict(user_data)
    utils_data.substitute_keys(dict_to_process=user_data, base_keys={'name': 'name_'})
    missing = [key for key in ('email', 'name_', 'password', 'role') if not user_data.get(key)]
    if missing:
        raise exceptions.MandatoryFieldsAreNotFilled(f'Fields {missing} are mandatory')
    if user_data['role'] not in ROLES:
        raise exceptions.ValidationException(f'Unknown role {user_data["role"]}')
    if find_user_by_email(user_data['email']) is not None:
        raise exceptions.DuplicateEmail(f'User with email {user_data["email"]} already exists')

    user_data.pop('id_', None)
    user = User(str(uuid4()), **user_data)
    user._create_db_record()
    return create_session(user.id_)


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_register(request):
    token = register(utils_data.parse_raw_body(request))
    user_id = utils_storage.get_blob(keys_structure.sessions_key, {})[token]
    return Response(status_code=http201, body={'token': token, 'user': User.init_by_id(user_id)._to_ui()})


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_login(request):
    body = utils_data.parse_raw_body(request)
    missing = [key for key in ('email', 'password', 'role') if not body.get(key)]
    if missing:
        raise exceptions.MandatoryFieldsAreNotFilled(f'Fields {missing} are mandatory')
    token = login(body['email'], body['password'], body['role'])
    if token is None:
        raise exceptions.NotAuthorizedException('Invalid email or role')
    user = find_user_by_email(body['email'], body['role'])
    return Response(status_code=http200, body={'token': token, 'user': user._to_ui()})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_logout(request):
    delete_session(request.auth_result['token'])
    return Response(status_code=http200, body={'message': 'Logged out'})
