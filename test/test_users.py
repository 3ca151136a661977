import json

import pytest

from chalicelib import users
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201, http400, http401, http409
from chalicelib.utils import exceptions, storage as utils_storage
from test.utils.request_utils import make_request, register_user, body_of

from test.utils.fixtures import chalice_gateway

user_data = {
    'email': 'priya@cloudbites.test',
    'name': 'Priya Sharma',
    'password': 'whatever',
    'role': 'customer',
    'phone': '+919812345678'
}


def test_register_and_login():
    token = users.register(user_data)
    sessions = utils_storage.get_blob(keys_structure.sessions_key)
    user = users.User.init_by_id(sessions[token])

    assert user.email == 'priya@cloudbites.test'
    assert user.name_ == 'Priya Sharma'
    assert user.avatar == 'https://ui-avatars.com/api/?name=Priya%20Sharma&background=random'

    login_token = users.login('priya@cloudbites.test', 'any password works', 'customer')
    assert login_token is not None and login_token != token
    assert users.login('priya@cloudbites.test', 'whatever', 'admin') is None
    assert users.login('nobody@cloudbites.test', 'whatever', 'customer') is None


def test_register_duplicate_email():
    users.register(user_data)
    with pytest.raises(exceptions.DuplicateEmail):
        users.register({**user_data, 'email': 'PRIYA@cloudbites.test', 'role': 'kitchen'})
    assert len(users.get_users()) == 1


@pytest.mark.parametrize('field', ['email', 'name', 'password', 'role'])
def test_register_mandatory_fields(field):
    with pytest.raises(exceptions.MandatoryFieldsAreNotFilled):
        users.register({key: value for key, value in user_data.items() if key != field})


def test_register_unknown_role():
    with pytest.raises(exceptions.ValidationException):
        users.register({**user_data, 'role': 'chef'})


def test_role_specific_fields():
    users.register({**user_data, 'email': 'k@cloudbites.test', 'role': 'kitchen', 'kitchen_name': 'Home Tiffins',
                    'fssai_license': '12345678901234', 'cuisine': ['South Indian'], 'vehicle_type': 'car'})
    users.register({**user_data, 'email': 'd@cloudbites.test', 'role': 'delivery', 'license_number': 'KA01'})

    kitchen = users.find_user_by_email('k@cloudbites.test')
    assert kitchen.kitchen_name == 'Home Tiffins'
    assert kitchen.cuisine == ['South Indian']
    assert 'vehicle_type' not in kitchen._to_dict()

    delivery = users.find_user_by_email('d@cloudbites.test')
    assert delivery.vehicle_type == 'motorcycle'
    assert delivery.license_number == 'KA01'
    assert 'kitchen_name' not in delivery._to_dict()


def test_logout_removes_session():
    token = users.register(user_data)
    users.delete_session(token)
    assert token not in utils_storage.get_blob(keys_structure.sessions_key)


def test_register_endpoint(chalice_gateway):
    response = make_request(chalice_gateway, endpoint='/auth/register', method='POST', json_body=user_data)

    assert response['statusCode'] == http201, f"status code not as expected"
    response_body = body_of(response)
    assert response_body['token']
    assert response_body['user']['name'] == 'Priya Sharma'
    assert 'password' not in response_body['user']

    response = make_request(chalice_gateway, endpoint='/auth/register', method='POST', json_body=user_data)
    assert response['statusCode'] == http409, f"status code not as expected"
    assert body_of(response)['exception'] == 'DuplicateEmail'


def test_login_endpoint(chalice_gateway):
    register_user(chalice_gateway, role='kitchen', email='kitchen@cloudbites.test')

    response = make_request(chalice_gateway, endpoint='/auth/login', method='POST',
                            json_body={'email': 'kitchen@cloudbites.test', 'password': 'x', 'role': 'kitchen'})
    assert response['statusCode'] == http200, f"status code not as expected"
    assert body_of(response)['user']['role'] == 'kitchen'

    response = make_request(chalice_gateway, endpoint='/auth/login', method='POST',
                            json_body={'email': 'kitchen@cloudbites.test', 'password': 'x', 'role': 'customer'})
    assert response['statusCode'] == http401, f"status code not as expected"

    response = make_request(chalice_gateway, endpoint='/auth/login', method='POST',
                            json_body={'email': 'kitchen@cloudbites.test'})
    assert response['statusCode'] == http400, f"status code not as expected"


def test_user_get_update_and_logout(chalice_gateway):
    token = register_user(chalice_gateway, role='delivery')['token']

    response = make_request(chalice_gateway, endpoint='/users', method='GET', token=token)
    assert response['statusCode'] == http200, f"status code not as expected"
    response_body = json.loads(response['body'])
    assert response_body['role'] == 'delivery'
    assert response_body['vehicle_type'] == 'motorcycle'

    response = make_request(chalice_gateway, endpoint='/users', method='PUT', token=token,
                            json_body={'name': 'Fast Rider', 'vehicle_type': 'e_vehicle'})
    assert response['statusCode'] == http200, f"status code not as expected"
    response_body = body_of(make_request(chalice_gateway, endpoint='/users', method='GET', token=token))
    assert response_body['name'] == 'Fast Rider'
    assert response_body['vehicle_type'] == 'e_vehicle'

    response = make_request(chalice_gateway, endpoint='/auth/logout', method='POST', token=token)
    assert response['statusCode'] == http200, f"status code not as expected"

    response = make_request(chalice_gateway, endpoint='/users', method='GET', token=token)
    assert response['statusCode'] == http401, f"status code not as expected"
