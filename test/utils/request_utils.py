import json
from typing import Optional, Dict


def make_request(chalice_gateway, endpoint: str = '/', method: str = 'GET',
                 query: Optional[str] = None, json_body=None, token=None) -> Dict:
    """Request to the local gateway, token goes to the Authorization header"""
    headers = {'Content-Type': 'application/json', 'Host': 'test-domain.com'}
    if token:
        headers['Authorization'] = token
    return chalice_gateway.handle_request(
        method=method,
        path=f"{endpoint}?{query}" if query else f"{endpoint}",
        headers=headers,
        body=json.dumps(json_body).encode('utf-8') if json_body is not None else b''
    )


def register_user(chalice_gateway, role: str = 'customer', email: Optional[str] = None, **extra) -> Dict:
    """Registers a user and returns the response body with the session token"""
    user = {
        'email': email or f'{role}@cloudbites.test',
        'name': f'Test {role}',
        'password': 'secret',
        'role': role,
        **extra
    }
    response = make_request(chalice_gateway, endpoint='/auth/register', method='POST', json_body=user)
    assert response['statusCode'] == 201, f"status code not as expected, body={response['body']}"
    return json.loads(response['body'])


def body_of(response) -> Dict:
    return json.loads(response['body'])
