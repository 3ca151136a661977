import functools
from typing import Dict, Optional

from chalice.app import Request

from chalicelib.constants import keys_structure
from chalicelib.utils import exceptions as utils_exceptions, storage as utils_storage
from chalicelib.utils.logger import log_request, logger, set_request_id, set_session_user


def get_session_user(token: Optional[str]) -> Dict:
    """
    Demo session lookup: the token maps to a user id in the sessions blob
    """
    if not token:
        raise utils_exceptions.NotAuthorizedException('Authorization token is missing')
    user_id = utils_storage.get_blob(keys_structure.sessions_key, {}).get(token)
    if user_id is None:
        raise utils_exceptions.NotAuthorizedException('Session not found, please log in')
    for user in utils_storage.get_blob(keys_structure.users_key, []):
        if user.get('id_') == user_id:
            return user
    raise utils_exceptions.NotAuthorizedException('Session user no longer exists')


def get_auth_result(request: Request) -> Dict:
    set_request_id(request)
    log_request(request)
    token = request.headers.get('authorization')
    user = get_session_user(token)
    set_session_user(user['id_'], user.get('role'))
    return {
        'user_id': user['id_'],
        'role': user.get('role'),
        'kitchen_id': user.get('kitchen_id'),
        'token': token
    }


def authenticate(func):
    """
    Wrapper for functions which require user's authentication
    """

    @functools.wraps(func)
    def result_auth(*args, **kwargs):
        request = args[0]
        setattr(request, 'auth_result', get_auth_result(request))
        logger.info(f'authenticate ::: SUCCESS, func.__name__ {func.__name__}')
        return func(*args, **kwargs)

    return result_auth


def authenticate_class(func):
    """
    Wrapper for class methods which require user's authentication
    """

    @functools.wraps(func)
    def result_auth(*args, **kwargs):
        request = args[1]
        setattr(request, 'auth_result', get_auth_result(request))
        logger.info(f'authenticate_class ::: SUCCESS, func.__name__ {func.__name__}')
        return func(*args, **kwargs)

    return result_auth
