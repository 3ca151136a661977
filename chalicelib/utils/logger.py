import json
import os
from copy import deepcopy
from logging import setLoggerClass, Logger, NOTSET, getLogger, StreamHandler, Formatter
from typing import Optional
from uuid import uuid4

from chalice.app import Request

from chalicelib.utils.data import CustomJSONEncoder

LOGGER_NAME = 'cloudbites'
HIDDEN_HEADERS = ('authorization', 'cookie')


class CustomLogger(Logger):
    """
    Prefixes every message with the current request id and, once the session is resolved,
    with the id and role of the session user: [request_id] [user_id:role] : message
    """

    def __init__(self, name, level=NOTSET):
        self.current_request_id: Optional[str] = None
        self.current_user: Optional[str] = None
        super(CustomLogger, self).__init__(name, level)

    def prefix(self) -> str:
        if self.current_user is None:
            return f'[{self.current_request_id}]'
        return f'[{self.current_request_id}] [{self.current_user}]'

    def _log(self, level, msg, args, **kwargs):
        super(CustomLogger, self)._log(level, f'{self.prefix()} : {msg}', args, **kwargs)


def conf_logger(level):
    setLoggerClass(CustomLogger)
    logger_ = getLogger(LOGGER_NAME)
    console_handler = StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(Formatter('%(asctime)s - %(levelname)s - %(message)s'))
    if logger_.hasHandlers():
        logger_.handlers.clear()
    logger_.addHandler(console_handler)
    logger_.setLevel(level)
    return logger_


logger = conf_logger(os.environ.get('LOG_LEVEL', 'DEBUG').upper())


def set_request_id(request: Request):
    """
    Short request id taken from the lambda context, random when running locally without one.
    The session user of the previous request is forgotten.
    """
    aws_request_id = getattr(getattr(request, 'lambda_context', None), 'aws_request_id', None)
    logger.current_request_id = (aws_request_id or str(uuid4())).split('-')[-1]
    logger.current_user = None


def set_session_user(user_id: str, role: Optional[str]):
    logger.current_user = f'{user_id}:{role}'


def log_request(request: Request):
    request_dict = deepcopy(request.to_dict())
    headers = request_dict.get('headers') or {}
    for header in HIDDEN_HEADERS:
        if header in headers:
            headers[header] = '***'
    logger.info(f"Request: {request_dict.get('method')} {request_dict.get('context', {}).get('resourcePath')} "
                f"{json.dumps(request_dict, cls=CustomJSONEncoder)}")
    if headers.get('content-type', '') == 'application/json':
        logger.debug(f"Request body: {str(request.raw_body)}")


def log_exception(error: Exception, status_code: int = 400, msg: str = "", *args, **kwargs):
    """
    Logs the error as a JSON line on the level named by the exception LEVEL attribute
    """
    level = getattr(error, 'LEVEL', 'exception')
    if level not in ('debug', 'info', 'warning', 'error', 'exception'):
        level = 'exception'
    getattr(logger, level)(json.dumps({
        'error': str(error),
        'exception': error.__class__.__name__,
        'message': str(msg),
        'level': level,
        'status_code': status_code,
        'request_id': logger.current_request_id,
        'user': logger.current_user,
        'args': args,
        'kwargs': kwargs
    }, cls=CustomJSONEncoder))
