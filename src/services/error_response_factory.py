"""
Error responses for Socket.IO handlers.

Every failure a client can see is a unicast ``error`` event shaped
``{message, code[, details]}``. GameErrors carry their own code and message;
any other exception is logged with its traceback and reported as
INTERNAL_ERROR.
"""

import logging
from functools import wraps
from typing import Dict, Optional

from flask_socketio import emit

from src.core.errors import ErrorCode, GameError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred"


class ErrorResponseFactory:
    """Builds and emits ``error`` payloads."""

    def create_error_response(self, code: ErrorCode, message: str, details: Optional[Dict] = None) -> Dict:
        response = {'message': message, 'code': code.value}
        if details:
            response['details'] = details
        return response

    def response_for(self, error: Exception, context: str = "handler") -> Dict:
        """Payload for an exception raised while handling an event."""
        if isinstance(error, GameError):
            return self.create_error_response(error.code, error.message, error.details)
        logger.exception(f"Unexpected exception in {context}: {error}")
        return self.create_error_response(ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE)

    def emit_error(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        """Send an error to the requesting client only."""
        self.emit_response(self.create_error_response(code, message, details))

    def emit_response(self, response: Dict):
        logger.warning(f"Emitting error: {response['code']} - {response['message']}")
        emit('error', response)


def with_error_handling(func):
    """Report exceptions from a Socket.IO handler to the originating session."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            factory = ErrorResponseFactory()
            factory.emit_response(factory.response_for(e, func.__name__))
            return None

    return wrapper
