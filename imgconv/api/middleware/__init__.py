from .error_handler import error_handler_middleware, setup_exception_handlers
from .logging import logging_middleware

__all__ = ["error_handler_middleware", "setup_exception_handlers", "logging_middleware"]
