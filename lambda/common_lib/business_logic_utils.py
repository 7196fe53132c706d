"""
Business logic utilities for common operations across Lambda functions
"""

import functools
import traceback
from contextlib import contextmanager

import response_utils as resp
from exceptions import BusinessLogicError, DependencyError


@contextmanager
def dependency_failure(message):
    """
    Re-raise store, topic and queue failures as a 500 carrying the operation's message

    Steps completed before the failure stay applied; nothing is rolled back.
    """
    try:
        yield
    except DependencyError as e:
        print(f"{message}: {e.message} (cause: {e.cause!r})")
        raise BusinessLogicError(message, 500) from e


def handle_business_logic_error(func):
    """Decorator to convert BusinessLogicError exceptions into API responses"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BusinessLogicError as e:
            print(f"BusinessLogicError in {func.__name__}: {e.message} (status: {e.status_code})")
            return resp.error_response(e.message, e.status_code)
        except Exception as e:
            print(f"Unexpected error in {func.__name__}: {str(e)}")
            print(f"Error type: {type(e).__name__}")
            traceback.print_exc()
            return resp.error_response("Internal server error", 500)
    return wrapper
