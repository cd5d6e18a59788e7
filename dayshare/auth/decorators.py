"""Decorators for the auth blueprint."""

from functools import wraps

from flask import session

from dayshare.errors import Unauthenticated


def current_user_id():
    """Return the uid stored in the session, or None for anonymous callers."""
    return session.get("user_id")


def login_required(f=None, optional=False):
    """Reject the request with 401 if the user is not logged in.

    Queries that degrade to empty results for anonymous callers pass
    ``optional=True`` and check ``current_user_id()`` themselves.

    Usage:
    @login_required
    def create_group():
        ...

    @login_required(optional=True)
    def list_groups():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            if not optional and "user_id" not in session:
                raise Unauthenticated()
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator
