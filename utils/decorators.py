from __future__ import annotations
from functools import wraps
from flask import request, g, current_app

ACCESS_HEADER = "access_token"
REFRESH_HEADER = "refresh_token"


def get_auth_flow():
    return current_app.extensions["auth_flow"]


def access_token_required():
    """
    Reject the request unless the `access_token` header carries a valid
    access token. Sets g.current_user_id for the view.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            claims = get_auth_flow().verify_access(request.headers.get(ACCESS_HEADER))
            g.current_user_id = claims["user_id"]
            return fn(*args, **kwargs)

        return wrapper

    return decorator
