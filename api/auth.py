"""
Authentication blueprint:
- POST /signup
- POST /login
- GET  /user     (header: access_token)
- POST /refresh  (header: refresh_token)
- POST /logout   (header: refresh_token)

Tokens travel in the `access_token` / `refresh_token` request headers,
not in Authorization. All token and credential logic lives in AuthFlow.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.auth import SignupSchema, LoginSchema, UserOutSchema
from utils.decorators import get_auth_flow, ACCESS_HEADER, REFRESH_HEADER

bp = Blueprint("auth", __name__)

signup_schema = SignupSchema()
login_schema = LoginSchema()
user_out_schema = UserOutSchema()


@bp.post("/signup")
def signup():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    data = signup_schema.load(request.get_json(silent=True) or {})
    user_id = get_auth_flow().signup(data)
    return jsonify(
        {
            "status": 201,
            "message": "You have been successfully registered.",
            "user_id": user_id,
        }
    ), 201


@bp.post("/login")
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid email or password
      422:
        description: Validation error
    """
    data = login_schema.load(request.get_json(silent=True) or {})
    pair = get_auth_flow().login(data)
    return jsonify({"status": 200, **pair.to_dict()}), 200


@bp.get("/user")
def get_user():
    """
    Current user, identified by the access token.
    ---
    tags:
      - Auth
    parameters:
      - in: header
        name: access_token
        type: string
        required: true
    responses:
      200:
        description: OK
      401:
        description: Missing, invalid or expired token
      403:
        description: Not an access token
      404:
        description: User not found
    """
    user = get_auth_flow().current_user(request.headers.get(ACCESS_HEADER))
    return jsonify({"status": 200, "user": user_out_schema.dump(user)}), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new access/refresh pair (rotation)
    ---
    tags:
      - Auth
    parameters:
      - in: header
        name: refresh_token
        type: string
        required: true
    responses:
      200:
        description: OK (returns a new token pair)
      401:
        description: Invalid, expired, revoked or already used refresh token
      403:
        description: Not a refresh token
    """
    pair = get_auth_flow().refresh(request.headers.get(REFRESH_HEADER))
    return jsonify({"status": 200, **pair.to_dict()}), 200


@bp.post("/logout")
def logout():
    """
    Revoke a refresh token
    ---
    tags:
      - Auth
    parameters:
      - in: header
        name: refresh_token
        type: string
        required: true
    responses:
      204:
        description: ""
      401:
        description: Unauthorized
    """
    get_auth_flow().logout(request.headers.get(REFRESH_HEADER))
    return ("", 204)
