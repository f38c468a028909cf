from dataclasses import dataclass

from marshmallow import Schema, fields, pre_load, post_load, validate


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


@dataclass(frozen=True)
class SignupInput:
    name: str
    email: str
    password: str


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str


class SignupSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=255))
    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=4))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict):
            data = dict(data)
            if "email" in data:
                data["email"] = _norm_email(data["email"])
            if isinstance(data.get("name"), str):
                data["name"] = data["name"].strip()
        return data

    @post_load
    def make_input(self, data, **kwargs):
        return SignupInput(**data)


class LoginSchema(Schema):
    email = fields.String(required=True, validate=validate.Length(min=1))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data

    @post_load
    def make_input(self, data, **kwargs):
        return LoginInput(**data)


class UserOutSchema(Schema):
    id = fields.String(allow_none=False)
    name = fields.String()
    email = fields.String()
