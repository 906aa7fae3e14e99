from dataclasses import dataclass

from marshmallow import Schema, fields, post_load, pre_load, validate

from models.schemas.common import RequestSchema, UpdateSchema, strip_string


@dataclass
class RegisterRequest:
    username: str
    email: str
    password: str


@dataclass
class LoginRequest:
    username: str
    password: str


@dataclass
class RefreshTokenRequest:
    refresh_token: str


@dataclass
class PasswordChangeRequest:
    current_password: str
    new_password: str


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def _normalize_identity(data):
    if isinstance(data, dict):
        data = dict(data)
        if "email" in data:
            data["email"] = _norm_email(data["email"])
        if "username" in data:
            data["username"] = strip_string(data["username"])
    return data


class RegisterSchema(RequestSchema):
    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    email = fields.Email(required=True, validate=validate.Length(max=100))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=8, max=100))

    @pre_load
    def normalize(self, data, **kwargs):
        return _normalize_identity(data)

    @post_load
    def make_request(self, data, **kwargs):
        return RegisterRequest(**data)


class LoginSchema(RequestSchema):
    username = fields.String(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        return _normalize_identity(data)

    @post_load
    def make_request(self, data, **kwargs):
        return LoginRequest(**data)


class RefreshTokenSchema(RequestSchema):
    refresh_token = fields.String(required=True, data_key="refreshToken")

    @post_load
    def make_request(self, data, **kwargs):
        return RefreshTokenRequest(**data)


class UserUpdateSchema(UpdateSchema):
    username = fields.String(validate=validate.Length(min=3, max=50))
    email = fields.Email(validate=validate.Length(max=100))

    @pre_load
    def normalize(self, data, **kwargs):
        return _normalize_identity(data)


class PasswordChangeSchema(RequestSchema):
    current_password = fields.String(required=True, data_key="currentPassword")
    new_password = fields.String(required=True, data_key="newPassword", validate=validate.Length(min=8, max=100))

    @post_load
    def make_request(self, data, **kwargs):
        return PasswordChangeRequest(**data)


class UserSummarySchema(Schema):
    id = fields.Integer()
    username = fields.String()
    email = fields.String()


class UserOutSchema(UserSummarySchema):
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
