from marshmallow import Schema, fields, pre_load, validates, ValidationError

from models.schemas.common import norm_email, not_blank

MIN_PASSWORD_LENGTH = 6


class UserCreateSchema(Schema):
    name = fields.String(allow_none=True, validate=not_blank(255))
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = norm_email(data["email"])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")


class UserLoginSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = norm_email(data["email"])
        return data


class UserUpdateSchema(Schema):
    name = fields.String(validate=not_blank(255))
    email = fields.Email()
    password = fields.String(load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = norm_email(data["email"])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")


class UserOutSchema(Schema):
    id = fields.String()
    name = fields.String(allow_none=True)
    email = fields.String()


class UserProfileOutSchema(UserOutSchema):
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
