from marshmallow import Schema, fields

from models.schemas.common import not_blank


class CategoryCreateSchema(Schema):
    name = fields.String(required=True, validate=not_blank(64))


class CategoryUpdateSchema(Schema):
    name = fields.String(validate=not_blank(64))


class CategoryOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
