from marshmallow import Schema, fields

from models.schemas.common import not_blank


class GameCreateSchema(Schema):
    name = fields.String(required=True, validate=not_blank(255))
    additional_info = fields.Dict(data_key="additionalInfo", allow_none=True)
    category_ids = fields.List(fields.String(), data_key="categoryIds", load_default=list)


class GameUpdateSchema(Schema):
    # All optional; categoryIds, when present, replaces the whole set
    name = fields.String(validate=not_blank(255))
    additional_info = fields.Dict(data_key="additionalInfo", allow_none=True)
    category_ids = fields.List(fields.String(), data_key="categoryIds")


class GameCategoriesSchema(Schema):
    category_ids = fields.List(fields.String(), data_key="categoryIds", required=True)


class CategoryRefSchema(Schema):
    id = fields.String()
    name = fields.String()


class GameOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    additional_info = fields.Raw(data_key="additionalInfo", allow_none=True)
    user_id = fields.String(data_key="userId")
    categories = fields.List(fields.Nested(CategoryRefSchema))
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
