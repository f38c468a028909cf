from dataclasses import dataclass

from marshmallow import Schema, fields, post_load, validate


@dataclass(frozen=True)
class AddToCartInput:
    product_id: str
    qty: int


class AddToCartSchema(Schema):
    product_id = fields.String(required=True, validate=validate.Length(min=1, max=36))
    qty = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))

    @post_load
    def make_input(self, data, **kwargs):
        return AddToCartInput(**data)


class ProductOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    price = fields.Decimal(as_string=True, places=2)


class CartItemOutSchema(Schema):
    id = fields.String()
    user_id = fields.String()
    product_id = fields.String()
    qty = fields.Integer()
