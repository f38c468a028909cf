from __future__ import annotations

from decimal import Decimal
from typing import Tuple

from flask import Blueprint, request, jsonify, g, abort
from sqlalchemy import func

from models import storage
from models.product import Product
from models.cart_item import CartItem
from models.schemas.cart import AddToCartSchema, ProductOutSchema, CartItemOutSchema
from utils.decorators import access_token_required
from utils.errors import forbidden, not_found, validation_error

MAX_LIMIT = 100

bp = Blueprint("cart", __name__)

add_to_cart_schema = AddToCartSchema()
products_out_schema = ProductOutSchema(many=True)
cart_items_out_schema = CartItemOutSchema(many=True)


def parse_pagination() -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", "20"))
        page = max(page, 1)
        limit = max(1, min(limit, MAX_LIMIT))
        return page, limit
    except ValueError:
        abort(400, description="page and limit must be integers")


@bp.get("/products")
def list_products():
    """
    List products
    ---
    tags:
      - Shop
    parameters:
      - in: query
        name: page
        type: integer
      - in: query
        name: limit
        type: integer
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    page, limit = parse_pagination()
    query = session.query(Product)
    total = query.count()
    rows = query.order_by(Product.name.asc()).offset((page - 1) * limit).limit(limit).all()
    return jsonify(
        {
            "data": products_out_schema.dump(rows),
            "meta": {"page": page, "limit": limit, "total": total},
        }
    )


@bp.post("/cart")
@access_token_required()
def add_to_cart():
    """
    Add a product to the caller's cart
    ---
    tags:
      - Shop
    consumes:
      - application/json
    parameters:
      - in: header
        name: access_token
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            product_id: { type: string }
            qty: { type: integer }
    responses:
      201: { description: Created }
      401: { description: Unauthorized }
      404: { description: Product not found }
      422: { description: Validation error }
    """
    data = add_to_cart_schema.load(request.get_json(silent=True) or {})
    if storage.get(Product, data.product_id) is None:
        raise not_found("Product not found")

    storage.new(CartItem(user_id=g.current_user_id, product_id=data.product_id, qty=data.qty))
    storage.save()
    return jsonify(
        {
            "status": 201,
            "message": "You have successfully added item into a cart",
        }
    ), 201


@bp.get("/cart/<user_id>")
@access_token_required()
def get_cart(user_id: str):
    """
    List the items in a cart
    ---
    tags:
      - Shop
    parameters:
      - in: header
        name: access_token
        type: string
        required: true
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
      403: { description: Someone else's cart }
    """
    if user_id != g.current_user_id:
        raise forbidden("Forbidden: not your cart.")
    rows = (
        storage.get_session()
        .query(CartItem)
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.created_at.asc())
        .all()
    )
    return jsonify(
        {
            "status": 200,
            "message": "Successfully get data",
            "data": cart_items_out_schema.dump(rows),
        }
    ), 200


@bp.post("/checkout")
@access_token_required()
def checkout():
    """
    Total the caller's cart
    ---
    tags:
      - Shop
    parameters:
      - in: header
        name: access_token
        type: string
        required: true
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
      422: { description: Cart is empty }
    """
    session = storage.get_session()
    items, total = (
        session.query(func.count(CartItem.id), func.sum(Product.price * CartItem.qty))
        .select_from(CartItem)
        .join(Product, Product.id == CartItem.product_id)
        .filter(CartItem.user_id == g.current_user_id)
        .one()
    )
    if not items:
        raise validation_error("Your cart is empty.")

    total_price = Decimal(str(total)).quantize(Decimal("0.01"))
    return jsonify(
        {
            "status": 200,
            "total_price": str(total_price),
            "message": f"Checkout of {total_price} completed successfully",
        }
    ), 200
