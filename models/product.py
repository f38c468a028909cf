from sqlalchemy import Column, String, Numeric, CheckConstraint

from models.base_model import BaseModel, Base


class Product(BaseModel, Base):
    __tablename__ = "products"

    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_nonnegative"),
    )
