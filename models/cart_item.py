from sqlalchemy import Column, String, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class CartItem(BaseModel, Base):
    """One line of a user's cart (a row of `user_product`)."""
    __tablename__ = "user_product"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)
    qty = Column(Integer, nullable=False, default=1)

    user = relationship("User", back_populates="cart_items")
    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("qty >= 1", name="ck_user_product_qty_positive"),
    )
