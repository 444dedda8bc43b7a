import enum
from uuid import uuid4

from sqlalchemy import Column, Integer, String, DateTime, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base


class PaymentMethod(str, enum.Enum):
    CASH = "CASH"
    CARD = "CARD"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), nullable=False, unique=True, index=True, default=lambda: str(uuid4()))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    payment_method = Column(SAEnum(PaymentMethod, name="payment_method"), nullable=True)

    # все позиции заказа, включая дочерние позиции меню
    items = relationship("OrderItem", back_populates="order", cascade="all, delete")

    @property
    def is_completed(self) -> bool:
        return self.paid_at is not None
