from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from tableside.core.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    table_number = Column(Integer, nullable=False, index=True)
    customer_name = Column(String, nullable=False)

    total = Column(String(32), nullable=False)  # decimal as text
    # pending / preparing / ready / delivered
    status = Column(String(20), nullable=False, default="pending")

    # display strings sent by the ordering device
    timestamp = Column(String(32), nullable=False)
    date = Column(String(32), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
        lazy="selectin",
    )
