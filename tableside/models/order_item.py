from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from tableside.core.database import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), index=True, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    # Snapshot of the menu entry at order time. Plain column, no foreign key.
    menu_item_id = Column(Integer, nullable=True)
    name = Column(String, nullable=False, default="")
    category = Column(String, nullable=True)

    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(String(32), nullable=False)
    line_total = Column(String(32), nullable=False)

    order = relationship("Order", back_populates="items")
