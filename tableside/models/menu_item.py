from sqlalchemy import Column, Integer, String, Text

from tableside.core.database import Base


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    price = Column(String(32), nullable=False)  # decimal as text, e.g. "12.99"
    category = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    image_url = Column(String, nullable=True)
