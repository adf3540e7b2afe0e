from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tableside.core.database import MAX_INTEGER
from tableside.core.errors import InternalError, NotFoundError, ValidationError
from tableside.models.menu_item import MenuItem
from tableside.services.pricing import format_amount, parse_amount
from tableside.services.uploads import ImageStore

logger = logging.getLogger(__name__)

DEFAULT_MENU = [
    {"name": "Margherita Pizza", "price": "12.99", "category": "Pizza", "description": "Fresh tomato sauce, mozzarella, basil"},
    {"name": "Chicken Caesar Salad", "price": "9.99", "category": "Salads", "description": "Grilled chicken, romaine, parmesan, croutons"},
    {"name": "Beef Burger", "price": "14.99", "category": "Burgers", "description": "Angus beef patty, lettuce, tomato, onion"},
    {"name": "Pasta Carbonara", "price": "13.99", "category": "Pasta", "description": "Spaghetti with eggs, cheese, pancetta"},
    {"name": "Fish & Chips", "price": "16.99", "category": "Main Course", "description": "Beer battered cod with fries"},
    {"name": "Chocolate Cake", "price": "6.99", "category": "Desserts", "description": "Rich chocolate layer cake"},
    {"name": "Coca Cola", "price": "2.99", "category": "Beverages", "description": "Classic cola drink"},
    {"name": "Coffee", "price": "3.99", "category": "Beverages", "description": "Freshly brewed coffee"},
]


@dataclass
class MenuItemFields:
    name: Optional[str]
    price: Optional[str]
    category: Optional[str]
    description: Optional[str]

    def cleaned(self) -> "MenuItemFields":
        values = {}
        for field, label in (
            ("name", "Name"),
            ("category", "Category"),
            ("description", "Description"),
        ):
            value = (getattr(self, field) or "").strip()
            if not value:
                raise ValidationError(f"{label} is required")
            values[field] = value
        values["price"] = format_amount(parse_amount(self.price, field="Price"))
        return MenuItemFields(**values)


class MenuCatalog:
    """CRUD over menu items; images go through an ``ImageStore``."""

    def __init__(self, db: Session, images: Optional[ImageStore] = None) -> None:
        self.db = db
        self.images = images or ImageStore()

    def list_all(self) -> list[MenuItem]:
        return self.db.query(MenuItem).order_by(MenuItem.id.asc()).all()

    def get(self, item_id: int) -> MenuItem:
        if not 0 < item_id <= MAX_INTEGER:
            raise NotFoundError("Menu item not found")
        item = self.db.query(MenuItem).filter(MenuItem.id == item_id).first()
        if not item:
            raise NotFoundError("Menu item not found")
        return item

    def create(
        self,
        fields: MenuItemFields,
        image: Optional[UploadFile] = None,
        *,
        image_url: Optional[str] = None,
    ) -> MenuItem:
        data = fields.cleaned()
        stored_url = self.images.save(image) if image is not None else None

        item = MenuItem(
            name=data.name,
            price=data.price,
            category=data.category,
            description=data.description,
            image_url=stored_url or image_url,
        )
        try:
            self.db.add(item)
            self.db.commit()
            self.db.refresh(item)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.images.remove(stored_url)
            logger.exception("menu item insert failed name=%s", data.name)
            raise InternalError("Failed to create menu item") from exc

        logger.info("menu item created id=%s name=%s", item.id, item.name, extra={"menu_item_id": item.id})
        return item

    def update(self, item_id: int, fields: MenuItemFields, image: Optional[UploadFile] = None) -> MenuItem:
        item = self.get(item_id)
        data = fields.cleaned()
        previous_image = item.image_url
        stored_url = self.images.save(image) if image is not None else None

        item.name = data.name
        item.price = data.price
        item.category = data.category
        item.description = data.description
        if stored_url:
            item.image_url = stored_url

        try:
            self.db.commit()
            self.db.refresh(item)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.images.remove(stored_url)
            logger.exception("menu item update failed id=%s", item_id)
            raise InternalError("Failed to update menu item") from exc

        if stored_url and previous_image and previous_image != stored_url:
            self.images.remove(previous_image)

        logger.info("menu item updated id=%s", item.id, extra={"menu_item_id": item.id})
        return item

    def delete(self, item_id: int) -> None:
        item = self.get(item_id)
        try:
            self.db.delete(item)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("menu item delete failed id=%s", item_id)
            raise InternalError("Failed to delete menu item") from exc
        logger.info("menu item deleted id=%s", item_id, extra={"menu_item_id": item_id})


def seed_default_menu(db: Session) -> int:
    if db.query(MenuItem.id).first() is not None:
        return 0
    for entry in DEFAULT_MENU:
        db.add(MenuItem(image_url=None, **entry))
    db.commit()
    logger.info("seeded default menu items=%s", len(DEFAULT_MENU))
    return len(DEFAULT_MENU)
