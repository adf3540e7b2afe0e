from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from sqlalchemy.orm import Session

from tableside.core.database import get_db
from tableside.core.errors import ValidationError
from tableside.deps import require_admin_user
from tableside.models.admin_user import AdminUser
from tableside.models.menu_item import MenuItem
from tableside.services.menu import MenuCatalog, MenuItemFields
from tableside.services.uploads import ImageStore, get_image_store

router = APIRouter(prefix="/api/menu", tags=["menu"])


def menu_item_to_dict(item: MenuItem) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "price": item.price,
        "category": item.category,
        "description": item.description,
        "imageUrl": item.image_url,
    }


def get_menu_catalog(
    db: Session = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
) -> MenuCatalog:
    return MenuCatalog(db, images=images)


def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


@router.get("")
def list_menu(response: Response, catalog: MenuCatalog = Depends(get_menu_catalog)):
    response.headers["Cache-Control"] = "no-store"
    return {"menuItems": [menu_item_to_dict(item) for item in catalog.list_all()]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_menu_item(
    name: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    catalog: MenuCatalog = Depends(get_menu_catalog),
    _user: AdminUser = Depends(require_admin_user),
):
    if not _has_file(image):
        raise ValidationError("Image is required for new menu items")

    item = catalog.create(
        MenuItemFields(name=name, price=price, category=category, description=description),
        image=image,
    )
    return {"menuItem": menu_item_to_dict(item)}


@router.put("/{item_id}")
def update_menu_item(
    item_id: int,
    name: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    catalog: MenuCatalog = Depends(get_menu_catalog),
    _user: AdminUser = Depends(require_admin_user),
):
    item = catalog.update(
        item_id,
        MenuItemFields(name=name, price=price, category=category, description=description),
        image=image if _has_file(image) else None,
    )
    return {"menuItem": menu_item_to_dict(item)}


@router.delete("/{item_id}")
def delete_menu_item(
    item_id: int,
    catalog: MenuCatalog = Depends(get_menu_catalog),
    _user: AdminUser = Depends(require_admin_user),
):
    catalog.delete(item_id)
    return {"success": True}
