from fastapi import APIRouter
from pydantic import BaseModel
from typing import Optional

from services.category_service import add_category, delete_category, list_categories, update_category
from services.forecast_dto import to_dict

router = APIRouter()


class CategoryCreate(BaseModel):
    name: str
    color: str = "#6b7280"


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None


@router.get("/categories")
def get_categories():
    return {"categories": [to_dict(c) for c in list_categories()]}


@router.post("/categories")
def create_category(category: CategoryCreate):
    if not category.name.strip():
        return {"success": False, "error": "Category name is required."}
    return {"success": True, "id": add_category(category.name, category.color)}


@router.put("/categories/{category_id}")
def edit_category(category_id: str, category: CategoryUpdate):
    return {"success": update_category(category_id, name=category.name, color=category.color)}


@router.delete("/categories/{category_id}")
def remove_category(category_id: str):
    return {"success": delete_category(category_id)}
