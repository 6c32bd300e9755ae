from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from expense_tracker.crud import crud_category
from expense_tracker.models import category as category_models
from expense_tracker.db.core import get_db

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
)


@router.get("/", response_model=List[category_models.CategoryResponse])
def read_categories(db: Session = Depends(get_db)):
    """
    Retrieve all categories.
    """
    return crud_category.read_db_categories(db=db)


@router.get("/{category_id}", response_model=category_models.CategoryResponse)
def read_category(category_id: int, db: Session = Depends(get_db)):
    db_category = crud_category.read_db_category(db=db, category_id=category_id)
    if db_category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return db_category
