from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from affiliate_ops.core.database import get_db
from affiliate_ops.models.account import Account
from affiliate_ops.models.category import Category
from affiliate_ops.schemas.category import (
    Category as CategorySchema,
    CategoryCreate,
    CategoryUpdate,
    CategoryWithCount,
)

router = APIRouter(prefix="/api/categories", tags=["categories"])


def _get_category_or_404(db: Session, category_id: str) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.get("/", response_model=List[CategoryWithCount])
def list_categories(db: Session = Depends(get_db)):
    """Categories ordered by name, with how many accounts carry each."""
    counts = dict(
        db.query(Account.category_id, func.count(Account.id))
        .filter(Account.category_id.isnot(None))
        .group_by(Account.category_id)
        .all()
    )
    categories = db.query(Category).order_by(Category.name).all()
    return [
        CategoryWithCount(
            id=c.id,
            name=c.name,
            description=c.description,
            created_at=c.created_at,
            account_count=counts.get(c.id, 0),
        )
        for c in categories
    ]


@router.post("/", response_model=CategorySchema, status_code=status.HTTP_201_CREATED)
def create_category(category_in: CategoryCreate, db: Session = Depends(get_db)):
    if db.query(Category).filter(Category.name == category_in.name).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category name already exists")
    category = Category(**category_in.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@router.put("/{category_id}", response_model=CategorySchema)
def update_category(category_id: str, category_update: CategoryUpdate, db: Session = Depends(get_db)):
    category = _get_category_or_404(db, category_id)
    updates = category_update.model_dump(exclude_unset=True)
    if "name" in updates:
        clash = db.query(Category).filter(Category.name == updates["name"], Category.id != category_id).first()
        if clash:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category name already exists")
    for field, value in updates.items():
        setattr(category, field, value)
    db.commit()
    db.refresh(category)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: str, db: Session = Depends(get_db)):
    """Delete a category. Its accounts stay, uncategorised."""
    category = _get_category_or_404(db, category_id)
    db.delete(category)
    db.commit()
