# marketplace/api/routes/categories.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import asc, desc, func
from sqlalchemy.orm import Session

from marketplace.core.security import require_admin
from marketplace.db.base import get_db
from marketplace.db.models.category import Category
from marketplace.db.models.specialization import Specialization
from marketplace.db.models.user import User
from marketplace.schemas.category import (
    CategoryCreate,
    CategoryDeleteResponse,
    CategoryListResponse,
    CategoryMiniResponse,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryUpdate,
    CategoryWithExpertCount,
)
from marketplace.schemas.common import Pagination

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])

SORTABLE_FIELDS = {
    "name": Category.name,
    "created_at": Category.created_at,
    "updated_at": Category.updated_at,
}


def _to_tree(category: Category, active_children_only: bool = True) -> CategoryTreeResponse:
    children = [
        CategoryMiniResponse.model_validate(child)
        for child in category.children
        if child.is_active or not active_children_only
    ]
    return CategoryTreeResponse(
        **CategoryResponse.model_validate(category).model_dump(),
        parent=CategoryMiniResponse.model_validate(category.parent) if category.parent else None,
        children=children,
    )


def _get_category_or_404(db: Session, category_id: int, detail: str = "Category not found") -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail=detail)
    return category


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None):
    q = db.query(Category).filter(func.lower(Category.name) == name.strip().lower())
    if exclude_id is not None:
        q = q.filter(Category.id != exclude_id)
    if q.first():
        raise HTTPException(status_code=400, detail="Category with this name already exists")


def _is_descendant(db: Session, candidate_id: int, ancestor_id: int) -> bool:
    """True when ``candidate_id`` sits somewhere below ``ancestor_id``."""
    seen = set()
    current = db.query(Category).filter(Category.id == candidate_id).first()
    while current is not None and current.parent_category_id is not None:
        if current.parent_category_id == ancestor_id:
            return True
        if current.id in seen:
            break
        seen.add(current.id)
        current = current.parent
    return False


# -------------------------
# Public reads
# -------------------------
@router.get("", response_model=CategoryListResponse)
def list_categories(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort_by: str = Query("name", pattern="^(name|created_at|updated_at)$"),
    sort_order: str = Query("asc", pattern="^(asc|desc)$"),
    parent_id: Optional[int] = Query(None),
    active_only: bool = Query(True),
    db: Session = Depends(get_db),
):
    q = db.query(Category)
    if active_only:
        q = q.filter(Category.is_active == True)
    if parent_id is not None:
        q = q.filter(Category.parent_category_id == parent_id)

    column = SORTABLE_FIELDS[sort_by]
    ordering = desc(column) if sort_order == "desc" else asc(column)

    total = q.count()
    offset = (page - 1) * limit
    rows = q.order_by(ordering, Category.id).offset(offset).limit(limit).all()

    return CategoryListResponse(
        categories=[_to_tree(c, active_only) for c in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/roots", response_model=List[CategoryTreeResponse])
def list_root_categories(db: Session = Depends(get_db)):
    rows = (
        db.query(Category)
        .filter(Category.parent_category_id.is_(None), Category.is_active == True)
        .order_by(Category.name)
        .all()
    )
    return [_to_tree(c) for c in rows]


@router.get("/with-expert-count", response_model=List[CategoryWithExpertCount])
def list_categories_with_expert_count(db: Session = Depends(get_db)):
    expert_count = (
        db.query(func.count(Specialization.id))
        .filter(Specialization.category_id == Category.id)
        .correlate(Category)
        .scalar_subquery()
    )
    rows = (
        db.query(Category, expert_count.label("expert_count"))
        .filter(Category.is_active == True)
        .order_by(Category.name)
        .all()
    )
    return [
        CategoryWithExpertCount(
            **CategoryMiniResponse.model_validate(cat).model_dump(),
            expert_count=int(count or 0),
        )
        for cat, count in rows
    ]


@router.get("/{parent_id}/children", response_model=List[CategoryTreeResponse])
def list_categories_by_parent(
    parent_id: int,
    active_only: bool = Query(True),
    db: Session = Depends(get_db),
):
    q = db.query(Category).filter(Category.parent_category_id == parent_id)
    if active_only:
        q = q.filter(Category.is_active == True)
    return [_to_tree(c, active_only) for c in q.order_by(Category.name).all()]


@router.get("/{category_id}", response_model=CategoryTreeResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return _to_tree(_get_category_or_404(db, category_id))


# -------------------------
# Admin writes
# -------------------------
@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(
    category_in: CategoryCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    if category_in.parent_category_id is not None:
        _get_category_or_404(db, category_in.parent_category_id, "Parent category not found")
    _ensure_unique_name(db, category_in.name)

    category = Category(
        name=category_in.name.strip(),
        description=category_in.description,
        parent_category_id=category_in.parent_category_id,
        is_primary=category_in.is_primary,
    )
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info("Category %s (%s) created by user %s", category.id, category.name, admin.id)
    return category


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    update_data: CategoryUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    category = _get_category_or_404(db, category_id)
    changes = update_data.model_dump(exclude_unset=True)

    parent_id = changes.get("parent_category_id")
    if parent_id is not None:
        if parent_id == category_id:
            raise HTTPException(status_code=400, detail="Category cannot be its own parent")
        _get_category_or_404(db, parent_id, "Parent category not found")
        if _is_descendant(db, parent_id, category_id):
            raise HTTPException(status_code=400, detail="Category cannot be moved under its own subcategory")

    if "name" in changes:
        _ensure_unique_name(db, changes["name"], exclude_id=category_id)
        changes["name"] = changes["name"].strip()

    for field, value in changes.items():
        setattr(category, field, value)

    db.commit()
    db.refresh(category)

    logger.info("Category %s updated by user %s: %s", category.id, admin.id, sorted(changes))
    return category


@router.delete("/{category_id}", response_model=CategoryDeleteResponse)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    has_children = db.query(Category.id).filter(Category.parent_category_id == category_id).first()
    if has_children:
        raise HTTPException(status_code=400, detail="Cannot delete category with subcategories")

    has_specializations = (
        db.query(Specialization.id).filter(Specialization.category_id == category_id).first()
    )
    if has_specializations:
        raise HTTPException(status_code=400, detail="Cannot delete category with active specializations")

    category = _get_category_or_404(db, category_id)
    deleted = CategoryResponse.model_validate(category)

    db.delete(category)
    db.commit()

    logger.info("Category %s deleted by user %s", category_id, admin.id)
    return CategoryDeleteResponse(success=True, deleted_category=deleted)
