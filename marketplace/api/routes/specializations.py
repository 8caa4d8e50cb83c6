# marketplace/api/routes/specializations.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from marketplace.core.security import get_current_user, is_admin
from marketplace.db.base import get_db
from marketplace.db.models.category import Category
from marketplace.db.models.expert import Expert
from marketplace.db.models.specialization import Specialization
from marketplace.db.models.user import User
from marketplace.schemas.common import Pagination
from marketplace.schemas.specialization import (
    SpecializationCreate,
    SpecializationDeleteResponse,
    SpecializationDetail,
    SpecializationListResponse,
    SpecializationResponse,
    SpecializationUpdate,
    SpecializationWithCategory,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/specializations", tags=["specializations"])

# primary first, then oldest
DEFAULT_ORDERING = (desc(Specialization.is_primary), asc(Specialization.created_at), asc(Specialization.id))


def _get_specialization_or_404(db: Session, specialization_id: int) -> Specialization:
    specialization = db.query(Specialization).filter(Specialization.id == specialization_id).first()
    if not specialization:
        raise HTTPException(status_code=404, detail="Specialization not found")
    return specialization


def _ensure_can_manage(current_user: User, expert: Expert):
    if not is_admin(current_user) and expert.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="You can only manage your own specializations")


def _clear_primary(db: Session, expert_id: int, keep_id: Optional[int] = None):
    q = db.query(Specialization).filter(
        Specialization.expert_id == expert_id,
        Specialization.is_primary == True,
    )
    if keep_id is not None:
        q = q.filter(Specialization.id != keep_id)
    q.update({Specialization.is_primary: False}, synchronize_session="fetch")


# -------------------------
# Public reads
# -------------------------
@router.get("", response_model=SpecializationListResponse)
def list_specializations(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    expert_id: Optional[int] = Query(None),
    category_id: Optional[int] = Query(None),
    is_primary: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
):
    q = db.query(Specialization)
    if expert_id is not None:
        q = q.filter(Specialization.expert_id == expert_id)
    if category_id is not None:
        q = q.filter(Specialization.category_id == category_id)
    if is_primary is not None:
        q = q.filter(Specialization.is_primary == is_primary)

    total = q.count()
    offset = (page - 1) * limit
    rows = q.order_by(*DEFAULT_ORDERING).offset(offset).limit(limit).all()

    return SpecializationListResponse(
        specializations=[SpecializationDetail.model_validate(s) for s in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/expert/{expert_id}", response_model=List[SpecializationWithCategory])
def list_expert_specializations(expert_id: int, db: Session = Depends(get_db)):
    return (
        db.query(Specialization)
        .filter(Specialization.expert_id == expert_id)
        .order_by(*DEFAULT_ORDERING)
        .all()
    )


@router.get("/expert/{expert_id}/primary", response_model=Optional[SpecializationWithCategory])
def get_primary_specialization(expert_id: int, db: Session = Depends(get_db)):
    return (
        db.query(Specialization)
        .filter(Specialization.expert_id == expert_id, Specialization.is_primary == True)
        .first()
    )


@router.get("/category/{category_id}", response_model=List[SpecializationDetail])
def list_category_specializations(category_id: int, db: Session = Depends(get_db)):
    return (
        db.query(Specialization)
        .filter(Specialization.category_id == category_id)
        .order_by(*DEFAULT_ORDERING)
        .all()
    )


@router.get("/{specialization_id}", response_model=SpecializationDetail)
def get_specialization(specialization_id: int, db: Session = Depends(get_db)):
    return _get_specialization_or_404(db, specialization_id)


# -------------------------
# Expert-managed writes
# -------------------------
@router.post("", response_model=SpecializationResponse, status_code=201)
def create_specialization(
    specialization_in: SpecializationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    category = (
        db.query(Category)
        .filter(Category.id == specialization_in.category_id, Category.is_active == True)
        .first()
    )
    if not category:
        raise HTTPException(status_code=404, detail="Category not found or inactive")

    expert = db.query(Expert).filter(Expert.id == specialization_in.expert_id).first()
    if not expert:
        raise HTTPException(status_code=404, detail="Expert not found")
    _ensure_can_manage(current_user, expert)

    existing = (
        db.query(Specialization)
        .filter(
            Specialization.expert_id == specialization_in.expert_id,
            Specialization.category_id == specialization_in.category_id,
        )
        .first()
    )
    if existing:
        raise HTTPException(status_code=400, detail="Specialization already exists")

    if specialization_in.is_primary:
        _clear_primary(db, specialization_in.expert_id)

    specialization = Specialization(
        expert_id=specialization_in.expert_id,
        category_id=specialization_in.category_id,
        is_primary=specialization_in.is_primary,
    )
    db.add(specialization)
    db.commit()
    db.refresh(specialization)

    logger.info(
        "Specialization %s created: expert %s in category %s",
        specialization.id, specialization.expert_id, specialization.category_id,
    )
    return specialization


@router.put("/{specialization_id}", response_model=SpecializationResponse)
def update_specialization(
    specialization_id: int,
    update_data: SpecializationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    specialization = _get_specialization_or_404(db, specialization_id)
    _ensure_can_manage(current_user, specialization.expert)

    if update_data.is_primary:
        _clear_primary(db, specialization.expert_id, keep_id=specialization.id)
    if update_data.is_primary is not None:
        specialization.is_primary = update_data.is_primary

    db.commit()
    db.refresh(specialization)
    return specialization


@router.put("/{specialization_id}/primary", response_model=SpecializationResponse)
def set_primary_specialization(
    specialization_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    specialization = _get_specialization_or_404(db, specialization_id)
    _ensure_can_manage(current_user, specialization.expert)

    _clear_primary(db, specialization.expert_id, keep_id=specialization.id)
    specialization.is_primary = True

    db.commit()
    db.refresh(specialization)

    logger.info("Specialization %s is now primary for expert %s", specialization.id, specialization.expert_id)
    return specialization


@router.delete("/{specialization_id}", response_model=SpecializationDeleteResponse)
def delete_specialization(
    specialization_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    specialization = _get_specialization_or_404(db, specialization_id)
    _ensure_can_manage(current_user, specialization.expert)

    deleted = SpecializationResponse.model_validate(specialization)
    db.delete(specialization)
    db.commit()

    logger.info("Specialization %s deleted by user %s", specialization_id, current_user.id)
    return SpecializationDeleteResponse(success=True, deleted_specialization=deleted)
