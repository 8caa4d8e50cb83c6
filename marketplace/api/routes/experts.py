# marketplace/api/routes/experts.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import asc, desc, func, or_, select
from sqlalchemy.orm import Session

from marketplace.core.security import get_current_user, is_admin, require_admin
from marketplace.db.base import get_db
from marketplace.db.models.expert import Expert
from marketplace.db.models.specialization import Specialization
from marketplace.db.models.user import User
from marketplace.db.types import array_overlaps
from marketplace.schemas.common import Pagination
from marketplace.schemas.expert import (
    AccountStatus,
    ExpertCreate,
    ExpertDeleteResponse,
    ExpertListResponse,
    ExpertRatingUpdate,
    ExpertResponse,
    ExpertStatistics,
    ExpertStatusUpdate,
    ExpertUpdate,
    ExpertWithUserResponse,
    Language,
    VerificationStatus,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/experts", tags=["experts"])

SORTABLE_FIELDS = {
    "first_name": Expert.first_name,
    "last_name": Expert.last_name,
    "created_at": Expert.created_at,
    "updated_at": Expert.updated_at,
    "average_rating": Expert.average_rating,
    "total_sessions": Expert.total_sessions,
}
SORT_PATTERN = "^(" + "|".join(SORTABLE_FIELDS) + ")$"


def _get_expert_or_404(db: Session, expert_id: int) -> Expert:
    expert = db.query(Expert).filter(Expert.id == expert_id).first()
    if not expert:
        raise HTTPException(status_code=404, detail="Expert not found")
    return expert


def _apply_basic_filters(q, search_keyword, account_status, city, state):
    if search_keyword:
        like = f"%{search_keyword.strip()}%"
        q = q.filter(
            or_(
                Expert.first_name.ilike(like),
                Expert.last_name.ilike(like),
                Expert.bio.ilike(like),
            )
        )
    if account_status:
        q = q.filter(Expert.account_status == account_status)
    if city:
        q = q.filter(Expert.city.ilike(f"%{city.strip()}%"))
    if state:
        q = q.filter(Expert.state.ilike(f"%{state.strip()}%"))
    return q


def _paginate(q, page: int, limit: int, sort_by: str, sort_order: str) -> ExpertListResponse:
    column = SORTABLE_FIELDS[sort_by]
    ordering = desc(column) if sort_order == "desc" else asc(column)

    total = q.count()
    offset = (page - 1) * limit
    rows = q.order_by(ordering, Expert.id).offset(offset).limit(limit).all()

    return ExpertListResponse(
        experts=[ExpertWithUserResponse.model_validate(e) for e in rows],
        pagination=Pagination.build(page, limit, total),
    )


# -------------------------
# Public reads
# -------------------------
@router.get("", response_model=ExpertListResponse)
def list_experts(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category_id: Optional[int] = Query(None),
    sort_by: str = Query("created_at", pattern=SORT_PATTERN),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    search_keyword: Optional[str] = Query(None, description="Matches first name, last name and bio"),
    account_status: Optional[AccountStatus] = Query(None),
    verification_status: Optional[VerificationStatus] = Query(None),
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    max_rating: Optional[float] = Query(None, ge=0, le=5),
    min_rate: Optional[float] = Query(None, ge=0),
    max_rate: Optional[float] = Query(None, ge=0),
    skills: Optional[List[str]] = Query(None, description="Experts having any of these skills"),
    languages: Optional[List[Language]] = Query(None, description="Experts speaking any of these languages"),
    min_years_of_experience: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    """
    Browse experts with filters, sorting and pagination.
    All filters are AND-combined; `skills` and `languages` match on overlap.
    """
    q = _apply_basic_filters(db.query(Expert), search_keyword, account_status, city, state)

    if verification_status:
        q = q.filter(Expert.verification_status == verification_status)

    if category_id is not None:
        experts_in_category = select(Specialization.expert_id).where(Specialization.category_id == category_id)
        q = q.filter(Expert.id.in_(experts_in_category))

    dialect = db.get_bind().dialect.name
    if skills:
        q = q.filter(array_overlaps(Expert.skills, skills, dialect))
    if languages:
        q = q.filter(array_overlaps(Expert.languages, languages, dialect))

    if min_rating is not None:
        q = q.filter(Expert.average_rating >= min_rating)
    if max_rating is not None:
        q = q.filter(Expert.average_rating <= max_rating)
    if min_rate is not None:
        q = q.filter(Expert.per_hour_rate >= min_rate)
    if max_rate is not None:
        q = q.filter(Expert.per_hour_rate <= max_rate)
    if min_years_of_experience is not None:
        q = q.filter(Expert.years_of_experience >= min_years_of_experience)

    return _paginate(q, page, limit, sort_by, sort_order)


@router.get("/verified", response_model=ExpertListResponse)
def list_verified_experts(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort_by: str = Query("created_at", pattern=SORT_PATTERN),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    search_keyword: Optional[str] = Query(None),
    account_status: Optional[AccountStatus] = Query(None),
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    q = db.query(Expert).filter(Expert.verification_status == "verified")
    q = _apply_basic_filters(q, search_keyword, account_status, city, state)
    return _paginate(q, page, limit, sort_by, sort_order)


@router.get("/statistics", response_model=ExpertStatistics)
def expert_statistics(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    total = db.query(func.count(Expert.id)).scalar() or 0
    verified = db.query(func.count(Expert.id)).filter(Expert.verification_status == "verified").scalar() or 0
    pending = db.query(func.count(Expert.id)).filter(Expert.verification_status == "pending").scalar() or 0
    active = db.query(func.count(Expert.id)).filter(Expert.account_status == "active").scalar() or 0

    return ExpertStatistics(
        total_experts=int(total),
        verified_experts=int(verified),
        pending_experts=int(pending),
        active_experts=int(active),
        rejected_experts=int(total - verified - pending),
        inactive_experts=int(total - active),
    )


@router.get("/by-user/{user_id}", response_model=ExpertWithUserResponse)
def get_expert_by_user(user_id: int, db: Session = Depends(get_db)):
    expert = db.query(Expert).filter(Expert.user_id == user_id).first()
    if not expert:
        raise HTTPException(status_code=404, detail="Expert not found")
    return expert


@router.get("/{expert_id}", response_model=ExpertResponse)
def get_expert(expert_id: int, db: Session = Depends(get_db)):
    return _get_expert_or_404(db, expert_id)


@router.get("/{expert_id}/with-user", response_model=ExpertWithUserResponse)
def get_expert_with_user(expert_id: int, db: Session = Depends(get_db)):
    return _get_expert_or_404(db, expert_id)


# -------------------------
# Profile management
# -------------------------
@router.post("", response_model=ExpertResponse, status_code=201)
def create_expert(
    expert_in: ExpertCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # Users create their own profile; admins may create one for anybody
    if not is_admin(current_user) and current_user.id != expert_in.user_id:
        raise HTTPException(status_code=403, detail="You can only create your own expert profile")

    owner = db.query(User).filter(User.id == expert_in.user_id).first()
    if not owner:
        raise HTTPException(status_code=404, detail="User not found")

    existing = db.query(Expert).filter(Expert.user_id == expert_in.user_id).first()
    if existing:
        raise HTTPException(status_code=400, detail="Expert profile already exists for this user")

    expert = Expert(
        **expert_in.model_dump(mode="json"),
        verification_status="pending",
        account_status="active",
    )
    db.add(expert)
    db.commit()
    db.refresh(expert)

    logger.info("Expert profile %s created for user %s", expert.id, expert.user_id)
    return expert


@router.put("/{expert_id}", response_model=ExpertResponse)
def update_expert(
    expert_id: int,
    update_data: ExpertUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expert = _get_expert_or_404(db, expert_id)

    if not is_admin(current_user) and current_user.id != expert.user_id:
        raise HTTPException(status_code=403, detail="You can only update your own expert profile")

    changes = update_data.model_dump(mode="json", exclude_unset=True)
    if not is_admin(current_user):
        changes.pop("account_status", None)
        changes.pop("verification_status", None)

    for field, value in changes.items():
        setattr(expert, field, value)

    db.commit()
    db.refresh(expert)

    logger.info("Expert %s updated by user %s: %s", expert.id, current_user.id, sorted(changes))
    return expert


@router.put("/{expert_id}/status", response_model=ExpertResponse)
def update_expert_status(
    expert_id: int,
    status_in: ExpertStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    expert = _get_expert_or_404(db, expert_id)

    for field, value in status_in.model_dump(exclude_none=True).items():
        setattr(expert, field, value)

    db.commit()
    db.refresh(expert)

    logger.info(
        "Expert %s status set to account=%s verification=%s by admin %s",
        expert.id, expert.account_status, expert.verification_status, admin.id,
    )
    return expert


@router.put("/{expert_id}/rating", response_model=ExpertResponse)
def update_expert_rating(
    expert_id: int,
    rating_in: ExpertRatingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expert = _get_expert_or_404(db, expert_id)
    expert.average_rating = rating_in.average_rating
    expert.total_sessions = rating_in.total_sessions

    db.commit()
    db.refresh(expert)
    return expert


@router.delete("/{expert_id}", response_model=ExpertDeleteResponse)
def delete_expert(
    expert_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    has_specializations = (
        db.query(Specialization.id).filter(Specialization.expert_id == expert_id).first()
    )
    if has_specializations:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete expert with active specializations. Remove specializations first.",
        )

    expert = _get_expert_or_404(db, expert_id)
    deleted = ExpertResponse.model_validate(expert)

    db.delete(expert)
    db.commit()

    logger.info("Expert %s deleted by admin %s", expert_id, admin.id)
    return ExpertDeleteResponse(success=True, deleted_expert=deleted)
