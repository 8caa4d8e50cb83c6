# marketplace/api/routes/admin.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from marketplace.core.security import require_admin
from marketplace.db.base import get_db
from marketplace.db.models.category import Category
from marketplace.db.models.customer import Customer
from marketplace.db.models.expert import Expert
from marketplace.db.models.specialization import Specialization
from marketplace.db.models.testimonial import Testimonial
from marketplace.db.models.user import User
from marketplace.schemas.admin import AdminSummaryResponse
from marketplace.schemas.user import Role, UserListItem, UserRoleUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


# -------------------------
# 1. List users (filterable)
# -------------------------
@router.get("/users", response_model=List[UserListItem])
def list_users(
    role: Optional[Role] = Query(None, description="customer/member/admin"),
    search: Optional[str] = Query(None, description="Matches name, email or phone number"),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    if search:
        like = f"%{search.strip()}%"
        q = q.filter(User.name.ilike(like) | User.email.ilike(like) | User.phone_number.ilike(like))

    offset = (page - 1) * per_page
    return q.order_by(User.id).offset(offset).limit(per_page).all()


# --------------------------------------------------
# 2. Change a user's role
# --------------------------------------------------
@router.put("/users/{user_id}/role", response_model=UserListItem)
def set_user_role(
    user_id: int,
    role_in: UserRoleUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == admin.id and role_in.role != "admin":
        raise HTTPException(status_code=400, detail="Admins cannot remove their own admin role")

    previous = user.role
    user.role = role_in.role
    db.commit()
    db.refresh(user)

    logger.info("User %s role changed %s -> %s by admin %s", user.id, previous, user.role, admin.id)
    return user


# --------------------------------------------------
# 3. Platform summary (dashboard KPIs)
# --------------------------------------------------
@router.get("/summary", response_model=AdminSummaryResponse)
def admin_summary(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    role_counts = dict(db.query(User.role, func.count(User.id)).group_by(User.role).all())

    total_users = db.query(func.count(User.id)).scalar() or 0
    total_experts = db.query(func.count(Expert.id)).scalar() or 0
    verified_experts = (
        db.query(func.count(Expert.id)).filter(Expert.verification_status == "verified").scalar() or 0
    )
    customer_profiles = db.query(func.count(Customer.id)).scalar() or 0
    total_categories = db.query(func.count(Category.id)).scalar() or 0
    active_categories = db.query(func.count(Category.id)).filter(Category.is_active == True).scalar() or 0
    total_specializations = db.query(func.count(Specialization.id)).scalar() or 0
    total_testimonials = db.query(func.count(Testimonial.id)).scalar() or 0

    return AdminSummaryResponse(
        total_users=int(total_users),
        total_customers=int(role_counts.get("customer", 0)),
        total_members=int(role_counts.get("member", 0)),
        total_admins=int(role_counts.get("admin", 0)),
        total_experts=int(total_experts),
        verified_experts=int(verified_experts),
        customer_profiles=int(customer_profiles),
        total_categories=int(total_categories),
        active_categories=int(active_categories),
        total_specializations=int(total_specializations),
        total_testimonials=int(total_testimonials),
    )
