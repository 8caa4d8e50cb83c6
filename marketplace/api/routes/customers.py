# marketplace/api/routes/customers.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from marketplace.core.security import get_current_user, is_admin, require_admin
from marketplace.db.base import get_db
from marketplace.db.models.customer import Customer
from marketplace.db.models.user import User
from marketplace.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["customers"])


def _get_own_profile_or_404(db: Session, user: User) -> Customer:
    customer = db.query(Customer).filter(Customer.user_id == user.id).first()
    if not customer:
        raise HTTPException(status_code=404, detail="Customer profile not found")
    return customer


@router.post("", response_model=CustomerResponse, status_code=201)
def create_customer_profile(
    customer_in: CustomerCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = customer_in.user_id or current_user.id
    if user_id != current_user.id:
        if not is_admin(current_user):
            raise HTTPException(status_code=403, detail="You can only create your own customer profile")
        if not db.query(User).filter(User.id == user_id).first():
            raise HTTPException(status_code=404, detail="User not found")

    existing = db.query(Customer).filter(Customer.user_id == user_id).first()
    if existing:
        raise HTTPException(status_code=400, detail="Customer profile already exists for this user")

    customer = Customer(user_id=user_id, **customer_in.model_dump(exclude={"user_id"}))
    db.add(customer)
    db.commit()
    db.refresh(customer)

    logger.info("Customer profile %s created for user %s", customer.id, user_id)
    return customer


@router.get("/me", response_model=CustomerResponse)
def get_my_customer_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_own_profile_or_404(db, current_user)


@router.put("/me", response_model=CustomerResponse)
def update_my_customer_profile(
    update_data: CustomerUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    customer = _get_own_profile_or_404(db, current_user)
    for field, value in update_data.model_dump(exclude_unset=True).items():
        setattr(customer, field, value)

    db.commit()
    db.refresh(customer)
    return customer


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise HTTPException(status_code=404, detail="Customer profile not found")
    return customer
