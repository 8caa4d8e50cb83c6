# marketplace/schemas/admin.py
from pydantic import BaseModel


class AdminSummaryResponse(BaseModel):
    total_users: int
    total_customers: int
    total_members: int
    total_admins: int
    total_experts: int
    verified_experts: int
    customer_profiles: int
    total_categories: int
    active_categories: int
    total_specializations: int
    total_testimonials: int
