# backend/agenda/routers/customers.py
# Read-only: customers are created by the booking committer

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_business
from ..models.tables import Businesses, Customers as DBCustomers
from ..schemas.customers import CustomerRead

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=list[CustomerRead])
def list_customers(
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    return (
        db.query(DBCustomers)
        .filter(DBCustomers.business_id == business.id)
        .order_by(DBCustomers.name, DBCustomers.id)
        .all()
    )
