from typing import Any

from fastapi import APIRouter, Depends
from supabase import Client

from app.api.deps import get_db
from app.db.models import PaymentMethod
from app.db.repository import PaymentMethodRepository

router = APIRouter(prefix="/api/payment-methods", tags=["payments"])


@router.get("", response_model=list[PaymentMethod])
async def list_payment_methods(db: Client = Depends(get_db)) -> list[dict[str, Any]]:
    """Active payment methods offered in the commission payment form."""
    return PaymentMethodRepository(db).list_active()
