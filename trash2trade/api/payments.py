"""Payment routes"""
from fastapi import APIRouter, Depends, Path

from trash2trade.api.deps import current_actor, payment_service
from trash2trade.lifecycle import Actor
from trash2trade.models.schemas import MAX_ID, PaymentCreate
from trash2trade.services.payments import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", status_code=201)
def create_payment(
        payload: PaymentCreate,
        actor: Actor = Depends(current_actor),
        payments: PaymentService = Depends(payment_service)
):
    payment = payments.create(actor.id, payload)
    return {"message": "Payment processed successfully", "payment": payment}


@router.get("")
def list_payments(actor: Actor = Depends(current_actor), payments: PaymentService = Depends(payment_service)):
    return {"payments": payments.list_for_user(actor.id)}


@router.get("/{payment_id}")
def get_payment(
        payment_id: int = Path(..., gt=0, le=MAX_ID),
        actor: Actor = Depends(current_actor),
        payments: PaymentService = Depends(payment_service)
):
    return {"payment": payments.get(actor.id, payment_id)}
