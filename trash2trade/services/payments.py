"""Simulated payment processing"""
import logging
import time
from typing import List

from trash2trade.db import Database
from trash2trade.errors import ForbiddenError, NotFoundError
from trash2trade.models.db import Payment
from trash2trade.models.enums import PaymentStatus
from trash2trade.models.schemas import PaymentCreate, PaymentOut
from trash2trade.services.common import store_errors

logger = logging.getLogger(__name__)

class PaymentService:
    """Records payments; there is no gateway, every payment succeeds at once"""

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _transaction_id() -> str:
        return f"txn_{int(time.time() * 1000)}"

    def create(self, user_id: int, data: PaymentCreate) -> PaymentOut:
        with store_errors(logger, "creating payment"), self.db.session() as session:
            payment = Payment(
                user_id=user_id,
                amount=data.amount,
                currency=data.currency.upper(),
                payment_method=data.payment_method,
                status=PaymentStatus.PENDING.value
            )
            session.add(payment)
            session.flush()

            # A real gateway would confirm asynchronously; here it always succeeds
            payment.status = PaymentStatus.COMPLETED.value
            payment.transaction_id = self._transaction_id()
            session.flush()
            session.refresh(payment)
            logger.info(f"Payment {payment.id} of {payment.amount} {payment.currency} completed for user {user_id}")
            return PaymentOut.model_validate(payment)

    def list_for_user(self, user_id: int) -> List[PaymentOut]:
        with store_errors(logger, "listing payments"), self.db.session() as session:
            payments = session.query(Payment).filter(Payment.user_id == user_id).order_by(
                Payment.created_at.desc(), Payment.id.desc()
            ).all()
            return [PaymentOut.model_validate(p) for p in payments]

    def get(self, user_id: int, payment_id: int) -> PaymentOut:
        with store_errors(logger, "loading payment"), self.db.session() as session:
            payment = session.query(Payment).filter_by(id=payment_id).first()
            if not payment:
                raise NotFoundError("Payment not found")
            if payment.user_id != user_id:
                raise ForbiddenError("Access denied")
            return PaymentOut.model_validate(payment)
