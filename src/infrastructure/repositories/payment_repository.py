"""In-memory repository implementation for payments."""

from typing import Dict, List, Optional

from src.domain.entities import Payment
from src.domain.interfaces import PaymentRepository


class InMemoryPaymentRepository(PaymentRepository):
    """
    Process-lifetime payment ledger keyed by QR string MD5.

    Relies on the single-threaded event loop; there is no locking.
    """

    def __init__(self):
        self._payments: Dict[str, Payment] = {}

    async def save(self, payment: Payment) -> Payment:
        self._payments[payment.md5] = payment
        return payment

    async def get_by_md5(self, md5: str) -> Optional[Payment]:
        return self._payments.get(md5)

    async def get_by_bill_number(self, bill_number: str) -> Optional[Payment]:
        for payment in self._payments.values():
            if payment.bill_number == bill_number:
                return payment
        return None

    async def list_all(self) -> List[Payment]:
        return list(self._payments.values())

    def clear(self) -> None:
        self._payments.clear()
