"""Repository interfaces for payment storage."""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities import Payment


class PaymentRepository(ABC):
    """
    Abstract repository for Payment records.

    Payments are keyed by the MD5 of their QR string.
    """

    @abstractmethod
    async def save(self, payment: Payment) -> Payment:
        """
        Insert or replace a payment.

        Args:
            payment: The payment to save

        Returns:
            The saved payment
        """
        ...

    @abstractmethod
    async def get_by_md5(self, md5: str) -> Optional[Payment]:
        """
        Retrieve a payment by its QR string MD5.

        Returns:
            The payment if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_by_bill_number(self, bill_number: str) -> Optional[Payment]:
        """
        Retrieve the first payment recorded with a bill number.

        Returns:
            The payment if found, None otherwise
        """
        ...

    @abstractmethod
    async def list_all(self) -> List[Payment]:
        """
        Retrieve all payments.

        Returns:
            Payments in insertion order
        """
        ...
