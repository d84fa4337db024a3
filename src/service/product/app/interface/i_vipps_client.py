"""Vipps ePayment port

All methods raise DownstreamServiceError when Vipps fails or answers unexpectedly.
"""

from abc import ABC, abstractmethod

import attrs

from src.service.product.domain.product_entity import MerchantEntity, PaymentAttemptState


@attrs.define
class CreatedPayment:
    reference: str
    redirect_url: str


class IVippsClient(ABC):
    @abstractmethod
    async def get_access_token(self, *, merchant: MerchantEntity) -> str:
        pass

    @abstractmethod
    async def create_payment(
        self,
        *,
        merchant: MerchantEntity,
        token: str,
        reference: str,
        amount: int,
        return_url: str,
        description: str,
    ) -> CreatedPayment:
        pass

    @abstractmethod
    async def get_payment_state(
        self, *, merchant: MerchantEntity, token: str, reference: str
    ) -> PaymentAttemptState:
        pass

    @abstractmethod
    async def capture_payment(
        self, *, merchant: MerchantEntity, token: str, reference: str, amount: int
    ) -> None:
        pass
