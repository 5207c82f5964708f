"""Payment relay - validate and forward a transfer to the store.

Atomicity belongs to the store's procedure. There is no local retry and
no idempotency key, so a client retry can submit the same transfer twice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from ..config import PaymentConfig, get_config
from ..domain.errors import AuthError, ValidationError
from ..domain.models import MoneyTransfer, TransactionRecord
from ..ports.store import AuthPort, PaymentStorePort


def parse_amount(value: Any) -> Decimal:
    """Parse a positive amount.

    Raises:
        ValidationError: If the amount is missing, not a number or not > 0.
    """
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError("Missing payment details", field_name="amount")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError("Invalid payment amount", field_name="amount")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Invalid payment amount", field_name="amount")
    return amount


@dataclass
class PaymentRelay:
    """Pass-through to the atomic payment procedure.

    Attributes:
        auth: Resolves the caller's bearer token
        store: Store exposing the payment procedure
        config: Currency and method defaults
    """

    auth: AuthPort
    store: PaymentStorePort
    config: PaymentConfig = field(default_factory=lambda: get_config().payment)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def transfer(
        self,
        access_token: Optional[str],
        recipient_id: Optional[str],
        amount: Any,
        currency: Optional[str] = None,
        method: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> TransactionRecord:
        """Transfer ``amount`` from the caller to ``recipient_id``.

        Raises:
            AuthError: If there is no valid caller identity.
            ValidationError: If amount or recipient is missing or invalid.
            StoreError: If the procedure fails.
        """
        if not access_token:
            raise AuthError("Unauthorized")
        user = await self.auth.get_user(access_token)
        if user is None:
            raise AuthError("Unauthorized")

        if not recipient_id:
            raise ValidationError(
                "Missing payment details", field_name="recipient_id"
            )

        transfer = MoneyTransfer(
            from_user=user.id,
            to_user=recipient_id,
            amount=parse_amount(amount),
            currency=currency or self.config.default_currency,
            method=method or self.config.default_method,
            metadata=dict(metadata or {}),
        )

        self._logger.info(
            "Submitting transfer",
            extra={
                "from_user": transfer.from_user,
                "to_user": transfer.to_user,
                "currency": transfer.currency,
                "method": transfer.method,
            },
        )
        transaction = await self.store.process_payment(transfer, access_token)
        self._logger.info("Transfer processed", extra={"from_user": user.id})
        return transaction
