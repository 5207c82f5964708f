"""Store ports - Abstractions over the persistent store.

The store is an external service reached through queries and stored
procedures. Matching semantics (distance filter, ordering) and payment
atomicity are the store's responsibility; these ports only describe the
calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import (
        AuthenticatedUser,
        MatchCandidate,
        MatchQuery,
        MoneyTransfer,
        TransactionRecord,
    )


class TripStorePort(Protocol):
    """Port for the geospatial-temporal trip query.

    Implementation: adapters/store/supabase_adapter.py

    Expected store contract: rows whose origin (and destination, when
    given) lie within ``radius_meters`` and whose departure falls inside
    the window, ordered by distance ascending.
    """

    async def find_matching_trips(
        self,
        query: MatchQuery,
        access_token: Optional[str] = None,
    ) -> Sequence[MatchCandidate]:
        """Run the match query.

        Raises:
            StoreError: If the store call fails.
        """
        ...


class PaymentStorePort(Protocol):
    """Port for the atomic payment-transfer procedure."""

    async def process_payment(
        self,
        transfer: MoneyTransfer,
        access_token: Optional[str] = None,
    ) -> TransactionRecord:
        """Execute the transfer atomically and return the transaction.

        Raises:
            StoreError: If the procedure fails.
        """
        ...


class AuthPort(Protocol):
    """Port for resolving a bearer token to a user."""

    async def get_user(self, access_token: str) -> Optional[AuthenticatedUser]:
        """Return the token's user, or None if the token is not valid."""
        ...


class StationStorePort(Protocol):
    """Port for persisting charging stations."""

    async def upsert_charging_station(
        self, row: Mapping[str, Any]
    ) -> Optional[Mapping[str, Any]]:
        """Insert or update a station keyed by its Google place id.

        Returns:
            The stored row as returned by the store, or None.

        Raises:
            StoreError: If the upsert fails.
        """
        ...
