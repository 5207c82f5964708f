"""HTTP endpoints. Calls services only, no business logic.

Every failure is returned as ``{"error": message}``; an endpoint never
mixes a partial payload with an error.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..container import Container
from ..domain.errors import (
    ConfigurationError,
    RideLinkError,
    ValidationError,
)
from ..services import (
    ChargingStationService,
    MatchEngine,
    PaymentRelay,
    TripRequestService,
)
from . import cors
from .schemas import (
    ChargingStationRequest,
    PaymentRequest,
    TripMatchRequest,
    TripParseRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

PARSE_TRIP_PATH = "/parse-trip-request"
TRIP_MATCHING_PATH = "/trip-matching"
PAYMENT_PATH = "/payment-processing"
CHARGING_STATIONS_PATH = "/fetch-charging-stations"

ROUTE_POLICIES = {
    PARSE_TRIP_PATH: cors.TRIP_PARSING,
    TRIP_MATCHING_PATH: cors.DEFAULT,
    PAYMENT_PATH: cors.DEFAULT,
    CHARGING_STATIONS_PATH: cors.DEFAULT,
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _container(request: Request) -> Container:
    return request.app.state.container


@router.get("/health", tags=["Root"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post(PARSE_TRIP_PATH)
async def parse_trip_request(body: TripParseRequest, request: Request) -> JSONResponse:
    service: TripRequestService = _container(request).resolve(TripRequestService)
    try:
        draft = await service.handle(
            body.input,
            input_type=body.input_type,
            audio_data=body.audio_data,
            user_location=body.user_location.to_point() if body.user_location else None,
        )
    except ValidationError as e:
        return error_response(400, e.message)
    except RideLinkError as e:
        logger.error(
            "Trip parsing failed",
            extra={"error_type": type(e).__name__, "error": str(e)},
        )
        return error_response(500, e.message)
    except Exception as e:
        logger.exception("Unexpected error in trip parsing")
        return error_response(500, str(e) or "An unexpected error occurred")
    return JSONResponse(draft.to_dict())


@router.post(TRIP_MATCHING_PATH)
async def trip_matching(body: TripMatchRequest, request: Request) -> JSONResponse:
    engine: MatchEngine = _container(request).resolve(MatchEngine)
    try:
        matches = await engine.find_matches(
            body.origin(),
            body.destination(),
            body.window(),
            access_token=bearer_token(request),
        )
    except ConfigurationError as e:
        logger.error("Trip matching misconfigured", extra={"error": str(e)})
        return error_response(500, e.message)
    except RideLinkError as e:
        return error_response(400, e.message)
    except Exception as e:
        logger.exception("Unexpected error in trip matching")
        return error_response(500, str(e) or "An unexpected error occurred")
    return JSONResponse({"matches": list(matches)})


@router.post(PAYMENT_PATH)
async def payment_processing(body: PaymentRequest, request: Request) -> JSONResponse:
    relay: PaymentRelay = _container(request).resolve(PaymentRelay)
    try:
        transaction = await relay.transfer(
            bearer_token(request),
            body.recipient_id,
            body.amount,
            currency=body.currency,
            method=body.method,
            metadata=body.metadata,
        )
    except ConfigurationError as e:
        logger.error("Payment misconfigured", extra={"error": str(e)})
        return error_response(500, e.message)
    except RideLinkError as e:
        return error_response(400, e.message)
    except Exception as e:
        logger.exception("Unexpected error in payment processing")
        return error_response(500, str(e) or "An unexpected error occurred")
    return JSONResponse({"transaction": transaction})


@router.post(CHARGING_STATIONS_PATH)
async def fetch_charging_stations(
    body: ChargingStationRequest, request: Request
) -> JSONResponse:
    service: ChargingStationService = _container(request).resolve(
        ChargingStationService
    )
    try:
        result = await service.fetch_stations(
            body.latitude,
            body.longitude,
            radius=body.radius,
            station_type=body.station_type,
        )
    except ValidationError as e:
        return error_response(400, e.message)
    except RideLinkError as e:
        logger.error("Charging station refresh failed", extra={"error": str(e)})
        return error_response(500, e.message)
    except Exception as e:
        logger.exception("Unexpected error in charging station refresh")
        return error_response(500, str(e) or "An unexpected error occurred")
    return JSONResponse(result.to_dict())
