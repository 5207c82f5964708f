"""Centralized configuration using Pydantic Settings.

This module is the single source of truth for provider endpoints, keys,
timeouts, the matching radius and the CORS allow-lists.

Configuration can be overridden via environment variables:
- RL_AI_API_KEY=...
- RL_GEO_USER_AGENT=RideLink-App/1.0
- RL_STORE_URL=https://<project>.supabase.co
- RL_MATCH_RADIUS_METERS=1500
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InferenceConfig(BaseSettings):
    """Gemini text and multimodal inference settings.

    Environment variables prefixed with RL_AI_.
    """

    model_config = SettingsConfigDict(env_prefix="RL_AI_")

    api_key: Optional[str] = None
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.0-flash-exp"
    timeout_seconds: float = 30.0

    # Trip parsing: moderate temperature, tuned for consistent JSON.
    parse_temperature: float = 0.4
    parse_top_p: float = 0.95
    parse_top_k: int = 40
    parse_max_output_tokens: int = 2048

    # Transcription: near-deterministic, short output.
    transcription_temperature: float = 0.2
    transcription_max_output_tokens: int = 256
    transcription_mime_type: str = "audio/wav"


class GeocodingConfig(BaseSettings):
    """Nominatim geocoding configuration.

    Environment variables prefixed with RL_GEO_.
    """

    model_config = SettingsConfigDict(env_prefix="RL_GEO_")

    # Nominatim's usage policy requires an identifying User-Agent.
    user_agent: str = "RideLink-App/1.0"
    domain: str = "nominatim.openstreetmap.org"
    scheme: str = "https"
    timeout_seconds: float = 10.0


class StoreConfig(BaseSettings):
    """Supabase store configuration.

    Environment variables prefixed with RL_STORE_.
    """

    model_config = SettingsConfigDict(env_prefix="RL_STORE_")

    url: Optional[str] = None
    anon_key: Optional[str] = None
    service_role_key: Optional[str] = None
    timeout_seconds: float = 15.0

    match_rpc: str = "find_matching_trips"
    payment_rpc: str = "process_payment"
    charging_stations_table: str = "ev_charging_stations"


class MatchingConfig(BaseSettings):
    """Trip matching configuration.

    Environment variables prefixed with RL_MATCH_.
    """

    model_config = SettingsConfigDict(env_prefix="RL_MATCH_")

    # Proximity tolerance in metres for both trip endpoints.
    radius_meters: int = Field(default=1000, ge=1, le=50_000)


class PaymentConfig(BaseSettings):
    """Payment relay defaults.

    Environment variables prefixed with RL_PAYMENT_.
    """

    model_config = SettingsConfigDict(env_prefix="RL_PAYMENT_")

    default_currency: str = "RWF"
    default_method: str = "wallet"


class PlacesConfig(BaseSettings):
    """Google Places configuration.

    Environment variables prefixed with RL_PLACES_.
    """

    model_config = SettingsConfigDict(env_prefix="RL_PLACES_")

    api_key: Optional[str] = None
    base_url: str = "https://places.googleapis.com/v1"
    default_radius_meters: float = 10_000.0
    max_results: int = Field(default=20, ge=1, le=20)
    timeout_seconds: float = 15.0


class CorsConfig(BaseSettings):
    """CORS policies, one allow-list per policy name.

    Environment variables prefixed with RL_CORS_.
    """

    model_config = SettingsConfigDict(env_prefix="RL_CORS_")

    allowed_origins: list[str] = Field(
        default_factory=lambda: [
            "https://ridelink.app",
            "https://www.ridelink.app",
            "https://app.ridelink.app",
            "http://localhost:3000",
            "http://localhost:8080",
        ]
    )
    default_origins: list[str] = Field(default_factory=lambda: ["*"])
    allow_headers: str = "authorization, x-client-info, apikey, content-type"


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with RL_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="RL_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.matching.radius_meters)
        print(config.store.url)

    Environment variables prefixed with RL_.
    """

    model_config = SettingsConfigDict(env_prefix="RL_")

    inference: InferenceConfig = Field(default_factory=InferenceConfig)
    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    payment: PaymentConfig = Field(default_factory=PaymentConfig)
    places: PlacesConfig = Field(default_factory=PlacesConfig)
    cors: CorsConfig = Field(default_factory=CorsConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    # Civil timezone used when the caller does not supply "now".
    timezone: str = "Africa/Kigali"


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()
