"""Tests for the dependency injection container."""

from __future__ import annotations

import pytest

from fakes import FakeGenerator
from ridelink.adapters.geocoding import GazetteerResolver, NominatimGeocoderAdapter
from ridelink.adapters.inference import GeminiClient
from ridelink.adapters.store import SupabaseStore
from ridelink.container import Container, get_container, reset_container
from ridelink.ports.inference import TextGenerationPort
from ridelink.ports.store import AuthPort, PaymentStorePort, TripStorePort
from ridelink.services import (
    ChargingStationService,
    GeoResolver,
    MatchEngine,
    PaymentRelay,
    TripRequestService,
)


def test_default_bindings(config):
    container = Container.create_default(config)

    assert isinstance(container.resolve(TextGenerationPort), GeminiClient)
    assert isinstance(container.resolve(TripStorePort), SupabaseStore)
    for service in (TripRequestService, MatchEngine, PaymentRelay, ChargingStationService):
        assert isinstance(container.resolve(service), service)


def test_geocoding_chain_order(config):
    resolver = Container.create_default(config).resolve(GeoResolver)
    assert [type(s) for s in resolver.strategies] == [
        GazetteerResolver,
        NominatimGeocoderAdapter,
    ]


def test_store_ports_share_one_adapter(config):
    container = Container.create_default(config)
    store = container.resolve(TripStorePort)
    assert container.resolve(PaymentStorePort) is store
    assert container.resolve(AuthPort) is store


def test_singletons_are_reused(config):
    container = Container.create_default(config)
    assert container.resolve(MatchEngine) is container.resolve(MatchEngine)


def test_override_replaces_built_instance(config):
    container = Container.create_default(config)
    container.resolve(TextGenerationPort)

    fake = FakeGenerator(reply="{}")
    container.register(TextGenerationPort, lambda: fake)

    assert container.resolve(TextGenerationPort) is fake


def test_transient_registration(config):
    container = Container(config=config)
    container.register(list, list, singleton=False)
    assert container.resolve(list) is not container.resolve(list)


def test_unregistered_type_raises(config):
    with pytest.raises(KeyError):
        Container(config=config).resolve(dict)


def test_global_container_reset():
    first = get_container()
    assert get_container() is first
    reset_container()
    assert get_container() is not first
