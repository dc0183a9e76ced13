from datetime import datetime

import pytest

from conftest import STATIONS_PAYLOAD, TRIP_PLAN_PAYLOAD
from via.config import STATIONS_TTL_SECONDS
from via.planner import STATIONS_CACHE_KEY, TripPlanner, UnresolvedStationError
from via.supervia_client import BadStatusError
from via.supervia_parser import dump_stations, parse_stations, parse_stations_json
from via.ttl_cache import CacheExpired, TTLCache


NOW = datetime(2024, 3, 10, 8, 0)


class FakeClient:
    """Records calls and answers with canned payloads."""

    def __init__(self, stations=None, plan=None, alerts_error=None):
        self.stations = STATIONS_PAYLOAD if stations is None else stations
        self.plan = TRIP_PLAN_PAYLOAD if plan is None else plan
        self.alerts_error = alerts_error
        self.calls = []

    def get_stations(self):
        self.calls.append(("stations",))
        return self.stations

    def get_alerts(self, origin_id, dest_id, date, time):
        self.calls.append(("alerts", origin_id, dest_id, date, time))
        if self.alerts_error:
            raise self.alerts_error
        return [{"nid": "7"}]

    def get_trip_plan(self, origin_id, dest_id, date, time):
        self.calls.append(("plan", origin_id, dest_id, date, time))
        return self.plan


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def planner(client, cache):
    return TripPlanner(client, cache, stations_ttl=3600, now=lambda: NOW)


# =============================================================================
# Station catalog loading
# =============================================================================


def test_fetches_and_caches_stations_on_miss(planner, client, cache):
    catalog = planner.get_stations()

    assert [s.id for s in catalog][:2] == ["santa_cruz", "central"]
    assert client.calls == [("stations",)]
    assert parse_stations_json(cache.load(STATIONS_CACHE_KEY)) == catalog


def test_uses_cached_stations(planner, client, cache):
    cache.store(STATIONS_CACHE_KEY, dump_stations(parse_stations(STATIONS_PAYLOAD)), 3600)

    planner.get_stations()

    assert client.calls == []


def test_refetches_after_expiry(planner, client, cache, clock):
    planner.get_stations()
    clock.advance(3600)

    planner.get_stations()

    assert client.calls == [("stations",), ("stations",)]


def test_refetches_when_cache_is_corrupted(planner, client, cache):
    cache.store(STATIONS_CACHE_KEY, b'{"estacoes": [{"id"', 3600)

    catalog = planner.get_stations()

    assert len(catalog) == 4
    assert client.calls == [("stations",)]


def test_refresh_skips_cache(planner, client, cache):
    cache.store(STATIONS_CACHE_KEY, dump_stations(parse_stations(STATIONS_PAYLOAD)), 3600)

    planner.get_stations(refresh=True)

    assert client.calls == [("stations",)]


def test_station_fetch_error_propagates(cache):
    class Failing(FakeClient):
        def get_stations(self):
            raise BadStatusError(500, "erro")

    planner = TripPlanner(Failing(), cache, now=lambda: NOW)

    with pytest.raises(BadStatusError):
        planner.get_stations()


def test_default_ttl_keeps_stations_for_48_hours(client, cache, clock):
    planner = TripPlanner(client, cache, now=lambda: NOW)
    planner.get_stations()

    clock.advance(STATIONS_TTL_SECONDS - 1)
    assert parse_stations_json(cache.load(STATIONS_CACHE_KEY)) == parse_stations(STATIONS_PAYLOAD)

    clock.advance(1)
    with pytest.raises(CacheExpired):
        cache.load(STATIONS_CACHE_KEY)


def test_unreadable_cache_file_falls_back_to_client(client, clock, tmp_path):
    bad = tmp_path / "bad.db"
    bad.write_bytes(b"this is not a sqlite database" * 100)
    planner = TripPlanner(client, TTLCache(f"sqlite:///{bad}", clock=clock), now=lambda: NOW)

    catalog = planner.get_stations()

    assert len(catalog) == 4
    assert client.calls == [("stations",)]


# =============================================================================
# Resolution
# =============================================================================


def test_resolves_tokens_to_ids(planner):
    request = planner.resolve("central", "cruz")

    assert request.origin_id == "central"
    assert request.dest_id == "santa_cruz"


def test_defaults_to_two_minutes_from_now(planner):
    request = planner.resolve("central", "cruz")

    assert request.date == "2024-03-10"
    assert request.time == "08:02"


def test_normalizes_given_date_and_time(planner):
    request = planner.resolve("central", "cruz", time_token="9", date_token="5/12")

    assert request.time == "09:00"
    assert request.date == "2024-12-5"


def test_unresolved_origin_names_token(planner, client):
    with pytest.raises(UnresolvedStationError) as excinfo:
        planner.plan("xyz", "cruz")

    assert excinfo.value.token == "xyz"
    assert '"xyz"' in str(excinfo.value)
    assert all(call[0] == "stations" for call in client.calls)


def test_unresolved_destination_names_token(planner, client):
    with pytest.raises(UnresolvedStationError) as excinfo:
        planner.plan("central", "niteroi")

    assert excinfo.value.token == "niteroi"
    assert all(call[0] == "stations" for call in client.calls)


# =============================================================================
# Planning
# =============================================================================


def test_plan_calls_alerts_then_trip_plan(planner, client):
    result = planner.plan("central", "cruz", time_token="10")

    assert client.calls[1:] == [
        ("alerts", "central", "santa_cruz", "2024-03-10", "10:00"),
        ("plan", "central", "santa_cruz", "2024-03-10", "10:00"),
    ]
    assert result.alerts == [{"nid": "7"}]
    assert len(result.trip_plan.trajects) == 1


def test_plan_description_for_default_time(planner):
    result = planner.plan("central", "cruz")

    assert result.description == "hoje em 2 minutos"


def test_plan_description_for_later_time(planner):
    result = planner.plan("central", "cruz", time_token="10")

    assert result.description == "hoje as 10:00 horas"


def test_plan_description_falls_back_to_raw_values(planner):
    result = planner.plan("central", "cruz", time_token="10", date_token="31/2")

    assert result.description == "2024-2-31 10:00"


def test_alerts_failure_aborts_before_trip_plan(cache):
    client = FakeClient(alerts_error=BadStatusError(502, "gateway"))
    planner = TripPlanner(client, cache, now=lambda: NOW)

    with pytest.raises(BadStatusError):
        planner.plan("central", "cruz")

    assert not any(call[0] == "plan" for call in client.calls)
