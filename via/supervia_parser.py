"""
SuperVia response parser.
Converts raw API responses to our Pydantic models.
"""

from typing import Any, List
from pydantic import ValidationError
from .models import StationCatalog, TripPlan
from .supervia_client import MalformedResponseError


def parse_stations(data: Any) -> StationCatalog:
    """
    Parse the station list response.

    Args:
        data: Decoded JSON from the stations endpoint

    Returns:
        StationCatalog in upstream order

    Raises:
        MalformedResponseError: When the payload does not have the expected shape
    """
    try:
        return StationCatalog.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(f"Unexpected station list: {e}")


def parse_stations_json(payload: bytes) -> StationCatalog:
    """
    Parse a station catalog serialized with dump_stations.

    Raises:
        pydantic.ValidationError: When the payload is truncated or corrupted
    """
    return StationCatalog.model_validate_json(payload)


def dump_stations(catalog: StationCatalog) -> bytes:
    """Serialize a station catalog using the upstream field names."""
    return catalog.model_dump_json(by_alias=True).encode("utf-8")


def parse_trip_plan(data: Any) -> TripPlan:
    """
    Parse the trip planner response.

    Args:
        data: Decoded JSON from the planner endpoint

    Returns:
        TripPlan with trajects, trip options and legs

    Raises:
        MalformedResponseError: When the payload does not have the expected shape
    """
    # The planner answers null instead of an empty list when nothing runs
    if data is None:
        return TripPlan()
    try:
        return TripPlan.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(f"Unexpected trip plan: {e}")


def parse_alerts(data: Any) -> List[Any]:
    """Alerts are kept opaque."""
    if data is None:
        return []
    if isinstance(data, list):
        return data
    return [data]
