"""
Trip planning orchestration.

Loads the station catalog (cache first), resolves the user's station
tokens, normalizes date and time and asks SuperVia for alerts and trip
options.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from via.config import STATIONS_TTL_SECONDS
from via.models import PlanResult, ResolvedPlan, StationCatalog
from via.stations import find_best_match
from via.supervia_client import SuperviaClient, ViaError
from via.supervia_parser import (
    dump_stations, parse_alerts, parse_stations, parse_stations_json, parse_trip_plan
)
from via.temporal import describe_relative, normalize_date, normalize_time, parse_plan_instant
from via.ttl_cache import CacheError, TTLCache

logger = logging.getLogger(__name__)

STATIONS_CACHE_KEY = "via-stations-cache"

# Plans default to a couple of minutes ahead so the first train is catchable
DEFAULT_LEAD = timedelta(minutes=2)


class UnresolvedStationError(ViaError):
    """No station matches the token typed by the user."""
    def __init__(self, token: str):
        super().__init__(f'estação não encontrada: "{token}"')
        self.token = token


class TripPlanner:
    """
    Plans trips against the SuperVia API.

    The client and cache are injected so both can be replaced in tests.
    """

    def __init__(
        self,
        client: SuperviaClient,
        cache: TTLCache,
        stations_ttl: int = STATIONS_TTL_SECONDS,
        now: Callable[[], datetime] = datetime.now
    ):
        """
        Initialize planner.

        Args:
            client: SuperVia API client
            cache: Cache for the station catalog
            stations_ttl: Seconds a fetched catalog stays valid
            now: Returns the current local time
        """
        self.client = client
        self.cache = cache
        self.stations_ttl = stations_ttl
        self.now = now

    def _load_cached_stations(self) -> Optional[StationCatalog]:
        try:
            return parse_stations_json(self.cache.load(STATIONS_CACHE_KEY))
        except CacheError as e:
            logger.debug("Station cache unusable: %s", e)
        except ValidationError:
            logger.debug("Station cache corrupted, refetching")
        except SQLAlchemyError as e:
            logger.debug("Station cache unreadable: %s", e)
        return None

    def get_stations(self, refresh: bool = False) -> StationCatalog:
        """
        Return the station catalog from cache, or from SuperVia on a miss.

        Args:
            refresh: Skip the cache read and always fetch
        """
        if not refresh:
            catalog = self._load_cached_stations()
            if catalog is not None:
                return catalog

        catalog = parse_stations(self.client.get_stations())

        try:
            self.cache.store(STATIONS_CACHE_KEY, dump_stations(catalog), self.stations_ttl)
        except SQLAlchemyError as e:
            logger.warning("Could not cache station list: %s", e)

        return catalog

    def resolve(
        self,
        origin_token: str,
        dest_token: str,
        time_token: Optional[str] = None,
        date_token: Optional[str] = None,
        refresh: bool = False
    ) -> ResolvedPlan:
        """
        Resolve raw tokens into station ids and a normalized date and time.

        Raises:
            UnresolvedStationError: When either token matches no station
        """
        catalog = self.get_stations(refresh)

        origin_id = find_best_match(origin_token, catalog)
        if origin_id is None:
            raise UnresolvedStationError(origin_token)

        dest_id = find_best_match(dest_token, catalog)
        if dest_id is None:
            raise UnresolvedStationError(dest_token)

        fallback = self.now() + DEFAULT_LEAD
        date = normalize_date(date_token, fallback) if date_token else fallback.strftime("%Y-%m-%d")
        time = normalize_time(time_token, fallback) if time_token else fallback.strftime("%H:%M")

        logger.debug(
            "Resolved plan",
            extra={"origin": origin_id, "dest": dest_id, "date": date, "time": time},
        )
        return ResolvedPlan(origin_id=origin_id, dest_id=dest_id, date=date, time=time)

    def describe(self, request: ResolvedPlan) -> str:
        """Human description of when the plan is for."""
        instant = parse_plan_instant(request.date, request.time)
        if instant is None:
            return f"{request.date} {request.time}"
        return describe_relative(instant, self.now())

    def plan(
        self,
        origin_token: str,
        dest_token: str,
        time_token: Optional[str] = None,
        date_token: Optional[str] = None,
        refresh: bool = False
    ) -> PlanResult:
        """
        Plan a trip between two user-typed stations.

        Args:
            origin_token: Origin as typed by the user
            dest_token: Destination as typed by the user
            time_token: Optional loose time ("9", "14:30")
            date_token: Optional partial date ("5", "5/12", "5/12/2024")
            refresh: Ignore the cached station catalog

        Returns:
            PlanResult with the resolved request, alerts and trip options

        Raises:
            UnresolvedStationError: Unknown origin or destination
            SuperviaAPIError: Any failed remote call
        """
        request = self.resolve(origin_token, dest_token, time_token, date_token, refresh)

        # Alerts are fetched but not interpreted yet
        alerts = parse_alerts(
            self.client.get_alerts(request.origin_id, request.dest_id, request.date, request.time)
        )

        trip_plan = parse_trip_plan(
            self.client.get_trip_plan(request.origin_id, request.dest_id, request.date, request.time)
        )

        return PlanResult(
            request=request,
            description=self.describe(request),
            alerts=alerts,
            trip_plan=trip_plan,
        )
