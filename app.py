import argparse
import logging
import sys
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from via.config import Settings
from via.models import PlanRequest
from via.planner import TripPlanner
from via.render import DEFAULT_COLORS, NO_COLORS, colorize, render_trip_plan
from via.stations import search_stations
from via.supervia_client import SuperviaClient, ViaError
from via.ttl_cache import TTLCache

logger = logging.getLogger("via")


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="via",
        description="Planeje viagens nos trens da SuperVia.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="mostra logs de depuração")
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan = subparsers.add_parser("p", help="planeja uma viagem")
    plan.add_argument("origin", help="estação de origem (parte do nome basta)")
    plan.add_argument("destination", help="estação de destino")
    plan.add_argument("time_pos", nargs="?", metavar="hora", help="hora da viagem (9, 14:30)")
    plan.add_argument("date_pos", nargs="?", metavar="dia", help="dia da viagem (5, 5/12, 5/12/2024)")
    plan.add_argument("-t", dest="time", help="hora da viagem")
    plan.add_argument("-d", dest="date", help="dia da viagem")
    plan.add_argument("-z", "--refresh", action="store_true", help="ignora a lista de estações em cache")
    plan.add_argument("--no-color", action="store_true", help="saída sem cores")

    stations = subparsers.add_parser("e", help="lista as estações")
    stations.add_argument("filter", nargs="?", default="", help="filtra por parte do id ou nome")
    stations.add_argument("-z", "--refresh", action="store_true", help="ignora a lista de estações em cache")

    return parser


def _run_plan(planner: TripPlanner, args: argparse.Namespace, settings: Settings) -> None:
    request = PlanRequest(
        origin_token=args.origin,
        dest_token=args.destination,
        time_token=args.time or args.time_pos,
        date_token=args.date or args.date_pos,
    )
    result = planner.plan(**request.model_dump(), refresh=args.refresh)

    colors = DEFAULT_COLORS if settings.color and not args.no_color else NO_COLORS
    print(f"planejando para {result.description}\n")
    for line in render_trip_plan(result.trip_plan, colors):
        print(line)


def _run_stations(planner: TripPlanner, args: argparse.Namespace, settings: Settings) -> None:
    catalog = planner.get_stations(args.refresh)
    colors = DEFAULT_COLORS if settings.color else NO_COLORS
    for station in search_stations(args.filter, catalog):
        print(f"{colorize(station.id, 'bwhite', colors)}  {station.name}")


def main(argv: Optional[List[str]] = None) -> int:
    args = make_parser().parse_args(argv)
    settings = Settings.from_env()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        cache = TTLCache(settings.cache_url)
        with SuperviaClient(settings.content_url, settings.site_url, settings.http_timeout) as client:
            planner = TripPlanner(client, cache, settings.stations_ttl)
            if args.command == "p":
                _run_plan(planner, args, settings)
            else:
                _run_stations(planner, args, settings)
    except (ViaError, SQLAlchemyError) as e:
        logger.debug("Aborting", exc_info=True)
        print(str(e), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
