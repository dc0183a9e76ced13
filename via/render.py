"""
Terminal rendering of trip plans.
"""

from types import MappingProxyType
from typing import List, Mapping
from .models import Leg, TripPlan

RESET = "\033[0m"

# Rail extension id -> ANSI escape, plus "bwhite" for emphasis
DEFAULT_COLORS: Mapping[str, str] = MappingProxyType({
    "santa_cruz": "\033[0;32m",
    "paracambi": "\033[0;36m",
    "japeri": "\033[0;34m",
    "saracuruna": "\033[0;33m",
    "bwhite": "\033[1m",
})

NO_COLORS: Mapping[str, str] = MappingProxyType({})

_INDENT = " " * 7
_RAIL = "          |"


def colorize(text: str, name: str, colors: Mapping[str, str]) -> str:
    """Wrap text in the escape code registered under name, if any."""
    code = colors.get(name)
    if not code:
        return text
    return code + text + RESET


def _leg_lines(leg: Leg, first: bool, colors: Mapping[str, str]) -> List[str]:
    prefix = _INDENT
    if first and len(leg.departure) > 5:
        prefix = leg.departure[:5] + " - "
    return [
        prefix + colorize(leg.origin_name, "bwhite", colors),
        colorize(_RAIL, leg.extension_id, colors),
    ]


def render_trip_plan(plan: TripPlan, colors: Mapping[str, str] = DEFAULT_COLORS) -> List[str]:
    """
    Render a trip plan as printable lines.

    Args:
        plan: Trip plan to render
        colors: Escape codes by extension id; "bwhite" is used for station names

    Returns:
        Output lines without trailing newlines
    """
    lines = []
    for i, traject in enumerate(plan.trajects, 1):
        lines.append(f"{colorize('Trajeto', 'bwhite', colors)} {i}")
        lines.append("")

        for j, trip in enumerate(traject.trips, 1):
            lines.append(f"> Opção {j}")
            if not trip:
                lines.extend(["", ""])
                continue

            for k, leg in enumerate(trip):
                lines.extend(_leg_lines(leg, k == 0, colors))

            last = trip[-1]
            lines.append(f"{last.arrival[:5]} - {colorize(last.dest_name, 'bwhite', colors)}")
            lines.extend(["", ""])

    return lines
