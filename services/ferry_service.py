# Ferry Service — inter-island fare estimate
# Builds a visiting sequence (hub first and last when the hub is selected,
# the other islands in canonical ISLAND_ORDER), resolves each consecutive
# pair to a route in either direction, and takes the cheapest operator
# fare per person. Missing routes cost 0.

from typing import List, Optional, Sequence

from config import HUB_ISLAND_ID
from data.islands import ISLAND_ORDER
from models.schemas import LineItem
from services.money import positive


def _order_rank(island_id: str) -> int:
    if island_id in ISLAND_ORDER:
        return ISLAND_ORDER.index(island_id)
    return len(ISLAND_ORDER)


def build_island_sequence(island_ids: Sequence[str], hub: str = HUB_ISLAND_ID) -> List[str]:
    """
    Ordered, de-duplicated visiting sequence.
    With the hub selected: [hub, *others, hub], others in ISLAND_ORDER
    (unknown islands last, in supplied order). Otherwise the supplied order.
    """
    seen = []
    for island_id in island_ids or []:
        if island_id and island_id not in seen:
            seen.append(island_id)

    if hub not in seen:
        return seen

    others = sorted((i for i in seen if i != hub), key=_order_rank)
    if not others:
        return [hub]
    return [hub] + others + [hub]


def find_route(routes: Sequence[dict], origin: str, destination: str) -> Optional[dict]:
    routes = [r for r in routes if isinstance(r, dict)]
    for r in routes:
        if r.get("originId") == origin and r.get("destinationId") == destination:
            return r
    for r in routes:
        if r.get("originId") == destination and r.get("destinationId") == origin:
            return r
    return None


def cheapest_fare(route: dict) -> float:
    """Lowest positive sampleFareINR among the route's operators, 0 if none."""
    operators = route.get("operators") if isinstance(route, dict) else None
    if not isinstance(operators, list):
        return 0
    fares = [
        positive(op.get("sampleFareINR"))
        for op in operators
        if isinstance(op, dict)
    ]
    fares = [f for f in fares if f > 0]
    return min(fares) if fares else 0


def ferry_lines(
    island_ids: Sequence[str],
    routes: Sequence[dict],
    traveler_count: int
) -> List[LineItem]:
    """One line per consecutive pair in the visiting sequence."""
    travelers = max(1, int(traveler_count or 1))
    sequence  = build_island_sequence(island_ids)
    lines     = []

    for origin, destination in zip(sequence, sequence[1:]):
        route = find_route(routes or [], origin, destination)
        fare  = cheapest_fare(route) if route else 0
        lines.append(LineItem(
            ref_id          = str(route.get("id") or f"{origin}-{destination}") if route else f"{origin}-{destination}",
            label           = f"{origin} → {destination}",
            quantity        = travelers,
            unit_price      = fare,
            total           = fare * travelers,
            price_available = fare > 0,
            details         = {
                "duration_min": route.get("typicalDurationMin") if route else None,
            },
        ))

    return lines


def estimate_ferry_cost(
    island_ids: Sequence[str],
    routes: Sequence[dict],
    traveler_count: int
) -> float:
    return sum(line.total for line in ferry_lines(island_ids, routes, traveler_count))
