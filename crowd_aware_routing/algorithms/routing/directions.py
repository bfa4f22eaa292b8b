"""
Narrated directions for resolved routes.

Turn-by-turn steps for well-known direct hops live in a lookup table keyed by
(start, destination); every other direct hop gets the generic entry.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ...data.models import DensityLevel


@dataclass(frozen=True)
class TurnByTurn:
    """
    Ordered instruction templates for one direct hop.

    Templates may reference {start} and {destination}. When `watch_location`
    is set, `when_congested` or `when_clear` is appended depending on whether
    that site is currently high/critical.
    """
    steps: Tuple[str, ...]
    watch_location: Optional[str] = None
    when_congested: Tuple[str, ...] = ()
    when_clear: Tuple[str, ...] = ()

    def render(self, start: str, destination: str,
               level_of: Callable[[str], DensityLevel]) -> List[str]:
        templates = list(self.steps)
        if self.watch_location is not None:
            if level_of(self.watch_location).is_congested:
                templates.extend(self.when_congested)
            else:
                templates.extend(self.when_clear)
        return [t.format(start=start, destination=destination) for t in templates]


TURN_BY_TURN: Dict[Tuple[str, str], TurnByTurn] = {
    ('Mina', 'Jamaraat Bridge'): TurnByTurn(
        steps=(
            "Head southwest on Tariq Al-Jaysh Street for 0.5 km",
            "Turn right onto Al-Jamarat Road and continue for 1.0 km",
            "Follow the designated pathway along Al-Jamarat Road following the crowd management barriers",
        ),
        watch_location='Jamaraat Bridge',
        when_congested=(
            "At the Jamarat Complex, follow signs for your camp's designated time slot entrance",
            "Use the Jamarat Bridge Eastern Entrance to avoid the most congested areas",
        ),
        when_clear=(
            "Continue on Al-Jamarat Road until you reach the Jamarat Complex",
        ),
    ),
    ('Masjid al-Haram', 'Mina'): TurnByTurn(
        steps=(
            "Exit Masjid al-Haram through the King Fahd expansion gate (Gate 79)",
            "Head east on Ibrahim Al Khalil Road for 1.2 km",
            "Continue onto Makkah-Mina Road for 4.5 km",
        ),
        watch_location='Masjid al-Haram',
        when_congested=(
            "Take the covered walkway path on Pedestrian Route 5",
            "Keep right at the Al-Muaisem junction to avoid heavier crowds",
            "Follow Mina Street 204 to enter the Mina Valley",
        ),
        when_clear=(
            "Follow the main pedestrian path along Makkah-Mina Road",
            "Enter Mina via Street 206",
        ),
    ),
    ('Masjid al-Haram', 'Arafat'): TurnByTurn(
        steps=(
            "Exit Masjid al-Haram through the Ajyad Gate (Gate 5)",
            "Head southeast on Al-Haram Road for 1.5 km",
            "Continue onto Makkah-Arafat Highway for 14 km",
            "Follow signs for Arafat Plain on Route 15",
            "Enter Arafat via Northern Entrance Road",
        ),
    ),
    ('Arafat', 'Muzdalifah'): TurnByTurn(
        steps=(
            "Exit Arafat via the Western Exit Road",
            "Head west on Arafat-Muzdalifah Road for 6 km",
            "Follow the pedestrian pathways marked in green",
            "Continue straight onto Muzdalifah Valley Road",
        ),
    ),
    ('Muzdalifah', 'Mina'): TurnByTurn(
        steps=(
            "Head northwest on Muzdalifah Valley Road",
            "Continue onto Muzdalifah-Mina Connection Road for 2.5 km",
            "Follow the pedestrian routes marked with yellow signs",
            "Enter Mina through the Southern Entrance",
        ),
    ),
    ('Jamaraat Bridge', 'Masjid al-Haram'): TurnByTurn(
        steps=(
            "Exit the Jamarat Complex via the Western Exit",
            "Head southwest on Al-Jamarat Road for 0.8 km",
            "Continue onto Mina-Makkah Pedestrian Way for 5 km",
            "Follow Ibrahim Al-Khalil Road to reach Masjid al-Haram",
        ),
    ),
}

GENERIC_TURN_BY_TURN = TurnByTurn(
    steps=(
        "Head toward {destination} following the main pilgrimage route",
        "Follow the official signage and crowd management directions",
    ),
)

CALM_ROUTE_LINE = "This route avoids high crowd density areas"


def turn_by_turn_for(start: str, destination: str,
                     table: Optional[Dict[Tuple[str, str], TurnByTurn]] = None) -> TurnByTurn:
    table = TURN_BY_TURN if table is None else table
    return table.get((start, destination), GENERIC_TURN_BY_TURN)


def _warning_line(start: str, destination: str,
                  level_of: Callable[[str], DensityLevel],
                  aggregate: DensityLevel) -> str:
    if level_of(start) is DensityLevel.CRITICAL:
        return f"⚠️ Warning: Extremely high crowd density at your starting point ({start})"
    if level_of(destination) is DensityLevel.CRITICAL:
        return f"⚠️ Warning: Extremely high crowd density at your destination ({destination})"
    if aggregate is DensityLevel.CRITICAL:
        return "⚠️ Warning: Extremely high crowd density on this route"
    return "⚠️ Warning: High crowd density detected on this route"


def build_directions(path: Sequence[str], hop_distances: Sequence[float],
                     level_of: Callable[[str], DensityLevel],
                     aggregate: DensityLevel,
                     table: Optional[Dict[Tuple[str, str], TurnByTurn]] = None) -> List[str]:
    """
    Assemble the narrated direction list for a resolved path.

    Args:
        path: Ordered location names, start first
        hop_distances: Static distance in km of each hop (len(path) - 1 items)
        level_of: Density level lookup for a location
        aggregate: Worst density level on the path
        table: Turn-by-turn lookup table (defaults to TURN_BY_TURN)

    Returns:
        Ordered list of direction strings
    """
    start, destination = path[0], path[-1]
    directions = [f"Start at {start}"]

    if any(level_of(node).is_congested for node in path):
        directions.append(_warning_line(start, destination, level_of, aggregate))
        directions.append("We've calculated a route that avoids the most crowded areas where possible")
        directions.append("Consider traveling during off-peak hours if possible")
    else:
        directions.append(CALM_ROUTE_LINE)

    if len(path) > 2:
        # only hops leaving an intermediate stop are narrated
        for next_node, distance in zip(path[2:], hop_distances[1:]):
            directions.append(
                f"Continue to {next_node} ({level_of(next_node).value} crowd density) - {distance:.1f} km"
            )
    else:
        directions.extend(turn_by_turn_for(start, destination, table).render(start, destination, level_of))

    directions.append(f"Arrive at {destination}")

    if aggregate.is_congested:
        directions.append("Stay hydrated and follow crowd management officials' instructions")
        directions.append("Keep your group together and follow the designated walking paths")

    return directions
