"""
Static catalog of pilgrimage sites and the walking distances between them.
"""

from typing import Dict, List, Optional, Tuple

from .models import Location, Section

LOCATION_CATALOG: Tuple[Location, ...] = (
    Location(
        name='Masjid al-Haram',
        latitude=21.422487, longitude=39.826174,
        area_m2=356800, capacity=120000,
        sections=(
            Section('mataf', 'Mataf Area', 0.15),
            Section('ground', 'Ground Floor', 0.45),
            Section('first', 'First Floor', 0.25),
            Section('roof', 'Roof Area', 0.15),
        )
    ),
    Location(
        name='Mina',
        latitude=21.413249, longitude=39.892966,
        area_m2=812000, capacity=240000,
        sections=(
            Section('tents-a', 'Tents Area A', 0.3),
            Section('tents-b', 'Tents Area B', 0.3),
            Section('tents-c', 'Tents Area C', 0.3),
            Section('services', 'Services Area', 0.1),
        )
    ),
    Location(
        name='Jamaraat Bridge',
        latitude=21.42365, longitude=39.873485,
        area_m2=52000, capacity=100000,  # hourly throughput
        sections=(
            Section('lower', 'Lower Level', 0.3),
            Section('middle', 'Middle Level', 0.4),
            Section('upper', 'Upper Level', 0.3),
        )
    ),
    Location(
        name='Arafat',
        latitude=21.355461, longitude=39.984687,
        area_m2=1456000, capacity=300000,
        sections=(
            Section('jabal', 'Jabal al-Rahmah', 0.2),
            Section('nimrah', 'Nimrah', 0.3),
            Section('uranah', 'Uranah', 0.25),
            Section('other', 'Other Areas', 0.25),
        )
    ),
    Location(
        name='Muzdalifah',
        latitude=21.383082, longitude=39.936322,
        area_m2=623000, capacity=250000,
        sections=(
            Section('mash', "Al-Mash'ar al-Haram", 0.3),
            Section('north', 'Northern Area', 0.35),
            Section('south', 'Southern Area', 0.35),
        )
    ),
    Location(
        name='Mina Entrance Gate 1',
        latitude=21.411856, longitude=39.887235,
        area_m2=3000, capacity=15000,  # hourly throughput
        sections=(
            Section('entry', 'Entry Points', 0.4),
            Section('security', 'Security Check', 0.3),
            Section('waiting', 'Waiting Area', 0.3),
        )
    ),
    Location(
        name='Tent City Section A',
        latitude=21.414501, longitude=39.889124,
        area_m2=120000, capacity=80000,
        sections=(
            Section('a1', 'Block A1', 0.25),
            Section('a2', 'Block A2', 0.25),
            Section('a3', 'Block A3', 0.25),
            Section('a4', 'Block A4', 0.25),
        )
    ),
    Location(
        name='Jamarat Central Access',
        latitude=21.423850, longitude=39.871952,
        area_m2=8000, capacity=30000,  # hourly throughput
        sections=(
            Section('entry', 'Entry Zone', 0.4),
            Section('corridor', 'Main Corridor', 0.4),
            Section('exit', 'Exit Zone', 0.2),
        )
    ),
)

# Walking distances in km between directly connected sites (undirected)
DISTANCE_TABLE: Dict[str, Dict[str, float]] = {
    'Masjid al-Haram': {
        'Mina': 6.2,
        'Arafat': 20.5,
        'Muzdalifah': 12.8,
        'Jamaraat Bridge': 7.1
    },
    'Mina': {
        'Masjid al-Haram': 6.2,
        'Arafat': 14.3,
        'Muzdalifah': 3.5,
        'Jamaraat Bridge': 1.8
    },
    'Arafat': {
        'Masjid al-Haram': 20.5,
        'Mina': 14.3,
        'Muzdalifah': 8.2,
        'Jamaraat Bridge': 16.1
    },
    'Muzdalifah': {
        'Masjid al-Haram': 12.8,
        'Mina': 3.5,
        'Arafat': 8.2,
        'Jamaraat Bridge': 5.3
    },
    'Jamaraat Bridge': {
        'Masjid al-Haram': 7.1,
        'Mina': 1.8,
        'Arafat': 16.1,
        'Muzdalifah': 5.3
    }
}

_CATALOG_BY_NAME: Dict[str, Location] = {loc.name: loc for loc in LOCATION_CATALOG}


def location_names() -> List[str]:
    """Catalog location names in catalog order."""
    return [loc.name for loc in LOCATION_CATALOG]


def get_location(name: str) -> Optional[Location]:
    return _CATALOG_BY_NAME.get(name)


def get_distance(start: str, destination: str,
                 distance_table: Optional[Dict[str, Dict[str, float]]] = None) -> Optional[float]:
    """
    Direct-path distance in km between two sites.

    Looks up both directions so a one-sided table entry still counts.

    Returns:
        Distance in km, or None if the sites are not directly connected
    """
    table = DISTANCE_TABLE if distance_table is None else distance_table
    distance = table.get(start, {}).get(destination)
    if distance is None:
        distance = table.get(destination, {}).get(start)
    return distance
