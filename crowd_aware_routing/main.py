#!/usr/bin/env python3
"""
Crowd-Aware Routing System - Command Line Interface

Estimates current crowd densities and prints the least-congested route
between two sites.
"""

import argparse
import sys

from .algorithms import CongestionAwareRouter, InvalidRoute
from .config import EstimatorConfig, RoutingConfig
from .data import location_names
from .density import CrowdDensityEstimator, SpecialEvent, Weather


def main(argv=None):
    """
    Demonstration of density estimation and congestion-aware routing.
    """
    parser = argparse.ArgumentParser(description="Least-congested route between pilgrimage sites")
    parser.add_argument("--start", default="Mina", help="Starting site")
    parser.add_argument("--destination", default="Jamaraat Bridge", help="Destination site")
    parser.add_argument("--weather", choices=[w.value for w in Weather], help="Observed weather")
    parser.add_argument("--event", choices=[e.value for e in SpecialEvent], help="Special event signal")
    parser.add_argument("--seed", type=int, help="Seed for reproducible densities")
    parser.add_argument("--natural", action="store_true",
                        help="Disable the demo band mix so every site follows its own curve")
    parser.add_argument("--list", action="store_true", help="List known sites and exit")
    args = parser.parse_args(argv)

    if args.list:
        for name in location_names():
            print(name)
        return 0

    print("🚀 Crowd-Aware Routing System")
    print("=" * 50)

    print("\n📊 Estimating crowd densities...")
    estimator_config = EstimatorConfig(seed=args.seed, demo_band_mix=not args.natural)
    estimator = CrowdDensityEstimator(estimator_config)
    snapshots = estimator.estimate(weather=args.weather, event=args.event)

    for snapshot in snapshots:
        print(f"   {snapshot.location_name:<24} {snapshot.density_level.value:<8} "
              f"{snapshot.density:6.2f} p/m²  {snapshot.occupancy_percentage:5.1f}%")
    print(f"   Total distributed: {snapshots.total_crowd} (target: {snapshots.total_pilgrims_target})")

    print(f"\n🗺️ Route: {args.start} → {args.destination}")
    router = CongestionAwareRouter(RoutingConfig.create_default_config())
    try:
        route = router.find_route(args.start, args.destination, snapshots)
    except InvalidRoute as e:
        print(f"❌ {e.message} ({e.reason.value})")
        return 1

    print(f"   Path: {' → '.join(route.path)}")
    print(f"   Distance: {route.total_distance_km:.1f} km")
    print(f"   Duration: {route.duration_minutes} minutes")
    print(f"   Congestion: {route.congestion_level.value}")
    print(f"   Walking speed: {route.adjusted_speed_kmh:.1f} km/h")

    print("\n🧭 Directions:")
    for i, line in enumerate(route.directions, 1):
        print(f"   {i}. {line}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
