#!/usr/bin/env python3
"""
Database management utility for the ClamCard system.

Usage:
    python manage_db.py init         - Initialize database with the default catalog
    python manage_db.py show         - Show all zones and stations
    python manage_db.py add_zone     - Add a new zone
    python manage_db.py add_station  - Add a station to a zone
    python manage_db.py history      - Show the stored journey history
    python manage_db.py reset        - Delete the stored journey history
"""

import sys
from decimal import Decimal, InvalidOperation

from clamcard.database import DatabaseManager


def init_database():
    """Initialize database with the default catalog."""
    print("Initializing database...")
    db = DatabaseManager()
    db.init_default_catalog()
    print("Database initialized successfully!")
    show_catalog()


def show_catalog():
    """Display all zones and their stations."""
    db = DatabaseManager()
    zones = db.get_zones()
    stations = db.get_stations()

    print("\n" + "="*60)
    print("ZONES")
    print("="*60)
    print(f"{'Zone':<8} {'Single (£)':<12} {'Day cap (£)':<12} {'Week cap (£)':<12}")
    print("-"*44)
    for zone in zones:
        print(f"{zone.name:<8} {zone.cost_per_single_journey:<12} "
              f"{zone.cost_per_day_limit:<12} {zone.cost_per_week_limit:<12}")

    print("\n" + "="*60)
    print("STATIONS")
    print("="*60)
    for station in stations:
        print(f"{station.name:<20} Zone {station.zone.name}")
    print("-"*30)
    print(f"Total zones: {len(zones)}, total stations: {len(stations)}")
    print("="*60)


def _read_amount(prompt: str) -> Decimal:
    try:
        amount = Decimal(input(prompt))
    except InvalidOperation:
        raise ValueError("not a number")
    if amount < 0:
        raise ValueError("amounts must not be negative")
    return amount


def add_new_zone():
    """Add a new zone interactively."""
    print("\nADD NEW ZONE")
    print("-"*30)

    try:
        db = DatabaseManager()
        print(f"Current zones: {[zone.name for zone in db.get_zones()]}")

        name = input("\nEnter new zone name: ").strip()
        single = _read_amount("  Cost per single journey: £")
        day = _read_amount("  Cost per day limit: £")
        week = _read_amount("  Cost per week limit: £")

        zone = db.add_zone(name, single, day, week)
        print(f"\n✓ Zone {zone.name} added successfully!")

    except ValueError as e:
        print(f"Invalid input: {e}")


def add_new_station():
    """Add a station to an existing zone interactively."""
    print("\nADD NEW STATION")
    print("-"*30)

    try:
        db = DatabaseManager()
        print(f"Available zones: {[zone.name for zone in db.get_zones()]}")

        name = input("Enter station name: ").strip()
        zone_name = input("Enter zone: ").strip()

        station = db.add_station(name, zone_name)
        print(f"✓ Station {station.name} added to Zone {station.zone.name}")

    except ValueError as e:
        print(f"Invalid input: {e}")


def show_history():
    """Display the stored journey history."""
    db = DatabaseManager()
    journeys = db.load_journey_history()

    print("\n" + "="*70)
    print("JOURNEY HISTORY")
    print("="*70)
    print(f"{'Date':<20} {'From':<15} {'To':<15} {'Cost (£)':<10}")
    print("-"*60)

    total = Decimal("0")
    for journey in journeys:
        print(f"{journey.date:%Y-%m-%d %H:%M}     {journey.from_station.name:<15} "
              f"{journey.to_station.name:<15} £{journey.cost:<10}")
        total += journey.cost

    print("-"*60)
    print(f"Journeys: {len(journeys)}, total charged: £{total}")


def reset_history():
    """Delete all stored journeys."""
    confirm = input("Are you sure you want to delete the journey history? (yes/no): ")

    if confirm.lower() == 'yes':
        removed = DatabaseManager().clear_journey_history()
        print(f"Deleted {removed} journeys.")
    else:
        print("Reset cancelled.")


def main():
    """Main entry point."""
    if len(sys.argv) < 2:
        print(__doc__)
        return

    command = sys.argv[1].lower()

    commands = {
        'init': init_database,
        'show': show_catalog,
        'add_zone': add_new_zone,
        'add_station': add_new_station,
        'history': show_history,
        'reset': reset_history,
    }

    if command in commands:
        commands[command]()
    else:
        print(f"Unknown command: {command}")
        print(__doc__)


if __name__ == "__main__":
    main()
