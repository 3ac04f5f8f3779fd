"""
Drive the ClamCard API through a day of commuting.

Taps in and out repeatedly between two stations and prints what each
journey was charged, so the day cap can be seen taking effect.
"""

import sys

import requests


def tap(base_url: str, direction: str, station: str) -> dict:
    response = requests.post(f"{base_url}/api/tap-{direction}", json={"station": station})
    if response.status_code != 200:
        raise RuntimeError(f"tap-{direction} at {station} failed: {response.text}")
    return response.json()


def commute(base_url: str = "http://localhost:8000",
            home: str = "Asterisk", work: str = "Barbican", trips: int = 6):
    """
    Travel back and forth between two stations.

    Args:
        base_url: API base URL
        home: Station the first journey starts from
        work: Station at the other end
        trips: Number of journeys to make
    """
    current = requests.get(f"{base_url}/api/journeys/current").json()
    if current["in_progress"]:
        print(f"A journey from {current['station']} is already open; tapping out there first.")
        tap(base_url, "out", current["station"])

    start, end = home, work
    for trip in range(1, trips + 1):
        tap(base_url, "in", start)
        result = tap(base_url, "out", end)
        journey = result["journey"]
        print(f"Trip {trip}: {journey['from_station']} → {journey['to_station']}: £{journey['cost']}")
        start, end = end, start

    spending = requests.get(f"{base_url}/api/spending").json()
    print(f"\nSpent today: £{spending['spent_today']}")
    print(f"Spent this week: £{spending['spent_this_week']}")


if __name__ == "__main__":
    if len(sys.argv) > 1:
        commute(base_url=sys.argv[1])
    else:
        commute()
