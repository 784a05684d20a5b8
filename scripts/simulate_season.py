"""Simulate a block of swim sessions and print what the tracker reports.

Seeds an in-memory store with a handful of logged sessions (including one
fetched twice from the spreadsheet with an edited comment), then prints the
stored collection, the KPI panel for each window and the daily RPE series.

Usage:
    python scripts/simulate_season.py
"""

import datetime
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.db.init_db import init_db
from app.schemas.session_record import parse_record
from app.services.local_store import LocalStore
from app.tracker.metrics import compute_kpis
from app.tracker.series import daily_average

TODAY = datetime.date(2026, 2, 8)
ATHLETE = "Alice"

# (date, slot, duration, distance, rpe, performance, engagement, fatigue, comments)
LOGGED = [
    ("2026-01-12", "morning", 60, 2500, 6, 7, 8, 4, "aerobic base"),
    ("12/01/2026", "evening", 45, 1800, 5, 6, 7, 5, "technique"),
    ("2026-01-19", "morning", 75, 3200, 7, 7, 8, 6, ""),
    ("26-01-2026", "morning", 60, 2800, 8, 8, 9, 7, "threshold set"),
    ("2026-02-02", "evening", 50, 2000, 4, 6, 6, 3, "recovery"),
    ("2026-02-05", "morning", 90, 4000, 9, 8, 9, 8, "race pace"),
    ("2026-02-07", "morning", 40, 1500, 3, 5, 6, 2, "easy"),
]

# Same session as 2026-01-19 morning, comment edited on the spreadsheet.
FETCHED = [
    {"athleteName": ATHLETE, "sessionDate": "2026-01-19T00:00:00.000Z", "timeSlot": "morning", "duration": 75,
     "distance": 3200, "rpe": 7, "performance": 7, "engagement": 8, "fatigue": 6, "comments": "long aerobic"},
    {"athleteName": ATHLETE, "sessionDate": "2026-02-06", "timeSlot": "evening", "duration": "abc", "rpe": 5},
]


def main():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(engine)

    with Session(engine) as db:
        store = LocalStore(db, today=lambda: TODAY)

        for date, slot, duration, distance, rpe, perf, eng, fat, comments in LOGGED:
            store.add({"athleteName": ATHLETE, "sessionDate": date, "timeSlot": slot, "duration": duration,
                       "distance": distance, "rpe": rpe, "performance": perf, "engagement": eng, "fatigue": fat,
                       "comments": comments})

        fetched = []
        for item in FETCHED:
            try:
                fetched.append(parse_record(item))
            except ValueError as e:
                print(f"Dropped fetched item: {e}")
        records = store.merge_in(fetched)

        print()
        print("=" * 90)
        print(f"{'Date':<12} {'Slot':<12} {'Min':>5} {'Meters':>7} {'RPE':>4} {'Load':>6}  Comments")
        print("=" * 90)
        for r in records:
            print(f"{r.session_date.isoformat():<12} {r.time_slot.value:<12} {r.duration:>5} "
                  f"{r.distance or 0:>7} {r.rpe:>4} {r.load:>6}  {r.comments}")

        print()
        print("=" * 90)
        print(f"{'Window':<8} {'Sessions':>9} {'Minutes':>8} {'Meters':>8} {'Load':>7} {'RPE':>6} {'Perf':>6}")
        print("=" * 90)
        for days in (7, 30, 365):
            k = compute_kpis(records, days, ATHLETE, TODAY)
            print(f"{days:<8} {k.session_count:>9} {k.total_duration:>8.0f} {k.total_distance:>8.0f} "
                  f"{k.total_load:>7.0f} {k.avg_rpe or 0:>6.2f} {k.avg_performance or 0:>6.2f}")

        print()
        print("Daily RPE (30 days)")
        for point in daily_average(records, "rpe", 30, TODAY):
            print(f"  {point.date.isoformat()}  {'#' * int(point.value)} {point.value:.1f}")


if __name__ == "__main__":
    main()
