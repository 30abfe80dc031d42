"""
Drinkosaur CLI demo. Run from project root: python -m drinkosaur.main
Logs a sample evening, prints the current BAC status and trend, and optionally saves a graph.
"""

import argparse
import sys
from datetime import datetime

from drinkosaur.calculations import HOUR_MS, MINUTE_MS
from drinkosaur.catalog import build_drink
from drinkosaur.display import dashboard_summary
from drinkosaur.drinks import now_ms
from drinkosaur.graph import save_bac_graph
from drinkosaur.logging_setup import configure_logging
from drinkosaur.profile import UserProfile
from drinkosaur.session import Session


def _clock(ts):
    if ts is None:
        return "--:--"
    return datetime.fromtimestamp(ts / 1000).strftime("%H:%M")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Drinkosaur: log drinks and estimate BAC over time")
    parser.add_argument("--weight", type=float, default=70.0, help="Body weight (kg)")
    parser.add_argument("--female", action="store_true", help="Use the female Widmark ratio")
    parser.add_argument("--speed", choices=["slow", "average", "fast"], default="average", help="Drinking speed")
    parser.add_argument("--unit", choices=["percent", "g/L"], default="percent", help="Display unit")
    parser.add_argument("--graph", type=str, metavar="FILE", help="Save BAC trend graph to FILE (e.g. bac_graph.png)")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    profile = UserProfile(
        weight_kg=args.weight,
        gender="female" if args.female else "male",
        drinking_speed=args.speed,
    )
    session = Session(profile)

    now = now_ms()
    # Demo evening: two pints two hours ago, a chugged shot an hour ago, a vodka tonic now.
    session.add_drink(build_drink("lager", 500, timestamp=now - 2 * HOUR_MS))
    session.add_drink(build_drink("ipa", 500, timestamp=now - 2 * HOUR_MS + 30 * MINUTE_MS))
    session.add_drink(build_drink("vodka", 40, timestamp=now - HOUR_MS, is_chug=True))
    session.add_drink(build_drink("vodka", 40, timestamp=now, mixer_id="tonic", mixer_ml=160))
    print("Demo session:")
    for drink in session.drinks:
        print(f"  {_clock(drink.timestamp)}  {drink.name:<20} {drink.volume_ml:>5} ml  {drink.abv:>4}%")

    status = session.status(now)
    summary = dashboard_summary(status, unit=args.unit)
    print(f"Weight: {profile.weight_kg} kg, {profile.gender}, {profile.drinking_speed} drinker")
    print(f"BAC now: {summary['value']:.{summary['decimals']}f}{summary['unit']} ({status.status_message})")
    print(f"Peak: {summary['peak']:.{summary['decimals']}f}{summary['unit']} at {_clock(status.peak_time)}")
    print(f"Sober at: {_clock(status.sober_timestamp)}")
    if summary["driving_warning"]:
        print("Do not drive.")

    trend = session.trend(now)
    print(f"Trend points: {len(trend)} (time, bac) from -7h to +7h")

    if args.graph:
        try:
            path = save_bac_graph(session.drinks, profile, now, output_path=args.graph)
            print(f"Graph saved: {path}")
        except ImportError:
            print("matplotlib not installed. pip install matplotlib", file=sys.stderr)
            sys.exit(1)

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
