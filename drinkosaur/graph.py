"""
BAC trend graph. Produces an image file or returns data for any frontend.
"""

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Tuple

from drinkosaur.calculations import bac_trend
from drinkosaur.drinks import DrinkEvent
from drinkosaur.display import MAX_SAFE_BAC
from drinkosaur.profile import UserProfile


def trend_data(drinks: Iterable[DrinkEvent], profile: UserProfile, center_time: int) -> List[Tuple[int, float]]:
    """(time_ms, bac_percent) pairs, +/- 7 hours around center_time."""
    return [(p.time, round(p.bac, 4)) for p in bac_trend(drinks, profile, center_time)]


def save_bac_graph(
    drinks: Iterable[DrinkEvent],
    profile: UserProfile,
    center_time: int,
    output_path: str = "bac_graph.png",
    title: str = "BAC trend",
) -> str:
    """
    Plot the BAC trend with matplotlib and save to file.
    Returns path to saved file. Requires: pip install matplotlib
    """
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib is required for save_bac_graph. pip install matplotlib")

    points = trend_data(drinks, profile, center_time)
    times = [datetime.fromtimestamp(t / 1000) for t, _ in points]
    bacs = [b for _, b in points]

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(times, bacs, color="#2563eb", linewidth=2, label="BAC")
    ax.fill_between(times, bacs, alpha=0.2, color="#2563eb")
    ax.axhline(y=MAX_SAFE_BAC, color="#dc2626", linestyle="--", linewidth=1, label=f"Legal limit ({MAX_SAFE_BAC}%)")
    ax.axvline(x=datetime.fromtimestamp(center_time / 1000), color="#6b7280", linestyle=":", linewidth=1, label="Now")
    ax.set_xlabel("Time")
    ax.set_ylabel("BAC (%)")
    ax.set_title(title)
    ax.legend(loc="upper right")
    ax.set_ylim(bottom=0)
    ax.grid(True, alpha=0.3)
    fig.autofmt_xdate()
    fig.tight_layout()
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
