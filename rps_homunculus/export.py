"""Export match history and gauntlet results to JSON or CSV."""

import json
import csv
from pathlib import Path

from .stats import compute_gauntlet_table

ROUND_FIELDS = ["round", "human_move", "computer_move", "winner"]


def export_json(match, path: str):
    """Export a match (or a headless match report) to a JSON file."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w") as f:
        json.dump(match.to_dict(), f, indent=2)
    print(f"  ✓ Match exported to {out}")


def export_csv(history: list, path: str):
    """Export one row per round to a CSV file."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=ROUND_FIELDS)
        writer.writeheader()
        for rnd in history:
            writer.writerow(rnd.to_dict())
    print(f"  ✓ History exported to {out}")


def export_gauntlet_json(reports: list, path: str):
    """Export gauntlet matches plus the aggregated table to a JSON file."""
    table = compute_gauntlet_table(reports)
    data = {
        "matches": [r.to_dict() for r in reports],
        "table": [e.to_dict() for e in table],
    }
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w") as f:
        json.dump(data, f, indent=2)
    print(f"  ✓ Results exported to {out}")


def export_gauntlet_csv(reports: list, path: str):
    """Export the aggregated gauntlet table to a CSV file."""
    table = compute_gauntlet_table(reports)
    fieldnames = [
        "rank", "name", "matches_played", "wins", "losses", "forfeits",
        "win_pct", "round_wins", "round_losses", "round_ties",
        "round_win_pct", "avg_rounds",
    ]
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for i, entry in enumerate(table, 1):
            row = entry.to_dict()
            row["rank"] = i
            writer.writerow(row)
    print(f"  ✓ Table exported to {out}")
