#!/usr/bin/env python3
"""Print the duo progression curve for tuning.

Usage:
    python preview.py                 # levels 0-30
    python preview.py 45              # levels 0-45
    python preview.py --trust 137     # where a given trust score lands

No server, database, or Docker needed.
"""

import argparse
import sys

from app.core.progression import (
    TRUST_INCREMENT,
    TreeStage,
    get_level_data,
    get_leveling_preview,
    stage_of,
)

# --- ANSI Colors ---
STAGE_COLORS = {
    TreeStage.SPROUT: "\033[92m",
    TreeStage.SMALL_TREE: "\033[32m",
    TreeStage.MEDIUM_TREE: "\033[36m",
    TreeStage.GROWN_TREE: "\033[93m",
}

DIVIDER = "\033[90m" + "─" * 60 + "\033[0m"
RESET = "\033[0m"
DIM = "\033[90m"
BOLD = "\033[1m"


def colored_stage(stage: TreeStage) -> str:
    return f"{STAGE_COLORS[stage]}{stage.value:<11}{RESET}"


def print_curve(max_level: int) -> None:
    """Print one row per level with its floor, step size and stage."""
    print()
    print(f"{BOLD}  Level  Total trust  Next step  Completions  Stage{RESET}")
    print(DIVIDER)

    previous_stage = None
    for row in get_leveling_preview(max_level):
        if previous_stage is not None and row["stage"] != previous_stage:
            print(DIVIDER)
        previous_stage = row["stage"]
        print(
            f"  {row['level']:>5}  {row['total_trust']:>11}  {row['trust_for_next']:>9}"
            f"  {row['completions_needed']:>11}  {colored_stage(row['stage'])}"
        )

    print(DIVIDER)
    print(f"  {DIM}One mutual completion = {TRUST_INCREMENT} trust{RESET}")
    print()


def print_trust(trust_score: int) -> None:
    """Show the level, progress bar and stage for a single trust score."""
    data = get_level_data(trust_score)
    filled = int(data.progress * 30)
    bar = "█" * filled + "░" * (30 - filled)

    print()
    print(f"{BOLD}  Trust score {trust_score}{RESET}")
    print(f"  Level {data.level}  [{bar}]  {data.xp_into_level}/{data.xp_needed}")
    print(f"  Stage {colored_stage(stage_of(data.level))}")
    print()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Preview the duo progression curve.")
    parser.add_argument("max_level", nargs="?", type=int, default=30)
    parser.add_argument("--trust", type=int, help="show where this trust score lands")
    args = parser.parse_args(argv)

    if args.trust is not None:
        if args.trust < 0:
            print("\033[91mtrust score must be non-negative\033[0m")
            return 1
        print_trust(args.trust)
    else:
        print_curve(max(0, args.max_level))
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print(f"\n\n{DIM}Interrupted.{RESET}")
