#!/usr/bin/env python3
"""
Simulate elimination rounds over randomly generated tied ballots.

Each round splits every ballot's vote evenly over its top tie group, removes
the element with the fewest votes from every ballot, and repeats until the
requested number of elements remain.
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dense import TiedDense  # noqa: E402
from orders.sampling import make_rng  # noqa: E402

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def first_preferences(ballots: TiedDense) -> pd.Series:
    """Votes per element, each ballot split evenly across its top tie group."""
    frame = ballots.to_frame()
    top = frame[frame["group"] == 0]
    weights = 1.0 / top.groupby("order_id")["element"].transform("count")
    totals = weights.groupby(top["element"]).sum()
    return totals.reindex(range(ballots.elements), fill_value=0.0)


def run_rounds(ballots: TiedDense, labels: list, remaining: int) -> pd.DataFrame:
    """
    Eliminate the weakest element until ``remaining`` are left.

    Args:
        ballots: Ballots to reduce in place
        labels: Display name of each current element, kept in step with removals
        remaining: Number of elements to stop at

    Returns:
        DataFrame with one row per element per round
    """
    rows = []
    round_num = 1
    while ballots.elements > remaining:
        votes = first_preferences(ballots)
        for element, total in votes.items():
            rows.append(
                {"round": round_num, "element": labels[element], "votes": total}
            )

        # Lowest total loses; ties go to the lowest index
        loser = int(votes.idxmin())
        logger.info(
            f"Round {round_num}: eliminating {labels[loser]} with {votes[loser]:.1f} votes"
        )
        ballots.remove_element(loser)
        labels.pop(loser)
        round_num += 1

    return pd.DataFrame(rows)


def main():
    parser = argparse.ArgumentParser(description="Simulate elimination rounds")
    parser.add_argument(
        "--elements", type=int, default=5, help="Number of elements (default: 5)"
    )
    parser.add_argument(
        "--ballots", type=int, default=1000, help="Number of ballots (default: 1000)"
    )
    parser.add_argument(
        "--remaining",
        type=int,
        default=1,
        help="Stop when this many elements remain (default: 1)",
    )
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")

    args = parser.parse_args()

    if args.elements < 1 or not 1 <= args.remaining <= args.elements:
        logger.error("Need at least one element and 1 <= remaining <= elements")
        sys.exit(1)

    rng = make_rng(args.seed)
    ballots = TiedDense(args.elements)
    ballots.generate_uniform(rng, args.ballots)
    logger.info(f"Generated {len(ballots)} ballots over {args.elements} elements")

    labels = [f"E{i}" for i in range(args.elements)]
    summary = run_rounds(ballots, labels, args.remaining)

    print("\n=== Round-by-Round Results ===")
    if summary.empty:
        print("No rounds run")
    else:
        print(summary.pivot(index="element", columns="round", values="votes").round(1))

    winners = ballots.to_specific(rng).tally()
    print("\n=== Final Winners (random tie-break) ===")
    for label, count in zip(labels, winners):
        print(f"{label}: {count}")


if __name__ == "__main__":
    main()
