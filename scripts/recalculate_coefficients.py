#!/usr/bin/env python3
"""
Recalculate continental coefficients from a JSON export.

The export is one JSON object with the record lists the engine needs:
    {"competitions": [...], "seasons": [...], "matches": [...],
     "nations": [...], "clubs": [...],
     "existing_country_coefficients": [...]}   # optional

Normal usage (print the rankings):
    python scripts/recalculate_coefficients.py export.json

Write the full result as JSON:
    python scripts/recalculate_coefficients.py export.json --output coefficients.json

Replace the stored coefficient tables (previous ranks read from the database):
    python scripts/recalculate_coefficients.py export.json --save
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from continental.coefficients import CoefficientCalculator, CoefficientRun
from continental.coefficients.snapshot_store import load_previous_ranks, replace_snapshot
from continental.config import settings
from continental.memberships import MEMBERSHIPS
from continental.records import (
    Club,
    Competition,
    ContinentalMatch,
    ContinentalSeason,
    Nation,
    PreviousRank,
)

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recalculate continental club and nation coefficients.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("export", help="Path to the JSON export of continental records.")
    parser.add_argument(
        "--output",
        default=None,
        help="Write the calculated coefficients as JSON to this path.",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Replace the stored coefficient tables with this run.",
    )
    parser.add_argument(
        "--tie-break",
        choices=("name", "insertion"),
        default=None,
        help="Ordering for entities level on points (default from settings).",
    )
    parser.add_argument(
        "--metrics-json",
        default=None,
        help="Write a JSON summary to this path on completion.",
    )
    return parser


def _print_tier(run: CoefficientRun, membership: str) -> None:
    nations = run.nations_for(membership)
    print(f"\n{membership} nations ({len(nations)})")
    print(f"{'#':>3}  {'Nation':<28}{'Total':>8}  Spots")
    for nation in nations:
        champion = "  (champion)" if nation.champion_qualifier else ""
        print(
            f"{nation.rank:>3}  {nation.name:<28}{float(nation.total_points):>8.3f}  "
            f"{nation.spots}{champion}"
        )

    clubs = run.clubs_for(membership)
    print(f"\n{membership} clubs ({len(clubs)}), top 10")
    for club in clubs[:10]:
        print(f"{club.rank:>3}  {club.name:<28}{float(club.total_points):>8.3f}  {club.nation_name or '-'}")


def main() -> int:
    args = _build_parser().parse_args()
    logging.basicConfig(level=settings.log_level, format=settings.log_format)

    export_path = Path(args.export)
    try:
        export = json.loads(export_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"ERROR: could not read export {export_path}: {exc}")
        return 1

    started_at = _utc_now_iso()
    print(f"COEFFICIENTS  export={export_path}  save={args.save}  started={started_at}")
    print("-" * 60)

    t_start = perf_counter()

    previous_ranks = [
        PreviousRank.from_dict(p) for p in export.get("existing_country_coefficients", [])
    ]
    if args.save:
        from continental.db import get_session

        with get_session() as session:
            previous_ranks = load_previous_ranks(session)

    calculator = CoefficientCalculator(tie_break=args.tie_break)
    run = calculator.calculate(
        competitions=[Competition.from_dict(c) for c in export.get("competitions", [])],
        seasons=[ContinentalSeason.from_dict(s) for s in export.get("seasons", [])],
        matches=[ContinentalMatch.from_dict(m) for m in export.get("matches", [])],
        nations=[Nation.from_dict(n) for n in export.get("nations", [])],
        clubs=[Club.from_dict(c) for c in export.get("clubs", [])],
        previous_ranks=previous_ranks,
    )

    for membership in MEMBERSHIPS:
        _print_tier(run, membership)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(run.to_dict(), indent=2) + "\n", encoding="utf-8")

    clubs_saved = countries_saved = 0
    if args.save:
        from continental.db import get_session

        try:
            with get_session() as session:
                clubs_saved, countries_saved = replace_snapshot(session, run)
        except ValueError as exc:
            print(f"ERROR: not saved: {exc}")
            return 1

    elapsed = perf_counter() - t_start

    print("-" * 60)
    print(f"Window years:           {', '.join(run.years) or run.coefficient_year}")
    print(f"Seasons processed:      {run.seasons_processed}")
    print(f"Matches processed:      {run.matches_processed}")
    print(f"VCC defending nation:   {run.previous_vcc_champion_nation or '-'}")
    print(f"CCC defending nation:   {run.previous_ccc_champion_nation or '-'}")
    if args.save:
        print(f"Saved:                  {clubs_saved} clubs, {countries_saved} countries")
    print(f"Elapsed:                {elapsed:.2f}s")

    if args.metrics_json:
        payload = {
            "status": "success",
            "started_at": started_at,
            "elapsed_s": round(elapsed, 3),
            "years": run.years,
            "seasons_processed": run.seasons_processed,
            "matches_processed": run.matches_processed,
            "clubs": len(run.club_coefficients),
            "nations": len(run.nation_coefficients),
            "saved": args.save,
        }
        metrics_path = Path(args.metrics_json)
        metrics_path.parent.mkdir(parents=True, exist_ok=True)
        metrics_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
