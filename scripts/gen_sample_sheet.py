#!/usr/bin/env python3
"""Generate a synthetic candidates workbook for trying out the bulk upload.

The sheet layout matches what the uploader expects:
- Row 1: header row (column names taken from one of the header styles below)
- Row 2+: candidate rows

A share of the rows can be left with an empty name or mobile number so the
preview's "Missing" flags and the platform's per-row rejections can be seen.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

# header style -> (name column, mobile column)
HEADER_STYLES: dict[str, tuple[str, str]] = {
    "default": ("Name", "Contact Number"),
    "upper": ("CANDIDATE_NAME", "MOBILE"),
    "snake": ("candidate_name", "mobile"),
    "camel": ("CandidateName", "Mobile"),
    "phone": ("name", "Phone"),
    "api": ("name", "mobileNo"),
}

FIRST_NAMES = ["Aarav", "Priya", "Rohan", "Sneha", "Vikram", "Ananya", "Karan", "Meera", "Arjun", "Divya"]
LAST_NAMES = ["Sharma", "Patel", "Iyer", "Reddy", "Gupta", "Nair", "Singh", "Das", "Mehta", "Joshi"]


def generate_candidates(rows: int, missing_ratio: float = 0.0, seed: int = 42) -> pd.DataFrame:
    """Build a DataFrame of fake candidates with canonical columns name / mobile_no.

    Args:
        rows: number of candidates
        missing_ratio: share of rows (0..1) with one field blanked out
        seed: random seed for reproducible data
    """
    rng = np.random.default_rng(seed)
    names = [
        f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
        for _ in range(rows)
    ]
    # 10-digit numbers starting 6-9, stored as integers like a typical export
    mobiles = rng.integers(6_000_000_000, 9_999_999_999, size=rows).tolist()

    blanked = rng.random(rows) < missing_ratio
    blank_name = rng.random(rows) < 0.5
    for i in np.flatnonzero(blanked):
        if blank_name[i]:
            names[i] = None
        else:
            mobiles[i] = None
    return pd.DataFrame({"name": names, "mobile_no": mobiles})


def create_candidate_sheet(output_path: Path, df: pd.DataFrame, style: str = "default") -> None:
    name_col, mobile_col = HEADER_STYLES[style]
    output_path.parent.mkdir(parents=True, exist_ok=True)
    out = df.rename(columns={"name": name_col, "mobile_no": mobile_col})
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        out.to_excel(writer, sheet_name="Candidates", index=False)
    print(f"Created candidate sheet: {output_path}")
    print(f"  Headers: {name_col!r}, {mobile_col!r}")
    print(f"  Rows: {len(out)}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic candidates workbook for bulk upload testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/candidates.xlsx
  %(prog)s data/upper.xlsx --rows 200 --style upper --missing-ratio 0.1
        """,
    )
    parser.add_argument("output", type=Path, help="Output Excel file path")
    parser.add_argument("--rows", type=int, default=25, help="Number of candidates (default: 25)")
    parser.add_argument(
        "--style",
        choices=sorted(HEADER_STYLES),
        default="default",
        help="Header naming style (default: default)",
    )
    parser.add_argument(
        "--missing-ratio",
        type=float,
        default=0.0,
        help="Share of rows with a blank name or mobile (default: 0)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.missing_ratio <= 1.0:
        print("Error: --missing-ratio must be between 0 and 1", file=sys.stderr)
        return 1

    try:
        df = generate_candidates(args.rows, args.missing_ratio, args.seed)
        create_candidate_sheet(args.output, df, args.style)
    except OSError as e:
        print(f"Error writing workbook: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
