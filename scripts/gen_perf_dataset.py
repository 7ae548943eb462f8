#!/usr/bin/env python3
"""Dataset generation script for performance testing.

Generates a synthetic CSV document whose columns cover every supported column
type. The generated file follows the format the importer expects:
- Line 1: Header row with column names
- Line 2+: Data rows

An optional fraction of rows gets a deliberately invalid cell so the
all-or-nothing path can be exercised at scale as well.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

# (column name, column type, options)
COLUMNS: list[tuple[str, str, list[str]]] = [
    ("name", "string", []),
    ("quantity", "integer", []),
    ("amount", "float", []),
    ("active", "boolean", []),
    ("signed_up", "date", []),
    ("discount", "percent", []),
    ("plan", "select", ["free", "pro", "team"]),
    ("postal_code", "us_zip", []),
    ("zip", "zip", []),
]

# 不正値 (型ごとに 1 つ)
INVALID_VALUES: dict[str, str] = {
    "integer": "12x",
    "float": "abc",
    "boolean": "maybe",
    "date": "2024-13-45",
    "percent": "150%",
    "select": "enterprise",
    "us_zip": "12a45",
    "zip": "1234-5",
}


def generate_synthetic_data(rows: int, invalid_ratio: float = 0.0, seed: int = 42) -> pd.DataFrame:
    """Generate a DataFrame of CSV cell text for every column in COLUMNS.

    Args:
        rows: Number of data rows to generate
        invalid_ratio: Fraction of rows (0..1) that get one invalid cell
        seed: Random seed for reproducible data

    Returns:
        DataFrame whose cells are all strings
    """
    rng = np.random.default_rng(seed)

    dates = pd.date_range("2023-01-01", "2024-12-31", periods=100)
    data: dict[str, list[str]] = {
        "name": [f"Item_{n}_{chr(65 + (j % 26))}" for j, n in enumerate(rng.integers(1000, 9999, rows))],
        "quantity": [str(v) for v in rng.integers(1, 1000, rows)],
        "amount": [f"{v:.2f}" for v in rng.uniform(0.01, 9999.99, rows)],
        "active": rng.choice(["yes", "no", "Y", "N", "true", "false"], rows).tolist(),
        "signed_up": pd.DatetimeIndex(rng.choice(dates, rows)).strftime("%Y%m%d").tolist(),
        "discount": [f"{v}%" for v in rng.integers(0, 101, rows)],
        "plan": rng.choice(["free", "pro", "team", "Pro"], rows).tolist(),
        "postal_code": [str(v) for v in rng.integers(100, 99999, rows)],
        "zip": [str(v).zfill(5) for v in rng.integers(0, 99999, rows)],
    }
    df = pd.DataFrame(data)

    if invalid_ratio > 0:
        n_invalid = max(1, int(rows * invalid_ratio))
        bad_rows = rng.choice(rows, size=min(n_invalid, rows), replace=False)
        typed_columns = [(name, kind) for name, kind, _ in COLUMNS if kind in INVALID_VALUES]
        for i, row_idx in enumerate(sorted(bad_rows)):
            name, kind = typed_columns[i % len(typed_columns)]
            df.at[row_idx, name] = INVALID_VALUES[kind]

    return df


def create_csv_file(output_path: Path, rows: int, invalid_ratio: float = 0.0, seed: int = 42) -> Path:
    """Write the synthetic dataset as CSV (header on line 1)."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df = generate_synthetic_data(rows, invalid_ratio, seed)
    df.to_csv(output_path, index=False)
    return output_path


def build_config_yaml(error_log_dir: str | None = None) -> str:
    """Config YAML matching COLUMNS, for use with csv_importable.config.loader."""
    lines = []
    if error_log_dir:
        lines.append(f"error_log_dir: {error_log_dir}")
    lines.append("columns:")
    for name, kind, options in COLUMNS:
        lines.append(f"  - name: {name}")
        lines.append(f"    type: {kind}")
        lines.append("    required: true")
        if options:
            lines.append(f"    options: [{', '.join(options)}]")
    return "\n".join(lines) + "\n"


def main() -> int:
    """Main CLI interface for dataset generation."""
    parser = argparse.ArgumentParser(
        description="Generate a synthetic CSV dataset for performance testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate default 50k rows
  %(prog)s output.csv

  # 1% of rows carry an invalid cell
  %(prog)s broken.csv --rows 10000 --invalid-ratio 0.01

  # Also write the matching config
  %(prog)s data.csv --config-out config/import.yml
        """,
    )
    parser.add_argument("output", type=Path, help="Output CSV file path")
    parser.add_argument(
        "--rows", type=int, default=50_000, help="Number of data rows (default: 50,000)"
    )
    parser.add_argument(
        "--invalid-ratio",
        type=float,
        default=0.0,
        help="Fraction of rows with one invalid cell (default: 0)",
    )
    parser.add_argument(
        "--seed", type=int, default=42, help="Random seed for reproducible data (default: 42)"
    )
    parser.add_argument("--config-out", type=Path, help="Also write a matching import.yml here")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be generated without creating files",
    )

    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.invalid_ratio <= 1.0:
        print("Error: --invalid-ratio must be between 0 and 1", file=sys.stderr)
        return 1

    print("Dataset generation plan:")
    print(f"  Output file: {args.output}")
    print(f"  Rows: {args.rows:,} (+ 1 header row)")
    print(f"  Columns: {len(COLUMNS)}")
    print(f"  Invalid ratio: {args.invalid_ratio}")
    print(f"  Random seed: {args.seed}")

    if args.dry_run:
        print("\n[DRY RUN] Would generate files but not creating them.")
        return 0

    try:
        create_csv_file(args.output, args.rows, args.invalid_ratio, args.seed)
        if args.config_out is not None:
            args.config_out.parent.mkdir(parents=True, exist_ok=True)
            args.config_out.write_text(build_config_yaml(), encoding="utf-8")
    except OSError as e:
        print(f"\nError generating dataset: {e}", file=sys.stderr)
        return 1

    print(f"\nCreated CSV file: {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
