#!/usr/bin/env python3
"""
Clean Chicago crash records (bronze → silver)

Projects the raw Socrata payload to the modelling columns, derives the binary
outcome label and removes incomplete rows.

Steps:
1. Sort by crash date (newest first)
2. Coerce string payload to numeric / datetime types
3. Derive `injuries` label from `injuries_total`
4. Normalize empty `report_type` to "UNKNOWN"
5. Keep only the modelling columns and drop rows with any missing value

Usage:
    python -m data_engineering.clean.clean_crashes
    python -m data_engineering.clean.clean_crashes --input data/bronze/chicago/crashes/chicago_crashes_latest.csv
"""

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

from config.paths import RAW_CRASHES_LATEST, CHICAGO_SILVER_CRASHES, CLEAN_CRASHES_FILE
from config.settings import INJURY_LABEL, NO_INJURY_LABEL
from data_engineering.utils.validation import validate_clean_crashes

# Column order of the cleaned table
CLEAN_COLUMNS = [
    'crash_date',
    'injuries',
    'crash_hour',
    'report_type',
    'num_units',
    'posted_speed_limit',
    'weather_condition',
    'lighting_condition',
    'roadway_surface_cond',
    'first_crash_type',
    'trafficway_type',
    'prim_contributory_cause',
    'latitude',
    'longitude',
]

INTEGER_COLUMNS = ['crash_hour', 'num_units', 'posted_speed_limit']
FLOAT_COLUMNS = ['latitude', 'longitude']

# Raw columns needed to build the cleaned table
SOURCE_COLUMNS = [c for c in CLEAN_COLUMNS if c != 'injuries'] + ['injuries_total']

UNKNOWN_REPORT_TYPE = 'UNKNOWN'


def derive_injury_label(injuries_total: pd.Series) -> pd.Series:
    """
    "injuries" if the crash had at least one injury, "none" otherwise

    Missing or non-numeric counts give a missing label.
    """
    counts = pd.to_numeric(injuries_total, errors='coerce')
    label = pd.Series(
        np.where(counts > 0, INJURY_LABEL, NO_INJURY_LABEL),
        index=counts.index,
        dtype=object
    )
    return label.where(counts.notna())


def normalize_report_type(report_type: pd.Series) -> pd.Series:
    """Empty or missing report types become "UNKNOWN" """
    values = report_type.fillna('').astype(str)
    return values.mask(values.str.strip() == '', UNKNOWN_REPORT_TYPE)


def clean_crashes(raw: pd.DataFrame, verbose: bool = False) -> pd.DataFrame:
    """
    Build the cleaned crash table from a raw download

    Args:
        raw: Raw crash records (Socrata payload, typically all strings)
        verbose: Print row counts

    Returns:
        DataFrame with exactly CLEAN_COLUMNS and no missing values

    Raises:
        KeyError: If a required source column is absent
    """
    missing = [c for c in SOURCE_COLUMNS if c not in raw.columns]
    if missing:
        raise KeyError(f'Raw crash table is missing required columns: {missing}')

    df = raw[SOURCE_COLUMNS].copy()
    df['crash_date'] = pd.to_datetime(df['crash_date'], errors='coerce')
    df = df.sort_values('crash_date', ascending=False, na_position='last')

    for col in INTEGER_COLUMNS + FLOAT_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors='coerce')

    df['injuries'] = derive_injury_label(df['injuries_total'])
    df['report_type'] = normalize_report_type(df['report_type'])

    df = df[CLEAN_COLUMNS].dropna().reset_index(drop=True)

    for col in INTEGER_COLUMNS:
        df[col] = df[col].astype(int)

    if verbose:
        dropped = len(raw) - len(df)
        print(f'  ✓ Cleaned {len(df):,} crashes ({dropped:,} incomplete rows dropped)')

    return df


def load_raw_crashes(path: Path = RAW_CRASHES_LATEST) -> pd.DataFrame:
    """Load a bronze-layer download"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Raw crash file not found: {path}')
    return pd.read_csv(path, low_memory=False)


def load_clean_crashes(path: Path = CLEAN_CRASHES_FILE) -> pd.DataFrame:
    """Load the silver-layer crash table with `crash_date` parsed"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Clean crash file not found: {path}')
    return pd.read_csv(path, parse_dates=['crash_date'], low_memory=False)


def save_clean_crashes(df: pd.DataFrame, output_dir: Path = CHICAGO_SILVER_CRASHES) -> Path:
    """Write the cleaned table to the silver layer"""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    filepath = output_dir / CLEAN_CRASHES_FILE.name
    df.to_csv(filepath, index=False)
    print(f'\n💾 Saved to: {filepath}')
    print(f'   File size: {filepath.stat().st_size / 1024 / 1024:.1f} MB')

    return filepath


def print_summary(df: pd.DataFrame):
    """Print label balance and preview of the cleaned table"""
    print('\n' + '='*70)
    print('CLEANED CRASHES')
    print('='*70)

    print(f'\nRows: {len(df):,}')
    print(f'Date range: {df["crash_date"].min()} to {df["crash_date"].max()}')

    print('\nOutcome distribution:')
    for label, count in df['injuries'].value_counts().items():
        print(f'  {label:10s}: {count:8,} ({count / len(df) * 100:5.1f}%)')

    print('\nPreview (newest first):')
    print(df.head().to_string(index=False))


def main(argv=None):
    parser = argparse.ArgumentParser(description='Clean raw Chicago crash data (bronze → silver)')
    parser.add_argument('--input', type=Path, default=RAW_CRASHES_LATEST,
                        help='Raw crash CSV (default: latest bronze download)')
    parser.add_argument('--output-dir', type=Path, default=CHICAGO_SILVER_CRASHES,
                        help='Silver output directory')
    parser.add_argument('--no-save', action='store_true',
                        help='Do not save to file')

    args = parser.parse_args(argv)

    print(f'Loading {args.input}...')
    raw = load_raw_crashes(args.input)
    print(f'  ✓ Loaded {len(raw):,} raw records')

    df = clean_crashes(raw, verbose=True)
    if df.empty:
        print('❌ No complete crash records after cleaning')
        return 1

    validate_clean_crashes(df)
    print_summary(df)

    if not args.no_save:
        save_clean_crashes(df, args.output_dir)

    print('\n✅ Done!')
    return 0


if __name__ == '__main__':
    sys.exit(main())
