#!/usr/bin/env python3
"""
Download Chicago crash data from the City of Chicago Open Data Portal (Socrata API)

Pulls the "Traffic Crashes - Crashes" dataset for a lookback window ending today.
One row per crash event, as reported by the Chicago Police Department (E-Crash).

Data source: https://data.cityofchicago.org/Transportation/Traffic-Crashes-Crashes/85ca-t3if
API endpoint: https://data.cityofchicago.org/resource/85ca-t3if.json

Usage:
    python -m data_engineering.download.download_chicago_crashes                  # Last 2 years
    python -m data_engineering.download.download_chicago_crashes --years-back 1   # Last year
    python -m data_engineering.download.download_chicago_crashes --limit 1000     # Sample for testing
"""

import argparse
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import pandas as pd
import requests

from config.paths import CHICAGO_BRONZE_CRASHES
from config.settings import (
    SOCRATA_DOMAIN,
    CRASHES_DATASET_ID,
    DEFAULT_YEARS_BACK,
    SOCRATA_PAGE_SIZE,
    SOCRATA_TIMEOUT,
)

DATE_COLUMN = 'crash_date'
LATEST_FILENAME = 'chicago_crashes_latest.csv'


def lookback_start(years_back: int = DEFAULT_YEARS_BACK, today: Optional[date] = None) -> date:
    """
    First day of the lookback window: same calendar day, `years_back` years ago

    Feb 29 maps to Feb 28 when the target year is not a leap year.
    """
    if years_back < 1:
        raise ValueError(f'years_back must be >= 1, got {years_back}')

    today = today or date.today()
    try:
        return today.replace(year=today.year - years_back)
    except ValueError:
        return today.replace(year=today.year - years_back, day=28)


def build_where_clause(years_back: int = DEFAULT_YEARS_BACK, today: Optional[date] = None) -> str:
    """SoQL predicate selecting crashes after the start of the lookback window"""
    start = lookback_start(years_back, today)
    return f"{DATE_COLUMN} > '{start.isoformat()}T00:00:00'"


def resource_url(dataset_id: str = CRASHES_DATASET_ID, domain: str = SOCRATA_DOMAIN) -> str:
    """SODA JSON endpoint of a dataset"""
    return f"https://{domain}/resource/{dataset_id}.json"


def download_crashes(
    years_back: int = DEFAULT_YEARS_BACK,
    dataset_id: str = CRASHES_DATASET_ID,
    domain: str = SOCRATA_DOMAIN,
    app_token: Optional[str] = None,
    limit: Optional[int] = None,
    page_size: int = SOCRATA_PAGE_SIZE,
    session: Optional[requests.Session] = None,
    verbose: bool = True
) -> pd.DataFrame:
    """
    Download crash records newer than the lookback window

    Args:
        years_back: Size of the lookback window in years
        dataset_id: Socrata dataset identifier
        domain: Socrata domain
        app_token: Optional Socrata app token for higher rate limits
        limit: If set, fetch at most this many records
        page_size: Records per request
        session: requests session to reuse (default: a new one, closed afterwards)
        verbose: Print progress

    Returns:
        DataFrame with one row per crash (empty if nothing matched)

    Raises:
        requests.exceptions.RequestException: network/API failures are not retried
    """
    url = resource_url(dataset_id, domain)
    where = build_where_clause(years_back)

    if verbose:
        print("\n" + "="*70)
        print("CHICAGO TRAFFIC CRASHES (Socrata API)")
        print("="*70)
        print(f"API:     {url}")
        print(f"Filter:  {where}")
        if limit:
            print(f"Limit:   {limit:,} records")

    params = {
        "$where": where,
        "$order": f"{DATE_COLUMN} DESC",
        "$limit": min(page_size, limit) if limit else page_size,
        "$offset": 0,
    }
    headers = {"X-App-Token": app_token} if app_token else {}

    owns_session = session is None
    if owns_session:
        session = requests.Session()

    records = []
    try:
        while True:
            response = session.get(url, params=dict(params), headers=headers, timeout=SOCRATA_TIMEOUT)
            response.raise_for_status()
            page = response.json()

            records.extend(page)
            if verbose:
                print(f"   Downloaded: {len(records):,} records...", end='\r')

            if len(page) < params["$limit"] or (limit and len(records) >= limit):
                break
            params["$offset"] += len(page)
    finally:
        if owns_session:
            session.close()

    if limit:
        records = records[:limit]

    if not records:
        if verbose:
            print("⚠️  No records returned from API")
        return pd.DataFrame()

    df = pd.DataFrame.from_records(records)

    if verbose:
        print(f"\n✓ Downloaded {len(df):,} records, {df.shape[1]} columns")
        if DATE_COLUMN in df.columns:
            print(f"  Date range: {df[DATE_COLUMN].min()} to {df[DATE_COLUMN].max()}")

    return df


def save_raw_crashes(df: pd.DataFrame, output_dir: Path = CHICAGO_BRONZE_CRASHES,
                     years_back: int = DEFAULT_YEARS_BACK) -> Path:
    """Save raw download to a timestamped CSV and refresh the *_latest copy"""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = output_dir / f"chicago_crashes_{years_back}y_{timestamp}.csv"

    df.to_csv(filepath, index=False)
    print(f"\n💾 Saved to: {filepath}")
    print(f"   File size: {filepath.stat().st_size / 1024 / 1024:.1f} MB")

    latest = output_dir / LATEST_FILENAME
    df.to_csv(latest, index=False)
    print(f"   Latest: {latest}")

    return filepath


def print_summary(df: pd.DataFrame):
    """Print summary statistics of a raw download"""
    print("\n" + "="*60)
    print("📊 DATA SUMMARY")
    print("="*60)

    print(f"\nTotal crashes: {len(df):,}")

    if 'injuries_total' in df.columns:
        injuries = pd.to_numeric(df['injuries_total'], errors='coerce')
        with_injury = int((injuries > 0).sum())
        print(f"Crashes with injuries: {with_injury:,} ({with_injury / len(df) * 100:.1f}%)")
        print(f"Missing injury count: {int(injuries.isna().sum()):,}")

    if 'report_type' in df.columns:
        print("\nReport types:")
        for report_type, count in df['report_type'].fillna('(missing)').value_counts().items():
            print(f"  {report_type}: {count:,}")

    if 'latitude' in df.columns and 'longitude' in df.columns:
        valid_coords = df[['latitude', 'longitude']].notna().all(axis=1).sum()
        print(f"\nRecords with lat/lon: {valid_coords:,} ({valid_coords / len(df) * 100:.1f}%)")

    print("\n" + "="*60)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Download Chicago crash data from the City of Chicago Open Data Portal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Last two years (default)
  crash-download

  # Last year only
  crash-download --years-back 1

  # Sample for testing
  crash-download --limit 1000 --no-save
        """
    )

    parser.add_argument('--years-back', type=int, default=DEFAULT_YEARS_BACK,
                        help='Lookback window in years (default: 2)')
    parser.add_argument('--limit', type=int,
                        help='Download only this many records (for testing)')
    parser.add_argument('--app-token',
                        help='Socrata app token for higher rate limits')
    parser.add_argument('--output-dir', type=Path, default=CHICAGO_BRONZE_CRASHES,
                        help='Bronze output directory')
    parser.add_argument('--no-save', action='store_true',
                        help='Do not save to file (useful for testing)')
    parser.add_argument('--quiet', action='store_true',
                        help='Suppress progress messages')

    args = parser.parse_args(argv)

    print("🚀 Chicago Crash Data Downloader")
    print("="*60)

    df = download_crashes(
        years_back=args.years_back,
        app_token=args.app_token,
        limit=args.limit,
        verbose=not args.quiet
    )

    if df.empty:
        print("❌ No data downloaded")
        return 1

    print_summary(df)

    if not args.no_save:
        save_raw_crashes(df, args.output_dir, args.years_back)

    print("\n✅ Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
