#!/usr/bin/env python3
"""
Crash Exploration Report

Renders the exploratory charts for the cleaned crash table and prints the
numbers behind them:
1. Weekly crashes by outcome
2. Weekly injury rate
3. Weekday distribution and injury rate
4. Injury rate by first crash type
5. Crash locations

Usage:
    python -m analysis.explore_crashes
    python -m analysis.explore_crashes --input data/silver/chicago/crashes/chicago_crashes_clean.csv
"""

import argparse
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from config.paths import CLEAN_CRASHES_FILE, FIGURES
from config.settings import CRASH_TYPE_MIN_COUNT
from data_engineering.clean import load_clean_crashes
from analysis.aggregations import (
    weekly_crash_counts,
    weekly_injury_rate,
    weekday_injury_distribution,
    crash_type_injury_rate,
    geographic_points
)
from analysis.plots import (
    plot_weekly_crash_counts,
    plot_weekly_injury_rate,
    plot_weekday_distribution,
    plot_crash_type_injury_rate,
    plot_geographic_points
)


def print_section(title):
    print('\n' + '='*70)
    print(title)
    print('='*70)


def explore_crashes(df: pd.DataFrame, output_dir: Path = FIGURES,
                    min_crashes: int = CRASH_TYPE_MIN_COUNT) -> dict:
    """
    Compute every exploratory view and render its chart

    Args:
        df: Cleaned crash table
        output_dir: Directory for PNG charts
        min_crashes: Minimum crashes for a crash type to be charted

    Returns:
        Dict of {view_name: aggregated DataFrame}
    """
    output_dir = Path(output_dir)
    views = {}

    print_section('1. WEEKLY CRASHES BY OUTCOME')
    views['weekly_counts'] = weekly_crash_counts(df)
    weekly = views['weekly_counts']
    if len(weekly) > 0:
        print(f'  Weeks: {weekly["week"].nunique()} '
              f'({weekly["week"].min().date()} to {weekly["week"].max().date()})')
    fig = plot_weekly_crash_counts(weekly, output_dir / 'weekly_crashes.png')
    plt.close(fig)

    print_section('2. WEEKLY INJURY RATE')
    views['weekly_rate'] = weekly_injury_rate(df)
    rates = views['weekly_rate']
    if len(rates) > 0:
        print(f'  Mean weekly injury rate: {rates["injury_rate"].mean()*100:.1f}%')
        print(f'  Range: {rates["injury_rate"].min()*100:.1f}% - {rates["injury_rate"].max()*100:.1f}%')
    fig = plot_weekly_injury_rate(rates, output_dir / 'weekly_injury_rate.png')
    plt.close(fig)

    print_section('3. WEEKDAY DISTRIBUTION')
    views['weekday'] = weekday_injury_distribution(df)
    for _, row in views['weekday'].drop_duplicates('weekday').iterrows():
        print(f'  {row["weekday"]}: injury rate {row["injury_rate"]*100:5.1f}%')
    fig = plot_weekday_distribution(views['weekday'], output_dir / 'weekday_injuries.png')
    plt.close(fig)

    print_section(f'4. CRASH TYPES (> {min_crashes:,} crashes)')
    views['crash_type'] = crash_type_injury_rate(df, min_crashes=min_crashes)
    by_type = views['crash_type'].drop_duplicates('first_crash_type')
    for _, row in by_type.iloc[::-1].iterrows():
        print(f'  {row["first_crash_type"]:35s}: {row["total"]:8,} | injury rate {row["injury_rate"]*100:5.1f}%')
    if len(by_type) > 0:
        fig = plot_crash_type_injury_rate(views['crash_type'], output_dir / 'crash_type_injuries.png')
        plt.close(fig)
    else:
        print('  ⚠️  No crash type above the threshold, chart skipped')

    print_section('5. CRASH LOCATIONS')
    views['locations'] = geographic_points(df)
    print(f'  Located crashes: {len(views["locations"]):,} of {len(df):,}')
    fig = plot_geographic_points(views['locations'], output_dir / 'crash_locations.png')
    plt.close(fig)

    return views


def main(argv=None):
    parser = argparse.ArgumentParser(description='Render exploratory charts for cleaned crash data')
    parser.add_argument('--input', type=Path, default=CLEAN_CRASHES_FILE,
                        help='Cleaned crash CSV (silver layer)')
    parser.add_argument('--output-dir', type=Path, default=FIGURES,
                        help='Directory for PNG charts')
    parser.add_argument('--min-crashes', type=int, default=CRASH_TYPE_MIN_COUNT,
                        help='Minimum crashes for a crash type to be charted')

    args = parser.parse_args(argv)

    print_section('CRASH EXPLORATION REPORT')
    df = load_clean_crashes(args.input)
    print(f'  ✓ Loaded {len(df):,} crashes from {args.input}')

    explore_crashes(df, args.output_dir, args.min_crashes)

    print('\n✅ Done!')
    return 0


if __name__ == '__main__':
    sys.exit(main())
