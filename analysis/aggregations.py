#!/usr/bin/env python3
"""
Exploratory Aggregations

Grouped counts and injury rates over the cleaned crash table, one function per
chart. Every function is a pure view of its input: the cleaned table is never
modified.

Views:
- weekly crash counts by outcome (partial first/last week removed)
- weekly injury rate
- weekday distribution and weekday injury rate
- injury rate by first crash type (frequent crash types only)
- crash locations for a map-style scatter

Usage:
    from analysis.aggregations import weekly_crash_counts, crash_type_injury_rate

    weekly = weekly_crash_counts(crashes)
    by_type = crash_type_injury_rate(crashes, min_crashes=10000)
"""

import pandas as pd

from config.settings import INJURY_LABEL, CRASH_TYPE_MIN_COUNT

WEEKDAY_ORDER = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']


def week_start(dates: pd.Series) -> pd.Series:
    """Floor timestamps to the Sunday that starts their week"""
    return dates.dt.to_period('W-SAT').dt.start_time


def trim_partial_weeks(table: pd.DataFrame, week_col: str = 'week') -> pd.DataFrame:
    """Drop the earliest and latest week buckets, which may be incomplete"""
    first, last = table[week_col].min(), table[week_col].max()
    keep = (table[week_col] != first) & (table[week_col] != last)
    return table[keep].reset_index(drop=True)


def weekly_crash_counts(df: pd.DataFrame) -> pd.DataFrame:
    """
    Crash counts per week and outcome

    Returns:
        DataFrame with columns week, injuries, n
    """
    weeks = df[['crash_date', 'injuries']].assign(week=week_start(df['crash_date']))
    counts = (
        weeks.groupby(['week', 'injuries'])
        .size()
        .reset_index(name='n')
        .sort_values(['week', 'injuries'])
    )
    return trim_partial_weeks(counts)


def weekly_injury_rate(df: pd.DataFrame) -> pd.DataFrame:
    """
    Share of each week's crashes that involved an injury

    Returns:
        DataFrame with columns week, crashes, injuries, injury_rate
    """
    weeks = pd.DataFrame({
        'week': week_start(df['crash_date']),
        'is_injury': df['injuries'].eq(INJURY_LABEL),
    })
    rates = (
        weeks.groupby('week')
        .agg(crashes=('is_injury', 'size'), injuries=('is_injury', 'sum'))
        .reset_index()
    )
    rates['injury_rate'] = rates['injuries'] / rates['crashes']
    return trim_partial_weeks(rates)


def weekday_injury_distribution(df: pd.DataFrame) -> pd.DataFrame:
    """
    Crash counts by weekday and outcome

    `percent` is the share of that outcome's crashes falling on the weekday;
    `injury_rate` is the share of the weekday's crashes with an injury.

    Returns:
        DataFrame with columns weekday, injuries, n, percent, injury_rate
    """
    weekday = pd.Categorical(
        df['crash_date'].dt.day_name().str[:3],
        categories=WEEKDAY_ORDER,
        ordered=True
    )
    days = pd.DataFrame({'weekday': weekday, 'injuries': df['injuries'].to_numpy()})

    counts = (
        days.groupby(['weekday', 'injuries'], observed=True)
        .size()
        .reset_index(name='n')
    )
    counts['percent'] = counts['n'] / counts.groupby('injuries')['n'].transform('sum')

    day_totals = counts.groupby('weekday', observed=True)['n'].transform('sum')
    injury_n = counts['n'].where(counts['injuries'] == INJURY_LABEL, 0)
    counts['injury_rate'] = injury_n.groupby(counts['weekday'], observed=True).transform('sum') / day_totals

    return counts.sort_values(['weekday', 'injuries']).reset_index(drop=True)


def crash_type_injury_rate(df: pd.DataFrame, min_crashes: int = CRASH_TYPE_MIN_COUNT) -> pd.DataFrame:
    """
    Outcome breakdown by first crash type, for crash types seen more than
    `min_crashes` times

    Returns:
        DataFrame with columns first_crash_type, injuries, n, percent, total,
        injury_rate; ordered by total crashes (ascending)
    """
    counts = (
        df.groupby(['first_crash_type', 'injuries'])
        .size()
        .reset_index(name='n')
    )
    counts['percent'] = counts['n'] / counts.groupby('injuries')['n'].transform('sum')
    counts['total'] = counts.groupby('first_crash_type')['n'].transform('sum')

    injury_n = counts['n'].where(counts['injuries'] == INJURY_LABEL, 0)
    counts['injury_rate'] = injury_n.groupby(counts['first_crash_type']).transform('sum') / counts['total']

    frequent = counts[counts['total'] > min_crashes]
    return frequent.sort_values(['total', 'first_crash_type', 'injuries']).reset_index(drop=True)


def geographic_points(df: pd.DataFrame) -> pd.DataFrame:
    """Crash locations with a usable geocode (latitude 0 marks a missing one)"""
    located = df[df['latitude'] > 0]
    return located[['longitude', 'latitude', 'injuries']].reset_index(drop=True)
