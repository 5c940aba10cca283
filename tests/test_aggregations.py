"""
Tests for the exploratory aggregations
"""

import pandas as pd
import pytest

from analysis.aggregations import (
    week_start,
    weekly_crash_counts,
    weekly_injury_rate,
    weekday_injury_distribution,
    crash_type_injury_rate,
    geographic_points
)


@pytest.fixture
def daily_crashes():
    """
    Two crashes per day from Wed 2024-01-03 to Tue 2024-01-30; the first crash
    of each day involved an injury
    """
    days = pd.date_range('2024-01-03', '2024-01-30', freq='D')
    return pd.DataFrame({
        'crash_date': list(days + pd.Timedelta(hours=8)) + list(days + pd.Timedelta(hours=17)),
        'injuries': ['injuries'] * len(days) + ['none'] * len(days),
    })


def test_week_start_is_sunday():
    dates = pd.Series(pd.to_datetime(['2024-01-07 00:30', '2024-01-10 12:00', '2024-01-13 23:59']))
    assert (week_start(dates) == pd.Timestamp('2024-01-07')).all()


def test_weekly_counts_drop_partial_weeks(daily_crashes):
    weekly = weekly_crash_counts(daily_crashes)

    weeks = sorted(weekly['week'].unique())
    assert weeks == [pd.Timestamp('2024-01-07'), pd.Timestamp('2024-01-14'), pd.Timestamp('2024-01-21')]
    assert list(weekly.columns) == ['week', 'injuries', 'n']
    assert (weekly['n'] == 7).all()
    assert len(weekly) == 6


def test_weekly_injury_rate(daily_crashes):
    rates = weekly_injury_rate(daily_crashes)

    assert len(rates) == 3
    assert (rates['crashes'] == 14).all()
    assert (rates['injuries'] == 7).all()
    assert rates['injury_rate'].tolist() == pytest.approx([0.5, 0.5, 0.5])


def test_weekly_views_do_not_modify_input(daily_crashes):
    before = daily_crashes.copy()
    weekly_crash_counts(daily_crashes)
    weekly_injury_rate(daily_crashes)
    pd.testing.assert_frame_equal(daily_crashes, before)


def test_weekday_distribution():
    # Sun 2024-01-07: 3 crashes (1 injury); Mon 2024-01-08: 1 crash (1 injury)
    df = pd.DataFrame({
        'crash_date': pd.to_datetime(['2024-01-07 08:00', '2024-01-07 09:00',
                                      '2024-01-07 10:00', '2024-01-08 10:00']),
        'injuries': ['injuries', 'none', 'none', 'injuries'],
    })

    result = weekday_injury_distribution(df)

    assert list(result.columns) == ['weekday', 'injuries', 'n', 'percent', 'injury_rate']
    assert list(result['weekday'].astype(str)) == ['Sun', 'Sun', 'Mon']

    sun = result[result['weekday'] == 'Sun'].set_index('injuries')
    assert sun.loc['injuries', 'n'] == 1
    assert sun.loc['none', 'n'] == 2
    assert sun.loc['injuries', 'percent'] == pytest.approx(0.5)
    assert sun.loc['none', 'percent'] == pytest.approx(1.0)
    assert sun['injury_rate'].tolist() == pytest.approx([1 / 3, 1 / 3])

    mon = result[result['weekday'] == 'Mon']
    assert mon['injury_rate'].iloc[0] == pytest.approx(1.0)


def test_crash_type_injury_rate_filters_rare_types():
    df = pd.DataFrame({
        'first_crash_type': ['REAR END'] * 30 + ['ANGLE'] * 12 + ['ANIMAL'] * 5,
        'injuries': (['injuries'] * 10 + ['none'] * 20
                     + ['injuries'] * 6 + ['none'] * 6
                     + ['none'] * 5),
    })

    result = crash_type_injury_rate(df, min_crashes=10)

    assert set(result['first_crash_type']) == {'REAR END', 'ANGLE'}
    assert list(result['first_crash_type'].drop_duplicates()) == ['ANGLE', 'REAR END']

    rear = result[result['first_crash_type'] == 'REAR END'].set_index('injuries')
    assert rear.loc['injuries', 'total'] == 30
    assert rear.loc['injuries', 'injury_rate'] == pytest.approx(1 / 3)
    assert rear.loc['injuries', 'percent'] == pytest.approx(10 / 16)

    angle = result[result['first_crash_type'] == 'ANGLE']
    assert angle['injury_rate'].iloc[0] == pytest.approx(0.5)


def test_crash_type_threshold_is_exclusive():
    df = pd.DataFrame({'first_crash_type': ['TURNING'] * 10, 'injuries': ['none'] * 10})
    assert crash_type_injury_rate(df, min_crashes=10).empty


def test_geographic_points_drop_missing_geocode():
    df = pd.DataFrame({
        'latitude': [41.88, 0.0, 41.95],
        'longitude': [-87.63, 0.0, -87.70],
        'injuries': ['none', 'injuries', 'injuries'],
    })

    points = geographic_points(df)

    assert list(points.columns) == ['longitude', 'latitude', 'injuries']
    assert len(points) == 2
    assert (points['latitude'] > 0).all()
