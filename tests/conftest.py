"""
Shared fixtures: synthetic Socrata payloads and cleaned crash tables
"""

import matplotlib
matplotlib.use('Agg')

import numpy as np
import pandas as pd
import pytest

from data_engineering.clean import clean_crashes

CRASH_TYPES = {
    'REAR END': 1.0,
    'PARKED MOTOR VEHICLE': 0.3,
    'SIDESWIPE SAME DIRECTION': 0.5,
    'TURNING': 1.5,
    'ANGLE': 2.5,
    'PEDESTRIAN': 6.0,
    'FIXED OBJECT': 1.5,
}
WEATHER = ['CLEAR', 'CLEAR', 'CLEAR', 'RAIN', 'SNOW', 'CLOUDY/OVERCAST', 'FOG/SMOKE/HAZE']
LIGHTING = ['DAYLIGHT', 'DARKNESS, LIGHTED ROAD', 'DARKNESS', 'DUSK', 'DAWN']
SURFACE = ['DRY', 'DRY', 'WET', 'SNOW OR SLUSH', 'UNKNOWN']
TRAFFICWAY = ['NOT DIVIDED', 'DIVIDED - W/MEDIAN (NOT RAISED)', 'ONE-WAY', 'PARKING LOT', 'FOUR WAY']
CAUSES = [
    'UNABLE TO DETERMINE', 'FAILING TO YIELD RIGHT-OF-WAY', 'FOLLOWING TOO CLOSELY',
    'IMPROPER OVERTAKING/PASSING', 'DISREGARDING TRAFFIC SIGNALS', 'PHYSICAL CONDITION OF DRIVER',
]
REPORT_TYPES = ['ON SCENE', 'NOT ON SCENE (DESK REPORT)', 'AMENDED']


def make_raw_crashes(n: int = 100, n_injured: int = 10, seed: int = 0) -> pd.DataFrame:
    """
    Raw crash records shaped like the Socrata JSON payload (every value a string)

    Exactly `n_injured` rows have injuries_total > 0; injuries are more likely
    for pedestrian and angle crashes and for multi-vehicle crashes.
    """
    rng = np.random.default_rng(seed)

    start = pd.Timestamp('2023-01-01')
    seconds = rng.integers(0, 2 * 365 * 24 * 3600, size=n)
    dates = start + pd.to_timedelta(seconds, unit='s')

    crash_types = rng.choice(list(CRASH_TYPES), size=n)
    num_units = rng.choice([1, 2, 2, 2, 3, 4], size=n)

    weights = np.array([CRASH_TYPES[t] for t in crash_types]) * num_units
    injured = rng.choice(n, size=n_injured, replace=False, p=weights / weights.sum())
    injuries_total = np.zeros(n, dtype=int)
    injuries_total[injured] = rng.integers(1, 4, size=n_injured)

    return pd.DataFrame({
        'crash_record_id': [f'{i:08x}' for i in rng.integers(0, 2**32, size=n)],
        'crash_date': dates.strftime('%Y-%m-%dT%H:%M:%S.000'),
        'crash_hour': dates.hour.astype(str),
        'report_type': rng.choice(REPORT_TYPES, size=n),
        'num_units': num_units.astype(str),
        'posted_speed_limit': rng.choice(['20', '25', '30', '30', '35', '45'], size=n),
        'weather_condition': rng.choice(WEATHER, size=n),
        'lighting_condition': rng.choice(LIGHTING, size=n),
        'roadway_surface_cond': rng.choice(SURFACE, size=n),
        'first_crash_type': crash_types,
        'trafficway_type': rng.choice(TRAFFICWAY, size=n),
        'prim_contributory_cause': rng.choice(CAUSES, size=n),
        'latitude': np.round(rng.uniform(41.65, 42.02, size=n), 6).astype(str),
        'longitude': np.round(rng.uniform(-87.9, -87.53, size=n), 6).astype(str),
        'injuries_total': injuries_total.astype(str),
        'injuries_fatal': np.zeros(n, dtype=int).astype(str),
        'most_severe_injury': np.where(injuries_total > 0, 'NONINCAPACITATING INJURY', 'NO INDICATION OF INJURY'),
    })


@pytest.fixture
def raw_crashes():
    """100 raw crashes, 10 of them with injuries"""
    return make_raw_crashes(n=100, n_injured=10)


@pytest.fixture
def raw_crash_factory():
    return make_raw_crashes


@pytest.fixture(scope='session')
def crash_table():
    """Cleaned table large enough to fit the pipeline on (400 crashes, 80 injured)"""
    return clean_crashes(make_raw_crashes(n=400, n_injured=80, seed=7))


@pytest.fixture(scope='session')
def fitted_pipeline(crash_table):
    """Small bagged-tree pipeline fitted on the whole crash table"""
    from ml_engineering.models import create_bagged_tree_classifier
    from ml_engineering.preprocessing import create_injury_classifier_pipeline, CRASH_FEATURES

    pipeline = create_injury_classifier_pipeline(
        model=create_bagged_tree_classifier(n_estimators=5, random_state=3),
        random_state=3
    )
    return pipeline.fit(crash_table[CRASH_FEATURES], crash_table['injuries'])
