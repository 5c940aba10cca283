#!/usr/bin/env python3
"""
Feature Schema Definitions

Documents expected features for the cleaned crash table.
Used by pipelines to ensure consistency across train/test and every CV fold.

These lists should be updated whenever the cleaning step changes.
"""

from data_engineering.utils.validation import CRASH_FORBIDDEN_COLS

# ============================================================================
# CRASH-LEVEL FEATURES (one row per crash)
# ============================================================================

CRASH_DATE_FEATURE = 'crash_date'  # expanded by DateFeatureExtractor, then dropped

CRASH_NUMERIC_FEATURES = [
    'crash_hour',
    'num_units',
    'posted_speed_limit',
    'latitude',
    'longitude',
]

CRASH_CATEGORICAL_FEATURES = [
    'report_type',
    'weather_condition',
    'lighting_condition',
    'roadway_surface_cond',
    'first_crash_type',
    'trafficway_type',
    'prim_contributory_cause',
]

# Derived from crash_date inside the pipeline
DATE_NUMERIC_FEATURES = ['crash_date_year']
DATE_CATEGORICAL_FEATURES = ['crash_date_dow', 'crash_date_month']

# Nominal columns whose rare levels are pooled into "OTHER"
RARE_LEVEL_FEATURES = [
    'weather_condition',
    'first_crash_type',
    'trafficway_type',
    'prim_contributory_cause',
]

# Columns handed to the pipeline
CRASH_FEATURES = [CRASH_DATE_FEATURE] + CRASH_NUMERIC_FEATURES + CRASH_CATEGORICAL_FEATURES

CRASH_TARGET = 'injuries'  # "injuries" or "none"

# Features that should NEVER be used (data leakage)
CRASH_FORBIDDEN_FEATURES = [CRASH_TARGET] + CRASH_FORBIDDEN_COLS


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def validate_features(df, feature_list):
    """
    Validate that expected features exist in DataFrame

    Args:
        df: pandas DataFrame
        feature_list: List of expected feature names

    Returns:
        Tuple of (available_features, missing_features)
    """
    available = [f for f in feature_list if f in df.columns]
    missing = [f for f in feature_list if f not in df.columns]

    print(f'\nCRASH Features Validation:')
    print(f'  Available: {len(available)}/{len(feature_list)}')
    if missing:
        print(f'  Missing: {missing}')

    return available, missing


def check_feature_leakage(feature_list):
    """
    Check that a feature list contains no outcome columns

    Raises:
        ValueError if leakage features detected
    """
    leakage = set(CRASH_FORBIDDEN_FEATURES) & set(feature_list)

    if leakage:
        raise ValueError(
            f'DATA LEAKAGE DETECTED in feature list: {sorted(leakage)}\n'
            f'These features must be removed before training.'
        )

    print(f'  ✓ No data leakage detected in feature list')
