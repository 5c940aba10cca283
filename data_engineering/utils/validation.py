#!/usr/bin/env python3
"""
Data Quality and Schema Validation

Uses pandera to validate the cleaned crash table for:
- Schema compliance (correct data types, ranges, allowed labels)
- Data leakage detection (injury outcome columns)
- Data quality checks (class balance, duplicates)

Usage:
    from data_engineering.utils.validation import validate_clean_crashes

    # Validate before saving to the silver layer
    validate_clean_crashes(clean_df)
"""

import pandera as pa
from pandera import Column, Check
import pandas as pd

from config.settings import INJURY_LABEL, NO_INJURY_LABEL


# ============================================================================
# CLEAN CRASH SCHEMA
# ============================================================================

# Post-crash outcome columns: anything here would leak the label
CRASH_FORBIDDEN_COLS = [
    'injuries_total',
    'injuries_fatal',
    'injuries_incapacitating',
    'injuries_non_incapacitating',
    'injuries_reported_not_evident',
    'injuries_no_indication',
    'injuries_unknown',
    'most_severe_injury',
]

clean_crash_schema = pa.DataFrameSchema(
    {
        # Target
        'injuries': Column(
            str,
            Check.isin([INJURY_LABEL, NO_INJURY_LABEL]),
            nullable=False,
            description='Binary outcome: "injuries" if injuries_total > 0'
        ),

        # Temporal
        'crash_date': Column(pa.DateTime, nullable=False),
        'crash_hour': Column(int, Check.in_range(0, 23), nullable=False),

        # Crash characteristics
        'report_type': Column(str, nullable=False),
        'num_units': Column(int, Check.greater_than_or_equal_to(0), nullable=False),
        'posted_speed_limit': Column(int, Check.greater_than_or_equal_to(0), nullable=False),
        'first_crash_type': Column(str, nullable=False),
        'trafficway_type': Column(str, nullable=False),
        'prim_contributory_cause': Column(str, nullable=False),

        # Conditions
        'weather_condition': Column(str, nullable=False),
        'lighting_condition': Column(str, nullable=False),
        'roadway_surface_cond': Column(str, nullable=False),

        # Location (0.0 marks an unknown geocode in the source data)
        'latitude': Column(float, nullable=False),
        'longitude': Column(float, nullable=False),
    },
    strict=False,  # Allow extra columns not defined here
    coerce=True,   # Coerce types when possible
    description='Cleaned Chicago crash table schema'
)


# ============================================================================
# VALIDATION FUNCTIONS
# ============================================================================

def check_for_leakage(df: pd.DataFrame, split_name: str = 'dataset'):
    """
    Raise if the table still carries post-crash outcome columns

    Raises:
        ValueError: If leakage columns are present
    """
    leakage = set(CRASH_FORBIDDEN_COLS) & set(df.columns)
    if leakage:
        raise ValueError(
            f'❌ DATA LEAKAGE DETECTED in {split_name}: {sorted(leakage)}\n'
            f'   These columns must be removed before training.'
        )


def validate_clean_crashes(df: pd.DataFrame, split_name: str = 'dataset') -> pd.DataFrame:
    """
    Validate the cleaned crash table

    Args:
        df: DataFrame to validate
        split_name: Name of the table (dataset/train/test) for logging

    Returns:
        Validated (type-coerced) DataFrame

    Raises:
        ValueError: If data leakage detected
        pandera.errors.SchemaErrors: If schema validation fails
    """
    print(f'\n{"="*70}')
    print(f'Validating {split_name} (clean crashes)')
    print(f'{"="*70}')

    check_for_leakage(df, split_name)
    print(f'  ✓ No data leakage detected')

    try:
        validated = clean_crash_schema.validate(df, lazy=True)
        print(f'  ✓ Schema validation passed')
    except pa.errors.SchemaErrors as err:
        print(f'  ❌ Schema validation failed for {split_name}:')
        print(err.failure_cases)
        raise

    check_data_quality(validated, split_name)

    print(f'  ✓ All validations passed for {split_name}\n')
    return validated


def check_data_quality(df: pd.DataFrame, split_name: str):
    """
    Perform data quality checks beyond schema validation

    Checks:
    - Outcome class balance
    - Invalid (zero) coordinates
    """
    if 'injuries' in df.columns and len(df) > 0:
        target_dist = df['injuries'].value_counts(normalize=True) * 100
        injury_pct = target_dist.get(INJURY_LABEL, 0)
        print(f'  Target distribution:')
        print(f'    - {NO_INJURY_LABEL}: {target_dist.get(NO_INJURY_LABEL, 0):.1f}%')
        print(f'    - {INJURY_LABEL}: {injury_pct:.1f}%')
        if injury_pct < 5 or injury_pct > 95:
            print(f'  ⚠️  Severe class imbalance detected!')

    if 'latitude' in df.columns:
        zero_coords = int((df['latitude'] <= 0).sum())
        if zero_coords > 0:
            print(f'  ⚠️  {zero_coords:,} crashes in {split_name} have no usable coordinates')


def compare_splits(train_df: pd.DataFrame, test_df: pd.DataFrame, target: str = 'injuries'):
    """
    Compare train/test outcome distributions to confirm stratification

    Args:
        train_df: Training set
        test_df: Test set
        target: Outcome column
    """
    print(f'\n{"="*70}')
    print('COMPARING TRAIN/TEST DISTRIBUTIONS')
    print(f'{"="*70}')

    print(f'\nDataset sizes:')
    print(f'  Train: {len(train_df):,}')
    print(f'  Test:  {len(test_df):,}')

    train_pos = (train_df[target] == INJURY_LABEL).mean() * 100
    test_pos = (test_df[target] == INJURY_LABEL).mean() * 100

    print(f'\nTarget ({target}) distribution:')
    print(f'  Train: {train_pos:.2f}%')
    print(f'  Test:  {test_pos:.2f}%')

    if abs(train_pos - test_pos) > 5:
        print(f'  ⚠️  WARNING: Distribution shift detected ({abs(train_pos - test_pos):.1f}% difference)')

    print('')
