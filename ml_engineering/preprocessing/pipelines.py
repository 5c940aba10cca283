#!/usr/bin/env python3
"""
ML Pipelines for Crash Injury Prediction

Provides a reproducible imbalanced-learn Pipeline that combines the preprocessing
recipe, majority-class downsampling and the classifier. The sampler only runs
during `fit`, so validation and test partitions are never resampled.

Recipe (in order):
  1. dates       - crash_date → day of week, month, year; raw date dropped
  2. other       - rare levels of four nominal columns pooled into "OTHER"
  3. preprocessor- one-hot encoding of nominal columns, numeric passthrough
  4. downsample  - RandomUnderSampler to equal class counts
  5. classifier  - bagged decision trees

Usage:
    from ml_engineering.preprocessing.pipelines import create_injury_classifier_pipeline

    pipeline = create_injury_classifier_pipeline()
    pipeline.fit(X_train, y_train)
"""

from imblearn.pipeline import Pipeline
from imblearn.under_sampling import RandomUnderSampler
from sklearn.compose import ColumnTransformer
from sklearn.preprocessing import OneHotEncoder

from config.settings import MODEL_SEED, OTHER_THRESHOLD
from ml_engineering.models.bagged_trees import create_bagged_tree_classifier
from ml_engineering.preprocessing.feature_lists import (
    CRASH_DATE_FEATURE,
    CRASH_NUMERIC_FEATURES,
    CRASH_CATEGORICAL_FEATURES,
    DATE_NUMERIC_FEATURES,
    DATE_CATEGORICAL_FEATURES,
    RARE_LEVEL_FEATURES
)
from ml_engineering.preprocessing.transformers import DateFeatureExtractor, RareCategoryCollapser


def create_injury_classifier_pipeline(
    numeric_features=None,
    categorical_features=None,
    model=None,
    other_threshold: float = OTHER_THRESHOLD,
    random_state: int = MODEL_SEED
):
    """
    Create full recipe + downsampling + classification pipeline

    Args:
        numeric_features: Numeric column names (default: CRASH_NUMERIC_FEATURES)
        categorical_features: Nominal column names (default: CRASH_CATEGORICAL_FEATURES)
        model: sklearn classifier (default: 25 bagged trees, min leaf size 10)
        other_threshold: Minimum training share to keep a nominal level
        random_state: Seed for the under-sampler and the default model

    Returns:
        imblearn Pipeline with 'dates', 'other', 'preprocessor', 'downsample'
        and 'classifier' steps
    """
    if numeric_features is None:
        numeric_features = CRASH_NUMERIC_FEATURES
    if categorical_features is None:
        categorical_features = CRASH_CATEGORICAL_FEATURES
    if model is None:
        model = create_bagged_tree_classifier(random_state=random_state)

    rare_features = [f for f in RARE_LEVEL_FEATURES if f in categorical_features]

    # Numeric columns pass through unscaled; nominal columns are one-hot encoded
    preprocessor = ColumnTransformer(
        transformers=[
            ('num', 'passthrough', list(numeric_features) + DATE_NUMERIC_FEATURES),
            ('cat', OneHotEncoder(handle_unknown='ignore', sparse_output=False),
             list(categorical_features) + DATE_CATEGORICAL_FEATURES)
        ],
        remainder='drop'  # Drop any columns not specified
    )

    pipeline = Pipeline([
        ('dates', DateFeatureExtractor(column=CRASH_DATE_FEATURE)),
        ('other', RareCategoryCollapser(columns=rare_features, threshold=other_threshold)),
        ('preprocessor', preprocessor),
        ('downsample', RandomUnderSampler(random_state=random_state)),
        ('classifier', model)
    ])

    return pipeline


def get_feature_names(pipeline):
    """
    Extract feature names from a fitted pipeline

    Args:
        pipeline: Fitted Pipeline with a 'preprocessor' ColumnTransformer

    Returns:
        List of feature names after transformation
    """
    return [name for name, _ in _expanded_features(pipeline)]


def get_feature_sources(pipeline):
    """
    Original column behind each transformed feature (one-hot columns map back
    to the nominal column they encode)

    Args:
        pipeline: Fitted Pipeline with a 'preprocessor' ColumnTransformer

    Returns:
        List of source column names, aligned with get_feature_names()
    """
    return [source for _, source in _expanded_features(pipeline)]


def _expanded_features(pipeline):
    preprocessor = pipeline.named_steps['preprocessor']

    features = []
    for name, transformer, columns in preprocessor.transformers_:
        if name == 'remainder':
            continue
        elif name == 'num':
            # Numeric features keep their names
            features.extend((col, col) for col in columns)
        elif name == 'cat':
            # One output per (column, category) pair
            for col, categories in zip(columns, transformer.categories_):
                features.extend((f'{col}_{cat}', col) for cat in categories)

    return features
