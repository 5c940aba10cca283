"""
ML Preprocessing Module

Provides the crash recipe (imblearn Pipeline), its transform steps and feature
schema definitions for reproducible preprocessing across train/test and CV folds.
"""

from .pipelines import (
    create_injury_classifier_pipeline,
    get_feature_names,
    get_feature_sources
)

from .transformers import (
    DateFeatureExtractor,
    RareCategoryCollapser
)

from .feature_lists import (
    CRASH_FEATURES,
    CRASH_NUMERIC_FEATURES,
    CRASH_CATEGORICAL_FEATURES,
    CRASH_TARGET,
    RARE_LEVEL_FEATURES,
    validate_features,
    check_feature_leakage
)

__all__ = [
    'create_injury_classifier_pipeline',
    'get_feature_names',
    'get_feature_sources',
    'DateFeatureExtractor',
    'RareCategoryCollapser',
    'CRASH_FEATURES',
    'CRASH_NUMERIC_FEATURES',
    'CRASH_CATEGORICAL_FEATURES',
    'CRASH_TARGET',
    'RARE_LEVEL_FEATURES',
    'validate_features',
    'check_feature_leakage',
]
