"""
ML Utilities Module

Model persistence and MLflow tracking for the injury classifier
"""

from .persistence import (
    save_model_artifact,
    load_model_artifact,
    find_latest_artifact,
    predict_injury
)

from .tracking import (
    start_experiment,
    log_model_run,
    log_feature_importance
)

__all__ = [
    'save_model_artifact',
    'load_model_artifact',
    'find_latest_artifact',
    'predict_injury',
    'start_experiment',
    'log_model_run',
    'log_feature_importance',
]
