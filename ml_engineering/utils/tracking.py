#!/usr/bin/env python3
"""
MLflow Experiment Tracking Utilities

Provides wrapper functions for logging experiments, parameters, metrics,
and artifacts to MLflow.

Usage:
    from ml_engineering.utils.tracking import start_experiment, log_model_run

    # Start experiment
    experiment_id = start_experiment('crash_injury_prediction')

    # Train model...

    # Log results
    log_model_run(
        experiment_name='crash_injury_prediction',
        run_name='bagged_trees',
        params={'n_estimators': 25, 'min_samples_leaf': 10},
        metrics={'cv_roc_auc': 0.82, 'test_roc_auc': 0.81},
        model=final_pipeline,
        tags={'model_type': 'BaggingClassifier', 'dataset': 'chicago_crashes'}
    )
"""

import math
import tempfile
from pathlib import Path
from typing import Dict, Any, Optional

import mlflow
import mlflow.sklearn
import pandas as pd


def start_experiment(experiment_name: str, tracking_uri: Optional[str] = None) -> str:
    """
    Initialize or get existing MLflow experiment

    Args:
        experiment_name: Name of the experiment
        tracking_uri: MLflow tracking server URI (default: local ./mlruns)

    Returns:
        Experiment ID
    """
    if tracking_uri:
        mlflow.set_tracking_uri(tracking_uri)
    else:
        # Use local mlruns directory
        mlruns_dir = Path('mlruns').absolute()
        mlruns_dir.mkdir(exist_ok=True)
        mlflow.set_tracking_uri(mlruns_dir.as_uri())

    experiment = mlflow.get_experiment_by_name(experiment_name)
    if experiment is None:
        experiment_id = mlflow.create_experiment(experiment_name)
        print(f'✓ Created new MLflow experiment: {experiment_name} (ID: {experiment_id})')
    else:
        experiment_id = experiment.experiment_id
        print(f'✓ Using existing MLflow experiment: {experiment_name} (ID: {experiment_id})')

    mlflow.set_experiment(experiment_name)

    return experiment_id


def log_model_run(
    experiment_name: str,
    run_name: str,
    params: Dict[str, Any],
    metrics: Dict[str, float],
    model: Optional[Any] = None,
    tags: Optional[Dict[str, str]] = None,
    importance: Optional[pd.DataFrame] = None,
    tracking_uri: Optional[str] = None
) -> str:
    """
    Log a complete model training run to MLflow

    Args:
        experiment_name: Name of the experiment
        run_name: Name for this specific run
        params: Model hyperparameters (e.g., {'n_estimators': 25})
        metrics: Performance metrics (NaN values are skipped)
        model: Trained model to log (optional)
        tags: Additional tags (e.g., {'model_type': 'BaggingClassifier'})
        importance: Variable importance table to log (optional)
        tracking_uri: MLflow tracking server URI (default: local ./mlruns)

    Returns:
        Run ID
    """
    start_experiment(experiment_name, tracking_uri)

    with mlflow.start_run(run_name=run_name) as run:
        mlflow.log_params(params)

        for metric_name, metric_value in metrics.items():
            if metric_value is None or math.isnan(metric_value):
                continue
            mlflow.log_metric(metric_name, metric_value)

        if tags:
            mlflow.set_tags(tags)

        if model is not None:
            mlflow.sklearn.log_model(model, 'model')

        if importance is not None:
            log_feature_importance(importance)

        run_id = run.info.run_id

        print(f'\n✓ Logged run to MLflow:')
        print(f'  Experiment: {experiment_name}')
        print(f'  Run: {run_name}')
        print(f'  Run ID: {run_id}')
        print(f'  Params: {len(params)}')
        print(f'  Metrics: {len(metrics)}')

        return run_id


def log_feature_importance(importance: pd.DataFrame, top_n: int = 20):
    """
    Log variable importances to the active MLflow run

    Args:
        importance: DataFrame with 'variable' and 'importance' columns
        top_n: Number of top variables to log as params
    """
    ranked = importance.sort_values('importance', ascending=False).reset_index(drop=True)

    for i, row in ranked.head(top_n).iterrows():
        mlflow.log_param(f'top_feature_{i+1}', row['variable'])
        mlflow.log_metric(f'importance_{i+1}', float(row['importance']))

    with tempfile.TemporaryDirectory() as tmp_dir:
        csv_path = Path(tmp_dir) / 'variable_importance.csv'
        ranked.to_csv(csv_path, index=False)
        mlflow.log_artifact(str(csv_path))

    print(f'  ✓ Logged {len(ranked)} variable importances')
