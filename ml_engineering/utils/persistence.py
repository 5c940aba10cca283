#!/usr/bin/env python3
"""
Model Persistence and Artifact Management

Saves the fitted injury pipeline and its metadata for reuse, and scores new
crash records with a saved pipeline.

Usage:
    from ml_engineering.utils.persistence import save_model_artifact, load_model_artifact

    # After training
    artifact_path = save_model_artifact(
        pipeline=final_fit['model'],
        feature_cols=CRASH_FEATURES,
        metrics={'roc_auc': 0.82, 'accuracy': 0.74},
        model_name='bagged_trees'
    )

    # For inference
    pipeline, metadata = load_model_artifact(artifact_path)
    predictions = predict_injury(pipeline, new_crashes)
"""

import joblib
import json
import math
import pandas as pd
import sklearn
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Optional, Tuple, List

from config.paths import MODEL_ARTIFACTS
from ml_engineering.evaluation.metrics import positive_proba, label_predictions, PROB_COL, CLASS_COL


def save_model_artifact(
    pipeline,
    feature_cols: List[str],
    metrics: Dict[str, float],
    model_name: str,
    run_id: Optional[str] = None,
    output_dir: Path = MODEL_ARTIFACTS
) -> Path:
    """
    Save model pipeline and metadata together

    Args:
        pipeline: Fitted Pipeline
        feature_cols: List of feature column names used
        metrics: Dict of metric names and values (e.g., {'roc_auc': 0.82})
        model_name: Human-readable model name (e.g., 'bagged_trees')
        run_id: MLflow run ID of the training run (if it was tracked)
        output_dir: Directory to save artifacts

    Returns:
        Path to saved model artifact directory
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    artifact_dir = output_dir / f'{model_name}_{timestamp}'
    artifact_dir.mkdir(parents=True, exist_ok=True)

    # Save pipeline (includes recipe + sampler + model)
    pipeline_path = artifact_dir / 'pipeline.pkl'
    joblib.dump(pipeline, pipeline_path)

    if hasattr(pipeline, 'named_steps') and 'classifier' in pipeline.named_steps:
        model_obj = pipeline.named_steps['classifier']
    else:
        model_obj = pipeline

    # NaN is not valid JSON
    clean_metrics = {
        name: (None if isinstance(value, float) and math.isnan(value) else float(value))
        for name, value in metrics.items()
    }

    metadata = {
        'timestamp': timestamp,
        'model_name': model_name,
        'model_type': type(model_obj).__name__,
        'feature_cols': list(feature_cols),
        'n_features': len(feature_cols),
        'classes': [str(c) for c in getattr(pipeline, 'classes_', [])],
        'metrics': clean_metrics,
        'run_id': run_id,
        'sklearn_version': sklearn.__version__,
    }

    metadata_path = artifact_dir / 'metadata.json'
    with open(metadata_path, 'w') as f:
        json.dump(metadata, f, indent=2)

    readme_path = artifact_dir / 'README.md'
    with open(readme_path, 'w') as f:
        f.write(f"# {model_name}\n\n")
        f.write(f"**Created**: {timestamp}\n\n")
        f.write(f"**Model**: {metadata['model_type']}\n\n")
        f.write(f"**Features**: {len(feature_cols)}\n\n")
        if run_id:
            f.write(f"**MLflow run**: {run_id}\n\n")
        f.write("## Metrics\n\n")
        for metric_name, metric_value in clean_metrics.items():
            if metric_value is None:
                f.write(f"- {metric_name}: n/a\n")
            else:
                f.write(f"- {metric_name}: {metric_value:.4f}\n")
        f.write("\n## Usage\n\n")
        f.write("```python\n")
        f.write("from ml_engineering.utils.persistence import load_model_artifact, predict_injury\n\n")
        f.write(f"pipeline, metadata = load_model_artifact('{artifact_dir}')\n")
        f.write("predictions = predict_injury(pipeline, new_crashes)\n")
        f.write("```\n")

    print(f'\n✓ Saved model artifact to {artifact_dir}/')
    print(f'  - pipeline.pkl ({pipeline_path.stat().st_size / 1024:.1f} KB)')
    print(f'  - metadata.json')
    print(f'  - README.md')

    return artifact_dir


def load_model_artifact(artifact_path: Path) -> Tuple[Any, Dict]:
    """
    Load a saved model artifact

    Args:
        artifact_path: Path to artifact directory

    Returns:
        Tuple of (pipeline, metadata_dict)
    """
    artifact_path = Path(artifact_path)

    if not artifact_path.exists():
        raise FileNotFoundError(f"Artifact not found: {artifact_path}")

    pipeline_path = artifact_path / 'pipeline.pkl'
    if not pipeline_path.exists():
        raise FileNotFoundError(f"Pipeline not found: {pipeline_path}")

    pipeline = joblib.load(pipeline_path)

    metadata_path = artifact_path / 'metadata.json'
    if metadata_path.exists():
        with open(metadata_path, 'r') as f:
            metadata = json.load(f)
    else:
        metadata = {}

    print(f'✓ Loaded model artifact from {artifact_path}')
    if metadata:
        print(f'  Model: {metadata.get("model_type", "unknown")}')
        print(f'  Features: {metadata.get("n_features", "unknown")}')
        print(f'  Created: {metadata.get("timestamp", "unknown")}')

    return pipeline, metadata


def find_latest_artifact(model_name: str, artifacts_dir: Path = MODEL_ARTIFACTS) -> Optional[Path]:
    """
    Find the most recent artifact for a given model name

    Args:
        model_name: Model name prefix to search for
        artifacts_dir: Directory containing artifacts

    Returns:
        Path to latest artifact, or None if not found
    """
    artifacts_dir = Path(artifacts_dir)

    if not artifacts_dir.exists():
        return None

    matching = [p for p in artifacts_dir.glob(f'{model_name}_*') if p.is_dir()]

    if not matching:
        return None

    # Timestamp suffix sorts chronologically
    matching.sort(reverse=True)

    return matching[0]


def predict_injury(pipeline, records, threshold: float = 0.5) -> pd.DataFrame:
    """
    Score new crash records

    Args:
        pipeline: Fitted injury pipeline
        records: DataFrame, dict (one crash) or list of dicts with the model features
        threshold: Decision threshold on the injury probability

    Returns:
        DataFrame with '.pred_class' and '.pred_injuries' per record
    """
    if isinstance(records, dict):
        records = [records]
    X = pd.DataFrame(records).copy()
    X['crash_date'] = pd.to_datetime(X['crash_date'])

    proba = positive_proba(pipeline, X)

    return pd.DataFrame({
        CLASS_COL: label_predictions(proba, threshold),
        PROB_COL: proba,
    }, index=X.index)
