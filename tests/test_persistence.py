"""
Tests for model artifacts, scoring of new crashes and MLflow logging
"""

import json

import mlflow
import numpy as np
import pandas as pd
import pytest

from ml_engineering.preprocessing import CRASH_FEATURES
from ml_engineering.utils import (
    save_model_artifact,
    load_model_artifact,
    find_latest_artifact,
    predict_injury,
    log_model_run
)


def test_save_and_load_roundtrip(fitted_pipeline, crash_table, tmp_path):
    artifact_dir = save_model_artifact(
        pipeline=fitted_pipeline,
        feature_cols=CRASH_FEATURES,
        metrics={'cv_roc_auc': 0.81, 'cv_f1': float('nan')},
        model_name='bagged_trees',
        output_dir=tmp_path
    )

    assert artifact_dir.name.startswith('bagged_trees_')
    for name in ['pipeline.pkl', 'metadata.json', 'README.md']:
        assert (artifact_dir / name).exists()

    pipeline, metadata = load_model_artifact(artifact_dir)

    assert metadata['model_type'] == 'BaggingClassifier'
    assert metadata['classes'] == ['injuries', 'none']
    assert metadata['feature_cols'] == CRASH_FEATURES
    assert metadata['metrics']['cv_f1'] is None

    X = crash_table[CRASH_FEATURES].head(25)
    np.testing.assert_allclose(pipeline.predict_proba(X), fitted_pipeline.predict_proba(X))


def test_metadata_is_valid_json(fitted_pipeline, tmp_path):
    artifact_dir = save_model_artifact(fitted_pipeline, CRASH_FEATURES, {'roc_auc': float('nan')},
                                       'bagged_trees', output_dir=tmp_path)
    text = (artifact_dir / 'metadata.json').read_text()
    assert 'NaN' not in text
    json.loads(text)


def test_run_id_recorded(fitted_pipeline, tmp_path):
    untracked = save_model_artifact(fitted_pipeline, CRASH_FEATURES, {}, 'untracked', output_dir=tmp_path)
    tracked = save_model_artifact(fitted_pipeline, CRASH_FEATURES, {}, 'tracked',
                                  run_id='abc123', output_dir=tmp_path)

    _, metadata = load_model_artifact(untracked)
    assert metadata['run_id'] is None
    assert 'MLflow run' not in (untracked / 'README.md').read_text()

    _, metadata = load_model_artifact(tracked)
    assert metadata['run_id'] == 'abc123'
    assert '**MLflow run**: abc123' in (tracked / 'README.md').read_text()


def test_load_missing_artifact(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_model_artifact(tmp_path / 'nothing_here')

    (tmp_path / 'empty').mkdir()
    with pytest.raises(FileNotFoundError):
        load_model_artifact(tmp_path / 'empty')


def test_find_latest_artifact(tmp_path):
    for name in ['bagged_trees_20240101_090000', 'bagged_trees_20240315_120000', 'other_20250101_000000']:
        (tmp_path / name).mkdir()
    (tmp_path / 'bagged_trees_20991231_000000.txt').write_text('not an artifact')

    latest = find_latest_artifact('bagged_trees', tmp_path)

    assert latest == tmp_path / 'bagged_trees_20240315_120000'
    assert find_latest_artifact('missing', tmp_path) is None
    assert find_latest_artifact('bagged_trees', tmp_path / 'absent') is None


def test_predict_injury_single_record(fitted_pipeline, crash_table):
    record = crash_table[CRASH_FEATURES].iloc[0].to_dict()
    record['crash_date'] = '2024-06-01T14:30:00'

    result = predict_injury(fitted_pipeline, record)

    assert list(result.columns) == ['.pred_class', '.pred_injuries']
    assert len(result) == 1
    assert 0 <= result['.pred_injuries'].iloc[0] <= 1
    assert result['.pred_class'].iloc[0] in {'injuries', 'none'}


def test_predict_injury_frame_and_threshold(fitted_pipeline, crash_table):
    records = crash_table[CRASH_FEATURES].head(30)

    everything = predict_injury(fitted_pipeline, records, threshold=0.0)
    assert (everything['.pred_class'] == 'injuries').all()
    assert list(everything.index) == list(records.index)


def test_predict_injury_unseen_level(fitted_pipeline, crash_table):
    record = crash_table[CRASH_FEATURES].iloc[0].to_dict()
    record['weather_condition'] = 'BLOWING SAND'
    record['first_crash_type'] = 'TRAIN'

    result = predict_injury(fitted_pipeline, [record])

    assert len(result) == 1


def test_log_model_run(tmp_path):
    run_id = log_model_run(
        experiment_name='crash_injury_test',
        run_name='bagged_trees',
        params={'n_estimators': 5, 'min_samples_leaf': 10},
        metrics={'cv_roc_auc': 0.8, 'cv_f1': float('nan')},
        tags={'dataset': 'synthetic'},
        importance=pd.DataFrame({'variable': ['num_units', 'crash_hour'], 'importance': [0.7, 0.3]}),
        tracking_uri=(tmp_path / 'mlruns').as_uri()
    )

    run = mlflow.get_run(run_id)
    assert run.data.metrics['cv_roc_auc'] == pytest.approx(0.8)
    assert 'cv_f1' not in run.data.metrics
    assert run.data.params['n_estimators'] == '5'
    assert run.data.params['top_feature_1'] == 'num_units'
    assert run.data.tags['dataset'] == 'synthetic'
