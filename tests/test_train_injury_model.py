"""
End-to-end test of the training run on a synthetic crash table
"""

import importlib
import json

import mlflow
import pandas as pd
import pytest

from data_engineering.clean import save_clean_crashes
from ml_engineering.train_injury_model import train_injury_model, summary_metrics

train_module = importlib.import_module('ml_engineering.train_injury_model')


@pytest.fixture(scope='module')
def results(crash_table, tmp_path_factory):
    figures = tmp_path_factory.mktemp('figures')
    run = train_injury_model(crash_table, n_folds=3, n_jobs=1, n_estimators=5, figures_dir=figures)
    run['figures_dir'] = figures
    return run


def test_cv_outputs(results, crash_table):
    cv = results['cv_metrics'].set_index('metric')
    assert (cv['n'] == 3).all()
    assert 0 <= cv.loc['roc_auc', 'mean'] <= 1

    predictions = results['cv_predictions']
    assert len(predictions) == 300
    assert predictions['fold'].nunique() == 3

    confusion = results['cv_confusion']
    assert confusion.shape == (2, 2)
    assert confusion.to_numpy().sum() == pytest.approx(100)


def test_test_outputs(results):
    assert len(results['test_predictions']) == 100
    assert set(results['test_metrics']) >= {'accuracy', 'roc_auc', 'sensitivity', 'specificity'}
    assert list(results['model'].classes_) == ['injuries', 'none']


def test_params(results):
    params = results['params']
    assert params['model_type'] == 'BaggingClassifier'
    assert params['n_estimators'] == 5
    assert params['min_samples_leaf'] == 10
    assert params['n_folds'] == 3
    assert params['n_train'] == 300
    assert params['n_test'] == 100


def test_charts_written(results):
    for name in ['roc_cv_folds.png', 'variable_importance.png', 'roc_test.png']:
        assert (results['figures_dir'] / name).exists()


def test_summary_metrics(results):
    metrics = summary_metrics(results)
    assert 'cv_roc_auc' in metrics
    assert 'test_roc_auc' in metrics
    assert 'test_threshold' not in metrics


def test_missing_model_column_rejected(crash_table, tmp_path):
    with pytest.raises(KeyError, match='weather_condition'):
        train_injury_model(crash_table.drop(columns=['weather_condition']), n_folds=3, n_jobs=1,
                           figures_dir=tmp_path)


def test_main_saves_artifact(crash_table, tmp_path):
    input_path = save_clean_crashes(crash_table, tmp_path / 'silver')
    artifacts = tmp_path / 'artifacts'

    exit_code = train_module.main([
        '--input', str(input_path),
        '--folds', '3',
        '--n-jobs', '1',
        '--figures-dir', str(tmp_path / 'figures'),
        '--artifacts-dir', str(artifacts),
    ])

    assert exit_code == 0
    saved = [p for p in artifacts.iterdir() if p.is_dir()]
    assert len(saved) == 1
    assert (saved[0] / 'pipeline.pkl').exists()


def test_main_links_artifact_to_mlflow_run(crash_table, tmp_path):
    input_path = save_clean_crashes(crash_table, tmp_path / 'silver')
    artifacts = tmp_path / 'artifacts'
    tracking_uri = (tmp_path / 'mlruns').as_uri()

    exit_code = train_module.main([
        '--input', str(input_path),
        '--folds', '3',
        '--n-jobs', '1',
        '--figures-dir', str(tmp_path / 'figures'),
        '--artifacts-dir', str(artifacts),
        '--mlflow',
        '--tracking-uri', tracking_uri,
    ])

    assert exit_code == 0
    artifact_dir = next(p for p in artifacts.iterdir() if p.is_dir())
    metadata = json.loads((artifact_dir / 'metadata.json').read_text())
    assert metadata['run_id']

    mlflow.set_tracking_uri(tracking_uri)
    run = mlflow.get_run(metadata['run_id'])
    assert run.data.tags['dataset'] == 'chicago_crashes'
    assert 'cv_roc_auc' in run.data.metrics
    assert metadata['run_id'] in (artifact_dir / 'README.md').read_text()
