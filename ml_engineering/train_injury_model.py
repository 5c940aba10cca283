#!/usr/bin/env python3
"""
Crash Injury Model Training

Full training run for the bagged-tree injury classifier:
- Data loading and validation
- Stratified train/test split
- Stratified 10-fold cross-validation (folds fitted in parallel)
- Resampled metrics and confusion matrix
- Final fit on the training split, single evaluation on the test split
- Variable importance and ROC curves
- Model persistence (optional MLflow tracking)

Usage:
    python -m ml_engineering.train_injury_model
    python -m ml_engineering.train_injury_model --folds 5 --n-jobs 4
    python -m ml_engineering.train_injury_model --mlflow
"""

import argparse
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from config.paths import CLEAN_CRASHES_FILE, FIGURES, MODEL_ARTIFACTS
from config.settings import (
    SPLIT_SEED, CV_SEED, MODEL_SEED, TEST_SIZE, N_FOLDS,
    N_ESTIMATORS, MIN_SAMPLES_LEAF, OTHER_THRESHOLD, TOP_N_IMPORTANCE
)
from data_engineering.clean import load_clean_crashes
from data_engineering.utils.validation import compare_splits
from ml_engineering.models import create_bagged_tree_classifier, bagged_tree_params
from ml_engineering.preprocessing import (
    create_injury_classifier_pipeline,
    CRASH_FEATURES,
    CRASH_TARGET,
    validate_features,
    check_feature_leakage
)
from ml_engineering.resampling import split_crashes, make_folds, fit_resamples, last_fit
from ml_engineering.evaluation import (
    collect_metrics,
    collect_predictions,
    resampled_confusion_matrix,
    roc_curve_data,
    print_cv_summary,
    evaluate_classifier,
    bagged_tree_importance,
    print_importances
)
from ml_engineering.evaluation.plots import plot_roc_curve, plot_variable_importance
from ml_engineering.utils import save_model_artifact, log_model_run

EXPERIMENT_NAME = 'crash_injury_prediction'
MODEL_NAME = 'bagged_trees'


def train_injury_model(
    crashes: pd.DataFrame,
    n_folds: int = N_FOLDS,
    n_jobs: int = -1,
    test_size: float = TEST_SIZE,
    split_seed: int = SPLIT_SEED,
    cv_seed: int = CV_SEED,
    model_seed: int = MODEL_SEED,
    n_estimators: int = N_ESTIMATORS,
    min_samples_leaf: int = MIN_SAMPLES_LEAF,
    other_threshold: float = OTHER_THRESHOLD,
    top_n: int = TOP_N_IMPORTANCE,
    figures_dir: Path = FIGURES
) -> dict:
    """
    Run cross-validation and the final fit on a cleaned crash table

    Returns:
        Dict with cv_metrics, cv_predictions, cv_confusion, test_metrics,
        test_predictions, importance, model, params
    """
    print(f'\n{"#"*70}')
    print(f'# PREPARING DATA')
    print(f'{"#"*70}')

    _, missing = validate_features(crashes, CRASH_FEATURES + [CRASH_TARGET])
    if missing:
        raise KeyError(f'Crash table is missing model columns: {missing}')
    check_feature_leakage(CRASH_FEATURES)

    train, test = split_crashes(crashes, test_size=test_size, random_state=split_seed)
    compare_splits(train, test)

    folds = make_folds(train, n_splits=n_folds, random_state=cv_seed)

    model = create_bagged_tree_classifier(
        n_estimators=n_estimators,
        min_samples_leaf=min_samples_leaf,
        random_state=model_seed
    )
    pipeline = create_injury_classifier_pipeline(
        model=model,
        other_threshold=other_threshold,
        random_state=model_seed
    )

    print(f'\n{"#"*70}')
    print(f'# RESAMPLING')
    print(f'{"#"*70}')

    fold_results = fit_resamples(pipeline, train[CRASH_FEATURES], train[CRASH_TARGET], folds, n_jobs=n_jobs)

    cv_metrics = collect_metrics(fold_results)
    cv_predictions = collect_predictions(fold_results)
    cv_confusion = resampled_confusion_matrix(cv_predictions)
    print_cv_summary(cv_metrics, cv_confusion)

    figures_dir = Path(figures_dir)
    fig = plot_roc_curve(roc_curve_data(cv_predictions, by_fold=True),
                         title='ROC Curves by CV Fold',
                         output_path=figures_dir / 'roc_cv_folds.png')
    plt.close(fig)

    print(f'\n{"#"*70}')
    print(f'# FINAL FIT')
    print(f'{"#"*70}')

    final = last_fit(pipeline, train, test)
    test_metrics = evaluate_classifier(final['model'], test[CRASH_FEATURES], test[CRASH_TARGET],
                                       name='Test Set')

    importance = bagged_tree_importance(final['model'])
    print_importances(importance, top_n)

    fig = plot_variable_importance(importance, top_n, output_path=figures_dir / 'variable_importance.png')
    plt.close(fig)
    fig = plot_roc_curve(roc_curve_data(final['predictions']),
                         title='ROC Curve (Test Set)',
                         output_path=figures_dir / 'roc_test.png')
    plt.close(fig)

    params = {
        **bagged_tree_params(model),
        'n_folds': n_folds,
        'test_size': test_size,
        'split_seed': split_seed,
        'cv_seed': cv_seed,
        'other_threshold': other_threshold,
        'n_train': len(train),
        'n_test': len(test),
    }

    return {
        'cv_metrics': cv_metrics,
        'cv_predictions': cv_predictions,
        'cv_confusion': cv_confusion,
        'test_metrics': test_metrics,
        'test_predictions': final['predictions'],
        'importance': importance,
        'model': final['model'],
        'params': params,
    }


def summary_metrics(results: dict) -> dict:
    """Flatten CV means and test metrics into one dict for logging"""
    metrics = {f'cv_{row.metric}': row.mean for row in results['cv_metrics'].itertuples()}
    metrics.update({f'test_{name}': value for name, value in results['test_metrics'].items()
                    if name != 'threshold'})
    return metrics


def main(argv=None):
    parser = argparse.ArgumentParser(description='Train the crash injury classifier')
    parser.add_argument('--input', type=Path, default=CLEAN_CRASHES_FILE,
                        help='Cleaned crash CSV (silver layer)')
    parser.add_argument('--folds', type=int, default=N_FOLDS,
                        help='Number of cross-validation folds')
    parser.add_argument('--n-jobs', type=int, default=-1,
                        help='Parallel fold fits (-1 = all cores)')
    parser.add_argument('--figures-dir', type=Path, default=FIGURES,
                        help='Directory for ROC and importance charts')
    parser.add_argument('--artifacts-dir', type=Path, default=MODEL_ARTIFACTS,
                        help='Directory for the saved model artifact')
    parser.add_argument('--no-save', action='store_true',
                        help='Do not save the fitted model')
    parser.add_argument('--mlflow', action='store_true',
                        help='Log the run to MLflow (./mlruns)')
    parser.add_argument('--tracking-uri',
                        help='MLflow tracking URI (default: local ./mlruns)')

    args = parser.parse_args(argv)

    crashes = load_clean_crashes(args.input)
    print(f'✓ Loaded {len(crashes):,} crashes from {args.input}')

    results = train_injury_model(crashes, n_folds=args.folds, n_jobs=args.n_jobs,
                                 figures_dir=args.figures_dir)
    metrics = summary_metrics(results)

    run_id = None
    if args.mlflow:
        run_id = log_model_run(
            experiment_name=EXPERIMENT_NAME,
            run_name=MODEL_NAME,
            params=results['params'],
            metrics=metrics,
            model=results['model'],
            tags={'model_type': results['params']['model_type'], 'dataset': 'chicago_crashes'},
            importance=results['importance'],
            tracking_uri=args.tracking_uri
        )

    if not args.no_save:
        save_model_artifact(
            pipeline=results['model'],
            feature_cols=CRASH_FEATURES,
            metrics=metrics,
            model_name=MODEL_NAME,
            run_id=run_id,
            output_dir=args.artifacts_dir
        )

    print('\n✅ Done!')
    return 0


if __name__ == '__main__':
    sys.exit(main())
