#!/usr/bin/env python3
"""
Resampling: Splits, Folds and Fitting

Stratified train/test split, stratified k-fold cross-validation and the fitting
loops that run the injury pipeline over them. Seeds are always passed in
explicitly.

Fold fits are independent: each one gets its own clone of the pipeline and runs
as a separate joblib task. Results are joined before they are returned, and an
exception in any fold aborts the whole run.

Usage:
    from ml_engineering.resampling import split_crashes, make_folds, fit_resamples

    train, test = split_crashes(crashes)
    folds = make_folds(train, n_splits=10)
    fold_results = fit_resamples(pipeline, train[CRASH_FEATURES], train['injuries'], folds)
"""

import pandas as pd
from joblib import Parallel, delayed
from sklearn.base import clone
from sklearn.model_selection import StratifiedKFold, train_test_split
from typing import Dict, List, Tuple

from config.settings import TEST_SIZE, SPLIT_SEED, N_FOLDS, CV_SEED
from ml_engineering.evaluation.metrics import (
    positive_proba,
    label_predictions,
    fold_metrics,
    TRUTH_COL,
    PROB_COL,
    CLASS_COL
)
from ml_engineering.preprocessing.feature_lists import CRASH_FEATURES, CRASH_TARGET


def split_crashes(
    df: pd.DataFrame,
    test_size: float = TEST_SIZE,
    random_state: int = SPLIT_SEED,
    target: str = CRASH_TARGET
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Stratified random train/test split

    Args:
        df: Cleaned crash table
        test_size: Fraction of rows held out for testing
        random_state: Split seed
        target: Column to stratify on

    Returns:
        Tuple of (train, test) with fresh indexes
    """
    train, test = train_test_split(
        df,
        test_size=test_size,
        stratify=df[target],
        random_state=random_state
    )
    return train.reset_index(drop=True), test.reset_index(drop=True)


def make_folds(
    train: pd.DataFrame,
    n_splits: int = N_FOLDS,
    random_state: int = CV_SEED,
    target: str = CRASH_TARGET
) -> List[Tuple[str, object, object]]:
    """
    Stratified k-fold partitions of the training set

    Returns:
        List of (fold_id, train_positions, validation_positions)
    """
    cv = StratifiedKFold(n_splits=n_splits, shuffle=True, random_state=random_state)
    width = len(str(n_splits))

    return [
        (f'Fold{i:0{width}d}', train_idx, val_idx)
        for i, (train_idx, val_idx) in enumerate(cv.split(train, train[target]), 1)
    ]


def _prediction_frame(model, X, y, rows, label) -> pd.DataFrame:
    proba = positive_proba(model, X)
    return pd.DataFrame({
        'fold': label,
        'row': rows,
        TRUTH_COL: y.to_numpy(),
        PROB_COL: proba,
        CLASS_COL: label_predictions(proba),
    })


def fit_fold(pipeline, X: pd.DataFrame, y: pd.Series, fold_id: str, train_idx, val_idx) -> Dict:
    """
    Fit a fresh copy of the pipeline on one fold and score its held-out rows

    Returns:
        Dict with 'fold', 'metrics' and 'predictions'
    """
    model = clone(pipeline)
    model.fit(X.iloc[train_idx], y.iloc[train_idx])

    X_val, y_val = X.iloc[val_idx], y.iloc[val_idx]
    predictions = _prediction_frame(model, X_val, y_val, val_idx, fold_id)

    return {
        'fold': fold_id,
        'metrics': fold_metrics(y_val, predictions[PROB_COL]),
        'predictions': predictions,
    }


def fit_resamples(
    pipeline,
    X: pd.DataFrame,
    y: pd.Series,
    folds: List[Tuple],
    n_jobs: int = -1,
    verbose: bool = True
) -> List[Dict]:
    """
    Fit the pipeline independently on every fold

    Args:
        pipeline: Unfitted pipeline (cloned per fold, never fitted in place)
        X: Training features
        y: Training labels
        folds: Output of make_folds()
        n_jobs: Worker processes for fold fits (-1 = all cores)
        verbose: Print progress

    Returns:
        List of fold results in fold order
    """
    if verbose:
        print(f'\n{"="*70}')
        print(f'CROSS-VALIDATION: {len(folds)} folds (n_jobs={n_jobs})')
        print(f'{"="*70}')

    results = Parallel(n_jobs=n_jobs)(
        delayed(fit_fold)(pipeline, X, y, fold_id, train_idx, val_idx)
        for fold_id, train_idx, val_idx in folds
    )

    if verbose:
        for result in results:
            m = result['metrics']
            print(f'  {result["fold"]}: accuracy {m["accuracy"]:.4f} | roc_auc {m["roc_auc"]:.4f}')

    return results


def last_fit(
    pipeline,
    train: pd.DataFrame,
    test: pd.DataFrame,
    features: List[str] = CRASH_FEATURES,
    target: str = CRASH_TARGET
) -> Dict:
    """
    Fit once on the full training split and evaluate once on the test split

    Returns:
        Dict with 'model' (fitted pipeline), 'metrics' and 'predictions'
    """
    model = clone(pipeline)
    model.fit(train[features], train[target])

    predictions = _prediction_frame(model, test[features], test[target], test.index.to_numpy(), 'test')

    return {
        'model': model,
        'metrics': fold_metrics(test[target], predictions[PROB_COL]),
        'predictions': predictions,
    }
