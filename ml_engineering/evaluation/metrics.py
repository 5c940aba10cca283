#!/usr/bin/env python3
"""
Model Evaluation

Per-fold metrics, cross-validation summaries, resampled confusion matrix,
holdout evaluation and ROC curve data. Labels stay as strings; "injuries" is
the event class throughout.

Usage:
    from ml_engineering.evaluation.metrics import collect_metrics, evaluate_classifier

    # Summarise CV folds
    summary = collect_metrics(fold_results)

    # Evaluate final model
    metrics = evaluate_classifier(model, X_test, y_test, name='Test Set')
"""

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score, precision_score, recall_score, f1_score, roc_auc_score,
    confusion_matrix, roc_curve
)
from typing import Dict, List

from config.settings import POSITIVE_LABEL, INJURY_LABEL, NO_INJURY_LABEL

TRUTH_COL = 'injuries'
PROB_COL = '.pred_injuries'
CLASS_COL = '.pred_class'


def positive_proba(model, X, positive_label: str = POSITIVE_LABEL) -> np.ndarray:
    """
    Predicted probability of the positive class

    Raises:
        ValueError: If the model was not fitted with the positive label
    """
    classes = list(model.classes_)
    if positive_label not in classes:
        raise ValueError(f'Positive label {positive_label!r} not in model classes {classes}')
    return model.predict_proba(X)[:, classes.index(positive_label)]


def label_predictions(proba, threshold: float = 0.5) -> np.ndarray:
    """Hard class labels from positive-class probabilities"""
    return np.where(np.asarray(proba) >= threshold, INJURY_LABEL, NO_INJURY_LABEL)


def fold_metrics(
    y_true,
    proba,
    positive_label: str = POSITIVE_LABEL,
    threshold: float = 0.5
) -> Dict[str, float]:
    """
    Classification metrics for one partition

    Args:
        y_true: True string labels
        proba: Predicted probability of the positive class
        positive_label: Event class
        threshold: Decision threshold

    Returns:
        Dict with accuracy, roc_auc, sensitivity, specificity, precision, f1
        (roc_auc is NaN when only one class is present)
    """
    truth = (np.asarray(y_true) == positive_label).astype(int)
    proba = np.asarray(proba, dtype=float)
    pred = (proba >= threshold).astype(int)

    if len(np.unique(truth)) == 2:
        auc = roc_auc_score(truth, proba)
    else:
        auc = float('nan')

    return {
        'accuracy': accuracy_score(truth, pred),
        'roc_auc': auc,
        'sensitivity': recall_score(truth, pred, zero_division=0),
        'specificity': recall_score(truth, pred, pos_label=0, zero_division=0),
        'precision': precision_score(truth, pred, zero_division=0),
        'f1': f1_score(truth, pred, zero_division=0),
    }


def collect_metrics(fold_results: List[Dict]) -> pd.DataFrame:
    """
    Summarise per-fold metrics across cross-validation

    Args:
        fold_results: Output of fit_resamples (each item has 'fold' and 'metrics')

    Returns:
        DataFrame with columns metric, mean, std, std_err, n
    """
    per_fold = pd.DataFrame([
        {'fold': result['fold'], **result['metrics']} for result in fold_results
    ])
    long = per_fold.melt(id_vars='fold', var_name='metric', value_name='value')

    summary = (
        long.groupby('metric')['value']
        .agg(mean='mean', std='std', n='count')
        .reset_index()
    )
    summary['std_err'] = summary['std'] / np.sqrt(summary['n'])

    return summary[['metric', 'mean', 'std', 'std_err', 'n']]


def collect_predictions(fold_results: List[Dict]) -> pd.DataFrame:
    """Out-of-fold predictions of every fold, stacked"""
    return pd.concat([result['predictions'] for result in fold_results], ignore_index=True)


def resampled_confusion_matrix(predictions: pd.DataFrame) -> pd.DataFrame:
    """
    Mean confusion-matrix counts across folds

    Args:
        predictions: Stacked out-of-fold predictions with 'fold', truth and class columns

    Returns:
        DataFrame indexed by truth, columns by prediction
    """
    labels = [INJURY_LABEL, NO_INJURY_LABEL]

    per_fold = [
        confusion_matrix(group[TRUTH_COL], group[CLASS_COL], labels=labels)
        for _, group in predictions.groupby('fold')
    ]

    return pd.DataFrame(
        np.mean(per_fold, axis=0),
        index=pd.Index(labels, name='truth'),
        columns=pd.Index(labels, name='prediction')
    )


def roc_curve_data(predictions: pd.DataFrame, by_fold: bool = False,
                   positive_label: str = POSITIVE_LABEL) -> pd.DataFrame:
    """
    ROC curve points from predicted probabilities

    Args:
        predictions: DataFrame with truth and positive-class probability columns
        by_fold: One curve per 'fold' instead of a single pooled curve
        positive_label: Event class

    Returns:
        DataFrame with columns [fold,] threshold, specificity, sensitivity
    """
    def _curve(frame):
        fpr, tpr, thresholds = roc_curve(
            frame[TRUTH_COL] == positive_label, frame[PROB_COL]
        )
        return pd.DataFrame({
            'threshold': thresholds,
            'specificity': 1 - fpr,
            'sensitivity': tpr,
        })

    if not by_fold:
        return _curve(predictions)

    curves = []
    for fold, group in predictions.groupby('fold'):
        curve = _curve(group)
        curve.insert(0, 'fold', fold)
        curves.append(curve)

    return pd.concat(curves, ignore_index=True)


def print_cv_summary(summary: pd.DataFrame, confusion: pd.DataFrame = None):
    """Print the cross-validation metric table (and resampled confusion matrix)"""
    print(f'\n{"="*70}')
    print('CROSS-VALIDATION METRICS')
    print(f'{"="*70}')

    for _, row in summary.iterrows():
        print(f'  {row["metric"]:12s}: {row["mean"]:.4f} ± {row["std_err"]:.4f} (n={int(row["n"])})')

    if confusion is not None:
        print(f'\nResampled Confusion Matrix (mean per fold):')
        print(confusion.round(1).to_string())


def evaluate_classifier(
    model,
    X,
    y,
    name: str = 'Dataset',
    threshold: float = 0.5
) -> Dict[str, float]:
    """
    Comprehensive evaluation of the binary injury classifier

    Args:
        model: Trained classifier with predict_proba and string classes
        X: Features
        y: True string labels
        name: Dataset name for logging
        threshold: Decision threshold (default: 0.5)

    Returns:
        Dict of metrics
    """
    print(f'\n{"="*70}')
    print(f'EVALUATION: {name}')
    print(f'{"="*70}')

    y_proba = positive_proba(model, X)
    y_pred = label_predictions(y_proba, threshold)

    metrics = fold_metrics(y, y_proba, threshold=threshold)
    metrics['threshold'] = threshold

    print(f'\nMetrics:')
    print(f'  Accuracy:     {metrics["accuracy"]:.4f}')
    print(f'  AUC-ROC:      {metrics["roc_auc"]:.4f}')
    print(f'  Sensitivity:  {metrics["sensitivity"]:.4f}')
    print(f'  Specificity:  {metrics["specificity"]:.4f}')
    print(f'  Precision:    {metrics["precision"]:.4f}')
    print(f'  F1 Score:     {metrics["f1"]:.4f}')

    cm = confusion_matrix(y, y_pred, labels=[INJURY_LABEL, NO_INJURY_LABEL])
    print(f'\nConfusion Matrix (rows = truth):')
    print(f'  TP: {cm[0,0]:,}  FN: {cm[0,1]:,}')
    print(f'  FP: {cm[1,0]:,}  TN: {cm[1,1]:,}')

    true_dist = pd.Series(np.asarray(y)).value_counts()
    pred_dist = pd.Series(y_pred).value_counts()
    print(f'\nClass Distribution:')
    print(f'  True:      {true_dist.get(INJURY_LABEL, 0):,} injuries, {true_dist.get(NO_INJURY_LABEL, 0):,} none')
    print(f'  Predicted: {pred_dist.get(INJURY_LABEL, 0):,} injuries, {pred_dist.get(NO_INJURY_LABEL, 0):,} none')

    return metrics
