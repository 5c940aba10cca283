"""
Model Evaluation Module

Cross-validation summaries, holdout metrics, variable importance and ROC curves
"""

from .metrics import (
    positive_proba,
    label_predictions,
    fold_metrics,
    collect_metrics,
    collect_predictions,
    resampled_confusion_matrix,
    roc_curve_data,
    print_cv_summary,
    evaluate_classifier
)

from .importance import (
    feature_importance,
    bagged_tree_importance,
    top_importances,
    print_importances
)

__all__ = [
    'positive_proba',
    'label_predictions',
    'fold_metrics',
    'collect_metrics',
    'collect_predictions',
    'resampled_confusion_matrix',
    'roc_curve_data',
    'print_cv_summary',
    'evaluate_classifier',
    'feature_importance',
    'bagged_tree_importance',
    'top_importances',
    'print_importances',
]
