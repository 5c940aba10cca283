#!/usr/bin/env python3
"""
Bagged Decision Trees

Bootstrap-aggregated decision tree classifier for crash injury prediction,
plus importance extraction averaged over the bag.

Usage:
    from ml_engineering.models.bagged_trees import create_bagged_tree_classifier

    model = create_bagged_tree_classifier(n_estimators=25, min_samples_leaf=10)
"""

import numpy as np
from sklearn.ensemble import BaggingClassifier
from sklearn.tree import DecisionTreeClassifier
from typing import Any, Dict, Optional

from config.settings import N_ESTIMATORS, MIN_SAMPLES_LEAF, MODEL_SEED


def create_bagged_tree_classifier(
    n_estimators: int = N_ESTIMATORS,
    min_samples_leaf: int = MIN_SAMPLES_LEAF,
    random_state: int = MODEL_SEED,
    n_jobs: Optional[int] = None,
    **kwargs
) -> BaggingClassifier:
    """
    Create an (unfitted) ensemble of bagged decision trees

    Args:
        n_estimators: Number of bootstrap trees
        min_samples_leaf: Minimum samples per leaf in each tree
        random_state: Seed for bootstrap draws and tree splits
        n_jobs: Parallel jobs inside the ensemble (CV folds already run in parallel)
        **kwargs: Additional BaggingClassifier parameters

    Returns:
        BaggingClassifier
    """
    tree = DecisionTreeClassifier(min_samples_leaf=min_samples_leaf, random_state=random_state)

    return BaggingClassifier(
        estimator=tree,
        n_estimators=n_estimators,
        random_state=random_state,
        n_jobs=n_jobs,
        **kwargs
    )


def bagged_tree_params(model: BaggingClassifier) -> Dict[str, Any]:
    """Hyperparameters worth logging for a bagged tree model"""
    tree = model.estimator
    return {
        'model_type': type(model).__name__,
        'n_estimators': model.n_estimators,
        'min_samples_leaf': getattr(tree, 'min_samples_leaf', None),
        'max_samples': model.max_samples,
        'bootstrap': model.bootstrap,
        'random_state': model.random_state,
    }


def ensemble_feature_importances(model: BaggingClassifier, n_features: int) -> np.ndarray:
    """
    Mean impurity importance of each input feature over the fitted trees

    Args:
        model: Fitted BaggingClassifier whose estimators expose feature_importances_
        n_features: Number of input features the ensemble was fitted on

    Returns:
        Array of length n_features
    """
    importances = np.zeros(n_features)

    for tree, features in zip(model.estimators_, model.estimators_features_):
        importances[features] += tree.feature_importances_

    return importances / len(model.estimators_)
