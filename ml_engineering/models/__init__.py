"""
ML Models Module

Model implementations for crash injury prediction
"""

from .bagged_trees import (
    create_bagged_tree_classifier,
    bagged_tree_params,
    ensemble_feature_importances
)

__all__ = [
    'create_bagged_tree_classifier',
    'bagged_tree_params',
    'ensemble_feature_importances',
]
