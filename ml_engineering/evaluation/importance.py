#!/usr/bin/env python3
"""
Variable Importance

Importance of each original crash variable for a fitted injury pipeline.
Tree importances are averaged over the bag, then one-hot columns are summed
back into the nominal column they encode.
"""

import pandas as pd

from config.settings import TOP_N_IMPORTANCE
from ml_engineering.models.bagged_trees import ensemble_feature_importances
from ml_engineering.preprocessing.pipelines import get_feature_names, get_feature_sources


def feature_importance(pipeline) -> pd.DataFrame:
    """
    Importance of every transformed feature (one row per one-hot column)

    Returns:
        DataFrame with columns feature, variable, importance (descending)
    """
    names = get_feature_names(pipeline)
    sources = get_feature_sources(pipeline)
    model = pipeline.named_steps['classifier']

    table = pd.DataFrame({
        'feature': names,
        'variable': sources,
        'importance': ensemble_feature_importances(model, len(names)),
    })
    return table.sort_values('importance', ascending=False).reset_index(drop=True)


def bagged_tree_importance(pipeline) -> pd.DataFrame:
    """
    Importance per original variable

    Returns:
        DataFrame with columns variable, importance (descending)
    """
    per_feature = feature_importance(pipeline)
    per_variable = (
        per_feature.groupby('variable', sort=False)['importance']
        .sum()
        .reset_index()
    )
    return per_variable.sort_values('importance', ascending=False).reset_index(drop=True)


def top_importances(importance: pd.DataFrame, n: int = TOP_N_IMPORTANCE) -> pd.DataFrame:
    """The `n` most important variables"""
    return importance.nlargest(n, 'importance').reset_index(drop=True)


def print_importances(importance: pd.DataFrame, n: int = TOP_N_IMPORTANCE):
    print(f'\nTop {n} Variable Importances:')
    for i, row in enumerate(top_importances(importance, n).itertuples(), 1):
        print(f'  {i:2d}. {row.variable:30s} {row.importance:.4f}')
