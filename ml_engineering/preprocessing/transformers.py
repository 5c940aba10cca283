#!/usr/bin/env python3
"""
Recipe Transformers

sklearn-compatible transform steps for the crash recipe. Each step learns what
it needs in `fit` (training partition only) and applies it unchanged in
`transform` to any partition, so every CV fold gets its own fitted copy.

- DateFeatureExtractor: crash_date → day of week, month, year
- RareCategoryCollapser: pool infrequent levels into "OTHER"
"""

import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_is_fitted

from config.settings import OTHER_LABEL, OTHER_THRESHOLD


class DateFeatureExtractor(BaseEstimator, TransformerMixin):
    """
    Derive `<column>_dow`, `<column>_month` (abbreviated names) and
    `<column>_year` from a datetime column, then drop the raw column
    """

    def __init__(self, column='crash_date'):
        self.column = column

    def fit(self, X, y=None):
        if self.column not in X.columns:
            raise KeyError(f'Date column not found: {self.column}')
        self.n_features_in_ = X.shape[1]
        return self

    def transform(self, X):
        check_is_fitted(self, 'n_features_in_')
        X = X.copy()
        dates = pd.to_datetime(X[self.column])

        X[f'{self.column}_dow'] = dates.dt.day_name().str[:3]
        X[f'{self.column}_month'] = dates.dt.month_name().str[:3]
        X[f'{self.column}_year'] = dates.dt.year

        return X.drop(columns=[self.column])


class RareCategoryCollapser(BaseEstimator, TransformerMixin):
    """
    Pool categorical levels seen in less than `threshold` of the training rows

    Args:
        columns: Columns to collapse (default: all object/category columns)
        threshold: Minimum training share for a level to be kept, in (0, 1)
        other_label: Replacement for pooled and unseen levels
    """

    def __init__(self, columns=None, threshold=OTHER_THRESHOLD, other_label=OTHER_LABEL):
        self.columns = columns
        self.threshold = threshold
        self.other_label = other_label

    def fit(self, X, y=None):
        if not 0 < self.threshold < 1:
            raise ValueError(f'threshold must be in (0, 1), got {self.threshold}')

        columns = self.columns
        if columns is None:
            columns = X.select_dtypes(include=['object', 'string', 'category']).columns.tolist()

        self.levels_ = {}
        for col in columns:
            freq = X[col].value_counts(normalize=True)
            self.levels_[col] = sorted(freq[freq >= self.threshold].index)

        return self

    def transform(self, X):
        check_is_fitted(self, 'levels_')
        X = X.copy()

        for col, keep in self.levels_.items():
            values = X[col]
            X[col] = values.where(values.isin(keep) | values.isna(), self.other_label)

        return X
