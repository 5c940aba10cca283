"""
Tests for the recipe transformers
"""

import numpy as np
import pandas as pd
import pytest
from sklearn.exceptions import NotFittedError

from ml_engineering.preprocessing.transformers import DateFeatureExtractor, RareCategoryCollapser


def test_date_features():
    X = pd.DataFrame({
        'crash_date': pd.to_datetime(['2024-01-07 10:00', '2023-11-15 23:10']),
        'num_units': [2, 1],
    })

    out = DateFeatureExtractor().fit(X).transform(X)

    assert 'crash_date' not in out.columns
    assert list(out['crash_date_dow']) == ['Sun', 'Wed']
    assert list(out['crash_date_month']) == ['Jan', 'Nov']
    assert list(out['crash_date_year']) == [2024, 2023]
    assert list(out['num_units']) == [2, 1]
    assert 'crash_date' in X.columns


def test_date_features_custom_column():
    X = pd.DataFrame({'reported': pd.to_datetime(['2024-02-29'])})

    out = DateFeatureExtractor(column='reported').fit_transform(X)

    assert list(out.columns) == ['reported_dow', 'reported_month', 'reported_year']
    assert out.iloc[0].tolist() == ['Thu', 'Feb', 2024]


def test_date_features_missing_column():
    with pytest.raises(KeyError):
        DateFeatureExtractor().fit(pd.DataFrame({'num_units': [1]}))


def test_rare_levels_pooled():
    X = pd.DataFrame({'weather_condition': ['CLEAR'] * 60 + ['RAIN'] * 37 + ['FOG'] * 3})

    collapser = RareCategoryCollapser(columns=['weather_condition'], threshold=0.05).fit(X)
    out = collapser.transform(X)

    assert collapser.levels_ == {'weather_condition': ['CLEAR', 'RAIN']}
    assert (out['weather_condition'] == 'OTHER').sum() == 3
    assert set(out['weather_condition']) == {'CLEAR', 'RAIN', 'OTHER'}


def test_level_at_threshold_is_kept():
    X = pd.DataFrame({'c': ['a'] * 95 + ['b'] * 5})
    out = RareCategoryCollapser(columns=['c'], threshold=0.05).fit_transform(X)
    assert set(out['c']) == {'a', 'b'}


def test_unseen_levels_become_other():
    train = pd.DataFrame({'c': ['a'] * 50 + ['b'] * 50})
    test = pd.DataFrame({'c': ['a', 'b', 'z', np.nan]})

    out = RareCategoryCollapser(columns=['c']).fit(train).transform(test)

    assert list(out['c'][:3]) == ['a', 'b', 'OTHER']
    assert pd.isna(out['c'].iloc[3])


def test_default_columns_are_nominal():
    X = pd.DataFrame({'c': ['a'] * 99 + ['b'], 'n': range(100)})

    collapser = RareCategoryCollapser().fit(X)

    assert list(collapser.levels_) == ['c']
    assert list(collapser.transform(X)['n']) == list(range(100))


@pytest.mark.parametrize('threshold', [0, 1, -0.1, 1.5])
def test_threshold_must_be_a_proportion(threshold):
    with pytest.raises(ValueError):
        RareCategoryCollapser(threshold=threshold).fit(pd.DataFrame({'c': ['a']}))


def test_transform_requires_fit():
    with pytest.raises(NotFittedError):
        RareCategoryCollapser().transform(pd.DataFrame({'c': ['a']}))
