#!/usr/bin/env python3
"""
Evaluation Charts

ROC curves (pooled or one per CV fold) and variable importance bars.
"""

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from analysis.plots import save_figure
from config.settings import CHART_COLORS, TOP_N_IMPORTANCE
from ml_engineering.evaluation.importance import top_importances


def plot_roc_curve(curves: pd.DataFrame, title: str = 'ROC Curve',
                   output_path: Optional[Path] = None):
    """
    Plot ROC curves from roc_curve_data()

    One line per fold when a 'fold' column is present.
    """
    fig, ax = plt.subplots(figsize=(7, 7))

    if 'fold' in curves.columns:
        for i, (fold, curve) in enumerate(curves.groupby('fold')):
            ax.plot(1 - curve['specificity'], curve['sensitivity'],
                    color=CHART_COLORS[i % len(CHART_COLORS)], alpha=0.6,
                    linewidth=1.5, label=str(fold))
        ax.legend(title='Fold', fontsize=8)
    else:
        ax.plot(1 - curves['specificity'], curves['sensitivity'],
                color=CHART_COLORS[0], linewidth=2)

    ax.plot([0, 1], [0, 1], linestyle='--', color='gray', linewidth=1)
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_aspect('equal')
    ax.set_xlabel('1 - specificity')
    ax.set_ylabel('sensitivity')
    ax.set_title(title, fontsize=14, fontweight='bold')
    fig.tight_layout()

    return save_figure(fig, output_path)


def plot_variable_importance(importance: pd.DataFrame, n: int = TOP_N_IMPORTANCE,
                             output_path: Optional[Path] = None):
    """Horizontal bars for the top-n variables"""
    top = top_importances(importance, n)

    fig, ax = plt.subplots(figsize=(10, max(4, 0.45 * len(top))))
    sns.barplot(data=top, x='importance', y='variable', color=CHART_COLORS[0],
                orient='h', ax=ax)

    ax.set_title(f'Top {len(top)} Variable Importances (Bagged Trees)',
                 fontsize=14, fontweight='bold')
    ax.set_xlabel('Mean decrease in impurity')
    ax.set_ylabel('')
    fig.tight_layout()

    return save_figure(fig, output_path)
