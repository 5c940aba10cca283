#!/usr/bin/env python3
"""
Exploratory Charts

matplotlib / seaborn renderers for the views in analysis.aggregations.
Each function returns the Figure and, when `output_path` is given, saves a PNG.
"""

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import matplotlib.ticker as mtick
import pandas as pd
import seaborn as sns

from config.settings import INJURY_COLORS, INJURY_LABEL, FIGURE_DPI

sns.set_style('whitegrid')


def save_figure(fig, output_path: Optional[Path] = None):
    """Save a figure as PNG, creating the parent directory"""
    if output_path is None:
        return fig

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=FIGURE_DPI, bbox_inches='tight')
    print(f'  ✓ Saved: {output_path}')
    return fig


def plot_weekly_crash_counts(weekly: pd.DataFrame, output_path: Optional[Path] = None):
    """Line chart of weekly crash counts, one line per outcome"""
    fig, ax = plt.subplots(figsize=(12, 5))

    sns.lineplot(data=weekly, x='week', y='n', hue='injuries',
                 palette=INJURY_COLORS, linewidth=1.5, ax=ax)

    ax.set_title('Crashes per Week by Outcome', fontsize=14, fontweight='bold')
    ax.set_xlabel('')
    ax.set_ylabel('Number of crashes per week')
    ax.legend(title='Injuries?')
    fig.tight_layout()

    return save_figure(fig, output_path)


def plot_weekly_injury_rate(rates: pd.DataFrame, output_path: Optional[Path] = None):
    """Line chart of the weekly share of crashes with injuries"""
    fig, ax = plt.subplots(figsize=(12, 5))

    ax.plot(rates['week'], rates['injury_rate'], color=INJURY_COLORS[INJURY_LABEL], linewidth=1.5)
    ax.yaxis.set_major_formatter(mtick.PercentFormatter(xmax=1.0))
    ax.set_ylim(bottom=0)

    ax.set_title('Share of Weekly Crashes Involving Injuries', fontsize=14, fontweight='bold')
    ax.set_xlabel('')
    ax.set_ylabel('% of crashes with injuries')
    fig.tight_layout()

    return save_figure(fig, output_path)


def plot_weekday_distribution(weekday: pd.DataFrame, output_path: Optional[Path] = None):
    """
    Two panels: share of each outcome's crashes per weekday, and injury rate
    per weekday
    """
    fig, (ax_share, ax_rate) = plt.subplots(1, 2, figsize=(14, 5))

    sns.barplot(data=weekday, x='weekday', y='percent', hue='injuries',
                palette=INJURY_COLORS, ax=ax_share)
    ax_share.yaxis.set_major_formatter(mtick.PercentFormatter(xmax=1.0))
    ax_share.set_title('Crashes by Weekday', fontsize=12, fontweight='bold')
    ax_share.set_xlabel('')
    ax_share.set_ylabel('% of crashes')
    ax_share.legend(title='Injuries?')

    rates = weekday.drop_duplicates('weekday')
    ax_rate.bar(rates['weekday'].astype(str), rates['injury_rate'],
                color=INJURY_COLORS[INJURY_LABEL], alpha=0.8)
    ax_rate.yaxis.set_major_formatter(mtick.PercentFormatter(xmax=1.0))
    ax_rate.set_title('Injury Rate by Weekday', fontsize=12, fontweight='bold')
    ax_rate.set_xlabel('')
    ax_rate.set_ylabel('% of crashes with injuries')

    fig.tight_layout()
    return save_figure(fig, output_path)


def plot_crash_type_injury_rate(by_type: pd.DataFrame, output_path: Optional[Path] = None):
    """Horizontal bars: share of each outcome's crashes by first crash type"""
    fig, ax = plt.subplots(figsize=(12, 7))

    order = by_type.drop_duplicates('first_crash_type')['first_crash_type'].tolist()[::-1]
    sns.barplot(data=by_type, y='first_crash_type', x='percent', hue='injuries',
                palette=INJURY_COLORS, order=order, orient='h', ax=ax)

    ax.xaxis.set_major_formatter(mtick.PercentFormatter(xmax=1.0))
    ax.set_title('Crash Type by Outcome', fontsize=14, fontweight='bold')
    ax.set_xlabel('% of crashes')
    ax.set_ylabel('')
    ax.legend(title='Injuries?')
    fig.tight_layout()

    return save_figure(fig, output_path)


def plot_geographic_points(points: pd.DataFrame, output_path: Optional[Path] = None):
    """Scatter of crash locations coloured by outcome"""
    fig, ax = plt.subplots(figsize=(8, 10))

    sns.scatterplot(data=points, x='longitude', y='latitude', hue='injuries',
                    palette=INJURY_COLORS, s=2, alpha=0.4, linewidth=0, ax=ax)

    ax.set_title('Crash Locations', fontsize=14, fontweight='bold')
    ax.set_xlabel('')
    ax.set_ylabel('')
    ax.set_aspect('equal', adjustable='datalim')
    ax.legend(title='Injuries?', markerscale=5)
    fig.tight_layout()

    return save_figure(fig, output_path)
