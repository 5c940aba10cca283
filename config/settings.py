"""
Configuration for the Chicago Crash Injury project
API identifiers, seeds, model settings, and chart colors
"""

# Open data portal (Socrata)
SOCRATA_DOMAIN = 'data.cityofchicago.org'
CRASHES_DATASET_ID = '85ca-t3if'  # Traffic Crashes - Crashes
DEFAULT_YEARS_BACK = 2
SOCRATA_PAGE_SIZE = 50000  # Socrata API limit
SOCRATA_TIMEOUT = 60

# Outcome label
INJURY_LABEL = 'injuries'
NO_INJURY_LABEL = 'none'
POSITIVE_LABEL = INJURY_LABEL

# Reproducibility
SPLIT_SEED = 2020
CV_SEED = 123
MODEL_SEED = 42

# Resampling
TEST_SIZE = 0.25
N_FOLDS = 10

# Recipe
OTHER_LABEL = 'OTHER'
OTHER_THRESHOLD = 0.05  # minimum share of training rows to keep a level

# Bagged trees
N_ESTIMATORS = 25
MIN_SAMPLES_LEAF = 10

# Exploration
CRASH_TYPE_MIN_COUNT = 10000
TOP_N_IMPORTANCE = 10

# Chart colors
INJURY_COLORS = {
    INJURY_LABEL: '#e74c3c',    # Red
    NO_INJURY_LABEL: '#3498db'  # Blue
}

CHART_COLORS = [
    '#3498db',  # Blue
    '#e74c3c',  # Red
    '#2ecc71',  # Green
    '#f39c12',  # Orange
    '#9b59b6',  # Purple
    '#1abc9c',  # Turquoise
    '#34495e',  # Dark gray
    '#e67e22',  # Carrot
    '#95a5a6',  # Silver
    '#c0392b',  # Dark red
]

FIGURE_DPI = 150
