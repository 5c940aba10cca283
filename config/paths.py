"""
Project Path Configuration

Centralized path definitions for data, models, and outputs
Using Medallion Architecture: Bronze (raw) → Silver (cleaned)

Bronze (data/bronze/chicago/crashes/): raw Socrata payload, string-typed,
one timestamped CSV per download plus chicago_crashes_latest.csv
Silver (data/silver/chicago/crashes/): modelling columns, outcome label,
no incomplete rows, validated against the pandera schema
"""

from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# ==============================================================================
# MEDALLION ARCHITECTURE (Bronze / Silver)
# ==============================================================================

DATA_ROOT = PROJECT_ROOT / "data"

# Bronze Layer: Raw, immutable data (as downloaded from the open data portal)
BRONZE = DATA_ROOT / "bronze"
BRONZE_CHICAGO = BRONZE / "chicago"
CHICAGO_BRONZE_CRASHES = BRONZE_CHICAGO / "crashes"

# Silver Layer: Cleaned, validated, model-ready crash table
SILVER = DATA_ROOT / "silver"
SILVER_CHICAGO = SILVER / "chicago"
CHICAGO_SILVER_CRASHES = SILVER_CHICAGO / "crashes"

# ==============================================================================
# DEFAULT FILES
# ==============================================================================

RAW_CRASHES_LATEST = CHICAGO_BRONZE_CRASHES / "chicago_crashes_latest.csv"
CLEAN_CRASHES_FILE = CHICAGO_SILVER_CRASHES / "chicago_crashes_clean.csv"

# ==============================================================================
# OUTPUTS
# ==============================================================================

REPORTS = PROJECT_ROOT / "reports"
FIGURES = REPORTS / "figures"
MODELS = PROJECT_ROOT / "models"
MODEL_ARTIFACTS = MODELS / "artifacts"

# ==============================================================================
# DIRECTORY INITIALIZATION
# ==============================================================================

def ensure_directories():
    """Create all necessary directories if they don't exist"""

    bronze_dirs = [BRONZE, BRONZE_CHICAGO, CHICAGO_BRONZE_CRASHES]
    silver_dirs = [SILVER, SILVER_CHICAGO, CHICAGO_SILVER_CRASHES]
    output_dirs = [REPORTS, FIGURES, MODELS, MODEL_ARTIFACTS]

    for directory in bronze_dirs + silver_dirs + output_dirs:
        directory.mkdir(parents=True, exist_ok=True)
