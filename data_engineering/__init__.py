"""
Data Engineering Module for Chicago Crash Injury Prediction

This module contains all data engineering code organized by pipeline stage:
1. download/ - Data acquisition from the Socrata open data API (bronze)
2. clean/ - Projection, label derivation, incomplete-row removal (silver)
3. utils/ - Schema validation of the cleaned table

Usage:
    from data_engineering.download import download_crashes
    from data_engineering.clean import clean_crashes
"""

__version__ = "1.0.0"
