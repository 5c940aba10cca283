"""
Data Download Module

Scripts to download raw data from the City of Chicago Open Data Portal:
- Traffic Crashes - Crashes (Socrata dataset 85ca-t3if)
"""

from .download_chicago_crashes import (
    build_where_clause,
    download_crashes,
    lookback_start,
    resource_url,
    save_raw_crashes
)

__all__ = [
    'build_where_clause',
    'download_crashes',
    'lookback_start',
    'resource_url',
    'save_raw_crashes',
]
