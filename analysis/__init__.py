"""
Analysis Module

Exploratory aggregations and charts over the cleaned crash table
"""
