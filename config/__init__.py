"""
Project configuration: medallion data paths and run settings
"""
