"""Command-line drivers for the end-to-end pipeline"""
