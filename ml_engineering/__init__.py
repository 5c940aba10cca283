"""
ML Engineering Module

Machine learning model development and evaluation for crash injury prediction.

Modules:
- preprocessing: Recipe transformers, pipeline assembly, feature lists
- models: Bagged decision tree classifier
- resampling: Stratified split, CV folds, parallel fold fitting
- evaluation: Metrics, variable importance, ROC curves
- utils: Model persistence and MLflow tracking
"""

__version__ = "1.0.0"
