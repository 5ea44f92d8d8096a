"""
Taxi Fare Predictor
===================

A machine learning pipeline that predicts taxi fares from trip attributes.

Modules:
    - schema: Trip record fields and feature groupings
    - config: Pipeline configuration loaded from YAML
    - data_loader: CSV cleaning and loading
    - reports: Missing, distinct and frequency reports
    - preprocessing: Row filtering, splitting and feature transformer
    - model: Boosted-tree fare model with persistence
    - evaluation: Regression metrics and diagnostics
    - prediction: Single-trip inference from a saved model
"""

__version__ = "1.0.0"
__author__ = "Taxi Fare Prediction Team"
