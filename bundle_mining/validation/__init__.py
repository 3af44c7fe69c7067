"""
Validation Module

Scores mined rules:
- Statistical annotation (pseudo p-value, Wald confidence interval)
- K-fold cross-validated stability
"""
from .statistics import StatisticalValidator, significance, confidence_interval
from .cross_validation import CrossValidator, CrossValidationResult, cross_validate

__all__ = [
    'StatisticalValidator', 'significance', 'confidence_interval',
    'CrossValidator', 'CrossValidationResult', 'cross_validate'
]
