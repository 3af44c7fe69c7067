"""
Bundle mining: frequent itemsets and association rules from order history.
"""
from bundle_mining.rule_mining.base import (
    Itemset,
    AssociationRule,
    TransactionSource,
    ResultSink
)
from bundle_mining.experiments.config import AnalysisConfig
from bundle_mining.experiments.base import (
    mine_itemsets,
    derive_rules,
    validate_statistically,
    run_bundle_mining
)
from bundle_mining.validation.cross_validation import CrossValidationResult

__version__ = '0.1.0'

__all__ = [
    'Itemset',
    'AssociationRule',
    'TransactionSource',
    'ResultSink',
    'AnalysisConfig',
    'CrossValidationResult',
    'mine_itemsets',
    'derive_rules',
    'validate_statistically',
    'run_bundle_mining'
]
