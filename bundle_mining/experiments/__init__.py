from .config import (
    AnalysisConfig,
    TransactionDataConfig
)
from .base import (
    mine_lattice,
    mine_itemsets,
    derive_rules,
    validate_statistically,
    run_bundle_mining
)

__all__ = [
    'AnalysisConfig',
    'TransactionDataConfig',
    'mine_lattice',
    'mine_itemsets',
    'derive_rules',
    'validate_statistically',
    'run_bundle_mining'
]
