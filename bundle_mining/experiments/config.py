from dataclasses import dataclass, field, replace, asdict
from typing import Dict, Any, Optional, List


@dataclass(frozen=True)
class AnalysisConfig:
    # Thresholds are fractions of transactions (0.02 = 2%)
    min_support: float = 0.02  # base support for 2-itemsets
    min_confidence: float = 0.3
    min_lift: float = 1.2
    min_itemset_support: float = 0.001  # support floor for any itemset, incl. single items
    min_bundle_size: int = 2
    max_bundle_size: Optional[int] = None  # None = unlimited
    adaptive_support: bool = True
    max_analysis_time: float = 300.0  # seconds
    confidence_level: float = 0.95
    enable_cross_validation: bool = True

    # Cross-validation runner
    cv_folds: int = 5
    cv_relaxation: float = 0.8
    n_jobs: int = 1

    def with_overrides(self, **changes) -> 'AnalysisConfig':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def default(cls) -> 'AnalysisConfig':
        return cls()

    @classmethod
    def exploratory(cls) -> 'AnalysisConfig':
        """Loose thresholds for small shops / short order histories."""
        return cls(
            min_support=0.01,
            min_confidence=0.2,
            min_lift=1.0,
            max_bundle_size=4,
            enable_cross_validation=False
        )


@dataclass
class TransactionDataConfig:
    path: str
    name: str
    order_col: str = 'order_id'
    item_cols: List[str] = field(default_factory=lambda: ['sku', 'variant_id'])
    excluded_items: List[str] = field(default_factory=list)
    sep: str = ','

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'name': self.name,
            'order_col': self.order_col,
            'item_cols': self.item_cols,
            'excluded_items': self.excluded_items,
            'sep': self.sep
        }
