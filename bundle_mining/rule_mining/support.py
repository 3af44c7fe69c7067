from typing import Dict

# Never demand evidence from fewer than this many transactions
MIN_EVIDENCE_TRANSACTIONS = 5
# Threshold growth per additional item
SIZE_MULTIPLIER_BASE = 1.5


def adaptive_min_support(
    bundle_size: int,
    total_transactions: int,
    min_support: float,
    min_itemset_support: float,
    adaptive: bool = True
) -> float:
    """
    Minimum support for itemsets of the given size.

    Without adaptation this is min_support for every level. With it, the
    threshold grows by 1.5x per item beyond two and never drops below
    min_itemset_support or 5 observed transactions.
    """
    if not adaptive:
        return min_support

    multiplier = SIZE_MULTIPLIER_BASE ** (bundle_size - 2)

    floor = min_itemset_support
    if total_transactions > 0:
        floor = max(floor, MIN_EVIDENCE_TRANSACTIONS / total_transactions)

    return max(min_support * multiplier, floor)


class SupportCalculator:
    def __init__(self, config, total_transactions: int):
        self.config = config
        self.total_transactions = total_transactions

    def threshold(self, bundle_size: int) -> float:
        return adaptive_min_support(
            bundle_size,
            self.total_transactions,
            min_support=self.config.min_support,
            min_itemset_support=self.config.min_itemset_support,
            adaptive=self.config.adaptive_support
        )

    def thresholds(self, max_size: int) -> Dict[int, float]:
        return {k: self.threshold(k) for k in range(2, max_size + 1)}

    def __repr__(self):
        return (f"SupportCalculator(adaptive={self.config.adaptive_support}, "
                f"min_support={self.config.min_support}, "
                f"total_transactions={self.total_transactions})")
