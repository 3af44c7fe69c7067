"""
Significance and confidence-interval estimates for association rules.
"""
import math
from typing import Dict, List, Tuple

from bundle_mining.rule_mining.base import Itemset, AssociationRule, canonical_key

# z-scores for the supported confidence levels; anything else uses 95%
Z_SCORES = {
    0.95: 1.96,
    0.99: 2.576
}
DEFAULT_Z_SCORE = 1.96


def significance(observed: float, total_transactions: int, freq_a: float, freq_b: float) -> float:
    """
    Pseudo p-value for the co-occurrence of A and B.

    One-degree-of-freedom chi-square on the observed joint count against
    the count expected under independence, approximated as exp(-chi2 / 2).
    Returns 1.0 when nothing is expected to co-occur.

    Args:
        observed: Transactions containing A and B
        total_transactions: Number of transactions
        freq_a: Transactions containing A
        freq_b: Transactions containing B
    """
    if total_transactions <= 0:
        return 1.0
    expected = freq_a * freq_b / total_transactions
    if expected == 0:
        return 1.0

    chi_square = (observed - expected) ** 2 / expected
    p_value = math.exp(-chi_square / 2)
    return min(1.0, max(0.0, p_value))


def z_score(level: float) -> float:
    return Z_SCORES.get(level, DEFAULT_Z_SCORE)


def confidence_interval(confidence: float, sample_size: int, level: float = 0.95) -> Tuple[float, float]:
    """Wald interval for a rule confidence, clipped to [0, 1]."""
    if sample_size <= 0:
        return 0.0, 1.0

    se = math.sqrt(confidence * (1 - confidence) / sample_size)
    z = z_score(level)
    return max(0.0, confidence - z * se), min(1.0, confidence + z * se)


class StatisticalValidator:
    """Attaches significance and confidence intervals to mined rules."""

    def __init__(self, config):
        self.config = config

    def annotate(
        self,
        rules: List[AssociationRule],
        itemsets: List[Itemset],
        total_transactions: int
    ) -> List[AssociationRule]:
        """
        Args:
            rules: Rules from derive_rules
            itemsets: The itemsets the rules were derived from (full lattice)
            total_transactions: Number of transactions mined

        Returns:
            New rules carrying significance and confidence_interval
        """
        supports: Dict[Tuple[str, ...], float] = {i.key: i.support for i in itemsets}

        def count(items) -> int:
            return int(round(supports.get(canonical_key(items), 0.0) * total_transactions))

        annotated = []
        for rule in rules:
            freq_a = count(rule.antecedent)
            freq_b = count(rule.consequent)
            observed = int(round(rule.support * total_transactions))

            annotated.append(rule.with_statistics(
                significance(observed, total_transactions, freq_a, freq_b),
                confidence_interval(rule.confidence, freq_a, self.config.confidence_level)
            ))
        return annotated
