"""
Association rule generation from mined itemsets.

Rules are derived by splitting each itemset into every non-trivial
antecedent/consequent pair. Side supports are looked up in the itemsets
passed in, so callers should pass the full lattice (single items included).
"""
import logging
import time
from typing import Dict, List, Tuple, Any, Iterable

from bundle_mining.rule_mining.base import Itemset, AssociationRule, canonical_key

logger = logging.getLogger(__name__)


def generate_subsets(items: Tuple[str, ...]) -> List[Tuple[str, ...]]:
    """All non-empty proper subsets of items, in bitmask order."""
    n = len(items)
    subsets = []
    for mask in range(1, (1 << n) - 1):
        subsets.append(tuple(items[j] for j in range(n) if mask & (1 << j)))
    return subsets


def build_support_index(itemsets: Iterable[Itemset]) -> Dict[Tuple[str, ...], float]:
    return {itemset.key: itemset.support for itemset in itemsets}


class RuleGenerator:
    def __init__(self, min_confidence: float, min_lift: float):
        self.min_confidence = min_confidence
        self.min_lift = min_lift
        self.stats = {}

    def generate(
        self,
        itemsets: List[Itemset],
        total_transactions: int
    ) -> List[AssociationRule]:
        start_time = time.time()
        supports = build_support_index(itemsets)

        rules = []
        evaluated = 0
        for itemset in itemsets:
            if itemset.size < 2:
                continue

            for antecedent in generate_subsets(itemset.items):
                consequent = tuple(item for item in itemset.items if item not in antecedent)
                evaluated += 1

                antecedent_support = supports.get(canonical_key(antecedent), 0.0)
                consequent_support = supports.get(canonical_key(consequent), 0.0)
                # Confidence/lift undefined without both side supports
                if antecedent_support <= 0 or consequent_support <= 0:
                    continue

                confidence = itemset.support / antecedent_support
                lift = confidence / consequent_support

                if confidence >= self.min_confidence and lift >= self.min_lift:
                    rules.append(AssociationRule(
                        antecedent=antecedent,
                        consequent=consequent,
                        confidence=confidence,
                        lift=lift,
                        support=itemset.support
                    ))

        # sorted() is stable, ties keep enumeration order
        rules = sorted(rules, key=lambda r: r.confidence, reverse=True)

        self.stats = {
            'num_rules': len(rules),
            'num_evaluated': evaluated,
            'total_transactions': total_transactions,
            'execution_time': time.time() - start_time,
            'average_confidence': sum(r.confidence for r in rules) / len(rules) if rules else 0.0,
            'average_lift': sum(r.lift for r in rules) / len(rules) if rules else 0.0
        }
        logger.debug("Generated %d rules from %d candidate splits", len(rules), evaluated)
        return rules

    def __repr__(self):
        return f"RuleGenerator(min_confidence={self.min_confidence}, min_lift={self.min_lift})"


def derive_rules(
    itemsets: List[Itemset],
    total_transactions: int,
    config
) -> List[AssociationRule]:
    """
    Derive association rules from mined itemsets.

    Args:
        itemsets: Frequent itemsets; should include every subset level so that
                  antecedent and consequent supports can be found
        total_transactions: Number of transactions the itemsets were mined from
        config: AnalysisConfig with min_confidence and min_lift

    Returns:
        Rules sorted by descending confidence
    """
    generator = RuleGenerator(config.min_confidence, config.min_lift)
    return generator.generate(itemsets, total_transactions)


def rule_stats(rules: List[AssociationRule]) -> Dict[str, Any]:
    return {
        'num_rules': len(rules),
        'average_support': sum(r.support for r in rules) / len(rules) if rules else 0.0,
        'average_confidence': sum(r.confidence for r in rules) / len(rules) if rules else 0.0,
        'average_lift': sum(r.lift for r in rules) / len(rules) if rules else 0.0
    }
