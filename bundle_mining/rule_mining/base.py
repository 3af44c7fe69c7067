"""
Base types and interfaces for bundle mining.

Itemsets and rules are immutable values; miners, transaction sources and
result sinks are the seams callers plug into.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Dict, List, Tuple, Any, Iterable, FrozenSet, Optional


def canonical_key(items: Iterable[str]) -> Tuple[str, ...]:
    """Sorted tuple of distinct items, used as identity for itemset lookups."""
    return tuple(sorted(set(items)))


@dataclass(frozen=True)
class Itemset:
    """A frequent combination of item ids with its support."""
    items: Tuple[str, ...]
    support: float
    support_count: int

    def __post_init__(self):
        object.__setattr__(self, 'items', canonical_key(self.items))

    @property
    def key(self) -> Tuple[str, ...]:
        return self.items

    @property
    def size(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': list(self.items),
            'support': self.support,
            'support_count': self.support_count
        }


@dataclass(frozen=True)
class AssociationRule:
    """
    antecedent -> consequent, where both sides are disjoint, non-empty and
    their union is a mined itemset.

    significance and confidence_interval are only set once the rule has
    been through StatisticalValidator.
    """
    antecedent: Tuple[str, ...]
    consequent: Tuple[str, ...]
    confidence: float
    lift: float
    support: float
    significance: Optional[float] = None
    confidence_interval: Optional[Tuple[float, float]] = None

    def __post_init__(self):
        object.__setattr__(self, 'antecedent', canonical_key(self.antecedent))
        object.__setattr__(self, 'consequent', canonical_key(self.consequent))

    @property
    def items(self) -> Tuple[str, ...]:
        return canonical_key(self.antecedent + self.consequent)

    def with_statistics(
        self,
        significance: float,
        confidence_interval: Tuple[float, float]
    ) -> 'AssociationRule':
        return replace(
            self,
            significance=significance,
            confidence_interval=tuple(confidence_interval)
        )

    def to_dict(self) -> Dict[str, Any]:
        rule = {
            'antecedent': list(self.antecedent),
            'consequent': list(self.consequent),
            'confidence': self.confidence,
            'lift': self.lift,
            'support': self.support
        }
        if self.significance is not None:
            rule['significance'] = self.significance
        if self.confidence_interval is not None:
            rule['confidence_interval'] = list(self.confidence_interval)
        return rule


class BundleMiner(ABC):
    """
    Base class for miners that produce both frequent itemsets and
    association rules from transactions.

    Both methods return (results, stats), where stats is a dict with mining
    statistics (execution_time, counts, algorithm, ...).
    """

    def __init__(self, config):
        self.config = config

    @abstractmethod
    def mine_itemsets(
        self, transactions: Iterable[Iterable[str]]
    ) -> Tuple[List[Itemset], Dict[str, Any]]:
        """Mine frequent itemsets of bundle size."""
        pass

    @abstractmethod
    def mine_rules(
        self, transactions: Iterable[Iterable[str]]
    ) -> Tuple[List[AssociationRule], Dict[str, Any]]:
        """Mine association rules."""
        pass


class TransactionSource(ABC):
    """Produces cleaned transactions for a mining run."""

    @abstractmethod
    def load_transactions(self) -> List[FrozenSet[str]]:
        pass


class ResultSink(ABC):
    """Consumes the results of a mining run."""

    @abstractmethod
    def write(
        self,
        itemsets: List[Itemset],
        rules: List[AssociationRule],
        cross_validation: Any = None,
        metadata: Dict[str, Any] = None
    ) -> Any:
        pass
