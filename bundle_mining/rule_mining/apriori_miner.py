"""
Level-wise Apriori mining with adaptive support thresholds.

Transactions are one-hot encoded with mlxtend's TransactionEncoder; the
support of a candidate is the number of rows that have every one of its
columns set. The search is bounded by a wall-clock limit, a complexity
guard and an optional maximum bundle size, and always returns whatever it
found so far.
"""
import logging
import time
from typing import Dict, List, Tuple, Any, Iterable, FrozenSet

import numpy as np
from mlxtend.preprocessing import TransactionEncoder

from bundle_mining.rule_mining.base import BundleMiner, Itemset, AssociationRule
from bundle_mining.rule_mining.candidates import generate_candidates
from bundle_mining.rule_mining.support import SupportCalculator
from bundle_mining.rule_mining.rules import RuleGenerator

logger = logging.getLogger(__name__)

MAX_CONSECUTIVE_EMPTY_LEVELS = 2
# Complexity guard: from this level on, stop once a level has too many candidates
COMPLEXITY_GUARD_LEVEL = 8
COMPLEXITY_GUARD_CANDIDATES = 1000


def normalize_transactions(transactions: Iterable[Iterable[str]]) -> List[FrozenSet[str]]:
    """
    Drop empty or whitespace-only identifiers and collapse duplicates.

    Identifiers are kept as given. Transactions left without items are dropped.
    """
    normalized = []
    for transaction in transactions:
        items = frozenset(
            item for item in transaction
            if item is not None and item.strip()
        )
        if items:
            normalized.append(items)
    return normalized


class AprioriMiner(BundleMiner):
    """
    Apriori miner for product bundles.

    Level 1 keeps single items with support >= min_itemset_support. Each
    following level k joins the previous level's frequent itemsets and keeps
    the candidates that reach SupportCalculator's threshold for k.

    Search stops when:
    - two consecutive levels produce nothing
    - max_analysis_time has elapsed (checked once per level)
    - k >= 8 and a level had more than 1000 candidates
    - k passes max_bundle_size
    """

    def __init__(self, config):
        super().__init__(config)

    def _encode(self, transactions: List[FrozenSet[str]]) -> Tuple[np.ndarray, List[str]]:
        rows = [sorted(transaction) for transaction in transactions]
        te = TransactionEncoder()
        matrix = te.fit(rows).transform(rows)
        return np.asarray(matrix, dtype=bool), list(te.columns_)

    def _count_candidates(
        self,
        matrix: np.ndarray,
        columns: Dict[str, int],
        candidates: List[Tuple[str, ...]],
        total: int,
        threshold: float
    ) -> List[Itemset]:
        frequent = []
        for candidate in candidates:
            idx = [columns[item] for item in candidate]
            count = int(matrix[:, idx].all(axis=1).sum())
            if count == 0:
                continue
            support = count / total
            if support >= threshold:
                frequent.append(Itemset(candidate, support, count))
        return frequent

    def mine_lattice(
        self, transactions: Iterable[Iterable[str]]
    ) -> Tuple[List[Itemset], Dict[str, Any]]:
        """
        Mine frequent itemsets of every size, single items included.

        Args:
            transactions: Sequence of item-id collections

        Returns:
            Tuple of (itemsets, stats)
        """
        start_time = time.perf_counter()
        normalized = normalize_transactions(transactions)
        total = len(normalized)

        if total == 0:
            logger.info("No transactions to analyze")
            return [], self._build_stats([], [], total, 'exhausted', start_time)

        cfg = self.config
        logger.info(
            "Starting Apriori analysis: %d transactions, adaptive support: %s, max time: %ss",
            total, cfg.adaptive_support, cfg.max_analysis_time
        )

        matrix, items = self._encode(normalized)
        columns = {item: idx for idx, item in enumerate(items)}

        # Level 1: raw item frequencies
        counts = matrix.sum(axis=0)
        current = [
            Itemset((item,), int(count) / total, int(count))
            for item, count in zip(items, counts)
            if count > 0 and int(count) / total >= cfg.min_itemset_support
        ]
        all_itemsets = list(current)
        levels = [{
            'k': 1,
            'threshold': cfg.min_itemset_support,
            'num_candidates': len(items),
            'num_frequent': len(current)
        }]
        logger.debug("Found %d frequent 1-itemsets", len(current))

        calculator = SupportCalculator(cfg, total)
        stop_reason = 'exhausted'
        empty_levels = 0
        k = 2

        while current and empty_levels < MAX_CONSECUTIVE_EMPTY_LEVELS:
            if time.perf_counter() - start_time > cfg.max_analysis_time:
                stop_reason = 'time_limit'
                logger.info("Analysis stopped due to time limit (%ss)", cfg.max_analysis_time)
                break

            if cfg.max_bundle_size is not None and k > cfg.max_bundle_size:
                stop_reason = 'max_bundle_size'
                logger.info("Stopping at configured max bundle size: %d", cfg.max_bundle_size)
                break

            threshold = calculator.threshold(k)
            candidates = generate_candidates(current, k)

            frequent = []
            if candidates:
                frequent = self._count_candidates(matrix, columns, candidates, total, threshold)

            levels.append({
                'k': k,
                'threshold': threshold,
                'num_candidates': len(candidates),
                'num_frequent': len(frequent)
            })

            if frequent:
                all_itemsets.extend(frequent)
                current = frequent
                empty_levels = 0
                logger.debug(
                    "Found %d frequent %d-itemsets (min support %.5f)", len(frequent), k, threshold
                )
            else:
                empty_levels += 1
                logger.debug("No frequent %d-itemsets with min support %.5f", k, threshold)

            if k >= COMPLEXITY_GUARD_LEVEL and len(candidates) > COMPLEXITY_GUARD_CANDIDATES:
                stop_reason = 'complexity_limit'
                logger.info(
                    "Stopping at %d-itemsets due to computational complexity (%d candidates)",
                    k, len(candidates)
                )
                break

            k += 1

        stats = self._build_stats(all_itemsets, levels, total, stop_reason, start_time)
        logger.info(
            "Analysis complete: %d frequent itemsets across %d levels in %.3fs (%s)",
            len(all_itemsets), stats['max_level'], stats['execution_time'], stop_reason
        )
        return all_itemsets, stats

    def _build_stats(self, itemsets, levels, total, stop_reason, start_time) -> Dict[str, Any]:
        return {
            'num_itemsets': len(itemsets),
            'num_transactions': total,
            'execution_time': time.perf_counter() - start_time,
            'average_support': float(np.mean([i.support for i in itemsets])) if itemsets else 0.0,
            'levels': levels,
            'max_level': max((lvl['k'] for lvl in levels if lvl['num_frequent'] > 0), default=0),
            'stop_reason': stop_reason,
            'algorithm': 'Apriori_adaptive' if self.config.adaptive_support else 'Apriori',
            'mode': 'lattice'
        }

    def mine_itemsets(
        self, transactions: Iterable[Iterable[str]]
    ) -> Tuple[List[Itemset], Dict[str, Any]]:
        """
        Mine frequent itemsets that qualify as bundles (size >= min_bundle_size).

        Returns:
            Tuple of (itemsets, stats)
        """
        lattice, stats = self.mine_lattice(transactions)
        itemsets = [i for i in lattice if i.size >= self.config.min_bundle_size]

        stats = dict(stats)
        stats['num_itemsets'] = len(itemsets)
        stats['average_support'] = (
            float(np.mean([i.support for i in itemsets])) if itemsets else 0.0
        )
        stats['mode'] = 'itemsets'
        return itemsets, stats

    def mine_rules(
        self, transactions: Iterable[Iterable[str]]
    ) -> Tuple[List[AssociationRule], Dict[str, Any]]:
        """
        Mine association rules from the full itemset lattice.

        Returns:
            Tuple of (rules, stats)
        """
        lattice, stats = self.mine_lattice(transactions)

        generator = RuleGenerator(self.config.min_confidence, self.config.min_lift)
        rules = generator.generate(lattice, stats['num_transactions'])

        stats = dict(stats)
        stats.update({
            'num_rules': len(rules),
            'average_confidence': generator.stats['average_confidence'],
            'average_lift': generator.stats['average_lift'],
            'execution_time': stats['execution_time'] + generator.stats['execution_time'],
            'mode': 'rules'
        })
        return rules, stats

    def __repr__(self):
        cfg = self.config
        return (f"AprioriMiner(min_support={cfg.min_support}, min_itemset_support={cfg.min_itemset_support}, "
                f"adaptive_support={cfg.adaptive_support}, max_bundle_size={cfg.max_bundle_size})")
