"""
K-fold stability assessment of the rule-mining pipeline.

Each fold mines rules on the other k-1 folds with relaxed thresholds and
summarises them by average lift and confidence. The spread of those
averages across folds gives the stability score.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Any, Iterable, FrozenSet

import numpy as np
from joblib import Parallel, delayed
from sklearn.model_selection import KFold
from tqdm.auto import tqdm

from bundle_mining.rule_mining.apriori_miner import AprioriMiner, normalize_transactions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CrossValidationResult:
    average_lift: float = 0.0
    average_confidence: float = 0.0
    stability_score: float = 0.0
    n_folds: int = 0
    fold_results: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'average_lift': self.average_lift,
            'average_confidence': self.average_confidence,
            'stability_score': self.stability_score,
            'n_folds': self.n_folds,
            'fold_results': [dict(f) for f in self.fold_results]
        }


def stability_score(lifts: List[float], confidences: List[float]) -> float:
    """1 / (1 + sqrt(mean variance)); 1.0 means identical folds."""
    variance = (float(np.var(lifts)) + float(np.var(confidences))) / 2
    return 1.0 / (1.0 + math.sqrt(variance))


def _run_fold(
    fold: int,
    train: List[FrozenSet[str]],
    test: List[FrozenSet[str]],
    train_config,
    test_config
) -> Dict[str, Any]:
    train_rules, train_stats = AprioriMiner(train_config).mine_rules(train)
    # Mined for reporting only; not scored against the training rules.
    # Capped at the deepest training level, zero thresholds are exponential in basket width.
    max_size = train_stats['max_level']
    if test_config.max_bundle_size is not None:
        max_size = min(max_size, test_config.max_bundle_size)
    test_rules, _ = AprioriMiner(test_config.with_overrides(max_bundle_size=max_size)).mine_rules(test)

    return {
        'fold': fold,
        'train_size': len(train),
        'test_size': len(test),
        'train_rules': len(train_rules),
        'test_rules': len(test_rules),
        'test_max_bundle_size': max_size,
        'average_lift': float(np.mean([r.lift for r in train_rules])) if train_rules else 0.0,
        'average_confidence': float(np.mean([r.confidence for r in train_rules])) if train_rules else 0.0,
        'stop_reason': train_stats['stop_reason']
    }


class CrossValidator:
    def __init__(self, config, n_folds: int = None, verbose: bool = False):
        self.config = config
        self.n_folds = n_folds if n_folds is not None else config.cv_folds
        self.verbose = verbose

    def _train_config(self):
        relax = self.config.cv_relaxation
        return self.config.with_overrides(
            min_support=self.config.min_support * relax,
            min_confidence=self.config.min_confidence * relax
        )

    def _test_config(self):
        return self.config.with_overrides(
            min_support=0.0,
            min_confidence=0.0,
            min_lift=0.0,
            min_itemset_support=0.0,
            adaptive_support=False
        )

    def validate(self, transactions: Iterable[Iterable[str]]) -> CrossValidationResult:
        """
        Run k-fold cross-validation over transactions in their given order.

        Returns:
            CrossValidationResult; all zeros when there are fewer
            transactions than folds
        """
        data = normalize_transactions(transactions)
        n_folds = self.n_folds

        if n_folds < 2 or len(data) < n_folds:
            logger.info(
                "Skipping cross-validation: %d transactions for %d folds", len(data), n_folds
            )
            return CrossValidationResult()

        kf = KFold(n_splits=n_folds, shuffle=False)
        splits = list(enumerate(kf.split(data), 1))
        if self.verbose:
            splits = tqdm(splits, desc="Cross-validating folds", unit="fold")

        train_config = self._train_config()
        test_config = self._test_config()

        fold_results = Parallel(n_jobs=self.config.n_jobs)(
            delayed(_run_fold)(
                fold,
                [data[i] for i in train_idx],
                [data[i] for i in test_idx],
                train_config,
                test_config
            )
            for fold, (train_idx, test_idx) in splits
        )

        lifts = [f['average_lift'] for f in fold_results]
        confidences = [f['average_confidence'] for f in fold_results]

        result = CrossValidationResult(
            average_lift=float(np.mean(lifts)),
            average_confidence=float(np.mean(confidences)),
            stability_score=stability_score(lifts, confidences),
            n_folds=n_folds,
            fold_results=tuple(fold_results)
        )
        logger.info(
            "Cross-validation: avg lift %.3f, avg confidence %.3f, stability %.3f",
            result.average_lift, result.average_confidence, result.stability_score
        )
        return result

    def __repr__(self):
        return f"CrossValidator(n_folds={self.n_folds}, relaxation={self.config.cv_relaxation})"


def cross_validate(
    transactions: Iterable[Iterable[str]],
    config,
    n_folds: int = None,
    verbose: bool = False
) -> CrossValidationResult:
    return CrossValidator(config, n_folds=n_folds, verbose=verbose).validate(transactions)
