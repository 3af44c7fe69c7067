import logging
import time
from datetime import datetime
from typing import List, Dict, Any, Tuple, Iterable, Optional

from bundle_mining.rule_mining.apriori_miner import AprioriMiner, normalize_transactions
from bundle_mining.rule_mining.base import Itemset, AssociationRule, TransactionSource, ResultSink
from bundle_mining.rule_mining.rules import derive_rules, rule_stats
from bundle_mining.validation.statistics import StatisticalValidator
from bundle_mining.validation.cross_validation import CrossValidator

from .config import AnalysisConfig

logger = logging.getLogger(__name__)


def mine_lattice(
    transactions: Iterable[Iterable[str]],
    config: AnalysisConfig
) -> Tuple[List[Itemset], Dict[str, Any]]:
    return AprioriMiner(config).mine_lattice(transactions)


def mine_itemsets(
    transactions: Iterable[Iterable[str]],
    config: AnalysisConfig
) -> List[Itemset]:
    itemsets, _ = AprioriMiner(config).mine_itemsets(transactions)
    return itemsets


def validate_statistically(
    transactions: Iterable[Iterable[str]],
    config: AnalysisConfig,
    verbose: bool = False
) -> Dict[str, Any]:
    """
    Mine, derive rules, annotate them and (optionally) cross-validate.

    verbose shows a progress bar over the cross-validation folds.

    Returns:
        Dict with keys:
            - 'rules': annotated AssociationRule list
            - 'cross_validation': CrossValidationResult, or None when disabled
            - 'itemsets': itemsets of bundle size
            - 'metadata': mining/rule statistics and the config used
    """
    start_time = time.perf_counter()
    data = normalize_transactions(transactions)

    lattice, mining_stats = mine_lattice(data, config)
    total = mining_stats['num_transactions']

    rules = derive_rules(lattice, total, config)
    rules = StatisticalValidator(config).annotate(rules, lattice, total)

    cross_validation = None
    if config.enable_cross_validation:
        cross_validation = CrossValidator(config, verbose=verbose).validate(data)

    itemsets = [i for i in lattice if i.size >= config.min_bundle_size]

    metadata = {
        'total_transactions': total,
        'mining': mining_stats,
        'rules': rule_stats(rules),
        'num_bundle_itemsets': len(itemsets),
        'config': config.to_dict(),
        'execution_time': time.perf_counter() - start_time,
        'timestamp': datetime.now().isoformat()
    }

    return {
        'rules': rules,
        'cross_validation': cross_validation,
        'itemsets': itemsets,
        'metadata': metadata
    }


def run_bundle_mining(
    source: TransactionSource,
    config: AnalysisConfig,
    sink: Optional[ResultSink] = None
) -> Dict[str, Any]:
    transactions = source.load_transactions()
    logger.info("Loaded %d transactions from %r", len(transactions), source)

    results = validate_statistically(transactions, config)

    if sink is not None:
        sink.write(
            results['itemsets'],
            results['rules'],
            cross_validation=results['cross_validation'],
            metadata=results['metadata']
        )
    return results


def generate_output_filename(experiment_name: str, dataset_name: str) -> str:
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return f"{timestamp}_{experiment_name}_{dataset_name}"
