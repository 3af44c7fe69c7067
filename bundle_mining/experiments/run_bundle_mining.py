"""
Bundle Mining Experiment

Loads order lines, builds transactions, mines frequent itemsets and
association rules, annotates them statistically, cross-validates and
saves everything to Excel and a readable text report.
"""
import logging
from pathlib import Path

from bundle_mining.experiments.config import AnalysisConfig, TransactionDataConfig
from bundle_mining.experiments.base import validate_statistically, generate_output_filename
from bundle_mining.postprocessing.rule import filter_rules, cooccurrence_pairs, format_items
from bundle_mining.utils.excel_io import save_mining_results, save_rules_text
from bundle_mining.utils.log import setup_logging
from bundle_mining.utils.transactions import DataFrameTransactionSource

setup_logging(logging.INFO)

# =============================================================================
# CONFIGURATION
# =============================================================================

DATA_CONFIG = TransactionDataConfig(
    path="../../data/raw/order_lines.csv",
    name="order_lines",
    order_col='order_id',
    item_cols=['sku', 'variant_id'],
    # SKUs that already are bundles
    excluded_items=[]
)
OUTPUT_DIR = "../../out/bundles"

ANALYSIS_CONFIG = AnalysisConfig(
    min_support=0.02,
    min_confidence=0.3,
    min_lift=1.2,
    min_itemset_support=0.001,
    min_bundle_size=2,
    max_bundle_size=None,
    adaptive_support=True,
    max_analysis_time=300,
    confidence_level=0.95,
    enable_cross_validation=True
)

# Report filter
MIN_REPORT_LIFT = 1.5
TOP_N = 10


# =============================================================================
# EXPERIMENT
# =============================================================================

def run_experiment():
    print("=" * 70)
    print("BUNDLE MINING EXPERIMENT")
    print("=" * 70)

    # Load data
    print("\n[1] Loading order lines...")
    source = DataFrameTransactionSource.from_config(DATA_CONFIG)
    transactions = source.load_transactions()
    print(f"  Order lines: {len(source.df)}")
    print(f"  Transactions: {len(transactions)}")

    if not transactions:
        print("  Error: No transactions found. Nothing to analyze.")
        return

    # Mine and validate
    print("\n[2] Mining itemsets and rules...")
    results = validate_statistically(transactions, ANALYSIS_CONFIG, verbose=True)
    itemsets = results['itemsets']
    rules = results['rules']
    mining = results['metadata']['mining']
    print(f"  Itemsets: {len(itemsets)} (levels: {mining['max_level']}, stop: {mining['stop_reason']})")
    print(f"  Rules: {len(rules)}")

    strong_rules = filter_rules(rules, criterion='lift', threshold=MIN_REPORT_LIFT)
    print(f"  After lift >= {MIN_REPORT_LIFT}: {len(strong_rules)} rules")

    cv = results['cross_validation']
    if cv is not None:
        print("\n[3] Cross-validation...")
        print(f"  Avg lift: {cv.average_lift:.3f}")
        print(f"  Avg confidence: {cv.average_confidence:.3f}")
        print(f"  Stability: {cv.stability_score:.3f}")

    # Save results
    print(f"\n{'=' * 70}")
    print("SAVING RESULTS")
    print("=" * 70)

    output_path = Path(OUTPUT_DIR)
    output_path.mkdir(parents=True, exist_ok=True)
    filename = generate_output_filename('bundle_mining', DATA_CONFIG.name)

    save_mining_results(
        itemsets,
        rules,
        output_path / filename,
        cross_validation=cv,
        metadata=results['metadata']
    )
    save_rules_text(
        strong_rules,
        output_path / filename,
        title="BUNDLE RULES",
        metadata={
            'transactions': len(transactions),
            'min_lift': MIN_REPORT_LIFT
        }
    )

    # Print final summary
    print(f"\n{'=' * 70}")
    print("EXPERIMENT COMPLETE")
    print("=" * 70)
    print(f"\nTop {TOP_N} pairs:")
    for pair in cooccurrence_pairs(rules)[:TOP_N]:
        print(f"  {pair['antecedent']} -> {pair['consequent']}: "
              f"conf={pair['confidence']:.2f}, lift={pair['lift']:.2f}")

    print(f"\nTop {TOP_N} bundles:")
    for itemset in sorted(itemsets, key=lambda i: i.support, reverse=True)[:TOP_N]:
        print(f"  {format_items(itemset.items)}: support={itemset.support:.3f} ({itemset.support_count} orders)")

    print(f"\nOutput: {output_path / filename}.xlsx")
    print("=" * 70)


if __name__ == '__main__':
    run_experiment()
