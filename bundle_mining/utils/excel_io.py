import pandas as pd
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Any, Union

from bundle_mining.rule_mining.base import Itemset, AssociationRule, ResultSink
from bundle_mining.postprocessing.rule import (
    rules_to_frame, itemsets_to_frame, cooccurrence_pairs, format_items
)


def _scalar_items(data: Dict[str, Any], prefix: str = '') -> Dict[str, Any]:
    """Flatten nested dicts to 'a.b' keys, keeping scalar values only."""
    flat = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_scalar_items(value, prefix=f"{name}."))
        elif value is None or isinstance(value, (str, int, float, bool)):
            flat[name] = value
    return flat


def save_mining_results(
    itemsets: List[Itemset],
    rules: List[AssociationRule],
    output_path: Union[str, Path],
    cross_validation=None,
    metadata: Dict[str, Any] = None,
    parameters: Dict[str, Any] = None
) -> Path:
    """
    Save bundle mining results to Excel with multiple sheets.

    Sheets:
        - Itemsets: Frequent itemsets of bundle size
        - Rules: Association rules with statistics
        - Pairs: Best single-item rule per item pair
        - Levels: Per-level candidate/frequent counts (if in metadata)
        - Cross Validation: Per-fold results (if run)
        - Summary: Aggregate statistics
        - Parameters: Analysis parameters used

    Args:
        itemsets: Mined itemsets
        rules: Mined (optionally annotated) rules
        output_path: Output file path (will add .xlsx if needed)
        cross_validation: CrossValidationResult or None
        metadata: Run metadata as returned by validate_statistically
        parameters: Analysis parameters; defaults to metadata['config']
    """
    output_path = Path(output_path)
    if output_path.suffix != '.xlsx':
        output_path = output_path.with_suffix('.xlsx')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    metadata = metadata or {}
    if parameters is None:
        parameters = metadata.get('config')

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        # Sheet 1: Itemsets
        itemsets_to_frame(itemsets).to_excel(writer, sheet_name='Itemsets', index=False)

        # Sheet 2: Rules
        rules_to_frame(rules).to_excel(writer, sheet_name='Rules', index=False)

        # Sheet 3: Pairs
        pairs = cooccurrence_pairs(rules)
        if pairs:
            pd.DataFrame(pairs).to_excel(writer, sheet_name='Pairs', index=False)

        # Sheet 4: Levels
        levels = metadata.get('mining', {}).get('levels')
        if levels:
            pd.DataFrame(levels).to_excel(writer, sheet_name='Levels', index=False)

        # Sheet 5: Cross Validation
        if cross_validation is not None and cross_validation.fold_results:
            folds_df = pd.DataFrame(list(cross_validation.fold_results))
            folds_df.to_excel(writer, sheet_name='Cross Validation', index=False)

        # Sheet 6: Summary
        summary = {
            'num_itemsets': len(itemsets),
            'num_rules': len(rules)
        }
        if cross_validation is not None:
            summary.update({
                'cv_average_lift': cross_validation.average_lift,
                'cv_average_confidence': cross_validation.average_confidence,
                'cv_stability_score': cross_validation.stability_score
            })
        summary.update(_scalar_items({k: v for k, v in metadata.items() if k != 'config'}))
        summary_df = pd.DataFrame({
            'Metric': list(summary.keys()),
            'Value': [str(v) for v in summary.values()]
        })
        summary_df.to_excel(writer, sheet_name='Summary', index=False)

        # Sheet 7: Parameters
        if parameters:
            params_df = pd.DataFrame({
                'Parameter': list(parameters.keys()),
                'Value': [str(v) for v in parameters.values()]
            })
            params_df.to_excel(writer, sheet_name='Parameters', index=False)

    print(f"Results saved to: {output_path}")
    return output_path


def save_rules_text(
    rules: List[AssociationRule],
    output_path: Union[str, Path],
    title: str = "BUNDLE RULES",
    metadata: Dict[str, Any] = None
) -> Path:
    """
    Save rules in human-readable text format.

    Args:
        rules: Association rules
        output_path: Output file path (will add .txt if needed)
        title: Title for the output file header
        metadata: Optional metadata to include in header
    """
    output_path = Path(output_path)
    if output_path.suffix != '.txt':
        output_path = output_path.with_suffix('.txt')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        f.write("=" * 80 + "\n")
        f.write(f"{title}\n")
        f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        if metadata:
            for key, val in metadata.items():
                f.write(f"{key}: {val}\n")
        f.write("=" * 80 + "\n\n")

        if not rules:
            f.write("No rules found.\n")
        for i, rule in enumerate(rules, 1):
            _write_rule(f, rule, i)

        f.write("=" * 80 + "\n")
        f.write(f"Total rules: {len(rules)}\n")
        f.write("=" * 80 + "\n")

    print(f"Rules saved to: {output_path}")
    return output_path


def _write_rule(f, rule: AssociationRule, rule_num: int):
    f.write(f"Rule #{rule_num}:\n")
    f.write(f"  IF {format_items(rule.antecedent)}\n")
    f.write(f"  THEN {format_items(rule.consequent)}\n\n")
    f.write(f"  Metrics:\n")
    f.write(f"    {'Confidence':18s} {rule.confidence:.4f}\n")
    f.write(f"    {'Support':18s} {rule.support:.4f}\n")
    f.write(f"    {'Lift':18s} {rule.lift:.4f}\n")
    if rule.significance is not None:
        f.write(f"    {'Significance':18s} {rule.significance:.4f}\n")
    if rule.confidence_interval is not None:
        lower, upper = rule.confidence_interval
        f.write(f"    {'Confidence CI':18s} [{lower:.4f}, {upper:.4f}]\n")
    f.write("\n")


class ExcelResultSink(ResultSink):
    """Writes each run to <output_dir>/<timestamp>_<name>.xlsx."""

    def __init__(self, output_dir: Union[str, Path], name: str = 'bundle_mining'):
        self.output_dir = Path(output_dir)
        self.name = name
        self.last_path = None

    def write(
        self,
        itemsets: List[Itemset],
        rules: List[AssociationRule],
        cross_validation=None,
        metadata: Dict[str, Any] = None
    ) -> Path:
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        self.last_path = save_mining_results(
            itemsets,
            rules,
            self.output_dir / f"{timestamp}_{self.name}.xlsx",
            cross_validation=cross_validation,
            metadata=metadata
        )
        return self.last_path
