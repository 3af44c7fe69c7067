from typing import Dict, List, Tuple, Any, Iterable

import pandas as pd

from bundle_mining.rule_mining.base import Itemset, AssociationRule


def filter_rules(rules: List[AssociationRule], criterion: str, threshold: float) -> List[AssociationRule]:
    """
    Filters rules based on a criterion >= threshold.

    Args:
        rules: List of AssociationRule
        criterion: The rule metric to filter on (e.g., 'support', 'confidence', 'lift')
        threshold: Minimum value for the criterion (inclusive)

    Returns:
        List of rules meeting the criterion; rules without the metric
        (e.g. unannotated significance) are dropped
    """
    filtered = []
    for rule in rules:
        value = getattr(rule, criterion, None)
        if value is not None and value >= threshold:
            filtered.append(rule)
    return filtered


def filter_significant_rules(rules: List[AssociationRule], max_p_value: float = 0.05) -> List[AssociationRule]:
    """Keep annotated rules whose significance is at most max_p_value."""
    return [r for r in rules if r.significance is not None and r.significance <= max_p_value]


def filter_rules_by_pattern(
    rules: List[AssociationRule],
    antecedent_contains: list = None,
    consequent_contains: list = None,
    antecedent_excludes: list = None,
    consequent_excludes: list = None,
    match_any: bool = False
) -> List[AssociationRule]:
    """
    Filter rules by the item ids on either side.

    Matching is case-insensitive and by substring, so a SKU prefix
    matches every variant under it.

    Args:
        rules: List of AssociationRule
        antecedent_contains: Patterns that must appear in the antecedent
        consequent_contains: Patterns that must appear in the consequent
        antecedent_excludes: Patterns that must NOT appear in the antecedent
        consequent_excludes: Patterns that must NOT appear in the consequent
        match_any: If True, match if ANY pattern matches. If False, ALL must match.

    Returns:
        List of filtered rules
    """
    def matches(items, pattern):
        pattern = pattern.lower()
        return any(pattern in item.lower() for item in items)

    def contains_patterns(items, patterns):
        if not patterns:
            return True
        if match_any:
            return any(matches(items, p) for p in patterns)
        return all(matches(items, p) for p in patterns)

    def excludes_patterns(items, patterns):
        if not patterns:
            return True
        return not any(matches(items, p) for p in patterns)

    return [
        rule for rule in rules
        if contains_patterns(rule.antecedent, antecedent_contains)
        and contains_patterns(rule.consequent, consequent_contains)
        and excludes_patterns(rule.antecedent, antecedent_excludes)
        and excludes_patterns(rule.consequent, consequent_excludes)
    ]


def filter_itemsets(
    itemsets: List[Itemset],
    criterion: str = 'support',
    threshold: float = 0.0
) -> Tuple[List[Itemset], Dict[str, Any]]:
    """
    Filters frequent itemsets based on a criterion >= threshold.

    Returns:
        Tuple of (filtered_itemsets, stats)
    """
    filtered = [i for i in itemsets if getattr(i, criterion, float("-inf")) >= threshold]

    count = len(filtered)
    if count == 0:
        return filtered, {"num_itemsets": 0, "average_support": 0.0}

    avg_support = sum(i.support for i in filtered) / count
    return filtered, {
        "num_itemsets": count,
        "average_support": round(avg_support, 3),
    }


def cooccurrence_pairs(rules: List[AssociationRule]) -> List[Dict[str, Any]]:
    """
    Collapse single-item rules into unordered item pairs.

    For each pair the rule with the highest confidence is kept (either
    direction). Pairs come out in order of first appearance.
    """
    pairs = {}
    for rule in rules:
        if len(rule.antecedent) != 1 or len(rule.consequent) != 1:
            continue
        key = tuple(sorted(rule.antecedent + rule.consequent))
        existing = pairs.get(key)
        if existing is None or rule.confidence > existing.confidence:
            pairs[key] = rule

    return [
        {
            'item_a': key[0],
            'item_b': key[1],
            'antecedent': rule.antecedent[0],
            'consequent': rule.consequent[0],
            'support': rule.support,
            'confidence': rule.confidence,
            'lift': rule.lift
        }
        for key, rule in pairs.items()
    ]


def format_items(items: Iterable[str]) -> str:
    return ' + '.join(items)


def rules_to_frame(rules: List[AssociationRule]) -> pd.DataFrame:
    columns = ['antecedent', 'consequent', 'support', 'confidence', 'lift',
               'significance', 'ci_lower', 'ci_upper']
    rows = []
    for rule in rules:
        lower, upper = rule.confidence_interval or (None, None)
        rows.append({
            'antecedent': format_items(rule.antecedent),
            'consequent': format_items(rule.consequent),
            'support': rule.support,
            'confidence': rule.confidence,
            'lift': rule.lift,
            'significance': rule.significance,
            'ci_lower': lower,
            'ci_upper': upper
        })
    return pd.DataFrame(rows, columns=columns)


def itemsets_to_frame(itemsets: List[Itemset]) -> pd.DataFrame:
    return pd.DataFrame(
        [{
            'items': format_items(i.items),
            'size': i.size,
            'support': i.support,
            'support_count': i.support_count
        } for i in itemsets],
        columns=['items', 'size', 'support', 'support_count']
    )
