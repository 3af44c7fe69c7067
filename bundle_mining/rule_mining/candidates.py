"""Apriori candidate generation: join frequent (k-1)-itemsets into k-itemsets."""
from typing import List, Sequence, Tuple, Union

from bundle_mining.rule_mining.base import Itemset


def _sorted_items(itemset: Union[Itemset, Sequence[str]]) -> Tuple[str, ...]:
    items = itemset.items if isinstance(itemset, Itemset) else itemset
    return tuple(sorted(items))


def can_join(itemset1: Sequence[str], itemset2: Sequence[str], k: int) -> bool:
    """True if the first k-2 sorted items of both itemsets are identical."""
    return tuple(itemset1[:k - 2]) == tuple(itemset2[:k - 2])


def generate_candidates(
    prev_itemsets: Sequence[Union[Itemset, Sequence[str]]],
    k: int
) -> List[Tuple[str, ...]]:
    """
    Generate candidate k-itemsets from frequent (k-1)-itemsets.

    Every unordered pair is considered. For k == 2 pairs are joined
    unconditionally, for k > 2 only when they share their (k-2)-prefix.
    The sorted union is kept if it has exactly k items and was not produced
    before; candidates are returned in the order they were first produced.

    Args:
        prev_itemsets: Itemsets (or plain item sequences) of size k-1
        k: Size of the candidates to produce

    Returns:
        List of sorted item tuples
    """
    sorted_prev = [_sorted_items(itemset) for itemset in prev_itemsets]

    candidates = []
    seen = set()
    for i in range(len(sorted_prev)):
        for j in range(i + 1, len(sorted_prev)):
            itemset1, itemset2 = sorted_prev[i], sorted_prev[j]

            if k > 2 and not can_join(itemset1, itemset2, k):
                continue

            candidate = tuple(sorted(set(itemset1) | set(itemset2)))
            if len(candidate) == k and candidate not in seen:
                seen.add(candidate)
                candidates.append(candidate)

    return candidates
