"""
Candidate generation tests

- k=2: unconditional pairwise join
- k>2: (k-2)-prefix join
- dedupe and size checks
"""

from bundle_mining.rule_mining.base import Itemset
from bundle_mining.rule_mining.candidates import generate_candidates, can_join


class TestCanJoin:
    def test_shared_prefix(self):
        assert can_join(("A", "B"), ("A", "C"), 3)

    def test_different_prefix(self):
        assert not can_join(("A", "B"), ("B", "C"), 3)

    def test_longer_prefix(self):
        assert can_join(("A", "B", "C"), ("A", "B", "D"), 4)
        assert not can_join(("A", "B", "C"), ("A", "C", "D"), 4)


class TestGenerateCandidates:
    def test_pairs_from_single_items(self):
        """k=2 joins every pair of single items"""
        candidates = generate_candidates([("A",), ("B",), ("C",)], 2)
        assert candidates == [("A", "B"), ("A", "C"), ("B", "C")]

    def test_triples_need_common_prefix(self):
        """(B, C) shares no prefix with (A, B), so only one triple is produced"""
        candidates = generate_candidates([("A", "B"), ("A", "C"), ("B", "C")], 3)
        assert candidates == [("A", "B", "C")]

    def test_unsorted_input_is_canonicalized(self):
        candidates = generate_candidates([("B", "A"), ("C", "A")], 3)
        assert candidates == [("A", "B", "C")]

    def test_duplicates_removed(self):
        candidates = generate_candidates([("A",), ("B",), ("A",)], 2)
        assert candidates == [("A", "B")]

    def test_no_join_without_prefix(self):
        assert generate_candidates([("A", "B"), ("C", "D")], 3) == []

    def test_accepts_itemsets(self):
        prev = [Itemset(("A", "B"), 0.5, 5), Itemset(("A", "C"), 0.4, 4)]
        assert generate_candidates(prev, 3) == [("A", "B", "C")]

    def test_empty_and_single_input(self):
        assert generate_candidates([], 2) == []
        assert generate_candidates([("A",)], 2) == []

    def test_all_candidates_have_size_k(self):
        prev = [("A", "B", "C"), ("A", "B", "D"), ("A", "B", "E"), ("A", "C", "D")]
        candidates = generate_candidates(prev, 4)
        assert candidates == [("A", "B", "C", "D"), ("A", "B", "C", "E"), ("A", "B", "D", "E")]
        assert all(len(c) == 4 for c in candidates)
