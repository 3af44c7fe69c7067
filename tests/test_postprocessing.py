"""
Post-processing and export tests

- metric, significance and pattern filters
- pair summaries
- DataFrame conversion
- Excel and text export
"""

import pandas as pd
import pytest

from bundle_mining.experiments.base import validate_statistically
from bundle_mining.postprocessing.rule import (
    filter_rules, filter_significant_rules, filter_rules_by_pattern, filter_itemsets,
    cooccurrence_pairs, rules_to_frame, itemsets_to_frame
)
from bundle_mining.utils.excel_io import save_mining_results, save_rules_text, ExcelResultSink


@pytest.fixture
def basket_results(basket_transactions, basket_config):
    config = basket_config.with_overrides(enable_cross_validation=True)
    return validate_statistically(basket_transactions * 2, config)


class TestFilters:
    def test_filter_rules(self, basket_results):
        rules = filter_rules(basket_results['rules'], criterion='confidence', threshold=0.9)
        assert [(r.antecedent, r.consequent) for r in rules] == [
            (("Z",), ("Y",)), (("X", "Z"), ("Y",))
        ]

    def test_filter_unknown_metric(self, basket_results):
        assert filter_rules(basket_results['rules'], criterion='conviction', threshold=0) == []

    def test_filter_significant_rules(self, basket_results):
        rules = basket_results['rules']
        assert filter_significant_rules(rules, max_p_value=1.0) == rules
        assert all(r.significance <= 0.5 for r in filter_significant_rules(rules, 0.5))

    def test_pattern_contains(self, basket_results):
        rules = filter_rules_by_pattern(basket_results['rules'], consequent_contains=['y'])
        assert rules
        assert all('Y' in r.consequent for r in rules)

    def test_pattern_excludes(self, basket_results):
        rules = filter_rules_by_pattern(basket_results['rules'], antecedent_excludes=['X'])
        assert all('X' not in r.antecedent for r in rules)

    def test_pattern_match_any(self, basket_results):
        all_rules = basket_results['rules']
        every = filter_rules_by_pattern(all_rules, antecedent_contains=['X', 'Z'])
        either = filter_rules_by_pattern(all_rules, antecedent_contains=['X', 'Z'], match_any=True)
        assert [(r.antecedent, r.consequent) for r in every] == [(("X", "Z"), ("Y",))]
        assert len(either) > len(every)

    def test_filter_itemsets(self, basket_results):
        itemsets, stats = filter_itemsets(basket_results['itemsets'], threshold=0.5)
        assert [i.items for i in itemsets] == [("X", "Y"), ("Y", "Z")]
        assert stats == {'num_itemsets': 2, 'average_support': 0.6}

    def test_filter_itemsets_none_left(self, basket_results):
        itemsets, stats = filter_itemsets(basket_results['itemsets'], threshold=0.9)
        assert itemsets == []
        assert stats['num_itemsets'] == 0


class TestPairs:
    def test_best_direction_kept(self, basket_results):
        pairs = cooccurrence_pairs(basket_results['rules'])
        assert len(pairs) == 1
        pair = pairs[0]
        assert (pair['item_a'], pair['item_b']) == ('Y', 'Z')
        assert (pair['antecedent'], pair['consequent']) == ('Z', 'Y')
        assert pair['confidence'] == pytest.approx(1.0)

    def test_no_rules(self):
        assert cooccurrence_pairs([]) == []


class TestFrames:
    def test_rules_to_frame(self, basket_results):
        df = rules_to_frame(basket_results['rules'])
        assert len(df) == 6
        assert df.loc[1, 'antecedent'] == 'X + Z'
        assert (df['ci_lower'] <= df['confidence']).all()

    def test_empty_frames_keep_columns(self):
        assert list(rules_to_frame([]).columns)[:2] == ['antecedent', 'consequent']
        assert list(itemsets_to_frame([]).columns) == ['items', 'size', 'support', 'support_count']


class TestExport:
    def test_save_mining_results(self, tmp_path, basket_results):
        path = save_mining_results(
            basket_results['itemsets'],
            basket_results['rules'],
            tmp_path / "results",
            cross_validation=basket_results['cross_validation'],
            metadata=basket_results['metadata']
        )

        assert path.suffix == '.xlsx'
        sheets = pd.read_excel(path, sheet_name=None)
        assert {'Itemsets', 'Rules', 'Pairs', 'Levels', 'Cross Validation', 'Summary', 'Parameters'} <= set(sheets)
        assert len(sheets['Rules']) == 6
        assert len(sheets['Itemsets']) == 4
        assert len(sheets['Cross Validation']) == 5
        assert 'cv_stability_score' in set(sheets['Summary']['Metric'])

    def test_empty_results(self, tmp_path):
        path = save_mining_results([], [], tmp_path / "empty.xlsx")
        sheets = pd.read_excel(path, sheet_name=None)
        assert 'Pairs' not in sheets
        assert sheets['Rules'].empty

    def test_sink(self, tmp_path, basket_results):
        sink = ExcelResultSink(tmp_path / "out", name="shop")
        path = sink.write(
            basket_results['itemsets'],
            basket_results['rules'],
            cross_validation=basket_results['cross_validation'],
            metadata=basket_results['metadata']
        )
        assert path.exists()
        assert path.name.endswith("_shop.xlsx")
        assert sink.last_path == path

    def test_save_rules_text(self, tmp_path, basket_results):
        path = save_rules_text(basket_results['rules'], tmp_path / "rules")
        text = path.read_text()
        assert path.suffix == '.txt'
        assert "IF X + Z" in text
        assert "Total rules: 6" in text
        assert "Confidence CI" in text
