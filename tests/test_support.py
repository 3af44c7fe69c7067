"""
Support threshold tests

- fixed threshold without adaptation
- 1.5x growth per item, 5-transaction floor
- thresholds never shrink with bundle size
"""

import pytest

from bundle_mining.experiments.config import AnalysisConfig
from bundle_mining.rule_mining.support import SupportCalculator, adaptive_min_support


class TestAdaptiveMinSupport:
    def test_not_adaptive_returns_min_support(self):
        for k in range(2, 8):
            assert adaptive_min_support(k, 1000, 0.02, 0.001, adaptive=False) == 0.02

    def test_growth_per_level(self):
        assert adaptive_min_support(2, 1000, 0.02, 0.001) == pytest.approx(0.02)
        assert adaptive_min_support(3, 1000, 0.02, 0.001) == pytest.approx(0.03)
        assert adaptive_min_support(4, 1000, 0.02, 0.001) == pytest.approx(0.045)

    def test_five_transaction_floor(self):
        """With 100 transactions, at least 5% (5 orders) is required"""
        assert adaptive_min_support(2, 100, 0.02, 0.001) == pytest.approx(0.05)
        assert adaptive_min_support(3, 100, 0.02, 0.001) == pytest.approx(0.05)

    def test_min_itemset_support_floor(self):
        assert adaptive_min_support(2, 10000, 0.01, 0.2) == pytest.approx(0.2)

    def test_zero_transactions_no_division(self):
        assert adaptive_min_support(2, 0, 0.02, 0.001) == pytest.approx(0.02)


class TestSupportCalculator:
    def test_uses_config(self):
        config = AnalysisConfig(min_support=0.02, min_itemset_support=0.001, adaptive_support=True)
        calculator = SupportCalculator(config, 1000)
        assert calculator.threshold(3) == pytest.approx(0.03)

    def test_non_adaptive_config(self):
        config = AnalysisConfig(min_support=0.04, adaptive_support=False)
        calculator = SupportCalculator(config, 10)
        assert set(calculator.thresholds(6).values()) == {0.04}

    @pytest.mark.parametrize("total", [10, 100, 1000, 100000])
    def test_thresholds_non_decreasing(self, total):
        config = AnalysisConfig(min_support=0.01, min_itemset_support=0.001, adaptive_support=True)
        schedule = SupportCalculator(config, total).thresholds(10)
        values = [schedule[k] for k in sorted(schedule)]
        assert all(b >= a for a, b in zip(values, values[1:]))
