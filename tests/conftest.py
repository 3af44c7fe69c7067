"""
Shared test fixtures

- small basket fixture (X, Y, Z)
- larger seeded basket data for property checks
- analysis configs
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add the project root to sys.path
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bundle_mining.experiments.config import AnalysisConfig  # noqa: E402


@pytest.fixture
def basket_transactions():
    """Five orders over items X, Y, Z"""
    return [
        {"X", "Y", "Z"},
        {"X", "Y"},
        {"X", "Y", "Z"},
        {"X"},
        {"Y", "Z"},
    ]


@pytest.fixture
def basket_config():
    """Fixed thresholds for the basket fixture"""
    return AnalysisConfig(
        min_support=0.2,
        min_confidence=0.3,
        min_lift=1.0,
        min_bundle_size=2,
        min_itemset_support=0.1,
        adaptive_support=False,
        enable_cross_validation=False
    )


@pytest.fixture
def store_transactions():
    """300 seeded orders with two planted bundles on top of random noise"""
    rng = np.random.RandomState(7)
    catalog = [f"SKU-{i:02d}" for i in range(12)]
    transactions = []
    for i in range(300):
        basket = {str(s) for s in rng.choice(catalog, size=rng.randint(1, 4), replace=False)}
        if i % 3 == 0:
            basket.update({"CAM-BODY", "CAM-LENS", "CAM-BAG"})
        elif i % 5 == 0:
            basket.update({"TEA", "MUG"})
        transactions.append(basket)
    return transactions


@pytest.fixture
def store_config():
    return AnalysisConfig(
        min_support=0.05,
        min_confidence=0.3,
        min_lift=1.0,
        min_itemset_support=0.01,
        adaptive_support=True,
        enable_cross_validation=False
    )
