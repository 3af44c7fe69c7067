"""
Build transactions from order line items.

Input is a long-format table with one row per line item. The item id of a
line is the first non-empty value among item_cols (by default the SKU,
falling back to the variant id).
"""
from pathlib import Path
from typing import List, FrozenSet, Iterable, Sequence, Union

import pandas as pd

from bundle_mining.rule_mining.base import TransactionSource


def load_order_lines(path: Union[str, Path], sep: str = ',') -> pd.DataFrame:
    path = Path(path)
    if path.suffix == '.csv':
        return pd.read_csv(path, sep=sep, dtype=str)
    elif path.suffix in ['.xlsx', '.xls']:
        return pd.read_excel(path, dtype=str)
    elif path.suffix == '.parquet':
        return pd.read_parquet(path)
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")


def _clean_ids(series: pd.Series) -> pd.Series:
    return series.map(lambda v: str(v).strip() if pd.notna(v) else '')


def build_transactions(
    df: pd.DataFrame,
    order_col: str = 'order_id',
    item_cols: Sequence[str] = ('sku', 'variant_id'),
    excluded_items: Iterable[str] = None
) -> List[FrozenSet[str]]:
    """
    Group order lines into transactions.

    Empty item ids are dropped, repeated lines collapse, excluded items
    (e.g. SKUs that already are bundles) are removed and orders left
    without items are skipped. Orders keep their first-appearance order.

    Args:
        df: Order lines
        order_col: Column identifying the order
        item_cols: Item id columns in order of preference
        excluded_items: Item ids to leave out

    Returns:
        List of transactions (frozensets of item ids)
    """
    if order_col not in df.columns:
        raise ValueError(f"Order column '{order_col}' not found in data")

    present = [c for c in item_cols if c in df.columns]
    if not present:
        raise ValueError(f"None of the item columns {list(item_cols)} found in data")

    item_ids = _clean_ids(df[present[0]])
    for col in present[1:]:
        item_ids = item_ids.where(item_ids != '', _clean_ids(df[col]))

    lines = pd.DataFrame({'order': df[order_col], 'item': item_ids})
    lines = lines[lines['item'] != '']
    if excluded_items:
        lines = lines[~lines['item'].isin(set(excluded_items))]
    lines = lines.drop_duplicates()

    return [
        frozenset(items)
        for _, items in lines.groupby('order', sort=False)['item']
    ]


class DataFrameTransactionSource(TransactionSource):
    def __init__(
        self,
        df: pd.DataFrame,
        order_col: str = 'order_id',
        item_cols: Sequence[str] = ('sku', 'variant_id'),
        excluded_items: Iterable[str] = None,
        name: str = None
    ):
        self.df = df
        self.order_col = order_col
        self.item_cols = list(item_cols)
        self.excluded_items = list(excluded_items or [])
        self.name = name or 'dataframe'

    @classmethod
    def from_config(cls, config) -> 'DataFrameTransactionSource':
        return cls(
            load_order_lines(config.path, sep=config.sep),
            order_col=config.order_col,
            item_cols=config.item_cols,
            excluded_items=config.excluded_items,
            name=config.name
        )

    def load_transactions(self) -> List[FrozenSet[str]]:
        return build_transactions(
            self.df,
            order_col=self.order_col,
            item_cols=self.item_cols,
            excluded_items=self.excluded_items
        )

    def __repr__(self):
        return f"DataFrameTransactionSource(name='{self.name}', rows={len(self.df)})"
