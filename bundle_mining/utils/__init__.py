from .excel_io import (
    save_mining_results,
    save_rules_text,
    ExcelResultSink
)
from .transactions import (
    load_order_lines,
    build_transactions,
    DataFrameTransactionSource
)
from .log import setup_logging

__all__ = [
    'save_mining_results',
    'save_rules_text',
    'ExcelResultSink',
    'load_order_lines',
    'build_transactions',
    'DataFrameTransactionSource',
    'setup_logging'
]
