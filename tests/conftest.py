# Shared pytest fixtures
from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable, Sequence
from decimal import Decimal
from pathlib import Path

import pytest

from bvt_data.logging import init as logging_init
from bvt_data.models import Column, TabularDataset, ValueType

SAMPLE_COLUMNS = [
    Column("id", ValueType.INT32),
    Column("mytext", ValueType.TEXT),
    Column("myinteger", ValueType.INT32),
    Column("mydouble", ValueType.FLOAT64),
    Column("mydecimal", ValueType.DECIMAL),
    Column("computed", ValueType.DECIMAL, computed=True),
]


def add_data_row(
    table: TabularDataset, text: str, integer_val: int, double_val: float, decimal_val: Decimal
) -> None:
    """Append a sample row; id is sequential from 0 and computed = mydouble * mydecimal."""
    table.add_row(
        {
            "id": len(table),
            "mytext": text,
            "myinteger": integer_val,
            "mydouble": double_val,
            "mydecimal": decimal_val,
            "computed": Decimal(repr(double_val)) * decimal_val,
        }
    )


@pytest.fixture()
def add_row() -> Callable[..., None]:
    return add_data_row


@pytest.fixture()
def make_table() -> Callable[..., TabularDataset]:
    def _make(name: str, key_columns: Sequence[str] = ("id",)) -> TabularDataset:
        return TabularDataset(name, SAMPLE_COLUMNS, key_columns)
    return _make


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("BVT_COMPARE_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """verbose: true
show_progress: false
diff_log_directory: ./logs
key_columns:
  Customers: [id]
  Orders: [order_id, line_no]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "compare.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def clean_logging():
    logging_init.reset_logging()
    yield
    logging_init.reset_logging()
    app_logger = logging.getLogger(logging_init.APP_LOGGER_NAME)
    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)
