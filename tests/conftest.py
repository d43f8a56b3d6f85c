"""
Pytest Configuration and Fixtures

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import json
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from docval_kernels.values.canonical import parse_symbol_catalog, SymbolCatalog
from docval_kernels.values.config import ValuesConfig, set_values_config
from docval_kernels.values.models import CanonicalEntry


MONTH_PAGE = """\
#  ``Month``

Month object.

- PossibleValues:
  - January: First
  - February: Second
  - March: Third
  - April: Fourth
"""


@pytest.fixture(autouse=True)
def default_values_config():
    """Every test starts from the default possible-values configuration."""
    set_values_config(None)
    yield
    set_values_config(None)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config() -> ValuesConfig:
    return ValuesConfig()


@pytest.fixture
def month_catalog_data() -> Dict[str, Any]:
    """Catalog of the DictionaryData module: Month declares three values."""
    return {
        "module": "DictionaryData",
        "symbols": [
            {
                "title": "Month",
                "path": "/DictionaryData/Month",
                "possibleValues": ["January", "February", "March"],
            },
            {"title": "Artist", "path": "/DictionaryData/Artist"},
            {"title": "Genre", "allowedValues": [{"value": "Rock"}, {"value": "Jazz"}]},
        ],
        "articles": ["GettingStarted"],
    }


@pytest.fixture
def month_catalog(month_catalog_data) -> SymbolCatalog:
    return parse_symbol_catalog(month_catalog_data)


@pytest.fixture
def month_canonical() -> list:
    return [
        CanonicalEntry("January", 0),
        CanonicalEntry("February", 1),
        CanonicalEntry("March", 2),
    ]


@pytest.fixture
def catalog_file(temp_dir: Path, month_catalog_data) -> Path:
    path = temp_dir / "catalog.json"
    path.write_text(json.dumps(month_catalog_data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def write_page(temp_dir: Path) -> Callable[[str, str], Path]:
    """Write a documentation page into the temp dir and return its path."""
    def _write(text: str, name: str = "Month.md") -> Path:
        path = temp_dir / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def month_page(write_page) -> Path:
    return write_page(MONTH_PAGE)
