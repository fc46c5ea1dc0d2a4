from pathlib import Path

import pytest

from data_extractor import SoupScope

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def catalog_path():
    """Provide the catalog fixture path."""
    return FIXTURES_DIR / "catalog.html"


@pytest.fixture
def catalog_html(catalog_path):
    """Provide the catalog fixture HTML."""
    return catalog_path.read_text(encoding="utf-8")


@pytest.fixture
def catalog(catalog_html):
    """Provide a document scope for the catalog fixture."""
    return SoupScope.from_html(catalog_html)
