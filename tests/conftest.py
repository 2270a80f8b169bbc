"""Shared pytest fixtures for the plot validation test suite."""

from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"
EDGE_CASES_DIR = DATA_DIR / "edge_cases"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


@pytest.fixture()
def edge_cases_dir() -> Path:
    """Return the path to the edge-cases test data directory."""
    return EDGE_CASES_DIR


# ---------------------------------------------------------------------------
# Sample GeoJSON file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def valid_plots_geojson(data_dir: Path) -> Path:
    """Two ~1.23 ha Brazilian polygons and one point, all valid."""
    return data_dir / "01_valid_plots.geojson"


@pytest.fixture()
def mixed_plots_geojson(data_dir: Path) -> Path:
    """Ghana plots: one valid, one missing ProducerCountry, one bowtie."""
    return data_dir / "02_mixed_plots.geojson"


@pytest.fixture()
def not_a_collection_geojson(edge_cases_dir: Path) -> Path:
    """Path to ``{"type": "NotAFeatureCollection"}``."""
    return edge_cases_dir / "03_not_a_feature_collection.geojson"
