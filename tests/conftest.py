"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import os
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import get_settings  # noqa: E402
from src.prioritizer.curriculum_processor import CurriculumProcessor  # noqa: E402
from src.prioritizer.models import CurriculumAnalysis  # noqa: E402
from src.prioritizer.priority_calculator import PriorityCalculator  # noqa: E402
from src.prioritizer.progress_assessor import ProgressAssessor  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep PRIORITIZER_* variables, .env files and the settings cache out of tests."""
    for name in list(os.environ):
        if name.upper().startswith("PRIORITIZER_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def processor():
    """Curriculum processor over the bundled curriculum."""
    return CurriculumProcessor()


@pytest.fixture
def context(processor):
    return processor.context


@pytest.fixture
def assessor(context):
    return ProgressAssessor(context)


@pytest.fixture
def calculator(context, assessor):
    return PriorityCalculator(context, assessor)


@pytest.fixture
def cyclic_analysis():
    """Tables whose prerequisites form cycles, including a self-loop."""
    return CurriculumAnalysis(
        introduction_levels={"x|a": "A1", "x|b": "A1", "x|c": "A2"},
        complexity_scores={"x|a": 1, "x|b": 2, "x|c": 3},
        tense_families={"loop": ("x|a", "x|b", "x|c")},
        prerequisites={
            "x|a": ("x|b",),
            "x|b": ("x|c",),
            "x|c": ("x|a", "x|c"),
        },
    )
