"""
Pytest configuration and shared fixtures for merkletree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_trees = importlib.import_module("fixtures.trees")

ItemContent = _trees.ItemContent
make_items = _trees.make_items
make_tree = _trees.make_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def items():
    """Four distinct items: item0..item3."""
    return make_items(4)


@pytest.fixture
def four_tree(items):
    """Tree built from the four items fixture."""
    from merkletree.merkle import MerkleTree
    return MerkleTree.build(items)


@pytest.fixture
def empty_tree():
    """A tree with zero leaves."""
    from merkletree.merkle import MerkleTree
    return MerkleTree()


@pytest.fixture(autouse=True)
def _clear_merkletree_env(monkeypatch):
    """Keep configuration tests independent of the caller's environment."""
    for name in (
        "MERKLETREE_HASH_ALGORITHM",
        "MERKLETREE_APPEND_MODE",
        "MERKLETREE_LOG_LEVEL",
        "MERKLETREE_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
