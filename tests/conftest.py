from pathlib import Path

import pytest

from bagofholding.jobs.create_fixture import build_fixture
from bagofholding.models import failure as failure_module
from bagofholding.models.snapshot import HelvaultSnapshot
from bagofholding.services.helvault_importer import load_helvault


@pytest.fixture(autouse=True)
def clear_finalized_responses():
    """Clear the finalized responses set between tests.

    This prevents test isolation issues where Python reuses memory
    addresses for new objects, causing id() collisions with previously
    finalized responses.
    """
    failure_module._finalized_responses.clear()
    yield
    failure_module._finalized_responses.clear()


@pytest.fixture
def sample_export(tmp_path: Path) -> Path:
    """Sample .helvault export written to a temp file."""
    return build_fixture(tmp_path / "test.helvault")


@pytest.fixture
def sample_snapshot(sample_export: Path) -> HelvaultSnapshot:
    """Sample export, imported."""
    return load_helvault(sample_export)


@pytest.fixture
def sample_decklist() -> str:
    """Decklist touching every card in the sample export."""
    return """// Burn
4 Lightning Bolt
1 Black Lotus
2x Counterspell
# wishlist
1 Sol Ring"""
