#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from hsize.l10n import clear_renderer_cache
from hsize.units import CustomUnitTable


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def storage_units() -> CustomUnitTable:
    """Four binary tiers: chunk, block, sector, region."""
    return CustomUnitTable(1024, [
        ("ch", "chunk", "chunks"),
        ("bl", "block", "blocks"),
        ("sc", "sector", "sectors"),
        ("rg", "region", "regions"),
    ])


@pytest.fixture
def decimal_units() -> CustomUnitTable:
    """Three decimal tiers given as config mappings."""
    return CustomUnitTable.from_config({
        "base": 1000,
        "units": [
            {"symbol": "u", "name": "unit"},
            {"symbol": "ku", "name": "kilounit"},
            {"symbol": "Mu", "name": "megaunit", "nameP": "megaunits"},
        ],
    })


@pytest.fixture(autouse=True)
def fresh_renderers():
    """Keep locale renderers from leaking between tests."""
    clear_renderer_cache()
    yield
    clear_renderer_cache()
