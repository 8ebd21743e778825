"""Pytest configuration and fixtures: small corpora written to temporary files."""

from pathlib import Path

import pytest

from food_terms.config import settings

# ============================================================================
# Corpus Sources
# ============================================================================

ABBREVIATIONS_CSV = """\
# Test abbreviations
abbr,full
GLV,Green Leafy Vegetables
D.R.I.,Dietary reference intake
AAS,Atomic Absorption Spectroscopy
GRAS,Generally Recognized As Safe
n-3,Omega-3 fatty acids
K,Kelvin
"""

TAGNAMES_CSV = """\
# Test tagnames
code,name,synonyms,unit,tables,comments,examples
VITC,vitamin C,"L-ascorbic acid plus L-dehydroascorbic acid",mg,"USDA 523, EA, SWD","Reduced and\\noxidized forms.",oranges
VITA,vitamin A,retinol equivalents,µg,,,
F4D0,fatty acid 4:0,C4:0,g,,,
F4D0F,"fatty acid 4:0; expressed per quantity of total fatty acids",butyric acid,g,,,
CA,calcium,,mg,,,
"""


@pytest.fixture
def abbreviations_csv(tmp_path: Path) -> Path:
    """Abbreviation corpus file."""
    path = tmp_path / "abbreviations.csv"
    path.write_text(ABBREVIATIONS_CSV, encoding="utf-8")
    return path


@pytest.fixture
def tagnames_csv(tmp_path: Path) -> Path:
    """Tagname corpus file."""
    path = tmp_path / "tagnames.csv"
    path.write_text(TAGNAMES_CSV, encoding="utf-8")
    return path


@pytest.fixture
def write_csv(tmp_path: Path):
    """Factory writing arbitrary CSV text to a temporary file."""

    def _write(text: str, name: str = "corpus.csv") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def bundled_sources(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ignore FOOD_TERMS_* source overrides from the environment."""
    monkeypatch.setattr(settings, "abbreviations_source", None)
    monkeypatch.setattr(settings, "tagnames_source", None)
