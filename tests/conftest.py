"""
conftest.py
-----------
Shared pytest fixtures for Oneiro tests.

Provides fixtures for:
- Temporary directories
- Sample journal notes (basic, structured, nested, malformed)
- Frequently used options and entries
"""
import pytest
from pathlib import Path
from datetime import date
from tempfile import TemporaryDirectory

from oneiro.pipeline.options import ParseOptions


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ----- Sample Note Content Fixtures -----

@pytest.fixture
def basic_note():
    """Single dream with inline metrics."""
    return "[!dream] My Dream\nI flew over water.\nClarity: 4, Vividness: 3"


@pytest.fixture
def structured_note():
    """Dream with heading, date, metrics section and property lines."""
    return """[!dream]
# The Lighthouse
Date: 2024-03-12

I walked up a spiral staircase that never ended.
At the top there was a door made of water.

Metrics:
Clarity: 4
Vividness: 5
Lucidity: 1

mood:: uneasy
"""


@pytest.fixture
def three_dreams_note():
    """Three dreams, the middle one with an unbalanced code fence."""
    return """[!dream] First Dream
2024-01-01
I was in a train station.
Clarity: 3

[!dream] Broken Dream
```python
def never_closed(:
    {[(
Clarity: ???

[!dream] Third Dream
January 3rd, 2024
A quiet forest at night.
Vividness: 4
"""


@pytest.fixture
def nested_note():
    """Journal callout quoting a dream callout."""
    return """> [!journal] Tuesday
> Long day at work.
> > [!dream] Underwater city
> > 2024-02-20
> > I could breathe under the sea.
> > Clarity: 5
"""


@pytest.fixture
def fixed_date():
    """Fallback date used to make date fallbacks deterministic."""
    return date(2024, 6, 1)


@pytest.fixture
def default_options():
    """Default parse options with a source path set."""
    return ParseOptions(source_path="journal/2024-01.md")
