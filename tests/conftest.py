"""
Pytest configuration and shared fixtures for the test suite.
Provides injectable fakes so that no test touches the network.
"""
import sys
from pathlib import Path

import pytest

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from mindradix.core.config import Settings  # noqa: E402
from mindradix.tools.readers import ExtractorCapabilities, TextExtractor  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's .env file."""
    return Settings(_env_file=None, serpapi_api_key=None, web_pass_timeout=5.0)


@pytest.fixture
def fake_pdf_extractor() -> TextExtractor:
    """Extractor whose PDF capability just decodes the bytes."""
    return TextExtractor(ExtractorCapabilities(parse_pdf=lambda data: data.decode("utf-8")))


@pytest.fixture
def no_pdf_extractor() -> TextExtractor:
    """Extractor with no PDF backend available."""
    return TextExtractor(ExtractorCapabilities(parse_pdf=None))
