import pytest
from click.testing import CliRunner

from html_formatter.config import FormatterConfig
from html_formatter.patterns import PatternLibrary, build_pattern_library


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def library() -> PatternLibrary:
    """Pattern library built from the default configuration."""
    return build_pattern_library(FormatterConfig())
