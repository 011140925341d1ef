"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides fixtures shared by the extraction tests.
"""

import logging
import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local whatsupdoc package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of whatsupdoc modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("whatsupdoc"):
        del sys.modules[module_name]

from whatsupdoc.extraction.document import Document  # noqa: E402
from whatsupdoc.ops import parse_module  # noqa: E402
from whatsupdoc.parsing.treesitter import JavaScriptParser  # noqa: E402


@pytest.fixture
def js_parser() -> JavaScriptParser:
    return JavaScriptParser()


@pytest.fixture
def parse_js() -> Callable[[str], Document]:
    """Run the full pipeline on a source string (module id ``test``)."""

    def _parse(source: str, **kwargs: object) -> Document:
        return parse_module(source, "test", **kwargs)  # type: ignore[arg-type]

    return _parse


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Leave no handlers behind for the next test."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
