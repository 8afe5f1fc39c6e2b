"""
Pytest configuration for DOCX Merger
"""

import pytest
import logging
import sys

from .helpers import DocxFactory, content_control, paragraph


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)  # Only show warnings and errors during tests
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))
    root_logger.addHandler(console_handler)

    yield

    root_logger.handlers[:] = saved_handlers
    root_logger.setLevel(saved_level)


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory for test packages."""
    return tmp_path


@pytest.fixture
def docx_factory(temp_dir):
    """Factory writing minimal DOCX packages into the temporary directory."""
    return DocxFactory(temp_dir)


@pytest.fixture
def sample_docx(docx_factory):
    """Single-paragraph DOCX package without footers."""
    return docx_factory.build("sample.docx", [paragraph("Test paragraph")])


@pytest.fixture
def template_docx(docx_factory):
    """DOCX package with tagged content controls."""
    return docx_factory.build(
        "template.docx",
        [
            paragraph("Intro"),
            content_control("ClientName", "Client placeholder", alias="Client"),
            content_control("AssignmentName", "Assignment placeholder"),
            content_control("Untouched", "Keep me"),
            content_control(None, "No tag here"),
            content_control("ClientName", "Second client placeholder"),
        ],
    )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    # Ignore logging errors during tests
    logging.raiseExceptions = False
