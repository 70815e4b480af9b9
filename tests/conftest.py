"""Shared fixtures for transeg tests."""

from pathlib import Path

import pytest

SAMPLE_TEXT = (
    "The first paragraph is short.\n\n"
    "The second paragraph is much longer. It has several sentences. "
    "Each one adds a few words. The segmenter must cut it at a sentence boundary.\n\n"
    "Ünïcödé text also appears here, with multi-byte characters like 日本語.\n"
    "It spans two lines.\n\n\n"
    "The last paragraph ends the file."
)


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def sample_file(tmp_path) -> Path:
    path = tmp_path / "book.txt"
    path.write_bytes(SAMPLE_TEXT.encode("utf-8"))
    return path
