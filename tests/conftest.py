"""
Pytest configuration and fixtures
"""
import sys
import zipfile
from pathlib import Path

import pytest


# Add the project root to sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


PICOARGS_TEXT = "// tiny command line argument parser\n"
PROGRAM_TEXT = "// entry point\n"


class CollectingOutput:
    """Output sink that records lines instead of printing them"""

    def __init__(self, raw=False):
        self.raw = raw
        self.lines = []
        self.messages = []
        self.errors = []

    def write_line(self, line):
        self.lines.append(line)

    def message(self, text, blank_line=False):
        if not self.raw:
            self.messages.append(text)

    def error(self, text):
        self.errors.append(text)


class FailingOutput(CollectingOutput):
    """Output sink whose file lines fail the way a closed pipe does"""

    def write_line(self, line):
        raise BrokenPipeError(32, "Broken pipe")


def make_zip(path, entries):
    """
    Write a zip file with the given entries, in order.

    entries: list of (name, bytes or str) tuples
    """
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries:
            zf.writestr(name, data)
    return path


def zip_bytes(entries):
    """Build a zip archive in memory and return its bytes"""
    import io
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries:
            zf.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def output():
    return CollectingOutput()


@pytest.fixture
def sample_folder(tmp_path):
    """
    Folder with the two fixture archives:
      Archive1.zip: PicoArgs.cs, Program.cs
      Archive2.zip: PicoArgs.cs, Program.cs, Archive1.zip (nested)
    """
    folder = tmp_path / "samples"
    folder.mkdir()
    inner = [("PicoArgs.cs", PICOARGS_TEXT), ("Program.cs", PROGRAM_TEXT)]
    make_zip(folder / "Archive1.zip", inner)
    make_zip(folder / "Archive2.zip", inner + [("Archive1.zip", zip_bytes(inner))])
    return folder
