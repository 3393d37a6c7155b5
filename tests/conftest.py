from pathlib import Path

import pytest

from asmref.architecture import Architecture
from asmref.parser import AssemblyParser


@pytest.fixture
def x86_parser():
    return AssemblyParser(Architecture.X86_64)


@pytest.fixture
def arm_parser():
    return AssemblyParser(Architecture.ARM_64)


@pytest.fixture
def write_reference(tmp_path: Path):
    def _write(text: str, name: str = "x86reference.xml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
