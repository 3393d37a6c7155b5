from pathlib import Path


ROOT = Path(__file__).resolve().parent.parent


def test_project_metadata_does_not_ship_design_notes():
    text = (ROOT / "pyproject.toml").read_text(encoding="utf-8")

    assert "DESIGN.md" not in text
    assert 'asmref = ["resources/*.xml"]' in text


def test_bundled_references_are_present():
    resources = ROOT / "asmref" / "resources"

    assert (resources / "x86reference.xml").is_file()
    assert (resources / "aarch64reference.xml").is_file()
