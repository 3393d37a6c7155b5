import pytest

from asmref.architecture import Architecture


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("x86_64", Architecture.X86_64),
        ("AMD64", Architecture.X86_64),
        ("x86-64", Architecture.X86_64),
        ("arm", Architecture.ARM_32),
        ("aarch32", Architecture.ARM_32),
        ("arm64", Architecture.ARM_64),
        (" AArch64 ", Architecture.ARM_64),
    ],
)
def test_from_name_accepts_aliases(name, expected):
    assert Architecture.from_name(name) is expected


def test_from_name_rejects_unknown():
    with pytest.raises(ValueError) as exc:
        Architecture.from_name("mips")
    assert "mips" in str(exc.value)


def test_reference_family():
    assert Architecture.X86_64.reference_family == "x86"
    assert Architecture.ARM_32.reference_family == "aarch64"
    assert Architecture.ARM_64.reference_family == "aarch64"
    assert Architecture.ARM_32.is_arm
    assert not Architecture.X86_64.is_arm
