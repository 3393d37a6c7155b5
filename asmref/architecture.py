from __future__ import annotations

from enum import Enum


class Architecture(Enum):
    X86_64 = "x86_64"
    ARM_32 = "arm_32"
    ARM_64 = "arm_64"

    @property
    def is_arm(self) -> bool:
        return self in (Architecture.ARM_32, Architecture.ARM_64)

    @property
    def reference_family(self) -> str:
        # ARM_32 shares the AArch64 reference data
        return "aarch64" if self.is_arm else "x86"

    @classmethod
    def from_name(cls, name: str) -> Architecture:
        key = name.strip().lower().replace("-", "_")
        arch = ARCHITECTURE_ALIASES.get(key)
        if arch is None:
            accepted = ", ".join(sorted(ARCHITECTURE_ALIASES))
            raise ValueError(f"Unsupported architecture: {name} (expected one of: {accepted})")
        return arch


ARCHITECTURE_ALIASES = {
    "x86_64": Architecture.X86_64,
    "amd64": Architecture.X86_64,
    "x64": Architecture.X86_64,
    "x86": Architecture.X86_64,
    "arm": Architecture.ARM_32,
    "arm32": Architecture.ARM_32,
    "arm_32": Architecture.ARM_32,
    "aarch32": Architecture.ARM_32,
    "arm64": Architecture.ARM_64,
    "arm_64": Architecture.ARM_64,
    "aarch64": Architecture.ARM_64,
}
