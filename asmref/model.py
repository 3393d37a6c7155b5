from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from asmref.architecture import Architecture


@dataclass(frozen=True)
class RawMatch:
    annotation: str
    address: int
    body: str
    comment: str


@dataclass(frozen=True)
class Instruction:
    annotation: str
    address: int
    prefixes: List[str]
    mnemonic: str
    operands: List[str]
    comment: str = ""

    def __str__(self) -> str:
        text = f"{self.annotation}0x{self.address:016x}: "
        if self.prefixes:
            text += " ".join(self.prefixes) + " "
        text += self.mnemonic
        if self.operands:
            text += " " + ",".join(self.operands)
        if self.comment:
            text += " " + self.comment
        return text


@dataclass
class DisassemblyBlock:
    architecture: Architecture
    instructions: List[Instruction] = field(default_factory=list)
    labels: Dict[int, str] = field(default_factory=dict)

    def get_instruction(self, address: int) -> Optional[Instruction]:
        for instruction in self.instructions:
            if instruction.address == address:
                return instruction
        return None

    def get_label(self, address: int) -> Optional[str]:
        return self.labels.get(address)
