from __future__ import annotations

from typing import Dict, List, Optional

from asmref.classifier import OperandClassifier
from asmref.model import Instruction


class LabelTracker:
    """Collects the instructions of one disassembly block by address.

    Instructions are expected in non-decreasing address order; once the
    block is complete ``build_labels`` names every jump target that lands
    inside it.
    """

    def __init__(self) -> None:
        self.instructions: List[Instruction] = []
        self.labels: Dict[int, str] = {}
        self._by_address: Dict[int, Instruction] = {}

    def record_instruction(self, instruction: Instruction) -> None:
        self.instructions.append(instruction)
        self._by_address.setdefault(instruction.address, instruction)

    def instruction_at(self, address: int) -> Optional[Instruction]:
        return self._by_address.get(address)

    def clear(self) -> None:
        self.instructions = []
        self.labels = {}
        self._by_address = {}

    def build_labels(self, classifier: OperandClassifier) -> Dict[int, str]:
        targets = set()
        for instruction in self.instructions:
            for operand in instruction.operands:
                target = jump_target(classifier, instruction, operand)
                if target is not None and target in self._by_address:
                    targets.add(target)
        self.labels = {address: f"L{index:04d}" for index, address in enumerate(sorted(targets))}
        return self.labels

    def label_for(self, address: int) -> Optional[str]:
        return self.labels.get(address)

    def format_operands(self, instruction: Instruction, classifier: OperandClassifier) -> List[str]:
        return format_operands(instruction, self.labels, classifier)


def jump_target(classifier: OperandClassifier, instruction: Instruction, operand: str) -> Optional[int]:
    if not classifier.is_address(instruction.mnemonic, operand):
        return None
    return int(operand, 16)


def format_operands(
    instruction: Instruction,
    labels: Dict[int, str],
    classifier: OperandClassifier,
) -> List[str]:
    formatted = []
    for operand in instruction.operands:
        target = jump_target(classifier, instruction, operand)
        label = labels.get(target) if target is not None else None
        formatted.append(label or operand)
    return formatted
