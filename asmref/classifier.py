from __future__ import annotations

import re
from typing import Dict, Optional, Union

from asmref.architecture import Architecture


HEX_PREFIX = "0x"
HEX_POSTFIX = "h"

BRACKET_PAIRS = (("(", ")"), ("[", "]"))


def _strip_pair(text: str, open_char: str, close_char: str) -> str:
    start = text.find(open_char)
    end = text.find(close_char)
    if start != -1 and end != -1:
        return text[start + 1 : end]
    return text


def _leading_alnum(text: str) -> str:
    for index, ch in enumerate(text):
        if not ch.isalnum():
            return text[:index]
    return text


class X86Classifier:
    """AT&T and Intel flavoured x86 operands as printed by HotSpot/objdump."""

    register_sigil = "%"
    indirection = "*"

    CONSTANT_RE = re.compile(r"^\$?(0x)?[a-f0-9]+h?$")
    ADDRESS_RE = re.compile(r"^(0x)?[a-f0-9]+$")

    def is_jump(self, mnemonic: Optional[str]) -> bool:
        if mnemonic is None:
            return False
        lowered = mnemonic.lower()
        return lowered.startswith("j") or lowered.startswith("call")

    def is_constant(self, mnemonic: Optional[str], operand: str) -> bool:
        return bool(self.CONSTANT_RE.match(operand)) and not self.is_jump(mnemonic)

    def is_address(self, mnemonic: Optional[str], operand: str) -> bool:
        return self.is_jump(mnemonic) and bool(self.ADDRESS_RE.match(operand))

    def is_register(self, mnemonic: Optional[str], operand: str) -> bool:
        if operand.startswith(self.register_sigil) or "(%" in operand or "[" in operand:
            return True
        return not self.is_constant(mnemonic, operand) and not self.is_address(mnemonic, operand)

    def extract_register_name(self, operand: str) -> str:
        name = operand
        for open_char, close_char in BRACKET_PAIRS:
            name = _strip_pair(name, open_char, close_char)
        if name.startswith(self.indirection):
            name = name[1:]
        if name.startswith(self.register_sigil):
            name = name[1:]
        return _leading_alnum(name)


class ArmClassifier:
    """ARM/AArch64 operands: ``#imm`` constants, bare register names."""

    BRANCH_MNEMONICS = {"b", "bl", "br", "blr", "cbz", "cbnz", "tbz", "tbnz"}

    CONSTANT_RE = re.compile(r"^#.+$|^-?(0x[0-9a-f]+|\d+)$")
    ADDRESS_RE = re.compile(r"^(0x)?[0-9a-f]+$")
    REGISTER_RE = re.compile(r"^(?:[xwvqdshbr]\d+|w?sp|[xw]zr|lr|fp|pc|ip)(?![0-9a-z])")

    def is_jump(self, mnemonic: Optional[str]) -> bool:
        if mnemonic is None:
            return False
        lowered = mnemonic.lower()
        return lowered in self.BRANCH_MNEMONICS or lowered.startswith("b.")

    def is_constant(self, mnemonic: Optional[str], operand: str) -> bool:
        return bool(self.CONSTANT_RE.match(operand)) and not self.is_jump(mnemonic)

    def is_address(self, mnemonic: Optional[str], operand: str) -> bool:
        return self.is_jump(mnemonic) and bool(self.ADDRESS_RE.match(operand))

    def is_register(self, mnemonic: Optional[str], operand: str) -> bool:
        if self.REGISTER_RE.match(operand) or "[" in operand or "{" in operand:
            return True
        return not self.is_constant(mnemonic, operand) and not self.is_address(mnemonic, operand)

    def extract_register_name(self, operand: str) -> str:
        name = _strip_pair(operand, "[", "]")
        name = _strip_pair(name, "{", "}")
        return _leading_alnum(name.strip())


OperandClassifier = Union[X86Classifier, ArmClassifier]

CLASSIFIERS: Dict[Architecture, OperandClassifier] = {}


def register_classifier(architecture: Architecture, classifier: OperandClassifier) -> None:
    CLASSIFIERS[architecture] = classifier


def get_classifier(architecture: Architecture) -> OperandClassifier:
    classifier = CLASSIFIERS.get(architecture)
    if classifier is None:
        raise KeyError(f"No operand classifier registered for {architecture.name}")
    return classifier


register_classifier(Architecture.X86_64, X86Classifier())
register_classifier(Architecture.ARM_32, ArmClassifier())
register_classifier(Architecture.ARM_64, ArmClassifier())
