from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Pattern, Tuple

from asmref.architecture import Architecture
from asmref.classifier import HEX_PREFIX, get_classifier
from asmref.labels import LabelTracker
from asmref.model import DisassemblyBlock, Instruction, RawMatch


LOGGER = logging.getLogger(__name__)

PREFIXES = {"data64", "data32", "data16", "data8", "lock"}

_ADDRESS = r"(" + HEX_PREFIX + r"[a-f0-9]+):"
_X86_BODY = r"([0-9a-zA-Z:_()\[\]+*$,\-%\s]+)"
_X86_COMMENT = r"([;#].*)?"
_ARM_BODY = r"([0-9a-zA-Z:_()\[\]+*$,\-%#.!{}\s]+)"
_ARM_COMMENT = r"(;.*|//.*)?"

_X86_LINE_RE = re.compile(r"^" + _ADDRESS + r"\s+" + _X86_BODY + _X86_COMMENT)
_ARM_LINE_RE = re.compile(r"^" + _ADDRESS + r"\s+" + _ARM_BODY + _ARM_COMMENT)

LINE_PATTERNS: Dict[Architecture, Pattern[str]] = {
    Architecture.X86_64: _X86_LINE_RE,
    Architecture.ARM_32: _ARM_LINE_RE,
    Architecture.ARM_64: _ARM_LINE_RE,
}

_WHITESPACE_RE = re.compile(r"\s+")


def split_instruction(body: str) -> Tuple[List[str], Optional[str], List[str]]:
    """Split an instruction body into prefixes, mnemonic and operands.

    Commas only separate operands outside brackets so that addressing
    forms such as ``(%rax,%rbx,4)`` stay whole. Unbalanced brackets are
    not rejected; the depth simply carries through to the end of the line.
    """
    text = _WHITESPACE_RE.sub(" ", body).strip()
    prefixes: List[str] = []
    operands: List[str] = []
    mnemonic: Optional[str] = None
    current: List[str] = []
    depth = 0
    for ch in text:
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth -= 1

        if mnemonic is None:
            if ch == " ":
                part = "".join(current)
                current = []
                if part in PREFIXES:
                    prefixes.append(part)
                else:
                    mnemonic = part
                    LOGGER.debug("mnemonic: '%s'", mnemonic)
                continue
        elif ch == "," and depth == 0:
            operands.append("".join(current).strip())
            current = []
            continue
        current.append(ch)

    # the final token is flushed whole
    if current:
        part = "".join(current)
        if mnemonic is None:
            mnemonic = part
            LOGGER.debug("mnemonic: '%s'", mnemonic)
        else:
            operands.append(part.strip())
    return prefixes, mnemonic, operands


class AssemblyParser:
    def __init__(
        self,
        architecture: Architecture = Architecture.X86_64,
        labels: Optional[LabelTracker] = None,
    ) -> None:
        self.architecture = architecture
        self.labels = labels if labels is not None else LabelTracker()
        self.classifier = get_classifier(architecture)
        self._line_re = LINE_PATTERNS[architecture]

    def match_line(self, line: str) -> Optional[RawMatch]:
        LOGGER.debug("Trying to parse instruction: %s", line)
        annotation = ""
        if not line.startswith(HEX_PREFIX):
            address_index = line.find(" " + HEX_PREFIX)
            if address_index != -1:
                annotation = line[:address_index] + " "
                line = line[address_index + 1 :]

        match = self._line_re.match(line)
        if not match:
            return None
        address_text, body, comment = match.groups()
        if not body.strip():
            return None
        LOGGER.debug("parts: annotation='%s' address='%s' body='%s' comment='%s'", annotation, address_text, body, comment)
        return RawMatch(
            annotation=annotation,
            address=int(address_text, 16),
            body=body,
            comment=comment or "",
        )

    def parse_line(self, line: str) -> Optional[Instruction]:
        raw = self.match_line(line)
        if raw is None:
            return None
        return self.build_instruction(raw.body, raw.address, raw.comment, raw.annotation)

    def build_instruction(self, body: str, address: int, comment: str = "", annotation: str = "") -> Instruction:
        prefixes, mnemonic, operands = split_instruction(body)
        instruction = Instruction(
            annotation=annotation,
            address=address,
            prefixes=prefixes,
            mnemonic=mnemonic or "",
            operands=operands,
            comment=comment,
        )
        self.labels.record_instruction(instruction)
        return instruction

    def is_jump(self, mnemonic: Optional[str]) -> bool:
        return self.classifier.is_jump(mnemonic)

    def is_constant(self, mnemonic: Optional[str], operand: str) -> bool:
        return self.classifier.is_constant(mnemonic, operand)

    def is_address(self, mnemonic: Optional[str], operand: str) -> bool:
        return self.classifier.is_address(mnemonic, operand)

    def is_register(self, mnemonic: Optional[str], operand: str) -> bool:
        return self.classifier.is_register(mnemonic, operand)

    def extract_register_name(self, operand: str) -> str:
        return self.classifier.extract_register_name(operand)


def parse_disassembly(text: str, architecture: Architecture = Architecture.X86_64) -> DisassemblyBlock:
    parser = AssemblyParser(architecture)
    instructions: List[Instruction] = []
    for line in text.splitlines():
        instruction = parser.parse_line(line.rstrip())
        if instruction is not None:
            instructions.append(instruction)
    labels = parser.labels.build_labels(parser.classifier)
    return DisassemblyBlock(architecture=architecture, instructions=instructions, labels=labels)
