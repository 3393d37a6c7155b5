"""Print a HotSpot/objdump disassembly listing with labels and mnemonic notes."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from asmref.architecture import Architecture
from asmref.classifier import get_classifier
from asmref.labels import format_operands
from asmref.model import DisassemblyBlock, Instruction
from asmref.parser import parse_disassembly
from asmref.reference import MnemonicReference, mnemonic_reference


def _parse_architecture(value: str) -> Architecture:
    try:
        return Architecture.from_name(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def format_instruction(
    instruction: Instruction,
    block: DisassemblyBlock,
    reference: Optional[MnemonicReference] = None,
) -> str:
    operands = format_operands(instruction, block.labels, get_classifier(block.architecture))

    text = f"0x{instruction.address:016x}: "
    if instruction.prefixes:
        text += " ".join(instruction.prefixes) + " "
    text += instruction.mnemonic
    if operands:
        text += " " + ",".join(operands)
    if reference is not None:
        description = reference.lookup(instruction.mnemonic.lower(), block.architecture)
        if description:
            text += f" ; {description}"
    return text


def render_block(block: DisassemblyBlock, reference: Optional[MnemonicReference] = None) -> List[str]:
    lines: List[str] = []
    for instruction in block.instructions:
        label = block.get_label(instruction.address)
        if label:
            lines.append(f"{label}:")
        lines.append("  " + format_instruction(instruction, block, reference))
    return lines


def _read_input(path: str, stdin: TextIO) -> str:
    if path == "-":
        return stdin.read()
    return Path(path).read_text(encoding="utf-8", errors="replace")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Parse a textual disassembly listing into annotated instructions")
    parser.add_argument("input", nargs="?", default="-", help="Disassembly listing (default: stdin)")
    parser.add_argument(
        "--arch",
        type=_parse_architecture,
        default=Architecture.X86_64,
        help="Target architecture (x86_64, arm32, aarch64)",
    )
    parser.add_argument("--describe", action="store_true", help="Append mnemonic descriptions")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.input != "-" and not Path(args.input).is_file():
        logging.error("Disassembly file not found: %s", args.input)
        return 1

    try:
        text = _read_input(args.input, sys.stdin)
    except OSError as exc:
        logging.error("Could not read disassembly %s: %s", args.input, exc)
        return 1

    block = parse_disassembly(text, args.arch)
    logging.info("Parsed %d instructions", len(block.instructions))
    reference = mnemonic_reference if args.describe else None
    for line in render_block(block, reference):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
