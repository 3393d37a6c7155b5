from __future__ import annotations

import logging
import threading
import xml.etree.ElementTree as ET
from pathlib import Path
from types import MappingProxyType
from typing import BinaryIO, Dict, List, Mapping, Optional, Set

from asmref.architecture import Architecture


LOGGER = logging.getLogger(__name__)

REFERENCE_FILES = {
    "x86": "x86reference.xml",
    "aarch64": "aarch64reference.xml",
}
SIZE_SUFFIXES = ("b", "w", "l", "q")
MOVABS_DESCRIPTION = "Move a 64-bit value"

_MNEM_TAG = "mnem"
_BRIEF_TAG = "brief"


class ReferenceLoadError(Exception):
    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


def _default_resource_dir() -> Path:
    return Path(__file__).resolve().parent / "resources"


def _local_name(tag: str) -> str:
    if "}" in tag:
        tag = tag.rsplit("}", 1)[1]
    return tag.lower()


def parse_reference(source: BinaryIO | str | Path) -> Dict[str, str]:
    """Stream a reference document into a mnemonic -> description map.

    Every ``mnem`` element adds a synonym to the pending set; the next
    ``brief`` element describes all pending synonyms and empties the set.
    Consumed elements are detached from their parent, so only the chain
    of currently open elements is ever held in memory.
    """
    result: Dict[str, str] = {}
    pending: Set[str] = set()
    capturing = 0
    open_elements: List[ET.Element] = []
    for event, elem in ET.iterparse(source, events=("start", "end")):
        tag = _local_name(elem.tag)
        if event == "start":
            open_elements.append(elem)
            if tag in (_MNEM_TAG, _BRIEF_TAG):
                capturing += 1
            continue
        open_elements.pop()
        if tag == _MNEM_TAG:
            mnemonic = "".join(elem.itertext()).strip().lower()
            if mnemonic:
                pending.add(mnemonic)
            capturing -= 1
        elif tag == _BRIEF_TAG:
            brief = "".join(elem.itertext()).strip()
            for mnemonic in pending:
                result[mnemonic] = brief
            pending.clear()
            capturing -= 1
        # children of mnem/brief keep their text until the parent is read
        if not capturing and open_elements:
            open_elements[-1].remove(elem)
    return result


def _patch_x86_descriptions(mnemonic_map: Dict[str, str]) -> None:
    # the x86 reference has no entry for movabs and only knows the Intel names
    mnemonic_map["movabs"] = MOVABS_DESCRIPTION
    if mnemonic_map.get("retn") is not None:
        mnemonic_map["ret"] = mnemonic_map["retn"]
    if mnemonic_map.get("movsxd") is not None:
        mnemonic_map["movslq"] = mnemonic_map["movsxd"]


class MnemonicReference:
    def __init__(self, resource_dir: Optional[Path] = None) -> None:
        self.resource_dir = Path(resource_dir) if resource_dir else _default_resource_dir()
        self.load_counts: Dict[str, int] = {family: 0 for family in REFERENCE_FILES}
        self._maps: Dict[str, Mapping[str, str]] = {}
        self._locks = {family: threading.Lock() for family in REFERENCE_FILES}

    def reference_path(self, family: str) -> Path:
        return self.resource_dir / REFERENCE_FILES[family]

    def lookup(self, mnemonic: str, architecture: Architecture = Architecture.X86_64) -> Optional[str]:
        mnemonic_map = self.mnemonic_map(architecture)
        result = mnemonic_map.get(mnemonic)
        if result is None and mnemonic.endswith(SIZE_SUFFIXES):
            result = mnemonic_map.get(mnemonic[:-1])
        return result

    def mnemonic_map(self, architecture: Architecture = Architecture.X86_64) -> Mapping[str, str]:
        family = architecture.reference_family
        cached = self._maps.get(family)
        if cached is not None:
            return cached
        with self._locks[family]:
            cached = self._maps.get(family)
            if cached is None:
                mnemonic_map = self._load_reference_file(family)
                if family == "x86":
                    _patch_x86_descriptions(mnemonic_map)
                cached = MappingProxyType(mnemonic_map)
                self._maps[family] = cached
        return cached

    def _load_reference_file(self, family: str) -> Dict[str, str]:
        path = self.reference_path(family)
        self.load_counts[family] += 1
        try:
            mnemonic_map = self._read_reference(path)
        except ReferenceLoadError as exc:
            LOGGER.error("%s", exc.message)
            return {}
        LOGGER.debug("Loaded %d %s mnemonic descriptions from %s", len(mnemonic_map), family, path)
        return mnemonic_map

    def _read_reference(self, path: Path) -> Dict[str, str]:
        if not path.exists():
            raise ReferenceLoadError(f"Could not find assembly reference: {path}", path)
        try:
            with path.open("rb") as handle:
                return parse_reference(handle)
        except ET.ParseError as exc:
            raise ReferenceLoadError(f"Malformed assembly reference {path}: {exc}", path) from exc
        except OSError as exc:
            raise ReferenceLoadError(f"Could not load assembly reference {path}: {exc}", path) from exc


mnemonic_reference = MnemonicReference()


def lookup_mnemonic(mnemonic: str, architecture: Architecture = Architecture.X86_64) -> Optional[str]:
    return mnemonic_reference.lookup(mnemonic, architecture)
