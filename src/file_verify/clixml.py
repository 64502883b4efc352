# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# file-verify/src/file_verify/clixml.py

"""PowerShell CLIXML object graph decoder.

Only the subset Export-Clixml emits for PSCustomObject / OrderedDictionary
trees is modelled: <Obj> nodes carrying a property set (<MS>), a list
(<LST>) or a dictionary (<DCT>), and named scalar elements.
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Final

from .errors import IndexParseError
from .types import Scalar


# Elements that are structure rather than values. Any other leaf element
# (DT, U64, Db, G, ...) is carried as text under its own tag.
CONTAINER_TAGS: Final = frozenset({"Obj", "Ref", "TN", "TNRef", "ToString",
                                   "MS", "LST", "DCT", "IE", "STK", "QUE"})

I32_MIN: Final = -(1 << 31)
I32_MAX: Final = (1 << 31) - 1
I64_MIN: Final = -(1 << 63)
I64_MAX: Final = (1 << 63) - 1

_ESCAPE = re.compile(r'_x([0-9A-Fa-f]{4})_')
INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class TypedValue:
    """A CLIXML scalar resolved by its element tag."""
    tag: str
    value: Scalar


@dataclass
class CliObject:
    """One <Obj> node."""
    name: str | None = None
    properties: dict[str, TypedValue] = field(default_factory=dict)
    members: dict[str, 'CliObject'] = field(default_factory=dict)
    has_property_set: bool = False
    items: list['CliObject'] | None = None
    entries: list[tuple[TypedValue, TypedValue]] | None = None


def local_name(tag: str) -> str:
    """Strip the '{namespace}' prefix ElementTree puts on tags."""
    return tag.rsplit('}', 1)[-1]


def unescape(text: str) -> str:
    """Decode CLIXML '_xHHHH_' escapes."""
    return _ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), text)


def _parse_int(text: str, tag: str, low: int, high: int) -> int:
    digits = text.strip()
    if not INTEGER.fullmatch(digits):
        raise IndexParseError(f"<{tag}> is not an integer: {text!r}")
    value = int(digits)
    if not low <= value <= high:
        raise IndexParseError(f"<{tag}> out of range: {value}")
    return value


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise IndexParseError(f"<B> is not a boolean: {text!r}")


def decode_scalar(element: ET.Element) -> TypedValue:
    """Resolve a leaf element into a TypedValue according to its tag."""
    tag = local_name(element.tag)
    text = element.text or ""

    if tag == "S":
        return TypedValue(tag, unescape(text))
    if tag == "B":
        return TypedValue(tag, _parse_bool(text))
    if tag == "I32":
        return TypedValue(tag, _parse_int(text, tag, I32_MIN, I32_MAX))
    if tag == "I64":
        return TypedValue(tag, _parse_int(text, tag, I64_MIN, I64_MAX))
    if tag == "Nil":
        return TypedValue(tag, None)
    return TypedValue(tag, text)


def _decode_entry(en: ET.Element) -> tuple[TypedValue, TypedValue] | None:
    key = value = None
    for child in en:
        role = child.get("N")
        if role == "Key":
            key = decode_scalar(child)
        elif role == "Value":
            value = decode_scalar(child) if _is_scalar(child) else None
    if key is None or value is None:
        return None
    return key, value


def _is_scalar(element: ET.Element) -> bool:
    return local_name(element.tag) not in CONTAINER_TAGS


def decode_object(element: ET.Element) -> CliObject:
    """Decode an <Obj> element and everything below it."""
    obj = CliObject(name=element.get("N"))

    for child in element:
        tag = local_name(child.tag)
        if tag == "MS":
            obj.has_property_set = True
            for member in child:
                name = member.get("N")
                if name is None:
                    continue
                if local_name(member.tag) == "Obj":
                    obj.members[name] = decode_object(member)
                elif _is_scalar(member):
                    obj.properties[name] = decode_scalar(member)
        elif tag in ("LST", "IE", "STK", "QUE"):
            obj.items = [decode_object(o) for o in child
                         if local_name(o.tag) == "Obj"]
        elif tag == "DCT":
            obj.entries = []
            for en in child:
                if local_name(en.tag) != "En":
                    continue
                pair = _decode_entry(en)
                if pair is not None:
                    obj.entries.append(pair)
        # TN / TNRef / ToString carry type names only

    return obj


class CliXmlDocument:
    """Decoded top level of an Export-Clixml document."""

    def __init__(self, data: bytes):
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise IndexParseError(f"malformed CLIXML: {e}") from e

        if local_name(root.tag) != "Objs":
            raise IndexParseError(
                f"expected <Objs> root element, found <{local_name(root.tag)}>")

        self.version = root.get("Version")
        self.objects = [decode_object(o) for o in root
                        if local_name(o.tag) == "Obj"]

    def first(self) -> CliObject:
        """The first top-level object (the run summary)."""
        if not self.objects:
            raise IndexParseError("clixml: no top-level objects")
        return self.objects[0]
