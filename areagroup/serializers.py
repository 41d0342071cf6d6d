from collections.abc import Callable
import json
from pathlib import Path
import re
from xml.etree import ElementTree

from areagroup.schemas import OutputTree


XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'
XML_ROOT_TAG = "Users"

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.\-]")
_INVALID_NAME_START = re.compile(r"^[^A-Za-z_]")
_INVALID_XML_CHARS = re.compile(r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def render_json(tree: OutputTree) -> str:
    return json.dumps(tree, indent=2, ensure_ascii=False)


def element_name(name: str) -> str:
    safe = _INVALID_NAME_CHARS.sub("_", name)
    if not safe or _INVALID_NAME_START.match(safe):
        safe = f"_{safe}"
    return safe


def xml_text(value: str) -> str:
    return _INVALID_XML_CHARS.sub("", value)


def render_xml(tree: OutputTree) -> str:
    root = ElementTree.Element(XML_ROOT_TAG)
    for group_key, records in tree.items():
        group_element = ElementTree.SubElement(root, element_name(group_key))
        for record_key, record in records.items():
            record_element = ElementTree.SubElement(group_element, element_name(record_key))
            for field_name, value in record.items():
                ElementTree.SubElement(record_element, element_name(field_name)).text = xml_text(value)

    ElementTree.indent(root, space="    ")
    return XML_DECLARATION + ElementTree.tostring(root, encoding="unicode")


SERIALIZERS: dict[str, Callable[[OutputTree], str]] = {
    "json": render_json,
    "xml": render_xml,
}

DEFAULT_OUTPUT_FILES = {
    "json": "./output.json",
    "xml": "./output.xml",
}


def write_output(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as outfile:
            outfile.write(text)
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
