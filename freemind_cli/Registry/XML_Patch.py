# XML_Patch.py
# Description: Streaming patch passes over the registry XML document.
#
# The registry document is supplied by the server and must be passed through
# unchanged except for the entries being deleted or inserted, so the passes work
# on an event stream (xml.dom.pulldom) and re-emit events through an
# XMLGenerator instead of building a full tree. The registry is flat: a root
# <registry> holding <entry> elements that never nest.
#
# Imports
import io
import re
import xml.etree.ElementTree as ET
import xml.sax
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Set, Tuple, Union
from xml.dom import pulldom
from xml.sax.saxutils import XMLGenerator
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from freemind_cli.Constants import (
    DESCRIPTION_TAG, DUE_TAG, ENTRY_ID_ATTRIBUTE, ENTRY_TAG, MAX_ENTRY_ID, REGISTRY_TAG, TITLE_TAG,
)
from freemind_cli.freemind_api.exceptions import DecodeFailure
from freemind_cli.Registry.Entry_Record import Record
from freemind_cli.Registry.Local_State import LocalStateStore
#
########################################################################################################################
#
# Functions:

_XML_DECLARATION = re.compile(r"^\s*<\?xml[\s?]")

# Feed the flattener one character at a time so a parse error surfaces right where it occurs
FLATTEN_BUFSIZE = 1


# --- Events ---

@dataclass(frozen=True)
class StartTag:
    name: str
    attributes: Tuple[Tuple[str, str], ...] = ()

    def get(self, attribute: str) -> Optional[str]:
        for key, value in self.attributes:
            if key == attribute:
                return value
        return None


@dataclass(frozen=True)
class EndTag:
    name: str


@dataclass(frozen=True)
class Text:
    content: str


@dataclass(frozen=True)
class Instruction:
    target: str
    data: str


XmlEvent = Union[StartTag, EndTag, Text, Instruction]


# --- Patch state ---

@dataclass(frozen=True)
class Copying:
    pass


@dataclass(frozen=True)
class SkippingSubtree:
    end_tag: str


PatchState = Union[Copying, SkippingSubtree]

COPYING = Copying()


def _take_text(chunks: List[str], trim_text: bool) -> Optional[Text]:
    if not chunks:
        return None
    content = "".join(chunks)
    chunks.clear()
    if trim_text:
        content = content.strip()
        if not content:
            return None
    return Text(content)


def iter_events(xml_text: str, trim_text: bool = True, bufsize: Optional[int] = None) -> Iterator[XmlEvent]:
    """
    Yields the events of an XML document.

    Adjacent character data is merged into a single Text event. With `trim_text`
    every Text is stripped of surrounding whitespace and dropped when empty.

    Raises:
        DecodeFailure: When the document is not well-formed.
    """
    pending_text: List[str] = []
    stream = pulldom.parse(io.StringIO(xml_text), bufsize=bufsize)
    try:
        for event, node in stream:
            if event in (pulldom.CHARACTERS, pulldom.IGNORABLE_WHITESPACE):
                pending_text.append(node.data)
                continue
            text = _take_text(pending_text, trim_text)
            if text is not None:
                yield text
            if event == pulldom.START_ELEMENT:
                yield StartTag(node.tagName, tuple(node.attributes.items()))
            elif event == pulldom.END_ELEMENT:
                yield EndTag(node.tagName)
            elif event == pulldom.PROCESSING_INSTRUCTION:
                yield Instruction(node.target, node.data)
        text = _take_text(pending_text, trim_text)
        if text is not None:
            yield text
    except xml.sax.SAXException as e:
        raise DecodeFailure(f"Malformed registry document: {e}") from e


def parse_entry_id(raw: Optional[str]) -> Optional[int]:
    """Parses an entry `id` attribute. Missing, non-numeric, zero or out-of-range values yield None."""
    if raw is None:
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    if 0 < value <= MAX_ENTRY_ID:
        return value
    return None


def _new_writer(buffer: io.StringIO, source_text: str) -> XMLGenerator:
    writer = XMLGenerator(buffer, encoding="utf-8", short_empty_elements=False)
    if _XML_DECLARATION.match(source_text):
        writer.startDocument()
    return writer


def _copy_event(writer: XMLGenerator, event: XmlEvent) -> None:
    if isinstance(event, StartTag):
        writer.startElement(event.name, dict(event.attributes))
    elif isinstance(event, EndTag):
        writer.endElement(event.name)
    elif isinstance(event, Text):
        writer.characters(event.content)
    elif isinstance(event, Instruction):
        writer.processingInstruction(event.target, event.data)


# --- Serializer ---

def _write_text_element(writer: XMLGenerator, tag: str, content: str) -> None:
    writer.startElement(tag, {})
    writer.characters(content)
    writer.endElement(tag)


def write_entry(writer: XMLGenerator, record: Record) -> None:
    """Writes one <entry> subtree. Records without an identifier are skipped silently."""
    if record.id is None:
        return
    writer.startElement(ENTRY_TAG, {ENTRY_ID_ATTRIBUTE: str(record.id)})
    _write_text_element(writer, TITLE_TAG, record.title)
    _write_text_element(writer, DESCRIPTION_TAG, record.description)
    if record.due is not None:
        _write_text_element(writer, DUE_TAG, str(record.due))
    writer.endElement(ENTRY_TAG)


def serialize_entry(record: Record) -> str:
    buffer = io.StringIO()
    write_entry(XMLGenerator(buffer, encoding="utf-8", short_empty_elements=False), record)
    return buffer.getvalue()


# --- Patch passes ---

def delete_removed(xml_text: str, store: LocalStateStore) -> Tuple[bool, str]:
    """
    Drops every <entry> subtree whose id belongs to a locally removed record.

    Each matching record is removed from the store as its subtree is dropped.
    Entries without a usable id, unknown to the store, or not removed locally
    are copied through untouched.

    Returns:
        (changed, document) where `changed` is True if at least one subtree was dropped.

    Raises:
        DecodeFailure: If the document is malformed. No partial output is returned.
    """
    if not xml_text.strip():
        return False, ""

    buffer = io.StringIO()
    writer = _new_writer(buffer, xml_text)
    state: PatchState = COPYING
    modified = False

    for event in iter_events(xml_text, trim_text=True):
        if isinstance(state, SkippingSubtree):
            if isinstance(event, EndTag) and event.name == state.end_tag:
                state = COPYING
            continue

        if isinstance(event, StartTag) and event.name == ENTRY_TAG:
            entry_id = parse_entry_id(event.get(ENTRY_ID_ATTRIBUTE))
            if entry_id is None:
                logger.debug(f"Passing through entry without a usable id: {event.attributes}")
            elif store.discard_tombstone(entry_id) is not None:
                logger.debug(f"Deleting entry {entry_id} from the registry document")
                state = SkippingSubtree(end_tag=event.name)
                modified = True
                continue

        _copy_event(writer, event)

    return modified, buffer.getvalue()


def insert_created_entries(xml_text: str, store: LocalStateStore, new_ids: Iterable[int]) -> str:
    """Writes the live records whose id is in `new_ids` right after the registry start tag."""
    wanted: Set[int] = set(new_ids)
    buffer = io.StringIO()
    writer = _new_writer(buffer, xml_text)

    for event in iter_events(xml_text, trim_text=False):
        _copy_event(writer, event)
        if isinstance(event, StartTag) and event.name == REGISTRY_TAG:
            for record in store:
                if record.id in wanted and not record.removed:
                    write_entry(writer, record)
                    logger.debug(f"Inserted entry {record.id} ('{record.title}')")

    return buffer.getvalue()


def flatten_single_entry(xml_text: str) -> str:
    """
    Renders a document holding a single <entry> as indented "tag: text" lines.

    Best effort: reading stops at the first parse error and whatever was
    collected up to that point is returned.
    """
    result: List[str] = []
    enabled = False
    indentation = 0
    try:
        for event in iter_events(xml_text, trim_text=True, bufsize=FLATTEN_BUFSIZE):
            if isinstance(event, StartTag) and event.name == ENTRY_TAG:
                enabled = True
            elif isinstance(event, EndTag) and event.name == ENTRY_TAG:
                enabled = False
            elif not enabled:
                continue
            elif isinstance(event, StartTag):
                result.append(" " * indentation + event.name + ": ")
                indentation += 1
            elif isinstance(event, Text):
                result.append(event.content)
            elif isinstance(event, EndTag):
                result.append("\n")
                indentation = max(indentation - 1, 0)
    except DecodeFailure as e:
        logger.warning(f"Stopped reading entry document early: {e}")
    return "".join(result)


# --- Decoder ---

def decode_registry(xml_text: str) -> List[Record]:
    """
    Decodes the registry document into records.

    Entries without a usable id are foreign to this client and are skipped.

    Raises:
        DecodeFailure: If the document is malformed, the root is not <registry>,
            or an identified entry is missing required fields or has invalid values.
    """
    if not xml_text.strip():
        return []
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise DecodeFailure(f"Registry document does not parse: {e}") from e
    if root.tag != REGISTRY_TAG:
        raise DecodeFailure(f"Expected <{REGISTRY_TAG}> root element, found <{root.tag}>.")

    records: List[Record] = []
    for element in root.findall(ENTRY_TAG):
        entry_id = parse_entry_id(element.get(ENTRY_ID_ATTRIBUTE))
        if entry_id is None:
            logger.debug(f"Skipping foreign entry with id attribute {element.get(ENTRY_ID_ATTRIBUTE)!r}")
            continue
        title = element.find(TITLE_TAG)
        description = element.find(DESCRIPTION_TAG)
        if title is None or description is None:
            raise DecodeFailure(f"Entry {entry_id} lacks <{TITLE_TAG}> or <{DESCRIPTION_TAG}>.")
        due_text = (element.findtext(DUE_TAG) or "").strip()
        try:
            records.append(
                Record(
                    id=entry_id,
                    title=title.text or "",
                    description=description.text or "",
                    due=int(due_text) if due_text else None,
                )
            )
        except ValueError as e:
            raise DecodeFailure(f"Entry {entry_id} has invalid content: {e}") from e
    return records

#
# End of XML_Patch.py
########################################################################################################################
