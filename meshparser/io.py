"""
Input module for ASCII MSH (legacy 2.x) mesh files.

Reads the `$MeshFormat`, optional `$PhysicalNames`, `$Nodes` and
`$Elements` sections from an open text stream and returns them as a
`ParseResult` made of plain dataclasses.

File layout:

    $MeshFormat
    2.2 0 8                     version file-type word-size
    $EndMeshFormat
    $PhysicalNames              (optional)
    count
    dimension tag "name"
    $EndPhysicalNames
    $Nodes
    count
    id x y z
    $EndNodes
    $Elements
    count
    id type-code tag-count tag... node-id...
    $EndElements
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, TextIO, Tuple

from . import config
from .config import DEFAULT_SETTINGS, ParserSettings
from .elements import ElementKind, lookup
from .errors import (
    CountMismatch,
    IoFailure,
    LimitExceeded,
    MalformedNumber,
    UnknownElementType,
    UnsupportedEncoding,
)
from .tokens import TokenReader

logger = logging.getLogger(__name__)


# ============================================================================
# DATACLASSES for parsed sections
# ============================================================================

@dataclass(frozen=True)
class FormatHeader:
    """
    $MeshFormat header line: `major.minor file-type word-size`

    Attributes:
        version_major, version_minor: format version (e.g. 2, 2)
        is_binary: True unless the file-type flag is 0 (ASCII)
        word_size: size in bytes of a floating point value (usually 8)
        file_type: raw file-type flag as written in the file; filled in
            from `is_binary` (0 or 1) when omitted
    """
    version_major: int
    version_minor: int
    is_binary: bool
    word_size: int
    file_type: Optional[int] = None

    def __post_init__(self):
        if self.file_type is None:
            object.__setattr__(self, "file_type", 1 if self.is_binary else config.ASCII_FILE_TYPE)
        elif self.is_binary != (self.file_type != config.ASCII_FILE_TYPE):
            raise ValueError(f"is_binary={self.is_binary} contradicts "
                             f"file type {self.file_type}")

    @property
    def version(self) -> str:
        return f"{self.version_major}.{self.version_minor}"


@dataclass
class PhysicalRegion:
    """
    One $PhysicalNames entry.

    Attributes:
        dimension: topological dimension of the region (0-3)
        tag: physical tag, referenced by the first tag of element records
        name: region name with surrounding quotes removed
    """
    dimension: int
    tag: int
    name: str


@dataclass
class Node:
    id: int
    x: float
    y: float
    z: float


@dataclass
class Element:
    """
    One $Elements record.

    Attributes:
        id: element number as written in the file
        kind: element shape resolved from the type code
        tags: integer tags (by convention physical tag, then geometrical tag)
        node_ids: node numbers, exactly `kind.arity` of them
        type_code: type code as written in the file
    """
    id: int
    kind: ElementKind
    tags: Tuple[int, ...] = ()
    node_ids: Tuple[int, ...] = ()
    type_code: Optional[int] = field(default=None, compare=False)

    @property
    def physical_tag(self) -> Optional[int]:
        return self.tags[0] if self.tags else None

    @property
    def geometrical_tag(self) -> Optional[int]:
        return self.tags[1] if len(self.tags) > 1 else None


@dataclass
class ParseResult:
    """
    Everything read from one MSH stream.

    A fresh instance is returned by every parse; nothing is shared between
    results.

    Attributes:
        header: the $MeshFormat header
        physical_regions: $PhysicalNames entries (empty if the section is absent)
        nodes: $Nodes records in file order
        elements: $Elements records in file order
        has_physical_names: False when the file has no $PhysicalNames section
        warnings: non-fatal findings, e.g. an unexpected format version
    """
    header: FormatHeader
    physical_regions: List[PhysicalRegion] = field(default_factory=list)
    nodes: List[Node] = field(default_factory=list)
    elements: List[Element] = field(default_factory=list)
    has_physical_names: bool = False
    warnings: List[str] = field(default_factory=list)

    @property
    def nodes_count(self) -> int:
        return len(self.nodes)

    @property
    def elements_count(self) -> int:
        return len(self.elements)

    @property
    def physical_names_count(self) -> int:
        return len(self.physical_regions)

    def region_names(self) -> Dict[int, str]:
        """Map physical tag -> region name."""
        return {r.tag: r.name for r in self.physical_regions}


# ============================================================================
# PARSER
# ============================================================================

class MshParser:
    """
    Section-by-section reader for ASCII MSH streams.

    The parser holds only its settings, so one instance can be reused for
    any number of streams (including concurrently, one stream per call).
    """

    def __init__(self, settings: Optional[ParserSettings] = None):
        self.settings = settings if settings is not None else DEFAULT_SETTINGS

    def parse(self, stream: TextIO) -> ParseResult:
        """
        Parse a complete file.

        Raises:
            ParseError subclass describing the first problem found.
            UnsupportedEncoding if the header declares a binary file.
        """
        reader = TokenReader(stream)
        warnings: List[str] = []

        header = self._parse_mesh_format(reader, warnings)
        if header.is_binary:
            raise UnsupportedEncoding(header, reader.line_number)
        reader.expect_keyword_line(config.END_MESH_FORMAT)

        regions = self._parse_physical_names(reader)
        nodes = self._parse_nodes(reader)
        elements = self._parse_elements(reader)

        return ParseResult(
            header=header,
            physical_regions=regions if regions is not None else [],
            nodes=nodes,
            elements=elements,
            has_physical_names=regions is not None,
            warnings=warnings,
        )

    def read_header(self, stream: TextIO) -> FormatHeader:
        """
        Read only the $MeshFormat section.

        For ASCII files `$EndMeshFormat` is consumed too. For binary files the
        stream is left right after the header line so the caller can hand it
        to a binary reader.
        """
        reader = TokenReader(stream)
        header = self._parse_mesh_format(reader, [])
        if not header.is_binary:
            reader.expect_keyword_line(config.END_MESH_FORMAT)
        return header

    # ------------------------------------------------------------------
    # $MeshFormat
    # ------------------------------------------------------------------

    def _parse_mesh_format(self, reader: TokenReader,
                           warnings: List[str]) -> FormatHeader:
        reader.expect_keyword_line(config.MESH_FORMAT)

        token = reader.next_token()
        major, minor = _split_version(token, reader.line_number)
        file_type = reader.next_int()
        word_size = reader.next_int()

        header = FormatHeader(
            version_major=major,
            version_minor=minor,
            is_binary=file_type != config.ASCII_FILE_TYPE,
            word_size=word_size,
            file_type=file_type,
        )
        logger.debug(f"MSH version {header.version}, file type {file_type}, "
                     f"word size {word_size}")

        if (major, minor) not in self.settings.supported_versions:
            message = (f"format version {header.version} is not one of the "
                       f"supported versions; read with the 2.x grammar")
            logger.warning(message)
            warnings.append(message)
        return header

    # ------------------------------------------------------------------
    # $PhysicalNames (optional)
    # ------------------------------------------------------------------

    def _parse_physical_names(self, reader: TokenReader) -> Optional[List[PhysicalRegion]]:
        """Returns None when the section is absent."""
        mark = reader.mark_position()
        if reader.read_keyword_line() != config.PHYSICAL_NAMES:
            reader.restore_position(mark)
            logger.debug("no $PhysicalNames section")
            return None
        reader.release_mark(mark)

        section = "PhysicalNames"
        count = _read_count(reader, section)
        limit = self.settings.max_name_length

        regions = []
        for i in range(count):
            dimension = _record_int(reader, section, count, i)
            tag = _record_int(reader, section, count, i)
            name = _unquote(_record_name(reader, section, config.END_PHYSICAL_NAMES,
                                         count, i))
            if len(name) > limit:
                raise LimitExceeded("physical name length", limit, len(name),
                                    reader.line_number)
            regions.append(PhysicalRegion(dimension, tag, name))

        _expect_section_end(reader, config.END_PHYSICAL_NAMES, section, count)
        logger.debug(f"read {count} physical names")
        return regions

    # ------------------------------------------------------------------
    # $Nodes
    # ------------------------------------------------------------------

    def _parse_nodes(self, reader: TokenReader) -> List[Node]:
        section = "Nodes"
        reader.expect_keyword_line(config.NODES)
        count = _read_count(reader, section)

        nodes = []
        for i in range(count):
            node_id = _record_int(reader, section, count, i)
            x = _record_float(reader, section, count, i)
            y = _record_float(reader, section, count, i)
            z = _record_float(reader, section, count, i)
            nodes.append(Node(node_id, x, y, z))

        _expect_section_end(reader, config.END_NODES, section, count)
        logger.debug(f"read {count} nodes")
        return nodes

    # ------------------------------------------------------------------
    # $Elements
    # ------------------------------------------------------------------

    def _parse_elements(self, reader: TokenReader) -> List[Element]:
        section = "Elements"
        reader.expect_keyword_line(config.ELEMENTS)
        count = _read_count(reader, section)
        schema = self.settings.element_schema

        elements = []
        for i in range(count):
            elements.append(self._parse_element_record(reader, schema, count, i))

        _expect_section_end(reader, config.END_ELEMENTS, section, count)
        logger.debug(f"read {count} elements")
        return elements

    def _parse_element_record(self, reader: TokenReader,
                              schema: Mapping[int, ElementKind],
                              count: int, index: int) -> Element:
        section = "Elements"
        elem_id = _record_int(reader, section, count, index)
        type_code = _record_int(reader, section, count, index)
        tag_count = _record_int(reader, section, count, index)

        if tag_count < 0:
            raise MalformedNumber(str(tag_count), "int", reader.line_number,
                                  reason=f"negative tag count {tag_count}")
        if tag_count > self.settings.max_tags:
            raise LimitExceeded("element tag count", self.settings.max_tags,
                                tag_count, reader.line_number)
        tags = tuple(_record_int(reader, section, count, index) for _ in range(tag_count))

        kind = lookup(type_code, schema)
        if kind is None:
            # Without an arity the rest of the record cannot be delimited.
            raise UnknownElementType(type_code, reader.line_number)

        node_ids = tuple(_record_int(reader, section, count, index)
                         for _ in range(kind.arity))
        return Element(elem_id, kind, tags, node_ids, type_code=type_code)


# ============================================================================
# PUBLIC FUNCTIONS
# ============================================================================

def parse(stream: TextIO, settings: Optional[ParserSettings] = None) -> ParseResult:
    """
    Parse an ASCII MSH file from an open text stream.

    Args:
        stream: readable text stream positioned at `$MeshFormat`
        settings: optional ParserSettings (limits, element schema table)

    Returns:
        ParseResult

    Raises:
        ParseError: on the first malformed, missing or inconsistent field
    """
    return MshParser(settings).parse(stream)


def read_header(stream: TextIO, settings: Optional[ParserSettings] = None) -> FormatHeader:
    """Read only the $MeshFormat header (see `MshParser.read_header`)."""
    return MshParser(settings).read_header(stream)


def read_msh(filepath: str, settings: Optional[ParserSettings] = None) -> ParseResult:
    """
    Open and parse a .msh file.

    Raises:
        FileNotFoundError: If the file does not exist
        IoFailure: If the file exists but cannot be opened or read
        ParseError: If the file content is invalid
    """
    filepath = Path(filepath)   # type: ignore
    if not filepath.exists():   # type: ignore
        raise FileNotFoundError(f"Mesh file not found: {filepath}")

    logger.info(f"Reading mesh file: {filepath}")
    try:
        f = open(filepath, "r", encoding="utf-8")
    except OSError as exc:
        raise IoFailure(exc) from exc
    with f:
        return parse(f, settings)


def validate_result(result: ParseResult) -> Tuple[bool, List[str]]:
    """
    Cross-check a parsed mesh for problems the parser passes through as data.

    Returns:
        (is_valid, error_messages)
    """
    errors = []

    seen_nodes = set()
    duplicate_nodes = set()
    for node in result.nodes:
        if node.id in seen_nodes:
            duplicate_nodes.add(node.id)
        seen_nodes.add(node.id)
    if duplicate_nodes:
        errors.append(f"Duplicate node ids: {sorted(duplicate_nodes)}")

    for element in result.elements:
        missing = [n for n in element.node_ids if n not in seen_nodes]
        if missing:
            errors.append(f"Element {element.id} references undefined nodes {missing}")

    seen_tags = set()
    for region in result.physical_regions:
        if not 0 <= region.dimension <= 3:
            errors.append(f"Physical region {region.name!r} has invalid dimension {region.dimension}")
        if region.tag in seen_tags:
            errors.append(f"Duplicate physical tag {region.tag} ({region.name!r})")
        seen_tags.add(region.tag)

    if result.has_physical_names:
        undeclared = sorted({e.physical_tag for e in result.elements
                             if e.physical_tag is not None and e.physical_tag not in seen_tags})
        if undeclared:
            errors.append(f"Element physical tags not declared in $PhysicalNames: {undeclared}")

    return len(errors) == 0, errors


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def _split_version(token: str, line: int) -> Tuple[int, int]:
    """Split `major.minor` into two ints."""
    major, sep, minor = token.partition(".")
    try:
        return int(major), int(minor) if sep else 0
    except ValueError:
        raise MalformedNumber(token, "version", line) from None


def _read_count(reader: TokenReader, section: str) -> int:
    count = reader.next_int()
    if count < 0:
        raise MalformedNumber(str(count), "int", reader.line_number,
                              reason=f"{section}: negative record count {count}")
    return count


def _check_record_field(reader: TokenReader, section: str,
                        expected: int, consumed: int) -> None:
    """A keyword or end of stream inside a record means the count was wrong."""
    token = reader.peek_token()
    if token is None or token.startswith("$"):
        raise CountMismatch(section, expected, consumed, reader.line_number)


def _record_int(reader: TokenReader, section: str, expected: int, consumed: int) -> int:
    _check_record_field(reader, section, expected, consumed)
    return reader.next_int()


def _record_float(reader: TokenReader, section: str, expected: int, consumed: int) -> float:
    _check_record_field(reader, section, expected, consumed)
    return reader.next_float()


def _record_name(reader: TokenReader, section: str, end_keyword: str,
                 expected: int, consumed: int) -> str:
    """Names may start with `$`; only the section's own end keyword ends the record."""
    token = reader.peek_token()
    if token is None or token == end_keyword:
        raise CountMismatch(section, expected, consumed, reader.line_number)
    return reader.next_token()


def _expect_section_end(reader: TokenReader, keyword: str,
                        section: str, expected: int) -> None:
    token = reader.peek_token()
    if token is not None and not token.startswith("$"):
        raise CountMismatch(section, expected, None, reader.line_number)
    reader.expect_keyword_line(keyword)


def _unquote(token: str) -> str:
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return token[1:-1]
    return token
