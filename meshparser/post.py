"""
Report helpers for parsed MSH files.

Renders a short labeled summary of a ParseResult (format header and section
counts) and optionally writes it to a text file.
"""
from collections import Counter
from typing import List, Optional
from .io import ParseResult


LINE = "=============================================="


def _append_header(lines: List[str], result: ParseResult) -> None:
    h = result.header
    encoding = "Binary MSH File" if h.is_binary else "ASCII MSH File"
    lines.append(LINE)
    lines.append(f"File version            : {h.version}")
    lines.append(f"File Type               : {encoding}")
    lines.append(f"Atomic Data Size        : {h.word_size} byte(s)")
    lines.append(LINE)


def _append_counts(lines: List[str], result: ParseResult) -> None:
    lines.append(f"Physical Names Count    : {result.physical_names_count}")
    lines.append(f"Nodes Count             : {result.nodes_count}")
    lines.append(f"Elements Count          : {result.elements_count}")

    by_kind = Counter(e.kind for e in result.elements)
    for kind in sorted(by_kind, key=lambda k: (k.dimension, k.arity)):
        lines.append(f"  {kind.label:<22}: {by_kind[kind]}")


def _append_regions(lines: List[str], result: ParseResult) -> None:
    if not result.physical_regions:
        return
    lines.append("")
    lines.append("PHYSICAL REGIONS")
    lines.append("  dim     tag  name")
    for r in result.physical_regions:
        lines.append(f"{r.dimension:5d} {r.tag:7d}  {r.name}")


def format_summary(result: ParseResult, title: Optional[str] = None) -> str:
    """Return the summary report as a single string."""
    lines = []
    if title:
        lines.append(str(title))
    _append_header(lines, result)
    _append_counts(lines, result)
    _append_regions(lines, result)
    if result.warnings:
        lines.append("")
        lines.append("WARNINGS")
        for w in result.warnings:
            lines.append(f"  - {w}")
    lines.append(LINE)
    return "\n".join(lines)


def write_summary_txt(output_path: str, result: ParseResult,
                      title: Optional[str] = None) -> None:
    """Write `format_summary(result)` to `output_path`."""
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(format_summary(result, title))
        f.write("\n")
