"""Split document text into line and sentence segments."""

import logging
import re
from dataclasses import dataclass

from ..models import ProcessedDocument, Segment

logger = logging.getLogger(__name__)

_BULLET = re.compile(r"^(?:[•▪▸→›○●·]\s*|[-*–—]\s+|\d{1,2}[.)]\s+)")
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+(?=[A-Z0-9\"'(])")
_HAS_WORD = re.compile(r"[A-Za-z0-9]")
_LIST_SEPARATOR = re.compile(r"[,|;•·]")


@dataclass
class _Line:
    text: str
    bulleted: bool
    heading: bool
    after_blank: bool = False


def clean_line(line: str) -> str:
    """Collapse whitespace and drop a leading bullet or list number."""
    line = " ".join(line.split())
    return _BULLET.sub("", line).strip()


def is_heading(line: str) -> bool:
    """Short all-caps lines and short lines ending in a colon introduce a section."""
    words = line.rstrip(":").split()
    if not words:
        return False
    if line.endswith(":") and len(words) <= 5:
        return True
    # "AWS, GCP, SQL" is a list, not a heading.
    if _LIST_SEPARATOR.search(line):
        return False
    letters = [c for c in line if c.isalpha()]
    return bool(letters) and line.isupper() and len(words) <= 4


def split_lines(text: str) -> list[str]:
    """Non-empty, cleaned lines; whitespace and punctuation-only lines are dropped."""
    return [line.text for line in _scan(text)]


def _scan(text: str) -> list[_Line]:
    scanned = []
    blank = False
    for raw in text.splitlines():
        collapsed = " ".join(raw.split())
        line = clean_line(collapsed)
        if not line or not _HAS_WORD.search(line):
            blank = True
            continue
        scanned.append(_Line(
            text=line,
            bulleted=line != collapsed,
            heading=is_heading(line),
            after_blank=blank,
        ))
        blank = False
    return scanned


def _continues(prev: _Line, line: _Line) -> bool:
    """A line continues the previous sentence when it reads as a wrapped fragment."""
    if prev.heading or line.heading or line.bulleted or line.after_blank:
        return False
    if prev.text[-1] in ".!?:":
        return False
    return line.text[0].islower()


def _blocks(lines: list[_Line]) -> list[list[int]]:
    """Group line numbers into runs that read as continuous prose."""
    blocks: list[list[int]] = []
    for i, line in enumerate(lines):
        if blocks and _continues(lines[blocks[-1][-1]], line):
            blocks[-1].append(i)
        else:
            blocks.append([i])
    return blocks


def split_sentences(text: str) -> list[str]:
    """Sentences of the text, with wrapped lines rejoined."""
    lines = _scan(text)
    sentences = []
    for block in _blocks(lines):
        if lines[block[0]].heading:
            continue
        joined = " ".join(lines[i].text for i in block)
        sentences.extend(s.strip() for s in _SENTENCE_SPLIT.split(joined) if s.strip())
    return sentences


def normalize_document(doc: ProcessedDocument) -> list[Segment]:
    """Split a document into ordered line and sentence segments.

    Every kept line becomes a ``line`` segment. A ``sentence`` segment is
    added after the last line it covers whenever the sentence is not simply
    one whole line (it wraps across lines, or shares a line with another
    sentence).

    Args:
        doc: The document to split.

    Returns:
        Segments in reading order, indexed from 0.
    """
    lines = _scan(doc.content)
    if not lines:
        return []

    # Sentences per block, with the line span each one covers.
    line_sentence: dict[int, int] = {}
    pending: dict[int, list[tuple[str, int, int, int]]] = {}
    sentence_id = 0
    for block in _blocks(lines):
        if lines[block[0]].heading:
            for i in block:
                line_sentence[i] = sentence_id
            sentence_id += 1
            continue

        offsets = []
        joined = ""
        for i in block:
            if joined:
                joined += " "
            offsets.append((len(joined), i))
            joined += lines[i].text

        cursor = 0
        for part in _SENTENCE_SPLIT.split(joined):
            sentence = part.strip()
            if not sentence:
                continue
            begin = joined.index(sentence, cursor)
            end = begin + len(sentence) - 1
            cursor = end + 1
            first = max(i for off, i in offsets if off <= begin)
            last = max(i for off, i in offsets if off <= end)
            for i in range(first, last + 1):
                line_sentence.setdefault(i, sentence_id)
            if not (first == last and sentence == lines[first].text):
                pending.setdefault(last, []).append((sentence, first, last, sentence_id))
            sentence_id += 1

    # A caps heading ("EDUCATION") holds until the next heading; a colon
    # heading ("Skills I've developed:") only until the next blank line.
    segments: list[Segment] = []
    section = outer = ""
    for i, line in enumerate(lines):
        if line.heading:
            section = line.text.rstrip(":").strip()
            if not line.text.endswith(":"):
                outer = section
        elif line.after_blank and section != outer:
            section = outer
        segments.append(Segment(
            text=line.text,
            source_document=doc.file_name,
            index=len(segments),
            kind="line",
            line_start=i,
            line_end=i,
            sentence_id=line_sentence.get(i, 0),
            section="" if line.heading else section,
            is_heading=line.heading,
        ))
        for sentence, first, last, sid in pending.get(i, []):
            segments.append(Segment(
                text=sentence,
                source_document=doc.file_name,
                index=len(segments),
                kind="sentence",
                line_start=first,
                line_end=last,
                sentence_id=sid,
                section=section,
            ))

    logger.debug(f"{doc.file_name}: {len(lines)} line(s), {len(segments)} segment(s)")
    return segments
