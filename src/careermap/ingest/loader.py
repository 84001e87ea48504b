"""Read text documents from disk into ProcessedDocument records."""

import logging
import re
from datetime import datetime
from pathlib import Path

import yaml

from ..models import ProcessedDocument

logger = logging.getLogger(__name__)

_FRONTMATTER = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)


def _read_text(file_path: Path) -> str:
    return file_path.read_text(encoding="utf-8", errors="replace")


def _read_markdown(file_path: Path) -> str:
    """Markdown body without YAML frontmatter."""
    text = _read_text(file_path)
    fm_match = _FRONTMATTER.match(text)
    if fm_match:
        try:
            yaml.safe_load(fm_match.group(1))
        except yaml.YAMLError:
            # Not frontmatter after all; keep it as text.
            return text
        return text[fm_match.end():]
    return text


def _read_html(file_path: Path) -> str:
    """Visible text of an HTML page, one block per line."""
    from bs4 import BeautifulSoup

    soup = BeautifulSoup(_read_text(file_path), "lxml")
    for tag in soup(["script", "style", "nav", "footer"]):
        tag.decompose()
    return soup.get_text(separator="\n", strip=True)


READERS = {
    ".txt": _read_text,
    ".text": _read_text,
    ".log": _read_text,
    ".csv": _read_text,
    ".json": _read_text,
    ".md": _read_markdown,
    ".markdown": _read_markdown,
    ".html": _read_html,
    ".htm": _read_html,
}


def load_document(file_path: Path) -> ProcessedDocument | None:
    """Load a single file.

    Returns:
        ProcessedDocument or None if the file type is unsupported.
    """
    ext = file_path.suffix.lower()
    reader = READERS.get(ext)
    if reader is None:
        logger.debug(f"Skipping unsupported file: {file_path}")
        return None

    content = reader(file_path)
    return ProcessedDocument(
        file_name=file_path.name,
        content=content,
        metadata={
            "file_type": ext.lstrip("."),
            "file_size": file_path.stat().st_size,
            "extracted_date": datetime.now().isoformat(),
        },
    )


def load_documents(paths: list[Path]) -> list[ProcessedDocument]:
    """Load files and every supported file under the given directories."""
    docs = []
    for path in paths:
        if not path.exists():
            raise FileNotFoundError(f"No such file or directory: {path}")
        files = sorted(path.rglob("*")) if path.is_dir() else [path]
        for file_path in files:
            if file_path.is_file() and not file_path.name.startswith("."):
                doc = load_document(file_path)
                if doc:
                    docs.append(doc)
    logger.info(f"Loaded {len(docs)} document(s)")
    return docs
