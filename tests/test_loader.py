"""Tests for loading documents from disk."""

import tempfile
from pathlib import Path

import pytest

from careermap.ingest.loader import load_document, load_documents


def test_load_text():
    with tempfile.NamedTemporaryFile(suffix=".txt", mode="w", delete=False) as f:
        f.write("Software Engineer at TechCorp (2022-2024)\n")
        f.flush()
        doc = load_document(Path(f.name))

    assert doc is not None
    assert doc.file_name == Path(f.name).name
    assert doc.content.startswith("Software Engineer")
    assert doc.metadata["file_type"] == "txt"
    assert doc.metadata["file_size"] > 0
    assert "extracted_date" in doc.metadata


def test_markdown_frontmatter_is_dropped():
    with tempfile.NamedTemporaryFile(suffix=".md", mode="w", delete=False) as f:
        f.write("---\ntitle: Journal\ntags: [career]\n---\n# March\n\nI want to learn Kubernetes.\n")
        f.flush()
        doc = load_document(Path(f.name))

    assert "title: Journal" not in doc.content
    assert "I want to learn Kubernetes." in doc.content


def test_html_is_flattened():
    with tempfile.NamedTemporaryFile(suffix=".html", mode="w", delete=False) as f:
        f.write(
            "<html><head><style>p {color: red}</style></head><body>"
            "<h2>Experience</h2><p>Data Analyst at Acme (2019-2021)</p>"
            "<script>var x = 1;</script></body></html>"
        )
        f.flush()
        doc = load_document(Path(f.name))

    lines = doc.content.splitlines()
    assert "Experience" in lines
    assert "Data Analyst at Acme (2019-2021)" in lines
    assert "color" not in doc.content
    assert "var x" not in doc.content


def test_unsupported_file():
    with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
        f.write(b"\x89PNG")
        f.flush()
        assert load_document(Path(f.name)) is None


def test_load_directory():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "b_resume.txt").write_text("Software Engineer at TechCorp")
        (root / "notes").mkdir()
        (root / "notes" / "a_journal.md").write_text("I want to become an architect")
        (root / ".hidden.txt").write_text("secret")
        (root / "photo.png").write_bytes(b"\x89PNG")

        docs = load_documents([root])

    assert [d.file_name for d in docs] == ["b_resume.txt", "a_journal.md"]


def test_missing_path():
    with pytest.raises(FileNotFoundError):
        load_documents([Path("/nonexistent/careermap/resume.txt")])
