from pathlib import Path

SUPPORTED_SUFFIXES = (".pdf", ".txt", ".md")


def extract_text(file_path: str | Path) -> str:
    """Extract plain text from a resume file (PDF, TXT, MD)."""
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return _parse_pdf(path)
    elif suffix in (".txt", ".md"):
        return path.read_text(encoding="utf-8")
    else:
        raise ValueError(f"Unsupported file format: {path.suffix or '(none)'}. Please upload a PDF or text file")


def _parse_pdf(path: Path) -> str:
    import fitz  # pymupdf

    text = []
    with fitz.open(str(path)) as doc:
        for page in doc:
            text.append(page.get_text())
    return "\n\n".join(text)
