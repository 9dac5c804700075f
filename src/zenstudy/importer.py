"""Import PDF and image documents into a notebook."""
from pathlib import Path

from zenstudy.models import Document, generate_id

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp")


def detect_kind(file_path: str) -> str:
    suffix = Path(file_path).suffix.lower()
    if suffix == ".pdf":
        return "pdf"
    if suffix in IMAGE_SUFFIXES:
        return "image"
    raise ValueError(f"Unsupported document type: {suffix or file_path}")


def pdf_size(file_path: str) -> tuple:
    """Widest page and stacked height of all pages, in PDF points."""
    from PyPDF2 import PdfReader
    reader = PdfReader(file_path)
    width = 0.0
    height = 0.0
    for page in reader.pages:
        width = max(width, float(page.mediabox.width))
        height += float(page.mediabox.height)
    return width, height


def image_size(file_path: str) -> tuple:
    from PIL import Image
    with Image.open(file_path) as img:
        return float(img.width), float(img.height)


def native_size(file_path: str, kind: str) -> tuple:
    if kind == "pdf":
        return pdf_size(file_path)
    return image_size(file_path)


def import_document(notebook, file_path: str) -> Document:
    """Add a document to the front of the notebook's list."""
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(file_path)
    kind = detect_kind(file_path)
    width, height = native_size(file_path, kind)
    doc = Document(
        id=generate_id(),
        name=path.name,
        kind=kind,
        url=path.resolve().as_uri(),
        width=width,
        height=height,
    )
    notebook.documents.insert(0, doc)
    return doc


def delete_document(notebook, document_id: str) -> bool:
    """Remove a document and, with it, every annotation it owns."""
    before = len(notebook.documents)
    notebook.documents = [d for d in notebook.documents if d.id != document_id]
    return len(notebook.documents) != before
