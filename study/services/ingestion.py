"""
Document Ingestion Pipeline Service.

    Uploaded file → Extractor → Raw Text (form-feed page breaks) → Chunker → Database

Extractors turn PDF, DOCX and PPTX uploads into one string in which
pages (or slides) are separated by PAGE_BREAK. The chunker then cuts
that text back into page-aligned chunks for retrieval.
"""

import io
import logging
import os
from typing import List, NamedTuple

import fitz  # PyMuPDF
from django.db import transaction
from docx import Document as DocxDocument
from pptx import Presentation

from study.models import Chunk, Document


logger = logging.getLogger(__name__)

# Delimiter placed between pages by every extractor
PAGE_BREAK = '\f'

SUPPORTED_EXTENSIONS = ('.pdf', '.docx', '.pptx')


class DocumentProcessingError(Exception):
    """Raised when document processing fails (corrupted file, unsupported format, etc.)."""
    pass


class PageChunk(NamedTuple):
    text: str
    page_number: int
    chunk_index: int


def chunk_text(raw_text: str) -> List[PageChunk]:
    """
    Split extracted text into page-aligned chunks.

    Pages are cut at PAGE_BREAK and trimmed; blank pages are dropped.
    `page_number` is the 1-based position of the page in the split, so a
    dropped page leaves a gap in page numbers. `chunk_index` counts only
    the chunks that were kept.

    Args:
        raw_text: Text as produced by one of the extractors.

    Returns:
        List of PageChunk in document order (empty for empty input).
    """
    if not raw_text:
        return []

    chunks = []
    for position, page_text in enumerate(raw_text.split(PAGE_BREAK), start=1):
        text = page_text.strip()
        if not text:
            continue
        chunks.append(PageChunk(text=text, page_number=position, chunk_index=len(chunks)))

    return chunks


def extract_text_from_pdf(data: bytes) -> str:
    """
    Extract text from PDF bytes, one page per PAGE_BREAK-separated segment.

    Raises:
        DocumentProcessingError: If the file cannot be opened or is corrupted.
    """
    try:
        pdf_doc = fitz.open(stream=data, filetype='pdf')
    except Exception as e:
        error_msg = f"Failed to open PDF: {str(e)}"
        logger.error(error_msg)
        raise DocumentProcessingError(error_msg) from e

    if len(pdf_doc) == 0:
        pdf_doc.close()
        raise DocumentProcessingError("Failed to open PDF: document has no pages")

    try:
        pages = [pdf_doc[page_num].get_text() for page_num in range(len(pdf_doc))]
    finally:
        pdf_doc.close()

    logger.debug(f"Extracted {len(pages)} PDF pages")
    return PAGE_BREAK.join(pages)


def extract_text_from_docx(data: bytes) -> str:
    """
    Extract text from a DOCX file.

    Word files carry no reliable pagination, so the whole document
    (paragraphs, then table cells) becomes a single page.

    Raises:
        DocumentProcessingError: If the file cannot be opened or is corrupted.
    """
    try:
        doc = DocxDocument(io.BytesIO(data))

        paragraphs = []
        for para in doc.paragraphs:
            if para.text.strip():
                paragraphs.append(para.text)

        for table in doc.tables:
            for row in table.rows:
                for cell in row.cells:
                    if cell.text.strip():
                        paragraphs.append(cell.text)

        return '\n'.join(paragraphs)

    except Exception as e:
        error_msg = f"Failed to extract text from DOCX: {str(e)}"
        logger.error(error_msg)
        raise DocumentProcessingError(error_msg) from e


def _extract_text_from_shape(shape) -> List[str]:
    """
    Recursively extract text from a shape, handling nested groups.

    Args:
        shape: A PowerPoint shape object.

    Returns:
        List of text strings extracted from the shape.
    """
    text_parts = []

    if getattr(shape, "has_text_frame", False) and shape.text_frame:
        for paragraph in shape.text_frame.paragraphs:
            para_text = paragraph.text.strip()
            if para_text:
                text_parts.append(para_text)

    if getattr(shape, "has_table", False) and shape.has_table:
        for row in shape.table.rows:
            for cell in row.cells:
                cell_text = cell.text.strip()
                if cell_text:
                    text_parts.append(cell_text)

    # Group shapes
    if hasattr(shape, "shapes"):
        for sub_shape in shape.shapes:
            text_parts.extend(_extract_text_from_shape(sub_shape))

    return text_parts


def extract_text_from_pptx(data: bytes) -> str:
    """
    Extract text from a PPTX file, one slide per page.

    Slides without text still produce an (empty) page so that page
    numbers keep matching slide numbers.

    Raises:
        DocumentProcessingError: If the file cannot be opened or is corrupted.
    """
    try:
        prs = Presentation(io.BytesIO(data))
    except Exception as e:
        error_msg = f"Failed to extract text from PPTX: {str(e)}"
        logger.error(error_msg, exc_info=True)
        raise DocumentProcessingError(error_msg) from e

    slides = []
    for slide_num, slide in enumerate(prs.slides, start=1):
        slide_text_parts = []
        for shape_idx, shape in enumerate(slide.shapes):
            try:
                slide_text_parts.extend(_extract_text_from_shape(shape))
            except Exception as e:
                # One broken shape shouldn't drop the whole slide
                logger.warning(
                    f"Error extracting text from shape {shape_idx} on slide {slide_num}: {e}"
                )
        slides.append('\n'.join(slide_text_parts))

    logger.info(f"PPTX extraction complete: {len(slides)} slides")
    return PAGE_BREAK.join(slides)


def extract_text(file_name: str, data: bytes) -> str:
    """
    Dispatch to the extractor matching the file extension.

    Raises:
        DocumentProcessingError: For unsupported formats or unreadable files.
    """
    file_extension = os.path.splitext(file_name)[1].lower()

    if file_extension == '.pdf':
        return extract_text_from_pdf(data)
    if file_extension == '.docx':
        return extract_text_from_docx(data)
    if file_extension == '.pptx':
        return extract_text_from_pptx(data)

    raise DocumentProcessingError(
        f"Unsupported file format: {file_extension or file_name}. "
        f"Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
    )


def create_document(original_name: str, content: str, file=None, is_sample: bool = False) -> Document:
    """
    Persist a Document together with its chunks in one transaction.

    Args:
        original_name: Name shown to the student.
        content: Extracted text with PAGE_BREAK delimiters.
        file: Optional uploaded file to store alongside the text.
        is_sample: Marks bundled sample chapters.

    Returns:
        The saved Document.
    """
    chunks = chunk_text(content)

    with transaction.atomic():
        document = Document(
            original_name=original_name,
            content=content,
            is_sample=is_sample,
        )
        if file is not None:
            document.file = file
        document.save()

        Chunk.objects.bulk_create([
            Chunk(
                document=document,
                text=chunk.text,
                page_number=chunk.page_number,
                chunk_index=chunk.chunk_index,
            )
            for chunk in chunks
        ])

    logger.info(
        f"Document stored: {document.original_name} (ID: {document.pk}), "
        f"{len(chunks)} chunks"
    )
    return document


def ingest_upload(uploaded_file) -> Document:
    """
    Extract, chunk and store an uploaded file.

    This is the main entry point for the ingestion pipeline. Nothing is
    written when extraction fails.

    Raises:
        DocumentProcessingError: If the file cannot be processed.
    """
    file_name = uploaded_file.name
    logger.info(f"Starting document processing: {file_name}")

    uploaded_file.seek(0)
    data = uploaded_file.read()
    content = extract_text(file_name, data)
    uploaded_file.seek(0)

    return create_document(original_name=file_name, content=content, file=uploaded_file)
