import asyncio
import logging

import docx
from docx.table import Table

from errors import ExtractionError, UploadError
from pdf_utils import extract_pdf_page_range, extract_pdf_text

logger = logging.getLogger(__name__)

PDF_TYPE = 'application/pdf'
TEXT_TYPE = 'text/plain'


def is_word_type(mimetype):
    return 'wordprocessingml.document' in mimetype or 'msword' in mimetype


def _table_texts(table):
    texts = []
    for row in table.rows:
        seen = set()
        for cell in row.cells:
            # a merged cell is returned once per grid column it spans
            if cell._tc in seen:
                continue
            seen.add(cell._tc)
            texts.append(cell.text)
    return texts


def extract_docx_text(path):
    try:
        document = docx.Document(path)
        parts = []
        for block in document.iter_inner_content():
            if isinstance(block, Table):
                parts.extend(_table_texts(block))
            else:
                parts.append(block.text)
    except Exception as exc:
        logger.exception('Error extracting DOCX text')
        raise ExtractionError('Failed to extract text from DOCX') from exc
    return '\n\n'.join(part for part in parts if part.strip())


def extract_txt_text(path):
    with open(path, 'rb') as f:
        return f.read().decode('utf-8', errors='replace')


def read_bytes(path):
    with open(path, 'rb') as f:
        return f.read()


def truncate_content(content, max_length=100000):
    return content if len(content) <= max_length else content[:max_length]


def _extract(path, mimetype, page_range, data):
    if mimetype == PDF_TYPE:
        if data is None:
            data = read_bytes(path)
        if page_range is not None:
            return extract_pdf_page_range(data, *page_range)
        return extract_pdf_text(data)
    if is_word_type(mimetype):
        return extract_docx_text(path)
    if mimetype == TEXT_TYPE:
        return extract_txt_text(path)
    raise UploadError(f'Unsupported file type: {mimetype}')


async def extract_text(path, mimetype, page_range=None, data=None):
    """Extract the text of a stored upload according to its MIME type.

    ``page_range`` is an optional ``(start_page, end_page)`` pair and only
    applies to PDF files. PDF ``data`` already read by the caller is used
    instead of reading ``path`` again.
    """
    return await asyncio.to_thread(_extract, path, mimetype, page_range, data)
