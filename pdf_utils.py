import logging
import re
from dataclasses import dataclass

import fitz  # PyMuPDF

from errors import ExtractionError

logger = logging.getLogger(__name__)

HORIZONTAL_SPACE_RE = re.compile(r'[^\S\n]+')
SPACE_AFTER_NEWLINE_RE = re.compile(r'\n[^\S\n]+')
EXTRA_NEWLINES_RE = re.compile(r'\n{3,}')


@dataclass(frozen=True)
class PageTextItem:
    text: str
    y: float


def open_pdf(data):
    return fitz.open(stream=data, filetype='pdf')


def page_fragments(page):
    """Return the text spans of a page in extraction order.

    The vertical coordinate is the span's baseline origin, so every span
    set on the same baseline reports the same ``y``.
    """
    items = []
    for block in page.get_text('dict')['blocks']:
        if 'lines' not in block:
            continue
        for line in block['lines']:
            for span in line['spans']:
                # newlines belong to line reconstruction, not to the payload
                text = span['text'].replace('\r', '').replace('\n', '')
                if not text:
                    continue
                items.append(PageTextItem(text=text, y=span['origin'][1]))
    return items


def reconstruct_page(items):
    text = ''
    last_y = None
    for item in items:
        if last_y is not None and item.y != last_y:
            text += '\n'
        text += item.text
        last_y = item.y
    return text


def normalize_whitespace(text):
    text = HORIZONTAL_SPACE_RE.sub(' ', text)
    text = SPACE_AFTER_NEWLINE_RE.sub('\n', text)
    return EXTRA_NEWLINES_RE.sub('\n\n', text)


def join_pages(pages):
    """Concatenate per-page fragment lists into one normalized string."""
    complete_text = ''.join(reconstruct_page(items) + '\n\n' for items in pages)
    return normalize_whitespace(complete_text)


def extract_pdf_text(data):
    try:
        with open_pdf(data) as doc:
            logger.info('PDF loaded successfully with %d pages', doc.page_count)
            pages = []
            for page_num, page in enumerate(doc, start=1):
                pages.append(page_fragments(page))
                logger.debug('Processed page %d/%d', page_num, doc.page_count)
    except Exception as exc:
        logger.exception('Error extracting PDF text')
        raise ExtractionError(f'Failed to extract text from PDF: {exc}') from exc
    return join_pages(pages)


def extract_pdf_metadata(data):
    try:
        with open_pdf(data) as doc:
            info = {key: value for key, value in (doc.metadata or {}).items() if value}
            return {
                'numPages': doc.page_count,
                'info': info,
                'metadata': doc.get_xml_metadata() or None,
            }
    except Exception as exc:
        logger.exception('Error extracting PDF metadata')
        return {'error': str(exc)}


def extract_pdf_page_range(data, start_page=1, end_page=None):
    """Extract the text of pages ``start_page`` to ``end_page`` (1-based, inclusive).

    Out of range bounds are clamped to the document. Spans on a page are
    joined with single spaces and no line reconstruction or whitespace
    cleanup is applied.
    """
    try:
        with open_pdf(data) as doc:
            if not end_page or end_page > doc.page_count:
                end_page = doc.page_count
            if start_page < 1:
                start_page = 1

            complete_text = ''
            for page_num in range(start_page, end_page + 1):
                items = page_fragments(doc[page_num - 1])
                complete_text += ' '.join(item.text for item in items) + '\n\n'
    except Exception as exc:
        logger.exception('Error extracting PDF page range')
        raise ExtractionError(f'Failed to extract page range from PDF: {exc}') from exc
    return complete_text
