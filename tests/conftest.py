from types import SimpleNamespace

import docx
import fitz
import pytest

from config import Settings
from generator import QuestionGenerator

SAMPLE_REPLY = """Here are your questions:
[
  {"question": "What is the capital of France?", "options": ["Paris", "Rome", "Berlin", "Madrid"], "correctAnswer": "Paris", "explanation": "Paris is the capital."},
  {"question": "What do plants absorb?", "options": ["Oxygen", "CO2", "Helium", "Neon"], "correctAnswer": "CO2", "explanation": "Plants take in carbon dioxide."}
]
Good luck!"""


def make_pdf(pages, metadata=None):
    """Build a PDF in memory. ``pages`` is a list of ``[(x, y, text), ...]``."""
    doc = fitz.open()
    for fragments in pages:
        page = doc.new_page()
        for x, y, text in fragments:
            page.insert_text((x, y), text, fontsize=11)
    if metadata:
        doc.set_metadata(metadata)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(path, paragraphs, table_cells=()):
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    if table_cells:
        table = document.add_table(rows=1, cols=len(table_cells))
        for cell, text in zip(table.rows[0].cells, table_cells):
            cell.text = text
    document.save(str(path))
    return path


class FakeModels:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents):
        self.calls.append({'model': model, 'contents': contents})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.reply)


class FakeClient:
    def __init__(self, reply=SAMPLE_REPLY, error=None):
        self.models = FakeModels(reply, error)
        self.aio = SimpleNamespace(models=self.models)


@pytest.fixture
def settings(tmp_path):
    return Settings(api_key='test-key', upload_folder=str(tmp_path / 'uploads'))


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def generator(settings, fake_client):
    return QuestionGenerator(settings, client=fake_client)
