import logging

import pytest

from tests.infrastructure.docx_utils import make_docx, w_document, w_paragraph, w_run
from tests.infrastructure.file_utils import write


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Переменные окружения и обработчики логов docbind не должны протекать между тестами."""
    monkeypatch.delenv("DOCBIND_COMPANY_NAME", raising=False)
    monkeypatch.delenv("DOCBIND_DEBUG", raising=False)
    yield
    logger = logging.getLogger("docbind")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_data():
    return {
        "client": {"name": "alice smith", "vat": "12345"},
        "company": "Acme & Sons",
        "members": [
            {"name": "Alice", "role": "lead"},
            {"name": "Bob", "role": "dev"},
        ],
        "rent": "1500",
        "agent": False,
    }


@pytest.fixture
def docx_template(tmp_path):
    """Пакет, в котором плейсхолдер разорван между прогонами."""
    xml = w_document(
        w_paragraph(w_run("Client: "), w_run("{{client."), w_run("name}}")),
        w_paragraph(w_run("<<add_more members>>{{name}};<<end:add_more>>")),
    )
    return write(tmp_path / "template.docx", make_docx(xml))
