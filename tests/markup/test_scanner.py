"""
Тесты структурного сканера разметки.
"""

from docbind.markup.scanner import scan_paragraphs
from tests.infrastructure import w_paragraph, w_run

BOLD = "<w:rPr><w:b/></w:rPr>"


class TestMarkupScanner:

    def test_runs_and_properties(self):
        markup = w_paragraph(w_run("Hello", props=BOLD), w_run(" world", preserve=True))
        paragraphs = scan_paragraphs(markup)

        assert len(paragraphs) == 1
        first, second = paragraphs[0].runs
        assert first.text == "Hello"
        assert first.properties == BOLD
        assert second.text == " world"
        assert second.properties is None
        assert markup[first.start:first.end] == w_run("Hello", props=BOLD)

    def test_run_attributes_kept_in_open_tag(self):
        markup = w_paragraph(w_run("x", attrs=' w:rsidR="00A1"'))
        run = scan_paragraphs(markup)[0].runs[0]
        assert run.open_tag == '<w:r w:rsidR="00A1">'

    def test_run_without_text(self):
        markup = "<w:p><w:r><w:br/></w:r></w:p>"
        run = scan_paragraphs(markup)[0].runs[0]
        assert run.text is None
        assert run.residual == "<w:br/>"

    def test_multiple_text_nodes_and_residual(self):
        markup = "<w:p><w:r><w:t>a</w:t><w:tab/><w:t>b</w:t></w:r></w:p>"
        run = scan_paragraphs(markup)[0].runs[0]
        assert run.text == "ab"
        assert run.leaves == ["a", "b"]
        assert run.residual == "<w:tab/>"

    def test_paragraph_properties_ignored(self):
        markup = '<w:p><w:pPr><w:rPr><w:i/></w:rPr></w:pPr><w:r><w:t>x</w:t></w:r></w:p>'
        paragraphs = scan_paragraphs(markup)
        assert len(paragraphs) == 1
        assert paragraphs[0].runs[0].properties is None

    def test_runs_without_paragraph(self):
        """Фрагмент без абзаца собирается в неявный корневой абзац"""
        paragraphs = scan_paragraphs(w_run("a") + w_run("b"))
        assert len(paragraphs) == 1
        assert [r.text for r in paragraphs[0].runs] == ["a", "b"]

    def test_nested_paragraphs(self):
        """Надпись внутри прогона даёт отдельный вложенный абзац"""
        inner = w_paragraph(w_run("inside"))
        markup = w_paragraph(w_run("before"), "<w:r><w:drawing>" + inner + "</w:drawing></w:r>")
        paragraphs = scan_paragraphs(markup)

        assert len(paragraphs) == 2
        inner_p, outer_p = paragraphs
        assert [r.text for r in inner_p.runs] == ["inside"]
        assert outer_p.runs[0].text == "before"
        assert outer_p.runs[1].nested is True
        assert outer_p.runs[1].text is None

    def test_empty_markup(self):
        assert scan_paragraphs("") == []
        assert scan_paragraphs("<w:body/>") == []
