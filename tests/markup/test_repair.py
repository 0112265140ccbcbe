"""
Тесты исправления плейсхолдеров, разорванных между прогонами.
"""

from docbind.markup.repair import PLACEHOLDER_DELIMITERS, build_run, repair_fragments
from tests.infrastructure import w_document, w_paragraph, w_run

BOLD = "<w:rPr><w:b/></w:rPr>"


class TestFragmentRepair:

    def test_clean_input_unchanged(self):
        markup = w_document(w_paragraph(w_run("Hello "), w_run("{{name}}", props=BOLD)))
        assert repair_fragments(markup) == markup

    def test_split_placeholder_merged(self):
        markup = w_paragraph(w_run("{{client_", props=BOLD), w_run("name}}"))
        assert repair_fragments(markup) == w_paragraph(w_run("{{client_name}}", props=BOLD))

    def test_properties_from_first_non_empty(self):
        markup = w_paragraph(w_run("{{a"), w_run("b}}", props=BOLD))
        assert repair_fragments(markup) == w_paragraph(w_run("{{ab}}", props=BOLD))

    def test_three_runs_two_placeholders(self):
        markup = w_paragraph(w_run("{{new_re"), w_run("nt}} {{new_rent_frequency"), w_run("}}"))
        repaired = repair_fragments(markup)

        assert "{{new_rent}}" in repaired
        assert "{{new_rent_frequency}}" in repaired
        assert "{{new_re<" not in repaired
        assert ">nt}}" not in repaired
        assert repaired == w_paragraph(w_run("{{new_rent}} {{new_rent_frequency}}"))

    def test_bare_delimiter_runs(self):
        """Прогон из одного `{{` и следующий прогон из одного `}}` склеиваются"""
        markup = w_paragraph(w_run("{{"), w_run("}}"))
        assert repair_fragments(markup) == w_paragraph(w_run("{{}}"))

        markup = w_paragraph(w_run("{{"), w_run("name"), w_run("}}"))
        assert repair_fragments(markup) == w_paragraph(w_run("{{name}}"))

    def test_independent_splits_in_one_paragraph(self):
        """Каждый разорванный плейсхолдер склеивается отдельно"""
        markup = w_paragraph(w_run("{{a"), w_run("}}"), w_run("{{b"), w_run("}}"))
        assert repair_fragments(markup) == w_paragraph(w_run("{{a}}"), w_run("{{b}}"))

    def test_independent_splits_with_text_between(self):
        markup = w_paragraph(w_run("{{a"), w_run("}} and "), w_run("text"), w_run("{{b"), w_run("}}."))
        expected = w_paragraph(w_run("{{a}} and ", preserve=True), w_run("text"), w_run("{{b}}."))
        assert repair_fragments(markup) == expected

    def test_idempotent(self):
        markup = w_document(
            w_paragraph(w_run("Dear "), w_run("{{na"), w_run("me}}, ")),
            w_paragraph(w_run("[[age"), w_run("nt]]x[[end:agent]]")),
        )
        once = repair_fragments(markup)
        assert repair_fragments(once) == once

    def test_whitespace_preserved(self):
        markup = w_paragraph(w_run("Dear "), w_run("{{na"), w_run("me}} "))
        expected = w_paragraph(w_run("Dear "), w_run("{{name}} ", preserve=True))
        assert repair_fragments(markup) == expected

    def test_unterminated_left_alone(self):
        markup = w_paragraph(w_run("{{never"), w_run(" closed"))
        assert repair_fragments(markup) == markup

    def test_no_merge_across_paragraphs(self):
        markup = w_paragraph(w_run("{{a")) + w_paragraph(w_run("b}}"))
        assert repair_fragments(markup) == markup

    def test_condition_markers(self):
        markup = w_paragraph(w_run("[[age"), w_run("nt]]"))
        assert repair_fragments(markup) == w_paragraph(w_run("[[agent]]"))

    def test_custom_delimiters(self):
        markup = w_paragraph(w_run("[[age"), w_run("nt]]"))
        assert repair_fragments(markup, [PLACEHOLDER_DELIMITERS]) == markup

    def test_runs_without_text_skipped(self):
        """Прогон без текста остаётся на месте и не прерывает слияние"""
        markup = w_paragraph(w_run("{{a"), "<w:r><w:tab/></w:r>", w_run("b}}"))
        expected = w_paragraph(w_run("{{ab}}"), "<w:r><w:tab/></w:r>")
        assert repair_fragments(markup) == expected

    def test_residual_content_kept(self):
        markup = w_paragraph(w_run("{{a"), "<w:r><w:t>b}}</w:t><w:tab/></w:r>")
        assert repair_fragments(markup) == w_paragraph("<w:r><w:t>{{ab}}</w:t><w:tab/></w:r>")

    def test_first_run_attributes_kept(self):
        markup = w_paragraph(w_run("{{a", attrs=' w:rsidR="00A1"'), w_run("b}}", attrs=' w:rsidR="00B2"'))
        assert repair_fragments(markup) == w_paragraph(w_run("{{ab}}", attrs=' w:rsidR="00A1"'))

    def test_surrounding_markup_untouched(self):
        doc = w_document(
            '<w:p><w:pPr><w:jc w:val="center"/></w:pPr>' + w_run("{{x") + w_run("}}") + "</w:p>",
            w_paragraph(w_run("tail")),
        )
        expected = w_document(
            '<w:p><w:pPr><w:jc w:val="center"/></w:pPr>' + w_run("{{x}}") + "</w:p>",
            w_paragraph(w_run("tail")),
        )
        assert repair_fragments(doc) == expected


class TestBuildRun:

    def test_plain(self):
        assert build_run("<w:r>", None, "abc") == "<w:r><w:t>abc</w:t></w:r>"

    def test_preserve_and_residual(self):
        assert build_run("<w:r>", BOLD, " a", "<w:br/>") == (
            '<w:r><w:rPr><w:b/></w:rPr><w:t xml:space="preserve"> a</w:t><w:br/></w:r>'
        )
