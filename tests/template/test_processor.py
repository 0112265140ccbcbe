"""
Тесты процессора шаблонов: полное разрешение и отдельные проходы.
"""

import pytest

from docbind.template import (
    Constructs,
    TemplateProcessor,
    replace_simple_placeholder,
    resolve_conditionals,
    resolve_repeaters,
    resolve_template,
    resolve_variables,
)


class TestVariables:

    def test_undefined_path_is_blank(self):
        assert resolve_variables("[{{missing.path}}]", {}) == "[]"

    def test_value_is_escaped(self):
        assert resolve_variables("{{x}}", {"x": "V & <W>"}) == "V &amp; &lt;W&gt;"

    def test_simple_round_trip(self):
        assert resolve_variables("{{x}}", {"x": "V"}) == "V"

    @pytest.mark.parametrize("token, expected", [
        ("{{uc.name}}", "HELLO WORLD"),
        ("{{tc.name}}", "Hello World"),
        ("{{fc.name}}", "Hello world"),
        ("{{lc.name}}", "hello world"),
        ("{{ls.name}}", " hello world"),
        ("{{name | ucfirst}}", "Hello world"),
    ])
    def test_case_prefixes(self, token, expected):
        assert resolve_variables(token, {"name": "hello world"}) == expected

    def test_empty_brackets_outside_repeater(self):
        data = {"members": [{"name": "Alice"}, {"name": "Bob"}]}
        assert resolve_variables("{{members[].name}}", data) == "Alice"

    def test_values_are_not_rescanned(self):
        """Подставленное значение не разбирается как шаблон"""
        assert resolve_template("{{x}}", {"x": "{{y}}", "y": "no"}) == "{{y}}"
        data = {"x": "[[a]]hidden[[end:a]]", "a": False}
        assert resolve_template("{{x}}", data) == "[[a]]hidden[[end:a]]"

    def test_case_prefixes_keep_entities(self):
        """Экранирование после префиксов: сущности не меняют регистр"""
        data = {"company": "acme & co"}
        assert resolve_variables("{{uc.company}}", data) == "ACME &amp; CO"
        assert resolve_variables("{{tc.company}}", data) == "Acme &amp; Co"
        assert resolve_variables("{{fc.company | uppercase}}", data) == "Acme &amp; co"


class TestRepeaters:

    def test_order_preserved(self):
        data = {"members": [{"name": "Alice"}, {"name": "Bob"}]}
        template = "<<add_more members>>{{name}};<<end:add_more>>"
        assert resolve_repeaters(template, data) == "Alice;Bob;"

    def test_count1_single(self):
        template = "<<add_more items>>[[count1]]Single item[[end:count1]]{{name}}<<end:add_more>>"
        assert resolve_template(template, {"items": [{"name": "Only"}]}) == "Single itemOnly"

    def test_count1_many(self):
        template = "<<add_more items>>[[count1]]Single item[[end:count1]]{{name}}<<end:add_more>>"
        data = {"items": [{"name": "First"}, {"name": "Second"}]}
        assert resolve_template(template, data) == "FirstSecond"

    def test_common_first_only(self):
        template = "<<add_more items>>[[common]]First: [[end:common]]{{name}}<<end:add_more>>"
        data = {"items": [{"name": "A"}, {"name": "B"}, {"name": "C"}]}
        assert resolve_template(template, data) == "First:ABC"

    def test_count2_always_renders(self):
        template = "<<add_more items>>[[count2]]+[[end:count2]]<<end:add_more>>"
        assert resolve_template(template, {"items": [1]}) == "+"

    def test_not_an_array_removes_block(self):
        template = "a<<add_more items>>{{name}}<<end:add_more>>b"
        assert resolve_template(template, {"items": "oops"}) == "ab"
        assert resolve_template(template, {}) == "ab"

    def test_empty_array(self):
        assert resolve_template("<<add_more xs>>x<<end:add_more>>", {"xs": []}) == ""

    def test_parent_scope_visible(self):
        template = "<<add_more items>>{{name}}@{{company}} <<end:add_more>>"
        data = {"company": "Acme", "items": [{"name": "A"}, {"name": "B"}]}
        assert resolve_template(template, data) == "A@Acme B@Acme "

    def test_scalar_items(self):
        template = "<<add_more tags>>#{{value}}<<end:add_more>>"
        assert resolve_template(template, {"tags": ["a", "b"]}) == "#a#b"

    def test_nested_repeaters(self):
        template = (
            "<<add_more groups>>{{title}}:"
            "<<add_more items>>{{name}},<<end:add_more>>"
            "|<<end:add_more>>"
        )
        data = {"groups": [
            {"title": "G1", "items": [{"name": "a"}, {"name": "b"}]},
            {"title": "G2", "items": [{"name": "c"}]},
        ]}
        assert resolve_template(template, data) == "G1:a,b,|G2:c,|"

    def test_escaped_markers(self):
        template = "&lt;&lt;add_more xs&gt;&gt;{{value}}&lt;&lt;end:add_more&gt;&gt;"
        assert resolve_template(template, {"xs": [1, 2]}) == "12"

    def test_data_not_mutated(self):
        data = {"items": [{"name": "A"}]}
        resolve_template("<<add_more items>>{{name}}<<end:add_more>>", data)
        assert data == {"items": [{"name": "A"}]}


class TestConditionals:

    @pytest.mark.parametrize("a, b, expected", [
        (True, False, ""),
        (True, True, "Both true"),
        (False, True, ""),
    ])
    def test_and(self, a, b, expected):
        template = "[[a and b]]Both true[[end:a and b]]"
        assert resolve_conditionals(template, {"a": a, "b": b}) == expected

    @pytest.mark.parametrize("a, b, expected", [
        (False, False, ""),
        (True, False, "Either"),
        (False, True, "Either"),
        (True, True, "Either"),
    ])
    def test_or(self, a, b, expected):
        template = "[[a or b]]Either[[end:a or b]]"
        assert resolve_conditionals(template, {"a": a, "b": b}) == expected

    def test_negation_falls_back_to_base_path(self):
        template = "[[agent.no]]No agent[[end:agent.no]]"
        assert resolve_template(template, {"agent": {"yes": True}}) == ""
        assert resolve_template(template, {}) == "No agent"

    def test_negation_literal_key(self):
        template = "[[agent.no]]No agent[[end:agent.no]]"
        assert resolve_template(template, {"agent.no": False}) == ""
        assert resolve_template(template, {"agent.no": True, "agent": True}) == "No agent"

    def test_comparison(self):
        template = "[[rent > deposit]]High[[end:rent > deposit]]"
        assert resolve_template(template, {"rent": "1500", "deposit": 1000}) == "High"
        assert resolve_template(template, {"rent": "500", "deposit": 1000}) == ""

    def test_comparison_sides_are_paths(self):
        """Число справа ищется как ключ данных, а не как литерал"""
        template = "[[count > 2]]many[[end:count > 2]]"
        assert resolve_template(template, {"count": 3}) == ""
        assert resolve_template(template, {"count": 3, "2": 1}) == "many"

    def test_trailing_whitespace_before_close_dropped(self):
        assert resolve_template("[[a]]Yes  \n[[end:a]]!", {"a": True}) == "Yes!"

    def test_empty_collections_are_truthy(self):
        assert resolve_template("[[xs]]shown[[end:xs]]", {"xs": []}) == "shown"

    def test_many_unterminated_markers(self):
        template = "[[x]] " * 200 + "[[x]]shown[[end:x]]"
        assert resolve_template(template, {"x": True}) == "[[x]] " * 200 + "shown"

    def test_mismatched_close_is_literal(self):
        template = "[[a]]text[[end:b]]"
        assert resolve_template(template, {"a": True}) == "[[a]]text[[end:b]]"

    def test_variables_inside_body(self):
        template = "[[client]]Dear {{client.name}}[[end:client]]"
        assert resolve_template(template, {"client": {"name": "Ann"}}) == "Dear Ann"


class TestPasses:

    def setup_method(self):
        self.data = {"a": True, "name": "Ann", "xs": [{"name": "X"}]}

    def test_variables_pass_keeps_blocks(self):
        template = "[[a]]{{name}}[[end:a]]"
        assert resolve_variables(template, self.data) == "[[a]]Ann[[end:a]]"

    def test_variables_pass_leaves_repeater_verbatim(self):
        template = "<<add_more xs>>{{name}}<<end:add_more>>"
        assert resolve_variables(template, self.data) == template

    def test_conditionals_pass_keeps_variables(self):
        assert resolve_conditionals("[[a]]{{missing}}[[end:a]]{{name}}", self.data) == "{{name}}"

    def test_repeaters_pass_resolves_body(self):
        template = "{{name}}<<add_more xs>>{{name}}<<end:add_more>>"
        assert resolve_repeaters(template, self.data) == "{{name}}X"

    def test_constructs_flag(self):
        processor = TemplateProcessor()
        result = processor.process_text("{{name}}", self.data, Constructs.REPEATERS | Constructs.CONDITIONALS)
        assert result == "{{name}}"


class TestSimplePlaceholder:

    def test_replace(self):
        text = "By {{ company_name }} for {{company_name}}, {{other}}"
        assert replace_simple_placeholder(text, "company_name", "A & B") == "By A &amp; B for A &amp; B, {{other}}"

    def test_prefixed_token_untouched(self):
        assert replace_simple_placeholder("{{uc.company_name}}", "company_name", "X") == "{{uc.company_name}}"
