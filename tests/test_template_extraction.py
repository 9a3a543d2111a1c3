"""Tests for template marker extraction."""

import pytest
from jinja2 import nodes

from potgen.exceptions import CallValidationError, ConfigurationError, ParseError
from potgen.extractors import get_extractors, run_extractor
from potgen.extractors.template import (
    find_template_calls,
    make_environment,
    make_template_extractor,
    make_template_record,
    parse_template,
)


def extract(source: str, filepath: str = "page.html"):
    return run_extractor(make_template_extractor(), filepath, source)


def first_call(source: str) -> nodes.Call:
    return next(iter(find_template_calls(parse_template(source))))


class TestParseTemplate:
    """Tests for the template parser adapter."""

    def test_parses_valid_template(self) -> None:
        """A valid template yields a Jinja AST."""
        tree = parse_template("<p>{{ _('Hi') }}</p>")
        assert isinstance(tree, nodes.Template)

    def test_syntax_error_has_line(self) -> None:
        """Syntax errors carry the offending line."""
        source = "<p>ok</p>\n{{ _('x') }}\n{% endif %}\n"
        with pytest.raises(ParseError) as exc_info:
            parse_template(source)
        assert exc_info.value.line == 3
        assert exc_info.value.column == 1

    def test_syntax_error_column_points_at_tag(self) -> None:
        """The column is the start of the first tag on the failing line."""
        source = "<ul>\n  <li>{% endfor %}</li>\n"
        with pytest.raises(ParseError) as exc_info:
            parse_template(source)
        assert exc_info.value.line == 2
        assert exc_info.value.column == 7

    def test_extensions_enable_extra_tags(self) -> None:
        """Jinja extensions can add tags to the grammar."""
        source = "{% do items.append(_('Added')) %}"
        with pytest.raises(ParseError):
            parse_template(source)

        tree = parse_template(source, make_environment(["jinja2.ext.do"]))
        calls = list(find_template_calls(tree))
        assert any(isinstance(c.node, nodes.Name) and c.node.name == "_" for c in calls)


class TestMakeEnvironment:
    """Tests for the Jinja environment factory."""

    def test_unknown_extension_module(self) -> None:
        """A missing extension module is a configuration problem."""
        with pytest.raises(ConfigurationError, match="Cannot load template extension"):
            make_environment(["no.such.ext"])

    def test_unknown_extension_attribute(self) -> None:
        with pytest.raises(ConfigurationError, match="Cannot load template extension"):
            make_template_extractor(["jinja2.ext.nothing_here"])

    def test_extractor_reuses_one_environment(self) -> None:
        """The extractor parses with the extensions it was built with."""
        extractor = make_template_extractor(["jinja2.ext.do"])
        result = run_extractor(extractor, "page.html", "{% do items.append(_('Added')) %}")
        assert [r.msgid for r in result.records] == ["Added"]
        assert result.diagnostics == []


class TestFindTemplateCalls:
    """Tests for locating call nodes."""

    def test_finds_calls_in_document_order(self) -> None:
        """Calls are returned in the order they appear."""
        source = "{{ _('a') }}{% if x %}{{ f(_('b')) }}{% endif %}{{ _('c') }}"
        calls = list(find_template_calls(parse_template(source)))
        names = [c.node.name for c in calls]
        assert names == ["_", "f", "_", "_"]

    def test_finds_calls_inside_filters(self) -> None:
        """Calls nested in filter expressions are found."""
        calls = list(find_template_calls(parse_template("{{ _('x')|upper }}")))
        assert len(calls) == 1

    def test_deep_expression_chain(self) -> None:
        """Long operator chains are walked without recursion."""
        chain = " + ".join(["x"] * 3000)
        source = "{{ " + chain + " }}\n{{ _('ok') }}"
        calls = list(find_template_calls(parse_template(source)))
        assert len(calls) == 1
        assert calls[0].lineno == 2


class TestMakeTemplateRecord:
    """Tests for marker validation and normalization."""

    def test_singular_marker(self) -> None:
        """_('text') becomes a singular record."""
        record = make_template_record(first_call("\n{{ _('Save') }}"), "page.html")
        assert record is not None
        assert record.msgid == "Save"
        assert record.msgid_plural is None
        assert [(loc.filepath, loc.lineno) for loc in record.locations] == [("page.html", 2)]

    def test_plural_marker(self) -> None:
        """_plural('one', 'many', n) becomes a plural record."""
        record = make_template_record(
            first_call("{{ _plural('1 item', '{n} items', n) }}"), "page.html"
        )
        assert record is not None
        assert record.msgid == "1 item"
        assert record.msgid_plural == "{n} items"

    def test_other_calls_are_ignored(self) -> None:
        """Non-marker calls produce no record and no error."""
        assert make_template_record(first_call("{{ gettext('x') }}"), "p.html") is None
        assert make_template_record(first_call("{{ obj._('x') }}"), "p.html") is None

    def test_empty_call(self) -> None:
        """_() is rejected."""
        with pytest.raises(CallValidationError, match="Empty gettext call") as exc_info:
            make_template_record(first_call("{{ _() }}"), "p.html")
        assert exc_info.value.line == 1

    def test_non_literal_singular(self) -> None:
        """A variable argument is rejected."""
        with pytest.raises(CallValidationError, match="Cannot localize non-literal"):
            make_template_record(first_call("{{ _(title) }}"), "p.html")

    def test_concatenation_is_non_literal(self) -> None:
        """String concatenation is not evaluated."""
        with pytest.raises(CallValidationError, match="Cannot localize non-literal"):
            make_template_record(first_call("{{ _('a' ~ 'b') }}"), "p.html")

    def test_number_is_non_literal(self) -> None:
        """Only string constants are literals."""
        with pytest.raises(CallValidationError, match="Cannot localize non-literal"):
            make_template_record(first_call("{{ _(5) }}"), "p.html")

    def test_plural_needs_three_arguments(self) -> None:
        """The count argument is required for template plurals."""
        with pytest.raises(CallValidationError, match="Incomplete plural gettext call"):
            make_template_record(first_call("{{ _plural('a', 'b') }}"), "p.html")

    def test_plural_non_literal(self) -> None:
        """Both message arguments must be literals."""
        with pytest.raises(CallValidationError, match="Cannot localize non-literal"):
            make_template_record(first_call("{{ _plural('a', other, n) }}"), "p.html")


class TestTemplatePipeline:
    """Tests for whole-file template extraction."""

    def test_save_scenario(self) -> None:
        """{{ _("Save") }} yields one singular record."""
        result = extract('{{ _("Save") }}')
        assert len(result.records) == 1
        assert result.records[0].msgid == "Save"
        assert result.records[0].msgid_plural is None
        assert result.diagnostics == []

    def test_sample_file(self, sample_template_file) -> None:
        """Every marker in the sample is extracted in document order."""
        result = extract(sample_template_file.read_text(), "index.html")
        assert [r.msgid for r in result.records] == ["Dashboard", "Save", "One file", "Save"]
        assert [r.locations[0].lineno for r in result.records] == [2, 4, 6, 7]

    def test_bad_call_is_skipped(self) -> None:
        """A rejected call does not stop the rest of the file."""
        result = extract("{{ _(name) }}\n{{ _('Kept') }}")
        assert [r.msgid for r in result.records] == ["Kept"]
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.kind == "validation"
        assert diagnostic.severity == "warning"
        assert str(diagnostic) == "page.html:1: Cannot localize non-literal"

    def test_parse_error_drops_file(self) -> None:
        """An unparsable template contributes nothing."""
        result = extract("{{ _('Lost') }}\n{% for %}")
        assert result.records == []
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].kind == "parse"
        assert result.diagnostics[0].severity == "fatal"
        assert result.diagnostics[0].line == 2

    def test_unpaired_surrogate_escape_is_skipped(self) -> None:
        """A lone surrogate cannot be written to the catalog, so the call is rejected."""
        result = extract('{{ _("\\ud800") }}\n{{ _("ok") }}')
        assert [r.msgid for r in result.records] == ["ok"]
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].kind == "validation"
        assert str(result.diagnostics[0]) == "page.html:1: Unpaired surrogate in string literal"

    def test_surrogate_pair_escape_is_joined(self) -> None:
        result = extract('{{ _plural("\\ud83d\\ude00", "\\ud83d\\ude00s", n) }}')
        assert result.records[0].msgid == "\U0001F600"
        assert result.records[0].msgid_plural == "\U0001F600s"

    def test_registered_extensions(self) -> None:
        """Template extensions map to the template extractor."""
        extractors = get_extractors()
        for extension in (".html", ".njk", ".jinja", ".j2"):
            assert extractors[extension].name == "template"
