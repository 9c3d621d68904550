"""Tests for parser.py — the style file DSL."""

from __future__ import annotations

from pathlib import Path

import pytest

from mdlstyle.errors import ParseError, RuleConflictError
from mdlstyle.models import StyleDocument, Symbol
from mdlstyle.parser import parse_style


class TestExampleDocument:
    def test_rule_set_is_all(self, example_document: StyleDocument):
        assert example_document.rule_set == "all"

    def test_md002_is_excluded(self, example_document: StyleDocument):
        assert example_document.is_excluded("MD002") is True

    def test_md013_is_not_excluded(self, example_document: StyleDocument):
        assert example_document.is_excluded("MD013") is False

    def test_md013_overrides(self, example_document: StyleDocument):
        assert example_document.overrides_for("MD013") == {"tables": False}

    def test_md029_overrides(self, example_document: StyleDocument):
        assert example_document.overrides_for("MD029") == {"style": "ordered"}

    def test_override_order_follows_source(self, example_document: StyleDocument):
        assert [o.rule_id for o in example_document.overrides] == [
            "MD003",
            "MD013",
            "MD029",
            "MD035",
        ]

    def test_exclusion_order_follows_source(self, example_document: StyleDocument):
        assert [e.rule_id for e in example_document.exclusions] == [
            "MD002",
            "MD010",
            "MD025",
            "MD026",
            "MD041",
        ]

    def test_symbol_value_kept_distinct(self, example_document: StyleDocument):
        style = example_document.overrides_for("MD003")["style"]
        assert isinstance(style, Symbol)
        assert style == "atx"

    def test_string_value_is_plain_str(self, example_document: StyleDocument):
        style = example_document.overrides_for("MD029")["style"]
        assert not isinstance(style, Symbol)

    def test_commented_out_rules_ignored(self, example_document: StyleDocument):
        assert example_document.overrides_for("MD004") == {}
        assert example_document.overrides_for("MD007") == {}
        assert example_document.overrides_for("MD030") == {}

    def test_exclusion_comments_attached(self, example_document: StyleDocument):
        assert example_document.exclusion_comment("MD002") == (
            "First header should be a top level header\n"
            "- We have the title in the YAML meta-data,\n"
            "  so we can use headers however we want"
        )
        assert example_document.exclusion_comment("MD026") == "Trailing punctuation in header"

    def test_preamble_kept(self, example_document: StyleDocument):
        assert example_document.preamble == (
            "SPDX-FileCopyrightText: 2021 - 2024 Robin Vobruba <hoijui.quaero@gmail.com>",
            "",
            "SPDX-License-Identifier: Unlicense",
            "Enforce the style guide at https://cirosantilli.com/markdown-style-guide",
        )


class TestSyntax:
    def test_double_quoted_rule_id(self):
        doc = parse_style('rule "MD013", :line_length => 100')
        assert doc.overrides_for("MD013") == {"line_length": 100}

    def test_label_style_options(self):
        doc = parse_style("rule 'MD030', ul_multi: 3, ol_multi: 2")
        assert doc.overrides_for("MD030") == {"ul_multi": 3, "ol_multi": 2}

    def test_parenthesized_arguments(self):
        doc = parse_style("rule('MD013', :tables => false, :code_blocks => true)")
        assert doc.overrides_for("MD013") == {"tables": False, "code_blocks": True}

    def test_string_option_key(self):
        doc = parse_style("rule 'MD007', 'indent' => 4")
        assert doc.overrides_for("MD007") == {"indent": 4}

    def test_escaped_quotes(self):
        doc = parse_style("rule 'MD026', :punctuation => '.,\\'!'")
        assert doc.overrides_for("MD026") == {"punctuation": ".,'!"}

    def test_hash_inside_string_is_not_comment(self):
        doc = parse_style("rule 'MD035', :style => '#--' # trailing")
        assert doc.overrides_for("MD035") == {"style": "#--"}

    def test_float_value_non_strict(self):
        doc = parse_style("rule 'MD013', :line_length => 80.5", strict=False)
        assert doc.overrides_for("MD013") == {"line_length": 80.5}

    def test_exponent_value_non_strict(self):
        doc = parse_style("rule 'X1', :ratio => 1e-05, :scale => 2.5E+3", strict=False)
        assert doc.overrides_for("X1") == {"ratio": 1e-05, "scale": 2500.0}

    def test_double_quoted_escapes(self):
        doc = parse_style('rule "MD035", :style => "a\\tb\\"c\\\\"')
        assert doc.overrides_for("MD035") == {"style": 'a\tb"c\\'}

    def test_negative_number(self):
        doc = parse_style("rule 'MD007', :indent => -1")
        assert doc.overrides_for("MD007") == {"indent": -1}

    def test_alias_normalized_to_id(self):
        doc = parse_style("rule 'line-length', :line_length => 120")
        assert doc.overrides_for("MD013") == {"line_length": 120}

    def test_lowercase_id_normalized(self):
        doc = parse_style("exclude_rule 'md041'")
        assert doc.is_excluded("MD041")

    def test_repeated_rule_merges_options(self):
        doc = parse_style(
            "rule 'MD013', :line_length => 100\nrule 'MD013', :tables => false, :line_length => 120"
        )
        assert doc.overrides_for("MD013") == {"line_length": 120, "tables": False}
        assert len(doc.overrides) == 1

    def test_duplicate_exclusion_keeps_first(self):
        doc = parse_style("# first\nexclude_rule 'MD002'\n# second\nexclude_rule 'MD002'")
        assert len(doc.exclusions) == 1
        assert doc.exclusion_comment("MD002") == "first"

    def test_trailing_comment_on_exclusion(self):
        doc = parse_style("exclude_rule 'MD010' # tabs are fine")
        assert doc.exclusion_comment("MD010") == "tabs are fine"

    def test_blank_line_detaches_comment(self):
        doc = parse_style("all\n# unrelated note\n\nexclude_rule 'MD010'")
        assert doc.exclusion_comment("MD010") is None

    def test_no_rule_set(self):
        doc = parse_style("rule 'MD013', :tables => false")
        assert doc.rule_set is None

    def test_rule_without_options(self):
        doc = parse_style("rule 'MD040'")
        assert [o.rule_id for o in doc.overrides] == ["MD040"]
        assert doc.overrides_for("MD040") == {}

    def test_tags(self):
        doc = parse_style("tag :headers\nexclude_tag :whitespace")
        assert doc.tags == ("headers",)
        assert doc.excluded_tags == ("whitespace",)
        assert doc.is_excluded("MD009")
        assert doc.is_excluded("MD010")
        assert not doc.is_excluded("MD001")

    def test_excluded_tag_wins_over_override(self):
        doc = parse_style("exclude_tag :whitespace\nrule 'MD009', :br_spaces => 3")
        assert doc.is_excluded("MD009")
        assert doc.overrides_for("MD009") == {"br_spaces": 3}

    def test_empty_text(self):
        assert parse_style("") == StyleDocument()

    def test_comments_only(self):
        doc = parse_style("# just a note\n")
        assert doc.preamble == ("just a note",)

    def test_first_statement_exclusion_takes_adjacent_comment(self):
        doc = parse_style("# header\n\n# reason\nexclude_rule 'MD002'")
        assert doc.preamble == ("header",)
        assert doc.exclusion_comment("MD002") == "reason"


class TestErrors:
    def test_unknown_rule_set(self):
        with pytest.raises(ParseError) as exc_info:
            parse_style("# header\nrule_set_x\n")
        assert exc_info.value.line == 2
        assert "unknown rule set 'rule_set_x'" in exc_info.value.message

    def test_conflicting_rule_sets(self, catalog):
        from mdlstyle.catalog import RuleCatalog

        custom = RuleCatalog(catalog.all_rules(), ["all", "minimal"])
        with pytest.raises(ParseError, match="conflicts"):
            parse_style("all\nminimal", catalog=custom)

    def test_unknown_statement(self):
        with pytest.raises(ParseError, match="unknown statement 'enable'"):
            parse_style("enable 'MD013'")

    def test_statement_must_start_with_name(self):
        with pytest.raises(ParseError, match="expected a statement"):
            parse_style("'MD013'")

    def test_unterminated_string(self):
        with pytest.raises(ParseError, match="unterminated string"):
            parse_style("rule 'MD013, :tables => false")

    def test_unexpected_character(self):
        with pytest.raises(ParseError, match="unexpected character"):
            parse_style("rule 'MD013', :tables => [false]")

    def test_malformed_value(self):
        with pytest.raises(ParseError, match="malformed value 'nil'") as exc_info:
            parse_style("all\nrule 'MD013', :tables => nil")
        assert exc_info.value.line == 2

    def test_malformed_argument(self):
        with pytest.raises(ParseError, match="malformed argument"):
            parse_style("rule 'MD013', :tables false")

    def test_trailing_comma(self):
        with pytest.raises(ParseError, match="trailing ','"):
            parse_style("rule 'MD013', :tables => false,")

    def test_missing_closing_paren(self):
        with pytest.raises(ParseError, match="parenthesis"):
            parse_style("rule('MD013', :tables => false")

    def test_duplicate_option(self):
        with pytest.raises(ParseError, match="given twice"):
            parse_style("rule 'MD013', :tables => false, tables: true")

    def test_positional_after_options(self):
        with pytest.raises(ParseError, match="positional"):
            parse_style("rule 'MD013', :tables => false, 'MD014'")

    def test_rule_id_must_be_string(self):
        with pytest.raises(ParseError, match="quoted rule id"):
            parse_style("rule :MD013")

    def test_exclude_rule_takes_no_options(self):
        with pytest.raises(ParseError, match="no options"):
            parse_style("exclude_rule 'MD013', :tables => false")

    def test_unknown_rule_strict(self):
        with pytest.raises(ParseError, match="unknown rule 'MD999'"):
            parse_style("exclude_rule 'MD999'")

    def test_unknown_rule_non_strict(self):
        doc = parse_style("rule 'MD999', :foo => 1", strict=False)
        assert doc.overrides_for("MD999") == {"foo": 1}

    def test_unknown_option(self):
        with pytest.raises(ParseError, match="rule MD013 has no option 'width'"):
            parse_style("rule 'MD013', :width => 100")

    def test_wrong_option_type(self):
        with pytest.raises(ParseError, match="expects bool, got str"):
            parse_style("rule 'MD013', :tables => 'no'")

    def test_bool_is_not_int(self):
        with pytest.raises(ParseError, match="expects int, got bool"):
            parse_style("rule 'MD013', :line_length => true")

    def test_unknown_tag_strict(self):
        with pytest.raises(ParseError, match="unknown tag 'nosuch'"):
            parse_style("tag :nosuch")

    def test_override_then_exclusion_conflicts(self):
        with pytest.raises(RuleConflictError) as exc_info:
            parse_style("all\nrule 'MD013', :tables => false\nexclude_rule 'MD013'")
        assert exc_info.value.line == 3

    def test_exclusion_then_override_conflicts(self):
        with pytest.raises(RuleConflictError) as exc_info:
            parse_style("exclude_rule 'MD013'\nrule 'MD013', :tables => false")
        assert exc_info.value.line == 2

    def test_conflict_through_alias(self):
        with pytest.raises(RuleConflictError):
            parse_style("exclude_rule 'line-length'\nrule 'MD013'")

    def test_tag_conflict(self):
        with pytest.raises(RuleConflictError, match="both enabled and excluded"):
            parse_style("tag :headers\nexclude_tag :headers")

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_style("rule_set_x")

    def test_error_string_includes_location(self):
        with pytest.raises(ParseError) as exc_info:
            parse_style("\n\nrule_set_x", path=Path("styles/.mdl_style.rb"))
        assert str(exc_info.value).startswith("styles/.mdl_style.rb:3: unknown rule set")

    def test_error_string_without_path(self):
        with pytest.raises(ParseError) as exc_info:
            parse_style("rule_set_x")
        assert str(exc_info.value).startswith("<string>:1:")
