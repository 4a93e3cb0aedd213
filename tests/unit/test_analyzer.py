# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the single-pass analyzer and its error recovery."""

from pathlib import Path

from mcbc.analyzer import McbcAnalyzer
from mcbc.nodes import AstNode


def _write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _source(*lines: str) -> str:
    return "\n".join(lines) + "\n"


def _kinds(node: AstNode) -> list[str]:
    return [child.kind for child in node.children]


WELL_FORMED = _source(
    "// bank account model",
    "module: bank",
    "class: Account",
    "    description: Holds a balance.",
    "    inh: Entity",
    "    var: balance",
    "    description: Current balance.",
    "    @ validated upstream",
    "    func: deposit",
    "        description: Adds money.",
    "        input: amount",
    "        input: note",
    "        output: balance",
    "        behavior:",
    "            if amount > 0:",
    "                balance = balance + amount",
    "            else:",
    "                return: balance",
    "            return: balance",
    "",
    "    func: withdraw",
    "class: Ledger",
    "    var: entries",
)


def test_ph4_ana_001_well_formed_source_builds_complete_tree(tmp_path: Path) -> None:
    source = _write_file(tmp_path / "bank.mcbc", WELL_FORMED)
    analyzer = McbcAnalyzer()

    success = analyzer.parse_file(source)

    assert success is True
    assert analyzer.get_errors() == []
    root = analyzer.get_ast()
    assert _kinds(root) == ["module", "class", "class"]
    account = root.children[1]
    assert account.name == "Account"
    assert _kinds(account) == ["description", "inh", "var", "description", "func", "func"]
    deposit = account.children[4]
    assert deposit.metadata.annotation == "validated upstream"
    assert _kinds(deposit) == ["description", "input", "input", "output", "behavior"]
    behavior = deposit.children[-1]
    assert _kinds(behavior) == ["if", "else", "statement"]
    assert _kinds(behavior.children[0]) == ["statement"]
    assert _kinds(behavior.children[1]) == ["statement"]


def test_ph4_ana_002_child_indent_is_parent_indent_plus_unit(tmp_path: Path) -> None:
    source = _write_file(tmp_path / "bank.mcbc", WELL_FORMED)
    analyzer = McbcAnalyzer()
    analyzer.parse_file(source)

    for node in analyzer.get_ast().walk():
        if node.kind == "root":
            assert node.parent is None
            continue
        assert node.parent is not None
        if node.parent.kind == "root":
            assert node.indent == 0
        else:
            assert node.indent == node.parent.indent + 4


def test_ph4_ana_003_scopes_are_balanced_after_parse(tmp_path: Path) -> None:
    analyzer = McbcAnalyzer()

    analyzer.parse_file(_write_file(tmp_path / "bank.mcbc", WELL_FORMED))

    table = analyzer.symbol_table
    assert table.depth == 1
    assert table.current_scope is table.root_scope
    assert table.root_scope.symbols == {}


def test_ph4_ana_004_input_after_output_is_one_error_and_behavior_attaches() -> None:
    analyzer = McbcAnalyzer()

    success = analyzer.parse_source(
        _source(
            "class: A",
            "    func: f",
            "        input: a",
            "        output: r",
            "        input: late",
            "        behavior:",
            "            r = a",
        )
    )

    assert success is False
    assert analyzer.get_errors() == [
        "Structural Error (Line 5): Node of type 'input' cannot be placed here "
        "inside a 'func' node."
    ]
    func = analyzer.get_ast().children[0].children[0]
    assert _kinds(func) == ["input", "output", "behavior"]
    assert _kinds(func.children[-1]) == ["statement"]


def test_ph4_ana_005_duplicate_var_is_semantic_and_keeps_both_nodes() -> None:
    analyzer = McbcAnalyzer()

    success = analyzer.parse_source(
        _source(
            "class: A",
            "    var: x",
            "    var: x",
            "    var: y",
        )
    )

    assert success is False
    assert analyzer.get_errors() == [
        "Semantic Error (Line 3): Symbol 'x' is already defined in the current "
        "scope (line 2)."
    ]
    assert [child.name for child in analyzer.get_ast().children[0].children] == [
        "x",
        "x",
        "y",
    ]


def test_ph4_ana_006_malformed_member_resumes_at_next_sibling() -> None:
    analyzer = McbcAnalyzer()

    analyzer.parse_source(
        _source(
            "class: A",
            "    var: x",
            "        var: nested",
            "            var: deeper",
            "    var: y",
        )
    )

    assert analyzer.get_errors() == [
        "Structural Error (Line 3): Node of type 'var' cannot have child nodes."
    ]
    assert [child.name for child in analyzer.get_ast().children[0].children] == [
        "x",
        "y",
    ]


def test_ph4_ana_007_root_rejects_var_and_skips_to_next_top_level_line() -> None:
    analyzer = McbcAnalyzer()

    analyzer.parse_source(
        _source(
            "var: stray",
            "    func: ignored",
            "        input: also_ignored",
            "class: B",
        )
    )

    assert analyzer.get_errors() == [
        "Structural Error (Line 1): Node of type 'var' cannot be placed here "
        "inside a 'root' node."
    ]
    assert _kinds(analyzer.get_ast()) == ["class"]
    assert analyzer.get_ast().children[0].name == "B"


def test_ph4_ana_008_indentation_errors_report_expected_and_actual() -> None:
    analyzer = McbcAnalyzer()

    analyzer.parse_source(
        _source(
            "    class: Early",
            "class: A",
            "    func: f",
            "            input: a",
            "    var: ok",
            "      var: odd",
            "    var: fine",
        )
    )

    assert analyzer.get_errors() == [
        "Indentation Error (Line 1): Expected indent of 0, but got 4.",
        "Indentation Error (Line 4): Expected indent of 8, but got 12.",
        "Structural Error (Line 6): Node of type 'var' cannot have child nodes.",
    ]
    assert [child.name for child in analyzer.get_ast().children[0].children] == [
        "f",
        "ok",
        "fine",
    ]


def test_ph4_ana_009_dedent_to_unaligned_column_is_rollback_error() -> None:
    analyzer = McbcAnalyzer()

    analyzer.parse_source(
        _source(
            "class: A",
            "    func: f",
            "        behavior:",
            "            x = 1",
            "      y = 2",
            "    var: z",
        )
    )

    assert analyzer.get_errors() == [
        "Indentation Error (Line 5): Illegal indentation rollback, expected indent "
        "of 4, but got 6."
    ]
    assert _kinds(analyzer.get_ast().children[0]) == ["func", "var"]
    assert analyzer.symbol_table.depth == 1


def test_ph4_ana_010_unrecognized_keyword_suggests_closest_keyword() -> None:
    analyzer = McbcAnalyzer()

    analyzer.parse_source(_source("clas: A", "class: B"))

    assert analyzer.get_errors() == [
        "Syntax Error (Line 1): Unrecognized keyword or line format: 'clas: A'. "
        "Did you mean 'class'?"
    ]
    assert [child.name for child in analyzer.get_ast().children] == ["B"]


def test_ph4_ana_011_consecutive_annotations_keep_the_newest() -> None:
    analyzer = McbcAnalyzer()

    analyzer.parse_source(_source("@ first", "@ second", "class: A"))

    assert analyzer.get_errors() == [
        "Semantic Error (Line 2): Consecutive '@' annotations are not allowed. "
        "Previous one ignored."
    ]
    assert analyzer.get_ast().children[0].metadata.annotation == "second"


def test_ph4_ana_012_annotation_survives_recovery_to_next_node() -> None:
    analyzer = McbcAnalyzer()

    analyzer.parse_source(_source("@ lost", "var: x", "class: A"))

    assert len(analyzer.get_errors()) == 1
    assert analyzer.get_ast().children[0].metadata.annotation == "lost"


def test_ph4_ana_013_else_after_sibling_if_with_nested_body() -> None:
    analyzer = McbcAnalyzer()

    success = analyzer.parse_source(
        _source(
            "class: A",
            "    func: f",
            "        behavior:",
            "            x = 1",
            "            else:",
            "                y = 2",
            "            z = 3",
        )
    )

    assert success is False
    assert analyzer.get_errors() == [
        "Structural Error (Line 5): Node of type 'else' cannot be placed here "
        "inside a 'behavior' node."
    ]
    behavior = analyzer.get_ast().children[0].children[0].children[0]
    assert _kinds(behavior) == ["statement", "statement"]


def test_ph4_ana_014_declarations_register_in_their_own_scope() -> None:
    analyzer = McbcAnalyzer()

    success = analyzer.parse_source(
        _source(
            "class: A",
            "    func: f",
            "    func: f",
            "class: B",
            "    var: B",
        )
    )

    assert success is False
    assert analyzer.get_errors() == [
        "Semantic Error (Line 5): Symbol 'B' is already defined in the current "
        "scope (line 4)."
    ]
    assert [child.name for child in analyzer.get_ast().children[0].children] == [
        "f",
        "f",
    ]
    assert analyzer.symbol_table.depth == 1


def test_ph4_ana_015_reuse_across_files_resets_state(tmp_path: Path) -> None:
    good = _write_file(tmp_path / "good.mcbc", WELL_FORMED)
    bad = _write_file(tmp_path / "bad.mcbc", _source("var: x", "class: A"))
    analyzer = McbcAnalyzer()

    analyzer.parse_file(good)
    first_errors = analyzer.get_errors()
    first_tree = analyzer.get_ast().to_dict()
    analyzer.parse_file(bad)
    assert len(analyzer.get_errors()) == 1
    analyzer.parse_file(good)

    assert analyzer.get_errors() == first_errors
    assert analyzer.get_ast().to_dict() == first_tree


def test_ph4_ana_016_unreadable_file_is_single_fatal_error(tmp_path: Path) -> None:
    analyzer = McbcAnalyzer()

    success = analyzer.parse_file(tmp_path / "missing.mcbc")

    assert success is False
    errors = analyzer.get_errors()
    assert len(errors) == 1
    assert errors[0].startswith("File Error (Line 0): Cannot read")
    assert analyzer.get_ast().children == []


def test_ph4_ana_017_error_on_every_line_terminates() -> None:
    analyzer = McbcAnalyzer()
    lines = [f"{' ' * (index % 7)}??? {index}" for index in range(300)]

    success = analyzer.parse_source("\n".join(lines))

    assert success is False
    assert 0 < len(analyzer.get_errors()) <= 300
    assert analyzer.symbol_table.depth == 1


def test_ph4_ana_018_func_without_body_does_not_leak_scope() -> None:
    analyzer = McbcAnalyzer()

    analyzer.parse_source(
        _source(
            "class: A",
            "    func: f",
            "    var: x",
            "    var: x",
        )
    )

    assert analyzer.get_errors() == [
        "Semantic Error (Line 4): Symbol 'x' is already defined in the current "
        "scope (line 3)."
    ]


def test_ph4_ana_019_only_newlines_separate_lines(tmp_path: Path) -> None:
    analyzer = McbcAnalyzer()
    source = _write_file(
        tmp_path / "separators.mcbc",
        "class: A\n    description: first\u2028second\n    var: x\n",
    )

    success = analyzer.parse_file(source)

    assert success is True
    cls = analyzer.get_ast().children[0]
    assert _kinds(cls) == ["description", "var"]
    assert cls.children[0].metadata.description == "first\u2028second"
    assert cls.children[1].line_number == 3

    analyzer.parse_source("class: A\n    var: x\x0c\n    var: x\n")

    assert analyzer.get_errors() == [
        "Semantic Error (Line 3): Symbol 'x' is already defined in the current "
        "scope (line 2)."
    ]


def test_ph4_ana_020_invalid_utf8_is_single_fatal_error(tmp_path: Path) -> None:
    source = tmp_path / "binary.mcbc"
    source.write_bytes(b"class: A\n\xff\n")
    analyzer = McbcAnalyzer()

    success = analyzer.parse_file(source)

    assert success is False
    errors = analyzer.get_errors()
    assert len(errors) == 1
    assert errors[0].startswith("File Error (Line 0)")
    assert analyzer.get_ast().children == []


def test_ph4_ana_021_crlf_source_parses_with_correct_line_numbers(
    tmp_path: Path,
) -> None:
    source = tmp_path / "crlf.mcbc"
    source.write_bytes(b"class: A\r\n    var: x\r\n\r\n    func: f\r\n")
    analyzer = McbcAnalyzer()

    assert analyzer.parse_file(source) is True
    assert [node.line_number for node in analyzer.get_ast().walk()] == [0, 1, 2, 4]
    assert analyzer.parse_source("class: A\r\n    var: x\r\n    var: x\r\n") is False
    assert analyzer.get_errors() == [
        "Semantic Error (Line 3): Symbol 'x' is already defined in the current "
        "scope (line 2)."
    ]
