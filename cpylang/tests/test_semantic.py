"""
Tests for the semantic analyzer.
"""
import pytest

from cpylang.exceptions import ErrorKind, SemanticError
from cpylang.semantic import SemanticAnalyzer
from cpylang.tests.utils import parse_source


def analyze(source: str) -> list[str]:
    return SemanticAnalyzer().analyze(parse_source(source))


def test_valid_program_has_no_violations():
    source = """
    let a = [1, 2];
    let i = 0;
    while (i < 2) {
        a[i] = a[i] * 2;
        i = i + 1;
    }
    for (let j = 0; j < 2; j = j + 1) { print(a[j]); }
    """
    assert analyze(source) == []


def test_use_before_declaration():
    assert analyze("print(x);") == ["Variable 'x' used before declaration (line 1)"]


def test_assignment_to_undeclared():
    assert analyze("\ny = 1;") == ["Variable 'y' used before declaration (line 2)"]


def test_array_assignment_to_undeclared():
    assert analyze("a[0] = 1;") == ["Variable 'a' used before declaration (line 1)"]


def test_duplicate_declaration():
    assert analyze("let x = 1;\nlet x = 2;") == ["Variable 'x' already declared (line 2)"]


def test_initializer_cannot_see_its_own_name():
    assert analyze("let x = x;") == ["Variable 'x' used before declaration (line 1)"]


def test_symbol_table_is_flat():
    """Names declared inside blocks stay visible after them and collide."""
    source = "if (1) { let t = 1; }\nprint(t);\nfor (let t = 0; t < 1; t = t + 1) {}"
    assert analyze(source) == ["Variable 't' already declared (line 3)"]


def test_all_violations_reported_in_order():
    source = "print(a);\nlet b = c;\nlet b = 1;\nd[0] = 1;"
    assert analyze(source) == [
        "Variable 'a' used before declaration (line 1)",
        "Variable 'c' used before declaration (line 2)",
        "Variable 'b' already declared (line 3)",
        "Variable 'd' used before declaration (line 4)",
    ]


def test_check_raises_aggregate_error():
    with pytest.raises(SemanticError) as exc:
        SemanticAnalyzer().check(parse_source("print(a);\nprint(b);"))
    assert exc.value.kind == ErrorKind.SEMANTIC
    assert str(exc.value) == (
        "Semantic errors:\n"
        "  - Variable 'a' used before declaration (line 1)\n"
        "  - Variable 'b' used before declaration (line 2)"
    )
    assert len(exc.value.violations) == 2


def test_check_passes_clean_program():
    SemanticAnalyzer().check(parse_source("let a = 1; print(a);"))
