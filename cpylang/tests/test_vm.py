"""
Tests for the virtual machine.
"""
import io

import pytest

from cpylang.exceptions import ErrorKind, VMRuntimeError
from cpylang.values import Char
from cpylang.vm import VM, run
from cpylang.tests.utils import program


def execute(*pairs) -> VM:
    return run(program(*pairs), io.StringIO())


def runtime_error(*pairs) -> VMRuntimeError:
    with pytest.raises(VMRuntimeError) as exc:
        execute(*pairs)
    return exc.value


def test_print_writes_to_stdout(capsys):
    vm = run(program(("CONST_NUM", "6.0"), "PRINT", "HALT"))
    assert vm.output == ["6"]
    assert capsys.readouterr().out == "6\n"


def test_print_to_custom_stream():
    out = io.StringIO()
    run(program(("CONST_STR", "hi"), "PRINT", "HALT"), out)
    assert out.getvalue() == "hi\n"


def test_halt_stops_in_place():
    vm = execute(("CONST_NUM", "1"), "PRINT", "HALT", ("CONST_NUM", "2"), "PRINT")
    assert vm.output == ["1"]
    assert vm.pc == 2


def test_running_off_the_end_terminates():
    vm = execute(("CONST_NUM", "1"), ("STORE", "x"))
    assert vm.vars == {"x": 1.0}
    assert vm.pc == 2


@pytest.mark.parametrize(
    "pairs, expected",
    [
        ((("CONST_NUM", "7"), ("CONST_NUM", "2"), "DIV"), 3.5),
        ((("CONST_NUM", "7"), ("CONST_NUM", "2"), "SUB"), 5.0),
        ((("CONST_NUM", "7"), ("CONST_NUM", "2"), "MUL"), 14.0),
        ((("CONST_NUM", "7"), "NEG"), -7.0),
        ((("CONST_NUM", "1"), ("CONST_NUM", "2"), "LT"), True),
        ((("CONST_NUM", "2"), ("CONST_NUM", "2"), "LTE"), True),
        ((("CONST_NUM", "1"), ("CONST_NUM", "2"), "GT"), False),
        ((("CONST_NUM", "2"), ("CONST_NUM", "2"), "GTE"), True),
    ],
)
def test_numeric_operations(pairs, expected):
    vm = execute(*pairs, "HALT")
    assert vm.stack == [expected]


def test_string_concatenation_stringifies_other_side():
    vm = execute(
        ("CONST_STR", "n="), ("CONST_NUM", "3.0"), "ADD",
        ("CONST_NUM", "1.5"), ("CONST_STR", "!"), "ADD",
        ("CONST_STR", "c"), ("CONST_CHAR", "x"), "ADD",
        "HALT",
    )
    assert vm.stack == ["n=3", "1.5!", "cx"]


@pytest.mark.parametrize(
    "value, truthy",
    [
        (("CONST_NUM", "0"), False),
        (("CONST_NUM", "0.5"), True),
        (("CONST_BOOL", "false"), False),
        (("CONST_BOOL", "true"), True),
        ("CONST_NULL", False),
        (("CONST_STR", ""), True),
        (("CONST_CHAR", "a"), True),
    ],
)
def test_truthiness(value, truthy):
    vm = execute(value, "NOT", "HALT")
    assert vm.stack == [not truthy]


def test_jump_if_false_pops_condition():
    vm = execute(
        ("CONST_BOOL", "false"),
        ("JUMP_IF_FALSE", "4"),
        ("CONST_STR", "skipped"),
        "PRINT",
        ("CONST_BOOL", "true"),
        ("JUMP_IF_FALSE", "7"),
        ("CONST_STR", "kept"),
        "HALT",
    )
    assert vm.stack == ["kept"]
    assert vm.output == []


def test_unconditional_jump():
    vm = execute(("JUMP", "2"), ("CONST_STR", "skipped"), ("CONST_STR", "landed"), "HALT")
    assert vm.stack == ["landed"]


@pytest.mark.parametrize(
    "left, right, expected",
    [
        (("CONST_NUM", "1"), ("CONST_NUM", "1.0"), True),
        (("CONST_STR", "a"), ("CONST_CHAR", "a"), False),
        (("CONST_NUM", "1"), ("CONST_BOOL", "true"), False),
        (("CONST_NUM", "0"), "CONST_NULL", False),
        ("CONST_NULL", "CONST_NULL", True),
        (("CONST_STR", "ab"), ("CONST_STR", "ab"), True),
    ],
)
def test_equality_requires_same_kind(left, right, expected):
    vm = execute(left, right, "EQ", left, right, "NEQ", "HALT")
    assert vm.stack == [expected, not expected]


def test_logical_operators_use_truthiness():
    vm = execute(
        ("CONST_NUM", "1"), ("CONST_STR", "x"), "AND",
        ("CONST_NUM", "0"), "CONST_NULL", "OR",
        "HALT",
    )
    assert vm.stack == [True, False]


def test_make_array_keeps_source_order():
    vm = execute(
        ("CONST_STR", "a"), ("CONST_STR", "b"), ("CONST_STR", "c"),
        ("MAKE_ARRAY", "3"), "PRINT", "HALT",
    )
    assert vm.output == ["[a, b, c]"]


def test_arrays_are_shared_by_reference():
    vm = execute(
        ("CONST_NUM", "1"), ("CONST_NUM", "2"), ("MAKE_ARRAY", "2"), ("STORE", "a"),
        ("LOAD", "a"), ("STORE", "b"),
        ("CONST_NUM", "5"), ("CONST_NUM", "0"), ("ARRAY_STORE", "b"),
        ("LOAD", "a"), "PRINT",
        "HALT",
    )
    assert vm.output == ["[5, 2]"]


def test_array_index_is_truncated():
    vm = execute(
        ("CONST_CHAR", "x"), ("CONST_CHAR", "y"), ("MAKE_ARRAY", "2"),
        ("CONST_NUM", "1.9"), "ARRAY_LOAD",
        "HALT",
    )
    assert vm.stack == [Char("y")]


def test_nested_array_and_null_stringify():
    vm = execute(
        "CONST_NULL", ("CONST_NUM", "2.5"), ("MAKE_ARRAY", "1"), ("MAKE_ARRAY", "2"),
        "PRINT", "HALT",
    )
    assert vm.output == ["[null, [2.5]]"]


def test_division_by_zero():
    err = runtime_error(("CONST_NUM", "1"), ("CONST_NUM", "0"), "DIV", "PRINT", "HALT")
    assert str(err) == "VM error at instruction 2: Division by zero"
    assert err.pc == 2
    assert err.kind == ErrorKind.RUNTIME


def test_out_of_bounds():
    err = runtime_error(
        ("CONST_NUM", "1"), ("MAKE_ARRAY", "1"), ("CONST_NUM", "5"), "ARRAY_LOAD", "HALT"
    )
    assert err.detail == "Array index 5 out of bounds (size 1)"


def test_negative_index_is_out_of_bounds():
    err = runtime_error(
        ("CONST_NUM", "1"), ("MAKE_ARRAY", "1"), ("STORE", "a"),
        ("CONST_NUM", "0"), ("CONST_NUM", "-1"), ("ARRAY_STORE", "a"), "HALT",
    )
    assert err.detail == "Array index -1 out of bounds (size 1)"


@pytest.mark.parametrize(
    "pairs, detail",
    [
        ((("CONST_STR", "a"), ("CONST_NUM", "1"), "SUB"), "SUB requires two numbers"),
        ((("CONST_BOOL", "true"), ("CONST_NUM", "1"), "ADD"), "ADD requires two numbers or at least one string"),
        ((("CONST_STR", "a"), "NEG"), "NEG requires a number"),
        ((("CONST_NUM", "1"), ("CONST_NUM", "0"), "ARRAY_LOAD"), "ARRAY_LOAD: not an array"),
        ((("CONST_NUM", "0"), ("CONST_NUM", "0"), ("ARRAY_STORE", "x")), "ARRAY_STORE: 'x' is not an array"),
        ((("MAKE_ARRAY", "0"), ("CONST_STR", "0"), "ARRAY_LOAD"), "Array index must be a number"),
        ((("LOAD", "ghost"),), "Undefined variable 'ghost'"),
        (("ADD",), "Stack underflow"),
        ((("JUMP", "soon"),), "JUMP expects an integer operand, got 'soon'"),
        ((("JUMP", "-3"), ("CONST_STR", "wrapped"), "PRINT", "HALT"), "JUMP target -3 outside program (size 4)"),
        ((("CONST_BOOL", "false"), ("JUMP_IF_FALSE", "9"), "HALT"), "JUMP_IF_FALSE target 9 outside program (size 3)"),
    ],
)
def test_runtime_errors(pairs, detail):
    assert runtime_error(*pairs).detail == detail


def test_output_before_error_is_kept():
    vm = VM(program(("CONST_NUM", "1"), "PRINT", ("LOAD", "nope"), "HALT"), io.StringIO())
    with pytest.raises(VMRuntimeError):
        vm.run()
    assert vm.output == ["1"]
    assert vm.pc == 2


def test_jump_to_program_end_terminates():
    vm = execute(("JUMP", "3"), ("CONST_STR", "skipped"), "PRINT")
    assert vm.output == []
    assert vm.pc == 3


def test_array_stored_inside_itself_cannot_be_printed():
    err = runtime_error(
        ("CONST_NUM", "0"), ("MAKE_ARRAY", "1"), ("STORE", "a"),
        ("LOAD", "a"), ("CONST_NUM", "0"), ("ARRAY_STORE", "a"),
        ("LOAD", "a"), "PRINT", "HALT",
    )
    assert err.detail == "Value nested too deeply"
    assert err.pc == 7
