"""
Tests for the token and operator variants.
"""

from io import StringIO

import pytest

from arm_demangler.errors import UnexpectedEnd, UnknownOperatorCode
from arm_demangler.token import EncodingKind, Operator, PendingModifiers, Token


def test_token_from_char():
    assert Token.from_char("i").kind == Token.Kind.INT
    assert Token.from_char("r").get_primitive_spelling() == "long double"
    assert Token.from_char("7").is_digit()
    assert Token.from_char("").is_end()
    assert Token.from_char("z").kind == Token.Kind.UNKNOWN


def test_token_prefixes():
    for char in "UCVSPRAFM":
        assert Token.from_char(char).is_type_prefix(), char

    for char in "AFM":
        assert Token.from_char(char).is_inert_prefix(), char

    assert not Token.from_char("i").is_type_prefix()
    assert Token.from_char("U").get_prefix_spelling() == "unsigned "


def test_token_peek_does_not_advance():
    src = StringIO("Pi")
    assert Token.peek(src).kind == Token.Kind.POINTER
    assert Token.peek(src, offset=1).kind == Token.Kind.INT
    assert src.read() == "Pi"


def test_pending_modifiers_order():
    assert PendingModifiers().suffixes() == []
    modifiers = PendingModifiers(is_pointer=True, is_reference=True, has_const_suffix=True)
    assert modifiers.suffixes() == ["*", "&", " const"]


def test_encoding_kind():
    assert EncodingKind.CONSTRUCTOR.is_xtor()
    assert EncodingKind.DESTRUCTOR.is_xtor()
    assert not EncodingKind.OPERATOR_FUNCTION.is_xtor()


@pytest.mark.parametrize(
    "mangled, kind, rest",
    [
        ("pl__1C", Operator.Kind.PLUS, "__1C"),
        ("ad__1C", Operator.Kind.BW_AND, "__1C"),
        ("adv__1C", Operator.Kind.DIV_ASSIGN, "__1C"),
        ("aa__1C", Operator.Kind.LOG_AND, "__1C"),
        ("aad__1C", Operator.Kind.BW_AND_ASSIGN, "__1C"),
        ("amu__1C", Operator.Kind.MUL_ASSIGN, "__1C"),
        # Three-character codes take three characters whatever the last one is.
        ("apl__1C", Operator.Kind.PLUS_ASSIGN, "__1C"),
        ("apX__1C", Operator.Kind.PLUS_ASSIGN, "__1C"),
        ("ars__1C", Operator.Kind.SHIFT_RIGHT_ASSIGN, "__1C"),
        ("ct__3Foo", Operator.Kind.CTOR, "3Foo"),
        ("dt__3Foo", Operator.Kind.DTOR, "3Foo"),
    ],
)
def test_operator_read(mangled: str, kind: Operator.Kind, rest: str):
    src = StringIO(mangled)
    op = Operator.read(src)
    assert op.kind == kind
    assert src.read() == rest


def test_operator_names():
    assert Operator(kind=Operator.Kind.SHIFT_LEFT_ASSIGN).get_name() == "operator<<="
    assert str(Operator(kind=Operator.Kind.NEW)) == "operator new"
    assert Operator(kind=Operator.Kind.CTOR).is_xtor()
    assert not Operator(kind=Operator.Kind.PLUS).is_xtor()


@pytest.mark.parametrize("mangled", ["op__1C", "zz__1C", "am__1C", "amq__1C"])
def test_operator_unknown(mangled: str):
    with pytest.raises(UnknownOperatorCode):
        Operator.read(StringIO(mangled))


@pytest.mark.parametrize("mangled", ["", "p", "ap", "ct_"])
def test_operator_truncated(mangled: str):
    with pytest.raises(UnexpectedEnd):
        Operator.read(StringIO(mangled))
