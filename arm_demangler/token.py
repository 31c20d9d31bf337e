"""
Module implementing variant types for ARM demangler type codes and operators.

These variants are mostly used to improve the readability of the parser.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum
from io import TextIOBase
from typing import ClassVar

from arm_demangler.errors import UnexpectedEnd, UnknownOperatorCode
from arm_demangler.io_util import peek, peek_exact, read_exact


class EncodingKind(Enum):
    """
    What the head of a mangled name encodes.
    """

    PLAIN_FUNCTION = 0
    OPERATOR_FUNCTION = 1
    CONSTRUCTOR = 2
    DESTRUCTOR = 3

    def is_xtor(self) -> bool:
        return self in [EncodingKind.CONSTRUCTOR, EncodingKind.DESTRUCTOR]


@dataclass
class PendingModifiers:
    """
    Pointer/reference/const state collected while reading one type, printed
    after that type's base name.
    """

    is_pointer: bool = False
    is_reference: bool = False
    has_const_suffix: bool = False

    def suffixes(self) -> list[str]:
        """
        Return the suffix fragments in the order they are printed.
        """
        result = []
        if self.is_pointer:
            result.append("*")
        if self.is_reference:
            result.append("&")
        if self.has_const_suffix:
            result.append(" const")
        return result


@dataclass(frozen=True)
class Token:
    """
    Variant type for individual ARM type codes/tokens.
    """

    class Kind(StrEnum):
        # Abnormal types
        UNKNOWN = "unknown"
        END = "end"
        DIGIT = "digit"

        # Type prefixes
        UNSIGNED = "U"
        CONST = "C"
        VOLATILE = "V"
        SIGNED = "S"
        POINTER = "P"
        REFERENCE = "R"
        # Recognized, but never rendered
        ARRAY = "A"
        FUNCTION = "F"
        MEMBER_POINTER = "M"

        # Fundamental types
        VOID = "v"
        CHAR = "c"
        SHORT = "s"
        INT = "i"
        LONG = "l"
        FLOAT = "f"
        DOUBLE = "d"
        LONG_DOUBLE = "r"
        ELLIPSIS = "e"

        # Names
        QUALIFIED = "Q"

        # Argument list codes
        BACKREF = "T"
        REPEAT = "N"
        UNDERSCORE = "_"

    _PREFIX_MAP: ClassVar[dict[Kind, str]] = {
        Kind.UNSIGNED: "unsigned ",
        Kind.CONST: "const ",
        Kind.VOLATILE: "volatile ",
        Kind.SIGNED: "signed ",
    }
    _INERT_PREFIXES: ClassVar[set[Kind]] = {Kind.ARRAY, Kind.FUNCTION, Kind.MEMBER_POINTER}
    _PRIM_MAP: ClassVar[dict[Kind, str]] = {
        Kind.VOID: "void",
        Kind.CHAR: "char",
        Kind.SHORT: "short",
        Kind.INT: "int",
        Kind.LONG: "long",
        Kind.FLOAT: "float",
        Kind.DOUBLE: "double",
        Kind.LONG_DOUBLE: "long double",
        Kind.ELLIPSIS: "...",
    }

    kind: Kind
    content: str

    def is_type_prefix(self) -> bool:
        """
        Determine if this code may appear in front of a base type.
        """
        return (
            self.kind in self._PREFIX_MAP
            or self.kind in self._INERT_PREFIXES
            or self.kind in [Token.Kind.POINTER, Token.Kind.REFERENCE]
        )

    def is_inert_prefix(self) -> bool:
        """
        Determine if this is an array, function or pointer-to-member code, which
        are consumed without being printed.
        """
        return self.kind in self._INERT_PREFIXES

    def is_primitive(self) -> bool:
        """
        Determine if this is a fundamental primitive type.
        """
        return self.kind in self._PRIM_MAP

    def is_digit(self) -> bool:
        return self.kind == Token.Kind.DIGIT

    def is_end(self) -> bool:
        return self.kind == Token.Kind.END

    def get_prefix_spelling(self) -> str:
        """
        If this is an unsigned/signed/const/volatile code, return the text printed
        in front of the base type. Otherwise, throw an error.
        """
        return self._PREFIX_MAP[self.kind]

    def get_primitive_spelling(self) -> str:
        """
        If this is a primitive type, return its C++ spelling.
        Otherwise, throw an error.
        """
        return self._PRIM_MAP[self.kind]

    @staticmethod
    def from_char(char: str) -> "Token":
        """
        Construct this variant with the given character and determine its type code.
        An empty string produces an `END` token.
        """
        if not char:
            return Token(kind=Token.Kind.END, content="")

        try:
            kind = Token.Kind(char)
        except ValueError:
            if char in "0123456789":
                kind = Token.Kind.DIGIT
            else:
                kind = Token.Kind.UNKNOWN

        return Token(kind=kind, content=char)

    @staticmethod
    def peek(src: TextIOBase, offset: int = 0) -> "Token":
        """
        Construct this variant by peeking the next character in the given buffer.
        The buffer is not modified.
        """
        return Token.from_char(peek(src, 1, offset=offset))

    def __str__(self) -> str:
        return self.content


@dataclass
class Operator:
    """
    Variant type for ARM operator codes (the part after a leading `__`).
    """

    class Kind(StrEnum):
        MUL = "ml"
        DIV = "dv"
        MOD = "md"
        PLUS = "pl"
        MINUS = "mi"
        SHIFT_LEFT = "ls"
        SHIFT_RIGHT = "rs"
        EQUAL = "eq"
        NOT_EQUAL = "ne"
        LESS = "lt"
        GREATER = "gt"
        LESS_EQUAL = "le"
        GREATER_EQUAL = "ge"
        BW_AND = "ad"
        BW_OR = "or"
        BW_XOR = "er"
        LOG_AND = "aa"
        LOG_OR = "oo"
        LOG_NOT = "nt"
        CO = "co"
        INC = "pp"
        DEC = "mm"
        ASSIGN = "as"
        REFERENCE = "rf"
        COMMA = "cm"
        RM = "rm"
        CALL = "cl"
        ELEM = "vc"
        NEW = "nw"
        DELETE = "dl"
        # Assignment forms spelled with three characters
        PLUS_ASSIGN = "apl"
        MINUS_ASSIGN = "ami"
        MUL_ASSIGN = "amu"
        MOD_ASSIGN = "amd"
        DIV_ASSIGN = "adv"
        BW_AND_ASSIGN = "aad"
        BW_OR_ASSIGN = "aor"
        BW_XOR_ASSIGN = "aer"
        SHIFT_LEFT_ASSIGN = "als"
        SHIFT_RIGHT_ASSIGN = "ars"
        # Constructor and destructor markers
        CTOR = "ct"
        DTOR = "dt"

    _OPERATORS: ClassVar[dict[Kind, str]] = {
        Kind.MUL: "*",
        Kind.DIV: "/",
        Kind.MOD: "%",
        Kind.PLUS: "+",
        Kind.MINUS: "-",
        Kind.SHIFT_LEFT: "<<",
        Kind.SHIFT_RIGHT: ">>",
        Kind.EQUAL: "==",
        Kind.NOT_EQUAL: "!=",
        Kind.LESS: "<",
        Kind.GREATER: ">",
        Kind.LESS_EQUAL: "<=",
        Kind.GREATER_EQUAL: ">=",
        Kind.BW_AND: "&",
        Kind.BW_OR: "|",
        Kind.BW_XOR: "^",
        Kind.LOG_AND: "&&",
        Kind.LOG_OR: "||",
        Kind.LOG_NOT: "!",
        Kind.CO: "~",
        Kind.INC: "++",
        Kind.DEC: "--",
        Kind.ASSIGN: "=",
        Kind.REFERENCE: "->",
        Kind.COMMA: ",",
        Kind.RM: "->*",
        Kind.CALL: "()",
        Kind.ELEM: "[]",
        Kind.NEW: " new",
        Kind.DELETE: " delete",
        Kind.PLUS_ASSIGN: "+=",
        Kind.MINUS_ASSIGN: "-=",
        Kind.MUL_ASSIGN: "*=",
        Kind.MOD_ASSIGN: "%=",
        Kind.DIV_ASSIGN: "/=",
        Kind.BW_AND_ASSIGN: "&=",
        Kind.BW_OR_ASSIGN: "|=",
        Kind.BW_XOR_ASSIGN: "^=",
        Kind.SHIFT_LEFT_ASSIGN: "<<=",
        Kind.SHIFT_RIGHT_ASSIGN: ">>=",
    }
    # Codes which always take three characters, whatever the third one is.
    _FIXED_LENGTH: ClassVar[dict[str, Kind]] = {
        "ap": Kind.PLUS_ASSIGN,
        "al": Kind.SHIFT_LEFT_ASSIGN,
        "ar": Kind.SHIFT_RIGHT_ASSIGN,
        "ao": Kind.BW_OR_ASSIGN,
        "ae": Kind.BW_XOR_ASSIGN,
    }
    # Codes whose meaning depends on an optional third character.
    _DISAMBIGUATED: ClassVar[dict[str, dict[str, Kind]]] = {
        "ad": {"v": Kind.DIV_ASSIGN},
        "aa": {"d": Kind.BW_AND_ASSIGN},
        "am": {"i": Kind.MINUS_ASSIGN, "u": Kind.MUL_ASSIGN, "d": Kind.MOD_ASSIGN},
    }
    _XTORS: ClassVar[set[str]] = {"ct", "dt"}

    kind: Kind

    def is_ctor(self) -> bool:
        return self.kind == Operator.Kind.CTOR

    def is_dtor(self) -> bool:
        return self.kind == Operator.Kind.DTOR

    def is_xtor(self) -> bool:
        return self.is_ctor() or self.is_dtor()

    def get_name(self) -> str:
        """
        If this is an operator overload, return the full method name for this
        operator. Otherwise, an error will be thrown.
        """
        assert not self.is_xtor(), "Constructors and destructors have no operator name!"
        return f"operator{self._OPERATORS[self.kind]}"

    def __str__(self) -> str:
        return self.get_name()

    @staticmethod
    def read(src: TextIOBase) -> "Operator":
        """
        Read an operator code from the given buffer and consume it.

        Constructor and destructor codes also consume the `__` that follows them,
        leaving the buffer on the class name.
        """
        code = peek_exact(src, 2)
        if not code:
            raise UnexpectedEnd(f"Expected an operator code, got {peek(src, 2)!r}")

        if code in Operator._FIXED_LENGTH:
            read_exact(src, 3)
            return Operator(kind=Operator._FIXED_LENGTH[code])

        if code in Operator._DISAMBIGUATED:
            read_exact(src, 2)
            kind = Operator._DISAMBIGUATED[code].get(peek(src))
            if kind is not None:
                read_exact(src, 1)
                return Operator(kind=kind)

            try:
                return Operator(kind=Operator.Kind(code))
            except ValueError:
                raise UnknownOperatorCode(
                    f"Unknown operator code `{code}{peek(src)}`"
                ) from None

        if code in Operator._XTORS:
            read_exact(src, 4)
            return Operator(kind=Operator.Kind(code))

        try:
            kind = Operator.Kind(code)
        except ValueError:
            # Includes `op`, the user-defined conversion operator.
            raise UnknownOperatorCode(f"Unknown operator code `{code}`") from None

        read_exact(src, 2)
        return Operator(kind=kind)
