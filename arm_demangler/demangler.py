"""
Demangler for C++ symbols mangled with the ARM (cfront) scheme.

The grammar follows the one described in the Annotated C++ Reference Manual,
as accepted by the BSD `libelftc` ARM demangler: function names, operators,
constructors and destructors, class and qualified names, fundamental types,
`T`/`N` back-references and pointers to functions.
"""

import logging
from io import StringIO, TextIOBase
from typing import Optional

from arm_demangler.builder import ArgumentTable, TokenBuilder
from arm_demangler.errors import (
    DemangleError,
    IterationLimitExceeded,
    MalformedLength,
    UnexpectedEnd,
    UnsupportedTypeCode,
)
from arm_demangler.io_util import (
    at_end,
    bytes_left,
    lookahead_for_substring,
    peek_exact,
    read_digit,
    read_exact,
    read_number,
)
from arm_demangler.token import EncodingKind, Operator, PendingModifiers, Token

log = logging.getLogger(__name__)

# Upper bound on the number of elements in one argument list.
MAX_ITERATIONS = 128
# Upper bound on how deeply function pointer types may nest.
MAX_NESTING = 32


class ARMDemangler:
    """
    Demangler object.

    The state of the last `parse()` call stays readable through `encoding` and
    `arguments` until the next call resets it.
    """

    def __init__(self, max_iterations: int = MAX_ITERATIONS, max_nesting: int = MAX_NESTING):
        self.max_iterations = max_iterations
        self.max_nesting = max_nesting
        self._reset()

    def parse(self, symbol: str) -> str:
        """
        Demangle `symbol`, raising a `DemangleError` if it is not a valid ARM
        mangled name.
        """
        self._reset()
        return self._parse(StringIO(symbol))

    @property
    def encoding(self) -> EncodingKind:
        return self._encoding

    @property
    def arguments(self) -> list[str]:
        """
        Every entry of the argument table, in the order it was recorded.
        """
        return list(self._args)

    def _reset(self):
        """
        Reset the parser state.
        """
        self._out = TokenBuilder()
        # Memory for previously demangled argument types.
        self._args = ArgumentTable()
        self._encoding = EncodingKind.PLAIN_FUNCTION

    def _parse(self, src: TextIOBase) -> str:
        """
        Parse the given buffer.
        """
        self._demangle_function_name(src)

        # Constructors and destructors are complete once their class is known.
        if self._encoding.is_xtor():
            return self._out.flatten()

        next = Token.peek(src)
        if next.kind != Token.Kind.FUNCTION:
            if next.is_end():
                raise UnexpectedEnd("Expected `F` to start the parameter list")
            raise UnsupportedTypeCode(f"Expected `F` to start the parameter list, got `{next}`")
        read_exact(src, 1)

        self._out.append("(")
        self._demangle_args(src)
        self._out.append(")")

        return self._out.flatten()

    def _demangle_args(self, src: TextIOBase):
        """
        Demangle the parameter list up to the end of the buffer. Every argument is
        remembered so that later `T` and `N` codes can refer back to it.
        """
        iterations: int = 0

        while True:
            iterations += 1
            self._check_iterations(iterations)

            next = Token.peek(src)
            if next.kind == Token.Kind.BACKREF:
                # Repeat of an earlier argument, which also takes a new slot.
                text = self._demangle_backref(src)
                self._out.append(text)
                self._args.record(text)

            elif next.kind == Token.Kind.REPEAT:
                self._demangle_repeat(src)

            else:
                start = len(self._out)
                self._demangle_arg(src, self._out)
                self._args.record(self._out.extract(start, len(self._out) - 1))

            if at_end(src):
                break

            self._out.append(", ")

    def _check_iterations(self, iterations: int):
        """
        Raise an `IterationLimitExceeded` once an argument list has more than
        `max_iterations` elements.
        """
        if iterations > self.max_iterations:
            raise IterationLimitExceeded(f"Argument list exceeds {self.max_iterations} elements")

    def _demangle_backref(self, src: TextIOBase) -> str:
        """
        Consume a `T<index>` code and return the argument it refers to.
        """
        read_exact(src, 1)
        index = read_number(src, allow_zero=True)
        return self._args.get(index)

    def _demangle_repeat(self, src: TextIOBase):
        """
        Consume a `N<count><index>` code, printing the referenced argument
        `count` times.
        """
        read_exact(src, 1)
        repeat = read_digit(src)
        if repeat < 2:
            raise MalformedLength(f"Repeat count must be at least 2, got {repeat}")

        index = read_number(src, allow_zero=True)
        text = self._args.get(index)

        for i in range(repeat):
            if i:
                self._out.append(", ")
            self._out.append(text)
            self._args.record(text)

    def _demangle_arg(self, src: TextIOBase, out: TokenBuilder, depth: int = 0):
        """
        Demangle one type into `out`, including its pointer/reference/const suffixes.
        """
        modifiers = self._demangle_type(src, out, depth)
        for suffix in modifiers.suffixes():
            out.append(suffix)

    def _demangle_type(
        self, src: TextIOBase, out: TokenBuilder, depth: int = 0
    ) -> PendingModifiers:
        """
        Demangle one type into `out` and return the suffixes which still need to be
        printed after it. `depth` counts the function pointer types enclosing this one.
        """
        modifiers = PendingModifiers()

        next = Token.peek(src)
        while next.is_type_prefix():
            read_exact(src, 1)

            if next.kind == Token.Kind.CONST:
                # A const pointer prints as `T* const`.
                if Token.peek(src).kind == Token.Kind.POINTER:
                    modifiers.has_const_suffix = True
                else:
                    out.append(next.get_prefix_spelling())

            elif next.kind == Token.Kind.POINTER:
                if Token.peek(src).kind == Token.Kind.FUNCTION:
                    read_exact(src, 1)
                    self._demangle_function_pointer(src, out, depth + 1)
                    return modifiers
                modifiers.is_pointer = True

            elif next.kind == Token.Kind.REFERENCE:
                modifiers.is_reference = True

            elif not next.is_inert_prefix():
                out.append(next.get_prefix_spelling())

            next = Token.peek(src)

        if next.is_digit():
            out.append(self._demangle_class_name(src))
        elif next.kind == Token.Kind.QUALIFIED:
            read_exact(src, 1)
            out.append("::".join(self._demangle_qualified(src)))
        elif next.is_primitive():
            read_exact(src, 1)
            out.append(next.get_primitive_spelling())
        elif next.is_end():
            raise UnexpectedEnd("Expected a type")
        else:
            raise UnsupportedTypeCode(f"Unknown type code `{next}`")

        return modifiers

    def _demangle_function_pointer(self, src: TextIOBase, out: TokenBuilder, depth: int):
        """
        Demangle a pointer to function. The buffer should point just past the `PF`,
        at the argument types, which are terminated by `_` and followed by the
        return type.

        Example: `PFic_v` => `void (*)(int, char)`
        """
        if depth > self.max_nesting:
            raise IterationLimitExceeded(
                f"Function pointer types nested more than {self.max_nesting} deep"
            )

        args = TokenBuilder()
        iterations: int = 0

        while True:
            iterations += 1
            self._check_iterations(iterations)

            if Token.peek(src).kind == Token.Kind.BACKREF:
                args.append(self._demangle_backref(src))
            else:
                self._demangle_arg(src, args, depth)

            next = Token.peek(src)
            if next.kind == Token.Kind.UNDERSCORE:
                read_exact(src, 1)
                break
            if next.is_end():
                raise UnexpectedEnd("Expected `_` after function pointer parameters")

            args.append(", ")

        ret = TokenBuilder()
        self._demangle_arg(src, ret, depth)

        out.append(ret.flatten())
        out.append(" (*)(")
        out.append(args.flatten())
        out.append(")")

    def _demangle_function_name(self, src: TextIOBase):
        """
        Demangle the head of the symbol: the function, operator, constructor or
        destructor name along with the scope it belongs to.
        """
        if peek_exact(src, 2) == "__":
            read_exact(src, 2)
            self._demangle_operator(src)
            return

        # Everything before the first `__` is the function's own name.
        dunder_offset: Optional[int] = lookahead_for_substring(src, "__")
        if dunder_offset is None:
            raise UnexpectedEnd("Expected a `__` delimiter after the function name")

        name = read_exact(src, dunder_offset)
        read_exact(src, 2)
        self._encoding = EncodingKind.PLAIN_FUNCTION

        if self._at_scope(src):
            self._out.append("::".join(self._demangle_scope(src)))
            self._out.append("::")

        self._out.append(name)

    def _demangle_operator(self, src: TextIOBase):
        """
        Demangle an operator, constructor or destructor name. The buffer should
        point just past the leading `__`.

        Examples:
        __pl__7Complex  => `Complex::operator+`
        __ct__3Foo      => `Foo::Foo()`
        __dt__Q23Foo3Bar => `Foo::Bar::~Bar()`
        """
        op = Operator.read(src)

        if op.is_xtor():
            self._encoding = EncodingKind.CONSTRUCTOR if op.is_ctor() else EncodingKind.DESTRUCTOR
            scope = self._demangle_scope(src)
            self._out.append("::".join(scope))
            self._out.append("::~" if op.is_dtor() else "::")
            self._out.append(scope[-1])
            self._out.append("()")
            return

        self._encoding = EncodingKind.OPERATOR_FUNCTION
        self._out.append(op.get_name())

        # Skip the `__` between the operator and its class.
        read_exact(src, 2)

        # The class comes after the operator in the symbol, but before it in the output.
        op_name = self._out.pop_last()
        self._out.append("::".join(self._demangle_scope(src)))
        self._out.append("::")
        self._out.append(op_name)

    def _at_scope(self, src: TextIOBase) -> bool:
        """
        Determine if the buffer points to a class name or a qualified name.
        """
        next = Token.peek(src)
        if next.kind == Token.Kind.QUALIFIED:
            return Token.peek(src, offset=1).is_digit()
        return next.is_digit()

    def _demangle_scope(self, src: TextIOBase) -> list[str]:
        """
        Demangle a class name or qualified name and return its components,
        outermost first.
        """
        if not self._at_scope(src):
            next = Token.peek(src)
            if next.is_end():
                raise UnexpectedEnd("Expected a class or qualified name")
            raise MalformedLength(f"Expected a class or qualified name, got `{next}`")

        if Token.peek(src).kind == Token.Kind.QUALIFIED:
            read_exact(src, 1)
            return self._demangle_qualified(src)

        return [self._demangle_class_name(src)]

    def _demangle_qualified(self, src: TextIOBase) -> list[str]:
        """
        Demangle a qualified name. The buffer should point just past the `Q`, at the
        single digit giving the number of names.

        Example: `Q23Foo3Bar` => ["Foo", "Bar"]
        """
        count = read_digit(src)
        if count == 0:
            raise MalformedLength("Qualified name must have at least one component")

        names = [self._demangle_class_name(src) for _ in range(count)]

        # Two characters always follow the last component.
        read_exact(src, min(2, bytes_left(src)))

        return names

    def _demangle_class_name(self, src: TextIOBase) -> str:
        """
        Demangle a length-prefixed class name, e.g. `3Foo`.
        """
        length = read_number(src)
        return read_exact(src, length)


def demangle(mangled: str) -> str:
    """
    Demangle an ARM mangled symbol. Raises a `DemangleError` on failure.
    """
    return ARMDemangler().parse(mangled)


def try_demangle(mangled: str) -> Optional[str]:
    """
    Demangle an ARM mangled symbol, returning `None` if it cannot be demangled.
    """
    try:
        return demangle(mangled)
    except DemangleError as e:
        log.debug("Unable to demangle %r: %s", mangled, e)
        return None


def is_arm_mangled(mangled: str) -> bool:
    """
    Cheap check for whether `mangled` might be an ARM mangled symbol.

    Any name containing `__` passes, so this has plenty of false positives;
    it only rules out names that certainly cannot be demangled.
    """
    return "__" in mangled
