"""
Utility functions for working with text streams.
"""

from contextlib import contextmanager
from io import TextIOBase
from typing import Iterator, Optional

from arm_demangler.errors import MalformedLength, UnexpectedEnd

# Largest value `read_number` accepts (an unsigned 64-bit integer).
MAX_NUMBER = 2**64 - 1
MAX_NUMBER_DIGITS = len(str(MAX_NUMBER))


def read_exact(src: TextIOBase, size: int) -> str:
    """
    Read exactly `size` characters from `src`, or raise an `UnexpectedEnd`.
    """
    if size > bytes_left(src):
        raise UnexpectedEnd(f"Unable to read {size} characters; only {bytes_left(src)} left")

    value = src.read(size)
    if len(value) != size:
        raise UnexpectedEnd(f"Unable to read {size} characters; got {value!r}")
    return value


@contextmanager
def peeking(src: TextIOBase, offset: int = 0) -> Iterator[None]:
    """
    Store the current offset in `src`,
    and restore it at the end of the context.
    An optional offset can be added to start peeking further ahead from the current
    location.
    """
    ptr = src.tell()
    if offset:
        src.seek(ptr + offset)

    try:
        yield
    finally:
        src.seek(ptr)


def peek(src: TextIOBase, n: int = 1, offset: int = 0) -> str:
    """
    Read up to `n` characters from `src` without advancing the offset.
    At the end of the buffer an empty string is returned.
    """
    with peeking(src, offset=offset):
        return src.read(n)


def peek_exact(src: TextIOBase, n: int = 1, offset: int = 0) -> str:
    """
    Try to read exactly `n` characters from `src` without advancing the offset.
    If there are not enough characters in the buffer, return "".
    """
    string = peek(src, n, offset=offset)
    if len(string) != n:
        string = ""
    return string


def bytes_left(src: TextIOBase, offset: int = 0) -> int:
    """
    Retrieve the number of characters left in `src`.
    An optional offset can be added.
    """
    start: int = src.tell() + offset
    with peeking(src):
        src.seek(0, 2)
        end: int = src.tell()

    return end - start


def at_end(src: TextIOBase) -> bool:
    """
    Determine if every character of `src` has been consumed.
    """
    return bytes_left(src) <= 0


def lookahead_for_substring(src: TextIOBase, string: str, base_offset: int = 0) -> Optional[int]:
    """
    Look ahead in the buffer for a given substring. An optional "base_offset" can be
    provided to start from a later point in the buffer.

    If one is found, return the number of chars that need to be read in order
    to reach the start of the substring (starting from [current location + base offset]).

    If the substring is not found in the buffer, returns None.
    """
    with peeking(src, offset=base_offset):
        index = src.read().find(string)

    return index if index >= 0 else None


def peek_number(src: TextIOBase) -> Optional[tuple[int, int]]:
    """
    Peek subsequent numeric characters from the source and return them as a positive
    base-10 integer.

    The first element of the tuple contains the read count.
    The second element of the tuple contains the offset from the current base which
    points to the first character after the sequence of digits.

    If a number cannot be read, `None` will be returned. A run of digits too long
    to be a 64-bit number raises a `MalformedLength`.
    """
    number_str = ""

    with peeking(src):
        char = src.read(1)
        while char and char in "0123456789":
            number_str += char
            char = src.read(1)

    if number_str == "":
        return None
    if len(number_str) > MAX_NUMBER_DIGITS:
        raise MalformedLength(f"Number with {len(number_str)} digits is too large")
    return (int(number_str), len(number_str))


def read_number(src: TextIOBase, allow_zero: bool = False) -> int:
    """
    Read subsequent numeric characters from the source and return them as a positive
    base-10 integer.

    If a number cannot be read or does not fit in 64 bits, a `MalformedLength` is raised.
    If the read number is zero and `allow_zero` is False, a `MalformedLength` is raised.
    """
    result = peek_number(src)

    if not result:
        raise MalformedLength(f"Expected a number, got {peek(src)!r}")

    number, next_offset = result

    if number > MAX_NUMBER:
        raise MalformedLength(f"Number {number} is too large")

    if not allow_zero and number == 0:
        raise MalformedLength("length must be positive")

    read_exact(src, next_offset)
    return number


def read_digit(src: TextIOBase) -> int:
    """
    Read a single decimal digit from the source and return its value.
    """
    char = read_exact(src, 1)
    if char not in "0123456789":
        raise MalformedLength(f"Expected a single decimal digit, got {char!r}")

    return int(char)
