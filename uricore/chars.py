#! /usr/bin/env python
"""This module decodes URI text into logical characters

RFC 3986 defines URI in terms of characters drawn from a restricted
subset of US ASCII with all other data %-encoded.  A logical character
is either a single ASCII byte taken verbatim or a complete %-escape:

    pct-encoded   = "%" HEXDIG HEXDIG

Escapes are *not* decoded, the two hex digits are kept exactly as they
appeared in the source so that parsed text always renders back to the
same octets.  Use the value attribute of :class:`PercentEscape` if you
need the octet it represents."""

import logging

from .charclass import ByteClass
from .streams import ByteSource


logging = logging.getLogger('uricore.chars')


class URIException(Exception):

    """Base class for all exceptions raised by this package"""
    pass


class EscapeError(URIException):

    """Raised when a %-escape can't be decoded

    msg
        A message describing the error

    pos
        The byte offset of the '%' that introduced the escape, or None
        if not known.

    EscapeError is deliberately *not* a ValueError, it indicates bad
    input rather than a failure to match a particular production and
    must not be confused with the latter."""

    def __init__(self, msg, pos=None):
        self.pos = pos
        if pos is not None:
            msg = "%s at [%i]" % (msg, pos)
        URIException.__init__(self, msg)


class TruncatedEscape(EscapeError):

    """Raised when a '%' is not followed by two more bytes"""
    pass


class InvalidEscape(EscapeError):

    """Raised when a '%' is followed by something other than HEXDIG"""
    pass


PERCENT = 0x25

alpha = ByteClass(('A', 'Z'), ('a', 'z'))

digit = ByteClass(('0', '9'))

hex_digit = ByteClass(digit, ('A', 'F'), ('a', 'f'))

unreserved = ByteClass(alpha, digit, "-._~")

sub_delims = ByteClass("!$&'()*+,;=")

# not quite the gen-delims of RFC 3986, see is_gen_delim
gen_delims = ByteClass(":|?#[]@")

reserved = ByteClass(gen_delims, sub_delims)

pchar_literals = ByteClass(unreserved, sub_delims, ":@")

# the characters allowed in segment-nz-nc
pchar_nc_literals = ByteClass(unreserved, sub_delims, "@")

query_literals = ByteClass(pchar_literals, "/?")


class LogicalChar(object):

    """Abstract class representing a single logical URI character

    Logical characters are immutable, they can be compared and used as
    keys in dictionaries.  Two characters are equal only if they are
    represented by the same octets in the source, in particular, %2f
    and %2F are different characters.

    The string representation is the original URI text of the character
    and the bytes representation is its octets::

        >>> str(PercentEscape(0x32, 0x66))
        '%2f'"""

    __slots__ = ()

    #: the byte value of a :class:`Literal`, None for escapes
    byte = None

    def is_byte(self, b):
        """Returns True if this is the literal byte *b*

        b
            An integer byte value or a character.

        A %-escape never matches, even if it encodes *b*."""
        return False

    def __bytes__(self):
        raise NotImplementedError

    def __str__(self):
        return self.__bytes__().decode('iso-8859-1')


class Literal(LogicalChar):

    """A single byte taken verbatim from the source

    byte
        The integer value of the byte."""

    __slots__ = ('byte', )

    def __init__(self, byte):
        if isinstance(byte, str):
            byte = ord(byte)
        object.__setattr__(self, 'byte', byte)

    def __setattr__(self, name, value):
        raise AttributeError("Literal is immutable")

    def is_byte(self, b):
        if isinstance(b, str):
            b = ord(b)
        return self.byte == b

    def __bytes__(self):
        return bytes((self.byte, ))

    def __repr__(self):
        return "Literal(%s)" % repr(chr(self.byte))

    def __eq__(self, other):
        if not isinstance(other, LogicalChar):
            return NotImplemented
        return isinstance(other, Literal) and self.byte == other.byte

    def __hash__(self):
        return hash(('Literal', self.byte))


class PercentEscape(LogicalChar):

    """A %-escape taken from the source

    hex1, hex2
        The integer values of the two HEXDIG bytes that followed the
        '%', stored with their original case.

    A ValueError is raised if either byte is not a hex digit, the
    decoder checks this before constructing escapes so the error is
    only seen by callers constructing instances directly."""

    __slots__ = ('hex1', 'hex2')

    def __init__(self, hex1, hex2):
        if isinstance(hex1, str):
            hex1 = ord(hex1)
        if isinstance(hex2, str):
            hex2 = ord(hex2)
        if not (hex_digit.test(hex1) and hex_digit.test(hex2)):
            raise ValueError("bad %%-escape: %s, %s" % (repr(hex1),
                                                         repr(hex2)))
        object.__setattr__(self, 'hex1', hex1)
        object.__setattr__(self, 'hex2', hex2)

    def __setattr__(self, name, value):
        raise AttributeError("PercentEscape is immutable")

    @property
    def value(self):
        """The octet represented by this escape (an integer)"""
        return int(bytes((self.hex1, self.hex2)), 16)

    def __bytes__(self):
        return bytes((PERCENT, self.hex1, self.hex2))

    def __repr__(self):
        return "PercentEscape(%s, %s)" % (repr(chr(self.hex1)),
                                          repr(chr(self.hex2)))

    def __eq__(self, other):
        if not isinstance(other, LogicalChar):
            return NotImplemented
        return (isinstance(other, PercentEscape) and
                self.hex1 == other.hex1 and self.hex2 == other.hex2)

    def __hash__(self):
        return hash(('PercentEscape', self.hex1, self.hex2))


def is_pct_encoded(c):
    """Tests production: pct-encoded"""
    return isinstance(c, PercentEscape)


def is_unreserved(c):
    """Tests production: unreserved

    unreserved    = ALPHA / DIGIT / "-" / "." / "_" / "~"

    Like all the tests in this module *c* is a :class:`LogicalChar`.
    None is allowed, and is never in the class, so tests can be applied
    directly to the result of a read that may have reached the end of
    the source."""
    return c is not None and unreserved.test(c.byte)


def is_sub_delim(c):
    """Tests production: sub-delims"""
    return c is not None and sub_delims.test(c.byte)


def is_gen_delim(c):
    """Tests for a general delimiter

    RFC 3986 defines::

        gen-delims    = ":" / "/" / "?" / "#" / "[" / "]" / "@"

    This test matches "|" in place of "/".  Nothing in the path, query
    or fragment grammar depends on it."""
    return c is not None and gen_delims.test(c.byte)


def is_reserved(c):
    """Tests production: reserved"""
    return c is not None and reserved.test(c.byte)


def is_pchar(c):
    """Tests production: pchar

    pchar         = unreserved / pct-encoded / sub-delims / ":" / "@" """
    return isinstance(c, PercentEscape) or (
        c is not None and pchar_literals.test(c.byte))


def is_pchar_nc(c):
    """Tests for a pchar other than ":"

    This is the character class used by segment-nz-nc."""
    return isinstance(c, PercentEscape) or (
        c is not None and pchar_nc_literals.test(c.byte))


def is_query_char(c):
    """Tests for a character allowed in query and fragment

    query         = *( pchar / "/" / "?" )"""
    return isinstance(c, PercentEscape) or (
        c is not None and query_literals.test(c.byte))


def is_digit(c):
    """Tests production: DIGIT

    %-escapes are never digits."""
    return c is not None and digit.test(c.byte)


def is_hex(c):
    """Tests production: HEXDIG

    %-escapes are never hex digits."""
    return c is not None and hex_digit.test(c.byte)


class CharStream(object):

    """Decodes a source of bytes into logical characters

    src
        Either a :class:`uricore.streams.ByteSource` or anything that
        can be used to construct one: a binary string, an ASCII
        character string or a file-like object.

    buffsize
        Passed to the ByteSource constructor when *src* is not already
        a ByteSource.

    Instances are also iterators, yielding characters until the end of
    the source is reached::

        >>> [str(c) for c in CharStream(b"a%2Fb")]
        ['a', '%2F', 'b']

    Malformed escapes raise :class:`TruncatedEscape` or
    :class:`InvalidEscape` from :meth:`next` (and hence from
    iteration)."""

    def __init__(self, src, buffsize=None):
        if isinstance(src, ByteSource):
            self.byte_source = src
        elif buffsize is None:
            self.byte_source = ByteSource(src)
        else:
            self.byte_source = ByteSource(src, buffsize)

    def next(self):
        """Returns the next logical character

        Returns None at the end of the source.  Reads exactly one byte
        or, for a %-escape, exactly three.  The bytes of an escape are
        never re-examined, so "%%41" is an invalid escape and not "%"
        followed by "%41"."""
        b = self.byte_source.next_byte()
        if b is None:
            return None
        elif b != PERCENT:
            return Literal(b)
        escape_pos = self.byte_source.pos - 1
        hex1 = self._require_hex(escape_pos)
        hex2 = self._require_hex(escape_pos)
        return PercentEscape(hex1, hex2)

    def _require_hex(self, escape_pos):
        b = self.byte_source.next_byte()
        if b is None:
            logging.debug("truncated escape at byte %i", escape_pos)
            raise TruncatedEscape("Unexpected end of escape sequence",
                                  escape_pos)
        elif not hex_digit.test(b):
            logging.debug("invalid escape at byte %i: 0x%02X",
                          escape_pos, b)
            raise InvalidEscape("Invalid escape sequence", escape_pos)
        return b

    def __iter__(self):
        return self

    def __next__(self):
        c = self.next()
        if c is None:
            raise StopIteration
        return c
