#! /usr/bin/env python
"""This module implements the path, query, fragment and IPv4 address
productions of the URI grammar defined in RFC 3986

The parse functions all take a :class:`uricore.buffer.TokenBuffer` of
logical characters (see :func:`uricore.buffer.new_char_buffer`) and
follow the same pattern.  They attempt to parse a production at the
current position of the buffer and return an object representing it on
success, leaving the buffer positioned just after the parsed text.  If
the production is not present they return None and the buffer is left
exactly where it was, every character read during the attempt is pushed
back.  This means that alternatives can be tried in turn::

    path = parse_path_absolute(buff)
    if path is None:
        path = parse_path_rootless(buff)

Some productions can match an empty string and so never return None,
e.g., :func:`parse_segment`.

Errors in the source itself, such as a bad %-escape, are raised as
:class:`uricore.chars.EscapeError` exceptions and are never confused
with a production simply not being present.

The grammar is only partially implemented; scheme, authority and host
names are not parsed (IPv4 addresses excepted)::

    URI           = scheme ":" hier-part [ "?" query ] [ "#" fragment ]

    hier-part     = "//" authority path-abempty
                  / path-absolute
                  / path-rootless
                  / path-empty

    relative-part = "//" authority path-abempty
                  / path-absolute
                  / path-noscheme
                  / path-empty

    host          = IP-literal / IPv4address / reg-name"""

import ipaddress

from .buffer import new_char_buffer
from .chars import (
    is_digit,
    is_hex,
    is_pchar,
    is_pchar_nc,
    is_query_char,
    LogicalChar,
    PercentEscape,
    URIException)


class ParserError(URIException, ValueError):

    """Exception raised when a required production is missing

    production
        The name of the production being parsed

    buff
        The :class:`uricore.buffer.TokenBuffer` being parsed (optional)

    Only the require\\_* functions raise ParserError, the parse\\_*
    functions return None instead.  ParserError is a subclass of
    ValueError."""

    def __init__(self, production, buff=None):
        self.production = production
        if buff is not None:
            #: the position of the buffer when the error was raised
            self.pos = buff.pos
            if production:
                msg = "ParserError: expected %s at [%i]" % (production,
                                                            self.pos)
            else:
                msg = "ParserError: at [%i]" % self.pos
        else:
            self.pos = None
            if production:
                msg = "ParserError: expected %s" % production
            else:
                msg = "ParserError"
        ValueError.__init__(self, msg)


class CharSequence(object):

    """Abstract class for syntax elements made of logical characters

    chars
        An iterable of :class:`uricore.chars.LogicalChar` instances.
        Derived classes test each character against :meth:`char_test`
        and raise ValueError if any are not allowed.

    Instances are immutable and compare equal when they are of the same
    class and contain the same characters.  str() returns the original
    URI text, including any %-escapes exactly as they appeared in the
    source."""

    __slots__ = ('chars', )

    def __init__(self, chars=()):
        chars = tuple(chars)
        for c in chars:
            if not isinstance(c, LogicalChar) or not self.char_test(c):
                raise ValueError("%s not allowed in %s" %
                                 (repr(c), self.__class__.__name__))
        object.__setattr__(self, 'chars', chars)

    @staticmethod
    def char_test(c):
        return True

    def __setattr__(self, name, value):
        raise AttributeError("%s is immutable" % self.__class__.__name__)

    def __len__(self):
        return len(self.chars)

    def __iter__(self):
        return iter(self.chars)

    def __bytes__(self):
        return b''.join(bytes(c) for c in self.chars)

    def __str__(self):
        return ''.join(str(c) for c in self.chars)

    def __repr__(self):
        return "%s(%s)" % (self.__class__.__name__, repr(str(self)))

    def __eq__(self, other):
        if not isinstance(other, CharSequence):
            return NotImplemented
        return self.__class__ is other.__class__ and \
            self.chars == other.chars

    def __hash__(self):
        return hash((self.__class__.__name__, self.chars))

    def unescape(self):
        """Returns the data represented by this element

        The result is a binary string with any %-escapes replaced by the
        octets they represent.  There is no guarantee that the result
        can be decoded as text, though UTF-8 is often a good guess::

            >>> seg = parse_text("%E8%8B%B1%E5%9B%BD.xml", parse_segment)
            >>> seg.unescape().decode('utf-8') == '\\u82f1\\u56fd.xml'
            True"""
        data = []
        for c in self.chars:
            if isinstance(c, PercentEscape):
                data.append(c.value)
            else:
                data.append(c.byte)
        return bytes(data)


class Segment(CharSequence):

    """Represents a path segment

    segment       = *pchar"""

    __slots__ = ()

    char_test = staticmethod(is_pchar)


class Query(CharSequence):

    """Represents the query component

    query         = *( pchar / "/" / "?" )"""

    __slots__ = ()

    char_test = staticmethod(is_query_char)


class Fragment(CharSequence):

    """Represents the fragment component

    fragment      = *( pchar / "/" / "?" )"""

    __slots__ = ()

    char_test = staticmethod(is_query_char)


class DecOctet(CharSequence):

    """Represents a dec-octet, an IPv4 address component

    The characters are retained so that the original text is reproduced
    exactly, the value attribute contains the octet's integer value."""

    __slots__ = ()

    char_test = staticmethod(is_digit)

    def __init__(self, chars):
        super(DecOctet, self).__init__(chars)
        if not 1 <= len(self.chars) <= 3 or self.value > 255:
            raise ValueError("bad dec-octet: %s" % str(self))

    @property
    def value(self):
        return int(str(self))


class H16(CharSequence):

    """Represents 16 bits of an IPv6 address in hexadecimal

    h16           = 1*4HEXDIG

    Only the 4 digit form is parsed."""

    __slots__ = ()

    char_test = staticmethod(is_hex)

    def __init__(self, chars):
        super(H16, self).__init__(chars)
        if len(self.chars) != 4:
            raise ValueError("bad h16: %s" % str(self))

    @property
    def value(self):
        return int(str(self), 16)


class IPv4Address(object):

    """Represents an IPv4 address in dotted decimal form

    IPv4address   = dec-octet "." dec-octet "." dec-octet "." dec-octet

    Constructed from four :class:`DecOctet` instances in address order,
    stored as the tuple dec_octets."""

    __slots__ = ('dec_octets', )

    def __init__(self, d1, d2, d3, d4):
        dec_octets = (d1, d2, d3, d4)
        for d in dec_octets:
            if not isinstance(d, DecOctet):
                raise ValueError("IPv4Address requires DecOctet: %s" %
                                 repr(d))
        object.__setattr__(self, 'dec_octets', dec_octets)

    def __setattr__(self, name, value):
        raise AttributeError("IPv4Address is immutable")

    @property
    def octets(self):
        """A tuple of the four integer octet values"""
        return tuple(d.value for d in self.dec_octets)

    def to_ipaddress(self):
        """Returns an equivalent :class:`ipaddress.IPv4Address`"""
        return ipaddress.IPv4Address(bytes(self.octets))

    def __str__(self):
        return '.'.join(str(d) for d in self.dec_octets)

    def __bytes__(self):
        return b'.'.join(bytes(d) for d in self.dec_octets)

    def __repr__(self):
        return "IPv4Address(%s)" % ', '.join(repr(d)
                                             for d in self.dec_octets)

    def __eq__(self, other):
        if not isinstance(other, IPv4Address):
            return NotImplemented
        return self.dec_octets == other.dec_octets

    def __hash__(self):
        return hash(self.dec_octets)


class Path(object):

    """Represents a path

    absolute
        True if the path starts with "/"

    segments
        An iterable of :class:`Segment` instances, stored as a tuple.

    The empty path is represented by a non-absolute path with no
    segments.  The path "/" is absolute with a single empty segment.
    Note that the non-absolute path containing a single empty segment
    also renders as an empty string but it does not compare equal to
    the empty path, use :meth:`is_empty` to test for both.

    Paths are immutable and can be used as keys in dictionaries."""

    __slots__ = ('absolute', 'segments')

    def __init__(self, absolute=False, segments=()):
        segments = tuple(segments)
        for s in segments:
            if not isinstance(s, Segment):
                raise ValueError("Path requires Segment: %s" % repr(s))
        object.__setattr__(self, 'absolute', bool(absolute))
        object.__setattr__(self, 'segments', segments)

    def __setattr__(self, name, value):
        raise AttributeError("Path is immutable")

    def is_empty(self):
        """True if this path renders as an empty string"""
        if self.absolute:
            return False
        for s in self.segments:
            if len(s):
                return False
        return True

    def __str__(self):
        path = '/'.join(str(s) for s in self.segments)
        if self.absolute:
            return '/' + path
        else:
            return path

    def __bytes__(self):
        return str(self).encode('iso-8859-1')

    def __repr__(self):
        return "Path(%s, %s)" % (repr(self.absolute), repr(self.segments))

    def __eq__(self, other):
        if not isinstance(other, Path):
            return NotImplemented
        return self.absolute == other.absolute and \
            self.segments == other.segments

    def __hash__(self):
        return hash((self.absolute, self.segments))


def _parse_literal(buff, b):
    c = buff.pop()
    if c is None:
        return None
    elif c.is_byte(b):
        return c
    buff.push(c)
    return None


def _parse_run(buff, char_test, max=None):
    chars = []
    while max is None or len(chars) < max:
        c = buff.pop()
        if c is None:
            break
        elif char_test(c):
            chars.append(c)
        else:
            buff.push(c)
            break
    return chars


def parse_dec_octet(buff):
    """Parses production: dec-octet

    dec-octet     = DIGIT                 ; 0-9
                  / %x31-39 DIGIT         ; 10-99
                  / "1" 2DIGIT            ; 100-199
                  / "2" %x30-34 DIGIT     ; 200-249
                  / "25" %x30-35          ; 250-255

    Up to three digits are parsed and then the value checked, if it is
    greater than 255 all three digits are pushed back and None is
    returned.  No attempt is made to parse a shorter string of digits,
    so "256" is not parsed at all whereas "2555" is parsed as "255".
    Leading zeros are accepted."""
    digits = _parse_run(buff, is_digit, 3)
    if digits and int(''.join(str(c) for c in digits)) <= 255:
        return DecOctet(digits)
    buff.push_tokens(digits)
    return None


def parse_h16(buff):
    """Parses production: h16

    Exactly four hex digits must be present, shorter strings of hex
    digits are not parsed and a fifth digit is not consumed."""
    digits = _parse_run(buff, is_hex, 4)
    if len(digits) == 4:
        return H16(digits)
    buff.push_tokens(digits)
    return None


def parse_ipv4_address(buff):
    """Parses production: IPv4address

    Returns an :class:`IPv4Address` instance or None.  If any part of
    the address is missing nothing is parsed, there are no partial
    addresses."""
    consumed = []
    dec_octets = []
    for i in range(4):
        if i:
            dot = _parse_literal(buff, '.')
            if dot is None:
                buff.push_tokens(consumed)
                return None
            consumed.append(dot)
        d = parse_dec_octet(buff)
        if d is None:
            buff.push_tokens(consumed)
            return None
        consumed += d.chars
        dec_octets.append(d)
    return IPv4Address(*dec_octets)


def parse_segment(buff):
    """Parses production: segment

    Never returns None, the result may be an empty :class:`Segment`."""
    return Segment(_parse_run(buff, is_pchar))


def parse_segment_nz(buff):
    """Parses production: segment-nz

    segment-nz    = 1*pchar"""
    chars = _parse_run(buff, is_pchar)
    if chars:
        return Segment(chars)
    return None


def parse_segment_nz_nc(buff):
    """Parses production: segment-nz-nc

    segment-nz-nc = 1*( unreserved / pct-encoded / sub-delims / "@" )
                  ; non-zero-length segment without any colon ":"  """
    chars = _parse_run(buff, is_pchar_nc)
    if chars:
        return Segment(chars)
    return None


def _parse_slash_segments(buff, segments):
    # *( "/" segment )
    while _parse_literal(buff, '/') is not None:
        segments.append(parse_segment(buff))
    return segments


def parse_path_abempty(buff):
    """Parses production: path-abempty

    path-abempty  = *( "/" segment )

    Never returns None, if there are no segments the result is the
    empty path.  Otherwise the result is an absolute path."""
    segments = _parse_slash_segments(buff, [])
    return Path(bool(segments), segments)


def parse_path_absolute(buff):
    """Parses production: path-absolute

    path-absolute = "/" [ segment-nz *( "/" segment ) ]

    If the leading "/" is not followed by segment-nz the result is an
    absolute path with a single empty segment."""
    if _parse_literal(buff, '/') is None:
        return None
    path = parse_path_rootless(buff)
    if path is None:
        return Path(True, (Segment(), ))
    return Path(True, path.segments)


def parse_path_noscheme(buff):
    """Parses production: path-noscheme

    path-noscheme = segment-nz-nc *( "/" segment )"""
    segment = parse_segment_nz_nc(buff)
    if segment is None:
        return None
    return Path(False, _parse_slash_segments(buff, [segment]))


def parse_path_rootless(buff):
    """Parses production: path-rootless

    path-rootless = segment-nz *( "/" segment )"""
    segment = parse_segment_nz(buff)
    if segment is None:
        return None
    return Path(False, _parse_slash_segments(buff, [segment]))


def parse_path_empty(buff):
    """Parses production: path-empty

    path-empty    = 0<pchar>

    No characters are consumed.  Returns the empty path if the next
    character is not a pchar (or there is no next character), otherwise
    None."""
    c = buff.pop()
    if c is not None:
        buff.push(c)
        if is_pchar(c):
            return None
    return Path()


def parse_path(buff):
    """Parses production: path

    Tries path-absolute and then path-rootless, if neither is present
    the empty path is returned.  Never returns None.

    path-abempty and path-noscheme are not tried, they are only
    distinguishable from the other forms by the context in which the
    path appears."""
    path = parse_path_absolute(buff)
    if path is None:
        path = parse_path_rootless(buff)
    if path is None:
        path = Path()
    return path


def parse_fragment(buff):
    """Parses production: fragment

    Never returns None, the result may be an empty :class:`Fragment`."""
    return Fragment(_parse_run(buff, is_query_char))


def parse_query(buff):
    """Parses production: query

    query and fragment share the same syntax."""
    return Query(parse_fragment(buff).chars)


#: a mapping from production name to parse function
PRODUCTIONS = {
    'dec-octet': parse_dec_octet,
    'h16': parse_h16,
    'IPv4address': parse_ipv4_address,
    'segment': parse_segment,
    'segment-nz': parse_segment_nz,
    'segment-nz-nc': parse_segment_nz_nc,
    'path': parse_path,
    'path-abempty': parse_path_abempty,
    'path-absolute': parse_path_absolute,
    'path-noscheme': parse_path_noscheme,
    'path-rootless': parse_path_rootless,
    'path-empty': parse_path_empty,
    'query': parse_query,
    'fragment': parse_fragment}


def _production_name(parse_method):
    for name, method in PRODUCTIONS.items():
        if method is parse_method:
            return name
    return getattr(parse_method, '__name__', None)


def require_production(result, production=None, buff=None):
    """Returns *result* if not None or raises ParserError.

    result
        The result of a parse_* function.

    production
        Optional string used to customise the error message.

    buff
        The buffer that was being parsed, used to report the position
        of the error.

    This function is intended to be used as a conversion function
    allowing any parse_* function to be converted into a require_*
    function.  E.g.::

        buff = new_char_buffer("256.1.1.1")
        ip = require_production(parse_ipv4_address(buff),
                                "IPv4address", buff)

        ParserError: expected IPv4address at [0]"""
    if result is None:
        raise ParserError(production, buff)
    return result


def require_end(buff, production='end'):
    """Tests that all of *buff* has been parsed

    There is no return result.  If there is data left in the buffer
    :class:`ParserError` is raised, the unparsed character is left in
    the buffer."""
    c = buff.pop()
    if c is not None:
        buff.push(c)
        raise ParserError(production, buff)


def parse_text(src, parse_method, production=None):
    """Parses the whole of *src* with a single production

    src
        A binary string, an ASCII character string or file-like object
        containing URI text.

    parse_method
        One of the parse_* functions from this module (or any other
        function taking a buffer with the same behaviour).

    production
        Optional name of the production used in error messages,
        defaults to the ABNF name of parse_method.

    Returns the parsed element.  If the production is not present, or
    does not consume all of *src*, :class:`ParserError` is raised.
    Errors in the %-escapes of src are raised in the usual way::

        >>> str(parse_text("/a/%7E/c", parse_path).segments[1])
        '%7E'"""
    if production is None:
        production = _production_name(parse_method)
    buff = new_char_buffer(src)
    result = require_production(parse_method(buff), production, buff)
    require_end(buff, production)
    return result
