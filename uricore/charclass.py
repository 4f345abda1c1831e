#! /usr/bin/env python
"""Classes of octets used to define the URI character classes"""


class ByteClass(object):

    """Represents a class of octets.

    A class of octets is represented internally by a list of ranges
    that define the class.  URI character classes are almost entirely
    made of small runs of US-ASCII characters so this keeps definitions
    short and close to the text of RFC 3986.

    For the constructor, multiple arguments can be provided.

    String arguments add all characters in the string to the class.  For
    example, ByteClass('abcxyz') creates a class comprising two ranges:
    a-c and x-z.  Binary strings are treated the same way.

    Tuple/List arguments can be used to pass pairs of characters (or
    integer byte values) that define a range.  For example,
    ByteClass(('a', 'z')) creates a class comprising the letters a-z.

    Instances of ByteClass can also be used in the constructor to add an
    existing class.

    Instances support Python's repr function::

        >>> c = ByteClass('abcxyz')
        >>> repr(c)
        "ByteClass(('a', 'c'), ('x', 'z'))"

    Instances are treated as immutable once they have been tested, a
    lookup table is built the first time :meth:`test` is called."""

    def __init__(self, *args):
        self.ranges = []
        self._table = None
        for arg in args:
            if isinstance(arg, (str, bytes, bytearray)):
                for b in _byte_values(arg):
                    self.add_range(b, b)
            elif type(arg) in (tuple, list):
                self.add_range(_byte_value(arg[0]), _byte_value(arg[1]))
            elif isinstance(arg, ByteClass):
                self.add_class(arg)
            else:
                raise ValueError("can't add %s to ByteClass" % repr(arg))

    def __repr__(self):
        result = []
        for a, z in self.ranges:
            if a == z:
                result.append(_format_byte(a))
            else:
                result.append(
                    "(%s, %s)" % (_format_byte(a), _format_byte(z)))
        return "ByteClass(%s)" % ', '.join(result)

    def __eq__(self, other):
        if not isinstance(other, ByteClass):
            return NotImplemented
        return self.ranges == other.ranges

    def __hash__(self):
        return hash(tuple(tuple(r) for r in self.ranges))

    def add_range(self, a, z):
        """Adds a range of byte values from a to z to the class"""
        if z < a:
            a, z = z, a
        if a < 0 or z > 0xFF:
            raise ValueError("byte range out of bounds: %i-%i" % (a, z))
        new_ranges = []
        for r in self.ranges:
            if r[1] + 1 < a or z + 1 < r[0]:
                # disjoint and not adjacent
                new_ranges.append(r)
            else:
                a = min(a, r[0])
                z = max(z, r[1])
        new_ranges.append([a, z])
        new_ranges.sort()
        self.ranges = new_ranges
        self._table = None

    def add_class(self, c):
        """Adds all the octets in ByteClass *c* to this class"""
        for a, z in c.ranges:
            self.add_range(a, z)

    def test(self, b):
        """Test an octet

        b
            An integer byte value or None.

        Returns True if the octet is in the class.  If b is None, False
        is returned."""
        if b is None:
            return False
        if self._table is None:
            table = bytearray(256)
            for a, z in self.ranges:
                for i in range(a, z + 1):
                    table[i] = 1
            self._table = table
        return bool(self._table[b])


def _byte_value(arg):
    if isinstance(arg, int):
        return arg
    elif isinstance(arg, str):
        return ord(arg)
    elif isinstance(arg, (bytes, bytearray)) and len(arg) == 1:
        return arg[0]
    else:
        raise ValueError("expected a single octet: %s" % repr(arg))


def _byte_values(arg):
    if isinstance(arg, str):
        return [ord(c) for c in arg]
    else:
        return list(arg)


def _format_byte(b):
    if 0x20 < b < 0x7F:
        return repr(chr(b))
    else:
        return "0x%02X" % b
