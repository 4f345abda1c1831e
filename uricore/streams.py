#! /usr/bin/env python
"""This module adapts the various sources of URI text to a byte supplier"""

import io


#: the default number of bytes read at a time from file-like sources
READ_BUFFER_SIZE = io.DEFAULT_BUFFER_SIZE


class ByteSource(object):

    """A sequential supplier of bytes

    src
        The data to supply.  Can be a binary string (bytes or
        bytearray), a character string or a file-like object.

        Character strings are accepted provided they only contain US
        ASCII characters, URI are defined in terms of octets and
        anything else must be %-encoded before parsing.  A ValueError is
        raised otherwise.

        File-like objects need only support a read method.  They are
        read *buffsize* bytes at a time, EOF is signalled by an empty
        string returned by src's read method.

    buffsize
        The number of bytes to request from file-like sources in each
        read, defaults to :data:`READ_BUFFER_SIZE`.

    Bytes are only ever returned once, there is no way to rewind a
    ByteSource.  Rewinding, when needed, takes place at the level of
    decoded characters, see :class:`uricore.buffer.TokenBuffer`."""

    def __init__(self, src, buffsize=READ_BUFFER_SIZE):
        if buffsize < 1:
            raise ValueError("buffsize must be > 0")
        self.bsize = buffsize
        if isinstance(src, str):
            try:
                src = src.encode('ascii')
            except UnicodeError:
                raise ValueError("URI text must be US ASCII: %s" % repr(src))
        if isinstance(src, (bytes, bytearray)):
            self.src = None
            self.data = bytes(src)
        elif hasattr(src, 'read'):
            self.src = src
            self.data = b''
        else:
            raise ValueError("can't read bytes from %s" % repr(src))
        #: the number of bytes returned so far
        self.pos = 0
        self._dpos = 0

    def next_byte(self):
        """Returns the next byte

        The result is an integer, or None if the end of the source has
        been reached.  Once None has been returned it will continue to
        be returned on subsequent calls."""
        if self._dpos >= len(self.data):
            if self.src is None or not self._fill():
                return None
        b = self.data[self._dpos]
        self._dpos += 1
        self.pos += 1
        return b

    def _fill(self):
        data = self.src.read(self.bsize)
        if not data:
            # EOF; stop reading from a source that has finished
            self.src = None
            self.data = b''
            self._dpos = 0
            return False
        if isinstance(data, str):
            data = data.encode('ascii')
        self.data = bytes(data)
        self._dpos = 0
        return True
