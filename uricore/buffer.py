#! /usr/bin/env python
"""A token buffer supporting unlimited look-ahead and rollback"""

import collections
import logging

from .chars import CharStream


logging = logging.getLogger('uricore.buffer')


class TokenBuffer(object):

    """A buffer of tokens read from a token stream

    stream
        Any object with a next method that returns the next token or
        None when there are no more tokens, typically a
        :class:`uricore.chars.CharStream`.

    Tokens are read with :meth:`pop`.  Any token that has been read can
    be returned to the buffer with :meth:`push` (or a sequence of
    tokens with :meth:`push_tokens`) and it will be read again, before
    any new tokens are pulled from the stream.  There is no limit on the
    number of tokens that can be pushed back, the buffer simply grows,
    but it is up to the caller to push tokens back in the reverse of the
    order in which they were read.  For example, to look ahead by two
    tokens::

        savepos = buff.pos
        t1 = buff.pop()
        t2 = buff.pop()
        # decide not to use them after all...
        buff.push_tokens([t1, t2])
        # buff.pos == savepos

    Errors raised by the stream (for example, a bad %-escape) are not
    caught, they propagate to the caller of :meth:`pop`."""

    def __init__(self, stream):
        self.stream = stream
        self.queue = collections.deque()
        #: the number of tokens read from the start of the stream, less
        #: those that have been pushed back
        self.pos = 0

    def __len__(self):
        """The number of tokens waiting in the buffer

        These are tokens that have been pulled from the stream and then
        pushed back but not yet read again."""
        return len(self.queue)

    def pop(self):
        """Returns the next token

        Returns None at the end of the stream."""
        if self.queue:
            token = self.queue.popleft()
        else:
            token = self.stream.next()
            if token is None:
                return None
        self.pos += 1
        return token

    def push(self, token):
        """Pushes *token* back to the front of the buffer

        Undoes a single :meth:`pop`, the next call to pop returns
        *token*."""
        self.queue.appendleft(token)
        self.pos -= 1

    def push_tokens(self, tokens):
        """Pushes a sequence of tokens back to the front of the buffer

        tokens
            A sequence of tokens in the order in which they were read.

        Once pushed, the tokens will be read again in their original
        order."""
        if tokens:
            logging.debug("rollback of %i token(s) to [%i]", len(tokens),
                          self.pos - len(tokens))
            self.queue.extendleft(reversed(tokens))
            self.pos -= len(tokens)


def new_char_buffer(src, buffsize=None):
    """Returns a new :class:`TokenBuffer` of logical URI characters

    src
        A binary string, an ASCII character string, a file-like object
        or a :class:`uricore.streams.ByteSource`.

    buffsize
        Optional read size for file-like sources."""
    return TokenBuffer(CharStream(src, buffsize))
