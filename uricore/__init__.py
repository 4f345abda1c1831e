"""Parsers for the components of URI defined by RFC 3986

The package is split into layers: :mod:`uricore.streams` supplies
bytes, :mod:`uricore.chars` decodes them into logical characters,
:mod:`uricore.buffer` adds look-ahead and rollback and
:mod:`uricore.rfc3986` implements the grammar productions."""
