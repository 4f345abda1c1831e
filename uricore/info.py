#! /usr/bin/env python
"""The module creates some basic constants to describe the package."""

title_name = "uricore"
name = "uricore"
copyright = "\xA92026, The uricore authors"

major_version = "0.1"
build_date = "20261019"
version = "%s.%s" % (major_version, build_date)

title = (
    "uricore: "
    "RFC 3986 component grammar with percent-escape decoding")
