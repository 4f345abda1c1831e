#! /usr/bin/env python
"""Runs unit tests on all uricore modules"""

import unittest
import logging

import test_buffer
import test_charclass
import test_chars
import test_rfc3986
import test_streams


all_tests = unittest.TestSuite()
all_tests.addTest(test_buffer.suite())
all_tests.addTest(test_charclass.suite())
all_tests.addTest(test_chars.suite())
all_tests.addTest(test_rfc3986.suite())
all_tests.addTest(test_streams.suite())


def suite():
    global all_tests
    return all_tests


def load_tests(loader, tests, pattern):
    return suite()

if __name__ == "__main__":
    logging.basicConfig(level=logging.ERROR)
    unittest.main()
