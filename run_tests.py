#!/usr/bin/env python
"""
    Test Runner
    ~~~~~~~~~~~

    This is a wrapper script for running the TightBlog unittests.
    Run it with the --help option for usage information.

    :copyright: (c) 2009 by the TightBlog Team, see AUTHORS for more details.
    :license: BSD, see LICENSE for more details.
"""
from tests import main
main()
