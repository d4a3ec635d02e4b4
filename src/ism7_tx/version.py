#!/usr/bin/env python3
"""ISM7 TX - a telegram conversion framework for Wolf ISM7 controllers."""

__version__ = "0.4.2"
VERSION = __version__
