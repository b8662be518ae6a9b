#!/usr/bin/env python3
"""
Package entry point for the Image Checker.

This allows the package to be executed with: python -m image_checker
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
