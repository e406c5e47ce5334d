#!/usr/bin/env python3
"""
Magic Image — Entry Point.

Usage:
    python main.py create photo1.jpg photo2.png magic.jpg
    python main.py view -m magic.jpg hidden.png
    python main.py analyze magic.jpg --json report.json
"""

import sys

from magicimage.cli import main

if __name__ == "__main__":
    sys.exit(main())
