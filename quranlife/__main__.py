#!/usr/bin/env python3
"""
Enable running QuranLife via: python -m quranlife

Usage:
    python -m quranlife daily
    python -m quranlife guide "Read Quran every morning"
"""

import sys

from quranlife.cli import main

if __name__ == "__main__":
    sys.exit(main())
