"""
Run with: python -m mathwiki [query] [--tag TAG]
"""
import sys

from mathwiki.main import main

if __name__ == "__main__":
    sys.exit(main())
