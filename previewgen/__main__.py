"""
Main entry point for running the package as a module.

Usage:
    python -m previewgen run --server http://localhost:8080
    python -m previewgen classify application/pdf
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
