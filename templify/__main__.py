"""
Entry point for running Templify as a module.

Usage:
    python -m templify pdf content.json --template ihm-portrait --title "Annual Report"
    python -m templify docx content.txt --template ihna-landscape --title "Handbook"
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
