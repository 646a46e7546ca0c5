#!/usr/bin/env python3
"""
Entry point for running rabin_cdc as a module.

This allows the package to be run with:
    python -m rabin_cdc
"""

from rabin_cdc.cli import main

if __name__ == "__main__":
    main()
