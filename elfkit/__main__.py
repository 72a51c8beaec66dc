"""
elfkit Module Entry Point
==========================

Allows running the elfkit CLI via: python -m elfkit
"""

from elfkit.cli import main

if __name__ == "__main__":
    main()
