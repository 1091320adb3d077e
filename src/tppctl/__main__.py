"""
Entry point for running tppctl as a module.

Usage:
    python -m tppctl [command] [options]
"""

from tppctl.cli import main

if __name__ == "__main__":
    main()
