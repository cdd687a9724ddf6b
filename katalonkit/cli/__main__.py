"""
Entry point for running KatalonKit CLI as a module.

Usage: python -m katalonkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
