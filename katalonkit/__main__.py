"""
Entry point for running KatalonKit CLI as a module.

Usage: python -m katalonkit [command] [options]
"""

from katalonkit.cli.parser import main

if __name__ == "__main__":
    main()
