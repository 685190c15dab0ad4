"""
Entry point for running the harness as a module.

Usage:
    python -m lk_harness --deadline 30s -- exec ./bot.sh
"""

from .api.cli import main

if __name__ == "__main__":
    main()
