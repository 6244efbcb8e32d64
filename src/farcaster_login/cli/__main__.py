"""CLI entry point for farcaster_login.cli module.

Enables execution via: python -m farcaster_login.cli
"""

from farcaster_login.cli.login import main

if __name__ == "__main__":
    main()
