"""Entry point for 'python -m restoauth' command."""

from restoauth.cli import main

if __name__ == "__main__":
    main()
