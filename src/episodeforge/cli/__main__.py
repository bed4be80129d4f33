"""Main entry point for episodeforge CLI when run as a module."""

from episodeforge.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
