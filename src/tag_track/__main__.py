"""Allow running tag-track with ``python -m tag_track``."""

from tag_track.cli.app import main

if __name__ == "__main__":
    main()
