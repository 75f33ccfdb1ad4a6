"""Allow ``python -m fontsmith`` to run the CLI."""

from fontsmith.ui.cli import main


if __name__ == "__main__":
    main()
