"""
Module entry point for: python -m eventbrief

Allows running the parser directly as a module:
    python -m eventbrief parse <pdf_path> [options]
    python -m eventbrief parse-text <text_path> [options]
    python -m eventbrief serve [options]
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
