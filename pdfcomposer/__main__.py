"""
Module entry point for: python -m pdfcomposer

Allows running the composer directly as a module:
    python -m pdfcomposer render <input.md> <output.pdf> [options]
    python -m pdfcomposer check <file.pdf>
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
