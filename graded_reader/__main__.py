"""Main entry point for the graded reader package."""

from graded_reader.cli import main

if __name__ == "__main__":
    main()
