"""
Package entry point.

Allows running the application via:

    python -m trainingcal

This simply forwards execution to trainingcal.cli.main().
"""

from trainingcal.cli import main

if __name__ == "__main__":
    main()
