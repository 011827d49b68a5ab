"""Allow ``python -m pywget``."""

from pywget.cli import run

if __name__ == "__main__":
    run()
