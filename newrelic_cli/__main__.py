"""Allow running the CLI with ``python -m newrelic_cli``."""

from .main import main

if __name__ == "__main__":
    main()
