"""Allow ``python -m nocli``."""

from nocli.cli import main

main()
