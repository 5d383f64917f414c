"""Allow ``python -m countdown``."""

from countdown._cli import main

main()
