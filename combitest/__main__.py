"""Allow ``python -m combitest``."""

from combitest.cli import main

main()
