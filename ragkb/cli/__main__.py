"""Allow ``python -m ragkb.cli`` execution."""

from ragkb.cli.main import main

main()
