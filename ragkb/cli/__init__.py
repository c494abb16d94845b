# =============================================================================
# ragkb/cli/__init__.py - CLI Module Overview
# =============================================================================
#
# Operator command line for the ragkb knowledge base. Everything goes
# through KnowledgeService (or the WorkerPool for `worker`), so the CLI
# exercises exactly the operations an HTTP or protocol adapter would.
#
# Architecture Notes:
#   - argparse for argument parsing (not Click/Typer).
#   - The application graph is imported lazily inside _build_application
#     so `--help` stays fast.
#   - Results go to stdout as JSON; logs go to stderr.
# =============================================================================

"""Command-line tools for ragkb.

- ``python -m ragkb.cli submit --url URL --file page.txt``
- ``python -m ragkb.cli enqueue --url URL``
- ``python -m ragkb.cli worker``
- ``python -m ragkb.cli query "search text"``
"""
