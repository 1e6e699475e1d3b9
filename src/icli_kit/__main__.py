"""Allow ``python -m icli_kit`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m icli_kit`` behaves identically to the ``icli-kit``
console script.
"""

from __future__ import annotations

from icli_kit.cli.app import cli

if __name__ == "__main__":
    cli()
