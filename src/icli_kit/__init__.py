"""icli-kit — interactive scaffolding and deployment for serverless projects.

Commands are declared once as a list of parameters and can then be
answered from command-line flags, from an interactive prompt, or both.
"""

from icli_kit.version import __version__

__all__: list[str] = ["__version__"]
