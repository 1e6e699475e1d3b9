"""Infrastructure layer — filesystem and remote API integration.

Every third-party or OS exception is caught here and re-raised as an
:class:`~icli_kit.exceptions.IcliError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output; logging only.
"""

from icli_kit.infra.iam_backend import Boto3IamBackend
from icli_kit.infra.iam_repository import IamRepository
from icli_kit.infra.scaffolding import (
    EXEC_TEMPLATES,
    LambdaSpec,
    create_lambda,
    create_node_module,
    list_node_modules,
)

__all__: list[str] = [
    "EXEC_TEMPLATES",
    "Boto3IamBackend",
    "IamRepository",
    "LambdaSpec",
    "create_lambda",
    "create_node_module",
    "list_node_modules",
]
