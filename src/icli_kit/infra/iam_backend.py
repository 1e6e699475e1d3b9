"""boto3 backed implementation of :class:`~icli_kit.core.protocols.IamBackend`.

This module is the **only** place in the codebase that imports
``boto3``.  Every ``botocore`` client error is re-raised as
:class:`~icli_kit.exceptions.DeploymentError` carrying the AWS error
code, chained to the original exception.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from icli_kit.exceptions import DeploymentError, MissingDependencyError

logger = logging.getLogger(__name__)

# IAM keeps at most five versions of a managed policy.
MAX_POLICY_VERSIONS = 5


def _import_boto3() -> tuple[Any, type[Exception]]:
    """Import boto3 lazily; return the module and ``ClientError``."""
    try:
        import boto3
        from botocore.exceptions import ClientError
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "boto3 is not installed. Install with: pip install 'icli-kit[aws]'",
        ) from exc
    return boto3, ClientError


def _error_code(exc: Exception) -> str | None:
    response = getattr(exc, "response", None) or {}
    return response.get("Error", {}).get("Code")


class Boto3IamBackend:
    """Concrete :class:`IamBackend` talking to AWS IAM through boto3.

    The client is created on first use so that commands which never
    deploy do not need boto3 or AWS credentials.
    """

    def __init__(self, region: str | None = None) -> None:
        self._region = region
        self._iam: Any = None
        self._sts: Any = None
        self._account_id: str | None = None
        self._client_error: type[Exception] = Exception

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    def _client(self) -> Any:
        if self._iam is None:
            boto3, client_error = _import_boto3()
            self._client_error = client_error
            self._iam = boto3.client("iam", region_name=self._region)
            self._sts = boto3.client("sts", region_name=self._region)
        return self._iam

    def _account(self) -> str:
        if self._account_id is None:
            self._client()
            with self._mapped_errors("GetCallerIdentity"):
                self._account_id = self._sts.get_caller_identity()["Account"]
        return self._account_id

    def _policy_arn(self, name: str) -> str:
        return f"arn:aws:iam::{self._account()}:policy/{name}"

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def put_policy(self, name: str, document: Mapping[str, Any], description: str) -> str:
        iam = self._client()
        body = json.dumps(document)
        try:
            response = iam.create_policy(
                PolicyName=name,
                PolicyDocument=body,
                Description=description,
            )
            logger.debug("Created policy %s", name)
            return response["Policy"]["Arn"]
        except self._client_error as exc:
            if _error_code(exc) != "EntityAlreadyExists":
                self._raise_mapped(exc, "CreatePolicy")

        arn = self._policy_arn(name)
        with self._mapped_errors("CreatePolicyVersion"):
            self._prune_policy_versions(arn)
            iam.create_policy_version(PolicyArn=arn, PolicyDocument=body, SetAsDefault=True)
        logger.debug("Updated policy %s", name)
        return arn

    def put_role(
        self,
        name: str,
        assume_role_policy: Mapping[str, Any],
        description: str,
        policy_names: Sequence[str],
    ) -> str:
        iam = self._client()
        body = json.dumps(assume_role_policy)
        try:
            response = iam.create_role(
                RoleName=name,
                AssumeRolePolicyDocument=body,
                Description=description,
            )
            arn = response["Role"]["Arn"]
            logger.debug("Created role %s", name)
        except self._client_error as exc:
            if _error_code(exc) != "EntityAlreadyExists":
                self._raise_mapped(exc, "CreateRole")
            with self._mapped_errors("UpdateAssumeRolePolicy"):
                iam.update_assume_role_policy(RoleName=name, PolicyDocument=body)
                arn = iam.get_role(RoleName=name)["Role"]["Arn"]
            logger.debug("Updated role %s", name)

        with self._mapped_errors("AttachRolePolicy"):
            for policy_name in policy_names:
                iam.attach_role_policy(RoleName=name, PolicyArn=self._policy_arn(policy_name))
        return arn

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _prune_policy_versions(self, arn: str) -> None:
        """Delete the oldest non-default version when the limit is reached."""
        versions = self._iam.list_policy_versions(PolicyArn=arn)["Versions"]
        if len(versions) < MAX_POLICY_VERSIONS:
            return
        candidates = sorted(
            (version for version in versions if not version["IsDefaultVersion"]),
            key=lambda version: version["CreateDate"],
        )
        if candidates:
            self._iam.delete_policy_version(PolicyArn=arn, VersionId=candidates[0]["VersionId"])

    @contextmanager
    def _mapped_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except DeploymentError:
            raise
        except self._client_error as exc:
            self._raise_mapped(exc, operation)

    @staticmethod
    def _raise_mapped(exc: Exception, operation: str) -> None:
        """Translate a botocore ``ClientError`` into :class:`DeploymentError`.

        Always raises.
        """
        code = _error_code(exc)
        hint = None
        if code in {"AccessDenied", "AccessDeniedException"}:
            hint = "Grant the IAM user/role the permissions required by this command."
        raise DeploymentError(f"{operation} failed: {exc}", code=code, hint=hint) from exc
