"""JSON output for CLI commands with machine-parseable output."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pubsync.cli.output import machine_output
from pubsync.core.types import DeploymentOutcome, HostOutcome, PublishFailure


class ErrorResponse(BaseModel):
    """Pydantic model for error JSON responses.

    Attributes:
        error: Error message
        error_type: Error class name (e.g., "ValueError")
        exit_code: Exit code for the process
    """

    model_config = ConfigDict(strict=True)

    error: str
    error_type: str
    exit_code: int = Field(default=1, ge=0, le=255)


class FailureModel(BaseModel):
    name: str
    reason: str


class ReconcileModel(BaseModel):
    installed: list[str]
    uninstalled: list[str]
    published: list[str]
    already_published: list[str]
    unpublished: list[str]
    already_absent: list[str]
    publish_failures: list[FailureModel]
    unpublish_failures: list[FailureModel]
    cache_warm_error: str | None
    success: bool


class HostModel(BaseModel):
    host: str
    stage: str
    success: bool
    error: str | None
    result: ReconcileModel | None


class DeploymentModel(BaseModel):
    """Serialized form of a DeploymentOutcome."""

    subscription: str
    mode: str
    success: bool
    discovery_error: str | None
    hosts: list[HostModel]


def _failures(failures: list[PublishFailure]) -> list[FailureModel]:
    return [FailureModel(name=f.name, reason=f.reason) for f in failures]


def _host_model(outcome: HostOutcome) -> HostModel:
    result = None
    if outcome.result is not None:
        r = outcome.result
        result = ReconcileModel(
            installed=r.installed,
            uninstalled=r.uninstalled,
            published=r.published,
            already_published=r.already_published,
            unpublished=r.unpublished,
            already_absent=r.already_absent,
            publish_failures=_failures(r.publish_failures),
            unpublish_failures=_failures(r.unpublish_failures),
            cache_warm_error=r.cache_warm_error,
            success=r.success,
        )
    return HostModel(
        host=outcome.host.name,
        stage=outcome.stage.value,
        success=outcome.success,
        error=outcome.error,
        result=result,
    )


def deployment_model(outcome: DeploymentOutcome) -> DeploymentModel:
    return DeploymentModel(
        subscription=outcome.subscription,
        mode=outcome.mode.value,
        success=outcome.success,
        discovery_error=outcome.discovery_error,
        hosts=[_host_model(h) for h in outcome.hosts],
    )


def emit_json(data: dict[str, Any]) -> None:
    """Output JSON data to stdout for machine consumption.

    For Pydantic models, call model.model_dump(mode="json") first.
    """
    machine_output(json.dumps(data, indent=2))


def emit_json_error(error: str, error_type: str, exit_code: int = 1) -> None:
    """Output error as JSON and exit.

    Raises:
        SystemExit: Always raises to terminate with specified exit code
    """
    error_response = ErrorResponse(error=error, error_type=error_type, exit_code=exit_code)
    emit_json(error_response.model_dump(mode="json"))
    raise SystemExit(exit_code)
