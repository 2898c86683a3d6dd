# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/cli/app.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
import yaml

from meshpolicy.authz.attributes import RequestAttributesDocument
from meshpolicy.authz.evaluator import Decision
from meshpolicy.authz.snapshot import PolicyStore
from meshpolicy.config.loader import load_config
from meshpolicy.config.models import MeshPolicyConfig
from meshpolicy.errors import ConfigError
from meshpolicy.loader import LoadResult, load_documents
from meshpolicy.logging.log import init_logging
from meshpolicy.observers.console import ConsoleObserver
from meshpolicy.observers.dispatcher import EventBus
from meshpolicy.observers.events import DecisionMade, new_ctx
from meshpolicy.observers.jsonfile import JsonFileObserver
from meshpolicy.observers.logger import LoggerObserver


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Istio policy validation and authorization decisions")


# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------

def _load_cfg(config: Optional[Path]) -> MeshPolicyConfig:
    try:
        return load_config(config)
    except ConfigError as e:
        raise typer.BadParameter(str(e), param_hint="--config")


def _start(
    cfg: MeshPolicyConfig,
    *,
    log_dir: Optional[Path],
    verbose: bool,
    console_events: bool = False,
) -> tuple[logging.Logger, str, EventBus]:
    base_dir = log_dir or (Path(cfg.log_dir) if cfg.log_dir else None)
    logger, run_id, _ = init_logging(
        base_dir=base_dir,
        verbose=verbose or cfg.verbose,
        console_level=logging.WARNING,
    )

    observers: list = [LoggerObserver(logger)]
    if cfg.events_file:
        observers.append(JsonFileObserver(cfg.events_file))
    if console_events:
        observers.append(ConsoleObserver())
    return logger, run_id, EventBus(observers)


def _report(result: LoadResult) -> None:
    for r in result.accepted:
        typer.echo(f"OK       {r.ref()}")
    for rej in result.rejected:
        typer.echo(f"REJECTED {rej.ref}: {rej.reason}")


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------

@app.command()
def validate(
    files: List[Path] = typer.Argument(..., exists=True, help="Manifest files or directories"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="meshpolicy config file"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for run logs"),
    events: bool = typer.Option(False, "--events", help="Print load events to the console"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """
    Parse and validate Istio manifests. Exits 1 when any document is rejected.
    """
    cfg = _load_cfg(config)
    logger, run_id, bus = _start(cfg, log_dir=log_dir, verbose=verbose, console_events=events)

    result = load_documents(files, bus=bus, run_id=run_id)
    _report(result)
    typer.echo(f"{len(result.accepted)} accepted, {len(result.rejected)} rejected")

    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def decide(
    request: Path = typer.Option(..., "--request", "-r", exists=True, help="YAML/JSON request attributes"),
    policies: Optional[List[Path]] = typer.Option(None, "--policies", "-p", help="Manifest files or directories"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="meshpolicy config file"),
    root_namespace: Optional[List[str]] = typer.Option(
        None, "--root-namespace", help="Namespace whose policies apply mesh-wide (repeatable)"
    ),
    exit_code: bool = typer.Option(False, "--exit-code", help="Exit 1 when the decision is DENY"),
    explain: bool = typer.Option(False, "--explain", help="Also print the deciding policy and rule"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for run logs"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """
    Evaluate one request against the loaded AuthorizationPolicies and print ALLOW or DENY.

    Rejected manifests are reported on stderr and left out of the evaluation.
    """
    cfg = _load_cfg(config)
    logger, run_id, bus = _start(cfg, log_dir=log_dir, verbose=verbose)

    paths = list(policies or []) or [Path(p) for p in cfg.policy_paths]
    if not paths:
        raise typer.BadParameter("no policies given and none configured", param_hint="--policies")

    result = load_documents(paths, bus=bus, run_id=run_id)
    for rej in result.rejected:
        typer.echo(f"rejected {rej.ref}: {rej.reason}", err=True)

    roots = list(root_namespace or []) or cfg.root_namespaces
    store = PolicyStore(root_namespaces=roots, bus=bus)
    snap = store.publish(result.authorization_policies())

    try:
        raw = yaml.safe_load(request.read_text()) or {}
        doc = RequestAttributesDocument.model_validate(raw)
    except (yaml.YAMLError, ValueError) as e:
        raise typer.BadParameter(f"{request}: {e}", param_hint="--request")

    outcome = snap.evaluate(doc.to_attributes(), doc.to_workload())
    logger.info("decision %s (%s)", outcome.decision.value, outcome.reason)
    bus.emit(
        DecisionMade(
            decision=outcome.decision.value,
            reason=outcome.reason,
            policy=outcome.policy,
            **new_ctx(str(request), run_id),
        )
    )

    typer.echo(outcome.decision.value)
    if explain:
        typer.echo(f"reason: {outcome.reason}")
        if outcome.policy:
            typer.echo(f"policy: {outcome.policy} rule[{outcome.rule_index}]")

    if exit_code and outcome.decision == Decision.DENY:
        raise typer.Exit(code=1)


@app.command()
def show(
    files: List[Path] = typer.Argument(..., exists=True, help="Manifest files or directories"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for run logs"),
):
    """
    Print accepted resources in normalised wire form (multi-document YAML).
    """
    cfg = MeshPolicyConfig()
    _, run_id, bus = _start(cfg, log_dir=log_dir, verbose=False)

    result = load_documents(files, bus=bus, run_id=run_id)
    for rej in result.rejected:
        typer.echo(f"rejected {rej.ref}: {rej.reason}", err=True)

    typer.echo(
        yaml.safe_dump_all([r.to_wire() for r in result.accepted], sort_keys=False),
        nl=False,
    )
    if not result.ok:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
