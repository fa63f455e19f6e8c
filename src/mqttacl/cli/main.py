"""MQTT ACL CLI - Main entrypoint.

Usage:
    mqttacl check acl.yaml sensor-gateway sensors/room1/temp --qos 1
    mqttacl check acl.yaml dashboard sensors/# --subscribe
    mqttacl validate acl.yaml
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from mqttacl.engine import check_publish, check_subscription
from mqttacl.models import AuthorizationBehaviour
from mqttacl.rules import RuleSet, RuleSetError, load_rule_set

logger = logging.getLogger(__name__)

# Exit status of `check` when the operation is denied
EXIT_DENIED = 3

app = typer.Typer(
    name="mqttacl",
    help="MQTT topic ACL tools",
    add_completion=True,
)


def _configure_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load(rules_path: Path) -> RuleSet:
    try:
        return load_rule_set(rules_path)
    except (FileNotFoundError, RuleSetError) as e:
        typer.secho(f"Error loading rules: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.command("check")
def check(
    rules_path: Annotated[Path, typer.Argument(help="Path to the ACL rules YAML file")],
    principal: Annotated[str, typer.Argument(help="Username to resolve rules for")],
    topic: Annotated[str, typer.Argument(help="Topic to publish or subscribe")],
    subscribe: Annotated[
        bool,
        typer.Option("--subscribe", "-s", help="Check a subscription instead of a publish"),
    ] = False,
    qos: Annotated[
        int,
        typer.Option("--qos", "-q", min=0, max=2, help="QoS level"),
    ] = 0,
    retained: Annotated[
        bool,
        typer.Option("--retained", "-r", help="Publish with the retain flag set"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Check whether a principal may publish or subscribe to a topic.

    Prints ACCEPT or DENY. Exits with status 3 when denied.
    """
    _configure_logging(verbose)
    rule_set = _load(rules_path)
    result = rule_set.for_principal(principal)

    if subscribe:
        behaviour = check_subscription(topic, qos, result)
    else:
        behaviour = check_publish(topic, qos, retained, result)

    if behaviour is AuthorizationBehaviour.ACCEPT:
        typer.secho("ACCEPT", fg=typer.colors.GREEN)
        return

    typer.secho("DENY", fg=typer.colors.RED)
    raise typer.Exit(EXIT_DENIED)


@app.command("validate")
def validate(
    rules_path: Annotated[Path, typer.Argument(help="Path to the ACL rules YAML file")],
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Load a rules file and print a summary of each principal."""
    _configure_logging(verbose)
    rule_set = _load(rules_path)

    typer.echo(
        f"{rules_path}: {rule_set.principal_count} principals, "
        f"{rule_set.permission_count} permissions, "
        f"default={rule_set.default_behaviour.value}"
    )
    for name in rule_set.principals:
        result = rule_set.for_principal(name)
        typer.echo(
            f"  {name}: {len(result.permissions or ())} permissions, "
            f"default={result.default_behaviour.value}"
        )


def create_app() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    create_app()
