"""sigflow CLI entry point."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click
import yaml

from sigflow.config import SigflowSettings, load_config
from sigflow.core.logging import setup_logging
from sigflow.core.signature_engine import RSASignatureEngine
from sigflow.core.workflow import VerifierSession, WorkflowController, classify_outcome
from sigflow.errors import DecodeError, SigflowError, VerificationError
from sigflow.models.verification import VerificationOutcome

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = "config/sigflow.yaml"
_DEFAULT_MESSAGE = "hello"
_BAD_SIGNATURE_TEXT = "this is *not* base64!"
_SCENARIOS = ("happy", "mitm", "wrong-key", "bad-signature")

_config_option = click.option(
    "--config",
    "config_path",
    default=_DEFAULT_CONFIG_PATH,
    show_default=True,
    help="YAML settings file; built-in defaults are used when it does not exist.",
)


@click.group()
def cli() -> None:
    """Simulate an RSA signature exchange between an issuer and a verifier."""
    setup_logging(logging.WARNING)


def _load_settings(config_path: str) -> SigflowSettings:
    path = Path(config_path)
    try:
        settings = load_config(path) if path.exists() else SigflowSettings()
    except (ValueError, yaml.YAMLError) as exc:
        raise click.ClickException(f"invalid config {path}: {exc}") from exc
    setup_logging(settings.logging.level, json_output=settings.logging.json_output)
    return settings


def _echo_outcome(outcome: VerificationOutcome) -> None:
    click.echo(f"outcome: {outcome.status}")
    click.echo(outcome.describe())


@cli.command("keygen")
@_config_option
def keygen_command(config_path: str) -> None:
    """Generate a key pair and print both armored keys."""
    settings = _load_settings(config_path)
    controller = WorkflowController(settings)
    try:
        exported = asyncio.run(controller.generate_keys())
    except SigflowError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(exported.public_key)
    click.echo(exported.private_key)


async def _verify_text(
    settings: SigflowSettings,
    public_key_text: str,
    message: str,
    signature_b64: str,
) -> VerificationOutcome:
    verifier = VerifierSession(settings.build_key_manager(), RSASignatureEngine())
    await verifier.import_key(public_key_text)
    try:
        is_valid = await verifier.check(message, signature_b64)
    except (DecodeError, VerificationError) as exc:
        return VerificationOutcome.from_error(exc)
    # No signing-time snapshot exists here, so a failure is reported as invalid.
    return classify_outcome(is_valid, message, message)


@cli.command("verify")
@_config_option
@click.option(
    "--public-key",
    "public_key_path",
    required=True,
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    help="File holding the issuer's armored public key.",
)
@click.option("--message", required=True, help="Message text as received.")
@click.option("--signature", required=True, help="Base64 signature as received.")
def verify_command(config_path: str, public_key_path: Path, message: str, signature: str) -> None:
    """Verify a received message and signature; exits 1 unless authentic."""
    settings = _load_settings(config_path)
    public_key_text = public_key_path.read_text(encoding="utf-8")
    try:
        outcome = asyncio.run(_verify_text(settings, public_key_text, message, signature))
    except SigflowError as exc:
        raise click.ClickException(str(exc)) from exc

    _echo_outcome(outcome)
    if not outcome.is_authentic:
        click.get_current_context().exit(1)


async def _run_scenario(settings: SigflowSettings, scenario: str, message: str) -> WorkflowController:
    logger.info("running %s scenario", scenario)
    controller = WorkflowController(settings)
    await controller.generate_keys()

    if scenario == "bad-signature":
        controller.message = message
        controller.copy_public_key_to_verifier()
        await controller.import_verifier_key()
        controller.signature = _BAD_SIGNATURE_TEXT
        await controller.verify()
        return controller

    await controller.sign(message)

    if scenario == "wrong-key":
        other = WorkflowController(settings)
        await other.generate_keys()
        await controller.import_verifier_key(other.issuer.public_key_text)
    else:
        controller.copy_public_key_to_verifier()
        await controller.import_verifier_key()

    if scenario == "mitm":
        controller.tamper_message()

    await controller.verify()
    return controller


@cli.command("demo")
@_config_option
@click.option(
    "--scenario",
    type=click.Choice(_SCENARIOS, case_sensitive=False),
    default="happy",
    show_default=True,
)
@click.option("--message", default=_DEFAULT_MESSAGE, show_default=True)
def demo_command(config_path: str, scenario: str, message: str) -> None:
    """Run a complete issuer/verifier exchange and print what the verifier sees."""
    if not message:
        raise click.BadParameter("message must not be empty", param_hint="--message")

    settings = _load_settings(config_path)
    try:
        controller = asyncio.run(_run_scenario(settings, scenario.lower(), message))
    except SigflowError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"scenario: {scenario.lower()}")
    click.echo(f"signed message: {controller.issuer.signed_message!r}")
    click.echo(f"received message: {controller.message!r}")
    click.echo(f"signature: {controller.signature}")
    if controller.outcome is not None:
        _echo_outcome(controller.outcome)


if __name__ == "__main__":
    cli()
