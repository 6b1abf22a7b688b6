"""mailkeys CLI - DKIM key provisioning for rspamd."""

import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape

from mailkeys.common.errors import ArtifactExistsError, KeyGenerationError, MailkeysError
from mailkeys.common.logging import setup_logging
from mailkeys.common.settings import Settings, get_settings
from mailkeys.dkim.keyspec import DEFAULT_KEY_SIZE, DEFAULT_SELECTOR, KeySpec, default_domain
from mailkeys.dkim.workflow import DkimWorkflow

console = Console()

LOG_LEVELS = ["trace", "debug", "info", "warn", "error"]

# The key type is left to KeySpec so an unknown type exits with status 1
# like every other invalid key parameter.
_key_options = [
    click.option(
        "--keytype",
        default="rsa",
        show_default=True,
        help="Key algorithm (rsa or ed25519)",
    ),
    click.option(
        "--keysize",
        type=int,
        default=DEFAULT_KEY_SIZE,
        show_default=True,
        help="RSA key size (1024, 2048 or 4096); not allowed for ed25519",
    ),
    click.option("--selector", default=DEFAULT_SELECTOR, show_default=True, help="DKIM selector"),
    click.option("--domain", default=None, help="Signing domain (default: this host's domain)"),
]


def key_options(f):
    for option in reversed(_key_options):
        f = option(f)
    return f


def _build_spec(keytype: str, keysize: int, selector: str, domain: str | None, force: bool) -> KeySpec:
    try:
        return KeySpec(
            key_type=keytype.lower(),
            key_size=keysize,
            selector=selector,
            domain=domain or default_domain(),
            force_overwrite=force,
        )
    except MailkeysError as e:
        _fail(e)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    sys.exit(1)


def _workflow(ctx: click.Context) -> DkimWorkflow:
    return DkimWorkflow(ctx.obj["settings"], runner=ctx.obj.get("runner"), console=console)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log verbosity (default: MAILKEYS_LOG_LEVEL or info)",
)
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, json_logs: bool) -> None:
    """mailkeys - Provision DKIM keys for rspamd."""
    ctx.ensure_object(dict)
    settings: Settings = ctx.obj.get("settings") or get_settings()
    settings = settings.model_copy(
        update={
            "log_level": log_level.lower() if log_level else settings.log_level,
            "json_logs": json_logs or settings.json_logs,
        }
    )
    ctx.obj["settings"] = settings
    setup_logging(level=settings.log_level, json_logs=settings.json_logs)


@cli.command("dkim")
@key_options
@click.option("--force", is_flag=True, help="Overwrite existing key files")
@click.pass_context
def dkim(
    ctx: click.Context,
    keytype: str,
    keysize: int,
    selector: str,
    domain: str | None,
    force: bool,
) -> None:
    """Generate a DKIM key and configure rspamd to sign with it."""
    spec = _build_spec(keytype, keysize, selector, domain, force)

    try:
        result = _workflow(ctx).run(spec)
    except ArtifactExistsError as e:
        _fail(e)
    except KeyGenerationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if e.log:
            console.print(e.log, markup=False, highlight=False)
        sys.exit(1)
    except (OSError, LookupError) as e:
        # filesystem or ownership problems outside the generator
        _fail(e)

    for advisory in result.advisories:
        console.print(f"[yellow]Warning: {escape(advisory.message)}[/yellow]")


@cli.command("show-record")
@key_options
@click.pass_context
def show_record(
    ctx: click.Context,
    keytype: str,
    keysize: int,
    selector: str,
    domain: str | None,
) -> None:
    """Print the DNS record of an existing DKIM key."""
    spec = _build_spec(keytype, keysize, selector, domain, force=False)

    try:
        _workflow(ctx).show_record(spec)
    except (MailkeysError, OSError) as e:
        _fail(e)


def main() -> None:
    """CLI entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
