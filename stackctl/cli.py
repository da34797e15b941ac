"""
Click CLI for stackctl.
"""

import logging
import sys
from typing import Optional

import click

from .cleanup import clean as clean_stack, clean_all as clean_all_stack, clean_volumes as clean_stack_volumes
from .database import db_backup as backup_database, db_reset as reset_database, db_shell
from .dispatcher import Dispatcher
from .guard import DestructiveActionGuard, GuardOutcome
from .health import probe_endpoints
from .modes import resolve_mode
from .presets import Preset, get_preset, list_presets
from .settings import DatabaseCredentials, MissingCredentialError, StackSettings
from .toolchain import run_backend_task


# Lets "up --build" and "down -v" pass straight through to compose
PASSTHROUGH = {"ignore_unknown_options": True}


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging; debug output shows every command run."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='[%(levelname)s] %(message)s',
        force=True
    )


def _mode_callback(ctx, param, value):
    try:
        return resolve_mode(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


@click.group()
@click.option('--mode', '-m', envvar='STACKCTL_MODE', default='dev', show_default=True,
              callback=_mode_callback, help='Deployment mode: dev|development|prod|production')
@click.option('--verbose', '-v', is_flag=True, help='Log every command before running it')
@click.pass_context
def main(ctx, mode, verbose):
    """Stackctl - Docker compose dispatcher for the application stack."""
    configure_logging(verbose)
    ctx.ensure_object(dict)
    settings = ctx.obj.setdefault('settings', StackSettings.from_env())
    ctx.obj.setdefault('dispatcher', Dispatcher(project_dir=settings.project_dir))
    ctx.obj['mode'] = mode


def _dispatcher(ctx) -> Dispatcher:
    return ctx.obj['dispatcher']


def _guard(ctx, yes: bool) -> DestructiveActionGuard:
    if yes:
        return DestructiveActionGuard(confirm=lambda question: "y")
    return DestructiveActionGuard(confirm=ctx.obj.get('confirm'))


def _credentials() -> DatabaseCredentials:
    try:
        return DatabaseCredentials.from_env()
    except MissingCredentialError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _report_guard(outcome: GuardOutcome, status: int) -> None:
    if outcome == GuardOutcome.DECLINED:
        click.echo("Aborted.")
    sys.exit(status)


# ==================== Docker Services ====================

@main.command(context_settings=PASSTHROUGH)
@click.argument('extra_args', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def up(ctx, extra_args):
    """Start services (detached)."""
    sys.exit(_dispatcher(ctx).start(ctx.obj['mode'], extra_args))


@main.command(context_settings=PASSTHROUGH)
@click.argument('extra_args', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def down(ctx, extra_args):
    """Stop services."""
    sys.exit(_dispatcher(ctx).stop(ctx.obj['mode'], extra_args))


@main.command(context_settings=PASSTHROUGH)
@click.argument('extra_args', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def build(ctx, extra_args):
    """Build images."""
    sys.exit(_dispatcher(ctx).build(ctx.obj['mode'], extra_args))


@main.command()
@click.argument('service', required=False)
@click.pass_context
def logs(ctx, service: Optional[str]):
    """Follow logs for SERVICE, or for all services."""
    sys.exit(_dispatcher(ctx).logs(ctx.obj['mode'], service))


@main.command(context_settings=PASSTHROUGH)
@click.argument('extra_args', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def restart(ctx, extra_args):
    """Restart services."""
    sys.exit(_dispatcher(ctx).restart(ctx.obj['mode'], extra_args))


@main.command()
@click.argument('service', required=False)
@click.pass_context
def shell(ctx, service: Optional[str]):
    """Open a shell in SERVICE (default: backend)."""
    sys.exit(_dispatcher(ctx).shell(ctx.obj['mode'], service))


@main.command()
@click.pass_context
def ps(ctx):
    """Show running containers."""
    sys.exit(_dispatcher(ctx).status(ctx.obj['mode']))


main.add_command(up, name='start')
main.add_command(down, name='stop')
main.add_command(ps, name='status')


# ==================== Presets ====================

def _preset_command(preset: Preset) -> click.Command:
    @click.pass_context
    def callback(ctx):
        sys.exit(preset.run(_dispatcher(ctx), ctx.obj['mode']))

    return click.Command(preset.name, callback=callback, help=preset.help)


for _name in list_presets():
    main.add_command(_preset_command(get_preset(_name)))


# ==================== Backend Commands ====================

def _backend_command(task: str) -> click.Command:
    @click.pass_context
    def callback(ctx):
        settings = ctx.obj['settings']
        sys.exit(run_backend_task(task, settings.backend_dir, _dispatcher(ctx).runner))

    return click.Command(f"backend-{task}", callback=callback, help=f"Run npm {task} in the backend")


for _task in ('build', 'install', 'type-check', 'dev'):
    main.add_command(_backend_command(_task))


# ==================== Database Commands ====================

@main.command('db-reset')
@click.option('--yes', is_flag=True, help='Skip confirmation prompt')
@click.pass_context
def db_reset(ctx, yes):
    """Drop the development database (WARNING: deletes all data)."""
    credentials = _credentials()
    outcome, status = reset_database(_dispatcher(ctx), credentials, _guard(ctx, yes))
    _report_guard(outcome, status)


@main.command('db-backup')
@click.pass_context
def db_backup(ctx):
    """Dump the development database into the backup directory."""
    credentials = _credentials()
    status, archive = backup_database(_dispatcher(ctx), credentials, ctx.obj['settings'].backup_dir)
    if status == 0:
        click.echo(f"✅ Backup written to {archive}")
    else:
        click.echo(f"❌ Backup failed (status {status})", err=True)
    sys.exit(status)


@main.command('mongo-shell')
@click.pass_context
def mongo_shell(ctx):
    """Open a MongoDB shell in the development database."""
    credentials = _credentials()
    sys.exit(db_shell(_dispatcher(ctx), credentials))


# ==================== Cleanup Commands ====================

@main.command()
@click.pass_context
def clean(ctx):
    """Remove containers and networks (dev and prod)."""
    sys.exit(clean_stack(_dispatcher(ctx)))


@main.command('clean-all')
@click.pass_context
def clean_all(ctx):
    """Remove containers, networks, volumes and images (dev and prod)."""
    sys.exit(clean_all_stack(_dispatcher(ctx)))


@main.command('clean-volumes')
@click.option('--yes', is_flag=True, help='Skip confirmation prompt')
@click.pass_context
def clean_volumes(ctx, yes):
    """Remove all volumes (dev and prod)."""
    outcome, _ = clean_stack_volumes(_dispatcher(ctx), _guard(ctx, yes))
    _report_guard(outcome, 0)


# ==================== Utilities ====================

@main.command()
@click.pass_context
def health(ctx):
    """Probe the gateway and backend health endpoints."""
    results = probe_endpoints(ctx.obj['settings'].health_url, session=ctx.obj.get('session'))
    for result in results:
        color = 'green' if result.ok else 'red'
        click.echo(f"{result.name}: {click.style(result.label, fg=color)}")

    _dispatcher(ctx).status(ctx.obj['mode'])
    sys.exit(0)


if __name__ == '__main__':
    main()
