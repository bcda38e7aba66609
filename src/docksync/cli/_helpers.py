"""Shared option decorators and config builders."""

from __future__ import annotations

import click

from .._exclude import ExcludeFilter
from .._types import SyncConfig


def _target_options(f):
    """--host-path / --container-path / --container-name."""
    f = click.option(
        "--container-name", "container_name", required=True,
        envvar="DOCKSYNC_CONTAINER",
        help="Target container name or id (or set DOCKSYNC_CONTAINER).",
    )(f)
    f = click.option(
        "--container-path", "container_path", required=True,
        envvar="DOCKSYNC_CONTAINER_PATH",
        help="Directory inside the container that mirrors the host path.",
    )(f)
    f = click.option(
        "--host-path", "host_path", required=True,
        envvar="DOCKSYNC_HOST_PATH",
        type=click.Path(exists=True, file_okay=False, resolve_path=True),
        help="Host directory to watch.",
    )(f)
    return f


def _owner_options(f):
    """--user / --group applied with chown after every copy."""
    f = click.option("--group", default="www-data", show_default=True,
                     envvar="DOCKSYNC_GROUP",
                     help="Group owning synced files in the container.")(f)
    f = click.option("--user", default="www-data", show_default=True,
                     envvar="DOCKSYNC_USER",
                     help="User owning synced files in the container.")(f)
    return f


def _exclude_options(f):
    """--exclude / --exclude-from (gitignore syntax)."""
    f = click.option("--exclude-from", "exclude_from",
                     type=click.Path(exists=True, dir_okay=False),
                     help="Read exclude patterns from file.")(f)
    f = click.option("--exclude", multiple=True,
                     help="Skip paths matching pattern (gitignore syntax, repeatable).")(f)
    return f


def _build_config(host_path, container_path, container_name, user, group) -> SyncConfig:
    if not container_path.startswith("/"):
        raise click.ClickException(
            f"--container-path must be absolute: {container_path}"
        )
    try:
        return SyncConfig(
            host_root=host_path,
            container_root=container_path,
            container_name=container_name,
            user=user,
            group=group,
        )
    except ValueError as exc:
        raise click.ClickException(str(exc))


def _build_excludes(exclude, exclude_from) -> ExcludeFilter:
    try:
        return ExcludeFilter(patterns=exclude, exclude_from=exclude_from)
    except OSError as exc:
        raise click.ClickException(f"Can't read {exclude_from}: {exc}")
