"""The main command: check the runtime, register watches, sync forever."""

from __future__ import annotations

import threading

import click

from .._exclude import ExcludeFilter
from .._types import SyncConfig
from ..exceptions import RuntimeUnavailableError
from ..loop import SyncLoop
from ..report import Reporter
from ..runtime import ContainerRuntime, DockerRuntime, check_runtime
from ..watch import WatchService, register_tree
from ._helpers import (
    _target_options,
    _owner_options,
    _exclude_options,
    _build_config,
    _build_excludes,
)


def serve_forever(config: SyncConfig, runtime: ContainerRuntime,
                  watches: WatchService, reporter: Reporter,
                  excludes: ExcludeFilter | None = None, *,
                  wait_on: threading.Event | None = None) -> None:
    """Register the host tree, then drain events on a background thread.

    The calling thread blocks on *wait_on* (a fresh, never-set event unless
    given) until the process is killed.  Ctrl-C stops the watch service.
    """
    watches.start()
    reporter.info(
        f"Watching {config.host_root} -> "
        f"{config.container_name}:{config.container_root}"
    )
    try:
        count = register_tree(watches, config.host_root, excludes=excludes)
    except OSError as exc:
        reporter.error(f"{config.host_root}: {exc}")
    else:
        reporter.status(f"Watches registered: {count}")

    loop = SyncLoop(config, runtime, watches, reporter, excludes)
    consumer = threading.Thread(target=loop.run, name="docksync-loop", daemon=True)
    consumer.start()

    if wait_on is None:
        wait_on = threading.Event()
    try:
        wait_on.wait()
    except KeyboardInterrupt:
        click.echo("\nStopped watching.")
    finally:
        watches.stop()


@click.command()
@_target_options
@_owner_options
@_exclude_options
@click.option("--docker", "docker_bin", default="docker", show_default=True,
              envvar="DOCKSYNC_DOCKER",
              help="Container runtime CLI to invoke (docker-compatible).")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
def main(host_path, container_path, container_name, user, group,
         exclude, exclude_from, docker_bin, verbose):
    """Mirror a host directory into a running container.

    Every write, create, delete and rename under --host-path is replayed
    inside the container with `docker cp`, `docker exec chown` and
    `docker exec rm`.  Changes made inside the container are never copied
    back.

    \b
    Example:
      docksync --host-path ./src --container-path /var/www/html \\
               --container-name web

    Editor backup files (`*~`, `*.swp`) are always skipped.  Runs until
    interrupted.
    """
    reporter = Reporter(verbose=verbose)
    runtime = DockerRuntime(docker_bin)
    try:
        version = check_runtime(runtime)
    except RuntimeUnavailableError as exc:
        raise click.ClickException(
            f"{docker_bin} command not found. Make sure {docker_bin} is "
            f"installed and running.\n{exc}"
        )
    reporter.status(version)

    config = _build_config(host_path, container_path, container_name, user, group)
    excludes = _build_excludes(exclude, exclude_from)
    serve_forever(config, runtime, WatchService(), reporter, excludes)
