"""Exceptions for docksync."""


class DocksyncError(Exception):
    """Base class for errors raised while syncing a single change."""


class PathResolutionError(DocksyncError, ValueError):
    """Raised when a host path cannot be expressed relative to the host root.

    Expected for transient paths (an editor temp file that was already
    removed, an event on the root itself).  Callers drop the event.
    """


class ContainerCommandError(DocksyncError):
    """Raised when a container runtime invocation fails.

    Attributes:
        cmd: The command line that was run.
        returncode: Exit status, or ``None`` if the process never started.
        output: Captured stderr (or stdout when stderr is empty).
    """

    def __init__(self, args, returncode, output=""):
        self.cmd = list(args)
        self.returncode = returncode
        self.output = output.strip()
        super().__init__(self._format())

    def _format(self) -> str:
        cmd = " ".join(self.cmd)
        if self.returncode is None:
            return f"{cmd}: {self.output or 'could not be started'}"
        detail = self.output or "no output"
        return f"{cmd} exited with status {self.returncode}: {detail}"


class RuntimeUnavailableError(ContainerCommandError):
    """Raised when the container runtime binary is missing or not answering."""
