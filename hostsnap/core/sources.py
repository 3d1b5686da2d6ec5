"""Text sources for platform pseudo-files and command output."""

import logging
import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional

from ..config import CollectorSettings
from .kvparser import MultiMap, parse_key_value_text

logger = logging.getLogger(__name__)

# Upper bound for an external reader process, in seconds
DEFAULT_COMMAND_TIMEOUT = 5.0

# Failures that mean "this source could not be read"
READ_ERRORS = (OSError, subprocess.SubprocessError, UnicodeDecodeError)


class TextSource(ABC):
    """Something that can produce a block of text on demand."""

    @abstractmethod
    def read_text(self) -> str:
        """
        Read the full text of the source.

        Raises:
            OSError, subprocess.SubprocessError or UnicodeDecodeError when
            the source cannot be read.
        """

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable label used in logs and results."""


class FileSource(TextSource):
    """Reads a path through the ordinary filesystem API."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def describe(self) -> str:
        return f"file:{self.path}"


class CommandSource(TextSource):
    """
    Reads the standard output of an external command.

    Some pseudo-files are not reachable through regular file APIs on every
    system, so a small external reader (``/bin/cat`` by default) can stand
    in for a direct read. The child process is bounded by ``timeout``.
    With ``check=False`` the output of a failing command is still returned.
    """

    def __init__(
        self,
        argv: list[str],
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
        check: bool = True,
    ):
        if not argv:
            raise ValueError("Command must have at least one argument")
        self.argv = list(argv)
        self.timeout = timeout
        self.check = check

    def read_text(self) -> str:
        result = subprocess.run(
            self.argv,
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )
        if self.check and result.returncode != 0:
            raise subprocess.CalledProcessError(
                result.returncode, self.argv, output=result.stdout, stderr=result.stderr
            )
        return result.stdout

    def describe(self) -> str:
        return "command:" + " ".join(self.argv)


class FallbackSource(TextSource):
    """Tries each source in turn and returns the first successful read."""

    def __init__(self, sources: list[TextSource]):
        if not sources:
            raise ValueError("FallbackSource needs at least one source")
        self.sources = list(sources)
        self.last_origin: Optional[str] = None

    def read_text(self) -> str:
        errors: list[BaseException] = []
        for source in self.sources:
            try:
                text = source.read_text()
            except READ_ERRORS as e:
                logger.debug("Source %s unavailable: %s", source.describe(), e)
                errors.append(e)
                continue
            self.last_origin = source.describe()
            return text

        # The constructor guarantees at least one source, so errors is non-empty
        raise errors[-1]

    def describe(self) -> str:
        return " -> ".join(source.describe() for source in self.sources)


class SourceStatus(str, Enum):
    """Outcome of reading a key/value source."""

    OK = "ok"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"


class SourceResult:
    """
    Parsed contents of a source, plus how the read went.

    ``EMPTY`` (read fine, nothing parsed) and ``UNAVAILABLE`` (could not be
    read at all) both leave ``values`` empty; callers that only care about
    the data can ignore the status.
    """

    def __init__(
        self,
        status: SourceStatus,
        values: Optional[MultiMap] = None,
        origin: str = "",
        error: Optional[str] = None,
    ):
        self.status = status
        self.values = values if values is not None else MultiMap()
        self.origin = origin
        self.error = error

    @property
    def available(self) -> bool:
        return self.status is not SourceStatus.UNAVAILABLE

    def __repr__(self) -> str:
        return (
            f"SourceResult(status={self.status.value!r}, origin={self.origin!r}, "
            f"keys={len(self.values)}, error={self.error!r})"
        )


def read_key_value_source(source: TextSource) -> SourceResult:
    """
    Read ``source`` and parse it as ``key: value`` lines.

    Never raises for read failures: a source that cannot be read yields an
    UNAVAILABLE result with an empty MultiMap.

    Args:
        source: Where to read the text from

    Returns:
        SourceResult describing the parsed values and the read outcome
    """
    try:
        text = source.read_text()
    except READ_ERRORS as e:
        logger.debug("Could not read %s: %s", source.describe(), e)
        return SourceResult(
            SourceStatus.UNAVAILABLE, origin=source.describe(), error=str(e)
        )

    origin = getattr(source, "last_origin", None) or source.describe()
    values = parse_key_value_text(text)
    status = SourceStatus.OK if values else SourceStatus.EMPTY
    logger.debug("Read %d keys from %s", len(values), origin)
    return SourceResult(status, values, origin=origin)


def default_source(
    path: Path, settings: Optional[CollectorSettings] = None
) -> TextSource:
    """
    Build the standard reader for a pseudo-file.

    Direct file access is tried first and the external reader command
    second, unless ``settings.prefer_command`` flips the order.
    """
    settings = settings or CollectorSettings()

    file_source = FileSource(path)
    command_source = CommandSource(
        [*settings.reader_command, str(path)], timeout=settings.command_timeout
    )
    if settings.prefer_command:
        return FallbackSource([command_source, file_source])
    return FallbackSource([file_source, command_source])
