"""Run-wide configuration knobs.

A ``Configuration`` is built once at startup (from defaults, the
environment, then command-line flags) and handed by reference to every
component that needs it.  It is frozen: nothing changes it mid-run.
Use ``dataclasses.replace`` to derive a modified copy.

Environment variables:
    - ``PYWGET_VERBOSITY`` — debug level, same as repeating ``-d``.
    - ``PYWGET_TIMEOUT`` — socket read timeout in seconds.
    - ``PYWGET_USER_AGENT`` — the ``User-Agent`` header value.
    - ``PYWGET_MAX_REDIRECTS`` — redirect hop limit (unset = unbounded).
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "Wget/1.21.3"

_ENV_PREFIX = "PYWGET_"


@dataclass(frozen=True)
class Configuration:
    """Read-only knobs shared by the whole run.

    Attributes:
        verbosity: How chatty the diagnostic stream is (0 = quiet).
        timeout: Socket connect/read timeout in seconds.
        user_agent: Value sent in the ``User-Agent`` header.
        max_redirects: Redirect hop limit per URL; None follows forever.

    """

    verbosity: int = 0
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    max_redirects: int | None = None

    def __post_init__(self) -> None:
        """Reject values that make no sense for a run."""
        if self.verbosity < 0:
            msg = f"verbosity must be >= 0, got {self.verbosity}"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = f"timeout must be positive, got {self.timeout}"
            raise ValueError(msg)
        if self.max_redirects is not None and self.max_redirects < 0:
            msg = f"max_redirects must be >= 0, got {self.max_redirects}"
            raise ValueError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "Configuration":
        """Build a configuration from ``PYWGET_*`` environment variables.

        Args:
            environ: The environment to read (usually ``os.environ``).

        Returns:
            A configuration with defaults for anything not set.

        Raises:
            ValueError: If a variable is set to an unparsable value.

        """
        kwargs: dict[str, object] = {}
        if (raw := environ.get(f"{_ENV_PREFIX}VERBOSITY")) is not None:
            kwargs["verbosity"] = _parse_env(raw, int, "VERBOSITY")
        if (raw := environ.get(f"{_ENV_PREFIX}TIMEOUT")) is not None:
            kwargs["timeout"] = _parse_env(raw, float, "TIMEOUT")
        if (raw := environ.get(f"{_ENV_PREFIX}USER_AGENT")) is not None:
            kwargs["user_agent"] = raw
        if (raw := environ.get(f"{_ENV_PREFIX}MAX_REDIRECTS")) is not None:
            kwargs["max_redirects"] = _parse_env(raw, int, "MAX_REDIRECTS")
        return cls(**kwargs)  # type: ignore[arg-type]


def _parse_env(raw: str, convert: Callable[[str], object], name: str) -> object:
    """Convert one environment value, naming the variable on failure."""
    try:
        return convert(raw.strip())
    except ValueError as e:
        msg = f"{_ENV_PREFIX}{name}={raw!r} is not a valid number"
        raise ValueError(msg) from e
