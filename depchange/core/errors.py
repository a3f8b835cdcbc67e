class DepChangeError(Exception):
    """Base class for every error raised by depchange."""


class ParseError(DepChangeError, ValueError):
    """A version string does not match major.minor[.patch][-suffix]."""

    def __init__(self, text: str):
        super().__init__(f"Could not parse version {text!r}")
        self.text = text


class InvariantError(DepChangeError):
    """A caller broke a precondition, e.g. comparing a version with itself."""


class SnapshotError(DepChangeError):
    """A snapshot file is unreadable or does not describe a dependency tree."""
