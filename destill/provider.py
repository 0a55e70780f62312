"""CI provider model: build references, URL parsing, tokens and user-facing errors."""

from __future__ import annotations

import abc
import os
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime


class ProviderError(Exception):
    """Base class for provider failures."""

    default_message = "provider error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class AuthFailedError(ProviderError):
    default_message = "authentication failed"


class BuildNotFoundError(ProviderError):
    default_message = "build not found"


class RateLimitedError(ProviderError):
    default_message = "rate limited"


class NetworkTimeoutError(ProviderError):
    default_message = "network timeout"


class InvalidURLError(ProviderError):
    default_message = "invalid build URL"


class ProviderUnknownError(ProviderError):
    default_message = "unknown CI provider"


class UserError(Exception):
    """An error carrying a human-friendly message, a hint and the underlying cause."""

    def __init__(self, message: str, hint: str = "", err: BaseException | None = None) -> None:
        self.message = message
        self.hint = hint
        self.err = err
        super().__init__(message)
        self.__cause__ = err

    def __str__(self) -> str:
        text = self.message
        if self.hint:
            text += "\n\nHint: " + self.hint
        if self.err is not None:
            text += f"\n\nDetails: {self.err}"
        return text


def _chain(err: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if isinstance(current, UserError):
            current = current.err
        else:
            current = current.__cause__


def _caused_by(err: BaseException, kind: type[BaseException]) -> bool:
    return any(isinstance(link, kind) for link in _chain(err))


_URL_HINT = (
    "Supported formats:\n"
    "  - https://buildkite.com/org/pipeline/builds/123\n"
    "  - https://github.com/owner/repo/actions/runs/456"
)
_AUTH_HINT = (
    "Check that your API token is valid and has the correct permissions.\n"
    "  - Buildkite: Set BUILDKITE_API_TOKEN\n"
    "  - GitHub: Set GITHUB_TOKEN"
)
_NOT_FOUND_HINT = "Check that the build URL is correct and you have access to the repository."


def wrap_error(err: BaseException | None) -> BaseException | None:
    """Turn known provider failures into a :class:`UserError`; pass others through."""
    if err is None:
        return None
    text = str(err)
    if _caused_by(err, InvalidURLError):
        return UserError("Invalid build URL", _URL_HINT, err)
    if text == "401 Unauthorized" or _caused_by(err, AuthFailedError):
        return UserError("Authentication failed", _AUTH_HINT, err)
    if text == "404 Not Found" or _caused_by(err, BuildNotFoundError):
        return UserError("Build not found", _NOT_FOUND_HINT, err)
    return err


@dataclass
class BuildRef:
    """Identifies a build in a CI system."""

    provider: str
    build_id: str
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class Job:
    """A single job within a build."""

    id: str = ""
    name: str = ""
    type: str = ""
    state: str = ""
    exit_code: int = 0
    build_id: str = ""
    timestamp: datetime | None = None


@dataclass
class Build:
    """A CI build with its jobs."""

    id: str = ""
    number: str = ""
    url: str = ""
    state: str = ""
    timestamp: datetime | None = None
    jobs: list[Job] = field(default_factory=list)


@dataclass
class Artifact:
    """A build artifact."""

    id: str = ""
    job_id: str = ""
    path: str = ""
    download_url: str = ""
    file_size: int = 0


class Provider(abc.ABC):
    """A CI/CD platform integration."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Provider name, e.g. "buildkite" or "github"."""

    @abc.abstractmethod
    def parse_url(self, url: str) -> BuildRef:
        """Extract a build reference from a URL."""

    @abc.abstractmethod
    def fetch_build(self, ref: BuildRef) -> Build:
        """Retrieve build metadata and jobs."""

    @abc.abstractmethod
    def fetch_job_log(self, job_id: str) -> str:
        """Retrieve the raw log of a job."""

    @abc.abstractmethod
    def fetch_artifacts(self, job_id: str) -> list[Artifact]:
        """List the artifacts of a job."""

    @abc.abstractmethod
    def download_artifact(self, artifact: Artifact) -> bytes:
        """Download an artifact's content."""


_BUILDKITE_URL = re.compile(r"https://buildkite\.com/([^/]+)/([^/]+)/builds/(\d+)", re.ASCII)
_GITHUB_URL = re.compile(r"https://github\.com/([^/]+)/([^/]+)/actions/runs/(\d+)", re.ASCII)

_TOKEN_VARIABLES = {
    "buildkite": "BUILDKITE_API_TOKEN",
    "github": "GITHUB_TOKEN",
}

ProviderFactory = Callable[[str], Provider]
_providers: dict[str, ProviderFactory] = {}


def parse_url(url: str) -> BuildRef:
    """Detect the provider of a build URL and extract its reference."""
    match = _BUILDKITE_URL.match(url)
    if match:
        org, pipeline, build_id = match.groups()
        return BuildRef("buildkite", build_id, {"org": org, "pipeline": pipeline})
    match = _GITHUB_URL.match(url)
    if match:
        owner, repo, build_id = match.groups()
        return BuildRef("github", build_id, {"owner": owner, "repo": repo})
    raise InvalidURLError(f"{InvalidURLError.default_message}: {url}")


def register_provider(name: str, factory: ProviderFactory) -> None:
    """Register a factory that builds a provider from an API token."""
    _providers[name] = factory


def _token_for(provider_name: str) -> str:
    variable = _TOKEN_VARIABLES.get(provider_name)
    if variable is None:
        raise ProviderUnknownError(f"{ProviderUnknownError.default_message}: {provider_name}")
    value = os.environ.get(variable, "")
    if not value:
        raise ProviderError(f"{variable} environment variable not set")
    return value


def validate_token(ref: BuildRef) -> None:
    """Raise if the API token needed for this build is not set."""
    _token_for(ref.provider)


def get_provider(ref: BuildRef) -> Provider:
    """Return a provider instance for the build reference."""
    factory = _providers.get(ref.provider)
    if factory is None:
        raise ProviderUnknownError(f"{ProviderUnknownError.default_message}: {ref.provider}")
    return factory(_token_for(ref.provider))