import pytest

from destill.provider import (
    Artifact,
    AuthFailedError,
    Build,
    BuildNotFoundError,
    BuildRef,
    InvalidURLError,
    NetworkTimeoutError,
    Provider,
    ProviderError,
    ProviderUnknownError,
    RateLimitedError,
    UserError,
    get_provider,
    parse_url,
    register_provider,
    validate_token,
    wrap_error,
)


def _wrapped(text, cause):
    err = RuntimeError(text)
    err.__cause__ = cause
    return err


def test_wrap_error_invalid_url():
    err = InvalidURLError("invalid build URL: https://invalid.com")
    wrapped = wrap_error(err)
    assert isinstance(wrapped, UserError)
    assert wrapped.message == "Invalid build URL"
    assert "Supported formats" in wrapped.hint
    assert "buildkite.com" in wrapped.hint
    assert "github.com" in wrapped.hint
    assert wrapped.err is err
    assert wrapped.__cause__ is err


@pytest.mark.parametrize(
    "err",
    [
        RuntimeError("401 Unauthorized"),
        AuthFailedError(),
        _wrapped("request failed: authentication failed", AuthFailedError()),
    ],
)
def test_wrap_error_auth_failed(err):
    wrapped = wrap_error(err)
    assert isinstance(wrapped, UserError)
    assert wrapped.message == "Authentication failed"
    assert "API token" in wrapped.hint
    assert "BUILDKITE_API_TOKEN" in wrapped.hint
    assert "GITHUB_TOKEN" in wrapped.hint


@pytest.mark.parametrize(
    "err",
    [
        RuntimeError("404 Not Found"),
        BuildNotFoundError(),
        _wrapped("build fetch failed: build not found", BuildNotFoundError()),
    ],
)
def test_wrap_error_build_not_found(err):
    wrapped = wrap_error(err)
    assert isinstance(wrapped, UserError)
    assert wrapped.message == "Build not found"
    assert "build URL is correct" in wrapped.hint
    assert "you have access" in wrapped.hint


@pytest.mark.parametrize(
    "err",
    [
        RateLimitedError(),
        NetworkTimeoutError(),
        RuntimeError("something went wrong"),
        RuntimeError("500 Internal Server Error"),
    ],
)
def test_wrap_error_other_errors_unchanged(err):
    wrapped = wrap_error(err)
    assert wrapped is err
    assert not isinstance(wrapped, UserError)


def test_wrap_error_none():
    assert wrap_error(None) is None


@pytest.mark.parametrize(
    "user_err, want_hint, want_details",
    [
        (UserError("Something went wrong"), "", ""),
        (UserError("Something went wrong", hint="Try doing this instead"), "Hint: Try doing this instead", ""),
        (
            UserError("Something went wrong", err=RuntimeError("original error")),
            "",
            "Details: original error",
        ),
        (
            UserError(
                "Something went wrong",
                hint="Try doing this instead",
                err=RuntimeError("original error"),
            ),
            "Hint: Try doing this instead",
            "Details: original error",
        ),
    ],
)
def test_user_error_str(user_err, want_hint, want_details):
    text = str(user_err)
    assert text.index("Something went wrong") == 0
    if want_hint:
        assert text.index(want_hint) > 0
    if want_details:
        details_at = text.index(want_details)
        if want_hint:
            assert details_at > text.index(want_hint)
        else:
            assert details_at > 0


def test_user_error_full_text():
    err = UserError("Something went wrong", "Try doing this instead", RuntimeError("original error"))
    assert str(err) == "Something went wrong\n\nHint: Try doing this instead\n\nDetails: original error"


def test_user_error_unwrap():
    cause = AuthFailedError()
    err = UserError("Something went wrong", err=cause)
    assert err.err is cause
    assert err.__cause__ is cause
    assert UserError("Something went wrong").err is None


def test_user_error_can_be_rewrapped():
    inner = UserError("outer", err=AuthFailedError())
    assert wrap_error(inner).message == "Authentication failed"


@pytest.mark.parametrize(
    "url, provider_name, build_id",
    [
        ("https://buildkite.com/org/pipeline/builds/123", "buildkite", "123"),
        ("https://github.com/owner/repo/actions/runs/456", "github", "456"),
    ],
)
def test_parse_url_valid(url, provider_name, build_id):
    ref = parse_url(url)
    assert ref.provider == provider_name
    assert ref.build_id == build_id


def test_parse_url_metadata():
    assert parse_url("https://buildkite.com/org/pipeline/builds/123").metadata == {
        "org": "org",
        "pipeline": "pipeline",
    }
    assert parse_url("https://github.com/owner/repo/actions/runs/456").metadata == {
        "owner": "owner",
        "repo": "repo",
    }


def test_parse_url_invalid():
    with pytest.raises(InvalidURLError) as info:
        parse_url("https://example.com/invalid")
    assert "https://example.com/invalid" in str(info.value)
    assert isinstance(wrap_error(info.value), UserError)


def test_validate_token_missing(monkeypatch):
    monkeypatch.delenv("BUILDKITE_API_TOKEN", raising=False)
    with pytest.raises(ProviderError, match="BUILDKITE_API_TOKEN environment variable not set"):
        validate_token(BuildRef("buildkite", "1"))


def test_validate_token_present(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "token")
    validate_token(BuildRef("github", "1"))
    monkeypatch.delenv("GITHUB_TOKEN")
    with pytest.raises(ProviderError, match="GITHUB_TOKEN"):
        validate_token(BuildRef("github", "1"))


def test_validate_token_unknown_provider():
    with pytest.raises(ProviderUnknownError, match="gitlab"):
        validate_token(BuildRef("gitlab", "1"))


class _FakeProvider(Provider):
    def __init__(self, api_token):
        self.api_token = api_token

    @property
    def name(self):
        return "buildkite"

    def parse_url(self, url):
        return parse_url(url)

    def fetch_build(self, ref):
        return Build(id=ref.build_id)

    def fetch_job_log(self, job_id):
        return ""

    def fetch_artifacts(self, job_id):
        return []

    def download_artifact(self, artifact: Artifact):
        return b""


def test_get_provider_uses_registered_factory(monkeypatch):
    monkeypatch.setenv("BUILDKITE_API_TOKEN", "token")
    register_provider("buildkite", _FakeProvider)
    provider = get_provider(BuildRef("buildkite", "7"))
    assert isinstance(provider, _FakeProvider)
    assert provider.api_token == "token"
    assert provider.fetch_build(BuildRef("buildkite", "7")).id == "7"


def test_get_provider_missing_token(monkeypatch):
    monkeypatch.delenv("BUILDKITE_API_TOKEN", raising=False)
    register_provider("buildkite", _FakeProvider)
    with pytest.raises(ProviderError, match="BUILDKITE_API_TOKEN"):
        get_provider(BuildRef("buildkite", "7"))


def test_get_provider_unknown():
    with pytest.raises(ProviderUnknownError):
        get_provider(BuildRef("gitlab", "1"))