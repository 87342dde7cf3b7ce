from dataclasses import dataclass

from checker.settings import Settings


@dataclass(frozen=True)
class Credentials:
    """GitHub token and the login whose calendar is fetched."""

    token: str
    username: str


@dataclass(frozen=True)
class MissingCredentials:
    """Startup credential check failure listing the unset variables."""

    missing: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"{', '.join(self.missing)} must be set"


def validate_credentials(settings: Settings) -> Credentials | MissingCredentials:
    """Check that both token and username are configured.

    Returns the stripped credentials, or a `MissingCredentials` result naming
    every empty variable so the caller can report it instead of exiting.
    """

    token = settings.github_token.strip()
    username = settings.github_username.strip()

    missing: list[str] = []
    if not token:
        missing.append("GITHUB_TOKEN")
    if not username:
        missing.append("GITHUB_USERNAME")

    if missing:
        return MissingCredentials(missing=tuple(missing))

    return Credentials(token=token, username=username)
