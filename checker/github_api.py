import httpx
from pydantic import ValidationError

from checker.api.schemas.calendar import ContributionCalendar
from checker.api.schemas.calendar import GraphQLData
from checker.api.schemas.calendar import GraphQLResponse


DEFAULT_USER_AGENT = "contributes-checker"

CONTRIBUTIONS_QUERY = """
query($login: String!) {
  user(login: $login) {
    contributionsCollection {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            date
            contributionCount
            color
          }
        }
      }
    }
  }
}
"""


class ContributionFetchError(Exception):
    """Base error for a failed contribution calendar fetch.

    The message is the text shown to the user.
    """


class TransportError(ContributionFetchError):
    """Raised when the HTTP exchange with GitHub fails."""


class ResponseParseError(ContributionFetchError):
    """Raised when the response body is not a GraphQL envelope."""


class ApiError(ContributionFetchError):
    """Raised when GitHub reports one or more GraphQL errors."""


class MissingDataError(ContributionFetchError):
    """Raised when the envelope carries no data or no user."""


def build_contributions_query(username: str) -> dict[str, object]:
    """Build the GraphQL request body for a user's contribution calendar.

    The login travels as the `$login` variable and is never formatted into
    the query text, so usernames cannot alter the document.
    """

    if not username:
        raise ValueError("username is required for GraphQL requests")

    return {"query": CONTRIBUTIONS_QUERY, "variables": {"login": username}}


def build_headers(token: str, user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    return {
        "Authorization": f"bearer {token}",
        "Content-Type": "application/json",
        "User-Agent": user_agent,
    }


def parse_contributions_response(body: str | bytes) -> ContributionCalendar:
    """Classify a GraphQL response body and extract the calendar.

    Errors reported by the server take precedence over any partial data, so
    the nested calendar is only validated once `errors` is known to be empty.

    Raises:
        ResponseParseError: If the body or its `data` tree does not match the
            expected shape.
        ApiError: If the envelope lists errors.
        MissingDataError: If `data` or `data.user` is absent.
    """

    try:
        envelope = GraphQLResponse.model_validate_json(body)
    except ValidationError as exc:
        raise ResponseParseError(f"JSON parse error: {exc}") from exc

    if envelope.errors:
        messages = ", ".join(error.message for error in envelope.errors)
        raise ApiError(f"API errors: {messages}")

    if envelope.data is None:
        raise MissingDataError("No data returned")

    if envelope.data.get("user") is None:
        raise MissingDataError("No user data returned")

    try:
        data = GraphQLData.model_validate(envelope.data)
    except ValidationError as exc:
        raise ResponseParseError(f"JSON parse error: {exc}") from exc

    return data.user.contributions_collection.contribution_calendar


def fetch_contribution_calendar(
    username: str,
    token: str,
    graphql_url: str,
    user_agent: str = DEFAULT_USER_AGENT,
    transport: httpx.BaseTransport | None = None,
) -> ContributionCalendar:
    """Fetch a user's contribution calendar from GitHub GraphQL API.

    Sends a single POST and never retries. Timeouts are httpx defaults.
    """

    payload = build_contributions_query(username)

    try:
        with httpx.Client(transport=transport) as client:
            response = client.post(
                graphql_url,
                json=payload,
                headers=build_headers(token, user_agent),
            )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise TransportError(f"Request error: {exc}") from exc

    return parse_contributions_response(response.content)
