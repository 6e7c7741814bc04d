"""GitHub data fetcher for year-in-review inputs."""

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Any

import httpx

from gitstory.analyzers.transport import ResponseCache, TokenPool
from gitstory.models.schemas import DailyContribution, RepositoryRecord

logger = logging.getLogger(__name__)


class GitHubFetchError(Exception):
    """Raised when a GitHub request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(GitHubFetchError):
    """Raised when the requested resource does not exist."""


class UserNotFoundError(NotFoundError):
    """Raised when the GitHub account does not exist."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f'User "{username}" not found.', status_code=404)


class RateLimitError(GitHubFetchError):
    """Raised when the GitHub API rate limit is exceeded."""

    def __init__(self, reset_time: datetime | None = None, status_code: int = 403) -> None:
        self.reset_time = reset_time
        message = "API rate limit exceeded"
        if reset_time:
            message += f", resets at {reset_time.isoformat()}"
        super().__init__(message, status_code=status_code)


CONTRIBUTIONS_QUERY = """
query($login: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class GitHubFetcher:
    """Fetches account activity from the GitHub API.

    Authentication priority: an explicit user token, then the next token
    from the server pool, then anonymous. Only successful GET responses
    made without a user token are cached.

    Set GITHUB_TOKEN (and optionally GITHUB_TOKEN_2..4) for the pool.
    """

    BASE_URL = "https://api.github.com"
    GRAPHQL_URL = "https://api.github.com/graphql"
    # Public contribution calendar, used when no user token is available
    CONTRIBUTIONS_URL = "https://github-contributions-api.jogruber.de/v4"
    USER_AGENT = "gitstory"

    REPO_PAGES = 10
    EVENT_PAGES = 3  # The events API only serves the latest 300 events

    def __init__(
        self,
        user_token: str | None = None,
        tokens: TokenPool | None = None,
        cache: ResponseCache | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            user_token: Token of the account owner. Takes priority over the pool.
            tokens: Server token pool. Defaults to GITHUB_TOKEN* env vars.
            cache: Response cache. Defaults to a 5 minute cache.
            client: Optional httpx client. If not provided, one is created per request.
        """
        self._user_token = user_token
        self._tokens = tokens if tokens is not None else TokenPool.from_env()
        self._cache = cache if cache is not None else ResponseCache()
        self._client = client

        # Rate limit tracking
        self.rate_limit_remaining: int | None = None
        self.rate_limit_reset: datetime | None = None

    @property
    def has_user_token(self) -> bool:
        return bool(self._user_token)

    def _headers(self, authenticated: bool = True) -> dict[str, str]:
        """Get headers for a single request, rotating pool tokens."""
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self.USER_AGENT,
        }
        if not authenticated:
            return headers

        token = self._user_token or self._tokens.next_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=30.0)

    def _update_rate_limits(self, response: httpx.Response) -> None:
        """Extract and store rate limit info from response headers."""
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")

        if remaining:
            self.rate_limit_remaining = int(remaining)
        if reset:
            self.rate_limit_reset = datetime.fromtimestamp(int(reset), tz=timezone.utc)

    def _check_status(self, response: httpx.Response, url: str) -> None:
        """Translate error statuses into fetch errors."""
        if response.is_success:
            return
        status = response.status_code
        if status == 404:
            raise NotFoundError(f"Not found: {url}", status_code=404)
        if status in (403, 429):
            raise RateLimitError(self.rate_limit_reset, status_code=status)
        raise GitHubFetchError(f"GitHub returned {status} for {url}", status_code=status)

    def _cache_key(self, url: str, params: dict | None) -> str:
        query = "&".join(f"{k}={v}" for k, v in sorted((params or {}).items()))
        return f"{url}?{query}:public"

    async def _request(
        self,
        method: str,
        url: str,
        params: dict | None = None,
        json_body: dict | None = None,
        authenticated: bool = True,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            GitHubFetchError: On transport failures and error statuses.
        """
        cacheable = method == "GET" and not self._user_token
        cache_key = self._cache_key(url, params)
        if cacheable:
            cached = self._cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit: {cache_key}")
                return cached.data

        client = await self._get_client()
        try:
            response = await client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=self._headers(authenticated),
            )
        except httpx.HTTPError as e:
            raise GitHubFetchError(f"Request to {url} failed: {e}") from e
        finally:
            if self._client is None:
                await client.aclose()

        self._update_rate_limits(response)
        self._check_status(response, url)

        try:
            data = response.json()
        except ValueError as e:
            raise GitHubFetchError(f"Invalid JSON from {url}", status_code=response.status_code) from e

        if cacheable:
            self._cache.set(cache_key, data, response.status_code)
        return data

    async def _fetch(self, path: str, params: dict | None = None) -> Any:
        """GET a REST API path."""
        return await self._request("GET", f"{self.BASE_URL}{path}", params=params)

    async def _fetch_all_pages(
        self,
        path: str,
        params: dict | None = None,
        max_pages: int = 10,
    ) -> list:
        """Fetch all pages from a paginated endpoint."""
        params = dict(params or {})
        params.setdefault("per_page", 100)

        results = []
        for page in range(1, max_pages + 1):
            params["page"] = page
            data = await self._fetch(path, params)
            if not data:
                break
            results.extend(data)
            if len(data) < params["per_page"]:
                break

        return results

    async def fetch_user(self, username: str) -> dict:
        """Fetch the account profile.

        Raises:
            UserNotFoundError: If the account does not exist.
            RateLimitError: If the API rate limit is exhausted.
            GitHubFetchError: On any other failure.
        """
        try:
            return await self._fetch(f"/users/{username}")
        except NotFoundError:
            raise UserNotFoundError(username) from None

    async def fetch_repositories(self, username: str) -> list[RepositoryRecord]:
        """Fetch the account's repositories, most recently pushed first.

        Failures are logged and yield an empty list.
        """
        try:
            data = await self._fetch_all_pages(
                f"/users/{username}/repos",
                {"sort": "pushed", "type": "all"},
                max_pages=self.REPO_PAGES,
            )
        except GitHubFetchError as e:
            logger.warning(f"Failed to fetch repos for {username}: {e}")
            return []

        return [self._parse_repo(item) for item in data]

    def _parse_repo(self, data: dict) -> RepositoryRecord:
        """Convert a REST repository payload into a RepositoryRecord."""
        return RepositoryRecord(
            name=data.get("name", ""),
            description=data.get("description"),
            url=data.get("html_url") or "",
            stars=data.get("stargazers_count"),
            forks=data.get("forks_count"),
            watchers=data.get("watchers_count"),
            size=data.get("size"),
            open_issues=data.get("open_issues_count"),
            language=data.get("language"),
            topics=data.get("topics"),
            is_fork=data.get("fork"),
            is_archived=data.get("archived"),
            created_at=_parse_timestamp(data.get("created_at")),
            pushed_at=_parse_timestamp(data.get("pushed_at")),
        )

    async def fetch_contributions(self, username: str, year: int) -> list[DailyContribution]:
        """Fetch daily contribution counts for a year.

        Uses the GraphQL contribution calendar when a user token is set
        (includes private contributions), otherwise the public calendar API.
        Failures are logged and yield an empty list.
        """
        if self._user_token:
            try:
                return await self._fetch_contributions_graphql(username, year)
            except GitHubFetchError as e:
                logger.warning(f"GraphQL contributions failed for {username}, using public calendar: {e}")

        try:
            data = await self._request(
                "GET",
                f"{self.CONTRIBUTIONS_URL}/{username}",
                params={"y": year},
                authenticated=False,
            )
        except GitHubFetchError as e:
            logger.warning(f"Failed to fetch contributions for {username}: {e}")
            return []

        return [
            DailyContribution(date=date.fromisoformat(day["date"]), count=day.get("count") or 0)
            for day in data.get("contributions", [])
        ]

    async def _fetch_contributions_graphql(self, username: str, year: int) -> list[DailyContribution]:
        body = {
            "query": CONTRIBUTIONS_QUERY,
            "variables": {
                "login": username,
                "from": f"{year}-01-01T00:00:00Z",
                "to": f"{year}-12-31T23:59:59Z",
            },
        }
        data = await self._request("POST", self.GRAPHQL_URL, json_body=body)

        if data.get("errors"):
            raise GitHubFetchError(data["errors"][0].get("message", "GraphQL error"))

        user = (data.get("data") or {}).get("user")
        if user is None:
            raise UserNotFoundError(username)

        weeks = user["contributionsCollection"]["contributionCalendar"]["weeks"]
        return [
            DailyContribution(date=date.fromisoformat(day["date"]), count=day["contributionCount"])
            for week in weeks
            for day in week["contributionDays"]
        ]

    async def fetch_event_timestamps(self, username: str) -> list[datetime]:
        """Fetch creation times of the account's recent public events."""
        try:
            events = await self._fetch_all_pages(
                f"/users/{username}/events", max_pages=self.EVENT_PAGES
            )
        except GitHubFetchError as e:
            logger.warning(f"Failed to fetch events for {username}: {e}")
            return []

        timestamps = []
        for event in events:
            created_at = _parse_timestamp(event.get("created_at"))
            if created_at is not None:
                timestamps.append(created_at)
        return timestamps

    async def fetch_search_count(self, query: str) -> int:
        """Return ``total_count`` for an issue search. Failures count as 0."""
        try:
            data = await self._fetch("/search/issues", {"q": query, "per_page": 1})
        except GitHubFetchError as e:
            logger.warning(f"Search failed for '{query}': {e}")
            return 0
        return data.get("total_count") or 0

    async def fetch_activity_counts(self, username: str, year: int) -> tuple[int, int, int]:
        """Count PRs opened, issues opened and PRs reviewed during a year.

        Returns:
            (prs, issues, reviews)
        """
        created = f"created:{year}-01-01..{year}-12-31"
        prs, issues, reviews = await asyncio.gather(
            self.fetch_search_count(f"author:{username} type:pr {created}"),
            self.fetch_search_count(f"author:{username} type:issue {created}"),
            self.fetch_search_count(f"reviewed-by:{username} -author:{username} type:pr {created}"),
        )
        return prs, issues, reviews

