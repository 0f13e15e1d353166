"""Linear GraphQL client for fetching issues and their relations."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

import httpx

from lindeps.graph import TEAM_ISSUE_LIMIT
from lindeps.models import Project, Team, issue_from_dict

if TYPE_CHECKING:
    from types import TracebackType

    from lindeps.models import IssueWithRelations

logger = logging.getLogger(__name__)

LINEAR_API_URL = "https://api.linear.app/graphql"

# Linear caps page sizes at 250 nodes
PAGE_SIZE = 100

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

_ISSUE_FIELDS = """
    id
    identifier
    title
    state { id name }
    project { id name }
"""

_RELATED_FIELDS = "id identifier title state { id name }"

ISSUE_WITH_RELATIONS_QUERY = f"""
query IssueWithRelations($id: String!) {{
  issue(id: $id) {{
    {_ISSUE_FIELDS}
    relations {{
      nodes {{ id type relatedIssue {{ {_RELATED_FIELDS} }} }}
    }}
    inverseRelations {{
      nodes {{ id type issue {{ {_RELATED_FIELDS} }} }}
    }}
  }}
}}
"""

TEAM_ISSUES_WITH_RELATIONS_QUERY = f"""
query TeamIssuesWithRelations($teamId: String!, $first: Int!, $after: String) {{
  team(id: $teamId) {{
    issues(first: $first, after: $after) {{
      nodes {{
        {_ISSUE_FIELDS}
        relations {{
          nodes {{ id type relatedIssue {{ {_RELATED_FIELDS} }} }}
        }}
      }}
      pageInfo {{ hasNextPage endCursor }}
    }}
  }}
}}
"""

TEAMS_QUERY = """
query Teams {
  teams(first: 250) {
    nodes { id key name }
  }
}
"""

TEAM_PROJECTS_QUERY = """
query TeamProjects($teamId: String!, $first: Int!) {
  team(id: $teamId) {
    projects(first: $first) {
      nodes { id name }
    }
  }
}
"""


class LinearAPIError(Exception):
    """Raised when a Linear API request fails."""


class AuthenticationError(LinearAPIError):
    """Raised when the API rejects the credentials."""


class NotFoundError(LinearAPIError):
    """Raised when a requested resource does not exist."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        available: list[str] | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.available = available or []
        message = f"{resource_type} not found: {resource_id}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


def is_uuid(value: str) -> bool:
    """Check if a string looks like a Linear UUID."""
    return bool(_UUID_RE.match(value))


class LinearClient:
    """Thin synchronous client for the Linear GraphQL API.

    The client performs no retries. Team lookups are cached for the
    lifetime of the instance.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = LINEAR_API_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Personal API key or OAuth access token
            base_url: GraphQL endpoint URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._http = httpx.Client(
            headers={
                "Authorization": api_key,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )
        self.base_url = base_url
        self._teams: list[Team] | None = None

    def __enter__(self) -> LinearClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    def query(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute a GraphQL document and return its ``data`` object.

        Raises:
            AuthenticationError: On HTTP 401
            LinearAPIError: On transport errors, HTTP errors, or GraphQL errors
        """
        logger.debug("POST %s variables=%s", self.base_url, variables)
        try:
            response = self._http.post(
                self.base_url,
                json={"query": document, "variables": variables or {}},
            )
        except httpx.HTTPError as e:
            msg = f"request to Linear failed: {e}"
            raise LinearAPIError(msg) from e

        if response.status_code == httpx.codes.UNAUTHORIZED:
            msg = "authentication failed: invalid or expired API key"
            raise AuthenticationError(msg)

        try:
            payload = response.json()
        except ValueError as e:
            msg = f"invalid response from Linear (HTTP {response.status_code})"
            raise LinearAPIError(msg) from e

        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            messages = "; ".join(str(err.get("message", err)) for err in errors)
            msg = f"GraphQL error: {messages}"
            raise LinearAPIError(msg)

        if response.is_error:
            msg = f"Linear API returned HTTP {response.status_code}"
            raise LinearAPIError(msg)

        return payload.get("data") or {}

    def get_issue_with_relations(self, identifier: str) -> IssueWithRelations:
        """Fetch one issue with its outgoing and incoming relations.

        Args:
            identifier: Issue key (e.g., "ENG-100") or UUID

        Raises:
            NotFoundError: If the issue does not exist
        """
        data = self.query(ISSUE_WITH_RELATIONS_QUERY, {"id": identifier})
        issue = data.get("issue")
        if not issue:
            raise NotFoundError("issue", identifier)
        return issue_from_dict(issue)

    def get_team_issues_with_relations(
        self,
        team_id: str,
        limit: int = TEAM_ISSUE_LIMIT,
    ) -> list[IssueWithRelations]:
        """Fetch up to *limit* issues of a team with their outgoing relations.

        Args:
            team_id: Team UUID
            limit: Maximum number of issues to return

        Raises:
            NotFoundError: If the team does not exist
        """
        issues: list[IssueWithRelations] = []
        cursor: str | None = None
        while len(issues) < limit:
            first = min(PAGE_SIZE, limit - len(issues))
            data = self.query(
                TEAM_ISSUES_WITH_RELATIONS_QUERY,
                {"teamId": team_id, "first": first, "after": cursor},
            )
            team = data.get("team")
            if not team:
                raise NotFoundError("team", team_id)

            connection = team.get("issues") or {}
            nodes = connection.get("nodes") or []
            issues.extend(issue_from_dict(node) for node in nodes)
            logger.debug("Fetched %d issues for team %s", len(issues), team_id)

            page_info = connection.get("pageInfo") or {}
            cursor = page_info.get("endCursor")
            if not page_info.get("hasNextPage") or not cursor or not nodes:
                break

        return issues[:limit]

    def get_teams(self) -> list[Team]:
        """Fetch all teams visible to the API key (cached)."""
        if self._teams is None:
            data = self.query(TEAMS_QUERY)
            nodes = (data.get("teams") or {}).get("nodes") or []
            self._teams = [
                Team(id=t["id"], key=t.get("key", ""), name=t.get("name", ""))
                for t in nodes
            ]
        return self._teams

    def resolve_team(self, key_or_name: str) -> str:
        """Resolve a team key, name, or UUID to the team UUID.

        Keys are matched case-insensitively first, then names.

        Raises:
            ValueError: If *key_or_name* is empty
            NotFoundError: If no team matches
        """
        if not key_or_name:
            msg = "team identifier cannot be empty"
            raise ValueError(msg)
        if is_uuid(key_or_name):
            return key_or_name

        teams = self.get_teams()
        key_upper = key_or_name.upper()
        for team in teams:
            if team.key.upper() == key_upper:
                return team.id

        name_lower = key_or_name.lower()
        for team in teams:
            if team.name.lower() == name_lower:
                return team.id

        raise NotFoundError("team", key_or_name, [t.key for t in teams])

    def list_team_projects(self, team_id: str, limit: int = 100) -> list[Project]:
        """Fetch projects belonging to a team."""
        data = self.query(TEAM_PROJECTS_QUERY, {"teamId": team_id, "first": limit})
        team = data.get("team")
        if not team:
            raise NotFoundError("team", team_id)
        nodes = (team.get("projects") or {}).get("nodes") or []
        return [Project(id=p["id"], name=p.get("name", "")) for p in nodes]

    def resolve_project(self, name_or_id: str, team_id: str) -> str:
        """Resolve a project name or UUID within a team to the project UUID.

        Raises:
            ValueError: If *name_or_id* is empty
            NotFoundError: If no project of the team has that name
            LinearAPIError: If the name matches more than one project
        """
        if not name_or_id:
            msg = "project identifier cannot be empty"
            raise ValueError(msg)
        if is_uuid(name_or_id):
            return name_or_id

        projects = self.list_team_projects(team_id)
        name_lower = name_or_id.lower()
        matches = [p for p in projects if p.name.lower() == name_lower]

        if not matches:
            raise NotFoundError("project", name_or_id, [p.name for p in projects])
        if len(matches) > 1:
            ids = ", ".join(p.id for p in matches)
            msg = f"multiple projects named '{name_or_id}' ({ids}); use the UUID"
            raise LinearAPIError(msg)
        return matches[0].id
