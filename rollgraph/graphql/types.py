"""
GraphQL object types and their relational resolvers.

Every instance is built from the upstream JSON of a single resolver call and
discarded once the response is serialized.
"""

import logging
from typing import Annotated, Any, Optional

import strawberry
from strawberry.scalars import JSON
from strawberry.types import Info

from rollgraph.graphql.context import GraphQLContext
from rollgraph.graphql.enums import AccessLevel, Level, RqlStatus, Status
from rollgraph.services.urls import UpstreamRequest

logger = logging.getLogger(__name__)

OCCURRENCE_PAGE_DESCRIPTION = (
    "Page number starting at 1. 20 occurrences are returned per page"
)


def context_of(info: Info) -> GraphQLContext:
    return info.context


def account_request(
    info: Info, endpoint: str, query: str | None = None
) -> UpstreamRequest:
    ctx = context_of(info)
    return ctx.client.urls.account(ctx.tokens, endpoint, query)


def project_request(
    info: Info, endpoint: str, query: str | None = None
) -> UpstreamRequest:
    ctx = context_of(info)
    return ctx.client.urls.project(ctx.tokens, endpoint, query)


def page_query(page: int | None) -> str | None:
    return f"page={page}" if page else None


def build_list(cls, payloads: list[dict[str, Any]] | None):
    if payloads is None:
        return None
    return [cls.from_payload(payload) for payload in payloads]


def build_one(cls, payload: dict[str, Any] | None):
    if payload is None:
        return None
    return cls.from_payload(payload)


def member_ids(members: list[dict[str, Any]], key: str) -> list[Any]:
    """Ids referenced by membership records, skipping records without one"""
    ids = []
    for member in members:
        member_id = member.get(key) if isinstance(member, dict) else None
        if member_id is None:
            logger.warning(f"Dropping membership record without {key}: {member}")
            continue
        ids.append(member_id)
    return ids


async def fetch_occurrences(
    info: Info, endpoint: str, page: int | None
) -> "list[Occurrence] | None":
    """Occurrences of the project (``instances``) or of one item"""
    client = context_of(info).client
    data = await client.maybe_get(
        project_request(info, endpoint, page_query(page)), "instances"
    )
    return build_list(Occurrence, data)


@strawberry.type
class Project:
    id: int
    account_id: int
    status: str | None = None
    name: str | None = None
    slug: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Project":
        return cls(
            id=data.get("id"),
            account_id=data.get("account_id"),
            status=data.get("status"),
            name=data.get("name"),
            slug=data.get("slug"),
        )


@strawberry.type
class Notifier:
    version: str | None = None
    name: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Notifier":
        return cls(version=data.get("version"), name=data.get("name"))


@strawberry.type
class OccurrenceData:
    uuid: str | None = None
    level: Level | None = None
    environment: str | None = None
    notifier: Notifier | None = None
    metadata: Optional[JSON] = None
    timestamp: int | None = None
    server: Optional[JSON] = None
    framework: str | None = None
    body: Optional[JSON] = None
    language: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "OccurrenceData":
        return cls(
            uuid=data.get("uuid"),
            level=Level.parse(data.get("level")),
            environment=data.get("environment"),
            notifier=build_one(Notifier, data.get("notifier")),
            metadata=data.get("metadata"),
            timestamp=data.get("timestamp"),
            server=data.get("server"),
            framework=data.get("framework"),
            body=data.get("body"),
            language=data.get("language"),
        )


@strawberry.type
class Occurrence:
    id: str
    project_id: int
    timestamp: int | None = None
    version: int | None = None
    billable: int | None = None
    data: OccurrenceData | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Occurrence":
        occurrence_id = data.get("id")
        return cls(
            id=str(occurrence_id) if occurrence_id is not None else None,
            project_id=data.get("project_id"),
            timestamp=data.get("timestamp"),
            version=data.get("version"),
            billable=data.get("billable"),
            data=build_one(OccurrenceData, data.get("data")),
        )


ITEM_SCALARS = (
    "controlling_id",
    "project_id",
    "hash",
    "title",
    "environment",
    "counter",
    "framework",
    "platform",
    "last_activated_timestamp",
    "assigned_user_id",
    "group_status",
    "last_occurrence_id",
    "last_occurrence_timestamp",
    "first_occurrence_timestamp",
    "total_occurrences",
    "unique_occurrences",
    "group_item_id",
    "last_modified_by",
    "first_occurrence_id",
    "activating_occurrence_id",
)


@strawberry.type
class Item:
    id: int
    controlling_id: int | None = None
    project_id: int | None = None
    hash: str | None = None
    title: str | None = None
    environment: str | None = None
    level: Level | None = None
    counter: int | None = None
    framework: str | None = None
    platform: str | None = None
    status: Status | None = None
    last_activated_timestamp: int | None = None
    assigned_user_id: int | None = None
    group_status: int | None = None
    last_occurrence_id: int | None = None
    last_occurrence_timestamp: int | None = None
    first_occurrence_timestamp: int | None = None
    total_occurrences: int | None = None
    unique_occurrences: int | None = None
    group_item_id: int | None = None
    last_modified_by: int | None = None
    first_occurrence_id: int | None = None
    activating_occurrence_id: int | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Item":
        return cls(
            id=data.get("id"),
            level=Level.parse(data.get("level")),
            status=Status.parse(data.get("status")),
            **{name: data.get(name) for name in ITEM_SCALARS},
        )

    @strawberry.field
    async def occurrences(
        self,
        info: Info,
        page: Annotated[
            int | None, strawberry.argument(description=OCCURRENCE_PAGE_DESCRIPTION)
        ] = None,
    ) -> list[Occurrence] | None:
        return await fetch_occurrences(info, f"item/{self.id}/instances", page)


@strawberry.type
class User:
    id: int
    username: str
    email: str
    email_enabled: int | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=data.get("id"),
            username=data.get("username"),
            email=data.get("email"),
            email_enabled=data.get("email_enabled"),
        )

    @strawberry.field
    async def teams(self, info: Info) -> "list[Team] | None":
        client = context_of(info).client
        data = await client.maybe_get(
            account_request(info, f"user/{self.id}/teams"), "teams"
        )
        return build_list(Team, data)

    @strawberry.field
    async def projects(self, info: Info) -> list[Project] | None:
        client = context_of(info).client
        data = await client.maybe_get(
            account_request(info, f"user/{self.id}/projects"), "projects"
        )
        return build_list(Project, data)


@strawberry.type
class Team:
    id: int
    account_id: int
    name: str
    access_level: AccessLevel

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Team":
        return cls(
            id=data.get("id"),
            account_id=data.get("account_id"),
            name=data.get("name"),
            access_level=AccessLevel.parse(data.get("access_level")),
        )

    @strawberry.field
    async def users(self, info: Info) -> list[User] | None:
        client = context_of(info).client
        members = await client.maybe_get(
            account_request(info, f"team/{self.id}/users", "page=1")
        )
        if members is None:
            return None

        users = await client.gather_each(
            [
                account_request(info, f"user/{user_id}")
                for user_id in member_ids(members, "user_id")
            ]
        )
        return build_list(User, users)

    @strawberry.field
    async def projects(self, info: Info) -> list[Project] | None:
        client = context_of(info).client
        members = await client.maybe_get(
            account_request(info, f"team/{self.id}/projects")
        )
        if members is None:
            return None

        projects = await client.gather_each(
            [
                account_request(info, f"project/{project_id}")
                for project_id in member_ids(members, "project_id")
            ]
        )
        return build_list(Project, projects)


@strawberry.type
class RqlResult:
    is_simple_select: bool | None = strawberry.field(
        name="isSimpleSelect", default=None
    )
    errors: list[str | None] | None = None
    warnings: list[str | None] | None = None
    execution_time: float | None = strawberry.field(name="executionTime", default=None)
    effective_timestamp: int | None = strawberry.field(
        name="effectiveTimestamp", default=None
    )
    rowcount: int | None = None
    rows: list[list[str | None] | None] | None = None
    selection_columns: list[str | None] | None = strawberry.field(
        name="selectionColumns", default=None
    )
    columns: list[str | None] | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "RqlResult":
        return cls(
            is_simple_select=data.get("isSimpleSelect"),
            errors=data.get("errors"),
            warnings=data.get("warnings"),
            execution_time=data.get("executionTime"),
            effective_timestamp=data.get("effectiveTimestamp"),
            rowcount=data.get("rowcount"),
            rows=data.get("rows"),
            selection_columns=data.get("selectionColumns"),
            columns=data.get("columns"),
        )


@strawberry.type
class RqlJob:
    id: int
    status: RqlStatus
    date_modified: int | None = None
    job_hash: str | None = None
    query_string: str | None = None
    date_created: int | None = None
    project_id: strawberry.Private[int | None] = None
    # Present when the job was fetched with expand=result
    embedded_result: strawberry.Private[dict[str, Any] | None] = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "RqlJob":
        return cls(
            id=data.get("id"),
            status=RqlStatus.parse(data.get("status")),
            date_modified=data.get("date_modified"),
            job_hash=data.get("job_hash"),
            query_string=data.get("query_string"),
            date_created=data.get("date_created"),
            project_id=data.get("project_id"),
            embedded_result=data.get("result"),
        )

    @strawberry.field
    async def project(self, info: Info) -> Project | None:
        client = context_of(info).client
        data = await client.maybe_get(
            account_request(info, f"project/{self.project_id}")
        )
        return build_one(Project, data)

    @strawberry.field
    async def result(self, info: Info) -> RqlResult | None:
        if self.embedded_result:
            return RqlResult.from_payload(self.embedded_result)

        client = context_of(info).client
        data = await client.maybe_get(
            project_request(info, f"rql/job/{self.id}/result"), "result"
        )
        return build_one(RqlResult, data)
