from typing import Annotated
from urllib.parse import urlencode

import strawberry
from strawberry.types import Info

from rollgraph.errors import InvalidArgument
from rollgraph.graphql.enums import Level, Status
from rollgraph.graphql.types import (
    OCCURRENCE_PAGE_DESCRIPTION,
    Item,
    Occurrence,
    Project,
    RqlJob,
    Team,
    User,
    account_request,
    build_list,
    build_one,
    context_of,
    fetch_occurrences,
    page_query,
    project_request,
)
from rollgraph.services.slicing import window
from rollgraph.services.unwrap import project_has_status, user_has_identity


def items_query(
    assigned_user: str | None = None,
    environment: list[str | None] | None = None,
    framework: list[str | None] | None = None,
    ids: list[int | None] | None = None,
    level: list[Level | None] | None = None,
    page: int | None = None,
    query: str | None = None,
    status: list[Status | None] | None = None,
) -> str | None:
    """Query string for the items endpoint; list filters become repeated parameters"""
    params: list[tuple[str, str]] = []
    if assigned_user:
        params.append(("assigned_user", assigned_user))
    if page:
        params.append(("page", str(page)))
    if query:
        params.append(("query", query))

    repeated = (
        ("environment", environment),
        ("framework", framework),
        ("ids", ids),
        ("level", [lv.value for lv in level if lv] if level else None),
        ("status", [st.value for st in status if st] if status else None),
    )
    for name, values in repeated:
        for value in values or []:
            if value is not None:
                params.append((name, str(value)))

    return urlencode(params) or None


@strawberry.type
class Query:
    @strawberry.field
    async def users(
        self, info: Info, first: int | None = None, skip: int | None = None
    ) -> list[User] | None:
        client = context_of(info).client
        data = await client.maybe_get(
            account_request(info, "users"), "users", user_has_identity
        )
        return build_list(User, window(data, first, skip)) or []

    @strawberry.field
    async def user(self, info: Info, id: int) -> User | None:
        client = context_of(info).client
        data = await client.maybe_get(account_request(info, f"user/{id}"))
        return build_one(User, data)

    @strawberry.field
    async def teams(
        self, info: Info, first: int | None = None, skip: int | None = None
    ) -> list[Team] | None:
        client = context_of(info).client
        data = await client.maybe_get(account_request(info, "teams"))
        return build_list(Team, window(data, first, skip)) or []

    @strawberry.field
    async def team(self, info: Info, id: int) -> Team | None:
        client = context_of(info).client
        data = await client.maybe_get(account_request(info, f"team/{id}"))
        return build_one(Team, data)

    @strawberry.field
    async def projects(
        self, info: Info, first: int | None = None, skip: int | None = None
    ) -> list[Project] | None:
        client = context_of(info).client
        data = await client.maybe_get(
            account_request(info, "projects"), None, project_has_status
        )
        return build_list(Project, window(data, first, skip)) or []

    @strawberry.field
    async def project(self, info: Info, id: int) -> Project | None:
        client = context_of(info).client
        return build_one(
            Project, await client.maybe_get(account_request(info, f"project/{id}"))
        )

    @strawberry.field
    async def items(
        self,
        info: Info,
        assigned_user: Annotated[
            str | None,
            strawberry.argument(
                description=(
                    "Only items assigned to the specified user will be returned. "
                    "Must be a valid Rollbar username, or you can use the keywords "
                    "'assigned' (items that are assigned to any owner) or "
                    "'unassigned' (items with no owner)."
                )
            ),
        ] = None,
        environment: Annotated[
            list[str | None] | None,
            strawberry.argument(
                description="Only items in the specified environments will be returned."
            ),
        ] = None,
        framework: Annotated[
            list[str | None] | None,
            strawberry.argument(
                description="Only items in the specified frameworks will be returned."
            ),
        ] = None,
        ids: Annotated[
            list[int | None] | None,
            strawberry.argument(
                description=(
                    "List of item IDs to return, instead of using all items "
                    "in the project."
                )
            ),
        ] = None,
        level: Annotated[
            list[Level | None] | None,
            strawberry.argument(
                description="Only items with the specified levels will be returned."
            ),
        ] = None,
        page: Annotated[
            int | None,
            strawberry.argument(
                description=(
                    "Page number, starting from 1. 100 items are returned per page."
                )
            ),
        ] = None,
        query: Annotated[
            str | None,
            strawberry.argument(
                description=(
                    "A search string, using the same format as the search box "
                    "on the Items page."
                )
            ),
        ] = None,
        status: Annotated[
            list[Status | None] | None,
            strawberry.argument(
                description="Only items with the specified status will be returned."
            ),
        ] = None,
    ) -> list[Item] | None:
        qs = items_query(
            assigned_user=assigned_user,
            environment=environment,
            framework=framework,
            ids=ids,
            level=level,
            page=page,
            query=query,
            status=status,
        )
        client = context_of(info).client
        data = await client.maybe_get(project_request(info, "items", qs), "items")
        return build_list(Item, data)

    @strawberry.field(description="Get an item. One of id or counter must be specified")
    async def item(
        self,
        info: Info,
        id: Annotated[
            int | None,
            strawberry.argument(
                description=(
                    "ID as returned in the id field in other API calls. "
                    "Note that this is NOT found in an URL"
                )
            ),
        ] = None,
        counter: Annotated[
            int | None,
            strawberry.argument(
                description=(
                    "Item counter for an item in the project. "
                    "The counter can be found in URLs"
                )
            ),
        ] = None,
    ) -> Item | None:
        if not id and not counter:
            raise InvalidArgument("Must specify id or counter")

        if id:
            request = project_request(info, f"item/{id}")
        else:
            request = project_request(info, f"item_by_counter/{counter}")
        client = context_of(info).client
        return build_one(Item, await client.maybe_get(request))

    @strawberry.field
    async def occurrences(
        self,
        info: Info,
        page: Annotated[
            int | None, strawberry.argument(description=OCCURRENCE_PAGE_DESCRIPTION)
        ] = None,
    ) -> list[Occurrence] | None:
        return await fetch_occurrences(info, "instances", page)

    @strawberry.field
    async def occurrence(self, info: Info, id: str) -> Occurrence | None:
        client = context_of(info).client
        return build_one(
            Occurrence, await client.maybe_get(project_request(info, f"instance/{id}"))
        )

    @strawberry.field
    async def rql_jobs(
        self, info: Info, page: int | None = None
    ) -> list[RqlJob] | None:
        client = context_of(info).client
        data = await client.maybe_get(
            project_request(info, "rql/jobs", page_query(page)), "jobs"
        )
        return build_list(RqlJob, data)

    @strawberry.field
    async def rql_job(self, info: Info, id: int) -> RqlJob | None:
        client = context_of(info).client
        data = await client.maybe_get(
            project_request(info, f"rql/job/{id}", "expand=result")
        )
        return build_one(RqlJob, data)
