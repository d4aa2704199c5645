"""
OpenMusic API — Declarative Route Tables
=========================================

What:  A static table of (verb, path) → handler entries, each tagged with an
       authorization requirement, and the function that mounts it.
How:   register_routes() calls APIRouter.add_api_route() for every entry and
       attaches the auth strategy named by `auth` as a route dependency.
Who:   Every module in openmusic.routes declares a `routes` list and feeds it
       to register_routes() against its own APIRouter.

Example:
    routes = [
        Route("POST", "/playlists", post_playlist, auth="openmusic_jwt", status_code=201),
        Route("GET", "/playlists", get_playlists, auth="openmusic_jwt"),
    ]
    register_routes(router, routes)
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from fastapi import APIRouter, Depends

from openmusic.core.security import AUTH_STRATEGIES


@dataclass(frozen=True)
class Route:
    """One row of a route table. Pure data."""

    method: str
    path: str
    handler: Callable[..., Any]
    auth: Optional[str] = None
    status_code: int = 200
    summary: Optional[str] = None
    responses: Optional[Dict[int, Dict[str, Any]]] = None


def register_routes(router: APIRouter, routes: Sequence[Route]) -> APIRouter:
    """
    Mount every route of a table onto `router`.

    Raises:
        ValueError: an entry names an auth strategy that does not exist
                    (fails at import time, never per request)
    """
    for route in routes:
        dependencies: List[Any] = []
        if route.auth is not None:
            if route.auth not in AUTH_STRATEGIES:
                raise ValueError(
                    f"Unknown auth strategy '{route.auth}' for {route.method} {route.path}"
                )
            dependencies.append(Depends(AUTH_STRATEGIES[route.auth]))

        router.add_api_route(
            route.path,
            route.handler,
            methods=[route.method],
            status_code=route.status_code,
            summary=route.summary,
            responses=route.responses,
            dependencies=dependencies,
        )
    return router
