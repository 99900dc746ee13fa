"""Starlette ASGI application exposing the user endpoints.

Every response is an envelope: ``{"success": true, "message": <user>}`` on
success, ``{"success": false, "message": <text>}`` or
``{"success": false, "errors": [...]}`` on failure.
"""

from __future__ import annotations

import contextlib
import json
import logging
import re
from typing import Any, AsyncIterator

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..exceptions import MissingFieldsError, RequestFault, UserNotFoundError
from ..store import UserStore

logger = logging.getLogger(__name__)

USER_ID_PATTERN = re.compile(r"-?\d+", re.ASCII)


def _ok(payload: Any) -> JSONResponse:
    return JSONResponse({"success": True, "message": payload})


def _fault(fault: RequestFault) -> JSONResponse:
    return JSONResponse(fault.envelope(), status_code=fault.status_code)


def _internal_error(exc: Exception) -> JSONResponse:
    return JSONResponse({"success": False, "message": str(exc)}, status_code=500)


def _parse_user_id(raw: str) -> int:
    """Path ids that are not plain ASCII integers can never match a stored user."""
    if not USER_ID_PATTERN.fullmatch(raw):
        raise UserNotFoundError(raw)
    return int(raw)


def create_app(store: UserStore) -> Starlette:
    """Build the Starlette application wired to *store*.

    The store is loaded in the lifespan handler (unless the caller already
    loaded it), so the collection is in memory before the first request.
    """

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        if not store.loaded:
            await store.load()
        yield
        if store.dirty:
            logger.warning("Store is dirty at shutdown, retrying save")
            await store.flush()

    async def get_user(request: Request) -> JSONResponse:
        """GET /api/users/{user_id}"""
        try:
            user_id = _parse_user_id(request.path_params["user_id"])
            user = store.get(user_id)
            return _ok(user.to_dict())
        except RequestFault as fault:
            return _fault(fault)
        except Exception as exc:
            logger.exception("Lookup failed: %s", exc)
            return _internal_error(exc)

    async def create_user(request: Request) -> JSONResponse:
        """POST /api/users"""
        try:
            raw = await request.body()
            try:
                # an empty body carries no fields
                body = json.loads(raw) if raw.strip() else {}
            except (json.JSONDecodeError, UnicodeDecodeError):
                raise MissingFieldsError("Request body must be valid JSON") from None
            if not isinstance(body, dict):
                raise MissingFieldsError()

            user = await store.create(body)
            return _ok(user.to_dict())
        except RequestFault as fault:
            logger.debug("Rejected user creation: %s", fault.to_json())
            return _fault(fault)
        except Exception as exc:
            logger.exception("User creation failed: %s", exc)
            return _internal_error(exc)

    async def delete_user(request: Request) -> JSONResponse:
        """DELETE /api/users/{user_id}"""
        try:
            user_id = _parse_user_id(request.path_params["user_id"])
            removed = await store.delete(user_id)
            return _ok(removed.to_dict())
        except RequestFault as fault:
            return _fault(fault)
        except Exception as exc:
            logger.exception("User deletion failed: %s", exc)
            return _internal_error(exc)

    routes = [
        Route("/api/users", create_user, methods=["POST"]),
        Route("/api/users/{user_id}", get_user, methods=["GET"]),
        Route("/api/users/{user_id}", delete_user, methods=["DELETE"]),
    ]

    return Starlette(routes=routes, lifespan=lifespan)
