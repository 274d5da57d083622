from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ...api import ApiFunction, acall_api, get_api_functions
from ...data import SupabaseNotInitializedError, SupabaseSessionMissingError
from ..context import ViewerRequiredError

logger = logging.getLogger(__name__)

app = FastAPI(title="boardcal API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ApiCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ShiftRequest(BaseModel):
    delta_days: int
    month: Optional[str] = None
    viewer_id: Optional[str] = None


def _serialize_api_function(api_function: ApiFunction) -> dict:
    return {
        "name": api_function.name,
        "description": api_function.description,
        "category": api_function.category,
        "tags": list(api_function.tags),
        "writes": api_function.writes,
        "parameters": api_function.parameter_schema,
    }


async def _invoke(function_name: str, arguments: Dict[str, Any]) -> Any:
    """Run a registered function, mapping failures onto HTTP status codes."""

    try:
        return await acall_api(function_name, **arguments)
    except KeyError as exc:
        logger.warning("API function not found: %s", function_name)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        logger.info("API function %s rejected arguments: %s", function_name, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (SupabaseSessionMissingError, ViewerRequiredError) as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except SupabaseNotInitializedError as exc:
        logger.error("Supabase backend is not configured: %s", exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("API function %s failed", function_name)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.get("/api/functions")
async def list_api_functions() -> JSONResponse:
    functions = [_serialize_api_function(func) for func in get_api_functions()]
    return JSONResponse({"functions": functions})


@app.post("/api/functions/{function_name}")
async def invoke_api_function(function_name: str, request: ApiCallRequest) -> JSONResponse:
    result = await _invoke(function_name, request.arguments)
    logger.debug("API function %s executed successfully", function_name)
    return JSONResponse({"name": function_name, "result": result})


@app.get("/api/months/{month}")
async def month_view(month: str, viewer_id: Optional[str] = None) -> JSONResponse:
    return JSONResponse(await _invoke("calendar_month_view", {"month": month, "viewer_id": viewer_id}))


@app.get("/api/days/{day}")
async def day_items(day: str, month: Optional[str] = None, viewer_id: Optional[str] = None) -> JSONResponse:
    arguments = {"day": day, "month": month, "viewer_id": viewer_id}
    return JSONResponse(await _invoke("calendar_day", arguments))


@app.post("/api/items/{kind}/{item_id}/shift")
async def shift_item(kind: str, item_id: str, request: ShiftRequest) -> JSONResponse:
    arguments = {"kind": kind, "item_id": item_id, **request.model_dump()}
    result = await _invoke("calendar_shift_item", arguments)
    return JSONResponse(result, status_code=200 if result.get("ok") else 409)


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    import asyncio

    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Serving boardcal API on http://%s:%d", host, port)
    asyncio.run(serve(app, config))
