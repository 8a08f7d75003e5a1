"""HTTP surface - FastAPI routes over a PlannerService."""

import logging
from typing import Any

from fastapi import Body, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import __version__
from .core.summary import parse_iso_date
from .errors import NotFoundError, StorageError, ValidationError
from .service import PlannerService

logger = logging.getLogger(__name__)


def create_app(service: PlannerService) -> FastAPI:
    """Build the API application around a single shared service."""
    app = FastAPI(
        title="dayplan API",
        description="Daily tasks with scheduled vs. actual timing, plus habit flags",
        version=__version__,
    )
    app.state.service = service

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(RequestValidationError)
    async def request_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed JSON bodies
        errors = exc.errors()
        detail = errors[0].get("msg", "invalid request") if errors else "invalid request"
        return JSONResponse({"error": f"Invalid request: {detail}"}, status_code=400)

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse({"error": str(exc)}, status_code=404)

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.exception(f"Storage failure on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    # ============== Tasks ==============

    @app.get("/api/tasks")
    def get_all_tasks(date: str | None = Query(None)):
        """All tasks by date, or one date's tasks when ?date= is given."""
        if date:
            return {"tasks": [t.to_dict() for t in service.list_tasks(date)]}
        return {
            "tasksByDate": {
                d: [t.to_dict() for t in tasks] for d, tasks in service.all_tasks().items()
            }
        }

    @app.get("/api/tasks/{date}")
    def get_tasks(date: str):
        return {"tasks": [t.to_dict() for t in service.list_tasks(date)]}

    @app.post("/api/tasks/{date}", status_code=201)
    def create_task(date: str, payload: Any = Body(None)):
        return service.create_task(date, payload).to_dict()

    @app.patch("/api/tasks/{date}")
    def patch_task(date: str, payload: Any = Body(None)):
        return service.patch_task(date, payload).to_dict()

    @app.delete("/api/tasks/{date}")
    def delete_task(date: str, id: str | None = Query(None)):
        return {"ok": service.delete_task(date, id)}

    # ============== Categories ==============

    @app.get("/api/categories/{date}")
    def get_categories(date: str):
        return {"categories": service.get_categories(date).to_dict()}

    @app.patch("/api/categories/{date}")
    def patch_category(date: str, payload: Any = Body(None)):
        date_iso, categories = service.set_category(date, payload)
        return {"date": date_iso, "categories": categories.to_dict()}

    # ============== Summaries ==============

    @app.get("/api/summary")
    def get_summary(start: str = Query(...), end: str = Query(...)):
        days = service.summarize(parse_iso_date(start), parse_iso_date(end))
        return {"days": [d.to_dict() for d in days]}

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    return app
