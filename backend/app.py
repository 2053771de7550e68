# backend/app.py
import logging, traceback
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core import config
from core.dbutils import ensure_expenses_table, get_conn
from routers import expenses, health

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
log = logging.getLogger("uvicorn.error")

@asynccontextmanager
async def lifespan(_app: FastAPI):
    conn = get_conn()
    try:
        ensure_expenses_table(conn)
    finally:
        conn.close()
    yield

app = FastAPI(title="Expense Tracker API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    log.info("%s %s", request.method, request.url)
    return await call_next(request)

# ---------------- Error handlers ----------------
@app.exception_handler(StarletteHTTPException)
async def http_error(_request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

@app.exception_handler(RequestValidationError)
async def request_validation_error(_request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    if first.get("type") == "json_invalid":
        msg = "Invalid JSON body"
    elif first:
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        msg = f"Invalid {field}: {first.get('msg')}" if field else f"Invalid request: {first.get('msg')}"
    else:
        msg = "Invalid request"
    return JSONResponse(status_code=400, content={"error": msg})

@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url)
    body = {"error": str(exc) or "Internal server error"}
    if config.is_development():
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=body)

# routers
app.include_router(health.router)
app.include_router(expenses.router)

@app.get("/")
def root():
    return {"name": "Expense Tracker API", "ok": True}

# must stay last: anything no router matched
@app.api_route("/{path:path}", methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"], include_in_schema=False)
def not_found(request: Request, path: str):
    url = request.url.path + (f"?{request.url.query}" if request.url.query else "")
    return JSONResponse(status_code=404, content={"error": "Resource not found", "path": url})

def main():
    uvicorn.run("app:app", host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())

if __name__ == "__main__":
    main()
