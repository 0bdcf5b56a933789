"""
Weekly Availability MCP Server.

FastMCP server exposing the availability engine.
Supports both stdio (local) and HTTP transport modes.

Tools:
- availability: expand weekly rules, subtract busy time, filter, group by date
"""

from fastmcp import FastMCP

from weekly_availability import __version__
from weekly_availability.tools import availability


# Create server
mcp = FastMCP(
    name="weekly-availability",
    instructions="""Free time from a recurring weekly schedule.

WEEKLY RULES are local wall-clock windows in the given timezone:
  {"weekday": "MON", "start_time": "09:00", "end_time": "17:00"}
  weekday: SUN, MON, TUE, WED, THU, FRI, SAT. Times: HH:mm (00:00-23:59).

INTERVALS / BUSY blocks: {"start": ISO, "end": ISO}

TOOL:
- availability
  Actions: expand, subtract, filter, free_slots (default), by_date, month
  Output intervals are not merged: adjacent free pieces stay separate.

TIME FORMAT: '2024-12-15T10:00:00' (naive, uses timezone), '2024-12-15T10:00:00Z', or '2024-12-15'
TIMEZONE: IANA format, e.g. 'America/New_York'"""
)

mcp.tool()(availability)


def create_http_app():
    """
    Create FastAPI app for HTTP transport mode.

    Includes:
    - API key authentication middleware (when api_key is set)
    - Health check endpoint
    - AvailabilityError -> 400 JSON
    - MCP endpoints under /mcp
    """
    from fastapi import FastAPI, Request
    from fastapi.responses import JSONResponse

    from weekly_availability.core.errors import AvailabilityError
    from weekly_availability.settings import settings

    # Get MCP app first to access its lifespan
    mcp_app = mcp.http_app()

    app = FastAPI(
        title="Weekly Availability MCP",
        description="MCP server for recurring weekly availability",
        version=__version__,
        lifespan=mcp_app.lifespan,
    )

    @app.exception_handler(AvailabilityError)
    async def availability_error_handler(request: Request, exc: AvailabilityError):
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.middleware("http")
    async def check_auth(request: Request, call_next):
        if request.url.path == "/health" or not settings.api_key:
            return await call_next(request)

        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer ") and auth_header[7:] == settings.api_key:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key == settings.api_key:
            return await call_next(request)

        return JSONResponse(
            {"error": "Unauthorized", "message": "Invalid or missing authentication"},
            status_code=401
        )

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "transport": "http", "service": "weekly-availability-mcp"}

    app.mount("/mcp", mcp_app)

    return app


def serve():
    """Run MCP server with configured transport."""
    from weekly_availability.settings import settings

    if settings.is_http_mode():
        import uvicorn

        app = create_http_app()
        uvicorn.run(
            app,
            host=settings.http_host,
            port=settings.http_port,
            log_level=settings.log_level.lower()
        )
    else:
        mcp.run()


if __name__ == "__main__":
    serve()
