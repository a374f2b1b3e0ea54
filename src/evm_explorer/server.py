from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from loguru import logger

from .exceptions import ExplorerError, ValidationError
from .search import QueryKind, SearchDispatcher, classify
from .session import ExplorerSession
from .theme import THEME_KEY, ThemePreference
from .views import BlockRow, DetailView, ErrorView, TransactionRow, render_error

TEMPLATES_DIR = Path(__file__).parent / "templates"
THEME_COOKIE_MAX_AGE = 60 * 60 * 24 * 365

# HTTP status per error kind; anything raised by the node or the network is a bad gateway
ERROR_STATUS = {
    "NotFoundError": 404,
    "ValidationError": 400,
    "TransportError": 502,
    "RpcError": 502,
    "MalformedResponseError": 502,
}


def status_for(detail: Optional[DetailView]) -> int:
    if isinstance(detail, ErrorView):
        return ERROR_STATUS.get(detail.error, 500)
    return 200


def create_explorer_app(session: ExplorerSession) -> FastAPI:
    """Create the explorer web application.

    Args:
        session: Explorer session shared by every request

    Returns:
        FastAPI: Explorer app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        logger.info("Shutting down explorer, closing RPC client")
        await session.close()

    app = FastAPI(
        title="EVM Explorer",
        description="Block, transaction and address explorer over a public JSON-RPC node",
        lifespan=lifespan,
    )
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    dispatcher = SearchDispatcher(session)

    app.state.session = session
    app.state.dispatcher = dispatcher

    def theme_for(request: Request) -> ThemePreference:
        return ThemePreference(dict(request.cookies))

    def persist_theme(response, theme: ThemePreference):
        response.set_cookie(THEME_KEY, theme.current, max_age=THEME_COOKIE_MAX_AGE, samesite="lax")
        return response

    def render_page(request: Request, template: str, status_code: int = 200, **context) -> HTMLResponse:
        theme = theme_for(request)
        context.update(theme=theme.current, theme_icon=theme.icon)
        response = templates.TemplateResponse(request, template, context, status_code=status_code)
        return persist_theme(response, theme)

    def render_detail(request: Request, detail: DetailView, query: str = "") -> HTMLResponse:
        return render_page(request, "detail.html", status_code=status_for(detail), detail=detail, query=query)

    async def resolve(coro) -> DetailView:
        try:
            return await coro
        except ExplorerError as e:
            logger.warning(f"Detail view failed: {type(e).__name__}: {e.message}")
            return render_error(e)

    @app.exception_handler(ExplorerError)
    async def explorer_error_handler(request: Request, exc: ExplorerError):
        return JSONResponse(exc.to_dict(), status_code=ERROR_STATUS.get(type(exc).__name__, 500))

    # ========================================================================
    # HTML
    # ========================================================================

    @app.get("/", response_class=HTMLResponse)
    async def home(request: Request):
        overview = await session.initialize(theme_for(request))
        return render_page(request, "index.html", overview=overview)

    @app.get("/search", response_class=HTMLResponse)
    async def search(request: Request, q: str = ""):
        detail = await dispatcher.dispatch(q)
        if detail is None:
            return RedirectResponse(url="/", status_code=303)
        return render_detail(request, detail, query=q.strip())

    @app.get("/block/{identifier}", response_class=HTMLResponse)
    async def block_detail(request: Request, identifier: str):
        kind = classify(identifier)
        if kind is QueryKind.BLOCK_NUMBER:
            detail = await resolve(session.show_block_number(identifier))
        elif kind is QueryKind.HASH:
            detail = await resolve(session.show_block(identifier))
        else:
            detail = render_error(ValidationError(f"{identifier!r} is not a block number or block hash"))
        return render_detail(request, detail)

    @app.get("/tx/{transaction_hash}", response_class=HTMLResponse)
    async def transaction_detail(request: Request, transaction_hash: str):
        if classify(transaction_hash) is QueryKind.HASH:
            detail = await resolve(session.show_transaction(transaction_hash))
        else:
            detail = render_error(ValidationError(f"{transaction_hash!r} is not a transaction hash"))
        return render_detail(request, detail)

    @app.get("/address/{address}", response_class=HTMLResponse)
    async def address_detail(request: Request, address: str):
        if classify(address) is QueryKind.ADDRESS:
            detail = await resolve(session.show_address(address))
        else:
            detail = render_error(ValidationError(f"{address!r} is not an address"))
        return render_detail(request, detail)

    @app.post("/theme")
    async def toggle_theme(request: Request):
        theme = theme_for(request)
        new_theme = theme.toggle()
        logger.debug(f"Theme switched to {new_theme}")
        # Only follow same-site referers back: drop scheme and host, keep path and query
        referer = urlparse(request.headers.get("referer", ""))
        back = referer.path or "/"
        if referer.query:
            back = f"{back}?{referer.query}"
        return persist_theme(RedirectResponse(url=back, status_code=303), theme)

    # ========================================================================
    # JSON API
    # ========================================================================

    @app.get("/api/blocks")
    async def api_blocks() -> List[BlockRow]:
        return await session.load_latest_blocks()

    @app.get("/api/transactions")
    async def api_transactions() -> List[TransactionRow]:
        return await session.scan_recent_transactions()

    @app.get("/api/search")
    async def api_search(q: str = ""):
        detail = await dispatcher.dispatch(q)
        if detail is None:
            return {"detail": None}
        return JSONResponse({"detail": detail.model_dump()}, status_code=status_for(detail))

    return app
