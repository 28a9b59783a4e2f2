from __future__ import annotations

from fastapi import FastAPI

from ..core import settings
from ..features.session import SessionManager, create_session_router

__all__ = ["app", "create_app", "main"]


def create_app(manager: SessionManager | None = None) -> FastAPI:
    application = FastAPI(title="Scythe Bidder")
    application.state.manager = manager or SessionManager()
    application.include_router(create_session_router(application.state.manager))

    @application.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()


def main(host: str | None = None, port: int | None = None) -> None:  # pragma: no cover - runner
    import uvicorn

    config = settings.current()
    uvicorn.run(
        "scythebidder.web.app:app",
        host=host or config.bind,
        port=port or config.port,
        factory=False,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
