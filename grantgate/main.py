import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from grantgate.api.errors import register_exception_handlers
from grantgate.api.v1.router import api_router
from grantgate.config import settings


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


configure_logging()

app = FastAPI(title="GrantGate")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")

if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    logging.getLogger(__name__).info(
        f"Starting {settings.APP_NAME} ({settings.STORAGE_BACKEND} storage) "
        f"on {args.host}:{args.port}"
    )
    uvicorn.run("grantgate.main:app", host=args.host, port=args.port, reload=settings.DEBUG)
