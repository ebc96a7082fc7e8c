import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from vkbot.api.callback import router as callback_router
from vkbot.api.stats import router as stats_router
from vkbot.core.config import settings
from vkbot.infrastructure.db.session import create_tables
from vkbot.wiring.dependencies import get_activity_worker, get_engine


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("user_id", "peer_id", "state", "intent", "command", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables(get_engine())
    worker = get_activity_worker()
    worker.start()
    try:
        yield
    finally:
        worker.stop()


app = FastAPI(title="VK Water Park Bot", version="1.0.0", lifespan=lifespan)

app.include_router(callback_router, tags=["callback"])
app.include_router(stats_router, tags=["stats"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
