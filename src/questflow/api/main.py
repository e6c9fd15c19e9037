import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from questflow import __version__
from questflow.api.routers.plans import router as plans_router
from questflow.api.routers.queues import router as queues_router
from questflow.core.logging import configure_logging

configure_logging()

app = FastAPI(title="QuestFlow API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(plans_router)
app.include_router(queues_router)

logging.getLogger(__name__).info("QuestFlow API %s ready", __version__)


@app.get("/healthz")
def healthz():
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "questflow.api.main:app", host="localhost", port=8000, reload=True, log_level="debug"
    )
