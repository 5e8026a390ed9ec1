import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from db import init_db

# Routers
from routers.health import router as health_router
from routers.home import router as home_router
from routers.questions import router as questions_router
from routers.tracking import router as tracking_router

logger = logging.getLogger("question-bank")
logging.basicConfig(level=logging.INFO)

DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", DEFAULT_ORIGINS).split(",") if o.strip()]


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db()
    logger.info("Database ready")
    yield


app = FastAPI(title="Interview Question Bank", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "authorization"],
)


# Register routers; tracking goes before questions so /questions/myfavorites
# is not captured by /questions/{question_id}
app.include_router(home_router)  # /
app.include_router(tracking_router)  # /questions/toggle*, /questions/my*
app.include_router(questions_router)  # /questions/...
app.include_router(health_router)  # /health/...
