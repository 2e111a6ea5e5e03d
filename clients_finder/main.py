import logging

from fastapi import FastAPI
from dotenv import load_dotenv
from fastapi.middleware.cors import CORSMiddleware

from clients_finder.core.config import settings
from clients_finder.core.database import Base, engine
from clients_finder.core.errors import register_exception_handlers
from clients_finder.scheduler import start_scheduler, stop_scheduler
from clients_finder.api import clients, notes, templates, target_types, outreach, uploads

from clients_finder.models import *  # noqa: F401,F403  (register tables on Base)

load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="Clients Finder")

# -------------------------
# CORS
# -------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------
# Errors -> {"success": false, "error": ...}
# -------------------------
register_exception_handlers(app)

# -------------------------
# Include Routers
# -------------------------
app.include_router(clients.router)
app.include_router(notes.router)
app.include_router(templates.router)
app.include_router(target_types.router)
app.include_router(outreach.router)
app.include_router(uploads.router)


# -------------------------
# DB INIT
# -------------------------
Base.metadata.create_all(bind=engine)

# -------------------------
# FastAPI lifecycle
# -------------------------

@app.on_event("startup")
def startup():
    start_scheduler()
    logger.info(f"Clients Finder started ({settings.APP_ENV})")


@app.on_event("shutdown")
def shutdown():
    stop_scheduler()


# -------------------------
# Routes
# -------------------------

@app.get("/")
def root():
    return {"status": "running"}
