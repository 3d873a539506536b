"""
BDUI — FastAPI app (pages pilotées par contrats de blocs)
Démarrer : uvicorn bdui.api.main:app --reload --port 3001
"""
import logging, os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from block_contracts import REGISTRY
from block_contracts.router import router as contracts_router

from .routes.admin import router as admin_router
from .routes.display import router as display_router
from .routes.pages import router as pages_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s — %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(title="BDUI — Backend Driven UI", version="1.0.0", docs_url="/docs")

_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(CORSMiddleware, allow_origins=_origins, allow_methods=["*"], allow_headers=["*"])

app.include_router(contracts_router)
app.include_router(pages_router)
app.include_router(display_router)
app.include_router(admin_router)


@app.on_event("startup")
def startup():
    from .. import database
    database.init_db()
    log.info("DB initialisée (SQLite) — %s", database.DB_PATH)
    log.info("Registry : %d types de blocs (%s)", len(REGISTRY), ", ".join(REGISTRY))


@app.get("/health")
def health():
    return {"status": "ok", "service": "bdui", "version": "1.0.0", "block_types": len(REGISTRY)}
