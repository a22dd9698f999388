from pathlib import Path
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

PROJECT_DIR = Path(__file__).resolve().parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from workshop_forms.api.routes import router
from workshop_forms.errors import ConfigurationMissing
from workshop_forms.logging_setup import configure_logging
from workshop_forms.settings import ensure_runtime_dirs, get_settings
from workshop_forms.sinks import build_sink

settings = get_settings()
configure_logging(settings.log_level)
ensure_runtime_dirs()

logger = logging.getLogger("workshop_forms.app")

try:
    build_sink(settings)
except ConfigurationMissing as exc:
    logger.error("%s Submissions will fail until this is fixed.", exc)

app = FastAPI(title="Workshop Forms API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
