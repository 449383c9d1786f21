#=================================================================
# catalog_console/main_app.py
# FastAPI application entry-point for the catalog console.
#=================================================================

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog_console.admin_api.http import AdminApiError, AdminAuthError
from catalog_console.config import settings
from catalog_console.logging_filters import install_log_filters
from catalog_console.routes.auth_routes import router as auth_router
from catalog_console.routes.catalog_routes import router as catalog_router
from catalog_console.routes.engagement_routes import router as engagement_router
from catalog_console.routes.file_routes import router as file_router
from catalog_console.routes.spu_routes import router as spu_router

# --- FastAPI instance ---
app = FastAPI(
    title="Catalog Console",
    description="Back-office console for brands, categories, properties, SPUs and customer activity.",
)

# --- Logging setup (console) ---
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s | %(message)s"
)
logger = logging.getLogger("uvicorn.error")
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
install_log_filters()

# --- CORS ---
origins = settings.CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    # credentials cannot be combined with a wildcard origin
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------- Include routers ----------------
app.include_router(auth_router)        # /api/auth/*
app.include_router(catalog_router)     # /api/brands, /api/categories, /api/properties, /api/property-values
app.include_router(spu_router)         # /api/spu/*
app.include_router(engagement_router)  # /api/comments, /api/favorites, /api/browse-history
app.include_router(file_router)        # /api/files/*


# --- Root endpoint ---
@app.get("/")
async def home():
    return {"status": "running", "service": "Catalog Console", "adminApi": settings.ADMIN_API_BASE}


# --- Backend errors ---
@app.exception_handler(AdminAuthError)
async def admin_auth_error_handler(request: Request, exc: AdminAuthError):
    logger.info("[ADMIN-API] session expired on %s", request.url.path)
    return JSONResponse(status_code=401, content={"detail": exc.message, "redirect": "/login"})


@app.exception_handler(AdminApiError)
async def admin_api_error_handler(request: Request, exc: AdminApiError):
    return JSONResponse(status_code=502, content={"detail": exc.message})


# --- Global error handler (keeps full stack trace in logs) ---
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": f"Console error: {str(exc)}"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
