# main.py

from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config.logging_config import configure_logging
from app.config.settings import APP_NAME, APP_VERSION, get_cors_origins, get_data_file
from app.routes import applications

configure_logging()

# ----------------------------------------------------------
# 🚀 Initialize FastAPI App
# ----------------------------------------------------------
app = FastAPI(
    title=APP_NAME,
    description=(
        "Personal job-application tracker: companies, roles, interview stages, "
        "prep questions and notes, kept in a single JSON document."
    ),
    version=APP_VERSION,
)

# ----------------------------------------------------------
# 🔒 CORS Middleware
# ----------------------------------------------------------
# The UI runs on its own dev server; set TRACKER_CORS_ORIGINS to its origin(s)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ----------------------------------------------------------
# 🧩 Routers
# ----------------------------------------------------------
app.include_router(applications.router)
app.include_router(applications.stats_router)


# ----------------------------------------------------------
# ⚠️ Error shape for malformed requests
# ----------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request", "message": details},
    )


# ----------------------------------------------------------
# 🧠 Startup
# ----------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    print("\n" + "=" * 80)
    print(f"🚀 {APP_NAME.upper()} STARTED")
    print(f"🕒 {datetime.utcnow().isoformat()} UTC")
    print(f"📂 Data file: {get_data_file()}")
    print("=" * 80 + "\n")


# ----------------------------------------------------------
# 🩺 Health Check Route
# ----------------------------------------------------------
@app.get("/", tags=["Health"])
def root():
    """Simple health check and app summary."""
    return {
        "ok": True,
        "app_name": APP_NAME,
        "version": APP_VERSION,
        "timestamp": datetime.utcnow().isoformat(),
        "data_file": str(get_data_file()),
    }
