import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import settings
from .db import SessionLocal, init_db
from .errors import AppError, app_error_handler
from .limiter import limiter
from .models import User, UserRole
from .routers import admin_api, auth_api, bookings_api, hotels_api, reviews_api, rooms_api
from .security import hash_password
from .services.media import UPLOAD_DIR

# --- Logging configuration ---
_level = logging.DEBUG if settings.DEBUG else logging.INFO
logging.basicConfig(
    level=_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# Align uvicorn loggers with our level (useful under Docker Compose)
for _name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(_name).setLevel(_level)
logger = logging.getLogger("hotelbook.startup")
logger.info("Starting %s (DEBUG=%s)", settings.APP_NAME, settings.DEBUG)

app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    description=(
        f"{settings.APP_NAME}: hotel catalog, reservations and reviews.\n\n"
        "Session-cookie based auth. All endpoints live under /api/v1."
    ),
)

@app.on_event("startup")
def startup_event():
    """Runs startup tasks: schema creation and the default admin account."""
    logger.info("Running startup tasks...")
    init_db()

    def _ensure_default_admin():
        db = SessionLocal()
        try:
            if db.query(User).filter(User.role.in_([UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value])).first():
                return
            email = settings.ADMIN_EMAIL.lower()
            user = db.query(User).filter(User.email == email).first()
            if user:
                user.role = UserRole.SUPER_ADMIN.value
            else:
                user = User(
                    email=email,
                    hashed_password=hash_password(settings.ADMIN_PASSWORD),
                    first_name="Admin",
                    last_name="User",
                    role=UserRole.SUPER_ADMIN.value,
                )
                db.add(user)
            db.commit()
            logger.info("Default admin user ensured.")
        finally:
            db.close()

    _ensure_default_admin()
    logger.info("Startup tasks complete.")


# Add the limiter to the app state
app.state.limiter = limiter
# Add the exception handler for rate limit exceeded errors
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
# Domain errors become {"success": false, "message": ...} with their status code
app.add_exception_handler(AppError, app_error_handler)

app.include_router(auth_api.router)
app.include_router(hotels_api.router)
app.include_router(rooms_api.router)
app.include_router(bookings_api.router)
app.include_router(reviews_api.router)
app.include_router(admin_api.router)

# Locally stored uploads (when Cloudinary is not configured)
app.mount("/static/uploads", StaticFiles(directory=str(UPLOAD_DIR), check_dir=False), name="uploads")

@app.get("/healthz")
@limiter.exempt
def healthz():
    return {"status": "ok"}
