import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quickbill_pos.api import auth, health
from quickbill_pos.api.routes.admin import router as admin_router
from quickbill_pos.api.routes.logs import router as logs_router
from quickbill_pos.api.routes.menu import router as menu_router
from quickbill_pos.api.routes.orders import router as orders_router
from quickbill_pos.api.routes.profile import router as profile_router
from quickbill_pos.config import settings
from quickbill_pos.crud.user import ensure_admin
from quickbill_pos.db.session import AsyncSessionLocal
from quickbill_pos.errors import PosError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="QuickBill POS")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

# Подключаем роуты
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(menu_router)
app.include_router(orders_router)
app.include_router(profile_router)
app.include_router(logs_router)
app.include_router(admin_router)


def _format_validation_errors(errors) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


@app.exception_handler(PosError)
async def pos_error_handler(request: Request, exc: PosError):
    return JSONResponse(status_code=exc.status_code or 500, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # ошибки валидации отдаём как 400, а не 422
    return JSONResponse(status_code=400, content={"detail": _format_validation_errors(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Server Error"})


@app.on_event("startup")
async def on_startup():
    async with AsyncSessionLocal() as session:
        admin = await ensure_admin(session, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
    if admin:
        logger.info("Admin user created with configured default credentials")
    logger.info("Application started")

@app.on_event("shutdown")
async def on_shutdown():
    logger.info("Application stopped")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
