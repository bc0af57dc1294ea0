import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from services.user_management.controllers.auth_service import router as auth_router
from services.user_management.controllers.super_admin_service import router as superadmin_router
from services.timetable_management.controllers.timetable_service import router as timetable_router
from shared.config import CORS_ORIGINS, ENVIRONMENT, LOG_LEVEL
from shared.errors import register_exception_handlers

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Shared Timetable Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health")
def health_check():
    return {"status": "Shared Timetable Backend is running ✅", "environment": ENVIRONMENT}


app.include_router(auth_router)
app.include_router(superadmin_router)
app.include_router(timetable_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
