import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS, LOG_LEVEL
from routers import upload_router, data_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Maintenance Data Dashboard Backend",
    description="Load maintenance CSV/Excel exports, aggregate them into chart series and drill into the rows behind each value.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(upload_router.router)
app.include_router(data_router.router)


@app.get("/")
async def root():
    return {"message": "Maintenance Data Dashboard API is running"}
