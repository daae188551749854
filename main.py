from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

import config
from immigration.routes import router as assessment_router, draws_router

logging.basicConfig(level=getattr(logging, config.LOG_LEVEL, logging.INFO))
logging.info("🚀 App starting")

app = FastAPI(title="Immigration Assessment API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assessment_router)
app.include_router(draws_router)


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok"}
