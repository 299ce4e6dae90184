# main.py

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finpulse.config import allowed_origins, log_level
from finpulse.routers import advisors, clients


# ---------- Boot ----------

logging.getLogger("finpulse").setLevel(log_level())

# FastAPI app (create ONCE)
app = FastAPI(title="FinPulse API")

# CORS: allow both localhost & 127.0.0.1 plus explicit APP_BASE_URL
allow_origins = allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(clients.router)
app.include_router(advisors.router)


# ---------- Health ----------
@app.get("/")
def root():
    return {"ok": True, "service": "finpulse-api", "cors": allow_origins}

@app.get("/health")
def health():
    return {"ok": True}
