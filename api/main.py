# api/main.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import config
from core.sa.database import db
from api.routes import library, users

logging.basicConfig(level=config.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize database on startup
    db.init_db()
    yield


app = FastAPI(title="Reading Companion", lifespan=lifespan)

# CORS configuration
origins = [
    "http://localhost:5173",        # Local Vite dev server
    "http://localhost:4173",        # Local Vite preview
    "http://127.0.0.1:5173",
    "http://localhost",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users.router)
app.include_router(library.router)


@app.get("/")
async def root():
    return {"message": "Reading Companion API"}
