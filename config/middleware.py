# middleware.py
from fastapi.middleware.cors import CORSMiddleware

from config.settings import CORS_ORIGINS


def add_cors_middleware(app):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
