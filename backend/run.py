#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Run from ``backend/`` so that ``app`` and ``.env`` resolve.
"""
import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    print(f"Starting {settings.app_name} at http://localhost:8000 (docs at /docs)")

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
