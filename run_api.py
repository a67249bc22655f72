"""FastAPI development server launcher.

Usage:
    python run_api.py

The server will start on http://localhost:8000
API docs available at http://localhost:8000/api/docs
"""

import logging

import uvicorn

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    uvicorn.run(
        "aura.interfaces.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Auto-reload on code changes
        log_level="info",
    )
