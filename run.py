#!/usr/bin/env python
"""
Entry point for the Ember focus session service.
Starts the FastAPI server with uvicorn.
"""

import uvicorn

from ember.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "ember.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.ENVIRONMENT == "dev",
        log_level=settings.LOG_LEVEL.lower(),
    )
