#!/usr/bin/env python3
"""
Startup script for the Task Manager Backend
This script starts the FastAPI server with proper configuration
"""

import uvicorn

from app.config.settings import AppConfig


def main():
    print("Starting Task Manager Backend Server...")
    print(f"Host: {AppConfig.HOST}")
    print(f"Port: {AppConfig.PORT}")
    print(f"Reload: {AppConfig.RELOAD}")
    print("=" * 50)

    # Start the server
    uvicorn.run(
        "main:app",
        host=AppConfig.HOST,
        port=AppConfig.PORT,
        reload=AppConfig.RELOAD,
        log_level=AppConfig.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
