#!/usr/bin/env python3
"""
Development server runner for the ResumeMatch Scoring API.
Use this for local development and testing.
"""
import os
import sys


def main():
    # Add the project directory to the path
    project_dir = os.path.dirname(os.path.abspath(__file__))
    sys.path.insert(0, project_dir)

    import uvicorn

    from app.config import get_settings

    settings = get_settings()

    print("\nStarting ResumeMatch Scoring API")
    print(f"   Host: {settings.host}")
    print(f"   Port: {settings.port}")
    print(f"   Debug: {settings.debug}")
    print(f"   Gemini: {'configured' if settings.gemini_api_key else 'not configured (AI layers skipped)'}")
    print(f"   Redis: {settings.redis_url or 'not configured'}")
    print(f"\nAPI Documentation: http://localhost:{settings.port}/docs")
    print(f"Health Check: http://localhost:{settings.port}/api/health\n")

    # Run the server
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
