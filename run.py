"""
Run the template builder API with uvicorn.
"""

import uvicorn

from templatekit.core.config import settings


def main():
    """Main entry point."""
    print("🚀 Starting Template Builder...")
    print(f"📊 API: http://{settings.HOST}:{settings.PORT}/docs")

    try:
        uvicorn.run(
            "templatekit.main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=settings.DEBUG,
            log_level="debug" if settings.DEBUG else "info",
        )
    except KeyboardInterrupt:
        print("\n\n🛑 Shutting down...")


if __name__ == "__main__":
    main()
