#!/usr/bin/env python3
"""
Simple server launcher
"""
import uvicorn
from possessao.utils.config import settings

if __name__ == "__main__":
    print("="*70)
    print(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    print("="*70)
    if not settings.overlay_path.is_dir():
        print(f"\n! Overlay directory not found: {settings.overlay_path}")
        print("  Results will use the procedural horror tone.")
        print("  Run scripts/generate_overlays.py to create placeholder art.")
    print(f"\n* Remote background removal: {'on' if settings.remove_bg_available else 'off (local silhouette)'}")
    print(f"* Port: {settings.PORT}")
    print(f"* Configuration: .env")
    print("\nStarting server...\n")

    uvicorn.run(
        "possessao.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower()
    )
