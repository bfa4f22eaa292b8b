#!/usr/bin/env python3
"""
Startup script for the Crowd-Aware Routing API server.

This script starts the FastAPI server with proper configuration.
"""

import argparse
import os

import uvicorn


def main():
    """Start the FastAPI server."""
    parser = argparse.ArgumentParser(description="Crowd-Aware Routing API Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"],
                        help="Log level")
    parser.add_argument("--cache-path", help="SQLite file for the snapshot cache")

    args = parser.parse_args()

    if args.cache_path:
        os.environ["CROWD_ROUTING_CACHE_PATH"] = args.cache_path

    print("🚀 Starting Crowd-Aware Routing API Server")
    print(f"📍 URL: http://{args.host}:{args.port}")
    print(f"📚 Documentation: http://{args.host}:{args.port}/docs")
    print(f"🔍 Health check: http://{args.host}:{args.port}/health")
    print("-" * 50)

    # Ensure we're in the right directory
    os.chdir(os.path.dirname(os.path.abspath(__file__)))

    # Start the server
    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        access_log=True
    )


if __name__ == "__main__":
    main()
