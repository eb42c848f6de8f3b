"""Uvicorn runner for the notification hub.

Serves the HTTP API and WebSocket endpoint; the event bus consumer runs
inside the same process, started by the application lifespan.

Usage:
    python src/server.py                    # API + bus consumer
    python src/server.py --port 9000        # Custom port
    python src/server.py --no-consumer      # API and push only
"""

import argparse
import os

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Notification hub server")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    parser.add_argument(
        "--no-consumer",
        action="store_true",
        help="Do not consume events from the bus",
    )
    args = parser.parse_args()

    if args.no_consumer:
        os.environ["NOTIFICATIONS_CONSUMER_ENABLED"] = "false"

    # One worker: live connections are held in process memory
    uvicorn.run(
        "app:app",
        app_dir=os.path.dirname(os.path.abspath(__file__)),
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
