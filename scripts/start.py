"""Production startup script for the Gap Score API.

Starts uvicorn with host, port and worker count from the environment and
exits cleanly on SIGTERM/SIGINT.
"""

import os
import signal
import sys


def start_api() -> None:
    """Start the FastAPI application with uvicorn."""
    port = os.getenv("PORT", os.getenv("API_PORT", "8000"))
    workers = os.getenv("API_WORKERS", "1")
    host = os.getenv("API_HOST", "0.0.0.0")

    print(f"Starting Gap Score API on {host}:{port} with {workers} worker(s)...")

    # Replace the current process so signals reach uvicorn directly
    os.execvp(
        "uvicorn",
        [
            "uvicorn",
            "api.main:app",
            "--host",
            host,
            "--port",
            port,
            "--workers",
            workers,
            "--proxy-headers",
            "--forwarded-allow-ips",
            "*",
        ],
    )


def signal_handler(signum: int, _frame: object) -> None:
    """Handle shutdown signals gracefully."""
    print(f"Received signal {signum}, shutting down...")
    sys.exit(0)


def main() -> None:
    """Main entry point."""
    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    if not os.getenv("API_KEY"):
        print("API_KEY is not set; every request will be rejected.")

    start_api()


if __name__ == "__main__":
    main()
