#!/usr/bin/env python3
"""
Medbook Order Service Runner
============================

Run the order service in its different roles.

Usage:
    python run_app.py                    # HTTP API (default)
    python run_app.py --mode api         # HTTP API
    python run_app.py --mode consumer    # Order event consumer
    python run_app.py --mode migrate     # Apply database migrations and exit
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host

The outbox relay runs under Celery:
    celery -A app.core.celery_app worker -Q outbox
    celery -A app.core.celery_app beat
"""

import argparse
import sys

def print_banner(mode):
    """Print application banner"""
    print(f"Medbook Order Service ({mode})")
    print("=" * 50)

def run_api(host, port, reload):
    """Run the FastAPI application"""
    import uvicorn

    print(f"Starting API on {host}:{port}")
    print(f"API Docs: http://{host}:{port}/docs")
    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )

def run_consumer():
    """Run the order event consumer"""
    from app.consumers.worker import run_consumer as consume

    print("Consuming order events")
    consume()

def run_migrate():
    """Apply all pending migrations"""
    from app.core.monitoring import setup_logging
    from app.core.database import run_migrations

    setup_logging()
    run_migrations()
    print("Database is up to date")

def main():
    parser = argparse.ArgumentParser(
        description="Medbook Order Service Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_app.py                      # API on port 8000
  python run_app.py --mode consumer      # Event consumer
  python run_app.py --mode migrate       # Migrate and exit
  python run_app.py --port 8001          # Custom port
        """
    )

    parser.add_argument(
        "--mode",
        choices=["api", "consumer", "migrate"],
        default="api",
        help="Service role (default: api)"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload"
    )

    args = parser.parse_args()

    print_banner(args.mode)

    if args.mode == "api":
        run_api(args.host, args.port, args.reload)
    elif args.mode == "consumer":
        run_consumer()
    elif args.mode == "migrate":
        run_migrate()

    return 0

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nStopped by user")
        sys.exit(0)
