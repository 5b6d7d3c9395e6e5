import argparse
import os

import uvicorn

from collegestack.core.config import settings


def main():
    parser = argparse.ArgumentParser(description="Run the CollegeStack forum API")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind (default: 8000)")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart on code changes (always on when DEBUG is set)"
    )
    parser.add_argument(
        "--no-monitor",
        action="store_true",
        help="Do not start the unanswered-post monitor in this process"
    )
    args = parser.parse_args()

    if args.no_monitor:
        # The env var covers reload workers, which build their own Settings
        os.environ["UNANSWERED_MONITOR_ENABLED"] = "false"
        settings.UNANSWERED_MONITOR_ENABLED = False

    uvicorn.run(
        "collegestack.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload or settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    main()
