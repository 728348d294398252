import argparse
import sys

import uvicorn

from report_portal.config import config
from report_portal.logger import define_log_level, logger
from report_portal.services.credentials import hash_password


def parse_args() -> argparse.Namespace:
    settings = config.settings
    parser = argparse.ArgumentParser(
        description="Start the report portal HTTP service."
    )
    parser.add_argument(
        "--host", type=str, default=settings.host, help="Server host."
    )
    parser.add_argument(
        "--port", type=int, default=settings.port, help="Server port."
    )
    parser.add_argument(
        "--hash-password",
        type=str,
        metavar="PASSWORD",
        help="Print a bcrypt hash for ADMIN_PASSWORD and exit.",
    )
    return parser.parse_args()


def start_server(host: str, port: int):
    logger.info(f"Starting report portal on http://{host}:{port}")
    uvicorn.run("report_portal.app:app", host=host, port=port)


def main():
    args = parse_args()

    if args.hash_password is not None:
        print(hash_password(args.hash_password))
        return

    define_log_level(print_level=config.settings.log_level, name="report_portal")
    start_server(args.host, args.port)


if __name__ == "__main__":
    sys.exit(main())
