"""Run the service: ``python -m token_quota --port 8000 --log-dir ./logs``."""
import argparse

import uvicorn

from token_quota.common.config import settings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="token_quota", description=settings.app_name)
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.app_port)
    parser.add_argument("--log-dir", default=None, help="also write logs to this directory")
    args = parser.parse_args(argv)

    if args.log_dir:
        settings.log_dir = args.log_dir

    # Imported after settings are final so logging picks up --log-dir
    from token_quota.main import app

    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
