"""
Locohost - entry point
"""
import logging
import sys

from .app import create_app
from .config import Settings


def main():
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    app = create_app(settings=settings)

    print("\n  Locohost running at:\n")
    print(f"  -> http://localhost:{settings.port}\n")

    app.run(host=settings.host, port=settings.port, threaded=True)


if __name__ == '__main__':
    main()
