"""
Anagram server CLI
Run the HTTP server, optionally preloading a dictionary file.
"""

import argparse
import os

import uvicorn

from .config import get_settings


def main(argv=None):
    parser = argparse.ArgumentParser(description="Anagram dictionary server")
    parser.add_argument("--host", help="Interface to bind")
    parser.add_argument("-p", "--port", type=int, help="A port number")
    parser.add_argument("--preload", help="Dictionary file to load at startup")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    args = parser.parse_args(argv)

    # Command line wins over environment and .env
    overrides = {
        "ANAGRAM_HOST": args.host,
        "ANAGRAM_PORT": args.port,
        "ANAGRAM_PRELOAD": args.preload,
        "ANAGRAM_LOG_LEVEL": args.log_level,
    }
    for name, value in overrides.items():
        if value is not None:
            os.environ[name] = str(value)
    get_settings.cache_clear()

    settings = get_settings()
    uvicorn.run(
        "anagram_server.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
