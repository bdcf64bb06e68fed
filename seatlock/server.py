from __future__ import annotations

import socket

import uvicorn
from loguru import logger

from seatlock.infrastructure.config import settings


def port_is_free(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
        except OSError:
            return False
    return True


def find_free_port(host: str, port: int, retries: int) -> int:
    """
    Return the first free port in [port, port + retries]. Raises RuntimeError if all are taken.
    """
    for candidate in range(port, port + retries + 1):
        if port_is_free(host, candidate):
            return candidate
        logger.warning(f"Port {candidate} is busy, trying {candidate + 1}...")
    raise RuntimeError(f"No free port in range {port}-{port + retries} on {host}")


def main() -> None:
    port = find_free_port(settings.host, settings.port, settings.port_retries)
    logger.info(f"Server running at http://{settings.host}:{port}")
    uvicorn.run("seatlock.main:app", host=settings.host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
