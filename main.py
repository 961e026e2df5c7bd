"""
Main entrypoint for the NBTS blood donation campaign API.

Usage:
    Start the server directly (`python main.py`). The listening port is taken
    from the PORT environment variable and defaults to 3000.
"""
import os
import logging

import uvicorn

from src.api.app import app

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000


def get_port():
    return int(os.getenv("PORT", DEFAULT_PORT))


def main():
    """
    Main function to run the API server.
    """
    port = get_port()
    logger.info(f"NBTS API running on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
    return 0


if __name__ == "__main__":
    exit_code = main()
    print(f"Exiting with code {exit_code}")
