#!/usr/bin/env python3
"""
Loan Service Entry Point

Opens storage, seeds demo data when enabled and starts the FastAPI server.
Storage that cannot be opened at startup is fatal. The app can also be
served directly with `uvicorn --factory loan_service.api:create_app`.
"""

import sys

import uvicorn

from loan_service.api import create_app
from loan_service.config import get_config
from loan_service.exceptions import StorageError
from loan_service.logging_config import setup_logging
from loan_service.seed import seed_demo_data
from loan_service.system import LoanSystem


def main() -> int:
    config = get_config()
    logger = setup_logging(config.log_level, config.log_format)

    try:
        system = LoanSystem.from_config(config)
        if config.seed_demo_data:
            seed_demo_data(system)
    except StorageError as e:
        logger.critical(f"DB Error: {e.message}")
        return 1

    logger.info(f"Server is running on port {config.api_port}")
    try:
        uvicorn.run(
            create_app(system, config),
            host=config.api_host,
            port=config.api_port,
            log_level=config.log_level.lower()
        )
    finally:
        system.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
