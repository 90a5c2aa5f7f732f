from __future__ import annotations

import logging
import sys

from azure.core.exceptions import AzureError
from dotenv import load_dotenv

# -------------------------------------------------
# Load env (must be first)
# -------------------------------------------------
load_dotenv()

from app.core.config import Settings  # noqa: E402
from app.core.errors import StartupError  # noqa: E402
from app.core.logging import setup_logging  # noqa: E402
from app.services.cosmos_initializer import CosmosInitializer  # noqa: E402

logger = logging.getLogger(__name__)


# -------------------------------------------------
# Provision database + container outside the web process
# -------------------------------------------------
def main() -> int:
    setup_logging()

    try:
        settings = Settings()
        logging.getLogger().setLevel(settings.log_level.upper())
        service = CosmosInitializer(settings).run()
    except (StartupError, AzureError) as exc:
        logger.error("Provisioning aborted: %s", exc)
        return 1

    try:
        print(f"Database '{service.database_name}' / container '{service.container_name}' ready")
    finally:
        service.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
