"""Admin gate.

Provides the require_admin dependency: the shared admin key must be supplied
in the configured header or query parameter and match exactly.
"""

import logging
import secrets

from fastapi import Depends, Request

from config.settings import Settings
from tempt_api.api.dependencies import get_app_settings
from tempt_api.services.errors import Unauthorized

logger = logging.getLogger(__name__)


def require_admin(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Reject the request unless it carries the admin key.

    Raises:
        Unauthorized: If the key is missing, wrong, or no key is configured
    """
    config = settings.admin
    supplied = request.headers.get(config.header_name) or request.query_params.get(config.query_param)

    if not config.key or not supplied:
        logger.warning("Admin request without key: path=%s", request.url.path)
        raise Unauthorized()

    if not secrets.compare_digest(supplied.encode(), config.key.encode()):
        logger.warning("Admin key mismatch: path=%s", request.url.path)
        raise Unauthorized()
