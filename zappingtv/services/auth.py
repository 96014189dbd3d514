"""Device activation flow."""

import logging
from typing import Callable

from .api_client import ZappingAPIClient
from .credentials import TokenStore

logger = logging.getLogger(__name__)


class DeviceActivator:
    """
    Obtains the device token, activating the device when needed.

    Activation is a three step exchange: request a code, let the user
    enter it on the activation page, then confirm the code is linked and
    receive the token. The token is persisted for later runs.
    """

    def __init__(self, client: ZappingAPIClient, store: TokenStore):
        self.client = client
        self.store = store

    async def authenticate(self, wait_for_user: Callable[[str], None]) -> str:
        """
        Return the saved token or activate the device.

        Args:
            wait_for_user: Called with the activation code; returns once the
                user says the code has been entered

        Raises:
            ZappingAPIError: Any upstream failure, including ActivationError
        """
        saved = self.store.load()
        if saved:
            logger.info("Using saved token")
            return saved

        logger.info("No saved token found, starting activation")

        code = await self.client.get_activation_code()
        logger.info(f"Step 1 completed: code {code} obtained")

        wait_for_user(code)
        logger.info("Step 2 completed: user confirmed activation")

        token = await self.client.check_code_linked(code)
        logger.info("Step 3 completed: code linked")

        self.store.save(token)
        return token
