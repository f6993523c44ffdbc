"""Credential handling for New Relic API requests."""

import logging
from typing import Dict, Optional

from . import __version__
from .config import NewRelicConfig
from .exceptions import ConfigurationError, ValidationError, ACCOUNT_ID_REQUIRED, API_KEY_REQUIRED
from .models.identifiers import AccountID, APIKey


logger = logging.getLogger(__name__)


class NewRelicAuth:
    """Holds the API key and account ID used for every request.

    New Relic authenticates each call with a static ``Api-Key`` header, so
    there is no session to establish or refresh. Validation happens once, at
    construction, before any request is built.

    Attributes:
        config: New Relic configuration containing credentials
        api_key: Validated User API key
        account_id: Configured account ID, possibly empty
        warning: Advisory message from API key validation, if any
    """

    def __init__(self, config: NewRelicConfig):
        """Initialize and validate credentials.

        Args:
            config: New Relic configuration containing credentials

        Raises:
            ConfigurationError: If no API key is configured
            ValidationError: If the API key is malformed
        """
        self.config = config
        self.api_key = APIKey(config.api_key)
        self.account_id = AccountID(config.account_id)
        self.warning: Optional[str] = None

        self._validate_credentials()

        logger.debug(
            "Initialized New Relic credentials",
            extra={
                "region": self.config.region,
                "api_key": self.api_key.masked(),
                "account_id": str(self.account_id) or None
            }
        )

    def _validate_credentials(self) -> None:
        """Validate the API key; a missing prefix only produces a warning.

        Raises:
            ConfigurationError: If the API key is missing
            ValidationError: If the API key is too short
        """
        if not self.api_key:
            raise ConfigurationError(API_KEY_REQUIRED, config_key="api_key")

        self.warning = self.api_key.validate()
        if self.warning:
            logger.warning(self.warning)

    def get_auth_headers(self) -> Dict[str, str]:
        """Get the headers sent with every API request."""
        return {
            "Api-Key": str(self.api_key),
            "Content-Type": "application/json",
            "User-Agent": f"newrelic-cli/{__version__}",
        }

    def require_account_id(self) -> AccountID:
        """Return the configured account ID.

        Raises:
            ConfigurationError: If no account ID is configured
            ValidationError: If the configured account ID is malformed
        """
        if self.account_id.is_empty:
            raise ConfigurationError(ACCOUNT_ID_REQUIRED, config_key="account_id")
        self.account_id.validate()
        return self.account_id

    def account_id_int(self) -> int:
        """Return the configured account ID as an integer (see ``require_account_id``)."""
        return self.require_account_id().as_int()

    def optional_account_id_int(self) -> int:
        """Return the account ID as an integer, or 0 when unset or invalid."""
        try:
            return self.require_account_id().as_int()
        except (ConfigurationError, ValidationError):
            return 0
