"""Resolve application identifiers to numeric APM application IDs."""

import logging

from .api_client import NewRelicAPIClient
from .exceptions import AmbiguityError, NotFoundError, ValidationError
from .models.identifiers import extract_app_id_from_guid, is_numeric, looks_like_guid
from .resources.entities import EntityResource

logger = logging.getLogger(__name__)


def quote_nrql_string(value: str) -> str:
    """Escape a value for use inside a single-quoted entity search literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


class AppResolver:
    """Turns a numeric ID, an entity GUID or an application name into an app ID.

    Resolution order:
    1. All-digit strings are returned unchanged, with no request.
    2. Strings that look like a GUID and decode to an APM application GUID
       yield the embedded ID, with no request. Any decode or domain failure
       falls through to step 3.
    3. Anything else is an application name, looked up with exactly one
       entity search. The name must match a single application.
    """

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client
        self.entities = EntityResource(api_client)

    def resolve_app_id(self, identifier: str) -> str:
        """Resolve ``identifier`` to a numeric application ID string.

        Raises:
            NotFoundError: If no APM application has the given name
            AmbiguityError: If several applications share the given name
            ValidationError: If the matching entity's GUID cannot be decoded
        """
        if is_numeric(identifier):
            return identifier

        if looks_like_guid(identifier):
            try:
                return extract_app_id_from_guid(identifier)
            except ValidationError as e:
                logger.debug("Identifier looks like a GUID but is not an APM application", extra={"reason": str(e)})

        return self._resolve_app_name(identifier)

    def _resolve_app_name(self, name: str) -> str:
        query = f"name = '{quote_nrql_string(name)}' AND domain = 'APM' AND type = 'APPLICATION'"
        entities = self.entities.search(query)

        if not entities:
            raise NotFoundError(f"no APM application found with name: {name}", context={"name": name})

        if len(entities) > 1:
            raise AmbiguityError(
                f"multiple applications found with name '{name}', please use --guid or app ID",
                candidates=[entity.guid for entity in entities]
            )

        return extract_app_id_from_guid(entities[0].guid)
