"""
API access key operations.

Keys live in two buckets. User keys belong to a user; ingest keys belong to
an account and carry an ingest type (LICENSE or BROWSER). The buckets use
different input shapes in every mutation, and a key lookup must name the
bucket, so ``find`` probes USER before INGEST.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..api_client import NewRelicAPIClient
from ..exceptions import GraphQLError, MutationError, NotFoundError, ResponseError, ValidationError
from ..models.identifiers import is_numeric
from ..models.requests import ApiAccessKeyUpdate
from ..models.responses import ApiAccessKey
from ..navigation import (
    as_int, as_list, as_object, as_string, expect_list, expect_object, expect_path,
    first_error_message, objects_in
)

logger = logging.getLogger(__name__)


KEY_TYPES = ("USER", "INGEST")
INGEST_TYPES = ("LICENSE", "BROWSER")

API_ACCESS_KEY_FIELDS = """
id
name
notes
type
key
... on ApiAccessIngestKey {
  ingestType
}
"""

KEY_SEARCH_QUERY = """
query($query: ApiAccessKeySearchQuery!) {
  actor {
    apiAccess {
      keySearch(query: $query) {
        keys {
          %s
        }
      }
    }
  }
}
""" % API_ACCESS_KEY_FIELDS

KEY_GET_QUERY = """
query($id: ID!, $keyType: ApiAccessKeyType!) {
  actor {
    apiAccess {
      key(id: $id, keyType: $keyType) {
        %s
      }
    }
  }
}
""" % API_ACCESS_KEY_FIELDS

CURRENT_USER_QUERY = "{ actor { user { id } } }"

KEY_CREATE_MUTATION = """
mutation($keys: ApiAccessCreateInput!) {
  apiAccessCreateKeys(keys: $keys) {
    createdKeys {
      %s
    }
    errors {
      message
      type
    }
  }
}
""" % API_ACCESS_KEY_FIELDS

KEY_UPDATE_MUTATION = """
mutation($keys: ApiAccessUpdateInput!) {
  apiAccessUpdateKeys(keys: $keys) {
    updatedKeys {
      %s
    }
    errors {
      message
    }
  }
}
""" % API_ACCESS_KEY_FIELDS

KEY_DELETE_MUTATION = """
mutation($keys: ApiAccessDeleteInput!) {
  apiAccessDeleteKeys(keys: $keys) {
    deletedKeys {
      id
    }
    errors {
      message
    }
  }
}
"""


def validate_key_type(key_type: str) -> str:
    """Normalize a key type to USER or INGEST.

    Raises:
        ValidationError: For any other value
    """
    normalized = (key_type or "").upper()
    if normalized not in KEY_TYPES:
        raise ValidationError(
            f"invalid key type: {key_type} (must be USER or INGEST)",
            field_name="key_type",
            field_value=key_type
        )
    return normalized


def validate_ingest_type(ingest_type: str) -> str:
    normalized = (ingest_type or "").upper()
    if normalized not in INGEST_TYPES:
        raise ValidationError(
            f"invalid ingest type: {ingest_type} (must be LICENSE or BROWSER)",
            field_name="ingest_type",
            field_value=ingest_type
        )
    return normalized


def map_key(node: Any) -> ApiAccessKey:
    key, _ = as_object(node)
    return ApiAccessKey(
        id=as_string(key.get("id")),
        name=as_string(key.get("name")),
        notes=as_string(key.get("notes")),
        type=as_string(key.get("type")),
        key=as_string(key.get("key")),
        ingest_type=as_string(key.get("ingestType")),
    )


class KeyResource:
    """User and ingest API key management."""

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client

    def search(self, key_types: Optional[Sequence[str]] = None, account_id: int = 0) -> List[ApiAccessKey]:
        """Search keys of the given types, optionally scoped to one account.

        Args:
            key_types: Buckets to search; both USER and INGEST when empty
            account_id: Account scope, applied only when positive
        """
        types = [validate_key_type(t) for t in key_types] if key_types else list(KEY_TYPES)
        query: Dict[str, Any] = {"types": types}
        if account_id > 0:
            query["scope"] = {"accountIds": [account_id]}

        data = self.api_client.nerdgraph_query(KEY_SEARCH_QUERY, {"query": query})
        key_search = expect_path(data, "actor", "apiAccess", "keySearch")
        return [map_key(node) for node in objects_in(expect_list(key_search, "keys"))]

    def get(self, key_id: str, key_type: str) -> ApiAccessKey:
        """Get a key from a known bucket.

        Raises:
            ValidationError: If key_type is not USER or INGEST
            NotFoundError: If the bucket holds no key with this ID
        """
        key_type = validate_key_type(key_type)
        data = self.api_client.nerdgraph_query(KEY_GET_QUERY, {"id": key_id, "keyType": key_type})
        api_access = expect_path(data, "actor", "apiAccess")
        key, ok = as_object(api_access.get("key"))
        if not ok:
            raise NotFoundError(f"key not found: {key_id}")
        return map_key(key)

    def find(self, key_id: str) -> ApiAccessKey:
        """Get a key without knowing its bucket: USER first, then INGEST."""
        try:
            return self.get(key_id, "USER")
        except (NotFoundError, GraphQLError) as e:
            logger.debug("Key not found among user keys, trying ingest keys", extra={"key_id": key_id, "reason": str(e)})
        return self.get(key_id, "INGEST")

    def current_user_id(self) -> int:
        data = self.api_client.nerdgraph_query(CURRENT_USER_QUERY)
        user = expect_path(data, "actor", "user")
        value = user.get("id")
        text = as_string(value)
        if is_numeric(text):
            return int(text)
        return as_int(value)

    def create_user_key(self, account_id: int, user_id: int, name: str, notes: str = "") -> ApiAccessKey:
        keys = {"user": [{"accountId": account_id, "userId": user_id, "name": name, "notes": notes}]}
        return self._create(keys)

    def create_ingest_key(self, account_id: int, ingest_type: str, name: str, notes: str = "") -> ApiAccessKey:
        """Create a LICENSE or BROWSER ingest key.

        Raises:
            ValidationError: If ingest_type is not LICENSE or BROWSER
        """
        keys = {
            "ingest": [{
                "accountId": account_id,
                "ingestType": validate_ingest_type(ingest_type),
                "name": name,
                "notes": notes,
            }]
        }
        return self._create(keys)

    def _create(self, keys: Dict[str, Any]) -> ApiAccessKey:
        data = self.api_client.nerdgraph_query(KEY_CREATE_MUTATION, {"keys": keys})
        payload = expect_object(data, "apiAccessCreateKeys")

        message = first_error_message(payload)
        if message is not None:
            raise MutationError(f"failed to create key: {message}", operation="create")

        created, ok = as_list(payload.get("createdKeys"))
        if not ok or not created:
            raise ResponseError("unexpected response format: no created keys returned", missing="createdKeys")

        key = map_key(created[0])
        logger.info("API key created", extra={"key_id": key.id, "key_type": key.type})
        return key

    def update(self, key_id: str, key_type: str, update: ApiAccessKeyUpdate) -> ApiAccessKey:
        """Change a key's name and/or notes; unset fields are left alone.

        Raises:
            ValidationError: If key_type is not USER or INGEST
            MutationError: If the mutation reports an error
        """
        bucket = validate_key_type(key_type).lower()

        fields: Dict[str, Any] = {"keyId": key_id}
        if update.name is not None:
            fields["name"] = update.name
        if update.notes is not None:
            fields["notes"] = update.notes

        data = self.api_client.nerdgraph_query(KEY_UPDATE_MUTATION, {"keys": {bucket: [fields]}})
        payload = expect_object(data, "apiAccessUpdateKeys")

        message = first_error_message(payload)
        if message is not None:
            raise MutationError(f"failed to update key: {message}", operation="update")

        updated, ok = as_list(payload.get("updatedKeys"))
        if not ok or not updated:
            raise ResponseError("unexpected response format: no updated keys returned", missing="updatedKeys")
        return map_key(updated[0])

    def delete(self, user_key_ids: Sequence[str] = (), ingest_key_ids: Sequence[str] = ()) -> List[str]:
        """Delete keys by ID and return the IDs the server reports as deleted.

        Raises:
            ValidationError: If both ID lists are empty
            MutationError: If the mutation reports an error
        """
        keys: Dict[str, List[str]] = {}
        if user_key_ids:
            keys["userKeyIds"] = list(user_key_ids)
        if ingest_key_ids:
            keys["ingestKeyIds"] = list(ingest_key_ids)
        if not keys:
            raise ValidationError("no key IDs provided", field_name="key_ids")

        data = self.api_client.nerdgraph_query(KEY_DELETE_MUTATION, {"keys": keys})
        payload = expect_object(data, "apiAccessDeleteKeys")

        message = first_error_message(payload)
        if message is not None:
            raise MutationError(f"failed to delete keys: {message}", operation="delete")

        deleted, _ = as_list(payload.get("deletedKeys"))
        deleted_ids = [as_string(key.get("id")) for key in objects_in(deleted)]
        logger.info("API keys deleted", extra={"count": len(deleted_ids)})
        return deleted_ids
