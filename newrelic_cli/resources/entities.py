"""
Entity search.

Entity search is also the backbone of dashboard listing and application name
resolution, so the search walk lives in ``search_entity_nodes`` and returns
the raw entity objects for callers that map them differently.
"""

import logging
from typing import Any, Dict, List

from ..api_client import NewRelicAPIClient
from ..models.responses import Entity
from ..navigation import as_int, as_list, as_object, as_string, expect_list, expect_path, objects_in

logger = logging.getLogger(__name__)


ENTITY_SEARCH_QUERY = """
query($query: String!) {
  actor {
    entitySearch(query: $query) {
      results {
        entities {
          guid
          name
          type
          entityType
          domain
          accountId
          tags { key values }
        }
      }
    }
  }
}
"""


def search_entity_nodes(api_client: NewRelicAPIClient, document: str, query: str) -> List[Dict[str, Any]]:
    """Run an entity search document and return its entity objects.

    Raises:
        ResponseError: Naming the first of actor, entitySearch, results or
            entities that is missing
    """
    data = api_client.nerdgraph_query(document, {"query": query})
    results = expect_path(data, "actor", "entitySearch", "results")
    return list(objects_in(expect_list(results, "entities")))


def map_tags(node: Any) -> Dict[str, str]:
    """Flatten ``[{key, values: [...]}]`` into ``{key: "v1,v2"}``."""
    tags: Dict[str, str] = {}
    items, _ = as_list(node)
    for tag in objects_in(items):
        key = as_string(tag.get("key"))
        if not key:
            continue
        values, _ = as_list(tag.get("values"))
        tags[key] = ",".join(as_string(v) for v in values)
    return tags


def map_entity(node: Dict[str, Any]) -> Entity:
    return Entity(
        guid=as_string(node.get("guid")),
        name=as_string(node.get("name")),
        type=as_string(node.get("type")),
        entity_type=as_string(node.get("entityType")),
        domain=as_string(node.get("domain")),
        account_id=as_int(node.get("accountId")),
        tags=map_tags(node.get("tags")),
    )


class EntityResource:
    """Entity search operations."""

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client

    def search(self, query: str) -> List[Entity]:
        """Search entities with an entity search query string.

        Args:
            query: Entity search expression, e.g. ``domain = 'APM'``

        Returns:
            Matching entities; an empty list when nothing matched
        """
        nodes = search_entity_nodes(self.api_client, ENTITY_SEARCH_QUERY, query)
        entities = [map_entity(node) for node in nodes]
        logger.debug("Entity search complete", extra={"query": query, "count": len(entities)})
        return entities
