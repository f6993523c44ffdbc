"""
User management queries.

Users are grouped by authentication domain in NerdGraph. Both operations
flatten ``authenticationDomains -> users`` into one list and tag each user
with the name of the domain it came from.
"""

import logging
from typing import Any, Dict, Iterator, List, Tuple

from ..api_client import NewRelicAPIClient
from ..exceptions import NotFoundError
from ..models.responses import User
from ..navigation import as_list, as_object, as_string, expect_list, expect_path, objects_in

logger = logging.getLogger(__name__)


USERS_QUERY = """
{
  actor {
    organization {
      userManagement {
        authenticationDomains {
          authenticationDomains {
            id
            name
            users {
              users {
                id
                name
                email
                type { displayName }
              }
            }
          }
        }
      }
    }
  }
}
"""

USER_DETAIL_QUERY = """
{
  actor {
    organization {
      userManagement {
        authenticationDomains {
          authenticationDomains {
            name
            users {
              users {
                id
                name
                email
                type { displayName }
                groups { groups { displayName } }
              }
            }
          }
        }
      }
    }
  }
}
"""


def iter_domain_users(data: Dict[str, Any]) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """Yield ``(domain_name, user_node)`` across all authentication domains.

    The path down to the domain list is required. Below it, domains without
    a usable user list contribute nothing.
    """
    container = expect_path(data, "actor", "organization", "userManagement", "authenticationDomains")
    domains = expect_list(container, "authenticationDomains")

    for domain in objects_in(domains):
        domain_name = as_string(domain.get("name"))
        users_node, ok = as_object(domain.get("users"))
        if not ok:
            continue
        users, ok = as_list(users_node.get("users"))
        if not ok:
            continue
        for user in objects_in(users):
            yield domain_name, user


def map_user(node: Dict[str, Any], domain_name: str, with_groups: bool = False) -> User:
    user_type, _ = as_object(node.get("type"))
    groups: List[str] = []
    if with_groups:
        groups_node, _ = as_object(node.get("groups"))
        group_list, _ = as_list(groups_node.get("groups"))
        groups = [as_string(group.get("displayName")) for group in objects_in(group_list)]

    return User(
        id=as_string(node.get("id")),
        name=as_string(node.get("name")),
        email=as_string(node.get("email")),
        type=as_string(user_type.get("displayName")),
        groups=groups,
        authentication_domain=domain_name,
    )


class UserResource:
    """Read access to organization users."""

    def __init__(self, api_client: NewRelicAPIClient):
        self.api_client = api_client

    def list(self) -> List[User]:
        data = self.api_client.nerdgraph_query(USERS_QUERY)
        users = [map_user(node, domain_name) for domain_name, node in iter_domain_users(data)]
        logger.debug("Listed users", extra={"count": len(users)})
        return users

    def get(self, user_id: str) -> User:
        """Find one user by ID, including group names.

        Raises:
            NotFoundError: If no domain holds a user with this ID
        """
        data = self.api_client.nerdgraph_query(USER_DETAIL_QUERY)
        for domain_name, node in iter_domain_users(data):
            if as_string(node.get("id")) == user_id:
                return map_user(node, domain_name, with_groups=True)
        raise NotFoundError(f"user not found: {user_id}")
