"""Response models for New Relic API data."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Record(BaseModel):
    """Base for domain records built from API responses.

    Every field has a zero-value default; nothing is required at parse time.
    """

    class Config:
        frozen = True


class Application(Record):
    """APM application (REST)."""

    id: int = 0
    name: str = ""
    language: str = ""
    health_status: str = ""
    reporting: bool = False
    last_reported_at: str = ""


class Metric(Record):
    """Metric name and the value names available for it."""

    name: str = ""
    values: List[str] = Field(default_factory=list)


class AlertPolicy(Record):
    id: int = 0
    name: str = ""
    incident_preference: str = ""


class Dashboard(Record):
    """Dashboard summary from entity search."""

    guid: str = ""
    name: str = ""
    account_id: int = 0
    description: str = ""


class DashboardWidget(Record):
    id: str = ""
    title: str = ""
    visualization: Dict[str, Any] = Field(default_factory=dict)
    configuration: Dict[str, Any] = Field(default_factory=dict)


class DashboardPage(Record):
    guid: str = ""
    name: str = ""
    widgets: List[DashboardWidget] = Field(default_factory=list)


class DashboardDetail(Record):
    """Dashboard with its pages and widgets."""

    guid: str = ""
    name: str = ""
    description: str = ""
    permissions: str = ""
    pages: List[DashboardPage] = Field(default_factory=list)

    @property
    def widget_count(self) -> int:
        return sum(len(page.widgets) for page in self.pages)


class User(Record):
    id: str = ""
    name: str = ""
    email: str = ""
    type: str = ""
    groups: List[str] = Field(default_factory=list)
    authentication_domain: str = ""


class Entity(Record):
    guid: str = ""
    name: str = ""
    type: str = ""
    entity_type: str = ""
    domain: str = ""
    account_id: int = 0
    tags: Dict[str, str] = Field(default_factory=dict)


class SyntheticMonitor(Record):
    id: str = ""
    name: str = ""
    type: str = ""
    frequency: int = 0
    status: str = ""
    uri: str = ""


class Deployment(Record):
    id: int = 0
    revision: str = ""
    description: str = ""
    user: str = ""
    timestamp: str = ""


class NRQLResult(Record):
    """Rows of an NRQL query in source order.

    Values keep their JSON scalar types; ``number`` is the only coercion.
    """

    results: List[Dict[str, Any]] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.results)

    def column(self, name: str) -> List[Any]:
        """Return the values of one column, ``None`` where a row lacks it."""
        return [row.get(name) for row in self.results]

    def number(self, row: int, column: str) -> Optional[float]:
        """Return ``results[row][column]`` as a float, or None if it is not numeric."""
        if row < 0 or row >= len(self.results):
            return None
        value = self.results[row].get(column)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return float(value)


class LogParsingRule(Record):
    id: str = ""
    description: str = ""
    enabled: bool = False
    grok: str = ""
    lucene: str = ""
    nrql: str = ""
    updated_at: str = ""


class ApiAccessKey(Record):
    """User or ingest API key."""

    id: str = ""
    name: str = ""
    notes: str = ""
    type: str = ""
    key: str = ""
    ingest_type: str = ""


class ConnectionTestResult(BaseModel):
    """Outcome of a credentials check.

    Failures are captured in ``error_message`` rather than raised.
    """

    api_key_valid: bool = False
    account_access: bool = False
    account_id: int = 0
    account_name: str = ""
    user_id: str = ""
    user_email: str = ""
    region: str = ""
    nerdgraph_url: str = ""
    error_message: str = ""

    @property
    def success(self) -> bool:
        return self.api_key_valid and not self.error_message
