"""Input models for NerdGraph mutations."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, validator
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError


DEFAULT_DASHBOARD_PERMISSIONS = "PUBLIC_READ_WRITE"
DASHBOARD_PERMISSIONS = {"PUBLIC_READ_WRITE", "PUBLIC_READ_ONLY", "PRIVATE"}


class DashboardWidgetInput(BaseModel):
    title: str = ""
    visualization: Dict[str, Any] = Field(default_factory=dict)
    layout: Optional[Dict[str, Any]] = None
    raw_configuration: Dict[str, Any] = Field(default_factory=dict, alias="rawConfiguration")

    class Config:
        allow_population_by_field_name = True

    def to_variables(self) -> Dict[str, Any]:
        widget = {
            "title": self.title,
            "visualization": self.visualization,
            "rawConfiguration": self.raw_configuration,
        }
        if self.layout is not None:
            widget["layout"] = self.layout
        return widget


class DashboardPageInput(BaseModel):
    name: str = ""
    widgets: List[DashboardWidgetInput] = Field(default_factory=list)


class DashboardInput(BaseModel):
    """Dashboard definition used by create and update.

    The JSON file format accepted by ``dashboards create --from-file`` maps
    directly onto this model.
    """

    name: str = Field(..., description="Dashboard name")
    description: str = ""
    permissions: str = ""
    pages: List[DashboardPageInput] = Field(default_factory=list)

    @validator("name")
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("dashboard name is required")
        return v

    @validator("permissions")
    def validate_permissions(cls, v: str) -> str:
        if v and v not in DASHBOARD_PERMISSIONS:
            raise ValueError(f"permissions must be one of: {', '.join(sorted(DASHBOARD_PERMISSIONS))}")
        return v

    @validator("pages", always=True)
    def validate_pages(cls, v: List[DashboardPageInput]) -> List[DashboardPageInput]:
        if not v:
            raise ValueError("at least one page is required")
        return v

    @classmethod
    def from_dict(cls, data: Any) -> "DashboardInput":
        """Build input from decoded JSON, converting validation failures.

        Raises:
            ValidationError: If the definition is not a valid dashboard
        """
        if not isinstance(data, dict):
            raise ValidationError("dashboard definition must be a JSON object", field_name="dashboard")
        try:
            return cls.parse_obj(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise ValidationError(f"invalid dashboard definition: {field}: {first['msg']}", field_name=field) from e

    def to_variables(self, for_create: bool) -> Dict[str, Any]:
        """Convert to the ``DashboardInput`` NerdGraph variable.

        Create always sends permissions, defaulting to public read/write.
        Update only sends permissions when given.
        """
        dashboard: Dict[str, Any] = {"name": self.name}
        if self.description:
            dashboard["description"] = self.description
        if for_create:
            dashboard["permissions"] = self.permissions or DEFAULT_DASHBOARD_PERMISSIONS
        elif self.permissions:
            dashboard["permissions"] = self.permissions

        dashboard["pages"] = [
            {
                "name": page.name,
                "widgets": [widget.to_variables() for widget in page.widgets],
            }
            for page in self.pages
        ]
        return dashboard


class LogParsingRuleUpdate(BaseModel):
    """Partial update for a log parsing rule; ``None`` fields are left unchanged."""

    description: Optional[str] = None
    enabled: Optional[bool] = None
    grok: Optional[str] = None
    lucene: Optional[str] = None
    nrql: Optional[str] = None

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in ("description", "enabled", "grok", "lucene", "nrql"))


class ApiAccessKeyUpdate(BaseModel):
    """Partial update for an API key; ``None`` fields are left unchanged."""

    name: Optional[str] = None
    notes: Optional[str] = None

    def is_empty(self) -> bool:
        return self.name is None and self.notes is None
