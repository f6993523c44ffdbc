"""Per-resource operations over the New Relic APIs."""

from .alerts import AlertResource
from .applications import ApplicationResource
from .connection import ConnectionResource
from .dashboards import DashboardResource
from .deployments import DeploymentResource
from .entities import EntityResource
from .keys import KeyResource
from .logs import LogResource
from .nrql import NRQLResource
from .synthetics import SyntheticsResource
from .users import UserResource

__all__ = [
    "AlertResource",
    "ApplicationResource",
    "ConnectionResource",
    "DashboardResource",
    "DeploymentResource",
    "EntityResource",
    "KeyResource",
    "LogResource",
    "NRQLResource",
    "SyntheticsResource",
    "UserResource"
]
