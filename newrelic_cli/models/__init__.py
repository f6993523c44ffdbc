"""Data models for the New Relic CLI."""

from .identifiers import (
    EntityGUID,
    AccountID,
    APIKey,
    GUIDParts,
    parse_guid,
    encode_guid,
    extract_app_id_from_guid,
    looks_like_guid,
    is_numeric,
    validate_account_id,
    validate_api_key
)

from .responses import (
    Application,
    Metric,
    AlertPolicy,
    Dashboard,
    DashboardDetail,
    DashboardPage,
    DashboardWidget,
    User,
    Entity,
    SyntheticMonitor,
    Deployment,
    NRQLResult,
    LogParsingRule,
    ApiAccessKey,
    ConnectionTestResult
)

from .requests import (
    DashboardInput,
    DashboardPageInput,
    DashboardWidgetInput,
    LogParsingRuleUpdate,
    ApiAccessKeyUpdate
)

__all__ = [
    # Identifiers
    'EntityGUID',
    'AccountID',
    'APIKey',
    'GUIDParts',
    'parse_guid',
    'encode_guid',
    'extract_app_id_from_guid',
    'looks_like_guid',
    'is_numeric',
    'validate_account_id',
    'validate_api_key',

    # Response models
    'Application',
    'Metric',
    'AlertPolicy',
    'Dashboard',
    'DashboardDetail',
    'DashboardPage',
    'DashboardWidget',
    'User',
    'Entity',
    'SyntheticMonitor',
    'Deployment',
    'NRQLResult',
    'LogParsingRule',
    'ApiAccessKey',
    'ConnectionTestResult',

    # Mutation inputs
    'DashboardInput',
    'DashboardPageInput',
    'DashboardWidgetInput',
    'LogParsingRuleUpdate',
    'ApiAccessKeyUpdate'
]
