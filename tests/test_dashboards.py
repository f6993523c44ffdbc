import pytest

from newrelic_cli.exceptions import MutationError, NotFoundError, ResponseError, ValidationError
from newrelic_cli.models.requests import DashboardInput
from newrelic_cli.resources import DashboardResource

from .conftest import entity_search

DASHBOARD_ENTITY = {
    "guid": "DASH1",
    "name": "Checkout",
    "description": "Checkout overview",
    "permissions": "PUBLIC_READ_WRITE",
    "pages": [
        {
            "guid": "PAGE1",
            "name": "Overview",
            "widgets": [
                {
                    "id": "w1",
                    "title": "Throughput",
                    "visualization": {"id": "viz.line"},
                    "rawConfiguration": {"nrqlQueries": [{"query": "SELECT count(*) FROM Transaction"}]},
                },
                "junk",
            ],
        },
        None,
    ],
}

DEFINITION = {
    "name": "Checkout",
    "pages": [
        {
            "name": "Overview",
            "widgets": [
                {"title": "Throughput", "visualization": {"id": "viz.line"}, "rawConfiguration": {"a": 1}},
            ],
        }
    ],
}


def test_list_searches_account_dashboards(client, fake_api):
    fake_api.graphql(entity_search({"guid": "DASH1", "name": "Checkout", "accountId": 12345}))

    dashboards = DashboardResource(client).list()

    assert [d.guid for d in dashboards] == ["DASH1"]
    assert dashboards[0].account_id == 12345
    assert fake_api.last.variables == {"query": "type = 'DASHBOARD' AND accountId = 12345"}


def test_get_maps_pages_and_widgets(client, fake_api):
    fake_api.graphql({"actor": {"entity": DASHBOARD_ENTITY}})

    dashboard = DashboardResource(client).get("DASH1")

    assert dashboard.name == "Checkout"
    assert len(dashboard.pages) == 1
    assert dashboard.widget_count == 1
    widget = dashboard.pages[0].widgets[0]
    assert widget.visualization == {"id": "viz.line"}
    assert "nrqlQueries" in widget.configuration
    assert fake_api.last.variables == {"guid": "DASH1"}


def test_get_unknown_dashboard(client, fake_api):
    fake_api.graphql({"actor": {"entity": None}})
    with pytest.raises(NotFoundError, match="dashboard not found: NOPE"):
        DashboardResource(client).get("NOPE")


def test_create_defaults_permissions(client, fake_api):
    fake_api.graphql({"dashboardCreate": {"entityResult": DASHBOARD_ENTITY, "errors": []}})

    dashboard = DashboardResource(client).create(DashboardInput.from_dict(DEFINITION))

    assert dashboard.guid == "DASH1"
    variables = fake_api.last.variables
    assert variables["accountId"] == 12345
    assert variables["dashboard"]["permissions"] == "PUBLIC_READ_WRITE"
    widget = variables["dashboard"]["pages"][0]["widgets"][0]
    assert widget == {"title": "Throughput", "visualization": {"id": "viz.line"}, "rawConfiguration": {"a": 1}}


def test_update_omits_unset_permissions(client, fake_api):
    fake_api.graphql({"dashboardUpdate": {"entityResult": DASHBOARD_ENTITY}})

    DashboardResource(client).update("DASH1", DashboardInput.from_dict(DEFINITION))

    variables = fake_api.last.variables
    assert variables["guid"] == "DASH1"
    assert "permissions" not in variables["dashboard"]


def test_create_reports_first_mutation_error(client, fake_api):
    fake_api.graphql({"dashboardCreate": {"errors": [{"description": "bad widget"}, {"description": "other"}]}})
    with pytest.raises(MutationError, match="failed to create dashboard: bad widget"):
        DashboardResource(client).create(DashboardInput.from_dict(DEFINITION))


def test_create_without_entity_result(client, fake_api):
    fake_api.graphql({"dashboardCreate": {"errors": []}})
    with pytest.raises(ResponseError) as excinfo:
        DashboardResource(client).create(DashboardInput.from_dict(DEFINITION))
    assert excinfo.value.missing == "entityResult"


def test_delete_requires_success_status(client, fake_api):
    fake_api.graphql({"dashboardDelete": {"status": "SUCCESS"}})
    DashboardResource(client).delete("DASH1")

    fake_api.graphql({"dashboardDelete": {"status": "FAILURE", "errors": [{"description": "denied"}]}})
    with pytest.raises(MutationError, match="denied"):
        DashboardResource(client).delete("DASH1")

    fake_api.graphql({"dashboardDelete": {"status": "FAILURE"}})
    with pytest.raises(MutationError, match="status FAILURE"):
        DashboardResource(client).delete("DASH1")


def test_definition_requires_name_and_pages():
    with pytest.raises(ValidationError):
        DashboardInput.from_dict({"name": "", "pages": DEFINITION["pages"]})
    with pytest.raises(ValidationError):
        DashboardInput.from_dict({"name": "x", "pages": []})
    with pytest.raises(ValidationError, match="at least one page is required"):
        DashboardInput.from_dict({"name": "x"})
    with pytest.raises(ValidationError, match="must be a JSON object"):
        DashboardInput.from_dict(["not", "an", "object"])
