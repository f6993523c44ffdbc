import io
import json

import pytest

from newrelic_cli.error_handler import EXIT_AUTH, EXIT_CONFIG, EXIT_SUCCESS
from newrelic_cli.main import run

from .conftest import TEST_API_KEY, entity_search


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("NEWRELIC_API_KEY", TEST_API_KEY)
    monkeypatch.setenv("NEWRELIC_ACCOUNT_ID", "12345")


class CLI:
    def __init__(self, fake_api):
        self.fake_api = fake_api
        self.out = io.StringIO()
        self.err = io.StringIO()

    def __call__(self, *argv):
        self.out = io.StringIO()
        self.err = io.StringIO()
        return run(list(argv), transport=self.fake_api.transport, out=self.out, err=self.err)

    def json(self):
        return json.loads(self.out.getvalue())


@pytest.fixture
def cli(fake_api):
    return CLI(fake_api)


def test_version_exits_cleanly(capsys):
    with pytest.raises(SystemExit) as excinfo:
        run(["--version"])
    assert excinfo.value.code == 0
    assert "nrq" in capsys.readouterr().out


def test_usage_errors_exit_2(cli):
    with pytest.raises(SystemExit) as excinfo:
        cli("apps")
    assert excinfo.value.code == 2


def test_missing_api_key_is_config_error(cli):
    assert cli("apps", "list") == EXIT_CONFIG
    assert "API key required" in cli.err.getvalue()


def test_apps_list_json(cli, fake_api, credentials):
    fake_api.queue({"applications": [{"id": 1, "name": "checkout"}, {"id": 2, "name": "billing"}]})

    assert cli("-o", "json", "apps", "list", "--limit", "1") == EXIT_SUCCESS
    assert [app["name"] for app in cli.json()] == ["checkout"]


def test_apps_list_empty_table(cli, fake_api, credentials):
    fake_api.queue({"applications": []})
    assert cli("apps", "list") == EXIT_SUCCESS
    assert cli.out.getvalue() == "No applications found\n"


def test_apps_get_resolves_name(cli, fake_api, credentials, app_guid):
    fake_api.graphql(entity_search({"guid": app_guid}))
    fake_api.queue({"application": {"id": 890123, "name": "checkout", "language": "python"}})

    assert cli("-o", "plain", "apps", "get", "checkout") == EXIT_SUCCESS
    assert fake_api.last.url.endswith("/applications/890123.json")
    assert cli.out.getvalue().startswith("890123\tcheckout\tpython")


def test_unauthorized_exit_code(cli, fake_api, credentials):
    fake_api.queue(b"Unauthorized", status_code=401)
    assert cli("apps", "list") == EXIT_AUTH
    assert "HTTP 401" in cli.err.getvalue()


def test_deployments_require_an_application(cli, credentials):
    assert cli("deployments", "list") == EXIT_CONFIG
    assert "application must be specified via positional argument, --name, or --guid" in cli.err.getvalue()


def test_deployments_create_with_guid(cli, fake_api, credentials, app_guid):
    fake_api.queue({"deployment": {"id": 9, "revision": "v1.2.0", "user": "ci"}})

    code = cli("-o", "json", "deployments", "create", "--guid", app_guid, "-r", "v1.2.0", "-u", "ci")

    assert code == EXIT_SUCCESS
    assert fake_api.last.url.endswith("/applications/890123/deployments.json")
    assert fake_api.last.json == {"deployment": {"revision": "v1.2.0", "user": "ci"}}
    assert cli.json()["id"] == 9
    assert "Deployment 9 created" in cli.err.getvalue()


def test_deployments_list_filters_by_time(cli, fake_api, credentials):
    fake_api.queue({"deployments": [
        {"id": 1, "revision": "old", "timestamp": "2023-06-01T00:00:00Z"},
        {"id": 2, "revision": "new", "timestamp": "2024-02-01T00:00:00Z"},
        {"id": 3, "revision": "odd", "timestamp": "sometime"},
    ]})

    assert cli("-o", "json", "deployments", "list", "7", "--since", "2024-01-01") == EXIT_SUCCESS
    assert [d["revision"] for d in cli.json()] == ["new", "odd"]


def test_deployments_search_formats_millisecond_timestamps(cli, fake_api, credentials):
    fake_api.graphql({"actor": {"account": {"nrql": {"results": [
        {"timestamp": 1704067200000, "appName": "checkout", "revision": "v1", "user": "ci"},
    ]}}}})

    assert cli("-o", "plain", "deployments", "search", "appName = 'checkout'") == EXIT_SUCCESS
    assert cli.out.getvalue().startswith("2024-01-01T00:00:00Z\tcheckout\tv1")
    assert fake_api.last.variables["nrql"].endswith("LIMIT 100")


def test_nrql_query_always_prints_json(cli, fake_api, credentials):
    fake_api.graphql({"actor": {"account": {"nrql": {"results": [{"count": 3}]}}}})

    assert cli("nrql", "query", "SELECT count(*) FROM Transaction", "--since", "2024-01-01") == EXIT_SUCCESS
    assert cli.json() == [{"count": 3}]
    assert fake_api.last.variables["nrql"] == "SELECT count(*) FROM Transaction SINCE 1704067200"


def test_nerdgraph_query_passes_variables(cli, fake_api, credentials):
    fake_api.graphql({"actor": {"user": {"id": 1}}})

    code = cli("nerdgraph", "query", "query($x: Int) { actor { user { id } } }", "--variables", '{"x": 1}')

    assert code == EXIT_SUCCESS
    assert fake_api.last.variables == {"x": 1}
    assert cli.json() == {"actor": {"user": {"id": 1}}}


def test_invalid_time_is_config_error(cli, credentials):
    assert cli("nrql", "query", "SELECT 1", "--since", "whenever") == EXIT_CONFIG
    assert "unable to parse time: whenever" in cli.err.getvalue()


def test_dashboard_delete_can_be_declined(cli, fake_api, credentials, monkeypatch):
    monkeypatch.setattr("newrelic_cli.view.Prompt.ask", lambda *args, **kwargs: "n")

    assert cli("dashboards", "delete", "DASH1") == EXIT_SUCCESS
    assert fake_api.requests == []
    assert "Operation canceled" in cli.err.getvalue()


def test_dashboard_delete_with_force(cli, fake_api, credentials):
    fake_api.graphql({"dashboardDelete": {"status": "SUCCESS"}})
    assert cli("dashboards", "delete", "DASH1", "--force") == EXIT_SUCCESS
    assert "Dashboard DASH1 deleted" in cli.err.getvalue()


def test_dashboard_create_from_file(cli, fake_api, credentials, tmp_path):
    definition = tmp_path / "dashboard.json"
    definition.write_text(json.dumps({"name": "Checkout", "pages": [{"name": "Overview", "widgets": []}]}))
    fake_api.graphql({"dashboardCreate": {"entityResult": {"guid": "DASH1", "name": "Checkout", "pages": []}}})

    assert cli("-o", "json", "dashboards", "create", "-f", str(definition)) == EXIT_SUCCESS
    assert cli.json()["guid"] == "DASH1"
    assert fake_api.last.variables["dashboard"]["name"] == "Checkout"


def test_keys_create_ingest_requires_ingest_type(cli, fake_api, credentials):
    assert cli("keys", "create", "--type", "ingest", "--name", "agent") == EXIT_CONFIG
    assert "--ingest-type is required for ingest keys: license or browser" in cli.err.getvalue()
    assert fake_api.requests == []


def test_keys_create_rejects_unknown_type(cli, credentials):
    assert cli("keys", "create", "--type", "admin", "--name", "x") == EXIT_CONFIG
    assert 'invalid key type "admin": must be user or ingest' in cli.err.getvalue()


def test_keys_create_user_key_defaults_to_current_user(cli, fake_api, credentials):
    fake_api.graphql({"actor": {"user": {"id": "1001"}}})
    fake_api.graphql({"apiAccessCreateKeys": {"createdKeys": [{"id": "K1", "type": "USER", "name": "ci"}]}})

    assert cli("-o", "json", "keys", "create", "--type", "user", "--name", "ci") == EXIT_SUCCESS
    assert fake_api.last.variables["keys"]["user"][0]["userId"] == 1001
    assert fake_api.last.variables["keys"]["user"][0]["accountId"] == 12345


def test_keys_delete_detects_bucket(cli, fake_api, credentials):
    fake_api.graphql({"actor": {"apiAccess": {"key": None}}})
    fake_api.graphql({"actor": {"apiAccess": {"key": {"id": "K2", "type": "INGEST"}}}})
    fake_api.graphql({"apiAccessDeleteKeys": {"deletedKeys": [{"id": "K2"}]}})

    assert cli("keys", "delete", "K2", "--force") == EXIT_SUCCESS
    assert fake_api.last.variables == {"keys": {"ingestKeyIds": ["K2"]}}
    assert "API key K2 deleted" in cli.err.getvalue()


def test_logs_rules_update_enabled_flags_are_exclusive(cli, credentials):
    with pytest.raises(SystemExit) as excinfo:
        cli("logs", "rules", "update", "r1", "--enabled", "--disabled")
    assert excinfo.value.code == 2


def test_logs_rules_update_disable(cli, fake_api, credentials):
    rule = {"id": "r1", "description": "d", "enabled": True, "grok": "g", "lucene": "", "nrql": "n"}
    fake_api.graphql({"actor": {"account": {"logConfigurations": {"parsingRules": [rule]}}}})
    fake_api.graphql({"logConfigurationsUpdateParsingRule": {"rule": dict(rule, enabled=False)}})

    assert cli("-o", "json", "logs", "rules", "update", "r1", "--disabled") == EXIT_SUCCESS
    assert fake_api.last.variables["rule"]["enabled"] is False
    assert cli.json()["enabled"] is False


def test_config_set_and_show(cli, isolated_env):
    assert cli("config", "set-api-key", TEST_API_KEY) == EXIT_SUCCESS
    assert cli("config", "set-account-id", "12345") == EXIT_SUCCESS
    assert cli("config", "set-region", "eu") == EXIT_SUCCESS

    stored = json.loads(isolated_env.read_text())
    assert stored == {"api_key": TEST_API_KEY, "account_id": "12345", "region": "EU"}

    assert cli("-o", "json", "config", "show") == EXIT_SUCCESS
    shown = cli.json()
    assert shown["api_key"] == "NRAK-xxx..."
    assert shown["api_key_source"] == "config file"
    assert shown["region"] == "EU"


def test_config_set_account_id_validates(cli, isolated_env):
    assert cli("config", "set-account-id", "0") == EXIT_CONFIG
    assert not isolated_env.exists()


def test_config_delete_api_key(cli, isolated_env):
    isolated_env.write_text(json.dumps({"api_key": TEST_API_KEY, "region": "US"}))
    assert cli("config", "delete-api-key", "--force") == EXIT_SUCCESS
    assert json.loads(isolated_env.read_text()) == {"region": "US"}


def test_config_test_reports_failure(cli, fake_api, credentials):
    fake_api.queue(b"Unauthorized", status_code=401)
    assert cli("config", "test") == 1
    assert "API key validation failed" in cli.err.getvalue()
