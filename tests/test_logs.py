import pytest

from newrelic_cli.exceptions import MutationError, NotFoundError, ValidationError
from newrelic_cli.models.requests import LogParsingRuleUpdate
from newrelic_cli.resources import LogResource

RULE = {
    "id": "r1",
    "description": "nginx access",
    "enabled": True,
    "grok": "%{IP:ip}",
    "lucene": "logtype:nginx",
    "nrql": "SELECT * FROM Log WHERE logtype = 'nginx'",
    "updatedAt": "2024-01-15T10:00:00Z",
}


def rules_data(*rules):
    return {"actor": {"account": {"logConfigurations": {"parsingRules": list(rules)}}}}


def test_list_skips_deleted_rules(client, fake_api):
    fake_api.graphql(rules_data(RULE, {"id": "r2", "deleted": True}))

    rules = LogResource(client).list_rules()

    assert [r.id for r in rules] == ["r1"]
    assert rules[0].updated_at == "2024-01-15T10:00:00Z"
    assert fake_api.last.variables == {"accountId": 12345}


def test_get_deleted_rule_is_not_found(client, fake_api):
    fake_api.graphql(rules_data({"id": "r2", "deleted": True}))
    with pytest.raises(NotFoundError, match="log parsing rule not found: r2"):
        LogResource(client).get_rule("r2")


def test_create_sends_full_rule(client, fake_api):
    fake_api.graphql({"logConfigurationsCreateParsingRule": {"rule": RULE, "errors": None}})

    rule = LogResource(client).create_rule("nginx access", "%{IP:ip}", RULE["nrql"])

    assert rule.id == "r1"
    assert fake_api.last.variables == {
        "accountId": 12345,
        "rule": {
            "description": "nginx access",
            "enabled": True,
            "grok": "%{IP:ip}",
            "lucene": "",
            "nrql": RULE["nrql"],
        },
    }


def test_update_merges_fields_onto_current_rule(client, fake_api):
    fake_api.graphql(rules_data(RULE))
    fake_api.graphql({"logConfigurationsUpdateParsingRule": {"rule": dict(RULE, enabled=False)}})

    rule = LogResource(client).update_rule("r1", LogParsingRuleUpdate(enabled=False))

    assert rule.enabled is False
    assert len(fake_api.requests) == 2
    assert fake_api.last.variables == {
        "accountId": 12345,
        "id": "r1",
        "rule": {
            "description": "nginx access",
            "enabled": False,
            "grok": "%{IP:ip}",
            "lucene": "logtype:nginx",
            "nrql": RULE["nrql"],
        },
    }


def test_update_with_no_fields_is_rejected(client, fake_api):
    with pytest.raises(ValidationError, match="no fields to update"):
        LogResource(client).update_rule("r1", LogParsingRuleUpdate())
    assert fake_api.requests == []


def test_update_reports_mutation_error(client, fake_api):
    fake_api.graphql(rules_data(RULE))
    fake_api.graphql({"logConfigurationsUpdateParsingRule": {"errors": [{"message": "bad grok"}]}})
    with pytest.raises(MutationError, match="failed to update rule: bad grok"):
        LogResource(client).update_rule("r1", LogParsingRuleUpdate(grok="%{"))


def test_delete_binds_rule_id(client, fake_api):
    fake_api.graphql({"logConfigurationsDeleteParsingRule": {"errors": []}})
    LogResource(client).delete_rule("r1")
    assert fake_api.last.variables == {"accountId": 12345, "id": "r1"}
