from meshpolicy.api.security.authorization_policy import Condition, Operation, Rule, Source
from meshpolicy.authz.attributes import RequestAttributes, RequestAttributesDocument
from meshpolicy.authz.matchers import (
    glob_match,
    ip_match,
    match_condition,
    match_operation,
    match_pair,
    match_rule,
    match_source,
)


def test_glob_prefix_suffix_presence_exact():
    assert glob_match("abc*", "abcd")
    assert not glob_match("abc*", "ab")
    assert glob_match("*abc", "xabc")
    assert not glob_match("*", "")
    assert glob_match("*", "x")
    assert glob_match("abc", "abc")
    assert not glob_match("abc", "abcd")


def test_glob_prefix_takes_precedence_over_suffix():
    # "*a*" is treated as prefix "*a", not as a suffix pattern
    assert glob_match("*a*", "*abc")
    assert not glob_match("*a*", "xa")


def test_match_pair_negative_wins():
    assert not match_pair(["a", "b"], ["a"], "a")
    assert match_pair([], ["a"], "b")
    assert match_pair(["a", "b"], [], "b")
    assert not match_pair(["a"], [], "c")
    assert match_pair([], [], "")


def test_ip_match_single_and_cidr():
    assert ip_match("10.0.0.1", "10.0.0.1")
    assert not ip_match("10.0.0.1", "10.0.0.2")
    assert ip_match("10.0.0.0/8", "10.200.1.7")
    assert not ip_match("10.0.0.0/8", "192.168.1.1")
    assert ip_match("2001:db8::/32", "2001:db8::1")
    assert not ip_match("::/0", "10.0.0.1")
    assert not ip_match("10.0.0.0/8", "")
    assert not ip_match("10.0.0.0/8", "not-an-ip")


def test_source_fields_are_anded():
    src = Source(namespaces=["prod"], principals=["cluster.local/ns/prod/sa/*"])
    ok = RequestAttributes(namespace="prod", principal="cluster.local/ns/prod/sa/api")
    wrong_ns = RequestAttributes(namespace="dev", principal="cluster.local/ns/prod/sa/api")
    assert match_source(src, ok)
    assert not match_source(src, wrong_ns)


def test_empty_and_missing_source_match_everything():
    attrs = RequestAttributes(namespace="anything")
    assert match_source(None, attrs)
    assert match_source(Source(), attrs)


def test_source_ip_blocks_and_exclusions():
    src = Source(ip_blocks=["10.0.0.0/16"], not_ip_blocks=["10.0.5.0/24"])
    assert match_source(src, RequestAttributes(source_ip="10.0.1.1"))
    assert not match_source(src, RequestAttributes(source_ip="10.0.5.9"))
    assert not match_source(src, RequestAttributes(source_ip="172.16.0.1"))


def test_request_principal_negation():
    src = Source(not_request_principals=["*"])
    assert match_source(src, RequestAttributes())
    assert not match_source(src, RequestAttributes(request_principal="issuer/subject"))


def test_operation_port_is_stringified():
    op = Operation(ports=["8080"], methods=["GET", "HEAD"], paths=["/api/*"])
    assert match_operation(op, RequestAttributes(port=8080, method="GET", path="/api/v1"))
    assert not match_operation(op, RequestAttributes(port=9090, method="GET", path="/api/v1"))
    assert not match_operation(op, RequestAttributes(port=8080, method="POST", path="/api/v1"))
    assert not match_operation(op, RequestAttributes(method="GET", path="/api/v1"))


def test_operation_not_hosts():
    op = Operation(not_hosts=["*.internal"])
    assert match_operation(op, RequestAttributes(host="shop.example.com"))
    assert not match_operation(op, RequestAttributes(host="db.internal"))


def test_condition_missing_key_fails_values_passes_not_values():
    attrs = RequestAttributes()
    c = Condition(key="request.auth.claims[iss]", values=["https://accounts.google.com"])
    assert not match_condition(c, attrs)
    c = Condition(key="request.auth.claims[iss]", not_values=["https://evil.example"])
    assert match_condition(c, attrs)


def test_condition_multi_valued_attribute():
    attrs = RequestAttributes(attributes={"request.auth.claims[groups]": ["dev", "admin"]})
    assert match_condition(Condition(key="request.auth.claims[groups]", values=["admin"]), attrs)
    assert not match_condition(Condition(key="request.auth.claims[groups]", not_values=["dev"]), attrs)
    assert match_condition(Condition(key="request.auth.claims[groups]", values=["ad*"]), attrs)


def test_condition_headers_are_case_insensitive():
    attrs = RequestAttributes(headers={"X-Tenant": "acme"})
    assert match_condition(Condition(key="request.headers[x-tenant]", values=["acme"]), attrs)


def test_condition_ip_keys_use_cidr():
    attrs = RequestAttributes(source_ip="192.168.3.4")
    assert match_condition(Condition(key="source.ip", values=["192.168.0.0/16"]), attrs)
    assert not match_condition(Condition(key="source.ip", not_values=["192.168.3.4"]), attrs)


def test_empty_rule_matches_everything():
    assert match_rule(Rule(), RequestAttributes())
    assert match_rule(Rule(), RequestAttributes(method="DELETE", namespace="x"))


def test_rule_from_entries_are_ored_and_when_is_anded():
    rule = Rule.model_validate({
        "from": [
            {"source": {"principals": ["cluster.local/ns/default/sa/sleep"]}},
            {"source": {"namespaces": ["test"]}},
        ],
        "when": [
            {"key": "request.auth.claims[iss]", "values": ["https://accounts.google.com"]},
            {"key": "request.auth.claims[aud]", "values": ["shop"]},
        ],
    })
    claims = {
        "request.auth.claims[iss]": "https://accounts.google.com",
        "request.auth.claims[aud]": ["shop", "other"],
    }
    assert match_rule(rule, RequestAttributes(namespace="test", attributes=claims))
    assert match_rule(rule, RequestAttributes(principal="cluster.local/ns/default/sa/sleep", attributes=claims))
    assert not match_rule(rule, RequestAttributes(namespace="prod", attributes=claims))

    only_iss = {"request.auth.claims[iss]": "https://accounts.google.com"}
    assert not match_rule(rule, RequestAttributes(namespace="test", attributes=only_iss))


def test_request_document_accepts_numeric_and_boolean_claims():
    doc = RequestAttributesDocument.model_validate({
        "attributes": {
            "request.auth.claims[exp]": 1700000000,
            "request.auth.claims[email_verified]": True,
            "request.auth.claims[groups]": ["admins", 42],
        },
        "headers": {"x-retry": 3},
        "workloadLabels": {"version": 1},
    })
    attrs = doc.to_attributes()

    assert attrs.values_for("request.auth.claims[exp]") == ["1700000000"]
    assert attrs.values_for("request.auth.claims[groups]") == ["admins", "42"]
    assert attrs.values_for("request.headers[x-retry]") == ["3"]
    assert doc.to_workload().labels == {"version": "1"}
    assert match_condition(
        Condition(key="request.auth.claims[email_verified]", values=["true"]), attrs
    )
