from meshpolicy.api.security.authorization_policy import AuthorizationPolicy
from meshpolicy.authz.attributes import RequestAttributes, Workload
from meshpolicy.authz.evaluator import Decision, decide, evaluate


def _policy(name, spec, namespace="foo"):
    return AuthorizationPolicy.model_validate({
        "apiVersion": "security.istio.io/v1beta1",
        "kind": "AuthorizationPolicy",
        "metadata": {"name": name, "namespace": namespace},
        "spec": spec,
    })


DENY_DEV_POST = _policy("deny-dev-post", {
    "action": "DENY",
    "rules": [{
        "from": [{"source": {"namespaces": ["dev"]}}],
        "to": [{"operation": {"methods": ["POST"]}}],
    }],
})


def test_deny_policy_with_empty_rule_denies_everything():
    deny_all = _policy("deny-all", {"action": "DENY", "rules": [{}]})
    allow_all = _policy("allow-all", {"action": "ALLOW", "rules": [{}]})
    for attrs in (RequestAttributes(), RequestAttributes(method="GET", namespace="prod")):
        assert decide([deny_all], attrs) == Decision.DENY
        assert decide([allow_all, deny_all], attrs) == Decision.DENY


def test_no_policies_allows():
    assert decide([], RequestAttributes(method="POST")) == Decision.ALLOW


def test_unselected_policies_are_ignored():
    deny_all = _policy("deny-all", {
        "action": "DENY",
        "selector": {"matchLabels": {"app": "db"}},
        "rules": [{}],
    })
    web = Workload(namespace="foo", labels={"app": "web"})
    db = Workload(namespace="foo", labels={"app": "db", "version": "v1"})
    assert decide([deny_all], RequestAttributes(), workload=web) == Decision.ALLOW
    assert decide([deny_all], RequestAttributes(), workload=db) == Decision.DENY


def test_decide_is_repeatable():
    attrs = RequestAttributes(namespace="dev", method="POST")
    first = decide([DENY_DEV_POST], attrs)
    assert decide([DENY_DEV_POST], attrs) == first == Decision.DENY


def test_deny_dev_post_scenario():
    policies = [DENY_DEV_POST]
    assert decide(policies, RequestAttributes(namespace="dev", method="POST")) == Decision.DENY
    assert decide(policies, RequestAttributes(namespace="dev", method="GET")) == Decision.ALLOW
    assert decide(policies, RequestAttributes(namespace="prod", method="POST")) == Decision.ALLOW


def test_allow_policy_requires_a_match():
    allow = _policy("httpbin", {
        "action": "ALLOW",
        "rules": [{
            "from": [{"source": {"namespaces": ["test"]}}],
            "to": [{"operation": {"methods": ["GET"], "paths": ["/info*"]}}],
        }],
    })
    assert decide([allow], RequestAttributes(namespace="test", method="GET", path="/info/x")) == Decision.ALLOW
    assert decide([allow], RequestAttributes(namespace="test", method="GET", path="/data")) == Decision.DENY
    assert decide([allow], RequestAttributes(namespace="other", method="GET", path="/info")) == Decision.DENY


def test_condition_on_missing_claim_does_not_match():
    allow = _policy("jwt", {
        "rules": [{"when": [{"key": "request.auth.claims[iss]", "values": ["https://accounts.google.com"]}]}],
    })
    assert decide([allow], RequestAttributes()) == Decision.DENY
    claims = {"request.auth.claims[iss]": "https://accounts.google.com"}
    assert decide([allow], RequestAttributes(attributes=claims)) == Decision.ALLOW


def test_allow_policy_without_rules_denies_all():
    allow_nothing = _policy("allow-nothing", {})
    result = evaluate([allow_nothing], RequestAttributes(method="GET"))
    assert result.decision == Decision.DENY
    assert result.reason == "no allow policy matched"


def test_deny_policy_without_rules_matches_nothing():
    deny_nothing = _policy("deny-nothing", {"action": "DENY"})
    assert decide([deny_nothing], RequestAttributes()) == Decision.ALLOW


def test_deny_wins_over_allow():
    allow = _policy("allow-get", {"rules": [{"to": [{"operation": {"methods": ["GET"]}}]}]})
    deny = _policy("deny-admin", {"action": "DENY", "rules": [{"to": [{"operation": {"paths": ["/admin*"]}}]}]})
    assert decide([allow, deny], RequestAttributes(method="GET", path="/admin/users")) == Decision.DENY
    assert decide([allow, deny], RequestAttributes(method="GET", path="/home")) == Decision.ALLOW


def test_namespace_scope_and_root_namespace():
    deny = _policy("deny-all", {"action": "DENY", "rules": [{}]}, namespace="foo")
    mesh_deny = _policy("mesh-deny", {"action": "DENY", "rules": [{}]}, namespace="istio-system")
    bar = Workload(namespace="bar")

    assert decide([deny], RequestAttributes(), workload=bar) == Decision.ALLOW
    assert decide([deny], RequestAttributes(), workload=Workload(namespace="foo")) == Decision.DENY
    assert decide([mesh_deny], RequestAttributes(), workload=bar) == Decision.ALLOW
    assert decide([mesh_deny], RequestAttributes(), workload=bar, root_namespaces={"istio-system"}) == Decision.DENY


def test_evaluate_reports_deciding_policy_and_rule():
    allow = _policy("two-rules", {
        "rules": [
            {"to": [{"operation": {"methods": ["PUT"]}}]},
            {"to": [{"operation": {"methods": ["GET"]}}]},
        ],
    })
    result = evaluate([allow], RequestAttributes(method="GET"))
    assert result.decision == Decision.ALLOW
    assert result.policy == "AuthorizationPolicy/foo/two-rules"
    assert result.rule_index == 1
