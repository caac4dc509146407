import uuid

from fastapi.testclient import TestClient

from evalservice.main import app

client = TestClient(app)

BASE = "/api/v1/evaluation-policies"


def _rule(type_id: uuid.UUID, low: float = 0, high: float = 100) -> dict:
    return {"evaluationTypeId": str(type_id), "minPercentage": low, "maxPercentage": high}


def _create(subject_id: uuid.UUID, *rules: dict):
    return client.post(BASE, json={"subjectId": str(subject_id), "policyRules": list(rules)})


def test_create_and_fetch_policy():
    subject_id = uuid.uuid4()
    type_id = uuid.uuid4()

    res = _create(subject_id, _rule(type_id, 0, 100))
    assert res.status_code == 201
    policy = res.json()
    assert policy["subjectId"] == str(subject_id)
    assert len(policy["policyRules"]) == 1
    assert policy["policyRules"][0]["evaluationTypeId"] == str(type_id)

    by_subject = client.get(f"{BASE}/by-subject/{subject_id}")
    assert by_subject.status_code == 200
    assert by_subject.json()["id"] == policy["id"]

    by_id = client.get(f"{BASE}/{policy['id']}")
    assert by_id.status_code == 200
    assert by_id.json()["subjectId"] == str(subject_id)


def test_duplicate_policy_for_subject_is_rejected():
    subject_id = uuid.uuid4()
    type_id = uuid.uuid4()
    assert _create(subject_id, _rule(type_id, 10, 50)).status_code == 201

    res = _create(subject_id, _rule(type_id, 20, 60))
    assert res.status_code == 400
    assert res.json() == {"success": False, "errorKey": "policyExists"}

    stored = client.get(f"{BASE}/by-subject/{subject_id}").json()
    assert stored["policyRules"][0]["minPercentage"] == 10
    assert stored["policyRules"][0]["maxPercentage"] == 50


def test_rules_keep_submitted_order():
    subject_id = uuid.uuid4()
    type_ids = [uuid.uuid4() for _ in range(3)]
    res = _create(subject_id, *[_rule(t, 10, 40) for t in type_ids])
    assert res.status_code == 201
    assert [r["evaluationTypeId"] for r in res.json()["policyRules"]] == [str(t) for t in type_ids]


def test_missing_policy_is_404():
    res = client.get(f"{BASE}/by-subject/{uuid.uuid4()}")
    assert res.status_code == 404
    assert res.json()["errorKey"] == "notFound"

    assert client.get(f"{BASE}/{uuid.uuid4()}").status_code == 404
    assert client.put(
        f"{BASE}/{uuid.uuid4()}", json={"policyRules": [_rule(uuid.uuid4())]}
    ).status_code == 404
    assert client.delete(f"{BASE}/{uuid.uuid4()}").status_code == 404


def test_update_replaces_rules_wholesale():
    subject_id = uuid.uuid4()
    theory, practice = uuid.uuid4(), uuid.uuid4()
    policy = _create(subject_id, _rule(theory, 40, 80), _rule(practice, 20, 60)).json()

    res = client.put(
        f"{BASE}/{policy['id']}",
        json={"subjectId": str(subject_id), "policyRules": [_rule(theory, 50, 70)]},
    )
    assert res.status_code == 200
    rules = res.json()["policyRules"]
    assert len(rules) == 1
    assert rules[0]["evaluationTypeId"] == str(theory)
    assert rules[0]["minPercentage"] == 50


def test_update_accepts_a_fetched_policy_back():
    subject_id = uuid.uuid4()
    policy = _create(subject_id, _rule(uuid.uuid4(), 0, 100)).json()
    policy["policyRules"][0]["maxPercentage"] = 90

    res = client.put(f"{BASE}/{policy['id']}", json=policy)
    assert res.status_code == 200
    assert res.json()["policyRules"][0]["maxPercentage"] == 90


def test_update_cannot_move_policy_to_another_subject():
    policy = _create(uuid.uuid4(), _rule(uuid.uuid4())).json()
    res = client.put(
        f"{BASE}/{policy['id']}",
        json={"subjectId": str(uuid.uuid4()), "policyRules": [_rule(uuid.uuid4())]},
    )
    assert res.status_code == 400
    assert res.json()["errorKey"] == "badRequest"


def test_delete_policy():
    subject_id = uuid.uuid4()
    policy = _create(subject_id, _rule(uuid.uuid4())).json()

    res = client.delete(f"{BASE}/{policy['id']}")
    assert res.status_code == 200
    assert res.json() == {"success": True}
    assert client.get(f"{BASE}/by-subject/{subject_id}").status_code == 404

    # the subject can get a fresh policy afterwards
    assert _create(subject_id, _rule(uuid.uuid4())).status_code == 201


def test_policy_payload_validation():
    type_id = uuid.uuid4()
    bad_payloads = [
        {"subjectId": str(uuid.uuid4()), "policyRules": []},
        {"subjectId": "not-an-id", "policyRules": [_rule(type_id)]},
        {"subjectId": str(uuid.uuid4()), "policyRules": [_rule(type_id, -1, 50)]},
        {"subjectId": str(uuid.uuid4()), "policyRules": [_rule(type_id, 0, 101)]},
        {"subjectId": str(uuid.uuid4()), "policyRules": [_rule(type_id, 60, 40)]},
        {"subjectId": str(uuid.uuid4()), "policyRules": [_rule(type_id)], "extra": 1},
        {"policyRules": [_rule(type_id)]},
    ]
    for payload in bad_payloads:
        res = client.post(BASE, json=payload)
        assert res.status_code == 400, payload
        body = res.json()
        assert body["success"] is False
        assert body["errorKey"] == "badRequest"
