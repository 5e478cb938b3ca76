import json

from kafkagate.broker import InMemoryBroker, TransportError
import kafkagate.main as main_mod


class FailingBroker(InMemoryBroker):
    """Broker that is reachable for reads but fails every write."""

    def publish(self, topic, value, key=None, headers=None):
        raise TransportError("broker unreachable")

    def create_topic(self, topic, num_partitions=1, replication_factor=1):
        raise TransportError("broker unreachable")

    def list_topics(self):
        raise TransportError("broker unreachable")

    def read_messages(self, topic):
        raise TransportError("broker unreachable")


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_create_and_list_topics(client, broker):
    r = client.post("/create/orders")
    assert r.status_code == 201
    assert r.text == "Topic created successfully"

    client.post("/create/audit")
    r = client.get("/topics")
    assert r.status_code == 200
    assert r.text == "Topics: audit, orders"


def test_create_existing_topic_conflicts(client):
    assert client.post("/create/orders").status_code == 201
    r = client.post("/create/orders")
    assert r.status_code == 409
    assert r.json()["error"] == "TopicExists"


def test_blank_topic_is_bad_request(client, make_body, user_content):
    r = client.post("/publish/%20", content=make_body("new_user", user_content))
    assert r.status_code == 400
    assert r.json()["error"] == "MissingTopic"

    assert client.post("/create/%20%20").status_code == 400
    assert client.get("/messages/%20").status_code == 400


def test_publish_valid_payment(client, broker, make_body, payment_content):
    r = client.post("/publish/payments", content=make_body("new_payment", payment_content))
    assert r.status_code == 201
    assert r.text == "Message created successfully"

    records = list(broker.read_messages("payments"))
    assert len(records) == 1
    assert records[0].value == b'{"id":"p1","amount":5,"status":"ok"}'
    assert records[0].key is None
    assert broker.headers_for("payments", 0) == [("message-type", b"new_payment")]


def test_publish_validation_failure_lists_fields(client, broker, make_body):
    r = client.post("/publish/users", content=make_body("new_user", {"name": "Bob"}))
    assert r.status_code == 400
    js = r.json()
    assert js["error"] == "ValidationFailed"
    assert [v["field"] for v in js["violations"]] == ["email", "phone"]
    # nothing reaches the broker when validation fails
    assert "users" not in broker.list_topics()


def test_publish_error_kinds(client, make_body):
    cases = [
        (b"{not json", "DecodeError"),
        (make_body("new_order", {}), "UnknownType"),
        (make_body("new_user", ["a", "b"]), "MalformedContent"),
        (make_body("new_payment", {"id": "p", "amount": "x", "status": "s"}), "FieldCoercionError"),
    ]
    for body, kind in cases:
        r = client.post("/publish/t", content=body)
        assert r.status_code == 400, kind
        assert r.json()["error"] == kind


def test_transport_failures_are_internal_errors(app, make_body, user_content):
    from fastapi.testclient import TestClient

    app.dependency_overrides[main_mod.get_broker] = lambda: FailingBroker()
    try:
        client = TestClient(app)
        r = client.post("/publish/users", content=make_body("new_user", user_content))
        assert r.status_code == 500
        assert r.json()["error"] == "TransportError"
        assert client.post("/create/users").status_code == 500
        assert client.get("/topics").status_code == 500
        assert client.get("/messages/users").status_code == 500
    finally:
        app.dependency_overrides.pop(main_mod.get_broker, None)


def test_input_errors_win_over_transport_errors(app, make_body):
    from fastapi.testclient import TestClient

    app.dependency_overrides[main_mod.get_broker] = lambda: FailingBroker()
    try:
        client = TestClient(app)
        r = client.post("/publish/users", content=make_body("new_user", {"name": "Bob"}))
        assert r.status_code == 400
    finally:
        app.dependency_overrides.pop(main_mod.get_broker, None)


def test_stream_messages(client, make_body, user_content, payment_content):
    client.post("/publish/mixed", content=make_body("new_user", user_content))
    client.post("/publish/mixed", content=make_body("new_payment", payment_content))

    r = client.get("/messages/mixed")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    lines = r.text.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("message at offset 0:  = ")
    assert json.loads(lines[0].split(" = ", 1)[1]) == user_content
    assert lines[1] == 'message at offset 1:  = {"id":"p1","amount":5,"status":"ok"}'


def test_stream_unknown_topic_is_empty(client):
    r = client.get("/messages/nothing-here")
    assert r.status_code == 200
    assert r.text == ""


def test_stream_closes_reader_when_abandoned():
    from kafkagate.broker import BrokerRecord

    state = {"closed": False}

    def _reader():
        try:
            for i in range(3):
                yield BrokerRecord(topic="t", partition=0, offset=i, key=None, value=b"v")
        finally:
            state["closed"] = True

    lines = main_mod._stream_lines(_reader())
    assert next(lines) == "message at offset 0:  = v\n"
    # client went away after the first line
    lines.close()
    assert state["closed"] is True


def test_stream_accepts_plain_iterators():
    lines = list(main_mod._stream_lines(iter([])))
    assert lines == []


def test_publish_rejects_non_json_number_literals(client, broker):
    bodies = [
        b'{"type":"new_user","content":{"name":"A","email":"e","phone":"p","extra":Infinity},"trace":NaN}',
        b'{"type":"new_payment","content":{"id":"p1","amount":NaN,"status":"ok"}}',
    ]
    for body in bodies:
        r = client.post("/publish/t", content=body)
        assert r.status_code == 400
        assert r.json()["error"] == "DecodeError"
    assert broker.list_topics() == []
