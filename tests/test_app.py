import math
import pytest
from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture(scope="module")
def client():
    return TestClient(app)

def test_functions(client):
    body = client.get("/functions").json()
    assert {"name": "sqrt", "arity": 1, "doc": "square root"} in body["functions"]
    assert "pi" in {c["name"] for c in body["constants"]}

def test_evaluate(client):
    r = client.post("/evaluate", json={"expr": "pi*r*r", "variables": {"r": 2}})
    assert r.status_code == 200
    assert r.json()["result"] == pytest.approx(12.566370614359172)

def test_evaluate_request_constants(client):
    r = client.post("/evaluate", json={"expr": "k * 2", "constants": {"k": 21}})
    assert r.json()["result"] == 42

@pytest.mark.parametrize("expr,expected", [("1/0", "inf"), ("-1/0", "-inf"), ("0/0", "nan"), ("nope", "nan")])
def test_non_finite_results(client, expr, expected):
    assert client.post("/evaluate", json={"expr": expr}).json()["result"] == expected

def test_parse_failure_is_400(client):
    r = client.post("/evaluate", json={"expr": "2*-3"})
    assert r.status_code == 400
    assert "2*-3" in r.json()["detail"]

def test_too_long_is_413(client):
    r = client.post("/evaluate", json={"expr": "1+" * 3000 + "1"})
    assert r.status_code == 413

def test_parse(client):
    r = client.post("/parse", json={"expr": "sqrt(x) + foo(1, 2) + pi"})
    body = r.json()
    assert body["ok"]
    assert body["names"] == ["pi", "x"]
    assert body["calls"] == {"sqrt": [1], "foo": [2]}
    assert body["unresolved"] == {"names": ["x"], "calls": {"foo": [2]}}

def test_ast(client):
    body = client.post("/ast", json={"expr": "-2*3"}).json()
    assert body["source"] == "((-2.0) * 3.0)"
    assert body["nodes"][-1] == {"id": 3, "type": "Binary", "op": "MUL", "symbol": "*", "left": 1, "right": 2}
    assert body["pretty"].startswith("Binary MUL (*)")

def test_long_chain_within_length_limit(client):
    expr = "+".join(["1"] * 1500)
    r = client.post("/evaluate", json={"expr": expr})
    assert r.status_code == 200
    assert r.json()["result"] == 1500
    r = client.post("/ast", json={"expr": expr})
    assert r.status_code == 200
    assert len(r.json()["nodes"]) == 2999

def test_evaluate_series(client):
    r = client.post("/evaluate_series", json={"expr": "x + y", "columns": {"x": [1, 2], "y": [3, 4]}})
    assert r.json()["values"] == [4.0, 6.0]
    r = client.post("/evaluate_series", json={"expr": "x / y", "columns": {"x": [1, 0], "y": [0, 0]}})
    assert r.json()["values"] == ["inf", "nan"]

def test_evaluate_series_length_mismatch(client):
    r = client.post("/evaluate_series", json={"expr": "x", "columns": {"x": [1, 2], "y": [3]}})
    assert r.status_code == 400
