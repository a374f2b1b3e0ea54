import pytest
from fastapi.testclient import TestClient

from evm_explorer.server import create_explorer_app
from evm_explorer.theme import THEME_KEY

from conftest import SENDER, block_hash, make_receipt, tx_hash


@pytest.fixture
def client(session):
    return TestClient(create_explorer_app(session))


def test_home_renders_lists(client):
    response = client.get("/")

    assert response.status_code == 200
    assert 'data-theme="dark"' in response.text
    assert 'href="/block/100"' in response.text
    assert f'href="/tx/{tx_hash(100, 0)}"' in response.text
    assert response.cookies.get(THEME_KEY) == "dark"

def test_home_reports_list_failure(client, chain):
    chain.rpc_errors["eth_blockNumber"] = "rate limited"

    response = client.get("/")

    assert response.status_code == 200
    assert "rate limited" in response.text

def test_search_block_number(client):
    response = client.get("/search", params={"q": "99"})
    assert response.status_code == 200
    assert "Block #99" in response.text

def test_search_empty_redirects_home(client):
    response = client.get("/search", params={"q": " "}, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/"

def test_search_unrecognized(client, rpc):
    response = client.get("/search", params={"q": "hello"})
    assert response.status_code == 400
    assert "Unrecognized search input" in response.text
    assert rpc.calls == []

def test_block_by_hash_page(client):
    response = client.get(f"/block/{block_hash(97)}")
    assert response.status_code == 200
    assert "Block #97" in response.text

def test_block_not_found(client):
    response = client.get("/block/123456")
    assert response.status_code == 404
    assert "not found" in response.text

def test_block_number_past_int_digit_limit(client, rpc):
    response = client.get("/block/" + "1" * 5000)
    assert response.status_code == 404
    assert "not found" in response.text
    assert "eth_getBlockByNumber" not in rpc.methods()

def test_block_bad_identifier(client):
    assert client.get("/block/latest").status_code == 400

def test_transaction_page(client, chain):
    chain.receipts[tx_hash(100, 0)] = make_receipt(100, 0)

    response = client.get(f"/tx/{tx_hash(100, 0)}")

    assert response.status_code == 200
    assert "Success" in response.text
    assert 'href="/block/100"' in response.text

def test_address_page(client, chain):
    chain.balances[SENDER] = 5 * 10 ** 18
    response = client.get(f"/address/{SENDER}")
    assert response.status_code == 200
    assert "Balance: 5 ETH" in response.text

def test_upstream_error_is_bad_gateway(client, chain):
    chain.rpc_errors["eth_getTransactionByHash"] = "backend unavailable"
    response = client.get(f"/tx/{tx_hash(100, 0)}")
    assert response.status_code == 502
    assert "backend unavailable" in response.text

def test_theme_toggle(client):
    response = client.post(
        "/theme",
        headers={"referer": "http://testserver/block/100"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/block/100"
    assert response.cookies.get(THEME_KEY) == "light"

def test_theme_toggle_keeps_search_query(client):
    response = client.post(
        "/theme",
        headers={"referer": "http://testserver/search?q=99"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/search?q=99"

def test_theme_cookie_is_honoured(client):
    response = client.get("/search", params={"q": "100"}, headers={"cookie": f"{THEME_KEY}=light"})
    assert 'data-theme="light"' in response.text

def test_api_blocks(client):
    response = client.get("/api/blocks")
    assert response.status_code == 200
    assert [row["number"] for row in response.json()] == list(range(100, 88, -1))

def test_api_transactions(client):
    rows = client.get("/api/transactions").json()
    assert len(rows) == 20
    assert rows[0]["hash"] == tx_hash(100, 0)

def test_api_search(client):
    body = client.get("/api/search", params={"q": block_hash(100)}).json()
    assert body["detail"]["kind"] == "block"
    assert body["detail"]["number"] == 100

def test_api_search_not_found(client):
    response = client.get("/api/search", params={"q": "0x" + "ee" * 32})
    assert response.status_code == 404
    assert response.json()["detail"]["error"] == "NotFoundError"

def test_api_error_handler(client, chain):
    chain.rpc_errors["eth_blockNumber"] = "rate limited"
    response = client.get("/api/blocks")
    assert response.status_code == 502
    assert response.json()["message"] == "rate limited"
