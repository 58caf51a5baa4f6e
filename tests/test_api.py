"""End-to-end tests of the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from guessgame.config import Settings
from guessgame.main import app
from guessgame.models.state import StateStore
from guessgame.services import runtime
from guessgame.services.game_service import GuessGame
from guessgame.services.player_service import HiderSession, ScoreBook
from guessgame.services.proof_service import get_proving_backend

SALT = 123456789


@pytest.fixture
def client(prover, round_logger):
    runtime.install(
        GuessGame(store=StateStore(), prover=prover, round_logger=round_logger),
        ScoreBook(),
        round_logger,
    )
    return TestClient(app)


@pytest.fixture
def alice_auth(client):
    resp = client.post("/players/token", json={"identity": "alice"})
    assert resp.status_code == 200
    body = resp.json()
    return {"Authorization": f"Bearer {body['access_token']}"}, body["player_id"]


def hide(client, value=9, salt=SALT):
    return client.post("/game/hide", json={"value": value, "salt": str(salt)})


def guess_and_check(client, headers, hider, number):
    resp = client.post("/game/guess", json={"number": number}, headers=headers)
    assert resp.status_code == 200, resp.text
    resp = client.post("/game/check", json=hider.prove_clue(number).to_dict())
    assert resp.status_code == 200, resp.text
    return resp.json()["clue"]


def witness_body(client, player_id):
    entry = client.get(f"/ledger/{player_id}").json()
    return entry["score"], {"key": entry["witness_key"], "siblings": entry["witness_siblings"]}


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestGameFlow:
    """Test a full round over HTTP."""

    def test_full_round(self, client, prover, alice_auth):
        """Test hide, three checked guesses, settle and history."""
        headers, player_id = alice_auth
        hider = HiderSession(9, prover, salt=SALT)

        resp = hide(client)
        assert resp.status_code == 200
        assert resp.json()["commitment"] == str(hider.commitment)

        assert guess_and_check(client, headers, hider, 5) == "GREATER"
        assert guess_and_check(client, headers, hider, 12) == "LESS"
        assert guess_and_check(client, headers, hider, 9) == "EQUALS"

        state = client.get("/game/state").json()
        assert state["last_clue"] == "EQUALS"
        assert state["guesser"] == player_id
        assert state["guesses_remaining"] == 2

        score, witness = witness_body(client, player_id)
        resp = client.post("/game/settle", json={"score": score, "witness": witness})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["settled"] is True
        assert body["new_score"] == 1
        assert body["player"] == player_id

        state = client.get("/game/state").json()
        assert state["active"] is False
        assert state["hidden_commitment"] == "0"

        root = client.get("/ledger/root").json()
        assert root["in_sync"] is True
        assert client.get(f"/ledger/{player_id}").json()["score"] == 1

        rounds = client.get("/rounds").json()
        assert rounds["total"] == 1
        round_id = rounds["rounds"][0]["round_id"]
        record = client.get(f"/rounds/{round_id}").json()
        assert [g["number"] for g in record["guesses"]] == [5, 12, 9]
        assert client.get("/rounds/stats").json()["rounds_won"] == 1

    def test_reveal_flow(self, client, prover, alice_auth):
        """Test a missed reveal keeps the round and a hit settles it."""
        headers, player_id = alice_auth
        hide(client)
        reveal = {"value": 9, "salt": str(SALT)}

        client.post("/game/guess", json={"number": 4}, headers=headers)
        score, witness = witness_body(client, player_id)
        resp = client.post("/game/reveal", json={**reveal, "score": score, "witness": witness})
        assert resp.status_code == 200
        assert resp.json()["settled"] is False

        client.post("/game/guess", json={"number": 9}, headers=headers)
        resp = client.post("/game/reveal", json={**reveal, "score": score, "witness": witness})
        assert resp.json()["settled"] is True
        assert resp.json()["new_score"] == 1
        assert client.get("/ledger/root").json()["in_sync"] is True


class TestErrors:
    """Test rejections map to HTTP errors."""

    def test_hide_twice(self, client):
        hide(client)
        resp = hide(client)
        assert resp.status_code == 409
        assert resp.json()["detail"]["code"] == "AlreadyHidden"

    def test_hide_out_of_range(self, client):
        resp = hide(client, value=100)
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "ValueOutOfRange"

    def test_guess_needs_token(self, client):
        hide(client)
        assert client.post("/game/guess", json={"number": 5}).status_code == 401
        resp = client.post("/game/guess", json={"number": 5},
                           headers={"Authorization": "Bearer junk"})
        assert resp.status_code == 401

    def test_stale_proof(self, client, prover, alice_auth):
        headers, _ = alice_auth
        hider = HiderSession(9, prover, salt=SALT)
        hide(client)
        client.post("/game/guess", json={"number": 5}, headers=headers)
        resp = client.post("/game/check", json=hider.prove_clue(6).to_dict())
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "StaleProof"

    def test_malformed_proof(self, client, prover, alice_auth):
        headers, _ = alice_auth
        hider = HiderSession(9, prover, salt=SALT)
        hide(client)
        client.post("/game/guess", json={"number": 5}, headers=headers)
        body = hider.prove_clue(5).to_dict()
        body["public_output"]["clue"] = 7
        assert client.post("/game/check", json=body).status_code == 422

    def test_settle_too_early(self, client, prover, alice_auth):
        headers, player_id = alice_auth
        hide(client)
        score, witness = witness_body(client, player_id)
        resp = client.post("/game/settle", json={"score": score, "witness": witness})
        assert resp.status_code == 409
        assert resp.json()["detail"]["code"] == "NotSettleable"

    def test_bad_player_id(self, client):
        assert client.get("/ledger/not-a-number").status_code == 400

    def test_unknown_round(self, client):
        assert client.get("/rounds/deadbeef").status_code == 404


class TestDefaultProver:
    """Test clue checking with the default proving backend."""

    @pytest.fixture
    def client(self, round_logger):
        prover = get_proving_backend(Settings(_env_file=None))
        runtime.install(
            GuessGame(store=StateStore(), prover=prover, round_logger=round_logger),
            ScoreBook(),
            round_logger,
        )
        return TestClient(app)

    def test_forged_clue_rejected(self, client, alice_auth):
        """Test a clue the server never proved is refused."""
        headers, _ = alice_auth
        commitment = hide(client).json()["commitment"]
        client.post("/game/guess", json={"number": 42}, headers=headers)
        forged = {
            "public_input": {"guessed_number": "42"},
            "public_output": {"clue": 2, "hidden_value_hash": commitment},
            "proof": "",
        }
        resp = client.post("/game/check", json=forged)
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "ProofInvalid"
        assert client.get("/game/state").json()["guessed_number"] == 42

    def test_prove_then_check(self, client, alice_auth):
        """Test the hider proves each clue through the API."""
        headers, _ = alice_auth
        hide(client)
        for number, expected in ((5, "GREATER"), (12, "LESS"), (9, "EQUALS")):
            client.post("/game/guess", json={"number": number}, headers=headers)
            resp = client.post("/game/prove",
                               json={"value": 9, "salt": str(SALT), "guessed_number": number})
            assert resp.status_code == 200, resp.text
            resp = client.post("/game/check", json=resp.json())
            assert resp.status_code == 200, resp.text
            assert resp.json()["clue"] == expected

    def test_proof_from_other_opening_is_stale(self, client, alice_auth):
        """Test a guesser cannot prove a win with an opening of their own."""
        headers, _ = alice_auth
        hide(client)
        client.post("/game/guess", json={"number": 42}, headers=headers)
        proof = client.post("/game/prove",
                            json={"value": 42, "salt": "1", "guessed_number": 42}).json()
        assert proof["public_output"]["clue"] == 2
        resp = client.post("/game/check", json=proof)
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "StaleProof"

    def test_prove_malformed_opening(self, client):
        resp = client.post("/game/prove", json={"value": -1, "salt": "1", "guessed_number": 3})
        assert resp.status_code == 422
