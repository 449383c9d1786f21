import json

from catalog_console.session.token_store import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, TokenStore


def test_missing_file_reads_as_logged_out(tmp_path):
    store = TokenStore(tmp_path / "nested" / "session.json")
    assert store.access_token == ""
    assert not store.is_logged_in
    store.clear()
    assert not store.path.exists()


def test_tokens_survive_a_new_store_instance(tmp_path):
    path = tmp_path / "nested" / "session.json"
    TokenStore(path).set_tokens("a1", "r1")
    again = TokenStore(path)
    assert again.access_token == "a1"
    assert again.refresh_token == "r1"
    assert not path.with_suffix(".json.tmp").exists()


def test_clear_keeps_other_keys(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps({ACCESS_TOKEN_KEY: "a", REFRESH_TOKEN_KEY: "r", "theme": "dark"}))
    store = TokenStore(path)
    store.clear()
    raw = json.loads(path.read_text())
    assert ACCESS_TOKEN_KEY not in raw
    assert raw["theme"] == "dark"


def test_corrupt_file_reads_as_logged_out(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")
    assert TokenStore(path).is_logged_in is False
