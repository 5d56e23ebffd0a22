"""HTTP tests for the vocabulary pages."""

from fastapi.testclient import TestClient

from registervault.db.database import get_conn


def _category_id(name: str) -> int:
    with get_conn() as conn:
        return conn.execute("SELECT id FROM categories WHERE name = ?", (name,)).fetchone()["id"]


def _entry_id(word: str) -> int:
    with get_conn() as conn:
        return conn.execute("SELECT id FROM vocabulary_entries WHERE word = ?", (word,)).fetchone()["id"]


def _create_entry(client: TestClient, word: str, category_id: int, **extra) -> None:
    data = {
        "word": word,
        "definition": f"meaning of {word}",
        "part_of_speech": "Verb",
        "formality_level": "N",
        "attitude": "neutral",
        "dialect": "",
        "category_ids": [str(category_id)],
        "action": "save",
    }
    data.update(extra)
    response = client.post("/entries", data=data, follow_redirects=False)
    assert response.status_code == 303


def test_pages_require_login(client: TestClient):
    for path in ["/vocab", "/entries/new", "/categories"]:
        response = client.get(path, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/login"


def test_login_with_wrong_password(client: TestClient):
    client.post("/register", data={"username": "dave", "password": "secret123"}, follow_redirects=False)
    client.post("/logout", follow_redirects=False)
    response = client.post("/login", data={"username": "dave", "password": "wrong-pass"})
    assert response.status_code == 400
    assert "Invalid username or password." in response.text


def test_create_category_then_entry_and_list(auth_client: TestClient):
    response = auth_client.post("/categories", data={"name": "Business English"}, follow_redirects=False)
    assert response.status_code == 303
    category_id = _category_id("Business English")

    _create_entry(
        auth_client,
        "leverage",
        category_id,
        definition="to use something to maximum advantage",
        formality_level="more F",
        specialized_registers=["BUS"],
    )

    page = auth_client.get("/vocab")
    assert page.status_code == 200
    assert "leverage" in page.text
    assert "Business English" in page.text
    assert "Total entries: <strong>1</strong>" in page.text


def test_submit_without_category_is_rejected(auth_client: TestClient):
    response = auth_client.post(
        "/entries",
        data={"word": "leverage", "definition": "to use", "action": "save"},
    )
    assert response.status_code == 400
    assert "category required" in response.text
    # The form keeps what was typed.
    assert 'value="leverage"' in response.text


def test_submit_without_word_is_rejected(auth_client: TestClient):
    auth_client.post("/categories", data={"name": "General"})
    response = auth_client.post(
        "/entries",
        data={"word": "", "definition": "to use", "category_ids": [str(_category_id("General"))], "action": "save"},
    )
    assert response.status_code == 400
    assert "missing fields" in response.text


def test_filters_from_query_string(auth_client: TestClient):
    auth_client.post("/categories", data={"name": "Legal"})
    auth_client.post("/categories", data={"name": "Street"})
    legal, street = _category_id("Legal"), _category_id("Street")
    _create_entry(auth_client, "hereinafter", legal, formality_level="very F", specialized_registers=["LEG", "W"])
    _create_entry(auth_client, "gonna", street, formality_level="very I", specialized_registers=["S"])

    by_register = auth_client.get("/vocab", params={"register": ["LEG", "JNL"]})
    assert "hereinafter" in by_register.text
    assert "gonna" not in by_register.text

    by_category = auth_client.get("/vocab", params={"category": [street]})
    assert "gonna" in by_category.text
    assert "hereinafter" not in by_category.text

    by_search = auth_client.get("/vocab", params={"q": "MEANING OF GON"})
    assert "gonna" in by_search.text
    assert "hereinafter" not in by_search.text
    assert "Clear all" in by_search.text

    nothing = auth_client.get("/vocab", params={"q": "zzz"})
    assert "No entries match your filters" in nothing.text


def test_add_alternative_round_trips_form(auth_client: TestClient):
    response = auth_client.post(
        "/entries",
        data={
            "word": "leverage",
            "definition": "to use",
            "new_alt_word": "exploit",
            "new_alt_definition": "to take advantage of",
            "new_alt_register": "more I",
            "action": "add_alternative",
        },
    )
    assert response.status_code == 200
    assert 'name="alt_word" value="exploit"' in response.text


def test_quick_create_category_selects_it(auth_client: TestClient):
    response = auth_client.post(
        "/entries",
        data={"word": "leverage", "definition": "to use", "new_category_name": "Jargon", "action": "quick_category"},
    )
    assert response.status_code == 200
    category_id = _category_id("Jargon")
    assert f'value="{category_id}" checked' in response.text


def test_edit_entry_replaces_categories_and_alternatives(auth_client: TestClient):
    auth_client.post("/categories", data={"name": "A"})
    auth_client.post("/categories", data={"name": "B"})
    cat_a, cat_b = _category_id("A"), _category_id("B")
    _create_entry(auth_client, "leverage", cat_a, alt_word=["use"], alt_definition=["to employ"], alt_register=["N"])
    entry_id = _entry_id("leverage")

    edit_page = auth_client.get(f"/entries/{entry_id}/edit")
    assert edit_page.status_code == 200
    assert 'name="alt_word" value="use"' in edit_page.text

    response = auth_client.post(
        f"/entries/{entry_id}",
        data={"word": "leverage", "definition": "to use well", "category_ids": [str(cat_b)], "action": "save"},
        follow_redirects=False,
    )
    assert response.status_code == 303

    with get_conn() as conn:
        links = conn.execute(
            "SELECT category_id FROM vocabulary_categories WHERE vocabulary_entry_id = ?", (entry_id,)
        ).fetchall()
        alternatives = conn.execute(
            "SELECT COUNT(*) AS n FROM alternative_words WHERE vocabulary_entry_id = ?", (entry_id,)
        ).fetchone()["n"]
    assert [r["category_id"] for r in links] == [cat_b]
    assert alternatives == 0


def test_unknown_entry_is_404(auth_client: TestClient):
    assert auth_client.get("/entries/999/edit").status_code == 404
    assert auth_client.post("/entries/999/delete", follow_redirects=False).status_code == 404


def test_delete_entry(auth_client: TestClient):
    auth_client.post("/categories", data={"name": "General"})
    _create_entry(auth_client, "ephemeral", _category_id("General"))
    entry_id = _entry_id("ephemeral")

    response = auth_client.post(f"/entries/{entry_id}/delete", follow_redirects=False)
    assert response.status_code == 303
    assert "ephemeral" not in auth_client.get("/vocab").text


def test_duplicate_category_name_shows_error(auth_client: TestClient):
    auth_client.post("/categories", data={"name": "Slang"})
    response = auth_client.post("/categories", data={"name": "Slang"})
    assert response.status_code == 400
    assert "UNIQUE" in response.text


def test_enter_key_default_button_saves(auth_client: TestClient):
    page = auth_client.get("/entries/new").text
    form = page[page.index("<form method=\"post\" action=\"/entries\">"):]
    first_button = form[form.index("<button"):form.index("</button>")]
    assert 'name="action" value="save"' in first_button


def test_category_search_keeps_active_filters(auth_client: TestClient):
    auth_client.post("/categories", data={"name": "Legal"})
    legal = _category_id("Legal")

    page = auth_client.get(
        "/vocab", params={"q": "law", "formality": ["F"], "register": ["LEG"], "category": [legal], "category_q": "leg"}
    ).text
    category_form = page[page.index('placeholder="Search categories..."'):]
    category_form = category_form[:category_form.index("</form>")]
    assert '<input type="hidden" name="q" value="law">' in category_form
    assert '<input type="hidden" name="formality" value="F">' in category_form
    assert '<input type="hidden" name="register" value="LEG">' in category_form
    assert f'<input type="hidden" name="category" value="{legal}">' in category_form
    # Facet toggle links carry the category search too.
    assert "category_q=leg" in page[page.index("Formality level"):]
