import pytest
from fastapi.testclient import TestClient

import server
from recommender.catalog import MovieCatalog


@pytest.fixture
def client(tmp_path, scenario_records):
    server.set_catalog(MovieCatalog.from_records(scenario_records, path=tmp_path / "movies.json"))
    yield TestClient(server.app)
    server.set_catalog(None)


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_movies_and_lookup(client):
    movies = client.get("/api/movies").json()
    assert [m["id"] for m in movies] == [1, 2, 3]
    assert client.get("/api/movies/2").json()["title"] == "Love Story"
    assert client.get("/api/movies/999").status_code == 404


def test_genres(client):
    assert client.get("/api/genres").json() == ["Romance", "SciFi"]


def test_recommendations(client):
    res = client.get("/api/recommendations/1", params={"topN": 2})
    assert res.status_code == 200
    data = res.json()
    assert data["baseId"] == 1
    assert [m["id"] for m in data["recommendations"]] == [3, 2]
    assert "score" in data["recommendations"][0]
    assert data["builtAt"]


def test_recommendations_unknown_id(client):
    assert client.get("/api/recommendations/999").status_code == 404


def test_search(client):
    data = client.get("/api/search", params={"q": "space battle", "topN": 5}).json()
    assert [m["id"] for m in data["results"]] == [1, 3]
    assert client.get("/api/search", params={"q": ""}).json()["results"] == []


def test_add_movie(client):
    assert client.post("/api/movies", json={"desc": "no title"}).status_code == 400
    res = client.post("/api/movies", json={"title": "Space Cats", "genres": ["SciFi"], "desc": "war in space"})
    assert res.status_code == 201
    assert res.json()["id"] == 4
    assert len(client.get("/api/movies").json()) == 4
    recs = client.get("/api/recommendations/4", params={"topN": 1}).json()["recommendations"]
    assert recs[0]["id"] in (1, 3)


def test_trace_and_rebuild(client):
    assert client.post("/api/trace", json={}).status_code == 400
    data = client.post("/api/trace", json={"query": "space"}).json()
    assert [row["id"] for row in data["cosine"]] == [1, 3]
    rebuilt = client.post("/api/rebuild").json()
    assert rebuilt["status"] == "ok"
    assert rebuilt["count"] == 3


def test_add_movie_with_bad_genres_is_rejected(client):
    res = client.post("/api/movies", json={"title": "X", "genres": 5})
    assert res.status_code == 400
    assert len(client.get("/api/movies").json()) == 3


def test_add_movie_save_failure(client, monkeypatch):
    catalog = server.get_catalog()
    records, index = catalog._records, catalog.index

    def fail(path, records):
        raise OSError("disk full")

    monkeypatch.setattr("recommender.catalog.save_records", fail)
    res = client.post("/api/movies", json={"title": "Space Cats"})
    assert res.status_code == 500
    assert catalog._records is records
    assert catalog.index is index


def test_trace_accepts_single_genre_string(client):
    data = client.post("/api/trace", json={"query": "love", "genres": "Romance"}).json()
    rows = {row["id"]: row for row in data["cosine"]}
    assert rows[2]["matched_genres"] == ["Romance"]


def test_trace_rejects_bad_genres(client):
    assert client.post("/api/trace", json={"query": "love", "genres": 5}).status_code == 400
    res = client.post("/api/trace", json={"query": "love", "genres": ["Romance", 7]})
    assert res.status_code == 200
