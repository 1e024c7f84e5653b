import json
import logging

import pytest

from ahp_dss import hierarchy
from ahp_dss.state_manager import (build_report, compute_results, connect_db, create_schema,
                                   export_report, export_state, load_json_data, load_state,
                                   normalize_state, reset_database, save_state)


@pytest.fixture
def conn(tmp_path):
    db = connect_db(str(tmp_path / "data" / "ahp.db"))
    create_schema(db)
    yield db
    db.close()


@pytest.fixture
def judged_state():
    st = hierarchy.default_state()
    st = hierarchy.apply_criteria_judgment(st, 0, 1, 3)
    st = hierarchy.apply_criteria_judgment(st, 0, 2, 5)
    st = hierarchy.apply_criteria_judgment(st, 1, 2, 2)
    st = hierarchy.apply_alternative_judgment(st, 0, 0, 1, 1 / 3)
    st = hierarchy.apply_alternative_judgment(st, 0, 0, 2, 1 / 5)
    st = hierarchy.apply_alternative_judgment(st, 1, 1, 2, 4)
    return st


def test_missing_state_falls_back_to_default(conn):
    assert load_state(conn) == hierarchy.default_state()


def test_save_and_load_round_trip(conn, judged_state):
    save_state(conn, judged_state)
    assert load_state(conn) == judged_state

    edited = hierarchy.set_active_criterion(judged_state, 2)
    save_state(conn, edited)
    assert load_state(conn)["activeCritIdx"] == 2
    assert conn.execute("SELECT COUNT(*) FROM states").fetchone()[0] == 1


def test_separate_storage_keys(conn, judged_state):
    save_state(conn, judged_state, key="other")
    assert load_state(conn) == hierarchy.default_state()
    assert load_state(conn, key="other") == judged_state


def test_corrupt_payload_falls_back_to_default(conn):
    conn.execute("INSERT INTO states VALUES (?, ?, ?)", ("ahp_state_pages_v1", "{not json", "now"))
    conn.commit()
    assert load_state(conn) == hierarchy.default_state()


def test_reset_database(tmp_path, judged_state):
    db_file = str(tmp_path / "ahp.db")
    db = connect_db(db_file)
    create_schema(db)
    save_state(db, judged_state)
    db.close()

    reset_database(db_file)
    db = connect_db(db_file)
    assert load_state(db) == hierarchy.default_state()
    db.close()


@pytest.mark.parametrize("raw", [
    None,
    [],
    {"criteria": ["a", "b"], "alternatives": ["x", "y"]},
    {"problem": {"name": "p"}, "criteria": "a,b", "alternatives": ["x", "y"]},
    {"problem": {}, "criteria": ["a", "b"], "alternatives": []},
    {"problem": {}, "criteria": ["a"], "alternatives": ["x", "y"]},
    {"problem": {}, "criteria": [], "alternatives": [], "criteriaMatrix": [], "altMatrices": []},
])
def test_unrecoverable_state_uses_default(raw):
    assert normalize_state(raw) == hierarchy.default_state()


def test_wrong_alternative_matrix_count_is_rebuilt(judged_state, caplog):
    raw = dict(judged_state)
    raw["altMatrices"] = judged_state["altMatrices"][:2]
    with caplog.at_level(logging.WARNING, logger="ahp_dss.state_manager"):
        st = normalize_state(raw)
    assert st["criteriaMatrix"] == judged_state["criteriaMatrix"]
    assert st["altMatrices"] == [[[1.0] * 3] * 3] * 3
    assert "rebuilding" in caplog.text


def test_single_malformed_matrix_is_rebuilt(judged_state):
    raw = json.loads(json.dumps(judged_state))
    raw["altMatrices"][1] = [[1, 2], [0.5, 1]]
    raw["criteriaMatrix"][0][1] = -3
    st = normalize_state(raw)
    assert st["criteriaMatrix"] == [[1.0] * 3] * 3
    assert st["altMatrices"][0] == judged_state["altMatrices"][0]
    assert st["altMatrices"][1] == [[1.0] * 3] * 3


def test_matrix_breaking_pairwise_invariants_is_rebuilt(judged_state):
    raw = json.loads(json.dumps(judged_state))
    raw["criteriaMatrix"] = [[1, 9, 9], [9, 1, 9], [9, 9, 1]]
    raw["altMatrices"][2] = [[5, 1, 1], [1, 5, 1], [1, 1, 5]]
    st = normalize_state(raw)
    assert st["criteriaMatrix"] == [[1.0] * 3] * 3
    assert st["altMatrices"][2] == [[1.0] * 3] * 3
    assert st["altMatrices"][:2] == judged_state["altMatrices"][:2]


def test_too_few_items_never_reach_the_solver():
    st = normalize_state({"problem": {}, "criteria": ["a", "b"], "alternatives": []})
    res = compute_results(st)
    assert sum(res["scores"]) == pytest.approx(1.0)


def test_resized_labels_rebuild_matrices(judged_state):
    raw = dict(judged_state, alternatives=["Location A", "Location B"])
    st = normalize_state(raw)
    assert st["criteriaMatrix"] == judged_state["criteriaMatrix"]
    assert st["altMatrices"] == [[[1.0] * 2] * 2] * 3


@pytest.mark.parametrize("active", [None, -1, 3, "1", True, 1.5])
def test_bad_active_index(judged_state, active):
    st = normalize_state(dict(judged_state, activeCritIdx=active))
    assert st["activeCritIdx"] == 0


def test_export_and_import_json(tmp_path, judged_state):
    path = str(tmp_path / "ahp_state.json")
    export_state(hierarchy.set_active_criterion(judged_state, 1), path)

    with open(path, encoding="utf-8") as f:
        assert "activeCritIdx" not in json.load(f)
    assert load_json_data(path) == judged_state


def test_unreadable_json_file_returns_none(tmp_path, caplog):
    broken = tmp_path / "broken.json"
    broken.write_text("{\"criteria\": [", encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="ahp_dss.state_manager"):
        assert load_json_data(str(broken)) is None
        assert load_json_data(str(tmp_path / "missing.json")) is None
    assert "Could not decode JSON" in caplog.text
    assert "not found" in caplog.text


def test_compute_results(judged_state):
    res = compute_results(judged_state)
    assert res["critWeights"] == pytest.approx([0.6483, 0.2297, 0.1220], abs=1e-3)
    assert res["critCR"] < 0.05
    assert sum(res["scores"]) == pytest.approx(1.0)
    scores = [item["score"] for item in res["ranking"]]
    assert scores == sorted(scores, reverse=True)
    assert res["ranking"][0]["name"] == "Location B"


def test_build_report(tmp_path, judged_state):
    report = export_report(judged_state, str(tmp_path / "report.json"))
    with open(tmp_path / "report.json", encoding="utf-8") as f:
        assert json.load(f) == json.loads(json.dumps(report))

    assert report["criteriaConsistency"] == "good"
    assert len(report["alternativesByCriterion"]) == 3
    assert report["alternativesByCriterion"][2]["weights"] == pytest.approx([1 / 3] * 3)
    assert report["alternativesByCriterion"][2]["diagnostics"][0]["score"] == pytest.approx(0.0)
    assert len(report["criteriaDiagnostics"]) == 3
    assert report["ranking"][0]["name"] == compute_results(judged_state)["ranking"][0]["name"]
