import json
import logging
import os
import sqlite3
import sys
from datetime import datetime

from .consistency import classify_cr
from .diagnostics import diagnose
from .hierarchy import MIN_ITEMS, default_state
from .matrix import build_neutral, is_valid_matrix
from .solver import AHPSolver

logger = logging.getLogger(__name__)

DB_FILE = 'ahp_problems.db'  # Default DB name, can be passed around
STORAGE_KEY = 'ahp_state_pages_v1'


def connect_db(db_file=DB_FILE):
    """Connects to the SQLite database, creating it if it doesn't exist."""
    # Ensure the directory exists if db_file includes a path
    db_dir = os.path.dirname(db_file)
    if db_dir and not os.path.exists(db_dir):
        os.makedirs(db_dir)

    conn = sqlite3.connect(db_file)
    conn.row_factory = sqlite3.Row  # Return rows as dictionary-like objects
    return conn


def create_schema(conn):
    """Creates the state table if it doesn't exist."""
    cursor = conn.cursor()
    cursor.execute("""
    CREATE TABLE IF NOT EXISTS states (
        storage_key TEXT PRIMARY KEY,
        payload TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """)
    conn.commit()


def reset_database(db_file=DB_FILE):
    """Drops the state table and recreates the schema for a fresh start."""
    conn = connect_db(db_file)
    try:
        logger.info("Resetting database: %s", db_file)
        conn.execute("DROP TABLE IF EXISTS states;")
        create_schema(conn)  # create_schema already commits
    finally:
        conn.close()


def _fresh_matrix(n):
    return build_neutral(n).tolist()


def normalize_state(raw):
    """
    Repairs a deserialized state so that it satisfies the hierarchy invariants.

    Malformed fragments are discarded and rebuilt as neutral matrices of the right
    order. Anything that cannot be repaired falls back to the default state.
    Never raises for malformed content.
    """
    if not isinstance(raw, dict):
        logger.warning("Stored state is not an object, using the default state")
        return default_state()
    problem = raw.get('problem')
    criteria = raw.get('criteria')
    alternatives = raw.get('alternatives')
    if not isinstance(problem, dict) or not isinstance(criteria, list) or not isinstance(alternatives, list):
        logger.warning("Stored state misses problem, criteria or alternatives, using the default state")
        return default_state()

    n_crit = len(criteria)
    n_alt = len(alternatives)
    if n_crit < MIN_ITEMS or n_alt < MIN_ITEMS:
        logger.warning("Stored state has %d criteria and %d alternatives (at least %d of each are required), "
                       "using the default state", n_crit, n_alt, MIN_ITEMS)
        return default_state()

    st = {
        'problem': {'name': problem.get('name', ''), 'goal': problem.get('goal', '')},
        'criteria': [str(c) for c in criteria],
        'alternatives': [str(a) for a in alternatives],
    }

    crit_matrix = raw.get('criteriaMatrix')
    if is_valid_matrix(crit_matrix, n_crit):
        st['criteriaMatrix'] = [[float(v) for v in row] for row in crit_matrix]
    else:
        logger.warning("Criteria matrix is malformed for %d criteria, rebuilding it", n_crit)
        st['criteriaMatrix'] = _fresh_matrix(n_crit)

    alt_matrices = raw.get('altMatrices')
    if not isinstance(alt_matrices, list) or len(alt_matrices) != n_crit:
        logger.warning("Expected %d alternative matrices, rebuilding all of them", n_crit)
        alt_matrices = [None] * n_crit
    st['altMatrices'] = []
    for idx, A in enumerate(alt_matrices):
        if is_valid_matrix(A, n_alt):
            st['altMatrices'].append([[float(v) for v in row] for row in A])
        else:
            if A is not None:
                logger.warning("Alternative matrix %d is malformed, rebuilding it", idx)
            st['altMatrices'].append(_fresh_matrix(n_alt))

    active = raw.get('activeCritIdx')
    if isinstance(active, bool) or not isinstance(active, int) or not 0 <= active < n_crit:
        active = 0
    st['activeCritIdx'] = active
    return st


def save_state(conn, state, key=STORAGE_KEY):
    """Writes the full state snapshot under the given key, replacing any previous one."""
    payload = json.dumps(state)
    try:
        conn.execute("""
        INSERT INTO states (storage_key, payload, updated_at) VALUES (?, ?, ?)
        ON CONFLICT(storage_key) DO UPDATE SET payload = excluded.payload, updated_at = excluded.updated_at
        """, (key, payload, datetime.now().isoformat(timespec='seconds')))
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    logger.info("Saved state '%s'", key)


def load_state(conn, key=STORAGE_KEY):
    """Reads the state snapshot; returns the default state if none is stored or it cannot be parsed."""
    row = conn.execute("SELECT payload FROM states WHERE storage_key = ?", (key,)).fetchone()
    if row is None:
        logger.info("No stored state under '%s', using the default state", key)
        return default_state()
    try:
        raw = json.loads(row['payload'])
    except json.JSONDecodeError as e:
        logger.warning("Stored state '%s' is not valid JSON (%s), using the default state", key, e)
        return default_state()
    return normalize_state(raw)


def load_json_data(json_file='ahp_state.json'):
    """Loads a problem state from a JSON file and repairs it if needed. Returns None if the file cannot be read."""
    try:
        with open(json_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.error("JSON file not found at %s", json_file)
        return None
    except json.JSONDecodeError as e:
        logger.error("Could not decode JSON from %s: %s", json_file, e)
        return None
    return normalize_state(data)


def export_state(state, json_file='ahp_state.json'):
    """Writes the editable inputs of a state to a JSON file."""
    out = {
        'problem': state['problem'],
        'criteria': state['criteria'],
        'alternatives': state['alternatives'],
        'criteriaMatrix': state['criteriaMatrix'],
        'altMatrices': state['altMatrices'],
    }
    with open(json_file, 'w', encoding='utf-8') as f:
        json.dump(out, f, ensure_ascii=False, indent=2)


def compute_results(state):
    """Criteria weights, criteria CR, final scores and ranking for a state."""
    solver = AHPSolver(state['criteriaMatrix'], state['altMatrices'],
                       state['criteria'], state['alternatives'])
    crit = solver.get_criteria_result()
    return {
        'critWeights': [float(w) for w in crit.weights],
        'critCR': crit.cr,
        'scores': [float(s) for s in solver.get_scores()],
        'ranking': [{'name': name, 'score': score} for name, score in solver.get_ranking()],
    }


def build_report(state):
    """Builds the exported result document: the inputs plus everything derived from them."""
    solver = AHPSolver(state['criteriaMatrix'], state['altMatrices'],
                       state['criteria'], state['alternatives'])
    crit = solver.get_criteria_result()
    alt_results = solver.get_alternative_results()

    alternatives_by_criterion = []
    for name, A, result in zip(state['criteria'], state['altMatrices'], alt_results):
        alternatives_by_criterion.append({
            'criterion': name,
            'weights': [float(w) for w in result.weights],
            'lambdaMax': result.lambda_max,
            'ci': result.ci,
            'cr': result.cr,
            'consistency': classify_cr(result.cr),
            'diagnostics': [d.to_dict() for d in diagnose(state['alternatives'], A)],
        })

    return {
        'problem': state['problem'],
        'criteria': state['criteria'],
        'alternatives': state['alternatives'],
        'criteriaMatrix': state['criteriaMatrix'],
        'altMatrices': state['altMatrices'],
        'criteriaWeights': [float(w) for w in crit.weights],
        'criteriaLambdaMax': crit.lambda_max,
        'criteriaCI': crit.ci,
        'criteriaCR': crit.cr,
        'criteriaConsistency': classify_cr(crit.cr),
        'criteriaDiagnostics': [d.to_dict() for d in diagnose(state['criteria'], state['criteriaMatrix'])],
        'alternativesByCriterion': alternatives_by_criterion,
        'scores': [float(s) for s in solver.get_scores()],
        'ranking': [{'name': name, 'score': score} for name, score in solver.get_ranking()],
    }


def export_report(state, json_file='ahp_report.json'):
    report = build_report(state)
    with open(json_file, 'w', encoding='utf-8') as f:
        json.dump(report, f, ensure_ascii=False, indent=2)
    return report


# Example usage: python -m ahp_dss.state_manager [input.json]
if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    # <<< Reset the database before storing (optional) >>>
    reset_database(DB_FILE)

    # 1. Load a problem from JSON, or start from the demo problem
    if len(sys.argv) > 1:
        print(f"\nLoading data from {sys.argv[1]}...")
        state = load_json_data(sys.argv[1])
        if state is None:
            print("Falling back to the demo problem.")
            state = default_state()
    else:
        state = default_state()

    # 2. Store it and read it back
    conn = connect_db(DB_FILE)
    create_schema(conn)
    save_state(conn, state)
    state = load_state(conn)
    conn.close()

    # 3. Solve and print the report
    report = build_report(state)
    print("\n--- AHP Results ---")
    print("Problem:", report['problem']['name'], "-", report['problem']['goal'])
    print("Criteria weights:")
    for name, w in zip(report['criteria'], report['criteriaWeights']):
        print(f"  {name}: {w:.6f}")
    print(f"Criteria CR: {report['criteriaCR']:.4f} ({report['criteriaConsistency']})")
    print("Ranking:")
    for pos, item in enumerate(report['ranking'], 1):
        print(f"  {pos}. {item['name']}: {item['score']:.6f}")
