from cfa_tutor.db import init_db, get_connection
from cfa_tutor.seed import seed_topics, is_seeded, seed_all


def test_seed_topics(tmp_db):
    init_db(tmp_db)
    seed_topics(tmp_db)
    conn = get_connection(tmp_db)
    topics = conn.execute("SELECT * FROM topics ORDER BY id").fetchall()
    assert len(topics) == 10
    assert topics[0]["name"] == "Ethical and Professional Standards"
    assert topics[-1]["name"] == "Portfolio Management"
    conn.close()


def test_is_seeded(tmp_db):
    init_db(tmp_db)
    assert not is_seeded(tmp_db)
    seed_topics(tmp_db)
    assert is_seeded(tmp_db)


def test_seed_all_idempotent(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    seed_all(tmp_db)  # second call should be no-op
    conn = get_connection(tmp_db)
    assert conn.execute("SELECT COUNT(*) FROM topics").fetchone()[0] == 10
    conn.close()
