from blog2html.ids import compute_cache_bust_token, new_run_id


def test_cache_bust_token_stability() -> None:
    a = compute_cache_bust_token("run-x", "css/blog.css")
    b = compute_cache_bust_token("run-x", "css/blog.css")
    assert a == b
    assert len(a) == 16


def test_cache_bust_token_normalizes_path() -> None:
    assert compute_cache_bust_token("run-x", "CSS\\Blog.css") == compute_cache_bust_token(
        "run-x", "css/blog.css"
    )


def test_cache_bust_token_differs_between_runs() -> None:
    assert compute_cache_bust_token("run-1", "a.js") != compute_cache_bust_token("run-2", "a.js")
    assert new_run_id() != new_run_id()
