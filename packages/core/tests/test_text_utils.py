from prrecall_core.utils.text import build_pr_text


def test_canonical_text_fixture():
    assert build_pr_text("T", "B", ["a.ts", "b.ts"]) == "Title: T\nBody: B\na.ts\nb.ts"


def test_no_files_has_no_trailing_newline():
    assert build_pr_text("T", "B", []) == "Title: T\nBody: B"


def test_empty_body_keeps_body_line():
    assert build_pr_text("Fix login", "", ["auth.py"]) == "Title: Fix login\nBody: \nauth.py"


def test_file_order_is_preserved():
    text = build_pr_text("T", "B", ["z.py", "a.py", "m.py"])
    assert text.splitlines()[2:] == ["z.py", "a.py", "m.py"]


def test_accepts_any_iterable():
    assert build_pr_text("T", "B", (f for f in ["a.ts", "b.ts"])) == build_pr_text("T", "B", ["a.ts", "b.ts"])


def test_multiline_body_is_kept_verbatim():
    assert build_pr_text("T", "line 1\nline 2", ["a.ts"]) == "Title: T\nBody: line 1\nline 2\na.ts"
