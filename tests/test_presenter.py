from line_lens.diff import DiffResult
from line_lens.presenter import present

HASH = "0123456789abcdef0123456789abcdef01234567"


def make_result(lines):
    return DiffResult(path="a.txt", base_hash="f" * 40, target_hash=HASH, lines=lines)


def test_title():
    spec = present(make_result(["+x"]), (100, 40))
    assert spec.title == "Diff for 0123456"


def test_auto_size_fits_content():
    lines = ["@@ -1 +1 @@", "-short", "+a somewhat longer line"]
    spec = present(make_result(lines), (100, 40))

    assert spec.width == len("+a somewhat longer line")
    assert spec.height == 3
    assert spec.lines == lines


def test_auto_size_capped_by_viewport():
    lines = ["+" + "x" * 200] * 100
    spec = present(make_result(lines), (100, 40))

    assert spec.width == 80
    assert spec.height == 32


def test_configured_size_used_verbatim():
    lines = ["+" + "x" * 200] * 100
    spec = present(make_result(lines), (100, 40), width=150, height=5, border="double")

    assert spec.width == 150
    assert spec.height == 5
    assert spec.border == "double"


def test_wide_characters_count_as_two_cells():
    spec = present(make_result(["+日本語"]), (100, 40))
    assert spec.width == 7
