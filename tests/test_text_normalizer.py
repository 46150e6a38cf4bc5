from zikojsx.compiler.text import normalize_text


def test_block_text_is_trimmed() -> None:
    assert normalize_text("\n  Hello  \n", first=True, last=True) == "Hello"


def test_block_text_trimmed_even_between_siblings() -> None:
    assert normalize_text("\n  Hello\n  ", first=False, last=False) == "Hello"


def test_internal_whitespace_collapses() -> None:
    assert normalize_text("\n  Hello\n   big \t world\n", True, True) == "Hello big world"


def test_whitespace_only_is_dropped() -> None:
    assert normalize_text("   ", first=False, last=False) is None
    assert normalize_text("\n    \n  ", first=True, last=True) is None
    assert normalize_text("", first=True, last=True) is None


def test_inline_first_child_trims_leading_only() -> None:
    assert normalize_text(" a ", first=True, last=False) == "a "


def test_inline_last_child_trims_trailing_only() -> None:
    assert normalize_text(" b ", first=False, last=True) == " b"


def test_inline_middle_child_keeps_spacing() -> None:
    assert normalize_text("  and  ", first=False, last=False) == " and "


def test_inline_sole_child_trims_both() -> None:
    assert normalize_text("  hi  ", first=True, last=True) == "hi"


def test_character_references_are_decoded() -> None:
    assert normalize_text("a &amp; b", first=True, last=True) == "a & b"


def test_nbsp_reference_survives_trimming() -> None:
    assert normalize_text("&nbsp;x", first=True, last=True) == "\xa0x"
