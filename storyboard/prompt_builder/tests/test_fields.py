import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[3]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storyboard.prompt_builder.fields import (  # noqa: E402
    ALL_FIELDS,
    ASSEMBLED_FIELDS,
    FIELD_GROUPS,
    LABELS_EN,
    LABELS_KO,
    describe_catalog,
    format_semantic_key,
)


def test_catalog_is_closed_and_unique():
    assert len(ALL_FIELDS) == 45
    assert len(set(ALL_FIELDS)) == len(ALL_FIELDS)
    assert set(LABELS_EN) == set(ALL_FIELDS)
    assert set(LABELS_KO) == set(ALL_FIELDS)


def test_every_assembled_field_is_editable():
    assert set(ASSEMBLED_FIELDS) <= set(ALL_FIELDS)
    assert len(ASSEMBLED_FIELDS) == 31


def test_every_known_key_is_translated():
    for key in ALL_FIELDS:
        assert format_semantic_key(key) != key
        assert format_semantic_key(key, locale="ko") != key


def test_unknown_key_is_returned_unchanged():
    assert format_semantic_key("char_tail") == "char_tail"
    assert format_semantic_key("") == ""


def test_locale_labels_and_fallback():
    assert format_semantic_key("char_outfit") == "Outfit"
    assert format_semantic_key("char_outfit", locale="ko") == "의상"
    assert format_semantic_key("char_outfit", locale="fr") == "Outfit"


def test_describe_catalog_rows_follow_group_order():
    rows = describe_catalog()

    assert [row["key"] for row in rows] == list(ALL_FIELDS)
    assert rows[0] == {"key": "style_main", "group": "style", "label": "Main Style"}
    assert {row["group"] for row in rows} == set(FIELD_GROUPS)
