import pytest

from gemini_bridge.safety.settings import normalize_safety_settings


def test_none_means_no_settings():
    assert normalize_safety_settings(None) is None


def test_canonical_values_pass_through():
    entries = [{"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_ONLY_HIGH"}]
    assert normalize_safety_settings(entries) == entries


def test_prefix_and_case_are_optional():
    assert normalize_safety_settings(
        [{"category": "dangerous_content", "threshold": " block_low_and_above "}]
    ) == [{"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_LOW_AND_ABOVE"}]


def test_duplicate_category_keeps_last_threshold_in_first_position():
    result = normalize_safety_settings(
        [
            {"category": "HARASSMENT", "threshold": "BLOCK_NONE"},
            {"category": "HATE_SPEECH", "threshold": "BLOCK_NONE"},
            {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"},
        ]
    )

    assert result == [
        {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"},
        {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    ]


@pytest.mark.parametrize(
    "entries, message",
    [
        ("BLOCK_NONE", "must be a list"),
        (["HARASSMENT"], "must be objects"),
        ([{"threshold": "BLOCK_NONE"}], "non-empty 'category'"),
        ([{"category": "HARASSMENT"}], "non-empty 'threshold'"),
        ([{"category": "HARASSMENT", "threshold": "BLOCK_ALL"}], "Unknown safety threshold: BLOCK_ALL"),
    ],
)
def test_invalid_entries(entries, message):
    with pytest.raises(ValueError, match=message):
        normalize_safety_settings(entries)
