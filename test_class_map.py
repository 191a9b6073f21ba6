"""Tests for NOTION_CLASS_MAP parsing."""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from snark.class_map import describe_class_map, parse_class_map
from snark.models import ClassMapping


def test_parses_pairs_in_order_with_underscores_expanded():
    """Underscores become spaces on both sides and input order is kept."""
    raw = "S-A:NYP_1,C-A:Conflict_of_Laws,E-A:Evidence,SC-A:State_and_Local_Tax"
    mappings = parse_class_map(raw)

    assert mappings == [
        ClassMapping('S-A', 'NYP 1'),
        ClassMapping('C-A', 'Conflict of Laws'),
        ClassMapping('E-A', 'Evidence'),
        ClassMapping('SC-A', 'State and Local Tax'),
    ]


def test_checkbox_side_is_expanded_too():
    assert parse_class_map("Done_Evidence:Evidence") == [ClassMapping('Done Evidence', 'Evidence')]


def test_empty_and_whitespace_input_yield_nothing():
    assert parse_class_map("") == []
    assert parse_class_map("   ") == []
    assert parse_class_map(None) == []
    assert parse_class_map(" , ,, ") == []


def test_malformed_entries_are_skipped():
    raw = "E-A:Evidence, :NoCheckbox, NoText:, justaword, ___:Blank, S-A:NYP_1"
    mappings = parse_class_map(raw)

    assert [m.text_field for m in mappings] == ['Evidence', 'NYP 1']


def test_duplicates_are_preserved():
    mappings = parse_class_map("E-A:Evidence,E-A:Evidence")
    assert len(mappings) == 2
    assert mappings[0] == mappings[1]


def test_output_never_longer_than_segments_and_fields_never_empty():
    samples = [
        "a:b,c:d",
        "a:b,,c:,:d,e_f:g_h",
        "garbage,,,:::,x:y:z",
        "_:_,__a:b__",
    ]
    for raw in samples:
        mappings = parse_class_map(raw)
        assert len(mappings) <= len(raw.split(','))
        for mapping in mappings:
            assert mapping.checkbox_field and mapping.text_field
            assert '_' not in mapping.checkbox_field
            assert '_' not in mapping.text_field


def test_describe_shows_raw_and_resolved_names():
    described = describe_class_map("E_A:Evidence_Law,broken")

    assert described[0] == {
        'checkbox_raw': 'E_A',
        'text_raw': 'Evidence_Law',
        'checkbox_resolved': 'E A',
        'text_resolved': 'Evidence Law',
        'valid': True,
    }
    assert described[1]['valid'] is False
