"""Tests for the coach file parser."""

import random
from datetime import datetime

import pytest

from coach.engine.model import Entry, Event, Note, Observation, Status, Task
from coach.engine.parse import FormatError, parse
from coach.engine.render import serialize


HALLOWEEN = """#coach
2021-10-31
weather: sunny

TODO buy candy
DONE put out decorations
* <2021-10-31 Sun 10:03> Bought candy

A simple note.
"""

FULL = """#coach
Test
key: value1
key: value2

TODO take a break
WORKING learn python
DONE pet the dog
CANCELLED teach the dog python

* <2021-10-31 Sun 21:10> working in the lab late one night
* <2021-10-31 Sun 22:10> my eyes beheld an eerie sight

This is note one

And this is note two,
it is multiline

"""


# ---------------------------------------------------------------------
# Whole files
# ---------------------------------------------------------------------

def test_halloween_scenario():
    e = parse(HALLOWEEN)

    assert e.label == "2021-10-31"
    assert e.observations == [Observation("weather", "sunny")]
    assert e.tasks == [
        Task(Status.TODO, "buy candy"),
        Task(Status.DONE, "put out decorations"),
    ]
    assert e.events == [Event(datetime(2021, 10, 31, 10, 3), "Bought candy")]
    assert e.notes == [Note("A simple note.")]


def test_full_entry_sections():
    e = parse(FULL)

    assert e.label == "Test"
    assert e.observations == [Observation("key", "value1"), Observation("key", "value2")]
    assert [t.status for t in e.tasks] == [
        Status.TODO,
        Status.WORKING,
        Status.DONE,
        Status.CANCELLED,
    ]
    assert [ev.message for ev in e.events] == [
        "working in the lab late one night",
        "my eyes beheld an eerie sight",
    ]
    assert e.notes == [
        Note("This is note one"),
        Note("And this is note two,\nit is multiline"),
    ]


def test_just_label():
    assert parse("#coach\nLabel\n\n") == Entry(label="Label")


def test_label_without_newline():
    assert parse("#coach\nLabel") == Entry(label="Label")


def test_label_is_taken_verbatim():
    e = parse("#coach\nTODO: this is the label\n")
    assert e.label == "TODO: this is the label"
    assert e.observations == []


def test_note_without_terminator():
    e = parse("#coach\nLabel\n\nNo terminator")
    assert e.notes == [Note("No terminator")]


def test_trailing_blank_lines_ignored():
    e = parse("#coach\nLabel\n\nnote\n\n\n\n")
    assert e.notes == [Note("note")]


def test_multiple_blank_lines_between_notes():
    e = parse("#coach\nLabel\n\none\n\n\n\ntwo\n")
    assert e.notes == [Note("one"), Note("two")]


# ---------------------------------------------------------------------
# Section transitions
# ---------------------------------------------------------------------

def test_tasks_directly_after_label():
    e = parse("#coach\nLabel\nTODO a\nDONE b\n")
    assert e.observations == []
    assert e.tasks == [Task(Status.TODO, "a"), Task(Status.DONE, "b")]


def test_events_directly_after_observations():
    e = parse("#coach\nLabel\nmood: ok\n* <2021-10-31 Sun 10:03> hi\n")
    assert e.observations == [Observation("mood", "ok")]
    assert e.events == [Event(datetime(2021, 10, 31, 10, 3), "hi")]


def test_events_without_tasks():
    e = parse("#coach\nLabel\n\n* <2021-10-31 Sun 10:03> hi\n")
    assert e.tasks == []
    assert len(e.events) == 1


def test_blank_lines_between_tasks_and_events():
    e = parse("#coach\nLabel\n\nTODO a\n\n* <2021-10-31 Sun 10:03> hi\n\nnote\n")
    assert e.tasks == [Task(Status.TODO, "a")]
    assert len(e.events) == 1
    assert e.notes == [Note("note")]


def test_empty_task_text():
    e = parse("#coach\nLabel\n\nTODO\nDONE \n")
    assert e.tasks == [Task(Status.TODO, ""), Task(Status.DONE, "")]


def test_notes_may_directly_follow_tasks():
    e = parse("#coach\nLabel\n\nTODO a\nsome note\n")
    assert e.tasks == [Task(Status.TODO, "a")]
    assert e.notes == [Note("some note")]


def test_observation_shaped_line_in_notes_is_text():
    e = parse("#coach\nLabel\n\nkey: value\n")
    assert e.observations == []
    assert e.notes == [Note("key: value")]


def test_markers_inside_notes_are_text():
    text = "#coach\nLabel\n\nfirst note\n\nTODO not a task\n* not an event\n"
    e = parse(text)
    assert e.tasks == []
    assert e.events == []
    assert e.notes == [Note("first note"), Note("TODO not a task\n* not an event")]


def test_duplicate_observation_keys_kept_in_order():
    e = parse("#coach\nLabel\na: 1\nb: 2\na: 3\n\n")
    assert e.observations == [Observation("a", "1"), Observation("b", "2"), Observation("a", "3")]


# ---------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------

@pytest.mark.parametrize("text", ["", "Label\n", "#coach \nLabel\n", "\n#coach\nLabel\n"])
def test_missing_header_is_line_one(text):
    with pytest.raises(FormatError) as exc:
        parse(text)
    assert exc.value.line == 1
    assert "#coach" in exc.value.message


@pytest.mark.parametrize("text,line", [("#coach", 2), ("#coach\n", 2), ("#coach\n\nTODO a\n", 2)])
def test_missing_label(text, line):
    with pytest.raises(FormatError) as exc:
        parse(text)
    assert exc.value.line == line
    assert "label" in exc.value.message


def test_observation_without_separator():
    with pytest.raises(FormatError) as exc:
        parse("#coach\nLabel\nweather sunny\n\n")
    assert exc.value.line == 3
    assert "key: value" in exc.value.message


def test_malformed_event_timestamp():
    text = "#coach\nLabel\n\nTODO a\n* <2021-10-31 Mon 10:03> wrong day\n"
    with pytest.raises(FormatError) as exc:
        parse(text)
    assert exc.value.line == 5
    assert "timestamp" in exc.value.message


def test_event_missing_timestamp():
    with pytest.raises(FormatError) as exc:
        parse("#coach\nLabel\n\n* just a bullet\n")
    assert exc.value.line == 4


def test_task_after_events():
    text = "#coach\nLabel\n\n* <2021-10-31 Sun 10:03> hi\nTODO late\n"
    with pytest.raises(FormatError) as exc:
        parse(text)
    assert exc.value.line == 5
    assert "before events" in exc.value.message


def test_format_error_str():
    assert str(FormatError(3, "bad")) == "line 3: bad"


# ---------------------------------------------------------------------
# Arbitrary input
# ---------------------------------------------------------------------

_LINES = [
    "#coach", "#coach ", "Label", "", " ", "\t", "k: v", "k:", ": ", "TODO", "TODO x",
    "WORKING  y", "done z", "CANCELLED", "* <2021-10-31 Sun 10:03> ok", "* <2021-10-31 Sun 10:03>",
    "* <2021-10-31 Mon 10:03> wrong day", "* <2021-13-45 Sun 10:03>", "* <0000-01-01 Sat 00:00>",
    "* <2021-10-31 Sun 10:03", "* no stamp", "*", "plain text", "\r",
]


@pytest.mark.parametrize("seed", range(10))
def test_arbitrary_lines_parse_or_raise_format_error(seed):
    rng = random.Random(seed)
    for _ in range(200):
        lines = [rng.choice(_LINES) for _ in range(rng.randint(0, 12))]
        if rng.random() < 0.7:
            lines[:0] = ["#coach", rng.choice(["Label", "TODO label", "#tag", " "])]
        text = "\n".join(lines)

        try:
            e = parse(text)
        except FormatError as err:
            assert 1 <= err.line <= len(text.split("\n")) + 1
            continue

        assert parse(serialize(e)) == e, text
