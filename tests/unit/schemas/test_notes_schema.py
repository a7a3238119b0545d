import pytest
from pydantic import ValidationError

from mindnotes.core.schemas import ConnectionCreate, NoteCreate, NoteUpdate, PreferencesUpdate


def test_create_requires_position():
    with pytest.raises(ValidationError):
        NoteCreate(title="No position")


@pytest.mark.parametrize("title", ["", "   ", "x" * 201])
def test_create_rejects_bad_titles(title):
    with pytest.raises(ValidationError):
        NoteCreate(title=title, x=0, y=0)


def test_create_defaults():
    note = NoteCreate(title="t", x=1, y=2)
    assert note.content == ""
    assert note.color is None
    assert note.tags == []


def test_update_only_reports_sent_fields():
    assert NoteUpdate().changes() == {}
    assert NoteUpdate.model_validate({"x": 3, "tags": ["a"]}).changes() == {"x": 3.0, "tags": ["a"]}


@pytest.mark.parametrize("field", ["title", "content", "x", "y", "color", "tags"])
def test_update_rejects_explicit_null(field):
    with pytest.raises(ValidationError):
        NoteUpdate.model_validate({field: None})


def test_update_rejects_wrong_types():
    with pytest.raises(ValidationError):
        NoteUpdate.model_validate({"x": "left"})
    with pytest.raises(ValidationError):
        NoteUpdate.model_validate({"tags": "a,b"})


def test_preferences_reject_null():
    with pytest.raises(ValidationError):
        PreferencesUpdate.model_validate({"auto_sync": None})
    assert PreferencesUpdate.model_validate({"auto_sync": False}).model_dump(exclude_unset=True) == {
        "auto_sync": False
    }


def test_connection_requires_uuids():
    with pytest.raises(ValidationError):
        ConnectionCreate.model_validate({"from_note_id": "a", "to_note_id": "b"})


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_coordinates_must_be_finite(value):
    with pytest.raises(ValidationError):
        NoteCreate(title="t", x=value, y=0)
    with pytest.raises(ValidationError):
        NoteUpdate.model_validate({"y": value})


def test_tags_are_length_bounded():
    NoteCreate(title="t", x=0, y=0, tags=["x" * 100])
    with pytest.raises(ValidationError):
        NoteCreate(title="t", x=0, y=0, tags=["x" * 101])
    with pytest.raises(ValidationError):
        NoteUpdate.model_validate({"tags": ["ok", "x" * 101]})
