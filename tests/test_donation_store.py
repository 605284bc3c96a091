from datetime import date

import pytest

from donation_store import (
    DonationNotFound,
    DonationStore,
    ValidationError,
    EMPTY_FORM,
    format_amount,
    parse_amount,
)


def add_three(store):
    store.add("Red Cross", "100", "2024-01-10", "2024-03-10")
    store.add("Food Bank", "50", "2024-02-01", "2024-02-28")
    store.add("Public Radio", "15.5", "2024-03-01", "2024-06-30")


def test_add_appends_parsed_record(store):
    notice = store.add("Red Cross", "100", "2024-01-10", "2024-03-10")
    assert len(store.donations) == 1
    d = store.donations[0]
    assert d["organization"] == "Red Cross"
    assert d["amount"] == 100.0
    assert d["start_date"] == date(2024, 1, 10)
    assert d["end_date"] == date(2024, 3, 10)
    assert notice == {"message": "Donation added successfully!", "kind": "success"}
    assert store.form == EMPTY_FORM


def test_add_grows_by_exactly_one(store):
    add_three(store)
    before = len(store.donations)
    store.add("Library", "20", "2024-05-01", "2024-05-01")
    assert len(store.donations) == before + 1


def test_add_rejects_start_after_end(store):
    store.add("Red Cross", "100", "2024-01-10", "2024-03-10")
    before = store.donations
    with pytest.raises(ValidationError, match="Start date cannot be after end date"):
        store.add("Food Bank", "50", "2024-05-01", "2024-04-30")
    assert store.donations is before
    assert store.notice["kind"] == "error"
    # typed values stay in the form so the user can fix them
    assert store.form["organization"] == "Food Bank"
    assert store.form["start_date"] == "2024-05-01"


@pytest.mark.parametrize("fields", [
    ("", "100", "2024-01-01", "2024-01-31"),
    ("Red Cross", "", "2024-01-01", "2024-01-31"),
    ("Red Cross", "100", "", "2024-01-31"),
    ("   ", "100", "2024-01-01", "2024-01-31"),
])
def test_add_requires_all_fields(store, fields):
    with pytest.raises(ValidationError, match="Please fill in all fields"):
        store.add(*fields)
    assert store.donations == ()


def test_amount_must_be_positive_number(store):
    with pytest.raises(ValidationError, match="must be a number"):
        store.add("Red Cross", "lots", "2024-01-01", "2024-01-31")
    with pytest.raises(ValidationError, match="greater than zero"):
        store.add("Red Cross", "0", "2024-01-01", "2024-01-31")
    with pytest.raises(ValidationError, match="greater than zero"):
        store.add("Red Cross", "-5", "2024-01-01", "2024-01-31")
    assert store.donations == ()


def test_sub_cent_amount_rejected(store):
    with pytest.raises(ValidationError, match="greater than zero"):
        store.add("A", "0.004", "2024-01-01", "2024-01-31")
    with pytest.raises(ValidationError, match="greater than zero"):
        parse_amount("0.001")
    assert store.donations == ()
    assert parse_amount("0.01") == 0.01


def test_bad_date_rejected(store):
    with pytest.raises(ValidationError, match="calendar dates"):
        store.add("Red Cross", "10", "2024-02-30", "2024-03-01")


def test_parse_amount_tolerates_money_formatting():
    assert parse_amount("$1,250.50") == 1250.5
    assert parse_amount(" 40 ") == 40.0
    with pytest.raises(ValidationError):
        parse_amount("nan")


def test_format_amount():
    assert format_amount(100.0) == "100"
    assert format_amount(12.5) == "12.5"
    assert format_amount(0.25) == "0.25"


def test_start_edit_populates_form(store):
    add_three(store)
    target = store.donations[2]["id"]
    store.start_edit(target)
    assert store.editing_id == target
    assert store.is_editing
    assert store.form == {
        "organization": "Public Radio",
        "amount": "15.5",
        "start_date": "2024-03-01",
        "end_date": "2024-06-30",
    }


def test_update_replaces_in_place(store):
    add_three(store)
    ids = [d["id"] for d in store.donations]
    store.start_edit(ids[1])
    notice = store.update(ids[1], "Food Bank", "75", "2024-02-01", "2024-04-30")
    assert notice["message"] == "Donation updated successfully!"
    assert [d["id"] for d in store.donations] == ids
    assert store.donations[1]["amount"] == 75.0
    assert store.donations[1]["end_date"] == date(2024, 4, 30)
    assert store.donations[0]["organization"] == "Red Cross"
    assert store.editing_id is None
    assert store.form == EMPTY_FORM


def test_update_requires_matching_cursor(store):
    add_three(store)
    first, second = store.donations[0]["id"], store.donations[1]["id"]
    before = store.donations
    with pytest.raises(ValidationError):
        store.update(first, "X", "1", "2024-01-01", "2024-01-02")
    store.start_edit(second)
    with pytest.raises(ValidationError):
        store.update(first, "X", "1", "2024-01-01", "2024-01-02")
    assert store.donations is before


def test_update_rejects_start_after_end(store):
    add_three(store)
    target = store.donations[0]["id"]
    store.start_edit(target)
    before = store.donations
    with pytest.raises(ValidationError, match="Start date cannot be after end date"):
        store.update(target, "Red Cross", "100", "2024-04-01", "2024-03-01")
    assert store.donations is before
    # still editing, so the user can correct and resubmit
    assert store.editing_id == target
    store.update(target, "Red Cross", "100", "2024-03-01", "2024-04-01")
    assert store.donations[0]["start_date"] == date(2024, 3, 1)


def test_delete_preserves_order(store):
    add_three(store)
    orgs_before = [d["organization"] for d in store.donations]
    notice = store.delete(store.donations[1]["id"])
    assert notice["message"] == "Donation deleted successfully!"
    assert len(store.donations) == 2
    assert [d["organization"] for d in store.donations] == [orgs_before[0], orgs_before[2]]


def test_ids_are_stable_across_delete(store):
    add_three(store)
    last_id = store.donations[2]["id"]
    store.start_edit(last_id)
    store.delete(store.donations[0]["id"])
    # the edit still points at the same record even though its position moved
    assert store.editing_id == last_id
    assert store.get(last_id)["organization"] == "Public Radio"
    assert store.index_of(last_id) == 1
    store.add("Library", "20", "2024-05-01", "2024-05-31")
    assert store.donations[-1]["id"] not in (d["id"] for d in store.donations[:-1])


def test_delete_of_edited_record_cancels_edit(store):
    add_three(store)
    target = store.donations[1]["id"]
    store.start_edit(target)
    store.delete(target)
    assert store.editing_id is None
    assert store.form == EMPTY_FORM


def test_unknown_id(store):
    add_three(store)
    with pytest.raises(DonationNotFound):
        store.delete(999)
    with pytest.raises(DonationNotFound):
        store.start_edit(999)


def test_cancel_edit(store):
    add_three(store)
    store.start_edit(store.donations[0]["id"])
    store.cancel_edit()
    assert store.editing_id is None
    assert store.form == EMPTY_FORM


def test_cancel_edit_without_edit_is_noop(store):
    add_three(store)
    store.form = {"organization": "half typed", "amount": "", "start_date": "", "end_date": ""}
    donations = store.donations
    form = dict(store.form)
    store.cancel_edit()
    assert store.donations is donations
    assert store.form == form
    assert store.editing_id is None


def test_dismiss_clears_notice(store):
    store.add("Red Cross", "100", "2024-01-10", "2024-03-10")
    assert store.notice is not None
    store.dismiss()
    assert store.notice is None


def test_load_validates_every_row():
    store = DonationStore()
    added = store.load([
        {"organization": "A", "amount": 10, "start_date": "2024-01-01", "end_date": "2024-01-31"},
        {"organization": "B", "amount": "5.25", "start_date": "2024-02-01", "end_date": "2024-03-31"},
    ])
    assert added == 2
    assert [d["id"] for d in store.donations] == [1, 2]
    assert store.notice is None
    with pytest.raises(ValidationError):
        store.load([{"organization": "C", "amount": "1", "start_date": "2024-05-01", "end_date": "2024-04-01"}])
    assert len(store.donations) == 2


def test_add_during_edit_ends_the_edit(store):
    add_three(store)
    store.start_edit(store.donations[0]["id"])
    store.add("Library", "5", "2024-05-01", "2024-05-31")
    assert store.editing_id is None
    assert not store.is_editing
    assert store.form == EMPTY_FORM
    assert store.donations[0]["organization"] == "Red Cross"


def test_failed_add_during_edit_keeps_the_edit(store):
    add_three(store)
    target = store.donations[0]["id"]
    store.start_edit(target)
    with pytest.raises(ValidationError):
        store.add("Library", "5", "2024-06-01", "2024-05-31")
    assert store.editing_id == target
