"""
Donation store - the ordered donation list, the edit cursor, form fields and the
notification banner for the Donation Calendar page.

Every mutation swaps self.donations for a new tuple, so callers can tell whether
anything changed by comparing the object they last saw (see chart_projector).
"""

import math
from datetime import date, datetime
from typing import Optional

EMPTY_FORM = {"organization": "", "amount": "", "start_date": "", "end_date": ""}

MSG_MISSING = "Please fill in all fields"
MSG_AMOUNT_NAN = "Amount must be a number"
MSG_AMOUNT_NOT_POSITIVE = "Amount must be greater than zero"
MSG_BAD_DATE = "Dates must be valid calendar dates (YYYY-MM-DD)"
MSG_START_AFTER_END = "Start date cannot be after end date"
MSG_NOT_EDITING = "That donation is not being edited"

MSG_ADDED = "Donation added successfully!"
MSG_UPDATED = "Donation updated successfully!"
MSG_DELETED = "Donation deleted successfully!"


class ValidationError(ValueError):
    """Bad form input. The message is what the user sees."""


class DonationNotFound(KeyError):
    """No donation with that id in the store."""


def parse_amount(raw: str) -> float:
    """Parse '1,250.50' / '$40' into a positive float rounded to cents."""
    text = raw.replace(",", "").replace("$", "").strip()
    try:
        value = float(text)
    except ValueError:
        raise ValidationError(MSG_AMOUNT_NAN)
    if not math.isfinite(value):
        raise ValidationError(MSG_AMOUNT_NAN)
    # Round first: anything under half a cent would be stored as 0.00
    value = round(value, 2)
    if value <= 0:
        raise ValidationError(MSG_AMOUNT_NOT_POSITIVE)
    return value


def parse_date(raw: str) -> date:
    """Parse an ISO calendar date (YYYY-MM-DD). Time-of-day is never accepted."""
    try:
        return datetime.strptime(raw.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(MSG_BAD_DATE)


def format_amount(amount: float) -> str:
    """Amount as the user would type it back: 100 -> '100', 12.5 -> '12.5'."""
    return f"{amount:.2f}".rstrip("0").rstrip(".")


def validate_fields(organization: str, amount: str, start_date: str, end_date: str) -> dict:
    """
    Check raw form values and return the parsed fields
    {organization, amount, start_date, end_date}. Raises ValidationError.
    """
    fields = [organization, amount, start_date, end_date]
    if any(f is None or not str(f).strip() for f in fields):
        raise ValidationError(MSG_MISSING)
    parsed_amount = parse_amount(str(amount))
    start = parse_date(str(start_date))
    end = parse_date(str(end_date))
    if start > end:
        raise ValidationError(MSG_START_AFTER_END)
    return {
        "organization": str(organization).strip(),
        "amount": parsed_amount,
        "start_date": start,
        "end_date": end,
    }


class DonationStore:
    """In-memory state behind the page. One instance per server process."""

    def __init__(self):
        self.donations = ()
        self.editing_id: Optional[int] = None
        self.form = dict(EMPTY_FORM)
        self.notice: Optional[dict] = None
        self._next_id = 1

    # ── Read helpers ──
    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def index_of(self, donation_id: int) -> int:
        for i, d in enumerate(self.donations):
            if d["id"] == donation_id:
                return i
        raise DonationNotFound(donation_id)

    def get(self, donation_id: int) -> dict:
        return self.donations[self.index_of(donation_id)]

    # ── Notification ──
    def notify(self, message: str, kind: str = "success") -> dict:
        self.notice = {"message": message, "kind": kind}
        return self.notice

    def dismiss(self) -> None:
        self.notice = None

    def _reset_form(self) -> None:
        self.form = dict(EMPTY_FORM)

    def _validated(self, organization, amount, start_date, end_date) -> dict:
        """Remember what was typed, then validate. Errors become the notice."""
        self.form = {
            "organization": organization or "",
            "amount": amount or "",
            "start_date": start_date or "",
            "end_date": end_date or "",
        }
        try:
            return validate_fields(organization, amount, start_date, end_date)
        except ValidationError as e:
            self.notify(str(e), kind="error")
            raise

    def _new_record(self, fields: dict) -> dict:
        record = {"id": self._next_id, **fields}
        self._next_id += 1
        return record

    # ── Mutations ──
    def add(self, organization: str, amount: str, start_date: str, end_date: str) -> dict:
        """Append a donation from raw form values. Returns the success notice."""
        fields = self._validated(organization, amount, start_date, end_date)
        record = self._new_record(fields)
        self.donations = self.donations + (record,)
        # An add from a stale tab ends any open edit; the form is shared
        self.editing_id = None
        self._reset_form()
        print(f"[Store] Added #{record['id']} {record['organization']} ${record['amount']:,.2f}")
        return self.notify(MSG_ADDED)

    def update(self, donation_id: int, organization: str, amount: str, start_date: str, end_date: str) -> dict:
        """Replace the donation under edit, keeping its id and position."""
        if self.editing_id is None or self.editing_id != donation_id:
            self.notify(MSG_NOT_EDITING, kind="error")
            raise ValidationError(MSG_NOT_EDITING)
        idx = self.index_of(donation_id)
        fields = self._validated(organization, amount, start_date, end_date)
        record = {"id": donation_id, **fields}
        self.donations = self.donations[:idx] + (record,) + self.donations[idx + 1:]
        self.editing_id = None
        self._reset_form()
        print(f"[Store] Updated #{donation_id} {record['organization']} ${record['amount']:,.2f}")
        return self.notify(MSG_UPDATED)

    def delete(self, donation_id: int) -> dict:
        idx = self.index_of(donation_id)
        self.donations = self.donations[:idx] + self.donations[idx + 1:]
        if self.editing_id == donation_id:
            # The record under edit is gone; drop the half-finished edit with it
            self.editing_id = None
            self._reset_form()
        print(f"[Store] Deleted #{donation_id} ({len(self.donations)} left)")
        return self.notify(MSG_DELETED)

    def start_edit(self, donation_id: int) -> None:
        """Point the cursor at a donation and load it into the form."""
        record = self.get(donation_id)
        self.editing_id = donation_id
        self.form = {
            "organization": record["organization"],
            "amount": format_amount(record["amount"]),
            "start_date": record["start_date"].isoformat(),
            "end_date": record["end_date"].isoformat(),
        }

    def cancel_edit(self) -> None:
        if self.editing_id is None:
            return
        self.editing_id = None
        self._reset_form()

    def load(self, rows: list) -> int:
        """
        Bulk-add rows of raw values (dicts with the form keys), e.g. demo seed data.
        Every row goes through the same validation as add(). Returns rows added.
        """
        records = []
        for row in rows:
            fields = validate_fields(
                row.get("organization", ""),
                str(row.get("amount", "")),
                row.get("start_date", ""),
                row.get("end_date", ""),
            )
            records.append(self._new_record(fields))
        self.donations = self.donations + tuple(records)
        return len(records)
