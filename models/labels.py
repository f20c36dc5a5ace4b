"""Label table — every fixed string the renderers put into a document.

Defaults follow Indonesian business-letter conventions. A ``labels.yaml`` in
the config directory may override any subset of them.
"""
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

_WEEKDAYS = ["Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu"]
_MONTHS = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]


class AddressingLabels(BaseModel):
    letter_greeting: str = "Kepada Yth."
    letter_location: str = "Di tempat"
    memo_recipient: str = "Kepada:"
    memo_sender: str = "Dari: Manajemen"
    memo_date: str = "Tanggal:"
    subject: str = "Perihal:"


class ContactLabels(BaseModel):
    phone: str = "Tel:"
    email: str = "Email:"
    website: str = "Web:"
    separator: str = " | "


class CalendarLabels(BaseModel):
    weekdays: list[str] = Field(default_factory=lambda: list(_WEEKDAYS))  # Monday first
    months: list[str] = Field(default_factory=lambda: list(_MONTHS))

    @field_validator("weekdays")
    @classmethod
    def seven_weekdays(cls, v: list[str]) -> list[str]:
        if len(v) != 7:
            raise ValueError("weekdays must list exactly 7 names, Monday first")
        return v

    @field_validator("months")
    @classmethod
    def twelve_months(cls, v: list[str]) -> list[str]:
        if len(v) != 12:
            raise ValueError("months must list exactly 12 names, January first")
        return v


class LabelTable(BaseModel):
    addressing: AddressingLabels = Field(default_factory=AddressingLabels)
    contact: ContactLabels = Field(default_factory=ContactLabels)
    calendar: CalendarLabels = Field(default_factory=CalendarLabels)
    closing: str = "Hormat kami,"
    default_filename: str = "dokumen"

    @classmethod
    def load(cls, path: Path) -> "LabelTable":
        """Load from a YAML file. Missing keys keep their defaults.

        Raises FileNotFoundError if path does not exist.
        """
        import yaml  # lazy — only needed at load time
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.model_validate(data)

    @classmethod
    def load_or_default(cls, path: Path | None) -> "LabelTable":
        if path is not None and path.exists():
            return cls.load(path)
        return cls()
