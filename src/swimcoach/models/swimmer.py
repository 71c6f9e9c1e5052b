"""Swimmer model."""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, field_validator


class Gender(StrEnum):
    """Common gender codes. Swimmers may carry any single-letter code."""

    MALE = "M"
    FEMALE = "F"


class Swimmer(BaseModel):
    """A competitive swimmer, keyed by the id the federation assigns."""

    id: str
    first_name: str
    last_name: str
    gender: str
    birth_date: date

    @field_validator("id", "first_name", "last_name")
    @classmethod
    def strip_strings(cls, v: str) -> str:
        """Strip whitespace and reject empty values."""
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, v: object) -> object:
        """Upper-case the code and require a single letter."""
        if not isinstance(v, str):
            return v
        v = v.strip().upper()
        if len(v) != 1 or not v.isalpha():
            raise ValueError("must be a single letter")
        return v

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
