"""Metadata header of a content file."""

import copy
from dataclasses import dataclass, field
import datetime as dt
from typing import Any, Dict, List, Optional

import yaml

from .errors import DateFormatError, FieldTypeError, MetadataError, MissingFieldError

DATE_FORMAT = '%Y-%m-%d'

# Keys decoded into typed fields; everything else is kept in custom_fields.
RECOGNIZED_KEYS = ('title', 'date', 'category', 'tags', 'template')


def parse_date(value):
    """Parse a header date. Returns None when the value is absent."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        raise DateFormatError(f"Expected a date in YYYY-MM-DD form, got a date and time '{value}'")
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.datetime.strptime(value.strip(), DATE_FORMAT).date()
        except ValueError as e:
            raise DateFormatError(f"Expected a date in YYYY-MM-DD form, got '{value}'") from e
    raise DateFormatError(f"Expected a date in YYYY-MM-DD form, got {type(value).__name__} '{value}'")


def _optional_str(mapping, key):
    value = mapping.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise FieldTypeError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


def _optional_str_list(mapping, key):
    value = mapping.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise FieldTypeError(f"Field '{key}' must be a list of strings, got {type(value).__name__}")
    for item in value:
        if not isinstance(item, str):
            raise FieldTypeError(f"Field '{key}' must only contain strings, got {type(item).__name__} '{item}'")
    return list(value)


@dataclass(frozen=True)
class Metadata:
    """Typed view of a content header plus its unrecognised fields."""

    title: str
    date: Optional[dt.date] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    template: Optional[str] = None
    custom_fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_str(cls, text):
        """Decode a YAML header block."""
        try:
            mapping = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise MetadataError(f"Invalid YAML in metadata header: {e}") from e
        if mapping is None:
            mapping = {}
        if not isinstance(mapping, dict):
            raise MetadataError(f"Metadata header must be a mapping, got {type(mapping).__name__}")
        return cls.from_mapping(mapping)

    @classmethod
    def from_mapping(cls, mapping):
        """Decode an already parsed header mapping."""
        title = mapping.get('title')
        if title is None:
            raise MissingFieldError("Missing required field 'title'")
        if not isinstance(title, str):
            raise MissingFieldError(f"Required field 'title' must be a string, got {type(title).__name__}")

        custom_fields = {key: value for key, value in mapping.items() if key not in RECOGNIZED_KEYS}

        return cls(
            title=title,
            date=parse_date(mapping.get('date')),
            category=_optional_str(mapping, 'category'),
            tags=_optional_str_list(mapping, 'tags'),
            template=_optional_str(mapping, 'template'),
            custom_fields=custom_fields,
        )

    def to_mapping(self):
        """
        Re-serialize for a template context.

        Custom fields come first, untouched. Recognised fields are always
        present, as None when unset, so templates can test them.
        """
        values = copy.deepcopy(self.custom_fields)
        values['title'] = self.title
        values['date'] = self.date.strftime(DATE_FORMAT) if self.date is not None else None
        values['category'] = self.category
        values['tags'] = list(self.tags) if self.tags is not None else None
        values['template'] = self.template
        return values
