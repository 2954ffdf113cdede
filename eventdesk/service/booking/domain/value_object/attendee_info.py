import re
from typing import Optional, Tuple

import attrs

from eventdesk.platform.exception.exceptions import DomainError


EMAIL_PATTERN = re.compile(r'\S+@\S+\.\S+')


def _to_str_tuple(values: object) -> Tuple[str, ...]:
    if values is None:
        return ()
    return tuple('' if v is None else str(v).strip() for v in values)  # type: ignore[attr-defined]


@attrs.frozen
class AttendeeInfo:
    """Per-seat attendee details, index i belongs to seat i."""

    names: Tuple[str, ...] = attrs.field(converter=_to_str_tuple, factory=tuple)
    emails: Tuple[str, ...] = attrs.field(converter=_to_str_tuple, factory=tuple)
    phones: Tuple[str, ...] = attrs.field(converter=_to_str_tuple, factory=tuple)

    def validate_for(self, quantity: int) -> None:
        if len(self.names) != quantity:
            raise DomainError(f'Expected {quantity} attendee names, got {len(self.names)}')
        if len(self.emails) != quantity:
            raise DomainError(f'Expected {quantity} attendee emails, got {len(self.emails)}')
        if self.phones and len(self.phones) != quantity:
            raise DomainError(f'Expected {quantity} attendee phones, got {len(self.phones)}')
        for index, email in enumerate(self.emails):
            if email and not EMAIL_PATTERN.fullmatch(email):
                raise DomainError(f'Attendee {index + 1} has an invalid email')

    def name_at(self, index: int) -> str:
        return self.names[index] if index < len(self.names) and self.names[index] else 'Guest'

    def email_at(self, index: int, fallback: Optional[str]) -> str:
        if index < len(self.emails) and self.emails[index]:
            return self.emails[index]
        return fallback or ''

    def phone_at(self, index: int) -> Optional[str]:
        if index < len(self.phones) and self.phones[index]:
            return self.phones[index]
        return None

    def to_dict(self) -> dict[str, list[str]]:
        return {'names': list(self.names), 'emails': list(self.emails), 'phones': list(self.phones)}
