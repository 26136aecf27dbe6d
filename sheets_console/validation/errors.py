from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str


class ValidationError(Exception):
    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("\n".join(f"{i.code}: {i.message}" for i in issues))

    @property
    def first_message(self) -> str:
        return self.issues[0].message if self.issues else ""
