# models/comment_record.py

"""
Free-text remarks for one student, keyed by sequence identifier.
"""

from __future__ import annotations

from models.periods import Sequence


class CommentRecord:

    def __init__(self, student_id: str, comments: dict[str, str] | None = None):
        self._student_id = student_id
        self._comments: dict[Sequence, str] = {}

        for sequence, text in (comments or {}).items():
            self._comments[Sequence.parse(sequence)] = str(text)

    @property
    def student_id(self) -> str:
        return self._student_id

    def get_comment(self, sequence: Sequence) -> str:
        return self._comments.get(sequence, "")

    def set_comment(self, sequence: Sequence, text: str) -> None:
        self._comments[sequence] = "" if text is None else str(text)

    def comments_for(self, sequences: tuple[Sequence, ...]) -> dict[str, str]:
        return {s.value: self.get_comment(s) for s in sequences if self.get_comment(s)}

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {sequence.value: text for sequence, text in self._comments.items()}

    @classmethod
    def from_dict(cls, data: dict, student_id: str) -> CommentRecord:
        return cls(student_id, {k: v for k, v in data.items() if k != "id"})

    def __repr__(self) -> str:
        return f"CommentRecord({self._student_id}, {len(self._comments)} comments)"
