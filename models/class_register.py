# models/class_register.py

"""
The ClassRegister is the central session object and the "source of truth" for one class.

It owns the roster (students and subjects), the Mark Store and Comment Store (one
`MarkRecord` and `CommentRecord` per student), the latest calculated results, and the link
to persistence.

Writes:
    - Mark and comment edits mutate the in-memory record immediately and schedule a
      debounced write of that record. Many edits in quick succession produce one write
      carrying the latest state.
    - Roster changes (adding, renaming, or removing students and subjects) are written
      immediately. Cascading removals use a single batch commit. The in-memory roster is
      only changed once the write succeeds.

Reads:
    Calculations read the current in-memory snapshot synchronously and hand it to the pure
    functions in `models.aggregator`. Result sets are replaced wholesale in a
    `ResultsSession`; a skipped calculation keeps the previous set.

Persisted documents:
    `students`, `subjects`, `marks/<student_id>`, `comments/<student_id>`, `quickStats`.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from core.config import EngineConfig
from core.debounce import DebouncedWriter, TimerFactory, threading_timer_factory
from core.persistence import DocumentStore
from core.response import ErrorCode, Response
from core.utils import generate_uuid
from models import aggregator
from models.comment_record import CommentRecord
from models.mark_record import MarkRecord
from models.periods import ResultView, Sequence, Term
from models.results import ResultsSession
from models.student import Student
from models.subject import Subject
from reports.payload_builder import build_payload

logger = logging.getLogger(__name__)

STUDENTS_KEY = "students"
SUBJECTS_KEY = "subjects"
QUICK_STATS_KEY = "quickStats"


def marks_key(student_id: str) -> str:
    return f"marks/{student_id}"


def comments_key(student_id: str) -> str:
    return f"comments/{student_id}"


class ClassRegister:

    def __init__(
        self,
        store: DocumentStore,
        config: EngineConfig | None = None,
        timer_factory: TimerFactory = threading_timer_factory,
    ):
        self._store = store
        self._config = config or EngineConfig()
        self._students: list[Student] = []
        self._subjects: list[Subject] = []
        self._marks: dict[str, MarkRecord] = {}
        self._comments: dict[str, CommentRecord] = {}
        self._selected_sequence: Sequence = Sequence.FIRST
        self._results = ResultsSession()
        self._quick_stats: dict[str, Any] = {}
        self._writer = DebouncedWriter(
            self._store.put, self._config.debounce_ms, timer_factory
        )

    # === properties ===

    # --- core data structures ---

    @property
    def students(self) -> list[Student]:
        return list(self._students)

    @property
    def subjects(self) -> list[Subject]:
        return list(self._subjects)

    @property
    def marks(self) -> dict[str, MarkRecord]:
        return self._marks

    @property
    def comments(self) -> dict[str, CommentRecord]:
        return self._comments

    @property
    def results(self) -> ResultsSession:
        return self._results

    @property
    def quick_stats(self) -> dict[str, Any]:
        """Statistics cached at the last calculation, available before recalculating."""
        return dict(self._quick_stats)

    # --- session settings ---

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def writer(self) -> DebouncedWriter:
        return self._writer

    @property
    def selected_sequence(self) -> Sequence:
        return self._selected_sequence

    @selected_sequence.setter
    def selected_sequence(self, sequence: Sequence | str) -> None:
        self._selected_sequence = Sequence.parse(sequence)

    @property
    def has_pending_writes(self) -> bool:
        return self._writer.has_pending()

    # === public classmethods ===

    @classmethod
    def create(
        cls,
        store: DocumentStore,
        config: EngineConfig | None = None,
        timer_factory: TimerFactory = threading_timer_factory,
    ) -> Response:
        """
        Creates an empty register and writes its (empty) roster documents.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if the roster documents were written.
                - error (ErrorCode | str | None):
                    - `ErrorCode.PERSISTENCE_FAILED` if the store rejects the write.
                - data (dict | None):
                    - On success: "register" (ClassRegister).
        """
        register = cls(store, config, timer_factory)

        try:
            batch = store.batch()
            batch.put(STUDENTS_KEY, [])
            batch.put(SUBJECTS_KEY, [])
            batch.commit()

        except Exception as e:
            logger.exception("Failed to create register documents")
            return Response.fail(
                detail=f"Failed to write register documents: {e}",
                error=ErrorCode.PERSISTENCE_FAILED,
            )

        return Response.succeed(data={"register": register})

    @classmethod
    def load(
        cls,
        store: DocumentStore,
        config: EngineConfig | None = None,
        timer_factory: TimerFactory = threading_timer_factory,
    ) -> Response:
        """
        Loads a register from a document store.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the roster and all records were loaded.
                    - False for invalid documents or store failures.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_FIELD_VALUE` if ValueError raised.
                    - `ErrorCode.MISSING_REQUIRED_FIELD` if KeyError or TypeError raised.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - data (dict | None):
                    - On success: "register" (ClassRegister).

        Notes:
            - Missing mark or comment documents are treated as empty records.
            - Stored marks go through the same validation as edits; a non-numeric or
              out-of-range mark rejects the whole load with `INVALID_FIELD_VALUE`.
            - Previously calculated results are not restored; only the quick-stats summary is.
        """
        try:
            register = cls(store, config, timer_factory)

            student_data = store.get(STUDENTS_KEY) or []
            subject_data = store.get(SUBJECTS_KEY) or []

            if not isinstance(student_data, list) or not isinstance(subject_data, list):
                raise ValueError("Expected the students and subjects documents to contain lists.")

            register._students = [Student.from_dict(d) for d in student_data]
            register._subjects = [Subject.from_dict(d) for d in subject_data]

            for student in register._students:
                marks_data = store.get(marks_key(student.id)) or {}
                comments_data = store.get(comments_key(student.id)) or {}

                record = MarkRecord.from_dict(marks_data, student.id)
                register._revalidate_marks(record)

                register._marks[student.id] = record
                register._comments[student.id] = CommentRecord.from_dict(comments_data, student.id)

            register._quick_stats = store.get(QUICK_STATS_KEY) or {}

        except ValueError as e:
            return Response.fail(
                detail=f"Invalid field value: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        except (KeyError, TypeError) as e:
            return Response.fail(
                detail=f"Missing required field: {e}",
                error=ErrorCode.MISSING_REQUIRED_FIELD,
            )

        except Exception as e:
            return Response.from_exception(e)

        logger.info(
            "Loaded register with %d students and %d subjects",
            len(register._students),
            len(register._subjects),
        )

        return Response.succeed(data={"register": register})

    # === session lifecycle ===

    def flush(self) -> int:
        return self._writer.flush()

    def close(self, flush: bool = True) -> None:
        """
        Tears down the session.

        Pending debounced writes are flushed by default; with `flush=False` they are
        cancelled so nothing is written after the session is gone.
        """
        self._writer.close(flush=flush)

    def __enter__(self) -> ClassRegister:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # === data accessors ===

    def student_at(self, index: int) -> Student:
        """
        Raises:
            IndexError: If `index` is negative or past the end of the roster.
        """
        if index < 0 or index >= len(self._students):
            raise IndexError(f"No student at position {index}.")

        return self._students[index]

    def subject_at(self, index: int) -> Subject:
        if index < 0 or index >= len(self._subjects):
            raise IndexError(f"No subject at position {index}.")

        return self._subjects[index]

    def find_subject_by_name(self, name: str) -> Subject | None:
        normalized = self._normalize(name)
        return next(
            (s for s in self._subjects if self._normalize(s.name) == normalized), None
        )

    def mark_record_for(self, student: Student) -> MarkRecord:
        return self._marks.setdefault(student.id, MarkRecord(student.id))

    def comment_record_for(self, student: Student) -> CommentRecord:
        return self._comments.setdefault(student.id, CommentRecord(student.id))

    def has_marks(self, sequence: Sequence | None = None) -> bool:
        sequence = sequence or self._selected_sequence
        return any(record.has_entries(sequence) for record in self._marks.values())

    def mark_completion(self, sequence: Sequence | str | None = None) -> tuple[int, int]:
        sequence = Sequence.parse(sequence) if sequence else self._selected_sequence
        return aggregator.mark_completion(
            self._students, self._subjects, self._marks, sequence
        )

    # === data manipulators ===

    # --- mark and comment stores ---

    def set_mark(
        self,
        student_index: int,
        subject_name: str,
        raw_value: Any,
        max_total: float | None = None,
        sequence: Sequence | str | None = None,
    ) -> Response:
        """
        Validates and stores one mark, then schedules a deferred write of the student's record.

        Args:
            student_index (int): Position of the student in the roster.
            subject_name (str): The subject the mark belongs to.
            raw_value (Any): A numeric string or number, or "" to clear the entry.
            max_total (float | None): Upper bound for the mark. Defaults to the subject's total and
                is capped by it.
            sequence (Sequence | str | None): Target sequence. Defaults to `selected_sequence`.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the mark was stored.
                    - False if the student or subject is unknown or the value is invalid.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the student or subject cannot be found.
                    - `ErrorCode.INVALID_FIELD_VALUE` if the value fails validation.
                - data (dict | None):
                    - On success: "record" (MarkRecord), "value" (float | str).

        Notes:
            - A rejected edit changes nothing and schedules nothing.
            - Only the target sequence of the record changes.
            - No calculation is triggered.
        """
        try:
            student = self.student_at(student_index)
            sequence = Sequence.parse(sequence) if sequence else self._selected_sequence

        except (IndexError, ValueError) as e:
            logger.debug("Rejected mark edit: %s", e)
            return Response.fail(detail=str(e), error=ErrorCode.NOT_FOUND, status_code=404)

        subject = self.find_subject_by_name(subject_name)

        if subject is None:
            logger.debug("Rejected mark edit: unknown subject %r", subject_name)
            return Response.fail(
                detail=f"No subject named '{subject_name}'.",
                error=ErrorCode.NOT_FOUND,
                status_code=404,
            )

        subject_name = subject.name
        # a caller-supplied bound may tighten the subject total but never widen it
        limit = subject.total if max_total is None else min(max_total, subject.total)
        record = self.mark_record_for(student)

        try:
            value = record.set_mark(sequence, subject_name, raw_value, limit)

        except (TypeError, ValueError) as e:
            logger.debug("Rejected mark %r for %s/%s: %s", raw_value, student.id, subject_name, e)
            return Response.fail(
                detail=f"Input validation failed: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        self._schedule_marks_write(student)

        return Response.succeed(
            detail=f"Mark for {student.name} in {subject_name} set to {value!r}.",
            data={"record": record, "value": value},
        )

    def set_comment(self, student_index: int, sequence_id: Sequence | str, text: str) -> Response:
        """
        Stores a free-text comment for one sequence and schedules a deferred write.

        Returns:
            Response: Fails with `ErrorCode.NOT_FOUND` if the student or sequence is unknown.
        """
        try:
            student = self.student_at(student_index)
            sequence = Sequence.parse(sequence_id)

        except (IndexError, ValueError) as e:
            logger.debug("Rejected comment edit: %s", e)
            return Response.fail(detail=str(e), error=ErrorCode.NOT_FOUND, status_code=404)

        record = self.comment_record_for(student)
        record.set_comment(sequence, text)

        key = comments_key(student.id)
        self._writer.schedule(key, lambda: self._comments[student.id].to_dict())

        return Response.succeed(
            detail=f"Comment for {student.name} ({sequence.label}) updated.",
            data={"record": record},
        )

    # --- student manipulation ---

    def add_student(self, name: str) -> Response:
        """
        Enrols a student with an empty mark record.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if the student was written and added.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_FIELD_VALUE` if the name is invalid.
                    - `ErrorCode.PERSISTENCE_FAILED` if the write fails.
                - data (dict | None):
                    - On success: "record" (Student).
        """
        try:
            student = Student(generate_uuid(), name)

        except (TypeError, ValueError) as e:
            return Response.fail(
                detail=f"Input validation failed: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        record = MarkRecord(student.id)
        students = self._students + [student]

        batch = self._store.batch()
        batch.put(STUDENTS_KEY, [s.to_dict() for s in students])
        batch.put(marks_key(student.id), record.to_dict())

        failure = self._commit(batch, "add student")
        if failure:
            return failure

        self._students = students
        self._marks[student.id] = record
        self._comments[student.id] = CommentRecord(student.id)

        logger.info("Added student %s (%s)", student.name, student.id)

        return Response.succeed(
            detail="Student successfully added to the register.",
            data={"record": student},
        )

    def rename_student(self, student_index: int, name: str) -> Response:
        try:
            student = self.student_at(student_index)
            new_name = Student.validate_name_input(name)

        except IndexError as e:
            return Response.fail(detail=str(e), error=ErrorCode.NOT_FOUND, status_code=404)

        except (TypeError, ValueError) as e:
            return Response.fail(
                detail=f"Input validation failed: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        if new_name == student.name:
            return Response.succeed(
                detail="The name provided matches the current name. No changes made.",
                data={"record": student},
            )

        renamed = Student(student.id, new_name)
        students = list(self._students)
        students[student_index] = renamed

        try:
            self._store.put(STUDENTS_KEY, [s.to_dict() for s in students])

        except Exception as e:
            logger.exception("Failed to rename student %s", student.id)
            return Response.fail(
                detail=f"Failed to write students: {e}",
                error=ErrorCode.PERSISTENCE_FAILED,
            )

        self._students = students

        return Response.succeed(
            detail=f"Student name successfully updated to: {new_name}.",
            data={"record": renamed},
        )

    def remove_student(self, student_index: int) -> Response:
        """
        Removes a student together with their mark and comment records.

        Notes:
            - Pending debounced writes for the student's records are cancelled first.
            - The student document list and both record deletions go in one batch.
            - Calculated results are kept until the next calculation replaces them.
        """
        try:
            student = self.student_at(student_index)

        except IndexError as e:
            return Response.fail(detail=str(e), error=ErrorCode.NOT_FOUND, status_code=404)

        self._writer.cancel(marks_key(student.id))
        self._writer.cancel(comments_key(student.id))

        students = [s for s in self._students if s.id != student.id]

        batch = self._store.batch()
        batch.put(STUDENTS_KEY, [s.to_dict() for s in students])
        batch.delete(marks_key(student.id))
        batch.delete(comments_key(student.id))

        failure = self._commit(batch, "remove student")
        if failure:
            return failure

        self._students = students
        self._marks.pop(student.id, None)
        self._comments.pop(student.id, None)

        logger.info("Removed student %s (%s)", student.name, student.id)

        return Response.succeed(detail="Student successfully removed from the register.")

    # --- subject manipulation ---

    def add_subject(
        self,
        name: str,
        total: float,
        coefficient: float | None = None,
        teacher: str | None = None,
    ) -> Response:
        try:
            subject = Subject(generate_uuid(), name, total, coefficient, teacher)
            self.require_unique_subject_name(subject.name)

        except (TypeError, ValueError) as e:
            return Response.fail(
                detail=f"Input validation failed: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        subjects = self._subjects + [subject]

        try:
            self._store.put(SUBJECTS_KEY, [s.to_dict() for s in subjects])

        except Exception as e:
            logger.exception("Failed to add subject %s", subject.name)
            return Response.fail(
                detail=f"Failed to write subjects: {e}",
                error=ErrorCode.PERSISTENCE_FAILED,
            )

        self._subjects = subjects

        logger.info("Added subject %s (total %g)", subject.name, subject.total)

        return Response.succeed(
            detail="Subject successfully added to the register.",
            data={"record": subject},
        )

    def update_subject(
        self,
        subject_index: int,
        name: str | None = None,
        total: float | None = None,
        coefficient: float | None = None,
        teacher: str | None = None,
    ) -> Response:
        """
        Updates a subject's name, total, coefficient, or teacher.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if the subject was updated or nothing changed.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the index is out of range.
                    - `ErrorCode.INVALID_FIELD_VALUE` if a value fails validation.
                    - `ErrorCode.VALIDATION_FAILED` if the new name is taken, or the new
                      total is lower than a stored mark.
                    - `ErrorCode.PERSISTENCE_FAILED` if the write fails.

        Notes:
            - A rename moves the subject key in every mark record; the subjects document
              and all mark records are written in one batch.
        """
        try:
            current = self.subject_at(subject_index)

        except IndexError as e:
            return Response.fail(detail=str(e), error=ErrorCode.NOT_FOUND, status_code=404)

        try:
            updated = Subject(
                current.id,
                current.name if name is None else name,
                current.total if total is None else total,
                current.coefficient if coefficient is None else coefficient,
                current.teacher if teacher is None else teacher,
            )

        except (TypeError, ValueError) as e:
            return Response.fail(
                detail=f"Input validation failed: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        renamed = updated.name != current.name

        try:
            if renamed and self._normalize(updated.name) != self._normalize(current.name):
                self.require_unique_subject_name(updated.name)

            if updated.total < current.total:
                self.require_marks_within(current.name, updated.total)

        except ValueError as e:
            return Response.fail(detail=str(e), error=ErrorCode.VALIDATION_FAILED)

        subjects = list(self._subjects)
        subjects[subject_index] = updated

        batch = self._store.batch()
        batch.put(SUBJECTS_KEY, [s.to_dict() for s in subjects])

        if renamed:
            for record in self._marks.values():
                moved = MarkRecord.from_dict(record.to_dict(), record.student_id)
                moved.rename_subject(current.name, updated.name)
                batch.put(marks_key(record.student_id), moved.to_dict())

        failure = self._commit(batch, "update subject")
        if failure:
            return failure

        self._subjects = subjects

        if renamed:
            for record in self._marks.values():
                record.rename_subject(current.name, updated.name)

        return Response.succeed(
            detail=f"Subject {updated.name} successfully updated.",
            data={"record": updated},
        )

    def remove_subject(self, subject_index: int) -> Response:
        """
        Removes a subject and strips its key from every student's mark record.

        Notes:
            - The subjects document and every mark record are written in one batch.
        """
        try:
            subject = self.subject_at(subject_index)

        except IndexError as e:
            return Response.fail(detail=str(e), error=ErrorCode.NOT_FOUND, status_code=404)

        subjects = [s for s in self._subjects if s.id != subject.id]

        batch = self._store.batch()
        batch.put(SUBJECTS_KEY, [s.to_dict() for s in subjects])

        for record in self._marks.values():
            stripped = MarkRecord.from_dict(record.to_dict(), record.student_id)
            stripped.remove_subject(subject.name)
            batch.put(marks_key(record.student_id), stripped.to_dict())

        failure = self._commit(batch, "remove subject")
        if failure:
            return failure

        self._subjects = subjects

        for record in self._marks.values():
            record.remove_subject(subject.name)

        logger.info("Removed subject %s", subject.name)

        return Response.succeed(detail="Subject successfully removed from the register.")

    def reset(self) -> Response:
        """
        Deletes every student, subject, mark, comment, and cached statistic.

        Notes:
            - Pending writes are cancelled and all documents are deleted in one batch.
            - The selected sequence returns to the first sequence.
        """
        self._writer.cancel_all()

        batch = self._store.batch()
        batch.put(STUDENTS_KEY, [])
        batch.put(SUBJECTS_KEY, [])
        batch.delete(QUICK_STATS_KEY)

        for student in self._students:
            batch.delete(marks_key(student.id))
            batch.delete(comments_key(student.id))

        failure = self._commit(batch, "reset register")
        if failure:
            return failure

        self._students = []
        self._subjects = []
        self._marks.clear()
        self._comments.clear()
        self._results.clear()
        self._quick_stats = {}
        self._selected_sequence = Sequence.FIRST

        logger.info("Register reset")

        return Response.succeed(detail="All register data has been deleted.")

    # --- calculations ---

    def calculate_sequence(self, sequence: Sequence | str | None = None) -> Response:
        """
        Calculates a sequence, then attempts its term, then attempts the annual results.

        Args:
            sequence (Sequence | str | None): Defaults to `selected_sequence`.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True whenever the calculation ran, even if some levels were skipped.
                    - False if the sequence is unknown or a calculation raised.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_INPUT` if the sequence is unknown.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - data (dict | None):
                    - "sequence" (ResultSet | None): The new sequence results.
                    - "term" (ResultSet | None): The new term results.
                    - "annual" (ResultSet | None): The new annual results.
                    - "skipped" (list[str]): Periods left at their previous value.

        Notes:
            - Each level respects its own data guard; a skipped level keeps its previous value.
        """
        try:
            sequence = Sequence.parse(sequence) if sequence else self._selected_sequence

        except ValueError as e:
            return Response.fail(detail=str(e), error=ErrorCode.INVALID_INPUT)

        skipped: list[str] = []

        try:
            sequence_results = aggregator.compute_sequence_results(
                self._students,
                self._subjects,
                self._marks,
                sequence,
                self._config.passing_mark,
                self._config.scale,
            )

            if sequence_results is None:
                skipped.append(sequence.value)
            else:
                self._results.replace_sequence(sequence, sequence_results)

            term_results = self._calculate_term(sequence.term, skipped)
            annual_results = self._calculate_annual(skipped)

            self._cache_quick_stats()

        except Exception as e:
            logger.exception("Failed to calculate %s", sequence.label)
            return Response.from_exception(e)

        return Response.succeed(
            detail=f"{sequence.label} calculated.",
            data={
                "sequence": sequence_results,
                "term": term_results,
                "annual": annual_results,
                "skipped": skipped,
            },
        )

    def calculate_term(self, term: Term | str) -> Response:
        try:
            term = Term(term)

        except ValueError as e:
            return Response.fail(detail=str(e), error=ErrorCode.INVALID_INPUT)

        skipped: list[str] = []

        try:
            term_results = self._calculate_term(term, skipped)
            annual_results = self._calculate_annual(skipped)

            self._cache_quick_stats()

        except Exception as e:
            logger.exception("Failed to calculate %s", term.label)
            return Response.from_exception(e)

        return Response.succeed(
            detail=f"{term.label} calculated.",
            data={"term": term_results, "annual": annual_results, "skipped": skipped},
        )

    def calculate_terms(self) -> Response:
        skipped: list[str] = []

        try:
            terms = {term: self._calculate_term(term, skipped) for term in Term}
            annual_results = self._calculate_annual(skipped)

            self._cache_quick_stats()

        except Exception as e:
            logger.exception("Failed to calculate terms")
            return Response.from_exception(e)

        return Response.succeed(
            detail="Terms calculated.",
            data={"terms": terms, "annual": annual_results, "skipped": skipped},
        )

    def calculate_annual(self) -> Response:
        skipped: list[str] = []

        try:
            annual_results = self._calculate_annual(skipped)

            self._cache_quick_stats()

        except Exception as e:
            logger.exception("Failed to calculate annual results")
            return Response.from_exception(e)

        return Response.succeed(
            detail="Annual results calculated." if annual_results else "Annual results skipped.",
            data={"annual": annual_results, "skipped": skipped},
        )

    # --- reports ---

    def build_report_payload(
        self,
        student_index: int,
        view: ResultView | str,
        extra_metadata: dict | None = None,
    ) -> Response:
        """
        Builds the report payload for one student.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if the payload was built.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the index is out of range.
                    - `ErrorCode.INVALID_INPUT` if `view` is not a term or annual view.
                - data (dict | None):
                    - On success: "payload" (dict).
        """
        try:
            student = self.student_at(student_index)

        except IndexError as e:
            return Response.fail(detail=str(e), error=ErrorCode.NOT_FOUND, status_code=404)

        try:
            payload = build_payload(
                student,
                self._subjects,
                self._marks.get(student.id),
                self._comments.get(student.id),
                self._results,
                view,
                extra_metadata,
                class_size=len(self._students),
                default_coefficient=self._config.default_coefficient,
                scale=self._config.scale,
            )

        except ValueError as e:
            return Response.fail(detail=str(e), error=ErrorCode.INVALID_INPUT)

        except Exception as e:
            return Response.from_exception(e)

        return Response.succeed(data={"payload": payload})

    def build_all_report_payloads(
        self, view: ResultView | str, extra_metadata: dict | None = None
    ) -> Response:
        payloads = []

        for index in range(len(self._students)):
            response = self.build_report_payload(index, view, extra_metadata)

            if not response.success:
                return response

            payloads.append(response.data["payload"])

        return Response.succeed(data={"payloads": payloads})

    # === data validators ===

    def require_unique_subject_name(self, name: str) -> None:
        """
        Raises:
            ValueError: If a subject with the same normalized name already exists.
        """
        if self.find_subject_by_name(name) is not None:
            raise ValueError(f"A subject with the name '{name}' already exists.")

    def require_marks_within(self, subject_name: str, total: float) -> None:
        """
        Raises:
            ValueError: If any stored mark for the subject exceeds `total`.
        """
        for record in self._marks.values():
            for sequence in Sequence:
                if record.has_mark(sequence, subject_name) and record.numeric_mark(sequence, subject_name) > total:
                    raise ValueError(
                        f"Existing marks for '{subject_name}' exceed the new total of {total:g}."
                    )

    # === helper methods ===

    def _calculate_term(self, term: Term, skipped: list[str]):
        term_results = aggregator.compute_term_results(
            self._students,
            self._subjects,
            self._marks,
            term,
            self._config.passing_mark,
            self._config.scale,
        )

        if term_results is None:
            skipped.append(term.value)
        else:
            self._results.replace_term(term, term_results)
            logger.info(
                "%s calculated: class average %.2f, pass %.1f%%",
                term.label,
                term_results.statistics.class_average,
                term_results.statistics.pass_percentage,
            )

        return term_results

    def _calculate_annual(self, skipped: list[str]):
        annual_results = aggregator.compute_annual_results(
            self._results.terms, self._students, self._config.passing_mark
        )

        if annual_results is None:
            skipped.append("annual")
        else:
            self._results.replace_annual(annual_results)

        return annual_results

    def _revalidate_marks(self, record: MarkRecord) -> None:
        """
        Re-runs mark validation over a record read from the store.

        Marks for subjects no longer on the roster are only checked for being numeric.

        Raises:
            ValueError: If any stored mark is non-numeric or outside its subject's range.
        """
        totals = {subject.name: subject.total for subject in self._subjects}

        for sequence in Sequence:
            for subject_name, raw_value in record.marks_for(sequence).items():
                try:
                    value = MarkRecord.validate_mark_input(
                        raw_value, totals.get(subject_name, math.inf)
                    )

                except TypeError as e:
                    raise ValueError(
                        f"{sequence.value}/{subject_name} for student {record.student_id}: {e}"
                    ) from e

                record.set_mark(sequence, subject_name, value, math.inf)

    def _cache_quick_stats(self) -> None:
        self._quick_stats = self._results.quick_stats()
        self._writer.schedule(QUICK_STATS_KEY, lambda: dict(self._quick_stats))

    def _schedule_marks_write(self, student: Student) -> None:
        key = marks_key(student.id)
        self._writer.schedule(key, lambda: self._marks[student.id].to_dict())

    def _commit(self, batch, action: str) -> Response | None:
        try:
            batch.commit()

        except Exception as e:
            logger.exception("Failed to %s", action)
            return Response.fail(
                detail=f"Failed to {action}: {e}",
                error=ErrorCode.PERSISTENCE_FAILED,
            )

        return None

    def _normalize(self, input: str) -> str:
        return input.strip().lower()

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"ClassRegister({len(self._students)} students, {len(self._subjects)} subjects, {self._store!r})"
