# tests/conftest.py

import pytest

from core.persistence import InMemoryDocumentStore
from models.class_register import ClassRegister
from models.mark_record import MarkRecord
from models.periods import Sequence
from models.student import Student
from models.subject import Subject


class ManualTimer:

    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimerFactory:
    """Records timers instead of starting threads; `fire_all()` runs every live timer."""

    def __init__(self):
        self.timers: list[ManualTimer] = []

    def __call__(self, delay: float, callback) -> ManualTimer:
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def fire_all(self) -> int:
        due = self.live

        for timer in due:
            timer.fired = True
            timer.callback()

        return len(due)


class RecordingStore(InMemoryDocumentStore):
    """In-memory store that logs every put, and can be told to fail."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.puts: list[tuple[str, object]] = []
        self.fail_writes = False

    def put(self, key, value):
        if self.fail_writes:
            raise OSError("disk full")

        self.puts.append((key, value))
        super().put(key, value)

    def _apply_batch(self, operations):
        if self.fail_writes:
            raise OSError("disk full")

        super()._apply_batch(operations)


@pytest.fixture
def timer_factory():
    return ManualTimerFactory()


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def empty_register(store, timer_factory):
    register_response = ClassRegister.create(store, timer_factory=timer_factory)
    return register_response.data["register"]


@pytest.fixture
def sample_register(empty_register):
    """Three students and two subjects out of 20, with first sequence marks entered."""
    register = empty_register

    for name in ("Alice Mbah", "Bruno Tchana", "Chloe Ngo"):
        register.add_student(name)

    register.add_subject("Math", 20, coefficient=4, teacher="Mr. Fon")
    register.add_subject("Eng", 20, coefficient=2)

    marks = [(18, 14), (10, 8), (5, 4)]

    for index, (math, eng) in enumerate(marks):
        register.set_mark(index, "Math", math, sequence=Sequence.FIRST)
        register.set_mark(index, "Eng", eng, sequence=Sequence.FIRST)

    return register


@pytest.fixture
def sample_students():
    return [Student("s1", "Alice Mbah"), Student("s2", "Bruno Tchana"), Student("s3", "Chloe Ngo")]


@pytest.fixture
def sample_subjects():
    return [Subject("sub1", "Math", 20), Subject("sub2", "Eng", 20)]


@pytest.fixture
def sample_mark_records():
    records = {}

    for student_id, (math, eng) in zip(("s1", "s2", "s3"), [(18, 14), (10, 8), (5, 4)]):
        record = MarkRecord(student_id)
        record.set_mark(Sequence.FIRST, "Math", math, 20)
        record.set_mark(Sequence.FIRST, "Eng", eng, 20)
        records[student_id] = record

    return records


@pytest.fixture
def sample_student():
    return Student("s001", "Alice Mbah")


@pytest.fixture
def sample_subject():
    return Subject("sub001", "Math", 20, coefficient=4, teacher="Mr. Fon")
