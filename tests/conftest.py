"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

import copy
from datetime import UTC, datetime, timedelta

import pytest

from prompt_distiller.l1_entities.draft import Draft
from prompt_distiller.l1_entities.errors import ClipboardUnavailableError
from prompt_distiller.l1_entities.template import Template, Variable
from prompt_distiller.l2_use_cases.template_repository import TemplateRepository
from prompt_distiller.l3_interface_adapters.controllers.library_controller import LibraryController
from prompt_distiller.l4_frameworks_and_drivers.settings_defaults import build_settings

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

# --- Protocol-conforming Fakes ---


class FakeClock:
    """Fake clock: each now() call returns a time one step later than the previous one."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(seconds=1)) -> None:
        self._current = start
        self._step = step

    def now(self) -> datetime:
        self._current += self._step
        return self._current

    def set(self, when: datetime) -> None:
        """The next now() returns *when* plus one step."""
        self._current = when


class FakeIdGenerator:
    def __init__(self, ids: list[str] | None = None) -> None:
        self._queued = list(ids or [])
        self._counter = 100

    def next(self) -> str:
        if self._queued:
            return self._queued.pop(0)
        self._counter += 1
        return str(self._counter)


class FakeTemplateStore:
    """Fake template store for L2/L3 tests."""

    def __init__(self, templates: list[Template] | None = None) -> None:
        self._initial = list(templates or [])
        self.persist_calls: list[list[Template]] = []
        self.fail = False

    def load(self) -> list[Template]:
        return [t.model_copy(deep=True) for t in self._initial]

    def persist(self, templates: list[Template]) -> bool:
        self.persist_calls.append([t.model_copy(deep=True) for t in templates])
        return not self.fail

    @property
    def last_persisted(self) -> list[Template]:
        return self.persist_calls[-1]


class FakeDraftStore:
    def __init__(self, draft: Draft | None = None) -> None:
        self.draft = draft
        self.save_calls: list[Draft] = []
        self.clear_calls = 0

    def load(self) -> Draft | None:
        return self.draft

    def save(self, draft: Draft) -> None:
        self.draft = draft
        self.save_calls.append(draft)

    def clear(self) -> None:
        self.draft = None
        self.clear_calls += 1


class FakeSettingsStore:
    def __init__(self, raw: dict | None = None) -> None:
        self.raw = copy.deepcopy(raw or {})
        self.save_calls: list[dict] = []

    def load_raw(self) -> dict:
        return copy.deepcopy(self.raw)

    def save(self, settings: dict) -> None:
        self.raw = copy.deepcopy(settings)
        self.save_calls.append(copy.deepcopy(settings))


class FakeClipboard:
    """In-memory clipboard; set ``fail`` to make every access raise."""

    def __init__(self, text: str = '') -> None:
        self.text = text
        self.writes: list[str] = []
        self.fail = False

    def read(self) -> str:
        if self.fail:
            raise ClipboardUnavailableError('no clipboard mechanism')
        return self.text

    def write(self, text: str) -> None:
        if self.fail:
            raise ClipboardUnavailableError('no clipboard mechanism')
        self.text = text
        self.writes.append(text)


# --- Builders ---


def make_template(
    template_id: str = 't1',
    content: str = 'Hello {{name}}',
    name: str = 'Greeting',
    category: list[str] | None = None,
    created_at: datetime = T0,
    **kwargs,
) -> Template:
    kwargs.setdefault('variables', [Variable(key='name')] if '{{name}}' in content else [])
    kwargs.setdefault('updated_at', created_at)
    return Template(
        id=template_id,
        name=name,
        content=content,
        category=category or ['General'],
        created_at=created_at,
        **kwargs,
    )


# --- Fixtures ---


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def id_generator() -> FakeIdGenerator:
    return FakeIdGenerator()


@pytest.fixture
def template_store() -> FakeTemplateStore:
    return FakeTemplateStore()


@pytest.fixture
def repository(template_store, clock, id_generator) -> TemplateRepository:
    return TemplateRepository(template_store, clock, id_generator)


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def draft_store() -> FakeDraftStore:
    return FakeDraftStore()


@pytest.fixture
def settings_store() -> FakeSettingsStore:
    return FakeSettingsStore()


@pytest.fixture
def controller(repository, clipboard, draft_store, settings_store, clock) -> LibraryController:
    return LibraryController(
        repository=repository,
        clipboard=clipboard,
        draft_store=draft_store,
        settings_store=settings_store,
        clock=clock,
        build_settings=build_settings,
    )
