"""Template repository — aggregate root owning the template collection."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from prompt_distiller.l1_entities.template import (
    ALL_CATEGORIES,
    DEFAULT_CATEGORY,
    DEFAULT_TEMPLATE_NAME,
    HistoryEntry,
    SimilarMatch,
    Template,
    TemplatePatch,
    Usage,
    split_category_csv,
)
from prompt_distiller.l2_use_cases.ports.clock import Clock, IdGenerator
from prompt_distiller.l2_use_cases.ports.template_store import TemplateStore
from prompt_distiller.l2_use_cases.utils.auto_tagger import auto_tag
from prompt_distiller.l2_use_cases.utils.similarity import BROAD_THRESHOLD, DUPLICATE_THRESHOLD, find_similar
from prompt_distiller.l2_use_cases.utils.variable_parser import parse_variables
from prompt_distiller.l2_use_cases.utils.version_history import snapshot

log = logging.getLogger('pd.repo')

Listener = Callable[[], None]


@dataclass(frozen=True)
class CreateResult:
    """Outcome of a create — the new template, or a validation error."""

    template: Template | None = None
    similar_count: int = 0
    error: str = ''

    @property
    def ok(self) -> bool:
        return self.template is not None


@dataclass(frozen=True)
class UpdateResult:
    template: Template | None = None
    error: str = ''
    not_found: bool = False

    @property
    def ok(self) -> bool:
        return self.template is not None


class TemplateRepository:
    """Single source of truth for templates.

    Every mutation writes the whole collection through the store and then
    notifies subscribers. Reads hand out copies so callers cannot bypass the
    mutation API. Mutations are serialized with a lock because the clipboard
    watcher runs on its own thread.
    """

    def __init__(self, store: TemplateStore, clock: Clock, id_generator: IdGenerator) -> None:
        self._store = store
        self._clock = clock
        self._ids = id_generator
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

        self._templates: list[Template] = list(store.load())
        self._issued_ids: set[str] = {t.id for t in self._templates}
        log.info('Loaded %d templates', len(self._templates))

    # --- change notifications ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* to be called after every committed mutation. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _commit(self) -> None:
        self._store.persist(list(self._templates))
        for listener in list(self._listeners):
            listener()

    # --- reads ---

    def get(self, template_id: str) -> Template | None:
        with self._lock:
            found = self._find(template_id)
            return found.model_copy(deep=True) if found is not None else None

    def all(self) -> list[Template]:
        """Templates in storage (insertion) order."""
        with self._lock:
            return [t.model_copy(deep=True) for t in self._templates]

    def __len__(self) -> int:
        return len(self._templates)

    def categories(self) -> list[str]:
        """Filter choices: the ``All`` sentinel, then every category in first-occurrence order."""
        with self._lock:
            seen = dict.fromkeys([ALL_CATEGORIES])
            for t in self._templates:
                seen.update(dict.fromkeys(t.category))
            return list(seen)

    def query(self, category: str = ALL_CATEGORIES, search: str = '') -> list[Template]:
        """Filter by category and search text, then order pinned-first, most recent first."""
        with self._lock:
            result = list(self._templates)
            if category and category != ALL_CATEGORIES:
                result = [t for t in result if category in t.category]
            needle = search.lower()
            if needle:
                result = [t for t in result if _matches(t, needle)]
            # Two stable passes: recency descending, then pinned to the front.
            result.sort(key=lambda t: t.recency, reverse=True)
            result.sort(key=lambda t: not t.pinned)
            return [t.model_copy(deep=True) for t in result]

    def find_similar(self, template_id: str, threshold: float = BROAD_THRESHOLD) -> list[SimilarMatch]:
        with self._lock:
            target = self._find(template_id)
            if target is None:
                return []
            return [
                SimilarMatch(template=m.template.model_copy(deep=True), similarity=m.similarity)
                for m in find_similar(target, self._templates, threshold)
            ]

    # --- mutations ---

    def create(self, content: str, name: str = '', category_csv: str = '') -> CreateResult:
        body = content.strip()
        if not body:
            return CreateResult(error='Template content is empty')

        with self._lock:
            now = self._clock.now()
            template = Template(
                id=self._new_id(),
                name=name.strip() or DEFAULT_TEMPLATE_NAME,
                content=body,
                category=split_category_csv(category_csv),
                tags=auto_tag(body),
                variables=parse_variables(body),
                usage=Usage(),
                history=[],
                created_at=now,
                updated_at=now,
            )
            similar = find_similar(template, self._templates, DUPLICATE_THRESHOLD)
            self._templates.append(template)
            log.info('Created template %s (%r), %d similar', template.id, template.name, len(similar))
            self._commit()
            return CreateResult(template=template.model_copy(deep=True), similar_count=len(similar))

    def update(self, template_id: str, patch: TemplatePatch) -> UpdateResult:
        with self._lock:
            template = self._find(template_id)
            if template is None:
                return UpdateResult(error=f'Template not found: {template_id}', not_found=True)

            new_name = (patch.name if patch.name is not None else template.name).strip()
            if not new_name:
                return UpdateResult(error='Template name cannot be empty')

            now = self._clock.now()
            if patch.content is not None and patch.content != template.content:
                snapshot(template, now)
                template.variables = parse_variables(patch.content)
                template.content = patch.content
            template.name = new_name
            if patch.category is not None:
                template.category = [c.strip() for c in patch.category if c.strip()] or [DEFAULT_CATEGORY]
            template.updated_at = now
            log.info('Updated template %s (history=%d)', template.id, len(template.history))
            self._commit()
            return UpdateResult(template=template.model_copy(deep=True))

    def delete(self, template_id: str) -> bool:
        with self._lock:
            template = self._find(template_id)
            if template is None:
                return False
            self._templates.remove(template)
            log.info('Deleted template %s', template_id)
            self._commit()
            return True

    def toggle_pin(self, template_id: str) -> bool:
        with self._lock:
            template = self._find(template_id)
            if template is None:
                return False
            template.pinned = not template.pinned
            template.updated_at = self._clock.now()
            self._commit()
            return True

    def record_usage(self, template_id: str) -> bool:
        with self._lock:
            template = self._find(template_id)
            if template is None:
                return False
            template.usage.count += 1
            template.usage.last_used = self._clock.now()
            self._commit()
            return True

    def restore_version(self, template_id: str, entry: HistoryEntry) -> bool:
        """Overwrite content with a history entry. The replaced content is not pushed onto history."""
        with self._lock:
            template = self._find(template_id)
            if template is None:
                return False
            template.content = entry.content
            template.variables = parse_variables(entry.content)
            template.updated_at = self._clock.now()
            log.info('Restored template %s to version from %s', template_id, entry.timestamp.isoformat())
            self._commit()
            return True

    # --- internals ---

    def _find(self, template_id: str) -> Template | None:
        return next((t for t in self._templates if t.id == template_id), None)

    def _new_id(self) -> str:
        new_id = self._ids.next()
        while new_id in self._issued_ids:
            new_id = self._ids.next()
        self._issued_ids.add(new_id)
        return new_id


def _matches(template: Template, needle: str) -> bool:
    return (
        needle in template.name.lower()
        or needle in template.content.lower()
        or any(needle in c.lower() for c in template.category)
        or any(needle in tag.lower() for tag in template.tags)
    )
