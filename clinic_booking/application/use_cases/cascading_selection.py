from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from clinic_booking.application.exceptions import (
    MissingFieldError,
    OptionFetchError,
    SubmissionTransportError,
    SubmissionValidationError,
    UnknownFieldError,
)
from clinic_booking.application.ports.clinic_api import ClinicApiPort
from clinic_booking.application.utils.messages import label, message
from clinic_booking.domain.entities.field_spec import FieldSpec, FormDefinition
from clinic_booking.domain.entities.form_snapshot import FieldView, FormSnapshot
from clinic_booking.domain.entities.navigation import NavigationIntent
from clinic_booking.domain.entities.option_set import OptionSet
from clinic_booking.domain.entities.selection_state import SelectionState, is_empty
from clinic_booking.domain.entities.submission import SubmissionOutcome

Observer = Callable[[FormSnapshot], Any]


class CascadingSelectionController:
    """
    Drive a dependent form where each chain field's choices depend on the
    values committed upstream of it.

    Changing a chain field clears every field after it together with its
    option set. Option sets are refreshed as soon as all of their upstream
    fields are filled; a response is applied only if it answers the latest
    request for its field and the upstream values it was requested for are
    still the current ones.
    """

    def __init__(self, definition: FormDefinition, api: ClinicApiPort, locale: str = "en") -> None:
        self._definition = definition
        self._api = api
        self._locale = locale
        self._state = SelectionState(values={spec.name: None for spec in definition.fields})
        self._option_sets: dict[str, OptionSet] = {
            spec.name: OptionSet(field=spec.name) for spec in definition.chain if spec.option_source
        }
        self._errors: dict[str, str] = {}
        self._general_error: str | None = None
        self._submitting = False
        self._last_navigation: NavigationIntent | None = None
        self._request_ids: dict[str, int] = {name: 0 for name in self._option_sets}
        self._tasks: set[asyncio.Task] = set()
        self._deferred: list[tuple[str, tuple, int]] = []
        self._observers: list[Observer] = []
        self._logger = logging.getLogger(__name__)
        self._load_root_options()

    @property
    def definition(self) -> FormDefinition:
        return self._definition

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def general_error(self) -> str | None:
        return self._general_error

    @property
    def submitting(self) -> bool:
        return self._submitting

    def value(self, name: str) -> Any:
        self._spec(name)
        return self._state.get(name)

    def option_set(self, name: str) -> OptionSet:
        spec = self._spec(name)
        if not spec.option_source:
            raise ValueError(f"Field '{name}' has no option source")
        return self._option_sets[name]

    def set_field(self, name: str, value: Any) -> bool:
        """
        Store a value. Returns False when a chain field is set while one of its
        upstream fields is still empty; the value is not stored in that case.
        """
        self._spec(name)
        changes: dict[str, Any] = {name: None if is_empty(value) else value}
        downstream = self._definition.downstream_of(name)
        if self._definition.chain_index(name) is not None:
            if not is_empty(value) and not self._upstream_filled(name):
                self._logger.warning(
                    "Field is locked until upstream fields are filled",
                    extra={"form": self._definition.name, "field": name},
                )
                return False
            for spec in downstream:
                changes[spec.name] = None
                if spec.option_source:
                    self._clear_options(spec.name)

        self._state = self._state.with_values(**changes)
        self._errors.pop(name, None)
        self._general_error = None

        for spec in downstream:
            if spec.option_source and self._upstream_filled(spec.name):
                self._schedule_refresh(spec.name)

        self._notify()
        return True

    async def refresh_options(self, name: str) -> None:
        request = self._begin_refresh(name)
        self._notify()
        if request is None:
            return
        await self._run_refresh(name, *request)

    def current_step(self) -> int:
        for index, spec in enumerate(self._definition.chain):
            if not self._state.is_filled(spec.name):
                return index
        return len(self._definition.chain)

    async def submit(self) -> SubmissionOutcome:
        if self._submitting:
            self._logger.info("Submission already in flight", extra={"form": self._definition.name})
            return SubmissionOutcome(status="ignored")

        try:
            self._check_required()
        except MissingFieldError as e:
            self._general_error = message("missing_fields", self._locale, fields=", ".join(e.labels))
            self._notify()
            return SubmissionOutcome(
                status="missing_fields",
                missing_fields=tuple(e.missing),
                message=self._general_error,
            )

        self._submitting = True
        self._general_error = None
        self._errors = {}
        self._notify()

        payload = self._payload()
        self._logger.info("Submitting appointment", extra={"form": self._definition.name})
        try:
            navigation = await self._api.create_appointment(self._definition.name, payload)
        except SubmissionValidationError as e:
            self._errors = dict(e.field_errors)
            if self._errors:
                self._general_error = message("form_has_errors", self._locale)
            else:
                self._general_error = message("submit_failed", self._locale, reason=e.message or str(e))
            self._logger.warning(
                "Appointment submission rejected",
                extra={"form": self._definition.name, "reason": ",".join(sorted(self._errors))},
            )
            return SubmissionOutcome(status="rejected", field_errors=dict(self._errors), message=self._general_error)
        except SubmissionTransportError as e:
            return self._submission_failed(e.reason)
        except Exception as e:
            self._logger.exception("Unexpected submission failure", extra={"form": self._definition.name})
            return self._submission_failed(str(e))
        finally:
            self._submitting = False
            self._notify()

        if navigation is None:
            navigation = NavigationIntent(
                route=self._definition.success_route or "",
                flash=message("created", self._locale),
            )
        self._last_navigation = navigation
        self._notify()
        return SubmissionOutcome(status="created", navigation=navigation, message=navigation.flash)

    async def wait_idle(self) -> None:
        """Await every option refresh currently in flight."""
        deferred, self._deferred = self._deferred, []
        for name, key, request_id in deferred:
            self._track(asyncio.get_running_loop().create_task(self._run_refresh(name, key, request_id)))
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def reset(self) -> None:
        self._state = SelectionState(values={spec.name: None for spec in self._definition.fields})
        for name in self._option_sets:
            self._clear_options(name)
        self._errors = {}
        self._general_error = None
        self._last_navigation = None
        self._deferred = []
        self._load_root_options()
        self._notify()

    def snapshot(self) -> FormSnapshot:
        views = []
        for spec in self._definition.fields:
            option_set = self._option_sets.get(spec.name)
            locked = not self._upstream_filled(spec.name)
            views.append(
                FieldView(
                    name=spec.name,
                    label=label(spec.label_key, self._locale),
                    kind=spec.kind,
                    required=spec.required,
                    value=self._state.get(spec.name),
                    status=self._status(spec, option_set, locked),
                    options=option_set.options if option_set else (),
                    loading=bool(option_set and option_set.is_loading),
                    locked=locked,
                    error=self._errors.get(spec.name),
                    step=self._definition.chain_index(spec.name),
                )
            )
        return FormSnapshot(
            form=self._definition.name,
            fields=tuple(views),
            current_step=self.current_step(),
            submitting=self._submitting,
            general_error=self._general_error,
            last_navigation=self._last_navigation,
        )

    def _spec(self, name: str) -> FieldSpec:
        spec = self._definition.get(name)
        if spec is None:
            raise UnknownFieldError(self._definition.name, name)
        return spec

    def _upstream_filled(self, name: str) -> bool:
        return all(self._state.is_filled(spec.name) for spec in self._definition.upstream_of(name))

    def _upstream_key(self, name: str) -> tuple:
        return tuple(self._state.get(spec.name) for spec in self._definition.upstream_of(name))

    def _status(self, spec: FieldSpec, option_set: OptionSet | None, locked: bool) -> str:
        if self._state.is_filled(spec.name):
            return "selected"
        if option_set is not None:
            return option_set.status
        return "empty" if locked else "ready"

    def _clear_options(self, name: str) -> None:
        # bumping the request id orphans any response still in flight
        self._request_ids[name] += 1
        self._option_sets[name] = OptionSet(field=name)

    def _load_root_options(self) -> None:
        for spec in self._definition.chain:
            if spec.option_source and not self._definition.upstream_of(spec.name):
                self._schedule_refresh(spec.name)

    def _begin_refresh(self, name: str) -> tuple[tuple, int] | None:
        spec = self._spec(name)
        if not spec.option_source:
            raise ValueError(f"Field '{name}' has no option source")
        if not self._upstream_filled(name):
            self._clear_options(name)
            return None
        key = self._upstream_key(name)
        self._request_ids[name] += 1
        self._option_sets[name] = OptionSet(field=name, upstream_key=key, status="loading")
        self._general_error = None
        return key, self._request_ids[name]

    def _schedule_refresh(self, name: str) -> None:
        request = self._begin_refresh(name)
        if request is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop yet: wait_idle() starts it
            self._deferred.append((name, *request))
            return
        self._track(loop.create_task(self._run_refresh(name, *request)))

    def _track(self, task: asyncio.Task) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_refresh(self, name: str, key: tuple, request_id: int) -> None:
        spec = self._spec(name)
        source = spec.option_source or ""
        params = {up.name: value for up, value in zip(self._definition.upstream_of(name), key)}
        self._logger.info("Loading options", extra={"form": self._definition.name, "field": name, "source": source})

        options = None
        reason = None
        try:
            options = await self._api.fetch_options(source, params)
        except OptionFetchError as e:
            reason = e.reason
        except Exception as e:
            self._logger.exception("Unexpected option fetch failure", extra={"field": name, "source": source})
            reason = str(e) or e.__class__.__name__

        if self._request_ids[name] != request_id or self._upstream_key(name) != key:
            self._logger.info(
                "Discarding stale options",
                extra={"form": self._definition.name, "field": name, "source": source},
            )
            return

        if reason is not None:
            self._logger.error(
                "Error loading options",
                extra={"form": self._definition.name, "field": name, "source": source, "reason": reason},
            )
            self._option_sets[name] = OptionSet(field=name)
            self._general_error = message(f"options_failed.{spec.label_key}", self._locale, reason=reason)
        else:
            self._option_sets[name] = OptionSet(field=name, upstream_key=key, options=tuple(options or ()), status="ready")
        self._notify()

    def _check_required(self) -> None:
        missing = [spec for spec in self._definition.chain if spec.required and not self._state.is_filled(spec.name)]
        if missing:
            raise MissingFieldError(
                [spec.name for spec in missing],
                [label(spec.label_key, self._locale) for spec in missing],
            )

    def _payload(self) -> dict[str, Any]:
        filled = self._state.filled()
        return {spec.name: filled[spec.name] for spec in self._definition.fields if spec.name in filled}

    def _submission_failed(self, reason: str) -> SubmissionOutcome:
        self._general_error = message("submit_failed", self._locale, reason=reason)
        self._logger.error("Error creating appointment", extra={"form": self._definition.name, "reason": reason})
        return SubmissionOutcome(status="failed", message=self._general_error)

    def _notify(self) -> None:
        if not self._observers:
            return
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                self._logger.exception("Form observer failed", extra={"form": self._definition.name})
