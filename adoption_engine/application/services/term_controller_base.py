"""Shared term controller machinery.

A term controller drives one TermMachine through the pure ``advance``
function and executes the resulting effects against the remote ports.
Adoption and donation controllers differ only in how they fetch, sign
and deliver their term; everything else lives here.

Constraints:
- One operation per term key at a time, across controller instances
  (shared KeyedLock). A second one raises TermOperationInProgressError.
- After close(), remote results no longer change the controller's state
  and never raise, but a successful delivery is still recorded.
- Failures leave the machine in a state from which the user can retry.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Hashable, Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from adoption_engine.application.ports.user_api import UserApiProtocol
from adoption_engine.application.services.base import LoggingMixin
from adoption_engine.application.services.keyed_lock import KeyedLock
from adoption_engine.application.services.remote_errors import raise_if_session_expired
from adoption_engine.application.services.sponsor_gate_service import SponsorGateService
from adoption_engine.domain.errors.remote import RemoteCallError
from adoption_engine.domain.errors.term import (
    TermControllerClosedError,
    TermDeliveryError,
    TermOperationInProgressError,
    TermServiceUnavailableError,
)
from adoption_engine.domain.errors.validation import TermValidationError
from adoption_engine.domain.exceptions import AdoptionEngineError
from adoption_engine.domain.models.email_delivery import EmailDeliveryReport
from adoption_engine.domain.models.party import PartyProfile, PartyRole
from adoption_engine.domain.models.remote_error import ClassifiedError, ErrorKind
from adoption_engine.domain.models.term_lifecycle import (
    DraftSubmitted,
    EmailFailed,
    EmailReported,
    EmailRequested,
    SubmitFailed,
    TermDraft,
    TermEffectKind,
    TermEvent,
    TermLoaded,
    TermMachine,
    TermMissing,
    TermSigned,
    TermState,
    TermTransition,
)
from adoption_engine.domain.services.term_transitions import advance
from adoption_engine.infrastructure.observability.correlation import correlation_scope

SubmitCall = Callable[[bool], Awaitable[Any]]

_CANCELLED = ClassifiedError(ErrorKind.TRANSIENT, "operation cancelled")


class TermControllerBase(LoggingMixin, ABC):
    """Drives one term lifecycle against the backend.

    Subclasses implement the fetch/sign/deliver hooks.
    """

    expected_roles: tuple[PartyRole, ...] = ()

    def __init__(
        self,
        term_key: Hashable,
        viewer_id: int,
        user_api: UserApiProtocol,
        locks: KeyedLock,
        sponsor_gate: SponsorGateService,
        component: str,
    ) -> None:
        self._term_key = term_key
        self._viewer_id = viewer_id
        self._users = user_api
        self._locks = locks
        self._sponsor_gate = sponsor_gate
        self._machine = TermMachine()
        self._closed = False
        self._terminal_error: AdoptionEngineError | None = None
        self._profiles: dict[int, PartyProfile | None] = {}
        self._init_logger(component=component)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def machine(self) -> TermMachine:
        return self._machine

    @property
    def state(self) -> TermState:
        return self._machine.state

    @property
    def term(self) -> Any:
        return self._machine.term

    @property
    def draft(self) -> TermDraft | None:
        return self._machine.draft

    @property
    def term_key(self) -> Hashable:
        return self._term_key

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_busy(self) -> bool:
        """Whether any controller is running an operation on this term."""
        return self._locks.is_held(self._term_key)

    def close(self) -> None:
        """Detach the controller; in-flight results are ignored from now on."""
        if not self._closed:
            self._closed = True
            self._log_operation("close", state=self.state.value).info(
                "term_controller_closed"
            )

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    @abstractmethod
    async def _fetch(self) -> Any:
        """Current term from the backend, or None."""

    @abstractmethod
    async def _send(self, term_id: int) -> EmailDeliveryReport:
        """Email the term to its recipients."""

    async def _emailed_hint(self) -> bool:
        return False

    async def _record_emailed(self) -> None:
        """Persist the fact that the term was delivered."""

    @abstractmethod
    async def _live_profiles(self) -> dict[PartyRole, PartyProfile | None]:
        """Live profiles of the parties named in the term."""

    def _submit_error(self, exc: RemoteCallError) -> AdoptionEngineError:
        """Map a classified create/update failure to a service error."""
        if exc.kind == ErrorKind.VALIDATION:
            return TermValidationError([], message=exc.message)
        return TermServiceUnavailableError("submit", exc.message)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def open(self) -> TermMachine:
        """Load the term, showing the form when none exists.

        A loaded term lands in CREATED or EMAILED; when a party's data
        diverged from its snapshot the machine goes STALE and then
        DRAFTING with a re-signature draft.

        Raises:
            TermOperationInProgressError: If the term is busy.
            SessionExpiredError: If the session expired.
            TermServiceUnavailableError: On other remote failures.
        """
        with self._operation("open") as log:
            try:
                term = await self._fetch()
                if term is None:
                    event: TermEvent = TermMissing(draft=await self._new_draft())
                else:
                    event = TermLoaded(
                        term=term,
                        emailed_hint=await self._emailed_hint(),
                        live=await self._live_profiles(),
                        signer_name=await self._signer_name(),
                    )
            except RemoteCallError as exc:
                log.warning("term_open_failed", kind=exc.kind.value, error=exc.message)
                if self._closed:
                    return self._machine
                raise_if_session_expired(exc, "open_term")
                raise TermServiceUnavailableError("open", exc.message) from exc

            machine = self._apply(event).machine
            if machine.stale_roles:
                log.info(
                    "term_stale_resign_required",
                    roles=[role.value for role in machine.stale_roles],
                )
            log.info("term_opened", state=machine.state.value)
            return self._machine

    async def send_email(self) -> TermMachine:
        """Email a CREATED term to every expected recipient.

        On full delivery the machine becomes EMAILED, the delivery is
        recorded and the sponsor gate is awaited before returning.

        Raises:
            InvalidTermTransitionError: If the term is not CREATED.
            TermDeliveryError: If any recipient was not accepted.
            SessionExpiredError: If the session expired.
            TermServiceUnavailableError: On other remote failures.
        """
        with self._operation("send_email") as log:
            self._apply(EmailRequested())
            term = self._machine.term
            log = log.bind(term_id=term.id)
            try:
                report = await self._send(term.id)
            except RemoteCallError as exc:
                self._apply(EmailFailed(error=exc.classification))
                log.warning("term_email_failed", kind=exc.kind.value, error=exc.message)
                if self._closed:
                    return self._machine
                raise_if_session_expired(exc, "send_term_email")
                if exc.kind == ErrorKind.DELIVERY:
                    raise TermDeliveryError(
                        term.id, self._all_recipients(term), exc.message
                    ) from exc
                raise TermServiceUnavailableError("send_email", exc.message) from exc
            except asyncio.CancelledError:
                self._apply(EmailFailed(error=_CANCELLED))
                log.info("term_email_cancelled", state=self._machine.state.value)
                raise

            transition = self._apply(
                EmailReported(
                    report=report,
                    expected_roles=self.expected_roles,
                    fallback_addresses=_snapshot_addresses(term),
                )
            )
            for effect in transition.effects:
                if effect.kind == TermEffectKind.RECORD_EMAILED:
                    await self._record_emailed()
                    log.info("term_emailed")
                elif effect.kind == TermEffectKind.PRESENT_SPONSOR:
                    if not self._closed:
                        await self._sponsor_gate.present()
                elif effect.kind == TermEffectKind.REPORT_ERROR:
                    failed = tuple(effect.payload["failed_recipients"])
                    log.warning(
                        "term_email_partial_failure",
                        failed_roles=[role.value for role, _ in failed],
                    )
                    if not self._closed:
                        raise TermDeliveryError(term.id, failed)
            return self._machine

    async def _submit(
        self, signature: str, observations: str | None, call: SubmitCall
    ) -> TermMachine:
        """Run a create/update through the machine.

        Args:
            signature: Validated signature.
            observations: Optional observations.
            call: Issues the remote create/update given the update flag.
        """
        with self._operation("submit") as log:
            transition = self._apply(
                DraftSubmitted(signature=signature, observations=observations)
            )
            update = transition.machine.is_update
            log = log.bind(update=update)

            created: Any = None
            already_existed = False
            try:
                created = await call(update)
            except RemoteCallError as exc:
                if exc.kind == ErrorKind.ALREADY_EXISTS and not update:
                    already_existed = True
                    log.info("term_already_exists", error=exc.message)
                else:
                    return self._submit_failed(log, exc)
            except asyncio.CancelledError:
                self._submit_cancelled(log)
                raise

            try:
                term = await self._fetch() or created
                hint = await self._emailed_hint()
            except RemoteCallError as exc:
                return self._submit_failed(log, exc)
            except asyncio.CancelledError:
                self._submit_cancelled(log)
                raise
            if term is None:
                missing = RemoteCallError(None, "term missing after submit", "get_term")
                return self._submit_failed(log, missing)

            machine = self._apply(
                TermSigned(term=term, already_existed=already_existed, emailed_hint=hint)
            ).machine
            log.info("term_signed", term_id=term.id, state=machine.state.value)
            return self._machine

    def _submit_cancelled(self, log: structlog.BoundLogger) -> None:
        self._apply(SubmitFailed(error=_CANCELLED))
        log.info("term_submit_cancelled", state=self._machine.state.value)

    def _submit_failed(self, log: structlog.BoundLogger, exc: RemoteCallError) -> TermMachine:
        self._apply(SubmitFailed(error=exc.classification))
        log.warning("term_submit_failed", kind=exc.kind.value, error=exc.message)
        if self._closed:
            return self._machine
        raise_if_session_expired(exc, "submit_term")
        raise self._submit_error(exc) from exc

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _operation(self, name: str) -> Iterator[structlog.BoundLogger]:
        if self._closed:
            raise TermControllerClosedError(self._term_key, name)
        if self._terminal_error is not None:
            raise self._terminal_error
        with correlation_scope():
            log = self._log_operation(name, term_key=str(self._term_key))
            with self._locks.holding(self._term_key) as acquired:
                if not acquired:
                    log.info("term_operation_rejected_busy")
                    raise TermOperationInProgressError(self._term_key, name)
                self._profiles.clear()
                yield log

    def _apply(self, event: TermEvent) -> TermTransition:
        transition = advance(self._machine, event)
        if self._closed:
            self._log.info(
                "late_term_result_ignored",
                term_key=str(self._term_key),
                event=type(event).__name__,
                state=self._machine.state.value,
            )
        else:
            self._machine = transition.machine
        return transition

    async def _profile(self, user_id: int) -> PartyProfile | None:
        """Live profile, fetched once per operation."""
        if user_id not in self._profiles:
            self._profiles[user_id] = await self._users.get_profile(user_id)
        return self._profiles[user_id]

    async def _profiles_for(
        self, ids: dict[PartyRole, int]
    ) -> dict[PartyRole, PartyProfile | None]:
        roles = list(ids)
        profiles = await asyncio.gather(*(self._profile(ids[role]) for role in roles))
        return dict(zip(roles, profiles))

    async def _signer_name(self) -> str:
        profile = await self._profile(self._viewer_id)
        return profile.name if profile is not None else ""

    async def _new_draft(self) -> TermDraft:
        live = await self._live_profiles()
        return TermDraft(
            signature=await self._signer_name(),
            parties={
                role: profile.snapshot()
                for role, profile in live.items()
                if profile is not None
            },
        )

    def _all_recipients(self, term: Any) -> tuple[tuple[PartyRole, str | None], ...]:
        addresses = _snapshot_addresses(term)
        return tuple((role, addresses.get(role)) for role in self.expected_roles)


def _snapshot_addresses(term: Any) -> dict[PartyRole, str | None]:
    return {role: snapshot.email for role, snapshot in term.snapshots().items()}
