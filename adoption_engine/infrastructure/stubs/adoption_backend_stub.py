"""In-memory adoption backend stub for testing.

Implements every remote port (pets, reference data, favorites, adoption
terms, donation terms, my-pets, users) against dictionaries, with the
backend's own rejection messages so the error classifier sees realistic
input.

Behaviors worth knowing in tests:
- Each call first awaits ``latency`` seconds, then checks and mutates
  state without yielding. Concurrent creates for the same (pet, adopter)
  therefore produce exactly one term; the losers get a 409.
- ``fail_next(operation, status, message)`` queues one failure for the
  named operation.
- ``make_undeliverable(role)`` makes term emails to that role fail while
  the other recipients are still accepted.
- ``expire_session()`` makes every later call answer 401.
"""

from __future__ import annotations

import asyncio
from collections import Counter, defaultdict, deque
from dataclasses import replace
from datetime import datetime, timezone

from adoption_engine.application.ports.adoption_term_api import AdoptionTermRequest
from adoption_engine.application.ports.donation_term_api import DonationTermRequest
from adoption_engine.domain.errors.remote import RemoteCallError
from adoption_engine.domain.models.adoption_term import AdoptionTerm
from adoption_engine.domain.models.donation_term import ALL_COMMITMENTS, DonationTerm
from adoption_engine.domain.models.email_delivery import (
    EmailDeliveryReport,
    RecipientStatus,
)
from adoption_engine.domain.models.party import PartyProfile, PartyRole, PartySnapshot
from adoption_engine.domain.models.pet import Pet, PetStatus
from adoption_engine.domain.models.reference_data import ReferenceItem, ReferenceKind

MSG_SESSION_EXPIRED = "Sessão expirada. Faça login novamente."
MSG_PET_NOT_FOUND = "Pet não encontrado"
MSG_TERM_NOT_FOUND = "Termo não encontrado"
MSG_SELF_ADOPTION = "Você não pode adotar seu próprio pet"
MSG_MISSING_FIELDS = "Campos obrigatórios não fornecidos"
MSG_COMMITMENTS = "Todos os compromissos devem ser aceitos"
MSG_TERM_EXISTS = "Você já possui um termo para este pet"
MSG_DONATION_TERM_EXISTS = "Você já possui um termo de doação"
MSG_ALREADY_IN_MY_PETS = "Este pet já está em seus pets"
MSG_READOPTION = "Você já adotou este pet anteriormente"
MSG_FAVORITE_EXISTS = "Pet já está nos favoritos"
MSG_FAVORITE_NOT_FOUND = "Favorito não encontrado"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryAdoptionBackend:
    """Stub implementing all adoption backend ports.

    Example:
        >>> backend = InMemoryAdoptionBackend()
        >>> backend.add_user(PartyProfile(user_id=10, name="Ana", email="ana@x.org"))
        >>> backend.add_pet(Pet(id=42, owner_id=10, status_code=2, name="Rex"))
        >>> await backend.add_my_pet(42, 20)
    """

    def __init__(self, latency: float = 0.0) -> None:
        self.latency = latency
        self.calls: Counter[str] = Counter()
        self.users: dict[int, PartyProfile] = {}
        self.pets: dict[int, Pet] = {}
        self.references: dict[tuple[ReferenceKind, int], ReferenceItem] = {}
        self.favorites: dict[int, set[int]] = defaultdict(set)
        self.adoption_terms: dict[tuple[int, int], AdoptionTerm] = {}
        self.donation_terms: dict[int, DonationTerm] = {}
        self.my_pets: set[tuple[int, int]] = set()
        self.adoption_history: set[tuple[int, int]] = set()
        self.sent_emails: list[tuple[int, PartyRole, str]] = []
        self._undeliverable: set[PartyRole] = set()
        self._failures: dict[str, deque[tuple[int | None, str]]] = defaultdict(deque)
        self._session_expired = False
        self._next_term_id = 1

    # ------------------------------------------------------------------
    # Test setup
    # ------------------------------------------------------------------

    def add_user(self, profile: PartyProfile) -> None:
        self.users[profile.user_id] = profile

    def update_profile(self, user_id: int, **changes: str | None) -> PartyProfile:
        """Change a user's live profile, as if edited on another device."""
        profile = replace(self.users[user_id], **changes)
        self.users[user_id] = profile
        return profile

    def add_pet(self, pet: Pet) -> None:
        self.pets[pet.id] = pet

    def add_reference(self, item: ReferenceItem) -> None:
        self.references[(item.kind, item.id)] = item

    def record_adoption_history(self, pet_id: int, user_id: int) -> None:
        """Mark that the user adopted this pet before (triggers readoption)."""
        self.adoption_history.add((pet_id, user_id))

    def make_undeliverable(self, *roles: PartyRole) -> None:
        self._undeliverable.update(roles)

    def make_deliverable(self) -> None:
        self._undeliverable.clear()

    def fail_next(self, operation: str, status: int | None, message: str = "") -> None:
        """Queue one failure for the next call of ``operation``."""
        self._failures[operation].append((status, message))

    def expire_session(self) -> None:
        self._session_expired = True

    def restore_session(self) -> None:
        self._session_expired = False

    @property
    def donation_api(self) -> DonationTermBackendView:
        """DonationTermApiProtocol view of this backend."""
        return DonationTermBackendView(self)

    # ------------------------------------------------------------------
    # Pets
    # ------------------------------------------------------------------

    async def get_pet(self, pet_id: int) -> Pet | None:
        await self._call("get_pet")
        return self.pets.get(pet_id)

    async def list_pets_by_status(self, status: PetStatus) -> list[Pet]:
        await self._call("list_pets_by_status")
        return [pet for pet in self.pets.values() if pet.status_code == int(status)]

    async def list_pets_by_owner(self, owner_id: int) -> list[Pet]:
        await self._call("list_pets_by_owner")
        return [pet for pet in self.pets.values() if pet.owner_id == owner_id]

    async def update_status(self, pet_id: int, status: PetStatus) -> None:
        await self._call("update_status")
        pet = self.pets.get(pet_id)
        if pet is None:
            raise RemoteCallError(404, MSG_PET_NOT_FOUND, "update_status")
        self.pets[pet_id] = pet.with_status(status)

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------

    async def get_reference(self, kind: ReferenceKind, item_id: int) -> ReferenceItem | None:
        await self._call("get_reference")
        return self.references.get((kind, item_id))

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------

    async def is_favorite(self, user_id: int, pet_id: int) -> bool:
        await self._call("is_favorite")
        return pet_id in self.favorites[user_id]

    async def add_favorite(self, user_id: int, pet_id: int) -> None:
        await self._call("add_favorite")
        if pet_id in self.favorites[user_id]:
            raise RemoteCallError(409, MSG_FAVORITE_EXISTS, "add_favorite")
        self.favorites[user_id].add(pet_id)

    async def remove_favorite(self, user_id: int, pet_id: int) -> None:
        await self._call("remove_favorite")
        if pet_id not in self.favorites[user_id]:
            raise RemoteCallError(404, MSG_FAVORITE_NOT_FOUND, "remove_favorite")
        self.favorites[user_id].discard(pet_id)

    async def list_favorites(self, user_id: int) -> list[int]:
        await self._call("list_favorites")
        return sorted(self.favorites[user_id])

    # ------------------------------------------------------------------
    # Adoption terms
    # ------------------------------------------------------------------

    async def get_term_by_pet(self, pet_id: int, viewer_id: int) -> AdoptionTerm | None:
        await self._call("get_term_by_pet")
        pet = self.pets.get(pet_id)
        for (term_pet, adopter_id), term in self.adoption_terms.items():
            if term_pet != pet_id:
                continue
            if adopter_id == viewer_id or (pet is not None and pet.owner_id == viewer_id):
                return term
        return None

    async def create_or_update_term(
        self, request: AdoptionTermRequest, *, update: bool = False
    ) -> AdoptionTerm:
        operation = "update_adoption_term" if update else "create_adoption_term"
        await self._call(operation)
        pet = self.pets.get(request.pet_id)
        if pet is None:
            raise RemoteCallError(404, MSG_PET_NOT_FOUND, operation)
        if pet.owner_id == request.adopter_id:
            raise RemoteCallError(400, MSG_SELF_ADOPTION, operation)
        if not request.signature.strip():
            raise RemoteCallError(400, MSG_MISSING_FIELDS, operation)

        key = (request.pet_id, request.adopter_id)
        existing = self.adoption_terms.get(key)
        if existing is not None and not update:
            raise RemoteCallError(409, MSG_TERM_EXISTS, operation)
        if existing is None and update:
            raise RemoteCallError(404, MSG_TERM_NOT_FOUND, operation)

        term = AdoptionTerm(
            id=existing.id if existing is not None else self._new_term_id(),
            pet_id=request.pet_id,
            adopter_id=request.adopter_id,
            donor=self._snapshot(pet.owner_id),
            adopter=self._snapshot(request.adopter_id),
            signature=request.signature,
            observations=request.observations,
            content_hash=f"sha256:{request.pet_id}:{request.adopter_id}:{request.signature}",
        )
        self.adoption_terms[key] = term
        return term

    async def send_term_email(self, term_id: int) -> EmailDeliveryReport:
        await self._call("send_term_email")
        for key, term in self.adoption_terms.items():
            if term.id == term_id:
                report = self._deliver(term_id, term.snapshots())
                if report.is_complete((PartyRole.DONOR, PartyRole.ADOPTER)):
                    self.adoption_terms[key] = replace(term, email_sent_at=report.sent_at)
                return report
        raise RemoteCallError(404, MSG_TERM_NOT_FOUND, "send_term_email")

    # ------------------------------------------------------------------
    # Donation terms
    # ------------------------------------------------------------------

    async def get_my_term(self, donor_id: int) -> DonationTerm | None:
        await self._call("get_my_term")
        return self.donation_terms.get(donor_id)

    async def create_donation_term(
        self, request: DonationTermRequest, *, update: bool = False
    ) -> DonationTerm:
        operation = "update_donation_term" if update else "create_donation_term"
        await self._call(operation)
        if not request.motive.strip() or not request.signature.strip():
            raise RemoteCallError(400, MSG_MISSING_FIELDS, operation)
        if request.commitments != ALL_COMMITMENTS:
            raise RemoteCallError(400, MSG_COMMITMENTS, operation)

        existing = self.donation_terms.get(request.donor_id)
        if existing is not None and not update:
            raise RemoteCallError(409, MSG_DONATION_TERM_EXISTS, operation)
        if existing is None and update:
            raise RemoteCallError(404, MSG_TERM_NOT_FOUND, operation)

        term = DonationTerm(
            id=existing.id if existing is not None else self._new_term_id(),
            donor_id=request.donor_id,
            donor=self._snapshot(request.donor_id),
            motive=request.motive,
            signature=request.signature,
            adoption_conditions=request.adoption_conditions,
            observations=request.observations,
        )
        self.donation_terms[request.donor_id] = term
        return term

    async def send_donation_term_email(self, term_id: int) -> EmailDeliveryReport:
        await self._call("send_donation_term_email")
        for donor_id, term in self.donation_terms.items():
            if term.id == term_id:
                report = self._deliver(term_id, term.snapshots())
                if report.is_complete((PartyRole.DONOR,)):
                    self.donation_terms[donor_id] = replace(
                        term, email_sent_at=report.sent_at
                    )
                return report
        raise RemoteCallError(404, MSG_TERM_NOT_FOUND, "send_donation_term_email")

    # ------------------------------------------------------------------
    # My pets and users
    # ------------------------------------------------------------------

    async def add_my_pet(self, pet_id: int, user_id: int, *, force: bool = False) -> None:
        await self._call("add_my_pet")
        pet = self.pets.get(pet_id)
        if pet is None:
            raise RemoteCallError(404, MSG_PET_NOT_FOUND, "add_my_pet")
        if pet.owner_id == user_id:
            raise RemoteCallError(400, MSG_SELF_ADOPTION, "add_my_pet")
        key = (pet_id, user_id)
        if key in self.my_pets:
            raise RemoteCallError(409, MSG_ALREADY_IN_MY_PETS, "add_my_pet")
        if key in self.adoption_history and not force:
            raise RemoteCallError(409, MSG_READOPTION, "add_my_pet")
        self.my_pets.add(key)

    async def get_profile(self, user_id: int) -> PartyProfile | None:
        await self._call("get_profile")
        return self.users.get(user_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _call(self, operation: str) -> None:
        self.calls[operation] += 1
        await asyncio.sleep(self.latency)
        if self._session_expired:
            raise RemoteCallError(401, MSG_SESSION_EXPIRED, operation)
        if self._failures[operation]:
            status, message = self._failures[operation].popleft()
            raise RemoteCallError(status, message, operation)

    def _new_term_id(self) -> int:
        term_id = self._next_term_id
        self._next_term_id += 1
        return term_id

    def _snapshot(self, user_id: int) -> PartySnapshot:
        profile = self.users.get(user_id)
        if profile is None:
            return PartySnapshot(name=f"user-{user_id}")
        return profile.snapshot()

    def _deliver(
        self, term_id: int, snapshots: dict[PartyRole, PartySnapshot]
    ) -> EmailDeliveryReport:
        recipients = []
        for role, snapshot in snapshots.items():
            accepted = bool(snapshot.email) and role not in self._undeliverable
            if accepted:
                self.sent_emails.append((term_id, role, snapshot.email or ""))
            recipients.append(
                RecipientStatus(role=role, address=snapshot.email, accepted=accepted)
            )
        return EmailDeliveryReport(
            term_id=term_id, recipients=tuple(recipients), sent_at=_utc_now()
        )


class DonationTermBackendView:
    """Routes the donation term port onto InMemoryAdoptionBackend."""

    def __init__(self, backend: InMemoryAdoptionBackend) -> None:
        self._backend = backend

    async def get_my_term(self, donor_id: int) -> DonationTerm | None:
        return await self._backend.get_my_term(donor_id)

    async def create_or_update_term(
        self, request: DonationTermRequest, *, update: bool = False
    ) -> DonationTerm:
        return await self._backend.create_donation_term(request, update=update)

    async def send_term_email(self, term_id: int) -> EmailDeliveryReport:
        return await self._backend.send_donation_term_email(term_id)
