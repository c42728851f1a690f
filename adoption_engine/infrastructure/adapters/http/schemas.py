"""Wire schemas for the adoption backend.

Pydantic models for the backend's JSON dialect (Portuguese field names,
snake_case records, camelCase request bodies). Each response model
converts itself into the matching domain model so adapters never build
domain objects from raw dicts.

The backend is loose about types: ids sometimes arrive as strings, ages
as free text, locations as either a name or a ``{"nome": ...}`` object.
Validators here absorb those variations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from adoption_engine.domain.models.adoption_term import AdoptionTerm
from adoption_engine.domain.models.donation_term import DonationTerm
from adoption_engine.domain.models.email_delivery import (
    EmailDeliveryReport,
    RecipientStatus,
)
from adoption_engine.domain.models.party import PartyProfile, PartyRole, PartySnapshot
from adoption_engine.domain.models.pet import Pet
from adoption_engine.domain.models.reference_data import ReferenceItem, ReferenceKind

_WIRE_CONFIG = ConfigDict(populate_by_name=True, extra="ignore")


def _location_name(value: Any) -> str | None:
    if isinstance(value, dict):
        value = value.get("nome")
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class PetSchema(BaseModel):
    """Pet record as returned by ``/pets`` endpoints."""

    model_config = _WIRE_CONFIG

    id: int
    owner_id: int = Field(alias="usuario_id")
    status_id: int
    name: str = Field(default="", alias="nome")
    breed_id: int | None = Field(default=None, alias="raca_id")
    age_band_id: int | None = Field(default=None, alias="faixa_etaria_id")
    age: int | None = Field(default=None, alias="idade")
    photo: str | None = Field(default=None, alias="foto")
    disease_ids: list[int] = Field(default_factory=list, alias="doencas")

    @field_validator("age", mode="before")
    @classmethod
    def parse_age(cls, value: Any) -> int | None:
        """Accept ``3``, ``"3"`` and ``"3 anos"``; anything else is unknown."""
        if value is None or isinstance(value, int):
            return value
        digits = "".join(ch for ch in str(value) if ch.isdigit())
        return int(digits) if digits else None

    @field_validator("disease_ids", mode="before")
    @classmethod
    def parse_diseases(cls, value: Any) -> list[int]:
        if not value:
            return []
        ids = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("doencas_deficiencias_id", item.get("id"))
            if item is not None:
                ids.append(int(item))
        return ids

    def to_domain(self) -> Pet:
        return Pet(
            id=self.id,
            owner_id=self.owner_id,
            status_code=self.status_id,
            name=self.name,
            breed_id=self.breed_id,
            age_band_id=self.age_band_id,
            age=self.age,
            photo_url=self.photo,
            disease_ids=tuple(self.disease_ids),
        )


class ReferenceSchema(BaseModel):
    """Row of a lookup table (``/racas``, ``/status``, ...)."""

    model_config = _WIRE_CONFIG

    id: int
    name: str = Field(default="", alias="nome")

    def to_domain(self, kind: ReferenceKind) -> ReferenceItem:
        return ReferenceItem(kind=kind, id=self.id, name=self.name)


class UserSchema(BaseModel):
    """User record from ``/usuarios/{id}``."""

    model_config = _WIRE_CONFIG

    id: int
    name: str = Field(default="", alias="nome")
    email: str | None = None
    phone: str | None = Field(default=None, alias="telefone")
    city: str | None = Field(default=None, alias="cidade")
    state: str | None = Field(default=None, alias="estado")

    @field_validator("city", "state", mode="before")
    @classmethod
    def parse_location(cls, value: Any) -> str | None:
        return _location_name(value)

    def to_domain(self) -> PartyProfile:
        return PartyProfile(
            user_id=self.id,
            name=self.name,
            email=self.email,
            phone=self.phone,
            city=self.city,
            state=self.state,
        )


class AdoptionTermSchema(BaseModel):
    """Adoption term record from ``/termos-compromisso``."""

    model_config = _WIRE_CONFIG

    id: int
    pet_id: int
    adopter_id: int = Field(alias="adotante_id")
    donor_name: str = Field(default="", alias="doador_nome")
    donor_email: str | None = Field(default=None, alias="doador_email")
    donor_phone: str | None = Field(default=None, alias="doador_telefone")
    donor_city: str | None = Field(default=None, alias="doador_cidade_nome")
    donor_state: str | None = Field(default=None, alias="doador_estado_nome")
    adopter_name: str = Field(default="", alias="adotante_nome")
    adopter_email: str | None = Field(default=None, alias="adotante_email")
    adopter_phone: str | None = Field(default=None, alias="adotante_telefone")
    adopter_city: str | None = Field(default=None, alias="adotante_cidade_nome")
    adopter_state: str | None = Field(default=None, alias="adotante_estado_nome")
    signature: str = Field(default="", alias="assinatura_digital")
    observations: str | None = Field(default=None, alias="observacoes")
    content_hash: str | None = Field(default=None, alias="hash_documento")
    signed_at: datetime | None = Field(default=None, alias="data_assinatura")
    email_sent_at: datetime | None = Field(default=None, alias="data_envio_email")
    name_outdated: bool = Field(default=False, alias="nomeDesatualizado")

    def to_domain(self) -> AdoptionTerm:
        extra: dict[str, Any] = {}
        if self.signed_at is not None:
            extra["created_at"] = self.signed_at
        return AdoptionTerm(
            id=self.id,
            pet_id=self.pet_id,
            adopter_id=self.adopter_id,
            donor=PartySnapshot(
                name=self.donor_name,
                email=self.donor_email,
                phone=self.donor_phone,
                city=self.donor_city,
                state=self.donor_state,
            ),
            adopter=PartySnapshot(
                name=self.adopter_name,
                email=self.adopter_email,
                phone=self.adopter_phone,
                city=self.adopter_city,
                state=self.adopter_state,
            ),
            signature=self.signature,
            observations=self.observations,
            content_hash=self.content_hash,
            email_sent_at=self.email_sent_at,
            name_outdated=self.name_outdated,
            **extra,
        )


class DonationTermSchema(BaseModel):
    """Donation term record from ``/termos-doacao``."""

    model_config = _WIRE_CONFIG

    id: int
    donor_id: int | None = Field(default=None, alias="doador_id")
    donor_name: str = Field(default="", alias="doador_nome")
    donor_email: str | None = Field(default=None, alias="doador_email")
    donor_phone: str | None = Field(default=None, alias="doador_telefone")
    city: str | None = Field(default=None, alias="cidade")
    state: str | None = Field(default=None, alias="estado")
    motive: str = Field(default="", alias="motivo_doacao")
    adoption_conditions: str | None = Field(default=None, alias="condicoes_adocao")
    observations: str | None = Field(default=None, alias="observacoes")
    signature: str = Field(default="", alias="assinatura_digital")
    content_hash: str | None = Field(default=None, alias="hash_documento")
    signed_at: datetime | None = Field(default=None, alias="data_assinatura")
    email_sent_at: datetime | None = Field(default=None, alias="data_envio_pdf")

    @field_validator("city", "state", mode="before")
    @classmethod
    def parse_location(cls, value: Any) -> str | None:
        return _location_name(value)

    def to_domain(self, donor_id: int) -> DonationTerm:
        extra: dict[str, Any] = {}
        if self.signed_at is not None:
            extra["created_at"] = self.signed_at
        return DonationTerm(
            id=self.id,
            donor_id=self.donor_id if self.donor_id is not None else donor_id,
            donor=PartySnapshot(
                name=self.donor_name,
                email=self.donor_email,
                phone=self.donor_phone,
                city=self.city,
                state=self.state,
            ),
            motive=self.motive,
            signature=self.signature,
            adoption_conditions=self.adoption_conditions,
            observations=self.observations,
            content_hash=self.content_hash,
            email_sent_at=self.email_sent_at,
            **extra,
        )


class RecipientsSchema(BaseModel):
    """Per-role addresses the backend accepted."""

    model_config = _WIRE_CONFIG

    donor: str | None = Field(default=None, alias="doador")
    adopter: str | None = Field(default=None, alias="adotante")


class EmailSendSchema(BaseModel):
    """``data`` section of an email send response.

    Two shapes exist: the current one names both recipients under
    ``destinatarios``; the legacy one carries a single ``destinatario``
    which only confirms the donor.
    """

    model_config = _WIRE_CONFIG

    term_id: int | None = Field(default=None, alias="termoId")
    recipients: RecipientsSchema | None = Field(default=None, alias="destinatarios")
    recipient: str | None = Field(default=None, alias="destinatario")
    sent_at: datetime | None = Field(default=None, alias="dataEnvio")

    def to_report(
        self, term_id: int, roles: tuple[PartyRole, ...]
    ) -> EmailDeliveryReport:
        if self.recipients is not None:
            addresses = {
                PartyRole.DONOR: self.recipients.donor,
                PartyRole.ADOPTER: self.recipients.adopter,
            }
        else:
            addresses = {PartyRole.DONOR: self.recipient}
        recipients = tuple(
            RecipientStatus(
                role=role,
                address=addresses.get(role) or None,
                accepted=bool(addresses.get(role)),
            )
            for role in roles
        )
        return EmailDeliveryReport(term_id=term_id, recipients=recipients, sent_at=self.sent_at)


class FavoriteCheckSchema(BaseModel):
    """Response of the favorite check endpoint."""

    model_config = _WIRE_CONFIG

    is_favorite: bool = Field(default=False, alias="isFavorito")


class FavoriteSchema(BaseModel):
    """One favorite row from ``/favoritos/usuario/{id}``."""

    model_config = _WIRE_CONFIG

    pet_id: int


class ErrorBodySchema(BaseModel):
    """Error body; the backend always sends ``message`` when it sends JSON."""

    model_config = _WIRE_CONFIG

    message: str = ""
