"""HTTP adapter for the adoption backend.

Implements every remote port over one ``httpx.AsyncClient``. The bearer
token is read from the device session on each request so a login or a
logout takes effect without rebuilding the client.

Failure contract:
- Non-2xx answers raise RemoteCallError carrying the status and the
  backend's ``message`` field.
- Transport failures (connect errors, timeouts) raise RemoteCallError
  with no status.
- A 401 clears the device session before raising.
- A 404 on a lookup (pet, user, term, reference row) returns None.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from adoption_engine.application.ports.adoption_term_api import AdoptionTermRequest
from adoption_engine.application.ports.donation_term_api import DonationTermRequest
from adoption_engine.application.services.device_session import DeviceSession
from adoption_engine.config.engine_config import EngineConfig
from adoption_engine.domain.errors.remote import RemoteCallError
from adoption_engine.domain.models.adoption_term import AdoptionTerm
from adoption_engine.domain.models.donation_term import DonationCommitment, DonationTerm
from adoption_engine.domain.models.email_delivery import EmailDeliveryReport
from adoption_engine.domain.models.party import PartyProfile, PartyRole
from adoption_engine.domain.models.pet import Pet, PetStatus
from adoption_engine.domain.models.reference_data import ReferenceItem, ReferenceKind
from adoption_engine.infrastructure.adapters.http.schemas import (
    AdoptionTermSchema,
    DonationTermSchema,
    EmailSendSchema,
    ErrorBodySchema,
    FavoriteCheckSchema,
    FavoriteSchema,
    PetSchema,
    ReferenceSchema,
    UserSchema,
)
from adoption_engine.infrastructure.observability.logging import (
    get_logger_for_component,
)

REFERENCE_PATHS: dict[ReferenceKind, str] = {
    ReferenceKind.BREED: "/racas/{id}",
    ReferenceKind.STATUS: "/status/{id}",
    ReferenceKind.AGE_BAND: "/faixa-etaria/{id}",
    ReferenceKind.DISEASE: "/doencasdeficiencias/{id}",
}

ADOPTION_EMAIL_ROLES = (PartyRole.DONOR, PartyRole.ADOPTER)
DONATION_EMAIL_ROLES = (PartyRole.DONOR,)


def _unwrap(payload: Any) -> Any:
    """Strip the ``{"message": ..., "data": ...}`` envelope when present."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class AdoptionApiClient:
    """httpx implementation of the pet, favorite, term, my-pets and user ports.

    Usage:
        async with AdoptionApiClient(config, session) as api:
            pet = await api.get_pet(42)
    """

    def __init__(
        self,
        config: EngineConfig,
        session: DeviceSession | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._client = httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.api_timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self._log = get_logger_for_component("AdoptionApiClient", "http")

    async def __aenter__(self) -> AdoptionApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Pets
    # ------------------------------------------------------------------

    async def get_pet(self, pet_id: int) -> Pet | None:
        payload = await self._request("GET", f"/pets/{pet_id}", "get_pet", missing_ok=True)
        if payload is None:
            return None
        data = _unwrap(payload)
        if not data:
            return None
        return self._parse(PetSchema, data, "get_pet").to_domain()

    async def list_pets_by_status(self, status: PetStatus) -> list[Pet]:
        payload = await self._request(
            "GET", f"/pets/status/{int(status)}", "list_pets_by_status"
        )
        return [
            self._parse(PetSchema, item, "list_pets_by_status").to_domain()
            for item in _unwrap(payload) or []
        ]

    async def list_pets_by_owner(self, owner_id: int) -> list[Pet]:
        payload = await self._request(
            "GET", f"/pets/usuario/{owner_id}", "list_pets_by_owner", missing_ok=True
        )
        return [
            self._parse(PetSchema, item, "list_pets_by_owner").to_domain()
            for item in _unwrap(payload) or []
        ]

    async def update_status(self, pet_id: int, status: PetStatus) -> None:
        await self._request(
            "PUT",
            f"/pets/status/{pet_id}",
            "update_status",
            json={"status_id": int(status)},
        )

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------

    async def get_reference(self, kind: ReferenceKind, item_id: int) -> ReferenceItem | None:
        path = REFERENCE_PATHS[kind].format(id=item_id)
        payload = await self._request("GET", path, "get_reference", missing_ok=True)
        data = _unwrap(payload)
        if isinstance(data, list):
            data = data[0] if data else None
        if not data:
            return None
        return self._parse(ReferenceSchema, data, "get_reference").to_domain(kind)

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------

    async def is_favorite(self, user_id: int, pet_id: int) -> bool:
        payload = await self._request(
            "GET", f"/favoritos/usuario/{user_id}/pet/{pet_id}/check", "is_favorite"
        )
        check = self._parse(FavoriteCheckSchema, _unwrap(payload) or {}, "is_favorite")
        return check.is_favorite

    async def add_favorite(self, user_id: int, pet_id: int) -> None:
        await self._request(
            "POST", f"/favoritos/usuario/{user_id}/pet/{pet_id}", "add_favorite"
        )

    async def remove_favorite(self, user_id: int, pet_id: int) -> None:
        await self._request(
            "DELETE", f"/favoritos/usuario/{user_id}/pet/{pet_id}", "remove_favorite"
        )

    async def list_favorites(self, user_id: int) -> list[int]:
        payload = await self._request(
            "GET", f"/favoritos/usuario/{user_id}", "list_favorites", missing_ok=True
        )
        return [
            self._parse(FavoriteSchema, item, "list_favorites").pet_id
            for item in _unwrap(payload) or []
        ]

    # ------------------------------------------------------------------
    # Adoption terms
    # ------------------------------------------------------------------

    async def get_term_by_pet(self, pet_id: int, viewer_id: int) -> AdoptionTerm | None:
        payload = await self._request(
            "GET", f"/termos-compromisso/pet/{pet_id}", "get_term_by_pet", missing_ok=True
        )
        data = _unwrap(payload)
        if not data:
            return None
        return self._parse(AdoptionTermSchema, data, "get_term_by_pet").to_domain()

    async def create_or_update_term(
        self, request: AdoptionTermRequest, *, update: bool = False
    ) -> AdoptionTerm:
        body: dict[str, Any] = {
            "petId": request.pet_id,
            "assinaturaDigital": request.signature,
            "observacoes": request.observations,
            "isNameUpdate": update,
        }
        payload = await self._request(
            "POST", "/termos-compromisso", "create_adoption_term", json=body
        )
        return self._parse(
            AdoptionTermSchema, _unwrap(payload), "create_adoption_term"
        ).to_domain()

    async def send_term_email(self, term_id: int) -> EmailDeliveryReport:
        payload = await self._request(
            "POST", f"/termos-compromisso/{term_id}/enviar-email", "send_term_email"
        )
        report = self._parse(
            EmailSendSchema, _unwrap(payload) or {}, "send_term_email"
        ).to_report(term_id, ADOPTION_EMAIL_ROLES)
        self._log.info(
            "term_email_report",
            term_id=term_id,
            accepted=[s.role.value for s in report.recipients if s.accepted],
        )
        return report

    # ------------------------------------------------------------------
    # Donation terms
    # ------------------------------------------------------------------

    async def get_my_term(self, donor_id: int) -> DonationTerm | None:
        payload = await self._request(
            "GET", "/termos-doacao/meu-termo", "get_my_term", missing_ok=True
        )
        data = _unwrap(payload)
        if not data:
            return None
        return self._parse(DonationTermSchema, data, "get_my_term").to_domain(donor_id)

    async def create_donation_term(
        self, request: DonationTermRequest, *, update: bool = False
    ) -> DonationTerm:
        body: dict[str, Any] = {
            "motivoDoacao": request.motive,
            "assinaturaDigital": request.signature,
            "condicoesAdocao": request.adoption_conditions,
            "observacoes": request.observations,
            "isDataUpdate": update,
        }
        for commitment in DonationCommitment:
            body[commitment.value] = commitment in request.commitments
        payload = await self._request(
            "POST", "/termos-doacao", "create_donation_term", json=body
        )
        return self._parse(
            DonationTermSchema, _unwrap(payload), "create_donation_term"
        ).to_domain(request.donor_id)

    async def send_donation_term_email(self, term_id: int) -> EmailDeliveryReport:
        payload = await self._request(
            "POST", f"/termos-doacao/{term_id}/enviar-pdf", "send_donation_term_email"
        )
        return self._parse(
            EmailSendSchema, _unwrap(payload) or {}, "send_donation_term_email"
        ).to_report(term_id, DONATION_EMAIL_ROLES)

    # ------------------------------------------------------------------
    # My pets and users
    # ------------------------------------------------------------------

    async def add_my_pet(self, pet_id: int, user_id: int, *, force: bool = False) -> None:
        body: dict[str, Any] = {"pet_id": pet_id, "usuario_id": user_id}
        if force:
            body["force"] = True
        await self._request("POST", "/mypets", "add_my_pet", json=body)

    async def get_profile(self, user_id: int) -> PartyProfile | None:
        payload = await self._request(
            "GET", f"/usuarios/{user_id}", "get_profile", missing_ok=True
        )
        data = _unwrap(payload)
        if not data:
            return None
        return self._parse(UserSchema, data, "get_profile").to_domain()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        json: dict[str, Any] | None = None,
        missing_ok: bool = False,
    ) -> Any:
        log = self._log.bind(operation=operation, method=method, path=path)
        headers: dict[str, str] = {}
        token = await self._session.token() if self._session is not None else None
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as exc:
            log.warning("remote_transport_failed", error=str(exc))
            raise RemoteCallError(None, str(exc) or type(exc).__name__, operation) from exc

        if response.is_success:
            log.debug("remote_call_succeeded", status=response.status_code)
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise RemoteCallError(
                    response.status_code, "invalid JSON response", operation
                ) from exc

        message = _error_message(response)
        if response.status_code == 404 and missing_ok:
            log.debug("remote_resource_missing", error=message)
            return None
        if response.status_code == 401 and self._session is not None:
            await self._session.clear()
            log.warning("remote_session_cleared")
        log.warning("remote_call_failed", status=response.status_code, error=message)
        raise RemoteCallError(response.status_code, message, operation)

    def _parse(self, schema: type[Any], data: Any, operation: str) -> Any:
        try:
            return schema.model_validate(data)
        except ValidationError as exc:
            self._log.warning(
                "remote_payload_invalid", operation=operation, errors=exc.error_count()
            )
            raise RemoteCallError(None, f"unexpected response shape: {exc}", operation) from exc


class DonationTermApiClient:
    """Donation term port view over AdoptionApiClient.

    Both term ports name their send operation ``send_term_email``; this
    view routes it to the donation endpoint.
    """

    def __init__(self, client: AdoptionApiClient) -> None:
        self._client = client

    async def get_my_term(self, donor_id: int) -> DonationTerm | None:
        return await self._client.get_my_term(donor_id)

    async def create_or_update_term(
        self, request: DonationTermRequest, *, update: bool = False
    ) -> DonationTerm:
        return await self._client.create_donation_term(request, update=update)

    async def send_term_email(self, term_id: int) -> EmailDeliveryReport:
        return await self._client.send_donation_term_email(term_id)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(payload, dict):
        return ErrorBodySchema.model_validate(payload).message or response.reason_phrase
    return response.reason_phrase
