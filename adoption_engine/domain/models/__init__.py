"""Domain models for the adoption engine.

Immutable value objects with no infrastructure dependencies.
"""

from adoption_engine.domain.models.adoption_request import (
    AdoptionOutcome,
    AdoptionRequestResult,
    HandoffResult,
)
from adoption_engine.domain.models.adoption_term import AdoptionTerm
from adoption_engine.domain.models.donation_term import (
    ALL_COMMITMENTS,
    DonationCommitment,
    DonationTerm,
)
from adoption_engine.domain.models.email_delivery import (
    EmailDeliveryReport,
    RecipientStatus,
)
from adoption_engine.domain.models.favorite import ToggleResult, ToggleStatus
from adoption_engine.domain.models.party import PartyProfile, PartyRole, PartySnapshot
from adoption_engine.domain.models.permitted_actions import PermittedActions
from adoption_engine.domain.models.pet import Pet, PetStatus
from adoption_engine.domain.models.reference_data import ReferenceItem, ReferenceKind
from adoption_engine.domain.models.remote_error import ClassifiedError, ErrorKind
from adoption_engine.domain.models.sponsor_ad import (
    DEFAULT_SPONSOR_ADS,
    SponsorAd,
    SponsorCategory,
)
from adoption_engine.domain.models.term_lifecycle import (
    TermDraft,
    TermEffect,
    TermEffectKind,
    TermMachine,
    TermState,
    TermTransition,
)

__all__: list[str] = [
    "ALL_COMMITMENTS",
    "AdoptionOutcome",
    "AdoptionRequestResult",
    "AdoptionTerm",
    "ClassifiedError",
    "DEFAULT_SPONSOR_ADS",
    "DonationCommitment",
    "DonationTerm",
    "EmailDeliveryReport",
    "ErrorKind",
    "HandoffResult",
    "PartyProfile",
    "PartyRole",
    "PartySnapshot",
    "PermittedActions",
    "Pet",
    "PetStatus",
    "RecipientStatus",
    "ReferenceItem",
    "ReferenceKind",
    "SponsorAd",
    "SponsorCategory",
    "TermDraft",
    "TermEffect",
    "TermEffectKind",
    "TermMachine",
    "TermState",
    "TermTransition",
    "ToggleResult",
    "ToggleStatus",
]
