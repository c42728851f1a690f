"""Sponsor advertisement model.

Ads are shown as an interstitial after a term email is delivered and
before a readoption is confirmed. The catalog is static content shipped
with the client.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SponsorCategory(str, Enum):
    """Sponsor business category."""

    PET_FOOD = "racao"
    VETERINARY = "veterinaria"
    TOYS = "brinquedos"
    PET_SHOP = "petshop"
    GROOMING = "banho"
    INSURANCE = "seguro"


@dataclass(frozen=True)
class SponsorAd:
    """One sponsor interstitial."""

    id: int
    category: SponsorCategory
    title: str
    subtitle: str
    description: str
    phone: str | None = None
    website: str | None = None


DEFAULT_SPONSOR_ADS: tuple[SponsorAd, ...] = (
    SponsorAd(
        id=1,
        category=SponsorCategory.PET_FOOD,
        title="Super Ração Premium",
        subtitle="Nutrição completa para seu pet",
        description="Ração balanceada para cães e gatos de todas as idades.",
        phone="(11) 9999-8888",
        website="https://www.superracao.com.br",
    ),
    SponsorAd(
        id=2,
        category=SponsorCategory.VETERINARY,
        title="Clínica VetCare",
        subtitle="Cuidado completo para seu amigo",
        description="Consultas, vacinas e exames para o novo membro da família.",
        phone="(11) 3333-7777",
        website="https://www.vetcare.com.br",
    ),
    SponsorAd(
        id=3,
        category=SponsorCategory.TOYS,
        title="PetToys Diversão",
        subtitle="Brinquedos que seu pet vai amar",
        description="Brinquedos resistentes e seguros para todas as raças.",
        phone="(11) 2222-6666",
        website="https://www.pettoys.com.br",
    ),
    SponsorAd(
        id=4,
        category=SponsorCategory.PET_SHOP,
        title="Mega PetShop",
        subtitle="Tudo para seu pet em um só lugar",
        description="Acessórios, higiene e alimentação com entrega rápida.",
        phone="(11) 4444-5555",
        website="https://www.megapetshop.com.br",
    ),
    SponsorAd(
        id=5,
        category=SponsorCategory.GROOMING,
        title="Banho & Tosa Premium",
        subtitle="Beleza e higiene profissional",
        description="Banho, tosa e hidratação com profissionais certificados.",
        phone="(11) 5555-4444",
        website="https://www.banhoetosa.com.br",
    ),
)
