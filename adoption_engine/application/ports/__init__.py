"""Application ports - Interfaces the infrastructure adapters implement.

Available ports:
- PetApiProtocol, ReferenceDataApiProtocol, FavoriteApiProtocol
- AdoptionTermApiProtocol, DonationTermApiProtocol, MyPetsApiProtocol
- UserApiProtocol: live party profiles
- KeyValueStoreProtocol: device-local storage
- SponsorPresenterProtocol: sponsor interstitial surface
"""

from adoption_engine.application.ports.adoption_term_api import (
    AdoptionTermApiProtocol,
    AdoptionTermRequest,
)
from adoption_engine.application.ports.donation_term_api import (
    DonationTermApiProtocol,
    DonationTermRequest,
)
from adoption_engine.application.ports.favorite_api import FavoriteApiProtocol
from adoption_engine.application.ports.key_value_store import KeyValueStoreProtocol
from adoption_engine.application.ports.my_pets_api import MyPetsApiProtocol
from adoption_engine.application.ports.pet_api import PetApiProtocol
from adoption_engine.application.ports.reference_data_api import (
    ReferenceDataApiProtocol,
)
from adoption_engine.application.ports.sponsor_presenter import SponsorPresenterProtocol
from adoption_engine.application.ports.user_api import UserApiProtocol

__all__: list[str] = [
    "AdoptionTermApiProtocol",
    "AdoptionTermRequest",
    "DonationTermApiProtocol",
    "DonationTermRequest",
    "FavoriteApiProtocol",
    "KeyValueStoreProtocol",
    "MyPetsApiProtocol",
    "PetApiProtocol",
    "ReferenceDataApiProtocol",
    "SponsorPresenterProtocol",
    "UserApiProtocol",
]
