"""Domain service: Region Gate.

Deliveries are limited to a single state. A postal code is deliverable
only if it appears in the table below, and a deliverable code decides
the city written on the shipping address.
"""

from __future__ import annotations

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.checkout import DELIVERY_STATE, DeliveryCity


def _codes(first: int, last: int) -> tuple[str, ...]:
    return tuple(str(code) for code in range(first, last + 1))


ODISHA_CITIES: tuple[DeliveryCity, ...] = (
    DeliveryCity("Bhubaneswar", "Khordha", _codes(751001, 751030)),
    DeliveryCity("Cuttack", "Cuttack", _codes(753001, 753015)),
    DeliveryCity("Berhampur", "Ganjam", _codes(760001, 760010)),
    DeliveryCity("Rourkela", "Sundargarh", _codes(769001, 769015)),
    DeliveryCity("Sambalpur", "Sambalpur", _codes(768001, 768010)),
    DeliveryCity("Puri", "Puri", _codes(752001, 752010)),
    DeliveryCity("Balasore", "Balasore", _codes(756001, 756010)),
    DeliveryCity("Baripada", "Mayurbhanj", _codes(757001, 757005)),
    DeliveryCity("Jharsuguda", "Jharsuguda", _codes(768201, 768205)),
    DeliveryCity("Jeypore", "Koraput", _codes(764001, 764005)),
    DeliveryCity("Barbil", "Kendujhar", _codes(758035, 758037)),
    DeliveryCity("Kendujhar", "Kendujhar", _codes(758001, 758005)),
    DeliveryCity("Rayagada", "Rayagada", _codes(765001, 765005)),
    DeliveryCity("Bhawanipatna", "Kalahandi", _codes(766001, 766005)),
    DeliveryCity("Dhenkanal", "Dhenkanal", _codes(759001, 759005)),
    DeliveryCity("Angul", "Angul", _codes(759122, 759126)),
    DeliveryCity("Paradip", "Jagatsinghpur", _codes(754142, 754145)),
    DeliveryCity("Jajpur", "Jajpur", _codes(755001, 755005)),
    DeliveryCity("Kendrapara", "Kendrapara", _codes(754211, 754215)),
    DeliveryCity("Bhadrak", "Bhadrak", _codes(756100, 756104)),
    DeliveryCity("Balangir", "Balangir", _codes(767001, 767005)),
    DeliveryCity("Sundargarh", "Sundargarh", _codes(770001, 770005)),
    DeliveryCity("Nabarangpur", "Nabarangpur", _codes(764059, 764062)),
    DeliveryCity("Malkangiri", "Malkangiri", _codes(764045, 764048)),
    DeliveryCity("Nuapada", "Nuapada", _codes(766105, 766108)),
    DeliveryCity("Sonepur", "Subarnapur", _codes(767017, 767020)),
    DeliveryCity("Boudh", "Boudh", _codes(762014, 762017)),
    DeliveryCity("Nayagarh", "Nayagarh", _codes(752069, 752072)),
    DeliveryCity("Chhatrapur", "Ganjam", _codes(761020, 761023)),
    DeliveryCity("Jagatsinghpur", "Jagatsinghpur", _codes(754103, 754106)),
)


class RegionGate:

    def __init__(self, cities: tuple[DeliveryCity, ...] = ODISHA_CITIES) -> None:
        self._by_code: dict[str, DeliveryCity] = {}
        for city in cities:
            for code in city.postal_codes:
                # First city listed wins for shared codes
                self._by_code.setdefault(code, city)

    def city_for(self, postal_code: str) -> DeliveryCity:
        """Return the city a postal code delivers to.

        Raises ValidationError for malformed or out-of-region codes.
        """
        code = (postal_code or "").strip()
        if not code:
            raise ValidationError("Postal code is required")
        if len(code) != 6 or not code.isdigit():
            raise ValidationError("Please enter a valid 6-digit postal code")
        city = self._by_code.get(code)
        if city is None:
            raise ValidationError(
                f"Sorry, we currently deliver only within {DELIVERY_STATE}"
            )
        return city

    def is_deliverable(self, postal_code: str) -> bool:
        try:
            self.city_for(postal_code)
        except ValidationError:
            return False
        return True

    def city_names(self) -> list[str]:
        return sorted({city.name for city in self._by_code.values()})
