"""EligibilityPolicy — can this professional take a request of this category?"""

from __future__ import annotations

from app.domain.entities.professional import ProfessionalSnapshot

# Service category → specialty keywords (matched as case-insensitive substrings)
CATEGORY_SPECIALTIES: dict[str, tuple[str, ...]] = {
    "plomeria": ("plomero", "instalador", "fontanero"),
    "electricidad": ("electricista", "instalador electrico"),
    "carpinteria": ("carpintero", "ebanista"),
    "pintura": ("pintor", "decorador"),
    "jardineria": ("jardinero", "paisajista"),
    "limpieza": ("limpiador", "personal de limpieza"),
    "reparaciones": ("tecnico", "reparador"),
}


def specialties_match(specialties: tuple[str, ...] | list[str], category: str | None) -> bool:
    """True when any declared specialty maps to *category*.

    A missing category is compatible with everyone; an unknown one with nobody.
    """
    if not category:
        return True

    keywords = CATEGORY_SPECIALTIES.get(category.strip().lower(), ())
    return any(
        keyword in specialty.lower()
        for specialty in specialties
        if specialty
        for keyword in keywords
    )


def is_eligible(professional: ProfessionalSnapshot, category: str | None) -> bool:
    return specialties_match(professional.specialties, category)
