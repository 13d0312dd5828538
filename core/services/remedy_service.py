"""
Remedy detail shaping.
"""

from core.models import NaturalRemedy

DEFAULT_USAGE = "Usage information not available."
DEFAULT_DOSAGE = "Dosage information not available."
DEFAULT_PRECAUTIONS = "Precaution information not available."
DEFAULT_SCIENTIFIC_INFO = "Scientific information not available."


def to_detailed_remedy(remedy: NaturalRemedy) -> dict:
    """Full remedy payload; missing prose fields get placeholder text."""
    return {
        "id": remedy.id,
        "name": remedy.name,
        "description": remedy.description,
        "imageUrl": remedy.image_url,
        "category": remedy.category,
        "matchingNutrients": list(remedy.matching_nutrients or []),
        "similarityScore": remedy.similarity_score,
        "evidenceLevel": remedy.evidence_level,
        "usage": remedy.usage or DEFAULT_USAGE,
        "dosage": remedy.dosage or DEFAULT_DOSAGE,
        "precautions": remedy.precautions or DEFAULT_PRECAUTIONS,
        "scientificInfo": remedy.scientific_info or DEFAULT_SCIENTIFIC_INFO,
        "references": list(remedy.references or []),
    }


__all__ = ["to_detailed_remedy"]
