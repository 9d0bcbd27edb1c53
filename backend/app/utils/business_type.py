"""
Business type normalization utilities.

Maps free-text legal structures supplied by the browser client onto the
closed set of business types accepted by Moov.
"""
from enum import Enum

import structlog

logger = structlog.get_logger(__name__)


class BusinessType(str, Enum):
    """Legal business structures accepted by the platform."""
    LLC = "llc"
    PRIVATE_CORPORATION = "privateCorporation"
    PUBLIC_CORPORATION = "publicCorporation"
    PARTNERSHIP = "partnership"
    SOLE_PROPRIETORSHIP = "soleProprietorship"
    UNINCORPORATED_ASSOCIATION = "unincorporatedAssociation"
    UNINCORPORATED_NON_PROFIT = "unincorporatedNonProfit"
    TRUST = "trust"

    @classmethod
    def default(cls) -> "BusinessType":
        return cls.LLC

    @classmethod
    def from_string(cls, business_type: str | None) -> "BusinessType":
        """
        Convert free text to a BusinessType (case-insensitive with aliases).

        Args:
            business_type: Input business type, may be None or empty

        Returns:
            BusinessType enum value; LLC when missing or not recognized

        Examples:
            >>> BusinessType.from_string("INC")
            <BusinessType.PRIVATE_CORPORATION: 'privateCorporation'>
            >>> BusinessType.from_string("Sole Proprietorship")
            <BusinessType.SOLE_PROPRIETORSHIP: 'soleProprietorship'>
        """
        if not business_type:
            return cls.default()

        normalized_key = business_type.strip().lower()

        mapping = {
            "llc": cls.LLC,
            "corporation": cls.PRIVATE_CORPORATION,
            "corp": cls.PRIVATE_CORPORATION,
            "inc": cls.PRIVATE_CORPORATION,
            "incorporated": cls.PRIVATE_CORPORATION,
            "privatecorporation": cls.PRIVATE_CORPORATION,
            "private corporation": cls.PRIVATE_CORPORATION,
            "publiccorporation": cls.PUBLIC_CORPORATION,
            "public corporation": cls.PUBLIC_CORPORATION,
            "partnership": cls.PARTNERSHIP,
            "soleproprietorship": cls.SOLE_PROPRIETORSHIP,
            "sole proprietorship": cls.SOLE_PROPRIETORSHIP,
            "unincorporatedassociation": cls.UNINCORPORATED_ASSOCIATION,
            "unincorporated association": cls.UNINCORPORATED_ASSOCIATION,
            "trust": cls.TRUST,
            "nonprofit": cls.UNINCORPORATED_NON_PROFIT,
            "non-profit": cls.UNINCORPORATED_NON_PROFIT,
            "unincorporatednonprofit": cls.UNINCORPORATED_NON_PROFIT,
            }

        if normalized_key in mapping:
            return mapping[normalized_key]

        logger.warning(
            "Business type not recognized",
            original_business_type=business_type,
            normalized_to=cls.default().value
            )
        return cls.default()


def normalize_business_type(business_type: str | None) -> str:
    """
    Normalize a business type to the platform value.

    Args:
        business_type: Input business type (case-insensitive)

    Returns:
        Platform business type string ("llc" when not recognized)
    """
    return BusinessType.from_string(business_type).value
