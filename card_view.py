"""
Card view model for the current business
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from business_records import BusinessRecord, ParseIssue, format_phone_number

PLACEHOLDER = "—"


@dataclass(frozen=True)
class CardView:
    title: str
    position_label: str
    position: int = 0
    total: int = 0
    rows: List[Tuple[str, str]] = field(default_factory=list)
    website: Optional[str] = None
    advisory: Optional[str] = None
    empty_message: Optional[str] = None
    can_go_previous: bool = False
    can_go_next: bool = False

    @property
    def has_record(self) -> bool:
        return self.empty_message is None


def advisory_message(errors: Sequence[ParseIssue]) -> Optional[str]:
    if not errors:
        return None
    count = len(errors)
    return f"Encountered {count} parsing issue{'s' if count > 1 else ''}. Showing available data."


def present(active: Sequence[BusinessRecord], index: int,
            errors: Sequence[ParseIssue] = ()) -> CardView:
    """Build the card for ``active[index]`` (or the empty state). No side effects."""
    total = len(active)
    advisory = advisory_message(errors)

    if total == 0:
        return CardView(
            title="No business available",
            position_label="No businesses loaded from the CSV data.",
            advisory=advisory,
            empty_message="No business data to display.",
        )

    index = min(max(index, 0), total - 1)
    business = active[index]
    phone = format_phone_number(business.phone_number) if business.phone_number else PLACEHOLDER
    return CardView(
        title=business.business_name or "No business available",
        position_label=f"Business {index + 1} of {total}",
        position=index + 1,
        total=total,
        rows=[
            ("Company", business.company_name or PLACEHOLDER),
            ("Industry", business.industry or PLACEHOLDER),
            ("City", business.city or PLACEHOLDER),
            ("Phone", phone),
        ],
        website=business.site_url or None,
        advisory=advisory,
        can_go_previous=index > 0,
        can_go_next=index < total - 1,
    )
