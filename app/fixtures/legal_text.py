"""Legal disclaimer text shown with every eligibility assessment.

Text here is reviewed by counsel and versioned. Publish a new version
rather than editing an existing one; evaluation results record the
version they were rendered with.
"""

CURRENT_LEGAL_TEXT_VERSION = "2025-01"

LEGAL_TEXT: dict[str, dict[str, object]] = {
    "2025-01": {
        "disclaimer": (
            "This determination is preliminary and not legal advice. A full legal "
            "consultation is required to finalize your bankruptcy eligibility and strategy."
        ),
        "disclaimers": (
            "This is a preliminary, informational assessment only and does not "
            "constitute legal advice.",
            "Final determination of bankruptcy eligibility requires consultation "
            "with a licensed attorney.",
            "Individual circumstances, assets, and debts must be reviewed in detail.",
            "Bankruptcy laws and means test criteria are subject to change.",
        ),
        "summary": (
            "Based on the information provided, your preliminary eligibility "
            "for Chapter 7 is {tier}."
        ),
    },
}


def get_legal_text(version: str = CURRENT_LEGAL_TEXT_VERSION) -> dict[str, object]:
    """Return the legal text bundle for a version.

    Raises:
        KeyError: If the version has not been published.
    """
    if version not in LEGAL_TEXT:
        raise KeyError(f"Unknown legal text version: {version}")
    return LEGAL_TEXT[version]
