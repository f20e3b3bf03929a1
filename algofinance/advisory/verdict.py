"""Verdict parsing for the pre-trade AI risk check."""

from algofinance.models import Verdict


def parse_verdict(text: str) -> Verdict:
    """
    Classify a free-text AI response as APPROVE, DENY or UNKNOWN.

    Matching is a case-insensitive substring search. DENY wins when both words
    appear. Callers treat UNKNOWN as non-deny, so an unparseable answer lets the
    trade through.
    """
    normalized = (text or "").strip().upper()
    if "DENY" in normalized:
        return Verdict.DENY
    if "APPROVE" in normalized:
        return Verdict.APPROVE
    return Verdict.UNKNOWN
