"""
Checklist documents and OCR-driven label suggestions.

Text recognition itself happens outside MUSTER; this module only receives the
recognised words and maps them onto checklist labels by keyword substring.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from muster.contexts.pipeline.applicants import add_checklist_labels, require_applicant
from muster.contexts.pipeline.logger import _log_info
from muster.contexts.state.defaults import new_id
from muster.contexts.state.exceptions import RecordNotFoundError
from muster.utils.timestamp import now_exact

# Label -> lowercase keywords; dict order is suggestion order
CHECKLIST_KEYWORDS = {
    "Birth Certificate": (
        "birth certificate",
        "certificate of live birth",
        "certificate of birth",
    ),
    "Social Security Card": ("social security", "ssn"),
    "Driver's License": ("driver license", "driver's license", "drivers license", "operator"),
    "High School Diploma": ("diploma", "high school"),
    "Transcripts": ("transcript",),
    "Passport": ("passport",),
    "Medical Records": ("medical record", "immunization", "physician", "prescription"),
    "Marriage Certificate": ("marriage",),
    "DD-214": ("dd-214", "dd214", "certificate of release"),
    "Court Documents": ("court", "disposition", "docket"),
}


def suggest_checklist_labels(words: Union[str, Iterable[str]]) -> List[str]:
    """
    Suggest checklist labels for recognised text.

    Args:
        words: Recognised words (or one block of text)

    Returns:
        Matching labels in CHECKLIST_KEYWORDS order, without duplicates

    Examples:
        >>> suggest_checklist_labels(["CERTIFICATE", "OF", "LIVE", "BIRTH"])
        ['Birth Certificate']
    """
    if isinstance(words, str):
        text = words
    else:
        text = " ".join(str(word) for word in words)
    text = " ".join(text.lower().split())

    return [
        label
        for label, keywords in CHECKLIST_KEYWORDS.items()
        if any(keyword in text for keyword in keywords)
    ]


def apply_ocr_suggestions(
    store, applicant_id: str, words: Union[str, Iterable[str]], now: Optional[datetime] = None
) -> List[str]:
    """
    Add suggested labels to an applicant's checklist.

    Returns:
        Labels newly added (already-present labels are skipped)
    """
    suggestions = suggest_checklist_labels(words)
    if not suggestions:
        return []
    added = add_checklist_labels(store, applicant_id, suggestions, now=now)
    if added:
        _log_info(f"OCR added {added} to {applicant_id}")
    return added


def add_document(
    store, applicant_id: str, label: str, received: bool = False, now: Optional[datetime] = None
) -> str:
    """
    Track a document for an applicant.

    Returns:
        Document id

    Raises:
        ValueError: If the label is blank
        RecordNotFoundError: If the applicant is unknown
    """
    label = (label or "").strip()
    if not label:
        raise ValueError("Document label cannot be blank")

    document = {
        "id": new_id(),
        "applicantId": applicant_id,
        "label": label,
        "received": received,
        "addedAt": now_exact(now),
    }

    def add(state):
        require_applicant(state, applicant_id)
        state["checklist"].append(document)

    store.set_state(add)
    return document["id"]


def mark_document_received(store, document_id: str, received: bool = True) -> None:
    """
    Raises:
        RecordNotFoundError: If the document id is unknown
    """

    def mark(state):
        for document in state["checklist"]:
            if document.get("id") == document_id:
                document["received"] = received
                return
        raise RecordNotFoundError("Document", document_id)

    store.set_state(mark)


def documents_for(state: Dict[str, Any], applicant_id: str) -> List[Dict[str, Any]]:
    return [d for d in state.get("checklist", []) if d.get("applicantId") == applicant_id]
