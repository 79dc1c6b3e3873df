"""
Shared case actions used by more than one role service
"""
import logging
from typing import Dict

from cases.case_config import CaseStatus
from cases.case_store import CaseStore
from cases.confirmations import ConfirmationManager

logger = logging.getLogger('case_actions')


def post_message(store: CaseStore, case_id: str, sender: str, text: str) -> Dict:
    """Append a reply to a case thread after trimming it"""
    text = (text or '').strip()
    if not text:
        return {"success": False, "error": "Message cannot be empty"}

    if not store.append_message(case_id, sender, text):
        return {"success": False, "error": f"Case {case_id} not found", "not_found": True}

    return {"success": True, "message": "Your reply has been sent."}


def request_resolution(store: CaseStore, confirmations: ConfirmationManager,
                       owner_id: str, case_id: str) -> Dict:
    """Ask for confirmation before marking a case Resolved"""
    if store.get_by_id(case_id) is None:
        return {"success": False, "error": f"Case {case_id} not found", "not_found": True}

    def resolve():
        ok, message = store.set_status(case_id, CaseStatus.RESOLVED)
        if not ok:
            return {"success": False, "error": message}
        logger.info(f"CASE_RESOLVED | {case_id} | by={owner_id}")
        return {"success": True, "message": "Marked as resolved.", "case_id": case_id}

    prompt = confirmations.request(
        owner_id, 'Resolve Case?', 'Mark this case as resolved?', resolve
    )
    return {"success": True, "needs_confirmation": True, "confirmation": prompt}
