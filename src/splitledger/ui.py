"""Interactive UI components for picking a participant."""

import logging
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .models import UserBalance

logger = logging.getLogger(__name__)


class ParticipantCompleter(Completer):
    """Fuzzy search completer for participant IDs."""

    def __init__(self, balances: list[UserBalance]):
        """Initialize the completer with the participants of a ledger."""
        self.user_ids = [b.user_id for b in balances]

    def get_completions(self, document: Document, complete_event: Any):
        """Get fuzzy-matched completions."""
        query = document.text.lower()

        for user_id in self.user_ids:
            if not query or fuzzy_match(query, user_id.lower()):
                yield Completion(
                    text=user_id,
                    start_position=-len(document.text),
                    display=user_id,
                )


def fuzzy_match(query: str, text: str) -> bool:
    """
    Fuzzy match: all characters in query must appear in order in text.

    Example:
        query="aly" matches "alice_yu"
        query="chr" matches "charlie"
    """
    query_idx = 0
    for char in text:
        if query_idx < len(query) and char == query[query_idx]:
            query_idx += 1
    return query_idx == len(query)


def select_participant_interactive(balances: list[UserBalance]) -> str | None:
    """
    Interactive participant selection with fuzzy search.

    Args:
        balances: Balances of everyone in the ledger

    Returns:
        Selected user ID, or None to skip
    """
    if not balances:
        return None

    print("\n👥 Whose settlements do you want to see?")
    print("   Type to search, press Enter to confirm, Ctrl+C to skip\n")

    completer = ParticipantCompleter(balances)
    session: PromptSession[str] = PromptSession(completer=completer)

    try:
        while True:
            result = session.prompt("Participant: ", complete_while_typing=True)

            if not result:
                return None

            if result in completer.user_ids:
                logger.info(f"User selected participant: {result}")
                return result

            print("❌ Unknown participant. Press Tab to complete from the list.")

    except KeyboardInterrupt:
        print("\n⏭️  Skipped")
        return None
    except EOFError:
        return None
