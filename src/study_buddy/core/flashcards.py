"""
Flashcard decks and study sessions.
"""

from typing import Dict, List, Optional

from pydantic import ValidationError

from ..config import settings
from ..models.ai import GeneratedCard
from ..models.flashcards import Deck, Flashcard, StudySession
from ..models.note import utcnow
from ..storage.engine import LocalStore
from ..utils.events import log_debug, log_event
from ..utils.llm import GeminiService

MASTERED_CONFIDENCE = 3
CORRECT_CONFIDENCE = 2


class DeckManager:
    def __init__(self, store: LocalStore, llm: Optional[GeminiService] = None):
        self.store = store
        self.llm = llm
        self.decks: List[Deck] = []
        self.session: Optional[StudySession] = None
        self._confidence_total = 0

    def load(self) -> List[Deck]:
        raw = self.store.get_item(settings.DECKS_KEY)
        decks = []
        if isinstance(raw, list):
            for item in raw:
                try:
                    decks.append(Deck.model_validate(item))
                except ValidationError as e:
                    log_debug(f"[FLASHCARDS] Skipping unreadable deck: {e}")
        self.decks = decks
        return self.decks

    def _persist(self):
        self.store.set_item(settings.DECKS_KEY, [deck.to_storage() for deck in self.decks])

    # --- Decks ---

    def get_deck(self, deck_id: str) -> Optional[Deck]:
        for deck in self.decks:
            if deck.id == deck_id:
                return deck
        return None

    def create_deck(self, name: str, description: Optional[str] = None,
                    cards: Optional[List[Flashcard]] = None) -> Optional[Deck]:
        name = name.strip()
        if not name:
            return None
        deck = Deck(name=name, description=description, flashcards=cards or [])
        self.decks.append(deck)
        self._persist()
        log_event("DECK_CREATED", {"id": deck.id, "name": name, "cards": len(deck.flashcards)})
        return deck

    def rename_deck(self, deck_id: str, name: str) -> bool:
        deck = self.get_deck(deck_id)
        if deck is None or not name.strip():
            return False
        deck.name = name.strip()
        self._persist()
        return True

    def delete_deck(self, deck_id: str) -> bool:
        deck = self.get_deck(deck_id)
        if deck is None:
            return False
        self.decks.remove(deck)
        self._persist()
        return True

    # --- Cards ---

    def add_card(self, deck_id: str, front: str, back: str) -> Optional[Flashcard]:
        deck = self.get_deck(deck_id)
        if deck is None or not front.strip() or not back.strip():
            return None
        card = Flashcard(front=front.strip(), back=back.strip())
        deck.flashcards.append(card)
        self._persist()
        return card

    def _find_card(self, deck: Deck, card_id: str) -> Optional[Flashcard]:
        for card in deck.flashcards:
            if card.id == card_id:
                return card
        return None

    def edit_card(self, deck_id: str, card_id: str, front: str, back: str) -> bool:
        deck = self.get_deck(deck_id)
        card = self._find_card(deck, card_id) if deck else None
        if card is None or not front.strip() or not back.strip():
            return False
        card.front = front.strip()
        card.back = back.strip()
        self._persist()
        return True

    def delete_card(self, deck_id: str, card_id: str) -> bool:
        deck = self.get_deck(deck_id)
        card = self._find_card(deck, card_id) if deck else None
        if card is None:
            return False
        deck.flashcards.remove(card)
        self._persist()
        return True

    # --- Study sessions ---

    def start_session(self, deck_id: str) -> Optional[StudySession]:
        if self.get_deck(deck_id) is None:
            return None
        self.session = StudySession(deck_id=deck_id)
        self._confidence_total = 0
        return self.session

    def review(self, deck_id: str, card_id: str, confidence: int) -> Optional[Flashcard]:
        """
        Rates a card 1 (hard) to 3 (easy). Ratings of 2 or more count as correct
        in the running session.
        """
        if not 1 <= confidence <= 3:
            raise ValueError(f"confidence must be 1..3, got {confidence}")
        deck = self.get_deck(deck_id)
        card = self._find_card(deck, card_id) if deck else None
        if card is None:
            return None

        now = utcnow()
        card.confidence = confidence
        card.last_reviewed = now
        deck.last_studied = now

        if self.session is not None and self.session.deck_id == deck_id:
            self.session.cards_studied += 1
            if confidence >= CORRECT_CONFIDENCE:
                self.session.correct_answers += 1
            self._confidence_total += confidence
            self.session.average_confidence = self._confidence_total / self.session.cards_studied

        self._persist()
        log_event("CARD_REVIEWED", {"deck_id": deck_id, "card_id": card_id, "confidence": confidence})
        return card

    def end_session(self) -> Optional[StudySession]:
        session, self.session = self.session, None
        if session is not None:
            session.end_time = utcnow()
        return session

    def deck_stats(self, deck_id: str) -> Optional[Dict[str, float]]:
        deck = self.get_deck(deck_id)
        if deck is None:
            return None
        reviewed = [c for c in deck.flashcards if c.confidence > 0]
        return {
            "total": len(deck.flashcards),
            "reviewed": len(reviewed),
            "mastered": sum(1 for c in deck.flashcards if c.confidence == MASTERED_CONFIDENCE),
            "average_confidence": (sum(c.confidence for c in reviewed) / len(reviewed)) if reviewed else 0.0,
        }

    # --- AI generation ---

    def deck_from_generated(self, name: str, generated: List[GeneratedCard]) -> Optional[Deck]:
        """Stores model-generated question/answer pairs as a new deck."""
        cards = [Flashcard(front=c.question, back=c.answer) for c in generated]
        return self.create_deck(name, cards=cards)

    def generate_deck_from_text(self, name: str, text: str, n: int = 5) -> Optional[Deck]:
        if self.llm is None:
            return None
        return self.deck_from_generated(name, self.llm.generate_flashcards(text, n))

    def generate_deck_from_file(self, name: str, data: bytes, mime_type: str, n: int = 5) -> Optional[Deck]:
        if self.llm is None:
            return None
        return self.deck_from_generated(name, self.llm.generate_flashcards_from_file(data, mime_type, n))
