"""Blackjack game engine with state machine."""

import logging
from dataclasses import dataclass
from random import Random
from typing import Callable

from transitions import Machine

from core.cards import Card, Deck
from core.errors import InvariantViolation
from core.hand import Hand, Outcome, dealer_should_hit, evaluate_hand, evaluate_natural
from core.rules import GameSettings
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.state import Action, GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnContext:
    """What the player sees when asked for a decision."""

    hand_index: int
    hand: Hand
    hands: tuple[Hand, ...]
    dealer_upcard: Card | None
    spare_hands: int
    actions: tuple[Action, ...]


@dataclass(frozen=True)
class HandResult:
    """A settled player hand."""

    index: int
    cards: tuple[Card, ...]
    value: int
    doubled: bool
    outcome: Outcome

    @property
    def payout(self) -> float:
        return self.outcome.payout


@dataclass(frozen=True)
class RoundResult:
    """
    Everything the session needs after a round.

    ``payout`` is in bet units; the caller multiplies it by the bet.
    ``hands_bought`` counts the spare hands consumed by doubles and splits.
    """

    hands: tuple[HandResult, ...]
    dealer_cards: tuple[Card, ...]
    dealer_value: int
    dealer_blackjack: bool
    hands_bought: int
    spare_hands: int

    @property
    def payout(self) -> float:
        """Return the summed payout weight of every hand."""
        return sum(hand.payout for hand in self.hands)

    @property
    def winning_hands(self) -> list[HandResult]:
        return [hand for hand in self.hands if hand.outcome.is_win]

    @property
    def dealer_busted(self) -> bool:
        return self.dealer_value == 0


DecisionSource = Callable[[TurnContext], Action]


class BlackjackGame:
    """
    Blackjack game engine using a state machine.

    This is the core game logic, completely UI-agnostic.
    Communication happens through events and return values only.
    """

    # State machine states
    STATES = [s.name.lower() for s in GameState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "deal", "source": ["idle", "round_complete"], "dest": "dealing"},
        {"trigger": "begin_player_turns", "source": "dealing", "dest": "player_turn"},
        {"trigger": "dealer_blackjack", "source": "dealing", "dest": "resolving"},
        {"trigger": "player_done", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "dealer_plays", "source": "dealer_turn", "dest": "resolving"},
        {"trigger": "resolve", "source": "resolving", "dest": "round_complete"},
    ]

    def __init__(
        self,
        settings: GameSettings | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new blackjack game.

        Args:
            settings: Deck and hand counts (one of each if not provided)
            rng: Random number generator for reproducible games
        """
        self.settings = settings or GameSettings()
        self._rng = rng or Random()
        self.deck = Deck(self.settings.deck_count, rng=self._rng)

        self.hands: list[Hand] = [Hand() for _ in range(self.settings.hand_count)]
        self.dealer_hand = Hand()
        self.current_hand_index = 0
        self.spare_hands = 0
        self._spare_hands_at_deal = 0
        self._dealer_had_blackjack = False
        self.result: RoundResult | None = None
        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="idle",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> GameState:
        """Get current game state as enum."""
        return GameState[self._machine_state.upper()]  # type: ignore

    @property
    def in_round(self) -> bool:
        return self.state not in (GameState.IDLE, GameState.ROUND_COMPLETE)

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def update_settings(self, settings: GameSettings) -> None:
        """
        Apply new table settings between rounds.

        A new deck count rebuilds the deck; a new hand count resizes the hand set.
        """
        if self.in_round:
            raise InvariantViolation("Cannot change settings during a round")

        if settings.deck_count != self.settings.deck_count:
            self.deck = Deck(settings.deck_count, rng=self._rng)
        if settings.hand_count != self.settings.hand_count:
            self.hands = [Hand() for _ in range(settings.hand_count)]
        self.settings = settings

    @property
    def cards_in_play(self) -> int:
        """Return the number of cards currently held by any hand."""
        return sum(len(hand) for hand in self.hands) + len(self.dealer_hand)

    @property
    def current_hand(self) -> Hand | None:
        """Get the hand whose turn it is."""
        if 0 <= self.current_hand_index < len(self.hands):
            return self.hands[self.current_hand_index]
        return None

    def play_round(self, spare_hands: int, decide: DecisionSource) -> RoundResult:
        """
        Play a full round, asking ``decide`` before every player decision.

        Args:
            spare_hands: Extra hands the player has paid capacity for, used by
                doubles and splits
            decide: Returns one of the actions offered in the context

        Returns:
            The settled round
        """
        self.start_round(spare_hands)
        while self.state == GameState.PLAYER_TURN:
            self.perform(decide(self.turn_context()))

        assert self.result is not None
        return self.result

    def start_round(self, spare_hands: int = 0) -> None:
        """Deal a new round and play out anything that needs no decision."""
        if self.in_round:
            raise InvariantViolation(f"Cannot deal while in state {self.state}")
        if spare_hands < 0:
            raise ValueError("spare_hands cannot be negative")

        self.events.clear_history()
        self.result = None
        self.spare_hands = spare_hands
        self._spare_hands_at_deal = spare_hands
        self.current_hand_index = 0
        self.deal()

        # Player hands then dealer, twice round
        for _ in range(2):
            for hand in self.hands:
                self._deal_card_to_hand(hand)
            self._deal_card_to_hand(self.dealer_hand)

        self.events.emit_new(
            EventType.ROUND_STARTED,
            hands=len(self.hands),
            spare_hands=spare_hands,
        )

        # Only a dealer natural ends the round early
        self._dealer_had_blackjack = self.dealer_hand.is_blackjack
        if self._dealer_had_blackjack:
            self.events.emit_new(EventType.DEALER_BLACKJACK)
            self.dealer_blackjack()
            self._resolve_round()
            return

        self.begin_player_turns()
        self._enter_hand()

    def _deal_card_to_hand(self, hand: Hand) -> Card:
        """Deal a card to a hand."""
        reshuffles = self.deck.reshuffles
        card = hand.draw_from(self.deck)
        if self.deck.reshuffles != reshuffles:
            self.events.emit_new(EventType.DECK_RESHUFFLED, reshuffles=self.deck.reshuffles)

        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card),
            hand=self._hand_label(hand),
            hand_value=hand.true_value,
        )
        return card

    def _hand_label(self, hand: Hand) -> str | int:
        if hand is self.dealer_hand:
            return "dealer"
        return next(i for i, h in enumerate(self.hands) if h is hand)

    def turn_context(self) -> TurnContext:
        """Describe the decision the player currently faces."""
        hand = self.current_hand
        if self.state != GameState.PLAYER_TURN or hand is None:
            raise InvariantViolation("No player decision is pending")

        return TurnContext(
            hand_index=self.current_hand_index,
            hand=hand,
            hands=tuple(self.hands),
            dealer_upcard=self.dealer_hand.cards[0] if self.dealer_hand.cards else None,
            spare_hands=self.spare_hands,
            actions=tuple(self.available_actions),
        )

    @property
    def available_actions(self) -> list[Action]:
        """List the actions the current hand may take."""
        actions = []
        if self.can_hit:
            actions.append(Action.HIT)
        if self.can_stand:
            actions.append(Action.STAND)
        if self.can_double:
            actions.append(Action.DOUBLE)
        if self.can_split:
            actions.append(Action.SPLIT)
        return actions

    def perform(self, action: Action) -> bool:
        """Dispatch a player action."""
        handlers = {
            Action.HIT: self.hit,
            Action.STAND: self.stand,
            Action.DOUBLE: self.double_down,
            Action.SPLIT: self.split,
        }
        return handlers[action]()

    def hit(self) -> bool:
        """Player hits (takes another card)."""
        hand = self.current_hand
        if self.state != GameState.PLAYER_TURN or hand is None:
            return self._reject("Cannot hit now")

        self._deal_card_to_hand(hand)
        self.events.emit_new(
            EventType.PLAYER_HIT,
            hand_index=self.current_hand_index,
            hand_value=hand.true_value,
        )

        if hand.is_busted:
            self.events.emit_new(
                EventType.PLAYER_BUSTS,
                hand_index=self.current_hand_index,
                values=hand.values,
            )
            self._advance_to_next_hand()

        return True

    def stand(self) -> bool:
        """Player stands (keeps current hand)."""
        hand = self.current_hand
        if self.state != GameState.PLAYER_TURN or hand is None:
            return self._reject("Cannot stand now")

        self.events.emit_new(
            EventType.PLAYER_STAND,
            hand_index=self.current_hand_index,
            hand_value=hand.true_value,
        )
        self._advance_to_next_hand()
        return True

    def double_down(self) -> bool:
        """Player doubles: one spare hand, exactly one card, then the turn ends."""
        if not self.can_double:
            return self._reject("Cannot double")

        hand = self.current_hand
        assert hand is not None
        self.spare_hands -= 1
        hand.doubled = True
        self._deal_card_to_hand(hand)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            hand_index=self.current_hand_index,
            hand_value=hand.true_value,
        )

        if hand.is_busted:
            self.events.emit_new(
                EventType.PLAYER_BUSTS,
                hand_index=self.current_hand_index,
                values=hand.values,
            )

        self._advance_to_next_hand()
        return True

    def split(self) -> bool:
        """Player splits a pair into two hands, played left to right."""
        if not self.can_split:
            return self._reject("Cannot split")

        index = self.current_hand_index
        hand = self.hands[index]
        self.spare_hands -= 1

        new_hand = Hand()
        second_card = hand.take_card()
        assert second_card is not None
        new_hand.add_card(second_card)
        self.hands.insert(index + 1, new_hand)

        self._deal_card_to_hand(hand)
        self._deal_card_to_hand(new_hand)

        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            hand_index=index,
            hand1_value=hand.true_value,
            hand2_value=new_hand.true_value,
        )

        # Resume on the same index so both halves are played before moving on
        self._enter_hand()
        return True

    def _reject(self, message: str) -> bool:
        self.events.emit_new(EventType.INVALID_ACTION, message=message, state=self.state.name)
        return False

    def _advance_to_next_hand(self) -> None:
        """Move to the next hand or the dealer turn."""
        self.current_hand_index += 1
        self._enter_hand()

    def _enter_hand(self) -> None:
        """Stand blackjacks automatically; hand over to the dealer when no hands remain."""
        while self.current_hand_index < len(self.hands):
            hand = self.hands[self.current_hand_index]
            if not hand.is_blackjack:
                return
            self.events.emit_new(
                EventType.PLAYER_BLACKJACK,
                hand_index=self.current_hand_index,
            )
            self.current_hand_index += 1

        self.player_done()
        self._play_dealer()

    def _play_dealer(self) -> None:
        """Dealer draws until reaching 17 or busting."""
        while dealer_should_hit(self.dealer_hand):
            self._deal_card_to_hand(self.dealer_hand)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer_hand.true_value)

        if self.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, values=self.dealer_hand.values)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.true_value)

        self.dealer_plays()
        self._resolve_round()

    def _resolve_round(self) -> None:
        """Settle every hand, then collect the cards."""
        results = []
        for i, hand in enumerate(self.hands):
            if self._dealer_had_blackjack:
                outcome = evaluate_natural(hand)
            else:
                outcome = evaluate_hand(hand, self.dealer_hand)

            if outcome.is_win:
                self.events.emit_new(
                    EventType.PLAYER_WINS,
                    hand_index=i,
                    outcome=outcome.name,
                    payout=outcome.payout,
                )
            elif outcome == Outcome.PUSH:
                self.events.emit_new(EventType.PUSH, hand_index=i)
            else:
                self.events.emit_new(EventType.PLAYER_LOSES, hand_index=i, outcome=outcome.name)

            results.append(
                HandResult(
                    index=i,
                    cards=tuple(hand.cards),
                    value=hand.true_value,
                    doubled=hand.doubled,
                    outcome=outcome,
                )
            )

        self.result = RoundResult(
            hands=tuple(results),
            dealer_cards=tuple(self.dealer_hand.cards),
            dealer_value=self.dealer_hand.true_value,
            dealer_blackjack=self._dealer_had_blackjack,
            hands_bought=self._spare_hands_at_deal - self.spare_hands,
            spare_hands=self.spare_hands,
        )
        self.events.emit_new(
            EventType.ROUND_ENDED,
            payout=self.result.payout,
            hands_bought=self.result.hands_bought,
        )
        logger.debug(
            "Round settled: dealer %d, payout weight %.1f, %d spare hand(s) used",
            self.result.dealer_value,
            self.result.payout,
            self.result.hands_bought,
        )

        self.resolve()
        self._collect_cards()

    def _collect_cards(self) -> None:
        """Return every card to the discard pile and drop split hands."""
        for hand in [*self.hands, self.dealer_hand]:
            self.deck.discard(hand.clear())
        del self.hands[self.settings.hand_count:]
        self.current_hand_index = 0

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.state == GameState.PLAYER_TURN and self.current_hand is not None

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.can_hit

    @property
    def can_double(self) -> bool:
        """Check if doubling is allowed (a spare hand must be left)."""
        return self.can_hit and self.spare_hands > 0

    @property
    def can_split(self) -> bool:
        """Check if splitting is allowed."""
        hand = self.current_hand
        return self.can_double and hand is not None and hand.is_splittable
