"""Blackjack round engine with state machine."""

import logging
from random import Random
from typing import Callable, Iterator

from transitions import Machine

from blackjack.cards import Card, Deck
from blackjack.hand import BLACKJACK, Hand
from blackjack.ledger import STARTING_BALANCE, BalanceLedger
from blackjack.payout import Outcome, Payout, ResultCategory, calculate_payout
from blackjack.persistence import BalanceStore, InMemoryBalanceStore
from blackjack.game.events import EventEmitter, EventType, GameEvent
from blackjack.game.snapshot import TableSnapshot
from blackjack.game.state import RoundState

logger = logging.getLogger(__name__)

DEALER_STANDS_ON = 17

MSG_PLACE_BET = "Place your bet to start playing!"
MSG_DEAL = "Click DEAL to start the round!"
MSG_HIT_OR_STAND = "Hit or Stand?"
MSG_DEALER_TURN = "Dealer's turn..."
MSG_INSUFFICIENT_FUNDS = "Insufficient funds!"
MSG_GAME_OVER = f"Game Over! Start a new game to restart with ${STARTING_BALANCE}."


class RoundStateMachine:
    """
    Single-player blackjack round engine.

    Drives one betting → playing → dealer turn → resolved cycle at a time.
    This is completely UI-agnostic: renderers subscribe to events or poll
    ``snapshot()``, and invalid input is answered with an advisory message
    instead of an exception.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "deal_cards", "source": "betting", "dest": "playing"},
        {"trigger": "natural", "source": "betting", "dest": "resolved"},
        {"trigger": "player_done", "source": "playing", "dest": "dealer_turn"},
        {"trigger": "player_busts", "source": "playing", "dest": "resolved"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "resolved"},
        {"trigger": "open_betting", "source": "resolved", "dest": "betting"},
        {"trigger": "restart", "source": ["betting", "playing", "resolved"], "dest": "betting"},
    ]

    def __init__(
        self,
        store: BalanceStore | None = None,
        rng: Random | None = None,
        deck: Deck | None = None,
    ) -> None:
        """
        Initialize a table, restoring the ledger from ``store``.

        Args:
            store: Persistence port for the balance ledger (in-memory if omitted)
            rng: Random number generator for reproducible shuffles
            deck: Pre-built deck, e.g. a stacked one for replays
        """
        self.store = store or InMemoryBalanceStore()
        self.deck = deck or Deck(rng=rng)
        self.ledger = BalanceLedger.from_record(self.store.load())

        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.bet = 0
        self.last_payout: Payout | None = None
        self.message = MSG_PLACE_BET
        self.message_category: str | None = None
        self.events = EventEmitter()

        initial = "betting"
        if self.ledger.is_bankrupt:
            initial = "resolved"
            self.message = MSG_GAME_OVER
            self.message_category = str(ResultCategory.LOSE)

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=initial,
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_on_state_change",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    @property
    def balance(self) -> int:
        return self.ledger.balance

    @property
    def bankrupt(self) -> bool:
        """Check if the game is over until an explicit reset."""
        return self.state == RoundState.RESOLVED and self.ledger.is_bankrupt

    @property
    def hide_dealer_hole_card(self) -> bool:
        return self.state == RoundState.PLAYING

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    # Input verbs

    def place_bet(self, amount: int) -> bool:
        """
        Add a chip to the current bet.

        Args:
            amount: Positive whole amount taken from the balance

        Returns:
            True if the chip was accepted
        """
        if self.bankrupt:
            return self._reject(MSG_GAME_OVER)

        if self.state != RoundState.BETTING:
            return self._reject("Bets can only be placed between rounds")

        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            return self._reject("Bet must be a positive whole amount")

        if amount > self.ledger.balance:
            self._set_message(MSG_INSUFFICIENT_FUNDS, ResultCategory.LOSE)
            self.events.emit_new(
                EventType.INSUFFICIENT_FUNDS,
                required=amount,
                available=self.ledger.balance,
            )
            return False

        self.ledger.apply_delta(-amount)
        self.bet += amount
        self._set_message(MSG_DEAL)

        self.events.emit_new(EventType.BET_PLACED, amount=amount, bet=self.bet)
        self._notify()
        return True

    def start_round(self) -> bool:
        """
        Deal the opening cards for the current bet.

        Deals player, dealer, player, dealer. A natural on either side
        resolves the round at once; otherwise play moves to the player.
        """
        if self.bankrupt:
            return self._reject(MSG_GAME_OVER)

        if self.state != RoundState.BETTING:
            return self._reject("A round is already in progress")

        if self.bet == 0:
            return self._reject("Place a bet before dealing")

        self.player_hand.clear()
        self.dealer_hand.clear()
        self.last_payout = None

        self._deal_card_to_hand(self.player_hand)
        self._deal_card_to_hand(self.dealer_hand)
        self._deal_card_to_hand(self.player_hand)
        self._deal_card_to_hand(self.dealer_hand, face_up=False)

        logger.info("Round started with bet %d", self.bet)
        self.events.emit_new(EventType.ROUND_STARTED, bet=self.bet)

        outcome = self._natural_outcome()
        if outcome is not None:
            self._finish_round("natural", outcome)
            return True

        self._set_message(MSG_HIT_OR_STAND)
        self.deal_cards()
        return True

    def hit(self) -> bool:
        """Player takes another card. Reaching 21 stands automatically."""
        if self.state != RoundState.PLAYING:
            return self._reject("You can only hit during your turn")

        self._deal_card_to_hand(self.player_hand)
        value = self.player_hand.value
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=value)

        if value > BLACKJACK:
            self._finish_round("player_busts", Outcome.BUST)
        elif value == BLACKJACK:
            self._stand()
        else:
            self._notify()
        return True

    def stand(self) -> bool:
        """Player keeps the current hand; the dealer turn begins."""
        if self.state != RoundState.PLAYING:
            return self._reject("You can only stand during your turn")

        self._stand()
        return True

    def reset_game(self) -> bool:
        """
        Start over with the starting balance and zeroed statistics.

        Rejected while the dealer is playing. A bet still on the table is
        forfeited along with the old balance.
        """
        if self.state == RoundState.DEALER_TURN:
            return self._reject("Cannot reset while the dealer is playing")

        self.ledger.reset()
        self.bet = 0
        self.player_hand.clear()
        self.dealer_hand.clear()
        self.last_payout = None
        self.deck.reset()
        self._set_message(MSG_PLACE_BET)
        self.store.save(self.ledger.to_record())

        logger.info("Game reset to starting balance %d", self.ledger.balance)
        self.events.emit_new(EventType.GAME_RESET, balance=self.ledger.balance)
        self.restart()
        return True

    # Dealer turn

    def advance_dealer(self) -> bool:
        """
        Perform one dealer step.

        Draws a single card while the dealer is below 17; once the dealer
        stands or busts, settles the round instead.

        Returns:
            True if a card was drawn, False if the turn ended (or was not active)
        """
        if self.state != RoundState.DEALER_TURN:
            logger.debug("advance_dealer ignored in state %s", self.state.name)
            return False

        if self.dealer_hand.value < DEALER_STANDS_ON:
            self._deal_card_to_hand(self.dealer_hand)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer_hand.value)
            self._notify()
            return True

        self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)
        self._finish_round("dealer_done", self._showdown_outcome())
        return False

    def dealer_steps(self) -> Iterator[TableSnapshot]:
        """
        Iterate the dealer turn one step at a time.

        Yields a snapshot after each step, so a caller can pause between
        cards. The last snapshot is taken after the round is settled.
        """
        while self.state == RoundState.DEALER_TURN:
            self.advance_dealer()
            yield self.snapshot()

    def play_dealer(self) -> TableSnapshot:
        """Run the dealer turn to completion without pausing."""
        for _ in self.dealer_steps():
            pass
        return self.snapshot()

    # Observable state

    def snapshot(self) -> TableSnapshot:
        """Return a read-only view of the table."""
        hide = self.hide_dealer_hole_card
        if hide and self.dealer_hand.cards:
            dealer_value = self.dealer_hand.cards[0].value
        else:
            dealer_value = self.dealer_hand.value

        return TableSnapshot(
            state=self.state,
            balance=self.ledger.balance,
            bet=self.bet,
            wins=self.ledger.wins,
            games_played=self.ledger.games_played,
            player_hand=tuple(self.player_hand.cards),
            dealer_hand=tuple(self.dealer_hand.cards),
            player_value=self.player_hand.value,
            dealer_value=dealer_value,
            hide_dealer_hole_card=hide,
            message=self.message,
            message_category=self.message_category,
            outcome=self.last_payout.outcome if self.last_payout else None,
            bankrupt=self.bankrupt,
        )

    @property
    def can_bet(self) -> bool:
        return self.state == RoundState.BETTING and self.ledger.balance > 0

    @property
    def can_deal(self) -> bool:
        return self.state == RoundState.BETTING and self.bet > 0

    @property
    def can_hit(self) -> bool:
        return self.state == RoundState.PLAYING

    @property
    def can_stand(self) -> bool:
        return self.state == RoundState.PLAYING

    @property
    def can_reset(self) -> bool:
        return self.state != RoundState.DEALER_TURN

    # Internals

    def _deal_card_to_hand(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand."""
        card = self.deck.draw()
        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand="dealer" if hand is self.dealer_hand else "player",
        )
        return card

    def _stand(self) -> None:
        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.player_hand.value)
        self._set_message(MSG_DEALER_TURN)
        self.player_done()
        if len(self.dealer_hand.cards) >= 2:
            self.events.emit_new(
                EventType.DEALER_REVEALS,
                card=str(self.dealer_hand.cards[1]),
                hand_value=self.dealer_hand.value,
            )

    def _natural_outcome(self) -> Outcome | None:
        """Check the opening hands for naturals."""
        player_bj = self.player_hand.is_blackjack
        dealer_bj = self.dealer_hand.is_blackjack

        if player_bj and dealer_bj:
            return Outcome.PUSH
        if player_bj:
            return Outcome.BLACKJACK
        if dealer_bj:
            return Outcome.DEALER_BLACKJACK
        return None

    def _showdown_outcome(self) -> Outcome:
        """Compare the finished hands."""
        player_value = self.player_hand.value
        dealer_value = self.dealer_hand.value

        if dealer_value > BLACKJACK:
            return Outcome.DEALER_BUST
        if player_value > dealer_value:
            return Outcome.WIN
        if dealer_value > player_value:
            return Outcome.LOSE
        return Outcome.PUSH

    def _finish_round(self, trigger: str, outcome: Outcome) -> None:
        """Pay out, record and persist the round, then fire ``trigger``."""
        payout = calculate_payout(outcome, self.bet)

        self.ledger.apply_delta(payout.credit)
        self.ledger.record_game(payout.is_win)
        self.bet = 0
        self.last_payout = payout
        self._set_message(payout.message, payout.category)
        self.store.save(self.ledger.to_record())

        logger.info(
            "Round resolved: %s, credited %d, balance %d",
            outcome,
            payout.credit,
            self.ledger.balance,
        )

        self.trigger(trigger)
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=str(outcome),
            category=str(payout.category),
            credit=payout.credit,
            net=payout.net,
            balance=self.ledger.balance,
        )

        if self.ledger.is_bankrupt:
            logger.info("Player is bankrupt")
            self.events.emit_new(EventType.BANKRUPT, message=MSG_GAME_OVER)
            return

        self.open_betting()

    def _set_message(self, message: str, category: ResultCategory | None = None) -> None:
        self.message = message
        self.message_category = str(category) if category is not None else None

    def _reject(self, message: str) -> bool:
        """Surface an advisory message for an action invalid right now."""
        logger.debug("Rejected action in state %s: %s", self.state.name, message)
        self._set_message(message)
        self.events.emit_new(
            EventType.INVALID_ACTION,
            message=message,
            state=self.state.name,
        )
        return False

    def _notify(self) -> None:
        self.events.emit_new(EventType.STATE_CHANGED, snapshot=self.snapshot())

    def _on_state_change(self) -> None:
        self._notify()
