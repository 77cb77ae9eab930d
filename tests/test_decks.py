"""Tests for decks: dealing, epidemic distribution and card movement."""

import random

import pytest

from core.cards import (
    Card,
    Deck,
    EPIDEMIC_CARD_NAME,
    split_into_groups,
    build_infection_deck,
    build_player_deck,
    build_role_deck,
)
from core.constants import (
    CardType,
    DeckKind,
    Difficulty,
    GameOverReason,
    RoleType,
)
from core.errors import GameOver
from core.player import Player
from data.loader import load_default_cities


@pytest.fixture
def board():
    return load_default_cities()


def make_players(count: int) -> list[Player]:
    return [Player(name=f"Player {i + 1}", player_id=i) for i in range(count)]


def named_deck(count: int, kind: DeckKind = DeckKind.INFECTION) -> Deck:
    deck = Deck(kind=kind, rng=random.Random(0))
    deck.cards = [Card(card_type=CardType.CITY, name=f"C{i}", city=f"C{i}") for i in range(count)]
    return deck


# =============================================================================
# Deck Builders
# =============================================================================

class TestDeckBuilders:
    """Test the three decks built for a session."""

    def test_infection_deck(self, board):
        """One infection card per city."""
        deck = build_infection_deck(board, random.Random(1))
        assert deck.remaining == 48
        assert {c.name for c in deck.cards} == set(board.names())

    def test_player_deck(self, board):
        """One city card per city plus five events."""
        deck = build_player_deck(board, random.Random(1))
        assert deck.remaining == 53
        assert deck.count(CardType.CITY) == 48
        assert deck.count(CardType.EVENT) == 5
        assert deck.count(CardType.EPIDEMIC) == 0

    def test_role_deck(self):
        """One card per role."""
        deck = build_role_deck(random.Random(1))
        assert {c.role for c in deck.cards} == set(RoleType)

    def test_city_cards_carry_color(self, board):
        """City cards know their city's color."""
        deck = build_player_deck(board, random.Random(1))
        card = deck.find("Khartoum")
        assert card.city == "Khartoum"
        assert card.color == board.get_city("Khartoum").color


# =============================================================================
# Dealing
# =============================================================================

class TestDeal:
    """Test starting hands and epidemic placement."""

    @pytest.mark.parametrize("num_players,hand", [(2, 4), (3, 3), (4, 2)])
    def test_hand_sizes(self, board, num_players: int, hand: int):
        """Fewer players get more cards."""
        deck = build_player_deck(board, random.Random(7))
        players = make_players(num_players)
        deck.deal(players, Difficulty.EASY)
        assert [p.hand_size() for p in players] == [hand] * num_players
        assert all(card.holder is p for p in players for card in p.hand)

    def test_easy_two_player_deck(self, board):
        """Easy, 2 players: 45 cards left plus 4 epidemics."""
        deck = build_player_deck(board, random.Random(7))
        deck.deal(make_players(2), Difficulty.EASY)
        assert deck.remaining == 49
        assert deck.count(CardType.EPIDEMIC) == 4

    @pytest.mark.parametrize("difficulty,epidemics", [
        (Difficulty.EASY, 4),
        (Difficulty.MEDIUM, 5),
        (Difficulty.HARD, 6),
    ])
    def test_one_epidemic_per_group(self, board, difficulty: Difficulty, epidemics: int):
        """Each contiguous slice of the deck holds exactly one epidemic."""
        deck = build_player_deck(board, random.Random(3))
        deck.deal(make_players(4), difficulty)

        undealt = deck.remaining - epidemics
        size, extra = divmod(undealt, epidemics)
        start = 0
        for i in range(epidemics):
            end = start + size + (1 if i < extra else 0) + 1
            group = deck.cards[start:end]
            assert sum(1 for c in group if c.is_epidemic) == 1
            start = end
        assert start == deck.remaining

    def test_epidemic_cards_are_distinct(self, board):
        """Epidemic cards are separate objects with the same name."""
        deck = build_player_deck(board, random.Random(3))
        deck.deal(make_players(2), Difficulty.EASY)
        epidemics = [c for c in deck.cards if c.is_epidemic]
        assert len({id(c) for c in epidemics}) == 4
        assert all(c.name == EPIDEMIC_CARD_NAME for c in epidemics)

    def test_deal_is_seeded(self, board):
        """The same seed deals the same hands and deck order."""
        def deal(seed: int) -> list[str]:
            deck = build_player_deck(board, random.Random(seed))
            players = make_players(3)
            deck.deal(players, Difficulty.MEDIUM)
            return [c.name for p in players for c in p.hand] + [c.name for c in deck.cards]

        assert deal(99) == deal(99)

    def test_bad_player_count(self, board):
        """Dealing needs 2 to 4 players."""
        deck = build_player_deck(board, random.Random(3))
        with pytest.raises(ValueError):
            deck.deal(make_players(5), Difficulty.EASY)


class TestSplitIntoGroups:
    """Test splitting a deck into near-equal groups."""

    def test_extra_cards_go_first(self):
        """The remainder goes to the first groups."""
        cards = named_deck(10).cards
        groups = split_into_groups(cards, 4)
        assert [len(g) for g in groups] == [3, 3, 2, 2]
        assert [c for g in groups for c in g] == cards


# =============================================================================
# Card Movement
# =============================================================================

class TestCardMovement:
    """Test drawing, discarding and removing cards."""

    def test_draw_takes_top(self):
        """Draw removes the first card."""
        deck = named_deck(3)
        top = deck.cards[0]
        assert deck.draw() is top
        assert deck.remaining == 2

    def test_draw_bottom(self):
        """draw_bottom removes the last card."""
        deck = named_deck(3)
        bottom = deck.cards[-1]
        assert deck.draw_bottom() is bottom

    def test_draw_empty(self):
        """Drawing from an empty infection deck is an error."""
        deck = named_deck(0)
        with pytest.raises(ValueError):
            deck.draw()

    def test_player_deck_exhaustion(self):
        """Drawing with fewer than two player cards left ends the game."""
        deck = named_deck(2, DeckKind.PLAYER)
        deck.draw()
        with pytest.raises(GameOver) as exc_info:
            deck.draw()
        assert exc_info.value.reason == GameOverReason.PLAYER_DECK_EXHAUSTED
        assert deck.remaining == 1

    def test_discard_draw_round_trip(self):
        """discard(draw()) moves the top card to the top of the discard pile."""
        deck = named_deck(5)
        top = deck.cards[0]
        total = deck.total_cards()
        deck.discard(deck.draw())
        assert deck.discarded[0] is top
        assert deck.remaining == 4
        assert deck.total_cards() == total

    def test_discard_from_hand(self):
        """Discarding a held card takes it out of the hand."""
        deck = named_deck(3, DeckKind.PLAYER)
        player = Player(name="Ada")
        card = deck.draw()
        player.pick_up(card)
        deck.discard(card)
        assert player.hand == []
        assert card.holder is None
        assert deck.discarded == [card]

    def test_remove_from_game(self):
        """Removed cards leave the discard pile for good."""
        deck = named_deck(3)
        card = deck.draw()
        deck.discard(card)
        deck.remove_from_game(card)
        assert deck.discarded == []
        assert deck.removed == [card]
        assert deck.total_cards() == 3

    def test_take_from_discard(self):
        """A discarded card can be taken back out."""
        deck = named_deck(3)
        card = deck.draw()
        deck.discard(card)
        assert deck.take_from_discard(card) is card
        assert deck.discarded == []
        with pytest.raises(ValueError):
            deck.take_from_discard(card)

    def test_intensify(self):
        """Intensify stacks the discard pile, unchanged, on top."""
        deck = named_deck(6)
        first, second = deck.draw(), deck.draw()
        deck.discard(first)
        deck.discard(second)
        drawn = deck.draw_bottom()

        deck.intensify(drawn)

        assert deck.cards[:2] == [second, first]
        assert deck.discarded == [drawn]
        assert deck.remaining == 5

    def test_find(self):
        """Cards can be found in the draw pile by name."""
        deck = named_deck(4)
        assert deck.find("C2").name == "C2"
        assert deck.remaining == 4
        assert deck.find("C2", draw=True).name == "C2"
        assert deck.remaining == 3
        assert deck.find("C2") is None


class TestReorderTop:
    """Test rewriting the top of the deck."""

    def test_reorder(self):
        """The named cards take the given order; the rest are untouched."""
        deck = named_deck(8)
        deck.reorder_top(["C2", "C0", "C1"])
        assert [c.name for c in deck.cards] == ["C2", "C0", "C1", "C3", "C4", "C5", "C6", "C7"]

    def test_reorder_must_be_permutation(self):
        """Names outside the top cards are rejected."""
        deck = named_deck(8)
        with pytest.raises(ValueError):
            deck.reorder_top(["C0", "C5"])
