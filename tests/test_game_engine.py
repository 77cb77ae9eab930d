"""Tests for the GameEngine class.

Tests cover:
1. Engine initialization and reset
2. The turn cycle (acting, drawing, infecting, ending)
3. Each action type and the role capabilities that change it
4. Event cards, stored events and Forecast
5. Hand limit discards
6. Game over conditions
7. Illegal actions
"""

import pytest

from core.cards import Card
from core.config import GameConfig
from core.constants import (
    Color,
    Difficulty,
    EventType,
    GameOverReason,
    RoleType,
    TurnPhase,
)
from core.errors import IllegalActionError
from core.game_state import GameState
from core.player import Role
from engine.actions import Action, ActionType
from engine.game_engine import GameEngine, StepResult


BLUE_CARDS = ["Chicago", "Washington", "Montreal", "New York", "London", "Madrid", "Paris"]


# =============================================================================
# Helpers
# =============================================================================

def take_card(state: GameState, name: str) -> Card:
    """Find a player card wherever it is and free it from piles."""
    deck = state.player_deck
    card = deck.find(name, draw=True)
    if card is not None:
        return card
    for player in state.players:
        for held in player.hand:
            if held.name == name:
                return held
    card = deck.find_discarded(name)
    if card is None:
        raise LookupError(name)
    return deck.take_from_discard(card)


def give(engine: GameEngine, player_id: int, *names: str) -> None:
    player = engine.state.get_player(player_id)
    for name in names:
        player.pick_up(take_card(engine.state, name))


def clear_hands(engine: GameEngine) -> None:
    """Move every held card to the bottom of the player deck."""
    state = engine.state
    for player in state.players:
        for card in list(player.hand):
            player.remove_card(card)
            state.player_deck.cards.append(card)


def stack_player_deck(engine: GameEngine, *names: str) -> None:
    """Put named city cards on top of the player deck, in order."""
    cards = [take_card(engine.state, name) for name in names]
    for card in cards:
        if card.holder is not None:
            card.holder.remove_card(card)
    engine.state.player_deck.cards[:0] = cards


def set_role(engine: GameEngine, player_id: int, role: RoleType) -> None:
    engine.state.get_player(player_id).role = Role(role)


def set_cubes(state: GameState, city_name: str, color: Color, count: int) -> None:
    """Set a city's cubes of a color, keeping the supply in step."""
    city = state.board.get_city(city_name)
    current = city.cubes(color)
    if current:
        city.remove_cubes(color, current)
        state.ledger.return_cubes(color, current)
    if count:
        state.ledger.take_cubes(color, count)
        city.add_cubes(color, count)


def actions_of(engine: GameEngine, action_type: ActionType, **params) -> list[Action]:
    return [
        a for a in engine.get_actions_of_type(action_type)
        if all(a.params.get(k) == v for k, v in params.items())
    ]


def spend_actions(engine: GameEngine, count: int = 4) -> None:
    """Drive the current player's pawn back and forth."""
    for _ in range(count):
        player_id = engine.get_current_player().player_id
        drive = actions_of(engine, ActionType.DRIVE, pawn=player_id)[0]
        assert engine.step(drive).success


def advance_to_drawing(engine: GameEngine) -> None:
    spend_actions(engine)
    stack_player_deck(engine, "Tokyo", "Lima")
    assert engine.phase == TurnPhase.DRAWING


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def engine() -> GameEngine:
    """A 2-player game with fixed roles and empty hands."""
    engine = GameEngine()
    engine.reset(config=GameConfig(num_players=2, seed=21))
    set_role(engine, 0, RoleType.CONTINGENCY_PLANNER)
    set_role(engine, 1, RoleType.OPERATIONS_EXPERT)
    clear_hands(engine)
    return engine


# =============================================================================
# Initialization
# =============================================================================

class TestEngineInitialization:
    """Test engine creation and reset."""

    def test_state_before_reset(self):
        """Accessing state before reset should fail."""
        engine = GameEngine()
        with pytest.raises(RuntimeError):
            _ = engine.state
        assert not engine.is_game_over()
        assert str(engine) == "GameEngine(not initialized)"

    def test_reset(self):
        """Reset should set up a playable game."""
        engine = GameEngine()
        state = engine.reset(num_players=3, difficulty=Difficulty.MEDIUM, seed=4)
        assert state.num_players() == 3
        assert engine.phase == TurnPhase.ACTING
        assert engine.get_current_player().player_id == 0
        assert engine.setup_result.hand_sizes == [3, 3, 3]
        assert state.validate() == []

    def test_reset_is_reproducible(self):
        """Two engines with the same seed start identically."""
        a, b = GameEngine(), GameEngine()
        a.reset(seed=9)
        b.reset(seed=9)
        assert a.state.state_hash() == b.state.state_hash()

    def test_first_turn_drives(self, engine: GameEngine):
        """From Atlanta a pawn can drive to three cities."""
        drives = actions_of(engine, ActionType.DRIVE, pawn=0)
        assert sorted(a.params["city"] for a in drives) == ["Chicago", "Miami", "Washington"]


# =============================================================================
# Turn Cycle
# =============================================================================

class TestTurnCycle:
    """Test a full turn."""

    def test_full_turn(self, engine: GameEngine):
        """ACTING -> DRAWING -> INFECTING -> ENDING -> next player's ACTING."""
        spend_actions(engine, 3)
        assert engine.phase == TurnPhase.ACTING
        assert engine.state.current_turn().actions_remaining == 1

        spend_actions(engine, 1)
        assert engine.phase == TurnPhase.DRAWING
        assert len(engine.get_actions_of_type(ActionType.DRAW_CARDS)) == 1

        stack_player_deck(engine, "Tokyo", "Lima")
        result = engine.step(engine.get_actions_of_type(ActionType.DRAW_CARDS)[0])
        assert result.success
        assert result.info["epidemics"] == []
        assert [c.name for c in engine.state.players[0].hand] == ["Lima", "Tokyo"]
        assert engine.phase == TurnPhase.INFECTING

        infection_left = engine.state.infection_deck.remaining
        engine.step(engine.get_actions_of_type(ActionType.INFECT_CITIES)[0])
        assert engine.state.infection_deck.remaining == infection_left - 2
        assert engine.phase == TurnPhase.ENDING

        result = engine.step(engine.get_actions_of_type(ActionType.END_TURN)[0])
        assert result.info["turn"] == 2
        assert engine.phase == TurnPhase.ACTING
        assert engine.get_current_player().player_id == 1
        assert engine.state.current_turn().actions_remaining == 4

    def test_turn_wraps_around(self, engine: GameEngine):
        """After the last player the first player goes again."""
        for _ in range(2):
            advance_to_drawing(engine)
            engine.step(engine.get_actions_of_type(ActionType.DRAW_CARDS)[0])
            engine.step(engine.get_actions_of_type(ActionType.INFECT_CITIES)[0])
            engine.step(engine.get_actions_of_type(ActionType.END_TURN)[0])
        assert engine.get_current_player().player_id == 0
        assert engine.state.current_turn().number == 3

    def test_epidemic_during_draw(self, engine: GameEngine):
        """An epidemic drawn from the player deck is resolved immediately."""
        state = engine.state
        spend_actions(engine)
        assert state.infection_deck.remaining == 39
        bottom = state.infection_deck.cards[-1]

        epidemic = next(c for c in state.player_deck.cards if c.is_epidemic)
        state.player_deck.cards.remove(epidemic)
        state.player_deck.cards.insert(0, epidemic)
        paris = take_card(state, "Paris")
        state.player_deck.cards.insert(1, paris)

        result = engine.step(engine.get_actions_of_type(ActionType.DRAW_CARDS)[0])

        assert result.info["epidemics"] == [bottom.city]
        assert state.infection_deck.remaining == 47
        assert len(state.infection_deck.discarded) == 1
        assert state.global_state.infection_rate_index == 1
        assert state.player_deck.discarded[0] is epidemic
        assert [c.name for c in state.players[0].hand] == ["Paris"]

        engine.step(engine.get_actions_of_type(ActionType.INFECT_CITIES)[0])
        assert state.infection_deck.remaining == 45
        assert len(state.infection_deck.discarded) == 3
        assert state.infection_deck.discarded[2] is bottom


# =============================================================================
# Movement
# =============================================================================

class TestMovement:
    """Test movement actions."""

    def test_drive(self, engine: GameEngine):
        """Driving moves the pawn and costs an action."""
        engine.step(actions_of(engine, ActionType.DRIVE, city="Chicago")[0])
        assert engine.state.players[0].location == "Chicago"
        assert engine.state.current_turn().actions_remaining == 3

    def test_direct_flight(self, engine: GameEngine):
        """A direct flight discards the destination's card."""
        give(engine, 0, "Paris")
        flight = actions_of(engine, ActionType.DIRECT_FLIGHT, city="Paris")
        assert len(flight) == 1
        assert flight[0].params["card"] == "Paris"

        engine.step(flight[0])
        assert engine.state.players[0].location == "Paris"
        assert engine.state.players[0].hand == []
        assert engine.state.player_deck.discarded[0].name == "Paris"

    def test_charter_flight(self, engine: GameEngine):
        """The current city's card flies anywhere."""
        give(engine, 0, "Atlanta")
        charters = engine.get_actions_of_type(ActionType.CHARTER_FLIGHT)
        assert len(charters) == 47

        engine.step(actions_of(engine, ActionType.CHARTER_FLIGHT, city="Sydney")[0])
        assert engine.state.players[0].location == "Sydney"
        assert engine.state.player_deck.discarded[0].name == "Atlanta"

    def test_shuttle_flight(self, engine: GameEngine):
        """Stations connect to each other without cards."""
        assert engine.get_actions_of_type(ActionType.SHUTTLE_FLIGHT) == []
        engine.state.board.get_city("Lagos").build_research_station()
        engine.state.global_state.research_stations_remaining -= 1

        shuttle = engine.get_actions_of_type(ActionType.SHUTTLE_FLIGHT)
        assert [a.params["city"] for a in shuttle] == ["Lagos"]
        engine.step(shuttle[0])
        assert engine.state.players[0].location == "Lagos"

    def test_dispatcher_moves_other_pawns(self, engine: GameEngine):
        """A dispatcher moves any pawn and joins pawns together."""
        set_role(engine, 0, RoleType.DISPATCHER)
        engine.state.players[1].location = "Chicago"

        assert actions_of(engine, ActionType.DRIVE, pawn=1, city="Montreal")
        dispatch = actions_of(engine, ActionType.DISPATCH_TO_PAWN, pawn=1, city="Atlanta")
        assert len(dispatch) == 1

        engine.step(dispatch[0])
        assert engine.state.players[1].location == "Atlanta"
        assert engine.state.current_turn().actions_remaining == 3

    def test_others_cannot_move_other_pawns(self, engine: GameEngine):
        """Without the dispatcher only your own pawn moves."""
        assert actions_of(engine, ActionType.DRIVE, pawn=1) == []
        assert engine.get_actions_of_type(ActionType.DISPATCH_TO_PAWN) == []

    def test_medic_clears_cured_disease_on_arrival(self, engine: GameEngine):
        """A medic entering a city removes cubes of cured diseases."""
        state = engine.state
        set_role(engine, 0, RoleType.MEDIC)
        state.ledger.cure(Color.BLUE)
        set_cubes(state, "Chicago", Color.BLUE, 2)

        engine.step(actions_of(engine, ActionType.DRIVE, city="Chicago")[0])
        assert state.board.get_city("Chicago").cubes(Color.BLUE) == 0
        assert state.validate() == []


# =============================================================================
# Research Stations
# =============================================================================

class TestResearchStations:
    """Test building research stations."""

    def test_build_with_card(self, engine: GameEngine):
        """Building discards the city's card."""
        engine.step(actions_of(engine, ActionType.DRIVE, city="Chicago")[0])
        assert engine.get_actions_of_type(ActionType.BUILD_RESEARCH_STATION) == []

        give(engine, 0, "Chicago")
        build = engine.get_actions_of_type(ActionType.BUILD_RESEARCH_STATION)
        assert build[0].params == {"city": "Chicago", "card": "Chicago"}
        engine.step(build[0])

        assert engine.state.board.get_city("Chicago").research_station
        assert engine.state.global_state.research_stations_remaining == 4
        assert engine.state.players[0].hand == []

    def test_operations_expert_needs_no_card(self, engine: GameEngine):
        """The operations expert builds without discarding."""
        set_role(engine, 0, RoleType.OPERATIONS_EXPERT)
        engine.step(actions_of(engine, ActionType.DRIVE, city="Chicago")[0])
        build = engine.get_actions_of_type(ActionType.BUILD_RESEARCH_STATION)
        assert build[0].params == {"city": "Chicago", "card": None}
        engine.step(build[0])
        assert engine.state.board.get_city("Chicago").research_station

    def test_no_station_twice(self, engine: GameEngine):
        """Atlanta already has a station."""
        set_role(engine, 0, RoleType.OPERATIONS_EXPERT)
        assert engine.get_actions_of_type(ActionType.BUILD_RESEARCH_STATION) == []

    def test_supply_runs_out(self, engine: GameEngine):
        """No station can be built once the supply is empty."""
        set_role(engine, 0, RoleType.OPERATIONS_EXPERT)
        engine.state.global_state.research_stations_remaining = 0
        engine.state.players[0].location = "Chicago"
        assert engine.get_actions_of_type(ActionType.BUILD_RESEARCH_STATION) == []


# =============================================================================
# Treat Disease
# =============================================================================

class TestTreatDisease:
    """Test treating cubes."""

    @pytest.fixture
    def infected(self, engine: GameEngine) -> GameEngine:
        for city in engine.state.board:
            set_cubes(engine.state, city.name, Color.BLUE, 0)
        set_cubes(engine.state, "Atlanta", Color.BLUE, 2)
        return engine

    def test_treat_one(self, infected: GameEngine):
        """Treating an uncured disease removes one cube."""
        treat = actions_of(infected, ActionType.TREAT_DISEASE, color="blue")
        assert treat[0].params["amount"] == 1
        infected.step(treat[0])
        assert infected.state.board.get_city("Atlanta").cubes(Color.BLUE) == 1
        assert infected.state.ledger.pool(Color.BLUE) == 23

    def test_medic_treats_all(self, infected: GameEngine):
        """A medic removes every cube of the color."""
        set_role(infected, 0, RoleType.MEDIC)
        treat = actions_of(infected, ActionType.TREAT_DISEASE, color="blue")
        assert treat[0].params["amount"] == 2

    def test_cured_disease_treats_all_and_eradicates(self, infected: GameEngine):
        """Treating the last cubes of a cured disease eradicates it."""
        infected.state.ledger.cure(Color.BLUE)
        treat = actions_of(infected, ActionType.TREAT_DISEASE, color="blue")
        assert treat[0].params["amount"] == 2

        result = infected.step(treat[0])
        assert result.info["eradicated"]
        assert infected.state.ledger.is_eradicated(Color.BLUE)

    def test_no_cubes_no_treatment(self, infected: GameEngine):
        """Nothing to treat in a clean city."""
        infected.step(actions_of(infected, ActionType.DRIVE, city="Chicago")[0])
        assert actions_of(infected, ActionType.TREAT_DISEASE, color="blue") == []


# =============================================================================
# Discover a Cure
# =============================================================================

class TestDiscoverCure:
    """Test curing diseases."""

    def test_cure_options_are_combinations(self, engine: GameEngine):
        """Six matching cards give six options, seven give twenty-one."""
        give(engine, 0, *BLUE_CARDS[:6])
        assert len(engine.get_actions_of_type(ActionType.DISCOVER_CURE)) == 6
        give(engine, 0, BLUE_CARDS[6])
        assert len(engine.get_actions_of_type(ActionType.DISCOVER_CURE)) == 21

    def test_cure(self, engine: GameEngine):
        """Curing discards the chosen cards."""
        give(engine, 0, *BLUE_CARDS[:6])
        cure = engine.get_actions_of_type(ActionType.DISCOVER_CURE)[0]
        result = engine.step(cure)

        state = engine.state
        assert result.success
        assert state.ledger.is_cured(Color.BLUE)
        assert state.players[0].hand_size() == 1
        assert {c.name for c in state.player_deck.discarded} == set(cure.params["cards"])
        assert state.current_turn().actions_remaining == 3
        assert engine.get_actions_of_type(ActionType.DISCOVER_CURE) == []

    def test_scientist_needs_four(self, engine: GameEngine):
        """The scientist cures with four cards."""
        set_role(engine, 0, RoleType.SCIENTIST)
        give(engine, 0, *BLUE_CARDS[:4])
        assert len(engine.get_actions_of_type(ActionType.DISCOVER_CURE)) == 1

    def test_needs_research_station(self, engine: GameEngine):
        """No cure away from a station."""
        engine.step(actions_of(engine, ActionType.DRIVE, city="Chicago")[0])
        give(engine, 0, *BLUE_CARDS[1:6])
        assert engine.get_actions_of_type(ActionType.DISCOVER_CURE) == []

    def test_last_cure_wins(self, engine: GameEngine):
        """Curing the fourth disease wins and ends the game."""
        state = engine.state
        for color in (Color.RED, Color.YELLOW, Color.BLACK):
            state.ledger.cure(color)
        give(engine, 0, *BLUE_CARDS[:5])

        result = engine.step(engine.get_actions_of_type(ActionType.DISCOVER_CURE)[0])

        assert result.done
        assert result.info["victory"]
        assert result.info["game_over"] == GameOverReason.ALL_CURED.value
        assert state.global_state.victory
        assert engine.phase == TurnPhase.GAME_OVER
        assert engine.get_valid_actions() == []


# =============================================================================
# Share Knowledge
# =============================================================================

class TestShareKnowledge:
    """Test passing cards between co-located players."""

    def test_give_current_city_card(self, engine: GameEngine):
        """The city's card can be given to a player in the same city."""
        give(engine, 0, "Atlanta", "Paris")
        share = engine.get_actions_of_type(ActionType.SHARE_KNOWLEDGE)
        assert [a.params for a in share] == [{"giver": 0, "receiver": 1, "card": "Atlanta"}]

        engine.step(share[0])
        assert [c.name for c in engine.state.players[1].hand] == ["Atlanta"]
        assert [c.name for c in engine.state.players[0].hand] == ["Paris"]

    def test_take_current_city_card(self, engine: GameEngine):
        """The city's card can be taken from a player in the same city."""
        give(engine, 1, "Atlanta")
        share = engine.get_actions_of_type(ActionType.SHARE_KNOWLEDGE)
        assert [a.params for a in share] == [{"giver": 1, "receiver": 0, "card": "Atlanta"}]

    def test_researcher_gives_any_card(self, engine: GameEngine):
        """A researcher can hand over any city card."""
        set_role(engine, 1, RoleType.RESEARCHER)
        give(engine, 1, "Tokyo", "Lima")
        cards = sorted(a.params["card"] for a in engine.get_actions_of_type(ActionType.SHARE_KNOWLEDGE))
        assert cards == ["Lima", "Tokyo"]

    def test_same_transfer_offered_once(self, engine: GameEngine):
        """A transfer allowed by two rules appears once."""
        set_role(engine, 0, RoleType.RESEARCHER)
        give(engine, 0, "Atlanta")
        assert len(engine.get_actions_of_type(ActionType.SHARE_KNOWLEDGE)) == 1

    def test_must_share_a_city(self, engine: GameEngine):
        """Players in different cities cannot share."""
        give(engine, 0, "Atlanta")
        engine.state.players[1].location = "Chicago"
        assert engine.get_actions_of_type(ActionType.SHARE_KNOWLEDGE) == []


# =============================================================================
# Hand Limit
# =============================================================================

class TestHandLimit:
    """Test discarding down to seven cards."""

    def test_discard_phase(self, engine: GameEngine):
        """Eight cards force a discard, offered once per card."""
        give(engine, 0, "Tokyo", "Lima", "Lagos", "Cairo", "Delhi", "Paris", "Milan", "Essen")
        assert engine.phase == TurnPhase.DISCARDING
        discards = engine.get_valid_actions()
        assert len(discards) == 8
        assert all(a.action_type == ActionType.DISCARD for a in discards)

        engine.step(discards[0])
        assert engine.phase == TurnPhase.ACTING
        assert engine.state.players[0].hand_size() == 7
        assert engine.state.current_turn().actions_remaining == 4

    def test_discards_are_recomputed(self, engine: GameEngine):
        """With nine cards the choice is offered again after each discard."""
        give(engine, 0, "Tokyo", "Lima", "Lagos", "Cairo", "Delhi", "Paris", "Milan", "Essen", "Osaka")
        assert len(engine.get_valid_actions()) == 9
        engine.step(engine.get_valid_actions()[0])
        assert engine.phase == TurnPhase.DISCARDING
        assert len(engine.get_valid_actions()) == 8

    def test_other_player_discards(self, engine: GameEngine):
        """A receiver pushed over the limit must discard."""
        give(engine, 1, "Tokyo", "Lima", "Lagos", "Cairo", "Delhi", "Paris", "Milan")
        give(engine, 0, "Atlanta")
        engine.step(engine.get_actions_of_type(ActionType.SHARE_KNOWLEDGE)[0])

        assert engine.phase == TurnPhase.DISCARDING
        assert {a.player_id for a in engine.get_valid_actions()} == {1}

    def test_no_events_while_discarding(self, engine: GameEngine):
        """Events wait until the discard is done."""
        give(engine, 0, "Airlift", "Tokyo", "Lima", "Lagos", "Cairo", "Delhi", "Paris", "Milan")
        assert engine.get_actions_of_type(ActionType.PLAY_EVENT) == []


# =============================================================================
# Events
# =============================================================================

class TestEvents:
    """Test event cards."""

    def test_airlift_out_of_turn(self, engine: GameEngine):
        """Any player may play an event for free."""
        give(engine, 1, "Airlift")
        airlift = actions_of(engine, ActionType.PLAY_EVENT, event="Airlift", pawn=0, city="Tokyo")
        assert airlift[0].player_id == 1

        engine.step(airlift[0])
        assert engine.state.players[0].location == "Tokyo"
        assert engine.state.current_turn().actions_remaining == 4
        assert engine.state.player_deck.discarded[0].name == "Airlift"

    def test_government_grant(self, engine: GameEngine):
        """Government Grant builds a station anywhere."""
        give(engine, 0, "Government Grant")
        engine.step(actions_of(engine, ActionType.PLAY_EVENT, event="Government Grant", city="Tokyo")[0])
        assert engine.state.board.get_city("Tokyo").research_station
        assert engine.state.global_state.research_stations_remaining == 4

    def test_resilient_population(self, engine: GameEngine):
        """Resilient Population removes an infection discard from the game."""
        state = engine.state
        target = state.infection_deck.discarded[3]
        give(engine, 0, "Resilient Population")
        options = actions_of(engine, ActionType.PLAY_EVENT, event="Resilient Population")
        assert len(options) == 9

        engine.step(actions_of(
            engine, ActionType.PLAY_EVENT, event="Resilient Population", card=target.name
        )[0])
        assert target not in state.infection_deck.discarded
        assert state.infection_deck.removed == [target]

    def test_one_quiet_night_skips_this_turn(self, engine: GameEngine):
        """Played before the infection step, it skips this turn's step."""
        give(engine, 0, "One Quiet Night")
        engine.step(actions_of(engine, ActionType.PLAY_EVENT, event="One Quiet Night")[0])
        assert engine.state.current_turn().skip_infect

        advance_to_drawing(engine)
        infection_left = engine.state.infection_deck.remaining
        engine.step(engine.get_actions_of_type(ActionType.DRAW_CARDS)[0])

        assert engine.phase == TurnPhase.ENDING
        assert engine.get_actions_of_type(ActionType.INFECT_CITIES) == []
        assert engine.state.infection_deck.remaining == infection_left

    def test_one_quiet_night_carries_over(self, engine: GameEngine):
        """Played after the infection step, it skips the next turn's step."""
        advance_to_drawing(engine)
        engine.step(engine.get_actions_of_type(ActionType.DRAW_CARDS)[0])
        engine.step(engine.get_actions_of_type(ActionType.INFECT_CITIES)[0])
        assert engine.phase == TurnPhase.ENDING

        give(engine, 1, "One Quiet Night")
        engine.step(actions_of(engine, ActionType.PLAY_EVENT, event="One Quiet Night")[0])
        assert engine.state.global_state.quiet_night_pending

        engine.step(engine.get_actions_of_type(ActionType.END_TURN)[0])
        assert engine.state.current_turn().skip_infect
        assert not engine.state.global_state.quiet_night_pending

    def test_forecast(self, engine: GameEngine):
        """Forecast lets the player put the top six infection cards in any order."""
        state = engine.state
        top_six = [c.name for c in state.infection_deck.cards[:6]]
        give(engine, 0, "Forecast")

        engine.step(actions_of(engine, ActionType.PLAY_EVENT, event="Forecast")[0])
        assert engine.phase == TurnPhase.FORECASTING
        options = engine.get_valid_actions()
        assert sorted(a.params["card"] for a in options) == sorted(top_six)
        assert all(a.action_type == ActionType.ARRANGE_FORECAST for a in options)

        for name in reversed(top_six):
            result = engine.step(actions_of(engine, ActionType.ARRANGE_FORECAST, card=name)[0])
            assert result.success

        assert [c.name for c in state.infection_deck.cards[:6]] == list(reversed(top_six))
        assert engine.phase == TurnPhase.ACTING
        assert not state.global_state.forecast_pending
        assert state.current_turn().actions_remaining == 4

    def test_events_playable_while_drawing(self, engine: GameEngine):
        """Events are offered outside the acting phase too."""
        give(engine, 1, "Airlift")
        advance_to_drawing(engine)
        assert actions_of(engine, ActionType.PLAY_EVENT, event="Airlift")


class TestContingencyPlanner:
    """Test storing an event card."""

    @pytest.fixture
    def discarded_airlift(self, engine: GameEngine) -> GameEngine:
        card = take_card(engine.state, "Airlift")
        engine.state.player_deck.discard(card)
        return engine

    def test_retrieve_and_play(self, discarded_airlift: GameEngine):
        """A stored event is played once, then leaves the game."""
        engine = discarded_airlift
        state = engine.state
        retrieve = engine.get_actions_of_type(ActionType.RETRIEVE_EVENT)
        assert [a.params for a in retrieve] == [{"card": "Airlift"}]

        engine.step(retrieve[0])
        planner = state.players[0]
        assert planner.role.stored_event.name == "Airlift"
        assert state.player_deck.find_discarded("Airlift") is None
        assert state.current_turn().actions_remaining == 3
        assert engine.get_actions_of_type(ActionType.RETRIEVE_EVENT) == []

        engine.step(actions_of(engine, ActionType.PLAY_EVENT, event="Airlift", pawn=1, city="Lima")[0])
        assert state.players[1].location == "Lima"
        assert planner.role.stored_event is None
        assert [c.name for c in state.player_deck.removed] == ["Airlift"]
        assert state.validate() == []

    def test_other_roles_cannot_retrieve(self, discarded_airlift: GameEngine):
        """Only the contingency planner stores events."""
        set_role(discarded_airlift, 0, RoleType.SCIENTIST)
        assert discarded_airlift.get_actions_of_type(ActionType.RETRIEVE_EVENT) == []


# =============================================================================
# Game Over
# =============================================================================

class TestGameOver:
    """Test losing the game."""

    def test_player_deck_exhausted(self, engine: GameEngine):
        """Drawing from a nearly empty player deck loses."""
        state = engine.state
        spend_actions(engine)
        deck = state.player_deck
        deck.removed.extend(deck.cards[1:])
        del deck.cards[1:]

        result = engine.step(engine.get_actions_of_type(ActionType.DRAW_CARDS)[0])

        assert result.success
        assert result.done
        assert result.info["game_over"] == GameOverReason.PLAYER_DECK_EXHAUSTED.value
        assert not result.info["victory"]
        assert engine.is_game_over()
        assert engine.phase == TurnPhase.GAME_OVER
        assert engine.get_valid_actions() == []

        again = engine.step(Action(ActionType.DRAW_CARDS, 0))
        assert not again.success
        assert again.done

    def test_outbreak_limit_during_infection(self, engine: GameEngine):
        """The eighth outbreak ends the game during the infection step."""
        state = engine.state
        advance_to_drawing(engine)
        engine.step(engine.get_actions_of_type(ActionType.DRAW_CARDS)[0])

        top = state.infection_deck.cards[0]
        set_cubes(state, top.city, top.color, 3)
        state.global_state.outbreak_count = 7

        result = engine.step(engine.get_actions_of_type(ActionType.INFECT_CITIES)[0])
        assert result.done
        assert state.global_state.game_over_reason == GameOverReason.OUTBREAK_LIMIT


# =============================================================================
# Illegal Actions
# =============================================================================

class TestIllegalActions:
    """Test rejection of actions that are not offered."""

    def test_rejected_without_mutation(self, engine: GameEngine):
        """An illegal action leaves the state untouched."""
        before = engine.state.state_hash()
        result = engine.step(Action(ActionType.DRIVE, 0, {"pawn": 0, "city": "Tokyo"}))
        assert isinstance(result, StepResult)
        assert not result.success
        assert "Invalid action" in result.info["error"]
        assert engine.state.state_hash() == before

    def test_wrong_player(self, engine: GameEngine):
        """Only the current player takes actions."""
        result = engine.step(Action(ActionType.DRIVE, 1, {"pawn": 1, "city": "Chicago"}))
        assert not result.success

    def test_wrong_phase(self, engine: GameEngine):
        """Turn steps are not offered out of order."""
        assert not engine.step(Action(ActionType.END_TURN, 0)).success

    def test_apply_raises(self, engine: GameEngine):
        """apply() is the strict variant of step()."""
        with pytest.raises(IllegalActionError):
            engine.apply(Action(ActionType.DRIVE, 0, {"pawn": 0, "city": "Tokyo"}))
        result = engine.apply(actions_of(engine, ActionType.DRIVE, city="Miami")[0])
        assert result.success


# =============================================================================
# Utilities
# =============================================================================

class TestUtilities:
    """Test clone and summary helpers."""

    def test_clone_is_independent(self, engine: GameEngine):
        """Stepping a clone leaves the original alone."""
        before = engine.state.state_hash()
        clone = engine.clone()
        clone.step(actions_of(clone, ActionType.DRIVE, city="Chicago")[0])
        assert clone.state.players[0].location == "Chicago"
        assert engine.state.state_hash() == before

    def test_summary(self, engine: GameEngine):
        """The summary reports the headline numbers."""
        summary = engine.get_game_summary()
        assert summary["phase"] == "acting"
        assert summary["turn"] == 1
        assert summary["actions_remaining"] == 4
        assert summary["infection_rate"] == 2
        assert summary["research_stations_remaining"] == 5
        assert len(summary["players"]) == 2
        assert set(summary["diseases"]) == {"red", "blue", "yellow", "black"}
        assert not summary["game_over"]

    def test_event_enum_values_are_card_names(self):
        """Event cards are named after their event."""
        assert EventType.ONE_QUIET_NIGHT.value == "One Quiet Night"
