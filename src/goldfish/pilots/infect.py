"""
Reference pilot for a mono-green Pauper infect deck.

Plan: play a land and every free mana source, cast one infect creature, then
pump it in combat. When the default pump order cannot reach ten poison
counters, the lethal-order search looks for an ordering of the pump spells in
hand that can, given the green mana the board can still produce.

Usage:
    simulator = GoldfishSimulator(InfectDeckPilot, config)
    simulator = GoldfishSimulator(InfectDeckPilot, config, {"keep": my_oracle})
"""

import logging
from typing import List, Optional, Sequence

from ..game import POISON_TO_WIN
from ..mana import Mana
from ..pilot import DeckPilot, KeepOracle
from ..search import Effect, find_best_order, reaches_target

logger = logging.getLogger(__name__)

G = Mana.of("G")
G1 = Mana.of("1G")
GG = Mana.of("GG")
TWO = Mana.of("2")

# Lands
FOREST = "forest"
PENDELHAVEN = "pendelhaven"

# Creatures
ICHORCLAW_MYR = "ichorclaw myr"
GLISTENER_ELF = "glistener elf"
BLIGHT_MAMBA = "blight mamba"

# Boosts
RANCOR = "rancor"                          # G, aura: +2 when attacking
SEAL_OF_STRENGTH = "seal of strength"      # G, sacrifice: +3
SCALE_UP = "scale up"                      # G: creature becomes 6/4
VINES_OF_VASTWOOD = "vines of vastwood"    # kicked GG: +4
GIANT_GROWTH = "giant growth"              # G: +3
LARGER_THAN_LIFE = "larger than life"      # 1G: +4
INVIGORATE = "invigorate"                  # free with a forest: +4, opponent gains 3
MUTAGENIC_GROWTH = "mutagenic growth"      # free: +2
GROUNDSWELL = "groundswell"                # G: +2, landfall +4
RANGER_S_GUILE = "ranger's guile"          # G: +1
MIGHT_OF_OLD_KROSA = "might of old krosa"  # G: +4 on your turn
BLOSSOMING_DEFENSE = "blossoming defense"  # G: +2

# Free mana
LOTUS_PETAL = "lotus petal"

# Others
GITAXIAN_PROBE = "gitaxian probe"
MENTAL_MISSTEP = "mental misstep"
APOSTLE_S_BLESSING = "apostle's blessing"

MANA_PRODUCERS = (PENDELHAVEN, FOREST, LOTUS_PETAL)
CREATURES = (GLISTENER_ELF, ICHORCLAW_MYR, BLIGHT_MAMBA)
DEAD_CARDS = (MENTAL_MISSTEP, APOSTLE_S_BLESSING)

CREATURE_COSTS = {GLISTENER_ELF: G, BLIGHT_MAMBA: G1, ICHORCLAW_MYR: TWO}

# Pump spells: cost and poison counters added
BOOST_COSTS = {
    RANCOR: G,
    MIGHT_OF_OLD_KROSA: G,
    GROUNDSWELL: G,
    GIANT_GROWTH: G,
    SEAL_OF_STRENGTH: G,
    BLOSSOMING_DEFENSE: G,
    LARGER_THAN_LIFE: G1,
    VINES_OF_VASTWOOD: GG,
    RANGER_S_GUILE: G,
}
BOOST_SCORES = {
    RANCOR: 2,
    MIGHT_OF_OLD_KROSA: 4,
    GIANT_GROWTH: 3,
    SEAL_OF_STRENGTH: 3,
    BLOSSOMING_DEFENSE: 2,
    LARGER_THAN_LIFE: 4,
    VINES_OF_VASTWOOD: 4,
    RANGER_S_GUILE: 1,
}
PERMANENT_BOOSTS = (RANCOR, SEAL_OF_STRENGTH)

# Groundswell is worth more after a land drop, so it moves up the order
LANDED_BOOST_ORDER = (
    RANCOR, GROUNDSWELL, MIGHT_OF_OLD_KROSA, GIANT_GROWTH, SEAL_OF_STRENGTH,
    BLOSSOMING_DEFENSE, LARGER_THAN_LIFE, VINES_OF_VASTWOOD, RANGER_S_GUILE,
)
BOOST_ORDER = (
    RANCOR, MIGHT_OF_OLD_KROSA, GIANT_GROWTH, SEAL_OF_STRENGTH,
    BLOSSOMING_DEFENSE, LARGER_THAN_LIFE, VINES_OF_VASTWOOD, GROUNDSWELL, RANGER_S_GUILE,
)


def keep_infect_hand(hand: Sequence[str]) -> bool:
    """Default keep oracle: one to four mana sources and at least one creature."""
    producers = sum(1 for card in hand if card in MANA_PRODUCERS)
    creatures = sum(1 for card in hand if card in CREATURES)
    return 1 <= producers <= 4 and creatures >= 1


class InfectDeckPilot(DeckPilot):
    """Goldfish pilot for mono-green infect."""

    def __init__(self, game, keep: Optional[KeepOracle] = None):
        super().__init__(game, keep if keep is not None else keep_infect_hand)

    def keep_hand(self, hand: Sequence[str]) -> bool:
        if self.game.mulligans >= 3:
            return True
        return super().keep_hand(hand)

    def start(self) -> None:
        for _ in range(self.game.mulligans):
            self.game.put_on_bottom(self._least_useful_card(in_hand_only=True))

    def first_main_phase(self) -> None:
        game = self.game
        while game.hand.contains(GITAXIAN_PROBE):
            game.cast_nonpermanent(GITAXIAN_PROBE).draw(1)

        # keep the forest for invigorate if there is none on board yet
        if game.hand.contains(PENDELHAVEN) and (
            not game.hand.contains(INVIGORATE) or game.board.contains(FOREST)
        ):
            game.land(PENDELHAVEN)
        elif game.hand.contains(FOREST):
            game.land(FOREST)

        while game.hand.contains(LOTUS_PETAL):
            game.cast_permanent(LOTUS_PETAL)

    def combat_phase(self) -> None:
        game = self.game
        creatures = game.board.find_all(*CREATURES)
        if not creatures:
            return

        # free spells first
        while game.hand.contains(MUTAGENIC_GROWTH):
            game.cast_nonpermanent(MUTAGENIC_GROWTH).poison_opponent(2)
        if game.board.contains(FOREST):
            while game.hand.contains(INVIGORATE):
                game.cast_nonpermanent(INVIGORATE).poison_opponent(4).damage_opponent(-3)

        castable_scale_up = min(len(creatures), game.hand.count(SCALE_UP))
        while castable_scale_up > 0 and self._can_pay(G):
            self._prepare_pool(G)
            game.cast_nonpermanent(SCALE_UP, G).poison_opponent(5)
            castable_scale_up -= 1

        boosts = self._boosts_to_play()
        needed = POISON_TO_WIN - self._poison_on_attack(len(creatures))
        result = find_best_order(self._potential_pool(), [self._effect(b) for b in boosts], target=needed)
        if reaches_target(result, needed):
            logger.debug(f"Lethal order found: {[e.name for e in result.order]}")
            boosts = [effect.name for effect in result.order]

        for boost in boosts:
            self._play_boost(boost)

        for seal in game.board.find_all(SEAL_OF_STRENGTH):
            game.sacrifice(seal).poison_opponent(3)
        for creature in creatures:
            game.tap_for_attack(creature).poison_opponent(1)
        for rancor in game.board.find_all(RANCOR):
            game.tap(rancor).poison_opponent(2)
        for pendelhaven in game.get_untapped(PENDELHAVEN):
            game.tap(pendelhaven).poison_opponent(1)

    def second_main_phase(self) -> None:
        game = self.game
        if game.board.count(*CREATURES) == 0:
            for creature in (GLISTENER_ELF, BLIGHT_MAMBA, ICHORCLAW_MYR):
                if game.hand.contains(creature) and self._can_pay(CREATURE_COSTS[creature]):
                    self._cast_creature(creature)
                    break

        while game.hand.contains(SEAL_OF_STRENGTH) and self._can_pay(G):
            self._prepare_pool(G)
            game.cast_permanent(SEAL_OF_STRENGTH, G)

        if game.board.count(*CREATURES) > 0:
            while game.hand.contains(RANCOR) and self._can_pay(G):
                self._prepare_pool(G)
                game.cast_permanent(RANCOR, G)

        for creature in game.hand.find_all(*CREATURES):
            if self._can_pay(CREATURE_COSTS[creature]):
                self._cast_creature(creature)

    def choose_discard(self) -> str:
        return self._least_useful_card(in_hand_only=False)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _least_useful_card(self, in_hand_only: bool) -> str:
        """Card to bottom (mulligan) or discard (hand size)."""
        hand = self.game.hand
        board = self.game.board
        card = hand.find_first(*DEAD_CARDS)
        if card:
            return card
        producers = hand.count(*MANA_PRODUCERS)
        creatures = hand.count(*CREATURES)
        if not in_hand_only:
            producers += board.count(*MANA_PRODUCERS)
            creatures += board.count(*CREATURES)
        if producers > (2 if in_hand_only else 3):
            card = hand.find_first(*MANA_PRODUCERS)
            if card:
                return card
        if creatures > 2:
            card = hand.find_first(*CREATURES)
            if card:
                return card
        return hand.first()

    def _boosts_to_play(self) -> List[str]:
        order = LANDED_BOOST_ORDER if self.game.landed else BOOST_ORDER
        return [card for name in order for card in self.game.hand.find_all(name)]

    def _boost_score(self, boost: str) -> int:
        if boost == GROUNDSWELL:
            return 4 if self.game.landed else 2
        return BOOST_SCORES[boost]

    def _effect(self, boost: str) -> Effect:
        return Effect(boost, BOOST_COSTS[boost], self._boost_score(boost))

    def _poison_on_attack(self, creature_count: int) -> int:
        """Poison the opponent will have after attacking with no more pumps."""
        board = self.game.board
        return (
            self.game.opponent_poison_counters
            + 3 * board.count(SEAL_OF_STRENGTH)
            + creature_count
            + 2 * board.count(RANCOR)
        )

    def _play_boost(self, boost: str) -> None:
        cost = BOOST_COSTS[boost]
        if not self._can_pay(cost):
            return
        self._prepare_pool(cost)
        if boost in PERMANENT_BOOSTS:
            self.game.cast_permanent(boost, cost)
        else:
            self.game.cast_nonpermanent(boost, cost).poison_opponent(self._boost_score(boost))

    def _cast_creature(self, creature: str) -> None:
        cost = CREATURE_COSTS[creature]
        self._prepare_pool(cost)
        self.game.cast_permanent(creature, cost)

    def _potential_pool(self) -> Mana:
        """Current pool plus one G per untapped land or petal."""
        return self.game.pool + Mana(G=self.game.count_untapped(*MANA_PRODUCERS))

    def _can_pay(self, cost: Mana) -> bool:
        return self._potential_pool().contains(cost)

    def _prepare_pool(self, cost: Mana) -> None:
        game = self.game
        while not game.can_pay(cost):
            producer = game.find_first_untapped(FOREST, PENDELHAVEN, LOTUS_PETAL)
            if producer is None:
                return
            if producer == LOTUS_PETAL:
                game.sacrifice(LOTUS_PETAL).add(G)
            else:
                game.tap_land_for_mana(producer, G)


__all__ = ["InfectDeckPilot", "keep_infect_hand"]
