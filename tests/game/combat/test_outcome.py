"""
Unit tests for outcome evaluation and rewards.
"""

from autobattle.core.data.game_enums import Side
from autobattle.game.combat.outcome import (
    BattleRewards,
    calculate_rewards,
    evaluate_outcome,
    is_defeat,
    is_victory,
)
from autobattle.game.entities.definitions import MonsterDefinition, StageConfiguration, StagePlacement
from autobattle.game.entities.roster import Roster
from tests.test_utils import defeat, make_combatant, make_roster


class TestOutcomePredicates:
    """Test victory and defeat detection."""

    def test_victory_when_every_enemy_is_down(self):
        enemies = make_roster(
            Side.ENEMY,
            defeat(make_combatant(Side.ENEMY, 0, 0)),
            defeat(make_combatant(Side.ENEMY, 1, 0)),
        )
        assert is_victory(enemies)

    def test_no_victory_while_an_enemy_lives(self):
        enemies = make_roster(
            Side.ENEMY,
            defeat(make_combatant(Side.ENEMY, 0, 0)),
            make_combatant(Side.ENEMY, 1, 0),
        )
        assert not is_victory(enemies)

    def test_empty_rosters_never_resolve(self):
        """Test that an empty side is not treated as eliminated."""
        assert not is_victory(Roster(Side.ENEMY))
        assert not is_defeat(Roster(Side.PLAYER))
        assert evaluate_outcome(Roster(Side.ENEMY), Roster(Side.PLAYER)) is None

    def test_defeat(self):
        players = make_roster(Side.PLAYER, defeat(make_combatant(Side.PLAYER, 2, 1)))
        assert is_defeat(players)

    def test_evaluate_outcome_continues(self):
        enemies = make_roster(Side.ENEMY, make_combatant(Side.ENEMY, 0, 0))
        players = make_roster(Side.PLAYER, make_combatant(Side.PLAYER, 0, 0))
        assert evaluate_outcome(enemies, players) is None

    def test_victory_takes_priority_over_defeat(self):
        """Test simultaneous elimination resolves as a victory."""
        enemies = make_roster(Side.ENEMY, defeat(make_combatant(Side.ENEMY, 0, 0)))
        players = make_roster(Side.PLAYER, defeat(make_combatant(Side.PLAYER, 0, 0)))
        assert evaluate_outcome(enemies, players) is True

    def test_evaluate_outcome_defeat(self):
        enemies = make_roster(Side.ENEMY, make_combatant(Side.ENEMY, 0, 0))
        players = make_roster(Side.PLAYER, defeat(make_combatant(Side.PLAYER, 0, 0)))
        assert evaluate_outcome(enemies, players) is False


class TestRewards:
    """Test reward aggregation."""

    MONSTERS = {
        1: MonsterDefinition(1, "Slime", 3, 1000, 10, 3, gold=5, item=""),
        2: MonsterDefinition(2, "Goblin", 8, 800, 20, 1, gold=12, item="Dagger"),
    }

    def test_rewards_sum_over_placements(self):
        stage = StageConfiguration(1, (
            StagePlacement(1, 0, 0),
            StagePlacement(2, 1, 0),
            StagePlacement(2, 2, 0),
        ))
        rewards = calculate_rewards(stage, self.MONSTERS)
        assert rewards.gold == 29
        assert rewards.items == ("Dagger", "Dagger")

    def test_unknown_monsters_contribute_nothing(self):
        stage = StageConfiguration(1, (StagePlacement(1, 0, 0), StagePlacement(42, 1, 0)))
        assert calculate_rewards(stage, self.MONSTERS) == BattleRewards(gold=5, items=())

    def test_format_summary(self):
        assert BattleRewards(gold=17, items=("Dagger",)).format_summary() == "Reward: 17 gold\nItems: Dagger"
        assert BattleRewards().format_summary() == "Reward: 0 gold\nItems: -"
