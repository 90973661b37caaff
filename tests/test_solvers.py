"""
Unit tests for the solvers - greedy, multi-start, exact 2D, dispatch, brute force, path.

Most tests use small synthetic objectives so the expected allocation can be
worked out by hand.
"""
import pytest

from stat_optimizer.models import AttackRating, AttributeBounds, AttributeSet, SolverResult
from stat_optimizer.objectives import ObjectiveContext, create_objective
from stat_optimizer.solvers.brute_force import brute_force_at_budget, compare_to_brute_force
from stat_optimizer.solvers.exact import solve_2d_exact
from stat_optimizer.solvers.greedy import run_greedy, select_best_allocation
from stat_optimizer.solvers.multistart import generate_breakpoint_starts, solve_multi_start
from stat_optimizer.solvers.path import investment_path
from stat_optimizer.solvers.unified import Strategy, choose_strategy, solve

FREE_2 = ["strength", "dexterity"]


def parity(stats):
    """Only even strength pays: a single +1 never gains anything."""
    return 10.0 * (stats.strength // 2)


def trap(stats):
    """Dexterity looks better point by point, but strength 30 is worth far more."""
    return (1000.0 if stats.strength >= 30 else stats.strength) + 2.0 * stats.dexterity


def linear_sum(stats):
    return float(stats.strength + stats.dexterity)


@pytest.fixture
def open_bounds():
    return AttributeBounds.from_mapping({"strength": (10, 99), "dexterity": (10, 99)})


class TestGreedy:
    """Tests for select_best_allocation and run_greedy."""

    def test_lookahead_crosses_flat_step(self, open_bounds):
        result = run_greedy(AttributeSet(), ["strength"], 10, open_bounds, parity, lookahead=2)
        assert result.stats.strength == 20
        assert result.raw_score == pytest.approx(100.0)
        assert result.strategy == "greedy"

    def test_single_point_greedy_stalls(self, open_bounds):
        result = run_greedy(AttributeSet(), ["strength"], 10, open_bounds, parity, lookahead=1)
        assert result.stats.strength == 10

    def test_ties_favor_smaller_moves_and_earlier_attributes(self, open_bounds):
        step = select_best_allocation(
            FREE_2, AttributeSet(), linear_sum(AttributeSet()), linear_sum, 2, 10,
            max_values=open_bounds.max_values(),
        )
        assert (step.attribute, step.points) == ("strength", 1)
        assert step.gain == pytest.approx(1.0)

    def test_earlier_attribute_multi_point_move_wins_tie(self, open_bounds):
        def stepped(stats):
            return 10.0 * ((stats.strength - 10) // 2) + 5.0 * (stats.dexterity - 10)

        step = select_best_allocation(
            FREE_2, AttributeSet(), stepped(AttributeSet()), stepped, 2, 10,
            max_values=open_bounds.max_values(),
        )
        assert (step.attribute, step.points) == ("strength", 2)
        assert step.gain == pytest.approx(5.0)

    def test_moves_respect_remaining_budget(self, open_bounds):
        step = select_best_allocation(
            ["strength"], AttributeSet(), parity(AttributeSet()), parity, 2, 1,
            max_values=open_bounds.max_values(),
        )
        assert step is None

    def test_moves_respect_max(self):
        bounds = AttributeBounds.from_mapping({"strength": (10, 11)})
        step = select_best_allocation(
            ["strength"], AttributeSet(), parity(AttributeSet()), parity, 2, 10,
            max_values=bounds.max_values(),
        )
        assert step is None

    def test_invalid_lookahead(self, open_bounds):
        with pytest.raises(ValueError):
            select_best_allocation(
                FREE_2, AttributeSet(), 0.0, linear_sum, 0, 10, max_values=open_bounds.max_values()
            )

    def test_budget_counted_from_base(self, open_bounds):
        base = AttributeSet()
        start = base.replace(strength=15)
        result = run_greedy(start, FREE_2, 8, open_bounds, linear_sum, base=base)
        assert result.stats.points_above(base, FREE_2) == 8

    def test_on_step_callback(self, open_bounds):
        steps = []
        run_greedy(AttributeSet(), FREE_2, 3, open_bounds, linear_sum, on_step=lambda s, st, sc: steps.append(sc))
        assert steps == [21.0, 22.0, 23.0]


class TestMultiStart:
    """Tests for breakpoint starts and multi-start greedy."""

    def test_candidates(self, open_bounds):
        starts = generate_breakpoint_starts(
            AttributeSet(), FREE_2, 20, open_bounds, {"strength": [30], "dexterity": []}
        )
        assert starts == [AttributeSet(), AttributeSet(strength=30, dexterity=10)]

    def test_filler_takes_leftover_budget(self, open_bounds):
        starts = generate_breakpoint_starts(
            AttributeSet(), FREE_2, 20, open_bounds, {"strength": [20], "dexterity": []}
        )
        assert starts[1] == AttributeSet(strength=20, dexterity=20)

    def test_default_breakpoints_for_missing_attributes(self, open_bounds):
        starts = generate_breakpoint_starts(AttributeSet(), FREE_2, 5, open_bounds)
        assert len(starts) == 3
        assert AttributeSet(strength=15) in starts
        assert AttributeSet(dexterity=15) in starts

    def test_breakpoints_above_max_skipped(self):
        bounds = AttributeBounds.from_mapping({"strength": (10, 25), "dexterity": (10, 99)})
        starts = generate_breakpoint_starts(
            AttributeSet(), FREE_2, 40, bounds, {"strength": [20, 30], "dexterity": []}
        )
        assert [s.strength for s in starts] == [10, 20]

    def test_escapes_greedy_trap(self, open_bounds):
        greedy = run_greedy(AttributeSet(), FREE_2, 20, open_bounds, trap)
        assert greedy.raw_score == pytest.approx(70.0)

        result = solve_multi_start(
            AttributeSet(), FREE_2, 20, open_bounds, trap, {"strength": [30], "dexterity": []}
        )
        assert result.stats.strength == 30
        assert result.raw_score == pytest.approx(1020.0)
        assert result.strategy == "multi-start-greedy"


class TestExact2D:
    """Tests for the exhaustive two-attribute solver."""

    def test_concave_split(self, game_data):
        ctx = ObjectiveContext(data=game_data, weapon_name="Twin Scaler", affinity="Standard", upgrade_level=0)
        bounds = AttributeBounds.from_mapping({"strength": (10, 99), "intelligence": (10, 99)})
        result = solve_2d_exact(
            AttributeSet(), ["strength", "intelligence"], 20, bounds, create_objective(AttackRating(), ctx)
        )
        assert (result.stats.strength, result.stats.intelligence) == (20, 20)
        assert result.strategy == "exact-2d"

    def test_clamps_to_max(self):
        bounds = AttributeBounds.from_mapping({"strength": (10, 15), "dexterity": (10, 99)})
        result = solve_2d_exact(AttributeSet(), FREE_2, 20, bounds, linear_sum)
        assert (result.stats.strength, result.stats.dexterity) == (15, 25)

    def test_ties_favor_first_attribute(self, open_bounds):
        result = solve_2d_exact(AttributeSet(), FREE_2, 6, open_bounds, linear_sum)
        assert result.stats.strength == 16

    def test_needs_two_attributes(self, open_bounds):
        with pytest.raises(ValueError):
            solve_2d_exact(AttributeSet(), ["strength"], 5, open_bounds, linear_sum)


class TestUnifiedSolve:
    """Tests for strategy dispatch."""

    def test_choose_strategy(self):
        assert choose_strategy(FREE_2) is Strategy.EXACT_2D
        assert choose_strategy(["strength"]) is Strategy.MULTI_START
        assert choose_strategy(["strength", "dexterity", "faith"]) is Strategy.MULTI_START

    @pytest.mark.parametrize("free,budget", [([], 10), (FREE_2, 0)])
    def test_nothing_to_do(self, open_bounds, free, budget):
        result = solve(AttributeSet(), free, budget, open_bounds, linear_sum)
        assert result.strategy == "fixed"
        assert result.stats == AttributeSet()

    def test_dispatch(self, open_bounds):
        assert solve(AttributeSet(), FREE_2, 5, open_bounds, linear_sum).strategy == "exact-2d"
        assert solve(AttributeSet(), ["strength"], 5, open_bounds, linear_sum).strategy == "multi-start-greedy"

    def test_forced_multi_start(self, open_bounds):
        result = solve(AttributeSet(), FREE_2, 5, open_bounds, linear_sum, strategy=Strategy.MULTI_START)
        assert result.strategy == "multi-start-greedy"

    def test_forced_exact_needs_two(self, open_bounds):
        with pytest.raises(ValueError):
            solve(AttributeSet(), ["strength"], 5, open_bounds, linear_sum, strategy=Strategy.EXACT_2D)


class TestBruteForce:
    """Tests for the exhaustive oracle."""

    def test_spends_exactly_the_budget(self, open_bounds):
        result = brute_force_at_budget(AttributeSet(), FREE_2, 20, open_bounds, trap)
        assert result.stats.points_above(AttributeSet(), FREE_2) == 20
        assert result.raw_score == pytest.approx(1020.0)

    def test_budget_capped_by_room(self):
        bounds = AttributeBounds.from_mapping({"strength": (10, 12), "dexterity": (10, 11)})
        result = brute_force_at_budget(AttributeSet(), FREE_2, 10, bounds, linear_sum)
        assert (result.stats.strength, result.stats.dexterity) == (12, 11)

    def test_comparison_reports_divergence(self, open_bounds):
        weak = SolverResult(stats=AttributeSet(dexterity=30), raw_score=trap(AttributeSet(dexterity=30)))
        cmp = compare_to_brute_force(weak, AttributeSet(), FREE_2, 20, open_bounds, trap)
        assert not cmp.matches
        assert cmp.value_diff == pytest.approx(950.0)
        assert cmp.diverging_attributes == {"strength": -20, "dexterity": 20}

    def test_comparison_matches(self, open_bounds):
        found = solve(AttributeSet(), FREE_2, 8, open_bounds, linear_sum)
        assert compare_to_brute_force(found, AttributeSet(), FREE_2, 8, open_bounds, linear_sum).matches


class TestInvestmentPath:
    def test_requirements_first(self, open_bounds):
        path = investment_path(
            AttributeSet(), FREE_2, 12, open_bounds, linear_sum, requirement_levels={"dexterity": 15}
        )
        assert [p.points_invested for p in path] == list(range(13))
        assert path[5].stats == AttributeSet(dexterity=15)
        assert path[-1].stats.points_above(AttributeSet()) == 12

    def test_stops_when_nothing_gains(self, open_bounds):
        path = investment_path(AttributeSet(), ["strength"], 10, open_bounds, lambda s: 1.0)
        assert len(path) == 1
        assert path[0].points_invested == 0

    def test_multi_point_moves_recorded_per_point(self, open_bounds):
        path = investment_path(AttributeSet(), ["strength"], 4, open_bounds, parity)
        assert [p.stats.strength for p in path] == [10, 11, 12, 13, 14]


class TestSolverProperties:
    """Properties that hold for every objective, checked on the fixture weapons."""

    @pytest.fixture
    def triple(self, game_data):
        ctx = ObjectiveContext(data=game_data, weapon_name="Triple Scaler", affinity="Standard", upgrade_level=0)
        return create_objective(AttackRating(), ctx)

    @pytest.fixture
    def triple_bounds(self):
        return AttributeBounds.from_mapping({"strength": (10, 99), "intelligence": (10, 99), "faith": (10, 99)})

    @pytest.mark.parametrize("budget", [0, 1, 7, 15])
    def test_exact_beats_every_split(self, triple, budget):
        free = ["strength", "intelligence"]
        bounds = AttributeBounds.from_mapping({"strength": (10, 99), "intelligence": (10, 99)})
        result = solve_2d_exact(AttributeSet(), free, budget, bounds, triple)
        oracle = brute_force_at_budget(AttributeSet(), free, budget, bounds, triple)
        assert result.raw_score >= oracle.raw_score

    def test_greedy_never_decreases(self, triple, triple_bounds):
        scores = [triple(AttributeSet())]
        run_greedy(
            AttributeSet(), triple_bounds.free_attributes(), 30, triple_bounds, triple,
            on_step=lambda step, stats, score: scores.append(score),
        )
        assert all(b >= a for a, b in zip(scores, scores[1:]))

    @pytest.mark.parametrize("objective", [trap, parity, linear_sum])
    def test_multi_start_dominates_greedy(self, open_bounds, objective):
        single = run_greedy(AttributeSet(), FREE_2, 20, open_bounds, objective)
        multi = solve_multi_start(AttributeSet(), FREE_2, 20, open_bounds, objective)
        assert multi.raw_score >= single.raw_score

    def test_budget_never_exceeded(self, triple, triple_bounds):
        free = triple_bounds.free_attributes()
        result = solve(AttributeSet(), free, 25, triple_bounds, triple)
        assert result.stats.points_above(AttributeSet(), free) <= 25

    def test_repeatable(self, triple, triple_bounds):
        free = triple_bounds.free_attributes()
        assert solve(AttributeSet(), free, 18, triple_bounds, triple) == solve(
            AttributeSet(), free, 18, triple_bounds, triple
        )


# floor(1.5 x strength) makes the two-handed gains uneven, so greedy can land a
# hair under the optimum on three attributes. 0.1% of the optimum is well above
# that rounding loss.
TWO_HANDED_RELATIVE_TOLERANCE = 1e-3


class TestTwoHandedAgainstBruteForce:
    """The real calculator, two-handed, checked against the exhaustive oracle."""

    @staticmethod
    def objective(game_data, weapon):
        ctx = ObjectiveContext(
            data=game_data, weapon_name=weapon, affinity="Standard", upgrade_level=0, two_handing=True
        )
        return create_objective(AttackRating(), ctx)

    @pytest.mark.parametrize("budget", range(1, 31))
    def test_single_strength_is_exact(self, game_data, budget):
        objective = self.objective(game_data, "Scenario Sword")
        bounds = AttributeBounds.from_mapping({"strength": (10, 99)})
        result = solve(AttributeSet(), ["strength"], budget, bounds, objective)
        oracle = brute_force_at_budget(AttributeSet(), ["strength"], budget, bounds, objective)
        assert result.stats == oracle.stats
        assert result.raw_score == oracle.raw_score

    @pytest.mark.parametrize("budget", range(1, 21))
    def test_two_attributes_are_exact(self, game_data, budget):
        objective = self.objective(game_data, "Twin Scaler")
        free = ["strength", "intelligence"]
        bounds = AttributeBounds.from_mapping({"strength": (10, 99), "intelligence": (10, 99)})
        result = solve(AttributeSet(), free, budget, bounds, objective)
        oracle = brute_force_at_budget(AttributeSet(), free, budget, bounds, objective)
        assert result.raw_score == oracle.raw_score

    @pytest.mark.parametrize("budget", range(1, 16))
    def test_three_attributes_within_tolerance(self, game_data, budget):
        objective = self.objective(game_data, "Triple Scaler")
        free = ["strength", "intelligence", "faith"]
        bounds = AttributeBounds.from_mapping({a: (10, 99) for a in free})
        result = solve(AttributeSet(), free, budget, bounds, objective)
        oracle = brute_force_at_budget(AttributeSet(), free, budget, bounds, objective)
        assert result.raw_score >= oracle.raw_score * (1 - TWO_HANDED_RELATIVE_TOLERANCE)
        assert result.stats.points_above(AttributeSet(), free) <= budget
