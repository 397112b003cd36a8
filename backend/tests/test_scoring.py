"""Tests for sub-scores, composite score and labels."""

import pytest

from pulse_core.indicators import MacdResult, fibonacci_levels
from pulse_core.models import LABEL_ORDER, SignalLabel
from pulse_core.scoring import (
    LABEL_RULES,
    ScoreBreakdown,
    ScoreRule,
    clamp,
    fib_position,
    first_match,
    label_from_score,
    matching_rule,
    score_ema_alignment,
    score_fib_position,
    score_macd_momentum,
    score_rsi,
    score_signal,
    score_sr_proximity,
)
from pulse_core.scoring.components import (
    EMA_ALIGNMENT_LIMIT,
    FIB_POSITION_RULES,
    MACD_MOMENTUM_LIMIT,
    RSI_RULES,
    SR_PROXIMITY_LIMIT,
)


class TestRuleTables:
    """Tests for the rule-table helpers."""

    RULES = (
        ScoreRule("big", lambda x: x > 10, 2),
        ScoreRule("positive", lambda x: x > 0, 1),
    )

    def test_first_match_wins(self):
        assert first_match(self.RULES, 11, 0) == 2
        assert first_match(self.RULES, 5, 0) == 1

    def test_default_when_nothing_matches(self):
        assert first_match(self.RULES, -1, 0) == 0
        assert matching_rule(self.RULES, -1) is None

    def test_matching_rule_name(self):
        assert matching_rule(self.RULES, 3).name == "positive"

    def test_clamp(self):
        assert clamp(25, 20) == 20
        assert clamp(-25, 20) == -20
        assert clamp(7, 20) == 7


class TestFibPositionScore:
    """Window low=100, high=200, so position = (price - 100) / 100."""

    @pytest.fixture
    def levels(self):
        return fibonacci_levels([100.0, 200.0])

    @pytest.mark.parametrize(
        "price,expected",
        [
            (201.0, 25),   # breakout above the window
            (99.0, -25),   # breakdown below the window
            (160.0, 20),   # 0.60, golden zone lower edge
            (162.0, 20),
            (165.0, 20),   # 0.65, golden zone upper edge
            (175.0, 15),   # 0.75
            (177.0, 15),
            (180.0, 15),   # 0.80
            (135.0, 10),   # 0.35
            (140.0, 10),   # 0.40
            (181.0, 5),    # above 0.764, outside the 0.75-0.80 band
            (200.0, 5),    # exactly at the high
            (129.0, -15),  # below 0.30
            (100.0, -15),  # exactly at the low
            (130.0, 0),    # 0.30 is not below 0.30
            (150.0, 0),
            (159.0, 0),
            (166.0, 0),
            (170.0, 0),
        ],
    )
    def test_policy_table(self, levels, price, expected):
        assert score_fib_position(price, levels) == expected

    def test_flat_window_scores_zero(self):
        levels = fibonacci_levels([42.0] * 10)

        assert fib_position(42.0, levels) is None
        assert score_fib_position(42.0, levels) == 0
        assert score_fib_position(50.0, levels) == 0

    def test_reachable_range(self):
        points = [rule.value for rule in FIB_POSITION_RULES]
        assert max(points) == 25
        assert min(points) == -25


class TestRsiScore:
    """Tests for RSI zone scoring."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0.0, 20),
            (30.0, 20),
            (30.01, 10),
            (40.0, 10),
            (40.01, 0),
            (50.0, 0),
            (59.99, 0),
            (60.0, -10),
            (69.99, -10),
            (70.0, -20),
            (100.0, -20),
        ],
    )
    def test_zones(self, value, expected):
        assert score_rsi(value) == expected

    def test_bounds(self):
        points = [rule.value for rule in RSI_RULES]
        assert max(points) == 20
        assert min(points) == -20


class TestEmaAlignmentScore:
    """Tests for EMA alignment scoring."""

    def test_bullish_alignment(self):
        """Above every EMA (+16) plus bullish stack (+4)."""
        assert score_ema_alignment(110.0, (100.0, 90.0, 80.0, 70.0)) == 20

    def test_bearish_alignment(self):
        """Below every EMA (-16) plus bearish stack (-4)."""
        assert score_ema_alignment(50.0, (60.0, 70.0, 80.0, 90.0)) == -20

    def test_pullback_inside_bullish_stack(self):
        # below EMA9 (-5), above 21/50/200 (+11), bullish stack (+4)
        assert score_ema_alignment(95.0, (100.0, 90.0, 80.0, 70.0)) == 10

    def test_mixed_without_stack(self):
        # -5 +4 +4 -3, no strict ordering
        assert score_ema_alignment(85.0, (90.0, 80.0, 70.0, 100.0)) == 0

    def test_price_equal_to_emas(self):
        """Equal values are neither above nor below, and not a strict stack."""
        assert score_ema_alignment(100.0, (100.0, 100.0, 100.0, 100.0)) == 0

    def test_requires_four_emas(self):
        with pytest.raises(ValueError, match="expected 4"):
            score_ema_alignment(100.0, (100.0, 90.0))

    def test_limit(self):
        assert EMA_ALIGNMENT_LIMIT == 20


class TestSrProximityScore:
    """Tests for support/resistance proximity scoring."""

    def test_no_levels(self):
        assert score_sr_proximity(100.0, None, None) == 0

    @pytest.mark.parametrize(
        "support,expected",
        [(99.0, 12), (98.0, 12), (96.0, 6), (95.0, 6), (90.0, 0)],
    )
    def test_support(self, support, expected):
        assert score_sr_proximity(100.0, support, None) == expected

    @pytest.mark.parametrize(
        "resistance,expected",
        [(101.0, -12), (102.0, -12), (104.0, -6), (105.0, -6), (110.0, 0)],
    )
    def test_resistance(self, resistance, expected):
        assert score_sr_proximity(100.0, None, resistance) == expected

    def test_support_and_resistance_offset(self):
        assert score_sr_proximity(100.0, 99.0, 101.0) == 0
        assert score_sr_proximity(100.0, 99.0, 104.0) == 6
        assert score_sr_proximity(100.0, 96.0, 101.0) == -6

    def test_price_on_level(self):
        """Distance 0 to both sides cancels out."""
        assert score_sr_proximity(100.0, 100.0, 100.0) == 0

    def test_limit(self):
        assert SR_PROXIMITY_LIMIT == 15


class TestMacdMomentumScore:
    """Tests for MACD momentum scoring."""

    def test_full_bullish(self):
        assert score_macd_momentum(MacdResult(1.0, 0.5, 0.5)) == 15

    def test_full_bearish(self):
        assert score_macd_momentum(MacdResult(-1.0, -0.5, -0.5)) == -15

    def test_crossing_zero(self):
        # +7 +5, line and signal on opposite sides of zero
        assert score_macd_momentum(MacdResult(0.5, -0.5, 1.0)) == 12

    def test_degraded_zeros(self):
        """The insufficient-data default counts as not bullish."""
        assert score_macd_momentum(MacdResult()) == -12

    def test_bounds(self):
        assert MACD_MOMENTUM_LIMIT == 15


class TestLabels:
    """Tests for score -> label mapping."""

    @pytest.mark.parametrize(
        "score,label",
        [
            (100, SignalLabel.STRONG_BUY),
            (50, SignalLabel.STRONG_BUY),
            (49, SignalLabel.BUY),
            (20, SignalLabel.BUY),
            (19, SignalLabel.NEUTRAL),
            (0, SignalLabel.NEUTRAL),
            (-19, SignalLabel.NEUTRAL),
            (-20, SignalLabel.SELL),
            (-49, SignalLabel.SELL),
            (-50, SignalLabel.STRONG_SELL),
            (-100, SignalLabel.STRONG_SELL),
        ],
    )
    def test_cutoffs(self, score, label):
        assert label_from_score(score) == label

    def test_label_is_monotonic_in_score(self):
        """A higher score never moves the label towards sell."""
        ranks = [LABEL_ORDER.index(label_from_score(s)) for s in range(-100, 101)]
        assert ranks == sorted(ranks)

    def test_every_label_reachable(self):
        labels = {label_from_score(s) for s in range(-100, 101)}
        assert labels == set(SignalLabel)
        assert len(LABEL_RULES) == 4


class TestScoreBreakdown:
    """Tests for the composite score."""

    def test_maximum_positive_is_95(self):
        """All sub-scores at their positive cap never reach the clamp."""
        breakdown = ScoreBreakdown(25, 20, 20, 15, 15)

        assert breakdown.raw_total == 95
        assert breakdown.total == 95
        assert breakdown.label == SignalLabel.STRONG_BUY

    def test_maximum_negative_is_minus_95(self):
        breakdown = ScoreBreakdown(-25, -20, -20, -15, -15)

        assert breakdown.total == -95
        assert breakdown.label == SignalLabel.STRONG_SELL

    def test_reachable_maximum_from_rule_tables(self):
        best = (
            max(rule.value for rule in FIB_POSITION_RULES)
            + max(rule.value for rule in RSI_RULES)
            + EMA_ALIGNMENT_LIMIT
            + SR_PROXIMITY_LIMIT
            + MACD_MOMENTUM_LIMIT
        )
        assert best == 95

    def test_total_is_clamped(self):
        assert ScoreBreakdown(100, 50, 0, 0, 0).total == 100
        assert ScoreBreakdown(-100, -50, 0, 0, 0).total == -100

    def test_score_signal_combines_components(self):
        levels = fibonacci_levels([100.0, 200.0])

        breakdown = score_signal(
            price=162.0,
            rsi_value=28.0,
            emas=(160.0, 150.0, 140.0, 130.0),
            macd_result=MacdResult(1.0, 0.5, 0.5),
            levels=levels,
            support=161.8,
            resistance=176.4,
        )

        assert breakdown.fib_position == 20
        assert breakdown.rsi == 20
        assert breakdown.ema_alignment == 20
        # support within 2% (+12), resistance ~8.9% away (0)
        assert breakdown.sr_proximity == 12
        assert breakdown.macd_momentum == 15
        assert breakdown.total == 87
        assert breakdown.label == SignalLabel.STRONG_BUY
