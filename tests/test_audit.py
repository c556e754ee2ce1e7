"""Tests for the token pair audit."""

import pytest

from tessera_audit import audit_pair, audit_token_pairs
from tessera_structure import (
    ReferenceNotFoundError,
    TesseraWarning,
    TokenDefinition,
    TokenPairDefinition,
)
from tessera_tokens import literal_source, ramp_source, resolve_tokens


@pytest.fixture
def resolved(blue_ramp, gray_ramp):
    tokens = [
        TokenDefinition("text", literal_source("#ffffff"), literal_source("#ffffff")),
        TokenDefinition("bg-dark", ramp_source("blue", 800), ramp_source("blue", 800)),
        TokenDefinition("gray-fg", ramp_source("gray", 800), ramp_source("gray", 800)),
        TokenDefinition("gray-bg", ramp_source("gray", 500), ramp_source("gray", 500)),
        TokenDefinition("ink", literal_source("#000000"), literal_source("#ffffff")),
        TokenDefinition("paper", literal_source("#ffffff"), literal_source("#000000")),
    ]
    return resolve_tokens(tokens, [blue_ramp, gray_ramp])


def test_white_on_dark_stop_passes(resolved):
    report = audit_token_pairs(resolved, [TokenPairDefinition("b", "text", "bg-dark")])
    (result,) = report.pairs
    assert result.light.wcag_ratio > 4.5
    assert result.light.passes_aa.normal_text is True
    assert result.light_passes and result.dark_passes
    assert report.summary.failures == ()


def test_gray_800_on_500_fails(resolved):
    pair = TokenPairDefinition("c", "gray-fg", "gray-bg", "normal_text")
    report = audit_token_pairs(resolved, [pair])
    (result,) = report.pairs
    assert result.light.wcag_ratio < 4.5
    assert result.light_passes is False
    assert report.summary.failures == (result,)
    assert report.summary.failures[0].pair == pair


def test_summary_counts_modes_separately(resolved):
    pairs = [
        TokenPairDefinition("ok", "ink", "paper"),
        TokenPairDefinition("fail", "gray-fg", "gray-bg"),
        TokenPairDefinition("large", "gray-fg", "gray-bg", "large_text"),
        TokenPairDefinition("white", "text", "paper"),
    ]
    report = audit_token_pairs(resolved, pairs)
    summary = report.summary
    assert summary.total_pairs == 4
    # "white" passes only in dark mode (white on black).
    assert summary.light_passes == 1
    assert summary.dark_passes == 2
    assert [f.pair.name for f in summary.failures] == ["fail", "large", "white"]


def test_large_text_threshold_is_looser(resolved):
    normal = audit_token_pairs(resolved, [TokenPairDefinition("n", "gray-fg", "gray-bg")])
    large = audit_token_pairs(resolved, [TokenPairDefinition("l", "gray-fg", "gray-bg", "large_text")])
    assert normal.pairs[0].light.wcag_ratio == large.pairs[0].light.wcag_ratio


def test_missing_token_lists_known_names(resolved):
    with pytest.raises(ReferenceNotFoundError, match='Token "ghost" not found in resolved tokens') as exc:
        audit_token_pairs(resolved, [TokenPairDefinition("p", "ghost", "paper")])
    assert "paper" in exc.value.available
    assert exc.value.kind == "token"


def test_missing_background_token(resolved):
    with pytest.raises(ReferenceNotFoundError, match="ghost"):
        audit_token_pairs(resolved, [TokenPairDefinition("p", "ink", "ghost")])


def test_audit_is_atomic(resolved):
    pairs = [TokenPairDefinition("ok", "ink", "paper"), TokenPairDefinition("bad", "ink", "nope")]
    with pytest.raises(ReferenceNotFoundError):
        audit_token_pairs(resolved, pairs)


def test_self_pair_warns(resolved):
    with pytest.warns(TesseraWarning, match="both foreground and background"):
        report = audit_token_pairs(resolved, [TokenPairDefinition("same", "ink", "ink")])
    assert report.pairs[0].light.wcag_ratio == pytest.approx(1.0)


def test_empty_audit():
    report = audit_token_pairs((), ())
    assert report.pairs == ()
    assert report.summary.total_pairs == 0
    assert report.summary.failures == ()


def test_audit_pair_uses_both_modes(resolved):
    by_name = {t.name: t for t in resolved}
    result = audit_pair(by_name["ink"], by_name["paper"], TokenPairDefinition("p", "ink", "paper"))
    # Black on white in light mode, white on black in dark mode.
    assert result.light.apca_lc > 0
    assert result.dark.apca_lc < 0
    assert result.passes


def test_report_state_shape(resolved):
    report = audit_token_pairs(resolved, [TokenPairDefinition("c", "gray-fg", "gray-bg")])
    state = report.get_state()
    assert set(state) == {"pairs", "summary"}
    assert set(state["summary"]) == {"totalPairs", "lightPasses", "darkPasses", "failures"}
    assert state["pairs"][0]["pair"]["threshold"] == "normalText"
