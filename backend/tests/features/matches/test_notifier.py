"""Tests for notification text and payload building."""

from unittest.mock import AsyncMock

import pytest

from tft_tracker.core.riot_api.models import TFTParticipantDTO
from tft_tracker.features.matches.classifier import MatchMode
from tft_tracker.features.matches.notifier import MatchNotifier, TeammateInfo, is_top_half
from tft_tracker.features.players.ranks import UNRANKED, Ranked, compute_delta
from tests.fakes import FailingChannel, make_player, participant


@pytest.fixture
def alice():
    return make_player("alice", game_name="Alice")


@pytest.fixture
def alice_participant():
    return TFTParticipantDTO.model_validate(participant("alice", 3))


class TestIsTopHalf:
    def test_solo_boundary(self):
        assert is_top_half(4, MatchMode.SOLO)
        assert not is_top_half(5, MatchMode.SOLO)

    def test_double_up_boundary(self):
        assert is_top_half(2, MatchMode.DOUBLE_UP)
        assert not is_top_half(3, MatchMode.DOUBLE_UP)


class TestBuildText:
    """Message text."""

    def test_ranked_solo_with_delta(self, channel, alice):
        delta = compute_delta(Ranked("DIAMOND", "II", 75), Ranked("DIAMOND", "I", 25))

        text = MatchNotifier(channel).build_text(alice, 3, MatchMode.SOLO, delta)

        assert text == (
            "**Alice#EUW** finished 3rd in Ranked TFT, GG\n"
            "DIAMOND I 25 LP (+50 LP)"
        )

    def test_bottom_half_is_unlucky(self, channel, alice):
        text = MatchNotifier(channel).build_text(alice, 7, MatchMode.OTHER)

        assert text == "**Alice#EUW** finished 7th in TFT, unlucky"

    def test_first_placement_has_no_delta(self, channel, alice):
        delta = compute_delta(UNRANKED, Ranked("GOLD", "IV", 0))

        text = MatchNotifier(channel).build_text(alice, 1, MatchMode.SOLO, delta)

        assert text.endswith("\nGOLD IV 0 LP")

    def test_double_up_with_teammate(self, channel, alice):
        delta = compute_delta(Ranked("GOLD", "II", 50), Ranked("GOLD", "II", 70))
        teammate = TeammateInfo("Bob", "NA1", Ranked("SILVER", "I", 10), delta=-5, tracked=True)

        text = MatchNotifier(channel).build_text(
            alice, 2, MatchMode.DOUBLE_UP, delta, teammate
        )

        assert text == (
            "**Alice#EUW** & **Bob#NA1** finished 2nd in Double Up, GG\n"
            "Alice: GOLD II 70 LP (+20 LP)\n"
            "Bob: SILVER I 10 LP (-5 LP)"
        )

    def test_untracked_teammate_is_unranked(self, channel, alice):
        mate = TFTParticipantDTO.model_validate(participant("bob", 4, game_name="Bob"))
        teammate = TeammateInfo.untracked(mate)

        text = MatchNotifier(channel).build_text(alice, 3, MatchMode.DOUBLE_UP, None, teammate)

        assert text.endswith("\nBob: Unranked")
        assert teammate.tracked is False


class TestBuildNotification:
    """Payloads with and without a card renderer."""

    async def test_text_only_without_renderer(self, channel, alice, alice_participant):
        payload = await MatchNotifier(channel).build_notification(
            alice, alice_participant, 3, MatchMode.OTHER
        )

        assert payload.text.startswith("**Alice#EUW**")
        assert payload.image_bytes is None

    async def test_renderer_image_attached(self, channel, alice, alice_participant):
        renderer = AsyncMock()
        renderer.render.return_value = b"\x89PNG"

        payload = await MatchNotifier(channel, renderer).build_notification(
            alice, alice_participant, 3, MatchMode.SOLO
        )

        assert payload.image_bytes == b"\x89PNG"
        renderer.render.assert_awaited_once()

    async def test_invalid_render_input_falls_back_to_text(self, channel, alice):
        renderer = AsyncMock()

        payload = await MatchNotifier(channel, renderer).build_notification(
            alice, None, 3, MatchMode.SOLO
        )

        assert payload.text is not None
        assert payload.image_bytes is None
        renderer.render.assert_not_called()

    async def test_renderer_failure_falls_back_to_text(
        self, channel, alice, alice_participant
    ):
        renderer = AsyncMock()
        renderer.render.side_effect = RuntimeError("font missing")

        payload = await MatchNotifier(channel, renderer).build_notification(
            alice, alice_participant, 3, MatchMode.SOLO
        )

        assert payload.text is not None
        assert payload.image_bytes is None


class TestSend:
    async def test_send_delivers(self, channel):
        notifier = MatchNotifier(channel)

        assert await notifier.send_alert("tracker halted") is True
        assert channel.sent[0].text == ":warning: tracker halted"

    async def test_send_failure_is_reported_not_raised(self):
        failing = FailingChannel()

        assert await MatchNotifier(failing).send_alert("boom") is False
        assert len(failing.attempts) == 1
