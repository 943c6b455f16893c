"""Tests for session transitions, reveal policy and the clock."""

import pytest

import game_state
from catalog import Champion
from game_state import Difficulty, Session, Status


def playing(difficulty=Difficulty.NORMAL, now=100.0):
    return game_state.start(game_state.new_session(), difficulty, now=now)


class TestStart:

    def test_from_menu(self):
        session = playing(now=50.0)

        assert session.status is Status.PLAYING
        assert session.difficulty is Difficulty.NORMAL
        assert session.started_at == 50.0
        assert session.ended_at is None
        assert session.guessed_ids == frozenset()
        assert session.gave_up is False
        assert session.game_id

    def test_accepts_plain_strings(self):
        session = game_state.start(game_state.new_session(), "hard", now=1.0)
        assert session.difficulty is Difficulty.HARD

    def test_ignored_while_playing(self):
        session = playing()
        assert game_state.start(session, Difficulty.HARD, now=999.0) is session

    def test_from_finished_is_a_new_game(self, small_catalog):
        first = game_state.give_up(playing(), now=120.0)
        second = game_state.start(first, Difficulty.HARD, now=200.0)

        assert second.status is Status.PLAYING
        assert second.game_id != first.game_id
        assert second.guessed_ids == frozenset()
        assert second.gave_up is False
        assert first.status is Status.FINISHED


class TestSubmitGuess:

    def test_scenario_full_completion(self, small_catalog):
        session = playing()
        assert session.guessed_ids == frozenset()

        session, hit = game_state.submit_guess(session, "kaisa", small_catalog, now=110.0)
        assert hit.id == "kaisa"
        assert session.guessed_ids == {"kaisa"}
        assert session.status is Status.PLAYING

        before = session
        session, hit = game_state.submit_guess(session, "KAI'SA", small_catalog, now=111.0)
        assert hit is None
        assert session == before

        session, hit = game_state.submit_guess(session, "ryze", small_catalog, now=130.0)
        assert hit.id == "ryze"
        assert session.guessed_ids == {"kaisa", "ryze"}
        assert session.status is Status.FINISHED
        assert session.gave_up is False
        assert session.ended_at == 130.0
        assert game_state.completion_percentage(session, len(small_catalog)) == 100

    def test_transitions_do_not_mutate(self, small_catalog):
        session = playing()
        after, _ = game_state.submit_guess(session, "ryze", small_catalog)

        assert session.guessed_ids == frozenset()
        assert after is not session
        with pytest.raises(AttributeError):
            after.status = Status.MENU

    @pytest.mark.parametrize("raw", ["", "   ", "'!", "k", "kai", "teemo", "kaisaa"])
    def test_garbage_and_prefixes_are_noops(self, small_catalog, raw):
        session = playing()
        assert game_state.submit_guess(session, raw, small_catalog) == (session, None)

    def test_ignored_outside_playing(self, small_catalog):
        menu = game_state.new_session()
        assert game_state.submit_guess(menu, "ryze", small_catalog) == (menu, None)

        done = game_state.give_up(playing())
        assert game_state.submit_guess(done, "ryze", small_catalog) == (done, None)

    def test_completed_game_ignores_further_guesses(self, small_catalog):
        session = playing()
        for raw in ("kaisa", "ryze"):
            session, _ = game_state.submit_guess(session, raw, small_catalog, now=150.0)
        assert session.status is Status.FINISHED

        for raw in ("kaisa", "ryze", "anything"):
            again, hit = game_state.submit_guess(session, raw, small_catalog, now=500.0)
            assert again is session
            assert hit is None
        assert session.ended_at == 150.0

    def test_guess_set_grows_monotonically(self, catalog):
        session = playing()
        sizes = []
        for raw in ["a", "ahri", "AHRI", "wukong", "monkey king", "xx", "Dr Mundo", "vi", ""]:
            session, _ = game_state.submit_guess(session, raw, catalog)
            sizes.append(len(session.guessed_ids))
            assert session.guessed_ids <= {c.id for c in catalog}
        assert sizes == sorted(sizes)
        assert session.guessed_ids == {"ahri", "monkeyking", "drmundo", "vi"}


class TestGiveUp:

    def test_scenario_give_up(self, small_catalog):
        session, _ = game_state.submit_guess(playing(now=10.0), "kaisa", small_catalog)
        done = game_state.give_up(session, now=40.0)

        assert done.status is Status.FINISHED
        assert done.gave_up is True
        assert done.ended_at == 40.0
        assert done.guessed_ids == session.guessed_ids == {"kaisa"}
        assert game_state.completion_percentage(done, len(small_catalog)) == 50

    def test_only_once(self):
        done = game_state.give_up(playing(), now=40.0)
        assert game_state.give_up(done, now=80.0) is done

    def test_ignored_in_menu(self):
        menu = game_state.new_session()
        assert game_state.give_up(menu) is menu


class TestReset:

    def test_back_to_menu(self):
        done = game_state.give_up(playing())
        menu = game_state.reset(done)
        assert menu == Session()
        assert menu.status is Status.MENU


class TestCompletionPercentage:

    @pytest.mark.parametrize("guessed, size, expected", [
        (0, 0, 0),
        (0, 10, 0),
        (1, 8, 13),
        (1, 3, 33),
        (2, 3, 67),
        (170, 170, 100),
    ])
    def test_rounding(self, guessed, size, expected):
        session = Session(guessed_ids=frozenset(str(i) for i in range(guessed)))
        assert game_state.completion_percentage(session, size) == expected

    def test_verdict(self):
        assert game_state.verdict(100) == "LEGENDARY!"
        assert game_state.verdict(99) == "Better luck next time!"


class TestReveal:

    def champ(self):
        return Champion(id="kaisa", name="Kai'Sa", title="Daughter of the Void")

    def test_hidden_normal_shows_initial(self):
        session = playing(difficulty=Difficulty.NORMAL)
        assert not game_state.is_revealed(self.champ(), session)
        assert game_state.hint_glyph(self.champ(), session) == "K"

    def test_hidden_hard_shows_nothing(self):
        session = playing(difficulty=Difficulty.HARD)
        assert game_state.hint_glyph(self.champ(), session) is None

    def test_guessed_is_revealed(self):
        session = Session(guessed_ids=frozenset({"kaisa"}), status=Status.PLAYING)
        assert game_state.is_revealed(self.champ(), session)
        assert game_state.hint_glyph(self.champ(), session) is None

    def test_give_up_reveals_everything(self):
        done = game_state.give_up(playing(difficulty=Difficulty.HARD))
        assert game_state.is_revealed(self.champ(), done)


class TestClock:

    def test_menu(self):
        assert game_state.elapsed_seconds(game_state.new_session(), now=1000.0) == 0

    def test_running(self):
        session = playing(now=100.0)
        assert game_state.elapsed_seconds(session, now=100.0) == 0
        assert game_state.elapsed_seconds(session, now=165.9) == 65

    def test_frozen_when_finished(self):
        done = game_state.give_up(playing(now=100.0), now=190.5)
        assert game_state.elapsed_seconds(done, now=10_000.0) == 90

    @pytest.mark.parametrize("seconds, expected", [
        (0, "0:00"),
        (5, "0:05"),
        (65, "1:05"),
        (600, "10:00"),
        (3725, "62:05"),
    ])
    def test_format_time(self, seconds, expected):
        assert game_state.format_time(seconds) == expected
