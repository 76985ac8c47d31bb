"""
Question pipeline driven by scripted answers, no terminal needed.
"""

import pytest

from provisioner.errors import PortRangeExhausted
from scripted import ScriptedAsk
from wizard.questions import (
    ChoiceQuestion,
    ConfirmQuestion,
    PauseQuestion,
    PortQuestion,
    Question,
    build_config,
)


def bound(*ports):
    return lambda port: port in ports


class TestTextAndChoice:
    def test_text_retries_until_pattern_matches(self):
        ask = ScriptedAsk("My App", "my-app")
        question = Question(key="name", prompt="Name: ", pattern=r"^[a-z-]+$", error="lowercase only")
        assert build_config([question], ask) == {"name": "my-app"}
        assert ask.prompts[1].startswith("lowercase only\n")

    def test_text_default_on_empty(self):
        question = Question(key="name", prompt="Name: ", default="demo")
        assert build_config([question], ScriptedAsk(""))["name"] == "demo"

    def test_choice_shows_menu_once_and_maps_value(self):
        ask = ScriptedAsk("0", "abc", "2")
        question = ChoiceQuestion(
            key="kind",
            title="Select kind:",
            prompt="Pick (1-2): ",
            options=[("One", "one"), ("Two", "two")],
            error="Please enter 1 or 2",
        )
        assert build_config([question], ask) == {"kind": "two"}
        assert "1. One\n2. Two" in ask.prompts[0]
        assert "1. One" not in ask.prompts[1]
        assert ask.prompts[2].startswith("Please enter 1 or 2")


class TestConfirmAndPause:
    @pytest.mark.parametrize("raw,expected", [("y", True), ("Y", True), ("n", False), ("", False), ("maybe", False)])
    def test_lenient_confirm(self, raw, expected):
        question = ConfirmQuestion(key="ok", prompt="? [y/n]: ")
        assert build_config([question], ScriptedAsk(raw))["ok"] is expected

    def test_strict_confirm_insists(self):
        ask = ScriptedAsk("maybe", "y")
        question = ConfirmQuestion(key="ok", prompt="? [y/n]: ", strict=True)
        assert build_config([question], ask)["ok"] is True
        assert len(ask.prompts) == 2

    def test_pause_shows_notice_from_answers(self):
        ask = ScriptedAsk("")
        question = PauseQuestion(key="ack", prompt="Press Enter", notice=lambda a: f"Version {a['v']}")
        build_config([question], ask, initial={"v": "7.4"})
        assert ask.prompts == ["Version 7.4\nPress Enter"]


class TestConditions:
    def test_when_false_skips_question(self):
        questions = [
            ConfirmQuestion(key="extra", prompt="Extra? "),
            Question(key="detail", prompt="Detail: ", when=lambda a: a["extra"]),
        ]
        assert build_config(questions, ScriptedAsk("n")) == {"extra": False}

    def test_initial_answers_are_kept(self):
        answers = build_config([], ScriptedAsk(), initial={"php_major": 8})
        assert answers == {"php_major": 8}


class TestPortQuestion:
    def test_accept_default(self):
        question = PortQuestion(key="php", label="PHP", preferred=9000, range_min=9000, range_max=9100,
                                probe=bound())
        ask = ScriptedAsk("")
        assert build_config([question], ask)["php"] == 9000
        assert ask.prompts == ["Use default PHP port (9000)? [Y/n]: "]

    def test_fallback_is_announced(self):
        question = PortQuestion(key="mysql", label="MySQL", preferred=3306, range_min=3306, range_max=3399,
                                probe=bound(3306, 3307))
        ask = ScriptedAsk("y")
        assert build_config([question], ask)["mysql"] == 3308
        assert "Default port 3306 for MySQL is in use" in ask.prompts[0]
        assert "Next available port is: 3308" in ask.prompts[0]

    def test_manual_port_validated_against_range(self):
        question = PortQuestion(key="redis", label="Redis", preferred=6379, range_min=6379, range_max=6400,
                                probe=bound())
        ask = ScriptedAsk("x", "n", "80", "abc", "6390")
        assert build_config([question], ask)["redis"] == 6390
        assert ask.prompts[1].startswith("Please enter Y or n")
        assert ask.prompts[2] == "Enter Redis port (6379-6400): "
        assert "between 6379 and 6400" in ask.prompts[3]

    def test_range_may_depend_on_earlier_answers(self):
        question = PortQuestion(
            key="mysql_test",
            label="MySQL Test",
            preferred=lambda a: a["mysql"] + 1,
            range_min=lambda a: a["mysql"] + 1,
            range_max=3399,
            probe=bound(3309),
        )
        answers = build_config([question], ScriptedAsk("Y"), initial={"mysql": 3308})
        assert answers["mysql_test"] == 3310

    def test_exhaustion_raises_before_asking(self):
        question = PortQuestion(key="redis", label="Redis", preferred=6379, range_min=6379, range_max=6379,
                                probe=bound(6379))
        ask = ScriptedAsk()
        with pytest.raises(PortRangeExhausted):
            build_config([question], ask)
        assert ask.prompts == []
