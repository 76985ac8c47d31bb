"""Question specs and the pipeline that turns them into a dict of answers.

Every exchange with the operator goes through a single `ask(prompt) -> str`
callable. Menus, notices and "please try again" messages are part of the
prompt text, so a list of scripted strings can drive the whole pipeline.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from provisioner.port_manager import PortProbe, is_port_open, resolve
from provisioner.models import PortRequest

Ask = Callable[[str], str]
Answers = dict[str, Any]
Predicate = Callable[[Answers], bool]
IntOrFactory = int | Callable[[Answers], int]


class InvalidAnswer(ValueError):
    """Raised by a question's parser. The message is shown before asking again."""


def _value(value: IntOrFactory, answers: Answers) -> int:
    return value(answers) if callable(value) else value


@dataclass
class Question:
    """Free text answer, optionally checked against a regex."""
    key: str
    prompt: str
    pattern: str | None = None
    error: str = "Invalid answer, please try again."
    default: str | None = None
    when: Predicate | None = None
    notice: Callable[[Answers], str] | str = ""  # shown above the question, empty to skip

    def applies(self, answers: Answers) -> bool:
        return self.when is None or self.when(answers)

    def lead(self, answers: Answers) -> str:
        notice = self.notice(answers) if callable(self.notice) else self.notice
        return f"{notice}\n" if notice else ""

    def intro(self, answers: Answers) -> str:
        """Text shown once before the first prompt."""
        return ""

    def parse(self, raw: str, answers: Answers) -> Any:
        raw = raw.strip()
        if not raw and self.default is not None:
            return self.default
        if self.pattern and not re.match(self.pattern, raw):
            raise InvalidAnswer(self.error)
        return raw

    def run(self, ask: Ask, answers: Answers) -> Any:
        notice = self.lead(answers) + self.intro(answers)
        while True:
            raw = ask(notice + self.prompt)
            try:
                return self.parse(raw, answers)
            except InvalidAnswer as e:
                notice = f"{e}\n"


@dataclass
class ChoiceQuestion(Question):
    """Numbered menu; the answer is the value paired with the chosen label."""
    title: str = ""
    options: list[tuple[str, Any]] = field(default_factory=list)

    def intro(self, answers: Answers) -> str:
        lines = [f"\n{self.title}"] if self.title else []
        lines += [f"{i}. {label}" for i, (label, _) in enumerate(self.options, 1)]
        return "\n".join(lines) + "\n"

    def parse(self, raw: str, answers: Answers) -> Any:
        raw = raw.strip()
        if raw.isdigit() and 1 <= int(raw) <= len(self.options):
            return self.options[int(raw) - 1][1]
        raise InvalidAnswer(self.error)


@dataclass
class ConfirmQuestion(Question):
    """y/n question. Lenient ones treat anything but y as no; strict ones insist on y or n."""
    default_yes: bool = False
    strict: bool = False
    error: str = "Please enter y or n"

    def parse(self, raw: str, answers: Answers) -> bool:
        raw = raw.strip().upper()
        if not raw:
            return self.default_yes
        if raw == "Y":
            return True
        if raw == "N" or not self.strict:
            return False
        raise InvalidAnswer(self.error)


@dataclass
class PauseQuestion(Question):
    """Shows a notice and waits for Enter."""

    def parse(self, raw: str, answers: Answers) -> None:
        return None


@dataclass
class PortQuestion(Question):
    """Offer a resolved default port, or let the operator type one inside the range.

    The default comes from the port resolver; PortRangeExhausted propagates
    before anything is asked.
    """
    prompt: str = ""
    label: str = ""
    preferred: IntOrFactory = 0
    range_min: IntOrFactory = 0
    range_max: IntOrFactory = 0
    probe: PortProbe = is_port_open

    def run(self, ask: Ask, answers: Answers) -> int:
        range_min = _value(self.range_min, answers)
        range_max = _value(self.range_max, answers)
        request = PortRequest(
            name=self.label,
            preferred=_value(self.preferred, answers),
            range_min=range_min,
            range_max=range_max,
        )
        resolution = resolve(request, self.probe)
        port = resolution.resolved_port

        notice = ""
        if resolution.used_fallback:
            notice = (
                f"Warning: Default port {request.preferred} for {self.label} is in use.\n"
                f"Next available port is: {port}\n"
            )

        while True:
            answer = ask(f"{notice}Use default {self.label} port ({port})? [Y/n]: ").strip().upper() or "Y"
            if answer == "Y":
                return port
            if answer == "N":
                break
            notice = "Please enter Y or n\n"

        notice = ""
        while True:
            raw = ask(f"{notice}Enter {self.label} port ({range_min}-{range_max}): ").strip()
            if raw.isdigit() and range_min <= int(raw) <= range_max:
                return int(raw)
            notice = f"Please enter a valid port number between {range_min} and {range_max}\n"


def build_config(questions: list[Question], ask: Ask, initial: Answers | None = None) -> Answers:
    """Ask each applicable question in order and collect the answers by key."""
    answers = dict(initial or {})
    for question in questions:
        if not question.applies(answers):
            continue
        answers[question.key] = question.run(ask, answers)
    return answers
