"""Scripted stand-in for the operator, shared by the wizard and installer tests."""


class ScriptedAsk:
    """Answers prompts from a fixed list and records what was asked."""

    def __init__(self, *answers: str):
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {prompt!r}")
        return self.answers.pop(0)

    @property
    def transcript(self) -> str:
        return "".join(self.prompts)
