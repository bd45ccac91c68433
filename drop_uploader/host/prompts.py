import asyncio

from drop_uploader.host.base import BaseChoicePrompt


class FixedChoicePrompt(BaseChoicePrompt):
    """Answers every question with a preset value. None simulates dismissal."""

    def __init__(self, answer: bool | None) -> None:
        self._answer = answer
        self.questions: list[str] = []

    async def ask(self, question: str, accept_label: str, reject_label: str) -> bool | None:
        self.questions.append(question)
        return self._answer


class ConsoleChoicePrompt(BaseChoicePrompt):
    """Asks on the terminal. Empty input or end of input counts as dismissal."""

    async def ask(self, question: str, accept_label: str, reject_label: str) -> bool | None:
        prompt = f"{question} [1] {accept_label} / [2] {reject_label}: "
        try:
            answer = await asyncio.to_thread(input, prompt)
        except EOFError:
            return None
        answer = answer.strip()
        if answer == "1":
            return True
        if answer == "2":
            return False
        return None
