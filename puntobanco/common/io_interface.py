"""
This module contains the IOInterface abstract base class and its implementations.
"""

from abc import ABC, abstractmethod

import aiofiles


class IOInterface(ABC):
    """
    Abstract base class for an IO interface.

    Adapters write table output and read bettor input through this interface,
    so the same adapter can drive a console, a transcript file or a test.
    """

    @abstractmethod
    def output(self, message: str) -> None:
        """Output a message to the interface."""
        pass

    @abstractmethod
    def input(self, prompt: str) -> str:
        """Get input from the user with a prompt."""
        pass

    @abstractmethod
    def check_numeric_response(self, ctx: str) -> int:
        """Check if a response is numeric and return the integer value."""
        pass


class TestIOInterface(IOInterface):
    """
    A test IO interface. Collects output messages and replays queued input.
    """

    __test__ = False

    def __init__(self, responses=None):
        self.sent_messages = []
        self.input_responses = list(responses or [])
        self.prompts = []

    def output(self, message: str) -> None:
        self.sent_messages.append(message)

    def input(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.input_responses:
            return self.input_responses.pop(0)
        return ""

    def add_response(self, response: str):
        """Queue a line of input."""
        self.input_responses.append(response)

    def check_numeric_response(self, ctx: str) -> int:
        return int(self.input(ctx))


class ConsoleIOInterface(IOInterface):
    """
    A console IO interface for interactive play.
    """

    def output(self, message: str) -> None:
        print(message)

    def input(self, prompt: str) -> str:
        return input(prompt)

    def check_numeric_response(self, ctx: str) -> int:
        attempts = 0
        while attempts < 3:  # Setting a maximum number of attempts
            response = input(ctx)
            try:
                return int(response)
            except ValueError:
                print("Invalid response, please enter a number.")
                attempts += 1
        raise ValueError("Too many invalid responses. Operation aborted.")


class LoggingIOInterface(IOInterface):
    """
    A logging IO interface for recording purposes. Writes output messages to a log file.

    Output can be written synchronously or from a coroutine; input is
    simulated and only recorded.
    """

    def __init__(self, log_file_path: str):
        self.log_file_path = log_file_path

    def output(self, message: str) -> None:
        """Write an output message to the log file."""
        with open(self.log_file_path, "a", encoding="utf-8") as log_file:
            log_file.write(message + "\n")

    def input(self, prompt: str) -> str:
        """Log the prompt and return empty string."""
        self.output(f"[INPUT PROMPT] {prompt}")
        return ""

    def check_numeric_response(self, ctx: str) -> int:
        """Always returns 0 for logging interface."""
        self.output(f"[NUMERIC PROMPT] {ctx}")
        return 0

    async def output_async(self, message: str) -> None:
        """Async version of output."""
        async with aiofiles.open(
            self.log_file_path, mode="a", encoding="utf-8"
        ) as log_file:
            await log_file.write(message + "\n")
