import pytest

from puntobanco.common.io_interface import (
    ConsoleIOInterface,
    LoggingIOInterface,
    TestIOInterface,
)


def test_console_io_interface_methods(mocker):
    interface = ConsoleIOInterface()
    mocker.patch("builtins.input", side_effect=["banker", "abc", "250"])
    printed = mocker.patch("builtins.print")

    interface.output("Table open")
    printed.assert_called_with("Table open")

    assert interface.input("Side: ") == "banker"
    assert interface.check_numeric_response("Wager: ") == 250


def test_console_numeric_response_gives_up(mocker):
    mocker.patch("builtins.input", side_effect=["x", "y", "z"])
    mocker.patch("builtins.print")
    with pytest.raises(ValueError):
        ConsoleIOInterface().check_numeric_response("Wager: ")


def test_test_io_interface_methods():
    interface = TestIOInterface(["p", "100"])
    interface.output("hello")
    assert interface.sent_messages == ["hello"]
    assert interface.input("Side: ") == "p"
    assert interface.check_numeric_response("Wager: ") == 100
    assert interface.prompts == ["Side: ", "Wager: "]
    assert interface.input("again") == ""

    interface.add_response("q")
    assert interface.input("Side: ") == "q"


def test_logging_io_interface(tmp_path):
    log_file = tmp_path / "session.log"
    interface = LoggingIOInterface(str(log_file))

    interface.output("Player gets 9")
    assert interface.input("Side: ") == ""
    assert interface.check_numeric_response("Wager: ") == 0

    assert log_file.read_text(encoding="utf-8").splitlines() == [
        "Player gets 9",
        "[INPUT PROMPT] Side: ",
        "[NUMERIC PROMPT] Wager: ",
    ]


@pytest.mark.asyncio
async def test_logging_io_interface_async(tmp_path):
    log_file = tmp_path / "session.log"
    interface = LoggingIOInterface(str(log_file))

    await interface.output_async("Banker wins")
    await interface.output_async("Balance: $10,500")

    assert log_file.read_text(encoding="utf-8") == "Banker wins\nBalance: $10,500\n"
