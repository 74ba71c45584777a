import pytest

from twitchcmd.commands.parser import Invocation, parse


def test_parse_splits_command_and_args():
    assert parse("!txt set foo bar baz", "!") == Invocation("!", "txt", ["set", "foo", "bar", "baz"])


def test_parse_without_args():
    assert parse("!commands", "!") == Invocation("!", "commands", [])


def test_parse_collapses_whitespace_in_args():
    result = parse("!say   hello    world  ", "!")
    assert result is not None
    assert result.args == ["hello", "world"]


def test_parse_returns_none_without_prefix():
    assert parse("hello there", "!") is None
    assert parse(" !commands", "!") is None


def test_parse_returns_none_for_other_prefix():
    assert parse("?help", "!") is None


@pytest.mark.parametrize("prefix", ["?", "^", "[", "]", "(", ")", "*", "\\", "+", "$"])
def test_parse_treats_metacharacter_prefix_literally(prefix):
    result = parse(f"{prefix}help me", prefix)
    assert result == Invocation(prefix, "help", ["me"])
    assert parse("help me", prefix) is None


def test_parse_multi_character_prefix():
    assert parse("bot!ping now", "bot!") == Invocation("bot!", "ping", ["now"])


def test_parse_args_span_newlines():
    result = parse("!echo first\nsecond", "!")
    assert result is not None
    assert result.args == ["first", "second"]


def test_parse_prefix_only_is_not_a_command():
    assert parse("!", "!") is None
    assert parse("! foo", "!") is None
