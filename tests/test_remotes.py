"""Tests for remote selection."""

import pytest

from conftest import ScriptedInput, git
from gitwork.errors import NoRemotesError, SelectionError
from gitwork.gitops import list_remotes
from gitwork.remotes import select_remote


def no_prompt(prompt=""):
    raise AssertionError(f"unexpected prompt: {prompt}")


@pytest.fixture
def two_remotes(repo, bare_remote):
    git(["remote", "add", "upstream", str(bare_remote)], repo)
    return repo


def test_single_remote_needs_no_prompt(repo):
    assert select_remote(repo, input_func=no_prompt) == "origin"


def test_multiple_remotes_reprompt_until_valid(two_remotes):
    answers = ScriptedInput(["", "0", "7", "abc", "2"])
    chosen = select_remote(two_remotes, input_func=answers)

    assert chosen == list_remotes(two_remotes)[1]
    assert len(answers.prompts) == 5


def test_choice_is_always_a_configured_remote(two_remotes):
    for answer in ("1", "2"):
        chosen = select_remote(two_remotes, input_func=ScriptedInput([answer]))
        assert chosen in {"origin", "upstream"}


def test_bounded_attempts_give_up(two_remotes):
    answers = ScriptedInput(["9", "", "1"])
    with pytest.raises(SelectionError):
        select_remote(two_remotes, input_func=answers, max_attempts=2)
    assert len(answers.prompts) == 2


def test_zero_remotes_fail_fast(tmp_path):
    lonely = tmp_path / "lonely"
    lonely.mkdir()
    git(["init", "--quiet"], lonely)
    with pytest.raises(NoRemotesError):
        select_remote(lonely, input_func=no_prompt)


def test_preferred_remote_skips_prompt(two_remotes):
    assert select_remote(two_remotes, input_func=no_prompt, preferred="upstream") == "upstream"


def test_unknown_preferred_remote_is_rejected(repo):
    with pytest.raises(SelectionError):
        select_remote(repo, input_func=no_prompt, preferred="nowhere")
