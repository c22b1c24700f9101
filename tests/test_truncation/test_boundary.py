"""Tests for split point detection and repair."""

import pytest

from pipy_transcript.errors import StructuralError
from pipy_transcript.truncation.boundary import (
    find_last_pair_start,
    find_split_index,
    repair_split,
)
from pipy_transcript.truncation.pairing import is_valid_pairing
from pipy_transcript.types import (
    ActionRequest,
    ActionResult,
    Message,
    TextContent,
    TokenUsage,
)


def make_user(text: str) -> Message:
    return Message(role="user", content=[TextContent(text=text)], id=text)


def make_assistant(text: str, tokens: int = 0) -> Message:
    return Message(
        role="assistant",
        content=[TextContent(text=text)],
        id=text,
        token_usage=TokenUsage(total_tokens=tokens),
    )


def make_request(request_id: str, tokens: int = 0) -> Message:
    return Message(
        role="assistant",
        content=[ActionRequest(id=request_id, name="search")],
        id=f"req-{request_id}",
        token_usage=TokenUsage(total_tokens=tokens),
    )


def make_result(request_id: str, is_error: bool = False) -> Message:
    return Message(
        role="user",
        content=[ActionResult(request_id=request_id, is_error=is_error)],
        id=f"res-{request_id}",
    )


class TestFindLastPairStart:
    def test_empty(self):
        assert find_last_pair_start([]) == 0

    def test_simple_pair(self):
        """Test that the last user/assistant pair is found."""
        messages = [make_user("u1"), make_assistant("a1"), make_user("u2"), make_assistant("a2")]

        assert find_last_pair_start(messages) == 2

    def test_trailing_same_role_run(self):
        """Test that a trailing same-role run is kept with its predecessor."""
        messages = [
            make_user("u1"),
            make_assistant("a1"),
            make_user("u2"),
            make_assistant("a2"),
            make_assistant("a3"),
        ]

        assert find_last_pair_start(messages) == 2

    def test_single_role_transcript(self):
        """Test a transcript made of one role only."""
        messages = [make_assistant("a1"), make_assistant("a2")]

        assert find_last_pair_start(messages) == 0


class TestFindSplitIndex:
    def test_keep_all_under_budget(self):
        """Test that split index is 0 when everything fits."""
        messages = [make_user("u1"), make_assistant("a1", 500), make_user("u2"), make_assistant("a2", 400)]

        split = find_split_index(messages, 1000)

        assert split.split_index == 0
        assert split.kept_tokens == 900

    def test_last_pair_always_kept(self):
        """Test that the last pair survives even when it alone exceeds budget."""
        messages = [
            make_user("u1"),
            make_assistant("a1", 1000),
            make_user("u2"),
            make_assistant("a2", 1000),
        ]

        split = find_split_index(messages, 1500)

        assert split.split_index == 2
        assert split.kept_tokens == 1000

    def test_oversized_last_pair(self):
        """Test that an over-budget final pair is still kept whole."""
        messages = [
            make_user("u1"),
            make_assistant("a1", 100),
            make_user("u2"),
            make_assistant("a2", 5000),
        ]

        split = find_split_index(messages, 1000)

        # a1 would push 5000 + 100 over the budget
        assert split.split_index == 2
        assert split.kept_tokens == 5000

    def test_exact_budget_is_kept(self):
        """Test that reaching exactly the budget keeps the message."""
        messages = [
            make_user("u1"),
            make_assistant("a1", 2000),
            make_user("u2"),
            make_assistant("a2", 1000),
            make_user("u3"),
            make_assistant("a3", 1000),
        ]

        split = find_split_index(messages, 2000)

        # a3 (1000) + a2 (1000) == 2000 is kept, a1 would exceed
        assert split.split_index == 2
        assert split.kept_tokens == 2000

    def test_one_over_budget(self):
        """Test that one token over the budget moves the split."""
        messages = [
            make_user("u1"),
            make_assistant("a1", 1001),
            make_user("u2"),
            make_assistant("a2", 1000),
        ]

        split = find_split_index(messages, 2000)

        assert split.split_index == 2


class TestRepairSplit:
    def test_valid_slice_unchanged(self):
        """Test that an already valid slice keeps its index."""
        messages = [make_user("u1"), make_assistant("a1"), make_user("u2"), make_assistant("a2")]

        repaired = repair_split(messages, 2)

        assert repaired.split_index == 2
        assert [m.id for m in repaired.kept_messages] == ["u2", "a2"]
        assert repaired.attempts == 1

    def test_orphan_result_removed_without_moving(self):
        """Test that a result cut off from its request is dropped."""
        messages = [
            make_user("u1"),
            make_request("t1"),
            make_result("t1"),
            make_assistant("a1"),
        ]

        repaired = repair_split(messages, 2)

        assert repaired.split_index == 2
        assert [m.id for m in repaired.kept_messages] == ["a1"]

    def test_moves_back_to_valid_slice(self):
        """Test that the index moves back until pairing is valid."""
        messages = [
            make_user("u1"),
            make_request("t1"),
            make_result("t1"),
            make_request("t1"),  # retried with the same id, still in flight
        ]

        # From index 2 the result precedes its request
        repaired = repair_split(messages, 2)

        assert repaired.split_index == 1
        assert repaired.attempts == 2
        assert len(repaired.kept_messages) == 3

    def test_unrecoverable_pairing(self):
        """Test that nested requests fail even for the whole transcript."""
        messages = [
            make_user("u1"),
            make_request("t1"),
            make_request("t2"),
            make_result("t1"),
            make_result("t2"),
            make_assistant("a1"),
        ]

        with pytest.raises(StructuralError) as exc_info:
            repair_split(messages, 1)

        assert exc_info.value.operation == "validate-pairing"

    def test_result_always_pairs(self):
        """Test that repaired slices pass pairing validation."""
        messages = [
            make_user("u1"),
            make_request("t1"),
            make_result("t1", is_error=True),
            make_request("t2"),
            make_result("t2"),
            make_assistant("a1"),
            make_user("u2"),
            make_request("t3"),
        ]

        for split_index in range(len(messages)):
            repaired = repair_split(messages, split_index)
            assert repaired.split_index <= split_index
            assert is_valid_pairing(repaired.kept_messages)
