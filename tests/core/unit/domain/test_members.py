"""Unit tests for sequential-member ordering."""

import random

import pytest
from hypothesis import given, strategies as st

from zkelect.domain.exceptions import MalformedMemberNameError
from zkelect.domain.members import (
    format_member,
    is_head,
    member_name,
    order,
    parse_sequence,
    predecessor_of,
)


@pytest.mark.tier(0)
@pytest.mark.tra("Domain.Invariant.MemberSequence")
class TestParseSequence:
    """Test parsing of the numeric member suffix."""

    def test_parses_padded_suffix(self) -> None:
        assert parse_sequence("prefix_0000000012") == 12

    def test_parses_full_path(self) -> None:
        assert parse_sequence("/elect/ctf_0000000003") == 3

    def test_uses_last_separator(self) -> None:
        """Prefixes that contain the separator still parse."""
        assert parse_sequence("app_naive_0000000007") == 7

    def test_non_numeric_suffix_raises(self) -> None:
        with pytest.raises(MalformedMemberNameError) as exc_info:
            parse_sequence("prefix_notanumber")
        assert exc_info.value.name == "prefix_notanumber"

    def test_empty_suffix_raises(self) -> None:
        with pytest.raises(MalformedMemberNameError):
            parse_sequence("prefix_")

    def test_missing_separator_raises(self) -> None:
        with pytest.raises(MalformedMemberNameError, match="separator"):
            parse_sequence("prefix0000000001")

    def test_non_ascii_digits_rejected(self) -> None:
        """Unicode digits are not sequence numbers."""
        with pytest.raises(MalformedMemberNameError):
            parse_sequence("prefix_٣٣")


@pytest.mark.tier(0)
@pytest.mark.tra("Domain.Invariant.MemberOrdering")
class TestOrder:
    """Test ordering of member names."""

    def test_orders_by_sequence(self) -> None:
        names = ["m_0000000002", "m_0000000000", "m_0000000001"]
        assert order(names) == ["m_0000000000", "m_0000000001", "m_0000000002"]

    def test_orders_numerically_not_lexically(self) -> None:
        """Sequence numbers compare as integers even with mixed prefixes."""
        names = ["b_0000000010", "a_0000000009"]
        assert order(names) == ["a_0000000009", "b_0000000010"]

    def test_empty_input(self) -> None:
        assert order([]) == []

    def test_malformed_member_propagates(self) -> None:
        with pytest.raises(MalformedMemberNameError):
            order(["m_0000000001", "m_broken"])

    @pytest.mark.tier(2)
    @pytest.mark.property
    @given(st.sets(st.integers(min_value=0, max_value=9_999_999_999), max_size=50))
    def test_any_permutation_orders_ascending(self, sequences: set) -> None:
        """Property: order() sorts by parsed sequence regardless of input order."""
        names = [format_member("ctf_", seq) for seq in sequences]
        shuffled = list(names)
        random.shuffle(shuffled)

        result = order(shuffled)

        assert [parse_sequence(name) for name in result] == sorted(sequences)


@pytest.mark.tier(0)
@pytest.mark.tra("Domain.Invariant.MemberPredecessor")
class TestPredecessorOf:
    """Test predecessor lookup."""

    ORDERED = ["c_0000000000", "c_0000000001", "c_0000000002",
               "c_0000000003", "c_0000000004", "c_0000000005"]

    def test_middle_member(self) -> None:
        assert predecessor_of(self.ORDERED, "c_0000000002") == "c_0000000001"

    def test_last_member(self) -> None:
        assert predecessor_of(self.ORDERED, "c_0000000005") == "c_0000000004"

    def test_head_is_its_own_predecessor(self) -> None:
        assert predecessor_of(self.ORDERED, "c_0000000000") == "c_0000000000"

    def test_unknown_member(self) -> None:
        assert predecessor_of(self.ORDERED, "c_0000000006") is None

    def test_full_path_is_normalised(self) -> None:
        assert predecessor_of(self.ORDERED, "/elect/c_0000000003") == "c_0000000002"

    def test_numeric_substring_collision(self) -> None:
        """Regression: a name contained in another member's path is not a match.

        "ctf_000000001" is a substring of "/elect/ctf_0000000010"; only exact
        bare-name equality may identify a member.
        """
        ordered = ["ctf_0000000001", "ctf_0000000010"]
        assert predecessor_of(ordered, "/elect/ctf_000000001") is None
        assert predecessor_of(ordered, "/elect/ctf_0000000010") == "ctf_0000000001"

    def test_empty_list(self) -> None:
        assert predecessor_of([], "c_0000000000") is None


@pytest.mark.tier(0)
@pytest.mark.tra("Domain.Invariant.MemberHead")
class TestIsHead:
    """Test head detection and name normalisation."""

    def test_head_by_path(self) -> None:
        assert is_head(["n_0000000004", "n_0000000005"], "/elect/n_0000000004")

    def test_not_head(self) -> None:
        assert not is_head(["n_0000000004", "n_0000000005"], "/elect/n_0000000005")

    def test_substring_is_not_head(self) -> None:
        """Regression: "/elect/n_00000000040" must not match head "n_0000000004"."""
        assert not is_head(["n_0000000004"], "/elect/n_00000000040")

    def test_empty_list_has_no_head(self) -> None:
        assert not is_head([], "n_0000000000")

    def test_member_name_strips_path(self) -> None:
        assert member_name("/elect/n_0000000004") == "n_0000000004"
        assert member_name("n_0000000004") == "n_0000000004"

    def test_format_member_pads_to_ten_digits(self) -> None:
        assert format_member("naive_", 12) == "naive_0000000012"
