"""Sequential-member ordering.

Member nodes are named ``<prefix><sequence>`` where the coordination
service appends a zero-padded, strictly increasing counter on creation.
The member with the smallest sequence number is the longest-standing live
candidate, hence the leader.

Names are always compared as bare member names: a fully-qualified path such
as ``/elect/ctf_0000000002`` is normalised to ``ctf_0000000002`` first.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from zkelect.domain.exceptions import MalformedMemberNameError

ELECTION_ROOT = "/elect"
MEMBER_SEPARATOR = "_"
SEQUENCE_WIDTH = 10


def member_name(path: str) -> str:
    """Return the bare member name of a node path.

    Args:
        path: Either a bare name or a path such as "/elect/naive_0000000003".

    Returns:
        The last path component.
    """
    return path.rsplit("/", 1)[-1]


def parse_sequence(name: str, separator: str = MEMBER_SEPARATOR) -> int:
    """Extract the numeric sequence suffix of a member name.

    The suffix is everything after the last separator, so prefixes that
    themselves contain the separator (e.g. "app_naive_") still parse.

    Args:
        name: Bare member name or member path.
        separator: Character between the prefix and the sequence number.

    Returns:
        The parsed sequence number.

    Raises:
        MalformedMemberNameError: If the separator is missing or the suffix
            is empty or not all digits.
    """
    bare = member_name(name)
    if separator not in bare:
        raise MalformedMemberNameError(name, f"no {separator!r} separator")

    suffix = bare.rsplit(separator, 1)[1]
    # str.isdigit() accepts unicode digits int() would also take; restrict to ASCII
    if not suffix or not (suffix.isascii() and suffix.isdigit()):
        raise MalformedMemberNameError(name)

    return int(suffix)


def order(names: Iterable[str], separator: str = MEMBER_SEPARATOR) -> list[str]:
    """Sort member names by ascending sequence number.

    The sort is stable. Uniqueness of sequence numbers is guaranteed by the
    coordination service and is not enforced here.

    Raises:
        MalformedMemberNameError: If any name cannot be parsed.
    """
    return sorted(names, key=lambda name: parse_sequence(name, separator))


def is_head(ordered: Sequence[str], member_path: str) -> bool:
    """Check whether member_path is the first member of the ordered list."""
    if not ordered:
        return False
    return member_name(ordered[0]) == member_name(member_path)


def predecessor_of(ordered: Sequence[str], member_path: str) -> str | None:
    """Find the member immediately preceding member_path.

    Args:
        ordered: Member names sorted by sequence number.
        member_path: Bare name or full path of the member to look up.

    Returns:
        The preceding member name; the head itself when member_path is the
        head; None when member_path is not in the list.
    """
    target = member_name(member_path)
    for index, name in enumerate(ordered):
        if member_name(name) == target:
            return ordered[index - 1] if index > 0 else name
    return None


def format_member(prefix: str, sequence: int) -> str:
    """Render a member name the way the coordination service does."""
    return f"{prefix}{sequence:0{SEQUENCE_WIDTH}d}"
