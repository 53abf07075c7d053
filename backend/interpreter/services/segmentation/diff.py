"""
Transcript Diff Engine

Only the common prefix of two consecutive snapshots is stable: the recognizer
may still revise anything after it.
"""


def stable_prefix_length(old: str, new: str) -> int:
    """
    Length of the longest common prefix of two snapshots.

    Args:
        old: Previous full transcript snapshot
        new: Latest full transcript snapshot

    Returns:
        Number of leading characters identical in both (0 when old is empty)
    """
    if not old:
        return 0

    limit = min(len(old), len(new))
    for i in range(limit):
        if old[i] != new[i]:
            return i
    return limit
