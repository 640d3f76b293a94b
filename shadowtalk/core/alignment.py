"""Fuzzy word alignment between a reference sentence and a spoken attempt.

WHY: Speech recognition rarely returns a sentence verbatim. Words drop
out, filler words sneak in, and recognisable words come back slightly
misspelled ("recognise" for "recognize"). Scoring needs to know which
reference words the speaker actually produced, in order, while forgiving
spelling-level noise but not confusing genuinely different short words.

HOW: Two layers. is_close() accepts two tokens as the same word when they
are equal or their character edit distance is within a length-scaled
tolerance. align() runs a longest-common-subsequence DP over the two token
lists using is_close() as equality, then backtracks from the bottom-right
corner to recover which indices were matched.

RULES:
- Edit distance: unit-cost insert/delete/substitute
- Tolerance by the longer token's length: <= 3 -> 1, <= 6 -> 2,
  otherwise floor(0.3 * length)
- LCS table is (m + 1) x (n + 1); O(m * n) time and space
- Backtrack: on a close pair step diagonally and record the pair;
  otherwise step toward the larger neighbour; on a tie step up (advance
  through the reference)
- matched_count is the LCS length and equals the number of recorded pairs
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from shadowtalk.core.ir import Alignment


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between two strings (character level).

    Keeps only two rows of the DP table; the result is identical to the
    full-table formulation.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                current[j] = previous[j - 1]
            else:
                current[j] = 1 + min(previous[j], current[j - 1], previous[j - 1])
        previous = current
    return previous[-1]


def close_tolerance(length: int) -> int:
    """Maximum edit distance accepted between tokens whose longer side has ``length`` chars."""
    if length <= 3:
        return 1
    if length <= 6:
        return 2
    return int(length * 0.3)


def is_close(a: str, b: str) -> bool:
    """True if two tokens are equal or within the length-scaled edit tolerance.

    Examples:
        is_close("recognize", "recognise") -> True   (distance 1, tolerance 2)
        is_close("cat", "dog")             -> False  (distance 3, tolerance 1)
    """
    if a == b:
        return True
    return edit_distance(a, b) <= close_tolerance(max(len(a), len(b)))


def align(reference: Sequence[str], candidate: Sequence[str]) -> Alignment:
    """Align two token sequences by fuzzy longest common subsequence.

    Args:
        reference: Normalised reference tokens (length m).
        candidate: Normalised candidate tokens (length n).

    Returns:
        Alignment with the matched index sets, the matched pairs in
        ascending order, and the LCS length.
    """
    m, n = len(reference), len(candidate)

    # close_pair[i][j] caches is_close(reference[i], candidate[j]) so the
    # backtrack does not recompute edit distances.
    close_pair = [[is_close(r, c) for c in candidate] for r in reference]

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if close_pair[i - 1][j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    pairs: List[Tuple[int, int]] = []
    i, j = m, n
    while i > 0 and j > 0:
        if close_pair[i - 1][j - 1]:
            pairs.append((i - 1, j - 1))
            i -= 1
            j -= 1
        elif dp[i - 1][j] >= dp[i][j - 1]:
            i -= 1
        else:
            j -= 1
    pairs.reverse()

    return Alignment(
        matched_reference_indices=frozenset(r for r, _ in pairs),
        matched_candidate_indices=frozenset(c for _, c in pairs),
        matched_count=dp[m][n],
        pairs=tuple(pairs),
    )
