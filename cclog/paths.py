"""
Path encoding utilities for Claude Code project directories.

Claude Code stores each project's session logs in a directory named after the
project path, encoded by replacing:
- `/` -> `-`
- `.` -> `-`

Example: /Users/chris/my-project -> -Users-chris-my-project

WARNING: This encoding is LOSSY. A `-` in a directory name may come from a path
separator, a dot, or a literal hyphen. `decode_path()` is the naive reversal and
is frequently wrong; `recover_path()` searches the plausible reconstructions and
keeps the first one that exists on disk.
"""

from __future__ import annotations

import itertools
import os
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

__all__ = [
    'ExistsOracle',
    'decode_path',
    'encode_path',
    'generate_combinations',
    'generate_join_patterns',
    'recover_path',
]

type ExistsOracle = Callable[[str], bool]

# Characters Claude Code collapses to '-' in project directory names
ENCODED_CHARS = ('/', '.')


def encode_path(path: Path | str) -> str:
    """
    Encode path for Claude's directory naming.

    Args:
        path: Filesystem path to encode

    Returns:
        Encoded string for use as directory name in ~/.claude/projects/

    Examples:
        >>> encode_path('/Users/chris/project')
        '-Users-chris-project'

        >>> encode_path('/Users/chris/site.com')
        '-Users-chris-site-com'
    """
    result = str(path) if isinstance(path, Path) else path
    for char in ENCODED_CHARS:
        result = result.replace(char, '-')
    return result


def decode_path(encoded: str) -> str:
    """
    Naively decode a project directory name by turning every '-' into '/'.

    Always defined, but wrong whenever an original directory name contained a
    hyphen or a dot. Used as the fallback when recover_path() finds nothing.

    Examples:
        >>> decode_path('-Users-chris-project')
        '/Users/chris/project'
    """
    if encoded.startswith('-'):
        return '/' + encoded[1:].replace('-', '/')
    return encoded.replace('-', '/')


def generate_join_patterns(segments: Sequence[str]) -> list[str]:
    """
    Enumerate every way to rebuild a relative path from hyphen-split segments.

    Each adjacent pair is either joined with '-' (literal hyphen in a name) or
    split with '/' (path separator), giving 2^(n-1) patterns. Bit i of the mask
    joins segments i and i+1, so the fully split pattern comes first.

    Examples:
        >>> generate_join_patterns(['a', 'b', 'c'])
        ['a/b/c', 'a-b/c', 'a/b-c', 'a-b-c']
    """
    if not segments:
        return []

    patterns = []
    for mask in range(1 << (len(segments) - 1)):
        parts = []
        current = segments[0]
        for i, segment in enumerate(segments[1:]):
            if mask & (1 << i):
                current += '-' + segment
            else:
                parts.append(current)
                current = segment
        parts.append(current)
        patterns.append('/'.join(parts))
    return patterns


def generate_combinations(options: Sequence[Sequence[str]]) -> list[list[str]]:
    """
    Cartesian product of per-position options, leftmost position varying slowest.

    Examples:
        >>> generate_combinations([['a', 'b'], ['c']])
        [['a', 'c'], ['b', 'c']]
    """
    return [list(combination) for combination in itertools.product(*options)]


def recover_path(encoded: str, exists: ExistsOracle = os.path.exists) -> str | None:
    """
    Recover the real project path behind an encoded directory name.

    Candidate reconstructions are generated tier by tier and checked against
    the `exists` oracle; the first existing candidate wins. The first two
    segments are always taken as `/seg0/seg1` (the home directory prefix).

    Args:
        encoded: Encoded directory name, e.g. '-Users-bob-dev-my-cool-app'
        exists: Existence check for a candidate absolute path

    Returns:
        The first candidate that exists, or None when nothing matched (callers
        fall back to decode_path()).
    """
    if not encoded.startswith('-'):
        return encoded if exists(encoded) else None

    tested: set[str] = set()
    for candidate in _iter_candidates(encoded[1:], exists):
        if candidate in tested:
            continue
        tested.add(candidate)
        if exists(candidate):
            return candidate
    return None


def _iter_candidates(body: str, exists: ExistsOracle) -> Iterator[str]:
    """Yield candidate paths in priority order (duplicates are filtered by the caller)."""
    segments = body.split('-')
    if len(segments) < 3:
        yield '/' + body.replace('-', '/')
        return

    prefix = f'/{segments[0]}/{segments[1]}'
    tail = segments[2:]

    # 1. Every placement of literal hyphens within the tail
    for pattern in generate_join_patterns(tail):
        yield f'{prefix}/{pattern}'

    # 2-4. Flat trailing name, fully split, all-but-last split
    yield f'{prefix}/{"-".join(tail)}'
    yield f'{prefix}/{"/".join(tail)}'
    yield f'{prefix}/{"/".join([*tail[:-1], tail[-1]])}'

    # 5. Per-segment choice, each tested directly under the prefix
    yield f'{prefix}/{"/".join(_pick_segment_forms(prefix, tail, exists))}'

    # 6. Everything split
    yield '/' + body.replace('-', '/')

    # 7. Per-segment rewrites in every combination
    for combination in generate_combinations([_segment_rewrites(segment) for segment in tail]):
        yield f'{prefix}/{"/".join(combination)}'

    # 8. Last resort
    head = '/'.join(tail[:-1])
    last = tail[-1]
    for pattern in (
        f'{head}/{last.replace("-", "/")}',
        f'{head}/{last}',
        '/'.join(segment.replace('-', '/') for segment in tail),
    ):
        yield f'{prefix}/{pattern.lstrip("/")}'


def _pick_segment_forms(prefix: str, tail: Sequence[str], exists: ExistsOracle) -> list[str]:
    picked = []
    for segment in tail:
        forms = [segment, segment.replace('-', '/')]
        picked.append(next((form for form in forms if exists(f'{prefix}/{form}')), segment))
    return picked


def _segment_rewrites(segment: str) -> list[str]:
    """As-is, all hyphens split, first hyphen split (deduplicated, order kept)."""
    rewrites = [segment]
    if '-' in segment:
        rewrites.append(segment.replace('-', '/'))
        rewrites.append(segment.replace('-', '/', 1))
    return list(dict.fromkeys(rewrites))
