"""Swap route resolution between the token kinds traded by an APWine AMM."""

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.exceptions import NoPathFoundError
from ..core.types import PairId, TokenKind


@dataclass(frozen=True)
class SwapHop:
    """A directed swap inside one AMM pair.

    ``token_in`` and ``token_out`` are the token indexes inside the pair.
    """
    source: TokenKind
    target: TokenKind
    pair_id: PairId
    token_in: int
    token_out: int


DEFAULT_SWAP_HOPS: Tuple[SwapHop, ...] = (
    SwapHop(TokenKind.PT, TokenKind.UNDERLYING, PairId.PT_UNDERLYING, 0, 1),
    SwapHop(TokenKind.UNDERLYING, TokenKind.PT, PairId.PT_UNDERLYING, 1, 0),
    SwapHop(TokenKind.PT, TokenKind.FYT, PairId.PT_FYT, 0, 1),
    SwapHop(TokenKind.FYT, TokenKind.PT, PairId.PT_FYT, 1, 0),
)


@dataclass(frozen=True)
class TokenPath:
    """An ordered sequence of hops from one token kind to another."""
    hops: Tuple[SwapHop, ...]
    display_path: Tuple[TokenKind, ...]

    @property
    def source(self) -> TokenKind:
        return self.display_path[0]

    @property
    def target(self) -> TokenKind:
        return self.display_path[-1]

    @property
    def pair_path(self) -> List[int]:
        """Router ``_pairPath`` argument: one pair id per hop."""
        return [int(hop.pair_id) for hop in self.hops]

    @property
    def token_path(self) -> List[int]:
        """Router ``_tokenPath`` argument: token-in and token-out index of each hop."""
        path: List[int] = []
        for hop in self.hops:
            path.extend((hop.token_in, hop.token_out))
        return path

    def __len__(self) -> int:
        return len(self.hops)


class TokenPathResolver:
    """Breadth-first search over a static swap graph.

    The adjacency list keeps the enumeration order of ``hops``, so when two
    routes have the same length the one using earlier-enumerated hops wins.
    Instances hold no mutable state after construction.
    """

    def __init__(self, hops: Sequence[SwapHop] = DEFAULT_SWAP_HOPS):
        self.hops = tuple(hops)
        self._adjacency: Dict[TokenKind, Tuple[SwapHop, ...]] = {}
        for hop in self.hops:
            self._adjacency[hop.source] = self._adjacency.get(hop.source, ()) + (hop,)

    def resolve(self, source: TokenKind, target: TokenKind) -> TokenPath:
        """Find the shortest route from ``source`` to ``target``.

        Args:
            source: Token kind sent
            target: Token kind received

        Returns:
            TokenPath; empty when source and target are equal

        Raises:
            NoPathFoundError: target is unreachable from source
        """
        source = TokenKind(source)
        target = TokenKind(target)

        if source == target:
            return TokenPath(hops=(), display_path=(source,))

        predecessors: Dict[TokenKind, Optional[SwapHop]] = {source: None}
        queue = deque([source])

        while queue:
            node = queue.popleft()
            for hop in self._adjacency.get(node, ()):
                if hop.target in predecessors:
                    continue
                predecessors[hop.target] = hop
                if hop.target == target:
                    return self._build_path(predecessors, target)
                queue.append(hop.target)

        raise NoPathFoundError(
            f"No swap path from {source.value} to {target.value}",
            source=source,
            target=target
        )

    @staticmethod
    def _build_path(predecessors: Dict[TokenKind, Optional[SwapHop]], target: TokenKind) -> TokenPath:
        hops: List[SwapHop] = []
        node = target
        while predecessors[node] is not None:
            hop = predecessors[node]
            hops.append(hop)
            node = hop.source
        hops.reverse()
        display_path = (hops[0].source,) + tuple(hop.target for hop in hops)
        return TokenPath(hops=tuple(hops), display_path=display_path)


_default_resolver = TokenPathResolver()


def find_token_path(source: TokenKind, target: TokenKind) -> TokenPath:
    """Resolve a route on the default APWine swap graph."""
    return _default_resolver.resolve(source, target)


def how_to_swap(source: TokenKind, target: TokenKind) -> Tuple[List[int], List[int]]:
    """Router ``(pair_path, token_path)`` arguments for swapping source into target."""
    path = find_token_path(source, target)
    return path.pair_path, path.token_path
