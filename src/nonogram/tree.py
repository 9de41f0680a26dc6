"""Generic combinatorial tree used to enumerate choices across a run of decision points."""

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")
C = TypeVar("C")


@dataclass
class Node(Generic[T]):
    value: T
    children: List["Node[T]"] = field(default_factory=list)

    def extend(
        self,
        choices: Iterable[C],
        combine: Optional[Callable[[T, C], T]] = None,
        targets: Optional[List["Node[T]"]] = None,
    ) -> None:
        """
        Grow the tree by one decision step: every target (by default, every
        current leaf) receives one child per choice. With `combine`, a child's
        value is derived from its parent's value and the choice.
        """
        menu = list(choices)
        nodes = list(self.leaves()) if targets is None else list(targets)
        for node in nodes:
            for choice in menu:
                value = combine(node.value, choice) if combine else choice
                node.children.append(Node(value))

    def prune(self, predicate: Callable[[T], bool]) -> None:
        """Drop every subtree whose root value satisfies `predicate`. The node itself is kept."""
        self.children = [child for child in self.children if not predicate(child.value)]
        for child in self.children:
            child.prune(predicate)

    def leaves(self) -> Iterator["Node[T]"]:
        if not self.children:
            yield self
            return
        for child in self.children:
            yield from child.leaves()

    def permutations(self) -> Iterator[List[T]]:
        """Yield the values along every root-to-leaf path, root value first."""
        stack = [(self, [self.value])]
        while stack:
            node, path = stack.pop()
            if not node.children:
                yield path
                continue
            # Reversed so paths come out in child-insertion order.
            for child in reversed(node.children):
                stack.append((child, path + [child.value]))
