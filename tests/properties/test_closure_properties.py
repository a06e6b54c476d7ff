"""Property-based tests for the transitive closure on random cyclic graphs.

For any graph (cycles, self-loops and dangling edges allowed), ``expand``
must terminate and return exactly the set of names reachable from the root,
each once, sorted, and must agree with ``included_by`` in the reverse
direction.
"""
from __future__ import annotations

from collections import deque

from hypothesis import given, settings
from hypothesis import strategies as st

from pluginosv.core.dependency import expand, included_by
from pluginosv.core.lockfile import Dependency, PackageDetails
from pluginosv.core.trust import attributed_to, build_cache


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


@st.composite
def package_graphs(draw: st.DrawFn) -> list[PackageDetails]:
    """Random lockfiles over ``n-0 .. n-(size-1)`` plus dangling ``ghost-*`` edges."""
    size = draw(st.integers(min_value=1, max_value=25))
    names = [f"n-{i}" for i in range(size)]
    targets = st.sampled_from(names + ["ghost-a", "ghost-b"])
    return [
        PackageDetails(
            name=name,
            version="1.0.0",
            dependencies=tuple(
                Dependency(target, "*")
                for target in draw(st.lists(targets, max_size=6))
            ),
        )
        for name in names
    ]


def _reachable(root: str, packages: list[PackageDetails]) -> set[str]:
    """Reference BFS over first-resolved edges."""
    edges: dict[str, list[str]] = {}
    for package in packages:
        edges.setdefault(package.name, [d.name for d in package.dependencies])
    found: set[str] = set()
    queue = deque(edges.get(root, []))
    while queue:
        name = queue.popleft()
        if name in found:
            continue
        found.add(name)
        queue.extend(edges.get(name, []))
    return found


# ---------------------------------------------------------------------------
# Closure properties
# ---------------------------------------------------------------------------


class TestClosureProperties:
    """Invariants of ``expand`` on arbitrary graphs."""

    @given(packages=package_graphs(), data=st.data())
    @settings(max_examples=200)
    def test_closure_equals_reachable_set(self, packages, data) -> None:
        """expand(root) == BFS-reachable names from root."""
        root = data.draw(st.sampled_from([p.name for p in packages]))
        flattened = expand(root, packages)
        assert set(flattened.dependency_names) == _reachable(root, packages)

    @given(packages=package_graphs(), data=st.data())
    def test_no_duplicates_and_sorted(self, packages, data) -> None:
        root = data.draw(st.sampled_from([p.name for p in packages]))
        names = expand(root, packages).dependency_names
        assert names == sorted(set(names))

    @given(packages=package_graphs(), data=st.data())
    def test_all_edges_processed(self, packages, data) -> None:
        root = data.draw(st.sampled_from([p.name for p in packages]))
        assert all(state.processed for state in expand(root, packages).dependencies)

    @given(packages=package_graphs(), data=st.data())
    def test_deterministic(self, packages, data) -> None:
        root = data.draw(st.sampled_from([p.name for p in packages]))
        assert expand(root, packages) == expand(root, packages)

    @given(packages=package_graphs(), data=st.data())
    def test_reverse_lookup_agrees(self, packages, data) -> None:
        """x in included_by(y) iff y in expand(x)."""
        names = [p.name for p in packages]
        target = data.draw(st.sampled_from(names))
        dependents = included_by(target, packages)
        for name in names:
            assert (name in dependents) == expand(name, packages).contains(target)


class TestAttributionProperties:

    @given(packages=package_graphs(), data=st.data())
    def test_attribution_matches_some_closure(self, packages, data) -> None:
        names = [p.name for p in packages]
        trusted = data.draw(st.sets(st.sampled_from(names), max_size=3))
        query = data.draw(st.sampled_from(names + ["ghost-a"]))
        cache = build_cache(packages, trusted)
        found, root = attributed_to(query, cache)
        expected = sorted(r for r in trusted if query in _reachable(r, packages))
        if expected:
            assert (found, root) == (True, expected[0])
        else:
            assert (found, root) == (False, "")
