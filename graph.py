import numbers

import numpy as np
import matplotlib.pyplot as plt
import pytest
from contexttimer import Timer


PROFILE_SIZES = list(range(10, 400, 10))


class Graph(object):
    def __init__(self, n):
        """
        Undirected graph with n nodes, numbered 0..n-1, and no edges.
        nodes[i] is the set of neighbours of node i. Self-loops are allowed.
        """
        if not isinstance(n, numbers.Integral) or n < 0:
            raise ValueError("n has to be a non-negative integer, got {!r}".format(n))
        self.nodes = [set() for _ in range(n)]

    def _check(self, *nodes):
        for node in nodes:
            # negative indices would silently wrap around
            if not 0 <= node < len(self.nodes):
                raise IndexError("node {} out of range for graph of size {}".format(node, len(self.nodes)))

    def get_neighbours(self, node):
        """Return a copy of the set of neighbours of node."""
        self._check(node)
        return set(self.nodes[node])

    def add_edge(self, s, t):
        self._check(s, t)
        self.nodes[s].add(t)
        self.nodes[t].add(s)

    def remove_edge(self, s, t):
        self._check(s, t)
        self.nodes[s].discard(t)
        self.nodes[t].discard(s)

    def remove_edges(self, n):
        """Remove all edges incident to n."""
        for neighbour in self.get_neighbours(n):
            self.remove_edge(n, neighbour)

    def adjacent(self, s, t):
        self._check(s, t)
        return t in self.nodes[s]

    def size(self):
        return len(self.nodes)

    def copy(self):
        g = Graph(0)
        g.nodes = [set(neighbours) for neighbours in self.nodes]
        return g

    def is_cyclic(self):
        """
        Return whether the graph contains a cycle (a self-loop counts).

        Works on a copy of the graph: every node that is taken off the stack
        has all its edges removed before its neighbours are looked at. So a
        neighbour can never lead straight back to the node it was reached from,
        and running into an already visited node means there is a second path
        to it. Slow, but simple.
        """
        g = self.copy()
        visited = set()
        open = []
        for node in range(g.size()):
            if node in visited:
                continue
            visited.add(node)
            open.append(node)
            while open:
                current = open.pop()
                neighbours = g.get_neighbours(current)
                g.remove_edges(current)
                for n in neighbours:
                    if n in visited:
                        return True
                    visited.add(n)
                    open.append(n)
            open.clear()
        return False

    def is_acyclic(self):
        return not self.is_cyclic()

    def edges(self):
        """Return the set of all edges as (min, max) tuples."""
        out = set()
        for node, neighbours in enumerate(self.nodes):
            for adjacent in neighbours:
                out.add((min(node, adjacent), max(node, adjacent)))
        return out

    def count_edges(self):
        return len(self.edges())

    def __repr__(self):
        return "Graph({}, edges={})".format(self.size(), sorted(self.edges()))


def cycle_graph(n, closed=True):
    """Nodes 0..n-1 connected in a row, plus the edge (n-1, 0) if closed."""
    g = Graph(n)
    for m in range(n - 1):
        g.add_edge(m, m + 1)
    if closed and n > 0:
        g.add_edge(n - 1, 0)
    return g


def random_graph(n, p, rng):
    g = Graph(n)
    for s in range(n):
        for t in range(s + 1, n):
            if rng.uniform() < p:
                g.add_edge(s, t)
    return g


def to_networkx(g):
    nx = pytest.importorskip("networkx")
    h = nx.Graph()
    h.add_nodes_from(range(g.size()))
    h.add_edges_from(g.edges())
    return h


def check_symmetric(g):
    for s in range(g.size()):
        for t in range(g.size()):
            assert(g.adjacent(s, t) == g.adjacent(t, s))


def test_loop_is_cyclic():
    g = Graph(1)
    assert(g.is_cyclic() == False)
    g.add_edge(0, 0)
    assert(g.is_cyclic() == True)
    assert(g.edges() == {(0, 0)})

def test_loop_in_larger_graph():
    g = cycle_graph(5, closed=False)
    assert(g.is_acyclic())
    g.add_edge(3, 3)
    assert(g.is_cyclic())

def test_three_cycle_is_cyclic():
    g = Graph(3)
    g.add_edge(0, 1)
    g.add_edge(1, 2)
    assert(g.is_cyclic() == False)
    g.add_edge(2, 0)
    assert(g.is_cyclic() == True)

def test_four_cycle_is_cyclic():
    g = Graph(4)
    g.add_edge(0, 1)
    g.add_edge(1, 2)
    g.add_edge(2, 3)
    assert(g.is_cyclic() == False)
    g.add_edge(3, 0)
    assert(g.is_cyclic() == True)

def test_tree_not_cyclic():
    g = Graph(4)
    g.add_edge(0, 1)
    g.add_edge(0, 2)
    g.add_edge(0, 3)
    assert(g.is_acyclic())

def test_double_cycle_is_cyclic():
    g = cycle_graph(4)
    g.add_edge(1, 3)
    assert(g.is_cyclic())

def test_no_edges_is_acyclic():
    for n in range(1000):
        assert(Graph(n).is_acyclic())

def test_cycle_is_cyclic():
    for n in range(3, 100):
        g = cycle_graph(n, closed=False)
        assert(g.is_acyclic())
        g.add_edge(n - 1, 0)
        assert(g.is_cyclic())

def test_forest_is_acyclic():
    g = Graph(10 * 5)
    for n in range(10):
        m = n * 5
        g.add_edge(m, m + 1)
        g.add_edge(m + 1, m + 2)
        g.add_edge(m + 2, m + 3)
        g.add_edge(m + 3, m + 4)
    assert(g.is_acyclic())
    # joining two of the paths twice closes a cycle
    g.add_edge(4, 5)
    assert(g.is_acyclic())
    g.add_edge(0, 9)
    assert(g.is_cyclic())

def test_is_cyclic_leaves_graph_unchanged():
    g = cycle_graph(6)
    g.add_edge(2, 2)
    edges = g.edges()
    neighbours = [g.get_neighbours(i) for i in range(g.size())]
    assert(g.is_cyclic())
    assert(g.edges() == edges)
    assert([g.get_neighbours(i) for i in range(g.size())] == neighbours)

def test_edges_canonical():
    g = Graph(4)
    g.add_edge(3, 1)
    g.add_edge(1, 3)
    g.add_edge(2, 0)
    g.add_edge(2, 2)
    assert(g.edges() == {(1, 3), (0, 2), (2, 2)})
    assert(g.count_edges() == 3)

def test_add_edge_idempotent():
    g = cycle_graph(4)
    edges = g.edges()
    g.add_edge(0, 1)
    g.add_edge(1, 0)
    assert(g.edges() == edges)
    assert(g.count_edges() == 4)

def test_remove_edge():
    g = cycle_graph(4)
    g.remove_edge(1, 0)
    assert(g.adjacent(0, 1) == False)
    assert(g.adjacent(1, 0) == False)
    assert(g.edges() == {(1, 2), (2, 3), (0, 3)})
    # removing again or removing something that was never there is a no-op
    g.remove_edge(0, 1)
    g.remove_edge(0, 2)
    assert(g.edges() == {(1, 2), (2, 3), (0, 3)})

def test_remove_edges():
    g = Graph(5)
    g.add_edge(0, 1)
    g.add_edge(0, 2)
    g.add_edge(0, 0)
    g.add_edge(3, 4)
    g.remove_edges(0)
    assert(g.get_neighbours(0) == set())
    assert(g.get_neighbours(1) == set())
    assert(g.get_neighbours(2) == set())
    assert(g.edges() == {(3, 4)})

def test_get_neighbours_is_a_copy():
    g = Graph(3)
    g.add_edge(0, 1)
    neighbours = g.get_neighbours(0)
    neighbours.add(2)
    assert(g.get_neighbours(0) == {1})
    assert(g.adjacent(0, 2) == False)

def test_copy_is_independent():
    g = cycle_graph(3)
    h = g.copy()
    h.remove_edges(0)
    assert(g.edges() == {(0, 1), (1, 2), (0, 2)})
    assert(h.edges() == {(1, 2)})
    assert(h.size() == 3)

def test_size():
    assert(Graph(0).size() == 0)
    assert(Graph(7).size() == 7)
    assert(Graph(np.int64(3)).size() == 3)

def test_invalid_size():
    with pytest.raises(ValueError):
        Graph(-1)
    with pytest.raises(ValueError):
        Graph(2.5)

def test_out_of_range():
    g = Graph(3)
    with pytest.raises(IndexError):
        g.get_neighbours(3)
    with pytest.raises(IndexError):
        g.get_neighbours(-1)
    with pytest.raises(IndexError):
        g.add_edge(0, 3)
    with pytest.raises(IndexError):
        g.remove_edge(5, 0)
    with pytest.raises(IndexError):
        g.remove_edges(3)
    with pytest.raises(IndexError):
        g.adjacent(0, -1)
    with pytest.raises(IndexError):
        Graph(0).add_edge(0, 0)
    # a failed add must not leave half an edge behind
    assert(g.get_neighbours(0) == set())

def test_symmetric_after_random_mutations():
    rng = np.random.RandomState(0)
    n = 12
    g = Graph(n)
    for _ in range(500):
        s, t = rng.randint(0, n, 2)
        op = rng.randint(0, 3)
        if op == 0:
            g.add_edge(s, t)
        elif op == 1:
            g.remove_edge(s, t)
        elif rng.uniform() < 0.1:
            g.remove_edges(s)
    check_symmetric(g)
    for s, t in g.edges():
        assert(s <= t)
        assert(g.adjacent(s, t) and g.adjacent(t, s))

def test_repr():
    g = Graph(3)
    g.add_edge(2, 1)
    assert(repr(g) == "Graph(3, edges=[(1, 2)])")

@pytest.mark.parametrize("p", [0.05, 0.1, 0.2, 0.5])
def test_agrees_with_networkx(p):
    nx = pytest.importorskip("networkx")
    rng = np.random.RandomState(1)
    for n in range(1, 30):
        g = random_graph(n, p, rng)
        if rng.uniform() < 0.1:
            node = rng.randint(0, n)
            g.add_edge(node, node)
        assert(g.is_acyclic() == nx.is_forest(to_networkx(g)))


def profile():
    ts = []
    for N in PROFILE_SIZES:
        g = cycle_graph(N)
        with Timer() as t:
            cyclic = g.is_cyclic()
        assert(cyclic)
        ts.append(t.elapsed)
        print("N: {}, elapsed: {:.5f}s".format(N, t.elapsed))
    return np.array(PROFILE_SIZES), np.array(ts)


if __name__ == "__main__":
    Ns, ts = profile()
    plt.plot(Ns, ts)
    plt.plot(Ns, Ns / Ns[-1] * ts[-1])
    plt.xlabel("N")
    plt.ylabel("is_cyclic [s]")
    plt.show()
