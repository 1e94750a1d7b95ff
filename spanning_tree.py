import random

import numpy as np
import matplotlib.pyplot as plt
import pytest
from contexttimer import Timer

from graph import Graph, cycle_graph, random_graph, to_networkx


GRID_WIDTH = 20
GRID_HEIGHT = 15


def make_spanning_tree(g, rng=None):
    """
    Return a new graph with a random spanning tree of g (a spanning forest if
    g is not connected). g is not modified.

    The edges of g are added in random order, and every edge that closes a
    cycle is taken out again. rng is anything with a shuffle method, e.g. a
    numpy Generator or RandomState or a random.Random.
    Not uniform over all spanning trees.
    """
    if rng is None:
        rng = np.random.default_rng()
    h = Graph(g.size())
    # sorted, so that a seeded rng always gives the same tree
    edges = sorted(g.edges())
    rng.shuffle(edges)
    for s, t in edges:
        h.add_edge(s, t)
        if h.is_cyclic():
            h.remove_edge(s, t)
    return h


def grid_graph(width, height):
    """Nodes on a width x height grid, node (x, y) has index y*width + x."""
    g = Graph(width * height)
    for y in range(height):
        for x in range(width):
            i = y * width + x
            if x + 1 < width:
                g.add_edge(i, i + 1)
            if y + 1 < height:
                g.add_edge(i, i + width)
    return g


def complete_graph(n):
    g = Graph(n)
    for s in range(n):
        for t in range(s + 1, n):
            g.add_edge(s, t)
    return g


@pytest.fixture(params=["generator", "random_state", "random"])
def rng(request):
    if request.param == "generator":
        return np.random.default_rng(0)
    if request.param == "random_state":
        return np.random.RandomState(0)
    return random.Random(0)

def check_spanning_tree(g, tree, num_components):
    assert(tree.size() == g.size())
    assert(tree.is_acyclic())
    assert(tree.edges() <= g.edges())
    assert(tree.count_edges() == g.size() - num_components)


def test_empty_and_single_node(rng):
    for n in [0, 1]:
        tree = make_spanning_tree(Graph(n), rng)
        assert(tree.size() == n)
        assert(tree.count_edges() == 0)

def test_single_loop(rng):
    g = Graph(1)
    g.add_edge(0, 0)
    tree = make_spanning_tree(g, rng)
    assert(tree.edges() == set())
    assert(g.edges() == {(0, 0)})

def test_tree_is_kept(rng):
    g = cycle_graph(10, closed=False)
    tree = make_spanning_tree(g, rng)
    assert(tree.edges() == g.edges())

def test_cycle(rng):
    g = cycle_graph(10)
    tree = make_spanning_tree(g, rng)
    check_spanning_tree(g, tree, 1)

def test_complete(rng):
    g = complete_graph(12)
    tree = make_spanning_tree(g, rng)
    check_spanning_tree(g, tree, 1)
    assert(tree.count_edges() == 11)

def test_grid(rng):
    g = grid_graph(6, 5)
    g.add_edge(7, 7)
    tree = make_spanning_tree(g, rng)
    check_spanning_tree(g, tree, 1)
    assert((7, 7) not in tree.edges())

def test_forest(rng):
    # two triangles, a path and an isolated node
    g = Graph(10)
    for s, t in [(0, 1), (1, 2), (2, 0), (3, 4), (4, 5), (5, 3), (6, 7), (7, 8)]:
        g.add_edge(s, t)
    tree = make_spanning_tree(g, rng)
    check_spanning_tree(g, tree, 4)
    assert(tree.get_neighbours(9) == set())
    assert((6, 7) in tree.edges() and (7, 8) in tree.edges())

def test_source_unchanged(rng):
    g = grid_graph(4, 4)
    edges = g.edges()
    make_spanning_tree(g, rng)
    assert(g.edges() == edges)

def test_seed_reproducible():
    g = complete_graph(8)
    tree1 = make_spanning_tree(g, np.random.default_rng(42))
    tree2 = make_spanning_tree(g, np.random.default_rng(42))
    assert(tree1.edges() == tree2.edges())

def test_default_rng():
    g = grid_graph(5, 5)
    tree = make_spanning_tree(g)
    check_spanning_tree(g, tree, 1)

def test_different_trees():
    g = complete_graph(6)
    rng = np.random.default_rng(3)
    trees = set(frozenset(make_spanning_tree(g, rng).edges()) for _ in range(20))
    assert(len(trees) > 1)

def test_random_graphs_against_networkx(rng):
    nx = pytest.importorskip("networkx")
    state = np.random.RandomState(2)
    for n in range(1, 25):
        g = random_graph(n, 0.15, state)
        tree = make_spanning_tree(g, rng)
        check_spanning_tree(g, tree, nx.number_connected_components(to_networkx(g)))
        assert(nx.is_forest(to_networkx(tree)))


def plot_graph(g, width, color, linewidth):
    for s, t in g.edges():
        xs = [s % width, t % width]
        ys = [s // width, t // width]
        plt.plot(xs, ys, color=color, linewidth=linewidth)


if __name__ == "__main__":
    np.random.seed(0)
    g = grid_graph(GRID_WIDTH, GRID_HEIGHT)
    # knock out some edges so that the tree has to route around them
    for s, t in sorted(g.edges()):
        if np.random.uniform() < 0.15:
            g.remove_edge(s, t)
    with Timer() as t:
        tree = make_spanning_tree(g, np.random.default_rng(0))
    print("elapsed: {:.4f}s".format(t.elapsed), "edges:", g.count_edges(), "tree edges:", tree.count_edges())

    plot_graph(g, GRID_WIDTH, "lightgray", 1)
    plot_graph(tree, GRID_WIDTH, "b", 2)
    plt.gca().set_aspect("equal")
    plt.show()
