"""Tests for random graph generation, wiring policies, and validation."""

from unittest.mock import patch

import numpy as np
import pytest
from scipy.sparse.csgraph import connected_components

from graph_engine.errors import (
    ConfigurationError,
    GeneratorExhaustionError,
    GraphFrozenError,
)
from graph_engine.graph.connectivity import (
    ConnectivityPolicy,
    build_graph,
    fill_neighbors,
    link_incoherent,
    link_weakly_connected,
)
from graph_engine.graph.generator import (
    GraphGenerator,
    clamp_degree,
    generate_graph,
    generate_incoherent_graph,
    generate_weakly_connected_graph,
    integer_vertex_factory,
    sample_degree_map,
    sequential_vertex_factory,
)
from graph_engine.graph.types import AdjacencyGraph, DegreeEntry, TransportNetwork
from graph_engine.graph.validation import count_components, validate_graph
from graph_engine.config import GraphConfig, RunConfig
from graph_engine.reproducibility import NumpyRandomSource


class ScriptedRandomSource:
    """RandomSource replaying fixed draws (uniform values are taken mod bound)."""

    def __init__(self, uniform=(), poisson=()) -> None:
        self.uniform = list(uniform)
        self.poisson_values = list(poisson)
        self.poisson_calls = 0

    def uniform_int(self, bound: int) -> int:
        return self.uniform.pop(0) % bound

    def poisson(self, mean: float) -> int:
        self.poisson_calls += 1
        return self.poisson_values.pop(0)


def _weak(n: int, mean: float, seed: int):
    return generate_weakly_connected_graph(
        n, mean, sequential_vertex_factory(), NumpyRandomSource(seed)
    )


def _incoherent(n: int, mean: float, seed: int):
    return generate_incoherent_graph(
        n, mean, sequential_vertex_factory(), NumpyRandomSource(seed)
    )


def _replay_weak(rng: np.random.Generator, n: int, mean: float) -> dict:
    """Weak wiring rebuilt directly from a numpy Generator's draw stream."""
    names = [f"v{i}" for i in range(n)]
    degrees = {v: min(max(int(rng.poisson(mean)), 1), n - 1) for v in names}
    adjacency = {v: [] for v in names}
    for previous, current in zip(names, names[1:]):
        adjacency[current].append(previous)
    for vertex in names:
        while len(adjacency[vertex]) < degrees[vertex]:
            candidate = names[int(rng.integers(0, n))]
            if candidate != vertex and candidate not in adjacency[vertex]:
                adjacency[vertex].append(candidate)
    return adjacency


class TestDegreeSampling:
    """Tests for vertex collection and degree clamping."""

    def test_clamp_degree(self) -> None:
        assert clamp_degree(0, 5) == 1
        assert clamp_degree(-3, 5) == 1
        assert clamp_degree(3, 5) == 3
        assert clamp_degree(5, 5) == 4
        assert clamp_degree(40, 5) == 4

    def test_duplicates_rejected_not_replaced(self) -> None:
        values = iter(["a", "a", "b", "a", "c"])
        source = ScriptedRandomSource(poisson=[2, 1, 3])
        degree_map = sample_degree_map(3, 2.0, lambda: next(values), source)
        assert list(degree_map) == ["a", "b", "c"]
        assert [e.target_degree for e in degree_map.values()] == [2, 1, 2]
        assert source.poisson_calls == 3

    def test_entries_start_empty(self) -> None:
        degree_map = sample_degree_map(
            10, 3.0, sequential_vertex_factory(), NumpyRandomSource(0)
        )
        assert all(entry.neighbors == [] for entry in degree_map.values())
        assert all(1 <= e.target_degree <= 9 for e in degree_map.values())

    def test_constant_factory_exhausts(self) -> None:
        with pytest.raises(GeneratorExhaustionError, match="distinct"):
            sample_degree_map(
                3, 2.0, lambda: "same", NumpyRandomSource(0), max_attempts=1000
            )

    def test_small_domain_exhausts(self) -> None:
        source = NumpyRandomSource(0)
        factory = integer_vertex_factory(source, 4)
        with pytest.raises(GeneratorExhaustionError):
            sample_degree_map(5, 2.0, factory, source, max_attempts=10_000)

    def test_sequential_factory(self) -> None:
        factory = sequential_vertex_factory("n")
        assert [factory() for _ in range(3)] == ["n0", "n1", "n2"]


class TestGeneratorArguments:
    """Invalid arguments fail immediately with ConfigurationError."""

    def test_non_positive_vertex_count(self) -> None:
        with pytest.raises(ConfigurationError):
            GraphGenerator(0, 2.0, sequential_vertex_factory())

    def test_non_positive_mean(self) -> None:
        with pytest.raises(ConfigurationError):
            GraphGenerator(5, 0.0, sequential_vertex_factory())

    def test_missing_factory(self) -> None:
        with pytest.raises(ConfigurationError):
            GraphGenerator(5, 2.0, None)  # type: ignore[arg-type]

    def test_weak_policy_needs_two_vertices(self) -> None:
        generator = GraphGenerator(1, 2.0, sequential_vertex_factory())
        with pytest.raises(ConfigurationError, match="at least 2"):
            generator.generate(ConnectivityPolicy.WEAKLY_CONNECTED)

    def test_incoherent_policy_needs_three_vertices(self) -> None:
        generator = GraphGenerator(2, 2.0, sequential_vertex_factory())
        with pytest.raises(ConfigurationError, match="at least 3"):
            generator.generate("incoherent")

    def test_sample_degrees_needs_two_vertices(self) -> None:
        generator = GraphGenerator(1, 2.0, sequential_vertex_factory())
        with pytest.raises(ConfigurationError, match="at least 2"):
            generator.sample_degrees()

    def test_sample_degree_map_never_yields_zero_degree(self) -> None:
        with pytest.raises(ConfigurationError):
            sample_degree_map(
                1, 2.0, sequential_vertex_factory(), NumpyRandomSource(0)
            )


class TestWeaklyConnectedPolicy:
    """Generated weak graphs satisfy every structural property."""

    def test_five_vertex_scenario(self) -> None:
        result = _weak(5, 2.0, seed=42)
        assert result.graph.vertices == ["v0", "v1", "v2", "v3", "v4"]
        for vertex in result.graph.vertices:
            assert 1 <= result.target_degrees[vertex] <= 4
            assert result.graph.out_degree(vertex) == result.target_degrees[vertex]

    def test_five_vertex_scenario_is_reproducible(self) -> None:
        first = _weak(5, 2.0, seed=42)
        second = _weak(5, 2.0, seed=42)
        assert first.graph.adjacency == second.graph.adjacency

    def test_five_vertex_scenario_exact_graph(self) -> None:
        # degrees clamp to 2, 1, 4, 1, 3; draws below are taken mod 5
        source = ScriptedRandomSource(
            uniform=[0, 3, 3, 1, 2, 4, 0, 1, 3, 4, 0, 2],
            poisson=[2, 0, 7, 1, 3],
        )
        result = GraphGenerator(5, 2.0, sequential_vertex_factory(), source).generate()
        assert result.graph.adjacency == {
            "v0": ["v3", "v1"],
            "v1": ["v0"],
            "v2": ["v1", "v4", "v0", "v3"],
            "v3": ["v2"],
            "v4": ["v3", "v0", "v2"],
        }
        assert source.uniform == []
        assert validate_graph(result) == []

    @pytest.mark.parametrize("seed", [42, 7])
    def test_follows_numpy_draw_stream(self, seed: int) -> None:
        expected = _replay_weak(np.random.default_rng(seed), 5, 2.0)
        assert _weak(5, 2.0, seed).graph.adjacency == expected

    def test_back_reference_chain(self) -> None:
        result = _weak(8, 2.0, seed=3)
        vertices = result.graph.vertices
        for previous, current in zip(vertices, vertices[1:]):
            assert result.graph.neighbors_of(current)[0] == previous

    @pytest.mark.parametrize("seed", range(10))
    def test_validation_passes(self, seed: int) -> None:
        result = _weak(30, 3.0, seed)
        assert validate_graph(result) == []

    def test_single_weak_component(self) -> None:
        result = _weak(60, 1.0, seed=11)
        n_components, _ = connected_components(
            result.graph.to_sparse(), directed=True, connection="weak"
        )
        assert n_components == 1

    def test_no_self_loops_or_duplicates(self) -> None:
        result = _weak(40, 6.0, seed=5)
        for vertex, targets in result.graph.adjacency.items():
            assert vertex not in targets
            assert len(set(targets)) == len(targets)

    def test_saturated_degrees(self) -> None:
        """A huge mean clamps every degree to N - 1 (complete digraph)."""
        result = _weak(6, 100.0, seed=0)
        assert all(d == 5 for d in result.target_degrees.values())
        assert result.graph.edge_count == 30

    def test_graph_is_frozen(self) -> None:
        result = _weak(5, 2.0, seed=1)
        with pytest.raises(GraphFrozenError):
            result.graph.add_edge("v0", "v1")

    def test_different_seeds_differ(self) -> None:
        g1 = _weak(50, 3.0, seed=1).graph
        g2 = _weak(50, 3.0, seed=2).graph
        assert g1.adjacency != g2.adjacency


class TestIncoherentPolicy:
    """Generated incoherent graphs isolate exactly one vertex."""

    @pytest.mark.parametrize("seed", range(10))
    def test_isolated_vertex_untouched(self, seed: int) -> None:
        result = _incoherent(20, 3.0, seed)
        isolated = result.isolated_vertex
        assert isolated in result.graph
        assert result.graph.out_degree(isolated) == 0
        assert result.graph.in_degrees()[isolated] == 0
        assert validate_graph(result) == []

    def test_not_connected(self) -> None:
        result = _incoherent(20, 3.0, seed=4)
        assert count_components(result.graph, "weak") >= 2

    def test_degree_lowered_when_saturated(self) -> None:
        result = _incoherent(6, 100.0, seed=0)
        for vertex, entry in result.degree_map.items():
            if vertex == result.isolated_vertex:
                assert entry.neighbors == []
            else:
                assert entry.target_degree == 4
                assert result.graph.out_degree(vertex) == 4

    def test_policy_recorded(self) -> None:
        result = _incoherent(5, 2.0, seed=0)
        assert result.policy is ConnectivityPolicy.INCOHERENT
        assert _weak(5, 2.0, seed=0).isolated_vertex is None


class TestLinking:
    """Direct tests of the wiring functions."""

    def test_weak_linking_with_scripted_draws(self) -> None:
        degree_map = {v: DegreeEntry(target_degree=2) for v in "abc"}
        # a: draws a (self, rejected), b, c; b: a already linked, draws c;
        # c: b already linked, draws b (duplicate), then a
        source = ScriptedRandomSource(uniform=[0, 1, 2, 2, 1, 0])
        link_weakly_connected(degree_map, source)
        assert degree_map["a"].neighbors == ["b", "c"]
        assert degree_map["b"].neighbors == ["a", "c"]
        assert degree_map["c"].neighbors == ["b", "a"]

    def test_incoherent_linking_with_scripted_draws(self) -> None:
        degree_map = {v: DegreeEntry(target_degree=1) for v in "abcd"}
        # isolate d, then a draws d (rejected) and b; b draws c; c draws a
        source = ScriptedRandomSource(uniform=[3, 3, 1, 2, 0])
        isolated = link_incoherent(degree_map, source)
        assert isolated == "d"
        assert degree_map["a"].neighbors == ["b"]
        assert degree_map["b"].neighbors == ["c"]
        assert degree_map["c"].neighbors == ["a"]
        assert degree_map["d"].neighbors == []

    def test_fill_guard(self) -> None:
        entry = DegreeEntry(target_degree=1)
        source = ScriptedRandomSource(uniform=[0] * 10)
        with pytest.raises(GeneratorExhaustionError, match="within 10 draws"):
            fill_neighbors("a", entry, ["a", "b"], source, max_attempts=10)


class TestConfigGeneration:
    """generate_graph builds reproducible integer-vertex graphs from config."""

    def test_generate_from_config(self) -> None:
        config = RunConfig(graph=GraphConfig(n_vertices=25, mean_connectivity=2.0))
        result = generate_graph(config)
        assert len(result.graph) == 25
        assert all(isinstance(v, int) for v in result.graph.vertices)
        assert validate_graph(result) == []

    def test_same_config_same_graph(self) -> None:
        config = RunConfig(graph=GraphConfig(n_vertices=25, policy="incoherent"))
        assert generate_graph(config).graph.adjacency == generate_graph(
            config
        ).graph.adjacency

    def test_default_source_is_seeded_from_config(self) -> None:
        config = RunConfig(graph=GraphConfig(n_vertices=25), seed=5)
        explicit = generate_graph(config, NumpyRandomSource(5))
        assert explicit.graph.adjacency == generate_graph(config).graph.adjacency

    def test_given_source_drives_generation(self) -> None:
        config = RunConfig(graph=GraphConfig(n_vertices=25), seed=5)
        other = generate_graph(config, NumpyRandomSource(6))
        assert other.graph.adjacency != generate_graph(config).graph.adjacency


class TestGraphFactory:
    """build_graph and generate write into whatever graph the factory makes."""

    def test_build_graph_default_is_adjacency_graph(self) -> None:
        degree_map = {"a": DegreeEntry(1, ["b"]), "b": DegreeEntry(1, ["a"])}
        graph = build_graph(degree_map)
        assert type(graph) is AdjacencyGraph
        assert graph.frozen

    def test_build_graph_into_transport_network(self) -> None:
        degree_map = {
            "s": DegreeEntry(1, ["a"]),
            "a": DegreeEntry(1, ["t"]),
            "t": DegreeEntry(1, ["s"]),
        }
        network = build_graph(degree_map, TransportNetwork)
        assert isinstance(network, TransportNetwork)
        assert network.frozen
        assert network.vertices == ["s", "a", "t"]
        assert (network.source, network.sink) == ("s", "t")
        assert network.capacity("s", "a") == 1.0

    def test_generate_into_transport_network(self) -> None:
        generator = GraphGenerator(
            12, 2.0, sequential_vertex_factory(), NumpyRandomSource(3)
        )
        result = generator.generate("weak", graph_factory=TransportNetwork)
        assert isinstance(result.graph, TransportNetwork)
        assert validate_graph(result) == []
        assert all(e.weight == 1.0 for e in result.graph.edges())


class TestValidation:
    """validate_graph reports broken invariants."""

    def test_reports_degree_mismatch(self) -> None:
        result = _weak(10, 2.0, seed=0)
        first = result.graph.vertices[0]
        result.degree_map[first].target_degree += 1
        errors = validate_graph(result)
        assert any("out-degree" in e for e in errors)

    def test_reports_disconnected_weak_graph(self) -> None:
        result = _weak(10, 2.0, seed=0)
        with patch(
            "graph_engine.graph.validation.count_components", return_value=2
        ):
            errors = validate_graph(result)
        assert any("Not weakly connected" in e for e in errors)
